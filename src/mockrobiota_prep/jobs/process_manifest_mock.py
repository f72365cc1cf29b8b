"""
Manifest-style import for mock communities that ship one demultiplexed sample.
"""

import cpg_utils
import pandas as pd
from loguru import logger

from mockrobiota_prep import qiime_cli_utils, utils
from mockrobiota_prep.constants import MANIFEST_COLUMNS
from mockrobiota_prep.file_types import DatasetPaths, MocksConfig, PrimerPair
from mockrobiota_prep.jobs import download_mock_data


def write_manifest(manifest_path: cpg_utils.Path, sample_id: str, paths: DatasetPaths) -> None:
    """Writes a PairedEndFastqManifestPhred33V2 manifest with a single sample."""
    manifest_df = pd.DataFrame(
        [[sample_id, str(paths.forward_read.absolute()), str(paths.reverse_read.absolute())]],
        columns=MANIFEST_COLUMNS,
    )
    logger.info(f'Writing manifest for {sample_id} to {manifest_path}')
    with manifest_path.open('w') as manifest_fh:
        manifest_df.to_csv(manifest_fh, sep='\t', index=False, header=True)


def run(dataset_id: str, sample_id: str, primers: PrimerPair, config: MocksConfig) -> None:
    logger.info(f'Processing {dataset_id} (Manifest)...')
    utils.validate_cli_path_input(sample_id, 'sample_id')
    qiime = config.qiime_executable

    paths: DatasetPaths = download_mock_data.run(dataset_id=dataset_id, needs_index=False, config=config)
    write_manifest(paths.manifest, sample_id, paths)

    if not utils.can_reuse(paths.demux_archive, 'Import'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.import_manifest_cmd(qiime, paths.manifest, paths.demux_archive),
            f'Import {dataset_id}',
            cwd=paths.root,
        )

    if not utils.can_reuse(paths.untrimmed_export, 'Export untrimmed'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.export_cmd(qiime, paths.demux_archive, paths.untrimmed_export),
            f'Export untrimmed {dataset_id}',
            cwd=paths.root,
        )

    if not utils.can_reuse(paths.trimmed_archive, 'Trim'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.cutadapt_trim_paired_cmd(qiime, paths.demux_archive, primers, paths.trimmed_archive),
            f'Trim {dataset_id}',
            cwd=paths.root,
        )

    if not utils.can_reuse(paths.trimmed_export, 'Export trimmed'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.export_cmd(qiime, paths.trimmed_archive, paths.trimmed_export),
            f'Export trimmed {dataset_id}',
            cwd=paths.root,
        )
