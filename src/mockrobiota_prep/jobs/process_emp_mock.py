"""
EMP paired-end import for multiplexed mock communities.

The pooled reads are demultiplexed against the BarcodeSequence column of the
sample metadata and then trimmed with the standard primer pair.
"""

import os

import cpg_utils
import pandas as pd
from loguru import logger

from mockrobiota_prep import qiime_cli_utils, utils
from mockrobiota_prep.constants import BARCODES_COLUMN, EMP_LINKS, RAW_DATA_DIR
from mockrobiota_prep.file_types import DatasetPaths, MocksConfig
from mockrobiota_prep.jobs import download_mock_data


def link_emp_sequences(paths: DatasetPaths) -> None:
    """
    (Re)creates the relative symlinks qiime expects in emp-paired-end-sequences.
    Existing links are always replaced, a repaired download may have replaced
    the file they used to point at.
    """
    paths.emp_sequences.mkdir(parents=True, exist_ok=True)
    for link_name, raw_name in EMP_LINKS.items():
        link = paths.emp_sequences / link_name
        if link.is_dir() and not link.is_symlink():
            raise ValueError(f'{link} is a directory, expected a symlink to {raw_name}')
        if link.is_symlink() or link.exists():
            link.unlink()
        link.symlink_to(os.path.join('..', RAW_DATA_DIR, raw_name))
        logger.info(f'Linked {link} -> {os.readlink(link)}')


def check_barcodes_column(metadata_path: cpg_utils.Path) -> None:
    with metadata_path.open() as metadata_fh:
        metadata_df: pd.DataFrame = pd.read_csv(metadata_fh, sep='\t', nrows=0)
    if BARCODES_COLUMN not in metadata_df.columns:
        raise ValueError(
            f'{metadata_path} has no {BARCODES_COLUMN} column (found: {", ".join(metadata_df.columns)})',
        )


def run(dataset_id: str, config: MocksConfig) -> None:
    logger.info(f'Processing {dataset_id} (EMP)...')
    qiime = config.qiime_executable

    paths: DatasetPaths = download_mock_data.run(dataset_id=dataset_id, needs_index=True, config=config)
    link_emp_sequences(paths)

    if not utils.can_reuse(paths.emp_seqs_archive, 'Import'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.import_emp_paired_cmd(qiime, paths.emp_sequences, paths.emp_seqs_archive),
            f'Import {dataset_id}',
            cwd=paths.root,
        )

    if not utils.can_reuse(paths.demux_archive, 'Demultiplex'):
        check_barcodes_column(paths.metadata)
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.demux_emp_paired_cmd(
                qiime,
                seqs=paths.emp_seqs_archive,
                metadata=paths.metadata,
                per_sample_output=paths.demux_archive,
                error_details_output=paths.demux_details_archive,
            ),
            f'Demultiplex {dataset_id}',
            cwd=paths.root,
        )

    if not utils.can_reuse(paths.untrimmed_export, 'Export untrimmed'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.export_cmd(qiime, paths.demux_archive, paths.untrimmed_export),
            f'Export untrimmed {dataset_id}',
            cwd=paths.root,
        )

    # EMP datasets are always trimmed with the standard primers
    if not utils.can_reuse(paths.trimmed_archive, 'Trim'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.cutadapt_trim_paired_cmd(
                qiime, paths.demux_archive, config.standard_primers, paths.trimmed_archive
            ),
            f'Trim {dataset_id}',
            cwd=paths.root,
        )

    if not utils.can_reuse(paths.trimmed_export, 'Export trimmed'):
        qiime_cli_utils.run_qiime(
            qiime_cli_utils.export_cmd(qiime, paths.trimmed_archive, paths.trimmed_export),
            f'Export trimmed {dataset_id}',
            cwd=paths.root,
        )
