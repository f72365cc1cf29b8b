"""
This module centralizes all interactions with the QIIME 2 command-line
interface, `qiime`. Builders return argv lists so they can be inspected
before anything is executed; `run_qiime` executes them via subprocess.
"""

from subprocess import CompletedProcess
from typing import Any

import cpg_utils

from mockrobiota_prep import utils
from mockrobiota_prep.constants import BARCODES_COLUMN
from mockrobiota_prep.file_types import PrimerPair

# --- Command builders ---


def import_manifest_cmd(executable: str, manifest: cpg_utils.Path, output: cpg_utils.Path) -> list[str]:
    return [
        executable,
        'tools',
        'import',
        '--type',
        'SampleData[PairedEndSequencesWithQuality]',
        '--input-path',
        str(manifest),
        '--output-path',
        str(output),
        '--input-format',
        'PairedEndFastqManifestPhred33V2',
    ]


def import_emp_paired_cmd(executable: str, sequences_dir: cpg_utils.Path, output: cpg_utils.Path) -> list[str]:
    return [
        executable,
        'tools',
        'import',
        '--type',
        'EMPPairedEndSequences',
        '--input-path',
        str(sequences_dir),
        '--output-path',
        str(output),
    ]


def export_cmd(executable: str, archive: cpg_utils.Path, output_dir: cpg_utils.Path) -> list[str]:
    return [
        executable,
        'tools',
        'export',
        '--input-path',
        str(archive),
        '--output-path',
        str(output_dir),
    ]


def demux_emp_paired_cmd(
    executable: str,
    seqs: cpg_utils.Path,
    metadata: cpg_utils.Path,
    per_sample_output: cpg_utils.Path,
    error_details_output: cpg_utils.Path,
) -> list[str]:
    """Barcodes in the metadata are reverse complemented before matching."""
    return [
        executable,
        'demux',
        'emp-paired',
        '--i-seqs',
        str(seqs),
        '--m-barcodes-file',
        str(metadata),
        '--m-barcodes-column',
        BARCODES_COLUMN,
        '--p-rev-comp-mapping-barcodes',
        '--o-per-sample-sequences',
        str(per_sample_output),
        '--o-error-correction-details',
        str(error_details_output),
    ]


def cutadapt_trim_paired_cmd(
    executable: str,
    demux: cpg_utils.Path,
    primers: PrimerPair,
    output: cpg_utils.Path,
) -> list[str]:
    return [
        executable,
        'cutadapt',
        'trim-paired',
        '--i-demultiplexed-sequences',
        str(demux),
        '--p-front-f',
        primers.forward,
        '--p-front-r',
        primers.reverse,
        '--o-trimmed-sequences',
        str(output),
    ]


# --- Execution ---


def run_qiime(cmd: list[str], step_name: str, cwd: cpg_utils.Path | None = None) -> CompletedProcess[Any]:
    return utils.run_subprocess_with_log(cmd, step_name, cwd=cwd)
