import os
import re
import subprocess
from importlib import resources
from typing import Any

import cpg_utils
from cpg_utils.config import config_retrieve, set_config_paths
from loguru import logger

from mockrobiota_prep.constants import DEFAULTS_CONFIG_NAME
from mockrobiota_prep.file_types import MocksConfig, PrimerPair

# IUPAC nucleotide codes, degenerate bases included
PRIMER_PATTERN = re.compile(r'^[ACGTURYSWKMBDHVN]+$')


def validate_cli_path_input(path: str, arg_name: str) -> None:
    """
    Validates that a path string does not contain shell metacharacters
    to prevent potential injection vulnerabilities.
    """
    # Dataset and sample ids end up in paths, URLs and qiime arguments
    if re.search(r'[;&|$`(){}[\]<>*?!#\s]', path):
        logger.error(f'Invalid characters found in {arg_name}: {path}')
        raise ValueError(f'Potential unsafe characters in {arg_name}')


def validate_primer_sequence(sequence: str, arg_name: str) -> str:
    """Upper-cases a primer and checks it only holds IUPAC nucleotide codes."""
    normalised = sequence.strip().upper()
    if not PRIMER_PATTERN.match(normalised):
        logger.error(f'Invalid primer sequence for {arg_name}: {sequence!r}')
        raise ValueError(f'Primer {arg_name} is not an IUPAC nucleotide sequence: {sequence!r}')
    return normalised


def configure_config_paths(extra_paths: list[str] | None = None) -> list[str]:
    """
    Layers config files for cpg_utils: the packaged defaults first, then anything
    in CPG_CONFIG_PATH, then explicitly supplied paths. Later files win.
    """
    defaults = str(resources.files('mockrobiota_prep').joinpath(DEFAULTS_CONFIG_NAME))
    env_paths = [p for p in os.getenv('CPG_CONFIG_PATH', '').split(',') if p]
    config_paths = [defaults, *env_paths, *(extra_paths or [])]
    set_config_paths(config_paths)
    logger.info(f'Using config files: {config_paths}')
    return config_paths


def load_mocks_config() -> MocksConfig:
    """Reads the run configuration into an immutable MocksConfig."""
    primers: dict[str, PrimerPair] = {}
    for primer_set in ('standard', 'modified'):
        primers[primer_set] = PrimerPair(
            forward=validate_primer_sequence(
                config_retrieve(['primers', primer_set, 'forward']),
                f'primers.{primer_set}.forward',
            ),
            reverse=validate_primer_sequence(
                config_retrieve(['primers', primer_set, 'reverse']),
                f'primers.{primer_set}.reverse',
            ),
        )

    timeout = int(config_retrieve(['mockrobiota', 'download_timeout'], default=600))
    if timeout <= 0:
        raise ValueError(f'mockrobiota.download_timeout must be positive, got {timeout}')

    return MocksConfig(
        workdir=cpg_utils.to_path(config_retrieve(['workflow', 'workdir'], default='.')).resolve(),
        s3_base=config_retrieve(['mockrobiota', 's3_base']),
        github_base=config_retrieve(['mockrobiota', 'github_base']),
        standard_primers=primers['standard'],
        modified_primers=primers['modified'],
        qiime_executable=config_retrieve(['qiime', 'executable'], default='qiime'),
        download_timeout=timeout,
    )


def can_reuse(path: cpg_utils.Path, step_name: str) -> bool:
    """
    An existing output marks its step as done. Content is not inspected, so a
    half-written artifact from an aborted run is also reused.
    """
    if path.exists():
        logger.info(f'{step_name}: {path} already exists, skipping.')
        return True
    return False


def run_subprocess_with_log(
    cmd: str | list[str],
    step_name: str,
    cwd: cpg_utils.Path | None = None,
) -> subprocess.CompletedProcess[Any]:
    """
    Runs a subprocess command with robust logging.
    Logs the command, its output, and errors if any occur.
    """
    cmd_str = cmd if isinstance(cmd, str) else ' '.join(cmd)
    logger.info(f'Running {step_name} command: {cmd_str}')
    try:
        process: subprocess.CompletedProcess[str] = subprocess.run(  # noqa: S603
            cmd,
            check=True,
            capture_output=True,
            text=True,
            cwd=cwd,
        )
        logger.info(f'{step_name} completed successfully.')
        if process.stdout:
            logger.info(f'{step_name} STDOUT:\n{process.stdout.strip()}')
        if process.stderr:
            logger.info(f'{step_name} STDERR:\n{process.stderr.strip()}')
        return process
    except subprocess.CalledProcessError as e:
        logger.error(f'{step_name} failed with return code {e.returncode}')
        logger.error(f'CMD: {cmd_str}')
        logger.error(f'STDOUT: {e.stdout}')
        logger.error(f'STDERR: {e.stderr}')
        raise
