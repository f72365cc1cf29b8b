"""
Global pytest configuration and fixtures.
"""

import gzip
import sys
from functools import reduce
from pathlib import Path
from unittest import mock

import pytest
import requests
from loguru import logger

from mockrobiota_prep.constants import FORWARD_READ, INDEX_READ, REVERSE_READ
from mockrobiota_prep.file_types import MocksConfig, PrimerPair

STANDARD_PRIMERS = PrimerPair(forward='GTGCCAGCMGCCGCGGTAA', reverse='GGACTACHVGGGTWTCTAAT')
MODIFIED_PRIMERS = PrimerPair(forward='CCGTGCCAGCMGCCGCGGTAA', reverse='GGACTACHVGGGTWTCTAAT')

S3_BASE = 'https://s3.example.org/mockrobiota/latest'
GITHUB_BASE = 'https://raw.example.org/mockrobiota/master/data'

FASTQ_RECORD = b'@read1\nACGTACGTAC\n+\nIIIIIIIIII\n'
METADATA_TSV = b'#SampleID\tBarcodeSequence\tLinkerPrimerSequence\nS1\tACGTACGTACGT\tGT\n'

# Mirrors mockrobiota_prep_defaults.toml, with test URLs
MOCK_CONFIG = {
    'workflow': {
        'workdir': '.',
    },
    'mockrobiota': {
        's3_base': S3_BASE,
        'github_base': GITHUB_BASE,
        'download_timeout': 30,
    },
    'primers': {
        'standard': {'forward': STANDARD_PRIMERS.forward, 'reverse': STANDARD_PRIMERS.reverse},
        'modified': {'forward': MODIFIED_PRIMERS.forward, 'reverse': MODIFIED_PRIMERS.reverse},
    },
    'qiime': {
        'executable': 'qiime',
    },
}


def _mock_config_retrieve(keys, default=None):
    """
    A helper function that simulates the real config_retrieve
    by traversing the MOCK_CONFIG dictionary.
    """
    try:
        return reduce(lambda d, k: d[k], keys, MOCK_CONFIG)
    except (KeyError, TypeError):
        if default is not None:
            return default
        raise KeyError(f'Mock config key not found in MOCK_CONFIG: {keys}')


@pytest.fixture
def mock_config_retrieve():
    """Patches config_retrieve where the config loader looks it up."""
    with mock.patch('mockrobiota_prep.utils.config_retrieve') as mock_retrieve:
        mock_retrieve.side_effect = _mock_config_retrieve
        yield mock_retrieve


@pytest.fixture(autouse=True)
def reset_logger():
    # cli_main swaps the loguru handlers, put a plain stderr sink back afterwards
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def mocks_config(tmp_path) -> MocksConfig:
    return MocksConfig(
        workdir=tmp_path,
        s3_base=S3_BASE,
        github_base=GITHUB_BASE,
        standard_primers=STANDARD_PRIMERS,
        modified_primers=MODIFIED_PRIMERS,
        qiime_executable='qiime',
        download_timeout=30,
    )


class FakeServer:
    """Serves fixed bodies by URL in place of requests.get. Unknown URLs answer 404."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.requested: list[str] = []

    def serve_dataset(self, dataset_id: str, with_index: bool = False, gzipped: bool = True) -> None:
        read_names = [FORWARD_READ, REVERSE_READ] + ([INDEX_READ] if with_index else [])
        for name in read_names:
            body = FASTQ_RECORD.replace(b'read1', name.encode())
            self.files[f'{S3_BASE}/{dataset_id}/{name}'] = gzip.compress(body) if gzipped else body
        self.files[f'{GITHUB_BASE}/{dataset_id}/sample-metadata.tsv'] = METADATA_TSV

    def get(self, url, stream=False, timeout=None):  # noqa: ARG002
        self.requested.append(url)
        response = mock.MagicMock()
        if url in self.files:
            body = self.files[url]
            response.iter_content.return_value = [body] if body else []
        else:
            response.raise_for_status.side_effect = requests.HTTPError(f'404 Client Error for url: {url}')
        context = mock.MagicMock()
        context.__enter__.return_value = response
        context.__exit__.return_value = False
        return context


@pytest.fixture
def fake_server():
    server = FakeServer()
    with mock.patch('mockrobiota_prep.fetcher.requests.get', side_effect=server.get):
        yield server


@pytest.fixture
def fake_qiime():
    """
    Replaces the subprocess runner. Every qiime call creates the path given to
    its --output-path / --o-* options so existence checks behave as after a real run.
    """
    with mock.patch('mockrobiota_prep.utils.run_subprocess_with_log') as mock_run:

        def _create_outputs(cmd, step_name, cwd=None):  # noqa: ARG001
            for flag, value in zip(cmd, cmd[1:]):
                if flag == '--output-path' and 'export' in cmd:
                    Path(value).mkdir(parents=True)
                elif flag == '--output-path' or flag.startswith('--o-'):
                    Path(value).write_bytes(b'qza')
            return mock.MagicMock(returncode=0)

        mock_run.side_effect = _create_outputs
        yield mock_run
