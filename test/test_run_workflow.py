"""
Tests for the command line entry point.
"""

import subprocess
from pathlib import Path
from unittest import mock

import pytest

from mockrobiota_prep import run_workflow
from mockrobiota_prep.fetcher import EmptyDownloadError


@pytest.fixture
def cli_mocks(mocks_config):
    with (
        mock.patch('mockrobiota_prep.utils.configure_config_paths') as mock_configure,
        mock.patch('mockrobiota_prep.utils.load_mocks_config', return_value=mocks_config),
        mock.patch('mockrobiota_prep.stages.run_stages') as mock_run_stages,
    ):
        yield mock_configure, mock_run_stages


def test_cli_runs_all_datasets(cli_mocks, mocks_config):
    mock_configure, mock_run_stages = cli_mocks

    assert run_workflow.cli_main([]) == 0

    mock_configure.assert_called_once_with([])
    datasets, config = mock_run_stages.call_args.args
    assert len(datasets) == 13
    assert config is mocks_config
    assert mock_run_stages.call_args.kwargs == {'dry_run': False}


def test_cli_dataset_filter_and_config(cli_mocks):
    mock_configure, mock_run_stages = cli_mocks

    run_workflow.cli_main(['--datasets', 'mock-13', 'mock-4', '--config', 'site.toml', '--dry_run'])

    mock_configure.assert_called_once_with(['site.toml'])
    datasets, _ = mock_run_stages.call_args.args
    assert [d.dataset_id for d in datasets] == ['mock-4', 'mock-13']
    assert mock_run_stages.call_args.kwargs == {'dry_run': True}


def test_cli_unknown_dataset(cli_mocks):
    _, mock_run_stages = cli_mocks
    with pytest.raises(ValueError, match='mock-99'):
        run_workflow.cli_main(['--datasets', 'mock-99'])
    mock_run_stages.assert_not_called()


def test_cli_exits_nonzero_on_empty_download(cli_mocks):
    _, mock_run_stages = cli_mocks
    mock_run_stages.side_effect = EmptyDownloadError(Path('mock-13/raw_data/x.fastq.gz'), 'https://x')

    assert run_workflow.cli_main([]) == 1


def test_cli_exits_nonzero_on_qiime_failure(cli_mocks):
    _, mock_run_stages = cli_mocks
    mock_run_stages.side_effect = subprocess.CalledProcessError(1, ['qiime', 'tools', 'import'])

    assert run_workflow.cli_main([]) == 1
