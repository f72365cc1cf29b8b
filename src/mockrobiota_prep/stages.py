from collections.abc import Iterable

from loguru import logger

from mockrobiota_prep.file_types import MockDataset, MocksConfig
from mockrobiota_prep.jobs import process_emp_mock, process_manifest_mock

SEPARATOR = '-' * 64


def describe(dataset: MockDataset, config: MocksConfig) -> str:
    if dataset.kind == 'emp':
        primers = config.standard_primers
        return f'{dataset.dataset_id}: EMP demultiplex, primers {primers.forward}/{primers.reverse}'
    primers = config.primers(dataset.primer_set)
    return (
        f'{dataset.dataset_id}: manifest import of sample {dataset.effective_sample_id}, '
        f'{dataset.primer_set} primers {primers.forward}/{primers.reverse}'
    )


def run_stage(dataset: MockDataset, config: MocksConfig) -> None:
    """Runs the workflow matching the dataset's import style."""
    if dataset.kind == 'emp':
        process_emp_mock.run(dataset_id=dataset.dataset_id, config=config)
    elif dataset.kind == 'manifest':
        process_manifest_mock.run(
            dataset_id=dataset.dataset_id,
            sample_id=dataset.effective_sample_id,
            primers=config.primers(dataset.primer_set),
            config=config,
        )
    else:
        raise ValueError(f'Unknown workflow kind {dataset.kind!r} for {dataset.dataset_id}')


def run_stages(datasets: Iterable[MockDataset], config: MocksConfig, dry_run: bool = False) -> None:
    """
    Processes datasets strictly one after another. Any exception stops the
    run, leaving the remaining datasets for the next invocation.
    """
    for dataset in datasets:
        logger.info(SEPARATOR)
        if dry_run:
            logger.info(f'[dry run] {describe(dataset, config)}')
            continue
        run_stage(dataset, config)

    logger.info('=' * len(SEPARATOR))
    if dry_run:
        logger.info('Dry run finished, nothing was downloaded or run.')
    else:
        logger.info('All mock communities checked and processed.')
