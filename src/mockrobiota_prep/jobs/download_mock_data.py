"""
Fetch the raw reads and sample metadata for one mock community.
"""

from loguru import logger

from mockrobiota_prep import fetcher, utils
from mockrobiota_prep.constants import FORWARD_READ, INDEX_READ, REVERSE_READ
from mockrobiota_prep.file_types import DatasetPaths, MocksConfig


def run(dataset_id: str, needs_index: bool, config: MocksConfig) -> DatasetPaths:
    """
    Idempotent: files already on disk and valid are left untouched, so calling
    this repeatedly only downloads what a previous run failed to get.
    """
    utils.validate_cli_path_input(dataset_id, 'dataset_id')
    logger.info(f'Checking data for {dataset_id}')
    paths: DatasetPaths = config.dataset_paths(dataset_id)
    paths.raw_data.mkdir(parents=True, exist_ok=True)

    fetcher.fetch_plain_file(
        path=paths.metadata,
        url=config.metadata_url(dataset_id),
        timeout=config.download_timeout,
    )

    read_files = [(paths.forward_read, FORWARD_READ), (paths.reverse_read, REVERSE_READ)]
    if needs_index:
        read_files.append((paths.index_read, INDEX_READ))

    for local_path, file_name in read_files:
        fetcher.ensure_gzipped_file(
            path=local_path,
            url=config.read_url(dataset_id, file_name),
            timeout=config.download_timeout,
        )

    return paths
