"""
Download helpers for the raw mockrobiota files.

Read files must end up either absent or gzip-compressed on disk. Anything the
server hands back uncompressed is compressed in place, and an empty response is
treated as fatal because continuing would silently drop biological data.
"""

import gzip
import shutil

import cpg_utils
import requests
from loguru import logger

from mockrobiota_prep.constants import DOWNLOAD_CHUNK_SIZE, GZIP_MAGIC


class EmptyDownloadError(RuntimeError):
    """A download completed but produced a zero byte file."""

    def __init__(self, path: cpg_utils.Path, url: str) -> None:
        super().__init__(f'File is still empty after download: {path} (from {url})')
        self.path = path
        self.url = url


def is_gzipped(path: cpg_utils.Path) -> bool:
    with path.open('rb') as fh:
        return fh.read(len(GZIP_MAGIC)) == GZIP_MAGIC


def download_file(url: str, path: cpg_utils.Path, timeout: int) -> None:
    """
    Streams url to path. Data lands in a .part sibling and is only moved onto
    path once the transfer has finished, so path never holds a truncated body.
    """
    part_path = path.with_name(f'{path.name}.part')
    try:
        with requests.get(url, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            with part_path.open('wb') as out_fh:
                for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    out_fh.write(chunk)
    except requests.RequestException:
        part_path.unlink(missing_ok=True)
        raise
    part_path.replace(path)


def _compress_in_place(path: cpg_utils.Path) -> None:
    """
    Gzips path. The compressed stream is built in a .gz.part sibling and only
    replaces path once complete; on failure the original payload is restored.
    """
    tmp_path = path.with_name(f'{path.name}.tmp')
    gz_part_path = path.with_name(f'{path.name}.gz.part')
    path.replace(tmp_path)
    try:
        with tmp_path.open('rb') as in_fh, gzip.open(gz_part_path, 'wb') as out_fh:
            shutil.copyfileobj(in_fh, out_fh)
    except BaseException:
        logger.error(f'Compressing {path.name} failed, restoring the uncompressed file')
        gz_part_path.unlink(missing_ok=True)
        tmp_path.replace(path)
        raise
    gz_part_path.replace(path)
    tmp_path.unlink()


def ensure_gzipped_file(path: cpg_utils.Path, url: str, timeout: int) -> None:
    """
    Makes sure path holds gzip data fetched from url.

    Downloads only when path is missing (or a stale empty file). Transport
    errors are logged and leave path absent so the next run retries. Raises
    EmptyDownloadError if the server answered with an empty body.
    """
    if path.exists() and path.stat().st_size == 0:
        logger.warning(f'Found empty file. Deleting: {path}')
        path.unlink()

    if not path.exists():
        logger.info(f'Downloading {path.name} from {url}')
        try:
            download_file(url, path, timeout)
        except requests.RequestException as e:
            logger.error(f'Download failed for {url}: {e}')
            return

    if not path.exists():
        return

    if path.stat().st_size == 0:
        logger.error(f'File is still empty after download: {path}')
        path.unlink()
        raise EmptyDownloadError(path, url)

    if is_gzipped(path):
        return

    logger.warning(f'{path.name} was not gzipped. Compressing...')
    _compress_in_place(path)


def fetch_plain_file(path: cpg_utils.Path, url: str, timeout: int) -> None:
    """Downloads a text file as-is unless a non-empty copy is already present."""
    if path.exists() and path.stat().st_size > 0:
        return
    logger.info(f'Downloading {path.name} from {url}')
    try:
        download_file(url, path, timeout)
    except requests.RequestException as e:
        logger.error(f'Failed to download {url}: {e}')
        raise
