#!/usr/bin/env python3


import subprocess
import sys
from argparse import ArgumentParser

from loguru import logger

from mockrobiota_prep import stages, utils
from mockrobiota_prep.datasets import select_datasets
from mockrobiota_prep.fetcher import EmptyDownloadError


def cli_main(argv: list[str] | None = None) -> int:
    # CLI entrypoint
    parser = ArgumentParser(description='Download and preprocess mockrobiota mock communities with QIIME 2.')
    parser.add_argument('--dry_run', action='store_true', help='Dry run')
    parser.add_argument('--datasets', nargs='+', metavar='ID', help='Only process these datasets, e.g. mock-13')
    parser.add_argument(
        '--config',
        action='append',
        default=[],
        metavar='PATH',
        help='Extra TOML config, layered over the defaults and CPG_CONFIG_PATH',
    )
    args = parser.parse_args(argv)

    logger.remove()
    logger.add(sink=sys.stdout, format='{time} - {level} - {message}')

    utils.configure_config_paths(args.config)
    config = utils.load_mocks_config()
    datasets = select_datasets(args.datasets)
    logger.info(f'Working in {config.workdir} on {len(datasets)} dataset(s)')

    try:
        stages.run_stages(datasets, config, dry_run=args.dry_run)
    except EmptyDownloadError as e:
        logger.error(f'Aborting run: {e}')
        return 1
    except subprocess.CalledProcessError as e:
        logger.error(f'Aborting run: external command failed with return code {e.returncode}')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(cli_main())
