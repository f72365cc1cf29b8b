"""
This module defines shared data structures and types used across the workflows.
"""

from dataclasses import dataclass
from typing import Literal

import cpg_utils

from mockrobiota_prep import constants

WorkflowKind = Literal['emp', 'manifest']
PrimerSet = Literal['standard', 'modified']


@dataclass(frozen=True)
class PrimerPair:
    """Front adapters handed to cutadapt for the forward and reverse reads."""

    forward: str
    reverse: str


@dataclass(frozen=True)
class MocksConfig:
    """Resolved configuration for one run. Built once and passed to every workflow."""

    workdir: cpg_utils.Path
    s3_base: str  # serves the FASTQ files
    github_base: str  # serves sample-metadata.tsv
    standard_primers: PrimerPair
    modified_primers: PrimerPair
    qiime_executable: str = 'qiime'
    download_timeout: int = 600

    def primers(self, primer_set: PrimerSet) -> PrimerPair:
        if primer_set == 'standard':
            return self.standard_primers
        if primer_set == 'modified':
            return self.modified_primers
        raise ValueError(f'Unknown primer set: {primer_set}')

    def dataset_paths(self, dataset_id: str) -> 'DatasetPaths':
        return DatasetPaths(root=self.workdir / dataset_id)

    def read_url(self, dataset_id: str, file_name: str) -> str:
        return f'{self.s3_base.rstrip("/")}/{dataset_id}/{file_name}'

    def metadata_url(self, dataset_id: str) -> str:
        return f'{self.github_base.rstrip("/")}/{dataset_id}/{constants.SAMPLE_METADATA}'


@dataclass(frozen=True)
class MockDataset:
    """One row of the driver table."""

    dataset_id: str
    kind: WorkflowKind
    primer_set: PrimerSet = 'standard'
    sample_id: str | None = None

    @property
    def effective_sample_id(self) -> str:
        return self.sample_id or self.dataset_id


@dataclass(frozen=True)
class DatasetPaths:
    """Filesystem layout of a single mock community directory."""

    root: cpg_utils.Path

    @property
    def raw_data(self) -> cpg_utils.Path:
        return self.root / constants.RAW_DATA_DIR

    @property
    def metadata(self) -> cpg_utils.Path:
        return self.root / constants.SAMPLE_METADATA

    @property
    def forward_read(self) -> cpg_utils.Path:
        return self.raw_data / constants.FORWARD_READ

    @property
    def reverse_read(self) -> cpg_utils.Path:
        return self.raw_data / constants.REVERSE_READ

    @property
    def index_read(self) -> cpg_utils.Path:
        return self.raw_data / constants.INDEX_READ

    @property
    def manifest(self) -> cpg_utils.Path:
        return self.root / constants.MANIFEST

    @property
    def emp_sequences(self) -> cpg_utils.Path:
        return self.root / constants.EMP_SEQUENCES_DIR

    @property
    def emp_seqs_archive(self) -> cpg_utils.Path:
        return self.root / constants.EMP_SEQS_ARCHIVE

    @property
    def demux_archive(self) -> cpg_utils.Path:
        return self.root / constants.DEMUX_ARCHIVE

    @property
    def demux_details_archive(self) -> cpg_utils.Path:
        return self.root / constants.DEMUX_DETAILS_ARCHIVE

    @property
    def trimmed_archive(self) -> cpg_utils.Path:
        return self.root / constants.TRIMMED_ARCHIVE

    @property
    def untrimmed_export(self) -> cpg_utils.Path:
        return self.root / constants.UNTRIMMED_EXPORT_DIR

    @property
    def trimmed_export(self) -> cpg_utils.Path:
        return self.root / constants.TRIMMED_EXPORT_DIR
