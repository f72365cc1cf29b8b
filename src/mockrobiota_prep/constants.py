from typing import Final

DEFAULTS_CONFIG_NAME: Final = 'mockrobiota_prep_defaults.toml'

# --- Per-dataset layout ---

RAW_DATA_DIR: Final = 'raw_data'
SAMPLE_METADATA: Final = 'sample-metadata.tsv'
FORWARD_READ: Final = 'mock-forward-read.fastq.gz'
REVERSE_READ: Final = 'mock-reverse-read.fastq.gz'
INDEX_READ: Final = 'mock-index-read.fastq.gz'

MANIFEST: Final = 'manifest.tsv'
MANIFEST_COLUMNS: Final = ('sample-id', 'forward-absolute-filepath', 'reverse-absolute-filepath')

EMP_SEQUENCES_DIR: Final = 'emp-paired-end-sequences'
# Link name inside EMP_SEQUENCES_DIR -> raw file it points at
EMP_LINKS: Final = {
    'forward.fastq.gz': FORWARD_READ,
    'reverse.fastq.gz': REVERSE_READ,
    'barcodes.fastq.gz': INDEX_READ,
}
BARCODES_COLUMN: Final = 'BarcodeSequence'

EMP_SEQS_ARCHIVE: Final = 'emp-seqs.qza'
DEMUX_ARCHIVE: Final = 'demux.qza'
DEMUX_DETAILS_ARCHIVE: Final = 'demux-details.qza'
TRIMMED_ARCHIVE: Final = 'demux-trimmed.qza'
UNTRIMMED_EXPORT_DIR: Final = 'untrimmed_fastq'
TRIMMED_EXPORT_DIR: Final = 'trimmed_fastq'

# --- Download handling ---

GZIP_MAGIC: Final = b'\x1f\x8b'
DOWNLOAD_CHUNK_SIZE: Final = 1024 * 1024
