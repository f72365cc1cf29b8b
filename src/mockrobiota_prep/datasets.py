"""
The mock communities processed by a full run, in processing order.
"""

from typing import Final

from mockrobiota_prep.file_types import MockDataset

MOCK_DATASETS: Final[tuple[MockDataset, ...]] = (
    # Multiplexed, EMP protocol
    MockDataset('mock-4', kind='emp'),
    MockDataset('mock-5', kind='emp'),
    # Standard 515F/806R primers
    MockDataset('mock-12', kind='manifest', primer_set='standard', sample_id='Extreme.1'),
    MockDataset('mock-13', kind='manifest', primer_set='standard'),
    MockDataset('mock-14', kind='manifest', primer_set='standard'),
    MockDataset('mock-15', kind='manifest', primer_set='standard'),
    MockDataset('mock-16', kind='manifest', primer_set='standard'),
    # Modified forward primer
    MockDataset('mock-18', kind='manifest', primer_set='modified'),
    MockDataset('mock-19', kind='manifest', primer_set='modified'),
    MockDataset('mock-20', kind='manifest', primer_set='modified'),
    MockDataset('mock-21', kind='manifest', primer_set='modified'),
    MockDataset('mock-22', kind='manifest', primer_set='modified'),
    MockDataset('mock-23', kind='manifest', primer_set='modified'),
)


def select_datasets(
    dataset_ids: list[str] | None,
    datasets: tuple[MockDataset, ...] = MOCK_DATASETS,
) -> tuple[MockDataset, ...]:
    """Restricts the table to dataset_ids, keeping table order. None selects everything."""
    if not dataset_ids:
        return datasets
    known = {d.dataset_id for d in datasets}
    unknown = sorted(set(dataset_ids) - known)
    if unknown:
        raise ValueError(f'Unknown dataset(s): {", ".join(unknown)}. Known: {", ".join(sorted(known))}')
    wanted = set(dataset_ids)
    return tuple(d for d in datasets if d.dataset_id in wanted)
