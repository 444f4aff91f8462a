from clean_match.datasets.reference import (
    REFERENCE_COLUMNS,
    ReferenceDataset,
    TwoSourceDatasetGenerator,
    write_reference_dataset,
)

__all__ = ["REFERENCE_COLUMNS", "ReferenceDataset", "TwoSourceDatasetGenerator", "write_reference_dataset"]
