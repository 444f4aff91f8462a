import csv
from pathlib import Path

from clean_match.datasets import REFERENCE_COLUMNS, TwoSourceDatasetGenerator, write_reference_dataset


def test_sources_have_requested_size_and_known_overlap() -> None:
    dataset = TwoSourceDatasetGenerator(seed=1).generate(size=20, overlap_rate=0.25)

    assert len(dataset.left) == 20
    assert len(dataset.right) == 20
    assert len(dataset.true_matches) == 5

    left_ids = {r.record_id for r in dataset.left}
    right_ids = {r.record_id for r in dataset.right}
    assert not left_ids & right_ids
    for left_id, right_id in dataset.true_matches:
        assert left_id in left_ids
        assert right_id in right_ids


def test_records_carry_reference_columns() -> None:
    dataset = TwoSourceDatasetGenerator(seed=2).generate(size=4)

    for record in dataset.left + dataset.right:
        assert sorted(record.attributes) == sorted(REFERENCE_COLUMNS)


def test_generation_is_deterministic_for_a_seed() -> None:
    first = TwoSourceDatasetGenerator(seed=9).generate(size=10)
    second = TwoSourceDatasetGenerator(seed=9).generate(size=10)

    assert first == second


def test_non_positive_size_gives_empty_sources() -> None:
    dataset = TwoSourceDatasetGenerator().generate(size=0)

    assert dataset.left == []
    assert dataset.right == []
    assert dataset.true_matches == []


def test_written_dataset_keeps_ids_and_ground_truth(tmp_path: Path) -> None:
    dataset = TwoSourceDatasetGenerator(seed=3).generate(size=6)

    write_reference_dataset(dataset, tmp_path / "ref")

    with (tmp_path / "ref" / "right.csv").open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["RECORD_ID"] for row in rows] == [r.record_id for r in dataset.right]
    assert rows[0]["EMAIL"] == dataset.right[0].attributes["EMAIL"]
    with (tmp_path / "ref" / "true_matches.csv").open(newline="", encoding="utf-8") as handle:
        truth = [tuple(row) for row in csv.reader(handle)][1:]
    assert truth == dataset.true_matches
