from pathlib import Path

import pytest

from clean_match.config import ClusteringConfig, DuplicatePolicy, load_config
from clean_match.errors import ConfigError


def test_defaults_without_a_file() -> None:
    config = load_config()

    assert config.clustering.similarity_threshold == 0.5
    assert config.clustering.duplicate_policy is DuplicatePolicy.REPORT
    assert config.clustering.parallel_scans is False
    assert config.linkage.embedding_backend == "hashing"


def test_yaml_values_override_defaults(tmp_path: Path) -> None:
    path = tmp_path / "clean_match.yml"
    path.write_text(
        "clustering:\n"
        "  similarity_threshold: 0.7\n"
        "  duplicate_policy: reject\n"
        "linkage:\n"
        "  text_fields: [NAME, CITY]\n"
        "  candidate_threshold: 0.2\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.clustering.similarity_threshold == 0.7
    assert config.clustering.duplicate_policy is DuplicatePolicy.REJECT
    assert config.linkage.text_fields == ("NAME", "CITY")
    assert config.linkage.candidate_threshold == 0.2


@pytest.mark.parametrize(
    "content",
    [
        "clustering:\n  similarity_threshold: 1.5\n",
        "clustering:\n  similarity_threshold: .nan\n",
        "clustering:\n  unknown_key: true\n",
        "- just\n- a list\n",
        "clustering: [unbalanced\n",
    ],
)
def test_invalid_files_raise_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.yml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.yml")


def test_with_threshold_returns_validated_copy() -> None:
    config = ClusteringConfig(duplicate_policy=DuplicatePolicy.REJECT)

    updated = config.with_threshold(0.8)

    assert updated.similarity_threshold == 0.8
    assert updated.duplicate_policy is DuplicatePolicy.REJECT
    assert config.similarity_threshold == 0.5
    with pytest.raises(ConfigError):
        config.with_threshold(-0.1)
