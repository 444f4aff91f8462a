"""Typed configuration for clustering and record linkage."""

from __future__ import annotations

import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from clean_match.errors import ConfigError

LOGGER = logging.getLogger(__name__)

DEFAULT_TEXT_FIELDS = ("FIRSTNAME", "LASTNAME", "ADDRESS", "TOWN", "EMAIL")


class DuplicatePolicy(StrEnum):
    """What the emitter does when an accepted pair reuses a matched id."""

    REPORT = "report"
    REJECT = "reject"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ClusteringConfig(_FrozenModel):
    """Settings for row-column proxy clustering."""

    similarity_threshold: float = Field(0.5, ge=0.0, le=1.0, allow_inf_nan=False)
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.REPORT
    parallel_scans: bool = False

    def with_threshold(self, similarity_threshold: float) -> ClusteringConfig:
        """Return a validated copy using ``similarity_threshold``."""
        payload = self.model_dump()
        payload["similarity_threshold"] = similarity_threshold
        try:
            return ClusteringConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Invalid similarity threshold: {similarity_threshold!r}") from exc


class LinkageConfig(_FrozenModel):
    """Settings for embedding-based candidate generation."""

    text_fields: tuple[str, ...] = DEFAULT_TEXT_FIELDS
    embedding_backend: Literal["hashing", "sbert"] = "hashing"
    sbert_model: str = Field("all-MiniLM-L6-v2", min_length=1)
    sbert_batch_size: int = Field(64, ge=1)
    dimensions: int = Field(64, ge=1)
    candidate_threshold: float = Field(0.3, ge=0.0, le=1.0, allow_inf_nan=False)


class AppConfig(_FrozenModel):
    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig)
    linkage: LinkageConfig = Field(default_factory=LinkageConfig)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            content = yaml.safe_load(handle) or {}
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file is not valid YAML: {path}") from exc
    if not isinstance(content, dict):
        raise ConfigError(f"Config file must contain a mapping at the top level: {path}")
    return content


def load_config(path: str | os.PathLike[str] | None = None) -> AppConfig:
    """Load configuration from an optional YAML file.

    Args:
        path: YAML file to read. Defaults apply when omitted.

    Returns:
        AppConfig: Parsed configuration object.

    Raises:
        ConfigError: If the file cannot be read or its values are invalid.
    """
    raw_content = _read_yaml(Path(path)) if path is not None else {}
    try:
        return AppConfig.model_validate(raw_content)
    except ValidationError as exc:
        LOGGER.error("Invalid configuration values: %s", exc)
        raise ConfigError("Configuration validation failed") from exc


__all__ = [
    "AppConfig",
    "ClusteringConfig",
    "DuplicatePolicy",
    "LinkageConfig",
    "load_config",
]
