from __future__ import annotations

import zlib
from collections.abc import Sequence
from math import sqrt

import numpy as np

from clean_match.interfaces import CrossSourceIndex, EmbeddingModel
from clean_match.models import CandidatePair, EntityRecord, SimilarityPairs


class SimpleTextEmbeddingModel:
    """Hashing-based baseline embedding model for local testing.

    Tokens are bucketed with CRC32 so vectors are stable across interpreter runs.
    """

    def __init__(self, text_fields: Sequence[str], dimensions: int = 64) -> None:
        self._text_fields = list(text_fields)
        self._dimensions = dimensions

    def embed(self, records: Sequence[EntityRecord]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for record in records:
            vector = [0.0] * self._dimensions
            for token in _record_text(record, self._text_fields).split():
                idx = zlib.crc32(token.encode("utf-8")) % self._dimensions
                vector[idx] += 1.0
            vectors.append(_l2_normalize(vector))
        return vectors


class SbertEmbeddingModel:
    """Sentence-Transformers embedding adapter (SBERT)."""

    def __init__(
        self,
        text_fields: Sequence[str],
        model_name: str = "all-MiniLM-L6-v2",
        batch_size: int = 64,
    ) -> None:
        self._text_fields = list(text_fields)
        self._batch_size = batch_size
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as exc:
            raise ImportError(
                "SBERT backend requires sentence-transformers. "
                "Install with: pip install 'clean-match[sbert]'"
            ) from exc
        self._model = SentenceTransformer(model_name)

    def embed(self, records: Sequence[EntityRecord]) -> list[list[float]]:
        texts = [_record_text(record, self._text_fields) for record in records]
        vectors = self._model.encode(
            texts,
            batch_size=self._batch_size,
            normalize_embeddings=True,
            convert_to_numpy=True,
            show_progress_bar=False,
        )
        return [vector.tolist() for vector in vectors]


class CrossSourceVectorIndex:
    """Brute-force cosine search between two sources.

    Only left x right pairs are scored; records of the same source are never
    compared with each other.
    """

    def __init__(self) -> None:
        self._left = np.zeros((0, 0))
        self._right = np.zeros((0, 0))

    def build(
        self,
        left_vectors: Sequence[Sequence[float]],
        right_vectors: Sequence[Sequence[float]],
    ) -> None:
        self._left = np.asarray(left_vectors, dtype=float)
        self._right = np.asarray(right_vectors, dtype=float)

    def query_similar_pairs(self, min_similarity: float) -> list[CandidatePair]:
        if self._left.size == 0 or self._right.size == 0:
            return []

        scores = np.clip(self._left @ self._right.T, 0.0, 1.0)
        left_indices, right_indices = np.nonzero(scores >= min_similarity)
        return [
            CandidatePair(left_index=int(i), right_index=int(j), similarity=float(scores[i, j]))
            for i, j in zip(left_indices, right_indices)
        ]


class EmbeddingCandidateGenerator:
    def __init__(
        self,
        embedding_model: EmbeddingModel,
        vector_index: CrossSourceIndex,
        min_similarity: float = 0.3,
    ) -> None:
        self._embedding_model = embedding_model
        self._vector_index = vector_index
        self._min_similarity = min_similarity

    def match(self, left: Sequence[EntityRecord], right: Sequence[EntityRecord]) -> SimilarityPairs:
        left_vectors = self._embedding_model.embed(left)
        right_vectors = self._embedding_model.embed(right)
        self._vector_index.build(left_vectors, right_vectors)
        return SimilarityPairs(self._vector_index.query_similar_pairs(self._min_similarity))


def _record_text(record: EntityRecord, text_fields: Sequence[str]) -> str:
    parts = []
    for field in text_fields:
        value = record.attributes.get(field)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            parts.append(text.lower())
    return " ".join(parts)


def _l2_normalize(vector: Sequence[float]) -> list[float]:
    norm = sqrt(sum(v * v for v in vector))
    if norm == 0:
        return [0.0] * len(vector)
    return [v / norm for v in vector]
