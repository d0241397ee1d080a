# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-15
# Updated: 2026-08-21
# Description: SimilarityIndex
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Dict, Any, List, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np

from embedding.EmbeddingGateway import EMBEDDING_DIM
from embedding.EmbeddingRecord import Metadata
from errors.HydeErrors import IndexBuildPrecondition


@dataclass(frozen=True)
class RetrievalResult:
    """One neighbour of a query; rank_index 0 is the closest."""
    rank_index: int
    distance: float
    metadata: Metadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank_index": self.rank_index,
            "distance": self.distance,
            **self.metadata.to_dict(),
        }


@runtime_checkable
class SimilarityIndex(Protocol):
    """
    Immutable k-NN index over a snapshot of vectors and their parallel metadata.
    No insert/delete: a changed corpus means a rebuild.
    """
    backend: str

    def __len__(self) -> int:
        ...

    def query(self, vector: np.ndarray, k: int) -> List[RetrievalResult]:
        ...

    def close(self) -> None:
        """Release backend resources. The index must not be queried afterwards."""
        ...


def snapshot_inputs(
        vectors: Sequence[np.ndarray],
        metadata: Sequence[Metadata],
) -> Tuple[np.ndarray, List[Metadata]]:
    """
    Validate and copy build inputs into an (N, EMBEDDING_DIM) float32 matrix and
    a metadata list. Row i of the matrix belongs to metadata[i].
    """
    if len(vectors) != len(metadata):
        raise IndexBuildPrecondition(
            f"vectors and metadata must have same length ({len(vectors)} != {len(metadata)})"
        )
    if len(vectors) == 0:
        return np.empty((0, EMBEDDING_DIM), dtype=np.float32), []

    try:
        matrix = np.array([np.asarray(v, dtype=np.float32) for v in vectors], dtype=np.float32)
    except ValueError as e:
        raise IndexBuildPrecondition(f"vectors have inconsistent shapes: {e}") from e
    if matrix.ndim != 2 or matrix.shape[1] != EMBEDDING_DIM:
        raise IndexBuildPrecondition(
            f"vectors must all have shape ({EMBEDDING_DIM},), got matrix shape {matrix.shape}"
        )
    return matrix, list(metadata)


def check_query(vector: np.ndarray, k: int) -> np.ndarray:
    if k <= 0:
        raise ValueError(f"k must be >= 1, got {k}")
    q = np.asarray(vector, dtype=np.float32)
    if q.shape != (EMBEDDING_DIM,):
        raise ValueError(f"query vector must have shape ({EMBEDDING_DIM},), got {q.shape}")
    return q
