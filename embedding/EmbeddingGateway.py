# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-18
# Description: EmbeddingGateway
# -----------------------------------------------------------------------------
from typing import Any, List, Protocol, Sequence, runtime_checkable

import numpy as np

from errors.HydeErrors import EmbeddingError

EMBEDDING_DIM = 512


def to_embedding_vector(values: Any, *, dim: int = EMBEDDING_DIM) -> np.ndarray:
    """
    Checked conversion of a raw embedding (list, tuple, array) to a float32
    vector of shape (dim,). Copies the components. Any other length, a
    non-numeric payload or a non-finite component raises EmbeddingError;
    nothing is truncated or padded.
    """
    try:
        arr = np.array(values, dtype=np.float32, copy=True)
    except (TypeError, ValueError) as e:
        raise EmbeddingError(f"Embedding is not a numeric vector: {e}") from e

    if arr.ndim != 1:
        raise EmbeddingError(f"Embedding must be 1-D, got shape {arr.shape}")
    if arr.shape[0] != dim:
        raise EmbeddingError(f"Embedding size mismatch: expected {dim}, got {arr.shape[0]}")
    if not np.all(np.isfinite(arr)):
        raise EmbeddingError("Embedding contains non-finite components")
    return arr


@runtime_checkable
class EmbeddingGateway(Protocol):
    """
    Text embedding capability. Every returned vector has exactly
    EMBEDDING_DIM components; embed_batch returns one vector per input, in
    input order.
    """

    async def embed(self, text: str) -> np.ndarray:
        ...

    async def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        ...
