# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-22
# Description: IndexFactory
# -----------------------------------------------------------------------------
from typing import Sequence

import numpy as np

from embedding.EmbeddingRecord import EmbeddingRecord, Metadata
from vectorstore.ChromaSimilarityIndex import ChromaSimilarityIndex
from vectorstore.NumpySimilarityIndex import NumpySimilarityIndex
from vectorstore.SimilarityIndex import SimilarityIndex

INDEX_BACKENDS = {
    "exact": NumpySimilarityIndex,
    "hnsw": ChromaSimilarityIndex,
}


def build_index(
        vectors: Sequence[np.ndarray],
        metadata: Sequence[Metadata],
        backend: str = "exact",
) -> SimilarityIndex:
    """Build an immutable index from parallel vector/metadata sequences."""
    try:
        index_cls = INDEX_BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown index backend {backend!r}; expected one of {sorted(INDEX_BACKENDS)}")
    return index_cls.build(vectors, metadata)


def build_index_from_records(records: Sequence[EmbeddingRecord], backend: str = "exact") -> SimilarityIndex:
    return build_index(
        [r.vector for r in records],
        [r.metadata for r in records],
        backend=backend,
    )
