# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-21
# Description: NumpySimilarityIndex
# -----------------------------------------------------------------------------
import logging
from typing import List, Sequence

import numpy as np

from embedding.EmbeddingRecord import Metadata
from utility.logging_utils import get_class_logger
from vectorstore.SimilarityIndex import RetrievalResult, check_query, snapshot_inputs


class NumpySimilarityIndex:
    """
    Exact nearest-neighbour search with NumPy only.

    Distance is Euclidean (L2). Results are ascending by distance; equal
    distances keep insertion order (lower position first) because the sort
    is stable. No randomness, so identical inputs give identical answers.
    """

    backend = "exact"

    def __init__(
            self,
            matrix: np.ndarray,
            metadata: List[Metadata],
            logger: logging.Logger | None = None,
    ) -> None:
        self._emb = matrix  # shape (N, D)
        self._meta = metadata
        self.logger = logger or get_class_logger(self.__class__)

    @classmethod
    def build(
            cls,
            vectors: Sequence[np.ndarray],
            metadata: Sequence[Metadata],
            logger: logging.Logger | None = None,
    ) -> "NumpySimilarityIndex":
        matrix, metas = snapshot_inputs(vectors, metadata)
        index = cls(matrix, metas, logger=logger)
        index.logger.info("Exact index built over %d vectors", len(metas))
        return index

    def __len__(self) -> int:
        return len(self._meta)

    def close(self) -> None:
        pass

    def query(self, vector: np.ndarray, k: int) -> List[RetrievalResult]:
        q = check_query(vector, k)
        if len(self._meta) == 0:
            return []

        dists = np.linalg.norm(self._emb - q, axis=1)
        top = np.argsort(dists, kind="stable")[: min(k, len(self._meta))]

        return [
            RetrievalResult(rank_index=rank, distance=float(dists[i]), metadata=self._meta[i])
            for rank, i in enumerate(top.tolist())
        ]
