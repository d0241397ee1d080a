# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-08-22
# Description: ChromaSimilarityIndex
# -----------------------------------------------------------------------------
import logging
import math
import uuid
from typing import Any, Dict, List, Sequence

import chromadb
import numpy as np
from chromadb.api import ClientAPI
from chromadb.api.models.Collection import Collection

from embedding.EmbeddingRecord import Metadata
from utility.logging_utils import get_class_logger
from vectorstore.SimilarityIndex import RetrievalResult, check_query, snapshot_inputs

# Fixed HNSW parameters and a single insert thread keep graph construction repeatable
HNSW_SETTINGS: Dict[str, Any] = {
    "hnsw:space": "l2",
    "hnsw:M": 16,
    "hnsw:construction_ef": 200,
    "hnsw:search_ef": 100,
    "hnsw:num_threads": 1,
}

_ADD_BATCH = 1000


class ChromaSimilarityIndex:
    """
    Approximate nearest-neighbour index on an in-memory Chroma collection.

    Ids are insertion positions, so each hit maps back to the parallel
    metadata list kept alongside. Chroma reports squared L2; distances here
    are converted to plain Euclidean to match the exact backend. Ties are
    ordered by insertion position.
    """

    backend = "hnsw"

    def __init__(
            self,
            client: ClientAPI,
            collection: Collection,
            metadata: List[Metadata],
            logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.collection = collection
        self._meta = metadata
        self.logger = logger or get_class_logger(self.__class__)

    @classmethod
    def build(
            cls,
            vectors: Sequence[np.ndarray],
            metadata: Sequence[Metadata],
            logger: logging.Logger | None = None,
    ) -> "ChromaSimilarityIndex":
        matrix, metas = snapshot_inputs(vectors, metadata)

        # Ephemeral clients share one in-process backend; a unique name isolates each build
        client = chromadb.EphemeralClient()
        collection = client.create_collection(
            name=f"code-hyde-{uuid.uuid4().hex[:16]}",
            metadata=dict(HNSW_SETTINGS),
            embedding_function=None,
        )

        for start in range(0, len(metas), _ADD_BATCH):
            rows = matrix[start:start + _ADD_BATCH]
            collection.add(
                ids=[str(start + j) for j in range(len(rows))],
                embeddings=rows.tolist(),
            )

        index = cls(client, collection, metas, logger=logger)
        index.logger.info(
            "HNSW index built over %d vectors (collection=%s)", len(metas), collection.name
        )
        return index

    def __len__(self) -> int:
        return len(self._meta)

    def close(self) -> None:
        """Drop the backing collection; the shared in-process store keeps it otherwise."""
        name = self.collection.name
        self.client.delete_collection(name)
        self.logger.info("HNSW index released (collection=%s)", name)

    def query(self, vector: np.ndarray, k: int) -> List[RetrievalResult]:
        q = check_query(vector, k)
        if len(self._meta) == 0:
            return []

        res = self.collection.query(
            query_embeddings=[q.tolist()],
            n_results=min(k, len(self._meta)),
            include=["distances"],
        )
        ids = (res.get("ids") or [[]])[0]
        dists = (res.get("distances") or [[]])[0]

        hits = sorted(
            ((math.sqrt(max(float(d), 0.0)), int(i)) for i, d in zip(ids, dists)),
        )
        return [
            RetrievalResult(rank_index=rank, distance=dist, metadata=self._meta[pos])
            for rank, (dist, pos) in enumerate(hits)
        ]
