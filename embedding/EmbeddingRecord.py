# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-08-18
# Description: EmbeddingRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np


@dataclass(frozen=True)
class Metadata:
    """Provenance of one indexed chunk: originating file and its code."""
    file: str
    code: str

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "code": self.code}


@dataclass(frozen=True)
class EmbeddingRecord:
    """Embedding vector paired with the metadata of the chunk it was computed from."""
    vector: np.ndarray
    metadata: Metadata
