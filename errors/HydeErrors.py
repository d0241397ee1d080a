# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-18
# Description: HydeErrors
# -----------------------------------------------------------------------------
from enum import Enum
from typing import Optional


class HydeStage(str, Enum):
    """Stages of one HyDE retrieval, in execution order."""
    START = "start"
    GENERATING = "generating_hypothetical"
    EMBEDDING = "embedding_hypothetical"
    SEARCHING = "searching_index"
    SYNTHESIZING = "synthesizing_answer"
    DONE = "done"
    ERROR = "error"


class CodeHydeError(Exception):
    """Base class for every error raised by the retrieval pipeline."""


class ChunkingError(CodeHydeError):
    """A source file could not be decoded or parsed into chunks."""

    def __init__(self, message: str, source_id: Optional[str] = None):
        super().__init__(message)
        self.source_id = source_id


class EmbeddingError(CodeHydeError):
    """
    Dimension mismatch, non-finite component, count mismatch between a batch's
    input and output, or an upstream embedding failure.
    """


class EmbeddingBuildError(CodeHydeError):
    """First EmbeddingError of a corpus build. The whole build is abandoned."""

    def __init__(self, message: str, batch_index: Optional[int] = None):
        super().__init__(message)
        self.batch_index = batch_index


class IndexBuildPrecondition(CodeHydeError, ValueError):
    """Vectors and metadata disagree in length or shape. Programming error, never retried."""


class RetrievalError(CodeHydeError):
    """A HyDE stage failed. `stage` says which one; the upstream error is `__cause__`."""

    def __init__(self, message: str, stage: HydeStage):
        super().__init__(f"[{stage.value}] {message}")
        self.stage = stage


class HypotheticalGenerationError(RetrievalError):
    """The hypothetical document came back empty or the chat call failed."""

    def __init__(self, message: str):
        super().__init__(message, HydeStage.GENERATING)


class StreamError(CodeHydeError):
    """Failure after streaming began. Raised from inside the answer stream."""
