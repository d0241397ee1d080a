# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-09-02
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import List


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_list(name: str, default: List[str]) -> List[str]:
    """Comma separated list, blanks dropped."""
    v = _env(name, "")
    if v == "":
        return list(default)
    return [part.strip() for part in v.split(",") if part.strip()]


# -----------------------------------------------------------------------------
# Chat (OpenAI-compatible endpoint, Ollama by default)
# -----------------------------------------------------------------------------
DEFAULT_CHAT_BASE_URL = "http://localhost:11434/v1"
DEFAULT_CHAT_MODEL = "qwen2.5-coder:32b"
DEFAULT_CHAT_TEMPERATURE = 0.0
DEFAULT_CHAT_MAX_TOKENS = 1024


# -----------------------------------------------------------------------------
# Embeddings
# -----------------------------------------------------------------------------
DEFAULT_EMBED_BASE_URL = "http://localhost:11434/v1"
DEFAULT_EMBED_MODEL = "jina/jina-embeddings-v2-small-en"
DEFAULT_EMBED_BATCH_SIZE = 32
DEFAULT_EMBED_MAX_CONCURRENCY = 4
DEFAULT_EMBED_MAX_RETRIES = 3

# Local servers ignore the key but the OpenAI client refuses an empty one
DEFAULT_LOCAL_API_KEY = "ollama"


# -----------------------------------------------------------------------------
# Corpus / chunking
# -----------------------------------------------------------------------------
DEFAULT_CORPUS_ROOT = "./data"
DEFAULT_FILE_EXTENSIONS = [".go"]
DEFAULT_CORPUS_LANGUAGE = "Go"
DEFAULT_CHUNK_MAX_CHARS = 1000


# -----------------------------------------------------------------------------
# Index / retrieval
# -----------------------------------------------------------------------------
INDEX_BACKENDS = ("exact", "hnsw")
DEFAULT_INDEX_BACKEND = "exact"
DEFAULT_K = 5
