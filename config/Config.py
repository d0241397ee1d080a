# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-09-02
# Description: Config
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from dotenv import load_dotenv, find_dotenv

import settings
from settings import _env, _env_float, _env_int, _env_list

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=False)


def _mask(secret: str) -> str | None:
    return f"{secret[:4]}..." if secret else None


@dataclass(frozen=True)
class Config:
    # Chat (OpenAI-compatible)
    chat_base_url: str = settings.DEFAULT_CHAT_BASE_URL
    chat_api_key: str = settings.DEFAULT_LOCAL_API_KEY
    chat_model: str = settings.DEFAULT_CHAT_MODEL
    chat_temperature: float = settings.DEFAULT_CHAT_TEMPERATURE
    chat_max_tokens: int = settings.DEFAULT_CHAT_MAX_TOKENS

    # Embeddings (OpenAI-compatible)
    embed_base_url: str = settings.DEFAULT_EMBED_BASE_URL
    embed_api_key: str = settings.DEFAULT_LOCAL_API_KEY
    embed_model: str = settings.DEFAULT_EMBED_MODEL
    embed_batch_size: int = settings.DEFAULT_EMBED_BATCH_SIZE
    embed_max_concurrency: int = settings.DEFAULT_EMBED_MAX_CONCURRENCY
    embed_max_retries: int = settings.DEFAULT_EMBED_MAX_RETRIES

    # Corpus / chunking
    corpus_root: str = settings.DEFAULT_CORPUS_ROOT
    file_extensions: Tuple[str, ...] = tuple(settings.DEFAULT_FILE_EXTENSIONS)
    corpus_language: str = settings.DEFAULT_CORPUS_LANGUAGE
    chunk_max_chars: int = settings.DEFAULT_CHUNK_MAX_CHARS

    # Index / retrieval
    index_backend: str = settings.DEFAULT_INDEX_BACKEND
    default_k: int = settings.DEFAULT_K

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "chat_base_url": "HYDE_CHAT_BASE_URL",
        "chat_api_key": "HYDE_CHAT_API_KEY",
        "chat_model": "HYDE_CHAT_MODEL",
        "chat_temperature": "HYDE_CHAT_TEMPERATURE",
        "chat_max_tokens": "HYDE_CHAT_MAX_TOKENS",

        "embed_base_url": "HYDE_EMBED_BASE_URL",
        "embed_api_key": "HYDE_EMBED_API_KEY",
        "embed_model": "HYDE_EMBED_MODEL",
        "embed_batch_size": "HYDE_EMBED_BATCH_SIZE",
        "embed_max_concurrency": "HYDE_EMBED_MAX_CONCURRENCY",
        "embed_max_retries": "HYDE_EMBED_MAX_RETRIES",

        "corpus_root": "HYDE_CORPUS_ROOT",
        "file_extensions": "HYDE_FILE_EXTENSIONS",
        "corpus_language": "HYDE_CORPUS_LANGUAGE",
        "chunk_max_chars": "HYDE_CHUNK_MAX_CHARS",

        "index_backend": "HYDE_INDEX_BACKEND",
        "default_k": "HYDE_DEFAULT_K",
    }

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables, falling back to defaults."""
        env = Config.ENV_VARS
        return Config(
            chat_base_url=_env(env["chat_base_url"], settings.DEFAULT_CHAT_BASE_URL),
            chat_api_key=_env(env["chat_api_key"], settings.DEFAULT_LOCAL_API_KEY),
            chat_model=_env(env["chat_model"], settings.DEFAULT_CHAT_MODEL),
            chat_temperature=_env_float(env["chat_temperature"], settings.DEFAULT_CHAT_TEMPERATURE),
            chat_max_tokens=_env_int(env["chat_max_tokens"], settings.DEFAULT_CHAT_MAX_TOKENS),
            embed_base_url=_env(env["embed_base_url"], settings.DEFAULT_EMBED_BASE_URL),
            embed_api_key=_env(env["embed_api_key"], settings.DEFAULT_LOCAL_API_KEY),
            embed_model=_env(env["embed_model"], settings.DEFAULT_EMBED_MODEL),
            embed_batch_size=_env_int(env["embed_batch_size"], settings.DEFAULT_EMBED_BATCH_SIZE),
            embed_max_concurrency=_env_int(env["embed_max_concurrency"], settings.DEFAULT_EMBED_MAX_CONCURRENCY),
            embed_max_retries=_env_int(env["embed_max_retries"], settings.DEFAULT_EMBED_MAX_RETRIES),
            corpus_root=_env(env["corpus_root"], settings.DEFAULT_CORPUS_ROOT),
            file_extensions=tuple(_env_list(env["file_extensions"], settings.DEFAULT_FILE_EXTENSIONS)),
            corpus_language=_env(env["corpus_language"], settings.DEFAULT_CORPUS_LANGUAGE),
            chunk_max_chars=_env_int(env["chunk_max_chars"], settings.DEFAULT_CHUNK_MAX_CHARS),
            index_backend=_env(env["index_backend"], settings.DEFAULT_INDEX_BACKEND).lower(),
            default_k=_env_int(env["default_k"], settings.DEFAULT_K),
        )

    def __post_init__(self):
        """
        Fail fast on unusable values. The message names the env vars so a
        misconfigured deployment can be fixed without reading code.
        """
        bad: List[str] = []

        for name in ("chat_base_url", "chat_api_key", "chat_model",
                     "embed_base_url", "embed_api_key", "embed_model", "corpus_root"):
            if not getattr(self, name):
                bad.append(name)

        for name in ("chat_max_tokens", "embed_batch_size", "embed_max_concurrency",
                     "chunk_max_chars", "default_k"):
            if getattr(self, name) < 1:
                bad.append(name)

        if self.embed_max_retries < 0:
            bad.append("embed_max_retries")
        if self.index_backend not in settings.INDEX_BACKENDS:
            bad.append("index_backend")
        if not self.file_extensions:
            bad.append("file_extensions")

        if bad:
            bad_env_vars = [self.ENV_VARS[f] for f in bad]
            raise ValueError(f"Invalid or missing configuration values: {bad_env_vars}")

    def summary(self) -> Dict[str, Any]:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "chat_base_url": self.chat_base_url,
            "chat_model": self.chat_model,
            "chat_api_key": _mask(self.chat_api_key),
            "embed_base_url": self.embed_base_url,
            "embed_model": self.embed_model,
            "embed_api_key": _mask(self.embed_api_key),
            "embed_batch_size": self.embed_batch_size,
            "embed_max_concurrency": self.embed_max_concurrency,
            "corpus_root": self.corpus_root,
            "file_extensions": list(self.file_extensions),
            "chunk_max_chars": self.chunk_max_chars,
            "index_backend": self.index_backend,
        }
