# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-08-27
# Description: CodeFileLoader
# -----------------------------------------------------------------------------
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from utility.logging_utils import get_class_logger

SKIP_DIRS = frozenset({
    ".git", ".hg", ".svn", ".idea", ".vscode",
    "vendor", "node_modules", "__pycache__", ".venv", "venv",
    "build", "dist", "target",
})


def _normalise_extensions(extensions: Iterable[str]) -> Tuple[str, ...]:
    return tuple(sorted({e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions if e}))


class CodeFileLoader:
    """
    Discovers source files under a root folder and reads them as text.
    Hidden entries and common vendor/build folders are skipped, only the
    configured extensions are kept, and traversal order is sorted so repeated
    runs produce the same file order.
    """

    def __init__(
            self,
            root: str | Path,
            extensions: Iterable[str] = (".go",),
            *,
            logger: logging.Logger | None = None,
    ) -> None:
        """
        :param root: Base folder of the corpus.
        :param extensions: File extensions to keep, with or without the leading dot.
        """
        self.root = Path(root)
        self.extensions = _normalise_extensions(extensions)
        self.logger = logger or get_class_logger(self.__class__)

    def _is_skipped(self, path: Path) -> bool:
        rel_parts = path.relative_to(self.root).parts
        return any(part.startswith(".") or part in SKIP_DIRS for part in rel_parts[:-1]) \
            or rel_parts[-1].startswith(".")

    def iter_paths(self) -> List[Path]:
        if not self.root.exists():
            raise FileNotFoundError(f"Corpus root does not exist: {self.root}")
        if not self.root.is_dir():
            raise NotADirectoryError(f"Corpus root is not a directory: {self.root}")

        return [
            p for p in sorted(self.root.rglob("*"))
            if p.is_file() and not self._is_skipped(p)
        ]

    def load_files(self, extensions: Optional[Iterable[str]] = None) -> List[Tuple[str, str]]:
        """
        Load matching files.

        :return: List of tuples (file_path_str, file_text), paths as given under root.
        """
        wanted = _normalise_extensions(extensions) if extensions is not None else self.extensions
        self.logger.info("Loading source files from %s (extensions=%s)", self.root, list(wanted))

        files: List[Tuple[str, str]] = []
        skipped = 0
        for path in self.iter_paths():
            if path.suffix.lower() not in wanted:
                self.logger.debug("Skipping non-matching file: %s", path)
                skipped += 1
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (UnicodeDecodeError, OSError) as e:
                self.logger.warning("Failed to read file %s: %s", path, e)
                skipped += 1
                continue
            files.append((str(path), text))

        self.logger.info("Loaded %d source files, skipped %d", len(files), skipped)
        return files
