from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

from .fs import read_text_or_none

DEFAULT_EXCLUDED_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "build",
        ".gradle",
        "__pycache__",
        ".venv",
        ".mypy_cache",
        ".ruff_cache",
        ".hypothesis",
    }
)


def iter_source_files(root: Path, excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS) -> Iterator[Path]:
    """Yield every regular file under ``root`` in sorted order, pruning excluded directory names."""
    excluded = frozenset(excluded_dirs)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in excluded)
        base = Path(dirpath)
        for name in sorted(filenames):
            path = base / name
            if path.is_file() and not path.is_symlink():
                yield path


def iter_sources(root: Path, excluded_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS) -> Iterator[tuple[Path, str | None]]:
    for path in iter_source_files(root, excluded_dirs):
        yield path, read_text_or_none(path)
