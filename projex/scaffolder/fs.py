"""Async file-system helpers for template materialization.

Blocking calls are pushed to a worker thread with ``asyncio.to_thread`` so
the event loop stays responsive.  Failures that abort materialization are
re-raised as :class:`~projex.scaffolder.errors.TemplateIOError` carrying the
path involved.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path

from projex.utils import Logger, quiet_logger

from .errors import TemplateIOError

# Copied byte-for-byte, never rendered.
BINARY_EXTENSIONS: frozenset[str] = frozenset({
    ".png", ".jpg", ".jpeg", ".ico", ".gif", ".pdf",
    ".woff", ".woff2", ".ttf", ".otf", ".svg",
})


def is_binary_file(path: str | Path) -> bool:
    return Path(path).suffix.lower() in BINARY_EXTENSIONS


async def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    try:
        await asyncio.to_thread(dir_path.mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        raise TemplateIOError("create directory", dir_path, exc) from exc
    return dir_path


async def path_exists(path: str | Path) -> bool:
    return await asyncio.to_thread(Path(path).exists)


async def is_directory(path: str | Path) -> bool:
    return await asyncio.to_thread(Path(path).is_dir)


async def is_dir_empty(path: str | Path) -> bool:
    """Return ``True`` if *path* has no entries (or cannot be listed)."""

    def _empty() -> bool:
        try:
            with os.scandir(path) as entries:
                return next(entries, None) is None
        except OSError:
            return True

    return await asyncio.to_thread(_empty)


async def read_text_file(path: str | Path) -> str:
    file_path = Path(path)
    try:
        return await asyncio.to_thread(_read, file_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateIOError("read file", file_path, exc) from exc


def _read(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


async def write_text_file(path: str | Path, content: str) -> None:
    """Write *content* to *path*, creating parent directories first."""
    file_path = Path(path)
    await ensure_dir(file_path.parent)
    try:
        await asyncio.to_thread(_write, file_path, content)
    except OSError as exc:
        raise TemplateIOError("write file", file_path, exc) from exc


def _write(path: Path, content: str) -> None:
    # newline="" keeps line endings exactly as rendered.
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)


async def copy_file(src: str | Path, dest: str | Path) -> None:
    dest_path = Path(dest)
    await ensure_dir(dest_path.parent)
    try:
        await asyncio.to_thread(shutil.copyfile, src, dest_path)
    except OSError as exc:
        raise TemplateIOError(f"copy file from {src} to", dest_path, exc) from exc


async def walk_dir(root: str | Path, logger: Logger | None = None) -> list[Path]:
    """Return every regular file under *root*, depth first, sorted per level.

    Each directory is entered at most once, keyed on its resolved path, so a
    symlink pointing back up the tree cannot loop forever.  A directory that
    cannot be listed is reported and skipped.
    """
    log = logger or quiet_logger()
    files: list[Path] = []
    visited: set[str] = set()

    async def _walk(current: Path) -> None:
        key = os.path.realpath(current)
        if key in visited:
            log.debug(f"Skipping already visited directory: {current}")
            return
        visited.add(key)

        try:
            entries = await asyncio.to_thread(_list_dir, current)
        except OSError as exc:
            log.warn(f"Failed to read directory {current}: {exc}")
            return

        for entry in entries:
            if entry.is_dir():
                await _walk(entry)
            elif entry.is_file():
                files.append(entry)

    await _walk(Path(root))
    return files


def _list_dir(path: Path) -> list[Path]:
    return sorted(path.iterdir(), key=lambda p: p.name)
