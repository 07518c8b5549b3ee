"""Deterministic source file discovery."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from ..logging_config import get_logger

logger = get_logger(__name__)


def walk_files(
    root: Path,
    exclude: Iterable[str],
    extensions: Iterable[str],
    skip_fragments: Iterable[str] = (),
) -> list[Path]:
    """Enumerate source files under ``root``.

    Directories whose basename is in ``exclude`` are pruned at any depth.
    Files are kept when their suffix is one of ``extensions`` and their
    root-relative path contains none of ``skip_fragments``. Directory and
    file names are visited in sorted order, so two walks over an unchanged
    tree return the same list.
    """
    excluded = set(exclude)
    ext_set = set(extensions)
    fragments = tuple(skip_fragments)

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.suffix not in ext_set:
                continue
            if is_skipped(path, root, fragments):
                logger.debug(f"Skipped (fragment): {path}")
                continue
            files.append(path)

    logger.debug(f"Discovered {len(files)} files under {root}")
    return files


def relative_posix(path: Path, root: Path) -> str:
    """Root-relative posix path with a leading slash, so fragments can anchor on "/"."""
    try:
        relative = path.relative_to(root)
    except ValueError:
        relative = Path(path.name)
    return "/" + relative.as_posix()


def is_skipped(path: Path, root: Path, skip_fragments: Iterable[str]) -> bool:
    posix = relative_posix(path, root)
    return any(fragment in posix for fragment in skip_fragments)


def is_excluded(path: Path, root: Path, exclude: Iterable[str]) -> bool:
    """True when any directory between ``root`` and ``path`` is excluded."""
    try:
        relative = path.relative_to(root)
    except ValueError:
        return False
    excluded = set(exclude)
    return any(part in excluded for part in relative.parts[:-1])


def read_source(path: Path) -> str | None:
    """Read a source file, or return None when it cannot be read."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Skipped (unreadable): {path}: {e}")
        return None
