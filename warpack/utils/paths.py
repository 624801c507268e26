"""Path utilities for directory and file operations."""

from __future__ import annotations

from pathlib import Path, PurePosixPath


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists, creating if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def find_files(
    root: Path,
    pattern: str = "*",
    recursive: bool = True,
    follow_symlinks: bool = False,
) -> list[Path]:
    """Find regular files matching pattern in directory."""
    if not root.is_dir():
        return []

    if recursive:
        matches = root.rglob(pattern)
    else:
        matches = root.glob(pattern)

    files = []
    for path in matches:
        if path.is_symlink() and not follow_symlinks:
            continue

        if path.is_file():
            files.append(path)

    return sorted(files)


def normalize_logical_path(path: str | Path) -> str:
    """Return ``path`` as a forward-slash path relative to an output root.

    Backslashes are treated as separators so Windows-style inputs map to the
    same logical path. Leading ``./`` and ``/`` segments are dropped.
    """
    text = str(path).replace("\\", "/")
    parts = [part for part in PurePosixPath(text).parts if part not in ("/", ".")]
    if not parts:
        raise ValueError(f"Logical path is empty: {path!r}")
    if ".." in parts:
        raise ValueError(f"Logical path escapes the output root: {path!r}")

    normalized = "/".join(parts)
    if text.endswith("/"):
        normalized += "/"
    return normalized


def same_directory(first: Path, second: Path) -> bool:
    """Return True when both paths resolve to the same location."""
    return first.resolve() == second.resolve()
