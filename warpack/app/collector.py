"""Enumerate the files of a directory that a packaging task should handle."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

from warpack.utils.paths import find_files


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern[str]:
    """Translate an Ant-style pattern (``**``, ``*``, ``?``) into a regex.

    A trailing ``/`` is shorthand for ``/**``.
    """
    normalized = pattern.replace("\\", "/").lstrip("/")
    if normalized.endswith("/"):
        normalized += "**"

    segments = normalized.split("/")
    regex: list[str] = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == "**":
            regex.append(".*" if index == last else "(?:.*/)?")
            continue

        for char in segment:
            if char == "*":
                regex.append("[^/]*")
            elif char == "?":
                regex.append("[^/]")
            else:
                regex.append(re.escape(char))
        if index != last:
            regex.append("/")

    return re.compile("".join(regex))


def matches_any(relative_path: str, patterns: Iterable[str]) -> bool:
    """Return True when ``relative_path`` matches one of ``patterns``."""
    return any(_compile_pattern(pattern).fullmatch(relative_path) for pattern in patterns)


class SourceCollector:
    """Collects relative file paths under a root directory.

    Paths always use forward slashes, whatever the host separator.
    """

    def collect(
        self,
        root: Path,
        includes: Iterable[str] | None = None,
        excludes: Iterable[str] | None = None,
    ) -> frozenset[str]:
        """Return the relative paths of regular files under ``root``.

        Args:
            root: Directory to scan recursively
            includes: Ant-style patterns a file must match (all files when None)
            excludes: Ant-style patterns removing files; they win over includes

        Returns:
            Relative paths; empty when ``root`` is missing or has no files
        """
        include_patterns = list(includes) if includes else []
        exclude_patterns = list(excludes) if excludes else []

        collected: set[str] = set()
        for file_path in find_files(Path(root), recursive=True, follow_symlinks=True):
            relative = file_path.relative_to(root).as_posix()
            if include_patterns and not matches_any(relative, include_patterns):
                continue
            if exclude_patterns and matches_any(relative, exclude_patterns):
                continue
            collected.add(relative)

        return frozenset(collected)
