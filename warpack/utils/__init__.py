"""Utility modules for common operations."""

from warpack.utils.hashing import compute_sha256
from warpack.utils.paths import ensure_dir, find_files, normalize_logical_path

__all__ = [
    "compute_sha256",
    "ensure_dir",
    "find_files",
    "normalize_logical_path",
]
