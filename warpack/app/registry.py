"""Registry of logical output paths claimed during one assembly run.

Every path written into the assembled web application is owned by the first
contributor that claimed it. Later claims for the same path, including repeat
claims by the owner, are rejected without touching the existing entry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from warpack.app.ports.packaging import Contributor
from warpack.utils.paths import normalize_logical_path

logger = logging.getLogger(__name__)


def _owner_id(contributor: Contributor | str) -> str:
    if isinstance(contributor, Contributor):
        return contributor.id
    if not contributor:
        raise ValueError("Contributor identifier must not be empty")
    return contributor


class PathRegistry:
    """Maps each claimed logical path to the contributor that claimed it first.

    Create one registry per assembly run and pass it to every packaging task.
    There is no removal operation; claims last for the lifetime of the run.
    """

    def __init__(self) -> None:
        self._owners: dict[str, str] = {}
        self._lock = threading.Lock()

    def register(self, contributor: Contributor | str, path: str) -> bool:
        """Claim ``path`` for ``contributor``.

        Returns:
            True if the path was unclaimed and is now owned by ``contributor``,
            False if any contributor already owns it
        """
        owner = _owner_id(contributor)
        logical_path = normalize_logical_path(path)

        with self._lock:
            existing = self._owners.get(logical_path)
            if existing is not None:
                logger.debug(
                    "Path %s already registered by %s; rejecting claim from %s",
                    logical_path,
                    existing,
                    owner,
                )
                return False
            self._owners[logical_path] = owner

        logger.debug("Registered %s for %s", logical_path, owner)
        return True

    def is_registered(self, path: str) -> bool:
        return normalize_logical_path(path) in self._owners

    def owner_of(self, path: str) -> str | None:
        """Return the contributor id owning ``path``, or None when unclaimed."""
        return self._owners.get(normalize_logical_path(path))

    def paths_for(self, contributor: Contributor | str) -> list[str]:
        """Return the paths claimed by ``contributor`` in registration order."""
        owner = _owner_id(contributor)
        with self._lock:
            return [path for path, path_owner in self._owners.items() if path_owner == owner]

    def contributors(self) -> list[str]:
        """Return contributor ids in the order they first claimed a path."""
        with self._lock:
            return list(dict.fromkeys(self._owners.values()))

    def snapshot(self) -> dict[str, str]:
        """Return a copy of the path to owner mapping."""
        with self._lock:
            return dict(self._owners)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.is_registered(path)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._owners)
