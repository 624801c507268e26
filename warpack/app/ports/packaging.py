"""Packaging DTOs: contributors, packaging modes and emitted instructions."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from warpack.app.ports.naming import ArtifactCoordinates

CURRENT_BUILD_ID = "currentBuild"
CLASSES_PATH = "WEB-INF/classes/"
LIB_PATH = "WEB-INF/lib/"


class PackagingMode(str, Enum):
    """How compiled classes end up in the web application."""

    COPY_FILES = "copy_files"
    ARCHIVE_AS_JAR = "archive_as_jar"

    @classmethod
    def from_flag(cls, archive_classes: bool | PackagingMode) -> PackagingMode:
        if isinstance(archive_classes, cls):
            return archive_classes
        return cls.ARCHIVE_AS_JAR if archive_classes else cls.COPY_FILES


class Contributor(BaseModel):
    """Source of files merged into the assembled web application.

    Either the project being built (``currentBuild``) or one of its overlays.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Overlay identifier")
    coordinates: ArtifactCoordinates | None = Field(
        default=None, description="Build coordinates used to name archives"
    )

    @classmethod
    def current_build(cls, coordinates: ArtifactCoordinates | None = None) -> Contributor:
        return cls(id=CURRENT_BUILD_ID, coordinates=coordinates)

    def __str__(self) -> str:
        return self.id


class Skip(BaseModel):
    """Nothing to package for this contributor."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["skip"] = "skip"
    reason: str = Field(..., description="Why the task produced no work")


class CopySet(BaseModel):
    """Copy ``relative_paths`` from ``source_dir`` under ``destination_subpath``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["copy"] = "copy"
    source_dir: Path
    relative_paths: frozenset[str]
    destination_subpath: str = Field(default=CLASSES_PATH.rstrip("/"))

    def target_paths(self) -> list[str]:
        """Logical paths written by this copy, sorted."""
        prefix = self.destination_subpath.rstrip("/")
        return [f"{prefix}/{relative}" for relative in sorted(self.relative_paths)]


class ArchiveFile(BaseModel):
    """Bundle ``source_dir`` into one archive at ``destination_archive_path``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["archive"] = "archive"
    source_dir: Path
    destination_archive_path: str


Instruction = Annotated[Skip | CopySet | ArchiveFile, Field(discriminator="kind")]
