"""Archive naming port interface and artifact coordinate DTOs."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class ArtifactCoordinates(BaseModel):
    """Build coordinates identifying the artifact a contributor produces."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1, description="Group identifier")
    artifact_id: str = Field(..., min_length=1, description="Artifact identifier")
    version: str = Field(..., min_length=1, description="Artifact version")
    classifier: str | None = Field(default=None, description="Optional classifier")
    extension: str = Field(default="jar", description="Archive file extension")

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class FinalNamePort(Protocol):
    """Port interface computing the file name of an artifact archive."""

    def resolve(self, coordinates: ArtifactCoordinates) -> str:
        """Return the archive file name for ``coordinates``.

        Raises:
            ArchiveNameError: If the naming template cannot be interpolated
        """
        ...
