"""Archive file name resolution from an output file name template."""

from __future__ import annotations

import re

from warpack.app.errors import ArchiveNameError
from warpack.app.ports import ArtifactCoordinates, FinalNamePort
from warpack.config import DEFAULT_OUTPUT_FILE_NAME_MAPPING

_TOKEN = re.compile(r"@\{([^}@]*)\}@")


class TemplateFinalNameResolver(FinalNamePort):
    """Interpolate ``@{token}@`` placeholders with artifact coordinates.

    Supported tokens: ``groupId``, ``artifactId``, ``version``, ``classifier``,
    ``dashClassifier``, ``dashClassifier?`` and ``extension``. The ``?`` form
    expands to nothing when the artifact has no classifier.
    """

    def __init__(self, mapping: str = DEFAULT_OUTPUT_FILE_NAME_MAPPING) -> None:
        self._mapping = mapping

    def resolve(self, coordinates: ArtifactCoordinates) -> str:
        values = self._values(coordinates)

        def substitute(match: re.Match[str]) -> str:
            token = match.group(1)
            if token not in values:
                raise ArchiveNameError(
                    f"Could not get the final name of the artifact [{coordinates}]: "
                    f"unknown token '{token}' in '{self._mapping}'",
                    coordinates=coordinates,
                )
            value = values[token]
            if value is None:
                raise ArchiveNameError(
                    f"Could not get the final name of the artifact [{coordinates}]: "
                    f"token '{token}' has no value",
                    coordinates=coordinates,
                )
            return value

        name = _TOKEN.sub(substitute, self._mapping)
        if "@{" in name or not name.strip():
            raise ArchiveNameError(
                f"Could not get the final name of the artifact [{coordinates}]: "
                f"malformed template '{self._mapping}'",
                coordinates=coordinates,
            )
        if "/" in name or "\\" in name:
            raise ArchiveNameError(
                f"Could not get the final name of the artifact [{coordinates}]: "
                f"resolved name '{name}' contains a path separator",
                coordinates=coordinates,
            )
        if name in {".", ".."}:
            raise ArchiveNameError(
                f"Could not get the final name of the artifact [{coordinates}]: "
                f"resolved name '{name}' is not a file name",
                coordinates=coordinates,
            )
        return name

    @staticmethod
    def _values(coordinates: ArtifactCoordinates) -> dict[str, str | None]:
        classifier = coordinates.classifier or None
        dash_classifier = f"-{classifier}" if classifier else ""
        return {
            "groupId": coordinates.group_id,
            "artifactId": coordinates.artifact_id,
            "version": coordinates.version,
            "classifier": classifier,
            "dashClassifier": dash_classifier if classifier else None,
            "dashClassifier?": dash_classifier,
            "extension": coordinates.extension,
        }
