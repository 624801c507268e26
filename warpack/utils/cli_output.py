"""JSON output wrapper for CLI commands."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from warpack import __version__


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Example:
        >>> json_response("classes_packaging", 1, outcomes=[])
        {
          "schema_id": "classes_packaging",
          "schema_version": 1,
          "producer": "warpack-0.1.0",
          "produced_at": "2026-10-18T10:30:00+00:00",
          "outcomes": []
        }
    """
    wrapped = {
        "schema_id": schema_id,
        "schema_version": schema_version,
        "producer": f"warpack-{__version__}",
        "produced_at": datetime.now(UTC).isoformat(),
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str)
