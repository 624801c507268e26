"""Configuration management with Pydantic and XDG base directory support."""

import os
import sys
from datetime import UTC, datetime
from pathlib import Path

from pydantic import Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OUTPUT_FILE_NAME_MAPPING = "@{artifactId}@-@{version}@@{dashClassifier?}@.@{extension}@"


def get_xdg_data_home() -> Path:
    """Get XDG_DATA_HOME directory, defaulting to ~/.local/share."""
    xdg_data = os.getenv("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


class Settings(BaseSettings):
    """warpack configuration settings.

    Precedence: CLI flag > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="WARPACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Assembly layout
    webapp_dir: Path = Field(
        default=Path("target") / "webapp",
        description="Root of the exploded web application being assembled",
    )

    classes_dir: Path = Field(
        default=Path("target") / "classes",
        description="Compiled classes directory of the current project",
    )

    archive_classes: bool = Field(
        default=False,
        description="Bundle compiled classes into a jar under WEB-INF/lib instead of copying them",
    )

    output_file_name_mapping: str = Field(
        default=DEFAULT_OUTPUT_FILE_NAME_MAPPING,
        description="Template used to name archives placed in WEB-INF/lib",
    )

    output_timestamp: str | None = Field(
        default=None,
        description="ISO 8601 timestamp or epoch seconds applied to archive entries",
    )

    # Audit settings
    data_dir: Path | None = Field(
        default=None,
        description="Override data directory (defaults to XDG_DATA_HOME/warpack)",
    )

    audit_enabled: bool = Field(
        default=False,
        description="Enable append-only audit ledger",
    )

    _resolved_data_dir: Path | None = PrivateAttr(default=None)
    _data_dir_warning_emitted: bool = PrivateAttr(default=False)

    @field_validator("output_file_name_mapping")
    @classmethod
    def _validate_mapping(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("output_file_name_mapping must not be blank")
        return value

    @field_validator("output_timestamp")
    @classmethod
    def _validate_timestamp(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        parse_output_timestamp(value)
        return value.strip()

    def get_output_datetime(self) -> datetime | None:
        """Return the configured archive entry timestamp, if any."""
        if self.output_timestamp is None:
            return None
        return parse_output_timestamp(self.output_timestamp)

    def get_data_dir(self) -> Path:
        """Get the data directory, creating if necessary."""
        if self._resolved_data_dir is not None:
            return self._resolved_data_dir

        if self.data_dir:
            data_dir = self.data_dir
            data_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = data_dir
            return data_dir

        primary_dir = get_xdg_data_home() / "warpack"
        try:
            primary_dir.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = primary_dir
            return primary_dir
        except PermissionError as exc:
            fallback = Path.cwd() / ".warpack-data"
            fallback.mkdir(parents=True, exist_ok=True)
            self._resolved_data_dir = fallback
            if not self._data_dir_warning_emitted:
                print(
                    f"Warning: cannot create data directory at {primary_dir} ({exc}). "
                    f"Using local '{fallback}' instead. Pass --data-dir to override.",
                    file=sys.stderr,
                )
                self._data_dir_warning_emitted = True
            return fallback

    def get_audit_path(self) -> Path:
        """Get path to audit ledger file."""
        return self.get_data_dir() / "audit.jsonl"


def parse_output_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp or integer epoch seconds into an aware datetime.

    Raises:
        ValueError: If ``value`` is neither format
    """
    text = value.strip()
    if text.lstrip("-").isdigit():
        return datetime.fromtimestamp(int(text), tz=UTC)

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(
            f"Invalid output timestamp '{value}': expected ISO 8601 or epoch seconds"
        ) from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
