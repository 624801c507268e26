"""Jar archiver for compiled classes directories."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

from warpack import __version__
from warpack.app.ports import ArchiverPort
from warpack.utils.paths import find_files

MANIFEST_PATH = "META-INF/MANIFEST.MF"
# Zip entries cannot be dated before 1980-01-01.
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def _zip_date_time(timestamp: datetime) -> tuple[int, int, int, int, int, int]:
    date_time = (
        timestamp.year,
        timestamp.month,
        timestamp.day,
        timestamp.hour,
        timestamp.minute,
        timestamp.second,
    )
    return max(date_time, _ZIP_EPOCH)


class JarClassesArchiver(ArchiverPort):
    """Create jar archives from classes directories.

    Entries are written in sorted order after the manifest. When a timestamp
    is given every entry carries it, so identical inputs give identical bytes.
    """

    def __init__(self, created_by: str | None = None) -> None:
        self._created_by = created_by or f"warpack {__version__}"

    def archive(
        self,
        source_dir: Path,
        destination: Path,
        *,
        timestamp: datetime | None = None,
    ) -> Path:
        if not source_dir.exists():
            raise FileNotFoundError(f"Classes directory not found: {source_dir}")
        if not source_dir.is_dir():
            raise ValueError(f"Classes source must be a directory: {source_dir}")

        dest_path = Path(destination)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        date_time = _zip_date_time(timestamp) if timestamp is not None else None

        with ZipFile(dest_path, "w", compression=ZIP_DEFLATED) as archive:
            archive.writestr(
                self._entry(MANIFEST_PATH, date_time),
                self._manifest(),
            )
            for path in find_files(source_dir, recursive=True, follow_symlinks=True):
                arcname = path.relative_to(source_dir).as_posix()
                if arcname == MANIFEST_PATH:
                    continue
                if date_time is None:
                    archive.write(path, arcname=arcname)
                else:
                    archive.writestr(self._entry(arcname, date_time), path.read_bytes())

        return dest_path

    def _manifest(self) -> str:
        return f"Manifest-Version: 1.0\r\nCreated-By: {self._created_by}\r\n\r\n"

    @staticmethod
    def _entry(name: str, date_time: tuple[int, int, int, int, int, int] | None) -> ZipInfo:
        info = ZipInfo(filename=name, date_time=date_time or _ZIP_EPOCH)
        info.compress_type = ZIP_DEFLATED
        info.external_attr = 0o644 << 16
        return info
