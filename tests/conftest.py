"""Pytest configuration and fixtures."""

import gc
import shutil
import tempfile
import time
from collections.abc import Generator
from pathlib import Path

import pytest

from warpack.app import ClassesPackagingService, PathRegistry
from warpack.app.adapters import FileSystemStorageAdapter, TemplateFinalNameResolver
from warpack.app.ports import ArtifactCoordinates, Contributor
from warpack.bootstrap import NoOpLedger
from warpack.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        gc.collect()
        time.sleep(0.1)
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated warpack settings scoped to tests."""

    import warpack.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    data_dir = temp_dir / "appdata"
    data_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(
        data_dir=data_dir,
        audit_enabled=True,
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture
def classes_dir(temp_dir: Path) -> Path:
    """Compiled classes directory holding ``a.txt`` and ``b/c.txt``."""
    root = temp_dir / "classes"
    (root / "b").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "b" / "c.txt").write_text("charlie")
    return root


@pytest.fixture
def webapp_dir(temp_dir: Path) -> Path:
    return temp_dir / "webapp"


@pytest.fixture
def coordinates() -> ArtifactCoordinates:
    return ArtifactCoordinates(group_id="org.example", artifact_id="app", version="1.0")


@pytest.fixture
def project(coordinates: ArtifactCoordinates) -> Contributor:
    return Contributor.current_build(coordinates)


@pytest.fixture
def registry() -> PathRegistry:
    return PathRegistry()


@pytest.fixture
def service() -> ClassesPackagingService:
    return ClassesPackagingService(
        storage_port=FileSystemStorageAdapter(),
        name_resolver=TemplateFinalNameResolver(),
        ledger_port=NoOpLedger(),
    )
