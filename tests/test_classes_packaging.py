"""Tests for the classes packaging decision and its execution."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

import pytest

from warpack.app import AssemblyContext, ClassesPackagingService, PathRegistry
from warpack.app.adapters import (
    FileSystemStorageAdapter,
    JarClassesArchiver,
    TemplateFinalNameResolver,
)
from warpack.app.errors import ArchiveNameError, PackagingExecutionError
from warpack.app.ports import ArchiveFile, Contributor, CopySet, PackagingMode, Skip
from warpack.audit.ledger import AuditLedger
from warpack.bootstrap import NoOpLedger


def _context(
    contributor: Contributor,
    registry: PathRegistry,
    classes_dir: Path,
    webapp_dir: Path,
    *,
    archive: bool,
    storage: FileSystemStorageAdapter | None = None,
) -> AssemblyContext:
    return AssemblyContext(
        webapp_output_root=webapp_dir,
        classes_input_directory=classes_dir,
        archive_classes=archive,
        contributor=contributor,
        registry=registry,
        storage=storage or FileSystemStorageAdapter(),
        archiver=JarClassesArchiver(),
    )


class FailingStorage(FileSystemStorageAdapter):
    """Storage adapter whose copies always fail."""

    def copy_file(self, src: Path, dst: Path) -> None:
        raise PermissionError(f"read-only destination: {dst}")


class TestDecide:
    """Decision outcomes without executing instructions."""

    def test_missing_input_is_skipped(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        temp_dir: Path,
        webapp_dir: Path,
    ) -> None:
        for archive_mode in (False, True):
            instruction = service.decide(
                project, temp_dir / "missing", webapp_dir, archive_mode, registry
            )
            assert isinstance(instruction, Skip)

        assert (webapp_dir / "WEB-INF" / "classes").is_dir()
        assert len(registry) == 0

    def test_input_equal_to_webapp_classes_is_skipped(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        webapp_dir: Path,
    ) -> None:
        webapp_classes = webapp_dir / "WEB-INF" / "classes"
        webapp_classes.mkdir(parents=True)
        (webapp_classes / "a.txt").write_text("alpha")

        for archive_mode in (False, True):
            instruction = service.decide(
                project, webapp_classes, webapp_dir, archive_mode, registry
            )
            assert isinstance(instruction, Skip)
            assert "webapp classes directory" in instruction.reason

        assert len(registry) == 0

    def test_copy_mode_collects_every_file(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        instruction = service.decide(project, classes_dir, webapp_dir, False, registry)

        assert isinstance(instruction, CopySet)
        assert instruction.source_dir == classes_dir
        assert instruction.relative_paths == {"a.txt", "b/c.txt"}
        assert instruction.destination_subpath == "WEB-INF/classes"
        assert instruction.target_paths() == ["WEB-INF/classes/a.txt", "WEB-INF/classes/b/c.txt"]

    def test_copy_mode_never_consults_registry(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        registry.register("overlay1", "WEB-INF/classes/a.txt")

        first = service.decide(project, classes_dir, webapp_dir, False, registry)
        second = service.decide(project, classes_dir, webapp_dir, False, registry)

        assert isinstance(first, CopySet)
        assert first == second
        assert registry.snapshot() == {"WEB-INF/classes/a.txt": "overlay1"}

    def test_copy_mode_with_empty_directory(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        temp_dir: Path,
        webapp_dir: Path,
    ) -> None:
        empty = temp_dir / "empty-classes"
        empty.mkdir()

        instruction = service.decide(project, empty, webapp_dir, False, registry)

        assert isinstance(instruction, CopySet)
        assert instruction.relative_paths == frozenset()

    def test_archive_mode_claims_target(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        instruction = service.decide(project, classes_dir, webapp_dir, True, registry)

        assert instruction == ArchiveFile(
            source_dir=classes_dir, destination_archive_path="WEB-INF/lib/app-1.0.jar"
        )
        assert registry.owner_of("WEB-INF/lib/app-1.0.jar") == "currentBuild"

    def test_archive_mode_skips_path_claimed_by_another_contributor(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        registry.register("overlay1", "WEB-INF/lib/app-1.0.jar")
        warnings: list[str] = []

        instruction = service.decide(
            project, classes_dir, webapp_dir, True, registry, warn=warnings.append
        )

        assert isinstance(instruction, Skip)
        assert "WEB-INF/lib/app-1.0.jar" in instruction.reason
        assert warnings == [
            "Could not generate archive classes file [WEB-INF/lib/app-1.0.jar] "
            "has already been copied."
        ]
        assert registry.owner_of("WEB-INF/lib/app-1.0.jar") == "overlay1"

    def test_archive_mode_rerun_is_idempotent(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        first = service.decide(project, classes_dir, webapp_dir, True, registry)
        with caplog.at_level(logging.WARNING, logger="warpack.app.classes_packaging"):
            second = service.decide(project, classes_dir, webapp_dir, True, registry)

        assert isinstance(first, ArchiveFile)
        assert isinstance(second, Skip)
        assert "[WEB-INF/lib/app-1.0.jar]" in caplog.text
        assert len(registry) == 1

    def test_two_contributors_one_archive(
        self,
        service: ClassesPackagingService,
        coordinates,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        overlay = Contributor(id="overlay1", coordinates=coordinates)
        project = Contributor.current_build(coordinates)

        results = [
            service.decide(contributor, classes_dir, webapp_dir, True, registry, warn=lambda _: None)
            for contributor in (overlay, project)
        ]

        assert [type(result) for result in results] == [ArchiveFile, Skip]
        assert registry.owner_of("WEB-INF/lib/app-1.0.jar") == "overlay1"

    def test_name_resolution_failure_is_fatal(
        self,
        coordinates,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        service = ClassesPackagingService(
            storage_port=FileSystemStorageAdapter(),
            name_resolver=TemplateFinalNameResolver("@{artifactId}@-@{buildNumber}@.jar"),
            ledger_port=NoOpLedger(),
        )
        project = Contributor.current_build(coordinates)

        with pytest.raises(ArchiveNameError, match=r"org\.example:app:1\.0") as excinfo:
            service.decide(project, classes_dir, webapp_dir, True, registry)

        assert excinfo.value.coordinates == coordinates
        assert len(registry) == 0

    def test_name_resolution_failure_does_not_affect_copy_mode(
        self,
        coordinates,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        service = ClassesPackagingService(
            storage_port=FileSystemStorageAdapter(),
            name_resolver=TemplateFinalNameResolver("@{buildNumber}@.jar"),
            ledger_port=NoOpLedger(),
        )

        instruction = service.decide(
            Contributor.current_build(coordinates), classes_dir, webapp_dir, False, registry
        )

        assert isinstance(instruction, CopySet)

    def test_missing_coordinates_is_fatal(
        self,
        service: ClassesPackagingService,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        with pytest.raises(ArchiveNameError, match="overlay1"):
            service.decide(Contributor(id="overlay1"), classes_dir, webapp_dir, True, registry)

    def test_packaging_mode_selects_archive(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        archived = service.decide(
            project, classes_dir, webapp_dir, PackagingMode.ARCHIVE_AS_JAR, registry
        )
        copied = service.decide(
            project, classes_dir, webapp_dir, PackagingMode.COPY_FILES, registry
        )

        assert isinstance(archived, ArchiveFile)
        assert archived.destination_archive_path == "WEB-INF/lib/app-1.0.jar"
        assert isinstance(copied, CopySet)
        assert registry.paths_for("currentBuild") == ["WEB-INF/lib/app-1.0.jar"]

    @pytest.mark.parametrize("version", [".", ".."])
    def test_dot_archive_names_are_rejected(
        self,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
        version: str,
    ) -> None:
        service = ClassesPackagingService(
            storage_port=FileSystemStorageAdapter(),
            name_resolver=TemplateFinalNameResolver("@{version}@"),
            ledger_port=NoOpLedger(),
        )
        project = Contributor(
            id="currentBuild",
            coordinates={"group_id": "org.example", "artifact_id": "app", "version": version},
        )

        with pytest.raises(ArchiveNameError) as excinfo:
            service.decide(project, classes_dir, webapp_dir, True, registry)

        assert excinfo.value.coordinates == project.coordinates
        assert len(registry) == 0
        assert not (webapp_dir / "WEB-INF" / "lib").exists()


class TestPerform:
    """Decision plus execution through the assembly context."""

    def test_copy_writes_files_into_webapp_classes(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        context = _context(project, registry, classes_dir, webapp_dir, archive=False)

        instruction = service.perform(context)

        assert isinstance(instruction, CopySet)
        assert (webapp_dir / "WEB-INF" / "classes" / "a.txt").read_text() == "alpha"
        assert (webapp_dir / "WEB-INF" / "classes" / "b" / "c.txt").read_text() == "charlie"
        assert context.resources == []
        assert len(registry) == 0

    def test_copy_overwrites_on_rerun(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        service.perform(_context(project, registry, classes_dir, webapp_dir, archive=False))
        (classes_dir / "a.txt").write_text("alpha v2")

        service.perform(_context(project, registry, classes_dir, webapp_dir, archive=False))

        assert (webapp_dir / "WEB-INF" / "classes" / "a.txt").read_text() == "alpha v2"

    def test_archive_writes_jar_and_records_resource(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        context = _context(project, registry, classes_dir, webapp_dir, archive=True)

        instruction = service.perform(context)

        jar_path = webapp_dir / "WEB-INF" / "lib" / "app-1.0.jar"
        assert isinstance(instruction, ArchiveFile)
        assert context.resources == ["WEB-INF/lib/app-1.0.jar"]
        assert context.file_copies == {"WEB-INF/lib/app-1.0.jar": jar_path}
        with zipfile.ZipFile(jar_path) as archive:
            assert set(archive.namelist()) == {"META-INF/MANIFEST.MF", "a.txt", "b/c.txt"}
            assert archive.read("b/c.txt") == b"charlie"

    def test_symlinked_files_are_packaged(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        classes_dir: Path,
        webapp_dir: Path,
        temp_dir: Path,
    ) -> None:
        shared = temp_dir / "shared.properties"
        shared.write_text("key=value")
        (classes_dir / "linked.properties").symlink_to(shared)

        service.perform(_context(project, PathRegistry(), classes_dir, webapp_dir, archive=False))
        service.perform(_context(project, PathRegistry(), classes_dir, webapp_dir, archive=True))

        copied = webapp_dir / "WEB-INF" / "classes" / "linked.properties"
        assert copied.read_text() == "key=value"
        with zipfile.ZipFile(webapp_dir / "WEB-INF" / "lib" / "app-1.0.jar") as archive:
            assert archive.read("linked.properties") == b"key=value"

    def test_duplicate_archive_warns_and_skips(
        self,
        service: ClassesPackagingService,
        coordinates,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        project = Contributor.current_build(coordinates)
        overlay = Contributor(id="overlay1", coordinates=coordinates)
        service.perform(_context(project, registry, classes_dir, webapp_dir, archive=True))

        overlay_context = _context(overlay, registry, classes_dir, webapp_dir, archive=True)
        instruction = service.perform(overlay_context)

        assert isinstance(instruction, Skip)
        assert overlay_context.resources == []
        assert len(overlay_context.warnings) == 1
        assert "WEB-INF/lib/app-1.0.jar" in overlay_context.warnings[0]

    def test_copy_failure_is_wrapped(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        context = _context(
            project, registry, classes_dir, webapp_dir, archive=False, storage=FailingStorage()
        )

        with pytest.raises(PackagingExecutionError) as excinfo:
            service.perform(context)

        assert isinstance(excinfo.value.__cause__, PermissionError)
        assert str(webapp_dir / "WEB-INF" / "classes") in str(excinfo.value.path)

    def test_archive_failure_is_wrapped(
        self,
        service: ClassesPackagingService,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
    ) -> None:
        # A directory squatting on the jar path makes the archive write fail.
        (webapp_dir / "WEB-INF" / "lib" / "app-1.0.jar").mkdir(parents=True)
        context = _context(project, registry, classes_dir, webapp_dir, archive=True)

        with pytest.raises(PackagingExecutionError, match="app-1.0.jar") as excinfo:
            service.perform(context)

        assert isinstance(excinfo.value.__cause__, OSError)

    def test_outcomes_are_audited(
        self,
        project: Contributor,
        registry: PathRegistry,
        classes_dir: Path,
        webapp_dir: Path,
        temp_dir: Path,
    ) -> None:
        ledger = AuditLedger(temp_dir / "audit" / "audit.jsonl")
        service = ClassesPackagingService(
            storage_port=FileSystemStorageAdapter(),
            name_resolver=TemplateFinalNameResolver(),
            ledger_port=ledger,
        )

        service.perform(_context(project, registry, classes_dir, webapp_dir, archive=True))
        service.perform(_context(project, registry, classes_dir, webapp_dir, archive=True))
        service.perform(_context(project, registry, temp_dir / "nope", webapp_dir, archive=False))

        entries = ledger.read_all()
        assert [entry.operation for entry in entries] == [
            "classes.archive",
            "classes.skip",
            "classes.skip",
        ]
        assert entries[0].outputs == ["WEB-INF/lib/app-1.0.jar"]
        assert entries[0].args["contributor"] == "currentBuild"
        assert ledger.verify() == (True, None)
