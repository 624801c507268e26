"""warpack CLI application with Typer."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from warpack import __version__
from warpack.app import PathRegistry
from warpack.app.errors import PackagingError
from warpack.app.ports import ArchiveFile, ArtifactCoordinates, Contributor, CopySet
from warpack.bootstrap import bootstrap_application
from warpack.config import get_settings, set_settings

app = typer.Typer(
    name="warpack",
    help="Package compiled classes into an exploded web application",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"warpack version {__version__}")
        raise typer.Exit()


def _parse_overlay(value: str) -> tuple[str, Path]:
    overlay_id, separator, directory = value.partition("=")
    if not separator or not overlay_id.strip() or not directory.strip():
        raise typer.BadParameter(f"Overlay must be given as ID=DIRECTORY, got '{value}'")
    return overlay_id.strip(), Path(directory.strip())


def _describe(instruction: object) -> dict[str, object]:
    if isinstance(instruction, CopySet):
        return {
            "action": "copy",
            "destination": instruction.destination_subpath,
            "files": sorted(instruction.relative_paths),
        }
    if isinstance(instruction, ArchiveFile):
        return {"action": "archive", "destination": instruction.destination_archive_path}
    return {"action": "skip", "reason": getattr(instruction, "reason", "")}


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Override data directory"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """warpack - classes packaging for web application assembly."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = get_settings()
    if data_dir:
        settings.data_dir = data_dir
    set_settings(settings)


@app.command("classes")
def classes_command(
    classes_dir: Annotated[
        Path,
        typer.Argument(help="Compiled classes directory of the project"),
    ],
    webapp_dir: Annotated[
        Path,
        typer.Option("--webapp-dir", "-w", help="Root of the exploded web application"),
    ],
    group_id: Annotated[str, typer.Option("--group-id", help="Project group id")],
    artifact_id: Annotated[str, typer.Option("--artifact-id", help="Project artifact id")],
    project_version: Annotated[
        str, typer.Option("--project-version", help="Project version")
    ],
    classifier: Annotated[
        str | None,
        typer.Option("--classifier", help="Classifier appended to the archive name"),
    ] = None,
    archive: Annotated[
        bool | None,
        typer.Option(
            "--archive/--no-archive",
            help="Bundle classes into WEB-INF/lib instead of copying into WEB-INF/classes",
        ),
    ] = None,
    overlays: Annotated[
        list[str] | None,
        typer.Option(
            "--overlay",
            help="Overlay classes directory as ID=DIRECTORY, processed in order after the project",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Copy or archive compiled classes into the web application.

    Example:
        warpack classes target/classes -w target/webapp \\
            --group-id org.example --artifact-id app --project-version 1.0 --archive
    """
    settings = get_settings()
    container = bootstrap_application(settings=settings)

    try:
        coordinates = ArtifactCoordinates(
            group_id=group_id,
            artifact_id=artifact_id,
            version=project_version,
            classifier=classifier,
        )
    except ValidationError as exc:
        fields = ", ".join(str(error["loc"][0]) for error in exc.errors())
        raise typer.BadParameter(f"Invalid artifact coordinates: {fields}") from exc
    contributors: list[tuple[Contributor, Path]] = [
        (Contributor.current_build(coordinates), classes_dir)
    ]
    for raw_overlay in overlays or []:
        overlay_id, overlay_dir = _parse_overlay(raw_overlay)
        contributors.append((Contributor(id=overlay_id, coordinates=coordinates), overlay_dir))

    # One registry per invocation: the whole command is a single assembly run.
    registry = PathRegistry()
    outcomes: list[dict[str, object]] = []
    warnings: list[str] = []
    resources: list[str] = []

    for contributor, source_dir in contributors:
        context = container.new_context(
            contributor,
            registry,
            classes_dir=source_dir,
            webapp_dir=webapp_dir,
            archive_classes=archive,
        )
        try:
            instruction = container.classes_service.perform(context)
        except PackagingError as exc:
            typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

        outcomes.append({"contributor": contributor.id, **_describe(instruction)})
        warnings.extend(context.warnings)
        for path in context.resources:
            if path not in resources:
                resources.append(path)

    if json_output:
        from warpack.utils.cli_output import json_response

        typer.echo(
            json_response(
                "classes_packaging",
                1,
                webapp_dir=str(webapp_dir),
                outcomes=outcomes,
                resources=resources,
                warnings=warnings,
                registry=registry.snapshot(),
            )
        )
        return

    for message in warnings:
        typer.secho(f"WARNING: {message}", fg=typer.colors.YELLOW)

    for outcome in outcomes:
        action = outcome["action"]
        if action == "copy":
            files = outcome["files"]
            typer.secho(
                f"[copied] {outcome['contributor']}: {len(files)} file(s) "  # type: ignore[arg-type]
                f"-> {outcome['destination']}",
                fg=typer.colors.GREEN,
            )
        elif action == "archive":
            typer.secho(
                f"[archived] {outcome['contributor']} -> {outcome['destination']}",
                fg=typer.colors.GREEN,
            )
        else:
            typer.echo(f"[skipped] {outcome['contributor']}: {outcome['reason']}")
