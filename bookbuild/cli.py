"""Command-line interface for the book build.

Provides a Click-based CLI for validating a book source tree and
building its PDF, HTML and ePub editions.
This is the single entry point for all command-line operations.
"""

import json
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path

import click

from .config import BuildConfig
from .domain import BookProject, BuildTarget, Severity
from .errors import BookBuildError, ValidationFailedError
from .infrastructure import ServiceContainer, configure_services
from .repositories import IFileRepository
from .services import (
    AssembleService,
    BuildService,
    ExercisesService,
    ManifestService,
    PandocService,
    RenderService,
    TocService,
    ValidationService,
)
from .utils import configure_from_cli

# Get version from package metadata
try:
    __version__ = get_version("bookbuild")
except PackageNotFoundError:
    __version__ = "0.0.0"  # Fallback version


# Context keys
CONTAINER_KEY = "container"
BOOK_PATH_KEY = "book_path"
MANIFEST_KEY = "manifest"

TARGET_CHOICES = [t.value for t in BuildTarget]


def get_container(ctx: click.Context) -> ServiceContainer:
    """Get the service container from click context."""
    return ctx.obj[CONTAINER_KEY]


def load_project(ctx: click.Context) -> BookProject:
    """Load the book project selected by the global options.

    Exits with status 1 if the manifest is missing or invalid.
    """
    manifest_service = get_container(ctx).resolve(ManifestService)
    try:
        return manifest_service.load_project(ctx.obj[BOOK_PATH_KEY], ctx.obj[MANIFEST_KEY])
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except BookBuildError as e:
        click.echo(f"Error: Invalid manifest - {e}", err=True)
        sys.exit(1)


def parse_targets(targets: tuple[str, ...]) -> list[BuildTarget]:
    """Convert --target values to BuildTargets, keeping order and dropping repeats."""
    return [BuildTarget.parse(t) for t in dict.fromkeys(targets)]


@click.group()
@click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False),
    help="Path to book root directory (default: $BOOK_ROOT or current directory).",
)
@click.option(
    "--manifest",
    "-m",
    type=click.Path(dir_okay=False),
    help="Manifest path, relative to the root (default: src/meta/metadata.yaml).",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.version_option(version=__version__, prog_name="bookbuild")
@click.pass_context
def cli(
    ctx: click.Context,
    root: str | None,
    manifest: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Book build tools - validate and build Pandoc books.

    Reads the book manifest (title, author, cover color, page order)
    and produces PDF, HTML and ePub editions, a preview edition, and a
    ZIP of the companion exercises repository.
    """
    configure_from_cli(verbose=verbose, quiet=quiet)
    ctx.ensure_object(dict)
    if CONTAINER_KEY not in ctx.obj:
        ctx.obj[CONTAINER_KEY] = configure_services()
    ctx.obj[BOOK_PATH_KEY] = Path(root).resolve() if root else BuildConfig.get_book_root().resolve()
    ctx.obj[MANIFEST_KEY] = Path(manifest) if manifest else None


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output the manifest as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show book information.

    Displays the manifest metadata and page counts.
    """
    project = load_project(ctx)
    manifest = project.manifest

    if as_json:
        click.echo(json.dumps(manifest.to_dict(), indent=2))
        return

    click.echo(f"\nTitle: {manifest.title}")
    click.echo(f"Author: {manifest.author}")
    if manifest.date:
        click.echo(f"Date: {manifest.date}")
    if manifest.cover_color:
        click.echo(f"Cover color: #{manifest.cover_color}")
    click.echo(f"Filename stem: {manifest.filename_stem}")
    click.echo(f"TOC depth: {manifest.toc_depth}")
    if manifest.exercises:
        click.echo(f"Exercises: {manifest.exercises.name} ({manifest.exercises.repo})")
    click.echo(f"Location: {project.root}")
    click.echo(f"\nPages: {len(manifest.pages)}")
    click.echo(f"Preview pages: {len(manifest.preview_pages)}")


@cli.command()
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
@click.option("--no-images", is_flag=True, help="Skip image reference checks.")
@click.option("--json", "as_json", is_flag=True, help="Output the report as JSON.")
@click.pass_context
def validate(ctx: click.Context, strict: bool, no_images: bool, as_json: bool) -> None:
    """Check that the manifest and pages are consistent.

    Reports missing pages, preview pages out of book order, duplicate
    entries, empty pages and missing images.
    """
    project = load_project(ctx)
    validation_service = get_container(ctx).resolve(ValidationService)
    report = validation_service.validate(project, check_images=not no_images)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        for issue in report.issues:
            label = "ERROR" if issue.severity is Severity.ERROR else "WARNING"
            click.echo(f"{label} [{issue.code}] {issue.message}")
        if not report.issues:
            click.echo("All pages and references are valid.")
        else:
            click.echo(
                f"\nFound {len(report.errors)} error(s), {len(report.warnings)} warning(s)."
            )

    if not report.ok or (strict and report.warnings):
        sys.exit(1)


@cli.command()
@click.option("--preview", is_flag=True, help="Use the preview page list.")
@click.option(
    "--depth",
    "-d",
    type=click.IntRange(1, BuildConfig.MAX_TOC_DEPTH),
    default=None,
    help="Heading depth (default: manifest tocDepth).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file for TOC (default: stdout).",
)
@click.pass_context
def toc(ctx: click.Context, preview: bool, depth: int | None, output: str | None) -> None:
    """Generate the book's table of contents.

    Extracts headings up to the manifest's tocDepth from every page and
    prints them as a nested markdown list.
    """
    project = load_project(ctx)
    toc_service = get_container(ctx).resolve(TocService)
    file_repo = get_container(ctx).resolve(IFileRepository)

    try:
        toc_md = toc_service.generate_toc_markdown(project, preview=preview, depth=depth)
        if output:
            output_path = Path(output).resolve()
            file_repo.write_file(output_path, toc_md + "\n")
    except (FileNotFoundError, BookBuildError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except PermissionError as e:
        click.echo(f"Error: Permission denied - {e}", err=True)
        sys.exit(1)

    if output:
        click.echo(f"TOC written to {output_path}")
    else:
        click.echo(toc_md)


@cli.command()
@click.option("--preview", is_flag=True, help="Use the preview page list.")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file (default: stdout).",
)
@click.pass_context
def assemble(ctx: click.Context, preview: bool, output: str | None) -> None:
    """Concatenate the book's pages into one markdown document."""
    project = load_project(ctx)
    assemble_service = get_container(ctx).resolve(AssembleService)

    try:
        if output:
            path = assemble_service.write(project, Path(output).resolve(), preview=preview)
            click.echo(f"Book written to {path}")
        else:
            click.echo(assemble_service.assemble(project, preview=preview), nl=False)
    except (FileNotFoundError, BookBuildError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("target", type=click.Choice(TARGET_CHOICES, case_sensitive=False))
@click.option("--preview", is_flag=True, help="Build the preview edition.")
@click.pass_context
def command(ctx: click.Context, target: str, preview: bool) -> None:
    """Print the pandoc command for TARGET without running it."""
    project = load_project(ctx)
    pandoc_service = get_container(ctx).resolve(PandocService)

    args = pandoc_service.build_command(project, BuildTarget.parse(target), preview=preview)
    click.echo(" \\\n  ".join(args))


@cli.command()
@click.option(
    "--target",
    "-t",
    "targets",
    multiple=True,
    type=click.Choice(TARGET_CHOICES, case_sensitive=False),
    help="Format to build (repeatable, default: all).",
)
@click.option("--preview", is_flag=True, help="Build the preview edition.")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Output directory (default: dist).",
)
@click.option("--skip-validation", is_flag=True, help="Run pandoc without checking pages first.")
@click.pass_context
def build(
    ctx: click.Context,
    targets: tuple[str, ...],
    preview: bool,
    output: str | None,
    skip_validation: bool,
) -> None:
    """Build the book with pandoc.

    Produces <filenameStem>.pdf/.html/.epub in the output directory,
    or <filenameStem>-preview.* with --preview.
    """
    project = load_project(ctx)
    build_service = get_container(ctx).resolve(BuildService)
    output_dir = Path(output).resolve() if output else None

    click.echo(f"Building book: {project.manifest.title}")
    try:
        results = build_service.build(
            project,
            targets=parse_targets(targets) or None,
            preview=preview,
            output_dir=output_dir,
            skip_validation=skip_validation,
        )
    except ValidationFailedError as e:
        _echo_validation_errors(e)
        sys.exit(1)
    except BookBuildError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"\nGenerated {len(results)} file(s):")
    for result in results:
        click.echo(f"  {result.output_path}")


@cli.command()
@click.option("--preview", is_flag=True, help="Render the preview edition.")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Output directory (default: dist).",
)
@click.pass_context
def render(ctx: click.Context, preview: bool, output: str | None) -> None:
    """Render a single-file HTML edition without pandoc.

    Uses python-markdown with syntax highlighting, tables, footnotes and
    a table of contents limited to the manifest's tocDepth.
    """
    project = load_project(ctx)
    render_service = get_container(ctx).resolve(RenderService)
    output_dir = Path(output).resolve() if output else None

    try:
        path = render_service.render_book(project, output_dir, preview=preview)
    except (FileNotFoundError, BookBuildError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except PermissionError as e:
        click.echo(f"Error: Permission denied - {e}", err=True)
        sys.exit(1)

    click.echo(f"Rendered {path}")


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Output directory (default: dist).",
)
@click.pass_context
def exercises(ctx: click.Context, output: str | None) -> None:
    """Package the exercises repository as <filenameStem>-code.zip."""
    project = load_project(ctx)
    exercises_service = get_container(ctx).resolve(ExercisesService)
    output_dir = Path(output).resolve() if output else None

    try:
        archive = exercises_service.package(project, output_dir)
    except BookBuildError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Exercises written to {archive}")


@cli.command("all")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    help="Output directory (default: dist).",
)
@click.option("--no-exercises", is_flag=True, help="Skip packaging the exercises.")
@click.pass_context
def build_all(ctx: click.Context, output: str | None, no_exercises: bool) -> None:
    """Build every format, full and preview, then package exercises."""
    project = load_project(ctx)
    build_service = get_container(ctx).resolve(BuildService)
    output_dir = Path(output).resolve() if output else None

    click.echo(f"Building book: {project.manifest.title}")
    try:
        results, archive = build_service.build_all(
            project, output_dir=output_dir, include_exercises=not no_exercises
        )
    except ValidationFailedError as e:
        _echo_validation_errors(e)
        sys.exit(1)
    except BookBuildError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"\nGenerated {len(results)} file(s):")
    for result in results:
        click.echo(f"  {result.output_path}")
    if archive:
        click.echo(f"  {archive}")


def _echo_validation_errors(error: ValidationFailedError) -> None:
    """Report the errors that stopped a build."""
    click.echo(f"Error: {error}", err=True)
    for issue in error.report.errors:
        click.echo(f"  [{issue.code}] {issue.message}", err=True)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
