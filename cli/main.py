"""CLI application for StoryMate."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config.settings import Settings, configure_collation, configure_logging, get_settings
from config.story_config import YamlConfigProvider, resolve_config

app = typer.Typer(
    name="storymate",
    help="Generate Storybook companion files for UI components",
    no_args_is_help=True,
)
console = Console()


def run_async(coro):
    """Run an async coroutine."""
    return asyncio.run(coro)


def _prepare_settings(workspace: Path | None, dry_run: bool, verbose: bool) -> Settings:
    """Apply CLI overrides to the settings and configure logging."""
    settings = get_settings()

    # Override settings from CLI
    if workspace:
        settings.workspace_root = workspace.expanduser().resolve()
    settings.dry_run = dry_run
    settings.verbose = verbose

    configure_logging(settings)
    configure_collation()
    return settings


def _format_entries(value) -> str:
    """Format a list setting for display; anything else is shown as is."""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(entry) for entry in value)
    return str(value)


def _print_result(result) -> None:
    """Print a handler result and exit non-zero on failures."""
    if result.success:
        console.print(f"[green]{escape(result.message)}[/green]")
    else:
        console.print(f"[red]Error: {escape(result.message)}[/red]")

    if result.files_written:
        console.print("\nStory files:")
        for f in result.files_written:
            console.print(f"  - {escape(f)}")

    if result.files_skipped:
        console.print("\n[dim]Skipped (not watched):[/dim]")
        for f in result.files_skipped:
            console.print(f"  [dim]- {escape(f)}[/dim]")

    if result.errors:
        console.print("\n[red]Errors:[/red]")
        for error in result.errors:
            console.print(f"  - {escape(error)}")
        raise typer.Exit(1)


@app.command()
def generate(
    files: list[Path] = typer.Argument(..., help="Component files to generate stories for"),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root (defaults to the current directory)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Generate even for files outside the watched directories",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Render stories without writing them",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Don't show failure notifications",
    ),
):
    """Create companion story files for component files.

    Existing story files are overwritten.
    """
    from handlers.story_handler import EventKind, create_story_handler
    from tools.notifier import get_notifier

    settings = _prepare_settings(workspace, dry_run, verbose)

    console.print("[bold blue]StoryMate[/bold blue]")
    console.print(f"Workspace: {settings.workspace_root}")
    console.print(f"Dry run: {dry_run}")
    console.print()

    handler = create_story_handler(settings=settings, notifier=get_notifier(enabled=not quiet))
    result = run_async(handler.run(files=files, kind=EventKind.CREATED, force=force))
    _print_result(result)


@app.command()
def update(
    files: list[Path] = typer.Argument(..., help="Component files whose stories should be refreshed"),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root (defaults to the current directory)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Render stories without writing them",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Don't show failure notifications",
    ),
):
    """Refresh existing story files, keeping their figma links.

    Runs regardless of the updateOnSave setting.
    """
    from handlers.story_handler import EventKind, create_story_handler
    from tools.notifier import get_notifier

    settings = _prepare_settings(workspace, dry_run, verbose)

    console.print("[bold blue]StoryMate[/bold blue]")
    console.print(f"Workspace: {settings.workspace_root}")
    console.print(f"Dry run: {dry_run}")
    console.print()

    handler = create_story_handler(settings=settings, notifier=get_notifier(enabled=not quiet))
    result = run_async(handler.run(files=files, kind=EventKind.SAVED, force=True))
    _print_result(result)


@app.command()
def watch(
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root to watch (defaults to the current directory)",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Render stories without writing them",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Don't show failure notifications",
    ),
):
    """Watch the workspace and generate stories for new components."""
    from handlers.story_handler import create_story_handler
    from tools.notifier import get_notifier
    from tools.file_watcher import StoryWatcher

    settings = _prepare_settings(workspace, dry_run, verbose)
    config = resolve_config(YamlConfigProvider(settings.settings_path))

    console.print("[bold blue]StoryMate Watcher[/bold blue]")
    console.print(f"Workspace: {settings.workspace_root}")
    console.print(f"Watch directories: {_format_entries(config.watch_directories)}")
    console.print(f"Update on save: {config.update_on_save}")
    console.print(f"Dry run: {dry_run}")
    console.print("[dim]Press Ctrl+C to stop[/dim]")
    console.print()

    watcher = StoryWatcher(
        handler=create_story_handler(settings=settings, notifier=get_notifier(enabled=not quiet)),
        root=settings.workspace_root,
        debounce_seconds=settings.watch_debounce_seconds,
    )
    try:
        run_async(watcher.run())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")


@app.command()
def extract(
    file: Path = typer.Argument(..., help="Component file to analyze"),
    mode: str | None = typer.Option(
        None,
        "--mode",
        "-m",
        help="Extraction mode: constants or variant_map (defaults to the workspace setting)",
    ),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root (defaults to the current directory)",
    ),
):
    """Show the variants StoryMate finds in a component file."""
    from tools.variant_extractor import extract_for_mode

    settings = _prepare_settings(workspace, dry_run=False, verbose=False)
    config = resolve_config(YamlConfigProvider(settings.settings_path))

    try:
        source_text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: could not read {escape(str(file))}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    result = extract_for_mode(source_text, str(file.parent), mode or config.extraction_mode)

    console.print(f"[bold]Props interface:[/bold] {result.props_interface_name or '-'}")
    console.print(f"[bold]Interactions component:[/bold] {result.is_interactions_component}")
    console.print()

    table = Table(title="Variants")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Options", style="dim")
    for variant in result.variants:
        options = result.variant_types.get(variant.key, {}).get("type", [])
        table.add_row(variant.key, variant.value, ", ".join(options))
    console.print(table)

    if result.default_variants:
        defaults = Table(title="Default Variants")
        defaults.add_column("Key", style="cyan")
        defaults.add_column("Value", style="green")
        for entry in result.default_variants:
            defaults.add_row(entry.key, entry.value)
        console.print(defaults)


@app.command()
def show_config(
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace root (defaults to the current directory)",
    ),
):
    """Show the resolved storyMate configuration."""
    settings = _prepare_settings(workspace, dry_run=False, verbose=False)
    config = resolve_config(YamlConfigProvider(settings.settings_path))

    table = Table(title=f"storyMate ({settings.settings_path})")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("watchDirectories", _format_entries(config.watch_directories))
    table.add_row("templatePath", config.template_path or "(built-in default)")
    table.add_row("fileExtensions", _format_entries(config.file_extensions))
    table.add_row("updateOnSave", str(config.update_on_save))
    table.add_row("extractionMode", str(config.extraction_mode))
    console.print(table)


if __name__ == "__main__":
    app()
