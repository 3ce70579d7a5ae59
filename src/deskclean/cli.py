"""Command line interface for deskclean."""

from __future__ import annotations

import difflib
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from deskclean.classification import Classifier, build_extension_table
from deskclean.cleaner import DesktopCleaner
from deskclean.config import ConfigError, ConfigManager, DeskCleanConfig
from deskclean.errors import DeskCleanError
from deskclean.ingestion import FileEntry
from deskclean.logs import configure_logging
from deskclean.organization import OrganizeReport, UndoReport
from deskclean.paths import default_log_path
from deskclean.schedule import CleanScheduler, ScheduledRun

console = Console()


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """
    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """
    if quiet and mode != "error":
        return
    if summary_only and mode not in {"summary", "warning", "error"}:
        return
    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {root}: {parts}.[/green]"


def _output_modes(
    ctx: click.Context,
    config: DeskCleanConfig,
    *,
    quiet: bool,
    summary_mode: bool,
    json_output: bool,
) -> tuple[bool, bool]:
    """Combine CLI flags with configured defaults into ``(quiet, summary_only)``.

    Raises:
        click.ClickException: If the requested modes conflict.
    """
    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


def _load_config(source: str | None = None) -> tuple[ConfigManager, DeskCleanConfig]:
    """Load configuration, apply a ``--source`` override, and set up logging."""
    manager = ConfigManager()
    overrides = {"organization.source_dir": source} if source else None
    config = manager.load(cli_overrides=overrides)
    configure_logging(config.logging, default_log_path(Path.home()))
    return manager, config


def _build_cleaner(manager: ConfigManager, source: str | None = None) -> DesktopCleaner:
    overrides = {"organization.source_dir": source} if source else None
    return DesktopCleaner(
        lambda: manager.load(cli_overrides=overrides),
        home=Path.home(),
    )


def _format_relative(then: datetime, now: datetime) -> str:
    """Render ``then`` relative to ``now`` (e.g. ``5 minutes ago``)."""
    seconds = int((now - then).total_seconds())
    if seconds < 60:
        return "just now"
    for unit, size in (("day", 86_400), ("hour", 3_600), ("minute", 60)):
        if seconds >= size:
            value = seconds // size
            return f"{value} {unit}{'s' if value != 1 else ''} ago"
    return "just now"


def _report_payload(report: OrganizeReport, *, undo_saved: bool) -> dict[str, Any]:
    return {
        "context": {"source": report.source.as_posix(), "dry_run": False},
        "counts": {
            "moved": report.manifest.count,
            "failed": len(report.errors),
            "skipped": len(report.skipped),
            "expired": len(report.expired),
        },
        "manifest": report.manifest.model_dump(mode="json", by_alias=True),
        "errors": list(report.errors),
        "skipped": list(report.skipped),
        "expired": [path.as_posix() for path in report.expired],
        "cancelled": report.cancelled,
        "undo_available": undo_saved,
    }


def _undo_payload(report: UndoReport) -> dict[str, Any]:
    return {
        "counts": {
            "restored": len(report.restored),
            "missing": len(report.missing),
            "failed": len(report.errors),
        },
        "restored": [record.model_dump(mode="json", by_alias=True) for record in report.restored],
        "missing": [record.model_dump(mode="json", by_alias=True) for record in report.missing],
        "errors": list(report.errors),
        "removed_directories": [path.as_posix() for path in report.removed_directories],
    }


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="deskclean")
def cli() -> None:
    """deskclean moves Desktop clutter into your Pictures, Documents, Music, and other folders."""


@cli.command()
@click.option(
    "--source",
    type=click.Path(exists=True, file_okay=False, path_type=str),
    help="Directory to organize instead of the Desktop.",
)
@click.option("--dry-run", is_flag=True, help="Preview moves without modifying files.")
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the moves.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def clean(
    ctx: click.Context,
    source: str | None,
    dry_run: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Move files from the Desktop into their category folders.

    Args:
        ctx: Click context used for parameter source inspection.
        source: Optional directory to organize instead of the Desktop.
        dry_run: If True, only show what would be moved.
        json_output: If True, emit JSON describing planned or applied moves.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error CLI output entirely.
    """
    try:
        manager, config = _load_config(source)
        quiet_enabled, summary_only = _output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        cleaner = _build_cleaner(manager, source)
        source_root = cleaner.source_dir(config)

        if dry_run:
            plan = cleaner.engine.plan(source_root, config)
            if json_output:
                console.print_json(
                    data={
                        "context": {"source": source_root.as_posix(), "dry_run": True},
                        "plan": plan.model_dump(mode="json"),
                    }
                )
                return
            table = Table(title=f"Clean preview for {source_root}")
            table.add_column("File", overflow="fold")
            table.add_column("Category")
            table.add_column("Destination", overflow="fold")
            for move_op in plan.moves:
                table.add_row(
                    move_op.source.name, move_op.category.value, str(move_op.destination)
                )
            _emit_message(table, mode="detail", quiet=quiet_enabled, summary_only=summary_only)
            _emit_message(
                "[yellow]Dry run: no files were moved.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            _emit_message(
                _format_summary_line(
                    "Clean",
                    source_root,
                    {"dry_run": True, "planned": len(plan.moves), "skipped": len(plan.skipped)},
                ),
                mode="summary",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            return

        report = cleaner.clean()
        undo_saved = cleaner.can_undo()

        if json_output:
            console.print_json(data=_report_payload(report, undo_saved=undo_saved))
            return

        if report.manifest.moved_files:
            table = Table(title=f"Cleaned {source_root}")
            table.add_column("File", overflow="fold")
            table.add_column("Moved to", overflow="fold")
            for record in report.manifest.moved_files:
                table.add_row(record.original_path.name, str(record.new_path.parent))
            _emit_message(table, mode="detail", quiet=quiet_enabled, summary_only=summary_only)
        else:
            _emit_message(
                "[cyan]Nothing to move; the Desktop is already tidy.[/cyan]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )

        if report.errors:
            _emit_message(
                "[red]Some files could not be moved:[/red]",
                mode="error",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            for entry in report.errors:
                _emit_message(
                    f"  - {entry}", mode="error", quiet=quiet_enabled, summary_only=summary_only
                )

        if report.expired:
            _emit_message(
                f"[yellow]Deleted {len(report.expired)} screenshot(s) older than "
                f"{config.organization.screenshot_retention_days} days.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )

        if not undo_saved and report.manifest.moved_files:
            _emit_message(
                "[yellow]Undo information could not be saved for this clean.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        elif config.preferences.show_undo_after_clean and report.manifest.moved_files:
            _emit_message(
                "[cyan]Run `deskclean undo` to put these files back.[/cyan]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )

        _emit_message(
            _format_summary_line(
                "Clean",
                source_root,
                {
                    "moved": report.manifest.count,
                    "failed": len(report.errors),
                    "skipped": len(report.skipped),
                    "expired": len(report.expired),
                },
            ),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_output, original=exc)
    except DeskCleanError as exc:
        _handle_cli_error(
            str(exc),
            code="clean_error",
            json_output=json_output,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Emit JSON describing the undo.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def undo(ctx: click.Context, json_output: bool, summary_mode: bool, quiet: bool) -> None:
    """Put the files moved by the last clean back where they were.

    Args:
        ctx: Click context for parameter inspection.
        json_output: When True, emit JSON instead of textual output.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error output entirely.
    """
    try:
        manager, config = _load_config()
        quiet_enabled, summary_only = _output_modes(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        cleaner = _build_cleaner(manager)
        report = cleaner.undo()

        if report is None:
            if json_output:
                console.print_json(data={"rolled_back": False, "counts": {"restored": 0}})
                return
            _emit_message(
                "[yellow]Nothing to undo.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            return

        if json_output:
            payload = _undo_payload(report)
            payload["rolled_back"] = True
            console.print_json(data=payload)
            return

        for record in report.restored:
            _emit_message(
                f"  - {record.new_path} -> {record.original_path}",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        if report.missing:
            _emit_message(
                f"[yellow]{len(report.missing)} file(s) were no longer where the last clean "
                "put them and were skipped.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        for entry in report.errors:
            _emit_message(
                f"[red]  - {entry}[/red]", mode="error", quiet=quiet_enabled, summary_only=summary_only
            )
        _emit_message(
            _format_summary_line(
                "Undo",
                cleaner.source_dir(config),
                {
                    "restored": len(report.restored),
                    "missing": len(report.missing),
                    "failed": len(report.errors),
                },
            ),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_output, original=exc)
    except DeskCleanError as exc:
        _handle_cli_error(
            f"Unable to undo the last clean: {exc}",
            code="undo_error",
            json_output=json_output,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.option("--json", "json_output", is_flag=True, help="Emit status information as JSON.")
def status(json_output: bool) -> None:
    """Show when the Desktop was last cleaned and whether undo is available."""
    try:
        manager, config = _load_config()
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
        return

    cleaner = _build_cleaner(manager)
    manifest = cleaner.last_manifest()
    now = datetime.now(timezone.utc)

    if json_output:
        console.print_json(
            data={
                "source": cleaner.source_dir(config).as_posix(),
                "can_undo": manifest is not None,
                "last_clean": manifest.model_dump(mode="json", by_alias=True)
                if manifest
                else None,
                "preferences": config.preferences.model_dump(mode="json"),
            }
        )
        return

    if manifest is None:
        console.print("deskclean - run `deskclean clean` to organize your Desktop.")
        console.print("[yellow]No undo available.[/yellow]")
        return

    console.print(f"Last cleaned: {_format_relative(manifest.date, now)}")
    console.print(f"Files moved: {manifest.count}")
    console.print("[green]Undo available: run `deskclean undo`.[/green]")


@cli.command()
@click.argument("names", nargs=-1, required=True)
def classify(names: tuple[str, ...]) -> None:
    """Show where files named NAMES would be moved."""
    try:
        _, config = _load_config()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    classifier = Classifier(Path.home())
    extensions = build_extension_table(config.organization.extension_overrides)
    table = Table(title="Destinations")
    table.add_column("File", overflow="fold")
    table.add_column("Category")
    table.add_column("Destination", overflow="fold")
    for name in names:
        entry = FileEntry.from_path(Path(name))
        if entry.is_hidden:
            table.add_row(entry.name, "-", "left in place")
            continue
        try:
            destination = classifier.destination_for(entry, config, extensions=extensions)
        except DeskCleanError as exc:
            raise click.ClickException(str(exc)) from exc
        table.add_row(entry.name, destination.category.value, str(destination.directory))
    console.print(table)


@cli.command()
@click.option("--show-next", is_flag=True, help="Print the upcoming clean times and exit.")
def schedule(show_next: bool) -> None:
    """Run automatic cleans in the foreground until interrupted."""
    try:
        manager, _ = _load_config()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    cleaner = _build_cleaner(manager)

    def _on_run(outcome: ScheduledRun) -> None:
        label = " + ".join(outcome.triggers)
        if outcome.report is not None:
            console.print(
                f"[green][{outcome.started_at:%Y-%m-%d %H:%M}] {label}: moved "
                f"{outcome.report.manifest.count} file(s).[/green]"
            )
        else:
            console.print(f"[yellow][{outcome.started_at:%Y-%m-%d %H:%M}] {label}: {outcome.error}[/yellow]")

    scheduler = CleanScheduler(cleaner, manager.load_preferences, on_run=_on_run)
    scheduler.tick()

    if show_next:
        interval = scheduler.next_interval
        end_of_day = scheduler.next_end_of_day
        console.print(f"Next interval clean: {interval:%Y-%m-%d %H:%M}" if interval else "Interval clean: disabled")
        console.print(
            f"Next end-of-day clean: {end_of_day:%Y-%m-%d %H:%M}" if end_of_day else "End-of-day clean: disabled"
        )
        return

    stop_event = threading.Event()
    console.print("[cyan]Scheduler running; press Ctrl+C to stop.[/cyan]")
    try:
        scheduler.run(stop_event)
    except KeyboardInterrupt:
        stop_event.set()
        console.print("[yellow]Scheduler stopped by user request.[/yellow]")
    finally:
        cleaner.shutdown()


@cli.group()
def config() -> None:
    """View and change the YAML configuration file."""


def _config_diff(before: str, after: str) -> list[str]:
    """Return unified diff lines between two file versions, ignoring the timestamp."""
    return [
        line
        for line in difflib.unified_diff(
            before.splitlines(),
            after.splitlines(),
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
        if "Last updated:" not in line
    ]


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore DESKCLEAN__ environment overrides.")
def config_view(no_env: bool) -> None:
    """Print the effective configuration after all overrides are applied."""
    try:
        current = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    rendered = yaml.safe_dump(current.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(rendered, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML literal to store at KEY.")
def config_set(key: str, value: str) -> None:
    """Store VALUE at the dotted KEY, e.g. ``preferences.auto_clean_interval``.

    Args:
        key: Dotted section and setting name.
        value: YAML literal parsed before it is written.
    """
    manager = ConfigManager()
    manager.ensure_exists()
    before = manager.read_text()

    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        manager.set_value(key, parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    diff = _config_diff(before, manager.read_text())
    if not any(
        line.startswith(("+", "-")) and not line.startswith(("+++", "---")) for line in diff
    ):
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Edit the configuration file in $EDITOR and validate the result."""
    manager = ConfigManager()
    manager.ensure_exists()
    original = manager.read_text()

    edited = click.edit(original, extension=".yaml")
    if edited is None or edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
        manager.replace(parsed)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc
    except ConfigError as exc:
        raise click.ClickException(f"{exc} The file was left unchanged.") from exc

    console.print("[green]Configuration updated.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
