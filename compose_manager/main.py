"""
Docker Compose Manager — CLI entrypoint.

Usage:
    composemgr --help
    composemgr projects
    composemgr conflicts
    composemgr actions running --no-file
    python -m compose_manager.main config show
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from compose_manager import __version__
from compose_manager.core.observability.logging_config import resolve_level, setup_logging

_STATE_COLORS = {
    "Running": "green",
    "Degraded": "yellow",
    "Restarting": "yellow",
    "Paused": "blue",
    "NotStarted": "white",
    "Unknown": "white",
}


@click.group()
@click.version_option(version=__version__, prog_name="composemgr")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to compose-manager.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Docker Compose Manager — discover and reconcile compose projects."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet, env=os.environ),
        log_file=os.environ.get("DCM_LOG_FILE"),
        log_file_level=os.environ.get("DCM_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--refresh", is_flag=True, help="Rescan the compose root, ignoring the cache.")
@click.pass_context
def projects(ctx: click.Context, as_json: bool, refresh: bool) -> None:
    """List compose projects: running in Docker and declared on disk."""
    from compose_manager.core.use_cases.projects import list_projects

    result = list_projects(config_path=ctx.obj.get("config_path"), refresh=refresh)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho(
        f"\n🐳 Projects: {len(result.projects)} ({result.running_count} running)",
        fg="cyan",
        bold=True,
    )
    for project in result.projects:
        state = project.state.value
        click.secho(f"   • {project.name} ", bold=True, nl=False)
        click.secho(f"[{state}]", fg=_STATE_COLORS.get(state, "red"), nl=False)
        click.echo(f"  {project.compose_file_path or '(no file)'}")
        if project.warning:
            click.secho(f"     ⚠️  {project.warning}", fg="yellow")
        if ctx.obj.get("verbose"):
            for svc in project.services:
                ports = f"  {', '.join(svc.ports)}" if svc.ports else ""
                click.echo(f"     │ {svc.name} ({svc.state.value}){ports}")
            allowed = [a for a, ok in project.available_actions.items() if ok]
            click.echo(f"     actions: {', '.join(allowed) or '-'}")

    if result.conflicts:
        click.echo()
        click.secho(
            f"   ❌ {len(result.conflicts)} project(s) hidden by conflicts "
            "(see 'composemgr conflicts')",
            fg="red",
        )
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--refresh", is_flag=True, help="Rescan the compose root, ignoring the cache.")
@click.pass_context
def conflicts(ctx: click.Context, as_json: bool, refresh: bool) -> None:
    """Report compose files that claim the same project name."""
    from compose_manager.core.use_cases.projects import check_conflicts

    result = check_conflicts(config_path=ctx.obj.get("config_path"), refresh=refresh)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error or result.conflicts else 0)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.conflicts:
        click.secho(
            f"✅ No conflicts ({result.files_resolved} compose file(s))",
            fg="green",
            bold=True,
        )
        return

    click.secho(f"❌ {len(result.conflicts)} conflict(s):", fg="red", bold=True)
    for conflict in result.conflicts:
        click.echo()
        click.secho(f"   {conflict.project_name}", bold=True)
        for path in conflict.conflicting_file_paths:
            click.echo(f"     • {path}")
        for i, step in enumerate(conflict.resolution_steps, 1):
            click.echo(f"     {i}. {step}")
    click.echo()
    sys.exit(1)


@cli.command()
@click.argument("state")
@click.option("--no-file", is_flag=True, help="Project has no compose file available.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def actions(state: str, no_file: bool, as_json: bool) -> None:
    """Show which compose operations are legal for STATE.

    Examples:

        composemgr actions running

        composemgr actions not-started --no-file
    """
    from compose_manager.core.models.state import EntityState
    from compose_manager.core.services.action_classifier import compute_actions

    parsed = EntityState.parse(state)
    table = compute_actions(not no_file, parsed)

    if as_json:
        click.echo(json.dumps({"state": parsed.value, "has_compose_file": not no_file,
                               "actions": table}, indent=2))
        return

    click.secho(
        f"{parsed.value} ({'no file' if no_file else 'with file'})",
        fg="cyan",
        bold=True,
    )
    for name, allowed in table.items():
        if allowed:
            click.secho(f"   ✓ {name}", fg="green")
        else:
            click.secho(f"   ✗ {name}", fg="red")


@cli.group()
def config() -> None:
    """Discovery configuration commands."""


@config.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_show(ctx: click.Context, as_json: bool) -> None:
    """Show the effective configuration (file + DCM_* environment)."""
    from compose_manager.core.use_cases.projects import show_config

    cfg, error = show_config(ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps({"error": error} if error else cfg.model_dump(), indent=2))
        if error:
            sys.exit(1)
        return

    if error:
        click.secho(f"❌ {error}", fg="red")
        sys.exit(1)

    assert cfg is not None  # guaranteed after error check above
    click.secho("⚙️  Discovery configuration", fg="cyan", bold=True)
    for key, value in cfg.model_dump().items():
        click.echo(f"   {key}: {value if value is not None else '-'}")


if __name__ == "__main__":
    cli()
