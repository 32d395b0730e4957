"""
Action classifier — which compose operations are legal right now.

Two families of commands:

    Need the compose file    up, create, run, build, pull, push, config, convert
        They create or modify service definitions.

    Work by project name     start, stop, restart, pause, unpause, ps, logs,
                             top, down, rm, kill
        ``docker compose -p <name> <cmd>`` on already-created resources.

``down`` is in the second family because removing containers and
networks needs no file. ``down -v`` would (volumes are declared in the
file); the table does not distinguish the two.
"""

from __future__ import annotations

from compose_manager.core.models.state import EntityState

REQUIRES_FILE: tuple[str, ...] = (
    "up", "create", "run", "build", "pull", "push", "config", "convert",
)

WORKS_WITHOUT_FILE: tuple[str, ...] = (
    "start", "stop", "restart", "pause", "unpause", "ps", "logs",
    "top", "down", "rm", "kill",
)

# Keys of the map returned by compute_actions, in display order
ACTIONS: tuple[str, ...] = (
    "up", "create", "build", "pull", "push", "config",
    "start", "stop", "restart", "pause", "unpause",
    "ps", "logs", "top", "down", "rm", "kill",
)


def requires_compose_file(command: str) -> bool:
    """True if ``command`` cannot run with the project name alone."""
    return command.strip().lower() in REQUIRES_FILE


def compute_actions(
    has_compose_file: bool,
    state: EntityState | str | None,
) -> dict[str, bool]:
    """Legal-operations map for a project.

    ``state`` may be an EntityState or a raw string. Unknown, empty and
    missing states count as not started: no containers are assumed.
    """
    parsed = EntityState.parse(state)

    is_running = parsed.is_running_like
    is_stopped = parsed is EntityState.STOPPED
    is_paused = parsed is EntityState.PAUSED
    is_not_started = parsed in (EntityState.NOT_STARTED, EntityState.UNKNOWN)
    has_containers = not is_not_started

    return {
        # file required
        "up": has_compose_file,
        "create": has_compose_file and is_not_started,
        "build": has_compose_file,
        "pull": has_compose_file,
        "push": has_compose_file,
        "config": has_compose_file,
        # project name is enough
        "start": has_containers and not is_running,
        "stop": is_running,
        "restart": has_containers,
        "pause": is_running,
        "unpause": is_paused,
        "ps": has_containers,
        "logs": has_containers,
        "top": is_running,
        "down": has_containers,
        "rm": is_stopped,
        "kill": is_running,
    }
