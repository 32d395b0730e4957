"""
EntityState — the closed set of project and service states.

Docker reports free-form strings ("running", "exited(2)", "paused").
Everything downstream of the adapters works with ``EntityState`` so
that comparisons are exact and the action table stays total.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from compose_manager.core.models.project import Service


class EntityState(str, Enum):
    """Distinct liveness categories. No ordering is implied."""

    DOWN = "Down"
    RUNNING = "Running"
    DEGRADED = "Degraded"
    RESTARTING = "Restarting"
    EXITED = "Exited"
    STOPPED = "Stopped"
    CREATED = "Created"
    PAUSED = "Paused"
    UNKNOWN = "Unknown"
    NOT_STARTED = "NotStarted"

    @classmethod
    def parse(cls, raw: str | EntityState | None) -> EntityState:
        """Map a raw state string onto the enum (case-insensitive).

        Anything unrecognised becomes ``UNKNOWN``.
        """
        if isinstance(raw, EntityState):
            return raw
        if not raw:
            return cls.UNKNOWN
        key = raw.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        return _ALIASES.get(key, cls.UNKNOWN)

    @property
    def is_running_like(self) -> bool:
        """Running or Degraded — at least one container is up."""
        return self in (EntityState.RUNNING, EntityState.DEGRADED)


_ALIASES: dict[str, EntityState] = {
    "down": EntityState.DOWN,
    "running": EntityState.RUNNING,
    "degraded": EntityState.DEGRADED,
    "restarting": EntityState.RESTARTING,
    "exited": EntityState.EXITED,
    "stopped": EntityState.STOPPED,
    "created": EntityState.CREATED,
    "paused": EntityState.PAUSED,
    "unknown": EntityState.UNKNOWN,
    "notstarted": EntityState.NOT_STARTED,
}

# "running(3)" as printed by `docker compose ls`
_COMPOSE_STATUS_RE = re.compile(r"^\s*([a-zA-Z]+)\s*\(\s*(\d+)\s*\)\s*$")


def determine_state_from_services(services: Iterable[Service]) -> EntityState:
    """Collapse per-container states into one project state.

    All running → Running; some running → Degraded; then, in order of
    precedence, Restarting, Paused, Exited, Created; otherwise Stopped.
    An empty project is Down.
    """
    states = [s.state for s in services]
    if not states:
        return EntityState.DOWN

    running = states.count(EntityState.RUNNING)
    if running == len(states):
        return EntityState.RUNNING
    if running > 0:
        return EntityState.DEGRADED

    for candidate in (
        EntityState.RESTARTING,
        EntityState.PAUSED,
        EntityState.EXITED,
        EntityState.CREATED,
    ):
        if candidate in states:
            return candidate

    return EntityState.STOPPED


def map_compose_status(raw: str | None) -> EntityState:
    """Map the ``Status`` column of ``docker compose ls`` to a state.

    Handles ``running(3)``, ``exited(0)`` and mixed lists such as
    ``running(1), exited(2)``. A plain word falls back to ``parse``.
    """
    if not raw or not raw.strip():
        return EntityState.UNKNOWN

    parts = [p for p in raw.split(",") if p.strip()]
    counted: dict[str, int] = {}
    for part in parts:
        match = _COMPOSE_STATUS_RE.match(part)
        if not match:
            # Not the counted form; only meaningful as a single word
            return EntityState.parse(raw) if len(parts) == 1 else EntityState.UNKNOWN
        word = match.group(1).lower()
        counted[word] = counted.get(word, 0) + int(match.group(2))

    if "running" in counted:
        others = sum(n for w, n in counted.items() if w != "running")
        return EntityState.DEGRADED if others > 0 else EntityState.RUNNING
    if "restarting" in counted:
        return EntityState.RESTARTING
    if "paused" in counted:
        return EntityState.PAUSED
    if "exited" in counted:
        return EntityState.STOPPED if counted["exited"] > 0 else EntityState.DOWN
    if "created" in counted:
        return EntityState.CREATED
    return EntityState.UNKNOWN
