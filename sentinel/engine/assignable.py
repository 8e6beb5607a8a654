"""
sentinel.engine.assignable — Assign / Unassign Decisions
=========================================================

Assignable roles are independent of ranks and positions, so the caller
applies the result with a single add or remove call rather than a full
role replacement.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable

from sentinel.config import SentinelConfig
from sentinel.errors import AlreadyAssigned, NoSuchAssignable, NotAssigned

__all__ = ["AssignDirection", "change_assignable"]


class AssignDirection(enum.StrEnum):
    ASSIGN = "assign"
    UNASSIGN = "unassign"


def change_assignable(
    config: SentinelConfig,
    roles: Iterable[int],
    direction: AssignDirection,
    name: str,
) -> int:
    """Return the role id to add (ASSIGN) or remove (UNASSIGN)."""
    role = config.assignable_loose(name)
    if role is None:
        raise NoSuchAssignable(f"No assignable role named {name!r}")

    held = role in set(roles)
    if direction is AssignDirection.ASSIGN and held:
        raise AlreadyAssigned(f"{name!r} is already assigned")
    if direction is AssignDirection.UNASSIGN and not held:
        raise NotAssigned(f"{name!r} is not assigned")
    return role
