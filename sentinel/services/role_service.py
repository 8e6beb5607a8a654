"""
sentinel.services.role_service — Apply Rank & Assignable Changes
=================================================================

Bridges the pure decisions in :mod:`sentinel.engine.ranks` and
:mod:`sentinel.engine.assignable` to Discord:

- rank changes are applied as one atomic ``Member.edit(roles=...)``;
- assignable toggles are a single ``add_roles`` / ``remove_roles`` call.

Each function returns a :class:`CommandOutcome` that the cogs render as
an acknowledgment.  Platform errors are logged, not retried.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable

import discord

from sentinel.config import SentinelConfig
from sentinel.constants import ACK_FAILURE, ACK_NOOP, ACK_SUCCESS
from sentinel.engine.assignable import AssignDirection, change_assignable
from sentinel.engine.ranks import RankScheme, change_rank
from sentinel.errors import LookupFailure, NoOpCondition

logger = logging.getLogger(__name__)


class CommandOutcome(enum.StrEnum):
    SUCCESS = "success"
    UNCHANGED = "unchanged"   # NoOpCondition: nothing to do
    DECLINED = "declined"     # LookupFailure: nothing attempted
    FAILED = "failed"         # Discord rejected the call

    @property
    def ack(self) -> str:
        return _ACKS[self]


_ACKS: dict[CommandOutcome, str] = {
    CommandOutcome.SUCCESS: ACK_SUCCESS,
    CommandOutcome.UNCHANGED: ACK_NOOP,
    CommandOutcome.DECLINED: ACK_FAILURE,
    CommandOutcome.FAILED: ACK_FAILURE,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def member_role_ids(member: discord.Member) -> frozenset[int]:
    """Role ids held by *member*, excluding @everyone (whose id is the guild id)."""
    return frozenset(role.id for role in member.roles if role.id != member.guild.id)


async def replace_roles(member: discord.Member, roles: Iterable[int], *, reason: str) -> None:
    """Replace *member*'s roles with *roles* in a single request."""
    await member.edit(roles=[discord.Object(id=r) for r in sorted(roles)], reason=reason)


# ---------------------------------------------------------------------------
# Rank ladder
# ---------------------------------------------------------------------------
async def apply_rank_change(
    config: SentinelConfig,
    member: discord.Member,
    scheme: RankScheme,
    name: str | None = None,
    *,
    actor: str = "owner",
) -> CommandOutcome:
    try:
        change = change_rank(config, member_role_ids(member), scheme, name)
    except NoOpCondition as exc:
        logger.info("Rank change for %d skipped: %s", member.id, exc)
        return CommandOutcome.UNCHANGED
    except LookupFailure as exc:
        logger.info("Rank change for %d declined: %s", member.id, exc)
        return CommandOutcome.DECLINED

    try:
        await replace_roles(
            member, change.roles,
            reason=f"Sentinel: {change.old.name} → {change.new.name} by {actor}",
        )
    except discord.HTTPException:
        logger.exception(
            "Failed to move member %d from %s to %s",
            member.id, change.old.name, change.new.name,
        )
        return CommandOutcome.FAILED

    logger.info("Member %d: %s → %s", member.id, change.old.name, change.new.name)
    return CommandOutcome.SUCCESS


# ---------------------------------------------------------------------------
# Assignable roles
# ---------------------------------------------------------------------------
async def apply_assignable_change(
    config: SentinelConfig,
    member: discord.Member,
    direction: AssignDirection,
    name: str,
    *,
    actor: str = "admin",
) -> CommandOutcome:
    try:
        role_id = change_assignable(config, member_role_ids(member), direction, name)
    except NoOpCondition as exc:
        logger.info("%s for %d skipped: %s", direction.value.title(), member.id, exc)
        return CommandOutcome.UNCHANGED
    except LookupFailure as exc:
        logger.info("%s for %d declined: %s", direction.value.title(), member.id, exc)
        return CommandOutcome.DECLINED

    role = discord.Object(id=role_id)
    reason = f"Sentinel: {direction.value} {name} by {actor}"
    try:
        if direction is AssignDirection.ASSIGN:
            await member.add_roles(role, reason=reason)
        else:
            await member.remove_roles(role, reason=reason)
    except discord.HTTPException:
        logger.exception("Failed to %s role %d for member %d", direction.value, role_id, member.id)
        return CommandOutcome.FAILED

    return CommandOutcome.SUCCESS
