"""
sentinel.engine.ranks — Promote / Demote / Set-Rank Decisions
==============================================================

Pure decision logic: given a member's current role ids and a requested
move along the ladder, return the complete replacement role set.  No
Discord calls happen here; :mod:`sentinel.services.role_service` applies
the result as one atomic ``Member.edit(roles=...)``.

If a member somehow holds several ranks, the first in ladder order is
treated as the current one and only that one is swapped.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from sentinel.config import Rank, SentinelConfig
from sentinel.errors import NoCurrentRank, NoSuchRankTransition, RankUnchanged

__all__ = ["RankScheme", "RankChange", "change_rank"]


class RankScheme(enum.StrEnum):
    HIGHER = "higher"
    LOWER = "lower"
    NAMED = "named"


@dataclass(frozen=True, slots=True)
class RankChange:
    old: Rank
    new: Rank
    roles: frozenset[int]


def change_rank(
    config: SentinelConfig,
    roles: Iterable[int],
    scheme: RankScheme,
    name: str | None = None,
) -> RankChange:
    """Compute the role set that moves a member from their rank per *scheme*.

    Raises
    ------
    NoCurrentRank
        The member holds no ladder rank.
    NoSuchRankTransition
        Already at the top / bottom, or *name* matches no rank.
    RankUnchanged
        The target rank is the one already held.
    """
    current = frozenset(roles)
    held = config.member_ranks(current)
    if not held:
        raise NoCurrentRank("Member has no rank to change")
    old = held[0]

    if scheme is RankScheme.HIGHER:
        new = config.higher_rank(old.name)
    elif scheme is RankScheme.LOWER:
        new = config.lower_rank(old.name)
    else:
        new = config.rank_by_name_loose(name or "")
    if new is None:
        raise NoSuchRankTransition(f"No {scheme.value} rank from {old.name!r}")

    if new == old:
        raise RankUnchanged(f"Member already holds {old.name!r}")

    return RankChange(old=old, new=new, roles=(current - {old.role}) | {new.role})
