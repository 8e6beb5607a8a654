"""
sentinel.errors — Exception Taxonomy
=====================================

Two families matter to callers:

- :class:`LookupFailure` — the request named something that doesn't exist
  (unknown rank / assignable / position) or hit a ladder boundary.  The
  operation is declined and no role mutation is attempted.
- :class:`NoOpCondition` — the request is valid but would change nothing
  (already assigned, same rank).  Not a failure; callers render a neutral
  acknowledgment and run no side effects.

Platform failures surface as ``discord.HTTPException`` and persistence
failures as ``sqlalchemy.exc.SQLAlchemyError``; neither is wrapped here.
"""

from __future__ import annotations


class SentinelError(Exception):
    """Base class for all Sentinel errors."""


class ConfigError(SentinelError):
    """``config.yaml`` is missing a key or is internally inconsistent."""


# ---------------------------------------------------------------------------
# Lookup failures (operation declined)
# ---------------------------------------------------------------------------
class LookupFailure(SentinelError):
    """The requested rank, role, or position could not be resolved."""


class NoCurrentRank(LookupFailure):
    """The member holds no rank on the ladder, so there is nothing to change."""


class NoSuchRankTransition(LookupFailure):
    """No higher rank, no lower rank, or an unknown rank name."""


class NoSuchAssignable(LookupFailure):
    """No assignable role is configured under that name."""


class UnknownPosition(LookupFailure):
    """The emoji is not bound to a position on the role menu."""


# ---------------------------------------------------------------------------
# No-op conditions (nothing to do)
# ---------------------------------------------------------------------------
class NoOpCondition(SentinelError):
    """The requested change would have no effect."""


class RankUnchanged(NoOpCondition):
    """The member already holds the requested rank."""


class AlreadyAssigned(NoOpCondition):
    """The member already holds the assignable role."""


class NotAssigned(NoOpCondition):
    """The member does not hold the assignable role."""
