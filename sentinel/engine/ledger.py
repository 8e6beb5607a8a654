"""
sentinel.engine.ledger — In-Memory Greeting Ledger
===================================================

The set of members who have already received the one-time greeting.
The durable copy lives in :mod:`sentinel.services.ledger_store`; this is
the in-process view the greeting check reads.

``lock`` must be held across the whole "absent? → send → insert → commit"
sequence.  Without it two concurrent reactions from the same member can
both see "absent" and both send a greeting.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable


class GreetingLedger:
    """Member ids that have been greeted.  Grows monotonically except on reset."""

    def __init__(self, members: Iterable[int] = ()) -> None:
        self._members: set[int] = set(members)
        self.lock = asyncio.Lock()

    def should_greet(self, member_id: int) -> bool:
        return member_id not in self._members

    def register(self, member_id: int) -> bool:
        """Record *member_id*.  Returns False if it was already present."""
        if member_id in self._members:
            return False
        self._members.add(member_id)
        return True

    def replace(self, members: Iterable[int]) -> None:
        """Swap the whole member set (reload and administrative reset)."""
        self._members = set(members)

    def snapshot(self) -> frozenset[int]:
        return frozenset(self._members)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._members

    def __len__(self) -> int:
        return len(self._members)
