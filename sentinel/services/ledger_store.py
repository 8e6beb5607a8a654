"""
sentinel.services.ledger_store — Durable Greeting Ledger
=========================================================

Persists the greeting ledger in the ``greeted_members`` table.  All
methods are synchronous; call them through ``run_db`` from async code.

Duplicate greetings are a correctness problem, not a cosmetic one, so
every insert is committed before the caller moves on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import Engine, delete, select

from sentinel.database.engine import get_session
from sentinel.database.models import GreetedMember

logger = logging.getLogger(__name__)


class LedgerStore:
    """Load / add / replace operations over ``greeted_members``."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def load(self) -> set[int]:
        with get_session(self._engine) as session:
            members = set(session.scalars(select(GreetedMember.member_id)).all())
        logger.info("Greeting ledger loaded: %d members", len(members))
        return members

    def add(self, member_id: int) -> bool:
        """Insert *member_id* if missing.  Returns False if it was already stored."""
        with get_session(self._engine) as session:
            if session.get(GreetedMember, member_id) is not None:
                return False
            session.add(GreetedMember(member_id=member_id))
        return True

    def replace(self, member_ids: Iterable[int]) -> int:
        """Replace the whole ledger with *member_ids* in one transaction."""
        unique = set(member_ids)
        with get_session(self._engine) as session:
            session.execute(delete(GreetedMember))
            session.add_all(GreetedMember(member_id=mid) for mid in unique)
        logger.info("Greeting ledger replaced: %d members", len(unique))
        return len(unique)
