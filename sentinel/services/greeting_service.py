"""
sentinel.services.greeting_service — One-Time Greetings
========================================================

Owns every read-modify-write of the greeting ledger:

- :func:`greet_member` — the "absent? → send → insert → commit" sequence,
  run under ``ledger.lock`` so concurrent reactions cannot double-send.
- :func:`reset_greetings` — grandfather in the current membership.
- :func:`reload_ledger` — re-read the durable ledger (``/reload``).

Guarantee is at-most-once per member, not exactly-once: a crash between
the send and the commit can lead to a second greeting after restart.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable

import discord
from discord.abc import Messageable
from sqlalchemy.exc import SQLAlchemyError

from sentinel.config import GreetingRule
from sentinel.database.engine import run_db
from sentinel.engine.ledger import GreetingLedger
from sentinel.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class GreetOutcome(enum.StrEnum):
    SENT = "sent"
    ALREADY_GREETED = "already_greeted"
    NO_CHANNEL = "no_channel"
    SEND_FAILED = "send_failed"


async def greet_member(
    *,
    ledger: GreetingLedger,
    store: LedgerStore,
    rule: GreetingRule,
    member_id: int,
    mention: str,
    channel: Messageable | None,
) -> GreetOutcome:
    """Send the greeting to *channel* unless *member_id* is already in the ledger.

    The ledger is only updated after a successful send.  If the durable
    commit fails the member stays greeted in memory and the gap is logged.
    """
    async with ledger.lock:
        if not ledger.should_greet(member_id):
            return GreetOutcome.ALREADY_GREETED

        if channel is None:
            logger.warning(
                "Greeting channel %d unavailable, member %d not greeted",
                rule.channel_id, member_id,
            )
            return GreetOutcome.NO_CHANNEL

        try:
            await channel.send(rule.render(mention))
        except discord.HTTPException:
            logger.exception("Failed to send greeting for member %d", member_id)
            return GreetOutcome.SEND_FAILED

        ledger.register(member_id)
        try:
            await run_db(store.add, member_id)
        except SQLAlchemyError:
            logger.exception(
                "Greeting sent but ledger commit failed for member %d; "
                "they may be greeted again after a restart",
                member_id,
            )
        else:
            logger.info("Greeted member %d", member_id)
        return GreetOutcome.SENT


async def reset_greetings(
    *,
    ledger: GreetingLedger,
    store: LedgerStore,
    member_ids: Iterable[int],
) -> int:
    """Replace the ledger with *member_ids* and commit it durably.

    Raises ``SQLAlchemyError`` if the commit fails; the in-memory ledger
    keeps the new contents either way.
    """
    members = set(member_ids)
    async with ledger.lock:
        ledger.replace(members)
        await run_db(store.replace, members)
    logger.info("Greeting ledger reset to %d current members", len(members))
    return len(members)


async def reload_ledger(*, ledger: GreetingLedger, store: LedgerStore) -> int:
    """Re-read the durable ledger into memory."""
    async with ledger.lock:
        members = await run_db(store.load)
        ledger.replace(members)
    return len(members)
