"""
sentinel.services.role_menu_service — Apply Role-Menu Decisions
================================================================

Runs the side effects of a :class:`~sentinel.engine.role_menu.MenuDecision`
in order:

1. replace the member's roles (skipped when nothing would change);
2. delete the member's stale reactions from the menu message;
3. greet the member if the new position is greetable.

Each step is best-effort: a failure is logged and recorded on the
:class:`ReconcileReport`, and the remaining steps still run.  Nothing is
retried or rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import discord
from discord.abc import Messageable

from sentinel.config import EmojiKey, SentinelConfig
from sentinel.engine.ledger import GreetingLedger
from sentinel.engine.role_menu import MenuDecision, reconcile_position
from sentinel.services.greeting_service import GreetOutcome, greet_member
from sentinel.services.ledger_store import LedgerStore
from sentinel.services.role_service import member_role_ids, replace_roles

logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """What actually happened while applying one decision."""

    decision: MenuDecision
    edited: bool = False
    removed_reactions: list[EmojiKey] = field(default_factory=list)
    greeting: GreetOutcome | None = None
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


async def handle_menu_reaction(
    *,
    config: SentinelConfig,
    ledger: GreetingLedger,
    store: LedgerStore,
    member: discord.Member,
    message: discord.PartialMessage,
    emoji: EmojiKey,
    greeting_channel: Messageable | None,
) -> ReconcileReport:
    """Reconcile *member*'s position after they reacted with *emoji* on the menu."""
    decision = reconcile_position(config, member_role_ids(member), emoji)
    report = ReconcileReport(decision=decision)

    if not decision.governed:
        logger.info(
            "Member %d holds unmanaged position %s; removing %s",
            member.id, decision.previous.name if decision.previous else "?", emoji,
        )
        await _remove_reactions(message, member, decision.remove_reactions, report)
        return report

    assert decision.target is not None  # governed decisions always carry a target

    if decision.should_edit:
        try:
            await replace_roles(
                member, decision.roles or (),
                reason=f"Sentinel role menu: {decision.target.name}",
            )
            report.edited = True
        except discord.HTTPException as exc:
            logger.exception("Couldn't edit roles for member %d", member.id)
            report.failures.append(f"edit roles: {exc}")

    if decision.is_repeat:
        return report

    await _remove_reactions(message, member, decision.remove_reactions, report)

    if decision.greet and config.greeting is not None:
        report.greeting = await greet_member(
            ledger=ledger,
            store=store,
            rule=config.greeting,
            member_id=member.id,
            mention=member.mention,
            channel=greeting_channel,
        )
        if report.greeting in (GreetOutcome.SEND_FAILED, GreetOutcome.NO_CHANNEL):
            report.failures.append(f"greeting: {report.greeting.value}")

    logger.info(
        "Member %d: %s → %s (edited=%s, cleaned=%d, greeting=%s)",
        member.id,
        decision.previous.name if decision.previous else "none",
        decision.target.name,
        report.edited,
        len(report.removed_reactions),
        report.greeting.value if report.greeting else "n/a",
    )
    return report


async def _remove_reactions(
    message: discord.PartialMessage,
    member: discord.Member,
    emojis: tuple[EmojiKey, ...],
    report: ReconcileReport,
) -> None:
    for emoji in emojis:
        try:
            await message.remove_reaction(emoji.text, member)
            report.removed_reactions.append(emoji)
        except discord.HTTPException as exc:
            logger.warning(
                "Couldn't remove %s reaction for member %d: %s", emoji, member.id, exc,
            )
            report.failures.append(f"remove reaction {emoji}: {exc}")
