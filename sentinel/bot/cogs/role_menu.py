"""
sentinel.bot.cogs.role_menu — Self-Service Position Menu
=========================================================

Listens for ``on_raw_reaction_add`` on the configured role-menu message
and hands qualifying reactions to
:func:`sentinel.services.role_menu_service.handle_menu_reaction`.

Uses raw events so the menu keeps working when the message isn't cached.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.abc import Messageable
from discord.ext import commands

from sentinel.config import EmojiKey, SentinelConfig
from sentinel.services.role_menu_service import handle_menu_reaction

if TYPE_CHECKING:
    from sentinel.bot.core import SentinelBot

logger = logging.getLogger(__name__)


class RoleMenu(commands.Cog, name="RoleMenu"):
    """Grants positions from reactions on the role-menu message."""

    def __init__(self, bot: SentinelBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent) -> None:
        """Fire when any reaction is added, even on uncached messages."""
        try:
            await self._handle_reaction(payload)
        except Exception:
            logger.exception(
                "Error processing role menu reaction on message %s from user %s",
                payload.message_id, payload.user_id,
            )

    async def _handle_reaction(self, payload: discord.RawReactionActionEvent) -> None:
        """Inner reaction handler (separated for error isolation)."""
        # Read the snapshot once so the whole event sees one config version
        cfg = self.bot.state.config

        # Gate: only the home guild
        if payload.guild_id != cfg.guild_id:
            return

        emoji = EmojiKey.from_partial(payload.emoji)
        if not cfg.is_role_menu_reaction(payload.channel_id, payload.message_id, emoji):
            return

        # Gate: ignore bots (including our own seeding reactions)
        member = payload.member
        if member is None or member.bot:
            return

        logger.info(
            "Role menu reaction %s from member %s", emoji, member.id,
        )
        message = self.bot.get_partial_messageable(
            payload.channel_id, guild_id=payload.guild_id,
        ).get_partial_message(payload.message_id)

        await handle_menu_reaction(
            config=cfg,
            ledger=self.bot.ledger,
            store=self.bot.store,
            member=member,
            message=message,
            emoji=emoji,
            greeting_channel=self._greeting_channel(cfg),
        )

    def _greeting_channel(self, cfg: SentinelConfig) -> Messageable | None:
        if cfg.greeting is None:
            return None
        channel = self.bot.get_channel(cfg.greeting.channel_id)
        if isinstance(channel, Messageable):
            return channel
        return self.bot.get_partial_messageable(cfg.greeting.channel_id, guild_id=cfg.guild_id)


async def setup(bot: SentinelBot) -> None:
    await bot.add_cog(RoleMenu(bot))
