"""
sentinel.bot.core — Bot Instance & Cog Loader
==============================================

Defines :class:`SentinelBot`, a ``commands.Bot`` subclass that:

1. Carries the shared state every cog needs: the versioned config
   snapshot (``bot.state``), the in-memory greeting ledger
   (``bot.ledger``) and its durable store (``bot.store``).
2. Loads every cog in ``sentinel/bot/cogs/``.
3. Syncs the slash-command tree on startup (guild-scoped for dev when
   ``DEV_GUILD_ID`` is set, global otherwise).
4. Seeds the role-menu message with one reaction per menu emoji so
   members have something to click.
"""

from __future__ import annotations

import logging
import os

import discord
from discord.ext import commands

from sentinel.config import SentinelConfig
from sentinel.engine.ledger import GreetingLedger
from sentinel.engine.state import SentinelState
from sentinel.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

# Cog modules to load on startup.
EXTENSIONS: list[str] = [
    "sentinel.bot.cogs.role_menu",
    "sentinel.bot.cogs.ranks",
    "sentinel.bot.cogs.assignable",
    "sentinel.bot.cogs.owner",
    "sentinel.bot.cogs.general",
]


class SentinelBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    state:
        The :class:`SentinelState` wrapping the loaded ``config.yaml``.
    ledger:
        In-memory :class:`GreetingLedger`, pre-loaded from *store*.
    store:
        The durable :class:`LedgerStore`.
    """

    def __init__(self, state: SentinelState, ledger: GreetingLedger, store: LedgerStore) -> None:
        # GUILD_MEMBERS is privileged (enable it in the Developer Portal);
        # it is needed for member role snapshots and /resetgreets.
        intents = discord.Intents.default()
        intents.members = True
        intents.presences = False

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            description="Sentinel: rank and role management",
        )

        self.state = state
        self.ledger = ledger
        self.store = store

    @property
    def cfg(self) -> SentinelConfig:
        """Shortcut for the current config snapshot."""
        return self.state.config

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load all cog extensions; one broken cog shouldn't take down the rest."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)

        # --- Slash-command sync ---------------------------------------------
        dev_guild_id = os.getenv("DEV_GUILD_ID")
        if dev_guild_id:
            guild = discord.Object(id=int(dev_guild_id))
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info("Synced %d commands to dev guild %s", len(synced), dev_guild_id)
        else:
            synced = await self.tree.sync()
            logger.info("Synced %d commands globally", len(synced))

        if self.get_guild(self.cfg.guild_id) is None:
            logger.warning("Configured guild %d not visible to this bot", self.cfg.guild_id)

        await self.seed_role_menu()

    # -----------------------------------------------------------------------
    # Role menu
    # -----------------------------------------------------------------------
    def role_menu_message(self) -> discord.PartialMessage:
        menu = self.cfg.role_menu
        channel = self.get_partial_messageable(menu.channel_id, guild_id=self.cfg.guild_id)
        return channel.get_partial_message(menu.message_id)

    async def seed_role_menu(self) -> int:
        """React to the menu message with every menu emoji.  Returns how many succeeded."""
        message = self.role_menu_message()
        added = 0
        for entry in self.cfg.role_menu.entries:
            try:
                await message.add_reaction(entry.emoji.text)
                added += 1
            except discord.NotFound:
                logger.error("Couldn't find role menu message %d", message.id)
                break
            except discord.HTTPException as exc:
                logger.warning("Couldn't add %s to the role menu: %s", entry.emoji, exc)
        logger.info("Role menu seeded with %d/%d reactions", added, len(self.cfg.role_menu.entries))
        return added
