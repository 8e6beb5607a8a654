"""
sentinel.bot.cogs.ranks — Rank Ladder Commands
===============================================

Owner-only slash commands that move a member along the rank ladder:
- /promote — one rank up
- /demote — one rank down
- /setrank — straight to a named rank

The reply is a one-glyph ephemeral acknowledgment (✅ / ➖ / ❎).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from sentinel.bot.checks import is_owner, respond_check_failure
from sentinel.constants import ACK_FAILURE, MAX_AUTOCOMPLETE_CHOICES
from sentinel.engine.ranks import RankScheme
from sentinel.services.role_service import apply_rank_change

if TYPE_CHECKING:
    from sentinel.bot.core import SentinelBot


class Ranks(commands.Cog, name="Ranks"):
    """Promote, demote, and set ranks."""

    def __init__(self, bot: SentinelBot) -> None:
        self.bot = bot

    async def _change(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        scheme: RankScheme,
        name: str | None = None,
    ) -> None:
        cfg = self.bot.state.config
        if interaction.guild_id != cfg.guild_id:
            await interaction.response.send_message(ACK_FAILURE, ephemeral=True)
            return

        outcome = await apply_rank_change(
            cfg,
            member,
            scheme,
            name,
            actor=str(interaction.user),
        )
        await interaction.response.send_message(outcome.ack, ephemeral=True)

    @app_commands.command(name="promote", description="Move a member one rank up the ladder.")
    @app_commands.describe(member="The member to promote")
    @app_commands.guild_only()
    @is_owner()
    async def promote(self, interaction: discord.Interaction, member: discord.Member) -> None:
        await self._change(interaction, member, RankScheme.HIGHER)

    @app_commands.command(name="demote", description="Move a member one rank down the ladder.")
    @app_commands.describe(member="The member to demote")
    @app_commands.guild_only()
    @is_owner()
    async def demote(self, interaction: discord.Interaction, member: discord.Member) -> None:
        await self._change(interaction, member, RankScheme.LOWER)

    @app_commands.command(name="setrank", description="Give a member a specific rank.")
    @app_commands.describe(member="The member to re-rank", rank="Rank name (case-insensitive)")
    @app_commands.guild_only()
    @is_owner()
    async def set_rank(
        self, interaction: discord.Interaction, member: discord.Member, rank: str,
    ) -> None:
        await self._change(interaction, member, RankScheme.NAMED, rank)

    @set_rank.autocomplete("rank")
    async def _rank_autocomplete(
        self, interaction: discord.Interaction, current: str,
    ) -> list[app_commands.Choice[str]]:
        choices = [
            app_commands.Choice(name=rank.name, value=rank.name)
            for rank in self.bot.state.config.ranks
            if current.lower() in rank.name.lower()
        ]
        return choices[:MAX_AUTOCOMPLETE_CHOICES]

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await respond_check_failure(interaction, error)


async def setup(bot: SentinelBot) -> None:
    await bot.add_cog(Ranks(bot))
