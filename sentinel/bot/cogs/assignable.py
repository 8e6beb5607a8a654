"""
sentinel.bot.cogs.assignable — Optional Role Toggles
=====================================================

Admin slash commands for roles listed under ``assignable`` in
``config.yaml``:
- /assign — give a member an assignable role
- /unassign — take it away

Names are matched case-insensitively.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from sentinel.bot.checks import is_admin, respond_check_failure
from sentinel.constants import MAX_AUTOCOMPLETE_CHOICES
from sentinel.engine.assignable import AssignDirection
from sentinel.services.role_service import apply_assignable_change

if TYPE_CHECKING:
    from sentinel.bot.core import SentinelBot


class Assignable(commands.Cog, name="Assignable"):
    """Toggle assignable roles on members."""

    def __init__(self, bot: SentinelBot) -> None:
        self.bot = bot

    async def _toggle(
        self,
        interaction: discord.Interaction,
        member: discord.Member,
        direction: AssignDirection,
        role: str,
    ) -> None:
        outcome = await apply_assignable_change(
            self.bot.state.config,
            member,
            direction,
            role,
            actor=str(interaction.user),
        )
        await interaction.response.send_message(outcome.ack, ephemeral=True)

    @app_commands.command(name="assign", description="Give a member an assignable role.")
    @app_commands.describe(member="The member", role="Assignable role name")
    @app_commands.guild_only()
    @is_admin()
    async def assign(
        self, interaction: discord.Interaction, member: discord.Member, role: str,
    ) -> None:
        await self._toggle(interaction, member, AssignDirection.ASSIGN, role)

    @app_commands.command(name="unassign", description="Remove an assignable role from a member.")
    @app_commands.describe(member="The member", role="Assignable role name")
    @app_commands.guild_only()
    @is_admin()
    async def unassign(
        self, interaction: discord.Interaction, member: discord.Member, role: str,
    ) -> None:
        await self._toggle(interaction, member, AssignDirection.UNASSIGN, role)

    @assign.autocomplete("role")
    @unassign.autocomplete("role")
    async def _role_autocomplete(
        self, interaction: discord.Interaction, current: str,
    ) -> list[app_commands.Choice[str]]:
        choices = [
            app_commands.Choice(name=name, value=name)
            for name in self.bot.state.config.assignable
            if current.lower() in name.lower()
        ]
        return choices[:MAX_AUTOCOMPLETE_CHOICES]

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await respond_check_failure(interaction, error)


async def setup(bot: SentinelBot) -> None:
    await bot.add_cog(Assignable(bot))
