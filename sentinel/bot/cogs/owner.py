"""
sentinel.bot.cogs.owner — Owner Maintenance Commands
=====================================================

- /stop — log out and shut the bot down
- /reload — re-read config.yaml and the greeting ledger
- /resetgreets — mark everyone currently in the guild as already greeted
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
import yaml
from discord import app_commands
from discord.ext import commands
from sqlalchemy.exc import SQLAlchemyError

from sentinel.bot.checks import is_owner, respond_check_failure
from sentinel.constants import ACK_FAILURE, ACK_SUCCESS
from sentinel.database.engine import run_db
from sentinel.errors import ConfigError
from sentinel.services.greeting_service import reload_ledger, reset_greetings

if TYPE_CHECKING:
    from sentinel.bot.core import SentinelBot

logger = logging.getLogger(__name__)


class Owner(commands.Cog, name="Owner"):
    """Lifecycle and ledger maintenance for bot owners."""

    def __init__(self, bot: SentinelBot) -> None:
        self.bot = bot

    # -------------------------------------------------------------------
    # /stop
    # -------------------------------------------------------------------
    @app_commands.command(name="stop", description="Shut the bot down.")
    @is_owner()
    async def stop(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(ACK_SUCCESS, ephemeral=True)
        logger.info("Stop requested by %s", interaction.user)
        await self.bot.close()

    # -------------------------------------------------------------------
    # /reload
    # -------------------------------------------------------------------
    @app_commands.command(name="reload", description="Reload config.yaml and the greeting ledger.")
    @is_owner()
    async def reload(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer(ephemeral=True, thinking=True)
        ok = True

        try:
            snapshot = await run_db(self.bot.state.reload)
        except (OSError, yaml.YAMLError, ConfigError):
            logger.exception("Failed to reload config")
            ok = False
        else:
            logger.info("Config version %d installed", snapshot.version)

        try:
            count = await reload_ledger(ledger=self.bot.ledger, store=self.bot.store)
        except SQLAlchemyError:
            logger.exception("Failed to reload greeting ledger")
            ok = False
        else:
            logger.info("Greeting ledger reloaded: %d members", count)

        await interaction.followup.send(ACK_SUCCESS if ok else ACK_FAILURE, ephemeral=True)

    # -------------------------------------------------------------------
    # /resetgreets
    # -------------------------------------------------------------------
    @app_commands.command(
        name="resetgreets",
        description="Treat every current member as already greeted.",
    )
    @app_commands.guild_only()
    @is_owner()
    async def reset_greets(self, interaction: discord.Interaction) -> None:
        guild = interaction.guild
        if guild is None or guild.id != self.bot.state.config.guild_id:
            await interaction.response.send_message(ACK_FAILURE, ephemeral=True)
            return

        await interaction.response.defer(ephemeral=True, thinking=True)
        try:
            member_ids = [member.id async for member in guild.fetch_members(limit=None)]
            count = await reset_greetings(
                ledger=self.bot.ledger, store=self.bot.store, member_ids=member_ids,
            )
        except (discord.HTTPException, SQLAlchemyError):
            logger.exception("Unable to reset greeting ledger")
            await interaction.followup.send(ACK_FAILURE, ephemeral=True)
            return

        await interaction.followup.send(
            f"{ACK_SUCCESS} {count} members marked as greeted.", ephemeral=True,
        )

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        await respond_check_failure(interaction, error)


async def setup(bot: SentinelBot) -> None:
    await bot.add_cog(Owner(bot))
