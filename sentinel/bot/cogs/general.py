"""
sentinel.bot.cogs.general — Utility Commands
=============================================

- /ping — liveness check
- /emojidata — show the emoji token to paste into ``config.yaml``
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from sentinel.config import EmojiKey
from sentinel.constants import ACK_FAILURE

if TYPE_CHECKING:
    from sentinel.bot.core import SentinelBot


class General(commands.Cog, name="General"):
    """Commands anyone can run."""

    def __init__(self, bot: SentinelBot) -> None:
        self.bot = bot

    @app_commands.command(name="ping", description="Check that the bot is alive.")
    async def ping(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message("pong")

    @app_commands.command(name="emojidata", description="Show how to write an emoji in config.yaml.")
    @app_commands.describe(emoji="A unicode or custom emoji")
    async def emoji_data(self, interaction: discord.Interaction, emoji: str) -> None:
        emoji = emoji.strip()
        if not emoji:
            await interaction.response.send_message(ACK_FAILURE, ephemeral=True)
            return
        key = EmojiKey.from_partial(discord.PartialEmoji.from_str(emoji))
        await interaction.response.send_message(f"`{key.text}`", ephemeral=True)


async def setup(bot: SentinelBot) -> None:
    await bot.add_cog(General(bot))
