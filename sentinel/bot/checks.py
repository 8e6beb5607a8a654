"""
sentinel.bot.checks — Command Authorization
============================================

Two tiers, both driven by the current config snapshot:

- **owner** — user id listed under ``owners`` in ``config.yaml``.
- **admin** — an owner, a holder of any position flagged ``admin``, or a
  member with Discord's Administrator permission.

The checks only gate access; the engine itself performs no authorization.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import discord
from discord import app_commands

from sentinel.config import SentinelConfig
from sentinel.constants import ACK_FAILURE

if TYPE_CHECKING:
    from sentinel.bot.core import SentinelBot


def is_privileged(
    cfg: SentinelConfig,
    user_id: int,
    role_ids: Iterable[int],
    administrator: bool,
) -> bool:
    """True if the user is an owner, holds an admin position, or is a server admin."""
    if user_id in cfg.owners:
        return True
    if any(cfg.is_admin_role(role_id) for role_id in role_ids):
        return True
    return administrator


def is_owner():
    """Decorator that restricts a command to configured owners."""
    async def predicate(interaction: discord.Interaction) -> bool:
        bot: SentinelBot = interaction.client  # type: ignore[assignment]
        return interaction.user.id in bot.state.config.owners
    return app_commands.check(predicate)


def is_admin():
    """Decorator that restricts a command to owners and admins of the home guild."""
    async def predicate(interaction: discord.Interaction) -> bool:
        bot: SentinelBot = interaction.client  # type: ignore[assignment]
        cfg = bot.state.config
        if interaction.guild_id != cfg.guild_id:
            return False
        user = interaction.user
        if not isinstance(user, discord.Member):
            return user.id in cfg.owners
        return is_privileged(
            cfg,
            user.id,
            (role.id for role in user.roles),
            user.guild_permissions.administrator,
        )
    return app_commands.check(predicate)


async def respond_check_failure(
    interaction: discord.Interaction, error: app_commands.AppCommandError
) -> None:
    """Shared ``cog_app_command_error`` body: answer check failures, re-raise the rest."""
    if isinstance(error, app_commands.CheckFailure):
        await interaction.response.send_message(
            f"{ACK_FAILURE} Insufficient permissions.", ephemeral=True,
        )
    else:
        raise error
