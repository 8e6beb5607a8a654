"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import asyncio
import copy
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from sentinel.config import SentinelConfig, parse_config
from sentinel.database.models import Base

GUILD_ID = 1000

# Role ids used throughout the suite
RECRUIT, MEMBER, VETERAN = 11, 12, 13
SOLDIER, GUEST, OFFICER = 21, 22, 23
NEWS, EVENTS = 31, 32

_RAW_CONFIG: dict = {
    "guild_id": GUILD_ID,
    "owners": [1],
    "default_rank": "Recruit",
    "ranks": [
        {"name": "Recruit", "role": RECRUIT},
        {"name": "Member", "role": MEMBER},
        {"name": "Veteran", "role": VETERAN},
    ],
    "positions": [
        {"name": "Soldier", "role": SOLDIER, "ranked": True},
        {"name": "Guest", "role": GUEST},
        {"name": "Officer", "role": OFFICER, "ranked": True, "admin": True},
    ],
    "assignable": {"news": NEWS, "Events": EVENTS},
    "role_menu": {
        "channel_id": 500,
        "message_id": 600,
        "positions": [
            {"emoji": "\u2694\ufe0f", "position": "Soldier"},  # ⚔️
            {"emoji": "\U0001f44b", "position": "Guest"},         # 👋
        ],
    },
    "greeting": {
        "channel_id": 700,
        "positions": ["Soldier"],
        "message": ["Welcome {mention}!", "Glad to have you."],
    },
}


@pytest.fixture
def raw_config() -> dict:
    """A fresh, mutable copy of the canonical test config mapping."""
    return copy.deepcopy(_RAW_CONFIG)


@pytest.fixture
def config(raw_config: dict) -> SentinelConfig:
    return parse_config(raw_config)


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with all Sentinel tables.

    Uses StaticPool so every thread shares the same in-memory database
    (required by ``asyncio.to_thread`` used in ``run_db``).
    """
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def make_member():
    """Factory for a mock ``discord.Member`` holding the given role ids."""

    def _make(member_id: int = 4242, roles: tuple[int, ...] = (), *, bot: bool = False) -> MagicMock:
        member = MagicMock()
        member.id = member_id
        member.bot = bot
        member.mention = f"<@{member_id}>"
        member.guild = SimpleNamespace(id=GUILD_ID)
        # @everyone is always first and shares the guild's id
        member.roles = [SimpleNamespace(id=GUILD_ID)] + [SimpleNamespace(id=r) for r in roles]
        member.edit = AsyncMock()
        member.add_roles = AsyncMock()
        member.remove_roles = AsyncMock()
        return member

    return _make


def http_error(status: int = 500) -> discord.HTTPException:
    """A ``discord.HTTPException`` as raised by a failed REST call."""
    return discord.HTTPException(SimpleNamespace(status=status, reason="Error"), "boom")


# Helper to run async tests without pytest-asyncio
def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)
