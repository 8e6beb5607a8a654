"""
tests/test_owner_cog.py — /reload Command Tests
================================================

Invokes the command callback directly with a mocked interaction; the
config loader reads a real YAML file from ``tmp_path``.
"""

from __future__ import annotations

from functools import partial
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from conftest import run_async
from sentinel.bot.cogs.owner import Owner
from sentinel.config import load_config
from sentinel.constants import ACK_FAILURE, ACK_SUCCESS
from sentinel.engine.ledger import GreetingLedger
from sentinel.engine.state import SentinelState
from sentinel.services.ledger_store import LedgerStore


@pytest.fixture
def config_path(tmp_path, raw_config):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(raw_config, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def bot(config, config_path, db_engine):
    return SimpleNamespace(
        state=SentinelState(config, loader=partial(load_config, config_path)),
        ledger=GreetingLedger(),
        store=LedgerStore(db_engine),
    )


def _interaction() -> MagicMock:
    interaction = MagicMock()
    interaction.response.defer = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


def _reload(bot, interaction) -> None:
    cog = Owner(bot)
    run_async(cog.reload.callback(cog, interaction))


def test_reload_installs_config_and_ledger(bot):
    bot.store.add(9)
    interaction = _interaction()

    _reload(bot, interaction)

    interaction.followup.send.assert_awaited_once_with(ACK_SUCCESS, ephemeral=True)
    assert bot.state.snapshot.version == 2
    assert 9 in bot.ledger


def test_reload_with_malformed_value_replies_failure(bot, config_path, raw_config):
    raw_config["ranks"][0]["role"] = "oops"
    config_path.write_text(yaml.safe_dump(raw_config, allow_unicode=True), encoding="utf-8")
    bot.store.add(9)
    before = bot.state.snapshot
    interaction = _interaction()

    _reload(bot, interaction)

    interaction.followup.send.assert_awaited_once_with(ACK_FAILURE, ephemeral=True)
    assert bot.state.snapshot is before
    # The ledger reload still runs after the config failure
    assert 9 in bot.ledger


def test_reload_with_missing_file_replies_failure(bot, config_path):
    config_path.unlink()
    interaction = _interaction()

    _reload(bot, interaction)

    interaction.followup.send.assert_awaited_once_with(ACK_FAILURE, ephemeral=True)
    assert bot.state.snapshot.version == 1
