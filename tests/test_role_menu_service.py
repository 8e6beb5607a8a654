"""
tests/test_role_menu_service.py — Role-Menu Side-Effect Tests
==============================================================

Drives :func:`handle_menu_reaction` with mocked members, menu message and
greeting channel, and checks which Discord calls were made.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import GUEST, MEMBER, NEWS, OFFICER, RECRUIT, SOLDIER, http_error, run_async
from sentinel.config import EmojiKey, parse_config
from sentinel.engine.ledger import GreetingLedger
from sentinel.services.greeting_service import GreetOutcome
from sentinel.services.ledger_store import LedgerStore
from sentinel.services.role_menu_service import handle_menu_reaction

SWORDS = EmojiKey.parse("\u2694\ufe0f")
WAVE = EmojiKey.parse("\U0001f44b")


@pytest.fixture
def store(db_engine):
    return LedgerStore(db_engine)


@pytest.fixture
def message():
    msg = MagicMock()
    msg.remove_reaction = AsyncMock()
    return msg


@pytest.fixture
def channel():
    ch = MagicMock()
    ch.send = AsyncMock()
    return ch


def _edited_role_ids(member) -> set[int]:
    _, kwargs = member.edit.call_args
    return {obj.id for obj in kwargs["roles"]}


def _react(config, store, member, message, emoji, channel, ledger=None):
    return run_async(handle_menu_reaction(
        config=config,
        ledger=ledger if ledger is not None else GreetingLedger(),
        store=store,
        member=member,
        message=message,
        emoji=emoji,
        greeting_channel=channel,
    ))


class TestUnmanaged:
    def test_only_the_reaction_is_removed(self, config, store, make_member, message, channel):
        member = make_member(roles=(OFFICER, MEMBER))
        report = _react(config, store, member, message, SWORDS, channel)

        message.remove_reaction.assert_awaited_once_with(SWORDS.text, member)
        member.edit.assert_not_awaited()
        channel.send.assert_not_awaited()
        assert report.edited is False
        assert report.ok


class TestSwitching:
    def test_guest_to_soldier(self, config, store, make_member, message, channel):
        member = make_member(roles=(GUEST, NEWS))
        ledger = GreetingLedger()
        report = _react(config, store, member, message, SWORDS, channel, ledger)

        member.edit.assert_awaited_once()
        assert _edited_role_ids(member) == {SOLDIER, RECRUIT, NEWS}
        message.remove_reaction.assert_awaited_once_with(WAVE.text, member)
        channel.send.assert_awaited_once()
        assert report.greeting is GreetOutcome.SENT
        assert member.id in ledger
        assert store.load() == {member.id}

    def test_soldier_to_guest_strips_ranks(self, config, store, make_member, message, channel):
        member = make_member(roles=(SOLDIER, MEMBER))
        report = _react(config, store, member, message, WAVE, channel)

        assert _edited_role_ids(member) == {GUEST}
        message.remove_reaction.assert_awaited_once_with(SWORDS.text, member)
        channel.send.assert_not_awaited()
        assert report.greeting is None

    def test_previously_greeted_member_not_greeted_again(
        self, config, store, make_member, message, channel,
    ):
        member = make_member(roles=(GUEST,))
        report = _react(config, store, member, message, SWORDS, channel, GreetingLedger({member.id}))

        member.edit.assert_awaited_once()
        channel.send.assert_not_awaited()
        assert report.greeting is GreetOutcome.ALREADY_GREETED


class TestRepeat:
    def test_re_react_makes_no_calls(self, config, store, make_member, message, channel):
        member = make_member(roles=(SOLDIER, MEMBER))
        report = _react(config, store, member, message, SWORDS, channel)

        member.edit.assert_not_awaited()
        message.remove_reaction.assert_not_awaited()
        channel.send.assert_not_awaited()
        assert report.decision.is_repeat

    def test_re_react_repairs_missing_rank_only(self, config, store, make_member, message, channel):
        member = make_member(roles=(SOLDIER,))
        _react(config, store, member, message, SWORDS, channel)

        assert _edited_role_ids(member) == {SOLDIER, RECRUIT}
        message.remove_reaction.assert_not_awaited()
        channel.send.assert_not_awaited()


class TestFailures:
    def test_edit_failure_does_not_abort_cleanup(self, config, store, make_member, message, channel):
        member = make_member(roles=(GUEST,))
        member.edit.side_effect = http_error(403)
        report = _react(config, store, member, message, SWORDS, channel)

        assert report.edited is False
        message.remove_reaction.assert_awaited_once()
        channel.send.assert_awaited_once()
        assert not report.ok
        assert report.failures[0].startswith("edit roles")

    def test_reaction_removal_failure_is_recorded(self, config, store, make_member, message, channel):
        member = make_member(roles=(GUEST,))
        message.remove_reaction.side_effect = http_error(404)
        report = _react(config, store, member, message, SWORDS, channel)

        assert report.edited is True
        assert report.removed_reactions == []
        assert report.greeting is GreetOutcome.SENT
        assert len(report.failures) == 1

    def test_missing_greeting_channel(self, config, store, make_member, message):
        member = make_member(roles=(GUEST,))
        report = _react(config, store, member, message, SWORDS, None)

        assert report.greeting is GreetOutcome.NO_CHANNEL
        assert report.failures == ["greeting: no_channel"]


def test_recruit_scenario_with_trainee_default(raw_config, store, make_member, message, channel):
    """Empty member picks the ranked 'Recruit' position: gets Trainee and one greeting."""
    raw_config["ranks"] = [{"name": "Trainee", "role": 90}] + raw_config["ranks"][1:]
    raw_config["default_rank"] = "Trainee"
    raw_config["positions"][0]["name"] = "Recruit"
    raw_config["role_menu"]["positions"][0]["position"] = "Recruit"
    raw_config["greeting"]["positions"] = ["Recruit"]
    cfg = parse_config(raw_config)

    member = make_member(roles=())
    ledger = GreetingLedger()
    _react(cfg, store, member, message, SWORDS, channel, ledger)

    assert _edited_role_ids(member) == {SOLDIER, 90}
    channel.send.assert_awaited_once_with(f"Welcome {member.mention}!\nGlad to have you.")
    assert ledger.snapshot() == frozenset({member.id})
