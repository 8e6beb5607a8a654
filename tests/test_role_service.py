"""
tests/test_role_service.py — Rank & Assignable Command Tests
=============================================================
"""

from __future__ import annotations

from conftest import GUILD_ID, MEMBER, NEWS, RECRUIT, SOLDIER, VETERAN, http_error, run_async
from sentinel.constants import ACK_FAILURE, ACK_NOOP, ACK_SUCCESS
from sentinel.engine.assignable import AssignDirection
from sentinel.engine.ranks import RankScheme
from sentinel.services.role_service import (
    CommandOutcome,
    apply_assignable_change,
    apply_rank_change,
    member_role_ids,
)


def _held_after_edit(member) -> set[int]:
    _, kwargs = member.edit.call_args
    return {obj.id for obj in kwargs["roles"]}


def test_member_role_ids_skip_everyone(make_member):
    member = make_member(roles=(SOLDIER, NEWS))
    ids = member_role_ids(member)
    assert GUILD_ID not in ids
    assert ids == {SOLDIER, NEWS}


def test_outcome_acks():
    assert CommandOutcome.SUCCESS.ack == ACK_SUCCESS
    assert CommandOutcome.UNCHANGED.ack == ACK_NOOP
    assert CommandOutcome.DECLINED.ack == ACK_FAILURE
    assert CommandOutcome.FAILED.ack == ACK_FAILURE


class TestRankCommands:
    def test_promote_replaces_roles_in_one_edit(self, config, make_member):
        member = make_member(roles=(RECRUIT, SOLDIER, NEWS))
        outcome = run_async(apply_rank_change(config, member, RankScheme.HIGHER))

        assert outcome is CommandOutcome.SUCCESS
        member.edit.assert_awaited_once()
        assert _held_after_edit(member) == {MEMBER, SOLDIER, NEWS}

    def test_top_of_ladder_is_declined(self, config, make_member):
        member = make_member(roles=(VETERAN,))
        outcome = run_async(apply_rank_change(config, member, RankScheme.HIGHER))

        assert outcome is CommandOutcome.DECLINED
        member.edit.assert_not_awaited()

    def test_setrank_to_current_is_unchanged(self, config, make_member):
        member = make_member(roles=(MEMBER,))
        outcome = run_async(apply_rank_change(config, member, RankScheme.NAMED, "member"))

        assert outcome is CommandOutcome.UNCHANGED
        member.edit.assert_not_awaited()

    def test_no_rank_is_declined(self, config, make_member):
        member = make_member(roles=(SOLDIER,))
        assert run_async(apply_rank_change(config, member, RankScheme.LOWER)) is CommandOutcome.DECLINED

    def test_platform_rejection(self, config, make_member):
        member = make_member(roles=(RECRUIT,))
        member.edit.side_effect = http_error(403)

        outcome = run_async(apply_rank_change(config, member, RankScheme.HIGHER))
        assert outcome is CommandOutcome.FAILED


class TestAssignableCommands:
    def test_assign_then_assign_again(self, config, make_member):
        member = make_member(roles=(SOLDIER,))
        outcome = run_async(apply_assignable_change(config, member, AssignDirection.ASSIGN, "news"))

        assert outcome is CommandOutcome.SUCCESS
        member.add_roles.assert_awaited_once()
        (role,), _ = member.add_roles.call_args
        assert role.id == NEWS

        holding = make_member(roles=(SOLDIER, NEWS))
        again = run_async(apply_assignable_change(config, holding, AssignDirection.ASSIGN, "news"))
        assert again is CommandOutcome.UNCHANGED
        holding.add_roles.assert_not_awaited()

    def test_unassign_removes_only_that_role(self, config, make_member):
        member = make_member(roles=(SOLDIER, NEWS))
        outcome = run_async(apply_assignable_change(config, member, AssignDirection.UNASSIGN, "NEWS"))

        assert outcome is CommandOutcome.SUCCESS
        (role,), _ = member.remove_roles.call_args
        assert role.id == NEWS
        member.edit.assert_not_awaited()

    def test_unknown_assignable_is_declined(self, config, make_member):
        member = make_member()
        outcome = run_async(apply_assignable_change(config, member, AssignDirection.ASSIGN, "memes"))
        assert outcome is CommandOutcome.DECLINED

    def test_platform_rejection(self, config, make_member):
        member = make_member()
        member.add_roles.side_effect = http_error(403)
        outcome = run_async(apply_assignable_change(config, member, AssignDirection.ASSIGN, "news"))
        assert outcome is CommandOutcome.FAILED
