"""
tests/test_assignable.py — Assignable Role Toggle Tests
========================================================
"""

from __future__ import annotations

import pytest

from conftest import EVENTS, NEWS, SOLDIER
from sentinel.engine.assignable import AssignDirection, change_assignable
from sentinel.errors import AlreadyAssigned, NoSuchAssignable, NotAssigned


def test_assign_then_assign_again(config):
    roles = {SOLDIER}
    assert change_assignable(config, roles, AssignDirection.ASSIGN, "news") == NEWS

    roles.add(NEWS)
    with pytest.raises(AlreadyAssigned):
        change_assignable(config, roles, AssignDirection.ASSIGN, "news")


def test_unassign_requires_the_role(config):
    with pytest.raises(NotAssigned):
        change_assignable(config, {SOLDIER}, AssignDirection.UNASSIGN, "news")
    assert change_assignable(config, {NEWS}, AssignDirection.UNASSIGN, "news") == NEWS


def test_lookup_ignores_case(config):
    assert change_assignable(config, set(), AssignDirection.ASSIGN, "EVENTS") == EVENTS


def test_unknown_name(config):
    with pytest.raises(NoSuchAssignable):
        change_assignable(config, set(), AssignDirection.ASSIGN, "memes")
