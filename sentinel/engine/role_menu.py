"""
sentinel.engine.role_menu — Role-Menu Reconciliation
=====================================================

The state machine behind the self-service role menu.  A member's "state"
is the position they currently hold; a reaction on the menu message asks
to move them to the position bound to that emoji.

:func:`reconcile_position` is pure: it returns a :class:`MenuDecision`
describing the replacement role set and the side effects to run.
:mod:`sentinel.services.role_menu_service` carries them out.

Tie-breaks when the platform lets a member hold more than it should:

- Several positions → the first in ``positions`` order is "current";
  the others are stripped once the member picks from the menu.
- Several ranks under a ranked position → the first in ladder order is
  kept, the rest are stripped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sentinel.config import EmojiKey, Position, SentinelConfig
from sentinel.errors import UnknownPosition

__all__ = ["MenuDecision", "reconcile_position", "reconcile_ranks"]


@dataclass(frozen=True, slots=True)
class MenuDecision:
    """What to do about one role-menu reaction.

    ``roles`` is the full replacement role set, or None when the member's
    roles must not be touched.  ``remove_reactions`` lists this member's
    reactions to delete from the menu message.
    """

    governed: bool
    previous: Position | None
    target: Position | None = None
    roles: frozenset[int] | None = None
    roles_changed: bool = False
    remove_reactions: tuple[EmojiKey, ...] = ()
    is_repeat: bool = False
    greet: bool = False

    @property
    def should_edit(self) -> bool:
        return self.roles is not None and self.roles_changed


def reconcile_ranks(
    config: SentinelConfig,
    target: Position,
    current_roles: frozenset[int],
    roles: set[int],
) -> None:
    """Adjust *roles* in place so rank membership matches *target*.ranked."""
    held = config.member_ranks(current_roles)
    if target.ranked and not held:
        roles.add(config.default_rank_entry().role)
    elif target.ranked and len(held) > 1:
        for extra in held[1:]:
            roles.discard(extra.role)
    elif not target.ranked and held:
        for rank in held:
            roles.discard(rank.role)


def reconcile_position(
    config: SentinelConfig,
    roles: Iterable[int],
    emoji: EmojiKey,
) -> MenuDecision:
    """Decide the outcome of *emoji* being added to the role menu.

    The caller has already checked that the reaction is on the bound menu
    message and that the reactor is not a bot.

    Raises
    ------
    UnknownPosition
        *emoji* is not bound to a configured position.
    """
    current_roles = frozenset(roles)
    held = config.member_positions(current_roles)
    previous = held[0] if held else None

    # A position the menu doesn't manage (e.g. handed out by an admin) is
    # left alone; only the stray reaction is cleaned up.
    if not config.is_governed(previous):
        return MenuDecision(governed=False, previous=previous, remove_reactions=(emoji,))

    entry = config.menu_entry(emoji)
    target = config.position_by_name(entry.position) if entry else None
    if target is None:
        raise UnknownPosition(f"{emoji} is not bound to a position")

    new_roles = set(current_roles)
    new_roles.add(target.role)
    stale = [pos for pos in held if pos != target]
    for pos in stale:
        new_roles.discard(pos.role)
    reconcile_ranks(config, target, current_roles, new_roles)

    final = frozenset(new_roles)
    is_repeat = target == previous
    if is_repeat:
        cleanup: tuple[EmojiKey, ...] = ()
    else:
        cleanup = tuple(
            key for key in (config.menu_emoji(pos.name) for pos in stale) if key is not None
        )

    return MenuDecision(
        governed=True,
        previous=previous,
        target=target,
        roles=final,
        roles_changed=final != current_roles,
        remove_reactions=cleanup,
        is_repeat=is_repeat,
        greet=not is_repeat and config.is_greetable(target.name),
    )
