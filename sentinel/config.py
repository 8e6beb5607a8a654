"""
sentinel.config — YAML Configuration Loader & Role Model
=========================================================

**Why this file exists:**
Everything the reconciliation engine decides is driven by ``config.yaml``:
the rank ladder, the position roles, the assignable roles, the role-menu
binding, and the greeting rule.  This module reads that file into an
immutable, validated :class:`SentinelConfig` and hosts the lookup helpers
the engine uses (ladder neighbours, loose name matching, "which ranks /
positions does this role set hold").

Secrets (the bot token, the database URL) live in ``.env``, not here.

Usage::

    from sentinel.config import load_config

    cfg = load_config()                    # reads ./config.yaml by default
    cfg.higher_rank("Recruit")             # Rank(name='Member', role=...)
    cfg.rank_by_name_loose("veteran")      # case-insensitive
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import discord
import yaml

from sentinel.constants import MENTION_PLACEHOLDER
from sentinel.errors import ConfigError

# <:name:id>, <a:name:id>, or the bare name:id form Discord uses in URLs
_CUSTOM_EMOJI_RE = re.compile(
    r"<(?P<animated>a?):(?P<name>\w+):(?P<id>\d{15,21})>|(?P<bare>\w+):(?P<bare_id>\d{15,21})"
)


# ---------------------------------------------------------------------------
# Emoji token
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class EmojiKey:
    """Opaque, equality-comparable emoji token.

    Unicode emoji compare by their text; custom emoji compare by snowflake
    only, so a renamed custom emoji still matches.  ``text`` is the form
    Discord accepts when adding or removing a reaction.
    """

    token: str
    text: str = field(compare=False)

    @classmethod
    def parse(cls, raw: str) -> EmojiKey:
        """Build a key from ``config.yaml`` text (``🎖️``, ``<:name:id>``, ``name:id``)."""
        raw = str(raw).strip()
        if not raw:
            raise ConfigError("Empty emoji in role menu")
        match = _CUSTOM_EMOJI_RE.fullmatch(raw)
        if match:
            emoji_id = match["id"] or match["bare_id"]
            name = match["name"] or match["bare"]
            prefix = "a" if match["animated"] else ""
            return cls(token=f"custom:{emoji_id}", text=f"<{prefix}:{name}:{emoji_id}>")
        return cls(token=raw, text=raw)

    @classmethod
    def from_partial(cls, emoji: discord.PartialEmoji) -> EmojiKey:
        """Build a key from the emoji attached to a gateway reaction event."""
        if emoji.id is not None:
            return cls(token=f"custom:{emoji.id}", text=str(emoji))
        return cls(token=emoji.name, text=emoji.name)

    def __str__(self) -> str:
        return self.text


# ---------------------------------------------------------------------------
# Role model
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Rank:
    """One rung of the rank ladder."""

    name: str
    role: int


@dataclass(frozen=True, slots=True)
class Position:
    """A mutually exclusive position role.

    ``ranked`` holders must carry exactly one rank; ``admin`` holders are
    treated as administrators by the command checks.
    """

    name: str
    role: int
    ranked: bool = False
    admin: bool = False


@dataclass(frozen=True, slots=True)
class RoleMenuEntry:
    """Binds one reaction emoji on the role menu to a position name."""

    emoji: EmojiKey
    position: str


@dataclass(frozen=True, slots=True)
class RoleMenu:
    channel_id: int
    message_id: int
    entries: tuple[RoleMenuEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class GreetingRule:
    """Where and how to greet a member the first time they take a greetable position."""

    channel_id: int
    positions: frozenset[str] = frozenset()
    lines: tuple[str, ...] = ()

    def render(self, mention: str) -> str:
        return "\n".join(self.lines).replace(MENTION_PLACEHOLDER, mention)


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class SentinelConfig:
    """Immutable configuration loaded from ``config.yaml``.

    A new instance is built on every reload; nothing mutates one in place.
    """

    guild_id: int  # The only guild Sentinel responds in
    owners: frozenset[int]  # User ids with absolute authority
    default_rank: str  # Given to members of a ranked position who have none
    ranks: tuple[Rank, ...]  # Ladder order: index 0 is the lowest rank
    positions: tuple[Position, ...]
    assignable: Mapping[str, int]
    role_menu: RoleMenu
    greeting: GreetingRule | None = None

    # -------------------------------------------------------------------
    # Rank ladder
    # -------------------------------------------------------------------
    def rank_by_name(self, name: str) -> Rank | None:
        return next((rank for rank in self.ranks if rank.name == name), None)

    def rank_by_name_loose(self, name: str) -> Rank | None:
        """Case-insensitive exact match, for user-supplied text."""
        wanted = name.strip().lower()
        return next((rank for rank in self.ranks if rank.name.lower() == wanted), None)

    def higher_rank(self, name: str) -> Rank | None:
        """Rank immediately above *name*, or None if *name* is absent or last."""
        index = self._rank_index(name)
        if index is None or index + 1 >= len(self.ranks):
            return None
        return self.ranks[index + 1]

    def lower_rank(self, name: str) -> Rank | None:
        """Rank immediately below *name*, or None if *name* is absent or first."""
        index = self._rank_index(name)
        if index is None or index == 0:
            return None
        return self.ranks[index - 1]

    def member_ranks(self, roles: Iterable[int]) -> list[Rank]:
        """Every ladder rank present in *roles*, in ladder order."""
        held = set(roles)
        return [rank for rank in self.ranks if rank.role in held]

    def default_rank_entry(self) -> Rank:
        rank = self.rank_by_name(self.default_rank)
        if rank is None:  # guarded by validation at load time
            raise ConfigError(f"Default rank {self.default_rank!r} is not on the ladder")
        return rank

    def _rank_index(self, name: str) -> int | None:
        for index, rank in enumerate(self.ranks):
            if rank.name == name:
                return index
        return None

    # -------------------------------------------------------------------
    # Positions
    # -------------------------------------------------------------------
    def position_by_name(self, name: str) -> Position | None:
        return next((pos for pos in self.positions if pos.name == name), None)

    def member_positions(self, roles: Iterable[int]) -> list[Position]:
        """Every position present in *roles*, in position-list order."""
        held = set(roles)
        return [pos for pos in self.positions if pos.role in held]

    def is_admin_role(self, role_id: int) -> bool:
        return any(pos.admin and pos.role == role_id for pos in self.positions)

    # -------------------------------------------------------------------
    # Role menu
    # -------------------------------------------------------------------
    def is_role_menu_reaction(self, channel_id: int, message_id: int, emoji: EmojiKey) -> bool:
        return (
            (self.role_menu.channel_id, self.role_menu.message_id) == (channel_id, message_id)
            and self.menu_entry(emoji) is not None
        )

    def menu_entry(self, emoji: EmojiKey) -> RoleMenuEntry | None:
        return next((entry for entry in self.role_menu.entries if entry.emoji == emoji), None)

    def menu_emoji(self, position_name: str) -> EmojiKey | None:
        return next(
            (entry.emoji for entry in self.role_menu.entries if entry.position == position_name),
            None,
        )

    def is_governed(self, position: Position | None) -> bool:
        """True if the role menu may replace *position* (or the member has none)."""
        if position is None:
            return True
        return any(entry.position == position.name for entry in self.role_menu.entries)

    # -------------------------------------------------------------------
    # Assignable roles & greeting
    # -------------------------------------------------------------------
    def assignable_loose(self, name: str) -> int | None:
        wanted = name.strip().lower()
        return next(
            (role for key, role in self.assignable.items() if key.lower() == wanted),
            None,
        )

    def is_greetable(self, position_name: str) -> bool:
        return self.greeting is not None and position_name in self.greeting.positions


# ---------------------------------------------------------------------------
# Parsing & validation
# ---------------------------------------------------------------------------
def _require(raw: Mapping[str, Any], key: str, where: str = "config") -> Any:
    try:
        return raw[key]
    except KeyError:
        raise ConfigError(f"Missing required key {key!r} in {where}") from None


def parse_config(raw: Mapping[str, Any]) -> SentinelConfig:
    """Build and validate a :class:`SentinelConfig` from a parsed YAML mapping.

    Raises
    ------
    ConfigError
        If a key is missing or the role model is inconsistent (duplicate
        rank roles, unknown default rank, menu entries naming unknown
        positions, greetable positions that don't exist), or a value has
        the wrong shape (``role: oops``, ``ranks: 5``).
    """
    if not isinstance(raw, Mapping):
        raise ConfigError("config.yaml must contain a mapping at the top level")

    try:
        cfg = _build_config(raw)
    except (TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Malformed value in config.yaml: {exc}") from exc
    _validate(cfg)
    return cfg


def _build_config(raw: Mapping[str, Any]) -> SentinelConfig:
    ranks = tuple(
        Rank(name=str(_require(r, "name", "ranks")), role=int(_require(r, "role", "ranks")))
        for r in _require(raw, "ranks")
    )
    positions = tuple(
        Position(
            name=str(_require(p, "name", "positions")),
            role=int(_require(p, "role", "positions")),
            ranked=bool(p.get("ranked", False)),
            admin=bool(p.get("admin", False)),
        )
        for p in _require(raw, "positions")
    )

    menu_raw = _require(raw, "role_menu")
    role_menu = RoleMenu(
        channel_id=int(_require(menu_raw, "channel_id", "role_menu")),
        message_id=int(_require(menu_raw, "message_id", "role_menu")),
        entries=tuple(
            RoleMenuEntry(
                emoji=EmojiKey.parse(_require(e, "emoji", "role_menu.positions")),
                position=str(_require(e, "position", "role_menu.positions")),
            )
            for e in menu_raw.get("positions") or []
        ),
    )

    greeting = None
    greeting_raw = raw.get("greeting")
    if greeting_raw:
        message = _require(greeting_raw, "message", "greeting")
        greeting = GreetingRule(
            channel_id=int(_require(greeting_raw, "channel_id", "greeting")),
            positions=frozenset(str(p) for p in greeting_raw.get("positions") or []),
            lines=(message,) if isinstance(message, str) else tuple(str(m) for m in message),
        )

    return SentinelConfig(
        guild_id=int(_require(raw, "guild_id")),
        owners=frozenset(int(o) for o in raw.get("owners") or []),
        default_rank=str(_require(raw, "default_rank")),
        ranks=ranks,
        positions=positions,
        assignable={str(k): int(v) for k, v in (raw.get("assignable") or {}).items()},
        role_menu=role_menu,
        greeting=greeting,
    )


def _validate(cfg: SentinelConfig) -> None:
    rank_roles = [rank.role for rank in cfg.ranks]
    if len(set(rank_roles)) != len(rank_roles):
        raise ConfigError("Rank roles must be unique across the ladder")
    # Names are looked up case-insensitively, so they must differ after lowering
    rank_names = [rank.name.lower() for rank in cfg.ranks]
    if len(set(rank_names)) != len(rank_names):
        raise ConfigError("Rank names must be unique across the ladder (ignoring case)")
    assignable_names = [name.lower() for name in cfg.assignable]
    if len(set(assignable_names)) != len(assignable_names):
        raise ConfigError("Assignable role names must be unique (ignoring case)")
    if cfg.rank_by_name(cfg.default_rank) is None:
        raise ConfigError(f"Default rank {cfg.default_rank!r} is not on the ladder")

    position_names = {pos.name for pos in cfg.positions}
    seen: set[EmojiKey] = set()
    for entry in cfg.role_menu.entries:
        if entry.position not in position_names:
            raise ConfigError(f"Role menu names unknown position {entry.position!r}")
        if entry.emoji in seen:
            raise ConfigError(f"Role menu binds {entry.emoji} more than once")
        seen.add(entry.emoji)

    if cfg.greeting is not None:
        unknown = cfg.greeting.positions - position_names
        if unknown:
            raise ConfigError(f"Greetable positions not configured: {sorted(unknown)}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> SentinelConfig:
    """Read *path* and return a validated :class:`SentinelConfig`.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    ConfigError
        If a required key is missing or the role model is inconsistent.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return parse_config(raw or {})
