"""
Sentinel — Rank & Role Management for a Single Discord Community
=================================================================
Authorizes privileged users, moves members along a linear rank ladder,
toggles optional "assignable" roles, and runs a self-service role menu
where a reaction grants a mutually exclusive position (and, the first
time a greetable position is granted, posts a one-time welcome).

Package layout::

    sentinel/
    ├── config.py          # YAML → typed, validated SentinelConfig
    ├── constants.py       # Acknowledgment emoji, placeholders
    ├── errors.py          # LookupFailure / NoOpCondition taxonomy
    ├── database/
    │   ├── engine.py      # SQLAlchemy engine + async helper
    │   └── models.py      # greeted_members table
    ├── engine/
    │   ├── state.py       # Versioned config snapshot + reload
    │   ├── ledger.py      # In-memory greeting ledger + its lock
    │   ├── ranks.py       # Promote / demote / set-rank decisions
    │   ├── assignable.py  # Assign / unassign decisions
    │   └── role_menu.py   # Role-menu reconciliation state machine
    ├── services/
    │   ├── ledger_store.py      # Durable ledger (SQLAlchemy)
    │   ├── greeting_service.py  # Check → send → commit critical section
    │   ├── role_service.py      # Applies rank / assignable changes
    │   └── role_menu_service.py # Applies role-menu decisions
    └── bot/
        ├── core.py        # Bot subclass, cog loader, menu seeding
        ├── checks.py      # Owner / admin authorization
        └── cogs/
            ├── role_menu.py   # on_raw_reaction_add
            ├── ranks.py       # /promote, /demote, /setrank
            ├── assignable.py  # /assign, /unassign
            ├── owner.py       # /stop, /reload, /resetgreets
            └── general.py     # /ping, /emojidata
"""

__version__ = "0.1.0"
