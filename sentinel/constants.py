"""
sentinel.constants — Shared Constants
======================================

Single source of truth for acknowledgment glyphs and the greeting
placeholder.  Import from here instead of duplicating in cogs and services.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Command acknowledgments
# ---------------------------------------------------------------------------
ACK_SUCCESS = "\u2705"  # ✅
ACK_FAILURE = "\u274e"  # ❎
ACK_NOOP = "\u2796"     # ➖

# ---------------------------------------------------------------------------
# Greeting template
# ---------------------------------------------------------------------------
MENTION_PLACEHOLDER = "{mention}"

# Discord caps autocomplete results at 25 choices
MAX_AUTOCOMPLETE_CHOICES = 25
