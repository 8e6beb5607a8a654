"""
sentinel.engine.state — Versioned Config Snapshot
==================================================

The bot reads configuration on every event but only replaces it on the
``/reload`` command.  :class:`SentinelState` holds a single immutable
:class:`Snapshot`; a reload builds a complete new config first and then
swaps the reference under a lock, so a reader sees either the whole old
snapshot or the whole new one, never a mix.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from sentinel.config import SentinelConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Snapshot:
    config: SentinelConfig
    version: int


class SentinelState:
    """Thread-safe holder for the current configuration snapshot.

    Usage:
        state = SentinelState(cfg, loader=lambda: load_config(path))
        cfg = state.config                  # cheap reference read
        snapshot = await run_db(state.reload)
    """

    def __init__(self, config: SentinelConfig, loader: Callable[[], SentinelConfig]) -> None:
        self._lock = threading.Lock()
        self._loader = loader
        self._snapshot = Snapshot(config=config, version=1)

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def config(self) -> SentinelConfig:
        return self._snapshot.config

    def reload(self) -> Snapshot:
        """Load a fresh config and install it.  Synchronous; call via ``run_db``.

        If loading raises, the current snapshot stays in place.
        """
        config = self._loader()
        with self._lock:
            self._snapshot = Snapshot(config=config, version=self._snapshot.version + 1)
            snapshot = self._snapshot
        logger.info("Config reloaded (version %d)", snapshot.version)
        return snapshot
