"""
sentinel.bot.__main__ — Entry point for ``python -m sentinel.bot``
==================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (role model).
3. Create the SQLAlchemy engine and ensure tables exist.
4. Load the greeting ledger from the database.
5. Create the SentinelBot and hand it state + ledger + store.
6. Start the bot (blocking — runs the asyncio event loop).

Run with::

    python -m sentinel.bot
"""

from __future__ import annotations

import logging
import os
import sys
from functools import partial

from dotenv import load_dotenv

from sentinel.bot.core import SentinelBot
from sentinel.config import load_config
from sentinel.database.engine import create_db_engine, init_db
from sentinel.engine.ledger import GreetingLedger
from sentinel.engine.state import SentinelState
from sentinel.errors import ConfigError
from sentinel.services.ledger_store import LedgerStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("sentinel")


def main() -> None:
    """Bootstrap and run the Sentinel bot."""

    # 1. Environment variables (secrets).
    load_dotenv()

    token = os.getenv("DISCORD_TOKEN")
    if not token or token == "your-discord-bot-token-here":
        logger.critical(
            "DISCORD_TOKEN is not set.  "
            "Copy .env.example → .env and paste your bot token."
        )
        sys.exit(1)

    # 2. Role model.
    config_path = os.getenv("SENTINEL_CONFIG", "config.yaml")
    try:
        cfg = load_config(config_path)
    except (FileNotFoundError, ConfigError) as exc:
        logger.critical("%s", exc)
        sys.exit(1)
    logger.info(
        "Config loaded: %d ranks, %d positions, %d menu entries",
        len(cfg.ranks), len(cfg.positions), len(cfg.role_menu.entries),
    )
    state = SentinelState(cfg, loader=partial(load_config, config_path))

    # 3. Database.
    engine = create_db_engine()
    init_db(engine)

    # 4. Greeting ledger.
    store = LedgerStore(engine)
    ledger = GreetingLedger(store.load())

    # 5. Bot.
    bot = SentinelBot(state=state, ledger=ledger, store=store)

    # 6. Run (blocks until Ctrl+C or SIGTERM).
    logger.info("Starting Sentinel bot…")
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
