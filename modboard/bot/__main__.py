"""
modboard.bot.__main__ — Entry point for ``python -m modboard.bot``
==================================================================

Wiring:
1. Load .env (secrets).
2. Load config.yaml (soft settings).
3. Create the ModboardBot — restores the snapshot file.
4. Start the bot (blocking — runs the asyncio event loop, web view
   included).

Run with::

    python -m modboard.bot
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from modboard.bot.core import ModboardBot
from modboard.config import ConfigError, load_config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("modboard")


def main() -> None:
    """Bootstrap and run the Modboard bot."""

    # 1. Environment variables (secrets).
    load_dotenv()

    token = os.getenv("DISCORD_TOKEN") or os.getenv("DISCORD_BOT_TOKEN")
    if not token or token == "your-discord-bot-token-here":
        logger.critical(
            "DISCORD_TOKEN is not set.  "
            "Copy .env.example → .env and paste your bot token."
        )
        sys.exit(1)

    # 2. Soft configuration.
    try:
        cfg = load_config(os.getenv("MODBOARD_CONFIG", "config.yaml"))
    except ConfigError as exc:
        logger.critical("Invalid configuration: %s", exc)
        sys.exit(1)
    logger.info("Config loaded — leaderboard channel: %d", cfg.leaderboard_channel_id)

    # 3. Bot.
    bot = ModboardBot(cfg)

    # 4. Run (blocks until Ctrl+C or SIGTERM; close() flushes the snapshot).
    logger.info("Starting Modboard bot…")
    try:
        bot.run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Shutting down gracefully…")


if __name__ == "__main__":
    main()
