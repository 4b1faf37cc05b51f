"""
modboard.bot.core — Bot Instance & Cog Loader
==============================================

**Why this file exists:**
Defines :class:`ModboardBot`, a ``commands.Bot`` subclass that:

1. Stores the shared config (``bot.cfg``) and the :class:`ActivityTracker`
   (``bot.tracker``) so every Cog can reach them via ``self.bot``.
2. Loads every Cog in ``modboard/bot/cogs/``.
3. Starts the web view on the bot's own event loop.
4. Recovers (or creates) the leaderboard message once connected.
5. On shutdown, flushes the final snapshot *before* closing the web server
   and the gateway connection.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import time
from datetime import UTC, datetime

import discord
from discord.ext import commands

from modboard.api.main import WebServer, create_app
from modboard.config import ModboardConfig
from modboard.services.state_file import StateFile
from modboard.services.tracker import ActivityTracker

logger = logging.getLogger(__name__)

# Cog modules to load on startup.
EXTENSIONS: list[str] = [
    "modboard.bot.cogs.activity",
    "modboard.bot.cogs.meta",
    "modboard.bot.cogs.admin",
    "modboard.bot.cogs.tasks",
]


class ModboardBot(commands.Bot):
    """Custom Bot subclass that carries project-wide state.

    Parameters
    ----------
    cfg:
        The parsed :class:`ModboardConfig`.
    """

    def __init__(self, cfg: ModboardConfig) -> None:
        intents = discord.Intents.default()
        intents.message_content = True    # Privileged: command parsing
        intents.members = True            # Privileged: role checks on members

        super().__init__(
            command_prefix=cfg.bot_prefix,
            intents=intents,
            description=cfg.bot_name,
            help_command=None,
        )

        self.cfg = cfg
        self.started_at = datetime.now(UTC)
        self._started_monotonic = time.monotonic()

        self.tracker = ActivityTracker(
            self,
            channel_id=cfg.leaderboard_channel_id,
            state_file=StateFile(cfg.data_file),
            milestones=cfg.milestones,
            reward_role_name=cfg.reward_role_name,
        )
        self.web = WebServer(create_app(self), cfg.web_host, cfg.web_port)
        self._leaderboard_recovered = False

    def uptime_seconds(self) -> float:
        return time.monotonic() - self._started_monotonic

    def display_name_for(self, user_id: int) -> str:
        """Best display name from the member cache, else the raw id."""
        for guild in self.guilds:
            member = guild.get_member(user_id)
            if member is not None:
                return member.display_name
        user = self.get_user(user_id)
        return user.display_name if user is not None else str(user_id)

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Called once before the bot connects to Discord.

        Loads all Cog extensions (one broken Cog shouldn't take down the
        whole bot), starts the web server, and routes SIGTERM through
        :meth:`close` so the final snapshot is written.
        """
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

        self.web.start()
        logger.info("Web server listening on %s:%d", self.cfg.web_host, self.cfg.web_port)

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGTERM, lambda: loop.create_task(self.close()))
        except (NotImplementedError, RuntimeError):
            logger.debug("SIGTERM handler not supported on this platform")

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user, self.user.id)

        # on_ready fires again after reconnects; recover only once
        if not self._leaderboard_recovered:
            self._leaderboard_recovered = True
            await self.tracker.start()

    async def close(self) -> None:
        """Graceful shutdown — snapshot first, then web server, then gateway."""
        logger.info("Shutting down gracefully…")
        await self.tracker.shutdown()
        await self.web.stop()
        await super().close()

    # -----------------------------------------------------------------------
    # Command errors
    # -----------------------------------------------------------------------
    async def on_command_error(
        self, ctx: commands.Context, error: commands.CommandError
    ) -> None:
        if isinstance(error, commands.CommandNotFound):
            if not _can_send(ctx):
                logger.info("No permission to send messages in #%s", ctx.channel)
                return
            p = self.cfg.bot_prefix
            await _reply(ctx, f"Unknown command. Try {p}ping, {p}uptime, or {p}info")
        elif isinstance(error, commands.MissingPermissions):
            await _reply(ctx, "❌ You don't have permission to use that command.")
        elif isinstance(error, (commands.BadArgument, commands.MissingRequiredArgument)):
            await _reply(ctx, f"❌ {error}")
        elif isinstance(error, commands.CheckFailure):
            logger.debug("Check failed for %s in #%s: %s", ctx.command, ctx.channel, error)
        else:
            logger.error(
                "Error processing %s command",
                ctx.command,
                exc_info=(type(error), error, error.__traceback__),
            )


def _can_send(ctx: commands.Context) -> bool:
    if ctx.guild is None:
        return True
    return ctx.channel.permissions_for(ctx.guild.me).send_messages


async def _reply(ctx: commands.Context, text: str) -> None:
    try:
        await ctx.send(text)
    except discord.HTTPException:
        logger.warning("Could not reply in #%s", ctx.channel)
