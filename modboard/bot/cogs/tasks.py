"""
modboard.bot.cogs.tasks — Periodic Background Tasks
====================================================

Scheduled jobs that run on ``discord.ext.tasks`` loops:

- **Snapshot save** — every ``save_interval_minutes`` (default 5), on top
  of the save after each point change.
- **Presence refresh** — every ``presence_interval_minutes`` (default 5),
  picks a random "Watching …" status.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

import discord
from discord.ext import commands, tasks

if TYPE_CHECKING:
    from modboard.bot.core import ModboardBot

logger = logging.getLogger(__name__)


def presence_messages(moderator_count: int, total_points: int, footer_text: str) -> list[str]:
    return [
        f"Tracking {moderator_count} moderators",
        f"{total_points} total points",
        "Leaderboard updates",
        footer_text,
    ]


class PeriodicTasks(commands.Cog):
    """Cog for scheduled background maintenance tasks."""

    def __init__(self, bot: ModboardBot) -> None:
        self.bot = bot

    async def cog_load(self) -> None:
        """Start task loops when the cog is loaded."""
        self.save_loop.change_interval(minutes=self.bot.cfg.save_interval_minutes)
        self.presence_loop.change_interval(minutes=self.bot.cfg.presence_interval_minutes)
        self.save_loop.start()
        self.presence_loop.start()

    async def cog_unload(self) -> None:
        """Cancel task loops on unload."""
        self.save_loop.cancel()
        self.presence_loop.cancel()

    # -------------------------------------------------------------------
    # Snapshot save
    # -------------------------------------------------------------------
    @tasks.loop(minutes=5)
    async def save_loop(self):
        """Persist the point store so a crash loses at most one interval."""
        try:
            await self.bot.tracker.periodic_save()
        except Exception:
            logger.exception("Periodic save failed")

    @save_loop.before_loop
    async def _wait_save(self):
        await self.bot.wait_until_ready()

    # -------------------------------------------------------------------
    # Presence refresh
    # -------------------------------------------------------------------
    @tasks.loop(minutes=5)
    async def presence_loop(self):
        """Rotate the "Watching …" status text."""
        tracker = self.bot.tracker
        status = random.choice(
            presence_messages(tracker.member_count, tracker.total_points, self.bot.cfg.footer_text)
        )
        try:
            await self.bot.change_presence(
                activity=discord.Activity(type=discord.ActivityType.watching, name=status),
                status=discord.Status.online,
            )
        except Exception:
            logger.exception("Error updating bot status")

    @presence_loop.before_loop
    async def _wait_presence(self):
        await self.bot.wait_until_ready()


async def setup(bot: ModboardBot) -> None:
    await bot.add_cog(PeriodicTasks(bot))
