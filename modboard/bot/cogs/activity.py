"""
modboard.bot.cogs.activity — Moderator Message Tracking
========================================================

Listens for on_message events and feeds qualifying ones into the
:class:`ActivityTracker`.

Pipeline:
1. on_message fires → gate checks (bot, DM, command prefix)
2. Resolve the member (cache, else fetch) and check the moderator role
3. ``tracker.record_activity`` — points, save, milestones, leaderboard
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

if TYPE_CHECKING:
    from modboard.bot.core import ModboardBot

logger = logging.getLogger(__name__)


def is_moderator(member: discord.Member, role_name: str) -> bool:
    """True if *member* holds a role called *role_name*."""
    return any(role.name == role_name for role in member.roles)


class Activity(commands.Cog, name="Activity"):
    """Awards one point per message sent by a moderator."""

    def __init__(self, bot: ModboardBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        try:
            await self._handle_message(message)
        except Exception:
            logger.exception(
                "Error processing message %s from user %s",
                message.id,
                message.author.id,
            )

    async def _handle_message(self, message: discord.Message) -> None:
        """Inner message handler (separated for error isolation)."""

        # Gate 1: Ignore bots
        if message.author.bot:
            return

        # Gate 2: Ignore DMs
        if message.guild is None:
            return

        # Gate 3: Commands are handled by the command framework, not counted
        if message.content.startswith(self.bot.cfg.bot_prefix):
            return

        logger.debug("Message received from %s", message.author)

        # Gate 4: Moderator role
        member = await self._resolve_member(message)
        if member is None or not is_moderator(member, self.bot.cfg.moderator_role_name):
            return

        await self.bot.tracker.record_activity(
            member.id, guild=message.guild, member=member,
        )

    async def _resolve_member(self, message: discord.Message) -> discord.Member | None:
        if isinstance(message.author, discord.Member):
            return message.author
        assert message.guild is not None
        try:
            return await message.guild.fetch_member(message.author.id)
        except discord.HTTPException as exc:
            logger.warning("Could not fetch member %s: %s", message.author.id, exc)
            return None


async def setup(bot: ModboardBot) -> None:
    await bot.add_cog(Activity(bot))
