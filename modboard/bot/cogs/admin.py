"""
modboard.bot.cogs.admin — Admin Commands
=========================================

- ``award <member> <amount>`` — manually grant points.  The grant runs the
  full pipeline, so crossed milestones are celebrated (only the highest)
  and the leaderboard is refreshed.

Requires the Administrator permission.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

if TYPE_CHECKING:
    from modboard.bot.core import ModboardBot

logger = logging.getLogger(__name__)


class Admin(commands.Cog, name="Admin"):
    """Server administration commands."""

    def __init__(self, bot: ModboardBot) -> None:
        self.bot = bot

    @commands.command(name="award")
    @commands.guild_only()
    @commands.has_permissions(administrator=True)
    async def award(self, ctx: commands.Context, member: discord.Member, amount: int) -> None:
        """Manually award points to a member."""
        if amount <= 0:
            await ctx.send("❌ Please specify a positive number of points.")
            return

        change = await self.bot.tracker.award(
            member.id, amount, guild=ctx.guild, member=member,
        )
        logger.info(
            "%s awarded %d points to %s", ctx.author, amount, member,
        )
        await ctx.send(
            f"✅ Awarded **{amount}** points to **{member.display_name}** "
            f"(now {change.new_points})."
        )


async def setup(bot: ModboardBot) -> None:
    await bot.add_cog(Admin(bot))
