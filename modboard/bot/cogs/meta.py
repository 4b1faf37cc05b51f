"""
modboard.bot.cogs.meta — Read-only Reporting Commands
======================================================

Prefix commands (``?`` by default):
- ``ping`` — round-trip and gateway latency
- ``uptime`` — how long the bot has been running
- ``info`` — bot info plus tracked moderators and total points

Commands are skipped silently in channels where the bot can't send.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from discord.ext import commands

from modboard.constants import format_uptime
from modboard.services.embeds import build_info_embed, build_info_text

if TYPE_CHECKING:
    from modboard.bot.core import ModboardBot

logger = logging.getLogger(__name__)


class Meta(commands.Cog, name="Meta"):
    """Status commands that never touch the leaderboard state."""

    def __init__(self, bot: ModboardBot) -> None:
        self.bot = bot

    async def cog_check(self, ctx: commands.Context) -> bool:
        if ctx.guild is None:
            return True
        if not ctx.channel.permissions_for(ctx.guild.me).send_messages:
            logger.info("No permission to send messages in #%s", ctx.channel)
            return False
        return True

    # -------------------------------------------------------------------
    # ?ping
    # -------------------------------------------------------------------
    @commands.command(name="ping")
    async def ping(self, ctx: commands.Context) -> None:
        sent = await ctx.send("Pinging...")
        latency_ms = round((sent.created_at - ctx.message.created_at).total_seconds() * 1000)
        await sent.edit(
            content=(
                "\U0001f3d3 Pong!\n"
                f"- Bot Latency: {latency_ms}ms\n"
                f"- API Latency: {round(self.bot.latency * 1000)}ms"
            )
        )

    # -------------------------------------------------------------------
    # ?uptime
    # -------------------------------------------------------------------
    @commands.command(name="uptime")
    async def uptime(self, ctx: commands.Context) -> None:
        started = self.bot.started_at.strftime("%a, %d %b %Y %H:%M:%S GMT")
        await ctx.send(
            f"\U0001f552 Bot Uptime: {format_uptime(self.bot.uptime_seconds())}\n"
            f"Started at: {started}"
        )

    # -------------------------------------------------------------------
    # ?info
    # -------------------------------------------------------------------
    @commands.command(name="info")
    async def info(self, ctx: commands.Context) -> None:
        cfg = self.bot.cfg
        details = dict(
            bot_name=cfg.bot_name,
            creator=cfg.creator,
            version=cfg.version,
            prefix=cfg.bot_prefix,
            moderator_count=self.bot.tracker.member_count,
            total_points=self.bot.tracker.total_points,
            footer_text=cfg.footer_text,
        )

        can_embed = (
            ctx.guild is None
            or ctx.channel.permissions_for(ctx.guild.me).embed_links
        )
        if can_embed:
            await ctx.send(embed=build_info_embed(**details))
        else:
            await ctx.send(build_info_text(**details))


async def setup(bot: ModboardBot) -> None:
    await bot.add_cog(Meta(bot))
