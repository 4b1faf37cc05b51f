"""
modboard.services.embeds — Discord embed builders
==================================================

All embed construction lives here so the publisher and cogs only need to
supply data — no layout concerns.
"""

from __future__ import annotations

from datetime import UTC, datetime

import discord

from modboard.constants import LEADERBOARD_COLOR
from modboard.engine.leaderboard import LeaderboardPayload


def build_leaderboard_embed(
    payload: LeaderboardPayload,
    timestamp: datetime | None = None,
) -> discord.Embed:
    """Build the live leaderboard embed (celebration banner first)."""
    embed = discord.Embed(
        title=payload.title,
        description=payload.description,
        color=discord.Color(LEADERBOARD_COLOR),
        timestamp=timestamp or datetime.now(UTC),
    )
    if payload.celebration:
        embed.add_field(name=payload.celebration_title, value=payload.celebration, inline=False)
    embed.add_field(name=payload.ranking_title, value=payload.ranking_text, inline=False)
    return embed


def build_info_embed(
    *,
    bot_name: str,
    creator: str,
    version: str,
    prefix: str,
    moderator_count: int,
    total_points: int,
    footer_text: str,
) -> discord.Embed:
    """Build the ``info`` command embed."""
    embed = discord.Embed(
        title=f"{bot_name} Bot",
        description="A bot that tracks moderator activity and displays a leaderboard",
        color=discord.Color(LEADERBOARD_COLOR),
        timestamp=datetime.now(UTC),
    )
    embed.add_field(name="Creator", value=creator, inline=True)
    embed.add_field(name="Version", value=version, inline=True)
    embed.add_field(name="Commands", value=command_list(prefix), inline=False)
    embed.add_field(name="Total Moderators Tracked", value=str(moderator_count), inline=True)
    embed.add_field(name="Total Points Awarded", value=str(total_points), inline=True)
    embed.set_footer(text=footer_text)
    return embed


def build_info_text(
    *,
    bot_name: str,
    creator: str,
    version: str,
    prefix: str,
    moderator_count: int,
    total_points: int,
    footer_text: str,
) -> str:
    """Plain-text fallback for channels without Embed Links."""
    return "\n".join([
        f"**{bot_name} Bot**",
        "A bot that tracks moderator activity and displays a leaderboard",
        "",
        f"**Creator**: {creator}",
        f"**Version**: {version}",
        f"**Commands**: {command_list(prefix)}",
        f"**Total Moderators Tracked**: {moderator_count}",
        f"**Total Points Awarded**: {total_points}",
        "",
        footer_text,
    ])


def command_list(prefix: str) -> str:
    return f"{prefix}ping, {prefix}uptime, {prefix}info"
