"""
modboard.services.rewards — Milestone Reward Grants
====================================================

Role grant for high milestones.  A failed grant is logged and reported
to the caller as ``False``; it never undoes the celebration.
"""

from __future__ import annotations

import logging

import discord

logger = logging.getLogger(__name__)


async def resolve_member(guild: discord.Guild, user_id: int) -> discord.Member | None:
    """Member from cache, falling back to an API fetch."""
    member = guild.get_member(user_id)
    if member is not None:
        return member
    try:
        return await guild.fetch_member(user_id)
    except discord.HTTPException as exc:
        logger.warning("Could not fetch member %d in guild %s: %s", user_id, guild.id, exc)
        return None


async def grant_milestone_role(
    guild: discord.Guild,
    member: discord.Member,
    role_name: str,
    *,
    threshold: int,
) -> bool:
    """Give *member* the role named *role_name*.  Returns True on success."""
    role = discord.utils.get(guild.roles, name=role_name)
    if role is None:
        logger.warning("Reward role %r not found in guild %s", role_name, guild.id)
        return False

    if role in member.roles:
        logger.debug("%s already holds %r", member, role_name)
        return True

    try:
        await member.add_roles(role, reason=f"Reached {threshold} moderator points")
    except discord.Forbidden:
        logger.warning(
            "Missing permissions to grant %r to %s — check role hierarchy",
            role_name, member,
        )
        return False
    except discord.HTTPException:
        logger.exception("Could not add milestone role %r to %s", role_name, member)
        return False

    logger.info("Granted %r to %s for reaching %d points", role_name, member, threshold)
    return True
