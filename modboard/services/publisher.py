"""
modboard.services.publisher — Leaderboard Publisher
====================================================

Keeps exactly one live leaderboard message in the configured channel and
makes it match the current render.

State machine over ``store.leaderboard_message_id``::

    NoReference ──publish──▶ send new message, store id, save ──▶ HasReference
    HasReference ──publish──▶ fetch by id
        ├─ found    → edit in place                              (HasReference)
        └─ missing  → best-effort delete, clear id, save,
                      then the NoReference path                  (HasReference)

Startup recovery runs the very same path.  Every Discord call may fail;
failures are logged and the next publish (next message, next timer) is
the retry.  Publishes are serialized by a lock so one call's
fetch → edit-or-create never interleaves with another's.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

import discord
from discord.abc import Messageable

from modboard.engine.leaderboard import LeaderboardPayload
from modboard.services.embeds import build_leaderboard_embed

if TYPE_CHECKING:
    from modboard.engine.points import PointStore

logger = logging.getLogger(__name__)


class PublishOutcome(enum.StrEnum):
    CREATED = "created"
    EDITED = "edited"
    RECREATED = "recreated"
    FAILED = "failed"
    NO_CHANNEL = "no_channel"


class LeaderboardPublisher:
    """Reconciles the live leaderboard message with the rendered payload.

    Parameters
    ----------
    client:
        The Discord client (``get_channel`` / ``fetch_channel``).
    channel_id:
        Channel the leaderboard lives in.
    store:
        Owner of ``leaderboard_message_id``.
    payload_factory:
        Returns the current :class:`LeaderboardPayload`.
    save:
        Persists the store after the message reference changes.
    """

    def __init__(
        self,
        client: discord.Client,
        channel_id: int,
        store: PointStore,
        *,
        payload_factory: Callable[[], LeaderboardPayload],
        save: Callable[[], object],
    ) -> None:
        self.client = client
        self.channel_id = channel_id
        self.store = store
        self._payload_factory = payload_factory
        self._save = save
        self._lock = asyncio.Lock()

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------
    async def publish(self) -> PublishOutcome:
        """Bring the live message in line with the current state."""
        async with self._lock:
            try:
                return await self._publish()
            except Exception:
                logger.exception("Unexpected error while publishing the leaderboard")
                return PublishOutcome.FAILED

    async def recover(self) -> PublishOutcome:
        """Startup path: reuse the stored message if it still exists."""
        outcome = await self.publish()
        logger.info(
            "Leaderboard recovery: %s (message %s)",
            outcome, self.store.leaderboard_message_id,
        )
        return outcome

    # -----------------------------------------------------------------------
    # State machine
    # -----------------------------------------------------------------------
    async def _publish(self) -> PublishOutcome:
        channel = await self._resolve_channel()
        if channel is None:
            return PublishOutcome.NO_CHANNEL

        embed = build_leaderboard_embed(self._payload_factory())
        message_id = self.store.leaderboard_message_id

        if message_id is None:
            return await self._create(channel, embed, PublishOutcome.CREATED)

        try:
            message = await channel.fetch_message(message_id)
        except discord.HTTPException as exc:
            logger.info(
                "Leaderboard message %d not reachable (%s) — creating a new one",
                message_id, exc,
            )
            await self._discard(channel, message_id)
            return await self._create(channel, embed, PublishOutcome.RECREATED)

        try:
            await message.edit(embed=embed)
        except discord.NotFound:
            logger.info("Leaderboard message %d vanished before edit — recreating", message_id)
            await self._discard(channel, message_id)
            return await self._create(channel, embed, PublishOutcome.RECREATED)
        except discord.HTTPException:
            logger.exception("Failed to edit leaderboard message %d", message_id)
            return PublishOutcome.FAILED

        logger.debug("Leaderboard message %d updated", message_id)
        return PublishOutcome.EDITED

    async def _create(
        self,
        channel: Messageable,
        embed: discord.Embed,
        outcome: PublishOutcome,
    ) -> PublishOutcome:
        try:
            message = await channel.send(embed=embed)
        except discord.HTTPException:
            logger.exception("Failed to send a new leaderboard message to %d", self.channel_id)
            return PublishOutcome.FAILED

        self.store.leaderboard_message_id = message.id
        self._save()
        logger.info("Leaderboard message created (ID: %d)", message.id)
        return outcome

    async def _discard(self, channel: Messageable, message_id: int) -> None:
        """Best-effort delete of a stale message, then forget its id."""
        get_partial = getattr(channel, "get_partial_message", None)
        if get_partial is not None:
            try:
                await get_partial(message_id).delete()
            except discord.HTTPException:
                pass
        self.store.leaderboard_message_id = None
        self._save()

    async def _resolve_channel(self) -> Messageable | None:
        channel = self.client.get_channel(self.channel_id)
        if channel is None:
            try:
                channel = await self.client.fetch_channel(self.channel_id)
            except (discord.HTTPException, discord.InvalidData) as exc:
                logger.error("Leaderboard channel %d not found: %s", self.channel_id, exc)
                return None
        if not isinstance(channel, Messageable):
            logger.error("Leaderboard channel %d cannot hold messages", self.channel_id)
            return None
        return channel
