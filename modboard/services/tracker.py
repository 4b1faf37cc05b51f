"""
modboard.services.tracker — Activity Ingestion Pipeline
========================================================

:class:`ActivityTracker` owns all mutable state of the bot: the
:class:`PointStore`, the :class:`CelebrationState` and (through the store)
the leaderboard message reference.

Pipeline, per qualifying message (the role gate lives in the cog):

1. ``PointStore.record_activity`` — exactly +1
2. save the snapshot
3. milestone check → celebrate the highest crossed threshold, schedule its
   expiry, grant the reward role when eligible
4. publish the leaderboard

Stages 2–4 are isolated: a failure in one is logged and the next still
runs; nothing undoes the point increment.  Every state-touching path runs
under one ``asyncio.Lock`` to completion, including its awaited Discord
calls, so two events never interleave.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from modboard.constants import MILESTONES
from modboard.engine.celebration import Celebration, CelebrationState, earns_reward
from modboard.engine.leaderboard import LeaderboardPayload, RankedEntry, rank_entries, render
from modboard.engine.milestones import highest_crossed
from modboard.engine.points import PointChange, PointStore
from modboard.services.publisher import LeaderboardPublisher
from modboard.services.rewards import grant_milestone_role, resolve_member

if TYPE_CHECKING:
    import discord

    from modboard.services.state_file import StateFile

logger = logging.getLogger(__name__)

# How long shutdown waits for an in-flight event before saving anyway
SHUTDOWN_LOCK_TIMEOUT = 5.0


class ActivityTracker:
    """The single owned aggregate behind the leaderboard.

    Parameters
    ----------
    client:
        Discord client used by the publisher.
    channel_id:
        Leaderboard channel.
    state_file:
        Durable snapshot location.  Read once here unless *store* is given.
    milestones:
        Ascending thresholds to celebrate.
    reward_role_name:
        Role granted for milestones at or above the reward threshold.
    """

    def __init__(
        self,
        client: discord.Client,
        *,
        channel_id: int,
        state_file: StateFile,
        milestones: Sequence[int] = MILESTONES,
        reward_role_name: str,
        store: PointStore | None = None,
        celebrations: CelebrationState | None = None,
    ) -> None:
        self.state_file = state_file
        self.store = store if store is not None else state_file.load()
        self.celebrations = celebrations or CelebrationState()
        self.milestones = tuple(milestones)
        self.reward_role_name = reward_role_name
        self.publisher = LeaderboardPublisher(
            client,
            channel_id,
            self.store,
            payload_factory=self.render,
            save=self.save,
        )
        self._lock = asyncio.Lock()
        self._expiry_handles: dict[int, asyncio.TimerHandle] = {}
        self._background: set[asyncio.Task] = set()

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------
    def render(self) -> LeaderboardPayload:
        return render(self.store.points, self.celebrations.current_text())

    def ranking(self) -> list[RankedEntry]:
        return rank_entries(self.store.points)

    @property
    def total_points(self) -> int:
        return self.store.total_points

    @property
    def member_count(self) -> int:
        return self.store.member_count

    # -----------------------------------------------------------------------
    # Persistence
    # -----------------------------------------------------------------------
    def save(self) -> bool:
        return self.state_file.save(self.store)

    async def periodic_save(self) -> bool:
        async with self._lock:
            return self.save()

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------
    async def start(self) -> None:
        """Recover (or create) the leaderboard message after login."""
        async with self._lock:
            await self.publisher.recover()

    async def shutdown(self) -> None:
        """Cancel timers and flush a final snapshot."""
        for handle in self._expiry_handles.values():
            handle.cancel()
        self._expiry_handles.clear()
        for task in list(self._background):
            task.cancel()

        try:
            async with asyncio.timeout(SHUTDOWN_LOCK_TIMEOUT):
                await self._lock.acquire()
        except TimeoutError:
            logger.warning("In-flight event still running at shutdown — saving anyway")
            self.save()
            return
        try:
            self.save()
        finally:
            self._lock.release()
        logger.info("Final snapshot saved (%d moderators)", self.store.member_count)

    # -----------------------------------------------------------------------
    # Ingestion
    # -----------------------------------------------------------------------
    async def record_activity(
        self,
        user_id: int,
        *,
        guild: discord.Guild | None = None,
        member: discord.Member | None = None,
    ) -> PointChange:
        """Count one qualifying message for *user_id*."""
        async with self._lock:
            change = self.store.record_activity(user_id)
            logger.info("Points for %s: %d", member or user_id, change.new_points)
            await self._after_change(change, guild=guild, member=member)
            return change

    async def award(
        self,
        user_id: int,
        amount: int,
        *,
        guild: discord.Guild | None = None,
        member: discord.Member | None = None,
    ) -> PointChange:
        """Manually grant *amount* points; runs the same pipeline.

        Raises
        ------
        ValueError
            If *amount* is not positive.
        """
        async with self._lock:
            change = self.store.grant(user_id, amount)
            logger.info(
                "Awarded %d points to %s (%d → %d)",
                amount, member or user_id, change.old_points, change.new_points,
            )
            await self._after_change(change, guild=guild, member=member)
            return change

    async def _after_change(
        self,
        change: PointChange,
        *,
        guild: discord.Guild | None,
        member: discord.Member | None,
    ) -> None:
        try:
            self.save()
        except Exception:
            logger.exception("Snapshot save failed after update for %d", change.user_id)

        try:
            await self._celebrate(change, guild=guild, member=member)
        except Exception:
            logger.exception("Milestone handling failed for %d", change.user_id)

        try:
            await self.publisher.publish()
        except Exception:
            logger.exception("Leaderboard publish failed after update for %d", change.user_id)

    # -----------------------------------------------------------------------
    # Milestones
    # -----------------------------------------------------------------------
    async def _celebrate(
        self,
        change: PointChange,
        *,
        guild: discord.Guild | None,
        member: discord.Member | None,
    ) -> Celebration | None:
        threshold = highest_crossed(change.old_points, change.new_points, self.milestones)
        if threshold is None:
            return None

        mention = member.mention if member is not None else f"<@{change.user_id}>"
        celebration = self.celebrations.celebrate(change.user_id, mention, threshold)
        self._schedule_expiry(celebration)
        logger.info(
            "Milestone reached: %s hit %d points (%s)",
            member or change.user_id, threshold, celebration.tier,
        )

        if earns_reward(threshold):
            await self._grant_reward(change.user_id, threshold, guild=guild, member=member)
        return celebration

    async def _grant_reward(
        self,
        user_id: int,
        threshold: int,
        *,
        guild: discord.Guild | None,
        member: discord.Member | None,
    ) -> bool:
        if guild is None:
            logger.warning("No guild available to grant the reward role to %d", user_id)
            return False
        try:
            target = member or await resolve_member(guild, user_id)
            if target is None:
                return False
            return await grant_milestone_role(
                guild, target, self.reward_role_name, threshold=threshold,
            )
        except Exception:
            logger.exception("Could not add milestone role to %d", user_id)
            return False

    def _schedule_expiry(self, celebration: Celebration) -> None:
        loop = asyncio.get_running_loop()
        delay = (celebration.expires_at - celebration.created_at).total_seconds()
        handle = loop.call_later(max(delay, 0.0), self._spawn_expiry, celebration.token)
        self._expiry_handles[celebration.token] = handle

    def _spawn_expiry(self, token: int) -> None:
        self._expiry_handles.pop(token, None)
        task = asyncio.create_task(
            self.expire_celebration(token), name=f"celebration-expiry-{token}",
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def expire_celebration(self, token: int) -> bool:
        """Timer callback: clear celebration *token* if it is still shown.

        A superseded token is a no-op, so an older timer can never remove a
        newer celebration.
        """
        async with self._lock:
            if not self.celebrations.expire(token):
                logger.debug("Celebration %d already superseded", token)
                return False
            logger.info("Celebration %d expired — refreshing leaderboard", token)
            await self.publisher.publish()
            return True
