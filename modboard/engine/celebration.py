"""
modboard.engine.celebration — Celebration State
================================================

The transient banner shown on top of the leaderboard after a milestone.

Only one celebration is live at a time and the latest always wins.  Each
celebration carries a unique ``token``; expiry timers are bound to that
token, so a timer scheduled for an older celebration can never clear a
newer one.  Reads also check ``expires_at`` lazily, which covers timers
that never fired (e.g. across a reconnect).

This module is pure state — no Discord I/O, no timers.  Scheduling lives
in :class:`modboard.services.tracker.ActivityTracker`.
"""

from __future__ import annotations

import enum
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from modboard.constants import (
    CELEBRATION_DURATION,
    EPIC_THRESHOLD,
    LEGENDARY_THRESHOLD,
    REWARD_THRESHOLD,
)

logger = logging.getLogger(__name__)


class CelebrationTier(enum.StrEnum):
    CONGRATULATIONS = "congratulations"
    EPIC = "epic"
    LEGENDARY = "legendary"


TIER_TEMPLATES: dict[CelebrationTier, str] = {
    CelebrationTier.CONGRATULATIONS: (
        "\U0001f31f **Congratulations!** {mention} reached **{threshold} points**!"
    ),
    CelebrationTier.EPIC: (
        "\U0001f389 **EPIC!** {mention} just hit **{threshold} points**! \u2728"
    ),
    CelebrationTier.LEGENDARY: (
        "\U0001f38a **LEGENDARY!** {mention} has reached **{threshold} points**! \U0001f3c6"
    ),
}


def tier_for(threshold: int) -> CelebrationTier:
    """Map a milestone value onto its magnitude band."""
    if threshold >= LEGENDARY_THRESHOLD:
        return CelebrationTier.LEGENDARY
    if threshold >= EPIC_THRESHOLD:
        return CelebrationTier.EPIC
    return CelebrationTier.CONGRATULATIONS


def celebration_text(mention: str, threshold: int) -> str:
    """Build the banner text for *mention* reaching *threshold*."""
    return TIER_TEMPLATES[tier_for(threshold)].format(mention=mention, threshold=threshold)


def earns_reward(threshold: int) -> bool:
    """True when crossing *threshold* grants the reward role."""
    return threshold >= REWARD_THRESHOLD


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class Celebration:
    """One raised celebration.  ``token`` identifies this exact instance."""

    token: int
    user_id: int
    threshold: int
    tier: CelebrationTier
    text: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class CelebrationState:
    """Holds at most one live :class:`Celebration`.

    Parameters
    ----------
    duration:
        How long a celebration stays visible (default one hour).
    clock:
        Returns the current aware datetime; injectable for tests.
    """

    def __init__(
        self,
        duration: timedelta = CELEBRATION_DURATION,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.duration = duration
        self._clock = clock
        self._tokens = itertools.count(1)
        self._current: Celebration | None = None
        # Token of a celebration cleared lazily by current() whose timer
        # hasn't reported in yet
        self._lapsed: int | None = None

    def celebrate(
        self,
        user_id: int,
        mention: str,
        threshold: int,
        now: datetime | None = None,
    ) -> Celebration:
        """Raise a celebration, replacing whatever is currently shown."""
        created = now or self._clock()
        celebration = Celebration(
            token=next(self._tokens),
            user_id=user_id,
            threshold=threshold,
            tier=tier_for(threshold),
            text=celebration_text(mention, threshold),
            created_at=created,
            expires_at=created + self.duration,
        )
        if self._current is not None:
            logger.debug(
                "Celebration %d superseded by %d", self._current.token, celebration.token,
            )
        self._current = celebration
        self._lapsed = None
        return celebration

    def expire(self, token: int) -> bool:
        """Clear the celebration if it is still the one tagged *token*.

        Returns True when the celebration tagged *token* was the one on
        display, i.e. the leaderboard needs a refresh.  A superseded token
        changes nothing and returns False.
        """
        if self._current is not None and self._current.token == token:
            self._current = None
            return True
        if self._lapsed == token:
            self._lapsed = None
            return True
        return False

    def current(self, now: datetime | None = None) -> Celebration | None:
        """The live celebration, or None if there is none or it has expired."""
        celebration = self._current
        if celebration is None:
            return None
        if celebration.is_expired(now or self._clock()):
            self._current = None
            self._lapsed = celebration.token
            return None
        return celebration

    def current_text(self, now: datetime | None = None) -> str | None:
        celebration = self.current(now)
        return celebration.text if celebration else None
