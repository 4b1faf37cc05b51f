"""
tests/test_celebration.py — Celebration State & Tier Text
==========================================================

Covers tier selection, the banner templates, the reward threshold, and
token-bound expiry (an older timer never clears a newer celebration).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from modboard.engine.celebration import (
    CelebrationState,
    CelebrationTier,
    celebration_text,
    earns_reward,
    tier_for,
)

T0 = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class _Clock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


# ===========================================================================
# Tiers
# ===========================================================================
class TestTiers:
    @pytest.mark.parametrize(
        ("threshold", "tier"),
        [
            (100, CelebrationTier.CONGRATULATIONS),
            (500, CelebrationTier.CONGRATULATIONS),
            (1000, CelebrationTier.EPIC),
            (3000, CelebrationTier.EPIC),
            (5000, CelebrationTier.LEGENDARY),
        ],
    )
    def test_tier_for(self, threshold, tier):
        assert tier_for(threshold) is tier

    def test_congratulations_text(self):
        text = celebration_text("<@1>", 100)
        assert text == "\U0001f31f **Congratulations!** <@1> reached **100 points**!"

    def test_epic_text(self):
        text = celebration_text("<@1>", 1000)
        assert text == "\U0001f389 **EPIC!** <@1> just hit **1000 points**! ✨"

    def test_legendary_text(self):
        text = celebration_text("<@1>", 5000)
        assert text == "\U0001f38a **LEGENDARY!** <@1> has reached **5000 points**! \U0001f3c6"

    def test_reward_threshold(self):
        assert earns_reward(500) is False
        assert earns_reward(1000) is True
        assert earns_reward(5000) is True


# ===========================================================================
# CelebrationState
# ===========================================================================
class TestCelebrationState:
    def test_starts_empty(self):
        assert CelebrationState().current() is None

    def test_celebrate_sets_current(self):
        clock = _Clock()
        state = CelebrationState(clock=clock)
        c = state.celebrate(1, "<@1>", 100)
        assert state.current() is c
        assert c.expires_at == T0 + timedelta(hours=1)
        assert state.current_text() == c.text

    def test_latest_wins(self):
        state = CelebrationState(clock=_Clock())
        state.celebrate(1, "<@1>", 100)
        second = state.celebrate(2, "<@2>", 250)
        assert state.current() is second

    def test_tokens_are_unique(self):
        state = CelebrationState(clock=_Clock())
        a = state.celebrate(1, "<@1>", 100)
        b = state.celebrate(1, "<@1>", 250)
        assert a.token != b.token

    def test_expire_current_token(self):
        state = CelebrationState(clock=_Clock())
        c = state.celebrate(1, "<@1>", 100)
        assert state.expire(c.token) is True
        assert state.current() is None

    def test_superseded_timer_does_not_clear_newer(self):
        clock = _Clock()
        state = CelebrationState(clock=clock)
        first = state.celebrate(1, "<@1>", 1000)
        clock.advance(minutes=30)
        second = state.celebrate(2, "<@2>", 2000)

        # first's timer fires at T0+60min
        clock.advance(minutes=30)
        assert state.expire(first.token) is False
        assert state.current() is second
        assert state.current_text() == second.text
        assert state.current_text() == "\U0001f389 **EPIC!** <@2> just hit **2000 points**! ✨"

        # second's timer fires at T0+90min
        clock.advance(minutes=30)
        assert state.expire(second.token) is True
        assert state.current() is None

    def test_expire_twice_is_noop(self):
        state = CelebrationState(clock=_Clock())
        c = state.celebrate(1, "<@1>", 100)
        assert state.expire(c.token) is True
        assert state.expire(c.token) is False

    def test_lazy_expiry_on_read(self):
        clock = _Clock()
        state = CelebrationState(clock=clock)
        state.celebrate(1, "<@1>", 100)
        clock.advance(hours=1)
        assert state.current() is None
        assert state.current_text() is None

    def test_timer_after_lazy_expiry_still_reports_change(self):
        clock = _Clock()
        state = CelebrationState(clock=clock)
        c = state.celebrate(1, "<@1>", 100)
        clock.advance(hours=2)
        assert state.current() is None
        # the late timer still asks for a refresh, exactly once
        assert state.expire(c.token) is True
        assert state.expire(c.token) is False

    def test_custom_duration(self):
        clock = _Clock()
        state = CelebrationState(duration=timedelta(seconds=5), clock=clock)
        state.celebrate(1, "<@1>", 100)
        clock.advance(seconds=4)
        assert state.current() is not None
        clock.advance(seconds=1)
        assert state.current() is None
