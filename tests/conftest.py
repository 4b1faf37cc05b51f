"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from modboard.engine.points import PointStore
from modboard.services.publisher import PublishOutcome
from modboard.services.state_file import StateFile
from modboard.services.tracker import ActivityTracker


def http_error(cls: type[discord.HTTPException] = discord.HTTPException, status: int = 500):
    """Build a discord.py HTTP error without a real aiohttp response.

    Usable as a plain factory: ``from conftest import http_error``.
    """
    reasons = {403: "Forbidden", 404: "Not Found", 500: "Internal Server Error"}
    response = SimpleNamespace(status=status, reason=reasons.get(status, "Error"))
    return cls(response, "test error")


@pytest.fixture
def state_file(tmp_path) -> StateFile:
    """Snapshot file inside the per-test temp directory."""
    return StateFile(tmp_path / "moderator_data.json")


@pytest.fixture
def tracker(state_file: StateFile) -> ActivityTracker:
    """Tracker over an empty store with Discord publishing stubbed out.

    ``tracker.publisher.publish`` is an AsyncMock so pipeline tests can
    count refreshes without a channel.
    """
    t = ActivityTracker(
        MagicMock(),
        channel_id=900,
        state_file=state_file,
        reward_role_name="Mod Of The Month",
        store=PointStore(),
    )
    t.publisher.publish = AsyncMock(return_value=PublishOutcome.EDITED)
    t.publisher.recover = AsyncMock(return_value=PublishOutcome.CREATED)
    return t
