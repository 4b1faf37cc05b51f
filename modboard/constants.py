"""
modboard.constants — Shared Constants & Helpers
================================================

Single source of truth for milestone thresholds, celebration tiers and
presentation constants.  Import from here instead of duplicating in cogs,
services, and the web view.
"""

from __future__ import annotations

from datetime import timedelta

# ---------------------------------------------------------------------------
# Milestones
# ---------------------------------------------------------------------------
MILESTONES: tuple[int, ...] = (100, 250, 500, 1000, 1500, 2000, 3000, 5000)

# Tier boundaries (inclusive lower bounds)
EPIC_THRESHOLD = 1000
LEGENDARY_THRESHOLD = 5000

# Crossing a milestone at or above this value grants the reward role
REWARD_THRESHOLD = EPIC_THRESHOLD

CELEBRATION_DURATION = timedelta(hours=1)

# ---------------------------------------------------------------------------
# Presentation (leaderboard embed, info embed, web view)
# ---------------------------------------------------------------------------
BOT_DISPLAY_NAME = "Moderator Activity Tracker"
LEADERBOARD_TITLE = "Moderator Activity Leaderboard"
LEADERBOARD_DESCRIPTION = "Points are awarded for each message sent in the server"
LEADERBOARD_COLOR = 0x0099FF
RANKING_TITLE = "Top Moderators"
EMPTY_TITLE = "No activity yet"
EMPTY_TEXT = "Moderators will appear here once they start chatting!"
CELEBRATION_TITLE = "\U0001f389 Milestone Reached! \U0001f389"  # 🎉

DEFAULT_MODERATOR_ROLE = "Moderators"
DEFAULT_REWARD_ROLE = "\U0001f451 Mod Of The Month"  # 👑

# Discord caps embed field values at 1024 characters
EMBED_FIELD_LIMIT = 1024


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def format_uptime(seconds: float) -> str:
    """Format a duration as ``"1d 2h 3m 4s"``."""
    total = int(seconds)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{days}d {hours}h {minutes}m {secs}s"
