"""
Modboard — Moderator Activity Tracker for Discord
==================================================
Counts chat activity of members holding the moderator role, turns it into
points, keeps a single live leaderboard message up to date, and celebrates
milestones.  A tiny web view and health endpoint run next to the bot.

Package layout::

    modboard/
    ├── config.py          # YAML + env → typed Python config
    ├── constants.py       # Milestones, tiers, presentation constants
    ├── engine/
    │   ├── points.py      # PointStore + snapshot format
    │   ├── milestones.py  # Threshold crossing detection
    │   ├── celebration.py # Tiered celebration text + instance-bound expiry
    │   └── leaderboard.py # Pure leaderboard renderer
    ├── services/
    │   ├── state_file.py  # Atomic JSON snapshot persistence
    │   ├── embeds.py      # LeaderboardPayload → discord.Embed
    │   ├── publisher.py   # Single-message fetch/edit/recreate state machine
    │   ├── rewards.py     # Milestone role grant
    │   └── tracker.py     # ActivityTracker — the owned aggregate
    ├── bot/
    │   ├── core.py        # Bot subclass, cog loader, shutdown flush
    │   └── cogs/
    │       ├── activity.py # on_message → points pipeline
    │       ├── meta.py     # ?ping, ?uptime, ?info
    │       ├── admin.py    # ?award
    │       └── tasks.py    # Periodic save + presence refresh
    └── api/
        ├── main.py        # FastAPI app factory + embedded uvicorn server
        └── routes/        # Health + leaderboard web view
"""

__version__ = "1.0.0"
