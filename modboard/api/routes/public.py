"""
modboard.api.routes.public — Health check & leaderboard web view
=================================================================
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from modboard.api.deps import get_bot

if TYPE_CHECKING:
    from modboard.bot.core import ModboardBot

router = APIRouter(tags=["public"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------
class HealthResponse(BaseModel):
    status: str
    bot: str
    uptime: float
    ready: bool


class LeaderboardRow(BaseModel):
    rank: int
    user_id: str  # snowflakes overflow JS numbers
    display_name: str
    points: int


class LeaderboardResponse(BaseModel):
    title: str
    total_moderators: int
    total_points: int
    celebration: str | None
    entries: list[LeaderboardRow]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _leaderboard(bot: ModboardBot) -> LeaderboardResponse:
    tracker = bot.tracker
    payload = tracker.render()
    return LeaderboardResponse(
        title=payload.title,
        total_moderators=tracker.member_count,
        total_points=tracker.total_points,
        celebration=payload.celebration,
        entries=[
            LeaderboardRow(
                rank=entry.rank,
                user_id=str(entry.user_id),
                display_name=bot.display_name_for(entry.user_id),
                points=entry.points,
            )
            for entry in payload.entries
        ],
    )


_PAGE = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta http-equiv="refresh" content="60">
  <title>{title}</title>
  <style>
    body {{ font-family: system-ui, sans-serif; background: #23272a; color: #f2f3f5;
           max-width: 720px; margin: 2rem auto; padding: 0 1rem; }}
    h1 {{ color: #0099ff; }}
    .celebration {{ background: #2c2f33; border-left: 4px solid #0099ff;
                    padding: .75rem 1rem; margin-bottom: 1rem; }}
    table {{ width: 100%; border-collapse: collapse; }}
    td, th {{ padding: .5rem; border-bottom: 1px solid #40444b; text-align: left; }}
    td.points {{ text-align: right; font-variant-numeric: tabular-nums; }}
  </style>
</head>
<body>
  <h1>{title}</h1>
  <p>{summary}</p>
  {celebration}
  {body}
</body>
</html>
"""


def render_leaderboard_page(data: LeaderboardResponse) -> str:
    """HTML page for :func:`leaderboard_page`; every value is escaped."""
    summary = (
        f"{data.total_moderators} moderators tracked · "
        f"{data.total_points} total points"
    )
    celebration = (
        f'<div class="celebration">{html.escape(data.celebration)}</div>'
        if data.celebration else ""
    )
    if data.entries:
        rows = "\n".join(
            f"<tr><td>{row.rank}</td><td>{html.escape(row.display_name)}</td>"
            f'<td class="points">{row.points}</td></tr>'
            for row in data.entries
        )
        body = (
            "<table><thead><tr><th>#</th><th>Moderator</th>"
            '<th class="points">Points</th></tr></thead>'
            f"<tbody>{rows}</tbody></table>"
        )
    else:
        body = "<p>No activity yet. Moderators will appear here once they start chatting!</p>"
    return _PAGE.format(
        title=html.escape(data.title),
        summary=html.escape(summary),
        celebration=celebration,
        body=body,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.get("/", response_model=HealthResponse)
async def health_check(bot=Depends(get_bot)):
    """Liveness probe for the hosting platform."""
    return HealthResponse(
        status="healthy",
        bot=bot.cfg.bot_name,
        uptime=bot.uptime_seconds(),
        ready=bot.is_ready(),
    )


@router.get("/api/health")
async def health():
    return {"status": "ok"}


@router.get("/api/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(bot=Depends(get_bot)):
    """Current ranking, same order as the Discord leaderboard."""
    return _leaderboard(bot)


@router.get("/leaderboard", response_class=HTMLResponse)
async def leaderboard_page(bot=Depends(get_bot)):
    return HTMLResponse(render_leaderboard_page(_leaderboard(bot)))
