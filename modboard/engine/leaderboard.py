"""
modboard.engine.leaderboard — Leaderboard Renderer
===================================================

Pure function from (points, celebration text) to a :class:`LeaderboardPayload`.
No Discord objects and no clock: identical inputs always give identical
output.  :mod:`modboard.services.embeds` turns the payload into an embed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from modboard.constants import (
    CELEBRATION_TITLE,
    EMBED_FIELD_LIMIT,
    EMPTY_TEXT,
    EMPTY_TITLE,
    LEADERBOARD_DESCRIPTION,
    LEADERBOARD_TITLE,
    RANKING_TITLE,
)

__all__ = ["LeaderboardPayload", "RankedEntry", "rank_entries", "render"]


@dataclass(frozen=True, slots=True)
class RankedEntry:
    rank: int
    user_id: int
    points: int

    @property
    def mention(self) -> str:
        return f"<@{self.user_id}>"


@dataclass(frozen=True, slots=True)
class LeaderboardPayload:
    """Everything the leaderboard message shows, minus the timestamp."""

    title: str
    description: str
    entries: tuple[RankedEntry, ...]
    ranking_title: str
    ranking_text: str
    celebration_title: str | None = None
    celebration: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.entries


def rank_entries(points: Mapping[int, int]) -> list[RankedEntry]:
    """Sort by points descending.

    ``sorted`` is stable, so equal scores keep the mapping's insertion
    order (first to score comes first).
    """
    ordered = sorted(points.items(), key=lambda item: item[1], reverse=True)
    return [
        RankedEntry(rank=i, user_id=uid, points=pts)
        for i, (uid, pts) in enumerate(ordered, 1)
    ]


def _ranking_text(entries: list[RankedEntry], limit: int = EMBED_FIELD_LIMIT) -> str:
    lines: list[str] = []
    used = 0
    for idx, entry in enumerate(entries):
        line = f"{entry.rank}. {entry.mention} - {entry.points} points"
        remaining = len(entries) - idx
        # Leave room for the overflow marker if this isn't the last line
        reserve = 0 if remaining == 1 else len(f"\n…and {remaining} more")
        cost = len(line) + (1 if lines else 0)
        if used + cost + reserve > limit:
            lines.append(f"…and {remaining} more")
            break
        lines.append(line)
        used += cost
    return "\n".join(lines)


def render(
    points: Mapping[int, int],
    celebration: str | None = None,
) -> LeaderboardPayload:
    """Build the leaderboard payload.

    Parameters
    ----------
    points:
        user id → points, in insertion order.
    celebration:
        Banner text of the live celebration, if any.
    """
    entries = rank_entries(points)
    if entries:
        ranking_title = RANKING_TITLE
        ranking_text = _ranking_text(entries)
    else:
        ranking_title = EMPTY_TITLE
        ranking_text = EMPTY_TEXT

    return LeaderboardPayload(
        title=LEADERBOARD_TITLE,
        description=LEADERBOARD_DESCRIPTION,
        entries=tuple(entries),
        ranking_title=ranking_title,
        ranking_text=ranking_text,
        celebration_title=CELEBRATION_TITLE if celebration else None,
        celebration=celebration or None,
    )
