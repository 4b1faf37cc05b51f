"""
modboard.engine.milestones — Milestone Detection
=================================================

Pure functions: which configured thresholds does a point update cross?
"""

from __future__ import annotations

from collections.abc import Sequence

from modboard.constants import MILESTONES

__all__ = ["crossed", "highest_crossed"]


def crossed(
    old_points: int,
    new_points: int,
    milestones: Sequence[int] = MILESTONES,
) -> list[int]:
    """Return every threshold *t* with ``old_points < t <= new_points``.

    The result keeps the (ascending) order of *milestones*.  Regular
    activity moves one point at a time, so this is usually empty or a
    single value; manual grants can cross several at once.
    """
    return [t for t in milestones if old_points < t <= new_points]


def highest_crossed(
    old_points: int,
    new_points: int,
    milestones: Sequence[int] = MILESTONES,
) -> int | None:
    """The one milestone to celebrate for this update, or ``None``.

    When several thresholds are crossed together only the highest counts;
    the lower ones are not celebrated separately.
    """
    reached = crossed(old_points, new_points, milestones)
    return max(reached) if reached else None
