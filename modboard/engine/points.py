"""
modboard.engine.points — Point Store & Snapshot Format
=======================================================

In-memory mapping of user → accumulated points plus the id of the live
leaderboard message.  Both are snapshotted together so a restart picks up
exactly where the previous process stopped.

This module is pure data — no file I/O, no Discord I/O.  Persistence lives
in :mod:`modboard.services.state_file`.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    field_validator,
)

__all__ = ["PointChange", "PointStore", "StateSnapshot"]

# Discord snowflakes are 64-bit: at most 20 ASCII digits
SNOWFLAKE_MAX_DIGITS = 20


def _is_snowflake(text: str) -> bool:
    return text.isascii() and text.isdecimal() and len(text) <= SNOWFLAKE_MAX_DIGITS


# ---------------------------------------------------------------------------
# Snapshot schema
# ---------------------------------------------------------------------------
class StateSnapshot(BaseModel):
    """On-disk layout of the durable record.

    ``{"pointsByUser": {"<user id>": int}, "displayArtifactId": "<id>" | null}``

    Files written before the rename use ``moderatorPoints`` and
    ``leaderboardMessageId``; both spellings are accepted on read.
    """

    model_config = ConfigDict(populate_by_name=True)

    points_by_user: dict[str, NonNegativeInt] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("pointsByUser", "moderatorPoints", "points_by_user"),
        serialization_alias="pointsByUser",
    )
    display_artifact_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "displayArtifactId", "leaderboardMessageId", "display_artifact_id",
        ),
        serialization_alias="displayArtifactId",
    )

    @field_validator("points_by_user")
    @classmethod
    def _user_ids_are_snowflakes(cls, value: dict[str, int]) -> dict[str, int]:
        for key in value:
            if not _is_snowflake(key):
                raise ValueError(f"user id {key!r} is not numeric")
        return value

    @field_validator("display_artifact_id", mode="before")
    @classmethod
    def _coerce_artifact_id(cls, value):
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValueError("displayArtifactId must be a string or integer")
        if isinstance(value, int) and value >= 0:
            value = str(value)
        if isinstance(value, str) and _is_snowflake(value):
            return value
        raise ValueError(f"displayArtifactId {value!r} is not numeric")


# ---------------------------------------------------------------------------
# PointChange — result of a single mutation
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class PointChange:
    """Before/after totals for one user, as returned by every mutation."""

    user_id: int
    old_points: int
    new_points: int

    @property
    def delta(self) -> int:
        return self.new_points - self.old_points


# ---------------------------------------------------------------------------
# PointStore
# ---------------------------------------------------------------------------
class PointStore:
    """Single source of truth for moderator points.

    Entries are created on first activity and never removed; values never
    decrease.  Dict insertion order is kept and is the tie-break order used
    by the leaderboard renderer.
    """

    def __init__(
        self,
        points: dict[int, int] | None = None,
        leaderboard_message_id: int | None = None,
    ) -> None:
        self.points: dict[int, int] = dict(points or {})
        self.leaderboard_message_id = leaderboard_message_id

    def __len__(self) -> int:
        return len(self.points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointStore):
            return NotImplemented
        return (
            list(self.points.items()) == list(other.points.items())
            and self.leaderboard_message_id == other.leaderboard_message_id
        )

    def __repr__(self) -> str:
        return (
            f"PointStore(users={len(self.points)}, "
            f"leaderboard_message_id={self.leaderboard_message_id})"
        )

    # -- reads ---------------------------------------------------------------
    def get(self, user_id: int) -> int:
        return self.points.get(user_id, 0)

    @property
    def total_points(self) -> int:
        return sum(self.points.values())

    @property
    def member_count(self) -> int:
        return len(self.points)

    # -- mutations -----------------------------------------------------------
    def record_activity(self, user_id: int) -> PointChange:
        """Add exactly one point for a qualifying activity."""
        return self._add(user_id, 1)

    def grant(self, user_id: int, amount: int) -> PointChange:
        """Add *amount* points at once (manual award).

        Raises
        ------
        ValueError
            If *amount* is not a positive integer — points are never deducted.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValueError(f"amount must be a positive integer, got {amount!r}")
        return self._add(user_id, amount)

    def _add(self, user_id: int, amount: int) -> PointChange:
        old = self.points.get(user_id, 0)
        new = old + amount
        self.points[user_id] = new
        return PointChange(user_id=user_id, old_points=old, new_points=new)

    # -- snapshotting --------------------------------------------------------
    def to_snapshot(self) -> dict:
        """Serialize the mapping and the leaderboard reference."""
        snapshot = StateSnapshot(
            points_by_user={str(uid): pts for uid, pts in self.points.items()},
            display_artifact_id=(
                str(self.leaderboard_message_id)
                if self.leaderboard_message_id is not None
                else None
            ),
        )
        return snapshot.model_dump(by_alias=True)

    @classmethod
    def from_snapshot(cls, data: object) -> PointStore:
        """Rebuild a store from :meth:`to_snapshot` output.

        Raises
        ------
        pydantic.ValidationError
            If *data* doesn't match the snapshot layout.
        """
        snapshot = StateSnapshot.model_validate(data)
        return cls(
            points={int(uid): pts for uid, pts in snapshot.points_by_user.items()},
            leaderboard_message_id=(
                int(snapshot.display_artifact_id)
                if snapshot.display_artifact_id is not None
                else None
            ),
        )
