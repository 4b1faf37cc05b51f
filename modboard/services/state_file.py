"""
modboard.services.state_file — Durable Snapshot Persistence
============================================================

Reads and writes the single JSON record holding every moderator's points
and the leaderboard message id.

Writes go to a temp file in the same directory and are swapped in with
:func:`os.replace`, so a crash mid-write leaves the previous snapshot
intact.  Reads never raise: a missing, unreadable, or malformed file
yields an empty :class:`PointStore`.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from modboard.engine.points import PointStore

logger = logging.getLogger(__name__)


class StateFile:
    """Snapshot file at *path*."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> PointStore:
        """Restore the store, falling back to an empty one on any problem."""
        if not self.path.exists():
            logger.info("No snapshot at %s — starting with an empty leaderboard", self.path)
            return PointStore()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            store = PointStore.from_snapshot(raw)
        except (OSError, ValueError, RecursionError, ValidationError) as exc:
            logger.warning(
                "Snapshot %s is unreadable or corrupt (%s) — starting empty",
                self.path, exc,
            )
            return PointStore()

        logger.info(
            "Loaded snapshot: %d moderators, %d points, leaderboard message %s",
            store.member_count, store.total_points, store.leaderboard_message_id,
        )
        return store

    def save(self, store: PointStore) -> bool:
        """Atomically write *store*.  Returns False (and logs) on failure.

        The in-memory store stays authoritative when a write fails; the next
        save simply tries again.
        """
        tmp_path: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(store.to_snapshot(), fh, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError:
            logger.exception("Failed to save snapshot to %s", self.path)
            return False
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
        logger.debug("Snapshot saved to %s", self.path)
        return True
