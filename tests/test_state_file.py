"""
tests/test_state_file.py — Snapshot Persistence
================================================

Round-trip, atomic replace, and tolerant loading of bad files.
"""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest

from modboard.engine.points import PointStore
from modboard.services.state_file import StateFile


class TestLoad:
    def test_missing_file_gives_empty_store(self, state_file):
        store = state_file.load()
        assert store == PointStore()

    def test_corrupt_json_gives_empty_store(self, state_file):
        state_file.path.write_text("{not json", encoding="utf-8")
        assert state_file.load() == PointStore()

    def test_wrong_shape_gives_empty_store(self, state_file):
        state_file.path.write_text(json.dumps({"pointsByUser": {"x": "y"}}), encoding="utf-8")
        assert state_file.load() == PointStore()

    def test_non_utf8_gives_empty_store(self, state_file):
        state_file.path.write_bytes(b"\xff\xfe\x00garbage")
        assert state_file.load() == PointStore()

    @pytest.mark.parametrize(
        "data",
        [
            {"pointsByUser": {"²": 1}},
            {"pointsByUser": {}, "displayArtifactId": "¹"},
            {"pointsByUser": {"9" * 5000: 1}},
            {"pointsByUser": {}, "displayArtifactId": "9" * 5000},
            {"pointsByUser": {}, "displayArtifactId": -5},
        ],
    )
    def test_non_snowflake_ids_give_empty_store(self, state_file, data):
        state_file.path.write_text(json.dumps(data), encoding="utf-8")
        assert state_file.load() == PointStore()

    def test_oversized_integer_gives_empty_store(self, state_file):
        state_file.path.write_text('{"pointsByUser": {"1": ' + "9" * 5000 + "}}", encoding="utf-8")
        assert state_file.load() == PointStore()

    def test_deeply_nested_json_gives_empty_store(self, state_file):
        state_file.path.write_text("[" * 100_000 + "]" * 100_000, encoding="utf-8")
        assert state_file.load() == PointStore()

    def test_legacy_file_loads(self, state_file):
        state_file.path.write_text(
            json.dumps({"moderatorPoints": {"42": 120}, "leaderboardMessageId": "99"}),
            encoding="utf-8",
        )
        store = state_file.load()
        assert store.points == {42: 120}
        assert store.leaderboard_message_id == 99


class TestSave:
    def test_round_trip(self, state_file):
        original = PointStore({42: 7, 7: 42}, leaderboard_message_id=555)
        assert state_file.save(original) is True
        assert state_file.load() == original

    def test_file_is_readable_json(self, state_file):
        state_file.save(PointStore({1: 2}))
        data = json.loads(state_file.path.read_text(encoding="utf-8"))
        assert data == {"pointsByUser": {"1": 2}, "displayArtifactId": None}

    def test_no_temp_files_left_behind(self, state_file):
        state_file.save(PointStore({1: 1}))
        state_file.save(PointStore({1: 2}))
        assert sorted(p.name for p in state_file.path.parent.iterdir()) == [
            state_file.path.name
        ]

    def test_creates_parent_directory(self, tmp_path):
        sf = StateFile(tmp_path / "nested" / "data.json")
        assert sf.save(PointStore({1: 1})) is True
        assert sf.path.exists()

    def test_failed_replace_keeps_previous_snapshot(self, state_file):
        state_file.save(PointStore({1: 10}))

        with patch("modboard.services.state_file.os.replace", side_effect=OSError("disk full")):
            assert state_file.save(PointStore({1: 11})) is False

        assert state_file.load().points == {1: 10}
        # the half-written temp file is cleaned up
        assert [p.name for p in state_file.path.parent.iterdir()] == [state_file.path.name]

    def test_failed_write_returns_false(self, state_file):
        with patch("modboard.services.state_file.os.fsync", side_effect=OSError("io error")):
            assert state_file.save(PointStore({1: 1})) is False
        assert not state_file.path.exists()

    def test_replace_targets_same_directory(self, state_file):
        calls = []
        real_replace = os.replace

        def _spy(src, dst):
            calls.append((os.path.dirname(src), os.fspath(dst)))
            real_replace(src, dst)

        with patch("modboard.services.state_file.os.replace", side_effect=_spy):
            state_file.save(PointStore({1: 1}))

        assert calls == [(str(state_file.path.parent), str(state_file.path))]
