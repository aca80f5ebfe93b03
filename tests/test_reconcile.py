"""Tests for shard reconciliation."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from wikicrawl.config import settings
from wikicrawl.reconcile import load_titles, open_shards, reconcile, shard_paths
from wikicrawl.store import get_connection, init_db, put_document


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _seed_shard(path: Path, documents: dict[str, str]) -> None:
    conn = get_connection(path)
    init_db(conn)
    for title, document in documents.items():
        put_document(conn, title, document)
    conn.close()


@pytest.fixture()
def three_shards(tmp_path: Path) -> list[Path]:
    paths = shard_paths(tmp_path, 0, 3)
    _seed_shard(paths[0], {"Cat": "cat-from-0"})
    _seed_shard(paths[1], {"Cat": "cat-from-1", "Dog": "dog-from-1"})
    _seed_shard(paths[2], {"Feline": "feline-from-2"})
    return paths


# ---------------------------------------------------------------------------
# shard_paths / open_shards / load_titles
# ---------------------------------------------------------------------------

class TestShardPaths:
    def test_default_pattern(self, tmp_path: Path) -> None:
        paths = shard_paths(tmp_path, 110, 113)
        assert [p.name for p in paths] == [
            "110th.database.level",
            "111th.database.level",
            "112th.database.level",
        ]

    def test_falls_back_to_settings(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "shard_dir", tmp_path)
        monkeypatch.setattr(settings, "shard_start", 1)
        monkeypatch.setattr(settings, "shard_stop", 3)
        monkeypatch.setattr(settings, "shard_pattern", "shard-{index}.db")
        assert shard_paths() == [tmp_path / "shard-1.db", tmp_path / "shard-2.db"]

    def test_open_shards_creates_missing(self, tmp_path: Path) -> None:
        shards = open_shards(shard_paths(tmp_path, 0, 2))
        try:
            assert len(shards) == 2
            assert all(isinstance(s, sqlite3.Connection) for s in shards)
        finally:
            for s in shards:
                s.close()

    def test_open_shards_closes_opened_on_failure(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        opened: list[sqlite3.Connection] = []

        def recording_connection(path):
            conn = get_connection(path)
            opened.append(conn)
            return conn

        monkeypatch.setattr("wikicrawl.reconcile.get_connection", recording_connection)
        (tmp_path / "as_dir").mkdir()

        with pytest.raises(sqlite3.Error):
            open_shards([tmp_path / "a.db", tmp_path / "as_dir"])

        assert len(opened) == 1
        with pytest.raises(sqlite3.ProgrammingError):
            opened[0].execute("SELECT 1")


class TestLoadTitles:
    def test_reads_json_array(self, tmp_path: Path) -> None:
        path = tmp_path / "names.json"
        path.write_text(json.dumps(["Cat", "Café"]), encoding="utf-8")
        assert load_titles(path) == ["Cat", "Café"]

    def test_rejects_non_array(self, tmp_path: Path) -> None:
        path = tmp_path / "names.json"
        path.write_text('{"Cat": 1}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_titles(path)


# ---------------------------------------------------------------------------
# reconcile
# ---------------------------------------------------------------------------

class TestReconcile:
    def test_falls_over_to_later_shard(self, tmp_path: Path, three_shards) -> None:
        out = tmp_path / "database.json"
        ledger = reconcile(["Feline"], open_shards(three_shards), out)

        assert out.read_text(encoding="utf-8") == "feline-from-2\n"
        assert ledger == []

    def test_first_shard_wins(self, tmp_path: Path, three_shards) -> None:
        out = tmp_path / "database.json"
        reconcile(["Cat"], open_shards(three_shards), out)

        assert out.read_text(encoding="utf-8") == "cat-from-0\n"

    def test_unresolved_titles_returned(self, tmp_path: Path, three_shards) -> None:
        out = tmp_path / "database.json"
        ledger = reconcile(["A", "B"], open_shards(three_shards), out)

        assert ledger == ["A", "B"]
        assert not out.exists()

    def test_mixed_titles_keep_input_order(self, tmp_path: Path, three_shards) -> None:
        out = tmp_path / "database.json"
        out.write_text("existing\n", encoding="utf-8")
        ledger = reconcile(
            ["A", "Dog", "B", "Cat", "C"], open_shards(three_shards), out
        )

        assert ledger == ["A", "B", "C"]
        assert out.read_text(encoding="utf-8").splitlines() == [
            "existing",
            "dog-from-1",
            "cat-from-0",
        ]

    def test_broken_shard_is_skipped(self, tmp_path: Path, three_shards) -> None:
        shards = open_shards(three_shards)
        shards[0].execute("DROP TABLE pages")
        out = tmp_path / "database.json"
        ledger = reconcile(["Cat"], shards, out)

        assert ledger == []
        assert out.read_text(encoding="utf-8") == "cat-from-1\n"

    def test_all_shards_closed(self, tmp_path: Path, three_shards) -> None:
        shards = open_shards(three_shards)
        reconcile(["Cat"], shards, tmp_path / "out.json")

        for shard in shards:
            with pytest.raises(sqlite3.ProgrammingError):
                shard.execute("SELECT 1")

    def test_shards_closed_when_output_fails(self, tmp_path: Path, three_shards) -> None:
        shards = open_shards(three_shards)
        missing_dir = tmp_path / "missing" / "out.json"
        with pytest.raises(OSError):
            reconcile(["Cat"], shards, missing_dir)

        for shard in shards:
            with pytest.raises(sqlite3.ProgrammingError):
                shard.execute("SELECT 1")
