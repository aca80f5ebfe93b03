"""Tests for settings and INI config loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from wikicrawl.config import Settings, load_ini


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "config.ini"
    path.write_text(body, encoding="utf-8")
    return path


class TestSettings:
    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("WIKICRAWL_START", "10")
        monkeypatch.setenv("WIKICRAWL_STOP", "20")
        monkeypatch.setenv("FETCH_RETRY_MAX", "7")
        monkeypatch.setenv("CRAWL_ISOLATE_ERRORS", "yes")
        monkeypatch.setenv("WIKICRAWL_WORKSPACE", str(tmp_path))
        monkeypatch.delenv("WIKICRAWL_STORE_PATH", raising=False)

        s = Settings()
        assert (s.start, s.stop) == (10, 20)
        assert s.fetch_retry_max == 7
        assert s.crawl_isolate_errors is True
        assert s.store_path == tmp_path / "pages.db"

    def test_explicit_store_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WIKICRAWL_STORE_PATH", "/data/pages.db")
        assert Settings().store_path == Path("/data/pages.db")


class TestLoadIni:
    def test_applies_application_and_leveldb(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "[application]\n"
            "template = List of minor planets: {count}\n"
            "start = 1\n"
            "stop = 4\n"
            "\n"
            "[leveldb]\n"
            "path = ./crawl.db\n",
        )
        cfg = load_ini(path, base=Settings())

        assert cfg.title_template == "List of minor planets: {count}"
        assert (cfg.start, cfg.stop) == (1, 4)
        assert cfg.store_path == Path("./crawl.db")

    def test_store_section_alias(self, tmp_path: Path) -> None:
        cfg = load_ini(_write(tmp_path, "[store]\npath = other.db\n"), base=Settings())
        assert cfg.store_path == Path("other.db")

    def test_missing_keys_keep_base(self, tmp_path: Path) -> None:
        base = Settings(title_template="{count}", start=5, stop=6)
        cfg = load_ini(_write(tmp_path, "[application]\nstop = 9\n"), base=base)

        assert cfg.title_template == "{count}"
        assert (cfg.start, cfg.stop) == (5, 9)
        assert base.stop == 6

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_ini(tmp_path / "nope.ini")

    def test_non_integer_bound_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            load_ini(_write(tmp_path, "[application]\nstart = ten\n"), base=Settings())
