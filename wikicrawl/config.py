"""Centralised settings for wikicrawl.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).  Crawl runs can also
layer an INI file on top with :func:`load_ini`.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("WIKICRAWL_WORKSPACE", Path.home() / ".wikicrawl")
        )
    )
    store_path_override: str = field(
        default_factory=lambda: os.environ.get("WIKICRAWL_STORE_PATH", "")
    )

    @property
    def store_path(self) -> Path:
        """Absolute path to the SQLite page store."""
        if self.store_path_override:
            return Path(self.store_path_override)
        return self.workspace_dir / "pages.db"

    # ------------------------------------------------------------------
    # Seed titles
    # ------------------------------------------------------------------
    title_template: str = field(
        default_factory=lambda: os.environ.get("WIKICRAWL_TEMPLATE", "{count}")
    )
    start: int = field(
        default_factory=lambda: int(os.environ.get("WIKICRAWL_START", "2000"))
    )
    stop: int = field(
        default_factory=lambda: int(os.environ.get("WIKICRAWL_STOP", "2001"))
    )

    # ------------------------------------------------------------------
    # Remote endpoints
    # ------------------------------------------------------------------
    api_endpoint: str = field(
        default_factory=lambda: os.environ.get(
            "WIKICRAWL_API_ENDPOINT", "https://en.wikipedia.org/w/api.php"
        )
    )
    transform_endpoint: str = field(
        default_factory=lambda: os.environ.get(
            "WIKICRAWL_TRANSFORM_ENDPOINT",
            "https://en.wikipedia.org/api/rest_v1/transform/wikitext/to/html",
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    # ------------------------------------------------------------------
    # Fetch retries
    # ------------------------------------------------------------------
    fetch_retry_max: int = field(
        default_factory=lambda: int(os.environ.get("FETCH_RETRY_MAX", "5"))
    )
    fetch_retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_RETRY_BASE_DELAY", "1.0"))
    )
    fetch_retry_max_delay: float = field(
        default_factory=lambda: float(os.environ.get("FETCH_RETRY_MAX_DELAY", "60.0"))
    )

    # ------------------------------------------------------------------
    # Crawl behaviour
    # ------------------------------------------------------------------
    crawl_isolate_errors: bool = field(
        default_factory=lambda: _env_bool("CRAWL_ISOLATE_ERRORS", "false")
    )

    # ------------------------------------------------------------------
    # Reconciliation shards
    # ------------------------------------------------------------------
    shard_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("WIKICRAWL_SHARD_DIR", "."))
    )
    shard_pattern: str = field(
        default_factory=lambda: os.environ.get(
            "WIKICRAWL_SHARD_PATTERN", "{index}th.database.level"
        )
    )
    shard_start: int = field(
        default_factory=lambda: int(os.environ.get("WIKICRAWL_SHARD_START", "110"))
    )
    shard_stop: int = field(
        default_factory=lambda: int(os.environ.get("WIKICRAWL_SHARD_STOP", "116"))
    )


def load_ini(path: str | Path, base: Settings | None = None) -> Settings:
    """Return a copy of *base* with the values of an INI config file applied.

    Recognised keys::

        [application]
        template = {count}
        start = 2000
        stop = 2010

        [leveldb]          ; ``[store]`` is accepted as well
        path = ./pages.db

    Keys that are absent keep the value from *base* (``settings`` by default).

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If ``start`` or ``stop`` is not an integer.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    parser = configparser.ConfigParser(interpolation=None)
    parser.read(path, encoding="utf-8")

    base = base or settings
    overrides: dict[str, object] = {}

    if parser.has_section("application"):
        app = parser["application"]
        if "template" in app:
            overrides["title_template"] = app["template"]
        if "start" in app:
            overrides["start"] = int(app["start"])
        if "stop" in app:
            overrides["stop"] = int(app["stop"])

    for section in ("leveldb", "store"):
        if parser.has_section(section) and "path" in parser[section]:
            overrides["store_path_override"] = parser[section]["path"]

    return replace(base, **overrides)


# Module-level singleton — import this everywhere:
#   from wikicrawl.config import settings
settings = Settings()
