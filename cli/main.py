"""wikicrawl CLI — entry-point for the crawler and the shard reconciler.

Usage:
    python cli/main.py --help

Commands:
    crawl     → fetch seed titles and their links into the page store
    extract   → copy stored documents for a title list out of the shards
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from wikicrawl.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from dataclasses import replace
from typing import Optional

import typer

from wikicrawl.config import load_ini, settings
from wikicrawl.crawl import crawl, generate_titles
from wikicrawl.reconcile import load_titles, open_shards, reconcile, shard_paths
from wikicrawl.store import get_connection, init_db

app = typer.Typer(
    name="wikicrawl",
    help="Encyclopedia revision crawler.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Crawl
# ---------------------------------------------------------------------------
@app.command("crawl")
def crawl_cmd(
    config: Optional[Path] = typer.Option(None, "--config", help="INI config file."),
    template: Optional[str] = typer.Option(None, help="Title template, e.g. '{count}'."),
    start: Optional[int] = typer.Option(None, help="First seed index (inclusive)."),
    stop: Optional[int] = typer.Option(None, help="Last seed index (exclusive)."),
    store: Optional[Path] = typer.Option(None, help="Page store path."),
    isolate_errors: Optional[bool] = typer.Option(
        None,
        "--isolate-errors/--no-isolate-errors",
        help="Record per-title extraction errors instead of aborting.",
    ),
) -> None:
    """Crawl the generated seed titles and their direct links."""
    try:
        cfg = load_ini(config) if config else settings
        overrides = {
            "title_template": template,
            "start": start,
            "stop": stop,
            "store_path_override": str(store) if store else None,
        }
        cfg = replace(cfg, **{k: v for k, v in overrides.items() if v is not None})

        titles = generate_titles(cfg.title_template, cfg.start, cfg.stop)
        typer.echo(f"[crawl] {len(titles)} seed title(s) → {cfg.store_path}")

        conn = get_connection(cfg.store_path)
        try:
            init_db(conn)
        except Exception:
            conn.close()
            raise
        # crawl() owns the connection from here and closes it.
        result = crawl(conn, titles, isolate_errors=isolate_errors)
    except Exception as exc:
        typer.echo(f"Error encountered. {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(f"[crawl] Persisted {len(result.persisted)} page(s).")
    if result.failed:
        typer.echo(f"[crawl] Failed for: {json.dumps(result.failed, ensure_ascii=False)}")
    typer.echo("Information collected.")


# ---------------------------------------------------------------------------
# Extract / reconcile
# ---------------------------------------------------------------------------
@app.command("extract")
def extract_cmd(
    titles_file: Path = typer.Argument(..., help="JSON array of titles."),
    output: Path = typer.Argument(..., help="File to append found documents to."),
    shard_dir: Optional[Path] = typer.Option(None, help="Directory holding the shards."),
    shard_start: Optional[int] = typer.Option(None, help="First shard index (inclusive)."),
    shard_stop: Optional[int] = typer.Option(None, help="Last shard index (exclusive)."),
) -> None:
    """Append each title's stored document from the first shard that has it."""
    try:
        titles = load_titles(titles_file)
        shards = open_shards(shard_paths(shard_dir, shard_start, shard_stop))
        ledger = reconcile(titles, shards, output)
    except Exception as exc:
        typer.echo(f"Process failed: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Process succeeded, failed for: {json.dumps(ledger, ensure_ascii=False)}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
