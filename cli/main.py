"""WebClone CLI: entry-point for running the backend and one-off clones.

Usage:
    python cli/main.py --help

Commands:
    serve     run the HTTP API under uvicorn
    render    render + sanitize a page and print the result
    clone     run the full pipeline, optionally writing the files to disk
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
from typing import Optional

import typer

from backend.config import settings
from backend.errors import CloneError, UrlValidationError
from backend.logs import configure_logging
from backend.validation import validate_url

app = typer.Typer(
    name="webclone",
    help="WebClone backend CLI.",
    no_args_is_help=True,
)

# Files written by `clone --out`, keyed by the CloneResult field they hold.
OUTPUT_FILES = {
    "html": "index.html",
    "css": "styles.css",
    "sqlSchema": "schema.sql",
    "nodeRoute": "routes.js",
}


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Override LOG_LEVEL."),
) -> None:
    configure_logging(log_level)


def _checked_url(url: str) -> str:
    try:
        return validate_url(url)
    except UrlValidationError as exc:
        typer.echo(f"[webclone] {exc.error}: {exc.message}", err=True)
        raise typer.Exit(2)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, help="Port (defaults to PORT / 5000)."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    bind_port = port or settings.port
    typer.echo(f"[serve] WebClone backend on http://{host}:{bind_port}  (env={settings.app_env})")
    uvicorn.run("backend.api.app:app", host=host, port=bind_port, reload=reload)


# ---------------------------------------------------------------------------
# Render only
# ---------------------------------------------------------------------------
@app.command("render")
def render(
    url: str = typer.Option(..., help="URL to render."),
) -> None:
    """Render a URL headlessly and print its sanitized HTML."""
    from backend.scraper.renderer import render_page

    target = _checked_url(url)
    typer.echo(f"[render] Rendering {target!r} …")
    try:
        result = asyncio.run(render_page(target))
    except CloneError as exc:
        typer.echo(f"[render] {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(f"[render] HTML : {len(result.html)} chars")
    typer.echo(f"[render] CSS  : {len(result.css)} chars")
    typer.echo("")
    typer.echo(result.html)


# ---------------------------------------------------------------------------
# Full clone
# ---------------------------------------------------------------------------
@app.command("clone")
def clone(
    url: str = typer.Option(..., help="URL to clone."),
    out: Optional[Path] = typer.Option(
        None, help="Directory to write index.html, styles.css, schema.sql, routes.js."
    ),
) -> None:
    """Render a URL and generate a SQL schema + Express route for it."""
    from backend.generator.client import CodeGenerationClient
    from backend.pipeline import run_clone

    target = _checked_url(url)
    generator = CodeGenerationClient.from_settings()

    typer.echo(f"[clone] Cloning {target!r} …")
    try:
        result = asyncio.run(run_clone(target, generator))
    except CloneError as exc:
        typer.echo(f"[clone] {exc}", err=True)
        raise typer.Exit(1)

    data = result.to_dict()
    typer.echo(f"[clone] HTML   : {len(data['html'])} chars")
    typer.echo(f"[clone] CSS    : {len(data['css'])} chars")
    typer.echo(f"[clone] Time   : {data['metadata']['processingTime']}")

    if out is None:
        typer.echo("")
        typer.echo(data["sqlSchema"])
        typer.echo("")
        typer.echo(data["nodeRoute"])
        return

    out.mkdir(parents=True, exist_ok=True)
    for key, filename in OUTPUT_FILES.items():
        (out / filename).write_text(data[key], encoding="utf-8")
    (out / "metadata.json").write_text(
        json.dumps(data["metadata"], indent=2), encoding="utf-8"
    )
    typer.echo(f"[clone] Files written to {out}")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
