"""Root CLI application: sanitize, check, extract and serve."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mailsafe.core.config import load_config
from mailsafe.core.logger import configure_logging
from mailsafe.messages.body import MessageDecodeError, extract_message_body
from mailsafe.sanitize.audit import find_violations
from mailsafe.sanitize.pipeline import sanitize_html
from mailsafe.utils.text import excerpt

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="mailsafe",
    help="mailsafe: sanitize untrusted email HTML for safe rendering.",
    no_args_is_help=True,
)


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override the configured log level"),
) -> None:
    cfg = load_config()
    configure_logging(log_level or cfg.logging.level)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        err_console.print(f"[red]Cannot read {path}:[/red] {exc}")
        raise typer.Exit(1)


@app.command()
def sanitize(
    path: str = typer.Argument("-", help="HTML file to sanitize, or - for stdin"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write the result here instead of stdout"),
) -> None:
    """Sanitize an HTML email body."""
    html = sanitize_html(_read_source(path))
    if output:
        output.write_text(html, encoding="utf-8")
        err_console.print(f"Wrote [cyan]{len(html)}[/cyan] chars to [cyan]{output}[/cyan]")
    else:
        sys.stdout.write(html)


@app.command()
def check(
    path: str = typer.Argument(..., help="HTML file to audit, or - for stdin"),
    sanitize_first: bool = typer.Option(False, "--sanitize", help="Audit the sanitized output instead of the raw file"),
) -> None:
    """Report script tags, handlers, dangerous URIs and unsafe links."""
    html = _read_source(path)
    if sanitize_first:
        html = sanitize_html(html)

    violations = find_violations(html)
    if not violations:
        console.print("[green]No violations found.[/green]")
        return

    table = Table(title=f"Violations in {path}")
    table.add_column("Kind", style="cyan")
    table.add_column("Tag", style="white")
    table.add_column("Detail", style="dim")
    for v in violations:
        table.add_row(v.kind, v.tag, escape(excerpt(v.detail)))
    console.print(table)
    console.print(f"[red]{len(violations)} violation(s)[/red]")
    raise typer.Exit(1)


@app.command()
def extract(
    path: str = typer.Argument(..., help="Gmail message payload JSON (format=full), or - for stdin"),
) -> None:
    """Extract and print the readable body of a Gmail message payload."""
    try:
        data = json.loads(_read_source(path))
    except json.JSONDecodeError as exc:
        err_console.print(f"[red]Invalid JSON:[/red] {exc}")
        raise typer.Exit(1)

    # Accept either a bare payload or a whole message with a payload key
    payload = data.get("payload", data) if isinstance(data, dict) else data
    try:
        result = extract_message_body(payload)
    except MessageDecodeError as exc:
        err_console.print(f"[red]Failed:[/red] {exc}")
        raise typer.Exit(1)
    except ValueError as exc:
        err_console.print(f"[red]Invalid message payload:[/red] {exc}")
        raise typer.Exit(1)

    err_console.print(f"Body type: [cyan]{result.body_type.value}[/cyan]")
    sys.stdout.write(result.body)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Port"),
) -> None:
    """Run the sanitizer web API."""
    import uvicorn

    cfg = load_config()
    uvicorn.run(
        "mailsafe.web.app:create_app",
        host=host or cfg.web.host,
        port=port or cfg.web.port,
        factory=True,
        log_level=cfg.logging.level.lower(),
    )
