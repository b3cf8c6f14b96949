"""CLI main entry point using Typer."""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from outlinks.config.models import VALID_LOG_LEVELS, ServerConfig
from outlinks.config.settings import (
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_SITE_HOST,
    MARKDOWN_SUFFIXES,
    get_default_rewrite_config,
)
from outlinks.links import LinkRewriter, resolve_site_host

app = typer.Typer(
    name="outlinks",
    help="Open external links in a new tab with safe rel attributes",
    add_completion=False,
)

# Diagnostics go to stderr so rewritten documents can be piped from stdout
console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Route log records through Rich at the requested level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _check_log_level(value: str) -> str:
    if value.upper() not in VALID_LOG_LEVELS:
        raise typer.BadParameter(f"Choose one of {'/'.join(VALID_LOG_LEVELS)}")
    return value.upper()


@app.command()
def rewrite(
    source: Path = typer.Argument(
        ...,
        help="HTML or Markdown file to rewrite ('-' reads stdin)",
    ),
    site_host: str = typer.Option(
        DEFAULT_SITE_HOST,
        "--host",
        "-H",
        help="Site host or home URL; links containing it are left alone",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the result here instead of stdout",
    ),
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        "-l",
        help="Logging level (DEBUG/INFO/WARNING/ERROR)",
        callback=_check_log_level,
    ),
) -> None:
    """Add target/rel attributes to external links in a document."""
    _configure_logging(log_level)

    try:
        if str(source) == "-":
            content = sys.stdin.read()
        elif not source.is_file():
            console.print(f"[red]✗[/red] Source not found: {source}", style="bold")
            raise typer.Exit(code=3)
        else:
            content = source.read_text(encoding="utf-8")

        host = resolve_site_host(site_host)
        if not host:
            console.print("[yellow]![/yellow] No site host given; document left unchanged")

        config = get_default_rewrite_config(host)
        try:
            config.validate()
        except ValueError as e:
            console.print(f"[red]✗[/red] Configuration error: {e}", style="bold")
            raise typer.Exit(code=2)

        if source.suffix.lower() in MARKDOWN_SUFFIXES:
            from outlinks.renderer import MarkdownRenderer

            result = MarkdownRenderer(rewrite_config=config).render(content)
        else:
            result = LinkRewriter(config).rewrite(content)

        if output is None:
            sys.stdout.write(result)
        else:
            output.write_text(result, encoding="utf-8")
            console.print(f"[green]✓[/green] Wrote {output}")

    except OSError as e:
        console.print(f"[red]✗[/red] Error: {e}", style="bold")
        raise typer.Exit(code=1)


@app.command()
def serve(
    path: Path = typer.Argument(
        Path("."),
        help="Directory of Markdown/HTML files to serve",
    ),
    port: int = typer.Option(
        DEFAULT_PORT,
        "--port",
        "-p",
        help="Port to bind server (1024-65535)",
    ),
    host: str = typer.Option(
        DEFAULT_HOST,
        "--host",
        "-h",
        help="Host to bind server",
    ),
    site_host: str = typer.Option(
        DEFAULT_SITE_HOST,
        "--site-host",
        "-s",
        help="Site host or home URL (defaults to the request Host header)",
    ),
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        "--log",
        "-l",
        help="Logging level (DEBUG/INFO/WARNING/ERROR)",
        callback=_check_log_level,
    ),
) -> None:
    """Start the link preview server."""
    _configure_logging(log_level)

    if not path.exists():
        console.print(f"[red]✗[/red] Path not found: {path}", style="bold")
        raise typer.Exit(code=3)

    config = ServerConfig(
        host=host,
        port=port,
        serve_path=path.absolute(),
        site_host=resolve_site_host(site_host),
        log_level=log_level,
    )

    try:
        config.validate()
    except ValueError as e:
        console.print(f"[red]✗[/red] Configuration error: {e}", style="bold")
        raise typer.Exit(code=2)

    import uvicorn

    from outlinks.server.app import create_app

    console.print(f"[bold blue]outlinks[/bold blue] serving {config.serve_path}")
    console.print(f"[green]✓[/green] http://{host}:{port}")

    try:
        uvicorn.run(
            create_app(config),
            host=host,
            port=port,
            log_level=log_level.lower(),
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
        raise typer.Exit(code=0)
    except OSError as e:
        if "address already in use" in str(e).lower():
            console.print(f"[red]✗[/red] Port {port} is already in use", style="bold")
            raise typer.Exit(code=5)
        console.print(f"[red]✗[/red] Error: {e}", style="bold")
        raise typer.Exit(code=1)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
