"""
CLI: set-endpoint, show-endpoint, test-connection, scrape, call.
Endpoint precedence: --endpoint, then SCRAPECALL_ENDPOINT, then the stored config file.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import typer

from scrapecall.cli.render import render_failure, render_scrape
from scrapecall.cli.store import EndpointStore
from scrapecall.core.config import ClientConfig
from scrapecall.errors import ConfigurationError
from scrapecall.rpc.client import RemoteCallClient
from scrapecall.rpc.request import validate_endpoint
from scrapecall.rpc.result import Failure, Result
from scrapecall.scrape import ScrapeOptions, ScrapeService

app = typer.Typer(help="scrapecall: call the remote scraping function.")


@dataclass
class Settings:
    endpoint: Optional[str] = None
    timeout: Optional[float] = None
    direct_mode: Optional[str] = None
    fallback: Optional[bool] = None


def build_client(settings: Settings) -> RemoteCallClient:
    """Client from CLI options over env; endpoint falls back to the stored one."""
    config = ClientConfig.load_from_env(
        endpoint=settings.endpoint,
        timeout=settings.timeout,
        direct_mode=settings.direct_mode,
        fallback=settings.fallback,
    )
    if not config.endpoint:
        config.endpoint = EndpointStore().load()
    return RemoteCallClient(config)


def _client(ctx: typer.Context) -> RemoteCallClient:
    try:
        return build_client(ctx.obj or Settings())
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e.message}", err=True)
        raise typer.Exit(1)


def _echo_failure(failure: Failure) -> None:
    for line in render_failure(failure):
        typer.echo(line, err=True)


def _echo_json(result: Result) -> None:
    if result.ok:
        typer.echo(json.dumps(result.raw, indent=2, ensure_ascii=False))
    else:
        typer.echo(json.dumps({"success": False, "error": result.error_message, "kind": result.kind}, indent=2))


@app.callback()
def main_options(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(None, "--endpoint", "-e", help="Endpoint URL (overrides env and stored config)"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Seconds per transport attempt"),
    direct_mode: Optional[str] = typer.Option(None, "--direct-mode", help="body (JSON POST) or query (GET)"),
    fallback: Optional[bool] = typer.Option(None, "--fallback/--no-fallback", help="Retry through the callback transport"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Global options shared by all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Settings(endpoint=endpoint, timeout=timeout, direct_mode=direct_mode, fallback=fallback)


@app.command()
def set_endpoint(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Endpoint URL of the remote function"),
    no_check: bool = typer.Option(False, "--no-check", help="Do not test the connection after saving"),
) -> None:
    """Save the endpoint, then test the connection."""
    try:
        url = validate_endpoint(url)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e.message}", err=True)
        raise typer.Exit(1)
    EndpointStore().save(url)
    typer.echo("Configuration saved!")
    if not no_check:
        settings = ctx.obj or Settings()
        ctx.obj = Settings(endpoint=url, timeout=settings.timeout, direct_mode=settings.direct_mode, fallback=settings.fallback)
        test_connection(ctx)


@app.command()
def show_endpoint(ctx: typer.Context) -> None:
    """Print the endpoint that commands will use."""
    endpoint = _client(ctx).get_endpoint()
    if not endpoint:
        typer.echo("No endpoint configured. Run: scrapecall set-endpoint <URL>", err=True)
        raise typer.Exit(1)
    typer.echo(endpoint)


@app.command()
def test_connection(ctx: typer.Context) -> None:
    """Call testConnection on the endpoint."""
    service = ScrapeService(_client(ctx))
    result = asyncio.run(service.test_connection())
    if not result.ok:
        typer.echo("API connection failed", err=True)
        _echo_failure(result)
        raise typer.Exit(1)
    typer.echo("API connection OK")


@app.command()
def scrape(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Website URL to scrape"),
    title: bool = typer.Option(True, "--title/--no-title", help="Extract the page title"),
    meta: bool = typer.Option(True, "--meta/--no-meta", help="Extract the meta description"),
    links: bool = typer.Option(True, "--links/--no-links", help="Extract links"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
) -> None:
    """Scrape URL through the remote scrapeAndSave function."""
    service = ScrapeService(_client(ctx))
    options = ScrapeOptions(extract_title=title, extract_meta=meta, extract_links=links)
    result = asyncio.run(service.scrape(url, options))
    if as_json:
        _echo_json(result)
    elif result.ok:
        for line in render_scrape(result):
            typer.echo(line)
    else:
        _echo_failure(result)
    if not result.ok:
        raise typer.Exit(1)


@app.command()
def call(
    ctx: typer.Context,
    function: str = typer.Argument(..., help="Remote function name"),
    data: str = typer.Option("{}", "--data", "-d", help="Payload as a JSON object"),
) -> None:
    """Invoke any remote function and print the response as JSON."""
    try:
        payload: Any = json.loads(data)
    except ValueError as e:
        typer.echo(f"--data is not valid JSON: {e}", err=True)
        raise typer.Exit(2)
    if not isinstance(payload, dict):
        typer.echo("--data must be a JSON object", err=True)
        raise typer.Exit(2)
    result = asyncio.run(_client(ctx).invoke(function, payload))
    _echo_json(result)
    if not result.ok:
        raise typer.Exit(1)


def main() -> None:
    """Entry point for the scrapecall console command."""
    app()


if __name__ == "__main__":
    main()
