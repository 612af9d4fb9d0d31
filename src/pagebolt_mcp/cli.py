"""
Command-line entry point for the PageBolt MCP server.

Running ``pagebolt-mcp`` with no command starts the MCP server over stdio.
The ``usage`` and ``devices`` commands query the API directly, which is
handy for checking credentials before wiring the server into an assistant.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from . import __version__, server
from .config import PageBoltConfig, load_config
from .http import PageBoltAPIError, PageBoltClient, PageBoltError
from .render import Renderer

app = typer.Typer(
    name="pagebolt-mcp",
    help="PageBolt MCP server - web capture tools for AI assistants",
    add_completion=False,
)

logger = logging.getLogger(__name__)

_config: Optional[PageBoltConfig] = None
_renderer: Optional[Renderer] = None


class Transport(str, Enum):
    """MCP transports the server can run on."""

    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


def get_config() -> PageBoltConfig:
    """Get global config instance."""
    if _config is None:
        raise RuntimeError("Config not initialized")
    return _config


def get_renderer() -> Renderer:
    """Get global renderer instance."""
    if _renderer is None:
        raise RuntimeError("Renderer not initialized")
    return _renderer


def setup_logging(config: PageBoltConfig) -> None:
    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def run_server(config: PageBoltConfig, transport: Transport = Transport.STDIO) -> None:
    setup_logging(config)
    logger.info(f"Starting PageBolt MCP server {__version__} ({transport.value}) for {config.base_url}")
    server.configure(config)
    server.mcp.run(transport=transport.value)


def _fetch(config: PageBoltConfig, call: Callable[[PageBoltClient], Awaitable[Any]]) -> Any:
    async def runner() -> Any:
        async with PageBoltClient(config) as client:
            return await call(client)

    return asyncio.run(runner())


def usage_command(config: PageBoltConfig, renderer: Renderer) -> int:
    """Show API usage for the configured key."""
    try:
        result = _fetch(config, lambda client: client.get_usage())
    except PageBoltAPIError as e:
        renderer.print_error(str(e))
        return 2
    except (PageBoltError, ValidationError) as e:
        renderer.print_error(f"Failed to get usage: {e}")
        return 1

    if renderer.json_output:
        renderer.print_json(result.model_dump(by_alias=True))
        return 0

    usage = result.usage
    renderer.print_success("PageBolt Usage")
    renderer.print(f"Plan: {result.plan}")
    renderer.print(f"Used: {usage.current:,} / {usage.limit:,} requests ({result.percent_used}%)")
    renderer.print(f"Remaining: {usage.remaining:,}")
    return 0


def devices_command(config: PageBoltConfig, renderer: Renderer) -> int:
    """List device presets available for viewport emulation."""
    try:
        result = _fetch(config, lambda client: client.list_devices())
    except PageBoltAPIError as e:
        renderer.print_error(str(e))
        return 2
    except (PageBoltError, ValidationError) as e:
        renderer.print_error(f"Failed to list devices: {e}")
        return 1

    rows = [
        {
            "name": d.name,
            "viewport": f"{d.viewport.width}x{d.viewport.height}",
            "scale": d.viewport.device_scale_factor,
            "mobile": d.is_mobile,
            "touch": d.has_touch,
        }
        for d in result.devices
    ]
    renderer.print_table(rows, title=f"Device presets ({len(rows)})")
    return 0


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    api_key: Annotated[
        Optional[str], typer.Option("--api-key", "-k", help="PageBolt API key [env: PAGEBOLT_API_KEY]")
    ] = None,
    base_url: Annotated[
        Optional[str], typer.Option("--base-url", "-u", help="API base URL [default: https://pagebolt.dev]")
    ] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", help="Request timeout in seconds")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Machine-output mode")] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Suppress non-essential output")
    ] = False,
):
    """
    PageBolt MCP server.

    Examples:
      pagebolt-mcp

      pagebolt-mcp serve --transport streamable-http

      pagebolt-mcp usage
    """
    global _config, _renderer

    _config = load_config(api_key=api_key, base_url=base_url, timeout=timeout)
    _renderer = Renderer(json_output=json_output, quiet=quiet)

    if ctx.invoked_subcommand is None:
        run_server(_config)


@app.command()
def serve(
    transport: Annotated[
        Transport, typer.Option("--transport", "-t", help="MCP transport")
    ] = Transport.STDIO,
):
    """Run the MCP server (stdio by default)."""
    run_server(get_config(), transport)


@app.command()
def usage():
    """GET /api/v1/usage - Show current usage and plan limits."""
    exit_code = usage_command(get_config(), get_renderer())
    raise typer.Exit(exit_code)


@app.command()
def devices():
    """GET /api/v1/devices - List device presets."""
    exit_code = devices_command(get_config(), get_renderer())
    raise typer.Exit(exit_code)


@app.command()
def version():
    """Print the client version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
