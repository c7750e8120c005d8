"""
Agent Forge CLI

Command-line interface for the Agent Forge tool server.
"""

import sys
import asyncio
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from . import __version__
from .config import load_config, create_default_config, ForgeConfig, API_KEY_ENV, CONFIG_NAME
from .errors import ConfigError, UpstreamError
from .logs import setup_logging
from .tools import TOOLS, PROMPTS


console = Console()
# stdout belongs to the MCP stdio transport while serving
err_console = Console(stderr=True)


def _fail(message: str):
    err_console.print(f"[red]✗[/red] {message}")
    sys.exit(1)


def _load(ctx) -> ForgeConfig:
    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        _fail(e.message)


def _startup(ctx, need_api_key: bool = True) -> ForgeConfig:
    """Load config, configure logging and check the API key."""
    config = _load(ctx)
    try:
        setup_logging(config.log)
    except ConfigError as e:
        _fail(f"Failed to initialise logging: {e.message}")

    if need_api_key and not config.deepseek.api_key:
        _fail(
            f"{API_KEY_ENV} is not set.\n"
            f"  Export it before starting, e.g. [cyan]export {API_KEY_ENV}=your_api_key_here[/cyan]"
        )
    return config


@click.group()
@click.version_option(__version__, prog_name="agent-forge")
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to config file")
@click.pass_context
def cli(ctx, config_path: str):
    """Agent Forge - agent registry and role-play tools over a chat-completion API"""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# =============================================================================
# Server Commands
# =============================================================================

@cli.command()
@click.option("--transport", "-t", default="stdio", type=click.Choice(["stdio", "http"]),
              help="MCP over stdio, or the HTTP API")
@click.option("--host", "-h", default=None, help="Host to bind to (http only)")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to (http only)")
@click.pass_context
def serve(ctx, transport: str, host: str, port: int):
    """Start the tool server."""
    from .context import ForgeContext

    config = _startup(ctx)
    context = ForgeContext.from_config(config)

    if transport == "http":
        from .server import run_http

        err_console.print(Panel(
            f"[bold]Agent Forge v{__version__}[/bold]\n"
            f"Serving HTTP on [cyan]http://{host or config.server.host}:{port or config.server.port}[/cyan]",
            title="🚀 Starting"
        ))
        run_http(context, host=host, port=port)
    else:
        from .stdio import serve_stdio

        err_console.print(f"[green]✓[/green] Agent Forge v{__version__} serving MCP over stdio")
        asyncio.run(serve_stdio(context))


@cli.command()
@click.option("--path", "-o", "output", default=CONFIG_NAME, type=click.Path(), help="Where to write the file")
def init(output: str):
    """Initialize a new configuration file."""
    config_path = Path(output)

    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(create_default_config())
    console.print(f"[green]✓[/green] Created {config_path}")
    console.print(f"\nSet {API_KEY_ENV}, then run:")
    console.print(f"  [cyan]agent-forge -c {config_path} serve[/cyan]")


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show the effective configuration."""
    config = _load(ctx)

    table = Table(title=f"Configuration ({config.source or 'defaults'})")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for section, values in config.to_dict().items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", str(value))

    console.print(table)


@cli.command()
def tools():
    """List tools and prompt templates."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Arguments")
    table.add_column("Description")

    for tool in TOOLS:
        args = ", ".join(f"{p.name}{'*' if p.required else ''}" for p in tool.params)
        table.add_row(tool.name, args or "-", tool.description.splitlines()[0])
    console.print(table)

    table = Table(title="Prompts")
    table.add_column("Name", style="cyan")
    table.add_column("Arguments")
    table.add_column("Description")

    for prompt in PROMPTS:
        args = ", ".join(f"{p.name}{'*' if p.required else ''}" for p in prompt.params)
        table.add_row(prompt.name, args, prompt.description)
    console.print(table)


@cli.command()
@click.argument("question")
@click.option("--system", "-s", "system_prompt", default="You are a helpful assistant.", help="System prompt")
@click.option("--context", "background", default="", help="Background context sent before the question")
@click.pass_context
def ask(ctx, question: str, system_prompt: str, background: str):
    """Send one question to the chat-completion API."""
    from .llm import LLMGateway

    config = _startup(ctx)

    async def run() -> str:
        async with LLMGateway.from_config(config.deepseek) as gateway:
            return await gateway.complete(system_prompt, question, background)

    try:
        reply = asyncio.run(run())
    except UpstreamError as e:
        _fail(e.message)

    console.print(reply)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
