"""
CLI interface for Contentizer.

Provides command-line access to optimize, settings, history and API key
management.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from contentizer.config.loader import load_config
from contentizer.core.optimizer import TextOptimizer, create_optimizer
from contentizer.core.presets import default_presets
from contentizer.errors import ContentizerError
from contentizer.storage.models import PROVIDER_MODES, Settings

app = typer.Typer()
settings_app = typer.Typer(help="Show or change provider settings.")
history_app = typer.Typer(help="Show or clear optimization history.")
key_app = typer.Typer(help="Manage the provider API key.")
app.add_typer(settings_app, name="settings")
app.add_typer(history_app, name="history")
app.add_typer(key_app, name="key")

console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

# Missing or broken config files surface as OSError / YAMLError from load_config
HANDLED_ERRORS = (ContentizerError, ValueError, OSError, yaml.YAMLError)

_config_path: Optional[str] = None


def get_optimizer() -> TextOptimizer:
    """Build the optimizer from the configuration selected on the command line."""
    return create_optimizer(load_config(_config_path))


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/] {escape(str(error))}")
    sys.exit(EXIT_CODE_FAIL)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to YAML configuration file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging"
    ),
):
    """Contentizer CLI."""
    global _config_path
    _config_path = config
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        console.print("Contentizer - Use --help to see available commands")


@app.command()
def optimize(
    category: str = typer.Argument(..., help="Category preset, e.g. Email"),
    style: str = typer.Argument(..., help="Style preset, e.g. Formal"),
    text: Optional[str] = typer.Argument(
        None,
        help="Text to optimize (read from stdin when omitted)"
    ),
    extra: str = typer.Option(
        "",
        "--extra",
        "-x",
        help="Extra instructions for this rewrite"
    ),
):
    """Rewrite text for the given category and style."""
    if text is None:
        text = sys.stdin.read()
    try:
        result = get_optimizer().optimize(category, style, extra, text)
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        console.print(result, markup=False, highlight=False)


@app.command()
def presets():
    """List available categories and styles."""
    available = default_presets()
    table = Table(title="Presets")
    table.add_column("Categories")
    table.add_column("Styles")
    rows = max(len(available.categories), len(available.styles))
    for i in range(rows):
        table.add_row(
            available.categories[i] if i < len(available.categories) else "",
            available.styles[i] if i < len(available.styles) else "",
        )
    console.print(table)


@app.command()
def quota():
    """Show today's quota usage."""
    try:
        status = get_optimizer().quota_status()
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        if not status.enabled:
            console.print("Daily quota is disabled")
            return
        console.print(
            f"Used {status.used} of {status.limit} requests today "
            f"({status.remaining} remaining)"
        )


@settings_app.command("show")
def settings_show():
    """Show current provider settings."""
    try:
        current = get_optimizer().get_settings()
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        console.print(f"[bold]Provider mode:[/bold] {current.provider_mode}")
        console.print(f"[bold]API base URL:[/bold] {escape(current.api_base_url or '(default)')}")
        console.print(f"[bold]Model:[/bold] {escape(current.model or '(default)')}")


@settings_app.command("set")
def settings_set(
    provider_mode: Optional[str] = typer.Option(
        None,
        "--provider-mode",
        "-p",
        help=f"One of: {', '.join(PROVIDER_MODES)}"
    ),
    api_base_url: Optional[str] = typer.Option(
        None,
        "--api-base-url",
        "-u",
        help="OpenAI-compatible base URL"
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name"
    ),
):
    """Update provider settings; omitted options keep their current value."""
    try:
        optimizer = get_optimizer()
        current = optimizer.get_settings()
        optimizer.set_settings(Settings(
            provider_mode=provider_mode or current.provider_mode,
            api_base_url=api_base_url if api_base_url is not None else current.api_base_url,
            model=model if model is not None else current.model,
        ))
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        console.print("[green]✓[/] Settings saved")


@history_app.command("list")
def history_list():
    """Show past optimizations, newest first."""
    try:
        items = get_optimizer().get_history()
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        if not items:
            console.print("[dim]No history yet.[/]")
            return
        table = Table(title="History")
        table.add_column("When")
        table.add_column("Category")
        table.add_column("Style")
        table.add_column("Original")
        table.add_column("Optimized")
        for item in items:
            table.add_row(
                datetime.fromtimestamp(item.timestamp).strftime("%Y-%m-%d %H:%M"),
                escape(item.category),
                escape(item.style),
                escape(item.original_preview),
                escape(item.optimized_preview),
            )
        console.print(table)


@history_app.command("clear")
def history_clear():
    """Delete all history entries."""
    try:
        get_optimizer().clear_history()
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        console.print("[green]✓[/] History cleared")


@key_app.command("status")
def key_status():
    """Report whether an API key is available."""
    try:
        present = get_optimizer().has_api_key()
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        if present:
            console.print("[green]✓[/] API key is set")
        else:
            console.print("[yellow]No API key found[/]")


@key_app.command("set")
def key_set(
    value: str = typer.Option(
        ...,
        "--value",
        prompt=True,
        hide_input=True,
        help="API key to store in the OS secure store"
    ),
):
    """Store the API key in the OS secure store."""
    try:
        get_optimizer().set_api_key(value)
    except HANDLED_ERRORS as e:
        _fail(e)
    else:
        console.print("[green]✓[/] API key saved")


if __name__ == "__main__":
    app()
