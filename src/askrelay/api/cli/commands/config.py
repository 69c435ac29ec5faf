"""Config command - inspect and edit the relay configuration."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from askrelay.core.domain.config import RelayConfig
from askrelay.core.domain.errors import ConfigError
from askrelay.infrastructure.persistence.config_store import (
    get_config_path,
    read_config,
    update_config,
)

app = typer.Typer(help="Configuration management")
console = Console()


@app.command("path")
def show_path():
    """Print the configuration file location."""
    console.print(str(get_config_path()))


@app.command("show")
def show_config():
    """Show the active configuration (token masked)."""
    config = read_config()
    if config is None:
        console.print(
            f"[yellow]No usable configuration at {get_config_path()}[/yellow]"
        )
        raise typer.Exit(1)

    table = Table(title="Slack relay configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("enabled", str(config.enabled))
    table.add_row("botToken", config.masked_token())
    table.add_row("channelId", config.channel_id)
    table.add_row("pollIntervalSeconds", f"{config.poll_interval_seconds:g}")
    table.add_row("timeoutMinutes", f"{config.timeout_minutes:g}")
    table.add_row("logLevel", config.log_level)
    table.add_row("sanitizeMessages", str(config.sanitize_messages))
    table.add_row("ignoreBotReplies", str(config.ignore_bot_replies))
    console.print(table)


@app.command("set")
def set_config(
    token: Optional[str] = typer.Option(None, "--token", help="Slack bot token"),
    channel: Optional[str] = typer.Option(None, "--channel", help="Channel ID"),
    poll_interval: Optional[float] = typer.Option(
        None, "--poll-interval", help="Seconds between thread checks"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Minutes to wait for an answer"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level"),
    sanitize: Optional[bool] = typer.Option(
        None, "--sanitize/--no-sanitize", help="Redact paths and tokens"
    ),
    ignore_bots: Optional[bool] = typer.Option(
        None, "--ignore-bots/--accept-bots", help="Ignore bot replies as answers"
    ),
    enabled: Optional[bool] = typer.Option(
        None, "--enable/--disable", help="Turn the relay on or off"
    ),
):
    """Update configuration values, keeping everything not given."""
    updates = {
        "botToken": token,
        "channelId": channel,
        "pollIntervalSeconds": poll_interval,
        "timeoutMinutes": timeout,
        "logLevel": log_level,
        "sanitizeMessages": sanitize,
        "ignoreBotReplies": ignore_bots,
        "enabled": enabled,
    }
    if all(value is None for value in updates.values()):
        console.print("[yellow]Nothing to update[/yellow]")
        raise typer.Exit(1)

    path = get_config_path()
    if not update_config(updates, path):
        console.print(f"[red]Could not write {path}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Configuration saved to {path}[/green]")
    config = read_config(path)
    if config is None or not config.is_usable:
        console.print(
            "[yellow]The relay stays inactive until it is enabled and both "
            "--token and --channel are set.[/yellow]"
        )


def require_config() -> RelayConfig:
    """Load the configuration for a command that needs Slack access.

    Raises:
        ConfigError: If no usable configuration exists.
    """
    path = get_config_path()
    config = read_config(path)
    if config is None:
        raise ConfigError(
            f"No usable configuration at {path}", details={"path": str(path)}
        )
    return config
