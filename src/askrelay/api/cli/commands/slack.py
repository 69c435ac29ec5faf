"""Slack setup commands: list channels, verify the token, test posting."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from askrelay.api.cli.commands.config import require_config
from askrelay.core.domain.config import RelayConfig
from askrelay.core.domain.errors import ConfigError, DeliveryError
from askrelay.infrastructure.communication.message_builder import (
    build_success_message,
)
from askrelay.infrastructure.communication.slack_gateway import SlackChatGateway

console = Console()


def _load_config() -> RelayConfig:
    try:
        return require_config()
    except ConfigError as exc:
        console.print(
            f"[red]{exc.message}.[/red] "
            "Run [bold]askrelay config set --token ... --channel ...[/bold] first."
        )
        raise typer.Exit(1)


def list_channels() -> None:
    """List channels the bot can see."""
    config = _load_config()

    async def _fetch():
        async with SlackChatGateway(config.bot_token) as gateway:
            return await gateway.list_channels()

    try:
        channels = asyncio.run(_fetch())
    except DeliveryError as exc:
        console.print(f"[red]Could not list channels:[/red] {exc.message}")
        raise typer.Exit(1)

    table = Table(title="Channels")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Visibility", style="magenta")
    for channel in channels:
        marker = " (configured)" if channel.id == config.channel_id else ""
        table.add_row(channel.id, f"#{channel.name}{marker}", channel.visibility.value)
    console.print(table)


def verify() -> None:
    """Check that the configured bot token is accepted."""
    config = _load_config()

    async def _verify():
        async with SlackChatGateway(config.bot_token) as gateway:
            return await gateway.verify_identity()

    try:
        identity = asyncio.run(_verify())
    except DeliveryError as exc:
        console.print(f"[red]Token rejected:[/red] {exc.message}")
        raise typer.Exit(1)

    console.print("[green]Token is valid[/green]")
    console.print(f"  user: {identity.user_id}")
    if identity.bot_id:
        console.print(f"  bot:  {identity.bot_id}")
    if identity.team:
        console.print(f"  team: {identity.team} ({identity.team_id})")


def test_connection() -> None:
    """Post a test message to the configured channel."""
    config = _load_config()

    async def _post():
        async with SlackChatGateway(config.bot_token) as gateway:
            return await gateway.post_message(
                config.channel_id,
                build_success_message("askrelay connection successful!"),
            )

    try:
        ts = asyncio.run(_post())
    except DeliveryError as exc:
        console.print(f"[red]Test message failed:[/red] {exc.message}")
        raise typer.Exit(1)

    console.print(f"[green]Test message posted[/green] (ts: {ts})")
