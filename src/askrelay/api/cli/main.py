"""askrelay CLI entry point."""

import typer
from rich.console import Console

from askrelay.api.cli.commands import config, hook, slack

app = typer.Typer(
    name="askrelay",
    help="askrelay - answer your agent's questions from Slack",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.command("hook")(hook.run_hook)
app.add_typer(config.app, name="config", help="Configuration management")
app.command("channels")(slack.list_channels)
app.command("verify")(slack.verify)
app.command("test")(slack.test_connection)


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """askrelay CLI."""
    ctx.obj = {"debug": debug}


@app.command()
def version():
    """Show askrelay version."""
    from askrelay import __version__

    console.print(f"[bold blue]Version:[/bold blue] [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
