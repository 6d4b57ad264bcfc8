"""CLI commands for bitbridge.

`serve` is the main entry point: it listens for the game's Remote API and runs
the interactive menu for each connection. `config` manages ~/.bitbridge/config.json.
"""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console

from bitbridge import __logo__, __version__
from bitbridge.cli.shared.logging_utils import configure_logging

app = typer.Typer(
    name="bitbridge",
    help=f"{__logo__} bitbridge - sync local scripts with Bitburner",
    no_args_is_help=True,
)
config_app = typer.Typer(help="Manage configuration")
app.add_typer(config_app, name="config")

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} bitbridge v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """bitbridge - sync local scripts with Bitburner."""
    pass


def _load(config_file: Path | None):
    from bitbridge.config.loader import load_config

    try:
        return load_config(config_file)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


# ============================================================================
# Serve
# ============================================================================


@app.command()
def serve(
    host: str = typer.Option(None, "--host", "-h", help="Bind host (default from config: 127.0.0.1)"),
    port: int = typer.Option(None, "--port", "-p", help="WebSocket port the game connects to"),
    root: Path = typer.Option(None, "--root", "-r", help="Project root holding the scripts to push"),
    single_shot: bool = typer.Option(
        None, "--single-shot/--keep-serving", help="Stop after the first connection closes"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    config_file: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Wait for the game to connect, then sync files from the interactive menu."""
    from bitbridge.bridge.session import BridgeSession
    from bitbridge.cli.menu import prompt_select
    from bitbridge.cli.render import ConsoleReporter
    from bitbridge.server import BridgeServer, is_port_in_use

    config = _load(config_file)
    if host:
        config.server.host = host
    if port:
        config.server.port = port
    if root:
        config.sync.project_root = str(root)
    if single_shot is not None:
        config.server.single_shot = single_shot

    level = "DEBUG" if verbose else config.logging.level
    log_path = configure_logging("serve", level=level, to_file=config.logging.file)

    host, port = config.server.host, config.server.port
    if is_port_in_use(host, port):
        console.print(
            f"[red]Port {port} is already in use.[/red] "
            f"Close the process using it, or pass [cyan]--port[/cyan] (current: {host}:{port})."
        )
        raise typer.Exit(1)

    project_root = config.sync.root_path
    if not project_root.is_dir():
        console.print(f"[red]Project root {project_root} is not a directory.[/red]")
        raise typer.Exit(1)

    reporter = ConsoleReporter(console, config.sync.definitions_file)

    def _session_for(connection, peer) -> BridgeSession:
        return BridgeSession(
            connection,
            sync=config.sync,
            prompt_select=prompt_select,
            reporter=reporter,
            on_error=reporter.report_error,
            peer=peer,
        )

    server = BridgeServer(config.server, _session_for)

    console.print(f"{__logo__} Listening on ws://{host}:{port}, pushing from {project_root}")
    if log_path:
        console.print(f"[dim]Logs: {log_path}[/dim]")
    console.print("[dim]Enable the Remote API in the game's options to connect.[/dim]")
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        pass
    console.print("Goodbye!")


# ============================================================================
# Config
# ============================================================================


@config_app.command("show")
def config_show(
    config_file: Path = typer.Option(None, "--config", "-c", help="Config file path"),
):
    """Print the effective configuration (file + environment)."""
    from bitbridge.config.loader import convert_to_camel

    config = _load(config_file)
    console.print_json(json.dumps(convert_to_camel(config.model_dump())))


@config_app.command("init")
def config_init(
    config_file: Path = typer.Option(None, "--config", "-c", help="Config file path"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Write a config file with default values."""
    from bitbridge.config.loader import get_config_path, save_config
    from bitbridge.config.schema import Config

    path = config_file or get_config_path()
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)
    save_config(Config.defaults(), path)
    console.print(f"[green]✓[/green] Created config at {path}")


if __name__ == "__main__":
    app()
