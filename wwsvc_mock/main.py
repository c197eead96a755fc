"""CLI entrypoint for the WEBSERVICE mock server."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

import typer

from .config import DEFAULT_CONFIG_PATH, ServiceContext, load_config
from .credentials import service_pass_hash
from .errors import ConfigurationError
from .logging_utils import configure_logging
from .output_config import get_log_format
from .server import WebserviceServer

app = typer.Typer(help="Serve a configurable stand-in for the WEBWARE WEBSERVICES.")


@app.command()
def serve(
    config: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="YAML, TOML or JSON configuration file. APP__* environment variables override it.",
    ),
    log_level: str = typer.Option("info", help="Log level (debug, info, warning, error)."),
    log_format: Optional[str] = typer.Option(
        None,
        "--log-format",
        help="Log output: console, plain or json. Defaults to CONSOLE_OUTPUT_FORMAT or console.",
    ),
) -> None:
    """Start the mock server and block until interrupted."""

    try:
        app_config = load_config(config)
        if app_config.server is None:
            typer.secho(
                "No server configuration found in the config file or environment variables. Exiting.",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        host, port = app_config.server.host_port()
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc

    logger = configure_logging("debug" if app_config.debug else log_level, get_log_format(log_format))
    server = WebserviceServer(ServiceContext.from_config(app_config), host=host, port=port)
    server.start()
    for line in server.console_summary():
        typer.echo(line)
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        logger.info("shutdown_requested")
    finally:
        server.stop()


@app.command("hash")
def hash_command(
    application_id: str = typer.Argument(..., help="Application id handed out on registration."),
    timestamp: str = typer.Argument(..., help="Exact WWSVC-TS header value."),
) -> None:
    """Print the WWSVC-HASH a client must send to deregister."""

    typer.echo(service_pass_hash(application_id, timestamp))


def run() -> None:
    """Console_scripts hook."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
