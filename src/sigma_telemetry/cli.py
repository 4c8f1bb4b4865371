"""
Command Line Interface

Entry point for inspecting configuration, probing the Ryzanstein runtime
and serving the telemetry status API.
"""

import logging
import os

import click
import uvicorn

from .api import create_app
from .config import TelemetryConfig
from .errors import ConfigurationError
from .integration import RyzansteinClient
from .telemetry import TelemetryCore


logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure root logging from LOG_LEVEL."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@click.group()
@click.option("--env-file", default=None, help="Path to a .env file")
@click.pass_context
def main(ctx: click.Context, env_file: str):
    """sigma-telemetry: observability for the Ryzanstein runtime."""
    setup_logging()
    try:
        ctx.obj = TelemetryConfig.from_env(env_file)
    except ConfigurationError as e:
        click.echo(str(e), err=True)
        ctx.exit(2)


@main.command()
@click.pass_obj
def config(config: TelemetryConfig):
    """Print the resolved configuration as JSON."""
    click.echo(config.model_dump_json(indent=2))


@main.command()
@click.option("--timeout", default=5.0, help="Request timeout in seconds")
@click.pass_obj
def health(config: TelemetryConfig, timeout: float):
    """Probe the Ryzanstein runtime and print its health."""
    status = RyzansteinClient(config, timeout=timeout).health_check()
    click.echo(status.model_dump_json(indent=2))


@main.command()
@click.option("--host", default="0.0.0.0", help="Bind address")
@click.option("--port", default=9464, help="Bind port")
@click.pass_obj
def serve(config: TelemetryConfig, host: str, port: int):
    """Serve the telemetry status API."""
    app = create_app(TelemetryCore(config), RyzansteinClient(config))
    logger.info(f"Serving telemetry API for '{config.service_name}' on {host}:{port}")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
