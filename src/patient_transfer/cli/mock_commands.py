"""CLI commands for the mock transfer server."""

import logging
from pathlib import Path
from typing import Optional

import click
import requests

from ..mock_server.app import run_server
from ..mock_server.config import load_config

logger = logging.getLogger(__name__)


@click.group("mock")
def mock_group() -> None:
    """Mock transfer endpoint for local testing."""
    pass


@mock_group.command("serve")
@click.option("--host", default=None, help="Host address (default from mock config)")
@click.option("--port", type=int, default=None, help="Port number (default from mock config)")
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Mock server configuration file (default: mocks/config.json)",
)
def serve(host: Optional[str], port: Optional[int], config_file: Optional[Path]) -> None:
    """Run the mock transfer server in the foreground."""
    try:
        config = load_config(config_file)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error loading mock server configuration: {e}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(
        f"Mock transfer endpoint: http://{host or config.host}:{port or config.http_port}"
        f"{config.transfer_endpoint}"
    )
    run_server(host=host, port=port, config=config)


@mock_group.command("health")
@click.option("--url", default="http://localhost:8080", help="Mock server base URL")
@click.option("--timeout", type=int, default=5, help="Request timeout in seconds")
def health(url: str, timeout: int) -> None:
    """Check whether the mock server is up."""
    try:
        response = requests.get(f"{url.rstrip('/')}/health", timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        click.echo(click.style("✗", fg="red", bold=True) + f" Mock server not reachable: {e}")
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Mock server is healthy")
    click.echo(f"  Endpoints:     {', '.join(data.get('endpoints', []))}")
    click.echo(f"  Request count: {data.get('request_count', 0)}")
