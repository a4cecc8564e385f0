"""CLI entry point for session-renamer."""

import json
import logging
import os

import click
import uvicorn

from .config import load_config


@click.group()
def main():
    """Give agent sessions short, dated titles generated by their own models."""
    pass


@main.command()
@click.option("--port", default=8765, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option("--server-url", default=None, help="Base URL of the opencode server.")
@click.option("--directory", default=None, help="Project directory (defaults to cwd).")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def serve(port: int, host: str, server_url: str | None, directory: str | None, debug: bool):
    """Start the hook server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if debug:
        logging.getLogger("session_renamer").setLevel(logging.DEBUG)
    if server_url:
        os.environ["SESSION_RENAMER_SERVER_URL"] = server_url
    if directory:
        os.environ["SESSION_RENAMER_DIRECTORY"] = os.path.abspath(directory)

    click.echo(f"Starting session-renamer on http://{host}:{port}")
    uvicorn.run("session_renamer.server:app", host=host, port=port, reload=False)


@main.command("config")
@click.option("--directory", default=".", help="Project directory to resolve config for.")
def show_config(directory: str):
    """Print the effective configuration."""
    click.echo(json.dumps(load_config(directory).to_dict(), indent=2))
