import click
import importlib.metadata
import sys
from ..cli_logger import logger

@click.command()
def version():
    """Print the version of sysdeps."""
    try:
        ver = importlib.metadata.version("sysdeps")
        click.echo(f"sysdeps {ver}")
    except importlib.metadata.PackageNotFoundError:
        logger.error("Error: Could not determine the version of sysdeps. Is it installed correctly?")
        sys.exit(1)
