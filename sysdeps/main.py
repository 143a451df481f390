import click
from .commands import *


@click.group()
@click.option("--path", "-p", default=".", help="Path to the project directory or its pyproject.toml.")
@click.pass_context
def cli(ctx, path):
    """sysdeps: resolve system library requirements declared in pyproject.toml."""
    ctx.obj = {"path": path}

cli.add_command(probe)
cli.add_command(check)
cli.add_command(show)
cli.add_command(log)
cli.add_command(version)

if __name__ == '__main__':
    cli()
