import click
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..features import Disabled, resolve
from ._common import feature_option, load_project

@click.command()
@click.pass_context
@feature_option
@handle_exceptions
def show(ctx, features):
    """List the declared system dependencies and the version each one requires."""
    specs, enabled = load_project(ctx, features)
    if not specs:
        logger.info("No system dependencies declared.")
        return

    for spec in specs:
        requirement = resolve(spec, enabled)
        if isinstance(requirement, Disabled):
            click.echo(f"{spec.toml_key}: disabled (feature '{requirement.feature}' not enabled)")
            continue
        line = f"{spec.toml_key}: {requirement.lookup_name} >= {requirement.min_version}"
        if requirement.feature:
            line += f" (from feature '{requirement.feature}')"
        if requirement.optional:
            line += " [optional]"
        click.echo(line)
        click.echo(f"  override: {spec.env_override_name}")
