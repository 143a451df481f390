import click
from .. import metadata
from ..features import features_from_env

feature_option = click.option(
    "--feature", "-f", "features", multiple=True,
    help="Enable a build feature (repeatable). SYSDEPS_FEATURE_<NAME> variables are honoured as well.",
)


def load_project(ctx, features):
    """Return the parsed requirement specs and the enabled feature set for a command."""
    specs = metadata.load_specs(ctx.obj["path"])
    enabled = set(features) | features_from_env()
    return specs, enabled
