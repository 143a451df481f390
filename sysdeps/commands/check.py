import click
import sys
from .. import config
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..probe import Failed, Found, Skipped, probe_all
from ._common import feature_option, load_project

@click.command()
@click.pass_context
@feature_option
@handle_exceptions
def check(ctx, features):
    """Report which system dependencies are satisfied, without printing directives."""
    specs, enabled = load_project(ctx, features)
    if not specs:
        logger.info("No system dependencies declared.")
        return

    logger.info(f"Checking {len(specs)} system dependencies...")
    result = probe_all(specs, enabled, max_workers=config.get_jobs())

    for outcome in result.outcomes:
        if isinstance(outcome, Found):
            library = outcome.library
            version = library.version or "override"
            logger.step_info(f"{outcome.key}: found {version} ({library.source})", indent=2)
        elif isinstance(outcome, Skipped):
            logger.step_info(f"{outcome.key}: skipped ({outcome.reason}) {outcome.detail}".rstrip(), indent=2)
        elif isinstance(outcome, Failed):
            logger.error(f"  {outcome.key}: {outcome.error}")

    if result.ok:
        logger.success("All system dependencies are satisfied.")
    else:
        logger.error(f"{len(result.failures)} of {len(specs)} system dependencies are not satisfied.")
        sys.exit(1)
