import click
import json
import sys
from .. import config
from ..cli_logger import logger
from ..decorators import handle_exceptions
from ..directives import DEFAULT_PREFIX, emit
from ..probe import probe_all
from ._common import feature_option, load_project

@click.command()
@click.pass_context
@feature_option
@click.option("--jobs", "-j", type=int, default=None, help="Probe up to N dependencies in parallel.")
@click.option("--prefix", default=DEFAULT_PREFIX, show_default=True, help="Prefix of every printed directive.")
@click.option("--format", "output_format", type=click.Choice(["lines", "json"]), default="lines", show_default=True,
              help="Print directives as prefixed lines or as a JSON list.")
@handle_exceptions
def probe(ctx, features, jobs, prefix, output_format):
    """Resolve the declared system dependencies and print build directives.

    Directives go to stdout, one per line; log messages go to stderr.
    """
    # stdout is reserved for directives
    previous_stream = logger.out_stream
    logger.out_stream = sys.stderr
    try:
        specs, enabled = load_project(ctx, features)
        result = probe_all(specs, enabled, max_workers=jobs or config.get_jobs())
    finally:
        logger.out_stream = previous_stream
    result.raise_for_failures()

    directives = emit(result)
    if output_format == "json":
        click.echo(json.dumps([d.to_dict() for d in directives], indent=2))
    else:
        for directive in directives:
            click.echo(directive.render(prefix))
