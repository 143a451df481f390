import functools
import click
import sys # Import sys for sys.exc_info()
from .cli_logger import logger
from .errors import ProbeFailed, SysDepsError

def handle_exceptions(func):
    """A decorator to handle common exceptions for CLI commands.

    Every handled error ends the process with exit status 1 so a surrounding
    build stops.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.Abort:
            logger.warning("\nCommand aborted by user.")
        except ProbeFailed as e:
            logger.error(f"{len(e.failures)} system dependenc{'y' if len(e.failures) == 1 else 'ies'} could not be resolved:")
            for failure in e.failures:
                logger.error(f"  - {failure}")
        except SysDepsError as e:
            logger.error(f"Error: {e}")
        except click.ClickException:
            raise
        except Exception as e:
            logger.error(f"\nAn unexpected error occurred: {e}")
            logger.exception(*sys.exc_info())
        sys.exit(1)
    return wrapper
