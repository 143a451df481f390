from .probe import probe
from .check import check
from .show import show
from .log import log
from .version import version

__all__ = ["probe", "check", "show", "log", "version"]
