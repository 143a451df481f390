from .command_executor import run_shell_command
from .pkg_config import DiscoveryTool, PkgConfig
