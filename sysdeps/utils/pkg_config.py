import os
from abc import ABC, abstractmethod

from .. import config
from ..cli_logger import logger
from ..errors import ToolInvocationFailed
from ..library import Library, PKG_CONFIG
from .command_executor import run_shell_command, NOT_RUN


class DiscoveryTool(ABC):
    """Looks up an installed system library by name."""

    @abstractmethod
    def query(self, name):
        """Return a Library for ``name``, or None when it is not installed.

        Raises ToolInvocationFailed when the tool itself cannot be run.
        """


class PkgConfig(DiscoveryTool):
    def __init__(self, command=None, env=None):
        self.command = command or config.get_pkg_config_command()
        self.env = env

    def _run(self, *args):
        cmd = [self.command, *args]
        stdout, stderr, returncode = run_shell_command(cmd, env=self.env)
        if returncode == NOT_RUN:
            raise ToolInvocationFailed(" ".join(cmd), stderr.strip() or "could not be started")
        return stdout.strip(), stderr.strip(), returncode

    def query(self, name):
        version, stderr, returncode = self._run("--modversion", name)
        if returncode != 0:
            logger.debug(f"{self.command} could not find '{name}': {stderr or 'exit status ' + str(returncode)}")
            return None

        flags, stderr, returncode = self._run("--cflags", "--libs", name)
        if returncode != 0:
            logger.warning(f"{self.command} found '{name}' but could not report its flags: {stderr}")
            return None

        library = Library.from_flags(name, flags, version=version, source=PKG_CONFIG, strict=False)

        pc_dir, _, returncode = self._run("--variable=pcfiledir", name)
        if returncode == 0 and pc_dir:
            library.rerun_files.append(os.path.join(pc_dir, f"{name}.pc"))
        return library
