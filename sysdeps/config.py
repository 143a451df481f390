import os
import re
import toml
from .cli_logger import logger
from .errors import ManifestError

MANIFEST_FILE = "pyproject.toml"
METADATA_SECTION = ("tool", "system-deps")
ENV_PREFIX = "SYSDEPS_"
FEATURE_ENV_PREFIX = f"{ENV_PREFIX}FEATURE_"
BUILD_INTERNAL_ENV = f"{ENV_PREFIX}BUILD_INTERNAL"
JOBS_ENV = f"{ENV_PREFIX}JOBS"
PKG_CONFIG_ENV = "PKG_CONFIG"
DEFAULT_PKG_CONFIG = "pkg-config"

# Per-dependency variable suffixes: SYSDEPS_<KEY>_<SUFFIX>
FLAGS_SUFFIX = "FLAGS"
BUILD_INTERNAL_SUFFIX = "BUILD_INTERNAL"
SEARCH_NATIVE_SUFFIX = "SEARCH_NATIVE"
LIB_SUFFIX = "LIB"
INCLUDE_SUFFIX = "INCLUDE"
NO_PKG_CONFIG_SUFFIX = "NO_PKG_CONFIG"


def env_var_name(key, suffix=None):
    """Derive the environment variable name used for a dependency key.

    ``env_var_name("gtk+-3.0", "FLAGS")`` gives ``SYSDEPS_GTK__3_0_FLAGS``.
    """
    name = ENV_PREFIX + re.sub(r"[^A-Za-z0-9]", "_", key).upper()
    if suffix:
        name += f"_{suffix}"
    return name


def manifest_path(path="."):
    if os.path.isdir(path):
        return os.path.join(path, MANIFEST_FILE)
    return path


def load_manifest(path="."):
    """Read and decode the project manifest, raising ManifestError on failure."""
    config_path = manifest_path(path)
    logger.debug(f"Loading manifest from {config_path}")
    try:
        with open(config_path, "r") as f:
            return toml.load(f)
    except FileNotFoundError:
        raise ManifestError(f"error opening {config_path}: file not found")
    except toml.TomlDecodeError as e:
        raise ManifestError(f"error parsing TOML from {config_path}: {e}")
    except IOError as e:
        raise ManifestError(f"error reading {config_path}: {e}")


def get_metadata_table(manifest, source=MANIFEST_FILE):
    """Return the raw ``[tool.system-deps]`` mapping of a decoded manifest."""
    key = ".".join(METADATA_SECTION)
    table = manifest
    for part in METADATA_SECTION:
        if not isinstance(table, dict) or part not in table:
            raise ManifestError(f"no {key} in {source}")
        table = table[part]
    if not isinstance(table, dict):
        raise ManifestError(f"{key} not a table in {source}")
    return table


def get_jobs(env=None):
    env = os.environ if env is None else env
    raw = env.get(JOBS_ENV)
    if not raw:
        return None
    try:
        jobs = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {JOBS_ENV}={raw!r}: not an integer.")
        return None
    return jobs if jobs > 0 else None


def get_pkg_config_command(env=None):
    env = os.environ if env is None else env
    return env.get(PKG_CONFIG_ENV) or DEFAULT_PKG_CONFIG
