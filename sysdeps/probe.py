"""Probe every declared dependency and collect the results.

Each dependency is resolved independently: a failure for one never stops the
others from being probed, so a single run reports every unmet requirement.
Only a broken discovery tool (ToolInvocationFailed) or an unparsable reported
version (InvalidVersion) aborts the run.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple

from . import config
from .cli_logger import logger
from .errors import (
    BuildInternalFailed,
    InvalidOverride,
    InvalidVersion,
    NotFound,
    ProbeFailed,
    SysDepsError,
    VersionTooLow,
)
from .features import Disabled, Required, features_from_env, resolve
from .library import Library, INTERNAL, OVERRIDE
from .metadata import RequirementSpec, load_specs
from .utils.pkg_config import PkgConfig
from .version import Version

DISABLED = "disabled"
OPTIONAL = "optional"

BUILD_NEVER = "never"
BUILD_AUTO = "auto"
BUILD_ALWAYS = "always"
BUILD_INTERNAL_MODES = (BUILD_NEVER, BUILD_AUTO, BUILD_ALWAYS)

COLLECTED_ERRORS = (InvalidOverride, NotFound, VersionTooLow, BuildInternalFailed)


@dataclass(frozen=True)
class Found:
    key: str
    library: Library
    env_override_name: str
    requirement: Optional[Required] = None
    rerun_env_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Skipped:
    key: str
    reason: str
    detail: str = ""


@dataclass(frozen=True)
class Failed:
    key: str
    error: SysDepsError


@dataclass
class AggregateResult:
    outcomes: List[object]

    @property
    def failures(self) -> List[SysDepsError]:
        return [outcome.error for outcome in self.outcomes if isinstance(outcome, Failed)]

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def found(self) -> List[Found]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, Found)]

    @property
    def skipped(self) -> List[Skipped]:
        return [outcome for outcome in self.outcomes if isinstance(outcome, Skipped)]

    @property
    def libraries(self) -> Dict[str, Library]:
        return {outcome.key: outcome.library for outcome in self.found}

    def raise_for_failures(self):
        if not self.ok:
            raise ProbeFailed(self.failures)
        return self


def _build_internal_mode(spec, env):
    raw = env.get(spec.build_internal_env_name)
    if raw is None:
        raw = env.get(config.BUILD_INTERNAL_ENV)
    if raw is None or raw == "":
        return BUILD_NEVER
    mode = raw.strip().lower()
    if mode not in BUILD_INTERNAL_MODES:
        raise InvalidOverride(spec.toml_key, raw, f"expected one of {', '.join(BUILD_INTERNAL_MODES)}")
    return mode


def _reported_version(key, library):
    if library.version is None:
        raise InvalidVersion("", f"'{library.name}' reported no version", dependency=key)
    try:
        return Version.parse(library.version)
    except InvalidVersion as e:
        raise InvalidVersion(e.text, e.reason, dependency=key) from None


def _check_version(key, requirement, library):
    found = _reported_version(key, library)
    if found < requirement.min_version:
        raise VersionTooLow(key, str(requirement.min_version), str(found))
    return library


def _query(requirement, tool):
    library = tool.query(requirement.lookup_name)
    if library is None:
        raise NotFound(requirement.key, requirement.lookup_name)
    return _check_version(requirement.key, requirement, library)


def _build_internal(requirement, builder):
    key = requirement.key
    if builder is None:
        raise BuildInternalFailed(key, "no builder registered")
    logger.info(f"Building {key} internally (version {requirement.min_version} or newer required)...")
    try:
        library = builder(requirement.lookup_name, str(requirement.min_version))
    except SysDepsError:
        raise
    except Exception as e:
        raise BuildInternalFailed(key, f"{type(e).__name__}: {e}") from e
    if not isinstance(library, Library):
        raise BuildInternalFailed(key, f"builder returned {type(library).__name__}, expected Library")
    library.source = INTERNAL
    return _check_version(key, requirement, library)


def _split_paths(value):
    return [path for path in value.split(os.pathsep) if path]


FIELD_OVERRIDES = (
    (config.SEARCH_NATIVE_SUFFIX, "lib_paths", _split_paths),
    (config.LIB_SUFFIX, "libs", str.split),
    (config.INCLUDE_SUFFIX, "include_paths", _split_paths),
)


def _apply_field_overrides(spec, library, env):
    """Replace single fields of ``library`` from SYSDEPS_<KEY>_SEARCH_NATIVE, _LIB and _INCLUDE.

    A variable that is set but empty clears the field.
    """
    changes = {}
    for suffix, attribute, split in FIELD_OVERRIDES:
        name = spec.env_name(suffix)
        raw = env.get(name)
        if raw is not None:
            logger.debug(f"{spec.toml_key}: {attribute} taken from {name}")
            changes[attribute] = split(raw)
    return replace(library, **changes) if changes else library


def _without_pkg_config(spec, requirement, env, raw):
    library = _apply_field_overrides(spec, Library(name=requirement.lookup_name, source=OVERRIDE), env)
    if not library.libs:
        lib_name = spec.env_name(config.LIB_SUFFIX)
        raise InvalidOverride(spec.toml_key, raw, f"define at least one lib using {lib_name}")
    return library


def _discover(spec, requirement, env, tool, builder):
    mode = _build_internal_mode(spec, env)
    if mode == BUILD_ALWAYS:
        return _build_internal(requirement, builder)
    try:
        return _query(requirement, tool)
    except (NotFound, VersionTooLow) as e:
        if mode == BUILD_AUTO and builder is not None:
            logger.info(f"{e}; falling back to an internal build.")
            return _build_internal(requirement, builder)
        raise


def _locate(spec, requirement, env, tool, builder):
    raw = env.get(spec.env_override_name)
    if raw is not None:
        try:
            library = Library.from_flags(requirement.lookup_name, raw, source=OVERRIDE)
        except ValueError as e:
            raise InvalidOverride(spec.toml_key, raw, str(e)) from None
        logger.debug(f"{spec.toml_key}: using flags from {spec.env_override_name}")
        return library

    no_pkg_config = env.get(spec.env_name(config.NO_PKG_CONFIG_SUFFIX))
    if no_pkg_config:
        return _without_pkg_config(spec, requirement, env, no_pkg_config)

    library = _discover(spec, requirement, env, tool, builder)
    return _apply_field_overrides(spec, library, env)


def probe_one(spec: RequirementSpec, enabled_features, env=None, tool=None, builders=None):
    """Probe a single dependency and return its Found, Skipped or Failed outcome."""
    env = os.environ if env is None else env
    builders = builders or {}
    if tool is None:
        tool = PkgConfig(command=config.get_pkg_config_command(env))

    requirement = resolve(spec, enabled_features)
    if isinstance(requirement, Disabled):
        logger.debug(f"{spec.toml_key}: skipped, feature '{requirement.feature}' is not enabled")
        return Skipped(spec.toml_key, DISABLED, f"feature '{requirement.feature}' is not enabled")

    try:
        library = _locate(spec, requirement, env, tool, builders.get(spec.toml_key))
    except COLLECTED_ERRORS as e:
        if requirement.optional and isinstance(e, (NotFound, VersionTooLow)):
            logger.warning(f"{e} (optional, skipping)")
            return Skipped(spec.toml_key, OPTIONAL, str(e))
        return Failed(spec.toml_key, e)

    version = f" {library.version}" if library.version else ""
    logger.info(f"Found {spec.toml_key}{version} ({library.source})")
    return Found(spec.toml_key, library, spec.env_override_name, requirement, spec.rerun_env_names)


def probe_all(specs, enabled_features=(), env=None, tool=None, builders=None, max_workers=None):
    """Probe every spec and aggregate the outcomes in declaration order.

    With ``max_workers`` greater than one the discovery tool is queried from a
    thread pool; the order of the returned outcomes is unaffected.
    """
    specs = list(specs)
    enabled = frozenset(enabled_features)
    env = os.environ if env is None else env
    if tool is None:
        tool = PkgConfig(command=config.get_pkg_config_command(env))

    if max_workers and max_workers > 1 and len(specs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(probe_one, spec, enabled, env, tool, builders) for spec in specs]
            outcomes = [future.result() for future in futures]
    else:
        outcomes = [probe_one(spec, enabled, env, tool, builders) for spec in specs]

    return AggregateResult(outcomes)


def probe_manifest(path=".", features=None, env=None, tool=None, builders=None, max_workers=None):
    """Load the manifest at ``path`` and probe its dependencies.

    Features default to those enabled through ``SYSDEPS_FEATURE_*`` variables.
    Raises ProbeFailed listing every failure when any dependency is unmet.
    """
    env = os.environ if env is None else env
    specs = load_specs(path)
    if features is None:
        features = features_from_env(env)
    if max_workers is None:
        max_workers = config.get_jobs(env)
    return probe_all(specs, features, env=env, tool=tool, builders=builders, max_workers=max_workers).raise_for_failures()
