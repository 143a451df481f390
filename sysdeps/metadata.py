"""Parse the ``[tool.system-deps]`` manifest table into requirement specs.

Example::

    [tool.system-deps]
    testlib = "1.2"
    testdata = { version = "4.5", feature = "use-testdata" }

    [tool.system-deps.gtk]
    name = "gtk+-3.0"
    version = "3.22"
    feature-versions = { v3_24 = "3.24", v4 = { version = "4.0", name = "gtk4" } }
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import config
from .errors import InvalidSpec, InvalidVersion
from .version import Version

SPEC_KEYS = ("version", "name", "feature", "feature-versions", "optional", "env")
OVERRIDE_KEYS = ("version", "name", "optional")


@dataclass(frozen=True)
class FeatureOverride:
    """Minimum version (and optionally name/optionality) demanded by one build feature."""
    feature: str
    version: Version
    name: Optional[str] = None
    optional: Optional[bool] = None


@dataclass(frozen=True)
class RequirementSpec:
    toml_key: str
    base_version: Version
    lookup_name: str = None
    gating_feature: Optional[str] = None
    feature_version_overrides: Dict[str, FeatureOverride] = field(default_factory=dict)
    env_override_name: str = None
    optional: bool = False

    def __post_init__(self):
        if self.lookup_name is None:
            object.__setattr__(self, "lookup_name", self.toml_key)
        if self.env_override_name is None:
            object.__setattr__(self, "env_override_name", self.env_name(config.FLAGS_SUFFIX))

    def env_name(self, suffix):
        return config.env_var_name(self.toml_key, suffix)

    @property
    def build_internal_env_name(self):
        return self.env_name(config.BUILD_INTERNAL_SUFFIX)

    @property
    def rerun_env_names(self):
        """Every variable that can change how this dependency resolves."""
        suffixes = (
            config.SEARCH_NATIVE_SUFFIX,
            config.LIB_SUFFIX,
            config.INCLUDE_SUFFIX,
            config.NO_PKG_CONFIG_SUFFIX,
            config.BUILD_INTERNAL_SUFFIX,
        )
        return (
            (self.env_override_name,)
            + tuple(self.env_name(suffix) for suffix in suffixes)
            + (config.BUILD_INTERNAL_ENV, config.PKG_CONFIG_ENV)
        )


def _type_name(value):
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "table"
    if isinstance(value, list):
        return "array"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    return type(value).__name__


def _expect(key, option, value, expected_type, type_label):
    if not isinstance(value, expected_type) or (expected_type is not bool and isinstance(value, bool)):
        raise InvalidSpec(key, f"'{option}' must be a {type_label}, got {_type_name(value)}")
    return value


def _parse_version(key, text):
    try:
        return Version.parse(text)
    except InvalidVersion as e:
        raise InvalidVersion(e.text, e.reason, dependency=f"tool.system-deps.{key}") from None


def _parse_feature_override(key, feature, value):
    if isinstance(value, str):
        return FeatureOverride(feature=feature, version=_parse_version(key, value))
    if not isinstance(value, dict):
        raise InvalidSpec(key, f"feature-versions.{feature} must be a version string or a table, got {_type_name(value)}")

    for option in value:
        if option not in OVERRIDE_KEYS:
            raise InvalidSpec(key, f"unexpected key feature-versions.{feature}.{option}")
    if "version" not in value:
        raise InvalidSpec(key, f"feature-versions.{feature} has no version")

    option_path = f"feature-versions.{feature}"
    version = _expect(key, f"{option_path}.version", value["version"], str, "string")
    name = value.get("name")
    if name is not None:
        _expect(key, f"{option_path}.name", name, str, "string")
    optional = value.get("optional")
    if optional is not None:
        _expect(key, f"{option_path}.optional", optional, bool, "boolean")
    return FeatureOverride(feature=feature, version=_parse_version(key, version), name=name, optional=optional)


def parse_spec(key, value):
    """Validate one manifest entry and build its RequirementSpec."""
    if isinstance(value, str):
        return RequirementSpec(toml_key=key, base_version=_parse_version(key, value))
    if not isinstance(value, dict):
        raise InvalidSpec(key, f"not a string or table (got {_type_name(value)})")

    for option, option_value in value.items():
        if option not in SPEC_KEYS:
            raise InvalidSpec(key, f"unexpected key '{option}' of type {_type_name(option_value)}")
    if "version" not in value:
        raise InvalidSpec(key, "no version")

    version = _expect(key, "version", value["version"], str, "string")
    name = value.get("name")
    if name is not None:
        _expect(key, "name", name, str, "string")
    feature = value.get("feature")
    if feature is not None:
        _expect(key, "feature", feature, str, "string")
    env_name = value.get("env")
    if env_name is not None:
        _expect(key, "env", env_name, str, "string")
    optional = _expect(key, "optional", value.get("optional", False), bool, "boolean")

    overrides = {}
    for feature_name, override in _expect(key, "feature-versions", value.get("feature-versions", {}), dict, "table").items():
        overrides[feature_name] = _parse_feature_override(key, feature_name, override)

    return RequirementSpec(
        toml_key=key,
        base_version=_parse_version(key, version),
        lookup_name=name,
        gating_feature=feature,
        feature_version_overrides=overrides,
        env_override_name=env_name,
        optional=optional,
    )


def parse_specs(table) -> List[RequirementSpec]:
    """Parse every entry of the system-deps table, in declaration order.

    The first malformed entry aborts parsing.
    """
    specs = []
    env_names = {}
    for key, value in table.items():
        spec = parse_spec(key, value)
        previous = env_names.get(spec.env_override_name)
        if previous is not None:
            raise InvalidSpec(key, f"override variable {spec.env_override_name} is already used by '{previous}'")
        env_names[spec.env_override_name] = key
        specs.append(spec)
    return specs


def load_specs(path="."):
    """Read the project manifest and parse its system-deps table."""
    manifest = config.load_manifest(path)
    table = config.get_metadata_table(manifest, source=config.manifest_path(path))
    return parse_specs(table)
