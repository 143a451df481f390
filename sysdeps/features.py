"""Work out which minimum version a dependency needs for the enabled build features."""

import os
import re
from dataclasses import dataclass
from typing import Optional

from . import config
from .version import Ordering, Version, compare


@dataclass(frozen=True)
class Disabled:
    """The dependency's gating feature is not enabled; it is skipped entirely."""
    key: str
    feature: str


@dataclass(frozen=True)
class Required:
    key: str
    min_version: Version
    lookup_name: str
    optional: bool = False
    # Feature whose override set min_version; None when the base version won
    feature: Optional[str] = None


def normalize_feature(name):
    return re.sub(r"[^A-Za-z0-9]", "_", name).lower()


def features_from_env(env=None):
    """Collect the features enabled through ``SYSDEPS_FEATURE_<NAME>`` variables."""
    env = os.environ if env is None else env
    prefix = config.FEATURE_ENV_PREFIX
    return {normalize_feature(var[len(prefix):]) for var in env if var.startswith(prefix) and len(var) > len(prefix)}


def _is_enabled(feature, enabled):
    return normalize_feature(feature) in enabled


def resolve(spec, enabled_features):
    """Return Disabled, or Required with the strictest minimum among the enabled features.

    The highest enabled override is found by folding in declaration order,
    where only a strictly greater version replaces the running candidate, so
    equal versions keep the earlier one. Its ``name`` and ``optional`` always
    apply; its version applies only when it is above the base version.
    """
    enabled = {normalize_feature(f) for f in enabled_features}

    if spec.gating_feature is not None and not _is_enabled(spec.gating_feature, enabled):
        return Disabled(key=spec.toml_key, feature=spec.gating_feature)

    highest = None
    for override in spec.feature_version_overrides.values():
        if not _is_enabled(override.feature, enabled):
            continue
        if highest is None or compare(override.version, highest.version) is Ordering.GREATER:
            highest = override

    min_version = spec.base_version
    feature = None
    lookup_name = spec.lookup_name
    optional = spec.optional
    if highest is not None:
        if compare(highest.version, min_version) is Ordering.GREATER:
            min_version = highest.version
            feature = highest.feature
        if highest.name is not None:
            lookup_name = highest.name
        if highest.optional is not None:
            optional = highest.optional

    return Required(
        key=spec.toml_key,
        min_version=min_version,
        lookup_name=lookup_name,
        optional=optional,
        feature=feature,
    )
