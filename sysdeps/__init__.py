from .errors import (
    SysDepsError,
    InvalidVersion,
    InvalidSpec,
    ManifestError,
    InvalidOverride,
    NotFound,
    VersionTooLow,
    BuildInternalFailed,
    ToolInvocationFailed,
    ProbeFailed,
)
from .version import Version, Ordering, compare
from .metadata import RequirementSpec, FeatureOverride, parse_spec, parse_specs, load_specs
from .features import Disabled, Required, resolve, features_from_env
from .library import Library, parse_flags
from .probe import AggregateResult, Found, Skipped, Failed, probe_all, probe_manifest, probe_one
from .directives import Directive, DirectiveKind, emit, render_lines
from .utils.pkg_config import DiscoveryTool, PkgConfig
