"""Turn probe results into the ordered build directives printed for the build tool."""

from dataclasses import dataclass
from enum import Enum
from typing import List

from .probe import AggregateResult, Found

DEFAULT_PREFIX = "sysdeps"


class DirectiveKind(Enum):
    LINK_LIB = "link-lib"
    LINK_SEARCH = "link-search"
    INCLUDE_PATH = "include-path"
    DEFINE = "define"
    RERUN_IF_ENV_CHANGED = "rerun-if-env-changed"
    RERUN_IF_FILE_CHANGED = "rerun-if-file-changed"


@dataclass(frozen=True)
class Directive:
    kind: DirectiveKind
    payload: str

    def render(self, prefix=DEFAULT_PREFIX):
        return f"{prefix}:{self.kind.value}={self.payload}"

    def to_dict(self):
        return {"kind": self.kind.value, "payload": self.payload}


def _define_payload(name, value):
    return name if value is None else f"{name}={value}"


def _library_directives(found):
    library = found.library
    for path in library.lib_paths:
        yield Directive(DirectiveKind.LINK_SEARCH, path)
    for lib in library.libs:
        yield Directive(DirectiveKind.LINK_LIB, lib)
    for path in library.include_paths:
        yield Directive(DirectiveKind.INCLUDE_PATH, path)
    for name, value in library.defines.items():
        yield Directive(DirectiveKind.DEFINE, _define_payload(name, value))
    for name in found.rerun_env_names or (found.env_override_name,):
        yield Directive(DirectiveKind.RERUN_IF_ENV_CHANGED, name)
    for path in library.rerun_files:
        yield Directive(DirectiveKind.RERUN_IF_FILE_CHANGED, path)


def emit(result) -> List[Directive]:
    """Build the directive list for every found dependency, first occurrence wins.

    ``result`` is a successful AggregateResult or an iterable of outcomes.
    """
    if isinstance(result, AggregateResult):
        if not result.ok:
            raise ValueError("cannot emit directives for a failed probe; call raise_for_failures() first")
        outcomes = result.outcomes
    else:
        outcomes = result

    seen = set()
    directives = []
    for outcome in outcomes:
        if not isinstance(outcome, Found):
            continue
        for directive in _library_directives(outcome):
            if directive in seen:
                continue
            seen.add(directive)
            directives.append(directive)
    return directives


def render_lines(directives, prefix=DEFAULT_PREFIX):
    return "\n".join(directive.render(prefix) for directive in directives)
