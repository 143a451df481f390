"""Dotted numeric versions as reported by pkg-config and declared in manifests."""

import functools
import re
from enum import Enum
from typing import Tuple

from packaging.version import Version as _Release, InvalidVersion as _InvalidRelease

from .errors import InvalidVersion

_COMPONENT_RE = re.compile(r"[0-9]+")


class Ordering(Enum):
    LESS = -1
    EQUAL = 0
    GREATER = 1


@functools.total_ordering
class Version:
    """An immutable version made of any number of integer components.

    Only plain release numbers are accepted; ordering and hashing come from
    ``packaging.version``, so missing trailing components compare as zero and
    ``1.2`` equals ``1.2.0``.
    """

    __slots__ = ("_text", "_release")

    def __init__(self, components: Tuple[int, ...], text: str = None):
        if not components:
            raise InvalidVersion(text or "", "no components")
        normalized = ".".join(str(int(c)) for c in components)
        try:
            release = _Release(normalized)
        except _InvalidRelease as e:
            raise InvalidVersion(text or normalized, str(e))
        object.__setattr__(self, "_release", release)
        object.__setattr__(self, "_text", text if text is not None else normalized)

    def __setattr__(self, name, value):
        raise AttributeError("Version is immutable")

    @classmethod
    def parse(cls, text: str) -> "Version":
        if not isinstance(text, str):
            raise InvalidVersion(repr(text), "not a string")
        stripped = text.strip()
        if not stripped:
            raise InvalidVersion(text, "empty version string")
        parts = stripped.split(".")
        for part in parts:
            if not _COMPONENT_RE.fullmatch(part):
                raise InvalidVersion(text, f"component '{part}' is not a non-negative integer")
        return cls(tuple(int(part) for part in parts), stripped)

    @property
    def components(self) -> Tuple[int, ...]:
        return self._release.release

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._release == other._release

    def __lt__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self._release < other._release

    def __hash__(self):
        return hash(self._release)

    def __str__(self):
        return self._text

    def __repr__(self):
        return f"Version('{self._text}')"


def parse(text: str) -> Version:
    return Version.parse(text)


def compare(a: Version, b: Version) -> Ordering:
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL
