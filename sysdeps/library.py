"""The compiler/linker flag bundle found for one dependency."""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Optional

PKG_CONFIG = "pkg-config"
OVERRIDE = "override"
INTERNAL = "internal"


@dataclass
class Library:
    name: str
    version: Optional[str] = None
    include_paths: List[str] = field(default_factory=list)
    lib_paths: List[str] = field(default_factory=list)
    libs: List[str] = field(default_factory=list)
    defines: Dict[str, Optional[str]] = field(default_factory=dict)
    rerun_files: List[str] = field(default_factory=list)
    source: str = PKG_CONFIG

    @classmethod
    def from_flags(cls, name, text, version=None, source=PKG_CONFIG, strict=True):
        library = cls(name=name, version=version, source=source)
        parse_flags(text, library, strict=strict)
        return library


def _split_define(payload):
    if "=" in payload:
        define, value = payload.split("=", 1)
        return define, value
    return payload, None


def parse_flags(text, library, strict=True):
    """Classify ``-I``/``-L``/``-l``/``-D`` tokens of a flag string into ``library``.

    Tokens may be joined to their marker (``-I/usr/include``) or follow it as a
    separate word (``-I /usr/include``). With ``strict`` any other token raises
    ValueError; otherwise it is ignored, as pkg-config may report flags such as
    ``-pthread`` that have no directive. Tool output that is not valid shell
    quoting (``-I/opt/o'neil/include``) is then split on whitespace instead.
    """
    try:
        tokens = shlex.split(text or "")
    except ValueError as e:
        if strict:
            raise ValueError(f"cannot split flags: {e}")
        tokens = (text or "").split()

    targets = {
        "-I": library.include_paths,
        "-L": library.lib_paths,
        "-l": library.libs,
    }

    i = 0
    while i < len(tokens):
        token = tokens[i]
        marker, payload = token[:2], token[2:]
        if marker in targets or marker == "-D":
            if not payload:
                if i + 1 < len(tokens) and not tokens[i + 1].startswith("-"):
                    i += 1
                    payload = tokens[i]
                elif strict:
                    raise ValueError(f"'{marker}' is missing its value")
                else:
                    i += 1
                    continue
            if marker == "-D":
                define, value = _split_define(payload)
                if not define:
                    if strict:
                        raise ValueError(f"define '{token}' has no name")
                else:
                    library.defines.setdefault(define, value)
            else:
                values = targets[marker]
                if payload not in values:
                    values.append(payload)
        elif strict:
            raise ValueError(f"unrecognized token '{token}'")
        i += 1
    return library
