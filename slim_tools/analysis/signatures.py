"""Parameter lists of documented Eidos signatures.

Signatures look like ``(void)setValue(is$ key, * value)`` or
``addSubpop(is$ id, integer$ size, [float$ sexRatio = 0.5])``. Types may be
generic (``object<Subpopulation>``), singleton (trailing ``$``) or nullable
(leading ``N``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from . import patterns


@dataclass(frozen=True)
class Parameter:
    name: Optional[str]
    type: str
    optional: bool = False
    default: Optional[str] = None


def base_type(type_name: str) -> str:
    return type_name.rstrip("$")


def is_nullable_type(type_name: str) -> bool:
    """``Ni``, ``No<Subpopulation>$``, ``Nif`` ... are nullable, and so is ``*``."""
    if not type_name:
        return False
    if type_name.startswith("*"):
        return True
    base = base_type(type_name)
    return bool(patterns.NULLABLE_TYPE.match(base) or patterns.NULLABLE_OBJECT_TYPE.match(base))


def _split_parameters(params: str) -> list[str]:
    # Commas inside generics do not separate parameters.
    parts = []
    current = []
    depth = 0
    for char in params:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return parts


def extract_parameter_types(signature: str) -> list[Parameter]:
    if not signature:
        return []
    m = patterns.PARAMETER_LIST.search(signature)
    if not m or not m.group(1).strip():
        return []

    result = []
    for part in _split_parameters(m.group(1)):
        optional = patterns.OPTIONAL_PARAMETER.match(part)
        content = optional.group(1).strip() if optional else part

        typed = patterns.TYPE_NAME_PARAM.match(content)
        if typed:
            default = typed.group(3).strip() if typed.group(3) else None
            result.append(Parameter(typed.group(2), typed.group(1), bool(optional), default))
            continue
        bare = patterns.TYPE_ONLY.match(content)
        if bare:
            result.append(Parameter(None, bare.group(1), bool(optional)))
        elif content:
            # "* value" and other untyped forms still hold their position.
            words = content.split()
            result.append(Parameter(words[1] if len(words) > 1 else None, words[0], bool(optional)))
    return result
