"""Read-only SLiM/Eidos documentation dataset.

The dataset is built once (usually from the JSON files shipped with the
editor extension) and passed explicitly to the tracker, the rules, hover and
completion. Every table is exposed as a read-only mapping.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from . import patterns

logger = logging.getLogger("slim-tools.documentation")

SOURCE_SLIM = "SLiM"
SOURCE_EIDOS = "Eidos"

MODE_SLIM = "slim"
MODE_EIDOS = "eidos"

DOC_FILES = {
    "slim_functions": "slim_functions.json",
    "eidos_functions": "eidos_functions.json",
    "slim_classes": "slim_classes.json",
    "eidos_classes": "eidos_classes.json",
    "slim_callbacks": "slim_callbacks.json",
    "eidos_types": "eidos_types.json",
    "eidos_operators": "eidos_operators.json",
}

_EMPTY: Mapping = MappingProxyType({})


class DocumentationError(Exception):
    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(f"{message} ({path})")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FunctionDoc:
    name: str
    signature: str  # parameter list only, return type stripped
    return_type: str = "void"
    description: str = ""
    source: str = SOURCE_SLIM


@dataclass(frozen=True)
class MethodDoc:
    name: str
    signature: str
    description: str = ""


@dataclass(frozen=True)
class PropertyDoc:
    name: str
    type: str
    description: str = ""


@dataclass(frozen=True)
class ClassDoc:
    name: str
    methods: Mapping[str, MethodDoc] = field(default_factory=lambda: _EMPTY)
    properties: Mapping[str, PropertyDoc] = field(default_factory=lambda: _EMPTY)
    constructor: Optional[str] = None
    description: str = ""
    source: str = SOURCE_SLIM

    def has_method(self, name: str) -> bool:
        return name in self.methods

    def has_property(self, name: str) -> bool:
        return name in self.properties


@dataclass(frozen=True)
class CallbackDoc:
    name: str
    signature: str
    description: str = ""
    source: str = SOURCE_SLIM


@dataclass(frozen=True)
class TypeDoc:
    name: str
    description: str = ""


@dataclass(frozen=True)
class OperatorDoc:
    symbol: str
    signature: str = ""
    description: str = ""


# ---------------------------------------------------------------------------
# Language mode
# ---------------------------------------------------------------------------

def language_mode(uri: str, language_id: Optional[str] = None) -> str:
    """``eidos`` for pure Eidos documents, ``slim`` otherwise."""
    if language_id in (MODE_SLIM, MODE_EIDOS):
        return language_id
    if uri.endswith(".eidos"):
        return MODE_EIDOS
    return MODE_SLIM


def source_available(source: Optional[str], mode: str) -> bool:
    if source == SOURCE_SLIM:
        return mode == MODE_SLIM
    return True


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class DocumentationProvider:
    def __init__(
        self,
        functions: Optional[Mapping[str, FunctionDoc]] = None,
        classes: Optional[Mapping[str, ClassDoc]] = None,
        callbacks: Optional[Mapping[str, CallbackDoc]] = None,
        types: Optional[Mapping[str, TypeDoc]] = None,
        operators: Optional[Mapping[str, OperatorDoc]] = None,
    ):
        self._functions = MappingProxyType(dict(functions or {}))
        self._classes = MappingProxyType(dict(classes or {}))
        self._callbacks = MappingProxyType(dict(callbacks or {}))
        self._types = MappingProxyType(dict(types or {}))
        self._operators = MappingProxyType(dict(operators or {}))
        self._eidos_views = {
            "functions": _filtered(self._functions, MODE_EIDOS),
            "classes": _filtered(self._classes, MODE_EIDOS),
            "callbacks": _filtered(self._callbacks, MODE_EIDOS),
        }

    def functions(self, mode: Optional[str] = None) -> Mapping[str, FunctionDoc]:
        return self._view("functions", self._functions, mode)

    def classes(self, mode: Optional[str] = None) -> Mapping[str, ClassDoc]:
        return self._view("classes", self._classes, mode)

    def callbacks(self, mode: Optional[str] = None) -> Mapping[str, CallbackDoc]:
        return self._view("callbacks", self._callbacks, mode)

    def types(self) -> Mapping[str, TypeDoc]:
        return self._types

    def operators(self) -> Mapping[str, OperatorDoc]:
        return self._operators

    def _view(self, key: str, table: Mapping, mode: Optional[str]) -> Mapping:
        # slim mode sees everything; only eidos mode hides SLiM entries
        if mode == MODE_EIDOS:
            return self._eidos_views[key]
        return table

    def __repr__(self):
        return (f"DocumentationProvider(functions={len(self._functions)}, "
                f"classes={len(self._classes)}, callbacks={len(self._callbacks)})")

    @classmethod
    def from_directory(cls, directory: str) -> DocumentationProvider:
        """Load the documentation JSON files found in ``directory``.

        Missing files are skipped; a file that is not valid JSON raises
        :class:`DocumentationError`.
        """
        raw = {key: _load_json(os.path.join(directory, name)) for key, name in DOC_FILES.items()}

        functions: dict[str, FunctionDoc] = {}
        functions.update(parse_functions(raw["slim_functions"], SOURCE_SLIM))
        functions.update(parse_functions(raw["eidos_functions"], SOURCE_EIDOS))

        classes: dict[str, ClassDoc] = {}
        classes.update(parse_classes(raw["slim_classes"], SOURCE_SLIM))
        classes.update(parse_classes(raw["eidos_classes"], SOURCE_EIDOS))

        provider = cls(
            functions=functions,
            classes=classes,
            callbacks=parse_callbacks(raw["slim_callbacks"]),
            types=parse_types(raw["eidos_types"]),
            operators=parse_operators(raw["eidos_operators"]),
        )
        logger.info("Loaded documentation from %s: %r", directory, provider)
        return provider


def _filtered(table: Mapping, mode: str) -> Mapping:
    return MappingProxyType({
        name: entry for name, entry in table.items()
        if source_available(getattr(entry, "source", None), mode)
    })


# ---------------------------------------------------------------------------
# JSON loading
# ---------------------------------------------------------------------------

def _load_json(path: str) -> Optional[dict]:
    if not os.path.exists(path):
        logger.debug("Documentation file not found: %s", path)
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DocumentationError(f"Invalid JSON: {e}", path) from e
    if not isinstance(data, dict):
        raise DocumentationError("Expected a JSON object at top level", path)
    return data


def parse_functions(data: Optional[Mapping[str, Any]], source: str) -> dict[str, FunctionDoc]:
    """Parse ``{category: {name: {signatures: [...], description}}}``."""
    result: dict[str, FunctionDoc] = {}
    for items in (data or {}).values():
        for name, info in items.items():
            signatures = info.get("signatures") or [info.get("signature", "")]
            signature = signatures[0] if signatures else ""
            m = patterns.RETURN_TYPE.match(signature)
            result[name] = FunctionDoc(
                name=name,
                signature=patterns.RETURN_TYPE.sub("", signature, count=1).strip(),
                return_type=m.group(1) if m else "void",
                description=info.get("description", ""),
                source=source,
            )
    return result


def parse_classes(data: Optional[Mapping[str, Any]], source: str) -> dict[str, ClassDoc]:
    result: dict[str, ClassDoc] = {}
    for class_name, info in (data or {}).items():
        methods = {
            name: MethodDoc(name, m.get("signature", ""), m.get("description", ""))
            for name, m in (info.get("methods") or {}).items()
        }
        properties = {
            name: PropertyDoc(name, p.get("type", ""), p.get("description", ""))
            for name, p in (info.get("properties") or {}).items()
        }
        ctor = (info.get("constructor") or {}).get("signature")
        result[class_name] = ClassDoc(
            name=class_name,
            methods=MappingProxyType(methods),
            properties=MappingProxyType(properties),
            constructor=ctor if ctor and ctor.strip() != "None" else None,
            description=info.get("description", ""),
            source=source,
        )
    return result


def parse_callbacks(data: Optional[Mapping[str, Any]]) -> dict[str, CallbackDoc]:
    result = {}
    for name, info in (data or {}).items():
        signature = info.get("signature", "")
        for suffix in (" callbacks", " events"):
            if signature.endswith(suffix):
                signature = signature[: -len(suffix)].rstrip()
        result[name] = CallbackDoc(name, signature, info.get("description", ""))
    return result


def parse_types(data: Optional[Mapping[str, Any]]) -> dict[str, TypeDoc]:
    return {name: TypeDoc(name, info.get("description", "")) for name, info in (data or {}).items()}


def parse_operators(data: Optional[Mapping[str, Any]]) -> dict[str, OperatorDoc]:
    """One entry per operator symbol listed (comma-separated) in each signature."""
    result = {}
    for info in (data or {}).values():
        signature = info.get("signature") or ""
        for symbol in signature.split(","):
            symbol = symbol.strip().replace('"', "").replace("'", "")
            if symbol:
                result[symbol] = OperatorDoc(symbol, signature, info.get("description", ""))
    return result
