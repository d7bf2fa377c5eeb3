"""Tunable analysis parameters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

logger = logging.getLogger("slim-tools.settings")


@dataclass(frozen=True)
class AnalysisSettings:
    # Lines scanned after a multi-line defineConstant( call for its value.
    # Caps the cost on malformed input; not a correctness bound.
    constant_lookahead: int = 3
    cache_capacity: int = 50
    # Rule names to run; None runs every rule.
    enabled_rules: Optional[frozenset[str]] = None

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]]) -> AnalysisSettings:
        """Build settings from LSP ``initializationOptions``.

        Accepts snake_case or camelCase keys. Unknown keys are ignored and
        unparsable values fall back to the default.
        """
        settings = cls()
        if not options:
            return settings

        overrides: dict[str, Any] = {}
        for f in fields(cls):
            camel = _camel(f.name)
            if f.name in options:
                raw = options[f.name]
            elif camel in options:
                raw = options[camel]
            else:
                continue

            if f.name == "enabled_rules":
                if raw is not None:
                    overrides[f.name] = frozenset(str(r) for r in raw)
                continue
            try:
                value = int(raw)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid value %r for setting %s", raw, f.name)
                continue
            if value < 0:
                logger.warning("Ignoring negative value %r for setting %s", raw, f.name)
                continue
            overrides[f.name] = value

        return replace(settings, **overrides)

    def rule_enabled(self, name: str) -> bool:
        return self.enabled_rules is None or name in self.enabled_rules


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


DEFAULT_SETTINGS = AnalysisSettings()
