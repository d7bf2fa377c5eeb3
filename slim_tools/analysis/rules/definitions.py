"""Duplicate definitions and reserved names in definition positions."""

from __future__ import annotations

from .. import patterns
from ..constants import (
    RESERVED_CONTEXT_CONSTANT, RESERVED_IDENTIFIERS, TYPE_NAMES,
    msg_duplicate_definition, msg_reserved_identifier, msg_reserved_species_name,
)
from .core import ERROR, Rule, RuleContext, make_diagnostic

# (pattern, id prefix, key into TYPE_NAMES)
_TYPED_IDS = (
    (patterns.MUTATION_TYPE_DEF, "m", "mutation_type"),
    (patterns.GENOMIC_ELEMENT_TYPE_DEF, "g", "genomic_element_type"),
    (patterns.INTERACTION_TYPE_DEF, "i", "interaction_type"),
    (patterns.SUBPOPULATION_DEF, "p", "subpopulation"),
)


class DefinitionRule(Rule):
    """Runs on comment-free lines with strings kept: most ids are quoted."""

    name = "definitions"

    def evaluate(self, context: RuleContext):
        diagnostics = []
        # type key -> {name: first line index}
        seen: dict[str, dict[str, int]] = {key: {} for key in TYPE_NAMES}

        def check(kind: str, ident: str, index: int, start: int, end: int):
            first = seen[kind].get(ident)
            if first is None:
                seen[kind][ident] = index
                return
            diagnostics.append(make_diagnostic(
                ERROR, index, start, end,
                msg_duplicate_definition(TYPE_NAMES[kind], ident, first + 1),
            ))

        for index, line in enumerate(context.uncommented):
            m = patterns.DEFINE_CONSTANT.search(line)
            if m:
                name = m.group(1)
                start, end = m.span(1)
                if name in RESERVED_IDENTIFIERS:
                    diagnostics.append(make_diagnostic(
                        ERROR, index, start, end,
                        msg_reserved_identifier(name, RESERVED_CONTEXT_CONSTANT),
                    ))
                else:
                    check("constant", name, index, start, end)

            for pattern, prefix, kind in _TYPED_IDS:
                m = pattern.search(line)
                if m:
                    start, end = patterns.id_span(m)
                    check(kind, patterns.id_from_match(m, prefix), index, start, end)

            m = patterns.SPECIES.search(line)
            if m:
                name = m.group(1)
                start, end = m.span(1)
                if name in RESERVED_IDENTIFIERS:
                    diagnostics.append(make_diagnostic(ERROR, index, start, end,
                                                       msg_reserved_species_name(name)))
                else:
                    check("species", name, index, start, end)

        return diagnostics
