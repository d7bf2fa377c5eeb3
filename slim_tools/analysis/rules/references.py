"""Possibly undefined ``p#``/``m#``/``g#``/``i#`` references."""

from __future__ import annotations

from .. import patterns
from ..constants import TYPE_NAMES, msg_undefined_reference
from .core import WARNING, Rule, RuleContext, make_diagnostic

_DEFINITIONS = {
    "m": (patterns.MUTATION_TYPE_DEF, "mutation_type"),
    "g": (patterns.GENOMIC_ELEMENT_TYPE_DEF, "genomic_element_type"),
    "i": (patterns.INTERACTION_TYPE_DEF, "interaction_type"),
    "p": (patterns.SUBPOPULATION_DEF, "subpopulation"),
}


def first_definitions(lines, prefix: str) -> dict[str, int]:
    """Map each id of one class to the first line that defines it."""
    pattern = _DEFINITIONS[prefix][0]
    first: dict[str, int] = {}
    for index, line in enumerate(lines):
        for m in pattern.finditer(line):
            first.setdefault(patterns.id_from_match(m, prefix), index)
    return first


class UndefinedReferenceRule(Rule):
    """Warns on ids with no definition on the same or an earlier line.

    A document that builds ids of a class from expressions (for example
    ``sim.addSubpop(i, 10)`` in a loop) gets no warnings for that class.
    """

    name = "references"

    def evaluate(self, context: RuleContext):
        diagnostics = []
        uncommented_text = "\n".join(context.uncommented)

        for prefix, (_, kind) in _DEFINITIONS.items():
            if patterns.DYNAMIC_ID_CREATION[prefix].search(uncommented_text):
                continue
            defined = first_definitions(context.uncommented, prefix)
            reference = patterns.ID_REFERENCES[prefix]

            for index, line in enumerate(context.code):
                for m in reference.finditer(line):
                    ident = m.group(1)
                    first = defined.get(ident)
                    if first is not None and first <= index:
                        continue
                    diagnostics.append(make_diagnostic(
                        WARNING, index, m.start(1), m.end(1),
                        msg_undefined_reference(TYPE_NAMES[kind], ident),
                    ))
        return diagnostics
