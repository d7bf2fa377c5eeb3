"""Best-effort class inference for identifiers and expressions.

Nothing here is authoritative. When in doubt the helpers return ``None``;
every consumer treats an unresolved class as "skip this check".
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

from .constants import (
    CHROMOSOME, GENOMIC_ELEMENT_TYPE, HAPLOSOME, INDIVIDUAL, INTERACTION_TYPE,
    LOG_FILE, MUTATION, MUTATION_TYPE, SUBPOPULATION, WELL_KNOWN_INSTANCES,
)

# Expressions producing plain numbers or logicals dominate any nested call.
_NUMERIC_FUNCTION = re.compile(
    r"^(sum|mean|min|max|abs|sqrt|log|exp|sin|cos|tan|round|floor|ceil|length|size|sd|var)\s*\("
)
_ARITHMETIC = re.compile(r"[+\-*/%]")
_COMPARISON = re.compile(r"^(==|!=|<|>|<=|>=|&&|\|\||!)")
_LOGICAL_FUNCTION = re.compile(r"^(all|any|isNULL|isNAN|isFinite|isInfinite)\s*\(")

_NON_OBJECT_PATTERNS = (_NUMERIC_FUNCTION, _ARITHMETIC, _COMPARISON, _LOGICAL_FUNCTION)

# First match wins.
EXPRESSION_TYPES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"\.(addSubpop|addSubpopSplit|subpopulations|subpopulationsWithIDs"
                r"|subpopulationsWithNames|subpopulationByID)\("), SUBPOPULATION),
    (re.compile(r"\.(individuals|sampleIndividuals|individualsWithPedigreeIDs)(\[|$|\()"), INDIVIDUAL),
    (re.compile(r"\.(genomes|haplosomes|haplosomesForChromosomes|genome1|genome2)(\[|$|\()"), HAPLOSOME),
    (re.compile(r"\.(mutations|mutationsOfType|mutationsFromHaplosomes|uniqueMutationsOfType)(\[|$|\()"), MUTATION),
    (re.compile(r"(initializeMutationType|initializeMutationTypeNuc|\.mutationTypesWithIDs)\("), MUTATION_TYPE),
    (re.compile(r"(initializeGenomicElementType|\.genomicElementTypesWithIDs)\("), GENOMIC_ELEMENT_TYPE),
    (re.compile(r"(initializeInteractionType|\.interactionTypesWithIDs)\("), INTERACTION_TYPE),
    (re.compile(r"(initializeChromosome|\.chromosomesWithIDs|\.chromosomesOfType)\("), CHROMOSOME),
    (re.compile(r"\.createLogFile\("), LOG_FILE),
)

ID_CONVENTIONS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"^p\d+$"), SUBPOPULATION),
    (re.compile(r"^m\d+$"), MUTATION_TYPE),
    (re.compile(r"^g\d+$"), GENOMIC_ELEMENT_TYPE),
    (re.compile(r"^i\d+$"), INTERACTION_TYPE),
)


def resolve_class_name(identifier: str, instance_definitions: Mapping[str, str]) -> Optional[str]:
    """Resolve an identifier to a class name.

    Priority: tracked definitions, then well-known globals (``sim``,
    ``community``, ...), then the ``p1``/``m1``/``g1``/``i1`` id conventions.
    """
    if identifier in instance_definitions:
        return instance_definitions[identifier]
    if identifier in WELL_KNOWN_INSTANCES:
        return WELL_KNOWN_INSTANCES[identifier]
    for pattern, class_name in ID_CONVENTIONS:
        if pattern.match(identifier):
            return class_name
    return None


def infer_type_from_expression(expr: str) -> Optional[str]:
    expr = expr.strip()
    if not expr:
        return None
    if any(p.search(expr) for p in _NON_OBJECT_PATTERNS):
        return None
    for pattern, class_name in EXPRESSION_TYPES:
        if pattern.search(expr):
            return class_name
    return None
