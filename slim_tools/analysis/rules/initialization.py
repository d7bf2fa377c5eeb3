"""Ordering and completeness of the calls inside ``initialize()``."""

from __future__ import annotations

import re
from typing import Optional

from .. import patterns
from ..constants import (
    MODEL_NONWF, MSG_REPRODUCTION_REQUIRES_NONWF, msg_call_order, msg_missing_initializer,
    msg_symbol_in_initialize,
)
from .core import ERROR, WARNING, Rule, RuleContext, make_diagnostic

INITIALIZE = "initialize()"

# Each later call must not come before the earlier one.
CALL_ORDER = (
    ("initializeSLiMOptions", "initializeSLiMModelType"),
    ("initializeChromosome", "initializeSLiMOptions"),
)

# (function, pattern, note appended to the warning)
GENETICS_INITIALIZERS = (
    ("initializeMutationType", re.compile(r"\binitializeMutationType(?:Nuc)?\s*\("), ""),
    ("initializeGenomicElementType", re.compile(r"\binitializeGenomicElementType\s*\("), ""),
    ("initializeGenomicElement", re.compile(r"\binitializeGenomicElement\s*\("), ""),
    ("initializeMutationRate", re.compile(r"\binitializeMutationRate\s*\("), " (unless nucleotide-based)"),
    ("initializeRecombinationRate", re.compile(r"\binitializeRecombinationRate\s*\("), ""),
)

_NUCLEOTIDE_BASED = re.compile(r"\binitializeAncestralNucleotides\s*\(")
_ROOT_SYMBOLS = re.compile(r"\b(sim|community)\b")


def _call(function: str) -> re.Pattern:
    return re.compile(r"\b" + function + r"\s*\(")


class InitializationRule(Rule):
    name = "initialization"
    slim_only = True

    def evaluate(self, context: RuleContext):
        tracking = context.tracking
        init_lines = [i for i in range(len(context.code)) if tracking.callback_at(i) == INITIALIZE]
        diagnostics = []

        def first_call(function: str) -> Optional[tuple[int, int]]:
            pattern = _call(function)
            for index in init_lines:
                m = pattern.search(context.code[index])
                if m:
                    return index, m.start()
            return None

        for later, earlier in CALL_ORDER:
            later_at, earlier_at = first_call(later), first_call(earlier)
            if later_at and earlier_at and later_at < earlier_at:
                line, col = later_at
                diagnostics.append(make_diagnostic(ERROR, line, col, col + len(later),
                                                   msg_call_order(later, earlier)))

        if init_lines:
            diagnostics.extend(self._missing_initializers(context, init_lines))
            for index in init_lines:
                line = context.code[index]
                for m in _ROOT_SYMBOLS.finditer(line):
                    if not line[:m.start()].rstrip().endswith("."):
                        diagnostics.append(make_diagnostic(ERROR, index, m.start(), m.end(),
                                                           msg_symbol_in_initialize(m.group(1))))

        if tracking.model_type != MODEL_NONWF:
            for index, line in enumerate(context.code):
                m = patterns.REPRODUCTION_HEADER.match(line)
                if m:
                    diagnostics.append(make_diagnostic(ERROR, index, m.start(1), m.end(1),
                                                       MSG_REPRODUCTION_REQUIRES_NONWF))
                    break

        return diagnostics

    @staticmethod
    def _missing_initializers(context: RuleContext, init_lines: list[int]):
        code = "\n".join(context.code[i] for i in init_lines)
        header = init_lines[0]
        col = max(context.code[header].find("initialize"), 0)
        nucleotide_based = bool(_NUCLEOTIDE_BASED.search(code))

        for function, pattern, note in GENETICS_INITIALIZERS:
            if pattern.search(code):
                continue
            if function == "initializeMutationRate" and nucleotide_based:
                continue
            yield make_diagnostic(WARNING, header, col, col + len("initialize"),
                                  msg_missing_initializer(function, note))
