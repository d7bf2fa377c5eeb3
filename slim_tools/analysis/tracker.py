"""Single forward pass that recovers an approximate symbol table.

The pass never builds an AST. Each line advances an explicit callback scope
and is scanned, independently of that scope, for definitions and
assignments. Definitions that appear later in the file are not visible to
lines before them; that is accepted.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional, Sequence, Union

from . import patterns
from .constants import (
    CALLBACK_PSEUDO_PARAMETERS, CANONICAL_CALLBACKS, GENOMIC_ELEMENT_TYPE,
    INTERACTION_TYPE, MODEL_NONWF, MODEL_WF, MUTATION_TYPE, SLIM_EIDOS_BLOCK,
    SUBPOPULATION,
)
from .lexer import count_braces, scrub_lines
from .settings import DEFAULT_SETTINGS, AnalysisSettings
from .type_inference import infer_type_from_expression


# ---------------------------------------------------------------------------
# Callback scope
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Outside:
    pass


@dataclass(frozen=True)
class InsideCallback:
    name: str
    depth: int
    start_line: int


CallbackScope = Union[Outside, InsideCallback]
OUTSIDE = Outside()


class ScopeStep(NamedTuple):
    scope: CallbackScope
    entered: Optional[str] = None  # callback whose header was on this line
    exited: bool = False


@dataclass(frozen=True)
class CallbackSpan:
    name: str
    start_line: int
    end_line: int


def detect_callback(line: str) -> Optional[str]:
    """Return the canonical ``name()`` of a callback header on ``line``."""
    match = patterns.CALLBACK_HEADER.search(line)
    if not match:
        return None
    return CANONICAL_CALLBACKS[match.group(1).lower()] + "()"


def advance_scope(scope: CallbackScope, line: str, line_index: int) -> ScopeStep:
    """Pure transition of the callback scope over one line.

    A header with an opening brace enters the callback with depth reset to
    0. Inside, depth moves by (opens - closes); it leaves once depth is back
    to zero on a line that closes a brace.
    """
    counts = count_braces(line)
    entered = None

    header = detect_callback(line)
    if header and counts.open > 0:
        scope = InsideCallback(header, 0, line_index)
        entered = header

    if isinstance(scope, InsideCallback):
        depth = scope.depth + counts.open - counts.close
        if depth <= 0 and counts.close > 0:
            return ScopeStep(OUTSIDE, entered, True)
        return ScopeStep(replace(scope, depth=depth), entered)

    return ScopeStep(scope, entered)


# ---------------------------------------------------------------------------
# Tracking state
# ---------------------------------------------------------------------------

@dataclass
class TrackingState:
    instance_definitions: dict[str, str] = field(default_factory=dict)
    defined_constants: set[str] = field(default_factory=set)
    defined_mutation_types: set[str] = field(default_factory=set)
    defined_genomic_element_types: set[str] = field(default_factory=set)
    defined_interaction_types: set[str] = field(default_factory=set)
    defined_subpopulations: set[str] = field(default_factory=set)
    defined_script_blocks: set[str] = field(default_factory=set)
    defined_species: set[str] = field(default_factory=set)
    defined_functions: set[str] = field(default_factory=set)
    model_type: Optional[str] = None  # "WF", "nonWF" or unknown
    callback_context_by_line: dict[int, Optional[str]] = field(default_factory=dict)
    callback_spans: list[CallbackSpan] = field(default_factory=list)

    def callback_at(self, line_index: int) -> Optional[str]:
        return self.callback_context_by_line.get(line_index)


def track_document(lines: Sequence[str], settings: AnalysisSettings = DEFAULT_SETTINGS) -> TrackingState:
    """Build a :class:`TrackingState` for ``lines`` in one forward pass.

    Comments are blanked before scanning; string literals are kept since
    most definitions are keyed by a quoted id.
    """
    state = TrackingState()
    code = scrub_lines(list(lines), keep_strings=True)
    scope: CallbackScope = OUTSIDE

    for index, line in enumerate(code):
        previous = scope
        scope, entered, exited = advance_scope(scope, line, index)

        if entered:
            if isinstance(previous, InsideCallback):
                # A new header before the old block closed.
                state.callback_spans.append(CallbackSpan(previous.name, previous.start_line, index - 1))
            state.instance_definitions.update(CALLBACK_PSEUDO_PARAMETERS.get(entered, {}))

        # Scope after the line: a closing brace line, or a whole callback on
        # one line, is outside.
        state.callback_context_by_line[index] = scope.name if isinstance(scope, InsideCallback) else None

        if exited:
            if entered:
                state.callback_spans.append(CallbackSpan(entered, index, index))
            else:
                state.callback_spans.append(CallbackSpan(previous.name, previous.start_line, index))

        _track_definitions(state, code, index, settings)
        _track_assignments(state, line)

    if isinstance(scope, InsideCallback):
        state.callback_spans.append(CallbackSpan(scope.name, scope.start_line, len(code) - 1))

    return state


def _track_definitions(state: TrackingState, code: list[str], index: int,
                       settings: AnalysisSettings):
    line = code[index]

    m = patterns.MODEL_TYPE.search(line)
    if m and m.group(1) in (MODEL_WF, MODEL_NONWF):
        state.model_type = m.group(1)

    m = patterns.DEFINE_CONSTANT.search(line)
    if m:
        name = m.group(1)
        state.defined_constants.add(name)
        inferred = _infer_constant_type(code, index, settings.constant_lookahead)
        if inferred:
            state.instance_definitions[name] = inferred

    for pattern, prefix, defined, class_name in (
        (patterns.MUTATION_TYPE_DEF, "m", state.defined_mutation_types, MUTATION_TYPE),
        (patterns.GENOMIC_ELEMENT_TYPE_DEF, "g", state.defined_genomic_element_types, GENOMIC_ELEMENT_TYPE),
        (patterns.INTERACTION_TYPE_DEF, "i", state.defined_interaction_types, INTERACTION_TYPE),
    ):
        m = pattern.search(line)
        if m:
            ident = patterns.id_from_match(m, prefix)
            defined.add(ident)
            state.instance_definitions[ident] = class_name

    m = patterns.SPECIES.search(line)
    if m:
        state.defined_species.add(m.group(1))

    m = patterns.SUBPOPULATION_DEF.search(line)
    if m:
        ident = patterns.id_from_match(m, "p")
        state.defined_subpopulations.add(ident)
        state.instance_definitions[ident] = SUBPOPULATION

    m = patterns.SCRIPT_BLOCK_HEADER.search(line)
    if m:
        state.defined_script_blocks.add(m.group(1))
        state.instance_definitions[m.group(1)] = SLIM_EIDOS_BLOCK

    for pattern in patterns.CALLBACK_REGISTRATIONS:
        m = pattern.search(line)
        if m:
            state.defined_script_blocks.add(m.group(1))
            state.instance_definitions[m.group(1)] = SLIM_EIDOS_BLOCK
            break

    m = patterns.USER_FUNCTION.search(line)
    if m:
        state.defined_functions.add(m.group(1))


def _infer_constant_type(code: list[str], index: int, lookahead: int) -> Optional[str]:
    m = patterns.CONSTANT_VALUE.search(code[index])
    if m:
        value = m.group(1).strip()
        if value.endswith(")"):
            value = value[:-1]
        return infer_type_from_expression(value)

    # Value continues on following lines: stop at the first closing paren
    # or the first line that yields a class.
    for offset in range(1, lookahead + 1):
        if index + offset >= len(code):
            break
        nxt = code[index + offset].strip()
        if not nxt:
            continue
        if ")" in nxt:
            return infer_type_from_expression(nxt.split(")")[0])
        inferred = infer_type_from_expression(nxt)
        if inferred:
            return inferred
    return None


def _track_assignments(state: TrackingState, line: str):
    m = patterns.INSTANCE.search(line)
    if m:
        state.instance_definitions[m.group(1)] = m.group(2)

    m = patterns.ASSIGNMENT.search(line)
    if m:
        inferred = infer_type_from_expression(m.group(2))
        if inferred:
            state.instance_definitions[m.group(1)] = inferred
