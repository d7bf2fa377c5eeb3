"""Calls and names that are only legal in some callbacks or model types."""

from __future__ import annotations

import re

from ..constants import (
    CALLBACK_SPECIFIC_PSEUDO_PARAMS, CALLBACKS_BLOCKING_EVALUATE, INITIALIZE_ONLY_FUNCTIONS,
    INTERACTION_TYPE, METHODS_REQUIRING_EVALUATE, MODEL_NONWF, MODEL_WF, NONWF_ONLY_CALLBACKS,
    NONWF_ONLY_METHODS, REPRODUCTION_ONLY_METHODS, WF_ONLY_CALLBACKS,
    msg_callback_model, msg_evaluate_blocked, msg_initialize_only, msg_method_requires_nonwf,
    msg_nonwf_only_method, msg_pseudo_parameter, msg_query_requires_evaluate,
    msg_reproduction_only,
)
from ..type_inference import resolve_class_name
from .core import ERROR, Rule, RuleContext, make_diagnostic


def _alternation(names) -> str:
    return "(" + "|".join(sorted(names, key=len, reverse=True)) + ")"


_INITIALIZE_ONLY = re.compile(r"\b" + _alternation(INITIALIZE_ONLY_FUNCTIONS) + r"\s*\(")
_REPRODUCTION_ONLY = re.compile(r"\." + _alternation(REPRODUCTION_ONLY_METHODS) + r"\s*\(")
_NONWF_ONLY = re.compile(r"\." + _alternation(NONWF_ONLY_METHODS) + r"\s*\(")
_NONWF_CALLBACKS = re.compile(r"\b" + _alternation(NONWF_ONLY_CALLBACKS) + r"\s*\(")
_WF_CALLBACKS = re.compile(r"\b" + _alternation(WF_ONLY_CALLBACKS) + r"\s*\(")
_PSEUDO_PARAMS = re.compile(r"\b" + _alternation(CALLBACK_SPECIFIC_PSEUDO_PARAMS) + r"\b")
_EVALUATE = re.compile(r"\.\s*(evaluate)\s*\(")
_QUERY = re.compile(r"(?:\b(\w+)\s*)?\.\s*" + _alternation(METHODS_REQUIRING_EVALUATE) + r"\s*\(")


def _after_dot(line: str, pos: int) -> bool:
    return line[:pos].rstrip().endswith(".")


class ContextRestrictionRule(Rule):
    name = "context"
    slim_only = True

    def evaluate(self, context: RuleContext):
        diagnostics = []
        model = context.tracking.model_type

        def error(index, m, message):
            diagnostics.append(make_diagnostic(ERROR, index, m.start(1), m.end(1), message))

        for index, line in enumerate(context.code):
            if not line.strip():
                continue
            callback = context.tracking.callback_at(index)

            for m in _INITIALIZE_ONLY.finditer(line):
                if callback != "initialize()" and not _after_dot(line, m.start()):
                    error(index, m, msg_initialize_only(m.group(1)))

            for m in _REPRODUCTION_ONLY.finditer(line):
                if callback != "reproduction()":
                    error(index, m, msg_reproduction_only(m.group(1)))
                elif model == MODEL_WF:
                    error(index, m, msg_method_requires_nonwf(m.group(1)))

            if model == MODEL_WF:
                for m in _NONWF_ONLY.finditer(line):
                    error(index, m, msg_nonwf_only_method(m.group(1)))
                for m in _NONWF_CALLBACKS.finditer(line):
                    if not _after_dot(line, m.start()):
                        error(index, m, msg_callback_model(m.group(1), MODEL_NONWF))
            elif model == MODEL_NONWF:
                for m in _WF_CALLBACKS.finditer(line):
                    if not _after_dot(line, m.start()):
                        error(index, m, msg_callback_model(m.group(1), MODEL_WF))

            for m in _PSEUDO_PARAMS.finditer(line):
                allowed = CALLBACK_SPECIFIC_PSEUDO_PARAMS[m.group(1)]
                if callback not in allowed and not _after_dot(line, m.start()):
                    error(index, m, msg_pseudo_parameter(m.group(1), allowed))

            if callback in CALLBACKS_BLOCKING_EVALUATE:
                for m in _EVALUATE.finditer(line):
                    error(index, m, msg_evaluate_blocked(callback))

        return diagnostics


class InteractionQueryRule(Rule):
    """Spatial queries need ``evaluate()`` earlier in the same callback block."""

    name = "interactions"
    slim_only = True

    def evaluate(self, context: RuleContext):
        diagnostics = []
        definitions = context.tracking.instance_definitions

        for span in context.tracking.callback_spans:
            evaluated_at = None
            for index in range(span.start_line, span.end_line + 1):
                m = _EVALUATE.search(context.code[index])
                if m:
                    evaluated_at = (index, m.start())
                    break

            for index in range(span.start_line, span.end_line + 1):
                for m in _QUERY.finditer(context.code[index]):
                    receiver = m.group(1)
                    if receiver:
                        class_name = resolve_class_name(receiver, definitions)
                        if class_name is not None and class_name != INTERACTION_TYPE:
                            continue
                    if evaluated_at is not None and evaluated_at < (index, m.start()):
                        continue
                    diagnostics.append(make_diagnostic(ERROR, index, m.start(2), m.end(2),
                                                       msg_query_requires_evaluate(m.group(2))))
        return diagnostics
