"""Calls to prefixed builtins that the documentation does not know."""

from __future__ import annotations

import re
from typing import Mapping

from .. import patterns
from ..constants import CALLBACK_NAMES, FUNCTION_PREFIXES, msg_function_not_found
from ..documentation import CallbackDoc
from .core import WARNING, Rule, RuleContext, make_diagnostic

_NEW_BEFORE = re.compile(r"\bnew\s*$")


def is_callback_name(name: str, callbacks: Mapping[str, CallbackDoc]) -> bool:
    if name in CALLBACK_NAMES:
        return True
    if name in callbacks or f"{name}()" in callbacks or f"{name}() callbacks" in callbacks:
        return True
    for key, info in callbacks.items():
        if info.signature == f"{name}()" or key.startswith(f"{name}("):
            return True
    return False


class FunctionCallRule(Rule):
    name = "functions"

    def evaluate(self, context: RuleContext):
        functions = context.docs.functions(context.mode)
        if not functions:
            return []
        callbacks = context.docs.callbacks(context.mode)
        user_functions = context.tracking.defined_functions
        diagnostics = []

        for index, line in enumerate(context.code):
            for m in patterns.FUNCTION_CALL.finditer(line):
                name = m.group(1)
                if name in functions or name in user_functions:
                    continue
                if not name.startswith(FUNCTION_PREFIXES):
                    continue
                # Mid-edit: nothing typed after the open paren yet.
                if not line[m.end():].strip():
                    continue
                if patterns.CONTROL_FLOW_CALL.match(m.group(0)):
                    continue
                before = line[:m.start()].rstrip()
                if before.endswith(".") or _NEW_BEFORE.search(before):
                    continue
                if is_callback_name(name, callbacks):
                    continue
                diagnostics.append(make_diagnostic(WARNING, index, m.start(1), m.end(1),
                                                   msg_function_not_found(name)))
        return diagnostics
