"""``NULL`` passed positionally to a non-nullable parameter."""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

from .. import patterns
from ..constants import msg_null_to_non_nullable
from ..lexer import QUOTES, is_escaped_quote
from ..signatures import Parameter, base_type, extract_parameter_types, is_nullable_type
from ..type_inference import resolve_class_name
from .core import ERROR, Rule, RuleContext, make_diagnostic

_RECEIVER = re.compile(r"(\w+)\s*\.\s*$")


class Argument(NamedTuple):
    value: str
    start: int
    end: int


def find_closing_paren(line: str, open_pos: int) -> Optional[int]:
    """Index of the ``)`` matching the ``(`` at ``open_pos``, or None."""
    depth = 0
    for pos in range(open_pos, len(line)):
        if line[pos] == "(":
            depth += 1
        elif line[pos] == ")":
            depth -= 1
            if depth == 0:
                return pos
    return None


def split_arguments(line: str, open_pos: int, close_pos: int) -> list[Argument]:
    """Top-level arguments between two parens, with their columns in ``line``."""
    args = []
    depth = 0
    quote = None
    start = open_pos + 1
    for pos in range(open_pos + 1, close_pos):
        char = line[pos]
        if quote:
            if char == quote and not is_escaped_quote(line, pos):
                quote = None
        elif char in QUOTES and not is_escaped_quote(line, pos):
            quote = char
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth -= 1
        elif char == "," and depth == 0:
            args.append(Argument(line[start:pos].strip(), start, pos))
            start = pos + 1
    if line[start:close_pos].strip():
        args.append(Argument(line[start:close_pos].strip(), start, close_pos))
    return args


class NullArgumentRule(Rule):
    name = "nulls"

    def evaluate(self, context: RuleContext):
        functions = context.docs.functions(context.mode)
        classes = context.docs.classes(context.mode)
        diagnostics = []

        for index, code in enumerate(context.code):
            if not patterns.NULL_KEYWORD.search(code):
                continue
            line = context.uncommented[index]

            for m in patterns.FUNCTION_CALL.finditer(code):
                close = find_closing_paren(code, m.end() - 1)
                if close is None:
                    continue
                args = split_arguments(line, m.end() - 1, close)
                name = m.group(1)

                receiver = _RECEIVER.search(code[:m.start()])
                if receiver:
                    class_name = resolve_class_name(receiver.group(1),
                                                    context.tracking.instance_definitions)
                    info = classes.get(class_name) if class_name else None
                    method = info.methods.get(name) if info else None
                    if method:
                        params = extract_parameter_types(method.signature)
                        diagnostics.extend(self._check(index, line, args, params,
                                                       f"method {class_name}.{name}"))
                elif name in functions:
                    params = extract_parameter_types(functions[name].signature)
                    diagnostics.extend(self._check(index, line, args, params))
        return diagnostics

    @staticmethod
    def _check(index: int, line: str, args: list[Argument], params: list[Parameter],
               where: str = ""):
        for position, (arg, param) in enumerate(zip(args, params)):
            if arg.value not in ("NULL", "null") or is_nullable_type(param.type):
                continue
            m = patterns.NULL_KEYWORD.search(line, arg.start, arg.end)
            if not m:
                continue
            name = param.name or f"parameter {position + 1}"
            yield make_diagnostic(ERROR, index, m.start(), m.end(),
                                  msg_null_to_non_nullable(name, base_type(param.type), where))
