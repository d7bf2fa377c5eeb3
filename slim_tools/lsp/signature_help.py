"""Signature help provider for SLiM/Eidos.

Shows parameter hints when the user types '(' or ','. Covers documented
functions, methods on receivers whose class can be resolved, and the
pseudo-parameters of callbacks. The active parameter is the number of
commas at the call's nesting level before the cursor.
"""

import re
from typing import NamedTuple, Optional

from lsprotocol import types as lsp

from slim_tools.analysis.constants import (
    CALLBACK_PSEUDO_PARAMETERS, INITIALIZE_ONLY_FUNCTIONS, OBJECT,
)
from slim_tools.analysis.documentation import DocumentationProvider, FunctionDoc, MethodDoc
from slim_tools.analysis.lexer import iter_code
from slim_tools.analysis.signatures import Parameter, extract_parameter_types
from slim_tools.analysis.type_inference import resolve_class_name

from slim_tools.lsp.diagnostics import AnalysisResult
from slim_tools.lsp.utils import line_at

_CALLEE = re.compile(r"(?:(\w+)\s*\.\s*)?([a-zA-Z_]\w*)\s*$")


class CallContext(NamedTuple):
    name: str
    receiver: Optional[str]
    active_parameter: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def find_call_context(line: str, character: int) -> Optional[CallContext]:
    """The innermost call still open at ``character`` on ``line``."""
    open_calls: list[list[int]] = []  # [paren position, commas]
    for pos, char in iter_code(line[:character]):
        if char == "(":
            open_calls.append([pos, 0])
        elif char == ")":
            if open_calls:
                open_calls.pop()
        elif char == "," and open_calls:
            open_calls[-1][1] += 1

    if not open_calls:
        return None
    paren, commas = open_calls[-1]
    m = _CALLEE.search(line[:paren])
    if not m:
        return None
    return CallContext(m.group(2), m.group(1), commas)


def _parameter_info(param: Parameter) -> lsp.ParameterInformation:
    label = f"{param.type} {param.name}" if param.name else param.type
    if param.default:
        label += f" = {param.default}"
    doc = f"Type: `{param.type}`"
    if param.optional:
        doc += " (optional)"
    return lsp.ParameterInformation(
        label=label,
        documentation=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=doc),
    )


def _make_signature(
    label: str,
    params: list[lsp.ParameterInformation],
    active_param: int,
    documentation: str = "",
) -> lsp.SignatureHelp:
    active = min(active_param, len(params) - 1) if params else 0
    sig = lsp.SignatureInformation(
        label=label,
        parameters=params,
        documentation=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=documentation)
        if documentation else None,
        active_parameter=active,
    )
    return lsp.SignatureHelp(signatures=[sig], active_signature=0, active_parameter=active)


def _function_signature(info: FunctionDoc, active_param: int) -> lsp.SignatureHelp:
    params = [_parameter_info(p) for p in extract_parameter_types(info.signature)]
    documentation = info.description
    if info.name in INITIALIZE_ONLY_FUNCTIONS:
        documentation = f"{documentation}\n\nOnly valid in `initialize()` callbacks.".strip()
    return _make_signature(f"({info.return_type}){info.signature}", params, active_param,
                           documentation)


def _method_signature(class_name: str, info: MethodDoc, active_param: int) -> lsp.SignatureHelp:
    params = [_parameter_info(p) for p in extract_parameter_types(info.signature)]
    documentation = f"**{class_name}.{info.name}**"
    if info.description:
        documentation += f"\n\n{info.description}"
    return _make_signature(info.signature or f"{info.name}()", params, active_param,
                           documentation)


def _callback_signature(callback: str, active_param: int) -> lsp.SignatureHelp:
    pseudo = CALLBACK_PSEUDO_PARAMETERS[callback]
    params = [
        lsp.ParameterInformation(label=name, documentation=f"{name}: {class_name}")
        for name, class_name in pseudo.items()
    ]
    listing = "\n".join(f"- `{name}`: {class_name}" for name, class_name in pseudo.items())
    return _make_signature(callback, params, active_param,
                           f"Callback with implicit parameters:\n\n{listing}")


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def get_signature_help(
    result: AnalysisResult,
    position: lsp.Position,
    docs: DocumentationProvider,
) -> Optional[lsp.SignatureHelp]:
    """Compute signature help for the given cursor position."""
    line = line_at(result.source, position.line)
    if line is None:
        return None
    call = find_call_context(line, position.character)
    if call is None:
        return None

    if call.receiver:
        definitions = result.tracking.instance_definitions if result.tracking else {}
        class_name = resolve_class_name(call.receiver, definitions)
        if class_name is None:
            return None
        classes = docs.classes(result.mode)
        for owner in (class_name, OBJECT):
            info = classes.get(owner)
            if info is not None and info.has_method(call.name):
                return _method_signature(owner, info.methods[call.name], call.active_parameter)
        return None

    callback = f"{call.name}()"
    if callback in CALLBACK_PSEUDO_PARAMETERS:
        return _callback_signature(callback, call.active_parameter)

    functions = docs.functions(result.mode)
    if call.name in functions:
        return _function_signature(functions[call.name], call.active_parameter)
    return None
