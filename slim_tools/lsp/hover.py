"""Hover provider for SLiM/Eidos.

Shows documentation for functions, callbacks, classes, types and class
members, and the inferred class of tracked identifiers.
"""

from typing import Optional

from lsprotocol import types as lsp

from slim_tools.analysis.constants import OBJECT
from slim_tools.analysis.documentation import (
    CallbackDoc, ClassDoc, DocumentationProvider, FunctionDoc, MethodDoc, PropertyDoc,
)
from slim_tools.analysis.type_inference import resolve_class_name

from slim_tools.lsp.diagnostics import AnalysisResult
from slim_tools.lsp.utils import line_at, receiver_before, word_at, word_range


def _code_block(text: str) -> str:
    return f"```slim\n{text}\n```"


def _with_description(header: str, description: str) -> str:
    return f"{header}\n\n{description}" if description else header


def _format_function(info: FunctionDoc) -> str:
    return _with_description(_code_block(f"({info.return_type}){info.signature}"),
                             info.description)


def _format_callback(info: CallbackDoc) -> str:
    return _with_description(_code_block(info.signature or info.name), info.description)


def _format_class(info: ClassDoc) -> str:
    header = _code_block(f"class {info.name}")
    if info.constructor:
        header += "\n" + _code_block(info.constructor)
    parts = [header]
    if info.description:
        parts.append(info.description)
    if info.properties:
        parts.append("**Properties:** " + ", ".join(f"`{p}`" for p in info.properties))
    if info.methods:
        parts.append("**Methods:** " + ", ".join(f"`{m}()`" for m in info.methods))
    return "\n\n".join(parts)


def _format_method(class_name: str, info: MethodDoc) -> str:
    return _with_description(_code_block(info.signature or f"{info.name}()"),
                             f"Method of `{class_name}`. {info.description}".strip())


def _format_property(class_name: str, info: PropertyDoc) -> str:
    return _with_description(_code_block(f"{info.type} {info.name}"),
                             f"Property of `{class_name}`. {info.description}".strip())


def _member_hover(docs: DocumentationProvider, mode: str, class_name: str,
                  member: str) -> Optional[str]:
    classes = docs.classes(mode)
    for owner in (class_name, OBJECT):
        info = classes.get(owner)
        if info is None:
            continue
        if member in info.methods:
            return _format_method(owner, info.methods[member])
        if member in info.properties:
            return _format_property(owner, info.properties[member])
    return None


def get_hover_info(
    result: AnalysisResult, position: lsp.Position, docs: DocumentationProvider
) -> Optional[lsp.Hover]:
    """Return hover information for the word at the given position."""
    line = line_at(result.source, position.line)
    if line is None:
        return None
    word = word_at(line, position.character)
    if word is None:
        return None

    definitions = result.tracking.instance_definitions if result.tracking else {}
    mode = result.mode
    content: Optional[str] = None

    receiver = receiver_before(line, word.start)
    if receiver:
        class_name = resolve_class_name(receiver, definitions)
        if class_name:
            content = _member_hover(docs, mode, class_name, word.text)

    else:
        functions = docs.functions(mode)
        callbacks = docs.callbacks(mode)
        classes = docs.classes(mode)
        if word.text in functions:
            content = _format_function(functions[word.text])
        elif word.text in callbacks or f"{word.text}()" in callbacks:
            content = _format_callback(callbacks.get(word.text) or callbacks[f"{word.text}()"])
        elif word.text in classes:
            content = _format_class(classes[word.text])
        elif word.text in docs.types():
            info = docs.types()[word.text]
            content = _with_description(_code_block(info.name), info.description)
        else:
            class_name = resolve_class_name(word.text, definitions)
            if class_name:
                content = f"`{word.text}`: `{class_name}`"

    if content is None:
        return None

    return lsp.Hover(
        contents=lsp.MarkupContent(
            kind=lsp.MarkupKind.Markdown,
            value=content,
        ),
        range=word_range(position.line, word),
    )
