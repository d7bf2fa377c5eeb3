"""Code completion provider for SLiM/Eidos.

Member completions after ``ident.``, otherwise documented functions,
callbacks, classes and the identifiers tracked in the document.
"""

import re

from lsprotocol import types as lsp

from slim_tools.analysis.constants import OBJECT
from slim_tools.analysis.documentation import ClassDoc, DocumentationProvider
from slim_tools.analysis.type_inference import resolve_class_name

from slim_tools.lsp.diagnostics import AnalysisResult
from slim_tools.lsp.utils import get_text_before_cursor

_DOT_ACCESS = re.compile(r"(\w+)\s*\.\s*\w*$")


# ---------------------------------------------------------------------------
# Member completions
# ---------------------------------------------------------------------------

def _class_member_items(info: ClassDoc, seen: set[str]) -> list[lsp.CompletionItem]:
    items = []
    for name, prop in info.properties.items():
        if name in seen:
            continue
        seen.add(name)
        items.append(
            lsp.CompletionItem(
                label=name,
                kind=lsp.CompletionItemKind.Property,
                detail=f"{prop.type} {name}",
                documentation=prop.description or f"Property of {info.name}",
                insert_text=name,
            )
        )
    for name, method in info.methods.items():
        if name in seen:
            continue
        seen.add(name)
        items.append(
            lsp.CompletionItem(
                label=name,
                kind=lsp.CompletionItemKind.Method,
                detail=method.signature,
                documentation=method.description or f"Method of {info.name}",
                insert_text=f"{name}($1)$0",
                insert_text_format=lsp.InsertTextFormat.Snippet,
            )
        )
    return items


def _dot_completions(result: AnalysisResult, docs: DocumentationProvider,
                     receiver: str) -> list[lsp.CompletionItem]:
    definitions = result.tracking.instance_definitions if result.tracking else {}
    class_name = resolve_class_name(receiver, definitions)
    if class_name is None:
        return []

    classes = docs.classes(result.mode)
    items: list[lsp.CompletionItem] = []
    seen: set[str] = set()
    for owner in (class_name, OBJECT):
        info = classes.get(owner)
        if info is not None:
            items.extend(_class_member_items(info, seen))
    return items


# ---------------------------------------------------------------------------
# General completions
# ---------------------------------------------------------------------------

def _general_completions(result: AnalysisResult,
                         docs: DocumentationProvider) -> list[lsp.CompletionItem]:
    mode = result.mode
    items: list[lsp.CompletionItem] = []

    for name, info in docs.functions(mode).items():
        items.append(
            lsp.CompletionItem(
                label=name,
                kind=lsp.CompletionItemKind.Function,
                detail=f"({info.return_type}){info.signature}",
                documentation=info.description,
                insert_text=f"{name}($1)$0",
                insert_text_format=lsp.InsertTextFormat.Snippet,
            )
        )

    for name, info in docs.callbacks(mode).items():
        label = name[:-2] if name.endswith("()") else name
        items.append(
            lsp.CompletionItem(
                label=label,
                kind=lsp.CompletionItemKind.Event,
                detail=info.signature,
                documentation=info.description,
                insert_text=f"{label}() {{\n\t$0\n}}",
                insert_text_format=lsp.InsertTextFormat.Snippet,
            )
        )

    for name, info in docs.classes(mode).items():
        items.append(
            lsp.CompletionItem(
                label=name,
                kind=lsp.CompletionItemKind.Class,
                detail=f"class {name}",
                documentation=info.description,
                insert_text=name,
            )
        )

    if result.tracking:
        constants = result.tracking.defined_constants
        for name, class_name in sorted(result.tracking.instance_definitions.items()):
            items.append(
                lsp.CompletionItem(
                    label=name,
                    kind=lsp.CompletionItemKind.Variable,
                    detail=class_name,
                    insert_text=name,
                )
            )
        for name in sorted(constants - result.tracking.instance_definitions.keys()):
            items.append(
                lsp.CompletionItem(
                    label=name,
                    kind=lsp.CompletionItemKind.Constant,
                    detail="constant",
                    insert_text=name,
                )
            )

    return items


def get_completions(
    result: AnalysisResult,
    position: lsp.Position,
    docs: DocumentationProvider,
) -> list[lsp.CompletionItem]:
    """Compute completion items for the given cursor position."""
    text_before = get_text_before_cursor(result.source, position)

    dot_match = _DOT_ACCESS.search(text_before)
    if dot_match:
        return _dot_completions(result, docs, dot_match.group(1))

    return _general_completions(result, docs)
