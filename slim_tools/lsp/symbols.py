"""Document symbol provider for SLiM/Eidos.

Lists callbacks, user-defined functions and constants for the Outline view.
Callback ranges come from the tracking pass; function ranges follow the
brace count from the declaration line.
"""

from __future__ import annotations

from typing import Optional

from lsprotocol import types as lsp

from slim_tools.analysis import patterns
from slim_tools.analysis.lexer import count_braces, scrub_lines
from slim_tools.analysis.tracker import CallbackSpan

from slim_tools.lsp.diagnostics import AnalysisResult


def _line_range(lines: list[str], start: int, end: int) -> lsp.Range:
    end = min(end, len(lines) - 1)
    return lsp.Range(
        start=lsp.Position(line=start, character=0),
        end=lsp.Position(line=end, character=len(lines[end])),
    )


def _span_range(line: int, start: int, end: int) -> lsp.Range:
    return lsp.Range(
        start=lsp.Position(line=line, character=start),
        end=lsp.Position(line=line, character=end),
    )


def find_block_end(code: list[str], start: int) -> int:
    """Line on which the block opened at or after ``start`` closes."""
    depth = 0
    opened = False
    for index in range(start, len(code)):
        counts = count_braces(code[index])
        depth += counts.open - counts.close
        opened = opened or counts.open > 0
        if opened and depth <= 0:
            return index
    return len(code) - 1


def _callback_symbol(span: CallbackSpan, lines: list[str], code: list[str]) -> lsp.DocumentSymbol:
    # Display the header as written, tick range and block id included.
    m = patterns.CALLBACK_HEADER.search(code[span.start_line])
    if m:
        name = " ".join(lines[span.start_line][m.start():m.end(1)].split()) + "()"
        selection = _span_range(span.start_line, m.start(), m.end(1))
    else:
        name = span.name
        selection = _line_range(lines, span.start_line, span.start_line)
    return lsp.DocumentSymbol(
        name=name,
        kind=lsp.SymbolKind.Event,
        range=_line_range(lines, span.start_line, span.end_line),
        selection_range=selection,
        detail=span.name,
    )


def get_document_symbols(result: AnalysisResult) -> list[lsp.DocumentSymbol]:
    """Outline symbols in source order."""
    lines = result.lines
    if not result.tracking or not any(line.strip() for line in lines):
        return []
    code = scrub_lines(lines, keep_strings=True)

    symbols: list[tuple[int, lsp.DocumentSymbol]] = [
        (span.start_line, _callback_symbol(span, lines, code))
        for span in result.tracking.callback_spans
    ]

    for index, line in enumerate(code):
        m = patterns.USER_FUNCTION.search(line)
        if m:
            symbols.append((index, lsp.DocumentSymbol(
                name=m.group(1),
                kind=lsp.SymbolKind.Function,
                range=_line_range(lines, index, find_block_end(code, index)),
                selection_range=_span_range(index, m.start(1), m.end(1)),
                detail=lines[index][m.start():].split("{")[0].strip(),
            )))

        m = patterns.DEFINE_CONSTANT.search(line)
        if m:
            detail: Optional[str] = result.tracking.instance_definitions.get(m.group(1))
            symbols.append((index, lsp.DocumentSymbol(
                name=m.group(1),
                kind=lsp.SymbolKind.Constant,
                range=_line_range(lines, index, index),
                selection_range=_span_range(index, m.start(1), m.end(1)),
                detail=detail,
            )))

    symbols.sort(key=lambda entry: entry[0])
    return [symbol for _, symbol in symbols]
