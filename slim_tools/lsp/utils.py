"""Text lookups shared by the hover and completion providers."""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

from lsprotocol import types as lsp

from slim_tools.analysis.lexer import split_lines

_WORD_CHAR = re.compile(r"\w")
_RECEIVER = re.compile(r"(\w+)\s*\.\s*$")


class Word(NamedTuple):
    text: str
    start: int
    end: int


def line_at(source: str, line: int) -> Optional[str]:
    lines = split_lines(source)
    if 0 <= line < len(lines):
        return lines[line]
    return None


def get_text_before_cursor(source: str, position: lsp.Position) -> str:
    line = line_at(source, position.line)
    if line is None:
        return ""
    return line[:position.character]


def word_at(line: str, character: int) -> Optional[Word]:
    """The identifier touching ``character`` (cursor just after a word counts)."""
    if character > len(line):
        return None
    start = character
    while start > 0 and _WORD_CHAR.match(line[start - 1]):
        start -= 1
    end = character
    while end < len(line) and _WORD_CHAR.match(line[end]):
        end += 1
    if start == end:
        return None
    return Word(line[start:end], start, end)


def receiver_before(line: str, start: int) -> Optional[str]:
    """For ``obj.member`` with ``start`` at ``member``, return ``obj``."""
    m = _RECEIVER.search(line[:start])
    return m.group(1) if m else None


def word_range(line: int, word: Word) -> lsp.Range:
    return lsp.Range(
        start=lsp.Position(line=line, character=word.start),
        end=lsp.Position(line=line, character=word.end),
    )
