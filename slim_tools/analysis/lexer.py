"""String/comment partitioning for SLiM and Eidos source lines.

There is no token stream: every helper here classifies the characters of one
line as code, string literal, line comment or block comment. The scrubbing
helpers replace non-code spans with spaces so that regex offsets computed on
a scrubbed line are valid columns in the original line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Iterator, NamedTuple, Optional

QUOTES = ('"', "'")
STRING_PLACEHOLDER = "__STR{}__"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split on the line terminators LSP recognizes, keeping a trailing empty line."""
    return _LINE_BREAK.split(text)


@dataclass
class ParseState:
    in_string: bool = False
    string_char: Optional[str] = None
    in_single_line_comment: bool = False
    in_multi_line_comment: bool = False

    @property
    def in_comment(self) -> bool:
        return self.in_single_line_comment or self.in_multi_line_comment


class ScanStep(NamedTuple):
    """Result of feeding one character to the scanner.

    ``skip`` is true when the character is not code (string literal including
    its quotes, or comment including its delimiters). ``break_line`` is true
    once a ``//`` comment has started: nothing after it on the line is code.
    """

    skip: bool
    break_line: bool
    in_string: bool = False


class Counts(NamedTuple):
    open: int
    close: int


def is_escaped_quote(text: str, pos: int) -> bool:
    """True if the character at ``pos`` is preceded by an odd run of backslashes."""
    count = 0
    i = pos - 1
    while i >= 0 and text[i] == '\\':
        count += 1
        i -= 1
    return count % 2 == 1


class StringCommentScanner:
    """Per-line string/comment automaton.

    State survives across calls so a caller can feed several lines through
    the same scanner; call :meth:`new_line` between lines. A block comment
    left open stays open, and so does a string (consumers that care about
    unterminated strings rely on that).
    """

    def __init__(self, state: Optional[ParseState] = None):
        self._state = replace(state) if state else ParseState()
        # Position of the '/' that opened the current block comment on this
        # line; comments carried over from an earlier line can close at once.
        self._comment_opened = -3

    def state(self) -> ParseState:
        return replace(self._state)

    @property
    def in_string(self) -> bool:
        return self._state.in_string

    def new_line(self):
        self._state.in_single_line_comment = False
        self._comment_opened = -3

    def process_char(self, char: str, prev: Optional[str], next_char: Optional[str],
                     line: str, pos: int) -> ScanStep:
        state = self._state

        if state.in_single_line_comment:
            return ScanStep(True, True)

        if state.in_multi_line_comment:
            if char == '/' and prev == '*' and pos >= self._comment_opened + 3:
                state.in_multi_line_comment = False
            return ScanStep(True, False)

        if state.in_string:
            if char == state.string_char and not is_escaped_quote(line, pos):
                state.in_string = False
                state.string_char = None
            return ScanStep(True, False, True)

        if char in QUOTES and not is_escaped_quote(line, pos):
            state.in_string = True
            state.string_char = char
            return ScanStep(True, False, True)

        if char == '/' and next_char == '/':
            state.in_single_line_comment = True
            return ScanStep(True, True)

        if char == '/' and next_char == '*':
            state.in_multi_line_comment = True
            self._comment_opened = pos
            return ScanStep(True, False)

        return ScanStep(False, False)

    def scan(self, line: str) -> Iterator[tuple[int, str, ScanStep]]:
        """Yield ``(pos, char, step)`` for every character of ``line``."""
        for pos, char in enumerate(line):
            prev = line[pos - 1] if pos > 0 else None
            next_char = line[pos + 1] if pos + 1 < len(line) else None
            yield pos, char, self.process_char(char, prev, next_char, line, pos)


# ---------------------------------------------------------------------------
# Derived pure helpers
# ---------------------------------------------------------------------------

def iter_code(line: str, scanner: Optional[StringCommentScanner] = None) -> Iterator[tuple[int, str]]:
    """Yield ``(pos, char)`` for characters outside strings and comments."""
    scanner = scanner or StringCommentScanner()
    for pos, char, step in scanner.scan(line):
        if step.break_line:
            return
        if not step.skip:
            yield pos, char


def _count(line: str, opener: str, closer: str) -> Counts:
    opened = closed = 0
    for _, char in iter_code(line):
        if char == opener:
            opened += 1
        elif char == closer:
            closed += 1
    return Counts(opened, closed)


def count_braces(line: str) -> Counts:
    return _count(line, '{', '}')


def count_parens(line: str) -> Counts:
    return _count(line, '(', ')')


def remove_strings_from_line(line: str) -> str:
    """Replace each string literal (quotes included) with ``__STR{n}__``.

    Comments are left in place. The result is not length-preserving; it is
    only meant for shape checks such as the semicolon heuristic.
    """
    parts: list[str] = []
    index = 0
    was_in_string = False
    for _, char, step in StringCommentScanner().scan(line):
        if step.in_string:
            if not was_in_string:
                parts.append(STRING_PLACEHOLDER.format(index))
                index += 1
            was_in_string = True
            continue
        was_in_string = False
        parts.append(char)
    return ''.join(parts)


def _blank(line: str, scanner: Optional[StringCommentScanner], keep_strings: bool) -> str:
    scanner = scanner or StringCommentScanner()
    out: list[str] = []
    for pos, char, step in scanner.scan(line):
        if step.break_line:
            out.append(' ' * (len(line) - pos))
            break
        if not step.skip or (keep_strings and step.in_string):
            out.append(char)
        else:
            out.append(' ')
    return ''.join(out)


def remove_comments_and_strings_from_line(line: str,
                                          scanner: Optional[StringCommentScanner] = None) -> str:
    """Blank out strings and comments with spaces; output length equals input length."""
    return _blank(line, scanner, keep_strings=False)


def remove_comments_from_line(line: str, scanner: Optional[StringCommentScanner] = None) -> str:
    """Blank out comments only, keeping string literals intact."""
    return _blank(line, scanner, keep_strings=True)


def scrub_lines(lines: list[str], keep_strings: bool = False) -> list[str]:
    """Scrub a whole document line by line.

    Block comments carry over from one line to the next; strings do not, so
    a stray quote only affects its own line.
    """
    scrubbed = []
    carried = ParseState()
    for line in lines:
        scanner = StringCommentScanner(ParseState(in_multi_line_comment=carried.in_multi_line_comment))
        scrubbed.append(_blank(line, scanner, keep_strings))
        carried = scanner.state()
    return scrubbed
