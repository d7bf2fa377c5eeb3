"""Whole-script shape: strings, events, braces and semicolons."""

from __future__ import annotations

from typing import NamedTuple, Optional

from .. import patterns
from ..constants import (
    MSG_MISSING_SEMICOLON, MSG_NO_EIDOS_EVENT, MSG_OLD_SYNTAX, MSG_UNCLOSED_BRACE,
    MSG_UNCLOSED_STRING, MSG_UNEXPECTED_CLOSING_BRACE, msg_event_parameters,
)
from ..documentation import MODE_SLIM
from ..lexer import StringCommentScanner, count_braces, count_parens, remove_strings_from_line
from .core import ERROR, WARNING, Rule, RuleContext, make_diagnostic

# Line endings after which the statement obviously continues.
_SAFE_ENDINGS = (";", "{", "}", ",", "+", "-", "*", "/", "%", "&", "|",
                 "=", "<", ">", "!", "?", ":", "(", "[")


class ScriptStructureRule(Rule):
    name = "structure"

    def evaluate(self, context: RuleContext):
        diagnostics = []

        unclosed = self._unclosed_string(context.lines)
        if unclosed:
            line, start = unclosed
            diagnostics.append(make_diagnostic(ERROR, line, start, len(context.lines[line]),
                                               MSG_UNCLOSED_STRING))

        if context.mode == MODE_SLIM:
            text = context.code_text
            has_event = patterns.STANDARD_EVENT.search(text) or patterns.SPECIES_EVENT.search(text)
            if not has_event and patterns.INITIALIZE_CALL.search(text):
                diagnostics.append(make_diagnostic(ERROR, 0, 0, 0, MSG_NO_EIDOS_EVENT))

        for index, line in enumerate(context.code):
            if patterns.OLD_SYNTAX.match(line) and not patterns.STANDARD_EVENT.match(line):
                diagnostics.append(make_diagnostic(ERROR, index, 0, len(context.lines[index]),
                                                   MSG_OLD_SYNTAX))

            m = patterns.EVENT_WITH_PARAMS.search(line)
            if m:
                start, end = m.span(1)
                diagnostics.append(make_diagnostic(ERROR, index, start, end,
                                                   msg_event_parameters(m.group(1))))

        return diagnostics

    @staticmethod
    def _unclosed_string(lines) -> Optional[tuple[int, int]]:
        """Where the string still open at end of document started, if any."""
        scanner = StringCommentScanner()
        opened = None
        for index, line in enumerate(lines):
            scanner.new_line()
            was_in_string = scanner.in_string
            for pos, _, _ in scanner.scan(line):
                if scanner.in_string and not was_in_string:
                    opened = (index, pos)
                was_in_string = scanner.in_string
        return opened if scanner.in_string else None


class BraceBalanceRule(Rule):
    name = "braces"

    def evaluate(self, context: RuleContext):
        diagnostics = []
        running = 0
        last_open = -1

        for index, line in enumerate(context.code):
            stripped = line.strip()
            if not stripped:
                continue
            counts = count_braces(line)
            running += counts.open - counts.close
            if counts.open > 0:
                last_open = index

            slim_block = patterns.SLIM_BLOCK.match(stripped) or patterns.SLIM_BLOCK_SPECIES.match(stripped)
            if running < 0 and not slim_block:
                diagnostics.append(make_diagnostic(ERROR, index, 0, len(context.lines[index]),
                                                   MSG_UNEXPECTED_CLOSING_BRACE))
                # Report each stray brace once, not every line after it.
                running = 0

        if running > 0 and last_open >= 0:
            last = next((line.strip() for line in reversed(context.code) if line.strip()), "")
            if last != "}":
                diagnostics.append(make_diagnostic(ERROR, last_open, 0, len(context.lines[last_open]),
                                                   MSG_UNCLOSED_BRACE))
        return diagnostics


# ---------------------------------------------------------------------------
# Semicolons
# ---------------------------------------------------------------------------

class SemicolonCheck(NamedTuple):
    should_mark: bool
    paren_balance: int


def should_have_semicolon(line: str, paren_balance: int = 0) -> SemicolonCheck:
    """Decide whether ``line`` looks like a statement missing its ``;``.

    ``paren_balance`` carries unclosed parentheses from previous lines; a
    line inside an open call is never marked.
    """
    code = remove_strings_from_line(line)
    code = patterns.SINGLE_LINE_COMMENT.sub("", code)
    code = patterns.INLINE_BLOCK_COMMENT.sub("", code).strip()

    counts = count_parens(code)
    balance = paren_balance + counts.open - counts.close

    safe = (
        code.endswith(_SAFE_ENDINGS)
        or balance > 0
        or patterns.CONTROL_FLOW_STATEMENT.match(code)
        or patterns.CALLBACK_DEFINITION_STATEMENT.match(code)
        or patterns.SLIM_EVENT_BLOCK.match(code)
        or patterns.FUNCTION_DEFINITION_STATEMENT.match(code)
        or patterns.COMMENT_LINE.match(line)
        or patterns.COMMENT_CONTINUATION.match(line)
        or patterns.EMPTY_LINE.match(line)
    )
    return SemicolonCheck(not safe and balance == 0, balance)


class SemicolonRule(Rule):
    name = "semicolons"

    def evaluate(self, context: RuleContext):
        diagnostics = []
        balance = 0
        for index, line in enumerate(context.uncommented):
            if not context.code[index].strip():
                continue
            check = should_have_semicolon(line.strip(), balance)
            # A stray ')' must not poison the rest of the document.
            balance = max(check.paren_balance, 0)
            if check.should_mark:
                diagnostics.append(make_diagnostic(WARNING, index, 0, len(context.lines[index]),
                                                   MSG_MISSING_SEMICOLON))
        return diagnostics
