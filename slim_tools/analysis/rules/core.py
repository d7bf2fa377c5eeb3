"""Rule abstraction shared by every validator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from lsprotocol import types as lsp

from ..constants import DIAGNOSTIC_SOURCE
from ..documentation import MODE_SLIM, DocumentationProvider
from ..lexer import scrub_lines, split_lines
from ..settings import DEFAULT_SETTINGS, AnalysisSettings
from ..tracker import TrackingState, track_document

ERROR = lsp.DiagnosticSeverity.Error
WARNING = lsp.DiagnosticSeverity.Warning


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at for one document version.

    ``lines`` is the original text, ``uncommented`` has comments blanked and
    ``code`` has comments and string literals blanked. All three views have
    the same line lengths, so a column found in one is valid in the others.
    """

    lines: Sequence[str]
    uncommented: Sequence[str]
    code: Sequence[str]
    tracking: TrackingState
    docs: DocumentationProvider
    mode: str = MODE_SLIM
    settings: AnalysisSettings = DEFAULT_SETTINGS

    @classmethod
    def build(cls, source: str, docs: DocumentationProvider, mode: str = MODE_SLIM,
              settings: AnalysisSettings = DEFAULT_SETTINGS,
              tracking: Optional[TrackingState] = None) -> RuleContext:
        lines = split_lines(source)
        if tracking is None:
            tracking = track_document(lines, settings)
        return cls(
            lines=lines,
            uncommented=scrub_lines(lines, keep_strings=True),
            code=scrub_lines(lines),
            tracking=tracking,
            docs=docs,
            mode=mode,
            settings=settings,
        )

    @property
    def code_text(self) -> str:
        return "\n".join(self.code)


class Rule:
    """A validator: ``evaluate(context)`` returns diagnostics, never raises on bad input."""

    name = "rule"
    # Rules that only make sense for SLiM models are skipped in eidos mode.
    slim_only = False

    def evaluate(self, context: RuleContext) -> list[lsp.Diagnostic]:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


def make_diagnostic(severity: lsp.DiagnosticSeverity, line: int, start: int, end: int,
                    message: str) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=lsp.Range(
            start=lsp.Position(line=line, character=start),
            end=lsp.Position(line=line, character=end),
        ),
        message=message,
        severity=severity,
        source=DIAGNOSTIC_SOURCE,
    )
