"""Diagnostic computation for SLiM/Eidos documents.

Tracks the document, runs the rule pipeline and memoizes both results in
the document cache under the document version.
"""

from dataclasses import dataclass, field
from typing import Optional

from lsprotocol import types as lsp

from slim_tools.analysis.cache import DocumentCache
from slim_tools.analysis.documentation import MODE_SLIM, DocumentationProvider
from slim_tools.analysis.lexer import split_lines
from slim_tools.analysis.rules import validate_document
from slim_tools.analysis.settings import DEFAULT_SETTINGS, AnalysisSettings
from slim_tools.analysis.tracker import TrackingState, track_document


@dataclass
class AnalysisResult:
    """Analysis of one document version."""

    uri: str
    source: str
    version: int
    mode: str = MODE_SLIM
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    tracking: Optional[TrackingState] = None

    @property
    def lines(self) -> list[str]:
        return split_lines(self.source)


def get_tracking_state(
    uri: str,
    source: str,
    version: int,
    cache: DocumentCache,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> TrackingState:
    """Cached tracking state for this version, computing it on a miss."""
    tracking = cache.get_tracking_state(uri, version)
    if tracking is None:
        tracking = track_document(split_lines(source), settings)
        cache.set_tracking_state(uri, version, tracking)
    return tracking


def compute_diagnostics(
    uri: str,
    source: str,
    version: int,
    docs: DocumentationProvider,
    cache: DocumentCache,
    mode: str = MODE_SLIM,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> AnalysisResult:
    """Diagnostics for ``source`` at ``version``, served from the cache when possible."""
    tracking = get_tracking_state(uri, source, version, cache, settings)
    diagnostics = cache.get_diagnostics(uri, version)
    if diagnostics is None:
        diagnostics = validate_document(source, docs, mode, settings, tracking)
        cache.set_diagnostics(uri, version, diagnostics)
    return AnalysisResult(
        uri=uri,
        source=source,
        version=version,
        mode=mode,
        diagnostics=diagnostics,
        tracking=tracking,
    )
