"""SLiM/Eidos source analysis: tracking, diagnostics and caching."""

from .cache import DocumentCache as DocumentCache, CacheStats as CacheStats
from .documentation import (
    DocumentationProvider as DocumentationProvider,
    DocumentationError as DocumentationError,
    language_mode as language_mode,
)
from .rules import DiagnosticPipeline as DiagnosticPipeline, validate_document as validate_document
from .settings import AnalysisSettings as AnalysisSettings
from .tracker import TrackingState as TrackingState, track_document as track_document
