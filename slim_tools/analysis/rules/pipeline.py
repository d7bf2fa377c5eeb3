"""Runs the rule list over one document."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from lsprotocol import types as lsp

from ..documentation import MODE_EIDOS, MODE_SLIM, DocumentationProvider
from ..settings import DEFAULT_SETTINGS, AnalysisSettings
from ..tracker import TrackingState
from .context import ContextRestrictionRule, InteractionQueryRule
from .core import Rule, RuleContext
from .definitions import DefinitionRule
from .functions import FunctionCallRule
from .initialization import InitializationRule
from .members import MemberAccessRule
from .nulls import NullArgumentRule
from .references import UndefinedReferenceRule
from .structure import BraceBalanceRule, ScriptStructureRule, SemicolonRule

logger = logging.getLogger("slim-tools.pipeline")

DEFAULT_RULES: tuple[Rule, ...] = (
    DefinitionRule(),
    ScriptStructureRule(),
    BraceBalanceRule(),
    SemicolonRule(),
    UndefinedReferenceRule(),
    MemberAccessRule(),
    FunctionCallRule(),
    NullArgumentRule(),
    ContextRestrictionRule(),
    InteractionQueryRule(),
    InitializationRule(),
)


class DiagnosticPipeline:
    def __init__(self, rules: Sequence[Rule] = DEFAULT_RULES):
        self.rules = list(rules)

    def run(self, context: RuleContext) -> list[lsp.Diagnostic]:
        """Concatenate every enabled rule's diagnostics, in rule order.

        A rule that raises is logged and contributes nothing; the others
        still run.
        """
        diagnostics: list[lsp.Diagnostic] = []
        for rule in self.rules:
            if not context.settings.rule_enabled(rule.name):
                continue
            if rule.slim_only and context.mode == MODE_EIDOS:
                continue
            try:
                found = list(rule.evaluate(context))
            except Exception:
                logger.exception("Rule %s failed", rule.name)
                continue
            diagnostics.extend(found)
        return diagnostics


def validate_document(source: str, docs: DocumentationProvider, mode: str = MODE_SLIM,
                      settings: AnalysisSettings = DEFAULT_SETTINGS,
                      tracking: Optional[TrackingState] = None,
                      pipeline: Optional[DiagnosticPipeline] = None) -> list[lsp.Diagnostic]:
    """Track ``source`` (unless ``tracking`` is given) and run the pipeline over it."""
    context = RuleContext.build(source, docs, mode, settings, tracking)
    return (pipeline or DiagnosticPipeline()).run(context)
