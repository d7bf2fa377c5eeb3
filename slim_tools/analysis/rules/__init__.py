from .core import Rule, RuleContext, make_diagnostic
from .context import ContextRestrictionRule, InteractionQueryRule
from .definitions import DefinitionRule
from .functions import FunctionCallRule
from .initialization import InitializationRule
from .members import MemberAccessRule
from .nulls import NullArgumentRule
from .pipeline import DEFAULT_RULES, DiagnosticPipeline, validate_document
from .references import UndefinedReferenceRule
from .structure import BraceBalanceRule, ScriptStructureRule, SemicolonRule, should_have_semicolon

__all__ = [
    "Rule", "RuleContext", "make_diagnostic",
    "DefinitionRule", "ScriptStructureRule", "BraceBalanceRule", "SemicolonRule",
    "UndefinedReferenceRule", "MemberAccessRule", "FunctionCallRule", "NullArgumentRule",
    "ContextRestrictionRule", "InteractionQueryRule", "InitializationRule",
    "DEFAULT_RULES", "DiagnosticPipeline", "validate_document", "should_have_semicolon",
]
