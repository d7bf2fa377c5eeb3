"""Compiled regular expressions shared by the tracker and the rules."""

import re
from types import MappingProxyType

from .constants import CALLBACK_NAMES

# ---------------------------------------------------------------------------
# Callbacks and events
# ---------------------------------------------------------------------------

# Tick range before an event name: "10", "10:20", "1000:" or ":500".
_TICKS = r"(?:\d+\s*:\s*\d*|:\s*\d+|\d+)"

CALLBACK_HEADER = re.compile(
    r"(?:species\s+\w+\s+)?(?:s\d+\s+)?(?:" + _TICKS + r"\s+)?"
    r"\b(" + "|".join(CALLBACK_NAMES) + r")\s*\([^)]*\)\s*\{",
    re.IGNORECASE,
)

STANDARD_EVENT = re.compile(
    r"^\s*(?:(?:species|ticks)\s+\w+\s+)?(?:" + _TICKS + r"\s+)?(first|early|late)\s*\(",
    re.MULTILINE,
)
SPECIES_EVENT = re.compile(
    r"^\s*(?:(?:species|ticks)\s+\w+\s+)?s\d+\s+(?:" + _TICKS + r"\s+)?(first|early|late)\s*\(",
    re.MULTILINE,
)
SLIM_BLOCK = re.compile(r"^\d+\s+\w+\(\)")
SLIM_BLOCK_SPECIES = re.compile(r"^s\d+\s+\d+\s+\w+\(\)")
INITIALIZE_CALL = re.compile(r"\binitialize\s*\(")
EVENT_WITH_PARAMS = re.compile(r"\b(first|early|late)\s*\(\s*[^)\s][^)]*\)\s*\{")
OLD_SYNTAX = re.compile(r"^\s*(\d+)\s*\{")
SCRIPT_BLOCK_HEADER = re.compile(
    r"^\s*(?:species\s+\w+\s+)?(s\d+)\s+(?:" + _TICKS + r"\s+)?\w+\s*\("
)
REPRODUCTION_HEADER = re.compile(
    r"^\s*(?:species\s+\w+\s+)?(?:s\d+\s+)?(?:" + _TICKS + r"\s+)?(reproduction)\s*\("
)

# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

MODEL_TYPE = re.compile(r"initializeSLiMModelType\s*\(\s*[\"'](\w+)[\"']\s*\)")
DEFINE_CONSTANT = re.compile(r"defineConstant\s*\(\s*[\"'](\w+)[\"']\s*,")
CONSTANT_VALUE = re.compile(r"defineConstant\s*\(\s*[\"'][^\"']+[\"']\s*,\s*(.+?)(?:\)|$)")
SPECIES = re.compile(r"\bspecies\s+(\w+)\s+initialize")
USER_FUNCTION = re.compile(r"\bfunction\s+(?:\([^)]*\)\s*)?([a-zA-Z_]\w*)\s*\(")
INSTANCE = re.compile(r"(\w+)\s*=\s*new\s+(\w+)")
ASSIGNMENT = re.compile(r"(\w+)\s*=(?!=)\s*([^;]+)")


def _id_definition(function: str, prefix: str) -> re.Pattern:
    # Quoted id ("m1") in group 1, bare integer id (1) in group 2.
    return re.compile(
        function + r"\s*\(\s*(?:[\"']?(" + prefix + r"\d+)[\"']?|(\d+)\s*[,)])"
    )


MUTATION_TYPE_DEF = _id_definition(r"initializeMutationType(?:Nuc)?", "m")
GENOMIC_ELEMENT_TYPE_DEF = _id_definition(r"initializeGenomicElementType", "g")
INTERACTION_TYPE_DEF = _id_definition(r"initializeInteractionType", "i")
SUBPOPULATION_DEF = re.compile(
    r"\baddSubpop(?:Split)?\s*\(\s*(?:[\"'](\w+)[\"']|(\d+)\s*[,)])"
)


def id_from_match(match: re.Match, prefix: str) -> str:
    """Id named by a ``*_DEF`` match: ``"p1"`` and ``1`` both give ``p1``."""
    return match.group(1) or f"{prefix}{match.group(2)}"


def id_span(match: re.Match) -> tuple[int, int]:
    return match.span(1) if match.group(1) else match.span(2)


CALLBACK_REGISTRATIONS = tuple(
    re.compile(r"\b" + receiver + r"\.register" + kind + r"\(\s*[\"'](\w+)[\"']\s*,\s*[^)]*\)")
    for receiver, kind in (
        ("community", "EarlyEvent"),
        ("community", "FirstEvent"),
        ("community", "InteractionCallback"),
        ("community", "LateEvent"),
        ("species", "FitnessEffectCallback"),
        ("species", "MateChoiceCallback"),
        ("species", "ModifyChildCallback"),
        ("species", "MutationCallback"),
        ("species", "MutationEffectCallback"),
        ("species", "RecombinationCallback"),
        ("species", "ReproductionCallback"),
        ("species", "SurvivalCallback"),
    )
)

# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------

ID_REFERENCES = MappingProxyType({
    "m": re.compile(r"\b(m\d+)\b"),
    "g": re.compile(r"\b(g\d+)\b"),
    "p": re.compile(r"\b(p\d+)\b"),
    "i": re.compile(r"\b(i\d+)\b"),
})

# A creation call whose id is computed: neither a quoted literal nor a bare
# integer, or a quoted prefix concatenated with an expression.
_COMPUTED_ID = r"\s*\(\s*(?:(?![\"']|\d+\s*[,)])[^\s,)]|[\"'][^\"']*[\"']\s*\+)"

DYNAMIC_ID_CREATION = MappingProxyType({
    "m": re.compile(r"initializeMutationType(?:Nuc)?" + _COMPUTED_ID),
    "g": re.compile(r"initializeGenomicElementType" + _COMPUTED_ID),
    "p": re.compile(r"\baddSubpop(?:Split)?" + _COMPUTED_ID),
    "i": re.compile(r"initializeInteractionType" + _COMPUTED_ID),
})

# ---------------------------------------------------------------------------
# Identifiers and calls
# ---------------------------------------------------------------------------

METHOD_CALL = re.compile(r"\b(\w+)\s*\.\s*(\w+)\s*\(")
PROPERTY_ACCESS = re.compile(r"\b(\w+)\s*\.\s*(\w+)\b(?!\s*\()")
FUNCTION_CALL = re.compile(r"\b([a-zA-Z_]\w*)\s*\(")
CONTROL_FLOW_CALL = re.compile(
    r"\b(if|else|while|for|function|return|break|continue|switch|case|default)\s*\("
)
WORD_CHAR = re.compile(r"^\w")
VALID_TERMINATOR = re.compile(r"^[\s.,;:)\]}+\-*/%<>=!&|?\[]")
NULL_KEYWORD = re.compile(r"\b(NULL|null)\b")

# ---------------------------------------------------------------------------
# Statement shape (semicolon heuristic)
# ---------------------------------------------------------------------------

SINGLE_LINE_COMMENT = re.compile(r"//.*$")
INLINE_BLOCK_COMMENT = re.compile(r"/\*.*?\*/")
COMMENT_LINE = re.compile(r"^\s*/[/*]")
COMMENT_CONTINUATION = re.compile(r"^\s*\*")
EMPTY_LINE = re.compile(r"^\s*$")
CONTROL_FLOW_STATEMENT = re.compile(r"^\s*(if|else|while|for|do|switch|case|default)\b.*\)?\s*{?\s*$")
CALLBACK_DEFINITION_STATEMENT = re.compile(
    r"^(?:(?:species|ticks)\s+\w+\s+)?(?:s\d+\s+)?(?:" + _TICKS + r"\s+)?"
    r"(" + "|".join(CALLBACK_NAMES) + r"|fitness)\s*\([^)]*\)\s*{?\s*$"
)
SLIM_EVENT_BLOCK = re.compile(r"^\s*(?:ticks\s+\w+\s+)?(s\d+\s+)?" + _TICKS + r"\s+(\w+)\s*\(\)\s*$")
FUNCTION_DEFINITION_STATEMENT = re.compile(r"^\s*function\s*\(.*\)\s*\w+\s*\(.*\)\s*{?\s*$")

# ---------------------------------------------------------------------------
# Signatures
# ---------------------------------------------------------------------------

RETURN_TYPE = re.compile(r"^\(([^)]+)\)")
PARAMETER_LIST = re.compile(r"\(([^)]*(?:\([^)]*\))?[^)]*)\)$")
OPTIONAL_PARAMETER = re.compile(r"^\[([^\]]+)\]")
TYPE_NAME_PARAM = re.compile(r"^([\w<>]+\$?)\s+(\w+)(?:\s*=\s*(.+))?$")
TYPE_ONLY = re.compile(r"^([\w<>]+\$?)")
NULLABLE_TYPE = re.compile(r"^N[^<]*")
NULLABLE_OBJECT_TYPE = re.compile(r"^No<")
