"""Fixed tables describing the SLiM/Eidos language surface.

Everything here is immutable: frozensets, tuples, and mappings wrapped in
``MappingProxyType``. The documentation dataset (function signatures, class
members) lives in :mod:`slim_tools.analysis.documentation` and is injected
where it is needed.
"""

from types import MappingProxyType

DIAGNOSTIC_SOURCE = "slim-tools"

# ---------------------------------------------------------------------------
# Class names
# ---------------------------------------------------------------------------

SPECIES = "Species"
COMMUNITY = "Community"
INDIVIDUAL = "Individual"
HAPLOSOME = "Haplosome"
MUTATION = "Mutation"
CHROMOSOME = "Chromosome"
SUBPOPULATION = "Subpopulation"
MUTATION_TYPE = "MutationType"
GENOMIC_ELEMENT_TYPE = "GenomicElementType"
GENOMIC_ELEMENT = "GenomicElement"
INTERACTION_TYPE = "InteractionType"
LOG_FILE = "LogFile"
DICTIONARY = "Dictionary"
SLIM_EIDOS_BLOCK = "SLiMEidosBlock"
OBJECT = "Object"

MODEL_WF = "WF"
MODEL_NONWF = "nonWF"

# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------

CALLBACK_NAMES = (
    "initialize", "mutationEffect", "fitnessEffect", "mateChoice",
    "modifyChild", "recombination", "interaction", "reproduction",
    "mutation", "survival", "early", "late", "first",
)

# Case-insensitive header matches are mapped back to the documented spelling.
CANONICAL_CALLBACKS = MappingProxyType({name.lower(): name for name in CALLBACK_NAMES})

CALLBACK_PSEUDO_PARAMETERS = MappingProxyType({
    "mutationEffect()": MappingProxyType({
        "mut": MUTATION, "homozygous": "logical", "effect": "float",
    }),
    "fitnessEffect()": MappingProxyType({
        "individual": INDIVIDUAL, "subpop": SUBPOPULATION,
    }),
    "mateChoice()": MappingProxyType({
        "individual": INDIVIDUAL, "subpop": SUBPOPULATION,
        "sourceSubpop": SUBPOPULATION, "weights": "float",
    }),
    "modifyChild()": MappingProxyType({
        "child": INDIVIDUAL, "isCloning": "logical", "isSelfing": "logical",
        "parent1": INDIVIDUAL, "parent2": INDIVIDUAL,
        "subpop": SUBPOPULATION, "sourceSubpop": SUBPOPULATION,
    }),
    "recombination()": MappingProxyType({
        "individual": INDIVIDUAL, "haplosome1": HAPLOSOME, "haplosome2": HAPLOSOME,
        "subpop": SUBPOPULATION, "breakpoints": "integer",
    }),
    "interaction()": MappingProxyType({
        "distance": "float", "strength": "float",
        "receiver": INDIVIDUAL, "exerter": INDIVIDUAL,
    }),
    "reproduction()": MappingProxyType({
        "individual": INDIVIDUAL, "subpop": SUBPOPULATION,
    }),
    "mutation()": MappingProxyType({
        "mut": MUTATION, "haplosome": HAPLOSOME, "element": GENOMIC_ELEMENT,
        "originalNuc": "integer", "parent": INDIVIDUAL, "subpop": SUBPOPULATION,
    }),
    "survival()": MappingProxyType({
        "individual": INDIVIDUAL, "subpop": SUBPOPULATION,
        "surviving": "logical", "fitness": "float", "draw": "float",
    }),
})

# Pseudo-parameters whose names are unusual enough to flag outside their owner.
CALLBACK_SPECIFIC_PSEUDO_PARAMS = MappingProxyType({
    "effect": ("mutationEffect()",),
    "originalNuc": ("mutation()",),
    "surviving": ("survival()",),
    "draw": ("survival()",),
})

NONWF_ONLY_CALLBACKS = ("reproduction", "survival")
WF_ONLY_CALLBACKS = ("mateChoice",)

CALLBACKS_BLOCKING_EVALUATE = frozenset({
    "reproduction()", "mateChoice()", "mutation()",
    "recombination()", "modifyChild()", "survival()",
})

# ---------------------------------------------------------------------------
# Well-known identifiers
# ---------------------------------------------------------------------------

WELL_KNOWN_INSTANCES = MappingProxyType({
    "sim": SPECIES,
    "community": COMMUNITY,
    "species": SPECIES,
    "ind": INDIVIDUAL,
    "genome": HAPLOSOME,
    "mut": MUTATION,
    "muts": MUTATION,
    "mutation": MUTATION,
    "mutations": MUTATION,
    "chromosome": CHROMOSOME,
    "chr": CHROMOSOME,
})

RESERVED_IDENTIFIERS = frozenset({
    "sim", "community", "species", "function", "void", "integer", "float",
    "string", "logical", "object", "numeric", "NULL", "INF", "T", "F", "if",
    "else", "while", "for", "return", "break", "continue", "switch", "case",
    "default", "initialize", "early", "late", "fitness", "interaction",
    "mateChoice", "modifyChild", "mutation", "recombination", "reproduction",
    "survival", "first", "this", "self",
})

# Calls starting with one of these are expected to be documented builtins.
FUNCTION_PREFIXES = (
    "initialize", "mm", "nucleotide", "codon", "remove", "define", "sample",
    "point", "deviate", "parallel", "read", "write", "output", "treeSeq",
    "get", "is", "as", "set", "add", "spatialMap", "calc",
)

# ---------------------------------------------------------------------------
# Context restrictions
# ---------------------------------------------------------------------------

INITIALIZE_ONLY_FUNCTIONS = (
    "initializeMutationType", "initializeMutationTypeNuc",
    "initializeAncestralNucleotides", "initializeChromosome",
    "initializeGeneConversion", "initializeGenomicElement",
    "initializeGenomicElementType", "initializeHotspotMap",
    "initializeInteractionType", "initializeMutationRate",
    "initializeRecombinationRate", "initializeSLiMModelType",
    "initializeSpecies", "initializeSLiMOptions",
)

REPRODUCTION_ONLY_METHODS = (
    "addCloned", "addCrossed", "addSelfed",
    "addRecombinant", "addMultiRecombinant", "addEmpty",
)

NONWF_ONLY_METHODS = REPRODUCTION_ONLY_METHODS + (
    "takeMigrants", "removeSubpopulation", "killIndividuals",
)

METHODS_REQUIRING_EVALUATE = (
    "clippedIntegral", "distance", "distanceFromPoint", "drawByStrength",
    "interactingNeighborCount", "interactionDistance", "localPopulationDensity",
    "nearestNeighbors", "nearestNeighborsOfPoint", "nearestInteractingNeighbors",
    "neighborCount", "strength", "totalOfNeighborStrengths",
)

# ---------------------------------------------------------------------------
# Diagnostic messages
# ---------------------------------------------------------------------------

TYPE_NAMES = MappingProxyType({
    "constant": "Constant",
    "mutation_type": "Mutation type",
    "genomic_element_type": "Genomic element type",
    "interaction_type": "Interaction type",
    "subpopulation": "Subpopulation",
    "species": "Species",
    "script_block": "Script block",
})

RESERVED_CONTEXT_CONSTANT = "a global constant"
RESERVED_CONTEXT_SPECIES = "a species name"

MSG_UNEXPECTED_CLOSING_BRACE = "Unexpected closing brace"
MSG_UNCLOSED_BRACE = "Unclosed brace(s)"
MSG_MISSING_SEMICOLON = "Statement might be missing a semicolon"
MSG_UNCLOSED_STRING = "Unclosed string literal (missing closing quote)"
MSG_NO_EIDOS_EVENT = (
    "No Eidos event found to start the simulation. "
    "At least one first(), early(), or late() event is required."
)
MSG_OLD_SYNTAX = (
    'Event type must be specified explicitly. '
    'Use "1 early() { ... }" instead of "1 { ... }"'
)


def msg_event_parameters(event: str) -> str:
    return f"{event}() event needs 0 parameters"


def msg_duplicate_definition(type_name: str, ident: str, first_line: int) -> str:
    return f"{type_name} {ident} already defined (first defined at line {first_line})"


def msg_reserved_identifier(ident: str, context: str) -> str:
    return f"Identifier '{ident}' is reserved and cannot be used for {context}"


def msg_reserved_species_name(name: str) -> str:
    return f"Species name '{name}' is reserved and cannot be used"


def msg_undefined_reference(type_name: str, ident: str) -> str:
    return f"{type_name} {ident} may not be defined in the focal species"


def msg_method_not_found(method: str, class_name: str) -> str:
    return f"Method '{method}' does not exist on {class_name}"


def msg_property_not_found(prop: str, class_name: str) -> str:
    return f"Property '{prop}' does not exist on {class_name}"


def msg_function_not_found(name: str) -> str:
    return f"Function '{name}' not found in SLiM/Eidos documentation"


def msg_null_to_non_nullable(param: str, type_name: str, context: str = "") -> str:
    where = f" in {context}" if context else ""
    return f"NULL cannot be passed to non-nullable parameter '{param}' of type '{type_name}'{where}"


def msg_initialize_only(function: str) -> str:
    return f"Function '{function}()' can only be called within an initialize() callback"


def msg_reproduction_only(method: str) -> str:
    return f"Method '{method}()' can only be called within a reproduction() callback (nonWF models only)"


def msg_method_requires_nonwf(method: str) -> str:
    return f"Method '{method}()' requires a nonWF model, but model type is WF"


def msg_nonwf_only_method(method: str) -> str:
    return f"Method '{method}()' can only be used in nonWF models"


def msg_callback_model(callback: str, model: str) -> str:
    return f"Callback '{callback}()' can only be used in {model} models"


def msg_pseudo_parameter(param: str, callbacks) -> str:
    return f"Pseudo-parameter '{param}' is only available in {', '.join(callbacks)} callback(s)"


def msg_evaluate_blocked(callback: str) -> str:
    return ("InteractionType.evaluate() cannot be called during offspring generation "
            f"or viability/survival stages (current callback: {callback})")


def msg_query_requires_evaluate(method: str) -> str:
    return (f"InteractionType.{method}() requires evaluate() to be called first "
            "for the receiver and exerter subpopulations")


def msg_call_order(later: str, earlier: str) -> str:
    return f"{later}() must be called after {earlier}()"


def msg_missing_initializer(function: str, note: str = "") -> str:
    return f"Missing {function}() - required for genetics models{note}"


MSG_REPRODUCTION_REQUIRES_NONWF = (
    'reproduction() callback requires a nonWF model (call initializeSLiMModelType("nonWF"))'
)


def msg_symbol_in_initialize(symbol: str) -> str:
    return f'The "{symbol}" symbol is not defined within initialize() callbacks'
