"""Tests for signature help and document symbols."""

from types import MappingProxyType

from lsprotocol import types as lsp

from slim_tools.analysis.cache import DocumentCache
from slim_tools.analysis.documentation import (
    ClassDoc, DocumentationProvider, FunctionDoc, MethodDoc,
)
from slim_tools.lsp.diagnostics import compute_diagnostics
from slim_tools.lsp.signature_help import find_call_context, get_signature_help
from slim_tools.lsp.symbols import find_block_end, get_document_symbols

DOCS = DocumentationProvider(
    functions={
        "initializeMutationRate": FunctionDoc(
            "initializeMutationRate", "initializeMutationRate(numeric rates, [Ni ends = NULL])",
            "void", "Set the mutation rate.",
        ),
        "sum": FunctionDoc("sum", "sum(lif x)", "numeric$", "Sum of x."),
    },
    classes={
        "Subpopulation": ClassDoc(
            name="Subpopulation",
            methods=MappingProxyType({
                "setMigrationRates": MethodDoc(
                    "setMigrationRates",
                    "(void)setMigrationRates(io<Subpopulation> sourceSubpops, numeric rates)",
                    "Set migration rates.",
                ),
            }),
        ),
        "Object": ClassDoc(
            name="Object",
            methods=MappingProxyType({"str": MethodDoc("str", "(void)str(void)")}),
        ),
    },
)


def analyze(source: str):
    return compute_diagnostics("file:///model.slim", source, 1, DOCS, DocumentCache())


def signature_at(source: str, line: int = 0, character=None):
    if character is None:
        character = len(source.split("\n")[line])
    return get_signature_help(analyze(source), lsp.Position(line=line, character=character), DOCS)


def param_labels(help_: lsp.SignatureHelp) -> list[str]:
    return [p.label for p in help_.signatures[0].parameters]


def outline(source: str) -> list[tuple[str, lsp.SymbolKind]]:
    return [(s.name, s.kind) for s in get_document_symbols(analyze(source))]


def line_span(r: lsp.Range) -> tuple[int, int, int, int]:
    return (r.start.line, r.start.character, r.end.line, r.end.character)


# --- Call context ---

class TestFindCallContext:
    def test_plain_call(self):
        assert find_call_context("sum(1, 2", 8) == ("sum", None, 1)

    def test_method_call(self):
        assert find_call_context("p1.setMigrationRates(", 21) == ("setMigrationRates", "p1", 0)

    def test_nested_call_commas_do_not_count(self):
        line = "initializeMutationRate(sum(1, 2), "
        assert find_call_context(line, len(line)) == ("initializeMutationRate", None, 1)

    def test_commas_in_strings_do_not_count(self):
        line = 'sum("a,b", '
        assert find_call_context(line, len(line)).active_parameter == 1

    def test_closed_call(self):
        line = "sum(1);"
        assert find_call_context(line, len(line)) is None

    def test_inside_inner_call(self):
        line = "initializeMutationRate(sum(1, "
        assert find_call_context(line, len(line)) == ("sum", None, 1)


# --- Signature help ---

class TestSignatureHelp:
    def test_function(self):
        result = signature_at("    initializeMutationRate(1e-7, ")
        sig = result.signatures[0]
        assert sig.label == "(void)initializeMutationRate(numeric rates, [Ni ends = NULL])"
        assert param_labels(result) == ["numeric rates", "Ni ends = NULL"]
        assert result.active_parameter == 1
        assert "Set the mutation rate." in sig.documentation.value
        assert "Only valid in `initialize()` callbacks." in sig.documentation.value

    def test_optional_parameter_documented(self):
        result = signature_at("initializeMutationRate(")
        docs = [p.documentation.value for p in result.signatures[0].parameters]
        assert docs == ["Type: `numeric`", "Type: `Ni` (optional)"]

    def test_active_parameter_clamped(self):
        assert signature_at("sum(1, 2, 3, ").active_parameter == 0

    def test_method_on_resolved_receiver(self):
        result = signature_at("p1.setMigrationRates(p2, ")
        sig = result.signatures[0]
        assert sig.label == "(void)setMigrationRates(io<Subpopulation> sourceSubpops, numeric rates)"
        assert param_labels(result) == ["io<Subpopulation> sourceSubpops", "numeric rates"]
        assert result.active_parameter == 1
        assert sig.documentation.value.startswith("**Subpopulation.setMigrationRates**")

    def test_object_method_fallback(self):
        result = signature_at("p1.str(")
        assert result.signatures[0].label == "(void)str(void)"
        assert "**Object.str**" in result.signatures[0].documentation.value

    def test_callback_pseudo_parameters(self):
        result = signature_at("mutationEffect(")
        assert result.signatures[0].label == "mutationEffect()"
        assert param_labels(result) == ["mut", "homozygous", "effect"]

    def test_nothing_to_show(self):
        assert signature_at("foo.bar(") is None
        assert signature_at("bogus(") is None
        assert signature_at("sum(1);") is None
        assert signature_at("x = 1;", line=5, character=0) is None


# --- Document symbols ---

MODEL = '''initialize() {
    defineConstant("K", 10);
}
function (integer)double(integer x) {
    return x * 2;
}
s1 1000: late() {
    catn(K);
}
// 2 early() {
'''


class TestDocumentSymbols:
    def test_outline(self):
        assert outline(MODEL) == [
            ("initialize()", lsp.SymbolKind.Event),
            ("K", lsp.SymbolKind.Constant),
            ("double", lsp.SymbolKind.Function),
            ("s1 1000: late()", lsp.SymbolKind.Event),
        ]

    def test_ranges(self):
        symbols = {s.name: s for s in get_document_symbols(analyze(MODEL))}
        assert line_span(symbols["initialize()"].range) == (0, 0, 2, 1)
        assert line_span(symbols["initialize()"].selection_range) == (0, 0, 0, 10)
        assert line_span(symbols["K"].selection_range) == (1, 20, 1, 21)
        assert line_span(symbols["double"].range) == (3, 0, 5, 1)
        assert line_span(symbols["double"].selection_range) == (3, 18, 3, 24)
        assert line_span(symbols["s1 1000: late()"].range) == (6, 0, 8, 1)

    def test_details(self):
        symbols = {s.name: s for s in get_document_symbols(analyze(MODEL))}
        assert symbols["s1 1000: late()"].detail == "late()"
        assert symbols["double"].detail == "function (integer)double(integer x)"

    def test_one_line_callback(self):
        symbols = get_document_symbols(analyze("1 early() { x = 1; }"))
        assert [s.name for s in symbols] == ["1 early()"]
        assert line_span(symbols[0].range) == (0, 0, 0, 20)

    def test_empty_document(self):
        assert get_document_symbols(analyze("")) == []


class TestFindBlockEnd:
    def test_nested(self):
        code = ["function (void)f(void) {", "  if (x) {", "  }", "}", "x;"]
        assert find_block_end(code, 0) == 3

    def test_brace_on_next_line(self):
        assert find_block_end(["function (void)f(void)", "{", "}"], 0) == 2

    def test_unclosed_runs_to_end(self):
        assert find_block_end(["function (void)f(void) {", "  x = 1;"], 0) == 1
