#!/usr/bin/env python3
"""SLiM/Eidos Language Server.

Provides diagnostics, hover, completion, signature help and document
symbols for .slim and .eidos files using the line-based analysis in
``slim_tools.analysis``.
"""

import argparse
import logging
import os
import sys
from typing import Optional

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from slim_tools.analysis.cache import DocumentCache
from slim_tools.analysis.documentation import (
    DocumentationError, DocumentationProvider, language_mode,
)
from slim_tools.analysis.settings import DEFAULT_SETTINGS, AnalysisSettings

from slim_tools.lsp.diagnostics import AnalysisResult, compute_diagnostics
from slim_tools.lsp.hover import get_hover_info
from slim_tools.lsp.completion import get_completions
from slim_tools.lsp.signature_help import get_signature_help
from slim_tools.lsp.symbols import get_document_symbols

DOCS_ENV_VAR = "SLIM_TOOLS_DOCS_DIR"

logging.basicConfig(level=logging.INFO, stream=sys.stderr)
logger = logging.getLogger("slim-tools.lsp")

server = LanguageServer("slim-tools", "0.1.0")

_docs = DocumentationProvider()
_settings = DEFAULT_SETTINGS
_cache = DocumentCache(DEFAULT_SETTINGS.cache_capacity)


def load_documentation(directory: Optional[str]) -> DocumentationProvider:
    """Load documentation, falling back to an empty dataset on any problem."""
    if not directory:
        logger.warning("No documentation directory given (--docs or $%s); "
                       "function and member checks are disabled", DOCS_ENV_VAR)
        return DocumentationProvider()
    if not os.path.isdir(directory):
        logger.error("Documentation directory not found: %s", directory)
        return DocumentationProvider()
    try:
        return DocumentationProvider.from_directory(directory)
    except DocumentationError as e:
        logger.error("Failed to load documentation: %s", e)
        return DocumentationProvider()


def configure(docs: Optional[DocumentationProvider] = None,
              settings: Optional[AnalysisSettings] = None):
    """Replace the documentation and/or settings; a new settings object resets the cache."""
    global _docs, _settings, _cache
    if docs is not None:
        _docs = docs
    if settings is not None:
        _settings = settings
        _cache = DocumentCache(settings.cache_capacity)


def _analyze(uri: str) -> Optional[AnalysisResult]:
    doc = server.workspace.get_text_document(uri)
    if doc is None:
        return None
    return compute_diagnostics(
        uri,
        doc.source,
        doc.version or 0,
        _docs,
        _cache,
        mode=language_mode(uri, doc.language_id),
        settings=_settings,
    )


def _validate_document(uri: str):
    """Analyze the current buffer and publish its diagnostics."""
    result = _analyze(uri)
    if result is None:
        return
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=result.diagnostics,
                                     version=result.version)
    )


@server.feature(lsp.INITIALIZE)
def initialize(params: lsp.InitializeParams):
    options = params.initialization_options if isinstance(params.initialization_options, dict) else None
    configure(settings=AnalysisSettings.from_options(options))
    if options and options.get("docsPath"):
        configure(docs=load_documentation(options["docsPath"]))


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams):
    _validate_document(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams):
    _validate_document(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
def did_save(params: lsp.DidSaveTextDocumentParams):
    _validate_document(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams):
    uri = params.text_document.uri
    _cache.delete(uri)
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=[])
    )


@server.feature(lsp.TEXT_DOCUMENT_HOVER)
def hover(params: lsp.HoverParams):
    result = _analyze(params.text_document.uri)
    if result:
        return get_hover_info(result, params.position, _docs)
    return None


@server.feature(
    lsp.TEXT_DOCUMENT_COMPLETION,
    lsp.CompletionOptions(trigger_characters=['.'])
)
def completion(params: lsp.CompletionParams):
    result = _analyze(params.text_document.uri)
    if result:
        return get_completions(result, params.position, _docs)
    return []


@server.feature(
    lsp.TEXT_DOCUMENT_SIGNATURE_HELP,
    lsp.SignatureHelpOptions(trigger_characters=['(', ','])
)
def signature_help(params: lsp.SignatureHelpParams):
    result = _analyze(params.text_document.uri)
    if result:
        return get_signature_help(result, params.position, _docs)
    return None


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams):
    result = _analyze(params.text_document.uri)
    if result:
        return get_document_symbols(result)
    return []


def main(argv=None):
    parser = argparse.ArgumentParser(description="SLiM/Eidos language server (stdio)")
    parser.add_argument("--docs", default=os.environ.get(DOCS_ENV_VAR),
                        help=f"directory holding the documentation JSON files (default: ${DOCS_ENV_VAR})")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.getLogger().setLevel(args.log_level)
    configure(docs=load_documentation(args.docs))
    logger.info("Starting slim-tools language server")
    server.start_io()


if __name__ == "__main__":
    main()
