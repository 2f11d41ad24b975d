"""Tests for the LSP server — diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from mwparser.lsp import _validate


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.wiki") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="wikitext", version=0, text=source)
        )

    return ls, published, put


class TestSyntaxErrors:
    def test_stray_bracket(self, lsp_env) -> None:
        ls, published, put = lsp_env
        source = "see [http://x.org x]] here"
        put(source)
        _validate(ls, "file:///test.wiki")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "expected one of" in d.message
        assert "newline" in d.message
        assert d.source == "mwparser"
        assert d.range.start.line == 0
        assert d.range.start.character == source.index("]]") + 1


class TestCleanDocument:
    def test_valid_document(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("== Title ==\nSome ''body'' text with {{tpl|a=b}}.")
        _validate(ls, "file:///test.wiki")

        assert len(published) == 1
        assert published[0].diagnostics == []


class TestPositionConversion:
    def test_error_on_second_line(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("Valid first line\nab''c")
        _validate(ls, "file:///test.wiki")

        d = published[0].diagnostics[0]
        # Error is at line 2, column 6 (1-based) → LSP line 1, character 5
        assert d.range.start.line == 1
        assert d.range.start.character == 5
        assert d.range.end.character == 6
