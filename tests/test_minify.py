"""Tests for polyfills_loader.minify."""

from __future__ import annotations

import pytest

import polyfills_loader.minify as minify_module
from polyfills_loader.errors import MinifyError, PolyfillFileError
from polyfills_loader.minify import minify, minify_or_raise


def test_minify_strips_comments_and_whitespace() -> None:
    result = minify("var answer = 42; // the answer\n\n\nvar other = 1;\n")

    assert result.ok
    assert "the answer" not in result.code
    assert len(result.code) < len("var answer = 42; // the answer\n\n\nvar other = 1;\n")


def test_minify_reports_empty_output(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(minify_module.rjsmin, "jsmin", lambda content: "")

    result = minify("var a = 1;")
    assert not result.ok
    assert result.error == "minifier returned empty output"


def test_minify_of_empty_source_is_ok() -> None:
    assert minify("").ok


def test_minify_or_raise_is_a_file_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(minify_module.rjsmin, "jsmin", lambda content: None)

    with pytest.raises(PolyfillFileError):
        minify_or_raise("var a = 1;", name="demo")
    with pytest.raises(MinifyError, match="demo"):
        minify_or_raise("var a = 1;", name="demo")
