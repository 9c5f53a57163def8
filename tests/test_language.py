"""Tests for language classification."""

import pytest

from app.analysis.language import classify_language, file_extension


@pytest.mark.parametrize(
    "filename, language",
    [
        ("app.js", "javascript"),
        ("Component.jsx", "javascript"),
        ("index.ts", "typescript"),
        ("View.tsx", "typescript"),
        ("main.py", "python"),
        ("Main.java", "java"),
        ("engine.cpp", "c++"),
        ("kernel.c", "c"),
        ("server.go", "go"),
        ("main.rs", "rust"),
    ],
)
def test_known_extensions(filename, language):
    assert classify_language(filename) == language


def test_extension_is_case_insensitive():
    assert classify_language("APP.JS") == classify_language("app.js") == "javascript"
    assert classify_language("Main.Rs") == "rust"


def test_uses_last_dot():
    assert classify_language("archive.tar.py") == "python"
    assert classify_language("script.py.bak") == "unknown"


def test_unknown_extension_is_not_an_error():
    assert classify_language("notes.txt") == "unknown"
    assert classify_language("Makefile") == "unknown"
    assert classify_language("trailing.") == "unknown"
    assert classify_language("") == "unknown"


def test_same_extension_same_label():
    assert classify_language("a/b/one.go") == classify_language("two.go")


def test_file_extension():
    assert file_extension("x.TSX") == "tsx"
    assert file_extension("noext") == ""
