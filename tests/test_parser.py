"""Tests for the module-info-patch lexer and parser."""

from __future__ import annotations

import pytest

from modpatch.errors import PatchSyntaxError
from modpatch.patch.lexer import TokenType, tokenize
from modpatch.patch.parser import is_valid_name, parse_patch

FULL_PATCH = """\
// Patch for the tests of the application module
patch-module org.example.app {
  add-modules org.example.extra, ALL-MODULE-PATH;
  limit-modules java.base, java.sql;
  add-reads org.junit.jupiter.api, TEST-MODULE-PATH;
  /* qualified exports */
  add-exports org.example.app.internal to org.junit.platform.commons, ALL-UNNAMED;
  add-exports org.example.app.spi to TEST-MODULE-PATH;
  add-opens org.example.app.internal to org.junit.platform.commons;
}
"""


def test_tokenize_tracks_lines():
    tokens = list(tokenize("patch-module a {\n  add-reads b;\n}\n"))
    assert [(t.type, t.text, t.line) for t in tokens] == [
        (TokenType.WORD, "patch-module", 1),
        (TokenType.WORD, "a", 1),
        (TokenType.LBRACE, "{", 1),
        (TokenType.WORD, "add-reads", 2),
        (TokenType.WORD, "b", 2),
        (TokenType.SEMICOLON, ";", 2),
        (TokenType.RBRACE, "}", 3),
        (TokenType.EOF, "", 4),
    ]


def test_tokenize_skips_comments():
    text = "a // line comment\n/* block\ncomment */ b/*x*/,c//end"
    tokens = list(tokenize(text))
    assert [(t.text, t.line) for t in tokens] == [
        ("a", 1),
        ("b", 3),
        (",", 3),
        ("c", 3),
        ("", 3),
    ]


def test_tokenize_unterminated_comment():
    with pytest.raises(PatchSyntaxError) as excinfo:
        list(tokenize("a\n/* never closed"))
    assert excinfo.value.line == 2


def test_parse_full_patch():
    patch = parse_patch(FULL_PATCH)
    assert patch.module_name == "org.example.app"
    assert list(patch.add_modules) == ["org.example.extra", "ALL-MODULE-PATH"]
    assert list(patch.limit_modules) == ["java.base", "java.sql"]
    assert list(patch.add_reads) == ["org.junit.jupiter.api"]
    assert patch.read_all_test_module_path
    assert not patch.add_all_test_module_path
    assert list(patch.add_exports) == ["org.example.app.internal", "org.example.app.spi"]
    assert list(patch.add_exports["org.example.app.internal"]) == [
        "org.junit.platform.commons",
        "ALL-UNNAMED",
    ]
    assert list(patch.add_exports["org.example.app.spi"]) == []
    assert list(patch.exports_to_test_module_path) == ["org.example.app.spi"]
    assert list(patch.add_opens["org.example.app.internal"]) == [
        "org.junit.platform.commons"
    ]


def test_parse_without_whitespace():
    patch = parse_patch("patch-module a{add-reads b,c;add-exports p to d;}")
    assert list(patch.add_reads) == ["b", "c"]
    assert list(patch.add_exports["p"]) == ["d"]


def test_shorthand_flags_are_false_unless_requested():
    patch = parse_patch("patch-module ok { add-reads X; }")
    assert not patch.read_all_test_module_path
    assert not patch.add_all_test_module_path


def test_add_reads_test_module_path():
    patch = parse_patch("patch-module ok { add-reads X, TEST-MODULE-PATH; }")
    assert patch.read_all_test_module_path
    assert list(patch.add_reads) == ["X"]


def test_add_modules_test_module_path():
    patch = parse_patch("patch-module ok { add-modules TEST-MODULE-PATH; }")
    assert patch.add_all_test_module_path
    assert list(patch.add_modules) == []


def test_repeated_exports_are_merged():
    patch = parse_patch(
        "patch-module a { add-exports p to b; add-exports p to c, b; }"
    )
    assert list(patch.add_exports["p"]) == ["b", "c"]


def test_reject_module_name_starting_with_digit():
    with pytest.raises(PatchSyntaxError) as excinfo:
        parse_patch("patch-module 9bad { add-reads X; }")
    assert 'Invalid module name "9bad"' in str(excinfo.value)
    assert excinfo.value.line == 1


def test_reject_missing_comma():
    with pytest.raises(PatchSyntaxError) as excinfo:
        parse_patch("patch-module ok { add-reads X Y; }")
    assert excinfo.value.token == "Y"


def test_reject_missing_semicolon():
    with pytest.raises(PatchSyntaxError):
        parse_patch("patch-module ok { add-reads X }")


def test_reject_unknown_keyword_with_line():
    text = "patch-module ok {\n  add-reads X;\n\n  add-uses Y;\n}"
    with pytest.raises(PatchSyntaxError) as excinfo:
        parse_patch(text)
    assert excinfo.value.line == 4
    assert 'Unknown keyword "add-uses"' in str(excinfo.value)
    assert str(excinfo.value).endswith("(line 4)")


def test_reject_missing_braces():
    with pytest.raises(PatchSyntaxError, match='Expected "\\{"'):
        parse_patch("patch-module ok add-reads X; }")
    with pytest.raises(PatchSyntaxError, match="end of file"):
        parse_patch("patch-module ok { add-reads X;")


def test_reject_trailing_content():
    with pytest.raises(PatchSyntaxError, match="Expected end of file"):
        parse_patch("patch-module ok { } patch-module other { }")


def test_reject_missing_header():
    with pytest.raises(PatchSyntaxError, match='Expected "patch-module"'):
        parse_patch("")
    with pytest.raises(PatchSyntaxError, match='Expected "patch-module"'):
        parse_patch("module ok { }")


def test_reject_missing_to():
    with pytest.raises(PatchSyntaxError, match='Expected "to" but found "X"'):
        parse_patch("patch-module ok { add-exports p X; }")


def test_special_cases_are_directive_specific():
    with pytest.raises(PatchSyntaxError, match="TEST-MODULE-PATH"):
        parse_patch("patch-module ok { limit-modules TEST-MODULE-PATH; }")
    with pytest.raises(PatchSyntaxError, match="ALL-UNNAMED"):
        parse_patch("patch-module ok { add-reads ALL-UNNAMED; }")
    with pytest.raises(PatchSyntaxError, match="TEST-MODULE-PATH"):
        parse_patch("patch-module ok { add-opens p to TEST-MODULE-PATH; }")


def test_reject_invalid_package_name():
    with pytest.raises(PatchSyntaxError, match='Invalid package name "1pkg"'):
        parse_patch("patch-module ok { add-exports 1pkg to X; }")


def test_valid_names():
    assert is_valid_name("a")
    assert is_valid_name("org.example.app")
    assert is_valid_name("a.b$c")
    assert is_valid_name("_internal.x1")
    assert not is_valid_name("")
    assert not is_valid_name("a..b")
    assert not is_valid_name("a.")
    assert not is_valid_name(".a")
    assert not is_valid_name("a-b")
    assert not is_valid_name("9bad")


def test_currency_symbols_in_names():
    assert is_valid_name("€uro.price$")
    assert is_valid_name("a.£b")
    patch = parse_patch("patch-module €uro { add-reads $lib; }")
    assert patch.module_name == "€uro"
    assert list(patch.add_reads) == ["$lib"]
