"""Parser for the ``module-info-patch.txt`` language.

Grammar::

    patch-file := "patch-module" module-name "{" directive* "}"
    directive  := "add-modules"   name-list ";"
                | "limit-modules" name-list ";"
                | "add-reads"     name-list ";"
                | "add-exports"   package-name "to" name-list ";"
                | "add-opens"     package-name "to" name-list ";"
    name-list  := name ("," name)*

Besides module names, some lists accept special keywords. ``ALL-MODULE-PATH``
and ``ALL-UNNAMED`` are understood by the Java compiler. ``TEST-MODULE-PATH``
is specific to this tool and is replaced by the modules of the test
dependencies once they have been resolved.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Iterator
from dataclasses import dataclass, field

from modpatch.errors import PatchSyntaxError
from modpatch.model import OrderedSet
from modpatch.patch.lexer import Token, TokenType, tokenize

TEST_MODULE_PATH = "TEST-MODULE-PATH"
ALL_UNNAMED = "ALL-UNNAMED"
ALL_MODULE_PATH = "ALL-MODULE-PATH"

ADD_MODULES_SPECIAL_CASES = frozenset({ALL_MODULE_PATH, TEST_MODULE_PATH})
ADD_READS_SPECIAL_CASES = frozenset({TEST_MODULE_PATH})
ADD_EXPORTS_SPECIAL_CASES = frozenset({ALL_UNNAMED, TEST_MODULE_PATH})


@dataclass
class ParsedPatch:
    """Everything declared by one ``module-info-patch.txt`` file."""

    module_name: str
    add_modules: OrderedSet = field(default_factory=OrderedSet)
    limit_modules: OrderedSet = field(default_factory=OrderedSet)
    add_reads: OrderedSet = field(default_factory=OrderedSet)
    add_exports: dict[str, OrderedSet] = field(default_factory=dict)
    add_opens: dict[str, OrderedSet] = field(default_factory=dict)
    add_all_test_module_path: bool = False
    read_all_test_module_path: bool = False
    exports_to_test_module_path: OrderedSet = field(default_factory=OrderedSet)


def is_valid_name(name: str) -> bool:
    """Return True if *name* is a dot-separated sequence of Java identifiers."""
    if not name:
        return False
    for segment in name.split("."):
        # Java also accepts currency symbols such as '$' wherever Python accepts '_'
        segment = "".join(
            "_" if unicodedata.category(c) == "Sc" else c for c in segment
        )
        if not segment.isidentifier():
            return False
    return True


def parse_patch(text: str) -> ParsedPatch:
    """Parse the content of a patch file.

    Raises:
        PatchSyntaxError: if *text* does not follow the grammar. Nothing
            is returned for a malformed file, so a partially parsed patch
            can never be applied.
    """
    return _Parser(tokenize(text)).parse()


class _Parser:
    def __init__(self, tokens: Iterator[Token]) -> None:
        self._tokens = tokens
        self._token = next(tokens)

    def _advance(self) -> Token:
        token = self._token
        if token.type is not TokenType.EOF:
            self._token = next(self._tokens)
        return token

    def _error(self, message: str, token: Token | None = None) -> PatchSyntaxError:
        token = token or self._token
        return PatchSyntaxError(message, token.line, token.text or None)

    def _expect_word(self, expected: str) -> None:
        token = self._token
        if token.type is not TokenType.WORD or token.text != expected:
            raise self._error(f'Expected "{expected}" but found {token.describe()}')
        self._advance()

    def _expect(self, expected: TokenType) -> None:
        token = self._token
        if token.type is not expected:
            raise self._error(f'Expected "{expected.value}" but found {token.describe()}')
        self._advance()

    def _name(self, kind: str, special_cases: frozenset[str] = frozenset()) -> str:
        token = self._token
        if token.type is not TokenType.WORD:
            raise self._error(f"Expected a {kind} name but found {token.describe()}")
        if token.text not in special_cases and not is_valid_name(token.text):
            raise self._error(f'Invalid {kind} name "{token.text}"')
        self._advance()
        return token.text

    def parse(self) -> ParsedPatch:
        self._expect_word("patch-module")
        patch = ParsedPatch(module_name=self._name("module"))
        self._expect(TokenType.LBRACE)
        while self._token.type is TokenType.WORD:
            keyword = self._advance()
            if keyword.text == "add-modules":
                self._name_list(patch.add_modules, ADD_MODULES_SPECIAL_CASES)
                if patch.add_modules.remove_if_present(TEST_MODULE_PATH):
                    patch.add_all_test_module_path = True
            elif keyword.text == "limit-modules":
                self._name_list(patch.limit_modules)
            elif keyword.text == "add-reads":
                self._name_list(patch.add_reads, ADD_READS_SPECIAL_CASES)
                if patch.add_reads.remove_if_present(TEST_MODULE_PATH):
                    patch.read_all_test_module_path = True
            elif keyword.text == "add-exports":
                package, targets = self._qualified(
                    patch.add_exports, ADD_EXPORTS_SPECIAL_CASES
                )
                if targets.remove_if_present(TEST_MODULE_PATH):
                    patch.exports_to_test_module_path.add(package)
            elif keyword.text == "add-opens":
                self._qualified(patch.add_opens)
            else:
                raise self._error(f'Unknown keyword "{keyword.text}"', keyword)
        self._expect(TokenType.RBRACE)
        if self._token.type is not TokenType.EOF:
            raise self._error(
                f"Expected end of file but found {self._token.describe()}"
            )
        return patch

    def _name_list(
        self, target: OrderedSet, special_cases: frozenset[str] = frozenset()
    ) -> None:
        target.add(self._name("module", special_cases))
        while self._token.type is TokenType.COMMA:
            self._advance()
            target.add(self._name("module", special_cases))
        if self._token.type is not TokenType.SEMICOLON:
            raise self._error(
                f"Missing ';' or ',' before {self._token.describe()}"
            )
        self._advance()

    def _qualified(
        self,
        target: dict[str, OrderedSet],
        special_cases: frozenset[str] = frozenset(),
    ) -> tuple[str, OrderedSet]:
        package = self._name("package")
        self._expect_word("to")
        values = target.setdefault(package, OrderedSet())
        self._name_list(values, special_cases)
        return package, values
