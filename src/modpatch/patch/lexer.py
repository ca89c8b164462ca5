"""Tokenizer for ``module-info-patch.txt`` files."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

from modpatch.errors import PatchSyntaxError

# Characters that are tokens by themselves and terminate words.
_PUNCTUATION = "{};,"


class TokenType(enum.Enum):
    WORD = "word"
    LBRACE = "{"
    RBRACE = "}"
    SEMICOLON = ";"
    COMMA = ","
    EOF = "end of file"


_PUNCTUATION_TYPES = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    line: int

    def describe(self) -> str:
        """Human-readable form used in error messages."""
        if self.type is TokenType.EOF:
            return "end of file"
        return f'"{self.text}"'


def tokenize(text: str) -> Iterator[Token]:
    """Yield the tokens of *text*, ending with a single ``EOF`` token.

    ``//`` and ``/* */`` comments are skipped. Every token carries the
    1-based line on which it starts.
    """
    pos = 0
    line = 1
    length = len(text)
    while pos < length:
        c = text[pos]
        if c == "\n":
            line += 1
            pos += 1
        elif c.isspace():
            pos += 1
        elif text.startswith("//", pos):
            end = text.find("\n", pos)
            pos = length if end < 0 else end
        elif text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            if end < 0:
                raise PatchSyntaxError("Unterminated comment", line, "/*")
            line += text.count("\n", pos, end)
            pos = end + 2
        elif c in _PUNCTUATION:
            yield Token(_PUNCTUATION_TYPES[c], c, line)
            pos += 1
        else:
            start = pos
            while pos < length:
                c = text[pos]
                if c.isspace() or c in _PUNCTUATION:
                    break
                if text.startswith("//", pos) or text.startswith("/*", pos):
                    break
                pos += 1
            yield Token(TokenType.WORD, text[start:pos], line)
    yield Token(TokenType.EOF, "", line)
