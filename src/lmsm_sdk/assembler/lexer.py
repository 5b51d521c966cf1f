"""
LMSM Assembly Language Lexer
============================

This module splits LMSM assembly source into a stream of word tokens.

LMSM source is a free-form, whitespace-delimited token stream. There are
no comments, no punctuation and no sigils: every run of non-whitespace
characters is one token. Line breaks are not significant to the grammar;
they are tracked only so errors can point at the right place.

Whether a token is a label, a mnemonic or an operand is decided by the
parser, which looks each token up in the mnemonic table.

Example
-------
>>> from lmsm_sdk.assembler.lexer import Lexer
>>> lexer = Lexer("loop INP\\n  BRA loop", "example.asm")
>>> for token in lexer.tokenize():
...     print(token)
Token('loop', 1:1)
Token('INP', 1:6)
Token('BRA', 2:3)
Token('loop', 2:7)
"""

from dataclasses import dataclass
from typing import Iterator

from lmsm_sdk.errors import SourceLocation


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single word token from the source code.

    Attributes:
        value: The token text
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source file
    """
    value: str
    line: int
    column: int
    filename: str

    def __repr__(self) -> str:
        return f"Token({self.value!r}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_number(self) -> bool:
        return is_number(self.value)


def is_number(text: str) -> bool:
    """
    Check if a token is a decimal integer literal.

    A literal is an optional leading '-' followed by one or more decimal
    digits. A lone '-' is not a number.
    """
    digits = text[1:] if text.startswith("-") else text
    return bool(digits) and all("0" <= c <= "9" for c in digits)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes LMSM assembly source code.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    WHITESPACE = " \t\r\n\f\v"

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code, left to right.

        Yields:
            Token objects, one per whitespace-delimited word
        """
        while not self._at_end():
            if self._peek() in self.WHITESPACE:
                self._advance()
                continue
            yield self._scan_word()

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """
        Consume and return the current character, advancing position.

        Updates line and column tracking.
        """
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1

        return char

    def _scan_word(self) -> Token:
        start_line = self._line
        start_column = self._column
        start = self._pos

        while not self._at_end() and self._peek() not in self.WHITESPACE:
            self._advance()

        return Token(
            value=self.source[start:self._pos],
            line=start_line,
            column=start_column,
            filename=self.filename,
        )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def get_line(self, line_number: int) -> str:
        """
        Get a line of source text (1-indexed), for error reporting.

        Returns an empty string for line numbers outside the source.
        """
        lines = self.source.splitlines()
        if 1 <= line_number <= len(lines):
            return lines[line_number - 1]
        return ""
