"""
Counter Machine Lexer (Tokenizer)
=================================

This module implements the scanner for counter machine programs.
It converts source text into a list of tokens for the parser.

Token Categories
----------------
- Keywords: INCR, DECR, JEZ, DEFINE, AS, END, REPEAT
- Punctuation: ':' (argument type separator), ';' (call terminator)
- Numbers: signed base-10 integers (42, -1, +7)
- Text: every other word (register names, labels, function names)

Scanning Rules
--------------
Words are maximal runs of non-whitespace characters. ':' and ';' always
end the current word and form tokens of their own, so "reg:REG" and
"ADD2 r;" split without surrounding whitespace. Keyword matching is exact
and case-sensitive: "Incr" and "INCRX" are text.

The scanner is total. There is no invalid lexical input, so tokenize()
never raises, and empty input produces an empty list. Tokens carry no
source positions.

Example Usage
-------------
>>> from counter_machines.lexer import tokenize
>>> tokenize("DEFINE ADD reg:REG AS INCR reg END")
[Token(DEFINE), Token(TEXT, 'ADD'), Token(TEXT, 'reg'), Token(COLON),
 Token(TEXT, 'REG'), Token(AS), Token(INCR), Token(TEXT, 'reg'), Token(END)]
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Union


logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for counter machine programs.

    Keywords get a dedicated type each so the grammar can match them
    directly. Register names and labels are not distinguished here; both
    are TEXT and only their grammatical position tells them apart.
    """

    # === Instruction Keywords ===
    INCR = auto()           # INCR <register>
    DECR = auto()           # DECR <register>
    JEZ = auto()            # JEZ <register> <label>

    # === Block Keywords ===
    DEFINE = auto()         # DEFINE <name> <args> AS ... END
    AS = auto()             # separates a function header from its body
    END = auto()            # closes DEFINE and REPEAT blocks
    REPEAT = auto()         # REPEAT <value> ... END

    # === Punctuation ===
    COLON = auto()          # :
    SEMICOLON = auto()      # ;

    # === Payload Tokens ===
    TEXT = auto()           # any other word
    NUMBER = auto()         # signed base-10 integer

    @property
    def spelling(self) -> str:
        """Source spelling of the token type, used in diagnostics."""
        return _SPELLINGS.get(self, self.name.lower())


# =============================================================================
# Keyword Mapping
# =============================================================================

# Exact source spelling of every fixed token
KEYWORDS: dict[str, TokenType] = {
    "INCR": TokenType.INCR,
    "DECR": TokenType.DECR,
    "JEZ": TokenType.JEZ,
    "DEFINE": TokenType.DEFINE,
    "END": TokenType.END,
    "AS": TokenType.AS,
    "REPEAT": TokenType.REPEAT,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
}

_SPELLINGS: dict[TokenType, str] = {kind: text for text, kind in KEYWORDS.items()}

# Characters that are always tokens of their own
PUNCTUATION = frozenset(":;")

# Numbers are limited to the signed 64-bit range; larger literals are text
NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")
NUMBER_MIN = -(2 ** 63)
NUMBER_MAX = 2 ** 63 - 1


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of a counter machine program.

    Tokens are immutable values compared structurally, so
    Token(TokenType.TEXT, "r") == Token(TokenType.TEXT, "r").

    Attributes:
        type: The TokenType classification
        value: The word for TEXT, the integer for NUMBER, None otherwise
    """
    type: TokenType
    value: Union[str, int, None] = None

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type.name})"
        return f"Token({self.type.name}, {self.value!r})"

    def __str__(self) -> str:
        """Describe the token the way it appears in error messages."""
        if self.type == TokenType.TEXT:
            return f"text '{self.value}'"
        if self.type == TokenType.NUMBER:
            return f"number {self.value}"
        return f"'{self.type.spelling}'"


def token_from_string(text: str) -> Token:
    """
    Resolve a complete word to its token.

    Keywords and punctuation map to their dedicated types; a word that
    parses as a signed base-10 integer becomes NUMBER; anything else is
    TEXT.

    Args:
        text: A non-empty word without whitespace

    Returns:
        The corresponding Token
    """
    token_type = KEYWORDS.get(text)
    if token_type is not None:
        return Token(token_type)

    number = _parse_number(text)
    if number is not None:
        return Token(TokenType.NUMBER, number)

    return Token(TokenType.TEXT, text)


def _parse_number(text: str) -> Optional[int]:
    """Return the integer value of text, or None if it is not a number."""
    if not NUMBER_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if not NUMBER_MIN <= value <= NUMBER_MAX:
        return None
    return value


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes counter machine source text.

    A single left-to-right pass accumulates characters into a pending
    buffer. Whitespace and punctuation flush the buffer; punctuation is
    then emitted as its own token.

    Usage:
        lexer = Lexer(source_text)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The source text being tokenized
    """

    def __init__(self, source: str):
        """
        Initialize the lexer with source text.

        Args:
            source: The program text to tokenize
        """
        self.source = source

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source text.

        Yields:
            Token objects in source order
        """
        pending: list[str] = []

        def flush() -> Iterator[Token]:
            """Emit the pending word as a token, if there is one."""
            if not pending:
                return
            word = "".join(pending)
            pending.clear()
            yield token_from_string(word)

        for char in self.source:
            if char.isspace():
                yield from flush()
            elif char in PUNCTUATION:
                yield from flush()
                yield token_from_string(char)
            else:
                pending.append(char)

        # Clean up any remaining input
        yield from flush()


def tokenize(text: str) -> list[Token]:
    """
    Convert source text to a list of tokens.

    This is a convenience function around Lexer. It never raises.

    Args:
        text: Program source text

    Returns:
        The tokens in source order (empty for blank input)
    """
    tokens = list(Lexer(text).tokenize())
    logger.debug(f"Tokenized {len(text)} characters into {len(tokens)} tokens")
    return tokens
