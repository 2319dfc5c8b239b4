"""
Grammar Rule Combinators
========================

This module is the small parser-combinator framework the grammar is
built from. A Rule is plain data: a human-readable name, a grammar
definition used in diagnostics, and a function that consumes a prefix of
a TokenStream. Composite rules are built by combining simpler ones.

Rule Contract
-------------
rule.parse(stream) either returns a value and leaves the stream after
the consumed tokens, or raises a ParseError. After a failure the stream
position is unspecified: a caller that wants to try something else must
snapshot the position with stream.mark() before calling the rule.

Primitives
----------
| Rule                 | Consumes             | Returns        |
|----------------------|----------------------|----------------|
| expect(TokenType.AS) | one 'AS' token       | the Token      |
| TEXT                 | one TEXT token       | its string     |
| NUMBER               | one NUMBER token     | its integer    |

Every primitive consumes exactly one token on success.

Combinators
-----------
- one_of(a, b, ...): tries each alternative in order from the same
  position; the first success wins. Order matters, alternatives may
  overlap.
- kleene_star(rule): applies rule until it fails; never fails itself and
  returns the results as a tuple (possibly empty).
- lazy(factory, ...): defers the lookup of a rule so productions can be
  recursive.

Commit Points
-------------
A rule enters a `with committed():` block once the tokens it has seen
identify it beyond doubt (JEZ after the 'JEZ' keyword, for example). A
failure raised inside that block is marked as committed, and one_of and
kleene_star let committed failures through instead of backtracking over
them. Uncommitted failures are backtracked exactly as described above.
This keeps the error a user sees close to the actual mistake:

    JEZ           ->  unexpected end of input, expected text
    instead of    ->  failed to parse statement

Example
-------
>>> from counter_machines.lexer import tokenize
>>> from counter_machines.stream import TokenStream
>>> from counter_machines.rules import TEXT, NUMBER, one_of, kleene_star
>>> value = one_of(NUMBER, TEXT, name="value")
>>> values = kleene_star(value)
>>> values.parse(TokenStream(tokenize("1 two 3 ;")))
(1, 'two', 3)
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, Optional, TypeVar

from counter_machines.errors import (
    ParseError,
    UnexpectedTokenError,
    UnexpectedEOFError,
    FailedRuleError,
)
from counter_machines.lexer import Token, TokenType
from counter_machines.stream import TokenStream


logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Rule
# =============================================================================

@dataclass(frozen=True)
class Rule(Generic[T]):
    """
    A named, self-describing unit of grammar.

    Attributes:
        name: Human-readable rule name (e.g. "function-arg")
        definition: Grammar definition shown in diagnostics
        consume: Function that parses a prefix of a TokenStream
    """
    name: str
    definition: str
    consume: Callable[[TokenStream], T] = field(repr=False, compare=False)

    def parse(self, stream: TokenStream) -> T:
        """
        Apply the rule at the stream's current position.

        Returns:
            The value produced by the rule

        Raises:
            ParseError: If the tokens do not match the rule
        """
        if stream.trace:
            logger.debug(f"Trying {self.name} at token {stream.position}")
        return self.consume(stream)


def rule(name: str, definition: str) -> Callable[[Callable[[TokenStream], T]], Rule[T]]:
    """
    Decorator turning a consume function into a Rule.

        @rule("incr", "INCR <text>")
        def incr(stream):
            ...
    """
    def decorate(consume: Callable[[TokenStream], T]) -> Rule[T]:
        return Rule(name, definition, consume)
    return decorate


@contextmanager
def committed() -> Iterator[None]:
    """
    Mark every ParseError raised inside the block as committed.

    Committed failures pass through one_of() and kleene_star() unchanged.
    """
    try:
        yield
    except ParseError as error:
        error.committed = True
        raise


# =============================================================================
# Primitive Rules
# =============================================================================

def _describe(token_type: TokenType) -> str:
    """Name a token type the way error messages expect it."""
    if token_type in (TokenType.TEXT, TokenType.NUMBER):
        return token_type.spelling
    return f"'{token_type.spelling}'"


def take(stream: TokenStream, token_type: TokenType) -> Token:
    """
    Consume one token of the given type.

    Raises:
        UnexpectedEOFError: If the stream is exhausted
        UnexpectedTokenError: If the next token has another type
    """
    token = stream.peek()
    if token is None:
        raise UnexpectedEOFError(_describe(token_type), position=stream.position)
    if token.type != token_type:
        raise UnexpectedTokenError(
            _describe(token_type),
            token,
            position=stream.position,
        )
    return stream.advance()


def expect(token_type: TokenType) -> Rule[Token]:
    """Rule consuming one keyword or punctuation token of the given type."""
    description = _describe(token_type)
    return Rule(
        token_type.spelling,
        description,
        lambda stream: take(stream, token_type),
    )


TEXT: Rule[str] = Rule(
    "text",
    "<text>",
    lambda stream: take(stream, TokenType.TEXT).value,
)

NUMBER: Rule[int] = Rule(
    "number",
    "<number>",
    lambda stream: take(stream, TokenType.NUMBER).value,
)


# =============================================================================
# Combinators
# =============================================================================

def one_of(
    *rules: Rule,
    name: Optional[str] = None,
    definition: Optional[str] = None,
) -> Rule:
    """
    Ordered choice: the first alternative that matches wins.

    Each alternative starts from the same snapshot. A failed alternative's
    position is restored before the next one is tried. If every
    alternative fails, the combined rule raises FailedRuleError.

    Args:
        rules: Alternatives, in priority order
        name: Rule name for diagnostics (default: the alternatives joined)
        definition: Grammar definition (default: the alternatives joined)
    """
    if not rules:
        raise ValueError("one_of() needs at least one alternative")

    joined = " | ".join(alternative.name for alternative in rules)
    name = name or joined
    definition = definition or joined

    def consume(stream: TokenStream):
        start = stream.mark()
        for alternative in rules:
            try:
                return alternative.parse(stream)
            except ParseError as error:
                if error.committed:
                    raise
                stream.reset(start)
        raise FailedRuleError(
            name,
            definition,
            reason="no alternative matched",
            position=start,
        )

    return Rule(name, definition, consume)


def kleene_star(
    item: Rule[T],
    name: Optional[str] = None,
    definition: Optional[str] = None,
) -> Rule[tuple[T, ...]]:
    """
    Zero or more repetitions of a rule.

    Applies the rule until it fails, restoring the position of the failed
    attempt. Uncommitted failures only end the repetition, so the combined
    rule succeeds with however many results were collected.

    Raises:
        FailedRuleError: If the rule succeeds without consuming a token,
            which would otherwise repeat forever
    """
    name = name or f"({item.name})*"
    definition = definition or f"({item.definition})*"

    def consume(stream: TokenStream) -> tuple[T, ...]:
        results: list[T] = []
        while True:
            start = stream.mark()
            try:
                value = item.parse(stream)
            except ParseError as error:
                if error.committed:
                    raise
                stream.reset(start)
                return tuple(results)
            if stream.position == start:
                raise FailedRuleError(
                    name,
                    definition,
                    reason=f"{item.name} matched without consuming input",
                    position=start,
                )
            results.append(value)

    return Rule(name, definition, consume)


def lazy(factory: Callable[[], Rule[T]], name: str, definition: str) -> Rule[T]:
    """
    Reference a rule that is defined later.

    Used for recursive productions, e.g. a REPEAT body made of statements
    where a statement may itself be a REPEAT.
    """
    return Rule(name, definition, lambda stream: factory().parse(stream))
