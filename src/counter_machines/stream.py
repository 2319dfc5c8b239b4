"""
Token Stream Cursor
===================

A TokenStream is a forward-only cursor over an immutable token sequence.
Rules read it with peek() and consume from it with advance(); backtracking
is done by snapshotting the cursor with mark() and restoring it with
reset(). The tokens themselves are never modified, so one token tuple can
back any number of independent streams. A single stream belongs to one
parse and must not be shared.
"""

from typing import Iterable, Optional

from counter_machines.lexer import Token


class TokenStream:
    """
    Cursor over a token sequence.

    Attributes:
        tokens: The shared, read-only token tuple
        position: Index of the next token to consume
        trace: Whether rule attempts are logged
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        position: int = 0,
        trace: bool = False,
    ):
        self.tokens: tuple[Token, ...] = tuple(tokens)
        self.position = position
        # Log every rule attempt made against this stream
        self.trace = trace

    def __repr__(self) -> str:
        return f"TokenStream(position={self.position}, length={len(self.tokens)})"

    def at_end(self) -> bool:
        """Return True if every token has been consumed."""
        return self.position >= len(self.tokens)

    def peek(self) -> Optional[Token]:
        """Return the next token without consuming it, or None at the end."""
        if self.at_end():
            return None
        return self.tokens[self.position]

    def advance(self) -> Token:
        """
        Consume and return the next token.

        Raises:
            IndexError: If the stream is exhausted. Rules check peek() first.
        """
        if self.at_end():
            raise IndexError("advance() past the end of the token stream")
        token = self.tokens[self.position]
        self.position += 1
        return token

    def mark(self) -> int:
        """Snapshot the cursor for a later reset()."""
        return self.position

    def reset(self, mark: int) -> None:
        """Restore the cursor to a snapshot taken with mark()."""
        self.position = mark

    def fork(self) -> "TokenStream":
        """Return an independent cursor over the same tokens."""
        return TokenStream(self.tokens, self.position, self.trace)
