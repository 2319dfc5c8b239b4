"""
Counter Machines Error Hierarchy
================================

This module defines the exception hierarchy for the counter machine
front end. All exceptions inherit from CounterMachineError, allowing
callers to catch every front-end error with a single except clause.

Exception Hierarchy
-------------------
CounterMachineError (base)
└── ParseError - the token stream does not match the grammar
    ├── UnexpectedTokenError - a token was found, but not the one required
    ├── UnexpectedEOFError - a token was required, but input was exhausted
    └── FailedRuleError - a composite rule failed as a whole

The scanner never raises: every input text has a tokenization.

Error Message Format
--------------------
Tokens carry no line/column information, so errors are located by the
index of the offending token in the token list:

    program.cm: error: unexpected token 'AS' (at token 4)
    hint: expected text

Inside the combinators (one_of, kleene_star) these exceptions are ordinary
control-flow signals used for backtracking. Only the first error that
escapes every combinator reaches the caller of parse().
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class CounterMachineError(Exception):
    """
    Base exception for all counter machine front-end errors.

        try:
            program = parse_source(text)
        except CounterMachineError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Parse Errors
# =============================================================================

class ParseError(CounterMachineError):
    """
    Base exception for grammar failures.

    Attributes:
        message: The error description
        hint: A suggestion for fixing the error (optional)
        position: Index of the token where parsing failed (optional)
        filename: Name of the source being parsed (optional)
        committed: True if the failure must not be backtracked over
    """

    def __init__(
        self,
        message: str,
        hint: Optional[str] = None,
        position: Optional[int] = None,
        filename: Optional[str] = None,
    ):
        self.message = message
        self.hint = hint
        self.position = position
        self.filename = filename
        # Set once the failing rule has consumed past its commit point
        self.committed = False
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with source name, token index and hint.

        Example output:
            program.cm: error: unexpected end of input (at token 1)
            hint: expected text
        """
        parts = []

        head = f"error: {self.message}"
        if self.filename:
            head = f"{self.filename}: {head}"
        if self.position is not None:
            head = f"{head} (at token {self.position})"
        parts.append(head)

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def located(self, filename: Optional[str]) -> "ParseError":
        """
        Attach a source name to the error and refresh its message.

        Returns the same exception so it can be re-raised directly.
        """
        self.filename = filename
        self.args = (self._format_message(),)
        return self


class UnexpectedTokenError(ParseError):
    """
    A primitive rule found a token, but not the one it requires.

    Example:
        DEFINE ADD reg:REG INCR reg END    # 'AS' missing before the body
    """

    def __init__(
        self,
        expected: str,
        actual: object,
        position: Optional[int] = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"unexpected token {actual}",
            hint=f"expected {expected}",
            position=position,
        )


class UnexpectedEOFError(ParseError):
    """
    A primitive rule needed a token, but the input was exhausted.

    Example:
        JEZ            # register and label missing
    """

    def __init__(self, expected: str, position: Optional[int] = None):
        self.expected = expected
        super().__init__(
            "unexpected end of input",
            hint=f"expected {expected}",
            position=position,
        )


class FailedRuleError(ParseError):
    """
    A composite rule failed without a single pinpointable token mismatch.

    Raised when no alternative of a one_of() rule matches, or when a rule's
    own check fails (for example an unknown argument type keyword).

    Attributes:
        rule_name: Human-readable name of the rule (e.g. "function-arg")
        definition: The rule's grammar definition
    """

    def __init__(
        self,
        rule_name: str,
        definition: str,
        reason: Optional[str] = None,
        position: Optional[int] = None,
    ):
        self.rule_name = rule_name
        self.definition = definition
        self.reason = reason

        message = f"failed to parse {rule_name}"
        if reason:
            message = f"{message}: {reason}"

        super().__init__(
            message,
            hint=f"{rule_name} ::= {definition}",
            position=position,
        )
