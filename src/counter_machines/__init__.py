"""
Counter Machines - Front End for Counter Machine Programs
=========================================================

This package turns the source text of counter machine programs into a
syntax tree for a downstream evaluator.

A counter machine program manipulates unbounded registers with three
instructions (INCR, DECR, JEZ), REPEAT blocks, and user-defined
functions with typed arguments:

    DEFINE ADD reg:REG n:NUM AS
        REPEAT n
            INCR reg
        END
    END

    ADD r1 3;

Main Components
---------------
- **lexer**: scanner turning text into tokens (never fails)
- **rules**: parser-combinator primitives (expect, one_of, kleene_star)
- **parser**: the grammar and the top-level parse loop
- **ast**: immutable syntax tree nodes and a pretty printer
- **errors**: ParseError hierarchy

Pipeline
--------
    Source → tokenize() → [Token] → parse() → Program

Quick Start
-----------
    >>> from counter_machines import tokenize, parse
    >>> program = parse(tokenize("INCR r"))
    >>> program.statements
    (IncrStatement(register=Register(name='r')),)

Or use the command-line tool to inspect a file:
    $ cmparse --ast program.cm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from counter_machines.lexer import Lexer, Token, TokenType, tokenize
from counter_machines.stream import TokenStream
from counter_machines.parser import Parser, parse, parse_source
from counter_machines.config import ParserOptions
from counter_machines.errors import (
    CounterMachineError,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEOFError,
    FailedRuleError,
)
from counter_machines.ast import (
    Program,
    FunctionDefinition,
    FunctionArg,
    ValueType,
    Statement,
    RepeatStatement,
    JezStatement,
    IncrStatement,
    DecrStatement,
    CallStatement,
    Register,
    Label,
    Value,
    TextValue,
    NumberValue,
    ASTPrinter,
)

__all__ = [
    # Version info
    "__version__",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "TokenStream",
    "Parser",
    "parse",
    "parse_source",
    "ParserOptions",
    # Exception hierarchy
    "CounterMachineError",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEOFError",
    "FailedRuleError",
    # AST
    "Program",
    "FunctionDefinition",
    "FunctionArg",
    "ValueType",
    "Statement",
    "RepeatStatement",
    "JezStatement",
    "IncrStatement",
    "DecrStatement",
    "CallStatement",
    "Register",
    "Label",
    "Value",
    "TextValue",
    "NumberValue",
    "ASTPrinter",
]
