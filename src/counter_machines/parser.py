"""
Counter Machine Parser
======================

This module implements the grammar of counter machine programs on top of
the combinators in counter_machines.rules, plus the top-level parse loop
that builds a Program.

Grammar
-------
program              ::= (function-definition | statement)*
function-definition  ::= DEFINE <text> (function-arg)* AS (statement)* END
function-arg         ::= <text> ':' ('NUM' | 'REG' | 'LABEL')
statement            ::= repeat | jez | incr | decr | call
repeat               ::= REPEAT value (statement)* END
jez                  ::= JEZ <text> <text>
incr                 ::= INCR <text>
decr                 ::= DECR <text>
call                 ::= <text> (value)* ';'
value                ::= <number> | <text>

Alternatives are tried in the order written. Program text has no
terminator: parsing stops when the tokens run out, and a statement cut
off by the end of input is an error.

Error Handling
--------------
The first failure that escapes the combinators aborts the parse. There is
no recovery and no partial Program. Each rule commits once its leading
tokens are consumed (see counter_machines.rules), so errors point at the
token that is actually wrong.

Example Usage
-------------
>>> from counter_machines.parser import parse_source
>>> program = parse_source('''
... DEFINE ADD2 reg:REG AS
...     INCR reg
...     INCR reg
... END
... ADD2 r1;
... ''')
>>> program.statements
(CallStatement(name='ADD2', args=(TextValue(text='r1'),)),)
"""

import logging
from typing import Iterable, Optional

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
    TextValue,
    NumberValue,
)
from counter_machines.config import ParserOptions
from counter_machines.errors import ParseError, FailedRuleError
from counter_machines.lexer import Token, TokenType, tokenize
from counter_machines.rules import (
    Rule,
    TEXT,
    NUMBER,
    rule,
    expect,
    one_of,
    kleene_star,
    lazy,
    committed,
)
from counter_machines.stream import TokenStream


logger = logging.getLogger(__name__)


# =============================================================================
# Keyword and Punctuation Rules
# =============================================================================

DEFINE = expect(TokenType.DEFINE)
AS = expect(TokenType.AS)
END = expect(TokenType.END)
REPEAT = expect(TokenType.REPEAT)
JEZ = expect(TokenType.JEZ)
INCR = expect(TokenType.INCR)
DECR = expect(TokenType.DECR)
COLON = expect(TokenType.COLON)
SEMICOLON = expect(TokenType.SEMICOLON)


# =============================================================================
# Values
# =============================================================================

@rule("number", "<number>")
def number_value(stream: TokenStream) -> NumberValue:
    return NumberValue(NUMBER.parse(stream))


@rule("text", "<text>")
def text_value(stream: TokenStream) -> TextValue:
    return TextValue(TEXT.parse(stream))


# Numbers first: a NUMBER token is never TEXT, but the order is part of
# the grammar and documented as such
value: Rule = one_of(
    number_value,
    text_value,
    name="value",
    definition="<number> | <text>",
)

values = kleene_star(value)


# =============================================================================
# Statements
# =============================================================================

STATEMENT_DEFINITION = "repeat | jez | incr | decr | call"

# Statement bodies nest (REPEAT inside REPEAT), so the reference is lazy
statements = kleene_star(
    lazy(lambda: statement, "statement", STATEMENT_DEFINITION),
)


@rule("repeat", "REPEAT <value> (<statement>)* END")
def repeat(stream: TokenStream) -> RepeatStatement:
    REPEAT.parse(stream)
    with committed():
        count = value.parse(stream)
        body = statements.parse(stream)
        END.parse(stream)
    return RepeatStatement(count, body)


@rule("jez", "JEZ <text> <text>")
def jez(stream: TokenStream) -> JezStatement:
    JEZ.parse(stream)
    with committed():
        register = Register(TEXT.parse(stream))
        label = Label(TEXT.parse(stream))
    return JezStatement(register, label)


@rule("incr", "INCR <text>")
def incr(stream: TokenStream) -> IncrStatement:
    INCR.parse(stream)
    with committed():
        return IncrStatement(Register(TEXT.parse(stream)))


@rule("decr", "DECR <text>")
def decr(stream: TokenStream) -> DecrStatement:
    DECR.parse(stream)
    with committed():
        return DecrStatement(Register(TEXT.parse(stream)))


@rule("call", "<text> (<value>)* ';'")
def call(stream: TokenStream) -> CallStatement:
    name = TEXT.parse(stream)
    with committed():
        args = values.parse(stream)
        SEMICOLON.parse(stream)
    return CallStatement(name, args)


# repeat must stay ahead of call: the order is significant
statement: Rule = one_of(
    repeat,
    jez,
    incr,
    decr,
    call,
    name="statement",
    definition=STATEMENT_DEFINITION,
)


# =============================================================================
# Function Definitions
# =============================================================================

FUNCTION_ARG_NAME = "function-arg"
FUNCTION_ARG_DEFINITION = "<text> ':' <text in {NUM, REG, LABEL}>"


@rule(FUNCTION_ARG_NAME, FUNCTION_ARG_DEFINITION)
def function_arg(stream: TokenStream) -> FunctionArg:
    name = TEXT.parse(stream)
    COLON.parse(stream)
    with committed():
        type_position = stream.position
        type_name = TEXT.parse(stream)
        try:
            arg_type = ValueType(type_name)
        except ValueError:
            raise FailedRuleError(
                FUNCTION_ARG_NAME,
                FUNCTION_ARG_DEFINITION,
                reason=f"unknown argument type '{type_name}'",
                position=type_position,
            ) from None
    return FunctionArg(name, arg_type)


function_args = kleene_star(function_arg)


@rule("function-definition", "DEFINE <text> (<arg>)* AS (<statement>)* END")
def function_definition(stream: TokenStream) -> FunctionDefinition:
    DEFINE.parse(stream)
    with committed():
        name = TEXT.parse(stream)
        args = function_args.parse(stream)
        AS.parse(stream)
        body = statements.parse(stream)
        END.parse(stream)

    logger.debug(
        f"Parsed function '{name}' ({len(args)} args, {len(body)} statements)"
    )
    return FunctionDefinition(name, args, body)


# =============================================================================
# Parser
# =============================================================================

class Parser:
    """
    Parses a token list into a Program.

    Each call to parse() runs on its own TokenStream, so one Parser (and
    one token list) can be parsed any number of times.

    Usage:
        parser = Parser(tokenize(source))
        program = parser.parse()

    Attributes:
        tokens: The token tuple being parsed
        options: Parser configuration
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        options: Optional[ParserOptions] = None,
    ):
        self.tokens: tuple[Token, ...] = tuple(tokens)
        self.options = options or ParserOptions()

    def parse(self) -> Program:
        """
        Parse every token into a Program.

        A DEFINE token starts a function definition; anything else starts
        a statement. Parsing continues until the tokens are exhausted.

        Nesting deeper than the interpreter recursion limit allows is
        reported as a FailedRuleError on the statement rule.

        Returns:
            The complete Program

        Raises:
            ParseError: On the first grammar failure
        """
        stream = TokenStream(self.tokens, trace=self.options.trace_rules)
        definitions: list[FunctionDefinition] = []
        top_level: list[Statement] = []

        try:
            try:
                while not stream.at_end():
                    if stream.peek().type == TokenType.DEFINE:
                        definitions.append(function_definition.parse(stream))
                    else:
                        top_level.append(statement.parse(stream))
            except RecursionError:
                raise FailedRuleError(
                    "statement",
                    STATEMENT_DEFINITION,
                    reason="nesting too deep",
                    position=stream.position,
                ) from None
        except ParseError as error:
            error.located(self.options.filename)
            logger.debug(f"Parse of {self.options.filename} failed: {error.message}")
            raise

        logger.debug(
            f"Parsed {self.options.filename}: {len(definitions)} functions, "
            f"{len(top_level)} statements"
        )
        return Program(tuple(definitions), tuple(top_level))


def parse(
    tokens: Iterable[Token],
    options: Optional[ParserOptions] = None,
) -> Program:
    """
    Parse a token list into a Program.

    Args:
        tokens: Tokens from counter_machines.lexer.tokenize()
        options: Parser configuration (defaults if None)

    Returns:
        The complete Program

    Raises:
        ParseError: On the first grammar failure
    """
    return Parser(tokens, options).parse()


def parse_source(source: str, options: Optional[ParserOptions] = None) -> Program:
    """
    Tokenize and parse program text.

    This is a convenience function that combines lexing and parsing.

    Args:
        source: Program source text
        options: Parser configuration (defaults if None)

    Returns:
        The complete Program

    Raises:
        ParseError: On the first grammar failure
    """
    return parse(tokenize(source), options)
