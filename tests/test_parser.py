"""
Counter Machine Parser Test Suite
=================================

Tests for the grammar and the top-level parse loop.

Test Organization
-----------------
- TestStatements: single instructions, calls and REPEAT blocks
- TestFunctionDefinitions: DEFINE blocks and typed arguments
- TestPrograms: complete programs mixing definitions and statements
- TestParseErrors: error kinds, positions and messages
- TestParserBehavior: reuse, immutability, logging and options
"""

import dataclasses
import logging

import pytest
from counter_machines.ast import (
    Program,
    FunctionDefinition,
    FunctionArg,
    ValueType,
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
from counter_machines.errors import (
    CounterMachineError,
    ParseError,
    UnexpectedTokenError,
    UnexpectedEOFError,
    FailedRuleError,
)
from counter_machines.lexer import Token, TokenType, tokenize
from counter_machines.parser import Parser, parse, parse_source


ADD2_PROGRAM = """
DEFINE ADD2 reg:REG AS
    INCR reg
    INCR reg
END

ADD2 register;
ADD2 register2 ;
"""


def statements(source: str) -> tuple:
    """Parse source that contains only top-level statements."""
    program = parse(tokenize(source))
    assert program.function_definitions == ()
    return program.statements


# =============================================================================
# Statement Tests
# =============================================================================

class TestStatements:
    """Tests for the statement alternatives."""

    def test_incr(self):
        """INCR needs no terminator."""
        assert statements("INCR r") == (IncrStatement(Register("r")),)

    def test_decr(self):
        """DECR takes a single register."""
        assert statements("DECR r") == (DecrStatement(Register("r")),)

    def test_jez(self):
        """First operand is the register, second the label."""
        assert statements("JEZ r done") == (
            JezStatement(Register("r"), Label("done")),
        )

    def test_call_with_text_argument(self):
        """A word argument becomes a TextValue."""
        assert statements("ADD2 r;") == (
            CallStatement("ADD2", (TextValue("r"),)),
        )

    def test_call_without_arguments(self):
        """A call may have no arguments."""
        assert statements("RESET;") == (CallStatement("RESET", ()),)

    def test_call_mixed_arguments(self):
        """Numbers and words are both values."""
        assert statements("MOVE 1 x -2 ;") == (
            CallStatement(
                "MOVE",
                (NumberValue(1), TextValue("x"), NumberValue(-2)),
            ),
        )

    def test_repeat_with_number(self):
        """A numeric count becomes a NumberValue."""
        assert statements("REPEAT 3 INCR r END") == (
            RepeatStatement(NumberValue(3), (IncrStatement(Register("r")),)),
        )

    def test_repeat_with_name(self):
        """The count may be a name, evaluated later."""
        assert statements("REPEAT n DECR r END") == (
            RepeatStatement(TextValue("n"), (DecrStatement(Register("r")),)),
        )

    def test_empty_repeat(self):
        """A REPEAT body may be empty."""
        assert statements("REPEAT 0 END") == (RepeatStatement(NumberValue(0), ()),)

    def test_nested_repeat(self):
        source = """
            REPEAT a
                REPEAT 2
                    INCR r
                    ADD r;
                END
                JEZ r out
            END
        """
        assert statements(source) == (
            RepeatStatement(
                TextValue("a"),
                (
                    RepeatStatement(
                        NumberValue(2),
                        (
                            IncrStatement(Register("r")),
                            CallStatement("ADD", (TextValue("r"),)),
                        ),
                    ),
                    JezStatement(Register("r"), Label("out")),
                ),
            ),
        )

    def test_statement_sequence(self):
        """Statements follow each other with no separator."""
        assert statements("INCR a DECR b JEZ a l F a 1;") == (
            IncrStatement(Register("a")),
            DecrStatement(Register("b")),
            JezStatement(Register("a"), Label("l")),
            CallStatement("F", (TextValue("a"), NumberValue(1))),
        )


# =============================================================================
# Function Definition Tests
# =============================================================================

class TestFunctionDefinitions:
    """Tests for DEFINE blocks."""

    def test_no_arguments(self):
        """A definition may take no arguments and have an empty body."""
        program = parse_source("DEFINE NOP AS END")
        assert program.function_definitions == (FunctionDefinition("NOP", (), ()),)
        assert program.statements == ()

    def test_all_argument_types(self):
        """REG, LABEL and NUM map to ValueType members."""
        program = parse_source("DEFINE F r:REG l:LABEL n:NUM AS END")
        assert program.function_definitions[0].args == (
            FunctionArg("r", ValueType.REGISTER),
            FunctionArg("l", ValueType.LABEL),
            FunctionArg("n", ValueType.NUMBER),
        )

    def test_spaced_colon(self):
        """The colon may be surrounded by whitespace."""
        program = parse_source("DEFINE F r : REG AS END")
        assert program.function_definitions[0].args == (
            FunctionArg("r", ValueType.REGISTER),
        )

    def test_body_with_repeat(self):
        source = """
            DEFINE ADD reg:REG num:NUM AS
                REPEAT num
                    INCR reg
                END
            END
        """
        assert parse_source(source).function_definitions == (
            FunctionDefinition(
                "ADD",
                (
                    FunctionArg("reg", ValueType.REGISTER),
                    FunctionArg("num", ValueType.NUMBER),
                ),
                (
                    RepeatStatement(
                        TextValue("num"),
                        (IncrStatement(Register("reg")),),
                    ),
                ),
            ),
        )

    def test_duplicate_definitions_allowed(self):
        """Duplicate names are kept, in declaration order."""
        program = parse_source("DEFINE F AS INCR a END DEFINE F AS DECR a END")
        assert [d.name for d in program.function_definitions] == ["F", "F"]
        assert program.function_definitions[1].body == (DecrStatement(Register("a")),)


# =============================================================================
# Complete Program Tests
# =============================================================================

class TestPrograms:
    """End-to-end parsing of whole programs."""

    def test_add2(self):
        """The reference ADD2 program parses to the expected tree."""
        expected = Program(
            function_definitions=(
                FunctionDefinition(
                    name="ADD2",
                    args=(FunctionArg("reg", ValueType.REGISTER),),
                    body=(
                        IncrStatement(Register("reg")),
                        IncrStatement(Register("reg")),
                    ),
                ),
            ),
            statements=(
                CallStatement("ADD2", (TextValue("register"),)),
                CallStatement("ADD2", (TextValue("register2"),)),
            ),
        )
        assert parse(tokenize(ADD2_PROGRAM)) == expected

    def test_empty_program(self):
        """Empty or blank input gives an empty Program."""
        assert parse([]) == Program((), ())
        assert parse_source("   \n") == Program((), ())

    def test_definitions_and_statements_interleaved(self):
        """Definitions and statements are collected separately, in order."""
        program = parse_source("INCR a DEFINE F AS END DECR a DEFINE G AS END")
        assert [d.name for d in program.function_definitions] == ["F", "G"]
        assert program.statements == (
            IncrStatement(Register("a")),
            DecrStatement(Register("a")),
        )

    def test_calls_are_not_resolved(self):
        """Unknown call targets and any arity are accepted."""
        program = parse_source("DEFINE F x:REG AS END F; F 1 2 3; UNKNOWN;")
        assert len(program.statements) == 3


# =============================================================================
# Parse Error Tests
# =============================================================================

class TestParseErrors:
    """Tests for error kinds, positions and messages."""

    def test_jez_missing_operands(self):
        """A bare JEZ reports the missing text token."""
        with pytest.raises(UnexpectedEOFError) as exc_info:
            parse(tokenize("JEZ"))
        assert exc_info.value.expected == "text"
        assert exc_info.value.position == 1

    def test_jez_missing_label(self):
        """JEZ with one operand reports the missing label."""
        with pytest.raises(UnexpectedEOFError) as exc_info:
            parse_source("JEZ r")
        assert exc_info.value.position == 2

    def test_unknown_argument_type(self):
        """An unknown type keyword fails the function-arg rule."""
        with pytest.raises(FailedRuleError) as exc_info:
            parse_source("DEFINE F x:FOO AS END")
        error = exc_info.value
        assert error.rule_name == "function-arg"
        assert error.position == 4
        assert "FOO" in error.message

    def test_argument_type_is_case_sensitive(self):
        """Argument types must be upper case."""
        with pytest.raises(FailedRuleError) as exc_info:
            parse_source("DEFINE F x:reg AS END")
        assert exc_info.value.rule_name == "function-arg"

    def test_argument_missing_type(self):
        """A colon with no type word reports the AS found instead."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("DEFINE F x: AS END")
        assert exc_info.value.expected == "text"
        assert exc_info.value.actual == Token(TokenType.AS)

    def test_argument_missing_colon(self):
        """Without a colon the word is not an argument, so AS is missing."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("DEFINE F x AS END")
        assert exc_info.value.expected == "'AS'"
        assert exc_info.value.actual == Token(TokenType.TEXT, "x")
        assert exc_info.value.position == 2

    def test_call_missing_semicolon(self):
        """A call cut off by end of input needs its semicolon."""
        with pytest.raises(UnexpectedEOFError) as exc_info:
            parse_source("ADD2 register")
        assert exc_info.value.expected == "';'"

    def test_call_runs_into_instruction(self):
        """A call that runs into a keyword reports the missing semicolon."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("ADD2 r INCR r")
        assert exc_info.value.expected == "';'"
        assert exc_info.value.actual == Token(TokenType.INCR)
        assert exc_info.value.position == 2

    def test_incr_needs_text(self):
        """INCR rejects a numeric register."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("INCR 5")
        assert exc_info.value.actual == Token(TokenType.NUMBER, 5)

    def test_repeat_missing_end(self):
        """A block cut off by end of input is an error, not truncated."""
        with pytest.raises(UnexpectedEOFError) as exc_info:
            parse_source("REPEAT 3 INCR r")
        assert exc_info.value.expected == "'END'"

    def test_repeat_missing_count(self):
        """REPEAT without a count fails the value rule."""
        with pytest.raises(FailedRuleError) as exc_info:
            parse_source("REPEAT END")
        assert exc_info.value.rule_name == "value"
        assert exc_info.value.position == 1

    def test_definition_missing_end(self):
        """A definition cut off by end of input is an error."""
        with pytest.raises(UnexpectedEOFError):
            parse_source("DEFINE F AS INCR r")

    def test_nested_definition(self):
        """DEFINE is not a statement, so definitions cannot nest."""
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("DEFINE F AS DEFINE G AS END END")
        assert exc_info.value.actual == Token(TokenType.DEFINE)
        assert exc_info.value.position == 3

    @pytest.mark.parametrize("source", ["END", "AS", ":", ";", "5"])
    def test_no_statement_matches(self, source):
        """A token that starts no statement fails the statement rule."""
        with pytest.raises(FailedRuleError) as exc_info:
            parse_source(source)
        assert exc_info.value.rule_name == "statement"
        assert exc_info.value.definition == "repeat | jez | incr | decr | call"
        assert exc_info.value.position == 0

    def test_nesting_within_limit(self):
        """Moderately nested REPEAT blocks parse normally."""
        depth = 30
        program = parse_source("REPEAT 1 " * depth + "INCR r " + "END " * depth)
        node = program.statements[0]
        for _ in range(depth - 1):
            node = node.body[0]
        assert node.body == (IncrStatement(Register("r")),)

    def test_nesting_too_deep(self):
        """Nesting past the recursion limit is a parse error, not a crash."""
        depth = 1000
        source = "REPEAT 1 " * depth + "INCR r " + "END " * depth
        with pytest.raises(FailedRuleError) as exc_info:
            parse_source(source, ParserOptions(filename="deep.cm"))
        error = exc_info.value
        assert error.rule_name == "statement"
        assert "nesting too deep" in error.message
        assert error.filename == "deep.cm"

    def test_error_after_valid_statements(self):
        """Earlier statements do not turn into a partial result."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("INCR a\nDECR a\nJEZ a")
        assert exc_info.value.position == 6

    def test_error_hierarchy(self):
        """All parse errors share the package base class."""
        for error_class in (UnexpectedTokenError, UnexpectedEOFError, FailedRuleError):
            assert issubclass(error_class, ParseError)
            assert issubclass(error_class, CounterMachineError)

    def test_message_format(self):
        """str() gives the filename, message, token index and hint."""
        with pytest.raises(ParseError) as exc_info:
            parse(tokenize("JEZ"), ParserOptions(filename="jump.cm"))
        assert str(exc_info.value) == (
            "jump.cm: error: unexpected end of input (at token 1)\n"
            "hint: expected text"
        )

    def test_failed_rule_message(self):
        """FailedRule messages include the reason and the rule definition."""
        with pytest.raises(FailedRuleError) as exc_info:
            parse_source("DEFINE F x:FOO AS END", ParserOptions(filename="f.cm"))
        assert str(exc_info.value) == (
            "f.cm: error: failed to parse function-arg: "
            "unknown argument type 'FOO' (at token 4)\n"
            "hint: function-arg ::= <text> ':' <text in {NUM, REG, LABEL}>"
        )


# =============================================================================
# Parser Behavior Tests
# =============================================================================

class TestParserBehavior:
    """Tests for reuse, immutability, logging and options."""

    def test_parser_is_reusable(self):
        """parse() can run more than once on the same Parser."""
        parser = Parser(tokenize(ADD2_PROGRAM))
        assert parser.parse() == parser.parse()

    def test_shared_tokens_are_not_modified(self):
        """Parsing never mutates the caller's token list."""
        tokens = tokenize(ADD2_PROGRAM)
        snapshot = list(tokens)
        first = Parser(tokens).parse()
        second = Parser(tokens).parse()
        assert first == second
        assert tokens == snapshot

    def test_program_is_immutable(self):
        """The Program is frozen and holds tuples."""
        program = parse_source("INCR r")
        with pytest.raises(dataclasses.FrozenInstanceError):
            program.statements = ()
        assert isinstance(program.statements, tuple)

    def test_default_filename(self):
        """Errors name <input> when no filename is given."""
        with pytest.raises(ParseError) as exc_info:
            parse_source("JEZ")
        assert exc_info.value.filename == "<input>"

    def test_logs_parsed_functions(self, caplog):
        """Each definition and the whole parse are logged at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="counter_machines.parser"):
            parse_source(ADD2_PROGRAM)
        messages = [record.getMessage() for record in caplog.records]
        assert "Parsed function 'ADD2' (1 args, 2 statements)" in messages
        assert "Parsed <input>: 1 functions, 2 statements" in messages

    def test_trace_option(self, caplog):
        """trace_rules logs every rule attempt."""
        options = ParserOptions(trace_rules=True)
        with caplog.at_level(logging.DEBUG, logger="counter_machines.rules"):
            parse_source("INCR r", options)
        messages = [record.getMessage() for record in caplog.records]
        assert "Trying statement at token 0" in messages
        assert "Trying incr at token 0" in messages
