"""
Counter Machine Abstract Syntax Tree (AST) Definitions
======================================================

This module defines the AST node types produced by the parser. The tree
is handed to a downstream evaluator; nothing here executes a program.

Node Hierarchy
--------------
Program - root: function definitions plus top-level statements
├── FunctionDefinition - DEFINE <name> <args> AS <body> END
│   └── FunctionArg - <name>:<REG|LABEL|NUM>
└── Statements
    ├── RepeatStatement - REPEAT <value> <body> END
    ├── JezStatement - JEZ <register> <label>
    ├── IncrStatement - INCR <register>
    ├── DecrStatement - DECR <register>
    └── CallStatement - <name> <values> ;

Operands
--------
- Register, Label: names, told apart only by grammatical position
- TextValue, NumberValue: call arguments and REPEAT counts

Design Notes
------------
- All nodes are frozen dataclasses; sequences are tuples, so a tree is
  immutable once built and compares structurally
- Nodes carry no source locations (tokens have none)
- Call targets are not resolved here: any name and any arity is accepted
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


# =============================================================================
# Operands
# =============================================================================

@dataclass(frozen=True)
class Register:
    """A register operand, e.g. the 'r' in INCR r."""
    name: str


@dataclass(frozen=True)
class Label:
    """A jump target operand, e.g. the 'done' in JEZ r done."""
    name: str


@dataclass(frozen=True)
class TextValue:
    """A word used as a value (usually a register or argument name)."""
    text: str


@dataclass(frozen=True)
class NumberValue:
    """An integer literal used as a value."""
    number: int


Value = Union[TextValue, NumberValue]


class ValueType(Enum):
    """
    Declared kind of a function argument.

    The enum value is the keyword used after the colon in a definition,
    e.g. DEFINE ADD reg:REG n:NUM AS ...
    """
    REGISTER = "REG"
    LABEL = "LABEL"
    NUMBER = "NUM"


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class RepeatStatement:
    """
    Repeat a block of statements.

    The count is evaluated by the interpreter, so it may name an argument
    as well as be a literal.

    Attributes:
        count: Number of iterations
        body: Statements repeated
    """
    count: Value
    body: tuple["Statement", ...] = ()


@dataclass(frozen=True)
class JezStatement:
    """
    Jump to a label if a register is zero.

    Attributes:
        register: Register tested
        label: Jump target
    """
    register: Register
    label: Label


@dataclass(frozen=True)
class IncrStatement:
    """Increment a register."""
    register: Register


@dataclass(frozen=True)
class DecrStatement:
    """Decrement a register."""
    register: Register


@dataclass(frozen=True)
class CallStatement:
    """
    Call a user-defined function.

    Attributes:
        name: Function name
        args: Argument values in call order
    """
    name: str
    args: tuple[Value, ...] = ()


Statement = Union[
    RepeatStatement,
    JezStatement,
    IncrStatement,
    DecrStatement,
    CallStatement,
]


# =============================================================================
# Definitions and Program Root
# =============================================================================

@dataclass(frozen=True)
class FunctionArg:
    """
    Typed function parameter.

    Attributes:
        name: Parameter name, referenced from the body
        type: Declared kind of the parameter
    """
    name: str
    type: ValueType


@dataclass(frozen=True)
class FunctionDefinition:
    """
    Function definition.

    Attributes:
        name: Function name
        args: Parameters in declaration order
        body: Statements of the function body
    """
    name: str
    args: tuple[FunctionArg, ...] = ()
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Program:
    """
    Root node of a parsed counter machine program.

    Function definitions keep declaration order; duplicate names are
    allowed here and left to the evaluator.

    Attributes:
        function_definitions: All DEFINE blocks
        statements: Top-level statements, in source order
    """
    function_definitions: tuple[FunctionDefinition, ...] = ()
    statements: tuple[Statement, ...] = ()


# =============================================================================
# AST Visitor / Printer
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node class name to visit_<ClassName> methods.

    Usage:
        class CallCollector(ASTVisitor):
            def visit_CallStatement(self, node):
                ...
    """

    def visit(self, node: object):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: object) -> None:
        raise TypeError(f"no visit method for {node.__class__.__name__}")


class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces an indented, human-readable outline of a Program.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: object) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _block(self, statements: tuple) -> None:
        self.indent_level += 1
        for statement in statements:
            self.visit(statement)
        self.indent_level -= 1

    def visit_Program(self, node: Program):
        self._emit("Program")
        self.indent_level += 1
        for definition in node.function_definitions:
            self.visit(definition)
        for statement in node.statements:
            self.visit(statement)
        self.indent_level -= 1

    def visit_FunctionDefinition(self, node: FunctionDefinition):
        args = ", ".join(f"{arg.name}:{arg.type.value}" for arg in node.args)
        self._emit(f"Function: {node.name}({args})")
        self._block(node.body)

    def visit_RepeatStatement(self, node: RepeatStatement):
        self._emit(f"Repeat {_value_str(node.count)}")
        self._block(node.body)

    def visit_JezStatement(self, node: JezStatement):
        self._emit(f"Jez {node.register.name} -> {node.label.name}")

    def visit_IncrStatement(self, node: IncrStatement):
        self._emit(f"Incr {node.register.name}")

    def visit_DecrStatement(self, node: DecrStatement):
        self._emit(f"Decr {node.register.name}")

    def visit_CallStatement(self, node: CallStatement):
        args = ", ".join(_value_str(arg) for arg in node.args)
        self._emit(f"Call {node.name}({args})")


def _value_str(value: Value) -> str:
    if isinstance(value, NumberValue):
        return str(value.number)
    return value.text
