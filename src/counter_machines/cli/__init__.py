"""
Counter Machines Command-Line Interface
=======================================

- **cmparse**: tokenize and parse a program file, printing the tokens,
  the syntax tree, or the first parse error

The tool is a thin Click wrapper; the library itself performs no I/O.
"""

__all__ = ["cmparse"]
