"""
Parser Configuration
====================

Options controlling how a parse reports itself. Configuration can come
from:
- Default values (defined here)
- Explicit ParserOptions(...) arguments
- Environment variables, via ParserOptions.from_env()

Environment Variables
---------------------
COUNTER_MACHINES_FILENAME: Source name used in error messages
COUNTER_MACHINES_TRACE: Log every rule attempt ("1", "true", "yes", "on")
"""

from dataclasses import dataclass
import os


TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class ParserOptions:
    """
    Parser configuration options.

    Attributes:
        filename: Source name shown in error messages (default: "<input>")
        trace_rules: Log each rule attempt at DEBUG level on the
                     counter_machines.rules logger. Noisy; meant for
                     debugging grammar changes.
    """
    filename: str = "<input>"
    trace_rules: bool = False

    @classmethod
    def from_env(cls) -> "ParserOptions":
        """
        Create ParserOptions from environment variables.

        Unset variables keep their defaults.
        """
        options = cls()

        if filename := os.environ.get("COUNTER_MACHINES_FILENAME"):
            options.filename = filename

        if trace := os.environ.get("COUNTER_MACHINES_TRACE"):
            options.trace_rules = trace.strip().lower() in TRUE_VALUES

        return options
