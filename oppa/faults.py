"""
Oppa faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing error,
  grouped by domain so messages and logs stay searchable.
- OppaError: base type carrying a message plus read-only context options, and
  knowing how to render itself with rich (header, message, hint).
- One subclass per failure kind of the registry, value layer and parser.

Propagation
- Registration faults (DuplicateAliasError) always reach the caller.
- Parse faults reach the caller when the program is configured to throw; otherwise
  the program prints them (via __rich__) followed by the help screen.

Context options
- title: short human title (rendered title-cased in the header).
- code: FaultCode member.
- hint: one actionable sentence.
- any other context the reporter may want (token, alias, argument, value, exception).
"""
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - registration (2110x)
      • DUPLICATE_ALIAS
    - tokens (2111x)
      • INVALID_ARGUMENT, UNKNOWN_ARGUMENT, MISSING_VALUE
    - values (2112x)
      • INVALID_NUMBER, INVALID_BOOLEAN_USAGE, VALIDATION
    """
    # --- registration errors (2110x) ---
    DUPLICATE_ALIAS       = 21101

    # --- token errors (2111x) ---
    INVALID_ARGUMENT      = 21111
    UNKNOWN_ARGUMENT      = 21112
    MISSING_VALUE         = 21113

    # --- value errors (2112x) ---
    INVALID_NUMBER        = 21121
    INVALID_BOOLEAN_USAGE = 21122
    VALIDATION            = 21123


class OppaError(Exception):
    """
    Base of every fault raised by oppa.

    The message is the user-facing sentence; `options` is a read-only mapping of
    context (title, code, hint, token, ...). Subclasses pin their own title and
    code through the class attributes below, callers may still override them.
    """
    title = "error"
    code = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"title": self.title, "code": self.code} | options)

    def __str__(self):
        return self.message

    def __rich__(self):
        header = Text.assemble(
            "[ ",
            (self.options.get("prog") or "oppa", "bold #E6E6F0"),
            " — ",
            (str(int(code)) if (code := self.options["code"]) else "-", "bold #00E5FF"),
            " | ",
            (self.options["title"].title(), "bold #FF4DA6"),
            " ]"
        )
        message = Text(self.message, "#C8C8D0")
        if not (hint := self.options.get("hint")):
            return Group(header, message)
        return Group(header, message, Text.assemble((" → ", "#9CE19C dim"), (hint, "italic #9CE19C")))


class DuplicateAliasError(OppaError):
    title = "duplicate alias"
    code = FaultCode.DUPLICATE_ALIAS


class InvalidArgumentError(OppaError):
    title = "invalid argument"
    code = FaultCode.INVALID_ARGUMENT


class UnknownArgumentError(OppaError):
    title = "unknown argument"
    code = FaultCode.UNKNOWN_ARGUMENT


class MissingValueError(OppaError):
    title = "missing value"
    code = FaultCode.MISSING_VALUE


class InvalidNumberError(OppaError):
    title = "invalid number"
    code = FaultCode.INVALID_NUMBER


class InvalidBooleanUsageError(OppaError):
    title = "invalid boolean usage"
    code = FaultCode.INVALID_BOOLEAN_USAGE


class ValidationError(OppaError):
    title = "invalid value"
    code = FaultCode.VALIDATION


__all__ = (
    "FaultCode",
    "OppaError",
    "DuplicateAliasError",
    "InvalidArgumentError",
    "UnknownArgumentError",
    "MissingValueError",
    "InvalidNumberError",
    "InvalidBooleanUsageError",
    "ValidationError",
)
