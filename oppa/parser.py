"""
Oppa parsing engine.

Overview
- Parser walks a sequence of already-split tokens against a Registry and returns a
  Result(values, unknown, rest, dashdash).

Token grammar
- "--"            -> everything after the first "--" is returned untouched in dashdash
                     (including the "--" itself).
- "--name[=v]"    -> long flag, looked up by name, alias or "no-<long>" form.
- "-x[=v]"        -> short flag, looked up by single-character alias.
- "-xyz[=v]"      -> cluster: "x" and "y" are value-less flags, "z" is resolved
                     normally and receives "=v" when present.
- anything else   -> the first token not starting with "-" ends scanning; it and
                     every token after it (up to "--") are returned in rest.

Values
- An attached "=v" is coerced and validated (booleans reject it).
- A boolean without a value is True, or False for a negated long form.
- A single-valued argument takes the next token, whatever it looks like.
- A multi argument takes every following token that does not start with "-";
  repeated occurrences accumulate, single values are overwritten (last wins).
- After scanning, arguments with a default (or real_default) that were not
  supplied are backfilled in registration order.

State
- Every parse() call scans with its own state; neither the parser nor the
  registry is mutated, so one Parser may serve any number of parses.
"""
import logging
from collections.abc import Iterable
from typing import NamedTuple

from .arguments import Kind
from .faults import InvalidArgumentError, MissingValueError, UnknownArgumentError
from .registry import Registry
from .utils import Unset
from .values import coerce, validate

logger = logging.getLogger(__name__)


class Unknown(NamedTuple):
    """An unrecognized flag: its name (without dashes) and attached value, if any."""
    name: str
    value: str | None = None


class Result(NamedTuple):
    """
    Outcome of a parse.

    - values: canonical argument name -> typed value (supplied or defaulted only)
    - unknown: Unknown entries, in encounter order (only when unknowns are allowed)
    - rest: bare tokens from the first non-flag token up to "--"
    - dashdash: ["--", *tail] when a "--" was present, else []
    """
    values: dict
    unknown: list
    rest: list
    dashdash: list


class _Scan:
    """
    Internal: the state of a single parse() call.
    """

    def __init__(self, parser, tokens, /):
        self.registry = parser.registry
        self.allow_unknown = parser.allow_unknown
        self.tokens = tokens
        self.position = 0
        self.values = {}
        self.unknown = []
        self.rest = []

    def run(self):
        while self.position < len(self.tokens):
            token = self.tokens[self.position]
            if not token.startswith("-"):
                self.rest = self.tokens[self.position:]
                break
            self.position += 1
            self.flag(token)
        self.backfill()

    def flag(self, token, /):
        long = token.startswith("--")
        name, separator, value = token[2 if long else 1:].partition("=")
        value = value if separator else None
        flag = token

        if not long:
            if "-" in name:
                raise InvalidArgumentError(
                    f"Invalid argument: {token}",
                    token=token,
                    hint="short flags are single letters, long flags start with '--'",
                )
            if len(name) > 1:
                for character in name[:-1]:
                    self.squeeze(character)
                name = name[-1]
                flag = "-" + name

        if (argument := self.registry.lookup(name, long)) is None:
            self.reject(token, name, value)
            return

        if value is not None:
            self.record(argument, self.convert(argument, value, token))
        elif argument.type is Kind.BOOLEAN:
            negated = long and name in argument.negations
            validate(not negated, flag, argument)
            self.record(argument, not negated)
        elif not argument.multi:
            if self.position >= len(self.tokens):
                raise MissingValueError(
                    f"Missing value for argument {token}",
                    argument=argument.name,
                    token=token,
                )
            raw = self.tokens[self.position]
            self.position += 1
            self.record(argument, self.convert(argument, raw, token))
        else:
            while self.position < len(self.tokens) and not self.tokens[self.position].startswith("-"):
                raw = self.tokens[self.position]
                self.position += 1
                self.record(argument, self.convert(argument, raw, token))

    def squeeze(self, character, /):
        """
        Resolve a leading member of a short-flag cluster; it can never take a value.
        """
        token = "-" + character
        if (argument := self.registry.lookup(character, False)) is None:
            self.reject(token, character, None)
        elif argument.type is not Kind.BOOLEAN:
            raise MissingValueError(
                f"Missing value for argument {token}",
                argument=argument.name,
                token=token,
                hint=f"move {token} to the end of the cluster or give it its own token",
            )
        else:
            validate(True, token, argument)
            self.record(argument, True)

    def reject(self, token, name, value, /):
        if not self.allow_unknown:
            raise UnknownArgumentError(f"Unknown argument: {token}", token=token)
        self.unknown.append(Unknown(name, value))

    @staticmethod
    def convert(argument, raw, token, /):
        value = coerce(raw, argument, token)
        validate(value, raw, argument)
        return value

    def record(self, argument, value, /):
        if argument.multi:
            self.values.setdefault(argument.name, []).append(value)
        else:
            self.values[argument.name] = value

    def backfill(self):
        for argument in self.registry:
            if argument.name in self.values:
                continue
            # fallback hands out a fresh copy of sequence defaults
            if (fallback := argument.fallback) is not Unset:
                self.values[argument.name] = fallback


class Parser:
    """
    Token scanner bound to a registry.

    Parameters
    - registry: the Registry holding the argument definitions.
    - allow_unknown: collect unrecognized flags in Result.unknown instead of raising
      UnknownArgumentError.
    """

    def __init__(self, registry, /, *, allow_unknown=False):
        if not isinstance(registry, Registry):
            raise TypeError(f"{type(self).__name__}() registry must be a registry")
        if not isinstance(allow_unknown, bool):
            raise TypeError(f"{type(self).__name__}() 'allow_unknown' must be a boolean")
        self._registry = registry
        self._allow_unknown = allow_unknown

    @property
    def registry(self):
        return self._registry

    @property
    def allow_unknown(self):
        return self._allow_unknown

    def parse(self, tokens, /):
        """
        Scan tokens and return a Result.

        Raises
        - TypeError: tokens is a string or contains non-string items.
        - InvalidArgumentError, UnknownArgumentError, MissingValueError,
          InvalidNumberError, InvalidBooleanUsageError, ValidationError.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() tokens must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() tokens must be an iterable of strings")

        dashdash = []
        if "--" in tokens:
            index = tokens.index("--")
            tokens, dashdash = tokens[:index], tokens[index:]

        scan = _Scan(self, tokens)
        scan.run()

        logger.debug(
            "parsed %d token(s): %d value(s), %d unknown, %d rest, %d after '--'",
            len(tokens), len(scan.values), len(scan.unknown), len(scan.rest), len(dashdash),
        )
        return Result(scan.values, scan.unknown, scan.rest, dashdash)


__all__ = (
    "Unknown",
    "Result",
    "Parser",
)
