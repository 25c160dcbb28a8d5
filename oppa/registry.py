"""
Oppa schema registry.

Overview
- Registry keeps the ordered list of registered Argument definitions plus two
  indexes used by the parser:
  • shorts: single-character alias -> Argument
  • longs:  long name/alias (and every synthesized "no-<long>" form) -> Argument

Invariants
- No two definitions share a short alias, a long name/alias or a negated long form.
- Registration is atomic: every key a definition would claim is checked (against
  the indexes and against each other) before any index is touched.

Registration faults (DuplicateAliasError) always propagate to the caller.
"""
import logging

from .arguments import Argument
from .faults import DuplicateAliasError

logger = logging.getLogger(__name__)


class Registry:
    """
    Ordered, alias-indexed collection of argument definitions.

    The registry is only mutated by register(); lookups are plain dictionary
    reads, so any number of parses may share one registry.
    """

    def __init__(self):
        self._arguments = []
        self._shorts = {}
        self._longs = {}

    def register(self, argument, /):
        """
        Add a definition and index all of its names.

        Returns the argument.

        Raises
        - TypeError: when argument is not an Argument.
        - DuplicateAliasError: when any name it claims is already taken.
        """
        if not isinstance(argument, Argument):
            raise TypeError(f"register() argument must be an argument, not {type(argument).__name__}")

        shorts = argument.shorts
        longs = (*argument.longs, *argument.negations)

        # shorts are one character and longs are longer, so one set covers both
        claimed = set()
        for index, keys in ((self._shorts, shorts), (self._longs, longs)):
            for key in keys:
                owner = argument if key in claimed else index.get(key)
                if owner is not None:
                    raise DuplicateAliasError(
                        f"'{key}' already added",
                        alias=key,
                        argument=argument.name,
                        hint=f"'{key}' is already used by argument '{owner.name}'",
                    )
                claimed.add(key)

        for key in shorts:
            self._shorts[key] = argument
        for key in longs:
            self._longs[key] = argument
        self._arguments.append(argument)

        logger.debug("registered argument %r (shorts=%s, longs=%s)", argument.name, shorts, longs)
        return argument

    def lookup(self, name, long, /):
        """
        Resolve a flag name to its definition, or None.

        long selects the index: True for "--name" tokens, False for "-x" tokens.
        """
        return (self._longs if long else self._shorts).get(name)

    @property
    def arguments(self):
        return tuple(self._arguments)

    @property
    def shorts(self):
        return dict(self._shorts)

    @property
    def longs(self):
        return dict(self._longs)

    def __iter__(self):
        return iter(tuple(self._arguments))

    def __len__(self):
        return len(self._arguments)

    def __contains__(self, name):
        return any(argument.name == name for argument in self._arguments)

    def __repr__(self):
        return f"registry({', '.join(repr(argument.name) for argument in self._arguments)})"


__all__ = (
    "Registry",
)
