"""
Oppa program facade.

Overview
- Options: every program-level setting, enumerated with its default.
- Program: owns a Registry and a Parser, registers the implicit help/version
  arguments, reads sys.argv when no tokens are given, and turns parse faults into
  a printed report (or re-raises them).
- oppa(**options): shorthand for Program(Options(**options)).

Output
- Help and version screens are printed to the stdout console, fault reports and the
  help screen that follows them to the stderr console. Both are rich Consoles and can
  be injected (e.g. Console(file=io.StringIO()) to capture output).

Exit status
- 0 after help/version, 1 after a reported parse fault; never when no_exit is set.
  A reported fault is followed by the help screen like an explicit help request,
  but exits with the failure status 1 instead of 0.

Quick example:
    >>> from oppa import oppa
    >>> result = (
    ...     oppa(name="serve", version="1.0.0")
    ...     .add(name="port", alias="p", type="number", default=8080)
    ...     .add(name="verbose", type="boolean")
    ...     .parse(["-p", "80", "--verbose", "site"])
    ... )
    >>> result.values, result.rest
    ({'port': 80, 'verbose': True}, ['site'])
"""
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import NamedTuple

from rich.console import Console

from .arguments import Argument, Group, Predicate
from .faults import OppaError
from .help import helper, versioner
from .parser import Parser
from .registry import Registry
from .utils import *

logger = logging.getLogger(__name__)


class Options(NamedTuple):
    """
    Program-level settings.

    - name: program name shown in usage and version output (inferred from
      sys.argv[0] when parsing sys.argv and left unset).
    - version: enables the implicit --version/-v argument.
    - usage: replaces "<name> [options]" in the usage line.
    - description: a string or a sequence of lines shown under the usage line.
    - no_help: do not register the implicit --help argument.
    - no_help_alias / no_version_alias: leave -h / -v free for user arguments.
    - allow_unknown: collect unknown flags instead of failing.
    - throw_on_error: re-raise parse faults instead of reporting them.
    - no_exit: never exit the process (help, version and fault reports only print).
    """
    name: str | None = None
    version: str | None = None
    usage: str | None = None
    description: str | Sequence[str] | None = None
    no_help: bool = False
    no_help_alias: bool = False
    no_version_alias: bool = False
    allow_unknown: bool = False
    throw_on_error: bool = False
    no_exit: bool = False


def _process_strings(options, /):
    """
    Validate the scalar string settings; strings are trimmed and must not be empty.

    Errors
    - TypeError: when a value is neither a string nor None.
    - ValueError: when a string is empty after trimming.
    """
    changes = {}
    for name in ("name", "version", "usage"):
        if (object := getattr(options, name)) is None:
            continue
        if not isinstance(object, str):
            raise TypeError(f"program {name!r} must be a string")
        if not (object := object.strip()):
            raise ValueError(f"program {name!r} cannot be empty")
        changes[name] = object

    description = options.description
    if isinstance(description, str):
        changes["description"] = (description,)
    elif description is not None:
        if not isinstance(description, Sequence) or not all(isinstance(line, str) for line in description):
            raise TypeError("program 'description' must be a string or a sequence of strings")
        changes["description"] = tuple(description)
    return options._replace(**changes)


def _process_flags(options, /):
    for name in (
            "no_help",
            "no_help_alias",
            "no_version_alias",
            "allow_unknown",
            "throw_on_error",
            "no_exit",
    ):
        if not isinstance(getattr(options, name), bool):
            raise TypeError(f"program {name!r} must be a boolean")
    return options


class Program:
    """
    Declarative command-line program.

    Arguments are added with add() (chainable), optionally under headings created
    with group(), and parse() turns tokens into a Result. The implicit help and
    version arguments are ordinary registrations, so user arguments that collide
    with them fail with DuplicateAliasError like any other collision.
    """

    def __init__(self, options=None, /, *, stdout=None, stderr=None):
        if options is None:
            options = Options()
        elif isinstance(options, Mapping):
            options = Options(**options)
        elif not isinstance(options, Options):
            raise TypeError(f"{type(self).__name__}() options must be options or a mapping")
        for name, console in (("stdout", stdout), ("stderr", stderr)):
            if not isinstance(console, Console | None):
                raise TypeError(f"{type(self).__name__}() {name!r} must be a rich console")

        self._options = _process_flags(_process_strings(options))
        self._stdout = stdout if stdout is not None else Console()
        self._stderr = stderr if stderr is not None else Console(stderr=True)
        self._registry = Registry()
        self._group = None

        if not self._options.no_help:
            self.add(
                name="help",
                type="boolean",
                alias=Unset if self._options.no_help_alias else "h",
                description="Print (this) help screen",
                negatable=False,
                match=Predicate(self._help),
            )
        if self._options.version is not None:
            self.add(
                name="version",
                type="boolean",
                alias=Unset if self._options.no_version_alias else "v",
                description="Print the program version",
                negatable=False,
                match=Predicate(self._version),
            )

        self._parser = Parser(self._registry, allow_unknown=self._options.allow_unknown)

    @property
    def options(self):
        return self._options

    @property
    def registry(self):
        return self._registry

    @property
    def parser(self):
        return self._parser

    def _help(self, value, raw, argument, /):
        self.show_help(exit=True)
        return True

    def _version(self, value, raw, argument, /):
        self.show_version(exit=True)
        return True

    def add(self, argument=None, /, **fields):
        """
        Register an argument and return the program (for chaining).

        Accepts an Argument, a mapping of its fields, or the fields as keywords.
        Arguments built from fields join the current group (see group()).

        Raises
        - TypeError / ValueError: malformed definition.
        - DuplicateAliasError: a name or alias is already taken.
        """
        if argument is None:
            argument = Argument(**({"group": self._group} | fields))
        elif fields:
            raise TypeError("add() takes either an argument or its fields, not both")
        elif isinstance(argument, Mapping):
            argument = Argument(**({"group": self._group} | dict(argument)))
        elif not isinstance(argument, Argument):
            raise TypeError(f"add() argument must be an argument, not {type(argument).__name__}")
        self._registry.register(argument)
        return self

    def group(self, name, /, *, color=None, background=None):
        """
        Start a help-screen group; arguments added afterwards belong to it.

        color and background are rich color names or hex strings.
        """
        if not isinstance(name, str):
            raise TypeError("group() name must be a string")
        group = Group(name, color, background)
        group.style  # raises on colors rich cannot parse
        self._group = group
        return self

    def parse(self, tokens=None, /):
        """
        Parse tokens (sys.argv[1:] when omitted) and return a Result.

        When a fault occurs and throw_on_error is not set, the fault and the help
        screen are printed to stderr, the process exits with status 1 (unless
        no_exit) and None is returned.
        """
        if tokens is None:
            tokens = sys.argv[1:]
            if self._options.name is None and sys.argv and sys.argv[0]:
                name = os.path.basename(sys.argv[0]).removesuffix(".py")
                self._options = self._options._replace(name=name or None)

        try:
            return self._parser.parse(tokens)
        except OppaError as error:
            if self._options.throw_on_error:
                raise
            logger.debug("reporting parse fault %s: %s", type(error).__name__, error)
            if self._options.name:
                error = type(error)(error.message, **(error.options | {"prog": self._options.name}))
            self._stderr.print(error)
            self._stderr.print(helper(self._registry, self._options))
            if not self._options.no_exit:
                sys.exit(1)
            return None

    def show_help(self, exit=False):
        self._stdout.print(helper(self._registry, self._options))
        if exit and not self._options.no_exit:
            sys.exit(0)

    def show_version(self, exit=False):
        self._stdout.print(versioner(self._options))
        if exit and not self._options.no_exit:
            sys.exit(0)


def oppa(*, stdout=None, stderr=None, **options):
    """
    Create a Program from keyword options.

    Example
        oppa(name="tool", version="1.0.0", allow_unknown=True)
    """
    return Program(Options(**options), stdout=stdout, stderr=stderr)


__all__ = (
    "Options",
    "Program",
    "oppa",
)
