r"""
Oppa argument definitions.

Overview
- Kind: the value kind of an argument (string, boolean, number).
- Pattern / Predicate: the two variants of a matcher (validator).
  • Pattern(regex): tested with regex.search() against the raw token text.
  • Predicate(function): called as function(value, raw, argument); must return a truthy value.
- Group: presentational heading for a run of arguments in the help screen.
- Argument: the immutable definition registered in a Registry.

Introspection & representation
- ArgumentType metaclass exposes the fields listed in __introspectable__ as read-only
  properties (backed by "_{name}" attributes) and provides stable __repr__/__rich_repr__.

Metadata (sanitized on construction)
- name: required, non-empty; no whitespace, no "=" and no leading dash.
- alias: a string or a sequence of strings, validated like the name. One character
  means a short alias ("-x"), anything longer a long alias ("--xyz").
- type: "string" | "boolean" | "number" (or str | bool | int | float).
- multi: bool; a boolean argument cannot be multi.
- negatable: bool; defaults to True for booleans and is forced to False otherwise.
- default / real_default: any value (Unset when absent). For multi arguments they must
  be sequences. real_default is the run-time fallback, default is what help displays.
- match: Pattern | Predicate | re.Pattern | str (regex) | callable.
- description: a string or a sequence of lines.
- values / example: a mapping {key: description} or a sequence of such mappings.
- argument_name: placeholder shown in usage text (defaults to the name).
- group: Group | None.

Quick example:
    >>> from oppa.arguments import Argument
    >>> Argument("port", type="number", alias="p", default=8080).shorts
    ('p',)
"""
import functools
import operator
import re
from collections.abc import Callable, Mapping, Sequence
from enum import StrEnum
from typing import NamedTuple

from rich.style import Style

from .utils import *


class Kind(StrEnum):
    """
    value kind of an argument.

    lookup accepts the canonical strings and the matching builtins, so both
    Argument("n", type="number") and Argument("n", type=int) are valid.
    """
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, type):
            return None
        return {
            str: cls.STRING,
            bool: cls.BOOLEAN,
            int: cls.NUMBER,
            float: cls.NUMBER,
        }.get(value)


class Pattern(NamedTuple):
    """Matcher variant: a compiled regular expression searched in the raw token."""
    regex: re.Pattern


class Predicate(NamedTuple):
    """Matcher variant: a function(value, raw, argument) returning an accept signal."""
    function: Callable


class Group(NamedTuple):
    """
    Presentational heading for the arguments registered after it.

    color and background accept anything rich understands as a color
    ("green", "#00ff00", "color(2)", ...).
    """
    name: str
    color: str | None = None
    background: str | None = None

    @property
    def style(self):
        return Style(color=self.color, bgcolor=self.background)


class ArgumentType(type):
    """
    Metaclass that turns definitions into introspectable, read-only records.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" field (containers are copied on read).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name (camel-case split with hyphens).

    __displayable__ (if set) narrows which fields __rich_repr__ shows.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _check_name(cls, name, what, /):
    """
    Internal: validate a single name or alias.

    Raises
    - TypeError: when it is not a string.
    - ValueError: when it is empty, starts with a dash, or contains "=" or whitespace
      (none of those could ever be matched from a command-line token).
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {what} must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} {what} cannot be empty")
    elif name.startswith("-"):
        raise ValueError(f"{cls.__typename__} {what} {name!r} cannot start with a dash")
    elif "=" in name or re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} {what} {name!r} cannot contain '=' or whitespace")
    return name


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate 'name' and normalize 'alias' into the 'aliases' tuple.

    Duplicate names across (or within) definitions are not checked here; the
    registry owns alias uniqueness and reports it as DuplicateAliasError.
    """
    _check_name(cls, metadata["name"], "name")
    alias = metadata.pop("alias")
    if not isinstance(alias, str | Sequence | Unset) or isinstance(alias, Mapping):
        raise TypeError(f"{cls.__typename__} 'alias' must be a string or a sequence of strings")
    metadata["aliases"] = tuple(_check_name(cls, name, "alias") for name in arrayify(alias))


def _sanitize_kind(cls, metadata, /):
    """
    Internal: normalize 'type', 'multi' and 'negatable'.

    - type is looked up in Kind (strings or builtins).
    - multi must be a bool and is rejected for booleans.
    - negatable defaults to True for booleans and is forced to False for other kinds.
    """
    try:
        metadata["type"] = Kind(metadata["type"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'type' must be one of 'string', 'boolean' or 'number'") from None

    if not isinstance(metadata["multi"], bool):
        raise TypeError(f"{cls.__typename__} 'multi' must be a boolean")
    if metadata["multi"] and metadata["type"] is Kind.BOOLEAN:
        raise TypeError(f"boolean {cls.__typename__} cannot be multi")

    if not isinstance(negatable := metadata["negatable"], bool | Unset):
        raise TypeError(f"{cls.__typename__} 'negatable' must be a boolean")
    metadata["negatable"] = coalesce(negatable, True) if metadata["type"] is Kind.BOOLEAN else False


def _sanitize_defaults(cls, metadata, /):
    """
    Internal: multi arguments take sequences as defaults; they are stored as lists.
    """
    if not metadata["multi"]:
        return
    for name in ("default", "real_default"):
        if (object := metadata[name]) is Unset:
            continue
        if isinstance(object, str) or not isinstance(object, Sequence):
            raise TypeError(f"multi {cls.__typename__} {name!r} must be a sequence")
        metadata[name] = list(object)


def _sanitize_match(cls, metadata, /):
    """
    Internal: turn 'match' into the Pattern | Predicate variant (or None).
    """
    match metadata["match"]:
        case UnsetType() | None:
            metadata["match"] = None
        case Pattern() | Predicate():
            pass
        case re.Pattern() as regex:
            metadata["match"] = Pattern(regex)
        case str() as source:
            metadata["match"] = Pattern(re.compile(source))
        case function if callable(function):
            metadata["match"] = Predicate(function)
        case _:
            raise TypeError(f"{cls.__typename__} 'match' must be a regular expression or a callable")


def _sanitize_table(cls, name, table, /):
    """
    Internal: normalize a values/example table into a tuple of {key: (lines, ...)} dicts.
    """
    rows = []
    for row in arrayify(table):
        if not isinstance(row, Mapping):
            raise TypeError(f"{cls.__typename__} {name!r} must be a mapping or a sequence of mappings")
        rows.append({str(key): _sanitize_lines(cls, name, lines) for key, lines in row.items()})
    return tuple(rows)


def _sanitize_lines(cls, name, lines, /):
    lines = arrayify(lines)
    if not all(isinstance(line, str) for line in lines):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string or a sequence of strings")
    return tuple(lines)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize the presentational fields.

    - description -> tuple of lines (empty when Unset)
    - values / example -> tuple of row dicts
    - argument_name -> non-empty string or None
    - group -> Group or None
    """
    metadata["description"] = _sanitize_lines(cls, "description", metadata["description"])
    metadata["values"] = _sanitize_table(cls, "values", metadata["values"])
    metadata["example"] = _sanitize_table(cls, "example", metadata["example"])

    if not isinstance(argument_name := metadata["argument_name"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'argument_name' must be a string")
    elif isinstance(argument_name, str) and not (argument_name := argument_name.strip()):
        raise ValueError(f"{cls.__typename__} 'argument_name' cannot be empty")
    metadata["argument_name"] = coalesce(argument_name)

    if not isinstance(group := metadata["group"], Group | None | Unset):
        raise TypeError(f"{cls.__typename__} 'group' must be a group")
    metadata["group"] = coalesce(group)


class Argument(metaclass=ArgumentType):
    """
    Immutable definition of a named command-line argument.

    Created once, registered once, and shared read-only by every parse of the
    registry it belongs to. The names listed in __introspectable__ are exposed as
    read-only attributes mirroring the sanitized metadata.

    Derived views
    - names: the name followed by every alias, in declaration order.
    - shorts / longs: the names of length 1 / of length > 1.
    - negations: "no-<long>" for every long name when negatable, else empty.
    - has_default / fallback: whether a run-time fallback exists and its value
      (real_default wins over default).
    """

    __introspectable__ = (
        "name",
        "type",
        "multi",
        "aliases",
        "negatable",
        "default",
        "real_default",
        "match",
        "description",
        "values",
        "example",
        "argument_name",
        "group",
    )

    __displayable__ = (
        "name",
        "type",
        "multi",
        "aliases",
        "negatable",
        "default",
        "real_default",
    )

    def __new__(
            cls,
            name,
            type="string",
            multi=False,
            alias=Unset,
            description=Unset,
            negatable=Unset,
            default=Unset,
            real_default=Unset,
            match=Unset,
            values=Unset,
            example=Unset,
            argument_name=Unset,
            group=Unset,
    ):
        metadata = {
            "name": name,
            "type": type,
            "multi": multi,
            "alias": alias,
            "description": description,
            "negatable": negatable,
            "default": default,
            "real_default": real_default,
            "match": match,
            "values": values,
            "example": example,
            "argument_name": argument_name,
            "group": group,
        }
        _sanitize_names(cls, metadata)
        _sanitize_kind(cls, metadata)
        _sanitize_defaults(cls, metadata)
        _sanitize_match(cls, metadata)
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def names(self):
        return (self._name, *self._aliases)

    @property
    def shorts(self):
        return tuple(name for name in self.names if len(name) == 1)

    @property
    def longs(self):
        return tuple(name for name in self.names if len(name) > 1)

    @property
    def negations(self):
        if not self._negatable:
            return ()
        return tuple("no-" + name for name in self.longs)

    @property
    def has_default(self):
        return self._default is not Unset or self._real_default is not Unset

    @property
    def fallback(self):
        # real_default wins; Unset when neither is configured
        return self.real_default if self._real_default is not Unset else self.default


__all__ = (
    "Kind",
    "Pattern",
    "Predicate",
    "Group",
    "Argument",
)

# Not part of the public API.
del ArgumentType
