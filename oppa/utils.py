"""
Oppa utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the arguments, registry, parser and help layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None (None is a legitimate default).
  • Falsey, printable as "Unset", non-subclassable, usable in isinstance unions (str | Unset).

- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving legitimate falsey values like None/0/""/[].

- arrayify(value)
  • Normalize "one or many" inputs (alias, description lines, tables) into a fresh list.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables (help/version hooks, properties).

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr) with fresh copies of containers.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> arrayify("h")
    ['h']
    >>> arrayify(("f", "foo"))
    ['f', 'foo']
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Defaults such as `default=None` or `default=False` are meaningful for arguments,
    so the registry needs a marker for “no default at all”. A single instance, Unset,
    is exposed for that purpose.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a per-process singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., Unset | str).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right (str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case `default` is returned.
    Falsey values like None, 0, "", or [] are preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def arrayify(object, /):
    """
    Normalize a "one or many" value into a new list.

    - Unset / None       -> []
    - str                -> [str]   (strings are scalars here, never iterated)
    - Mapping            -> [mapping]
    - any other Sequence -> list(sequence)
    - anything else      -> [object]
    """
    if object is Unset or object is None:
        return []
    if isinstance(object, str | Mapping):
        return [object]
    if isinstance(object, Sequence | Set):
        return list(object)
    return [object]


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator that does so.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name)           -> decorator

    Raises
    - TypeError on wrong arity, a non-callable target, a non-string name, or a
      callable whose name attributes are read-only (built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values.

    - list (and other non-string, non-tuple sequences) -> new list
    - tuple                                            -> new tuple
    - named tuples (Pattern, Group, ...)               -> as-is
    - Mapping                                          -> new dict (keys preserved)
    - Set                                              -> new set
    - anything else                                    -> as-is
    """
    if type(object) is tuple:
        return tuple(map(_immortalize, object))
    elif isinstance(object, tuple):
        return object
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Containers are copied on every read so callers can never mutate a registered
    definition through its public surface (multi defaults in particular are handed
    out fresh to every parse).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: `default=None` is a real default, `default=Unset` is none at all.
"""


__all__ = (
    # Functions
    "coalesce",
    "arrayify",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
