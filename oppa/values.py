"""
Oppa value coercion & validation.

Scope
- Turn the raw text of a token into the typed value of an argument (coerce).
- Run the argument's matcher against the typed value and its raw text (validate).

Behavior
- string  -> the raw text, unchanged (the empty string is a valid value).
- number  -> int when the text is an integer literal, otherwise float; the text must
             be the exact canonical spelling of the result as str() writes it
             ("1", "-3", "1.5", "1e-05"), so "1e2", " 1", "1.0", "01", "+1" and ""
             are all rejected while str()-style exponents such as "1.5e-07" pass.
             NaN and infinities are rejected.
- boolean -> never coerced from text; an attached value on a boolean flag is a usage
             error reported against the whole token.

Matchers
- Pattern   -> regex.search(raw) must find a match; a missing raw text never matches.
- Predicate -> function(value, raw, argument) must return a truthy value. Exceptions
               raised inside the function are reported as ValidationError, chained to
               the exception the function raised. SystemExit (raised by help/version actions)
               is not an Exception and reaches the caller untouched.
"""
import math

from .arguments import Kind, Pattern, Predicate
from .faults import InvalidBooleanUsageError, InvalidNumberError, OppaError, ValidationError


def _number(raw, /):
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def coerce(raw, argument, token, /):
    """
    Convert raw token text into a value of the argument's kind.

    Parameters
    - raw: the text to convert (the part after "=", or a separate token).
    - argument: the Argument the value belongs to.
    - token: the flag token as written on the command line, used in messages.

    Raises
    - InvalidNumberError: number text that does not spell its own value.
    - InvalidBooleanUsageError: any text given to a boolean argument.
    """
    match argument.type:
        case Kind.NUMBER:
            if (value := _number(raw)) is None or str(value) != raw:
                raise InvalidNumberError(
                    f"Invalid numeric value: {raw}",
                    argument=argument.name,
                    value=raw,
                    token=token,
                    hint="write plain decimal numbers such as 42 or -1.5",
                )
            return value
        case Kind.BOOLEAN:
            raise InvalidBooleanUsageError(
                f"Invalid usage of boolean argument: {token}",
                argument=argument.name,
                token=token,
                hint=f"boolean flags take no value; use --{argument.name} or --no-{argument.name}"
                if argument.negatable and len(argument.name) > 1 else "boolean flags take no value",
            )
        case _:
            return raw


def validate(value, raw, argument, /):
    """
    Check a typed value against the argument's matcher.

    Returns None when the value is accepted (or no matcher is configured).

    Raises
    - ValidationError: the matcher rejected the value, or a predicate failed.
    """
    match argument.match:
        case None:
            return
        case Pattern(regex):
            accepted = raw is not None and regex.search(raw) is not None
        case Predicate(function):
            try:
                accepted = function(value, raw, argument)
            except OppaError:
                raise
            except Exception as exception:
                raise ValidationError(
                    f"Invalid argument for {argument.name}: {value}",
                    argument=argument.name,
                    value=value,
                    exception=exception,
                    hint=f"the validator raised {type(exception).__name__}: {exception}",
                ) from exception

    if not accepted:
        raise ValidationError(
            f"Invalid argument for {argument.name}: {value}",
            argument=argument.name,
            value=value,
        )


__all__ = (
    "coerce",
    "validate",
)
