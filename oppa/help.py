"""
Oppa help & version screens.

Scope
- helper(registry, options): the help screen as a rich renderable.
- versioner(options): the version line as a rich renderable.

Both only read the registry and the program options; printing (and exiting) is
left to the caller, so the screens can be rendered to any rich Console.

Help layout (every line indented by three spaces)

       Usage: prog [options]

       Program description.

       Options:

          -h, --help                Print (this) help screen
          -p, --port <port>         Port to listen on (default: 8080)
          --(no-)color              Colorize output
          At the bar
            --tag <tag...>          Tags

Group rows are indented under their heading and painted with the group's colors
across the full width of the table.
"""
from rich.console import Group
from rich.text import Text

from .arguments import Kind
from .utils import Unset

_PREFIX = "   "
_GAP = "   "
_GROUP_INDENT = "  "


def _line(text="", style=None, /):
    return Text(text, style or "", no_wrap=True, overflow="ignore")


def _flags(argument, /):
    names = sorted(argument.names, key=lambda name: len(name) > 1)
    placeholder = argument.argument_name or argument.name
    return ", ".join(
        f"-{name}" if len(name) == 1 else f"--(no-){name}" if argument.negatable else f"--{name}"
        for name in names
    ) + (
        "" if argument.type is Kind.BOOLEAN else
        f" <{placeholder}...>" if argument.multi else
        f" <{placeholder}>"
    )


def _format_default(value, /):
    if isinstance(value, list | tuple):
        return ", ".join(map(_format_default, value))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _description(argument, /):
    lines = list(argument.description) or [""]
    if argument.default is Unset:
        return lines
    suffix = f" (default: {_format_default(argument.default)})"
    if len(lines) > 1:
        return lines + [suffix]
    return [lines[0] + suffix]


def _table(rows, /):
    """
    Internal: lay out (key, lines) pairs as plain two-column text lines.
    """
    width = max(len(key) for key, _ in rows)
    lines = []
    for key, description in rows:
        first, *rest = description or [""]
        lines.append(f"{key.ljust(width)}{_GAP}{first}")
        lines.extend(f"{'':{width}}{_GAP}{line}" for line in rest)
    return lines


def _extras(argument, /):
    """
    Internal: the "Values:" / "Example:" sub-tables shown under a description.
    """
    lines = []
    for title, table in (("Values:", argument.values), ("Example:", argument.example)):
        rows = [(key, list(description)) for row in table for key, description in row.items()]
        if not rows:
            continue
        lines.extend(["", title])
        lines.extend(_PREFIX + line for line in _table(rows))
    if lines:
        lines.append("")
    return lines


def _options(registry, /):
    entries = []
    current = None
    for argument in registry:
        if (group := argument.group) is not None and group != current:
            entries.append((group, None))
        current = group
        entries.append((group, argument))

    width = max(
        len(_flags(argument)) + (len(_GROUP_INDENT) if group else 0)
        for group, argument in entries if argument is not None
    )

    body = []
    for group, argument in entries:
        if argument is None:
            body.append((group, [f"{group.name.ljust(width)}{_GAP}"]))
            continue
        indent = _GROUP_INDENT if group else ""
        first, *rest = _description(argument)
        lines = [f"{indent}{_flags(argument).ljust(width - len(indent))}{_GAP}{first}"]
        lines.extend(f"{'':{width}}{_GAP}{line}" for line in (*rest, *_extras(argument)))
        body.append((group, lines))

    full = max(len(line) for _, lines in body for line in lines)
    for group, lines in body:
        for line in lines:
            if group is None:
                yield _line((_PREFIX * 2 + line).rstrip())
            else:
                yield Text.assemble(_PREFIX * 2, (line.ljust(full), group.style), no_wrap=True, overflow="ignore")


def helper(registry, options, /):
    """
    Render the help screen for a registry.

    options is the program's Options (name, usage and description are read).
    """
    name = f"{options.name} " if options.name else ""
    lines = [
        _line(),
        _line(f"{_PREFIX}Usage: {options.usage or name + '[options]'}"),
        _line(),
    ]

    if options.description:
        lines.extend(_line(f"{_PREFIX}{line}".rstrip()) for line in options.description)
        lines.append(_line())

    if len(registry):
        lines.extend([_line(f"{_PREFIX}Options:"), _line()])
        lines.extend(_options(registry))

    lines.append(_line())
    return Group(*lines)


def versioner(options, /):
    """
    Render "<name> <version>" (or just "<version>" when the program has no name).

    Raises
    - ValueError: the program has no version configured.
    """
    if options.version is None:
        raise ValueError("versioner() requires a program version")
    return _line(f"{options.name} {options.version}" if options.name else options.version)


__all__ = (
    "helper",
    "versioner",
)
