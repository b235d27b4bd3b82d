"""
Help screen rendering.

render() lays out the help of one resolved command as an ordered list of
(label, rows) sections; show_help() prints them through a rich Console:

      Usage
        $ app [command] [flags]

      Commands
        serve, s    Start the server

      Flags
        -p, --port <port>    Port to bind (default: 8080)
        -h, --help           Show this message

Layout
- Left column: flags as "-s, --long <placeholder>" (four spaces stand in for a
  missing short), commands as "name, alias, ...", args by their arity placeholder.
- Every row is padded to the widest left column plus a gap of 4.
- Descriptions wrap at whitespace to the width left over (minus a margin of 2),
  continuation lines aligned under the description column.

The synthetic -h/--help (and -V/--version when a version exists) rows are
added to the displayed flags only; the command itself is never modified.
"""
import io
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .arguments import Flag
from .log import logger
from .utils import *

GAP = 4
INDENT = 4
MARGIN = 2
MINIMUM = 20


def format_nargs(nargs, placeholder, /):
    """
    Render a value placeholder for the given arity.

    "?" -> [p], "*" -> [p...], "+" -> <p...>, 1 -> <p>, N -> <p,p,...> (N times).
    """
    match nargs:
        case "?":
            return "[%s]" % placeholder
        case "*":
            return "[%s...]" % placeholder
        case "+":
            return "<%s...>" % placeholder
        case 1:
            return "<%s>" % placeholder
        case int():
            return "<%s>" % ",".join([placeholder] * nargs)
    raise ValueError("format_nargs() unknown arity %r" % (nargs,))


def _display(value):
    if isinstance(value, list | tuple):
        return ",".join(map(str, value))
    return str(value)


def _flag_column(name, flag):
    column = ("-%s, " % flag.short if flag.short else " " * 4) + "--" + kebabize(name)
    if flag.placeholder:
        column += " " + format_nargs("+" if flag.repeated else 1, flag.placeholder)
    return column


def _flag_descr(flag):
    descr = str(flag.descr) if flag.descr else ""
    if flag.default:
        descr += " (default: %s)" % _display(flag.default)
    return descr.strip()


def _displayed_flags(command, root, version):
    group = "Flags" if root else "Inherited Flags"
    flags = dict(coalesce(command._flags, {}))
    flags["help"] = Flag(bool, short="h", default=False, descr="Show this message", group=group)
    if version:
        flags["version"] = Flag(bool, short="V", default=False, descr="Show version info", group=group)
    return flags


def render(command, path, version=None, *, width=80):
    """
    Lay out the help of a resolved command.

    Parameters
    - command: the resolved Command (flags already merged).
    - path: names from the root to this command (a string is taken as one name).
    - version: the root version; adds the -V/--version row when truthy.
    - width: terminal columns available.

    Returns a list of (label, rows). Sections appear in this order: Description,
    Aliases, Usage, Example, then the command/flag/Arguments groups in order of
    first appearance; a final (None, [epilog]) carries the epilog, unlabeled.
    """
    path = (path,) if isinstance(path, str) else tuple(path)
    commands = coalesce(command._commands, [])
    args = coalesce(command._args, {})
    flags = _displayed_flags(command, len(path) == 1, version)

    sections = defaultdict(list)
    if command.descr:
        sections["Description"].append(str(command.descr))
    if command.aliases:
        sections["Aliases"].append(", ".join(command.aliases))
    if command.usage:
        sections["Usage"].append(str(command.usage))
    else:
        sections["Usage"].append("$ %s%s%s [flags]" % (
            " ".join(path),
            " [command]" if commands else "",
            " [args]" if args else "",
        ))
    if command.example:
        sections["Example"].append(str(command.example))

    rows = []
    for child in commands:
        rows.append((child.group or "Commands", ", ".join(child.tokens), str(child.descr) if child.descr else ""))
    for name, flag in flags.items():
        rows.append((flag.group or "Flags", _flag_column(name, flag), _flag_descr(flag)))
    for name, arg in args.items():
        rows.append(("Arguments", format_nargs(coalesce(arg._nargs, 1), name), str(arg.descr) if arg.descr else ""))

    column = max(len(left) for _, left, _ in rows) + GAP
    indent = column + INDENT
    available = max(width - indent - MARGIN, MINIMUM)
    console = Console(file=io.StringIO(), width=max(width, indent + available))

    for label, left, descr in rows:
        if not descr:
            sections[label].append(left)
            continue
        lines = [line.plain.rstrip() for line in Text(descr).wrap(console, available)]
        sections[label].append("\n".join([left.ljust(column) + lines[0], *(" " * indent + line for line in lines[1:])]))

    result = list(sections.items())
    if command.epilog:
        result.append((None, [str(command.epilog)]))
    logger.debug("rendered help for %r (%d section(s))", " ".join(path), len(result))
    return result


def show_help(command, path, version=None, *, console=Unset, colorful=False):
    """
    Print the help of a resolved command.

    Each section prints as a blank line, its label indented by two spaces and
    its rows indented by four; the epilog follows after a blank line, verbatim.
    Labels are bold when colorful is true.
    """
    console = coalesce(console, None) or Console()
    styles = defaultdict(str, {
        "group-label": "bold",
        "epilog-section": "dim",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    for label, rows in render(command, path, version, width=console.width):
        if label is None:
            console.print(Text.assemble("\n", Text(rows[0], styler("epilog-section"))), soft_wrap=True)
            continue
        section = Text.assemble("\n  ", Text(label, styler("group-label")))
        for row in rows:
            section.append("\n    ").append(row)
        console.print(section, soft_wrap=True)


__all__ = (
    "render",
    "show_help",
    "format_nargs",
)
