"""
Komando faults (errors) and rendering.

Scope
- DefinitionError: construction/normalization problems in a command tree. These are
  programming errors of the integrator and are always raised directly.
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
- CommandException: base type for invocation-time faults; carries message + options and
  knows how to render itself (rich) in a friendly, lowercased, actionable way.
- trigger(): central entry point to surface a fault (raise, or print and exit in shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The runtime collects the context (command, shell, colorful) and calls trigger(fault, **ctx).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich
  on stderr and the process exits with status 1.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class DefinitionError(ValueError):
    """
    Raised when a command tree cannot be normalized or resolved.

    Cases include duplicate sibling names or aliases, aliases on the root command,
    short-flag collisions, reserved flag names and child flags shadowing a flag an
    ancestor passes down. Never recovered by the library.
    """


class FaultCode(IntEnum):
    """
    canonical fault codes used across the cli (stable identifiers).

    grouping (by high-level domain)
    - routing (1110x)
      • MISSING_HANDLER
    - flags (1111x)
      • UNKNOWN_FLAGS
    - values (1112x)
      • INVALID_VALUE, MISSING_ARGUMENTS

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (11xxx) ---
    MISSING_HANDLER             = 11101

    # --- flag errors (11xxx) ---
    UNKNOWN_FLAGS               = 11112

    # --- value/positional errors (11xxx) ---
    INVALID_VALUE               = 11124
    MISSING_ARGUMENTS           = 11125

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    Base class of every fault raised while parsing one invocation.

    Options commonly present
    - tool: the resolved Command (its name heads the rendered message).
    - shell: print and exit instead of raising.
    - colorful: apply the style palette when rendering.
    - code, title, hint: header and footer of the rendered message.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def _styler(self):
        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.options.get("colorful") else ""

        return styler

    def _header(self, styler):
        main = __import__("__main__")
        tool = self.options.get("tool")
        prog = getattr(main, "__prog__", getattr(tool, "name", None) or "komando")
        code = self.options.get("code")
        return Text.assemble(
            "[ ",
            Text(str(prog), styler("prog-name")),
            " — ",
            Text(code.normalize() if code is not None else "?", styler("code")),
            " | ",
            Text(str(self.options.get("title", "error")).title(), styler("error-title")),
            " ]",
        )

    def __rich__(self):
        styler = self._styler()
        renders = [
            self._header(styler),
            Text(str(self), styler("error-message")),
        ]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(Text(" → ", styler("hint-arrow")), Text(hint, styler("hint"))))
        return Group(*renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownFlagsError(CommandException):
    """
    One or more flag-like tokens were not declared by the resolved command.

    The `unknowns` option maps every offending token to the value the tokenizer
    associated with it; the rendered form shows them as a table.
    """

    @property
    def unknowns(self):
        return dict(self.options.get("unknowns", {}))

    def __rich__(self):
        styler = self._styler()
        table = Table("flag", "value", header_style=styler("error-title"))
        for token, value in self.unknowns.items():
            table.add_row(token, repr(value))
        renders = [self._header(styler), table, Text(str(self), styler("error-message"))]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(Text(" → ", styler("hint-arrow")), Text(hint, styler("hint"))))
        return Group(*renders)


class ArityError(CommandException):
    """
    A positional argument did not receive the number of values it requires.
    """

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def expected(self):
        return self.options.get("expected")


class InvalidValueError(CommandException):
    """
    A flag converter rejected a raw value (it raised ValueError or TypeError).
    """


class MissingHandlerError(CommandException):
    """
    The resolved command has no run handler; help was shown instead.
    """


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "DefinitionError",
    "CommandException",
    "UnknownFlagsError",
    "ArityError",
    "InvalidValueError",
    "MissingHandlerError",
    "FaultCode",
    "trigger",
    "getdoc",
)
