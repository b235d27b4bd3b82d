r"""
Komando argument specifications.

Overview
- Specs
  • Flag: named option (--long / -s), typed through a FlagType, optionally passed down
    to every descendant command (deep_pass).
  • Arg: positional slot bound by declaration order and arity (nargs).

Metadata (sanitized on construction)
- Flag
  • type: FlagType or shorthand (callable, [callable]); see komando.coercion.
  • short: Unset | single alphanumeric character.
  • default: any value; Unset means “no default”.
  • descr / placeholder / group: Unset | non-empty str (trimmed).
  • deep_pass: Unset | bool.
- Arg
  • nargs: Unset | "?" | "*" | "+" | int (>= 1) | digit string (normalized to int).
  • descr: Unset | non-empty str.

Unset fields are filled in by komando.commands.normalize(); constructing a spec only
checks shapes, so a spec can be declared with as little as Flag() or Arg().

Quick example:
    >>> from komando import Flag, Arg
    >>> Flag(int, short="p", default=8080, descr="port to listen on")
    >>> Flag([str], placeholder="N:M", descr="highlight lines N through M")
    >>> Arg("+", descr="files to print")
"""
import builtins
import re

from rich.text import Text

from .coercion import flagtype
from .utils import *


def _sanitize_string(cls, metadata, name, /):
    """
    Internal: validate an optional display string and trim it in place.

    Raises
    - TypeError: if the field is neither a string nor Unset.
    - ValueError: if the field is a string but empty after trimming.
    """
    if not isinstance(value := metadata[name], str | Text | Unset):
        raise TypeError("%s %r must be a string" % (cls.__typename__, name))
    elif isinstance(value, str) and not (value := value.strip()):
        raise ValueError("%s %r cannot be empty" % (cls.__typename__, name))
    metadata[name] = value


def _sanitize_flag_metadata(cls, metadata, /):
    """
    Internal: validate and normalize Flag metadata in place.

    Responsibilities
    - type: resolved into a FlagType through flagtype().
    - short: exactly one alphanumeric character when provided.
    - deep_pass: boolean when provided.
    - placeholder: may be None (explicitly cleared, the normalized form for toggles).
    """
    metadata["type"] = flagtype(metadata["type"])

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError("%s 'short' must be a string" % cls.__typename__)
    elif isinstance(short, str) and not re.fullmatch(r"[^\W_]", short):
        raise ValueError("%s 'short' must be a single alphanumeric character" % cls.__typename__)

    if not isinstance(metadata["deep_pass"], bool | Unset):
        raise TypeError("%s 'deep_pass' must be a boolean" % cls.__typename__)

    _sanitize_string(cls, metadata, "descr")
    _sanitize_string(cls, metadata, "group")
    if metadata["placeholder"] is not None:
        _sanitize_string(cls, metadata, "placeholder")


def _sanitize_nargs(cls, metadata, /):
    """
    Internal: validate arity; digit strings ("1", "2") become integers.
    """
    nargs = metadata["nargs"]
    if isinstance(nargs, bool) or not isinstance(nargs, str | int | Unset):
        raise TypeError("%s 'nargs' must be a string or an integer" % cls.__typename__)
    if isinstance(nargs, str) and nargs.isdigit():
        nargs = int(nargs)
    if isinstance(nargs, str) and nargs not in ("?", "*", "+"):
        raise ValueError("%s 'nargs' must be one of '?', '*', '+' or a positive integer" % cls.__typename__)
    if isinstance(nargs, int) and nargs < 1:
        raise ValueError("%s 'nargs' must be a positive integer" % cls.__typename__)
    metadata["nargs"] = nargs


class Flag(metaclass=SpecType):
    """
    Named option specification.

    The long name is not part of the spec: it is the key under which the flag is
    declared in a command's `flags` mapping. The short name, when given, is a single
    character matched as -x.

    Highlights
    - Value-bearing unless its type is the toggle marker (bool / Scalar(bool)).
    - deep_pass flags are offered to all descendant commands and listed there under
      "Inherited Flags".
    - placeholder names the value in help; it defaults to the long name and is
      cleared for toggles.
    """

    __introspectable__ = (
        "type",
        "short",
        "default",
        "descr",
        "placeholder",
        "deep_pass",
        "group",
    )

    def __init__(
            self,
            type=Unset,
            *,
            short=Unset,
            default=Unset,
            descr=Unset,
            placeholder=Unset,
            deep_pass=Unset,
            group=Unset,
    ):
        """
        Construct a Flag spec with the provided metadata.

        Parameters
        - type: FlagType | Callable | [Callable]
          Converter for the raw value(s). Defaults to Scalar(str).
        - short: str
          Single-character alias (used as -x).
        - default: Any
          Value bound when the flag is absent from the input.
        - descr: str
          Short description for help.
        - placeholder: str | None
          Name shown for the value in help.
        - deep_pass: bool
          Pass this flag down to every descendant command.
        - group: str
          Help section the flag is listed under.
        """
        metadata = {
            "type": type,
            "short": short,
            "default": default,
            "descr": descr,
            "placeholder": placeholder,
            "deep_pass": deep_pass,
            "group": group,
        }
        _sanitize_flag_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def toggle(self):
        """
        True for presence-only flags (no value on the command line).
        """
        return self._type.toggle

    @property
    def repeated(self):
        return self._type.repeated


class Arg(metaclass=SpecType):
    """
    Positional argument specification.

    Arity (nargs)
    - "?": zero or one value (None when absent).
    - "*": every remaining value, possibly none; binding stops after it.
    - "+": every remaining value, at least one; binding stops after it.
    - N:   exactly N values; a scalar when N == 1, a list otherwise.
    """

    __introspectable__ = (
        "nargs",
        "descr",
    )

    def __init__(self, nargs=Unset, *, descr=Unset):
        metadata = {
            "nargs": nargs,
            "descr": descr,
        }
        _sanitize_nargs(builtins.type(self), metadata)
        _sanitize_string(builtins.type(self), metadata, "descr")

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def variadic(self):
        """
        True when this slot consumes every remaining value ("*" or "+").
        """
        return self._nargs in ("*", "+")


__all__ = (
    "Flag",
    "Arg",
)
