"""
Flag value coercion.

A flag's type decides how the raw string(s) collected by the tokenizer become the
value handed to the command handler. Two shapes exist:

- Scalar(convert): one raw string, converted once.
- Repeated(convert): every occurrence is split on commas and each piece converted;
  the handler receives one flat list.

Scalar(bool) is the toggle marker: such flags take no value on the command line.

flagtype() accepts the shorthand spellings used in declarations:
    str           -> Scalar(str)
    bool          -> Scalar(bool)   (toggle)
    [int]         -> Repeated(int)
    Scalar(...)   -> unchanged
"""
from collections.abc import Sequence

from .utils import SpecType, Unset


def coerce_bool(value, /):
    """
    Convert a string to a boolean.

    Accepts the usual truthy/falsy spellings ("true"/"false", "yes"/"no",
    "on"/"off", "1"/"0"); booleans pass through. Anything else raises
    ValueError.
    """
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        raise TypeError("coerce_bool() argument must be a string or a boolean")
    value = value.strip().lower()
    if value in {"true", "t", "1", "yes", "y", "on"}:
        return True
    elif value in {"false", "f", "0", "no", "n", "off"}:
        return False
    raise ValueError("invalid boolean value %r" % value)


class FlagType(metaclass=SpecType):
    """
    Base of the flag type variants; holds the per-value converter.
    """

    __introspectable__ = (
        "convert",
    )

    def __init__(self, convert=str):
        if type(self) is FlagType:
            raise TypeError("flag-type is abstract, use scalar or repeated")
        if not callable(convert):
            raise TypeError("%s 'convert' must be callable" % type(self).__typename__)
        self._convert = convert

    @property
    def toggle(self):
        """
        True when the flag is a presence-only switch.
        """
        return False

    @property
    def repeated(self):
        return False

    def coerce(self, raw, /):
        raise NotImplementedError


class Scalar(FlagType):
    """
    Single-valued flag type.
    """

    @property
    def toggle(self):
        return self._convert is bool

    def coerce(self, raw, /):
        if self.toggle:
            return coerce_bool(raw)
        return self._convert(raw)


class Repeated(FlagType):
    """
    List-valued flag type; raw values are comma-separated and may repeat.
    """

    def __init__(self, convert=str):
        if convert is bool:
            raise TypeError("repeated flag-type cannot convert with bool")
        super().__init__(convert)

    @property
    def repeated(self):
        return True

    def coerce(self, raw, /):
        # The tokenizer hands a list of occurrences; a lone string is one occurrence.
        occurrences = [raw] if isinstance(raw, str) else list(raw)
        return [self._convert(piece) for occurrence in occurrences for piece in occurrence.split(",")]


def flagtype(object=Unset, /):
    """
    Resolve a declared flag type (or its shorthand) into a FlagType.

    Raises TypeError for anything that is neither a FlagType, a callable,
    nor a one-element list/tuple holding a callable.
    """
    if object is Unset:
        return Scalar(str)
    if isinstance(object, FlagType):
        return object
    if isinstance(object, Sequence) and not isinstance(object, str):
        if len(object) != 1 or not callable(object[0]):
            raise TypeError("flag 'type' list form must hold exactly one callable")
        return Repeated(object[0])
    if callable(object):
        return Scalar(object)
    raise TypeError("flag 'type' must be callable, a one-element list of a callable, or a flag-type")


__all__ = (
    "FlagType",
    "Scalar",
    "Repeated",
    "flagtype",
    "coerce_bool",
)
