"""
Komando utilities (internal helpers, carefully exposed)

Scope
- Core building blocks used across the package for consistent semantics and UX.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the specs (Command, Flag, Arg) and the parsing pipeline.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with deep, defensive copies
    for containers to discourage accidental mutation of public API state.

- kebabize(name)
  • Turn a declared flag name ("showAll", "show_all") into its command-line spelling ("show-all").

- replace(spec, **changes)
  • Build a modified copy of a spec (the spec's own __replace__ does the work).

- SpecType
  • Metaclass shared by the specs: read-only properties, reprs, equality and __replace__.

Quick examples
    >>> one = coalesce(Unset, "fallback")  # "fallback"
    >>> two = coalesce(None, "fallback")    # None  (None is preserved)
    >>> kebabize("highlightLine")
    'highlight-line'
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in spec constructors.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    This returns the given object unless it is the Unset sentinel, in which case
    the provided default is returned. Falsey values like None, 0, "", or [] are
    preserved as-is; they are not treated as “unset”.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> (decorator)
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
                """Decorator wrapper that applies the new name to the target callable."""
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values, processing nested items.

    Behavior
    - Sequence (non-string): returns a new list with each element processed.
    - Mapping: returns a new dict, preserving keys and processing values.
    - Set: returns a new set with each element processed.
    - Unset: becomes None, so the public view never leaks the sentinel.
    - Anything else: returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return coalesce(object)


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads from an attribute named "_{name}" on the
    instance, and returns a fresh copy for container types to discourage
    accidental mutation through the public API.

    Example
    - Given self._flags, declare flags = mirror("flags") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def kebabize(name, /):
    """
    Return the command-line spelling of a declared flag name.

    camelCase humps and underscores both become single hyphens, and the
    result is lowercased: "showAll" -> "show-all", "dry_run" -> "dry-run".
    Names that are already kebab-case are returned unchanged.
    """
    if not isinstance(name, str):
        raise TypeError("kebabize() argument must be a string")
    return re.sub(r"\B([A-Z])", r"-\1", name).replace("_", "-").lower()


def replace(object, /, **changes):
    """
    Return a copy of a spec with the given fields replaced.

    The spec must implement __replace__ (every class built by SpecType does).
    The original object is left untouched.
    """
    if not callable(getattr(object, "__replace__", None)):
        raise TypeError("replace() argument must have a __replace__ method")
    return object.__replace__(**changes)


class SpecType(type):
    """
    Metaclass that turns plain classes into read-only, comparable specs.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by "_{name}" (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Provide __eq__ over the backing fields, so two specs built from the same
      inputs compare equal (normalization is checked that way).
    - Provide __replace__, rebuilding the spec through its constructor with some
      fields overridden; constructors must accept every field by keyword.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

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
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                if (object := getattr(self, "_" + name)) is not Unset:
                    yield name, object
        self.__rich_repr__ = __rich_repr__

        @rename("__eq__")
        def __eq__(self, other):
            if type(self) is not type(other):
                return NotImplemented
            return all(
                getattr(self, "_" + name) == getattr(other, "_" + name)
                for name in type(self).__introspectable__
            )
        self.__eq__ = __eq__
        self.__hash__ = None

        @rename("__replace__")
        def __replace__(self, /, **changes):
            fields = type(self).__introspectable__
            if unknown := changes.keys() - set(fields):
                raise TypeError("%s has no field(s) %s" % (type(self).__typename__, ", ".join(sorted(unknown))))
            return type(self)(**{name: getattr(self, "_" + name) for name in fields} | changes)
        self.__replace__ = __replace__

        return self


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "kebabize",
    "replace",

    # Types
    "UnsetType",
    "SpecType",

    # Constants
    "Unset",
)
