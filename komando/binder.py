"""
Flag and positional binding.

bind(command, tokens) turns the tokens left by the resolver into the two values
handed to a command handler:

- flags: every active flag (own and inherited) -> typed value, or its default.
- args: every declared positional -> bound value, plus "--" -> passthrough list.

Positional arity
- "?"  one value or None
- "*"  every remaining value (possibly none); later args are left None
- "+"  every remaining value, at least one; later args are left None
- N    exactly N values; a scalar when N == 1, a list otherwise

Unknown flags are collected during a full scan and reported together; values
left over once every arg is bound are ignored.
"""
from collections import deque
from types import MappingProxyType
from typing import NamedTuple

from .faults import *
from .log import logger
from .tokenizer import tokenize
from .utils import *


class Binding(NamedTuple):
    args: MappingProxyType
    flags: dict


def _tables(flags):
    aliases = {}
    for name, flag in flags.items():
        aliases["--" + name] = name
        aliases["--" + kebabize(name)] = name
        if flag.short:
            aliases["-" + flag.short] = name
    booleans = {name for name, flag in flags.items() if flag.toggle}
    repeated = {name for name, flag in flags.items() if flag.repeated}
    return aliases, booleans, repeated


def _bind_flags(flags, raw, route, options):
    typed = {}
    for name, flag in flags.items():
        if name not in raw:
            typed[name] = coalesce(flag._default, False if flag.toggle else None)
            continue
        # a value-bearing flag given without a value, or with an empty one
        if ((value := raw[name]) is True or value == "") and not flag.toggle:
            typed[name] = value
            continue
        try:
            typed[name] = flag._type.coerce(value)
        except (ValueError, TypeError) as exception:
            trigger(InvalidValueError(
                "invalid value %r for flag '--%s': %s" % (value, kebabize(name), exception),
                title="invalid value",
                code=FaultCode.INVALID_VALUE,
                hint="run '%s --help' to see what '--%s' expects" % (route, kebabize(name)),
                docs=getdoc(FaultCode.INVALID_VALUE),
            ), **options)
    return typed


def _bind_args(args, positionals, route, options):
    queue = deque(positionals)
    bound = {}
    halted = False

    def missing(name, expected, message):
        trigger(ArityError(
            message,
            title="missing arguments",
            code=FaultCode.MISSING_ARGUMENTS,
            argument=name,
            expected=expected,
            hint="run '%s --help' to see the expected usage" % route,
            docs=getdoc(FaultCode.MISSING_ARGUMENTS),
        ), **options)

    for name, arg in args.items():
        if halted:
            bound[name] = None
            continue
        match nargs := coalesce(arg._nargs, 1):
            case "?":
                bound[name] = queue.popleft() if queue else None
            case "*":
                bound[name] = list(queue)
                queue.clear()
                halted = True
            case "+":
                if not queue:
                    missing(name, "+", "argument %r requires at least one argument" % name)
                bound[name] = list(queue)
                queue.clear()
                halted = True
            case int():
                if len(queue) < nargs:
                    missing(name, nargs, "argument %r expected %d argument(s), got %d" % (name, nargs, len(queue)))
                values = [queue.popleft() for _ in range(nargs)]
                bound[name] = values[0] if nargs == 1 else values

    if queue:
        logger.debug("ignoring %d unconsumed positional(s): %r", len(queue), list(queue))
    return bound


def bind(command, tokens, /, *, route=Unset, **options):
    """
    Bind tokens against the flags and args of a resolved command.

    Parameters
    - command: the resolved Command (flags already merged by the resolver).
    - tokens: the tokens left after resolution.
    - route: name shown in hints ("app sub"); defaults to the command name.
    - options: forwarded to trigger() for every fault (shell, colorful, ...).

    Faults
    - UnknownFlagsError: at least one flag-like token is not declared; raised
      after the whole input has been scanned, listing every offender.
    - InvalidValueError: a converter rejected a value.
    - ArityError: a required positional is missing.
    """
    route = coalesce(route, command.name)
    options.setdefault("tool", command)
    flags = coalesce(command._flags, {})
    aliases, booleans, repeated = _tables(flags)

    unknowns = {}

    def collect(token, name, value):
        unknowns[token] = value
        return False

    parsed = tokenize(tokens, aliases=aliases, booleans=booleans, repeated=repeated, unknown=collect)

    if unknowns:
        trigger(UnknownFlagsError(
            "unknown flag(s) %s for %r" % (", ".join(unknowns), route),
            title="unknown flags",
            code=FaultCode.UNKNOWN_FLAGS,
            unknowns=unknowns,
            hint="run '%s --help' to see the available flags" % route,
            docs=getdoc(FaultCode.UNKNOWN_FLAGS),
        ), **options)

    typed = _bind_flags(flags, parsed.flags, route, options)
    args = _bind_args(coalesce(command._args, {}), parsed.positionals, route, options)
    args["--"] = list(parsed.tail)

    logger.debug("bound %r: args=%r flags=%r", route, args, typed)
    return Binding(MappingProxyType(args), typed)


__all__ = (
    "Binding",
    "bind",
)
