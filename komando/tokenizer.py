r"""
Low-level argv tokenizer.

Splits raw tokens into positionals, flag values and the passthrough tail,
knowing nothing about commands or types beyond three tables handed in by the
binder:

- aliases: spelled token -> canonical flag name ("--dry-run" -> "dry_run", "-n" -> "dry_run").
- booleans: canonical names of toggle flags (they never consume a following value).
- repeated: canonical names collecting every occurrence into a list.

Accepted spellings
- --name, --name=value, --name value, --no-name (toggles only)
- -x, -x value, -xvalue, -x=value, bundled toggles -abc
- a lone "-" and negative numbers ("-1", "-2.5") are positionals
- "--" ends flag parsing; everything after it lands in the tail verbatim

A value-bearing flag with nothing to consume yields True. Flag-like tokens
missing from the alias table are handed to the unknown(token, name, value)
callback; a truthy return keeps them as positionals, otherwise they are dropped.
"""
import re
from collections import deque
from typing import NamedTuple

from .log import logger

NUMBER = re.compile(r"-\d+(\.\d+)?([eE][-+]?\d+)?")


class Tokens(NamedTuple):
    positionals: list
    tail: list
    flags: dict


def _flaglike(token):
    return token.startswith("-") and token != "-" and not NUMBER.fullmatch(token)


def tokenize(tokens, /, *, aliases=None, booleans=(), repeated=(), unknown=None):
    """
    Tokenize argv-like input; see the module documentation for the grammar.

    When unknown is None, unrecognized flags are recorded under their spelled
    name (without dashes) like any other flag.
    """
    aliases = dict(aliases or {})
    booleans = frozenset(booleans)
    repeated = frozenset(repeated)

    tokens = list(tokens)
    tail = []
    if "--" in tokens:
        index = tokens.index("--")
        tokens, tail = tokens[:index], tokens[index + 1:]

    queue = deque(tokens)
    positionals = []
    flags = {}

    def record(name, value):
        if name in repeated:
            occurrences = flags.setdefault(name, [])
            if value is not True:
                occurrences.append(value)
        else:
            flags[name] = value

    def following():
        # (value, consumed) for a flag whose value may be the next token
        if queue and not _flaglike(queue[0]):
            return queue.popleft(), True
        return True, False

    def report(token, name, value, consumed, raw=None):
        if unknown is None:
            record(name, value)
            return
        logger.debug("unknown flag %r (value %r)", token, value)
        if unknown(token, name, value):
            positionals.append(raw or token)
            if consumed:
                positionals.append(value)

    while queue:
        token = queue.popleft()

        if not _flaglike(token):
            positionals.append(token)

        elif token.startswith("--"):
            name, sep, value = token[2:].partition("=")
            if (canonical := aliases.get("--" + name)) is not None:
                if sep:
                    record(canonical, value)
                elif canonical in booleans:
                    record(canonical, True)
                else:
                    record(canonical, following()[0])
            elif not sep and name.startswith("no-") and aliases.get("--" + name[3:]) in booleans:
                record(aliases["--" + name[3:]], False)
            elif sep:
                report("--" + name, name, value, False, token)
            else:
                report(token, name, *following())

        else:
            body = token[1:]
            if len(body) > 1 and body[1] == "=":
                if (canonical := aliases.get("-" + body[0])) is not None:
                    record(canonical, body[2:])
                else:
                    report("-" + body[0], body[0], body[2:], False, token)
                continue

            for index, char in enumerate(body):
                last = index == len(body) - 1
                if (canonical := aliases.get("-" + char)) is None:
                    report("-" + char, char, *(following() if last else (True, False)))
                elif canonical in booleans:
                    record(canonical, True)
                elif not last:
                    record(canonical, body[index + 1:].removeprefix("="))
                    break
                else:
                    record(canonical, following()[0])

    for name in repeated:
        if flags.get(name) == []:
            flags[name] = True

    return Tokens(positionals, tail, flags)


__all__ = (
    "Tokens",
    "tokenize",
)
