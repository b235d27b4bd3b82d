"""
Command resolution: walk a normalized command tree following the leading tokens
of an invocation and merge inherited flags at every descent.

resolve(root, argv) returns a Resolution holding the deepest command reached
(with its flags replaced by the merged set), the tokens left for the binder and
the names on the path from the root.
"""
from collections import Counter
from typing import NamedTuple

from .faults import DefinitionError
from .log import logger
from .utils import *

INHERITED = "Inherited Flags"


def merge_flags(parent, child, /):
    """
    Merge the flags of a parent command into the flags of its child.

    - The child's own flags come first and keep their declaration.
    - Parent flags marked deep_pass are added after them, relabeled "Inherited Flags".
    - A deep_pass parent flag redeclared by the child raises DefinitionError.
    - Two flags of the merged set sharing a short character, or spelled the same
      once kebab-cased, raise DefinitionError.

    Neither mapping is modified; a new dict is returned.
    """
    merged = dict(child)
    duplicates = []
    for name, flag in parent.items():
        if not flag.deep_pass:
            continue
        if name in child:
            duplicates.append(name)
            continue
        merged[name] = replace(flag, group=INHERITED)

    if duplicates:
        raise DefinitionError(
            "found duplicate flags when merging inherited and child flags: %s" % ", ".join(map(repr, duplicates))
        )

    shorts = Counter(flag.short for flag in merged.values() if flag.short)
    if clashes := sorted(short for short, count in shorts.items() if count > 1):
        raise DefinitionError("short flag(s) %s used by more than one flag" % ", ".join("-" + x for x in clashes))

    spellings = Counter(map(kebabize, merged))
    if clashes := sorted(spelling for spelling, count in spellings.items() if count > 1):
        raise DefinitionError("flag(s) %s declared under more than one name" % ", ".join("--" + x for x in clashes))

    return merged


class Resolution(NamedTuple):
    """
    Outcome of resolve().

    - command: the deepest matched command, flags already merged.
    - tokens: the input left after the consumed command tokens.
    - path: names from the root to the matched command.
    """
    command: object
    tokens: list
    path: tuple

    @property
    def flags(self):
        return coalesce(self.command._flags, {})

    @property
    def route(self):
        return " ".join(self.path)


def resolve(command, argv, /):
    """
    Follow the leading tokens of argv down the command tree.

    At each level the children are scanned in declaration order and the first
    one whose name or aliases contain the next token wins; the token is consumed
    and resolution continues from that child. Resolution stops at the first
    token that selects no child (a flag, a positional, "--") or when the input
    runs out. Handlers of intermediate commands play no part.
    """
    current = command
    tokens = list(argv)
    path = [command.name]

    while tokens:
        if (child := current.find(tokens[0])) is None:
            break
        flags = merge_flags(coalesce(current._flags, {}), coalesce(child._flags, {}))
        current = replace(child, flags=flags)
        path.append(child.name)
        logger.debug("token %r resolved to command %r", tokens.pop(0), " ".join(path))

    logger.debug("resolution stopped at %r with %d token(s) left", " ".join(path), len(tokens))
    return Resolution(current, tokens, tuple(path))


__all__ = (
    "Resolution",
    "resolve",
    "merge_flags",
)
