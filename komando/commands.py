"""
Komando command layer: declare and normalize command trees.

What this module provides
- Command: one node of the command tree (root or subcommand) with its flags, positional
  args, child commands, help metadata and an optional run handler.
- normalize(command): fill every omitted field with its default and validate the whole
  tree, returning a new tree (the input is never mutated).
- define_command(name, ...): build and normalize a subcommand in one step.
- groupby(label, collection): stamp a help group label on members lacking one.

Core ideas
- Declarations are partial: Command("app") is valid; normalize() completes it.
- Trees are immutable from the outside: fields are read-only properties and
  komando.utils.replace() builds modified copies.
- Validation is strict and early: anything ambiguous in a tree raises DefinitionError
  before a single token is parsed.

Quick start
    from komando import Command, Flag, Arg, komando

    app = Command(
        "app",
        version="v1.0.0",
        flags={"verbose": Flag(bool, short="v", deep_pass=True)},
        commands=[
            Command("serve", aliases=["s"], flags={"port": Flag(int, default=8080)},
                    run=lambda args, flags: print(flags["port"])),
        ],
    )

    if __name__ == "__main__":
        komando(app)
"""
import re
from collections import defaultdict
from collections.abc import Iterable, Mapping

from rich.text import Text

from .arguments import Flag, Arg
from .faults import DefinitionError
from .log import logger
from .resolver import merge_flags
from .utils import *

# Flag names the runtime answers to by itself.
RESERVED_NAMES = frozenset({"help", "version"})
RESERVED_SHORTS = frozenset({"h", "V"})


def _process_name(cls, metadata, /):
    """
    Validate the command name: a non-empty token without whitespace that
    cannot be mistaken for a flag.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError("%s 'name' must be a string" % cls.__typename__)
    elif not (name := name.strip()):
        raise ValueError("%s 'name' cannot be empty" % cls.__typename__)
    elif name.startswith("-") or re.search(r"\s", name):
        raise ValueError("%s 'name' must be a single token not starting with '-'" % cls.__typename__)
    metadata["name"] = name


def _process_strings(cls, metadata, /):
    """
    Validate optional display strings (version, usage, descr, example, epilog, group).

    Each is Unset or a string with visible content; rich Text is accepted as-is.
    Display strings keep their layout (an epilog may start with blank lines or
    indentation); only the version and group label are trimmed.
    """
    for key in ("version", "usage", "descr", "example", "epilog", "group"):
        if not isinstance(value := metadata[key], str | Text | Unset):
            raise TypeError("%s %r must be a string" % (cls.__typename__, key))
        elif isinstance(value, str) and not value.strip():
            raise ValueError("%s %r cannot be empty" % (cls.__typename__, key))
        elif isinstance(value, str) and key in ("version", "group"):
            metadata[key] = value.strip()


def _process_iterables(cls, metadata, /):
    """
    Validate and copy the collection fields.

    - aliases: iterable of single-token strings (not a bare string).
    - commands: iterable of Command, kept in declaration order.
    - flags: mapping of long name -> Flag; names must look like identifiers
      (camelCase, snake_case and kebab-case are accepted).
    - args: mapping of name -> Arg, kept in declaration order.
    """
    if (aliases := metadata["aliases"]) is not Unset:
        if isinstance(aliases, str) or not isinstance(aliases, Iterable):
            raise TypeError("%s 'aliases' must be an iterable of strings" % cls.__typename__)
        sanitized = []
        for alias in aliases:
            if not isinstance(alias, str):
                raise TypeError("%s 'aliases' must contain only strings" % cls.__typename__)
            elif not (alias := alias.strip()) or alias.startswith("-") or re.search(r"\s", alias):
                raise ValueError("%s alias %r must be a single token not starting with '-'" % (cls.__typename__, alias))
            sanitized.append(alias)
        metadata["aliases"] = sanitized

    if (commands := metadata["commands"]) is not Unset:
        if not isinstance(commands, Iterable) or isinstance(commands, str | Mapping):
            raise TypeError("%s 'commands' must be an iterable of commands" % cls.__typename__)
        commands = list(commands)
        if not all(isinstance(command, Command) for command in commands):
            raise TypeError("%s 'commands' must contain only commands" % cls.__typename__)
        metadata["commands"] = commands

    if (flags := metadata["flags"]) is not Unset:
        if not isinstance(flags, Mapping):
            raise TypeError("%s 'flags' must be a mapping of names to flags" % cls.__typename__)
        for name, flag in flags.items():
            if not isinstance(name, str) or not re.fullmatch(r"[^\W\d_](?:[-_]?[^\W_]+)*", name):
                raise ValueError("%s flag name %r is not a valid flag name" % (cls.__typename__, name))
            if not isinstance(flag, Flag):
                raise TypeError("%s flag %r must be a flag" % (cls.__typename__, name))
        metadata["flags"] = dict(flags)

    if (args := metadata["args"]) is not Unset:
        if not isinstance(args, Mapping):
            raise TypeError("%s 'args' must be a mapping of names to args" % cls.__typename__)
        for name, arg in args.items():
            if not isinstance(name, str) or not name.strip() or name == "--":
                raise ValueError("%s arg name %r is not a valid arg name" % (cls.__typename__, name))
            if not isinstance(arg, Arg):
                raise TypeError("%s arg %r must be an arg" % (cls.__typename__, name))
        metadata["args"] = dict(args)


def _process_callables(cls, metadata, /):
    for key in ("run", "show_version"):
        if metadata[key] is not Unset and not callable(metadata[key]):
            raise TypeError("%s %r must be callable" % (cls.__typename__, key))


class Command(metaclass=SpecType):
    """
    One node of a command tree.

    Fields (all optional except name)
    - name: token that selects this command among its siblings.
    - aliases: extra tokens selecting this command (subcommands only).
    - version: root only; enables -V/--version.
    - usage, descr, example, epilog: help text.
    - group: help section this command is listed under in its parent's help.
    - commands: child commands; the first match in this order wins.
    - flags: long name -> Flag.
    - args: name -> Arg, bound in this order.
    - run: handler called as run(args, flags); without it, help is shown.
    - show_version: root only; replaces the default "<name>@<version>" printer.

    Lifecycle
    - Construction checks shapes only; normalize() fills defaults and validates the
      tree as a whole. komando() normalizes the root it is given.
    """

    __introspectable__ = (
        "name",
        "version",
        "usage",
        "descr",
        "example",
        "epilog",
        "aliases",
        "group",
        "commands",
        "flags",
        "args",
        "run",
        "show_version",
    )

    def __init__(
            self,
            name,
            *,
            version=Unset,
            usage=Unset,
            descr=Unset,
            example=Unset,
            epilog=Unset,
            aliases=Unset,
            group=Unset,
            commands=Unset,
            flags=Unset,
            args=Unset,
            run=Unset,
            show_version=Unset,
    ):
        metadata = {
            "name": name,
            "version": version,
            "usage": usage,
            "descr": descr,
            "example": example,
            "epilog": epilog,
            "aliases": aliases,
            "group": group,
            "commands": commands,
            "flags": flags,
            "args": args,
            "run": run,
            "show_version": show_version,
        }
        _process_name(type(self), metadata)
        _process_strings(type(self), metadata)
        _process_iterables(type(self), metadata)
        _process_callables(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def tokens(self):
        """
        Every token selecting this command: its name followed by its aliases.
        """
        return [self._name, *coalesce(self._aliases, [])]

    def find(self, token, /):
        """
        Return the first child selected by token, or None.
        """
        for command in coalesce(self._commands, []):
            if token in command.tokens:
                return command
        return None


def groupby(label, collection, /):
    """
    Stamp a help group label on every member of collection that lacks one.

    Existing labels are never overwritten. The collection is not mutated: a list
    (for sequences) or dict (for mappings) of possibly replaced members is returned.
    """
    if not isinstance(label, str):
        raise TypeError("groupby() first argument must be a string")

    def stamp(member):
        return replace(member, group=label) if member._group is Unset else member

    if isinstance(collection, Mapping):
        return {key: stamp(member) for key, member in collection.items()}
    return [stamp(member) for member in collection]


def _normalize_flag(name, flag, /):
    changes = {}
    if flag.toggle:
        changes["placeholder"] = None
    elif flag._placeholder is Unset:
        changes["placeholder"] = name
    if flag._deep_pass is Unset:
        changes["deep_pass"] = False
    if flag._default is Unset:
        changes["default"] = False if flag.toggle else None
    return replace(flag, **changes) if changes else flag


def _check_flags(command, flags, /):
    """
    Reject reserved names and short collisions within one command's own flags.
    """
    shorts = {}
    for name, flag in flags.items():
        if name in RESERVED_NAMES or kebabize(name) in RESERVED_NAMES:
            raise DefinitionError("flag name %r is reserved in %r command" % (name, command))
        if (short := flag._short) is Unset:
            continue
        if short in RESERVED_SHORTS:
            raise DefinitionError("short flag %r of %r is reserved in %r command" % (short, name, command))
        if short in shorts:
            raise DefinitionError("short flag %r is shared by %r and %r in %r command" % (
                short, shorts[short], name, command
            ))
        shorts[short] = name


def _check_siblings(command, children, /):
    """
    Sibling names and aliases form a single namespace; reject any repeat.
    """
    owners = defaultdict(list)
    for child in children:
        for token in child.tokens:
            owners[token].append(child.name)
    for token, names in owners.items():
        if len(names) > 1:
            raise DefinitionError("duplicate subcommand name or alias %r found in %r command" % (token, command))


def _normalize(command, inherited, /):
    name = command.name

    flags = {key: _normalize_flag(key, flag) for key, flag in coalesce(command._flags, {}).items()}
    _check_flags(name, flags)
    # Surfaces collisions with flags passed down by ancestors.
    merge_flags(inherited, flags)
    passed = inherited | {key: flag for key, flag in flags.items() if flag.deep_pass}

    children = [_normalize(child, passed) for child in coalesce(command._commands, [])]
    _check_siblings(name, children)

    args = {
        key: arg if arg._nargs is not Unset else replace(arg, nargs=1)
        for key, arg in coalesce(command._args, {}).items()
    }

    return replace(
        command,
        aliases=coalesce(command._aliases, []),
        commands=groupby("Commands", children),
        flags=groupby("Flags", flags),
        args=args,
    )


def normalize(command, /, *, root=True):
    """
    Return a fully resolved copy of a command tree.

    Defaults filled (never overwriting what was declared)
    - commands [], flags {}, args {}, aliases []
    - child command group "Commands", flag group "Flags"
    - flag placeholder = its long name (None for toggles), deep_pass False,
      default False for toggles and None otherwise
    - arg nargs 1

    Raises DefinitionError when
    - the root declares aliases (root=True only),
    - two sibling commands share a name or alias,
    - two flags of one command share a short character,
    - a flag uses a reserved name (help/version, -h/-V),
    - a command redeclares a flag one of its ancestors passes down.

    Normalizing an already normalized tree returns an equal tree.
    """
    if not isinstance(command, Command):
        raise TypeError("normalize() argument must be a command")
    if root and command._aliases:
        raise DefinitionError("root command %r cannot declare aliases" % command.name)
    normalized = _normalize(command, {})
    logger.debug("normalized command tree %r", normalized.name)
    return normalized


def define_command(name, /, **options):
    """
    Build and normalize a subcommand in one step.

    Accepts the same keywords as Command. The result is normalized as a non-root
    command, so aliases are allowed; ancestors' flags are checked again when the
    root is normalized.
    """
    return normalize(Command(name, **options), root=False)


__all__ = (
    "Command",
    "normalize",
    "define_command",
    "groupby",
)
