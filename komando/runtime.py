"""
Dispatch pipeline.

komando(command, argv) runs one invocation end to end:

1. normalize the root command tree;
2. -V/--version anywhere before "--" (root declares a version) -> print it, stop;
3. resolve the deepest command selected by the leading tokens;
4. -h/--help among the remaining tokens before "--" -> print help, stop;
5. no run handler -> print help, then MissingHandlerError;
6. bind flags and positionals;
7. call run(args, flags) and return its result.

Faults are raised by default; with shell=True they are printed to stderr and the
process exits with status 1. Exceptions raised by handlers propagate untouched.
"""
import asyncio
import inspect
import sys

from rich.console import Console
from rich.text import Text

from .binder import bind
from .commands import normalize
from .faults import *
from .helper import show_help
from .log import logger
from .resolver import resolve
from .utils import *


def _before_tail(tokens):
    return tokens[:tokens.index("--")] if "--" in tokens else tokens


async def _drive(awaitable):
    return await awaitable


def komando(command, argv=Unset, /, *, console=Unset, shell=False, colorful=False):
    """
    Parse argv against a command tree and dispatch to the selected handler.

    Parameters
    - command: the root Command (normalized here; the input is left untouched).
    - argv: tokens to parse, program name excluded. Defaults to sys.argv[1:].
    - console: rich Console receiving help and version output (stdout by default).
    - shell: print faults and exit(1) instead of raising them.
    - colorful: style help labels and rendered faults.

    Returns the handler's result, or None when help or the version was shown.
    An async handler is run to completion with asyncio.run() unless an event
    loop is already running, in which case its awaitable is returned.
    """
    root = normalize(command)
    argv = list(sys.argv[1:] if argv is Unset else argv)
    console = coalesce(console, None) or Console()
    options = {"shell": shell, "colorful": colorful}

    head = _before_tail(argv)
    if root.version and ("-V" in head or "--version" in head):
        logger.debug("version requested for %r", root.name)
        if root.show_version:
            root.show_version(root.name, root.version)
        else:
            console.print(Text("%s@%s" % (root.name, root.version)), soft_wrap=True)
        return None

    resolution = resolve(root, argv)
    current = resolution.command

    if {"-h", "--help"} & set(_before_tail(resolution.tokens)):
        logger.debug("help requested for %r", resolution.route)
        show_help(current, resolution.path, root.version, console=console, colorful=colorful)
        return None

    if not current.run:
        logger.debug("no handler for %r, showing help", resolution.route)
        show_help(current, resolution.path, root.version, console=console, colorful=colorful)
        trigger(MissingHandlerError(
            "command %r has nothing to run" % resolution.route,
            title="missing handler",
            code=FaultCode.MISSING_HANDLER,
            hint="pick one of the commands listed above" if current.commands else None,
            docs=getdoc(FaultCode.MISSING_HANDLER),
        ), tool=current, **options)

    args, flags = bind(current, resolution.tokens, route=resolution.route, tool=current, **options)

    logger.debug("dispatching %r", resolution.route)
    result = current.run(args, flags)
    if inspect.isawaitable(result):
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(_drive(result))
    return result


__all__ = (
    "komando",
)
