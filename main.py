from rich.pretty import pprint

from komando import *


def choice(*choices):
    def convert(value):
        if value not in choices:
            raise ValueError("invalid choice, choose from %s" % ",".join(choices))
        return value
    return convert


def dump(args, flags):
    pprint(dict(args))
    pprint(flags)


bat = Command(
    "bat",
    descr="bat 0.15.0\n    A cat(1) clone with syntax highlighting and Git integration.",
    usage="bat [OPTIONS] [FILE]...\n    bat <SUBCOMMAND>",
    commands=[
        define_command(
            "cache",
            flags={
                "build": Flag(bool, short="b", descr="Initialize (or update) the syntax/theme cache."),
                "clear": Flag(bool, short="c", descr="Remove the cached syntax definitions and themes."),
                "source": Flag(str, placeholder="dir", descr="Use a different directory to load syntaxes and themes from."),
                "target": Flag(str, placeholder="dir", descr="Use a different directory to store the cached syntax and theme set."),
                "blank": Flag(bool, descr="Create completely new syntax and theme sets (instead of appending to the default sets)."),
            },
            run=dump,
        ),
    ],
    flags={
        "showAll": Flag(bool, short="A", descr="Show non-printable characters (space, tab, newline, ..)."),
        "plain": Flag(bool, short="p", descr="Show plain style (alias for '--style=plain')."),
        "language": Flag(str, short="l", descr="Set the language for syntax highlighting."),
        "highlightLine": Flag([str], short="H", placeholder="N:M", descr="Highlight lines N through M."),
        "fileName": Flag([str], placeholder="name", descr="Specify the name to display for a file."),
        "diff": Flag(bool, short="d", descr="Only show lines that have been added/removed/modified."),
        "tabs": Flag(int, placeholder="T", descr="Set the tab width to T spaces."),
        "wrap": Flag(choice("auto", "never", "character"), placeholder="mode", default="auto",
                     descr="Specify the text-wrapping mode (*auto*, never, character)."),
        "number": Flag(bool, short="n", descr="Show line numbers (alias for '--style=numbers')."),
        "color": Flag(choice("auto", "never", "always"), placeholder="when", default="auto",
                      descr="When to use colors (*auto*, never, always)."),
        "paging": Flag(choice("auto", "never", "always"), placeholder="when", default="auto",
                       descr="Specify when to use the pager (*auto*, never, always)."),
        "mapSyntax": Flag([str], short="m", placeholder="glob:syntax",
                          descr="Use the specified syntax for files matching the glob pattern ('*.cpp:C++')."),
        "theme": Flag(str, descr="Set the color theme for syntax highlighting."),
        "lineRange": Flag([str], short="r", placeholder="N:M", descr="Only print the lines from N to M."),
        "listLanguages": Flag(bool, short="L", descr="Display all supported languages."),
    },
    args={
        "file": Arg("+", descr="File(s) to print / concatenate. Use '-' for standard input."),
    },
    run=dump,
)


if __name__ == '__main__':
    komando(bat, shell=True, colorful=True)
