"""
Command specification and normalizer tests.

Scope
- Construction-time shape checks of Command.
- normalize(): defaults filled, declared values kept, input left untouched.
- Tree validation: root aliases, sibling namespace, short and reserved flags,
  redeclared inherited flags.
- Idempotence, define_command() and groupby().
"""
import unittest
from unittest import TestCase

from komando import *


def handler(args, flags):
    return args, flags


class CommandTest(TestCase):

    def testMinimalCommand(self):
        command = Command("app")
        self.assertEqual(command.name, "app")
        self.assertIsNone(command.commands)
        self.assertIsNone(command.flags)
        self.assertIsNone(command.run)

    def testNameValidation(self):
        with self.assertRaises(TypeError):
            Command(1)
        with self.assertRaises(ValueError):
            Command("  ")
        with self.assertRaises(ValueError):
            Command("-app")
        with self.assertRaises(ValueError):
            Command("my app")

    def testAliasesValidation(self):
        self.assertEqual(Command("sub", aliases=("s", "su")).aliases, ["s", "su"])
        with self.assertRaises(TypeError):
            Command("sub", aliases="s")
        with self.assertRaises(TypeError):
            Command("sub", aliases=[1])
        with self.assertRaises(ValueError):
            Command("sub", aliases=["-s"])

    def testCollectionsValidation(self):
        with self.assertRaises(TypeError):
            Command("app", commands=["sub"])
        with self.assertRaises(TypeError):
            Command("app", flags={"name": "value"})
        with self.assertRaises(ValueError):
            Command("app", flags={"1st": Flag()})
        with self.assertRaises(TypeError):
            Command("app", flags=[Flag()])
        with self.assertRaises(TypeError):
            Command("app", args={"file": 1})
        with self.assertRaises(ValueError):
            Command("app", args={"--": Arg()})

    def testFlagNameSpellings(self):
        command = Command("app", flags={"showAll": Flag(), "dry_run": Flag(), "no-color": Flag()})
        self.assertEqual(list(command.flags), ["showAll", "dry_run", "no-color"])

    def testCallablesValidation(self):
        with self.assertRaises(TypeError):
            Command("app", run="handler")
        with self.assertRaises(TypeError):
            Command("app", show_version=1)

    def testDisplayStringsKeepLayout(self):
        epilog = "\n  Env Variables\n    CI: true"
        self.assertEqual(Command("app", epilog=epilog).epilog, epilog)
        with self.assertRaises(ValueError):
            Command("app", descr=" \n ")

    def testTokensAndFind(self):
        sub = Command("sub", aliases=["s"])
        app = Command("app", commands=[sub])
        self.assertEqual(sub.tokens, ["sub", "s"])
        self.assertEqual(app.find("s"), sub)
        self.assertEqual(app.find("sub"), sub)
        self.assertIsNone(app.find("other"))


class NormalizeTest(TestCase):

    def setUp(self):
        self.command = Command(
            "app",
            commands=[Command("sub")],
            flags={"name": Flag(), "debug": Flag(bool), "tags": Flag([str])},
            args={"file": Arg()},
            run=handler,
        )

    def testFillsCollections(self):
        app = normalize(Command("app"))
        self.assertEqual(app.commands, [])
        self.assertEqual(app.flags, {})
        self.assertEqual(app.args, {})
        self.assertEqual(app.aliases, [])

    def testFillsFlagDefaults(self):
        flags = normalize(self.command).flags
        self.assertEqual(flags["name"].placeholder, "name")
        self.assertEqual(flags["tags"].placeholder, "tags")
        self.assertIsNone(flags["debug"].placeholder)
        for flag in flags.values():
            self.assertEqual(flag.group, "Flags")
            self.assertIs(flag.deep_pass, False)
        self.assertIsNone(flags["name"].default)
        self.assertIs(flags["debug"].default, False)

    def testFillsChildDefaults(self):
        app = normalize(self.command)
        sub, = app.commands
        self.assertEqual(sub.group, "Commands")
        self.assertEqual(sub.commands, [])
        self.assertEqual(app.args["file"].nargs, 1)

    def testKeepsDeclaredValues(self):
        app = normalize(Command(
            "app",
            commands=[Command("sub", group="Tools")],
            flags={
                "port": Flag(int, placeholder="PORT", group="Network", default=8080),
                "verbose": Flag(bool, deep_pass=True, default=True),
            },
            args={"files": Arg("+")},
        ))
        self.assertEqual(app.commands[0].group, "Tools")
        self.assertEqual(app.flags["port"].placeholder, "PORT")
        self.assertEqual(app.flags["port"].group, "Network")
        self.assertEqual(app.flags["port"].default, 8080)
        self.assertIs(app.flags["verbose"].deep_pass, True)
        self.assertIs(app.flags["verbose"].default, True)
        self.assertEqual(app.args["files"].nargs, "+")

    def testTogglePlaceholderIsCleared(self):
        app = normalize(Command("app", flags={"debug": Flag(bool, placeholder="x")}))
        self.assertIsNone(app.flags["debug"].placeholder)

    def testInputIsNotMutated(self):
        normalize(self.command)
        self.assertIsNone(self.command.flags["name"].placeholder)
        self.assertIsNone(self.command.commands[0].group)
        self.assertIsNone(self.command.args["file"].nargs)
        self.assertIsNone(self.command.aliases)

    def testIdempotent(self):
        once = normalize(self.command)
        self.assertEqual(normalize(once), once)

    def testIdempotentOnDeepTree(self):
        tree = Command(
            "app",
            version="v1.0.0",
            flags={"verbose": Flag(bool, short="v", deep_pass=True)},
            commands=[
                Command("one", aliases=["1"], commands=[
                    Command("two", flags={"level": Flag(int, short="l")}, args={"rest": Arg("*")}),
                ]),
            ],
        )
        once = normalize(tree)
        self.assertEqual(normalize(once), once)

    def testRejectsRootAliases(self):
        with self.assertRaises(DefinitionError):
            normalize(Command("app", aliases=["a"]))
        normalize(Command("app", aliases=[]))
        self.assertEqual(normalize(Command("sub", aliases=["s"]), root=False).aliases, ["s"])

    def testRejectsDuplicateSiblingNames(self):
        with self.assertRaises(DefinitionError):
            normalize(Command("app", commands=[Command("sub"), Command("sub")]))

    def testRejectsAliasClashingWithSiblingName(self):
        with self.assertRaises(DefinitionError):
            normalize(Command("app", commands=[Command("sub"), Command("other", aliases=["sub"])]))

    def testRejectsDuplicateSiblingAliases(self):
        with self.assertRaises(DefinitionError):
            normalize(Command("app", commands=[
                Command("one", aliases=["x"]),
                Command("two", aliases=["x"]),
            ]))

    def testRejectsDuplicatesDeepInTheTree(self):
        with self.assertRaises(DefinitionError):
            normalize(Command("app", commands=[
                Command("sub", commands=[Command("leaf"), Command("leaf")]),
            ]))

    def testSameNameAtDifferentLevelsIsFine(self):
        normalize(Command("app", commands=[Command("app", commands=[Command("app")])]))

    def testRejectsSharedShorts(self):
        with self.assertRaises(DefinitionError):
            normalize(Command("app", flags={"one": Flag(short="x"), "two": Flag(short="x")}))

    def testRejectsReservedFlags(self):
        for flags in (
            {"help": Flag(bool)},
            {"version": Flag()},
            {"assist": Flag(short="h")},
            {"show": Flag(short="V")},
        ):
            with self.assertRaises(DefinitionError):
                normalize(Command("app", flags=flags))

    def testRejectsRedeclaredInheritedFlag(self):
        with self.assertRaises(DefinitionError) as context:
            normalize(Command(
                "app",
                flags={"verbose": Flag(bool, deep_pass=True)},
                commands=[Command("sub", flags={"verbose": Flag(bool)})],
            ))
        self.assertIn("duplicate flags when merging inherited and child flags", str(context.exception))

    def testRejectsRedeclaredInheritedFlagInGrandchild(self):
        with self.assertRaises(DefinitionError):
            normalize(Command(
                "app",
                flags={"verbose": Flag(bool, deep_pass=True)},
                commands=[Command("sub", commands=[Command("leaf", flags={"verbose": Flag()})])],
            ))

    def testRejectsShortClashWithInheritedFlag(self):
        with self.assertRaises(DefinitionError):
            normalize(Command(
                "app",
                flags={"verbose": Flag(bool, short="v", deep_pass=True)},
                commands=[Command("sub", flags={"value": Flag(short="v")})],
            ))

    def testChildMayReuseNonInheritedNames(self):
        app = normalize(Command(
            "app",
            flags={"output": Flag(short="o")},
            commands=[Command("sub", flags={"output": Flag(short="o")})],
        ))
        self.assertIn("output", app.commands[0].flags)

    def testRejectsNonCommands(self):
        with self.assertRaises(TypeError):
            normalize("app")


class DefineCommandTest(TestCase):

    def testReturnsNormalizedCommand(self):
        sub = define_command("sub", aliases=["s"], flags={"name": Flag()}, run=handler)
        self.assertEqual(sub.aliases, ["s"])
        self.assertEqual(sub.commands, [])
        self.assertEqual(sub.flags["name"].placeholder, "name")
        self.assertIs(sub.run, handler)

    def testNestsUnderRoot(self):
        app = normalize(Command("app", commands=[define_command("sub", aliases=["s"])]))
        self.assertEqual(app.commands[0].group, "Commands")

    def testValidatesOwnTree(self):
        with self.assertRaises(DefinitionError):
            define_command("sub", commands=[Command("x"), Command("x")])


class GroupbyTest(TestCase):

    def testStampsMissingLabels(self):
        commands = groupby("Tools", [Command("a"), Command("b", group="Other")])
        self.assertEqual([command.group for command in commands], ["Tools", "Other"])

    def testMappings(self):
        flags = groupby("Output", {"color": Flag(), "quiet": Flag(bool, group="Flags")})
        self.assertEqual(flags["color"].group, "Output")
        self.assertEqual(flags["quiet"].group, "Flags")

    def testLeavesInputUntouched(self):
        flags = {"color": Flag()}
        groupby("Output", flags)
        self.assertIsNone(flags["color"].group)

    def testLabelMustBeString(self):
        with self.assertRaises(TypeError):
            groupby(1, [])


if __name__ == '__main__':
    unittest.main()
