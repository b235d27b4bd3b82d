"""
Binder tests: positional arity rules, typed flag values and defaults, the
passthrough list, and the faults raised for unknown flags, bad values and
missing positionals.
"""
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

import komando.faults as faults
from komando import *


def command(**options):
    return normalize(Command("app", **options))


class PositionalTest(TestCase):

    def testOptionalArgsInDeclarationOrder(self):
        app = command(args={"a": Arg("?"), "b": Arg("?")})
        args = bind(app, ["x"]).args
        self.assertEqual(args["a"], "x")
        self.assertIsNone(args["b"])

    def testOptionalArgsAllFilled(self):
        app = command(args={"a": Arg("?"), "b": Arg("?")})
        args = bind(app, ["x", "y"]).args
        self.assertEqual((args["a"], args["b"]), ("x", "y"))

    def testStarWithoutInputIsEmptyList(self):
        app = command(args={"a": Arg("*"), "b": Arg("*"), "c": Arg("+")})
        args = bind(app, []).args
        self.assertEqual(args["a"], [])
        self.assertIsNone(args["b"])
        self.assertIsNone(args["c"])

    def testStarConsumesEverything(self):
        app = command(args={"first": Arg(), "rest": Arg("*")})
        args = bind(app, ["1", "2", "3"]).args
        self.assertEqual(args["first"], "1")
        self.assertEqual(args["rest"], ["2", "3"])

    def testPlusRequiresOneValue(self):
        app = command(args={"files": Arg("+")})
        with self.assertRaises(ArityError) as context:
            bind(app, [])
        self.assertIn("at least one argument", str(context.exception))
        self.assertIn("files", str(context.exception))
        self.assertEqual(context.exception.argument, "files")

    def testPlusConsumesEverything(self):
        app = command(args={"files": Arg("+"), "after": Arg("?")})
        args = bind(app, ["a", "b"]).args
        self.assertEqual(args["files"], ["a", "b"])
        self.assertIsNone(args["after"])

    def testFixedArity(self):
        app = command(args={"a": Arg(2), "b": Arg("2")})
        args = bind(app, ["1", "2", "3", "4", "5"]).args
        self.assertEqual(args["a"], ["1", "2"])
        self.assertEqual(args["b"], ["3", "4"])
        self.assertNotIn("5", args.values())

    def testFixedArityShortInput(self):
        app = command(args={"a": Arg(3)})
        with self.assertRaises(ArityError) as context:
            bind(app, ["1"])
        self.assertIn("expected 3 argument(s)", str(context.exception))
        self.assertEqual(context.exception.expected, 3)

    def testDefaultArityBindsScalar(self):
        app = command(args={"file": Arg()})
        self.assertEqual(bind(app, ["x"]).args["file"], "x")

    def testDefaultArityIsRequired(self):
        app = command(args={"file": Arg()})
        with self.assertRaises(ArityError) as context:
            bind(app, [])
        self.assertIn("expected 1 argument(s)", str(context.exception))

    def testPassthroughList(self):
        app = command(args={"file": Arg()})
        args = bind(app, ["x", "--", "-a", "--b", "c"]).args
        self.assertEqual(args["file"], "x")
        self.assertEqual(args["--"], ["-a", "--b", "c"])

    def testPassthroughAlwaysPresent(self):
        self.assertEqual(bind(command(), []).args["--"], [])

    def testArgsAreReadOnly(self):
        args = bind(command(args={"file": Arg("?")}), []).args
        with self.assertRaises(TypeError):
            args["file"] = "x"


class FlagTest(TestCase):

    def setUp(self):
        self.app = command(flags={
            "count": Flag(int, short="c"),
            "tags": Flag([int]),
            "debug": Flag(bool, short="d"),
            "name": Flag(default="anon"),
            "dryRun": Flag(bool),
        })

    def testTypedValues(self):
        flags = bind(self.app, ["-c", "3", "--tags", "1,2", "--tags", "3", "--debug"]).flags
        self.assertEqual(flags, {"count": 3, "tags": [1, 2, 3], "debug": True, "name": "anon", "dryRun": False})

    def testDefaultsForAbsentFlags(self):
        flags = bind(self.app, []).flags
        self.assertIsNone(flags["count"])
        self.assertIsNone(flags["tags"])
        self.assertIs(flags["debug"], False)
        self.assertEqual(flags["name"], "anon")

    def testDefaultsAreNotConverted(self):
        app = command(flags={"port": Flag(int, default="8080")})
        self.assertEqual(bind(app, []).flags["port"], "8080")

    def testKebabSpelling(self):
        self.assertIs(bind(self.app, ["--dry-run"]).flags["dryRun"], True)
        self.assertIs(bind(self.app, ["--dryRun"]).flags["dryRun"], True)

    def testNegatedToggle(self):
        self.assertIs(bind(self.app, ["--no-debug"]).flags["debug"], False)

    def testInlineToggleValue(self):
        self.assertIs(bind(self.app, ["--debug=false"]).flags["debug"], False)
        self.assertIs(bind(self.app, ["--debug=yes"]).flags["debug"], True)

    def testValueFlagWithoutValue(self):
        self.assertIs(bind(self.app, ["--count"]).flags["count"], True)

    def testEmptyInlineValueIsNotConverted(self):
        self.assertEqual(bind(self.app, ["--count="]).flags["count"], "")
        self.assertEqual(bind(self.app, ["-c="]).flags["count"], "")

    def testBundledInlineValue(self):
        flags = bind(self.app, ["-dc=7"]).flags
        self.assertIs(flags["debug"], True)
        self.assertEqual(flags["count"], 7)

    def testInvalidValue(self):
        with self.assertRaises(InvalidValueError) as context:
            bind(self.app, ["--count", "three"])
        self.assertIn("--count", str(context.exception))

    def testInvalidToggleValue(self):
        with self.assertRaises(InvalidValueError):
            bind(self.app, ["--debug=maybe"])

    def testFlagsAndPositionalsInterleave(self):
        app = command(flags={"debug": Flag(bool)}, args={"a": Arg(), "b": Arg()})
        binding = bind(app, ["x", "--debug", "y"])
        self.assertEqual((binding.args["a"], binding.args["b"]), ("x", "y"))
        self.assertIs(binding.flags["debug"], True)

    def testInheritedFlagBindsAfterChildToken(self):
        root = normalize(Command(
            "app",
            flags={"verbose": Flag(bool, short="v", deep_pass=True)},
            commands=[Command("sub", args={"x": Arg("?")})],
        ))
        resolution = resolve(root, ["sub", "-v", "value"])
        binding = bind(resolution.command, resolution.tokens)
        self.assertIs(binding.flags["verbose"], True)
        self.assertEqual(binding.args["x"], "value")


class UnknownFlagsTest(TestCase):

    def setUp(self):
        self.app = command(flags={"known": Flag()})

    def testCollectsEveryUnknownFlag(self):
        with self.assertRaises(UnknownFlagsError) as context:
            bind(self.app, ["--bogus", "--other=1", "--known", "x", "-z"])
        self.assertEqual(context.exception.unknowns, {"--bogus": True, "--other": "1", "-z": True})

    def testFaultCarriesCommand(self):
        with self.assertRaises(UnknownFlagsError) as context:
            bind(self.app, ["--bogus"])
        self.assertEqual(context.exception.options["code"], FaultCode.UNKNOWN_FLAGS)
        self.assertEqual(context.exception.options["tool"], self.app)

    def testShellModeExits(self):
        stream = io.StringIO()
        with patch.object(faults, "console", Console(file=stream, width=80)):
            with self.assertRaises(SystemExit) as context:
                bind(self.app, ["--bogus", "v"], shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("--bogus", stream.getvalue())
        self.assertIn("'v'", stream.getvalue())


if __name__ == '__main__':
    unittest.main()
