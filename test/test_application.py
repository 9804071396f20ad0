"""
Application module behavioral tests (registry, dispatch, exit codes, sinks).

Scope
- Validate the registry (add/attach/get commands, decorator form).
- Validate Run: no command, unknown command, validation failure, handler pass-through.
- Validate flag() access, fresh state per run and trailing arguments.
- Validate shell=False raising faults instead of printing them.

Conventions
- Test method names follow CamelCase per project convention.
- Sinks are io.StringIO; the file-existence predicate is injected or a real temp file.
"""
import io
import os
import tempfile
import unittest
from unittest import TestCase

from helmsman import Application, Command, Flag, Kind, Separator
from helmsman.faults import *


class TestRegistry(TestCase):

    def setUp(self):
        self.app = Application("shipyard", "Builds ships", "The Crew", prog="ship")

    def testMetadata(self):
        self.assertEqual(self.app.name, "shipyard")
        self.assertEqual(self.app.descr, "Builds ships")
        self.assertEqual(self.app.author, "The Crew")
        self.assertEqual(self.app.prog, "ship")

    def testAddCommandReturnsAttachedCommand(self):
        cmd = self.app.add_command("launch", "Launch", lambda app: 0)
        self.assertIsInstance(cmd, Command)
        self.assertIs(self.app.get_command("launch"), cmd)

    def testAddCommandSupportsChaining(self):
        cmd = self.app.add_command("launch", "Launch", lambda app: 0).add_flag(Flag("a")).add_flag(Flag("b"))
        self.assertEqual(cmd.get_flags(), ("a", "b"))

    def testDecoratorForm(self):
        @self.app.command("launch", "Launch")
        def launch(app):
            return 0

        self.assertIsInstance(launch, Command)
        self.assertIs(self.app.get_command("launch"), launch)

    def testAttachOverwrites(self):
        first = Command("launch", "first", lambda app: 0)
        second = Command("launch", "second", lambda app: 0)
        self.app.attach_command(first)
        self.app.attach_command(second)
        self.assertIs(self.app.get_command("launch"), second)
        self.assertEqual(self.app.get_commands(), ("launch",))

    def testAttachRejectsNonCommand(self):
        with self.assertRaises(TypeError):
            self.app.attach_command("launch")

    def testGetCommandMissing(self):
        self.assertIsNone(self.app.get_command("nope"))

    def testGetCommandsEnumeratesAll(self):
        self.app.add_command("a", "", lambda app: 0)
        self.app.add_command("b", "", lambda app: 0)
        self.assertEqual(set(self.app.get_commands()), {"a", "b"})

    def testFlagBeforeRunIsEmpty(self):
        self.assertEqual(self.app.flag("anything"), "")

    def testMetadataMustBeStrings(self):
        with self.assertRaises(TypeError):
            Application(1)


class TestRun(TestCase):

    def setUp(self):
        self.app = Application("shipyard", "Builds ships", "The Crew", prog="ship")
        self.stdout = io.StringIO()
        self.stderr = io.StringIO()
        self.seen = {}

        def launch(app):
            self.seen.update(app.parsed_flags)
            self.seen["__arguments__"] = app.arguments
            return 0

        self.launch = self.app.add_command("launch", "Launch a ship", launch)

    def run_app(self, *tokens, exists=lambda path: False):
        return self.app.run(["/usr/bin/ship", *tokens], self.stdout, self.stderr, exists=exists)

    def testNoCommandGiven(self):
        self.assertEqual(self.run_app(), 1)
        self.assertIn("no command given", self.stderr.getvalue())
        self.assertIn("Available commands:", self.stdout.getvalue())

    def testUnknownCommand(self):
        self.assertEqual(self.run_app("lanch"), 1)
        self.assertIn("unknown command 'lanch'", self.stderr.getvalue())
        self.assertIn("did you mean 'launch'?", self.stderr.getvalue())
        self.assertIn("ship launch", self.stdout.getvalue())
        self.assertEqual(self.seen, {})

    def testOptionalFlagsOnly(self):
        self.launch.add_flag(Flag("name"))
        self.launch.add_flag(Flag("count", "", Kind.INT))
        self.launch.add_flag(Flag("verbose", "", Kind.BOOL))
        self.assertEqual(self.run_app("launch"), 0)
        self.assertEqual(self.app.flag("name"), "")
        self.assertEqual(self.app.flag("count"), "")
        self.assertEqual(self.app.flag("verbose"), "false")
        self.assertEqual(self.stdout.getvalue(), "")
        self.assertEqual(self.stderr.getvalue(), "")

    def testRequiredStringMissing(self):
        self.launch.add_flag(Flag("name", "ship name", Kind.STRING, required=True))
        self.assertEqual(self.run_app("launch"), 1)
        self.assertIn("flag --name is missing", self.stderr.getvalue())
        self.assertIn("Available commands:", self.stdout.getvalue())
        self.assertNotIn("name", self.seen)

    def testFlagListingFollowsUsageOnFlagFailure(self):
        self.launch.add_flag(Flag("name", "ship name", Kind.STRING, required=True))
        self.run_app("launch")
        self.assertIn("Flags of launch:", self.stdout.getvalue())
        self.assertIn("ship name", self.stdout.getvalue())

    def testMissingFileNamesFlagAndPath(self):
        self.launch.add_flag(Flag("manifest", "", Kind.PATH_FILE, must_exist=True))
        self.assertEqual(self.run_app("launch", "--manifest", "/no/such/manifest"), 1)
        self.assertIn("--manifest", self.stderr.getvalue())
        self.assertIn("/no/such/manifest", self.stderr.getvalue())

    def testExistingFilePassesThrough(self):
        self.launch.add_flag(Flag("manifest", "", Kind.PATH_FILE, must_exist=True))
        with tempfile.NamedTemporaryFile() as handle:
            code = self.app.run(["ship", "launch", "--manifest=" + handle.name], self.stdout, self.stderr)
            self.assertEqual(code, 0)
            self.assertEqual(self.app.flag("manifest"), handle.name)
            self.assertTrue(os.path.exists(self.seen["manifest"]))

    def testMultiValueIntegers(self):
        self.launch.add_flag(Flag("ports", "", Kind.INT, many=True, separator=Separator.COLON))
        self.assertEqual(self.run_app("launch", "--ports=3:14:159"), 0)
        self.assertEqual(self.app.flag("ports"), "3:14:159")

    def testMultiValueIntegersWrongSeparator(self):
        self.launch.add_flag(Flag("ports", "", Kind.INT, many=True, separator=Separator.COLON))
        self.assertEqual(self.run_app("launch", "--ports=3,14"), 1)
        self.assertIn("flag --ports is not a valid integer", self.stderr.getvalue())

    def testBooleanRoundTrip(self):
        self.launch.add_flag(Flag("dry-run", "", Kind.BOOL))
        self.assertEqual(self.run_app("launch", "--dry-run"), 0)
        self.assertEqual(self.app.flag("dry-run"), "true")
        self.assertEqual(self.run_app("launch"), 0)
        self.assertEqual(self.app.flag("dry-run"), "false")

    def testParsedFlagsAreFreshPerRun(self):
        self.launch.add_flag(Flag("name"))
        self.run_app("launch", "--name=first")
        self.assertEqual(self.app.flag("name"), "first")
        self.run_app("lanch")
        self.assertEqual(self.app.flag("name"), "")

    def testHandlerExitCodePassesThrough(self):
        self.app.add_command("sink", "", lambda app: 3)
        self.assertEqual(self.run_app("sink"), 3)

    def testHandlerSeesTrailingArguments(self):
        self.launch.add_flag(Flag("name"))
        self.assertEqual(self.run_app("launch", "--name=a", "one", "two"), 0)
        self.assertEqual(self.seen["__arguments__"], ("one", "two"))

    def testUnknownFlagFails(self):
        self.launch.add_flag(Flag("name"))
        self.assertEqual(self.run_app("launch", "--nmae=a"), 1)
        self.assertIn("unknown flag --nmae", self.stderr.getvalue())

    def testCommandLineString(self):
        self.launch.add_flag(Flag("name"))
        code = self.app.run("ship launch --name 'two words'", self.stdout, self.stderr)
        self.assertEqual(code, 0)
        self.assertEqual(self.app.flag("name"), "two words")

    def testArgvMustHoldStrings(self):
        with self.assertRaises(TypeError):
            self.app.run(["ship", 1], self.stdout, self.stderr)

    def testProgDefaultsToBasenameOfArgv0(self):
        app = Application("shipyard")
        app.add_command("launch", "", lambda app: 0)
        stdout = io.StringIO()
        app.run(["/usr/local/bin/shipctl"], stdout, io.StringIO())
        self.assertIn("shipctl launch", stdout.getvalue())

    def testSinksAreExposed(self):
        self.run_app("launch")
        self.assertIs(self.app.stdout, self.stdout)
        self.assertIs(self.app.stderr, self.stderr)


class TestNonShell(TestCase):

    def testFaultsAreRaised(self):
        app = Application("shipyard", "", "", prog="ship", shell=False)
        app.add_command("launch", "", lambda app: 0).add_flag(Flag("name", "", Kind.STRING, required=True))
        stdout = io.StringIO()
        with self.assertRaises(MissingFlagError) as context:
            app.run(["ship", "launch"], stdout, io.StringIO())
        self.assertIs(context.exception.options["tool"], app)
        self.assertEqual(stdout.getvalue(), "")

    def testUnknownCommandIsRaised(self):
        app = Application("shipyard", shell=False)
        with self.assertRaises(UnknownCommandError):
            app.run(["ship", "launch"], io.StringIO(), io.StringIO())


if __name__ == "__main__":
    unittest.main()
