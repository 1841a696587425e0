# python
"""
Lifecycle module behavioral tests (execution state machine and front door).

Scope
- Validate the state sequence of a successful run and of failing runs.
- Validate nearest-ancestor global hooks, required flags, help and version
  short-circuits, the flag-error strategy and initializers.
- Validate Command.execute() reporting through the data streams.

Conventions
- Test method names follow CamelCase per project convention.
- Output is captured through DataStreams bound to io.StringIO buffers.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from fuelcell import (
    Command,
    DataStreams,
    Execution,
    State,
    clear_initializers,
    exact_args,
    on_initialize,
    render_version,
)
from fuelcell.faults import (
    ArgumentCountError,
    CommandException,
    HelpRequested,
    MissingRequiredFlagsError,
    TemplateRenderError,
    UnknownFlagError,
    VersionRequested,
)


class Harness(TestCase):
    """Shared fixture: a three-level tree writing into buffers."""

    def setUp(self):
        self.out, self.err = io.StringIO(), io.StringIO()
        self.calls = []
        self.root = Command("app", version="1.0.0", streams=DataStreams(out=self.out, err=self.err))
        self.middle = Command("remote")
        self.leaf = Command("add", run=self.record("run"))
        self.root.add(self.middle)
        self.middle.add(self.leaf)

    def record(self, label):
        def hook(command, args):
            self.calls.append((label, command.name, list(args)))
        return hook


class TestExecution(Harness):
    """Behavioral tests for the state machine."""

    def testSuccessfulRunVisitsEveryState(self):
        execution = Execution(self.leaf, ["origin"])
        self.assertIs(execution.run(), State.DONE)
        self.assertEqual(execution.history, (
            State.IDLE,
            State.FLAGS_PARSED,
            State.VALIDATED,
            State.GLOBAL_PRE_RUN,
            State.PRE_RUN,
            State.RUNNING,
            State.POST_RUN,
            State.GLOBAL_POST_RUN,
            State.DONE,
        ))
        self.assertEqual(self.calls, [("run", "add", ["origin"])])

    def testHooksRunInOrder(self):
        self.root.on("global_pre_run")(self.record("global_pre_run"))
        self.leaf.on("pre_run")(self.record("pre_run"))
        self.leaf.on("post_run")(self.record("post_run"))
        self.root.on("global_post_run")(self.record("global_post_run"))
        Execution(self.leaf, []).run()
        self.assertEqual([label for label, *_ in self.calls], [
            "global_pre_run",
            "pre_run",
            "run",
            "post_run",
            "global_post_run",
        ])

    def testOnlyNearestGlobalHookFires(self):
        self.root.on("global_pre_run")(self.record("root"))
        self.middle.on("global_pre_run")(self.record("middle"))
        Execution(self.leaf, []).run()
        self.assertEqual([label for label, *_ in self.calls], ["middle", "run"])

    def testOwnGlobalHookBeatsAncestors(self):
        self.root.on("global_pre_run")(self.record("root"))
        self.middle.on("global_pre_run")(self.record("middle"))
        self.leaf.on("global_pre_run")(self.record("leaf"))
        self.leaf.on("global_post_run")(self.record("leaf-post"))
        self.root.on("global_post_run")(self.record("root-post"))
        Execution(self.leaf, []).run()
        self.assertEqual([label for label, *_ in self.calls], ["leaf", "run", "leaf-post"])

    def testHooksReceiveParsedLeftovers(self):
        self.leaf.flag("fetch", "f", type=bool)
        Execution(self.leaf, ["origin", "-f", "url"]).run()
        self.assertEqual(self.calls, [("run", "add", ["origin", "url"])])
        self.assertIs(self.leaf.flags.get("fetch"), True)

    def testRunsOnlyOnce(self):
        execution = Execution(self.leaf, [])
        execution.run()
        with self.assertRaises(RuntimeError):
            execution.run()

    def testHookErrorFailsRun(self):
        def explode(command, args):
            raise RuntimeError("boom")

        self.leaf.on("pre_run")(explode)
        execution = Execution(self.leaf, [])
        with self.assertRaises(RuntimeError):
            execution.run()
        self.assertIs(execution.state, State.FAILED)
        self.assertEqual(execution.history[-2:], (State.PRE_RUN, State.FAILED))
        self.assertEqual(self.calls, [])

    def testDeclaredValidatorRunsBeforeHooks(self):
        strict = Command("strict", args=exact_args(1), run=self.record("run"))
        self.root.add(strict)
        execution = Execution(strict, [])
        with self.assertRaises(ArgumentCountError):
            execution.run()
        self.assertEqual(execution.history, (State.IDLE, State.FLAGS_PARSED, State.FAILED))

    def testDisabledFlagParsingPassesEverything(self):
        raw = Command("exec", disable_flag_parsing=True, run=self.record("run"))
        self.root.add(raw)
        Execution(raw, ["--not-a-flag", "-x"]).run()
        self.assertEqual(self.calls, [("run", "exec", ["--not-a-flag", "-x"])])

    def testIgnoreUnknownFlags(self):
        lenient = Command("lenient", ignore_unknown_flags=True, run=self.record("run"))
        self.root.add(lenient)
        Execution(lenient, ["--color", "kept"]).run()
        self.assertEqual(self.calls, [("run", "lenient", [])])


class TestRequiredFlags(Harness):
    """Behavioral tests for the required-flag check."""

    def setUp(self):
        super().setUp()
        self.leaf.flag("name")
        self.leaf.flag("url")
        self.leaf.mark_flag_required("name")
        self.leaf.mark_flag_required("url")

    def testAllMissingNamedTogether(self):
        with self.assertRaises(MissingRequiredFlagsError) as context:
            Execution(self.leaf, []).run()
        self.assertEqual(context.exception.names, ("name", "url"))
        self.assertEqual(str(context.exception), 'required flag(s) "name", "url" not set')

    def testPartiallySetNamesBoth(self):
        with self.assertRaises(MissingRequiredFlagsError) as context:
            Execution(self.leaf, ["--name", "origin"]).run()
        fault = context.exception
        self.assertEqual(fault.names, ("url",))
        self.assertEqual(fault.required, ("name", "url"))
        self.assertIn('"name"', str(fault))
        self.assertIn('"url"', str(fault))

    def testCheckedAfterPreRun(self):
        self.leaf.on("pre_run")(self.record("pre_run"))
        execution = Execution(self.leaf, [])
        with self.assertRaises(MissingRequiredFlagsError):
            execution.run()
        self.assertEqual(self.calls, [("pre_run", "add", [])])
        self.assertNotIn(State.RUNNING, execution.history)

    def testSatisfied(self):
        Execution(self.leaf, ["--name", "origin", "--url=git://x"]).run()
        self.assertEqual(len(self.calls), 1)


class TestShortCircuits(Harness):
    """Behavioral tests for help, version and flag-error strategies."""

    def testHelpFlag(self):
        execution = Execution(self.leaf, ["--help"])
        with self.assertRaises(HelpRequested) as context:
            execution.run()
        self.assertIs(context.exception.command, self.leaf)
        self.assertIs(execution.state, State.HELP)
        self.assertEqual(self.calls, [])

    def testNonRunnableRequestsHelp(self):
        execution = Execution(self.middle, [])
        with self.assertRaises(HelpRequested):
            execution.run()
        self.assertEqual(execution.history, (State.IDLE, State.FLAGS_PARSED, State.HELP))

    def testVersionFlag(self):
        self.root.on("run")(self.record("run"))
        execution = Execution(self.root, ["--version"])
        with self.assertRaises(VersionRequested):
            execution.run()
        self.assertIs(execution.state, State.VERSION)
        self.assertIn("app version 1.0.0", self.out.getvalue())
        self.assertEqual(self.calls, [])

    def testVersionFlagNeedsVersion(self):
        with self.assertRaises(UnknownFlagError):
            Execution(self.leaf, ["--version"]).run()

    def testFlagErrorRewritten(self):
        class Friendly(CommandException):
            pass

        @self.root.on_flag_error
        def rewrite(command, error):
            return Friendly("try again", tool=command)

        with self.assertRaises(Friendly):
            Execution(self.leaf, ["--bogus"]).run()

    def testFlagErrorSuppressed(self):
        self.root.on_flag_error(lambda command, error: None)
        execution = Execution(self.leaf, ["--bogus"])
        self.assertIs(execution.run(), State.DONE)
        self.assertEqual(execution.history, (State.IDLE, State.DONE))
        self.assertEqual(self.calls, [])

    def testDeprecatedCommandNotice(self):
        old = Command("old", deprecated="use add instead", run=self.record("run"))
        self.root.add(old)
        Execution(old, []).run()
        self.assertIn('command "old" is deprecated, use add instead', self.out.getvalue())
        self.assertEqual(len(self.calls), 1)


class TestInitializers(Harness):
    """Behavioral tests for module-level initializers."""

    def tearDown(self):
        clear_initializers()

    def testRunBeforeValidation(self):
        seen = []

        @on_initialize
        def first():
            seen.append("first")

        on_initialize(lambda: seen.append("second"))
        Execution(self.leaf, []).run()
        self.assertEqual(seen, ["first", "second"])

    def testRequiresCallables(self):
        with self.assertRaises(TypeError):
            on_initialize()
        with self.assertRaises(TypeError):
            on_initialize("nope")


class TestRenderVersion(Harness):
    """Behavioral tests for the version template."""

    def testDefaultTemplate(self):
        self.assertEqual(render_version(self.root), "app version 1.0.0\n")

    def testAnonymousRoot(self):
        self.assertEqual(render_version(Command(version="2.0")), "version 2.0\n")

    def testInheritedCustomTemplate(self):
        self.root.set_version_template("{path} v{version}\n")
        versioned = Command("tool", version="3.1")
        self.middle.add(versioned)
        self.assertEqual(render_version(versioned), "app remote tool v3.1\n")

    def testUnknownFieldRaises(self):
        self.root.set_version_template("{nope}")
        with self.assertRaises(TemplateRenderError):
            render_version(self.root)


class TestExecute(Harness):
    """Behavioral tests for the Command.execute() front door."""

    def testExecuteFromAnyNodeStartsAtRoot(self):
        self.assertIs(self.leaf.execute(["remote", "add", "x"]), self.leaf)
        self.assertEqual(self.calls, [("run", "add", ["x"])])

    def testContextIsThreaded(self):
        marker = object()
        self.root.execute(["remote", "add"], context=marker)
        self.assertIs(self.leaf.context, marker)

    def testHelpPrintedToOut(self):
        self.assertIs(self.root.execute(["remote"]), self.middle)
        output = self.out.getvalue()
        self.assertIn("Usage:", output)
        self.assertIn("Available Commands:", output)
        self.assertEqual(self.err.getvalue(), "")

    def testVersionReturnsNormally(self):
        self.root.on("run")(self.record("run"))
        self.assertIs(self.root.execute(["--version"]), self.root)
        self.assertIn("app version 1.0.0", self.out.getvalue())

    def testErrorsReportedThenReraised(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.root.execute(["remote", "add", "--bogus"])
        self.assertIs(context.exception.tool, self.leaf)
        errors = self.err.getvalue()
        self.assertIn("unknown flag: --bogus", errors)
        self.assertIn("Usage:", errors)

    def testSilencedErrors(self):
        quiet = Command("quiet", silence_errors=True, silence_usage=True, run=self.record("run"))
        self.root.add(quiet)
        with self.assertRaises(UnknownFlagError):
            self.root.execute(["quiet", "--bogus"])
        self.assertEqual(self.err.getvalue(), "")

    def testHookErrorsReported(self):
        def explode(command, args):
            raise RuntimeError("boom")

        self.leaf.on("run")(explode)
        with self.assertRaises(RuntimeError):
            self.root.execute(["remote", "add"])
        self.assertIn("Error: boom", self.err.getvalue())

    def testHelpBypassesDeclaredValidator(self):
        get = Command("get", args=exact_args(1), run=self.record("run"))
        self.root.add(get)
        self.assertIs(self.root.execute(["get", "--help"]), get)
        self.assertIn("Usage:", self.out.getvalue())
        self.assertEqual(self.calls, [])

    def testDeclaredValidatorStillRunsWithoutHelp(self):
        get = Command("get", args=exact_args(1), run=self.record("run"))
        self.root.add(get)
        with self.assertRaises(ArgumentCountError) as context:
            self.root.execute(["get"])
        self.assertIs(context.exception.tool, get)
        self.assertEqual(self.calls, [])

    def testHookFaultPropagatesAsSameObject(self):
        class PathError(CommandException):
            def __init__(self, path):
                super().__init__("no such path: %s" % path)
                self.path = path

        raised = PathError("/tmp/x")

        def explode(command, args):
            raise raised

        self.leaf.on("run")(explode)
        with self.assertRaises(PathError) as context:
            self.root.execute(["remote", "add"])
        self.assertIs(context.exception, raised)
        self.assertIsNone(context.exception.tool)
        self.assertIn("no such path: /tmp/x", self.err.getvalue())

    def testRequiredFlagNotCarriedOverBetweenRuns(self):
        self.leaf.flag("name")
        self.leaf.mark_flag_required("name")
        self.root.execute(["remote", "add", "--name", "x"])
        with self.assertRaises(MissingRequiredFlagsError):
            self.root.execute(["remote", "add"])
        self.assertEqual(len(self.calls), 1)

    def testHelpFlagNotCarriedOverBetweenRuns(self):
        self.root.execute(["remote", "add", "--help"])
        self.assertEqual(self.calls, [])
        self.root.execute(["remote", "add"])
        self.assertEqual(self.calls, [("run", "add", [])])

    def testArgumentsMustBeStrings(self):
        with self.assertRaises(TypeError):
            self.root.execute("remote add")
        with self.assertRaises(TypeError):
            self.root.execute(["remote", 1])


if __name__ == '__main__':
    unittest.main()
