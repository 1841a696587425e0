"""
Fuelcell execution lifecycle.

States
    IDLE → FLAGS_PARSED → HELP | VERSION                      (terminal, success)
                        → VALIDATED → GLOBAL_PRE_RUN → PRE_RUN → RUNNING
                          → POST_RUN → GLOBAL_POST_RUN → DONE   (terminal)
    any failure → FAILED                                          (terminal)

Steps (Execution.run)
1. Print a deprecation notice for a deprecated command; lazily register the
   default --help/-h and --version/-v flags; reset the full flag set to its
   defaults and parse the vector against it. A parse failure goes through
   the nearest flag-error hook, which returns the exception to raise
   (possibly rewritten) or None to end the run quietly.
2. --help set → HelpRequested.
3. --version set (command with a version) → version template printed to the
   output stream, then VersionRequested.
4. No run hook → HelpRequested.
5. Module-level initializers (on_initialize), then the declared positional
   validator on the parsed leftovers.
6. The nearest global_pre_run (the command itself or its closest ancestor
   declaring one); only that one fires.
7. pre_run. 8. Required flags left unset → one MissingRequiredFlagsError.
9. run. 10. post_run. 11. The nearest global_post_run.

Hooks are called hook(command, args) and fail by raising; their errors
propagate unwrapped and abort the remaining steps.
"""
import copy
import enum
import logging

from .completions import BASH_COMP_ONE_REQUIRED_FLAG
from .faults import *
from .utils import *

LOG = logging.getLogger(__name__)

DEFAULT_VERSION_TEMPLATE = "{name} version {version}\n"

_initializers = []


class State(enum.Enum):
    IDLE = "idle"
    FLAGS_PARSED = "flags-parsed"
    HELP = "help"
    VERSION = "version"
    VALIDATED = "validated"
    GLOBAL_PRE_RUN = "global-pre-run"
    PRE_RUN = "pre-run"
    RUNNING = "running"
    POST_RUN = "post-run"
    GLOBAL_POST_RUN = "global-post-run"
    DONE = "done"
    FAILED = "failed"


def on_initialize(*functions):
    """
    Register zero-argument callables run before positional validation of
    every execution (in registration order).

    Usable as a decorator; returns the first function.
    """
    if not functions:
        raise TypeError("on_initialize() expected at least 1 argument")
    if not all(map(callable, functions)):
        raise TypeError("on_initialize() arguments must be callable")
    _initializers.extend(functions)
    return functions[0]


def clear_initializers():
    """Forget every registered initializer."""
    _initializers.clear()


def render_version(command, /):
    """
    Render the nearest version template for command.

    Fields: {name}, {version}, {use}, {path}. The default template drops the
    name prefix for an anonymous root.

    Raises
    - TemplateRenderError: unknown field or malformed template.
    """
    template = command.version_template
    if template is DEFAULT_VERSION_TEMPLATE and not command.name:
        template = "version {version}\n"
    try:
        return template.format(
            name=command.name,
            version=command.version,
            use=command.use,
            path=command.path,
        )
    except (KeyError, IndexError, ValueError) as exception:
        raise TemplateRenderError(
            "unable to render version template: %s" % exception,
            tool=command,
            hint="available fields: {name}, {version}, {use}, {path}",
        ) from exception


def validate_required_flags(command, /):
    """
    Raise one MissingRequiredFlagsError naming every required flag that was
    not set (never just the first).
    """
    if command.disable_flag_parsing:
        return
    required = sorted(
        (flag for flag in command.flags if flag.annotations.get(BASH_COMP_ONE_REQUIRED_FLAG, [None])[0] == "true"),
        key=lambda flag: flag.name,
    )
    if missing := [flag.name for flag in required if not flag.changed]:
        message = 'required flag(s) "%s" not set' % '", "'.join(missing)
        if len(missing) < len(required):
            message += ' (required: "%s")' % '", "'.join(flag.name for flag in required)
        raise MissingRequiredFlagsError(
            message,
            tool=command,
            names=missing,
            required=[flag.name for flag in required],
            hint="pass %s" % ", ".join(f"--{name}" for name in missing),
        )


class Execution:
    """
    One run of a resolved command, as an explicit state machine.

    `state` is the current state and `history` every state visited, in order.
    An execution runs once.
    """

    def __init__(self, command, args, /):
        self._command = command
        self._args = list(args)
        self._positionals = []
        self._state = State.IDLE
        self._history = [State.IDLE]

    def __repr__(self):
        return f"execution(command={self._command.path!r}, state={self._state.value!r})"

    @property
    def command(self):
        return self._command

    @property
    def args(self):
        return list(self._args)

    @property
    def positionals(self):
        """Leftover positionals handed to the hooks (after flag parsing)."""
        return list(self._positionals)

    @property
    def state(self):
        return self._state

    @property
    def history(self):
        return tuple(self._history)

    def _advance(self, state):
        LOG.debug("%r: %s → %s", self._command.path, self._state.value, state.value)
        self._state = state
        self._history.append(state)

    def run(self):
        """
        Drive the command through its lifecycle.

        Returns
        - State.DONE on success.

        Raises
        - HelpRequested / VersionRequested on a help or version short-circuit.
        - Any fault or hook error (the state becomes FAILED).
        """
        if self._state is not State.IDLE:
            raise RuntimeError("execution can only run once")
        try:
            return self._run()
        except CommandSignal:
            raise
        except Exception:
            self._advance(State.FAILED)
            raise

    def _parse(self):
        command = self._command
        flags = command.flags
        flags.reset()
        if command.disable_flag_parsing:
            self._positionals = list(self._args)
            return True
        try:
            flags.parse(self._args, ignore_unknown=command.ignore_unknown_flags)
        except FlagParseError as exception:
            error = exception if exception.tool is not None else copy.replace(exception, tool=command)
            if (fault := command.flag_error_handler(command, error)) is not None:
                raise fault
            LOG.debug("%r: flag error suppressed: %s", command.path, error)
            return False
        for notice in flags.notices:
            command.streams.print(notice)
        self._positionals = flags.args
        return True

    def _run(self):
        command = self._command
        if command.deprecated:
            command.streams.print(DeprecatedCommandWarning(
                'command "%s" is deprecated, %s' % (command.name, command.deprecated),
                tool=command,
            ))

        command.init_default_help_flag()
        command.init_default_version_flag()

        if not self._parse():
            self._advance(State.DONE)
            return self._state
        self._advance(State.FLAGS_PARSED)

        flags = command.flags
        if (flag := flags.lookup("help")) is not None and flag.value:
            self._advance(State.HELP)
            raise HelpRequested(command)

        if command.version and (flag := flags.lookup("version")) is not None and flag.value:
            command.streams.print(render_version(command), end="")
            self._advance(State.VERSION)
            raise VersionRequested(command)

        if not command.runnable:
            self._advance(State.HELP)
            raise HelpRequested(command)

        for initializer in list(_initializers):
            initializer()

        args = self.positionals
        if command.args is not None:
            command.args(command, args)
        self._advance(State.VALIDATED)

        self._advance(State.GLOBAL_PRE_RUN)
        if (hook := command.nearest_hook("global_pre_run")) is not None:
            hook(command, args)

        self._advance(State.PRE_RUN)
        if (hook := command.hook("pre_run")) is not None:
            hook(command, args)

        validate_required_flags(command)

        self._advance(State.RUNNING)
        command.hook("run")(command, args)

        self._advance(State.POST_RUN)
        if (hook := command.hook("post_run")) is not None:
            hook(command, args)

        self._advance(State.GLOBAL_POST_RUN)
        if (hook := command.nearest_hook("global_post_run")) is not None:
            hook(command, args)

        self._advance(State.DONE)
        return self._state


__all__ = (
    "DEFAULT_VERSION_TEMPLATE",
    "State",
    "Execution",
    "on_initialize",
    "clear_initializers",
    "render_version",
    "validate_required_flags",
)
