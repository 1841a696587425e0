"""
Fuelcell faults (errors, warnings and signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and logs searchable.
- CommandException / CommandWarning: base types that carry a message plus
  read-only options and know how to render themselves through rich.
- CommandSignal: HelpRequested / VersionRequested. These short-circuit a run
  successfully and are deliberately NOT CommandException subclasses, so callers
  never print error text for them.

Options
- Every fault keeps its keyword options in a MappingProxyType. Common keys:
  tool (the command that raised), hint, title, code, colorful, fancy.
- copy.replace(fault, **overrides) builds an updated copy (see __replace__);
  the lifecycle uses it to stamp the parsing command onto FlagSet errors.
  Every other fault (hook errors included) propagates as the same object.

Integration
- Layers raise faults directly; Command.execute() renders them to the error
  stream (unless silenced) and re-raises.
- The host application may expose __codes__ (code relabeling) and __styles__
  (palette overrides) mappings in __main__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the framework (stable identifiers).

    grouping (by high-level domain)
    - structure (101xx)
      • SELF_ATTACHMENT
    - routing (111x0)
      • UNKNOWN_COMMAND
    - flags (1111x)
      • UNKNOWN_FLAG, FLAG_SYNTAX, FLAG_VALUE_REQUIRED, INVALID_FLAG_VALUE,
        MISSING_REQUIRED_FLAGS
    - positionals (1112x)
      • INVALID_ARGUMENT, ARGUMENT_COUNT
    - rendering (1114x)
      • TEMPLATE_RENDER
    - warnings (12xxx)
      • DEPRECATED_COMMAND, DEPRECATED_FLAG
    """
    # --- structural errors (10xxx) ---
    SELF_ATTACHMENT        = 10101

    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND        = 11101

    # --- flag errors (11xxx) ---
    UNKNOWN_FLAG           = 11111
    FLAG_SYNTAX            = 11112
    FLAG_VALUE_REQUIRED    = 11113
    INVALID_FLAG_VALUE     = 11114
    MISSING_REQUIRED_FLAGS = 11115

    # --- positional errors (11xxx) ---
    INVALID_ARGUMENT       = 11121
    ARGUMENT_COUNT         = 11122

    # --- rendering errors (11xxx) ---
    TEMPLATE_RENDER        = 11141

    # --- warnings (12xxx) ---
    DEPRECATED_COMMAND     = 12111
    DEPRECATED_FLAG        = 12112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, kind):
    """
    Shared rich renderer for exceptions and warnings.

    Layout
    - header: [ <prog> — <code> | <Title> ]
    - body: the message
    - footer: " → hint" (only when a hint was provided)
    """
    main = __import__("__main__")
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    tool = fault.options.get("tool")
    prog = getattr(main, "__prog__", None) or (tool.root.name if tool is not None else "") or "fuelcell"

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(fault.code.normalize(), "code"),
        " | ",
        text(fault.title.title(), kind + "-title"),
        " ]"
    )
    renders = [text(fault.message, kind + "-message")]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fault.options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")
    return Group(header, *renders)


class CommandException(Exception):
    """
    Base class of every fuelcell error.

    Subclasses pin a default `code` and `title`; both can be overridden per
    instance through options (code=..., title=...).
    """
    code = FaultCode.UNKNOWN_COMMAND
    title = "command error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)
        if "code" in options:
            self.code = options["code"]
        if "title" in options:
            self.title = options["title"]

    @property
    def tool(self):
        """The command that raised the fault, when known."""
        return self.options.get("tool")

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class StructuralError(CommandException):
    """A tree mutation that would corrupt the command tree (fatal)."""
    code = FaultCode.SELF_ATTACHMENT
    title = "invalid command tree"


class FlagParseError(CommandException):
    """Base of every error reported by FlagSet.parse()."""
    code = FaultCode.FLAG_SYNTAX
    title = "flag error"


class UnknownFlagError(FlagParseError):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"


class FlagSyntaxError(FlagParseError):
    code = FaultCode.FLAG_SYNTAX
    title = "bad flag syntax"


class FlagValueRequiredError(FlagParseError):
    code = FaultCode.FLAG_VALUE_REQUIRED
    title = "flag needs an argument"


class InvalidFlagValueError(FlagParseError):
    code = FaultCode.INVALID_FLAG_VALUE
    title = "invalid flag value"


class PositionalArgumentsError(CommandException):
    """Base of every positional validation failure."""
    code = FaultCode.INVALID_ARGUMENT
    title = "invalid arguments"


class UnknownCommandError(PositionalArgumentsError):
    code = FaultCode.UNKNOWN_COMMAND
    title = "unknown command"

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))


class InvalidArgumentError(PositionalArgumentsError):
    code = FaultCode.INVALID_ARGUMENT
    title = "invalid argument"


class ArgumentCountError(PositionalArgumentsError):
    code = FaultCode.ARGUMENT_COUNT
    title = "wrong number of arguments"


class MissingRequiredFlagsError(CommandException):
    """
    Aggregate error naming every required flag left unset (never just the first).
    """
    code = FaultCode.MISSING_REQUIRED_FLAGS
    title = "missing required flags"

    @property
    def names(self):
        """The required flags left unset."""
        return tuple(self.options.get("names", ()))

    @property
    def required(self):
        """Every required flag of the command, set or not."""
        return tuple(self.options.get("required", ()))


class TemplateRenderError(CommandException):
    code = FaultCode.TEMPLATE_RENDER
    title = "template error"


class CommandWarning(Warning):
    """
    Base class of soft notices (deprecations). Rendered, never raised by the core.
    """
    code = FaultCode.DEPRECATED_COMMAND
    title = "warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedCommandWarning(CommandWarning):
    code = FaultCode.DEPRECATED_COMMAND
    title = "deprecated command"


class DeprecatedFlagWarning(CommandWarning):
    code = FaultCode.DEPRECATED_FLAG
    title = "deprecated flag"


class CommandSignal(Exception):
    """
    Successful short-circuit of a run. Carries the command that raised it.
    """

    def __init__(self, command, /):
        super().__init__(command.name)
        self.command = command


class HelpRequested(CommandSignal): ...
class VersionRequested(CommandSignal): ...


__all__ = (
    "FaultCode",
    "CommandException",
    "StructuralError",
    "FlagParseError",
    "UnknownFlagError",
    "FlagSyntaxError",
    "FlagValueRequiredError",
    "InvalidFlagValueError",
    "PositionalArgumentsError",
    "UnknownCommandError",
    "InvalidArgumentError",
    "ArgumentCountError",
    "MissingRequiredFlagsError",
    "TemplateRenderError",
    "CommandWarning",
    "DeprecatedCommandWarning",
    "DeprecatedFlagWarning",
    "CommandSignal",
    "HelpRequested",
    "VersionRequested",
)
