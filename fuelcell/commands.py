"""
Fuelcell command layer: build, compose and run trees of subcommands.

What this module provides
- Command: one vertex of a command tree with:
  • Declarations (use line, aliases, help text, version, validators, switches).
  • Parent/child wiring (parent is a weak, non-owning back-reference; children
    are owned, kept in declaration order, with a lazily sorted view).
  • Local and global flag declarations composed across ancestry (see
    fuelcell.composer).
  • Five lifecycle hooks (global_pre_run, pre_run, run, post_run,
    global_post_run) and three strategy slots (flag error, help, usage)
    resolved nearest-ancestor-first.
  • Execution front door (execute) that resolves, runs, and reports faults.

- command(...): create a root Command from a callable, or return a decorator
  that does so. Command.command(...) does the same for children.

Quick start
    from fuelcell import command

    @command("app", version="1.0.0")
    def app(cmd, args):
        \"\"\"Demo application.\"\"\"

    @app.command("serve [flags]", aliases=["s"])
    def serve(cmd, args):
        \"\"\"Start the server.\"\"\"
        print("serving on", cmd.flags.get("port"))

    serve.flag("port", "p", type=int, default=8080, usage="port to listen on")

    if __name__ == "__main__":
        app.execute()

Design notes
- Sibling name/alias collisions are not validated: the first declared match wins.
- Every cache (sorted children, max lengths, full flag sets) is rebuilt lazily
  after a mutation; nothing here is thread-safe.
"""
import functools
import inspect
import logging
import operator
import re
import sys
import weakref
from collections import defaultdict
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Group
from rich.table import Table
from rich.text import Text

from .completions import *
from .composer import FlagBundle
from .faults import *
from .flags import Flag
from .lifecycle import DEFAULT_VERSION_TEMPLATE, Execution
from .resolver import resolve
from .streams import DataStreams
from .utils import *

LOG = logging.getLogger(__name__)

HOOKS = (
    "global_pre_run",
    "pre_run",
    "run",
    "post_run",
    "global_post_run",
)

_default_streams = DataStreams()


class MaxLengths(NamedTuple):
    """Longest use line, path and name among a command's children (help padding)."""
    use: int = 0
    path: int = 0
    name: int = 0


class CommandType(type):
    """
    Metaclass that gives commands a stable, introspectable shape.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics.
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for consistent labels in validation messages.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _process_strings(cls, metadata):
    """
    Normalize scalar string metadata fields.

    - use must be a string; it may be empty only for an anonymous root.
    - short, long, example, deprecated, version, version_template: str | Unset,
      non-empty after trimming (long and example keep their inner layout).

    Errors
    - TypeError: when a value is not a string (or Unset).
    - ValueError: when a string is empty.
    """
    if not isinstance(use := metadata["use"], str):
        raise TypeError(f"{cls.__typename__} 'use' must be a string")
    metadata["use"] = use.strip()

    for name in (
            "short",
            "long",
            "example",
            "deprecated",
            "version",
            "version_template",
    ):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not object.strip():
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        elif isinstance(object, str) and name in ("short", "deprecated", "version"):
            object = object.strip()
        metadata[name] = object


def _process_iterables(cls, metadata):
    """
    Normalize iterable-of-string metadata fields to tuples.

    - aliases, suggest_for, valid_args, arg_aliases: iterables of non-empty,
      distinct strings (a bare string is rejected, not split into characters).
    - aliases cannot contain whitespace (they are matched as single tokens).
    """
    for name in (
            "aliases",
            "suggest_for",
            "valid_args",
            "arg_aliases",
    ):
        if isinstance(object := metadata[name], str) or not isinstance(object, Iterable):
            raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of strings")
        seen = []
        for item in object:
            if not isinstance(item, str):
                raise TypeError(f"{cls.__typename__} {name!r} must be an iterable of strings")
            elif not item.strip():
                raise ValueError(f"{cls.__typename__} {name!r} must be an iterable of non-empty strings")
            elif item in seen:
                raise ValueError(f"{cls.__typename__} {name!r} cannot contain duplicates")
            elif name == "aliases" and re.search(r"\s", item):
                raise ValueError(f"{cls.__typename__} 'aliases' cannot contain whitespace")
            seen.append(item)
        metadata[name] = tuple(seen)


def _process_callables(cls, metadata):
    """
    Validate the pluggable callables: the positional validator, the dynamic
    valid-args provider and the lifecycle hooks. Unset/None mean "not declared".
    """
    for name in ("args", "valid_args_function", *HOOKS):
        if metadata[name] is not Unset and metadata[name] is not None and not callable(metadata[name]):
            raise TypeError(f"{cls.__typename__} {name!r} must be callable")
        metadata[name] = coalesce(metadata[name])


def _process_options(cls, metadata):
    """
    Validate the remaining configuration knobs.
    """
    distance = metadata["suggestions_minimum_distance"]
    if not isinstance(distance, int) or isinstance(distance, bool):
        raise TypeError(f"{cls.__typename__} 'suggestions_minimum_distance' must be an integer")
    elif distance <= 0:
        raise ValueError(f"{cls.__typename__} 'suggestions_minimum_distance' must be positive")

    if not isinstance(metadata["completion_options"], CompletionOptions | Unset):
        raise TypeError(f"{cls.__typename__} 'completion_options' must be completion options")
    metadata["completion_options"] = coalesce(metadata["completion_options"], CompletionOptions())

    if not isinstance(metadata["streams"], DataStreams | Unset):
        raise TypeError(f"{cls.__typename__} 'streams' must be data streams")

    for name in (
            "hidden",
            "silence_errors",
            "silence_usage",
            "disable_flag_parsing",
            "disable_suggestions",
            "disable_flags_in_use_line",
            "ignore_unknown_flags",
    ):
        metadata[name] = bool(metadata[name])


def _identity_flag_error(command, error):
    return error


class Command(metaclass=CommandType):
    """
    One vertex of a command tree.

    Identity
    - name is the first word of `use` ("serve [flags]" → "serve"); path joins
      the names from the root down; root is the parentless ancestor.

    Tree
    - add()/remove() maintain the children, the parent back-reference, the
      max-length metrics and the flag caches of the moved subtrees.
    - children is sorted by name (computed once after a mutation); resolution
      and suggestions use declaration order.

    Flags
    - flag()/global_flag() declare flags; flags is the full composed set,
      local_flags/global_flags/inherited_flags the partial ones.

    Lookups that walk the ancestry (nearest wins)
    - streams, version_template, flag_error_handler, help_function,
      usage_function, nearest_hook().
    """

    __introspectable__ = (
        "use",
        "aliases",
        "suggest_for",
        "short",
        "long",
        "example",
        "deprecated",
        "version",
        "args",
        "valid_args",
        "valid_args_function",
        "arg_aliases",
        "hidden",
        "silence_errors",
        "silence_usage",
        "disable_flag_parsing",
        "disable_suggestions",
        "disable_flags_in_use_line",
        "ignore_unknown_flags",
        "suggestions_minimum_distance",
        "completion_options",
        "called_as",
    )

    __displayable__ = (
        "name",
        "aliases",
        "short",
        "version",
        "hidden",
    )

    def __new__(
            cls,
            use="",
            /,
            *,
            # ── Identity and help ──────────────────────────────────────────────────
            aliases=(),
            suggest_for=(),
            short=Unset,
            long=Unset,
            example=Unset,
            deprecated=Unset,
            version=Unset,
            version_template=Unset,
            # ── Positionals ────────────────────────────────────────────────────────
            args=Unset,
            valid_args=(),
            valid_args_function=Unset,
            arg_aliases=(),
            # ── Switches ───────────────────────────────────────────────────────────
            hidden=False,
            silence_errors=False,
            silence_usage=False,
            disable_flag_parsing=False,
            disable_suggestions=False,
            disable_flags_in_use_line=False,
            ignore_unknown_flags=False,
            suggestions_minimum_distance=2,
            completion_options=Unset,
            streams=Unset,
            # ── Lifecycle hooks ────────────────────────────────────────────────────
            global_pre_run=Unset,
            pre_run=Unset,
            run=Unset,
            post_run=Unset,
            global_post_run=Unset
    ):
        """
        Construct a detached Command.

        Parameters
        - use: str, the one-line usage; its first word is the command name.
        - aliases: Iterable[str], alternative names matched by the resolver.
        - suggest_for: Iterable[str], tokens for which this command is always
          suggested.
        - short, long, example: help text.
        - deprecated: str, notice printed whenever the command runs.
        - version: str, enables the --version flag.
        - version_template: str, overrides the inherited version template.
        - args: Callable[[Command, list[str]], None], positional validator.
        - valid_args / valid_args_function: static or dynamic completion
          candidates for positionals; arg_aliases are accepted but not offered.
        - hidden, silence_errors, silence_usage, disable_flag_parsing,
          disable_suggestions, disable_flags_in_use_line, ignore_unknown_flags:
          bool switches.
        - suggestions_minimum_distance: positive int, edit distance threshold.
        - completion_options: CompletionOptions.
        - streams: DataStreams for this command and its descendants.
        - global_pre_run, pre_run, run, post_run, global_post_run: hooks called
          hook(command, args).

        Raises
        - TypeError/ValueError on invalid metadata shapes.
        """
        metadata = {
            "use": use,
            "aliases": aliases,
            "suggest_for": suggest_for,
            "short": short,
            "long": long,
            "example": example,
            "deprecated": deprecated,
            "version": version,
            "version_template": version_template,
            "args": args,
            "valid_args": valid_args,
            "valid_args_function": valid_args_function,
            "arg_aliases": arg_aliases,
            "hidden": hidden,
            "silence_errors": silence_errors,
            "silence_usage": silence_usage,
            "disable_flag_parsing": disable_flag_parsing,
            "disable_suggestions": disable_suggestions,
            "disable_flags_in_use_line": disable_flags_in_use_line,
            "ignore_unknown_flags": ignore_unknown_flags,
            "suggestions_minimum_distance": suggestions_minimum_distance,
            "completion_options": completion_options,
            "streams": streams,
            "global_pre_run": global_pre_run,
            "pre_run": pre_run,
            "run": run,
            "post_run": post_run,
            "global_post_run": global_post_run,
        }
        _process_strings(cls, metadata)
        _process_iterables(cls, metadata)
        _process_callables(cls, metadata)
        _process_options(cls, metadata)

        self = super().__new__(cls)
        self._hooks = {name: metadata.pop(name) for name in HOOKS}
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        self._parent = None
        self._children = []
        self._sorted = None
        self._max_lengths = MaxLengths()
        self._called_as = ""
        self._context = None
        self._flag_error = None
        self._help = None
        self._usage = None
        self._flags = FlagBundle(self)
        return self

    # ── Identity ──────────────────────────────────────────────────────────────

    @property
    def name(self):
        """First word of the use line ("" for an anonymous root)."""
        words = self._use.split(maxsplit=1)
        return words[0] if words else ""

    @property
    def parent(self):
        return self._parent() if self._parent is not None else None

    @property
    def root(self):
        """
        Return the topmost command of the tree this command belongs to.
        """
        child, parent = self, self.parent
        while parent is not None:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Names from the root down to this command, space-joined ("app remote add").
        """
        names = [command.name for command in self.lineage()]
        return " ".join(name for name in reversed(names) if name)

    def lineage(self):
        """Yield this command, then every ancestor up to the root."""
        command = self
        while command is not None:
            yield command
            command = command.parent

    def has_alias(self, token, /):
        return token in self._aliases

    @property
    def name_and_aliases(self):
        return ", ".join((self.name, *self._aliases))

    @property
    def use_line(self):
        """
        Full usage line: the parent's path followed by this command's use line,
        plus " [flags]" when flags are available (unless disabled or present).
        """
        line = f"{parent.path} {self._use}".strip() if (parent := self.parent) is not None else self._use
        if self._disable_flags_in_use_line:
            return line
        if self._flags.has_available_flags() and "[flags]" not in line:
            line += " [flags]"
        return line

    @property
    def context(self):
        """Opaque object threaded through execute(); never inspected."""
        return self._context

    @context.setter
    def context(self, context):
        self._context = context

    @property
    def max_lengths(self):
        return self._max_lengths

    # ── Tree ─────────────────────────────────────────────────────────────────

    @property
    def children(self):
        """Children sorted by name (sorting runs once after each mutation)."""
        if self._sorted is None:
            self._sorted = tuple(sorted(self._children, key=lambda child: child.name))
        return self._sorted

    def _update_max_lengths(self, child):
        self._max_lengths = MaxLengths(
            use=max(self._max_lengths.use, len(child.use)),
            path=max(self._max_lengths.path, len(child.path)),
            name=max(self._max_lengths.name, len(child.name)),
        )

    def add(self, *children):
        """
        Attach children under this command (in order).

        Per child
        - raise StructuralError when it is this command or one of its ancestors;
        - detach it from its previous parent, if any;
        - link it here, update the max-length metrics, hand down this
          command's normalization function and invalidate its flag caches.
        """
        for child in children:
            if not isinstance(child, Command):
                raise TypeError("add() arguments must be commands")
            if child is self:
                raise StructuralError(
                    "command %r cannot be a child of itself" % self.name,
                    tool=self,
                )
            if any(ancestor is child for ancestor in self.lineage()):
                raise StructuralError(
                    "command %r cannot be a child of its descendant %r" % (child.name, self.name),
                    tool=self,
                )
            if (previous := child.parent) is not None:
                previous.remove(child)

            child._parent = weakref.ref(self)
            self._update_max_lengths(child)
            if self._flags.normalize is not None:
                child._flags.set_normalize(self._flags.normalize)
            self._children.append(child)
            self._sorted = None
            child._flags.invalidate_subtree()
            LOG.debug("attached %r under %r", child.name, self.path)

    def remove(self, *children):
        """
        Detach children (matched by identity); recompute the metrics from scratch.
        """
        removed = [child for child in self._children if any(child is each for each in children)]
        if not removed:
            return
        self._children = [child for child in self._children if not any(child is each for each in removed)]
        for child in removed:
            child._parent = None
            child._flags.invalidate_subtree()
        self._sorted = None
        self._max_lengths = MaxLengths()
        for child in self._children:
            self._update_max_lengths(child)
        LOG.debug("detached %r from %r", [child.name for child in removed], self.path)

    def command(self, source=Unset, /, **metadata):
        """
        Create a child from a callable (its run hook) and attach it here.

        Forms
        - @parent.command: use line from the function name.
        - @parent.command("serve [flags]", aliases=["s"], ...)
        - parent.command(function, use="serve", ...)

        Notes
        - short defaults to the first line of the function's docstring.
        """
        return _factory(self, source, metadata)

    # ── Flags ────────────────────────────────────────────────────────────────

    @property
    def flags(self):
        """Full flag set: local ∪ own global ∪ inherited globals."""
        return self._flags.full

    @property
    def local_flags(self):
        return self._flags.local

    @property
    def global_flags(self):
        return self._flags.global_

    @property
    def inherited_flags(self):
        return self._flags.parents

    def flag(self, name, shorthand=Unset, /, **options):
        """Declare a local flag (see Flag for the options); returns it."""
        return self._flags.local.add(Flag(name, shorthand, **options))

    def global_flag(self, name, shorthand=Unset, /, **options):
        """Declare a flag inherited by every descendant; returns it."""
        return self._flags.global_.add(Flag(name, shorthand, **options))

    def set_normalize(self, normalize, /):
        """Install a flag-name normalization function on this subtree."""
        self._flags.set_normalize(normalize)

    def _lookup_flag(self, flagset, name):
        if (flag := flagset.lookup(name)) is None:
            raise ValueError(f"{type(self).__typename__} {self.name!r} has no flag {name!r}")
        return flag

    def mark_flag_required(self, name, /):
        """Require a flag (from the full set) to be set explicitly."""
        self._lookup_flag(self.flags, name).annotate(BASH_COMP_ONE_REQUIRED_FLAG, "true")

    def mark_global_flag_required(self, name, /):
        self._lookup_flag(self.global_flags, name).annotate(BASH_COMP_ONE_REQUIRED_FLAG, "true")

    def mark_flag_filename(self, name, /, *extensions):
        """Complete the flag's value with file names (optionally by extension)."""
        self._lookup_flag(self.flags, name).annotate(BASH_COMP_FILENAME_EXT, *extensions)

    def mark_flag_dirname(self, name, /):
        """Complete the flag's value with directory names."""
        self._lookup_flag(self.flags, name).annotate(BASH_COMP_SUBDIRS_IN_DIR)

    def init_default_help_flag(self):
        """Declare --help (and -h when free) unless a help flag is reachable."""
        flags = self.flags
        if flags.lookup("help") is None:
            self._flags.local.add(Flag(
                "help",
                "h" if flags.shorthand_lookup("h") is None else Unset,
                type=bool,
                usage="help for %s" % (self.name or "this command"),
            ))

    def init_default_version_flag(self):
        """Declare --version (and -v when free) for a versioned command."""
        if not self._version:
            return
        flags = self.flags
        if flags.lookup("version") is None:
            self._flags.local.add(Flag(
                "version",
                "v" if flags.shorthand_lookup("v") is None else Unset,
                type=bool,
                usage="version for %s" % (self.name or "this command"),
            ))

    # ── Hooks and strategies ─────────────────────────────────────────────────

    def on(self, event, /):
        """
        Decorator registering a lifecycle hook on this command.

            @cmd.on("pre_run")
            def prepare(command, args): ...
        """
        if event not in HOOKS:
            raise ValueError(f"on() event must be one of {", ".join(HOOKS)}")

        @rename("on")
        def wrapper(hook, /):
            if not callable(hook):
                raise TypeError("@on() must be applied to a callable")
            self._hooks[event] = hook
            return hook

        return wrapper

    def hook(self, event, /):
        """This command's own hook for event (or None)."""
        return self._hooks[event]

    def nearest_hook(self, event, /):
        """The hook for event declared by this command or its closest ancestor."""
        for command in self.lineage():
            if (hook := command._hooks[event]) is not None:
                return hook
        return None

    @property
    def runnable(self):
        return self._hooks["run"] is not None

    def _nearest(self, name):
        for command in self.lineage():
            if (object := getattr(command, name)) is not None:
                return object
        return None

    def on_flag_error(self, handler, /):
        """
        Register the flag-error strategy: handler(command, error) returns the
        exception to raise, or None to end the run quietly.
        """
        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} flag error handler must be callable")
        self._flag_error = handler
        return handler

    def on_help(self, function, /):
        """Register the help strategy: function(command) prints the help screen."""
        if not callable(function):
            raise TypeError(f"{type(self).__typename__} help function must be callable")
        self._help = function
        return function

    def on_usage(self, function, /):
        """Register the usage strategy: function(command) prints the usage summary."""
        if not callable(function):
            raise TypeError(f"{type(self).__typename__} usage function must be callable")
        self._usage = function
        return function

    @property
    def flag_error_handler(self):
        return self._nearest("_flag_error") or _identity_flag_error

    @property
    def help_function(self):
        return self._nearest("_help") or _default_help

    @property
    def usage_function(self):
        return self._nearest("_usage") or _default_usage

    @property
    def streams(self):
        """Streams of the nearest ancestor declaring some (process streams otherwise)."""
        return self._nearest("_streams") or _default_streams

    @streams.setter
    def streams(self, streams):
        if not isinstance(streams, DataStreams | None):
            raise TypeError(f"{type(self).__typename__} 'streams' must be data streams")
        self._streams = streams

    @property
    def version_template(self):
        return self._nearest("_version_template") or DEFAULT_VERSION_TEMPLATE

    def set_version_template(self, template, /):
        if not isinstance(template, str | None):
            raise TypeError("set_version_template() argument must be a string")
        self._version_template = template

    # ── Execution ────────────────────────────────────────────────────────────

    def execute(self, args=Unset, /, *, context=Unset):
        """
        Resolve and run a command line from the root of this tree.

        Parameters
        - args: Iterable[str] | Unset, the vector without the program name
          (sys.argv[1:] when Unset).
        - context: opaque object stored on the executed command.

        Behavior
        - `__complete` / `__completeNoDesc` requests print completion candidates.
        - HelpRequested prints the nearest help screen; VersionRequested has
          already printed the version. Both return normally.
        - Failures are reported to the error stream (unless silenced), followed
          by the usage summary (unless silenced), then re-raised.

        Returns
        - The command that ran (or was asked for help/version).
        """
        if (root := self.root) is not self:
            return root.execute(args, context=context)

        if args is Unset:
            args = sys.argv[1:]
        if isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError("execute() argument must be an iterable of strings")
        args = list(args)
        if not all(isinstance(arg, str) for arg in args):
            raise TypeError("execute() argument must be an iterable of strings")

        if context is not Unset:
            self._context = context

        if args and args[0] in (SHELL_COMP_REQUEST, SHELL_COMP_NO_DESC_REQUEST) and not self._completion_options.disable_requests:
            return self._complete(args)

        command = self
        try:
            command, args = resolve(self, args)
            command._context = self._context
            Execution(command, args).run()
        except HelpRequested as signal:
            signal.command.help_function(signal.command)
            return signal.command
        except VersionRequested as signal:
            return signal.command
        except CommandException as exception:
            self._report(exception.tool or command, exception)
            raise
        except Exception as exception:
            self._report(command, exception)
            raise
        return command

    def _report(self, command, exception):
        if not (command.silence_errors or self._silence_errors):
            if isinstance(exception, CommandException):
                command.streams.print_err(exception)
            else:
                command.streams.print_err(Text(f"Error: {exception}"))
        if not (command.silence_usage or self._silence_usage):
            command.usage_function(command)

    def _complete(self, args):
        request, *words = args
        to_complete = words.pop() if words else ""
        candidates, directive = complete(
            self, words, to_complete, descriptions=request != SHELL_COMP_NO_DESC_REQUEST,
        )
        out = self.streams.out
        for candidate in candidates:
            out.write(candidate + "\n")
        out.write(":%d\n" % directive)
        return self


def _factory(parent, source, metadata):
    def build(function, use):
        if not callable(function):
            raise TypeError("@command() must be applied to a callable")
        if "short" not in metadata and (doc := inspect.getdoc(function)):
            metadata["short"] = doc.strip().splitlines()[0]
        child = Command(coalesce(use, function.__name__.replace("_", "-")), run=function, **metadata)
        if parent is not None:
            parent.add(child)
        return child

    use = metadata.pop("use", Unset)
    match source:
        case str():
            return rename(lambda function, /: build(function, source), "command")
        case _ if source is Unset:
            return rename(lambda function, /: build(function, use), "command")
        case _:
            return build(source, use)


def command(source=Unset, /, **metadata):
    """
    Create a root Command from a callable, or return a decorator to build it.

    Forms
    - @command: use line from the function name.
    - @command("app", version="1.0.0", ...)
    - command(function, use="app", ...)

    The callable becomes the command's run hook: function(command, args).
    """
    return _factory(None, source, metadata)


def _palette():
    return defaultdict(str, {
        "section": "bold #FFFFFF",
        "usage": "bold #36C5F0",
        "command": "bold #00E6FF",
        "description": "#9CA3AF",
        "flag-name": "bold #22C55E",
        "flag-type": "#FFD600",
        "deprecated": "#F97316",
        "footer": "#737373",
    } | getattr(__import__("__main__"), "__styles__", {}))


def _flag_rows(flags):
    table = Table.grid(padding=(0, 3))
    table.add_column(no_wrap=True)
    table.add_column()
    styles = _palette()
    for flag in flags:
        names = f"-{flag.shorthand}, --{flag.name}" if flag.shorthand else f"    --{flag.name}"
        spelled = Text("  " + names, styles["flag-name"])
        if flag.takes_value:
            spelled.append(" " + getattr(flag.type, "__name__", "value"), styles["flag-type"])
        usage = Text(flag.usage or "", styles["description"])
        if flag.default not in (None, False, "", []):
            usage.append(f" (default {flag.default!r})")
        if flag.deprecated:
            usage.append(f" (deprecated: {flag.deprecated})", styles["deprecated"])
        table.add_row(spelled, usage)
    return table


def _usage_renderables(command):
    styles = _palette()
    renders = [Text("Usage:", styles["section"])]
    if command.runnable:
        renders.append(Text("  " + command.use_line, styles["usage"]))
    if command._children:
        renders.append(Text(f"  {command.path} [command]", styles["usage"]))

    if command.aliases:
        renders.extend((Text("\nAliases:", styles["section"]), Text("  " + command.name_and_aliases)))

    if command.example:
        renders.extend((Text("\nExamples:", styles["section"]), Text(command.example.rstrip())))

    if visible := [child for child in command.children if not child.hidden]:
        table = Table.grid(padding=(0, 3))
        table.add_column(no_wrap=True)
        table.add_column()
        for child in visible:
            table.add_row(
                Text("  " + child.name.ljust(command.max_lengths.name), styles["command"]),
                Text(child.short or "", styles["description"]),
            )
        renders.extend((Text("\nAvailable Commands:", styles["section"]), table))

    inherited = {id(flag) for flag in command.inherited_flags}
    if local := [flag for flag in command.flags.visible() if id(flag) not in inherited]:
        renders.extend((Text("\nFlags:", styles["section"]), _flag_rows(local)))
    if globals_ := [flag for flag in command.flags.visible() if id(flag) in inherited]:
        renders.extend((Text("\nGlobal Flags:", styles["section"]), _flag_rows(globals_)))

    if command._children:
        renders.append(Text(
            f'\nUse "{command.path} [command] --help" for more information about a command.',
            styles["footer"],
        ))
    return renders


def _default_help(command):
    """Print long (or short) description followed by the usage summary."""
    styles = _palette()
    renders = []
    if description := (command.long or command.short):
        renders.append(Text(description.strip() + "\n", styles["description"]))
    renders.extend(_usage_renderables(command))
    command.streams.print(Group(*renders))


def _default_usage(command):
    command.streams.print_err(Group(*_usage_renderables(command)))


__all__ = (
    "HOOKS",
    "MaxLengths",
    "Command",
    "command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
