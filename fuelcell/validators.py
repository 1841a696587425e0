"""
Fuelcell positional-argument validators.

A validator is any callable `validator(command, args)` that raises a
PositionalArgumentsError subclass when the leftover positionals (the tokens
that are neither flags, flag values nor subcommand names) are not acceptable.
Its return value is ignored.

Stock validators
- legacy_args: default policy for commands that declare none. A root with
  subcommands rejects leftovers as an unknown command (with suggestions);
  everything else accepts anything.
- no_args, arbitrary_args, only_valid_args.
- minimum_n_args(n), maximum_n_args(n), exact_args(n), range_args(low, high).
- match_all(*validators): run several validators in order.
"""
from .faults import ArgumentCountError, InvalidArgumentError, UnknownCommandError
from .suggestions import format_suggestions, suggestions_for
from .utils import *


def _unknown_command(command, token):
    suggestions = [] if command.disable_suggestions else suggestions_for(command, token)
    return UnknownCommandError(
        'unknown command "%s" for "%s"%s' % (token, command.path, format_suggestions(suggestions)),
        tool=command,
        token=token,
        suggestions=suggestions,
        hint="run '%s --help' for usage" % command.path if command.path else Unset,
    )


def legacy_args(command, args, /):
    """
    Default validation policy.

    - A command without subcommands accepts any positionals.
    - A root with subcommands rejects the first leftover as an unknown command.
    - A non-root command with subcommands accepts any positionals.
    """
    if not command._children:
        return
    if command.parent is None and args:
        raise _unknown_command(command, args[0])


def no_args(command, args, /):
    """Reject any positional argument."""
    if args:
        raise _unknown_command(command, args[0])


def arbitrary_args(command, args, /):
    """Accept anything."""


def only_valid_args(command, args, /):
    """
    Reject positionals that are not listed in valid_args (or arg_aliases).

    valid_args entries may carry a tab-separated description ("json\\tJSON output");
    only the part before the tab is matched.
    """
    if not command.valid_args:
        return
    accepted = [entry.split("\t", 1)[0] for entry in command.valid_args] + list(command.arg_aliases)
    for arg in args:
        if arg not in accepted:
            raise InvalidArgumentError(
                'invalid argument "%s" for "%s"' % (arg, command.path),
                tool=command,
                token=arg,
                hint="expected one of: %s" % ", ".join(accepted),
            )


def _count_error(command, message):
    return ArgumentCountError(message, tool=command)


def minimum_n_args(n, /):
    """Require at least n positionals."""

    @rename("minimum_n_args")
    def validator(command, args, /):
        if len(args) < n:
            raise _count_error(command, "requires at least %d arg(s), only received %d" % (n, len(args)))

    return validator


def maximum_n_args(n, /):
    """Accept at most n positionals."""

    @rename("maximum_n_args")
    def validator(command, args, /):
        if len(args) > n:
            raise _count_error(command, "accepts at most %d arg(s), received %d" % (n, len(args)))

    return validator


def exact_args(n, /):
    """Require exactly n positionals."""

    @rename("exact_args")
    def validator(command, args, /):
        if len(args) != n:
            raise _count_error(command, "accepts %d arg(s), received %d" % (n, len(args)))

    return validator


def range_args(low, high, /):
    """Require between low and high positionals (inclusive)."""
    if low > high:
        raise ValueError("range_args() lower bound cannot exceed the upper bound")

    @rename("range_args")
    def validator(command, args, /):
        if not low <= len(args) <= high:
            raise _count_error(command, "accepts between %d and %d arg(s), received %d" % (low, high, len(args)))

    return validator


def match_all(*validators):
    """Run every validator in order; the first failure wins."""
    if not all(map(callable, validators)):
        raise TypeError("match_all() arguments must be callable")

    @rename("match_all")
    def validator(command, args, /):
        for each in validators:
            each(command, args)

    return validator


__all__ = (
    "legacy_args",
    "no_args",
    "arbitrary_args",
    "only_valid_args",
    "minimum_n_args",
    "maximum_n_args",
    "exact_args",
    "range_args",
    "match_all",
)
