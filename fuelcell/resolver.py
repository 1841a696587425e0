"""
Fuelcell resolver: find the command an argument vector targets.

Behavior
- Starting at the root, the bare (non-flag) tokens of the vector are computed
  against the current node's full flag set (strip_flags). The first bare token
  is looked up among the node's direct children by name or alias, in
  declaration order; on a match, that token (its first occurrence by value) is
  removed and the search continues from the child.
- The search stops at the deepest node reached; the remaining vector (flags
  included) is returned alongside it.
- resolve() then applies the default policy to the leftover positionals of a
  node that declares no validator. A declared validator is left to the
  lifecycle, which runs it after the help and version checks. A failure of
  the default policy is terminal and propagates.

Flag awareness
- A token "--name" (without '=') or "-x" (exactly one shorthand, without '=')
  consumes the following token as its value unless that flag is declared to
  take no value. Unknown flags are assumed to take a value.
- "--" ends the scan: tokens after it are neither flags nor commands here.
- Empty tokens and a lone "-" are never command names.
"""
import logging

from .validators import legacy_args

LOG = logging.getLogger(__name__)


def _takes_no_value(flag):
    return flag is not None and not flag.takes_value


def strip_flags(args, command, /):
    """
    Return the bare tokens of args: the candidates for subcommand names and
    positional arguments, in order.
    """
    if not args:
        return []

    flags = command.flags
    tokens = list(args)
    commands = []

    while tokens:
        token = tokens.pop(0)
        if token == "--":
            break
        elif token.startswith("--") and "=" not in token and not _takes_no_value(flags.lookup(token[2:])):
            # "--flag value": drop the value
            if tokens:
                tokens.pop(0)
        elif token.startswith("-") and "=" not in token and len(token) == 2 and not _takes_no_value(flags.shorthand_lookup(token[1])):
            if tokens:
                tokens.pop(0)
        elif token and not token.startswith("-"):
            commands.append(token)
    return commands


def args_minus_first(args, token, /):
    """Copy of args without the first occurrence of token (by value)."""
    args = list(args)
    if token in args:
        args.remove(token)
    return args


def find_next(command, token, /):
    """
    Direct child of command called `token` (name or alias), first declared wins.

    Records the token as the child's `called_as`.
    """
    for child in command._children:
        if child.name == token or child.has_alias(token):
            child._called_as = token
            return child
    return None


def find(root, args, /):
    """
    Descend from root as far as the bare tokens allow, without validating.

    Returns
    - (command, args): the deepest matched node and the remaining vector (the
      untouched vector when no bare token was found at the root).
    """
    command, args = root, list(args)
    while bare := strip_flags(args, command):
        if (child := find_next(command, bare[0])) is None:
            break
        LOG.debug("resolved %r under %r", bare[0], command.path)
        command, args = child, args_minus_first(args, bare[0])
    return command, args


def resolve(root, args, /, *, default_validator=legacy_args):
    """
    Find the target command and apply the default positional policy.

    Parameters
    - root: the command to search from (normally the tree root).
    - args: Iterable[str], the argument vector without the program name.
    - default_validator: policy applied when the matched node declares no
      validator; None disables it.

    Returns
    - (command, args): the matched node and its remaining vector.

    Raises
    - PositionalArgumentsError (or whatever the default policy raises).
    """
    command, args = find(root, args)
    if command.args is None and default_validator is not None:
        default_validator(command, strip_flags(args, command))
    LOG.debug("resolved %r to %r with %r", root.path, command.path, args)
    return command, args


__all__ = (
    "strip_flags",
    "args_minus_first",
    "find_next",
    "find",
    "resolve",
)
