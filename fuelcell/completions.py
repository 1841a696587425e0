"""
Fuelcell shell-completion support.

Scope
- ShellCompDirective: combinable bitmask telling a completion script how to
  treat the candidates (no trailing space, no file fallback, ...).
- CompletionOptions: per-command switches for the completion request path.
- Flag annotation keys understood by completion and by the required-flag check.
- complete(): compute the candidates for the word being completed.

Request protocol
- Command.execute() intercepts the hidden request commands `__complete` and
  `__completeNoDesc` on the root. The remaining vector is the command line
  being completed; its last element is the (possibly empty) word under the
  cursor. One candidate is printed per line, then ":<directive>".
- Candidates may carry a description after a tab ("json\\tJSON output");
  descriptions are dropped for `__completeNoDesc` and when the command's
  completion options disable them.
"""
import enum
import logging
from dataclasses import dataclass

from .faults import FlagParseError
from .resolver import find

LOG = logging.getLogger(__name__)

SHELL_COMP_REQUEST = "__complete"
SHELL_COMP_NO_DESC_REQUEST = "__completeNoDesc"

BASH_COMP_FILENAME_EXT = "fuelcell_annotation_bash_completion_filename_extensions"
BASH_COMP_ONE_REQUIRED_FLAG = "fuelcell_annotation_bash_completion_one_required_flag"
BASH_COMP_SUBDIRS_IN_DIR = "fuelcell_annotation_bash_completion_subdirs_in_dir"


class ShellCompDirective(enum.IntFlag):
    """
    Completion behavior bitmask.

    - DEFAULT: let the shell apply its default behavior (file completion).
    - ERROR: completion failed; ignore the candidates.
    - NO_SPACE: do not append a space after the completion.
    - NO_FILE_COMP: do not fall back to file completion.
    - FILTER_FILE_EXT: candidates are file extensions to filter on.
    - FILTER_DIRS: complete directory names only (candidates, if any, name the
      directory to search in).
    - KEEP_ORDER: keep the candidate order instead of sorting.
    """
    DEFAULT = 0
    ERROR = 1
    NO_SPACE = 2
    NO_FILE_COMP = 4
    FILTER_FILE_EXT = 8
    FILTER_DIRS = 16
    KEEP_ORDER = 32


@dataclass(frozen=True)
class CompletionOptions:
    disable_descriptions: bool = False
    disable_requests: bool = False


def _describe(name, description, descriptions):
    if descriptions and description:
        return f"{name}\t{description}"
    return name


def _strip_description(candidate):
    return candidate.split("\t", 1)[0]


def _complete_flag_value(flag):
    annotations = flag.annotations
    if BASH_COMP_FILENAME_EXT in annotations:
        return list(annotations[BASH_COMP_FILENAME_EXT]), ShellCompDirective.FILTER_FILE_EXT
    if BASH_COMP_SUBDIRS_IN_DIR in annotations:
        return list(annotations[BASH_COMP_SUBDIRS_IN_DIR]), ShellCompDirective.FILTER_DIRS
    return [], ShellCompDirective.DEFAULT


def _complete_flag_names(command, to_complete, descriptions):
    candidates = []
    for flag in command.flags.visible():
        if flag.shorthand and to_complete == "-":
            candidates.append(_describe(f"-{flag.shorthand}", flag.usage, descriptions))
        if (name := f"--{flag.name}").startswith(to_complete):
            candidates.append(_describe(name, flag.usage, descriptions))
    return candidates


def complete(root, args, to_complete, /, *, descriptions=True):
    """
    Completion candidates for the word `to_complete` following `args`.

    Parameters
    - root: the tree root.
    - args: the words already typed (program name excluded).
    - to_complete: the partial word under the cursor ("" for a new word).
    - descriptions: keep tab-separated descriptions on the candidates.

    Returns
    - (candidates, directive)
    """
    command, remaining = find(root, args)
    descriptions = descriptions and not command.completion_options.disable_descriptions
    flags = command.flags

    # "--name=partial" completes the value of name
    if to_complete.startswith("--") and "=" in to_complete:
        name = to_complete[2:].partition("=")[0]
        if (flag := flags.lookup(name)) is not None and flag.takes_value:
            candidates, directive = _complete_flag_value(flag)
            return candidates, directive | ShellCompDirective.NO_SPACE

    # a value-taking flag right before the cursor wants a value
    if remaining and not to_complete.startswith("-"):
        last = remaining[-1]
        flag = None
        if last.startswith("--") and "=" not in last:
            flag = flags.lookup(last[2:])
        elif len(last) == 2 and last[0] == "-" and last != "--":
            flag = flags.shorthand_lookup(last[1])
        if flag is not None and flag.takes_value:
            return _complete_flag_value(flag)

    if to_complete.startswith("-") and not command.disable_flag_parsing:
        return _complete_flag_names(command, to_complete, descriptions), ShellCompDirective.NO_FILE_COMP

    if command.disable_flag_parsing:
        positionals = list(remaining)
    else:
        try:
            flags.parse(remaining, ignore_unknown=True)
        except FlagParseError as exception:
            LOG.debug("completion flag parse failed: %s", exception)
            return [], ShellCompDirective.ERROR
        positionals = flags.args

    candidates = []
    directive = ShellCompDirective.DEFAULT
    if not positionals:
        for child in command._children:
            if child.hidden:
                continue
            for name in (child.name, *child.aliases):
                if name.startswith(to_complete):
                    candidates.append(_describe(name, child.short, descriptions))
                    break

    if command.valid_args:
        candidates.extend(
            candidate if descriptions else _strip_description(candidate)
            for candidate in command.valid_args
            if candidate.startswith(to_complete)
        )
        directive = ShellCompDirective.NO_FILE_COMP
    elif command.valid_args_function is not None:
        extra, directive = command.valid_args_function(command, positionals, to_complete)
        candidates.extend(extra if descriptions else map(_strip_description, extra))
    elif candidates:
        directive = ShellCompDirective.NO_FILE_COMP

    LOG.debug("completion for %r: %d candidate(s), directive=%r", command.path, len(candidates), directive)
    return candidates, ShellCompDirective(directive)


__all__ = (
    "SHELL_COMP_REQUEST",
    "SHELL_COMP_NO_DESC_REQUEST",
    "BASH_COMP_FILENAME_EXT",
    "BASH_COMP_ONE_REQUIRED_FLAG",
    "BASH_COMP_SUBDIRS_IN_DIR",
    "ShellCompDirective",
    "CompletionOptions",
    "complete",
)
