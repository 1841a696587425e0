"""
Fuelcell "did you mean" suggestions for unmatched command tokens.

A child of the node where resolution stopped is suggested when
- the case-insensitive Levenshtein distance from the token to its name (or to
  the closest of its aliases) is strictly below the threshold,
- its name starts with the token (case-insensitive), or
- the token is one of its explicit `suggest_for` entries.

Hidden children are never suggested. Results are ordered by distance, then
prefix matches first, then declaration order. Suggestions are advisory: they
only decorate an "unknown command" message.
"""
import logging

LOG = logging.getLogger(__name__)


def levenshtein(first, second, /):
    """Edit distance (insertions, deletions, substitutions) between two strings."""
    if len(first) > len(second):
        first, second = second, first

    distances = range(len(first) + 1)
    for index2, char2 in enumerate(second):
        current = [index2 + 1]
        for index1, char1 in enumerate(first):
            if char1 == char2:
                current.append(distances[index1])
            else:
                current.append(1 + min((distances[index1], distances[index1 + 1], current[-1])))
        distances = current
    return distances[-1]


def suggestions_for(command, token, /, minimum_distance=None):
    """
    Names of the children of `command` that resemble `token`.

    Parameters
    - command: the node whose children are candidates.
    - token: the unmatched input.
    - minimum_distance: positive int; defaults to the node's
      suggestions_minimum_distance.

    Raises
    - ValueError: when the threshold is not positive.
    """
    if minimum_distance is None:
        minimum_distance = command.suggestions_minimum_distance
    if not isinstance(minimum_distance, int) or isinstance(minimum_distance, bool):
        raise TypeError("suggestions_for() 'minimum_distance' must be an integer")
    if minimum_distance <= 0:
        raise ValueError("suggestions_for() 'minimum_distance' must be positive")

    lowered = token.lower()
    ranked = []
    for index, child in enumerate(command._children):
        if child.hidden:
            continue
        distance = min(levenshtein(lowered, name.lower()) for name in (child.name, *child.aliases))
        prefixed = bool(lowered) and child.name.lower().startswith(lowered)
        if distance < minimum_distance or prefixed or token in child.suggest_for:
            ranked.append((distance, not prefixed, index, child.name))

    suggestions = [name for *_, name in sorted(ranked)]
    LOG.debug("suggestions for %r under %r: %r", token, command.path, suggestions)
    return suggestions


def format_suggestions(suggestions, /):
    """Trailer appended to an unknown-command message; empty without suggestions."""
    if not suggestions:
        return ""
    return "\n\nDid you mean this?\n" + "".join(f"\t{name}\n" for name in suggestions)


__all__ = (
    "levenshtein",
    "suggestions_for",
    "format_suggestions",
)
