r"""
Fuelcell flag specifications and flag sets.

Overview
- Flag: a named command-line option with an optional one-character shorthand
  (e.g., --port/-p). A flag either takes a value (--port 8080, --port=8080,
  -p8080) or is declared to take no value: its `nvalue` is what gets assigned
  when it appears bare (boolean flags use "true").
- FlagSet: an ordered collection of flags with name and shorthand lookup,
  an optional name normalization function, and a parser that assigns values
  and collects the leftover positional tokens.

Metadata (sanitized on construction)
- name: long name without dashes, must match r"[^\W_][\w.-]*".
- shorthand: Unset | one character (not '-', '=' or whitespace).
- type: Callable converter applied to raw strings (bool maps through boolean()).
- default: initial value; bool flags default to False, multiple flags to [].
- nvalue: Unset | str, the "no option default value"; set means “takes no value”.
- multiple: when True, every occurrence appends (comma separated values split).
- usage, hidden, deprecated: help metadata.
- annotations: string-keyed lists of strings, used by completion and by the
  required-flag check (see fuelcell.completions).

Parsing grammar (FlagSet.parse)
- "--"             → stops flag parsing, everything after is positional.
- "--name=value"   → assigns value.
- "--name"         → assigns nvalue if the flag takes no value, else the next token.
- "-abc"           → shorthands a, b, c; a value-taking shorthand consumes the rest
                     of the token ("-p8080") or the next token ("-p 8080").
- "-", "" and tokens not starting with '-' are positional.

Quick example:
    >>> flags = FlagSet("serve")
    >>> flags.add(Flag("port", "p", type=int, default=8080))
    >>> flags.add(Flag("verbose", "v", type=bool))
    >>> flags.parse(["-v", "--port", "9090", "extra"])
    >>> flags.get("port"), flags.get("verbose"), flags.args
    (9090, True, ['extra'])
"""
import functools
import logging
import operator
import re

from .faults import (
    DeprecatedFlagWarning,
    FlagSyntaxError,
    FlagValueRequiredError,
    InvalidFlagValueError,
    UnknownFlagError,
)
from .utils import *

LOG = logging.getLogger(__name__)


def boolean(value, /):
    """
    Convert a command-line string into a bool.

    Accepts 1/t/true/yes/on and 0/f/false/no/off (case-insensitive); anything else
    raises ValueError so the caller can report an invalid flag value.
    """
    if isinstance(value, bool):
        return value
    match str(value).strip().lower():
        case "1" | "t" | "true" | "y" | "yes" | "on":
            return True
        case "0" | "f" | "false" | "n" | "no" | "off":
            return False
    raise ValueError(f"invalid boolean value {value!r}")


def word_separators(flagset, name, /):
    """
    Stock normalization function: treat '_' and '.' like '-' ("log_level" == "log-level").
    """
    return name.replace("_", "-").replace(".", "-")


class FlagType(type):
    """
    Metaclass that gives flag specs a stable, introspectable shape.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printers.
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in validation messages.
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


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate the long name and the optional shorthand.

    Raises
    - TypeError: when name/shorthand are not strings.
    - ValueError: when the name is not a valid flag name or the shorthand is
      not exactly one usable character.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[^\W_][\w.-]*", name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid flag name without leading dashes")
    metadata["name"] = name

    if not isinstance(shorthand := metadata["shorthand"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'shorthand' must be a string")
    elif isinstance(shorthand, str) and not re.fullmatch(r"[^\s=-]", shorthand):
        raise ValueError(f"{cls.__typename__} 'shorthand' must be a single character")


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: normalize the value-bearing fields (type, default, nvalue, multiple).

    Rules
    - type must be callable; bool is swapped for the boolean() converter.
    - bool flags take no value by default (nvalue "true") and default to False.
    - multiple flags default to an empty list.
    - nvalue must be Unset or a string (it is parsed like any other raw value).
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if metadata["type"] is bool:
        metadata["type"] = boolean
        metadata["nvalue"] = coalesce(metadata["nvalue"], "true")
        metadata["default"] = coalesce(metadata["default"], False)

    if metadata["multiple"]:
        metadata["default"] = list(coalesce(metadata["default"], ()))
    metadata["default"] = coalesce(metadata["default"])

    if not isinstance(metadata["nvalue"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'nvalue' must be a string")

    for name in ("usage", "deprecated"):
        if not isinstance(object := metadata[name], str | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(object, str) and not object.strip():
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")


class Flag(metaclass=FlagType):
    """
    Named command-line option specification (and its current value).

    Highlights
    - Lookup by long name (normalized by the owning FlagSet) or by shorthand.
    - `takes_value` is False when an `nvalue` is declared; the resolver relies on
      this to know whether the token after a flag is its value.
    - `changed` is True once the parser assigned the flag explicitly.
    - Instances are shared between the flag sets that contain them: a global flag
      parsed in a child's full set is visible from the ancestor that declared it.
    """

    __introspectable__ = (
        "name",
        "shorthand",
        "usage",
        "type",
        "default",
        "nvalue",
        "multiple",
        "hidden",
        "deprecated",
        "annotations",
        "value",
        "changed",
    )

    __displayable__ = (
        "name",
        "shorthand",
        "default",
        "value",
        "changed",
    )

    def __new__(
            cls,
            name,
            shorthand=Unset,
            /,
            *,
            type=str,
            default=Unset,
            nvalue=Unset,
            usage=Unset,
            multiple=False,
            hidden=False,
            deprecated=Unset
    ):
        """
        Construct a Flag spec.

        Parameters
        - name: str, long name without dashes ("port", "dry-run").
        - shorthand: Unset | str, one character ("p").
        - type: Callable converter for raw values (bool → boolean()).
        - default: initial value (None when Unset, False for bool, [] for multiple).
        - nvalue: Unset | str, value assigned when the flag appears without one.
        - usage: Unset | str, one-line description for help.
        - multiple: bool, every occurrence appends instead of overwriting.
        - hidden: bool, suppress from help and completion.
        - deprecated: Unset | str, notice printed when the flag is used.
        """
        metadata = {
            "name": name,
            "shorthand": shorthand,
            "usage": usage,
            "type": type,
            "default": default,
            "nvalue": nvalue,
            "multiple": bool(multiple),
            "hidden": bool(hidden),
            "deprecated": deprecated,
        }
        _sanitize_names(cls, metadata)
        _sanitize_value_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        self._annotations = {}
        self._value = _copy(self._default)
        self._changed = False
        return self

    @property
    def takes_value(self):
        """True unless the flag declares a no-value default (nvalue)."""
        return self._nvalue is None

    def set(self, raw, /):
        """
        Convert and assign a raw string value; mark the flag as changed.

        Multiple flags split on commas and append; the first explicit assignment
        discards the default list.

        Raises
        - InvalidFlagValueError: when the converter rejects the value.
        """
        values = raw.split(",") if self._multiple else [raw]
        try:
            converted = [self._type(value) for value in values]
        except (TypeError, ValueError) as exception:
            raise InvalidFlagValueError(
                "invalid argument %r for %s flag: %s" % (raw, self.spelling, exception),
                flag=self._name,
                value=raw,
                hint="check the expected value type of %s" % self.spelling,
            ) from exception

        if self._multiple:
            if not self._changed:
                self._value = []
            self._value.extend(converted)
        else:
            self._value, = converted
        self._changed = True

    def reset(self):
        """Restore the default value and clear the changed bit."""
        self._value = _copy(self._default)
        self._changed = False

    def annotate(self, key, /, *values):
        """Attach (or replace) a string-keyed annotation."""
        if not isinstance(key, str) or not all(isinstance(value, str) for value in values):
            raise TypeError("annotate() arguments must be strings")
        self._annotations[key] = list(values)

    @property
    def spelling(self):
        """Human spelling used in messages: "-p, --port" or "--port"."""
        if self._shorthand:
            return f"-{self._shorthand}, --{self._name}"
        return f"--{self._name}"


def _copy(value):
    return list(value) if isinstance(value, list) else value


class FlagSet:
    """
    Ordered collection of flags with lookup, normalization and parsing.

    Responsibilities
    - Index flags by normalized long name and by shorthand.
    - Parse an argument vector: assign values, collect positional leftovers
      (interspersed positionals are allowed), stop at "--".
    - Notify subscribers whenever the set of declared flags changes; the flag
      composer uses this as the dirty signal for its cached unions.

    Normalization
    - normalize(flagset, name) -> str canonicalizes flag spelling. Setting a new
      function re-keys every declared flag; the first flag wins when two names
      collapse onto the same key.
    """

    def __init__(self, name="", /, *, normalize=Unset):
        if not isinstance(name, str):
            raise TypeError("flag set 'name' must be a string")
        if not callable(normalize) and normalize is not Unset:
            raise TypeError("flag set 'normalize' must be callable")
        self._name = name
        self._normalize = coalesce(normalize)
        self._formal = {}
        self._shorthands = {}
        self._listeners = []
        self._args = []
        self._notices = []

    def __repr__(self):
        return f"flag-set(name={self._name!r}, flags={list(self._formal)!r})"

    def __contains__(self, name):
        return self.lookup(name) is not None

    def __iter__(self):
        return iter(list(self._formal.values()))

    def __len__(self):
        return len(self._formal)

    @property
    def name(self):
        return self._name

    @property
    def normalize(self):
        return self._normalize

    @property
    def args(self):
        """Positional tokens left over by the last parse()."""
        return list(self._args)

    @property
    def notices(self):
        """Deprecation warnings collected during the last parse()."""
        return list(self._notices)

    def subscribe(self, listener, /):
        """Register a zero-argument callable fired after every declaration change."""
        if not callable(listener):
            raise TypeError("subscribe() argument must be callable")
        self._listeners.append(listener)

    def _notify(self):
        for listener in self._listeners:
            listener()

    def _key(self, name):
        return self._normalize(self, name) if self._normalize else name

    def set_normalize(self, normalize, /):
        """Install a normalization function (or None) and re-key every flag."""
        if normalize is not None and not callable(normalize):
            raise TypeError("set_normalize() argument must be callable or None")
        self._normalize = normalize
        flags, self._formal = list(self._formal.values()), {}
        for flag in flags:
            self._formal.setdefault(self._key(flag.name), flag)
        self._notify()

    def _insert(self, flag):
        self._formal[self._key(flag.name)] = flag
        if flag.shorthand and flag.shorthand not in self._shorthands:
            self._shorthands[flag.shorthand] = flag

    def add(self, flag, /):
        """
        Declare a flag.

        Raises
        - TypeError: when flag is not a Flag.
        - ValueError: when the normalized name or the shorthand is already in use.
        """
        if not isinstance(flag, Flag):
            raise TypeError("add() argument must be a flag")
        if self._key(flag.name) in self._formal:
            raise ValueError(f"flag set {self._name!r} name {flag.name!r} is already in use")
        if flag.shorthand and flag.shorthand in self._shorthands:
            raise ValueError(f"flag set {self._name!r} shorthand {flag.shorthand!r} is already in use")
        self._insert(flag)
        self._notify()
        return flag

    def merge(self, other, /):
        """
        Add every flag of another set whose name is not yet taken.

        Existing declarations win silently; an incoming flag whose shorthand is
        already bound keeps only its long form here.
        """
        if not isinstance(other, FlagSet):
            raise TypeError("merge() argument must be a flag set")
        added = False
        for flag in other:
            if self._key(flag.name) not in self._formal:
                self._insert(flag)
                added = True
        if added:
            self._notify()
        return self

    def lookup(self, name, /):
        return self._formal.get(self._key(name))

    def shorthand_lookup(self, shorthand, /):
        if not shorthand:
            return None
        return self._shorthands.get(shorthand[0])

    def changed(self, name, /):
        """True when the named flag was explicitly set by parse() or set()."""
        return bool((flag := self.lookup(name)) and flag.changed)

    def get(self, name, /):
        if (flag := self.lookup(name)) is None:
            raise KeyError(name)
        return flag.value

    def set(self, name, value, /):
        if (flag := self.lookup(name)) is None:
            raise KeyError(name)
        flag.set(value)

    def visible(self):
        """Non-hidden flags sorted by name (help and completion order)."""
        return sorted((flag for flag in self if not flag.hidden), key=lambda flag: flag.name)

    def reset(self):
        """Return every flag to its default and drop the last parse."""
        for flag in self:
            flag.reset()
        self._args = []
        self._notices = []

    def parse(self, arguments, /, *, ignore_unknown=False):
        """
        Parse an argument vector into flag values and positional leftovers.

        Parameters
        - arguments: Iterable[str]
        - ignore_unknown: when True, unknown flags (and a following bare value
          when no '=' was used) are dropped instead of raising.

        Raises
        - FlagSyntaxError, UnknownFlagError, FlagValueRequiredError,
          InvalidFlagValueError.
        """
        self._args = []
        self._notices = []
        tokens = list(arguments)

        while tokens:
            token = tokens.pop(0)
            if len(token) < 2 or token[0] != "-":
                self._args.append(token)
                continue
            if token == "--":
                # everything after the terminator is positional
                self._args.extend(tokens)
                break
            if token[1] == "-":
                self._parse_long(token, tokens, ignore_unknown)
            else:
                shorthands = token[1:]
                while shorthands:
                    shorthands = self._parse_short(shorthands, tokens, ignore_unknown)
        LOG.debug("flag set %r parsed, leftovers=%r", self._name, self._args)

    def _parse_long(self, token, tokens, ignore_unknown):
        body = token[2:]
        if not body or body[0] in "-=":
            raise FlagSyntaxError(
                "bad flag syntax: %s" % token,
                token=token,
                hint="use --name or --name=value",
            )
        name, separator, value = body.partition("=")

        if (flag := self.lookup(name)) is None:
            if ignore_unknown:
                # an unknown flag given as "--name value" takes its value with it
                if not separator and tokens and not tokens[0].startswith("-"):
                    tokens.pop(0)
                return
            raise UnknownFlagError(
                "unknown flag: --%s" % name,
                flag=name,
                hint="run with --help to see the available flags",
            )

        if separator:
            flag.set(value)
        elif not flag.takes_value:
            flag.set(flag.nvalue)
        elif tokens:
            flag.set(tokens.pop(0))
        else:
            raise FlagValueRequiredError(
                "flag needs an argument: %s" % token,
                flag=flag.name,
                hint="pass a value: --%s=<value>" % flag.name,
            )
        self._deprecation(flag)

    def _parse_short(self, shorthands, tokens, ignore_unknown):
        char, rest = shorthands[0], shorthands[1:]

        if (flag := self.shorthand_lookup(char)) is None:
            if ignore_unknown:
                if not rest and tokens and not tokens[0].startswith("-"):
                    tokens.pop(0)
                return ""
            raise UnknownFlagError(
                "unknown shorthand flag: %r in -%s" % (char, shorthands),
                flag=char,
                hint="run with --help to see the available flags",
            )

        if rest.startswith("="):
            flag.set(rest[1:])
            rest = ""
        elif not flag.takes_value:
            flag.set(flag.nvalue)
        elif rest:
            flag.set(rest)
            rest = ""
        elif tokens:
            flag.set(tokens.pop(0))
        else:
            raise FlagValueRequiredError(
                "flag needs an argument: %r in -%s" % (char, shorthands),
                flag=flag.name,
                hint="pass a value: -%s <value>" % char,
            )
        self._deprecation(flag)
        return rest

    def _deprecation(self, flag):
        if flag.deprecated:
            self._notices.append(DeprecatedFlagWarning(
                "flag --%s has been deprecated, %s" % (flag.name, flag.deprecated),
                flag=flag.name,
            ))


__all__ = (
    "Flag",
    "FlagSet",
    "boolean",
    "word_separators",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del FlagType
