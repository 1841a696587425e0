"""
Fuelcell utilities shared by the flag, command and lifecycle layers.

- Unset: falsey "not provided" marker, distinct from None; usable in
  isinstance() unions (isinstance(value, str | Unset)).
- coalesce(value, default=None): Unset becomes default, anything else
  (None, 0, "" included) is returned untouched.
- rename(...): give generated callables a readable __name__/__qualname__.
- mirror("field"): read-only property over self._field handing out copies of
  container values.

    >>> coalesce(Unset, "port")
    'port'
    >>> coalesce(None, "port") is None
    True
"""
import builtins
import functools
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """Type of the Unset marker (one instance per process, not subclassable)."""

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        # str | Unset -> str | UnsetType
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


def coalesce(object, default=None, /):
    """Replace Unset with default; every other value passes through."""
    return default if object is Unset else object


def _rename(callable, name):
    if not builtins.callable(callable):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() first argument must be a updatable callable") from None
    return callable


def rename(*parameters):
    """
    rename(callable, name) renames callable in place and returns it;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 2:
        return _rename(*parameters)
    if len(parameters) != 1:
        raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))

    name, = parameters
    if not isinstance(name, str):
        raise TypeError("@rename() argument must be a string")
    return _rename(lambda callable: _rename(callable, name), "rename")


def _copy(object):
    match object:
        case str():
            return object
        case Sequence():
            return [_copy(item) for item in object]
        case Mapping():
            return {key: _copy(value) for key, value in object.items()}
        case Set():
            return {_copy(item) for item in object}
        case _:
            return coalesce(object)


def mirror(name, /):
    """
    Property reading self._<name>.

    Containers come back as fresh lists/dicts/sets so callers cannot edit a
    declaration without going through its owner (which keeps caches honest).
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(rename(lambda self: _copy(getattr(self, "_" + name)), name))


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
