"""
Fuelcell flag composition (per-node Local / Global / Full collections).

Overview
- Every command owns one FlagBundle:
  • local  : flags that apply to this node only.
  • global_: flags this node declares for itself and every descendant.
  • parents: union of every ancestor's global_ set (nearest declaration wins).
  • full   : local ∪ global_ ∪ parents; the set the lifecycle parses against
              and the resolver consults to know which flags take values.

Caching
- parents and full are built lazily on first access and kept until something
  that could change them happens: a declaration on this node (local or global),
  a declaration on an ancestor's global set, attaching/detaching the node, or a
  new normalization function. Invalidation only drops caches; nothing is rebuilt
  eagerly.

Collisions
- Never raise: merging keeps the first (nearest) declaration of a name, and a
  farther flag whose shorthand is already bound is reachable by long name only.
"""
import logging

from .flags import FlagSet
from .utils import Unset

LOG = logging.getLogger(__name__)


class FlagBundle:
    """
    Lazily composed flag collections of one command node.

    The bundle holds a reference to its owner to walk the ancestry when the
    parents union is rebuilt; the owner exposes `parent` and `_children`.
    """

    def __init__(self, owner, /):
        self._owner = owner
        self._normalize = None
        self._local = FlagSet(owner.name)
        self._global = FlagSet(owner.name)
        self._parents = None
        self._full = None
        self._local.subscribe(self.invalidate)
        self._global.subscribe(self.invalidate_subtree)

    def __repr__(self):
        return f"flag-bundle(owner={self._owner.name!r}, stale={self.stale!r})"

    @property
    def local(self):
        return self._local

    @property
    def global_(self):
        return self._global

    @property
    def normalize(self):
        return self._normalize

    @property
    def stale(self):
        """True when the next access to `full` rebuilds it."""
        return self._full is None

    @property
    def parents(self):
        """Union of ancestors' global sets, nearest ancestor first."""
        if self._parents is None:
            parents = FlagSet(self._owner.name, normalize=self._normalize or Unset)
            ancestor = self._owner.parent
            while ancestor is not None:
                parents.merge(ancestor._flags.global_)
                ancestor = ancestor.parent
            self._parents = parents
        return self._parents

    @property
    def full(self):
        """Every flag reachable from this node: local, own global, then inherited."""
        if self._full is None:
            LOG.debug("composing full flag set of %r", self._owner.path)
            full = FlagSet(self._owner.name, normalize=self._normalize or Unset)
            full.merge(self._local)
            full.merge(self._global)
            full.merge(self.parents)
            self._full = full
        return self._full

    def has_available_flags(self):
        """True when the full set holds at least one non-hidden flag."""
        return any(not flag.hidden for flag in self.full)

    def invalidate(self):
        """Drop the cached unions of this node only."""
        self._parents = None
        self._full = None

    def invalidate_subtree(self):
        """Drop the cached unions of this node and every descendant."""
        pending = [self._owner]
        while pending:
            command = pending.pop()
            command._flags.invalidate()
            pending.extend(command._children)

    def set_normalize(self, normalize, /):
        """
        Install a normalization function on this node and every current descendant.

        Future descendants receive it when they are attached (see Command.add).
        """
        if normalize is not None and not callable(normalize):
            raise TypeError("set_normalize() argument must be callable or None")
        pending = [self._owner]
        while pending:
            command = pending.pop()
            bundle = command._flags
            bundle._normalize = normalize
            bundle._local.set_normalize(normalize)
            bundle._global.set_normalize(normalize)
            bundle.invalidate()
            pending.extend(command._children)


__all__ = (
    "FlagBundle",
)
