"""
Fuelcell data streams: the input, output and error channels of a command tree.

Unset channels fall back to the process streams (sys.stdin / sys.stdout /
sys.stderr) at access time, so redirections installed after the tree was built
are honored. A command reads the streams of its nearest ancestor that declares
some (see Command.streams); a root without declared streams uses a default
DataStreams.

User-facing output goes through rich consoles bound to these channels.
"""
import sys

from rich.console import Console

from .utils import *


class DataStreams:
    """
    Overridable in/out/err channels.

    Quick example:
        >>> buffer = io.StringIO()
        >>> streams = DataStreams(out=buffer)
        >>> streams.print("hello")
        >>> buffer.getvalue()
        'hello\\n'
    """

    def __init__(self, in_=Unset, out=Unset, err=Unset):
        self._in = in_
        self._out = out
        self._err = err

    def __repr__(self):
        return f"data-streams(in_={self._in!r}, out={self._out!r}, err={self._err!r})"

    @property
    def in_(self):
        return coalesce(self._in, sys.stdin)

    @in_.setter
    def in_(self, stream):
        self._in = stream if stream is not None else Unset

    @property
    def out(self):
        return coalesce(self._out, sys.stdout)

    @out.setter
    def out(self, stream):
        self._out = stream if stream is not None else Unset

    @property
    def err(self):
        return coalesce(self._err, sys.stderr)

    @err.setter
    def err(self, stream):
        self._err = stream if stream is not None else Unset

    def console(self, *, stderr=False):
        """A rich console writing to the output (or error) channel."""
        return Console(
            file=self.err if stderr else self.out,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    def print(self, *objects, end="\n"):
        self.console().print(*objects, end=end)

    def print_err(self, *objects, end="\n"):
        self.console(stderr=True).print(*objects, end=end)


__all__ = (
    "DataStreams",
)
