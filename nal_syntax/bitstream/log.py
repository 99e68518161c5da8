"""
:py:mod:`nal_syntax.bitstream.log`: Bit-accurate diagnostic log
===============================================================

A :py:class:`DiagnosticLog` records every field read while parsing a unit as a
tree of immutable :py:class:`LogEntry` tuples. Structure nodes (e.g. an
``sps_range_extension``) have children, fields do not.

The log is built by the :py:class:`~nal_syntax.bitstream.serdes.Deserialiser`
and never influences parsing.

.. autoclass:: LogEntry

.. autoclass:: DiagnosticLog
    :members:

.. autofunction:: format_log
"""

from collections import namedtuple

from nal_syntax.string_utils import indent

from nal_syntax.bitstream.io import from_bit_offset

__all__ = [
    "LogEntry",
    "DiagnosticLog",
    "format_log",
]


LogEntry = namedtuple("LogEntry", "name,value,start,end,depth,children")
"""
One read recorded in a :py:class:`DiagnosticLog`.

Parameters
==========
name : str
    The field name. Elements of lists are named ``name[i]``.
value
    The value read (None for structure nodes).
start, end : int
    The bit offsets in the unit's RBSP of the first bit read and the bit
    following the last bit read.
depth : int
    Nesting depth (0 for top-level entries).
children : (:py:class:`LogEntry`, ...)
    Entries nested within this one.
"""


class DiagnosticLog(object):
    """
    Incrementally builds a tree of :py:class:`LogEntry` tuples.
    """

    def __init__(self):
        # A stack of [name, start, [child, ...]] lists for each structure
        # currently being read. The bottom entry collects top-level entries.
        self._stack = [[None, None, []]]

    @property
    def depth(self):
        return len(self._stack) - 1

    def add_value(self, name, value, start, end):
        """Record a field read."""
        self._stack[-1][2].append(LogEntry(name, value, start, end, self.depth, ()))

    def enter(self, name, start):
        """Begin a structure node which subsequent entries will be nested in."""
        self._stack.append([name, start, []])

    def leave(self, end):
        """Finish the structure node most recently started with :py:meth:`enter`."""
        if len(self._stack) == 1:
            raise Exception("DiagnosticLog.leave() without enter()")
        name, start, children = self._stack.pop()
        self._stack[-1][2].append(
            LogEntry(name, None, start, end, self.depth, tuple(children))
        )

    def snapshot(self, end=None):
        """
        Return the top-level entries recorded so far as a tuple.

        Structure nodes which have not yet been left (e.g. because parsing
        failed part way through) are included with the end offset given.
        """
        entries = list(self._stack[0][2])
        if len(self._stack) > 1:
            # Close open nodes from the inside out without modifying the stack
            node = None
            for depth in range(len(self._stack) - 1, 0, -1):
                name, start, children = self._stack[depth]
                children = list(children)
                if node is not None:
                    children.append(node)
                node = LogEntry(name, None, start, end, depth - 1, tuple(children))
            entries.append(node)
        return tuple(entries)


def format_log(entries, formatter=repr):
    """
    Produce a human readable listing of a log snapshot, one line per entry.
    Offsets are shown as ``byte.bit``.
    """
    lines = []
    for entry in entries:
        start = "{}.{}".format(*from_bit_offset(entry.start))
        if entry.children or entry.value is None:
            lines.append("{:>8}  {}:".format(start, entry.name))
            lines.append(indent(format_log(entry.children, formatter)))
        else:
            lines.append(
                "{:>8}  {}: {} ({} bit{})".format(
                    start,
                    entry.name,
                    formatter(entry.value),
                    entry.end - entry.start,
                    "s" if entry.end - entry.start != 1 else "",
                )
            )
    return "\n".join(line for line in lines if line.strip())
