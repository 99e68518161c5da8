"""
:py:mod:`nal_syntax.bitstream.exceptions`
=========================================

Exceptions indicating misuse of the bitstream reading and writing APIs. Unlike
:py:exc:`nal_syntax.exceptions.ParseError`, these indicate programming errors
and are not caught by the parser.
"""


class OutOfRangeError(ValueError):
    """
    An exception thrown whenever an out-of-range value is passed to a bitstream
    writing function.
    """


class ReusedTargetError(ValueError):
    """
    Thrown by :py:class:`~nal_syntax.bitstream.serdes.Deserialiser` when a
    non-list target in a context dictionary is assigned more than once.
    """


class UnclosedNestedContextError(ValueError):
    """
    Thrown by :py:class:`~nal_syntax.bitstream.serdes.Deserialiser` when some
    :py:meth:`~nal_syntax.bitstream.serdes.Deserialiser.subcontext_enter`
    does not have a corresponding
    :py:meth:`~nal_syntax.bitstream.serdes.Deserialiser.subcontext_leave`.
    """
