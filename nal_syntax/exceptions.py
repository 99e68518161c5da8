"""
The :py:mod:`nal_syntax.exceptions` module defines the exceptions raised when
a unit cannot be parsed. All derive from :py:exc:`ParseError` and carry an
:py:class:`~nal_syntax.tables.ErrorKinds` value which is reported in a unit's
:py:class:`~nal_syntax.parser.Failed` result.

These exceptions never escape :py:class:`~nal_syntax.parser.ParserSession`:
a unit which raises one is reported as failed and parsing moves on to the next
unit.

.. autoexception:: ParseError
    :members:

.. autoexception:: InsufficientData

.. autoexception:: MalformedCode

.. autoexception:: UnresolvedReference
"""

from nal_syntax.string_utils import wrap_paragraphs

from nal_syntax.tables import ErrorKinds

__all__ = [
    "ParseError",
    "InsufficientData",
    "MalformedCode",
    "UnresolvedReference",
]


class ParseError(Exception):
    """
    Base class for all unit parsing failures.

    Attributes
    ==========
    error_kind : :py:class:`~nal_syntax.tables.ErrorKinds`
    offset : int or None
        The bit offset (within the unit's RBSP) at which the failure was
        detected, if known. Filled in by the unit parser when not supplied.
    """

    error_kind = None

    def __init__(self, *args):
        super(ParseError, self).__init__(*args)
        self.offset = None

    def __str__(self):
        return wrap_paragraphs(self.explain()).partition("\n")[0]

    def explain(self):
        """
        Produce a human readable explanation of the failure. The first
        paragraph is a one-line summary (used by :py:func:`str`).
        """
        raise NotImplementedError()


class InsufficientData(ParseError):
    """
    The unit ended (or a bounded region of it ended) part way through a field.

    Parameters
    ==========
    bits_requested : int
    bits_remaining : int
    """

    error_kind = ErrorKinds.insufficient_data

    def __init__(self, bits_requested, bits_remaining):
        super(InsufficientData, self).__init__(bits_requested, bits_remaining)
        self.bits_requested = bits_requested
        self.bits_remaining = bits_remaining

    def explain(self):
        return """
            Unexpectedly reached the end of the data ({} bit{} requested, {}
            remaining).

            The unit is truncated or a preceding field has a value which
            does not match the data which follows.
        """.format(
            self.bits_requested,
            "s" if self.bits_requested != 1 else "",
            self.bits_remaining,
        )


class MalformedCode(ParseError):
    """
    A code could not be decoded or decoded to a value outside the range which
    the syntax permits (e.g. an exp-Golomb code with an implausibly long
    prefix, or a count which would drive a loop far beyond the standard's
    limits).

    Parameters
    ==========
    target : str
        The name of the syntax element concerned.
    value : int or None
        The decoded value (None if decoding itself failed).
    description : str
        Explanation of what was wrong.
    """

    error_kind = ErrorKinds.malformed_code

    def __init__(self, target, value, description):
        super(MalformedCode, self).__init__(target, value, description)
        self.target = target
        self.value = value
        self.description = description

    def explain(self):
        return """
            Malformed {}{}: {}.

            The data is probably corrupt or not a stream of the expected
            codec.
        """.format(
            self.target,
            " ({!r})".format(self.value) if self.value is not None else "",
            self.description,
        )


class UnresolvedReference(ParseError):
    """
    A unit referenced a parameter set which was still absent after the unit's
    one permitted deferred retry (or at the end of the stream).

    Parameters
    ==========
    missing_references : [:py:class:`~nal_syntax.registry.ParameterSetKey`, ...]
    """

    error_kind = ErrorKinds.unresolved_reference

    def __init__(self, missing_references):
        super(UnresolvedReference, self).__init__(missing_references)
        self.missing_references = list(missing_references)

    def explain(self):
        return """
            Referenced parameter set{} never became available: {}.

            The stream may have been cut before its parameter sets or the
            referenced identifiers may be corrupt.
        """.format(
            "s" if len(self.missing_references) != 1 else "",
            ", ".join(str(key) for key in self.missing_references),
        )
