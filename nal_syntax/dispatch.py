"""
:py:mod:`nal_syntax.dispatch`: Payload dispatch and the reparse protocol
========================================================================

Each kind of unit payload is parsed by a *payload routine*: a function with
the signature::

    def payload(serdes, reparse, registry, associated):
        ...
        return SUCCESS

where:

* ``serdes`` is the :py:class:`~nal_syntax.bitstream.serdes.Deserialiser`
  positioned at the start of the payload (its current context is the payload
  structure).
* ``reparse`` is True if this is the unit's deferred retry.
* ``registry`` is the session's
  :py:class:`~nal_syntax.registry.ParameterSetRegistry`.
* ``associated`` is a dictionary ``{ParameterSetKinds: id}`` giving the ids of
  the currently active parameter sets (used by syntax which refers to 'the
  active SPS' without naming it).

A payload routine returns a :py:class:`ParseResult`. When a parameter set it
needs is absent it returns the result of :py:func:`needs_reparse` (naming the
missing :py:class:`~nal_syntax.registry.ParameterSetKey`\\ s) or, when
``reparse`` is True, raises
:py:exc:`~nal_syntax.exceptions.UnresolvedReference`. The
:py:func:`require_parameter_set` helper implements this pattern.

Payload routines are registered against the numeric unit codes they handle
using the :py:func:`unit_handler` decorator and found again with
:py:func:`dispatch`. Codes with no registered routine are handled by
:py:func:`unparsed_payload`.

.. autofunction:: unit_handler

.. autofunction:: dispatch

.. autofunction:: require_parameter_set

.. autofunction:: unparsed_payload
"""

from collections import namedtuple

from enum import IntEnum

from nal_syntax.fixeddict import fixeddict, Entry

from nal_syntax.string_formatters import Bytes, Bits

from nal_syntax.exceptions import UnresolvedReference

from nal_syntax.registry import ParameterSetKey

from nal_syntax.tables import Codecs

from nal_syntax.bitstream.serdes import context_type

__all__ = [
    "ParseStatus",
    "ParseResult",
    "SUCCESS",
    "needs_reparse",
    "require_parameter_set",
    "UnparsedPayload",
    "unparsed_payload",
    "UnitHandler",
    "unit_handler",
    "dispatch",
    "UNIT_HANDLERS",
]


class ParseStatus(IntEnum):
    success = 1
    needs_reparse = 2


ParseResult = namedtuple("ParseResult", "status,missing_references")
"""
The outcome of a payload routine.

Parameters
==========
status : :py:class:`ParseStatus`
missing_references : (:py:class:`~nal_syntax.registry.ParameterSetKey`, ...)
    The parameter sets whose absence prevented parsing (empty on success).
"""

SUCCESS = ParseResult(ParseStatus.success, ())


def needs_reparse(*keys):
    """
    Produce a :py:class:`ParseResult` requesting a deferred retry once the
    parameter sets identified by the given keys are available.
    """
    return ParseResult(ParseStatus.needs_reparse, tuple(keys))


def require_parameter_set(registry, reparse, kind, id):
    """
    Look up a parameter set which a payload depends upon.

    Returns a (structure, missing) pair. If the parameter set is present,
    'missing' is None. If it is absent, 'structure' is None and 'missing' is
    its :py:class:`~nal_syntax.registry.ParameterSetKey`, unless 'reparse' is
    True in which case :py:exc:`~nal_syntax.exceptions.UnresolvedReference` is
    raised.
    """
    structure = registry.lookup(kind, id)
    if structure is not None:
        return (structure, None)

    key = ParameterSetKey(kind, id)
    if reparse:
        raise UnresolvedReference([key])
    return (None, key)


UnparsedPayload = fixeddict(
    "UnparsedPayload",
    Entry("payload_bytes", formatter=Bytes()),
    Entry("payload_bits", formatter=Bits()),
    help="""
        A payload of a type this package does not parse. Not an error: the
        payload's raw data is retained.
    """,
)


@context_type(UnparsedPayload)
def unparsed_payload(serdes, reparse, registry, associated):
    """Read the rest of the payload as raw bytes (and any odd bits)."""
    serdes.bytes("payload_bytes", serdes.bits_remaining() // 8)
    serdes.bitarray("payload_bits", serdes.bits_remaining())
    return SUCCESS


UnitHandler = namedtuple("UnitHandler", "name,parse,check_trailing_bits,parameter_sets")
"""
Describes how to parse the payload of one kind of unit.

Parameters
==========
name : str
    The name of the syntax structure (e.g. ``"seq_parameter_set_rbsp"``).
parse : function
    The payload routine.
check_trailing_bits : bool
    Whether the bits following the payload should be checked against the
    codec's trailing bits syntax.
parameter_sets : function(structure) -> [:py:class:`~nal_syntax.registry.ParameterSetKey`, ...]
    Given a completely parsed payload, returns the registry keys the payload
    should be stored under.
"""


def _no_parameter_sets(structure):
    return []


UNPARSED_HANDLER = UnitHandler(
    "unparsed_payload", unparsed_payload, False, _no_parameter_sets
)

UNIT_HANDLERS = {codec: {} for codec in Codecs}
"""
The registered payload routines: ``{Codecs: {code: UnitHandler, ...}, ...}``.
"""


def unit_handler(codec, codes, check_trailing_bits=True, parameter_sets=None):
    """
    Decorator which registers a payload routine as the parser for the units
    of the given codec with the given numeric codes (NAL unit types or start
    code values).

    Example usage::

        @unit_handler(Codecs.hevc, [NalUnitTypes.AUD_NUT])
        @context_type(AccessUnitDelimiter)
        def access_unit_delimiter_rbsp(serdes, reparse, registry, associated):
            serdes.nbits("pic_type", 3)
            return SUCCESS

    Returns the original function.
    """
    if parameter_sets is None:
        parameter_sets = _no_parameter_sets

    def decorator(f):
        handler = UnitHandler(f.__name__, f, check_trailing_bits, parameter_sets)
        for code in codes:
            if code in UNIT_HANDLERS[codec]:
                raise ValueError(
                    "{} code {} already handled by {}".format(
                        Codecs(codec).name, code, UNIT_HANDLERS[codec][code].name
                    )
                )
            UNIT_HANDLERS[codec][int(code)] = handler
        return f

    return decorator


def dispatch(codec, code):
    """
    Return the :py:class:`UnitHandler` for a unit of the given codec and
    numeric code. Unknown codes give a handler for
    :py:func:`unparsed_payload`.
    """
    return UNIT_HANDLERS[codec].get(code, UNPARSED_HANDLER)
