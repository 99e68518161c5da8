"""
:py:mod:`nal_syntax.parser`: Unit parser sessions
=================================================

A :py:class:`ParserSession` parses a stream's units one at a time, keeping the
parameter sets seen so far in its :py:attr:`~ParserSession.registry`. Each
unit passes through the following states (see :py:class:`UnitStates`):

* ``header_parsed``: any length prefix and the codec's unit header (the HEVC
  NAL unit header, or the MPEG-2 start code value) have been read.
* ``payload_dispatched``: the payload routine registered for the unit's code
  (see :py:mod:`nal_syntax.dispatch`) has been run.
* ``complete``: the payload was parsed. Any parameter sets it contains have
  been added to the registry. A :py:class:`Complete` result is produced.
* ``pending_reparse``: the payload referenced a parameter set which has not
  been seen yet. The unit is retained and a :py:class:`PendingReparse`
  result is produced. The unit is retried (once) when all of its missing
  parameter sets have been parsed.
* ``failed``: parsing stopped with a
  :py:exc:`~nal_syntax.exceptions.ParseError`. A :py:class:`Failed` result
  holding the partially parsed structure is produced. Subsequent units are
  unaffected.

Example usage::

    >>> from nal_syntax.parser import ParserSession
    >>> session = ParserSession()
    >>> for data in units:
    ...     result = session.parse_unit(data)
    ...     for resolved in session.take_resolved():
    ...         ...
    >>> for failed in session.finish():
    ...     ...

The :py:func:`parse_units` generator wraps this pattern.

.. autoclass:: ParserSession
    :members:

.. autofunction:: parse_units
"""

import logging

from collections import namedtuple, OrderedDict

from enum import IntEnum

from nal_syntax.exceptions import ParseError, InsufficientData, UnresolvedReference

from nal_syntax.settings import make_settings

from nal_syntax.registry import ParameterSetRegistry

from nal_syntax.dispatch import ParseStatus, dispatch

from nal_syntax.tables import (
    Codecs,
    ParameterSetKinds,
    HEVC_NAL_UNIT_HEADER_BYTES,
)

from nal_syntax.bitstream import (
    BitstreamReader,
    Deserialiser,
    DiagnosticLog,
    nal_to_rbsp,
)

from nal_syntax.hevc.fixeddicts import NalUnit
from nal_syntax.hevc.syntax import nal_unit_header

# Registers the SEI payload routines
import nal_syntax.hevc.sei  # noqa: F401

from nal_syntax.mpeg2.fixeddicts import StartCodeUnit

# Registers the MPEG-2 payload routines
import nal_syntax.mpeg2.syntax  # noqa: F401

__all__ = [
    "UnitStates",
    "Complete",
    "PendingReparse",
    "Failed",
    "ReparseTicket",
    "ParserSession",
    "parse_units",
]


class UnitStates(IntEnum):
    header_parsed = 1
    payload_dispatched = 2
    complete = 3
    pending_reparse = 4
    failed = 5


Complete = namedtuple("Complete", "unit_index,structure,log,warnings")
"""
The result of a successfully parsed unit.

Parameters
==========
unit_index : int
    The position of the unit in the stream (counting from 0).
structure : :py:class:`~nal_syntax.hevc.fixeddicts.NalUnit` or :py:class:`~nal_syntax.mpeg2.fixeddicts.StartCodeUnit`
log : (:py:class:`~nal_syntax.bitstream.log.LogEntry`, ...)
    Empty if the diagnostic log is disabled.
warnings : [str, ...]
    Non-fatal problems (e.g. malformed trailing bits).
"""

PendingReparse = namedtuple("PendingReparse", "ticket")
"""
The result of a unit which must wait for a parameter set. See
:py:class:`ReparseTicket`.
"""

Failed = namedtuple("Failed", "unit_index,error_kind,structure,log,error")
"""
The result of a unit which could not be parsed.

Parameters
==========
unit_index : int
error_kind : :py:class:`~nal_syntax.tables.ErrorKinds`
structure : :py:class:`~nal_syntax.hevc.fixeddicts.NalUnit` or :py:class:`~nal_syntax.mpeg2.fixeddicts.StartCodeUnit`
    The partially parsed structure (empty if the length prefix was invalid).
log : (:py:class:`~nal_syntax.bitstream.log.LogEntry`, ...)
    The log up to the point of failure.
error : :py:exc:`~nal_syntax.exceptions.ParseError`
"""

ReparseTicket = namedtuple(
    "ReparseTicket", "unit_index,data,structure,log,missing_references"
)
"""
A unit awaiting a deferred retry.

Parameters
==========
unit_index : int
data : bytes
    The unit's raw data (as passed to :py:meth:`ParserSession.parse_unit`).
structure, log
    The partial results of the first attempt.
missing_references : (:py:class:`~nal_syntax.registry.ParameterSetKey`, ...)
    The unit will be retried when all of these are present in the registry.
"""


class ParserSession(object):
    """
    Parses the units of one stream, in order.

    Attributes
    ==========
    settings : :py:data:`~nal_syntax.settings.ParserSettings`
    registry : :py:class:`~nal_syntax.registry.ParameterSetRegistry`
        The parameter sets seen so far. Only modified during calls to this
        object's methods.
    associated : {:py:class:`~nal_syntax.tables.ParameterSetKinds`: id, ...}
        The ids of the currently active parameter sets (e.g. the SPS named by
        the most recent slice header or active_parameter_sets SEI message).
    """

    def __init__(self, settings=None):
        self.settings = settings if settings is not None else make_settings()
        self.registry = ParameterSetRegistry()
        self.associated = {}

        self._next_unit_index = 0

        # Units awaiting a retry {unit_index: ReparseTicket, ...}
        self._pending = OrderedDict()

        # Results of automatic retries not yet collected by take_resolved()
        self._resolved = []

    @property
    def pending_tickets(self):
        """The :py:class:`ReparseTicket`\\ s of the units awaiting a retry."""
        return list(self._pending.values())

    def parse_unit(self, data):
        """
        Parse the next unit of the stream.

        Parameters
        ==========
        data : bytes
            The unit (with its length prefix, if configured, but without any
            Annex B start code prefix).

        Returns
        =======
        result : :py:class:`Complete`, :py:class:`PendingReparse` or :py:class:`Failed`
        """
        unit_index = self._next_unit_index
        self._next_unit_index += 1

        result = self._parse(unit_index, bytes(data), False)
        if isinstance(result, PendingReparse):
            self._pending[unit_index] = result.ticket
        elif isinstance(result, Complete):
            self._retry_ready()
        return result

    def retry(self, ticket):
        """
        Retry a pending unit immediately (whether or not the parameter sets it
        was waiting for have arrived). Returns a :py:class:`Complete` or
        :py:class:`Failed` result.
        """
        if ticket.unit_index not in self._pending:
            raise ValueError("Unit {} is not pending.".format(ticket.unit_index))
        result = self._retry(ticket)
        if isinstance(result, Complete):
            self._retry_ready()
        return result

    def take_resolved(self):
        """
        Return (and forget) the results of units retried automatically since
        the last call.
        """
        resolved = self._resolved
        self._resolved = []
        return resolved

    def finish(self):
        """
        End the stream: every unit still pending fails with
        :py:data:`~nal_syntax.tables.ErrorKinds.unresolved_reference`.
        Returns the list of :py:class:`Failed` results.
        """
        failed = []
        for ticket in self._pending.values():
            error = UnresolvedReference(ticket.missing_references)
            logging.warning("Unit %d failed: %s", ticket.unit_index, error)
            failed.append(
                Failed(
                    ticket.unit_index,
                    error.error_kind,
                    ticket.structure,
                    ticket.log,
                    error,
                )
            )
        self._pending.clear()
        return failed

    def reset(self):
        """Forget all state in preparation for parsing a new stream."""
        self.registry.clear()
        self.associated.clear()
        self._pending.clear()
        self._resolved = []
        self._next_unit_index = 0

    def _retry(self, ticket):
        del self._pending[ticket.unit_index]
        logging.debug("Unit %d: retrying", ticket.unit_index)
        return self._parse(ticket.unit_index, ticket.data, True)

    def _retry_ready(self):
        """
        Retry every pending unit whose missing parameter sets are all present
        (when enabled). Each retry removes a ticket so this terminates.
        """
        if not self.settings["retry_pending_automatically"]:
            return

        while True:
            for ticket in self._pending.values():
                if all(self.registry.contains(key) for key in ticket.missing_references):
                    break
            else:
                return
            self._resolved.append(self._retry(ticket))

    def _strip_length_prefix(self, data):
        num_bytes = self.settings["length_prefix_bytes"]
        if not num_bytes:
            return data

        if len(data) < num_bytes:
            raise InsufficientData(num_bytes * 8, len(data) * 8)
        length = int.from_bytes(data[:num_bytes], "big")
        data = data[num_bytes:]
        if length > len(data):
            raise InsufficientData(length * 8, len(data) * 8)
        return data[:length]

    def _read_header(self, serdes):
        """
        Read the unit header into the top level structure, returning the
        numeric code to dispatch on.
        """
        if self.settings["codec"] == Codecs.hevc:
            with serdes.subcontext("nal_unit_header"):
                code = nal_unit_header(serdes)
        else:
            code = serdes.nbits("start_code", 8)
        return code

    def _check_trailing_bits(self, serdes, warnings):
        if self.settings["codec"] == Codecs.hevc:
            bits = serdes.bitarray("rbsp_trailing_bits", serdes.bits_remaining())
            if not bits or not bits[0] or bits[1:].any():
                warnings.append(
                    "Expected rbsp_trailing_bits (a one bit then zeros) but "
                    "found 0b{}.".format(bits.to01())
                )
        else:
            bits = serdes.bitarray("stuffing", serdes.bits_remaining())
            if bits.any():
                warnings.append(
                    "Expected zero stuffing before the next start code but "
                    "found 0b{}.".format(bits.to01())
                )

    def _update_associated(self, payload, keys):
        for key in keys:
            if key.kind == ParameterSetKinds.sequence_parameter_set:
                self.associated[ParameterSetKinds.sequence_parameter_set] = key.id
        activated_sps_id = payload.get("_activated_sps_id")
        if activated_sps_id is not None:
            self.associated[ParameterSetKinds.sequence_parameter_set] = activated_sps_id

    def _parse(self, unit_index, data, reparse):
        """
        Parse one unit. Never returns a :py:class:`PendingReparse` when
        'reparse' is True.
        """
        codec = self.settings["codec"]
        warnings = []
        serdes = None
        log = None
        # Failures before any field is read still report an (empty) structure
        structure = NalUnit() if codec == Codecs.hevc else StartCodeUnit()

        try:
            unit_data = self._strip_length_prefix(data)

            emulation_prevention_bytes = []
            if codec == Codecs.hevc:
                rbsp, removed = nal_to_rbsp(unit_data[HEVC_NAL_UNIT_HEADER_BYTES:])
                unit_data = unit_data[:HEVC_NAL_UNIT_HEADER_BYTES] + rbsp
                emulation_prevention_bytes = [
                    offset + HEVC_NAL_UNIT_HEADER_BYTES for offset in removed
                ]

            io = BitstreamReader(unit_data, self.settings["max_exp_golomb_prefix_bits"])
            if self.settings["enable_diagnostic_log"]:
                log = DiagnosticLog()
            serdes = Deserialiser(io, structure, log)

            code = self._read_header(serdes)
            if codec == Codecs.hevc:
                serdes.computed_value(
                    "_emulation_prevention_bytes", emulation_prevention_bytes
                )
            logging.debug("Unit %d: %s", unit_index, UnitStates.header_parsed.name)

            handler = dispatch(codec, code)
            with serdes.subcontext("payload"):
                result = handler.parse(serdes, reparse, self.registry, self.associated)
            logging.debug(
                "Unit %d: %s (%s)",
                unit_index,
                UnitStates.payload_dispatched.name,
                handler.name,
            )

            if result.status == ParseStatus.needs_reparse:
                if reparse:
                    raise UnresolvedReference(result.missing_references)
                logging.debug(
                    "Unit %d: %s (missing %s)",
                    unit_index,
                    UnitStates.pending_reparse.name,
                    ", ".join(str(key) for key in result.missing_references),
                )
                return PendingReparse(
                    ReparseTicket(
                        unit_index,
                        data,
                        serdes.context,
                        log.snapshot(io.tell()) if log is not None else (),
                        tuple(result.missing_references),
                    )
                )

            if self.settings["check_trailing_bits"] and handler.check_trailing_bits:
                self._check_trailing_bits(serdes, warnings)
            serdes.verify_complete()
        except ParseError as e:
            if e.offset is None:
                # Length prefix failures happen before the unit's first bit
                e.offset = serdes.io.tell() if serdes is not None else 0
            logging.warning("Unit %d failed: %s", unit_index, e)
            return Failed(
                unit_index,
                e.error_kind,
                structure,
                log.snapshot(serdes.io.tell()) if log is not None else (),
                e,
            )

        for warning in warnings:
            logging.warning("Unit %d: %s", unit_index, warning)

        payload = serdes.context["payload"]
        keys = handler.parameter_sets(payload)
        for key in keys:
            self.registry.insert(key.kind, key.id, payload)
            logging.debug("Unit %d: stored %s", unit_index, key)
        self._update_associated(payload, keys)

        logging.debug("Unit %d: %s", unit_index, UnitStates.complete.name)
        return Complete(
            unit_index,
            serdes.context,
            log.snapshot() if log is not None else (),
            warnings,
        )


def parse_units(units, codec=None, settings=None):
    """
    Parse a sequence of units with a new :py:class:`ParserSession`,
    generating results as they are produced: each unit's own result, then the
    results of any pending units its parameter sets allowed to be retried.
    Units still pending at the end of the stream are reported as
    :py:class:`Failed` last.

    Parameters
    ==========
    units : iterable of bytes
    codec : :py:class:`~nal_syntax.tables.Codecs` or None
        If given, overrides the codec in 'settings'.
    settings : :py:data:`~nal_syntax.settings.ParserSettings` or None
    """
    overrides = dict(settings) if settings is not None else {}
    if codec is not None:
        overrides["codec"] = codec
    session = ParserSession(make_settings(**overrides))

    for data in units:
        yield session.parse_unit(data)
        for result in session.take_resolved():
            yield result

    for result in session.finish():
        yield result
