"""
The :py:mod:`nal_syntax` module parses the units of HEVC (ITU-T H.265) and
MPEG-2 video (ITU-T H.262) elementary streams into trees of syntax elements.

Main components
---------------

* A bit-level reader and syntax deserialiser which records a diagnostic log
  of every field read (:py:mod:`nal_syntax.bitstream`)
* Per-codec syntax routines (:py:mod:`nal_syntax.hevc`,
  :py:mod:`nal_syntax.mpeg2`) registered with a payload dispatcher
  (:py:mod:`nal_syntax.dispatch`)
* A parameter set registry (:py:mod:`nal_syntax.registry`) and a unit parser
  which defers units until the parameter sets they reference arrive
  (:py:mod:`nal_syntax.parser`)

Parsing a stream
----------------

::

    >>> from nal_syntax import parse_units, split_annexb, Codecs, Complete
    >>> for result in parse_units(split_annexb(data), codec=Codecs.hevc):
    ...     if isinstance(result, Complete):
    ...         print(result.structure)
"""

from nal_syntax.version import __version__

from nal_syntax.tables import Codecs, ParameterSetKinds, ErrorKinds

from nal_syntax.settings import make_settings

from nal_syntax.registry import ANY_ID, ParameterSetKey, ParameterSetRegistry

from nal_syntax.annexb import split_annexb

from nal_syntax.parser import (
    Complete,
    PendingReparse,
    Failed,
    ParserSession,
    parse_units,
)

__all__ = [
    "__version__",
    "Codecs",
    "ParameterSetKinds",
    "ErrorKinds",
    "make_settings",
    "ANY_ID",
    "ParameterSetKey",
    "ParameterSetRegistry",
    "split_annexb",
    "Complete",
    "PendingReparse",
    "Failed",
    "ParserSession",
    "parse_units",
]
