"""
:py:mod:`nal_syntax.annexb`: Byte stream format
===============================================

Elementary streams store units one after another, each preceded by the start
code prefix ``0x000001`` (H.265 Annex B, H.262 clause 5.2.3). Zero bytes may
precede a start code (``zero_byte`` and ``trailing_zero_8bits`` in HEVC, zero
stuffing in MPEG-2). An HEVC NAL unit never ends in a zero byte, so these are
removed. MPEG-2 stuffing cannot be told apart from zero bytes which end a
unit's payload (e.g. ``user_data``) and is left in place.

.. autofunction:: find_start_codes

.. autofunction:: split_annexb
"""

from nal_syntax.tables import Codecs

__all__ = [
    "START_CODE_PREFIX",
    "find_start_codes",
    "split_annexb",
]


START_CODE_PREFIX = b"\x00\x00\x01"


def find_start_codes(data):
    """
    Return the offsets of every start code prefix in 'data'.
    """
    offsets = []
    offset = data.find(START_CODE_PREFIX)
    while offset != -1:
        offsets.append(offset)
        offset = data.find(START_CODE_PREFIX, offset + len(START_CODE_PREFIX))
    return offsets


def split_annexb(data, codec=Codecs.hevc):
    """
    Split a byte stream into units.

    Each unit is returned without its start code prefix. For HEVC, the zero
    bytes which precede the next start code are also removed (so a 4-byte
    ``0x00000001`` start code is handled like a 3-byte one). For MPEG-2 they
    are kept and the parser checks them as stuffing. Any data before the first
    start code is ignored.

    Parameters
    ==========
    data : bytes
    codec : :py:class:`~nal_syntax.tables.Codecs`

    Returns
    =======
    units : [bytes, ...]
    """
    data = bytes(data)
    offsets = find_start_codes(data)

    units = []
    for start, end in zip(offsets, offsets[1:] + [len(data)]):
        unit = data[start + len(START_CODE_PREFIX) : end]
        if codec == Codecs.hevc:
            unit = unit.rstrip(b"\x00")
        units.append(unit)
    return units
