"""
:py:mod:`nal_syntax.bitstream.rbsp`: Emulation prevention
=========================================================

Within a NAL unit, any byte sequence ``0x000000`` to ``0x000003`` is escaped
by inserting an ``emulation_prevention_three_byte`` (``0x03``) after the two
zero bytes so that start codes cannot appear inside a unit. The raw byte
sequence payload (RBSP) is the unit payload with these bytes removed.

.. autofunction:: nal_to_rbsp

.. autofunction:: rbsp_to_nal
"""

__all__ = [
    "nal_to_rbsp",
    "rbsp_to_nal",
]


def nal_to_rbsp(data):
    """
    Remove the emulation prevention bytes from a NAL unit payload.

    Returns
    =======
    rbsp : bytes
    removed : [int, ...]
        The offsets (in 'data') of the bytes which were removed.
    """
    out = bytearray()
    removed = []
    zeros = 0
    for offset, byte in enumerate(bytearray(data)):
        if zeros >= 2 and byte == 0x03:
            removed.append(offset)
            zeros = 0
            continue

        out.append(byte)
        if byte == 0x00:
            zeros += 1
        else:
            zeros = 0

    return bytes(out), removed


def rbsp_to_nal(rbsp):
    """
    Insert emulation prevention bytes into an RBSP. The inverse of
    :py:func:`nal_to_rbsp`.
    """
    out = bytearray()
    zeros = 0
    for byte in bytearray(rbsp):
        if zeros >= 2 and byte <= 0x03:
            out.append(0x03)
            zeros = 0

        out.append(byte)
        if byte == 0x00:
            zeros += 1
        else:
            zeros = 0

    # A unit may not end with a zero byte (e.g. when the RBSP ends with a
    # cabac_zero_word)
    if zeros >= 2:
        out.append(0x03)

    return bytes(out)
