"""
:py:mod:`nal_syntax.bitstream.exp_golomb`: Exp-Golomb code length calculators
=============================================================================
"""

from nal_syntax.bitstream.exceptions import OutOfRangeError

__all__ = [
    "exp_golomb_length",
    "signed_to_unsigned",
    "unsigned_to_signed",
]


def exp_golomb_length(value):
    """
    Return the length (in bits) of the ``ue(v)`` representation of value.

    An :py:exc:`~.OutOfRangeError` will be raised if
    a negative value is provided.
    """
    if value < 0:
        raise OutOfRangeError(value)

    return (((value + 1).bit_length() - 1) * 2) + 1


def signed_to_unsigned(value):
    """
    Map a signed value onto the unsigned code number used to represent it in
    an ``se(v)`` code (0, 1, -1, 2, -2, ... become 0, 1, 2, 3, 4, ...).
    """
    if value > 0:
        return (value * 2) - 1
    else:
        return -value * 2


def unsigned_to_signed(code_num):
    """The inverse of :py:func:`signed_to_unsigned`."""
    if code_num % 2:
        return (code_num + 1) // 2
    else:
        return -(code_num // 2)

