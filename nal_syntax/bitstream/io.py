"""
The :py:mod:`nal_syntax.bitstream.io` module contains low-level readers and
writers which facilitate bitwise operations on in-memory byte strings of the
kinds used by NAL unit syntax: fixed-width fields, exp-Golomb codes and raw
byte runs.

The :py:class:`BitstreamReader` and :py:class:`BitstreamWriter` classes provide
equivalent methods for the ``u(n)``, ``ue(v)``, ``se(v)`` and ``b(8)``
descriptors used by the standards, along with a few additional utility
methods.

.. note::

    These methods are designed to be 'safe' meaning that if the data runs out,
    or out-of-range values are provided, an error will be produced (rather
    than an unexpected value being read/written).

.. autoclass:: BitstreamReader
    :members:

.. autoclass:: BitstreamWriter
    :members:

The following utility function converts an offset given in bits into a
``(bytes, bits)`` pair.

.. autofunction:: from_bit_offset

"""

from bitarray import bitarray

from bitarray.util import ba2int, int2ba

from nal_syntax.string_formatters import Bytes

from nal_syntax.tables import MAX_EXP_GOLOMB_PREFIX_BITS

from nal_syntax.exceptions import InsufficientData, MalformedCode

from nal_syntax.bitstream.exceptions import OutOfRangeError

from nal_syntax.bitstream.exp_golomb import (
    exp_golomb_length,
    signed_to_unsigned,
    unsigned_to_signed,
)


__all__ = [
    "from_bit_offset",
    "BitstreamReader",
    "BitstreamWriter",
]


def from_bit_offset(total_bits):
    """
    Convert from a bit offset into a (bytes, bits) tuple (as used in
    diagnostic displays).
    """
    return (total_bits // 8, total_bits % 8)


class BitstreamReader(object):
    """
    A read head over a byte string which may be read one or more bits at a
    time, most significant bit first.

    When the data (or the current bounded block) is exhausted, reads raise
    :py:exc:`~nal_syntax.exceptions.InsufficientData` and leave the read
    position unchanged.
    """

    def __init__(self, data, max_exp_golomb_prefix_bits=MAX_EXP_GOLOMB_PREFIX_BITS):
        """
        Parameters
        ==========
        data : bytes
        max_exp_golomb_prefix_bits : int
            Exp-Golomb codes with more leading zeros than this are reported as
            :py:exc:`~nal_syntax.exceptions.MalformedCode`.
        """
        self._bits = bitarray()
        self._bits.frombytes(bytes(data))

        self._max_exp_golomb_prefix_bits = max_exp_golomb_prefix_bits

        # The index of the next bit to read
        self._offset = 0

        # None, if not in a bounded block. Otherwise, the bit offset of the end
        # of the block.
        self._block_end = None

    @property
    def _end(self):
        """Internal. The offset reads may not pass."""
        if self._block_end is not None:
            return self._block_end
        else:
            return len(self._bits)

    def tell(self):
        """Report the current bit offset from the start of the data."""
        return self._offset

    def seek(self, offset):
        """
        Move to an absolute bit offset. Intended for diagnostic re-reads only:
        seeking outside of the current bounded block is not permitted.
        """
        if not 0 <= offset <= self._end:
            raise OutOfRangeError(
                "Cannot seek() to bit {} (limit is {}).".format(offset, self._end)
            )
        self._offset = offset

    def bits_remaining(self):
        """The number of unread bits in the data (or current bounded block)."""
        return self._end - self._offset

    def is_byte_aligned(self):
        return self._offset % 8 == 0

    def bounded_block_begin(self, length):
        """
        Begin a bounded block of the specified length in bits. Reads past the
        end of the block will fail with
        :py:exc:`~nal_syntax.exceptions.InsufficientData`, even if the
        underlying data continues.
        """
        if self._block_end is not None:
            raise Exception("Cannot nest bounded blocks")
        if length > self.bits_remaining():
            raise InsufficientData(length, self.bits_remaining())
        self._block_end = self._offset + length

    def bounded_block_end(self):
        """
        Ends the current bounded block. Returns the number of unused bits
        remaining, but does not read them or seek past them.
        """
        if self._block_end is None:
            raise Exception("Not in bounded block.")

        unused_bits = self._block_end - self._offset
        self._block_end = None

        return unused_bits

    def _check_available(self, bits):
        if bits > self.bits_remaining():
            raise InsufficientData(bits, self.bits_remaining())

    def read_bit(self):
        """Read and return the next bit in the stream."""
        self._check_available(1)
        bit = self._bits[self._offset]
        self._offset += 1
        return bit

    def read_bool(self):
        return bool(self.read_bit())

    def read_nbits(self, bits):
        """
        Read a 'bits'-bit unsigned integer (a ``u(n)`` field). Reading zero
        bits returns 0.
        """
        if bits == 0:
            return 0
        self._check_available(bits)
        value = ba2int(self._bits[self._offset : self._offset + bits])
        self._offset += bits
        return value

    def read_bitarray(self, bits):
        """
        Read 'bits' bits returning the value as a
        :py:class:`bitarray.bitarray`.
        """
        self._check_available(bits)
        value = self._bits[self._offset : self._offset + bits]
        self._offset += bits
        return value

    def read_bytes(self, num_bytes):
        """
        Read a number of bytes returning a :py:class:`bytes` string.
        """
        return self.read_bitarray(num_bytes * 8).tobytes()

    def read_uint(self):
        """
        Read an unsigned exp-Golomb code (a ``ue(v)`` field) and return an
        integer.
        """
        start = self._offset
        end = self._end

        try:
            stop_bit = self._bits.index(1, start, end)
        except ValueError:
            stop_bit = None

        leading_zeros = (stop_bit if stop_bit is not None else end) - start
        if leading_zeros > self._max_exp_golomb_prefix_bits:
            raise MalformedCode(
                "exp-Golomb code",
                None,
                "prefix of more than {} zero bits".format(
                    self._max_exp_golomb_prefix_bits
                ),
            )
        if stop_bit is None:
            raise InsufficientData(leading_zeros + 1, leading_zeros)

        # On failure the offset is rolled back to the start of the code
        self._offset = stop_bit + 1
        try:
            suffix = self.read_nbits(leading_zeros)
        except InsufficientData:
            self._offset = start
            raise InsufficientData((leading_zeros * 2) + 1, end - start)

        return (1 << leading_zeros) - 1 + suffix

    def read_sint(self):
        """
        Signed version of :py:meth:`read_uint` (a ``se(v)`` field).
        """
        return unsigned_to_signed(self.read_uint())

    def byte_align(self):
        """
        Advance to the next byte boundary (if not already aligned) returning
        the skipped bits as a :py:class:`bitarray.bitarray`.
        """
        return self.read_bitarray((8 - (self._offset % 8)) % 8)

    def _last_one_bit(self):
        """Internal. Offset of the last 1 bit before the end, or None."""
        offset = self._end - 1
        while offset >= self._offset:
            if self._bits[offset]:
                return offset
            offset -= 1
        return None

    def more_rbsp_data(self):
        """
        True if there is more data before the RBSP stop bit (the final 1 bit
        of the data, or of the current bounded block).
        """
        last_one_bit = self._last_one_bit()
        return last_one_bit is not None and self._offset < last_one_bit

    def bits_before_stop_bit(self):
        """
        The number of unread bits before the RBSP stop bit (zero if there is
        no stop bit).
        """
        last_one_bit = self._last_one_bit()
        if last_one_bit is None:
            return 0
        return last_one_bit - self._offset

    def peek_nbits(self, bits):
        """
        Like :py:meth:`read_nbits` but does not advance. Returns None if fewer
        than 'bits' bits remain.
        """
        if bits > self.bits_remaining():
            return None
        offset = self._offset
        value = self.read_nbits(bits)
        self._offset = offset
        return value


class BitstreamWriter(object):
    """
    An in-memory bitstream which may be written one or more bits at a time.
    Used to construct streams for tests and examples.
    """

    def __init__(self):
        self._bits = bitarray()

    def tell(self):
        """Report the number of bits written so far."""
        return len(self._bits)

    def is_byte_aligned(self):
        return len(self._bits) % 8 == 0

    def write_bit(self, value):
        self._bits.append(1 if value else 0)

    def write_nbits(self, bits, value):
        """
        Write a 'bits'-bit unsigned integer. The complement of
        :py:meth:`BitstreamReader.read_nbits`.

        Throws an :py:exc:`OutOfRangeError` if the value is too large to fit in
        the requested number of bits.
        """
        if value < 0 or value.bit_length() > bits:
            raise OutOfRangeError(
                "0b{:b} is {} bits, not {}".format(
                    value,
                    value.bit_length(),
                    bits,
                )
            )

        if bits:
            self._bits.extend(int2ba(value, length=bits))

    def write_bitarray(self, value):
        """
        Write the bits from the :py:class:`bitarray.bitarray` (or string of
        '0' and '1' characters) 'value'.
        """
        self._bits.extend(bitarray(value))

    def write_bytes(self, value):
        """
        Write the provided :py:class:`bytes` or :py:class:`bytearray`. Need not
        be byte aligned.
        """
        if not isinstance(value, (bytes, bytearray)):
            raise OutOfRangeError("{!r} is not a byte string".format(value))
        for byte in bytearray(value):
            self.write_nbits(8, byte)

    def write_uint(self, value):
        """
        Write an unsigned exp-Golomb code.

        An :py:exc:`OutOfRangeError` will be raised if a negative value is
        provided.
        """
        # The leading zeros are those of value + 1 padded to the code length
        self.write_nbits(exp_golomb_length(value), value + 1)

    def write_sint(self, value):
        """
        Signed version of :py:meth:`write_uint`.
        """
        self.write_uint(signed_to_unsigned(value))

    def byte_align(self, fill=0):
        """Pad with 'fill' bits up to the next byte boundary."""
        while not self.is_byte_aligned():
            self.write_bit(fill)

    def write_rbsp_trailing_bits(self):
        """Write the stop bit followed by zeros up to a byte boundary."""
        self.write_bit(1)
        self.byte_align()

    def flush(self):
        """
        Return the bytes written so far. A partially written final byte is
        zero-padded.
        """
        return self._bits.tobytes()

    def __repr__(self):
        return "<{} {} bits: {}>".format(
            type(self).__name__,
            len(self._bits),
            Bytes()(self.flush()),
        )
