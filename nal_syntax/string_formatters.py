"""
The :py:mod:`nal_syntax.string_formatters` module contains callable objects
which format syntax element values for display. They are used as the
``formatter`` argument of :py:class:`nal_syntax.fixeddict.Entry`.

.. autoclass:: Hex

.. autoclass:: Bits

.. autoclass:: Bytes

.. autoclass:: List

.. autoclass:: MultilineList
"""

from nal_syntax.string_utils import indent, ellipsise, longest_run

__all__ = [
    "Hex",
    "Bits",
    "Bytes",
    "List",
    "MultilineList",
]


class Hex(object):
    """
    Prints integers in hexadecimal with at least ``num_digits`` digits, e.g.
    ``Hex(2)(0x1)`` gives ``"0x01"``.
    """

    def __init__(self, num_digits=0, prefix="0x"):
        self.num_digits = num_digits
        self.prefix = prefix

    def __call__(self, number):
        return "{}{}{:0{}X}".format(
            "-" if number < 0 else "",
            self.prefix,
            abs(number),
            self.num_digits,
        )


class Bits(object):
    """
    Prints a :py:class:`bitarray.bitarray` as ``0b0101``, ellipsising long
    runs and appending the length once it reaches ``show_length`` bits.
    """

    def __init__(self, prefix="0b", show_length=16):
        self.prefix = prefix
        self.show_length = show_length

    def __call__(self, ba):
        string = self.prefix + ellipsise(ba.to01())
        if len(ba) >= self.show_length:
            string += " ({} bit{})".format(len(ba), "s" if len(ba) != 1 else "")
        return string


class Bytes(object):
    """
    Prints a :py:class:`bytes` string as ``0xAB_CD_EF``, ellipsising the
    longest run of repeated bytes (e.g. padding) and appending the length once
    it reaches ``show_length`` bytes.
    """

    def __init__(self, prefix="0x", separator="_", context=2, min_length=4, show_length=8):
        self.prefix = prefix
        self.separator = separator
        self.context = context
        self.min_length = min_length
        self.show_length = show_length

    def _hex(self, data):
        return self.separator.join("{:02X}".format(n) for n in data)

    def __call__(self, b):
        data = bytearray(b)
        start, length = longest_run(data)
        if length >= (2 * self.context) + self.min_length:
            string = "{}...{}".format(
                self._hex(data[: start + self.context]),
                self._hex(data[start + length - self.context :]),
            )
        else:
            string = self._hex(data)

        if len(data) >= self.show_length:
            string += " ({} byte{})".format(len(data), "s" if len(data) != 1 else "")
        return self.prefix + string


class List(object):
    """
    Prints a list, collapsing runs of three or more identical values, e.g.
    ``[0]*8 + [1]`` gives ``"[0]*8 + [1]"``.

    Parameters
    ==========
    formatter : callable
        Formatter for the individual values (defaults to :py:func:`str`).
    """

    def __init__(self, formatter=str):
        self.formatter = formatter

    def __call__(self, values):
        runs = []
        for value in values:
            if runs and runs[-1][0] == value:
                runs[-1][1] += 1
            else:
                runs.append([value, 1])

        parts = []
        pending = []
        for value, count in runs:
            if count >= 3:
                if pending:
                    parts.append("[{}]".format(", ".join(pending)))
                    pending = []
                parts.append("[{}]*{}".format(self.formatter(value), count))
            else:
                pending.extend([self.formatter(value)] * count)
        if pending or not parts:
            parts.append("[{}]".format(", ".join(pending)))

        return " + ".join(parts)


class MultilineList(object):
    """
    A formatter for lists which displays each value on its own line.

    Examples::

        >>> print(MultilineList()(["one", "two", "three"]))
        0: one
        1: two
        2: three

        >>> # A heading may be added
        >>> print(MultilineList(heading="MyList")(["one", "two", "three"]))
        MyList
          0: one
          1: two
          2: three
    """

    def __init__(self, heading=None, formatter=str):
        self.heading = heading
        self.formatter = formatter

    def __call__(self, lst):
        lines = "\n".join(
            "{}: {}".format(i, self.formatter(value)) for i, value in enumerate(lst)
        )

        if self.heading is None:
            return lines
        else:
            return "{}\n{}".format(self.heading, indent(lines))
