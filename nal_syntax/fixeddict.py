r"""
The :py:mod:`nal_syntax.fixeddict` module provides :py:func:`fixeddict`, a
factory for :py:class:`dict` subclasses which only accept a preset list of
keys. Every syntax structure produced by the parser (parameter sets, SEI
messages, headers...) is one of these.

Compared with a plain dictionary, a fixeddict:

* Has a meaningful type name (e.g. ``SeqParameterSet``) which identifies the
  kind of syntax structure it holds.
* Rejects misspelt keys with a :py:exc:`FixedDictKeyError`.
* Pretty-prints itself, optionally using per-entry formatters.

For example::

    >>> from nal_syntax.fixeddict import fixeddict, Entry
    >>> from nal_syntax.string_formatters import Hex
    >>> NalUnitHeader = fixeddict(
    ...     "NalUnitHeader",
    ...     Entry("forbidden_zero_bit"),
    ...     Entry("nal_unit_type", enum=NalUnitTypes, formatter=Hex(2)),
    ...     Entry("nuh_layer_id"),
    ...     Entry("nuh_temporal_id_plus1"),
    ... )
    >>> h = NalUnitHeader(nal_unit_type=33)
    >>> h["nuh_layer_id"] = 0
    >>> print(h)
    NalUnitHeader:
      nal_unit_type: SPS_NUT (0x21)
      nuh_layer_id: 0
    >>> h["nal_type"] = 1
    Traceback (most recent call last):
      ...
    FixedDictKeyError: 'nal_type' not allowed in NalUnitHeader

Entries whose names start with an underscore are computed values (they do
not appear in the bitstream) and are omitted when printing.

API
---

.. autofunction:: fixeddict

.. autoclass:: Entry

.. autoexception:: FixedDictKeyError
"""

import sys

from collections import OrderedDict

from textwrap import dedent

from nal_syntax.string_utils import indent

__all__ = [
    "fixeddict",
    "Entry",
    "FixedDictKeyError",
]


class Entry(object):
    """
    Describes one permitted key of a :py:func:`fixeddict`.

    Parameters
    ==========
    name : str
    formatter : callable(value) -> str
        Used to print the value. Defaults to :py:func:`str`.
    friendly_formatter : callable(value) -> str or None
        If given and it returns a string, that string is printed with the
        formatted value following in brackets.
    enum : :py:class:`~enum.IntEnum`
        Shorthand for a ``friendly_formatter`` which shows the enum member name
        for known values.
    help : str
        Optional documentation for the entry.
    """

    def __init__(self, name, formatter=str, friendly_formatter=None, enum=None, help=None):
        self.name = name
        self.formatter = formatter
        self.friendly_formatter = friendly_formatter
        self.help = dedent(help).strip() if help is not None else None

        if enum is not None and friendly_formatter is None:

            def friendly_enum_formatter(value):
                try:
                    return enum(value).name
                except ValueError:
                    return None

            self.friendly_formatter = friendly_enum_formatter

    def to_string(self, value):
        """Format 'value' as described by this entry."""
        string = self.formatter(value)
        if self.friendly_formatter is not None:
            friendly = self.friendly_formatter(value)
            if friendly is not None:
                string = "{} ({})".format(friendly, string)
        return string


class FixedDictKeyError(KeyError):
    """
    A :py:exc:`KeyError` raised when a key not permitted by a fixeddict is
    used.

    Attributes
    ==========
    key
        The offending key.
    fixeddict_class
        The fixeddict type involved.
    """

    def __init__(self, key, fixeddict_class):
        super(FixedDictKeyError, self).__init__(key)
        self.key = key
        self.fixeddict_class = fixeddict_class

    def __str__(self):
        return "{!r} not allowed in {}".format(self.key, self.fixeddict_class.__name__)


class FixedDict(dict):
    """
    Base class of all types produced by :py:func:`fixeddict`. Subclasses
    define the class attribute ``entry_objs``, an
    :py:class:`~collections.OrderedDict` mapping names to :py:class:`Entry`
    objects.
    """

    entry_objs = OrderedDict()

    def __init__(self, *args, **kwargs):
        super(FixedDict, self).__init__(*args, **kwargs)
        for key in self:
            self._check_key(key)

    @classmethod
    def _check_key(cls, key):
        if key not in cls.entry_objs:
            raise FixedDictKeyError(key, cls)

    def __setitem__(self, key, value):
        self._check_key(key)
        super(FixedDict, self).__setitem__(key, value)

    def setdefault(self, key, default=None):
        self._check_key(key)
        return super(FixedDict, self).setdefault(key, default)

    def update(self, *args, **kwargs):
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def copy(self):
        return type(self)(self)

    def __repr__(self):
        return "{}({{{}}})".format(
            type(self).__name__,
            ", ".join(
                "{!r}: {!r}".format(name, self[name])
                for name in self.entry_objs
                if name in self
            ),
        )

    def __str__(self):
        lines = [
            "{}: {}".format(name, entry.to_string(self[name]))
            for name, entry in self.entry_objs.items()
            if name in self and not name.startswith("_")
        ]
        if not lines:
            return type(self).__name__
        return "{}:\n{}".format(type(self).__name__, indent("\n".join(lines)))

    # Plain dict pickling would bypass __init__/__setitem__ and lose the
    # subclass's state for protocol 0/1 so spell it out.
    def __reduce__(self):
        return (type(self), (), dict(self))

    def __setstate__(self, state):
        self.update(state)


def fixeddict(name, *entries, **kwargs):
    """
    Create a new :py:class:`FixedDict` subclass called 'name'.

    The remaining positional arguments are key names (strings) or
    :py:class:`Entry` objects. The keyword-only argument ``help`` provides a
    docstring for the new type. The keyword-only argument ``module`` overrides
    the ``__module__`` of the new type; by default this is taken from the
    caller so that instances can be pickled.
    """
    module = kwargs.pop("module", None)
    help = kwargs.pop("help", None)
    if kwargs:
        raise TypeError("unexpected keyword arguments: {}".format(", ".join(kwargs)))

    entry_objs = OrderedDict()
    for entry in entries:
        if not isinstance(entry, Entry):
            entry = Entry(entry)
        entry_objs[entry.name] = entry

    doc = dedent(help).strip() if help is not None else "A syntax structure."
    doc += "\n\nEntries\n=======\n" + "\n".join(
        entry.name + ("\n" + indent(entry.help, "    ") if entry.help else "")
        for entry in entry_objs.values()
    )

    cls = type(name, (FixedDict,), {"entry_objs": entry_objs, "__doc__": doc})

    if module is None:
        try:
            module = sys._getframe(1).f_globals["__name__"]
        except (AttributeError, ValueError, KeyError):
            pass
    if module is not None:
        cls.__module__ = module

    return cls
