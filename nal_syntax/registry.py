"""
:py:mod:`nal_syntax.registry`: Parameter set registry
=====================================================

Units such as slice headers and many SEI messages can only be parsed given
fields from an earlier parameter set. A :py:class:`ParameterSetRegistry` holds
the most recent parameter set of each kind and id seen in a stream.
Dependent structures refer to parameter sets by :py:class:`ParameterSetKey`
and look them up at use time; they never hold references to them.

.. autoclass:: ParameterSetKey

.. autodata:: ANY_ID
    :annotation:

.. autoclass:: ParameterSetRegistry
    :members:
"""

from collections import namedtuple

from sentinels import Sentinel

from nal_syntax.tables import ParameterSetKinds

__all__ = [
    "ANY_ID",
    "ParameterSetKey",
    "ParameterSetRegistry",
]


ANY_ID = Sentinel("ANY_ID")
"""
A :py:class:`ParameterSetKey` id meaning 'whichever parameter set of this kind
is in use'. Used by SEI messages which depend on the active SPS but carry no
id of their own.
"""


class ParameterSetKey(namedtuple("ParameterSetKey", "kind,id")):
    """
    Identifies a parameter set in a :py:class:`ParameterSetRegistry`.

    Parameters
    ==========
    kind : :py:class:`~nal_syntax.tables.ParameterSetKinds`
    id : int or :py:data:`ANY_ID`
    """

    def __str__(self):
        return "{}[{}]".format(
            ParameterSetKinds(self.kind).name,
            "*" if self.id is ANY_ID else self.id,
        )


class ParameterSetRegistry(object):
    """
    A mapping from (kind, id) to the most recently parsed parameter set
    structure of that kind and id. One registry is used per
    :py:class:`~nal_syntax.parser.ParserSession`; it is only modified between
    unit parses.
    """

    def __init__(self):
        # {(kind, id): structure, ...}
        self._parameter_sets = {}

    def insert(self, kind, id, structure):
        """Add a parameter set, replacing any with the same kind and id."""
        self._parameter_sets[ParameterSetKey(ParameterSetKinds(kind), id)] = structure

    def lookup(self, kind, id):
        """
        Return the parameter set of the given kind and id, or None if absent.
        An id of :py:data:`ANY_ID` always gives None.
        """
        if id is ANY_ID:
            return None
        return self._parameter_sets.get(ParameterSetKey(kind, id))

    def contains(self, key):
        """
        Test whether the parameter set identified by a
        :py:class:`ParameterSetKey` is present. An id of :py:data:`ANY_ID`
        matches any parameter set of that kind.
        """
        if key.id is ANY_ID:
            return any(k.kind == key.kind for k in self._parameter_sets)
        return key in self._parameter_sets

    def ids(self, kind):
        """Return the sorted ids of the parameter sets of the given kind."""
        return sorted(k.id for k in self._parameter_sets if k.kind == kind)

    def clear(self):
        """Forget all parameter sets (e.g. when a new stream begins)."""
        self._parameter_sets.clear()

    def snapshot(self):
        """
        Return a copy of the registry's contents as a dictionary
        ``{ParameterSetKey: structure, ...}``. The structures themselves are
        shared and must not be modified.
        """
        return dict(self._parameter_sets)

    def __len__(self):
        return len(self._parameter_sets)

    def __repr__(self):
        return "<{} {}>".format(
            type(self).__name__,
            ", ".join(sorted(str(key) for key in self._parameter_sets)),
        )
