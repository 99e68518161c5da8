r"""
The :py:mod:`nal_syntax.bitstream.serdes` module provides the
:py:class:`Deserialiser` which the codec syntax functions use to read values
from a :py:class:`~nal_syntax.bitstream.io.BitstreamReader` into a tree of
(fixed) dictionaries, mirroring every read into a
:py:class:`~nal_syntax.bitstream.log.DiagnosticLog`.

The syntax functions are transliterations of the syntax tables in the
standards with each ``read_*`` descriptor replaced by a call naming the
*target* (the dictionary key) the value is stored in. For example, the HEVC
``profile_tier_level`` begins::

    @context_type(ProfileTierLevel)
    def profile_tier_level(serdes, profile_present_flag, max_num_sub_layers_minus1):
        if profile_present_flag:
            serdes.nbits("general_profile_space", 2)
            serdes.bool("general_tier_flag")
            serdes.nbits("general_profile_idc", 5)
            ...

which, when run within ``serdes.subcontext("profile_tier_level")``, produces a
``ProfileTierLevel`` dictionary like ``{"general_profile_space": 0,
"general_tier_flag": False, ...}`` in the enclosing context.

Targets which repeat (i.e. syntax elements inside loops) must first be
declared with :py:meth:`Deserialiser.declare_list` after which each use appends
to a list. Their log entries are named ``target[i]``.

Each target may only be assigned once per context; accidental reuse raises
:py:exc:`~nal_syntax.bitstream.exceptions.ReusedTargetError`.

Values which are not in the bitstream but are needed to interpret it (e.g.
derived picture order count deltas) may be stored using
:py:meth:`Deserialiser.computed_value`. By convention their names start with
an underscore.

.. autoclass:: Deserialiser
    :members:

.. autodecorator:: context_type

"""

from contextlib import contextmanager

from functools import wraps

from nal_syntax.bitstream.exceptions import (
    ReusedTargetError,
    UnclosedNestedContextError,
)

__all__ = [
    "Deserialiser",
    "context_type",
]


class Deserialiser(object):
    """
    Reads syntax elements from a bitstream into context dictionaries.

    Attributes
    ==========
    io : :py:class:`~.io.BitstreamReader`
        The reader in use.
    log : :py:class:`~.log.DiagnosticLog` or None
        If not None, every read is recorded here.
    cur_context : dict
        The context dictionary currently being populated.
    """

    def __init__(self, io, context=None, log=None):
        """
        Parameters
        ==========
        io : :py:class:`~.io.BitstreamReader`
        context : dict
            The initial context dictionary.
        log : :py:class:`~.log.DiagnosticLog` or None
        """
        self.io = io
        self.log = log

        # The current context dictionary.
        # {target_name: value, ...}
        self.cur_context = context if context is not None else {}

        # Logs which target names have already been used.
        #
        # When a non-list target is used, a corresponding entry is set to True
        # in this dictionary. Re-use of a target is prevented by checking that
        # the required target does not already appear in this dictionary.
        #
        # When :py:attr:`declare_list` is used, the corresponding entry is set
        # to 0. Subsequent uses of that target increment the counter.
        #
        # {target_name: True or int, ...}
        self._cur_context_indices = {}

        # Whenever :py:meth:`subcontext_enter` is used, the current
        # self.cur_context and self._cur_context_indices dictionaries and the
        # specified target name are pushed onto their respective stacks. The
        # :py:meth:`subcontext_leave` method pops these values again.
        self._context_stack = []  # [<context dict>, ...]
        self._context_indices_stack = []  # [<context_indices dict>, ...]
        self._target_stack = []  # [str, ...]

    def _set_context_value(self, target, value):
        """
        Add a value to a context dictionary, checking that the value has not
        already been set and extending list targets if necessary.

        Returns the name of the value for logging purposes.
        """
        if target not in self._cur_context_indices:
            # Case: This target has not been declared as a list and this is the
            # first time it has been accessed.
            self.cur_context[target] = value
            self._cur_context_indices[target] = True
            return target
        elif self._cur_context_indices[target] is True:
            # Case: This target has not been declared as a list and has already
            # been accessed.
            raise ReusedTargetError(self.describe_path(target))
        else:
            # Case: This target has been declared as a list.
            i = self._cur_context_indices[target]
            self._cur_context_indices[target] += 1
            self.cur_context[target].append(value)
            return "{}[{}]".format(target, i)

    def _read(self, target, read, *args):
        start = self.io.tell()
        value = read(*args)
        name = self._set_context_value(target, value)
        if self.log is not None:
            self.log.add_value(name, value, start, self.io.tell())
        return value

    def bool(self, target):
        """
        Read a single bit as a :py:class:`bool` (a one-bit flag).

        Returns
        =======
        value : bool
        """
        return self._read(target, self.io.read_bool)

    def nbits(self, target, num_bits):
        """
        Read a fixed-length unsigned integer (a ``u(n)`` or ``f(n)`` field).
        """
        return self._read(target, self.io.read_nbits, num_bits)

    def uint(self, target):
        """Read an unsigned exp-Golomb code (a ``ue(v)`` field)."""
        return self._read(target, self.io.read_uint)

    def sint(self, target):
        """Read a signed exp-Golomb code (a ``se(v)`` field)."""
        return self._read(target, self.io.read_sint)

    def bytes(self, target, num_bytes):
        """Read a string of bytes as a :py:class:`bytes` object."""
        return self._read(target, self.io.read_bytes, num_bytes)

    def bitarray(self, target, num_bits):
        """Read bits as a :py:class:`bitarray.bitarray`."""
        return self._read(target, self.io.read_bitarray, num_bits)

    def byte_align(self, target):
        """
        Advance to the next byte boundary, storing the skipped bits (as a
        :py:class:`bitarray.bitarray`) in the target.
        """
        return self._read(target, self.io.byte_align)

    def more_rbsp_data(self):
        """See :py:meth:`~.io.BitstreamReader.more_rbsp_data`."""
        return self.io.more_rbsp_data()

    def bits_remaining(self):
        return self.io.bits_remaining()

    def next_bits(self, num_bits):
        """
        The value of the next 'num_bits' bits without reading them (the
        ``nextbits()`` function of the standards), or None at the end of the
        data.
        """
        return self.io.peek_nbits(num_bits)

    def extension_data(self, target):
        """
        Read all bits before the RBSP stop bit (e.g. ``sps_extension_data_flag``
        bits) as a :py:class:`bitarray.bitarray`.
        """
        return self.bitarray(target, self.io.bits_before_stop_bit())

    def bounded_block_begin(self, length):
        """
        Begin a bounded block of the specified length in bits. Reads past its
        end fail. Must be followed later by :py:meth:`bounded_block_end`.
        """
        self.io.bounded_block_begin(length)

    def bounded_block_end(self, target):
        """
        End the current bounded block, reading any unused bits into the
        specified target (as a :py:class:`bitarray.bitarray`).
        """
        value = self.bitarray(target, self.io.bits_remaining())
        self.io.bounded_block_end()
        return value

    def declare_list(self, target):
        """
        Declares that the specified target should be treated as a
        :py:class:`list`. Whenever this target is used in the future, values
        will be appended to the list.

        This method has no impact on the bitstream.
        """
        if target in self._cur_context_indices:
            # Target has already been used or declared
            raise ReusedTargetError(self.describe_path(target))

        self.cur_context[target] = []
        self._cur_context_indices[target] = 0

    def set_context_type(self, context_type):
        """
        Set (or change) the type of the current context dictionary.

        This method has no impact on the bitstream.

        Parameters
        ==========
        context_type : :py:class:`dict`-like type
            The desired type. If the context is already of the required type,
            no change will be made. If the context is currently of a different
            type, it will be passed to the ``context_type`` constructor and the
            new type used in its place.
        """
        # Only replace the type if necessary to avoid unnecessary copying.
        if type(self.cur_context) is not context_type:
            self.cur_context = context_type(self.cur_context)

            # Replace the reference to this context in its parent context
            if self._context_stack:
                parent_context = self._context_stack[-1]
                parent_target = self._target_stack[-1]
                parent_target_index = self._context_indices_stack[-1][parent_target]

                if parent_target_index is True:
                    parent_context[parent_target] = self.cur_context
                else:
                    # NB: The parent_target_index value is the *next* index in
                    # the list, hence being decremented by one here.
                    parent_context[parent_target][
                        parent_target_index - 1
                    ] = self.cur_context

    def subcontext_enter(self, target):
        """
        Creates a context dictionary within the specified target of the
        current context dictionary and makes it current. Must be followed later
        by a matching :py:meth:`subcontext_leave`.
        """
        new_context = {}
        name = self._set_context_value(target, new_context)
        if self.log is not None:
            self.log.enter(name, self.io.tell())

        # Push the old context onto the stack
        self._context_stack.append(self.cur_context)
        self._context_indices_stack.append(self._cur_context_indices)
        self._target_stack.append(target)

        self.cur_context = new_context
        self._cur_context_indices = {}

    def subcontext_leave(self):
        """
        Leaves the current nested context dictionary entered by
        :py:meth:`subcontext_enter`.
        """
        if self.log is not None:
            self.log.leave(self.io.tell())

        self.cur_context = self._context_stack.pop()
        self._cur_context_indices = self._context_indices_stack.pop()
        self._target_stack.pop()

    @contextmanager
    def subcontext(self, target):
        """
        A Python context manager alternative to :py:meth:`subcontext_enter` and
        :py:meth:`subcontext_leave`.

        Example usage::

            >>> with serdes.subcontext("vui_parameters"):
            ...     vui_parameters(serdes, sps)

        If an exception is raised within the block, the subcontext is left
        open so that the partially read structure and log remain inspectable.
        """
        self.subcontext_enter(target)
        yield
        self.subcontext_leave()

    def computed_value(self, target, value):
        """
        Places a value into the named target in the current context, without
        reading anything from the bitstream. Any existing value in the context
        will be overwritten.

        This operation should be used sparingly to embed additional information
        in a context dictionary which is required to sensibly interpret its
        contents and which cannot be trivially computed from the context
        dictionary alone (e.g. values derived from a referenced parameter
        set).
        """
        self.cur_context[target] = value
        self._cur_context_indices[target] = True

    def verify_complete(self):
        """
        Verify that no nested contexts have been left open.

        Raises
        ======
        :py:exc:`~.UnclosedNestedContextError`
        """
        if self._context_stack:
            raise UnclosedNestedContextError(self.describe_path())

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        # Don't bother checking validity if an exception was thrown anyway
        if exc_type is None:
            self.verify_complete()

    @property
    def context(self):
        """Get the top-level context dictionary."""
        if self._context_stack:
            return self._context_stack[0]
        else:
            return self.cur_context

    def path(self, target=None):
        """
        Produce a 'path' describing the part of the bitstream the parser is
        currently processing.

        If 'target' is None, only includes the path of the current nested context
        dictionary. If 'target' is a target name in the current target
        dictionary, the path to the last-used target will be included.

        A path might look like::

            ['vui_parameters', 'hrd_parameters', 'sub_layer_hrd_parameters', 0]
        """
        full_context_indices_stack = list(self._context_indices_stack)
        full_target_stack = list(self._target_stack)
        if target is not None:
            full_context_indices_stack += [self._cur_context_indices]
            full_target_stack += [target]

        out = []

        for context_indices, target in zip(
            full_context_indices_stack, full_target_stack
        ):
            out.append(target)

            index = context_indices.get(target, True)
            if index is not True and index != 0:
                # NB: context_indices includes the index of the first unused
                # index, hence being decremented by one here.
                out.append(index - 1)

        return out

    def describe_path(self, target=None):
        """
        Produce a human-readable description of the part of the bitstream the
        parser is currently processing, for example::

            SeqParameterSet['vui_parameters']['hrd_parameters']

        """
        root_type = self.context.__class__.__name__

        return "{}{}".format(
            root_type, "".join("[{!r}]".format(p) for p in self.path(target))
        )


def context_type(dict_type):
    """
    Syntactic sugar. A decorator for syntax functions which uses
    :py:meth:`Deserialiser.set_context_type` to set the type of the current
    context dict:

    Example usage::

        @context_type(HrdParameters)
        def hrd_parameters(serdes, common_inf_present_flag, max_num_sub_layers_minus1):
            # ...

    Exactly equivalent to::

        def hrd_parameters(serdes, common_inf_present_flag, max_num_sub_layers_minus1):
            serdes.set_context_type(HrdParameters)
            # ...

    The wrapped function must take a :py:class:`Deserialiser` as its first
    argument.

    For introspection purposes, the wrapper function will be given a
    'context_type' attribute holding the passed 'dict_type'.
    """

    def wrap(f):
        @wraps(f)
        def wrapper(serdes, *args, **kwargs):
            serdes.set_context_type(dict_type)
            return f(serdes, *args, **kwargs)

        wrapper.context_type = dict_type
        return wrapper

    return wrap
