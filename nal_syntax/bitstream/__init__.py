"""
The :py:mod:`nal_syntax.bitstream` package implements the low-level machinery
used to read NAL unit syntax: a bit-level reader (and a writer used to build
test streams), emulation prevention byte removal, the
:py:class:`~nal_syntax.bitstream.serdes.Deserialiser` which the per-codec
syntax functions drive and the diagnostic log it records into.
"""

from nal_syntax.bitstream.exceptions import *
from nal_syntax.bitstream.io import *
from nal_syntax.bitstream.exp_golomb import *
from nal_syntax.bitstream.rbsp import *
from nal_syntax.bitstream.log import *
from nal_syntax.bitstream.serdes import *
