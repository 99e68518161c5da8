"""
:py:mod:`nal_syntax.hevc`: HEVC (ITU-T H.265) syntax
====================================================

The HEVC NAL unit payload routines. Importing this module registers them with
:py:mod:`nal_syntax.dispatch`.

:py:mod:`nal_syntax.hevc.syntax`
    Parameter sets, access unit delimiters, end of sequence/bitstream, filler
    data and slice segment headers.

:py:mod:`nal_syntax.hevc.sei`
    SEI messages and their payloads.

:py:mod:`nal_syntax.hevc.fixeddicts`
    The :py:mod:`~nal_syntax.fixeddict` types the above produce.
"""

from nal_syntax.hevc.fixeddicts import *  # noqa: F401, F403
from nal_syntax.hevc.syntax import *  # noqa: F401, F403
from nal_syntax.hevc.sei import *  # noqa: F401, F403
