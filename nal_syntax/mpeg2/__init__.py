"""
:py:mod:`nal_syntax.mpeg2`: MPEG-2 video (ITU-T H.262) syntax
=============================================================

The MPEG-2 start code unit payload routines. Importing this module registers
them with :py:mod:`nal_syntax.dispatch`.

:py:mod:`nal_syntax.mpeg2.syntax`
    Sequence headers and extensions, group of pictures and picture headers,
    slice headers, user data and sequence end codes.

:py:mod:`nal_syntax.mpeg2.fixeddicts`
    The :py:mod:`~nal_syntax.fixeddict` types the above produce.
"""

from nal_syntax.mpeg2.fixeddicts import *  # noqa: F401, F403
from nal_syntax.mpeg2.syntax import *  # noqa: F401, F403
