"""
:py:mod:`nal_syntax.settings`: Parser session configuration
===========================================================

A :py:class:`~nal_syntax.parser.ParserSession` is configured with a
:py:data:`ParserSettings` dictionary. Use :py:func:`make_settings` to obtain a
validated instance with defaults filled in::

    >>> from nal_syntax.settings import make_settings
    >>> from nal_syntax.tables import Codecs
    >>> settings = make_settings(codec=Codecs.mpeg2, enable_diagnostic_log=False)

.. autofunction:: make_settings

.. autodata:: DEFAULT_SETTINGS
    :annotation:
"""

from nal_syntax.fixeddict import fixeddict, Entry

from nal_syntax.tables import Codecs, MAX_EXP_GOLOMB_PREFIX_BITS

__all__ = [
    "ParserSettings",
    "DEFAULT_SETTINGS",
    "make_settings",
]


ParserSettings = fixeddict(
    "ParserSettings",
    Entry(
        "codec",
        enum=Codecs,
        help="The codec family of the units to be parsed (:py:class:`Codecs`).",
    ),
    Entry(
        "enable_diagnostic_log",
        help="If True, a bit-level log of every field read is recorded.",
    ),
    Entry(
        "max_exp_golomb_prefix_bits",
        help="""
            Exp-Golomb codes with more leading zeros than this are reported
            as malformed.
        """,
    ),
    Entry(
        "length_prefix_bytes",
        help="""
            Number of bytes in the big-endian length prefix before each unit
            (0, 1, 2 or 4). Zero means units are already delimited.
        """,
    ),
    Entry(
        "retry_pending_automatically",
        help="""
            If True, units awaiting a parameter set are retried as soon as
            every parameter set they reference has been parsed.
        """,
    ),
    Entry(
        "check_trailing_bits",
        help="If True, unexpected trailing bits produce warnings.",
    ),
    help="""
        Configuration of a :py:class:`~nal_syntax.parser.ParserSession`.
    """,
)

DEFAULT_SETTINGS = ParserSettings(
    codec=Codecs.hevc,
    enable_diagnostic_log=True,
    max_exp_golomb_prefix_bits=MAX_EXP_GOLOMB_PREFIX_BITS,
    length_prefix_bytes=0,
    retry_pending_automatically=True,
    check_trailing_bits=True,
)
"""The settings used for any value not given to :py:func:`make_settings`."""


def make_settings(**overrides):
    """
    Return a new :py:data:`ParserSettings` with the defaults in
    :py:data:`DEFAULT_SETTINGS` replaced by any keyword arguments given.

    Raises :py:exc:`~nal_syntax.fixeddict.FixedDictKeyError` for unknown
    setting names and :py:exc:`ValueError` for invalid values.
    """
    settings = DEFAULT_SETTINGS.copy()
    settings.update(overrides)

    try:
        settings["codec"] = Codecs(settings["codec"])
    except ValueError:
        raise ValueError("Unknown codec: {!r}".format(settings["codec"]))

    if settings["length_prefix_bytes"] not in (0, 1, 2, 4):
        raise ValueError(
            "length_prefix_bytes must be 0, 1, 2 or 4 (not {!r})".format(
                settings["length_prefix_bytes"]
            )
        )

    if settings["max_exp_golomb_prefix_bits"] < 1:
        raise ValueError(
            "max_exp_golomb_prefix_bits must be positive (not {!r})".format(
                settings["max_exp_golomb_prefix_bits"]
            )
        )

    for name in (
        "enable_diagnostic_log",
        "retry_pending_automatically",
        "check_trailing_bits",
    ):
        settings[name] = bool(settings[name])

    return settings
