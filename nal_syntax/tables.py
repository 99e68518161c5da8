"""
:py:mod:`nal_syntax.tables`: Constants and enumerated values
============================================================

Numeric codes used by the supported coding standards. Member names follow
the names used in the standards' tables where those exist; other names are
not normative.
"""

from enum import IntEnum

__all__ = [
    "Codecs",
    "ParameterSetKinds",
    "ErrorKinds",
    "NalUnitTypes",
    "SEIPayloadTypes",
    "SliceTypes",
    "StartCodes",
    "ExtensionStartCodeIdentifiers",
    "PictureCodingTypes",
    "MAX_EXP_GOLOMB_PREFIX_BITS",
    "HEVC_NAL_UNIT_HEADER_BYTES",
    "HEVC_MAX_VPS_ID",
    "HEVC_MAX_SPS_ID",
    "HEVC_MAX_PPS_ID",
    "HEVC_MAX_SHORT_TERM_REF_PIC_SETS",
    "HEVC_MAX_DPB_SIZE",
    "HEVC_MAX_LONG_TERM_REF_PICS_SPS",
    "HEVC_MAX_CPB_CNT",
    "HEVC_MAX_LAYER_SETS",
    "HEVC_MAX_HRD_PARAMETERS",
    "MPEG2_MAX_VERTICAL_SIZE_WITHOUT_EXTENSION",
    "DEFAULT_INTRA_QUANTISER_MATRIX",
    "DEFAULT_NON_INTRA_QUANTISER_MATRIX",
    "ZIGZAG_SCAN",
]


class Codecs(IntEnum):
    """The coding standard families understood by the parser."""

    hevc = 1
    mpeg2 = 2


class ParameterSetKinds(IntEnum):
    """The kinds of structure held by a parameter set registry."""

    video_parameter_set = 1
    sequence_parameter_set = 2
    picture_parameter_set = 3
    mpeg2_sequence_header = 4
    mpeg2_sequence_extension = 5


class ErrorKinds(IntEnum):
    """The kinds of parse failure reported for a unit."""

    insufficient_data = 1
    malformed_code = 2
    unresolved_reference = 3


MAX_EXP_GOLOMB_PREFIX_BITS = 32
"""
Default upper bound on the number of leading zeros in an exp-Golomb code.
Longer prefixes are treated as corrupt data rather than read to exhaustion.
"""


################################################################################
# HEVC (ITU-T H.265)
################################################################################

HEVC_NAL_UNIT_HEADER_BYTES = 2

HEVC_MAX_VPS_ID = 15
HEVC_MAX_SPS_ID = 15
HEVC_MAX_PPS_ID = 63
HEVC_MAX_SHORT_TERM_REF_PIC_SETS = 64
HEVC_MAX_DPB_SIZE = 16
HEVC_MAX_LONG_TERM_REF_PICS_SPS = 32
HEVC_MAX_CPB_CNT = 32
HEVC_MAX_LAYER_SETS = 1024
HEVC_MAX_HRD_PARAMETERS = 1024


class NalUnitTypes(IntEnum):
    """(Table 7-1) HEVC NAL unit type codes."""

    TRAIL_N = 0
    TRAIL_R = 1
    TSA_N = 2
    TSA_R = 3
    STSA_N = 4
    STSA_R = 5
    RADL_N = 6
    RADL_R = 7
    RASL_N = 8
    RASL_R = 9
    BLA_W_LP = 16
    BLA_W_RADL = 17
    BLA_N_LP = 18
    IDR_W_RADL = 19
    IDR_N_LP = 20
    CRA_NUT = 21
    RSV_IRAP_VCL22 = 22
    RSV_IRAP_VCL23 = 23
    VPS_NUT = 32
    SPS_NUT = 33
    PPS_NUT = 34
    AUD_NUT = 35
    EOS_NUT = 36
    EOB_NUT = 37
    FD_NUT = 38
    PREFIX_SEI_NUT = 39
    SUFFIX_SEI_NUT = 40


class SEIPayloadTypes(IntEnum):
    """(Annex D) SEI payload type codes with a dedicated parser."""

    buffering_period = 0
    pic_timing = 1
    user_data_registered_itu_t_t35 = 4
    user_data_unregistered = 5
    recovery_point = 6
    active_parameter_sets = 129
    decoded_picture_hash = 132
    mastering_display_colour_volume = 137
    content_light_level_info = 144
    alternative_transfer_characteristics = 147


class SliceTypes(IntEnum):
    """(Table 7-7) HEVC slice_type values."""

    B = 0
    P = 1
    I = 2  # noqa: E741


################################################################################
# MPEG-2 video (ITU-T H.262)
################################################################################

MPEG2_MAX_VERTICAL_SIZE_WITHOUT_EXTENSION = 2800


class StartCodes(IntEnum):
    """(Table 6-1) MPEG-2 video start code values (the byte after 0x000001)."""

    picture_start_code = 0x00
    slice_start_code_first = 0x01
    slice_start_code_last = 0xAF
    user_data_start_code = 0xB2
    sequence_header_code = 0xB3
    sequence_error_code = 0xB4
    extension_start_code = 0xB5
    sequence_end_code = 0xB7
    group_start_code = 0xB8


class ExtensionStartCodeIdentifiers(IntEnum):
    """(Table 6-2) MPEG-2 extension_start_code_identifier values."""

    sequence_extension = 1
    sequence_display_extension = 2
    quant_matrix_extension = 3
    copyright_extension = 4
    sequence_scalable_extension = 5
    picture_display_extension = 7
    picture_coding_extension = 8
    picture_spatial_scalable_extension = 9
    picture_temporal_scalable_extension = 10


class PictureCodingTypes(IntEnum):
    """(Table 6-12) MPEG-2 picture_coding_type values."""

    intra_coded = 1
    predictive_coded = 2
    bidirectionally_predictive_coded = 3
    dc_intra_coded = 4


DEFAULT_INTRA_QUANTISER_MATRIX = (
    8, 16, 19, 22, 26, 27, 29, 34,
    16, 16, 22, 24, 27, 29, 34, 37,
    19, 22, 26, 27, 29, 34, 34, 38,
    22, 22, 26, 27, 29, 34, 37, 40,
    22, 26, 27, 29, 32, 35, 40, 48,
    26, 27, 29, 32, 35, 40, 48, 58,
    26, 27, 29, 34, 38, 46, 56, 69,
    27, 29, 35, 38, 46, 56, 69, 83,
)  # fmt: skip
"""(6.3.11) Default intra quantiser matrix, in raster order."""

DEFAULT_NON_INTRA_QUANTISER_MATRIX = (16,) * 64
"""(6.3.11) Default non-intra quantiser matrix (flat)."""

ZIGZAG_SCAN = (
    0, 1, 8, 16, 9, 2, 3, 10,
    17, 24, 32, 25, 18, 11, 4, 5,
    12, 19, 26, 33, 40, 48, 41, 34,
    27, 20, 13, 6, 7, 14, 21, 28,
    35, 42, 49, 56, 57, 50, 43, 36,
    29, 22, 15, 23, 30, 37, 44, 51,
    58, 59, 52, 45, 38, 31, 39, 46,
    53, 60, 61, 54, 47, 55, 62, 63,
)  # fmt: skip
"""
(Figure 7-2) The raster-order index of each coefficient in zigzag scan order.
Quantiser matrices are transmitted in this order.
"""
