"""
MPEG-2 video (ITU-T H.262) start code unit syntax. Each function parses the
syntax following one kind of start code; clause numbers refer to the 2013
edition.

Payload routines follow the signature described in
:py:mod:`nal_syntax.dispatch`. The parser places the start code value in the
``start_code`` entry of the top level
:py:class:`~nal_syntax.mpeg2.fixeddicts.StartCodeUnit`, where
:py:func:`slice_header` finds its vertical position.
"""

from nal_syntax.registry import ParameterSetKey

from nal_syntax.dispatch import (
    SUCCESS,
    needs_reparse,
    require_parameter_set,
    unit_handler,
    unparsed_payload,
)

from nal_syntax.bitstream.serdes import context_type

from nal_syntax.tables import (
    Codecs,
    ParameterSetKinds,
    StartCodes,
    ExtensionStartCodeIdentifiers,
    PictureCodingTypes,
    MPEG2_MAX_VERTICAL_SIZE_WITHOUT_EXTENSION,
    DEFAULT_INTRA_QUANTISER_MATRIX,
    DEFAULT_NON_INTRA_QUANTISER_MATRIX,
    ZIGZAG_SCAN,
)

from nal_syntax.mpeg2.fixeddicts import (
    SequenceHeader,
    SequenceExtension,
    SequenceDisplayExtension,
    QuantMatrixExtension,
    PictureCodingExtension,
    GroupOfPicturesHeader,
    PictureHeader,
    Slice,
    UserData,
    SequenceEnd,
)

__all__ = [
    "zigzag_to_raster",
    "quantiser_matrix",
    "sequence_header",
    "extension",
    "sequence_extension",
    "sequence_display_extension",
    "quant_matrix_extension",
    "picture_coding_extension",
    "group_of_pictures_header",
    "picture_header",
    "slice_header",
    "user_data",
    "sequence_end",
    "SLICE_START_CODES",
]


def zigzag_to_raster(values):
    """
    Reorder 64 quantiser matrix values from transmission (zigzag) order into
    raster order.
    """
    raster = [0] * 64
    for i, value in enumerate(values):
        raster[ZIGZAG_SCAN[i]] = value
    return raster


def quantiser_matrix(serdes, target):
    """
    Read a 64-entry quantiser matrix into the named list target. Returns the
    values in raster order.
    """
    serdes.declare_list(target)
    for i in range(64):
        serdes.nbits(target, 8)
    return zigzag_to_raster(serdes.cur_context[target])


################################################################################
# Sequence header
################################################################################


def sequence_header_parameter_sets(sequence_header):
    return [ParameterSetKey(ParameterSetKinds.mpeg2_sequence_header, 0)]


@unit_handler(
    Codecs.mpeg2,
    [StartCodes.sequence_header_code],
    parameter_sets=sequence_header_parameter_sets,
)
@context_type(SequenceHeader)
def sequence_header(serdes, reparse, registry, associated):
    """(6.2.2.1)"""
    serdes.nbits("horizontal_size_value", 12)
    serdes.nbits("vertical_size_value", 12)
    serdes.nbits("aspect_ratio_information", 4)
    serdes.nbits("frame_rate_code", 4)
    serdes.nbits("bit_rate_value", 18)
    serdes.nbits("marker_bit", 1)
    serdes.nbits("vbv_buffer_size_value", 10)
    serdes.bool("constrained_parameters_flag")

    intra = list(DEFAULT_INTRA_QUANTISER_MATRIX)
    if serdes.bool("load_intra_quantiser_matrix"):
        intra = quantiser_matrix(serdes, "intra_quantiser_matrix")
    non_intra = list(DEFAULT_NON_INTRA_QUANTISER_MATRIX)
    if serdes.bool("load_non_intra_quantiser_matrix"):
        non_intra = quantiser_matrix(serdes, "non_intra_quantiser_matrix")

    serdes.computed_value("_intra_quantiser_matrix", intra)
    serdes.computed_value("_non_intra_quantiser_matrix", non_intra)

    return SUCCESS


################################################################################
# Extensions
################################################################################


@context_type(SequenceExtension)
def sequence_extension(serdes):
    """(6.2.2.3)"""
    serdes.nbits("extension_start_code_identifier", 4)
    profile_and_level_indication = serdes.nbits("profile_and_level_indication", 8)
    serdes.bool("progressive_sequence")
    serdes.nbits("chroma_format", 2)
    serdes.nbits("horizontal_size_extension", 2)
    serdes.nbits("vertical_size_extension", 2)
    serdes.nbits("bit_rate_extension", 12)
    serdes.nbits("marker_bit", 1)
    serdes.nbits("vbv_buffer_size_extension", 8)
    serdes.bool("low_delay")
    serdes.nbits("frame_rate_extension_n", 2)
    serdes.nbits("frame_rate_extension_d", 5)

    # The escape bit (bit 7) is not part of either value
    serdes.computed_value(
        "_profile_identification", (profile_and_level_indication >> 4) & 0x7
    )
    serdes.computed_value("_level_identification", profile_and_level_indication & 0xF)


@context_type(SequenceDisplayExtension)
def sequence_display_extension(serdes):
    """(6.2.2.4)"""
    serdes.nbits("extension_start_code_identifier", 4)
    serdes.nbits("video_format", 3)
    if serdes.bool("colour_description"):
        serdes.nbits("colour_primaries", 8)
        serdes.nbits("transfer_characteristics", 8)
        serdes.nbits("matrix_coefficients", 8)
    serdes.nbits("display_horizontal_size", 14)
    serdes.nbits("marker_bit", 1)
    serdes.nbits("display_vertical_size", 14)


@context_type(QuantMatrixExtension)
def quant_matrix_extension(serdes):
    """(6.2.3.2)"""
    serdes.nbits("extension_start_code_identifier", 4)
    for name in [
        "intra_quantiser_matrix",
        "non_intra_quantiser_matrix",
        "chroma_intra_quantiser_matrix",
        "chroma_non_intra_quantiser_matrix",
    ]:
        if serdes.bool("load_" + name):
            quantiser_matrix(serdes, name)


@context_type(PictureCodingExtension)
def picture_coding_extension(serdes):
    """(6.2.3.1)"""
    serdes.nbits("extension_start_code_identifier", 4)
    serdes.nbits("f_code_forward_horizontal", 4)
    serdes.nbits("f_code_forward_vertical", 4)
    serdes.nbits("f_code_backward_horizontal", 4)
    serdes.nbits("f_code_backward_vertical", 4)
    serdes.nbits("intra_dc_precision", 2)
    serdes.nbits("picture_structure", 2)
    serdes.bool("top_field_first")
    serdes.bool("frame_pred_frame_dct")
    serdes.bool("concealment_motion_vectors")
    serdes.bool("q_scale_type")
    serdes.bool("intra_vlc_format")
    serdes.bool("alternate_scan")
    serdes.bool("repeat_first_field")
    serdes.bool("chroma_420_type")
    serdes.bool("progressive_frame")
    if serdes.bool("composite_display_flag"):
        serdes.bool("v_axis")
        serdes.nbits("field_sequence", 3)
        serdes.bool("sub_carrier")
        serdes.nbits("burst_amplitude", 7)
        serdes.nbits("sub_carrier_phase", 8)


EXTENSIONS = {
    ExtensionStartCodeIdentifiers.sequence_extension: sequence_extension,
    ExtensionStartCodeIdentifiers.sequence_display_extension: sequence_display_extension,
    ExtensionStartCodeIdentifiers.quant_matrix_extension: quant_matrix_extension,
    ExtensionStartCodeIdentifiers.picture_coding_extension: picture_coding_extension,
}
"""
The extensions with a parser ``{ExtensionStartCodeIdentifiers: function}``.
Others are left unparsed.
"""


def extension_parameter_sets(structure):
    if isinstance(structure, SequenceExtension):
        return [ParameterSetKey(ParameterSetKinds.mpeg2_sequence_extension, 0)]
    return []


@unit_handler(
    Codecs.mpeg2,
    [StartCodes.extension_start_code],
    parameter_sets=extension_parameter_sets,
)
def extension(serdes, reparse, registry, associated):
    """
    (6.2.2.2) Dispatches on the four-bit extension_start_code_identifier
    which begins every extension.
    """
    parse = EXTENSIONS.get(serdes.next_bits(4))
    if parse is None:
        return unparsed_payload(serdes, reparse, registry, associated)
    parse(serdes)
    return SUCCESS


################################################################################
# Group of pictures and picture headers
################################################################################


@unit_handler(Codecs.mpeg2, [StartCodes.group_start_code])
@context_type(GroupOfPicturesHeader)
def group_of_pictures_header(serdes, reparse, registry, associated):
    """(6.2.2.6) The time_code is broken out into its fields."""
    serdes.bool("drop_frame_flag")
    serdes.nbits("time_code_hours", 5)
    serdes.nbits("time_code_minutes", 6)
    serdes.nbits("marker_bit", 1)
    serdes.nbits("time_code_seconds", 6)
    serdes.nbits("time_code_pictures", 6)
    serdes.bool("closed_gop")
    serdes.bool("broken_link")
    return SUCCESS


@unit_handler(Codecs.mpeg2, [StartCodes.picture_start_code])
@context_type(PictureHeader)
def picture_header(serdes, reparse, registry, associated):
    """(6.2.3)"""
    serdes.nbits("temporal_reference", 10)
    picture_coding_type = serdes.nbits("picture_coding_type", 3)
    serdes.nbits("vbv_delay", 16)
    if picture_coding_type in (
        PictureCodingTypes.predictive_coded,
        PictureCodingTypes.bidirectionally_predictive_coded,
    ):
        serdes.bool("full_pel_forward_vector")
        serdes.nbits("forward_f_code", 3)
    if picture_coding_type == PictureCodingTypes.bidirectionally_predictive_coded:
        serdes.bool("full_pel_backward_vector")
        serdes.nbits("backward_f_code", 3)

    serdes.declare_list("extra_bit_picture")
    serdes.declare_list("extra_information_picture")
    while serdes.next_bits(1) == 1:
        serdes.nbits("extra_bit_picture", 1)
        serdes.nbits("extra_information_picture", 8)
    serdes.nbits("extra_bit_picture", 1)

    return SUCCESS


################################################################################
# Slice
################################################################################


SLICE_START_CODES = list(
    range(StartCodes.slice_start_code_first, StartCodes.slice_start_code_last + 1)
)


@unit_handler(Codecs.mpeg2, SLICE_START_CODES, check_trailing_bits=False)
@context_type(Slice)
def slice_header(serdes, reparse, registry, associated):
    """
    (6.2.4) The slice header fields. Requires the sequence header (and uses
    the sequence extension, if present) to determine the vertical size. The
    number of bits of macroblock data which follow is recorded in
    ``_unparsed_bits``.
    """
    header, missing = require_parameter_set(
        registry, reparse, ParameterSetKinds.mpeg2_sequence_header, 0
    )
    if missing is not None:
        return needs_reparse(missing)

    vertical_size = header["vertical_size_value"]
    extension_structure = registry.lookup(
        ParameterSetKinds.mpeg2_sequence_extension, 0
    )
    if extension_structure is not None:
        vertical_size |= extension_structure["vertical_size_extension"] << 12

    slice_vertical_position = serdes.context["start_code"]
    if vertical_size > MPEG2_MAX_VERTICAL_SIZE_WITHOUT_EXTENSION:
        position_extension = serdes.nbits("slice_vertical_position_extension", 3)
        slice_vertical_position += position_extension << 7
    serdes.computed_value("_slice_vertical_position", slice_vertical_position)

    serdes.nbits("quantiser_scale_code", 5)

    serdes.declare_list("extra_bit_slice")
    serdes.declare_list("extra_information_slice")
    if serdes.next_bits(1) == 1:
        serdes.bool("intra_slice_flag")
        serdes.bool("intra_slice")
        serdes.nbits("reserved_bits", 7)
        while serdes.next_bits(1) == 1:
            serdes.nbits("extra_bit_slice", 1)
            serdes.nbits("extra_information_slice", 8)
    serdes.nbits("extra_bit_slice", 1)

    serdes.computed_value("_unparsed_bits", serdes.bits_remaining())

    return SUCCESS


################################################################################
# User data and sequence end
################################################################################


@unit_handler(Codecs.mpeg2, [StartCodes.user_data_start_code], check_trailing_bits=False)
@context_type(UserData)
def user_data(serdes, reparse, registry, associated):
    """(6.2.2.2.2) All bytes up to the next start code."""
    serdes.bytes("user_data", serdes.bits_remaining() // 8)
    return SUCCESS


@unit_handler(Codecs.mpeg2, [StartCodes.sequence_end_code], check_trailing_bits=False)
@context_type(SequenceEnd)
def sequence_end(serdes, reparse, registry, associated):
    """(6.2.1) Empty."""
    return SUCCESS
