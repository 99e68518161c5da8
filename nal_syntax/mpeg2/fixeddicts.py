"""
:py:mod:`~nal_syntax.fixeddict` definitions for holding MPEG-2 video (ITU-T
H.262) syntax structures. Entry names follow the syntax element names in the
standard.
"""

from nal_syntax.fixeddict import fixeddict, Entry

from nal_syntax.string_formatters import Hex, Bits, Bytes, List

from nal_syntax.tables import (
    StartCodes,
    ExtensionStartCodeIdentifiers,
    PictureCodingTypes,
)

__all__ = [
    "StartCodeUnit",
    "SequenceHeader",
    "SequenceExtension",
    "SequenceDisplayExtension",
    "QuantMatrixExtension",
    "PictureCodingExtension",
    "GroupOfPicturesHeader",
    "PictureHeader",
    "Slice",
    "UserData",
    "SequenceEnd",
]


StartCodeUnit = fixeddict(
    "StartCodeUnit",
    Entry("start_code", formatter=Hex(2), enum=StartCodes),
    Entry("payload"),
    Entry("stuffing", formatter=Bits()),
    help="""
        A unit beginning with a start code: the start code value (the byte
        following the 0x000001 prefix), the parsed payload and any zero
        stuffing before the next start code.
    """,
)

_matrix = List()

SequenceHeader = fixeddict(
    "SequenceHeader",
    Entry("horizontal_size_value"),
    Entry("vertical_size_value"),
    Entry("aspect_ratio_information"),
    Entry("frame_rate_code"),
    Entry("bit_rate_value"),
    Entry("marker_bit"),
    Entry("vbv_buffer_size_value"),
    Entry("constrained_parameters_flag"),
    Entry("load_intra_quantiser_matrix"),
    Entry("intra_quantiser_matrix", formatter=_matrix),
    Entry("load_non_intra_quantiser_matrix"),
    Entry("non_intra_quantiser_matrix", formatter=_matrix),
    Entry(
        "_intra_quantiser_matrix",
        formatter=_matrix,
        help="Computed value. The intra matrix in raster order (or the default).",
    ),
    Entry(
        "_non_intra_quantiser_matrix",
        formatter=_matrix,
        help="Computed value. The non-intra matrix in raster order (or the default).",
    ),
    help="(6.2.2.1) sequence_header()",
)

SequenceExtension = fixeddict(
    "SequenceExtension",
    Entry("extension_start_code_identifier", enum=ExtensionStartCodeIdentifiers),
    Entry("profile_and_level_indication", formatter=Hex(2)),
    Entry("progressive_sequence"),
    Entry("chroma_format"),
    Entry("horizontal_size_extension"),
    Entry("vertical_size_extension"),
    Entry("bit_rate_extension"),
    Entry("marker_bit"),
    Entry("vbv_buffer_size_extension"),
    Entry("low_delay"),
    Entry("frame_rate_extension_n"),
    Entry("frame_rate_extension_d"),
    Entry(
        "_profile_identification",
        help="Computed value. Bits 6..4 of profile_and_level_indication.",
    ),
    Entry(
        "_level_identification",
        help="Computed value. Bits 3..0 of profile_and_level_indication.",
    ),
    help="(6.2.2.3) sequence_extension()",
)

SequenceDisplayExtension = fixeddict(
    "SequenceDisplayExtension",
    Entry("extension_start_code_identifier", enum=ExtensionStartCodeIdentifiers),
    Entry("video_format"),
    Entry("colour_description"),
    Entry("colour_primaries"),
    Entry("transfer_characteristics"),
    Entry("matrix_coefficients"),
    Entry("display_horizontal_size"),
    Entry("marker_bit"),
    Entry("display_vertical_size"),
    help="(6.2.2.4) sequence_display_extension()",
)

QuantMatrixExtension = fixeddict(
    "QuantMatrixExtension",
    Entry("extension_start_code_identifier", enum=ExtensionStartCodeIdentifiers),
    Entry("load_intra_quantiser_matrix"),
    Entry("intra_quantiser_matrix", formatter=_matrix),
    Entry("load_non_intra_quantiser_matrix"),
    Entry("non_intra_quantiser_matrix", formatter=_matrix),
    Entry("load_chroma_intra_quantiser_matrix"),
    Entry("chroma_intra_quantiser_matrix", formatter=_matrix),
    Entry("load_chroma_non_intra_quantiser_matrix"),
    Entry("chroma_non_intra_quantiser_matrix", formatter=_matrix),
    help="(6.2.3.2) quant_matrix_extension()",
)

PictureCodingExtension = fixeddict(
    "PictureCodingExtension",
    Entry("extension_start_code_identifier", enum=ExtensionStartCodeIdentifiers),
    Entry("f_code_forward_horizontal"),
    Entry("f_code_forward_vertical"),
    Entry("f_code_backward_horizontal"),
    Entry("f_code_backward_vertical"),
    Entry("intra_dc_precision"),
    Entry("picture_structure"),
    Entry("top_field_first"),
    Entry("frame_pred_frame_dct"),
    Entry("concealment_motion_vectors"),
    Entry("q_scale_type"),
    Entry("intra_vlc_format"),
    Entry("alternate_scan"),
    Entry("repeat_first_field"),
    Entry("chroma_420_type"),
    Entry("progressive_frame"),
    Entry("composite_display_flag"),
    Entry("v_axis"),
    Entry("field_sequence"),
    Entry("sub_carrier"),
    Entry("burst_amplitude"),
    Entry("sub_carrier_phase"),
    help="(6.2.3.1) picture_coding_extension()",
)

GroupOfPicturesHeader = fixeddict(
    "GroupOfPicturesHeader",
    Entry("drop_frame_flag"),
    Entry("time_code_hours"),
    Entry("time_code_minutes"),
    Entry("marker_bit"),
    Entry("time_code_seconds"),
    Entry("time_code_pictures"),
    Entry("closed_gop"),
    Entry("broken_link"),
    help="(6.2.2.6) group_of_pictures_header()",
)

PictureHeader = fixeddict(
    "PictureHeader",
    Entry("temporal_reference"),
    Entry("picture_coding_type", enum=PictureCodingTypes),
    Entry("vbv_delay", formatter=Hex(4)),
    Entry("full_pel_forward_vector"),
    Entry("forward_f_code"),
    Entry("full_pel_backward_vector"),
    Entry("backward_f_code"),
    Entry("extra_bit_picture", formatter=List()),
    Entry("extra_information_picture", formatter=List(formatter=Hex(2))),
    help="(6.2.3) picture_header()",
)

Slice = fixeddict(
    "Slice",
    Entry("slice_vertical_position_extension"),
    Entry("quantiser_scale_code"),
    Entry("intra_slice_flag"),
    Entry("intra_slice"),
    Entry("reserved_bits"),
    Entry("extra_bit_slice", formatter=List()),
    Entry("extra_information_slice", formatter=List(formatter=Hex(2))),
    Entry(
        "_slice_vertical_position",
        help="Computed value. The macroblock row of the slice's first macroblock.",
    ),
    Entry(
        "_unparsed_bits",
        help="Computed value. Bits of macroblock data following the slice header.",
    ),
    help="(6.2.4) slice() header fields",
)

UserData = fixeddict(
    "UserData",
    Entry("user_data", formatter=Bytes()),
    help="(6.2.2.2.2) user_data()",
)

SequenceEnd = fixeddict(
    "SequenceEnd",
    help="(6.2.1) The sequence_end_code has no payload.",
)
