"""
:py:mod:`~nal_syntax.fixeddict` definitions for holding HEVC (ITU-T H.265)
syntax structures. Entry names follow the syntax element names in the
standard. Entries beginning with an underscore are computed values which do
not appear in the bitstream.
"""

from nal_syntax.fixeddict import fixeddict, Entry

from nal_syntax.string_formatters import (
    Hex,
    Bits,
    Bytes,
    List,
    MultilineList,
)

from nal_syntax.tables import (
    NalUnitTypes,
    SEIPayloadTypes,
    SliceTypes,
)

__all__ = [
    "NalUnit",
    "NalUnitHeader",
    "ProfileTierLevel",
    "SubLayerProfileTierLevel",
    "SubLayerOrderingInfo",
    "HrdParameters",
    "HrdSubLayer",
    "SubLayerHrdParameters",
    "VideoParameterSet",
    "ScalingListData",
    "ScalingList",
    "ShortTermRefPicSet",
    "VuiParameters",
    "SpsRangeExtension",
    "SeqParameterSet",
    "PpsRangeExtension",
    "PicParameterSet",
    "AccessUnitDelimiter",
    "EndOfSequence",
    "EndOfBitstream",
    "FillerData",
    "SliceSegmentHeader",
    "SeiRbsp",
    "SeiMessage",
    "BufferingPeriod",
    "PicTiming",
    "UserDataRegisteredItuTT35",
    "UserDataUnregistered",
    "RecoveryPoint",
    "ActiveParameterSets",
    "DecodedPictureHash",
    "MasteringDisplayColourVolume",
    "ContentLightLevelInfo",
    "AlternativeTransferCharacteristics",
]


multiline = MultilineList(heading="")


NalUnit = fixeddict(
    "NalUnit",
    Entry("nal_unit_header"),
    Entry("payload"),
    Entry("rbsp_trailing_bits", formatter=Bits()),
    Entry(
        "_emulation_prevention_bytes",
        help="Computed value. Offsets of the removed 0x03 bytes in the unit.",
    ),
    help="""
        (7.3.1.1) A complete NAL unit: its header, the parsed RBSP payload and
        any trailing bits.
    """,
)

NalUnitHeader = fixeddict(
    "NalUnitHeader",
    Entry("forbidden_zero_bit"),
    Entry("nal_unit_type", enum=NalUnitTypes),
    Entry("nuh_layer_id"),
    Entry("nuh_temporal_id_plus1"),
    help="(7.3.1.2) nal_unit_header()",
)

################################################################################
# Parameter set components
################################################################################

_general_profile_entries = [
    "profile_space",
    "tier_flag",
    "profile_idc",
    "profile_compatibility_flag",
    "progressive_source_flag",
    "interlaced_source_flag",
    "non_packed_constraint_flag",
    "frame_only_constraint_flag",
    "max_12bit_constraint_flag",
    "max_10bit_constraint_flag",
    "max_8bit_constraint_flag",
    "max_422chroma_constraint_flag",
    "max_420chroma_constraint_flag",
    "max_monochrome_constraint_flag",
    "intra_constraint_flag",
    "one_picture_only_constraint_flag",
    "lower_bit_rate_constraint_flag",
    "max_14bit_constraint_flag",
    "reserved_zero_7bits",
    "reserved_zero_33bits",
    "reserved_zero_34bits",
    "reserved_zero_35bits",
    "reserved_zero_43bits",
    "inbld_flag",
    "reserved_zero_bit",
]


def _profile_entry(prefix, name):
    if name == "profile_compatibility_flag" or name.endswith("bits"):
        return Entry(prefix + name, formatter=Bits())
    return Entry(prefix + name)


SubLayerProfileTierLevel = fixeddict(
    "SubLayerProfileTierLevel",
    *(
        [_profile_entry("sub_layer_", name) for name in _general_profile_entries]
        + [Entry("sub_layer_level_idc")]
    ),
    help="""
        (7.3.3) The sub-layer part of profile_tier_level() for one sub-layer.
    """
)

ProfileTierLevel = fixeddict(
    "ProfileTierLevel",
    *(
        [_profile_entry("general_", name) for name in _general_profile_entries]
        + [
            Entry("general_level_idc"),
            Entry("sub_layer_profile_present_flag", formatter=List()),
            Entry("sub_layer_level_present_flag", formatter=List()),
            Entry("reserved_zero_2bits", formatter=List()),
            Entry("sub_layers", formatter=multiline),
        ]
    ),
    help="(7.3.3) profile_tier_level()"
)

SubLayerOrderingInfo = fixeddict(
    "SubLayerOrderingInfo",
    Entry("max_dec_pic_buffering_minus1"),
    Entry("max_num_reorder_pics"),
    Entry("max_latency_increase_plus1"),
    Entry("_sub_layer", help="Computed value. The sub-layer index (i)."),
    help="""
        The per sub-layer decoded picture buffer parameters of a VPS
        (``vps_max_dec_pic_buffering_minus1[i]`` etc.) or SPS
        (``sps_max_dec_pic_buffering_minus1[i]`` etc.).
    """,
)

SubLayerHrdParameters = fixeddict(
    "SubLayerHrdParameters",
    Entry("bit_rate_value_minus1", formatter=List()),
    Entry("cpb_size_value_minus1", formatter=List()),
    Entry("cpb_size_du_value_minus1", formatter=List()),
    Entry("bit_rate_du_value_minus1", formatter=List()),
    Entry("cbr_flag", formatter=List()),
    help="(E.2.3) sub_layer_hrd_parameters()",
)

HrdSubLayer = fixeddict(
    "HrdSubLayer",
    Entry("fixed_pic_rate_general_flag"),
    Entry("fixed_pic_rate_within_cvs_flag"),
    Entry("elemental_duration_in_tc_minus1"),
    Entry("low_delay_hrd_flag"),
    Entry("cpb_cnt_minus1"),
    Entry("nal_sub_layer_hrd_parameters"),
    Entry("vcl_sub_layer_hrd_parameters"),
    help="""
        (E.2.2) The part of hrd_parameters() repeated for each sub-layer.
    """,
)

HrdParameters = fixeddict(
    "HrdParameters",
    Entry("nal_hrd_parameters_present_flag"),
    Entry("vcl_hrd_parameters_present_flag"),
    Entry("sub_pic_hrd_params_present_flag"),
    Entry("tick_divisor_minus2"),
    Entry("du_cpb_removal_delay_increment_length_minus1"),
    Entry("sub_pic_cpb_params_in_pic_timing_sei_flag"),
    Entry("dpb_output_delay_du_length_minus1"),
    Entry("bit_rate_scale"),
    Entry("cpb_size_scale"),
    Entry("cpb_size_du_scale"),
    Entry("initial_cpb_removal_delay_length_minus1"),
    Entry("au_cpb_removal_delay_length_minus1"),
    Entry("dpb_output_delay_length_minus1"),
    Entry("sub_layers", formatter=multiline),
    Entry(
        "_common_info",
        help="""
            Computed value. A dictionary of the common information fields in
            effect (which are inherited from the preceding hrd_parameters()
            when not present).
        """,
    ),
    help="(E.2.2) hrd_parameters()",
)

VideoParameterSet = fixeddict(
    "VideoParameterSet",
    Entry("vps_video_parameter_set_id"),
    Entry("vps_base_layer_internal_flag"),
    Entry("vps_base_layer_available_flag"),
    Entry("vps_max_layers_minus1"),
    Entry("vps_max_sub_layers_minus1"),
    Entry("vps_temporal_id_nesting_flag"),
    Entry("vps_reserved_0xffff_16bits", formatter=Hex(4)),
    Entry("profile_tier_level"),
    Entry("vps_sub_layer_ordering_info_present_flag"),
    Entry("sub_layer_ordering_info", formatter=multiline),
    Entry("vps_max_layer_id"),
    Entry("vps_num_layer_sets_minus1"),
    Entry(
        "layer_id_included_flag",
        formatter=MultilineList(heading="", formatter=Bits()),
        help="""
            For layer sets 1 onward, a bitarray of the
            ``layer_id_included_flag[i][j]`` values for each layer id j.
        """,
    ),
    Entry("vps_timing_info_present_flag"),
    Entry("vps_num_units_in_tick"),
    Entry("vps_time_scale"),
    Entry("vps_poc_proportional_to_timing_flag"),
    Entry("vps_num_ticks_poc_diff_one_minus1"),
    Entry("vps_num_hrd_parameters"),
    Entry("hrd_layer_set_idx", formatter=List()),
    Entry("cprms_present_flag", formatter=List()),
    Entry("hrd_parameters", formatter=multiline),
    Entry("vps_extension_flag"),
    Entry("vps_extension_data", formatter=Bits()),
    help="(7.3.2.1) video_parameter_set_rbsp()",
)

ScalingList = fixeddict(
    "ScalingList",
    Entry("scaling_list_pred_mode_flag"),
    Entry("scaling_list_pred_matrix_id_delta"),
    Entry("scaling_list_dc_coef_minus8"),
    Entry("scaling_list_delta_coef", formatter=List()),
    Entry("_size_id", help="Computed value. sizeId."),
    Entry("_matrix_id", help="Computed value. matrixId."),
    help="One (sizeId, matrixId) iteration of scaling_list_data().",
)

ScalingListData = fixeddict(
    "ScalingListData",
    Entry("scaling_lists", formatter=multiline),
    help="(7.3.4) scaling_list_data()",
)

ShortTermRefPicSet = fixeddict(
    "ShortTermRefPicSet",
    Entry("inter_ref_pic_set_prediction_flag"),
    Entry("delta_idx_minus1"),
    Entry("delta_rps_sign"),
    Entry("abs_delta_rps_minus1"),
    Entry("used_by_curr_pic_flag", formatter=List()),
    Entry("use_delta_flag", formatter=List()),
    Entry("num_negative_pics"),
    Entry("num_positive_pics"),
    Entry("delta_poc_s0_minus1", formatter=List()),
    Entry("used_by_curr_pic_s0_flag", formatter=List()),
    Entry("delta_poc_s1_minus1", formatter=List()),
    Entry("used_by_curr_pic_s1_flag", formatter=List()),
    Entry("_st_rps_idx", help="Computed value. stRpsIdx."),
    Entry("_delta_poc_s0", help="Computed value. DeltaPocS0[stRpsIdx]."),
    Entry("_used_by_curr_pic_s0", help="Computed value. UsedByCurrPicS0[stRpsIdx]."),
    Entry("_delta_poc_s1", help="Computed value. DeltaPocS1[stRpsIdx]."),
    Entry("_used_by_curr_pic_s1", help="Computed value. UsedByCurrPicS1[stRpsIdx]."),
    help="(7.3.7) st_ref_pic_set()",
)

VuiParameters = fixeddict(
    "VuiParameters",
    Entry("aspect_ratio_info_present_flag"),
    Entry("aspect_ratio_idc"),
    Entry("sar_width"),
    Entry("sar_height"),
    Entry("overscan_info_present_flag"),
    Entry("overscan_appropriate_flag"),
    Entry("video_signal_type_present_flag"),
    Entry("video_format"),
    Entry("video_full_range_flag"),
    Entry("colour_description_present_flag"),
    Entry("colour_primaries"),
    Entry("transfer_characteristics"),
    Entry("matrix_coeffs"),
    Entry("chroma_loc_info_present_flag"),
    Entry("chroma_sample_loc_type_top_field"),
    Entry("chroma_sample_loc_type_bottom_field"),
    Entry("neutral_chroma_indication_flag"),
    Entry("field_seq_flag"),
    Entry("frame_field_info_present_flag"),
    Entry("default_display_window_flag"),
    Entry("def_disp_win_left_offset"),
    Entry("def_disp_win_right_offset"),
    Entry("def_disp_win_top_offset"),
    Entry("def_disp_win_bottom_offset"),
    Entry("vui_timing_info_present_flag"),
    Entry("vui_num_units_in_tick"),
    Entry("vui_time_scale"),
    Entry("vui_poc_proportional_to_timing_flag"),
    Entry("vui_num_ticks_poc_diff_one_minus1"),
    Entry("vui_hrd_parameters_present_flag"),
    Entry("hrd_parameters"),
    Entry("bitstream_restriction_flag"),
    Entry("tiles_fixed_structure_flag"),
    Entry("motion_vectors_over_pic_boundaries_flag"),
    Entry("restricted_ref_pic_lists_flag"),
    Entry("min_spatial_segmentation_idc"),
    Entry("max_bytes_per_pic_denom"),
    Entry("max_bits_per_min_cu_denom"),
    Entry("log2_max_mv_length_horizontal"),
    Entry("log2_max_mv_length_vertical"),
    help="(E.2.1) vui_parameters()",
)

SpsRangeExtension = fixeddict(
    "SpsRangeExtension",
    Entry("transform_skip_rotation_enabled_flag"),
    Entry("transform_skip_context_enabled_flag"),
    Entry("implicit_rdpcm_enabled_flag"),
    Entry("explicit_rdpcm_enabled_flag"),
    Entry("extended_precision_processing_flag"),
    Entry("intra_smoothing_disabled_flag"),
    Entry("high_precision_offsets_enabled_flag"),
    Entry("persistent_rice_adaptation_enabled_flag"),
    Entry("cabac_bypass_alignment_enabled_flag"),
    help="(7.3.2.2.2) sps_range_extension()",
)

SeqParameterSet = fixeddict(
    "SeqParameterSet",
    Entry("sps_video_parameter_set_id"),
    Entry("sps_max_sub_layers_minus1"),
    Entry("sps_temporal_id_nesting_flag"),
    Entry("profile_tier_level"),
    Entry("sps_seq_parameter_set_id"),
    Entry("chroma_format_idc"),
    Entry("separate_colour_plane_flag"),
    Entry("pic_width_in_luma_samples"),
    Entry("pic_height_in_luma_samples"),
    Entry("conformance_window_flag"),
    Entry("conf_win_left_offset"),
    Entry("conf_win_right_offset"),
    Entry("conf_win_top_offset"),
    Entry("conf_win_bottom_offset"),
    Entry("bit_depth_luma_minus8"),
    Entry("bit_depth_chroma_minus8"),
    Entry("log2_max_pic_order_cnt_lsb_minus4"),
    Entry("sps_sub_layer_ordering_info_present_flag"),
    Entry("sub_layer_ordering_info", formatter=multiline),
    Entry("log2_min_luma_coding_block_size_minus3"),
    Entry("log2_diff_max_min_luma_coding_block_size"),
    Entry("log2_min_luma_transform_block_size_minus2"),
    Entry("log2_diff_max_min_luma_transform_block_size"),
    Entry("max_transform_hierarchy_depth_inter"),
    Entry("max_transform_hierarchy_depth_intra"),
    Entry("scaling_list_enabled_flag"),
    Entry("sps_scaling_list_data_present_flag"),
    Entry("scaling_list_data"),
    Entry("amp_enabled_flag"),
    Entry("sample_adaptive_offset_enabled_flag"),
    Entry("pcm_enabled_flag"),
    Entry("pcm_sample_bit_depth_luma_minus1"),
    Entry("pcm_sample_bit_depth_chroma_minus1"),
    Entry("log2_min_pcm_luma_coding_block_size_minus3"),
    Entry("log2_diff_max_min_pcm_luma_coding_block_size"),
    Entry("pcm_loop_filter_disabled_flag"),
    Entry("num_short_term_ref_pic_sets"),
    Entry("st_ref_pic_set", formatter=multiline),
    Entry("long_term_ref_pics_present_flag"),
    Entry("num_long_term_ref_pics_sps"),
    Entry("lt_ref_pic_poc_lsb_sps", formatter=List()),
    Entry("used_by_curr_pic_lt_sps_flag", formatter=List()),
    Entry("sps_temporal_mvp_enabled_flag"),
    Entry("strong_intra_smoothing_enabled_flag"),
    Entry("vui_parameters_present_flag"),
    Entry("vui_parameters"),
    Entry("sps_extension_present_flag"),
    Entry("sps_range_extension_flag"),
    Entry("sps_multilayer_extension_flag"),
    Entry("sps_3d_extension_flag"),
    Entry("sps_scc_extension_flag"),
    Entry("sps_extension_4bits"),
    Entry("sps_range_extension"),
    Entry("sps_extension_data", formatter=Bits()),
    help="(7.3.2.2.1) seq_parameter_set_rbsp()",
)

PpsRangeExtension = fixeddict(
    "PpsRangeExtension",
    Entry("log2_max_transform_skip_block_size_minus2"),
    Entry("cross_component_prediction_enabled_flag"),
    Entry("chroma_qp_offset_list_enabled_flag"),
    Entry("diff_cu_chroma_qp_offset_depth"),
    Entry("chroma_qp_offset_list_len_minus1"),
    Entry("cb_qp_offset_list", formatter=List()),
    Entry("cr_qp_offset_list", formatter=List()),
    Entry("log2_sao_offset_scale_luma"),
    Entry("log2_sao_offset_scale_chroma"),
    help="(7.3.2.3.2) pps_range_extension()",
)

PicParameterSet = fixeddict(
    "PicParameterSet",
    Entry("pps_pic_parameter_set_id"),
    Entry("pps_seq_parameter_set_id"),
    Entry("dependent_slice_segments_enabled_flag"),
    Entry("output_flag_present_flag"),
    Entry("num_extra_slice_header_bits"),
    Entry("sign_data_hiding_enabled_flag"),
    Entry("cabac_init_present_flag"),
    Entry("num_ref_idx_l0_default_active_minus1"),
    Entry("num_ref_idx_l1_default_active_minus1"),
    Entry("init_qp_minus26"),
    Entry("constrained_intra_pred_flag"),
    Entry("transform_skip_enabled_flag"),
    Entry("cu_qp_delta_enabled_flag"),
    Entry("diff_cu_qp_delta_depth"),
    Entry("pps_cb_qp_offset"),
    Entry("pps_cr_qp_offset"),
    Entry("pps_slice_chroma_qp_offsets_present_flag"),
    Entry("weighted_pred_flag"),
    Entry("weighted_bipred_flag"),
    Entry("transquant_bypass_enabled_flag"),
    Entry("tiles_enabled_flag"),
    Entry("entropy_coding_sync_enabled_flag"),
    Entry("num_tile_columns_minus1"),
    Entry("num_tile_rows_minus1"),
    Entry("uniform_spacing_flag"),
    Entry("column_width_minus1", formatter=List()),
    Entry("row_height_minus1", formatter=List()),
    Entry("loop_filter_across_tiles_enabled_flag"),
    Entry("pps_loop_filter_across_slices_enabled_flag"),
    Entry("deblocking_filter_control_present_flag"),
    Entry("deblocking_filter_override_enabled_flag"),
    Entry("pps_deblocking_filter_disabled_flag"),
    Entry("pps_beta_offset_div2"),
    Entry("pps_tc_offset_div2"),
    Entry("pps_scaling_list_data_present_flag"),
    Entry("scaling_list_data"),
    Entry("lists_modification_present_flag"),
    Entry("log2_parallel_merge_level_minus2"),
    Entry("slice_segment_header_extension_present_flag"),
    Entry("pps_extension_present_flag"),
    Entry("pps_range_extension_flag"),
    Entry("pps_multilayer_extension_flag"),
    Entry("pps_3d_extension_flag"),
    Entry("pps_scc_extension_flag"),
    Entry("pps_extension_4bits"),
    Entry("pps_range_extension"),
    Entry("pps_extension_data", formatter=Bits()),
    help="(7.3.2.3.1) pic_parameter_set_rbsp()",
)

################################################################################
# Other non-VCL units
################################################################################

AccessUnitDelimiter = fixeddict(
    "AccessUnitDelimiter",
    Entry("pic_type"),
    help="(7.3.2.5) access_unit_delimiter_rbsp()",
)

EndOfSequence = fixeddict(
    "EndOfSequence",
    help="(7.3.2.6) end_of_seq_rbsp()",
)

EndOfBitstream = fixeddict(
    "EndOfBitstream",
    help="(7.3.2.7) end_of_bitstream_rbsp()",
)

FillerData = fixeddict(
    "FillerData",
    Entry("ff_byte", formatter=Bytes()),
    help="""
        (7.3.2.8) filler_data_rbsp(). The ``ff_byte`` entry holds all of the
        0xFF bytes.
    """,
)

SliceSegmentHeader = fixeddict(
    "SliceSegmentHeader",
    Entry("first_slice_segment_in_pic_flag"),
    Entry("no_output_of_prior_pics_flag"),
    Entry("slice_pic_parameter_set_id"),
    Entry("dependent_slice_segment_flag"),
    Entry("slice_segment_address"),
    Entry("slice_reserved_flag", formatter=List()),
    Entry("slice_type", enum=SliceTypes),
    Entry("pic_output_flag"),
    Entry("colour_plane_id"),
    Entry("slice_pic_order_cnt_lsb"),
    Entry("short_term_ref_pic_set_sps_flag"),
    Entry("st_ref_pic_set"),
    Entry("short_term_ref_pic_set_idx"),
    Entry(
        "_unparsed_bits",
        help="""
            Computed value. The number of bits following the parsed fields
            (the rest of the header and the slice data) which were not parsed.
        """,
    ),
    Entry("_activated_sps_id", help="Computed value. The SPS this slice uses."),
    help="""
        (7.3.6.1) The leading fields of slice_segment_header(), up to the
        short-term reference picture set selection.
    """,
)

################################################################################
# SEI
################################################################################

SeiMessage = fixeddict(
    "SeiMessage",
    Entry("ff_payload_type_byte", formatter=List(Hex(2))),
    Entry("last_payload_type_byte"),
    Entry("ff_payload_size_byte", formatter=List(Hex(2))),
    Entry("last_payload_size_byte"),
    Entry("_payload_type", enum=SEIPayloadTypes, help="Computed value. payloadType."),
    Entry("_payload_size", help="Computed value. payloadSize (bytes)."),
    Entry("payload"),
    Entry(
        "remaining_payload_data",
        formatter=Bits(),
        help="""
            Any bits of the payload following the parsed syntax (e.g.
            ``reserved_payload_extension_data`` and payload alignment bits).
        """,
    ),
    Entry(
        "deferred_payload_data",
        formatter=Bits(),
        help="""
            The unparsed remainder of a payload whose parsing was deferred
            until a parameter set becomes available.
        """,
    ),
    help="(7.3.5) sei_message()",
)

SeiRbsp = fixeddict(
    "SeiRbsp",
    Entry("sei_message", formatter=multiline),
    Entry(
        "_activated_sps_id",
        help="""
            Computed value. The SPS id activated by an active_parameter_sets
            message in this unit (if any).
        """,
    ),
    help="(7.3.2.4) sei_rbsp()",
)

BufferingPeriod = fixeddict(
    "BufferingPeriod",
    Entry("bp_seq_parameter_set_id"),
    Entry("irap_cpb_params_present_flag"),
    Entry("cpb_delay_offset"),
    Entry("dpb_delay_offset"),
    Entry("concatenation_flag"),
    Entry("au_cpb_removal_delay_delta_minus1"),
    Entry("nal_initial_cpb_removal_delay", formatter=List()),
    Entry("nal_initial_cpb_removal_offset", formatter=List()),
    Entry("nal_initial_alt_cpb_removal_delay", formatter=List()),
    Entry("nal_initial_alt_cpb_removal_offset", formatter=List()),
    Entry("vcl_initial_cpb_removal_delay", formatter=List()),
    Entry("vcl_initial_cpb_removal_offset", formatter=List()),
    Entry("vcl_initial_alt_cpb_removal_delay", formatter=List()),
    Entry("vcl_initial_alt_cpb_removal_offset", formatter=List()),
    help="(D.2.2) buffering_period()",
)

PicTiming = fixeddict(
    "PicTiming",
    Entry("pic_struct"),
    Entry("source_scan_type"),
    Entry("duplicate_flag"),
    Entry("au_cpb_removal_delay_minus1"),
    Entry("pic_dpb_output_delay"),
    Entry("pic_dpb_output_du_delay"),
    Entry("num_decoding_units_minus1"),
    Entry("du_common_cpb_removal_delay_flag"),
    Entry("du_common_cpb_removal_delay_increment_minus1"),
    Entry("num_nalus_in_du_minus1", formatter=List()),
    Entry("du_cpb_removal_delay_increment_minus1", formatter=List()),
    help="(D.2.3) pic_timing()",
)

UserDataRegisteredItuTT35 = fixeddict(
    "UserDataRegisteredItuTT35",
    Entry("itu_t_t35_country_code", formatter=Hex(2)),
    Entry("itu_t_t35_country_code_extension_byte", formatter=Hex(2)),
    Entry("itu_t_t35_payload_byte", formatter=Bytes()),
    help="(D.2.5) user_data_registered_itu_t_t35()",
)

UserDataUnregistered = fixeddict(
    "UserDataUnregistered",
    Entry("uuid_iso_iec_11578", formatter=Bytes()),
    Entry("user_data_payload_byte", formatter=Bytes()),
    help="(D.2.6) user_data_unregistered()",
)

RecoveryPoint = fixeddict(
    "RecoveryPoint",
    Entry("recovery_poc_cnt"),
    Entry("exact_match_flag"),
    Entry("broken_link_flag"),
    help="(D.2.8) recovery_point()",
)

ActiveParameterSets = fixeddict(
    "ActiveParameterSets",
    Entry("active_video_parameter_set_id"),
    Entry("self_contained_cvs_flag"),
    Entry("no_parameter_set_update_flag"),
    Entry("num_sps_ids_minus1"),
    Entry("active_seq_parameter_set_id", formatter=List()),
    Entry("layer_sps_idx", formatter=List()),
    help="(D.2.21) active_parameter_sets()",
)

DecodedPictureHash = fixeddict(
    "DecodedPictureHash",
    Entry("hash_type"),
    Entry("picture_md5", formatter=List(Bytes())),
    Entry("picture_crc", formatter=List(Hex(4))),
    Entry("picture_checksum", formatter=List(Hex(8))),
    help="(D.2.20) decoded_picture_hash()",
)

MasteringDisplayColourVolume = fixeddict(
    "MasteringDisplayColourVolume",
    Entry("display_primaries_x", formatter=List()),
    Entry("display_primaries_y", formatter=List()),
    Entry("white_point_x"),
    Entry("white_point_y"),
    Entry("max_display_mastering_luminance"),
    Entry("min_display_mastering_luminance"),
    help="(D.2.28) mastering_display_colour_volume()",
)

ContentLightLevelInfo = fixeddict(
    "ContentLightLevelInfo",
    Entry("max_content_light_level"),
    Entry("max_pic_average_light_level"),
    help="(D.2.35) content_light_level_info()",
)

AlternativeTransferCharacteristics = fixeddict(
    "AlternativeTransferCharacteristics",
    Entry("preferred_transfer_characteristics"),
    help="(D.2.38) alternative_transfer_characteristics()",
)
