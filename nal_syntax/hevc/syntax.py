"""
HEVC (ITU-T H.265) RBSP syntax. Each function is a transliteration of the
correspondingly named syntax table; the clause numbers of the 2016 and later
editions are given in each docstring.

Payload routines (those registered with
:py:func:`~nal_syntax.dispatch.unit_handler`) follow the signature described
in :py:mod:`nal_syntax.dispatch`. The remaining functions are building blocks
which read into the current context.
"""

from nal_syntax.exceptions import MalformedCode

from nal_syntax.registry import ParameterSetKey

from nal_syntax.dispatch import (
    SUCCESS,
    needs_reparse,
    require_parameter_set,
    unit_handler,
)

from nal_syntax.bitstream.serdes import context_type

from nal_syntax.tables import (
    Codecs,
    NalUnitTypes,
    ParameterSetKinds,
    HEVC_MAX_VPS_ID,
    HEVC_MAX_SPS_ID,
    HEVC_MAX_PPS_ID,
    HEVC_MAX_SHORT_TERM_REF_PIC_SETS,
    HEVC_MAX_DPB_SIZE,
    HEVC_MAX_LONG_TERM_REF_PICS_SPS,
    HEVC_MAX_CPB_CNT,
    HEVC_MAX_LAYER_SETS,
    HEVC_MAX_HRD_PARAMETERS,
)

from nal_syntax.hevc.fixeddicts import (
    NalUnitHeader,
    ProfileTierLevel,
    SubLayerProfileTierLevel,
    SubLayerOrderingInfo,
    HrdParameters,
    HrdSubLayer,
    SubLayerHrdParameters,
    VideoParameterSet,
    ScalingListData,
    ScalingList,
    ShortTermRefPicSet,
    VuiParameters,
    SpsRangeExtension,
    SeqParameterSet,
    PpsRangeExtension,
    PicParameterSet,
    AccessUnitDelimiter,
    EndOfSequence,
    EndOfBitstream,
    FillerData,
    SliceSegmentHeader,
)

__all__ = [
    "nal_unit_header",
    "profile_tier_level",
    "sub_layer_ordering_info",
    "hrd_parameters",
    "sub_layer_hrd_parameters",
    "video_parameter_set_rbsp",
    "scaling_list_data",
    "st_ref_pic_set",
    "vui_parameters",
    "sps_range_extension",
    "seq_parameter_set_rbsp",
    "pps_range_extension",
    "pic_parameter_set_rbsp",
    "access_unit_delimiter_rbsp",
    "end_of_seq_rbsp",
    "end_of_bitstream_rbsp",
    "filler_data_rbsp",
    "slice_segment_header",
    "ceil_log2",
    "pic_size_in_ctbs_y",
]


def ceil_log2(value):
    """Ceil(Log2(value)) for positive integers."""
    return (value - 1).bit_length()


def check_range(target, value, maximum, description=None):
    """
    Raise :py:exc:`~nal_syntax.exceptions.MalformedCode` if 'value' exceeds
    'maximum'. Returns the value.
    """
    if value > maximum:
        raise MalformedCode(
            target,
            value,
            description or "must be at most {}".format(maximum),
        )
    return value


@context_type(NalUnitHeader)
def nal_unit_header(serdes):
    """(7.3.1.2)"""
    serdes.nbits("forbidden_zero_bit", 1)
    nal_unit_type = serdes.nbits("nal_unit_type", 6)
    serdes.nbits("nuh_layer_id", 6)
    serdes.nbits("nuh_temporal_id_plus1", 3)
    return nal_unit_type


################################################################################
# Profile, tier and level
################################################################################


def _flag_set(profile_idc, compatibility_flags, idcs):
    return profile_idc in idcs or any(compatibility_flags[j] for j in idcs)


def _profile_fields(serdes, prefix):
    """
    The profile information of profile_tier_level() shared by the general
    profile and each sub-layer profile ('prefix' is ``"general_"`` or
    ``"sub_layer_"``).
    """
    serdes.nbits(prefix + "profile_space", 2)
    serdes.bool(prefix + "tier_flag")
    profile_idc = serdes.nbits(prefix + "profile_idc", 5)
    compatibility_flags = serdes.bitarray(prefix + "profile_compatibility_flag", 32)
    serdes.bool(prefix + "progressive_source_flag")
    serdes.bool(prefix + "interlaced_source_flag")
    serdes.bool(prefix + "non_packed_constraint_flag")
    serdes.bool(prefix + "frame_only_constraint_flag")

    # 43 bits of profile specific constraint flags
    if _flag_set(profile_idc, compatibility_flags, range(4, 12)):
        serdes.bool(prefix + "max_12bit_constraint_flag")
        serdes.bool(prefix + "max_10bit_constraint_flag")
        serdes.bool(prefix + "max_8bit_constraint_flag")
        serdes.bool(prefix + "max_422chroma_constraint_flag")
        serdes.bool(prefix + "max_420chroma_constraint_flag")
        serdes.bool(prefix + "max_monochrome_constraint_flag")
        serdes.bool(prefix + "intra_constraint_flag")
        serdes.bool(prefix + "one_picture_only_constraint_flag")
        serdes.bool(prefix + "lower_bit_rate_constraint_flag")
        if _flag_set(profile_idc, compatibility_flags, (5, 9, 10, 11)):
            serdes.bool(prefix + "max_14bit_constraint_flag")
            serdes.bitarray(prefix + "reserved_zero_33bits", 33)
        else:
            serdes.bitarray(prefix + "reserved_zero_34bits", 34)
    elif _flag_set(profile_idc, compatibility_flags, (2,)):
        serdes.bitarray(prefix + "reserved_zero_7bits", 7)
        serdes.bool(prefix + "one_picture_only_constraint_flag")
        serdes.bitarray(prefix + "reserved_zero_35bits", 35)
    else:
        serdes.bitarray(prefix + "reserved_zero_43bits", 43)

    if _flag_set(profile_idc, compatibility_flags, (1, 2, 3, 4, 5, 9, 11)):
        serdes.bool(prefix + "inbld_flag")
    else:
        serdes.bool(prefix + "reserved_zero_bit")


@context_type(ProfileTierLevel)
def profile_tier_level(serdes, profile_present_flag, max_num_sub_layers_minus1):
    """(7.3.3)"""
    if profile_present_flag:
        _profile_fields(serdes, "general_")
    serdes.nbits("general_level_idc", 8)

    serdes.declare_list("sub_layer_profile_present_flag")
    serdes.declare_list("sub_layer_level_present_flag")
    profile_present = []
    level_present = []
    for i in range(max_num_sub_layers_minus1):
        profile_present.append(serdes.bool("sub_layer_profile_present_flag"))
        level_present.append(serdes.bool("sub_layer_level_present_flag"))

    serdes.declare_list("reserved_zero_2bits")
    if max_num_sub_layers_minus1 > 0:
        for i in range(max_num_sub_layers_minus1, 8):
            serdes.nbits("reserved_zero_2bits", 2)

    serdes.declare_list("sub_layers")
    for i in range(max_num_sub_layers_minus1):
        with serdes.subcontext("sub_layers"):
            serdes.set_context_type(SubLayerProfileTierLevel)
            if profile_present[i]:
                _profile_fields(serdes, "sub_layer_")
            if level_present[i]:
                serdes.nbits("sub_layer_level_idc", 8)


@context_type(SubLayerOrderingInfo)
def sub_layer_ordering_info(serdes, i):
    """
    One iteration of the ``*_max_dec_pic_buffering_minus1[i]`` loop of
    a VPS (7.3.2.1) or SPS (7.3.2.2.1).
    """
    serdes.computed_value("_sub_layer", i)
    serdes.uint("max_dec_pic_buffering_minus1")
    serdes.uint("max_num_reorder_pics")
    serdes.uint("max_latency_increase_plus1")


def _sub_layer_ordering_info_loop(serdes, present_flag, max_sub_layers_minus1):
    serdes.declare_list("sub_layer_ordering_info")
    first = 0 if present_flag else max_sub_layers_minus1
    for i in range(first, max_sub_layers_minus1 + 1):
        with serdes.subcontext("sub_layer_ordering_info"):
            sub_layer_ordering_info(serdes, i)


################################################################################
# Hypothetical reference decoder parameters
################################################################################

HRD_COMMON_INFO_DEFAULTS = {
    "nal_hrd_parameters_present_flag": False,
    "vcl_hrd_parameters_present_flag": False,
    "sub_pic_hrd_params_present_flag": False,
    "tick_divisor_minus2": 0,
    "du_cpb_removal_delay_increment_length_minus1": 23,
    "sub_pic_cpb_params_in_pic_timing_sei_flag": False,
    "dpb_output_delay_du_length_minus1": 23,
    "initial_cpb_removal_delay_length_minus1": 23,
    "au_cpb_removal_delay_length_minus1": 23,
    "dpb_output_delay_length_minus1": 23,
}
"""
Values of the hrd_parameters() common information fields when they are not
present (E.3.2).
"""


@context_type(SubLayerHrdParameters)
def sub_layer_hrd_parameters(serdes, cpb_cnt, sub_pic_hrd_params_present_flag):
    """(E.2.3)"""
    serdes.declare_list("bit_rate_value_minus1")
    serdes.declare_list("cpb_size_value_minus1")
    serdes.declare_list("cpb_size_du_value_minus1")
    serdes.declare_list("bit_rate_du_value_minus1")
    serdes.declare_list("cbr_flag")
    for i in range(cpb_cnt):
        serdes.uint("bit_rate_value_minus1")
        serdes.uint("cpb_size_value_minus1")
        if sub_pic_hrd_params_present_flag:
            serdes.uint("cpb_size_du_value_minus1")
            serdes.uint("bit_rate_du_value_minus1")
        serdes.bool("cbr_flag")


@context_type(HrdParameters)
def hrd_parameters(
    serdes, common_inf_present_flag, max_num_sub_layers_minus1, inherited=None
):
    """
    (E.2.2) When 'common_inf_present_flag' is False, the common information
    is taken from 'inherited' (the ``_common_info`` of the preceding
    hrd_parameters()), or from :py:data:`HRD_COMMON_INFO_DEFAULTS`.
    """
    common = dict(inherited if inherited is not None else HRD_COMMON_INFO_DEFAULTS)

    if common_inf_present_flag:
        common.update(HRD_COMMON_INFO_DEFAULTS)
        nal = serdes.bool("nal_hrd_parameters_present_flag")
        vcl = serdes.bool("vcl_hrd_parameters_present_flag")
        common["nal_hrd_parameters_present_flag"] = nal
        common["vcl_hrd_parameters_present_flag"] = vcl
        if nal or vcl:
            sub_pic = serdes.bool("sub_pic_hrd_params_present_flag")
            common["sub_pic_hrd_params_present_flag"] = sub_pic
            if sub_pic:
                common["tick_divisor_minus2"] = serdes.nbits("tick_divisor_minus2", 8)
                common["du_cpb_removal_delay_increment_length_minus1"] = serdes.nbits(
                    "du_cpb_removal_delay_increment_length_minus1", 5
                )
                common["sub_pic_cpb_params_in_pic_timing_sei_flag"] = serdes.bool(
                    "sub_pic_cpb_params_in_pic_timing_sei_flag"
                )
                common["dpb_output_delay_du_length_minus1"] = serdes.nbits(
                    "dpb_output_delay_du_length_minus1", 5
                )
            serdes.nbits("bit_rate_scale", 4)
            serdes.nbits("cpb_size_scale", 4)
            if sub_pic:
                serdes.nbits("cpb_size_du_scale", 4)
            for name in [
                "initial_cpb_removal_delay_length_minus1",
                "au_cpb_removal_delay_length_minus1",
                "dpb_output_delay_length_minus1",
            ]:
                common[name] = serdes.nbits(name, 5)
    serdes.computed_value("_common_info", common)

    serdes.declare_list("sub_layers")
    for i in range(max_num_sub_layers_minus1 + 1):
        with serdes.subcontext("sub_layers"):
            serdes.set_context_type(HrdSubLayer)
            fixed_pic_rate_general_flag = serdes.bool("fixed_pic_rate_general_flag")
            fixed_pic_rate_within_cvs_flag = True
            if not fixed_pic_rate_general_flag:
                fixed_pic_rate_within_cvs_flag = serdes.bool(
                    "fixed_pic_rate_within_cvs_flag"
                )

            low_delay_hrd_flag = False
            if fixed_pic_rate_within_cvs_flag:
                serdes.uint("elemental_duration_in_tc_minus1")
            else:
                low_delay_hrd_flag = serdes.bool("low_delay_hrd_flag")

            cpb_cnt_minus1 = 0
            if not low_delay_hrd_flag:
                cpb_cnt_minus1 = check_range(
                    "cpb_cnt_minus1",
                    serdes.uint("cpb_cnt_minus1"),
                    HEVC_MAX_CPB_CNT - 1,
                )

            if common["nal_hrd_parameters_present_flag"]:
                with serdes.subcontext("nal_sub_layer_hrd_parameters"):
                    sub_layer_hrd_parameters(
                        serdes,
                        cpb_cnt_minus1 + 1,
                        common["sub_pic_hrd_params_present_flag"],
                    )
            if common["vcl_hrd_parameters_present_flag"]:
                with serdes.subcontext("vcl_sub_layer_hrd_parameters"):
                    sub_layer_hrd_parameters(
                        serdes,
                        cpb_cnt_minus1 + 1,
                        common["sub_pic_hrd_params_present_flag"],
                    )


def hrd_cpb_cnt(hrd, sub_layer):
    """
    CpbCnt for the given sub-layer of a parsed :py:class:`HrdParameters`
    (the number of CPB specifications).
    """
    sub_layers = hrd["sub_layers"]
    sub_layer = min(sub_layer, len(sub_layers) - 1)
    return sub_layers[sub_layer].get("cpb_cnt_minus1", 0) + 1


################################################################################
# Video parameter set
################################################################################


def vps_parameter_sets(vps):
    return [
        ParameterSetKey(
            ParameterSetKinds.video_parameter_set, vps["vps_video_parameter_set_id"]
        )
    ]


@unit_handler(Codecs.hevc, [NalUnitTypes.VPS_NUT], parameter_sets=vps_parameter_sets)
@context_type(VideoParameterSet)
def video_parameter_set_rbsp(serdes, reparse, registry, associated):
    """(7.3.2.1)"""
    check_range(
        "vps_video_parameter_set_id",
        serdes.nbits("vps_video_parameter_set_id", 4),
        HEVC_MAX_VPS_ID,
    )
    serdes.bool("vps_base_layer_internal_flag")
    serdes.bool("vps_base_layer_available_flag")
    serdes.nbits("vps_max_layers_minus1", 6)
    vps_max_sub_layers_minus1 = serdes.nbits("vps_max_sub_layers_minus1", 3)
    serdes.bool("vps_temporal_id_nesting_flag")
    serdes.nbits("vps_reserved_0xffff_16bits", 16)

    with serdes.subcontext("profile_tier_level"):
        profile_tier_level(serdes, True, vps_max_sub_layers_minus1)

    _sub_layer_ordering_info_loop(
        serdes,
        serdes.bool("vps_sub_layer_ordering_info_present_flag"),
        vps_max_sub_layers_minus1,
    )

    vps_max_layer_id = serdes.nbits("vps_max_layer_id", 6)
    vps_num_layer_sets_minus1 = check_range(
        "vps_num_layer_sets_minus1",
        serdes.uint("vps_num_layer_sets_minus1"),
        HEVC_MAX_LAYER_SETS - 1,
    )
    serdes.declare_list("layer_id_included_flag")
    for i in range(1, vps_num_layer_sets_minus1 + 1):
        serdes.bitarray("layer_id_included_flag", vps_max_layer_id + 1)

    if serdes.bool("vps_timing_info_present_flag"):
        serdes.nbits("vps_num_units_in_tick", 32)
        serdes.nbits("vps_time_scale", 32)
        if serdes.bool("vps_poc_proportional_to_timing_flag"):
            serdes.uint("vps_num_ticks_poc_diff_one_minus1")
        vps_num_hrd_parameters = check_range(
            "vps_num_hrd_parameters",
            serdes.uint("vps_num_hrd_parameters"),
            HEVC_MAX_HRD_PARAMETERS,
        )

        serdes.declare_list("hrd_layer_set_idx")
        serdes.declare_list("cprms_present_flag")
        serdes.declare_list("hrd_parameters")
        inherited = None
        for i in range(vps_num_hrd_parameters):
            serdes.uint("hrd_layer_set_idx")
            cprms_present_flag = True
            if i > 0:
                cprms_present_flag = serdes.bool("cprms_present_flag")
            with serdes.subcontext("hrd_parameters"):
                hrd_parameters(
                    serdes, cprms_present_flag, vps_max_sub_layers_minus1, inherited
                )
                inherited = serdes.cur_context["_common_info"]

    if serdes.bool("vps_extension_flag"):
        serdes.extension_data("vps_extension_data")

    return SUCCESS


################################################################################
# Sequence parameter set
################################################################################


@context_type(ScalingListData)
def scaling_list_data(serdes):
    """(7.3.4)"""
    serdes.declare_list("scaling_lists")
    for size_id in range(4):
        for matrix_id in range(0, 6, 3 if size_id == 3 else 1):
            with serdes.subcontext("scaling_lists"):
                serdes.set_context_type(ScalingList)
                serdes.computed_value("_size_id", size_id)
                serdes.computed_value("_matrix_id", matrix_id)
                if not serdes.bool("scaling_list_pred_mode_flag"):
                    check_range(
                        "scaling_list_pred_matrix_id_delta",
                        serdes.uint("scaling_list_pred_matrix_id_delta"),
                        matrix_id // 3 if size_id == 3 else matrix_id,
                    )
                else:
                    coef_num = min(64, 1 << (4 + (size_id << 1)))
                    if size_id > 1:
                        serdes.sint("scaling_list_dc_coef_minus8")
                    serdes.declare_list("scaling_list_delta_coef")
                    for i in range(coef_num):
                        serdes.sint("scaling_list_delta_coef")


@context_type(ShortTermRefPicSet)
def st_ref_pic_set(serdes, st_rps_idx, num_short_term_ref_pic_sets, ref_pic_sets):
    """
    (7.3.7) Also derives the DeltaPocS0/S1 and UsedByCurrPicS0/S1 arrays (7.4.8)
    as computed values.

    Parameters
    ==========
    st_rps_idx : int
    num_short_term_ref_pic_sets : int
    ref_pic_sets : [:py:class:`ShortTermRefPicSet`, ...]
        The candidate sets for inter RPS prediction (the SPS's sets).
    """
    serdes.computed_value("_st_rps_idx", st_rps_idx)

    inter_ref_pic_set_prediction_flag = False
    if st_rps_idx != 0:
        inter_ref_pic_set_prediction_flag = serdes.bool(
            "inter_ref_pic_set_prediction_flag"
        )

    if inter_ref_pic_set_prediction_flag:
        delta_idx_minus1 = 0
        if st_rps_idx == num_short_term_ref_pic_sets:
            delta_idx_minus1 = check_range(
                "delta_idx_minus1", serdes.uint("delta_idx_minus1"), st_rps_idx - 1
            )
        ref_rps_idx = st_rps_idx - (delta_idx_minus1 + 1)
        if not 0 <= ref_rps_idx < len(ref_pic_sets):
            raise MalformedCode(
                "delta_idx_minus1",
                delta_idx_minus1,
                "reference RPS index {} out of range".format(ref_rps_idx),
            )
        ref = ref_pic_sets[ref_rps_idx]
        ref_s0 = ref["_delta_poc_s0"]
        ref_s1 = ref["_delta_poc_s1"]
        num_delta_pocs = len(ref_s0) + len(ref_s1)

        delta_rps_sign = serdes.bool("delta_rps_sign")
        abs_delta_rps_minus1 = check_range(
            "abs_delta_rps_minus1", serdes.uint("abs_delta_rps_minus1"), (1 << 15) - 1
        )
        delta_rps = (1 - 2 * delta_rps_sign) * (abs_delta_rps_minus1 + 1)

        serdes.declare_list("used_by_curr_pic_flag")
        serdes.declare_list("use_delta_flag")
        used_by_curr_pic_flag = []
        use_delta_flag = []
        for j in range(num_delta_pocs + 1):
            used = serdes.bool("used_by_curr_pic_flag")
            used_by_curr_pic_flag.append(used)
            use_delta_flag.append(True if used else serdes.bool("use_delta_flag"))

        # (7-61)
        s0 = []
        used_s0 = []
        for j in range(len(ref_s1) - 1, -1, -1):
            d_poc = ref_s1[j] + delta_rps
            if d_poc < 0 and use_delta_flag[len(ref_s0) + j]:
                s0.append(d_poc)
                used_s0.append(used_by_curr_pic_flag[len(ref_s0) + j])
        if delta_rps < 0 and use_delta_flag[num_delta_pocs]:
            s0.append(delta_rps)
            used_s0.append(used_by_curr_pic_flag[num_delta_pocs])
        for j in range(len(ref_s0)):
            d_poc = ref_s0[j] + delta_rps
            if d_poc < 0 and use_delta_flag[j]:
                s0.append(d_poc)
                used_s0.append(used_by_curr_pic_flag[j])

        # (7-62)
        s1 = []
        used_s1 = []
        for j in range(len(ref_s0) - 1, -1, -1):
            d_poc = ref_s0[j] + delta_rps
            if d_poc > 0 and use_delta_flag[j]:
                s1.append(d_poc)
                used_s1.append(used_by_curr_pic_flag[j])
        if delta_rps > 0 and use_delta_flag[num_delta_pocs]:
            s1.append(delta_rps)
            used_s1.append(used_by_curr_pic_flag[num_delta_pocs])
        for j in range(len(ref_s1)):
            d_poc = ref_s1[j] + delta_rps
            if d_poc > 0 and use_delta_flag[len(ref_s0) + j]:
                s1.append(d_poc)
                used_s1.append(used_by_curr_pic_flag[len(ref_s0) + j])
    else:
        num_negative_pics = check_range(
            "num_negative_pics", serdes.uint("num_negative_pics"), HEVC_MAX_DPB_SIZE
        )
        num_positive_pics = check_range(
            "num_positive_pics", serdes.uint("num_positive_pics"), HEVC_MAX_DPB_SIZE
        )

        # (7-63) to (7-66)
        s0 = []
        used_s0 = []
        serdes.declare_list("delta_poc_s0_minus1")
        serdes.declare_list("used_by_curr_pic_s0_flag")
        poc = 0
        for i in range(num_negative_pics):
            poc -= serdes.uint("delta_poc_s0_minus1") + 1
            s0.append(poc)
            used_s0.append(serdes.bool("used_by_curr_pic_s0_flag"))

        s1 = []
        used_s1 = []
        serdes.declare_list("delta_poc_s1_minus1")
        serdes.declare_list("used_by_curr_pic_s1_flag")
        poc = 0
        for i in range(num_positive_pics):
            poc += serdes.uint("delta_poc_s1_minus1") + 1
            s1.append(poc)
            used_s1.append(serdes.bool("used_by_curr_pic_s1_flag"))

    serdes.computed_value("_delta_poc_s0", s0)
    serdes.computed_value("_used_by_curr_pic_s0", used_s0)
    serdes.computed_value("_delta_poc_s1", s1)
    serdes.computed_value("_used_by_curr_pic_s1", used_s1)


@context_type(VuiParameters)
def vui_parameters(serdes, sps_max_sub_layers_minus1):
    """(E.2.1)"""
    if serdes.bool("aspect_ratio_info_present_flag"):
        # EXTENDED_SAR
        if serdes.nbits("aspect_ratio_idc", 8) == 255:
            serdes.nbits("sar_width", 16)
            serdes.nbits("sar_height", 16)

    if serdes.bool("overscan_info_present_flag"):
        serdes.bool("overscan_appropriate_flag")

    if serdes.bool("video_signal_type_present_flag"):
        serdes.nbits("video_format", 3)
        serdes.bool("video_full_range_flag")
        if serdes.bool("colour_description_present_flag"):
            serdes.nbits("colour_primaries", 8)
            serdes.nbits("transfer_characteristics", 8)
            serdes.nbits("matrix_coeffs", 8)

    if serdes.bool("chroma_loc_info_present_flag"):
        serdes.uint("chroma_sample_loc_type_top_field")
        serdes.uint("chroma_sample_loc_type_bottom_field")

    serdes.bool("neutral_chroma_indication_flag")
    serdes.bool("field_seq_flag")
    serdes.bool("frame_field_info_present_flag")

    if serdes.bool("default_display_window_flag"):
        serdes.uint("def_disp_win_left_offset")
        serdes.uint("def_disp_win_right_offset")
        serdes.uint("def_disp_win_top_offset")
        serdes.uint("def_disp_win_bottom_offset")

    if serdes.bool("vui_timing_info_present_flag"):
        serdes.nbits("vui_num_units_in_tick", 32)
        serdes.nbits("vui_time_scale", 32)
        if serdes.bool("vui_poc_proportional_to_timing_flag"):
            serdes.uint("vui_num_ticks_poc_diff_one_minus1")
        if serdes.bool("vui_hrd_parameters_present_flag"):
            with serdes.subcontext("hrd_parameters"):
                hrd_parameters(serdes, True, sps_max_sub_layers_minus1)

    if serdes.bool("bitstream_restriction_flag"):
        serdes.bool("tiles_fixed_structure_flag")
        serdes.bool("motion_vectors_over_pic_boundaries_flag")
        serdes.bool("restricted_ref_pic_lists_flag")
        serdes.uint("min_spatial_segmentation_idc")
        serdes.uint("max_bytes_per_pic_denom")
        serdes.uint("max_bits_per_min_cu_denom")
        serdes.uint("log2_max_mv_length_horizontal")
        serdes.uint("log2_max_mv_length_vertical")


@context_type(SpsRangeExtension)
def sps_range_extension(serdes):
    """(7.3.2.2.2)"""
    serdes.bool("transform_skip_rotation_enabled_flag")
    serdes.bool("transform_skip_context_enabled_flag")
    serdes.bool("implicit_rdpcm_enabled_flag")
    serdes.bool("explicit_rdpcm_enabled_flag")
    serdes.bool("extended_precision_processing_flag")
    serdes.bool("intra_smoothing_disabled_flag")
    serdes.bool("high_precision_offsets_enabled_flag")
    serdes.bool("persistent_rice_adaptation_enabled_flag")
    serdes.bool("cabac_bypass_alignment_enabled_flag")


def sps_parameter_sets(sps):
    return [
        ParameterSetKey(
            ParameterSetKinds.sequence_parameter_set, sps["sps_seq_parameter_set_id"]
        )
    ]


@unit_handler(Codecs.hevc, [NalUnitTypes.SPS_NUT], parameter_sets=sps_parameter_sets)
@context_type(SeqParameterSet)
def seq_parameter_set_rbsp(serdes, reparse, registry, associated):
    """(7.3.2.2.1)"""
    serdes.nbits("sps_video_parameter_set_id", 4)
    sps_max_sub_layers_minus1 = serdes.nbits("sps_max_sub_layers_minus1", 3)
    serdes.bool("sps_temporal_id_nesting_flag")

    with serdes.subcontext("profile_tier_level"):
        profile_tier_level(serdes, True, sps_max_sub_layers_minus1)

    check_range(
        "sps_seq_parameter_set_id",
        serdes.uint("sps_seq_parameter_set_id"),
        HEVC_MAX_SPS_ID,
    )
    chroma_format_idc = check_range(
        "chroma_format_idc", serdes.uint("chroma_format_idc"), 3
    )
    if chroma_format_idc == 3:
        serdes.bool("separate_colour_plane_flag")
    serdes.uint("pic_width_in_luma_samples")
    serdes.uint("pic_height_in_luma_samples")

    if serdes.bool("conformance_window_flag"):
        serdes.uint("conf_win_left_offset")
        serdes.uint("conf_win_right_offset")
        serdes.uint("conf_win_top_offset")
        serdes.uint("conf_win_bottom_offset")

    serdes.uint("bit_depth_luma_minus8")
    serdes.uint("bit_depth_chroma_minus8")
    log2_max_pic_order_cnt_lsb_minus4 = check_range(
        "log2_max_pic_order_cnt_lsb_minus4",
        serdes.uint("log2_max_pic_order_cnt_lsb_minus4"),
        12,
    )

    _sub_layer_ordering_info_loop(
        serdes,
        serdes.bool("sps_sub_layer_ordering_info_present_flag"),
        sps_max_sub_layers_minus1,
    )

    # CtbLog2SizeY is at most 6
    log2_min_luma_coding_block_size_minus3 = check_range(
        "log2_min_luma_coding_block_size_minus3",
        serdes.uint("log2_min_luma_coding_block_size_minus3"),
        3,
    )
    check_range(
        "log2_diff_max_min_luma_coding_block_size",
        serdes.uint("log2_diff_max_min_luma_coding_block_size"),
        3 - log2_min_luma_coding_block_size_minus3,
    )
    serdes.uint("log2_min_luma_transform_block_size_minus2")
    serdes.uint("log2_diff_max_min_luma_transform_block_size")
    serdes.uint("max_transform_hierarchy_depth_inter")
    serdes.uint("max_transform_hierarchy_depth_intra")

    if serdes.bool("scaling_list_enabled_flag"):
        if serdes.bool("sps_scaling_list_data_present_flag"):
            with serdes.subcontext("scaling_list_data"):
                scaling_list_data(serdes)

    serdes.bool("amp_enabled_flag")
    serdes.bool("sample_adaptive_offset_enabled_flag")

    if serdes.bool("pcm_enabled_flag"):
        serdes.nbits("pcm_sample_bit_depth_luma_minus1", 4)
        serdes.nbits("pcm_sample_bit_depth_chroma_minus1", 4)
        serdes.uint("log2_min_pcm_luma_coding_block_size_minus3")
        serdes.uint("log2_diff_max_min_pcm_luma_coding_block_size")
        serdes.bool("pcm_loop_filter_disabled_flag")

    num_short_term_ref_pic_sets = check_range(
        "num_short_term_ref_pic_sets",
        serdes.uint("num_short_term_ref_pic_sets"),
        HEVC_MAX_SHORT_TERM_REF_PIC_SETS,
    )
    serdes.declare_list("st_ref_pic_set")
    ref_pic_sets = serdes.cur_context["st_ref_pic_set"]
    for i in range(num_short_term_ref_pic_sets):
        with serdes.subcontext("st_ref_pic_set"):
            st_ref_pic_set(serdes, i, num_short_term_ref_pic_sets, ref_pic_sets)

    if serdes.bool("long_term_ref_pics_present_flag"):
        num_long_term_ref_pics_sps = check_range(
            "num_long_term_ref_pics_sps",
            serdes.uint("num_long_term_ref_pics_sps"),
            HEVC_MAX_LONG_TERM_REF_PICS_SPS,
        )
        serdes.declare_list("lt_ref_pic_poc_lsb_sps")
        serdes.declare_list("used_by_curr_pic_lt_sps_flag")
        for i in range(num_long_term_ref_pics_sps):
            serdes.nbits(
                "lt_ref_pic_poc_lsb_sps", log2_max_pic_order_cnt_lsb_minus4 + 4
            )
            serdes.bool("used_by_curr_pic_lt_sps_flag")

    serdes.bool("sps_temporal_mvp_enabled_flag")
    serdes.bool("strong_intra_smoothing_enabled_flag")

    if serdes.bool("vui_parameters_present_flag"):
        with serdes.subcontext("vui_parameters"):
            vui_parameters(serdes, sps_max_sub_layers_minus1)

    if serdes.bool("sps_extension_present_flag"):
        range_flag = serdes.bool("sps_range_extension_flag")
        multilayer_flag = serdes.bool("sps_multilayer_extension_flag")
        flag_3d = serdes.bool("sps_3d_extension_flag")
        scc_flag = serdes.bool("sps_scc_extension_flag")
        extension_4bits = serdes.nbits("sps_extension_4bits", 4)

        if range_flag:
            with serdes.subcontext("sps_range_extension"):
                sps_range_extension(serdes)

        # The multilayer, 3D and screen content extensions are not parsed and
        # are included in the extension data
        if multilayer_flag or flag_3d or scc_flag or extension_4bits:
            serdes.extension_data("sps_extension_data")

    return SUCCESS


################################################################################
# Picture parameter set
################################################################################


@context_type(PpsRangeExtension)
def pps_range_extension(serdes, transform_skip_enabled_flag):
    """(7.3.2.3.2)"""
    if transform_skip_enabled_flag:
        serdes.uint("log2_max_transform_skip_block_size_minus2")
    serdes.bool("cross_component_prediction_enabled_flag")
    if serdes.bool("chroma_qp_offset_list_enabled_flag"):
        serdes.uint("diff_cu_chroma_qp_offset_depth")
        chroma_qp_offset_list_len_minus1 = check_range(
            "chroma_qp_offset_list_len_minus1",
            serdes.uint("chroma_qp_offset_list_len_minus1"),
            5,
        )
        serdes.declare_list("cb_qp_offset_list")
        serdes.declare_list("cr_qp_offset_list")
        for i in range(chroma_qp_offset_list_len_minus1 + 1):
            serdes.sint("cb_qp_offset_list")
            serdes.sint("cr_qp_offset_list")
    serdes.uint("log2_sao_offset_scale_luma")
    serdes.uint("log2_sao_offset_scale_chroma")


def pps_parameter_sets(pps):
    return [
        ParameterSetKey(
            ParameterSetKinds.picture_parameter_set, pps["pps_pic_parameter_set_id"]
        )
    ]


@unit_handler(Codecs.hevc, [NalUnitTypes.PPS_NUT], parameter_sets=pps_parameter_sets)
@context_type(PicParameterSet)
def pic_parameter_set_rbsp(serdes, reparse, registry, associated):
    """(7.3.2.3.1)"""
    check_range(
        "pps_pic_parameter_set_id",
        serdes.uint("pps_pic_parameter_set_id"),
        HEVC_MAX_PPS_ID,
    )
    check_range(
        "pps_seq_parameter_set_id",
        serdes.uint("pps_seq_parameter_set_id"),
        HEVC_MAX_SPS_ID,
    )
    serdes.bool("dependent_slice_segments_enabled_flag")
    serdes.bool("output_flag_present_flag")
    serdes.nbits("num_extra_slice_header_bits", 3)
    serdes.bool("sign_data_hiding_enabled_flag")
    serdes.bool("cabac_init_present_flag")
    serdes.uint("num_ref_idx_l0_default_active_minus1")
    serdes.uint("num_ref_idx_l1_default_active_minus1")
    serdes.sint("init_qp_minus26")
    serdes.bool("constrained_intra_pred_flag")
    transform_skip_enabled_flag = serdes.bool("transform_skip_enabled_flag")
    if serdes.bool("cu_qp_delta_enabled_flag"):
        serdes.uint("diff_cu_qp_delta_depth")
    serdes.sint("pps_cb_qp_offset")
    serdes.sint("pps_cr_qp_offset")
    serdes.bool("pps_slice_chroma_qp_offsets_present_flag")
    serdes.bool("weighted_pred_flag")
    serdes.bool("weighted_bipred_flag")
    serdes.bool("transquant_bypass_enabled_flag")
    tiles_enabled_flag = serdes.bool("tiles_enabled_flag")
    serdes.bool("entropy_coding_sync_enabled_flag")

    if tiles_enabled_flag:
        num_tile_columns_minus1 = serdes.uint("num_tile_columns_minus1")
        num_tile_rows_minus1 = serdes.uint("num_tile_rows_minus1")
        if not serdes.bool("uniform_spacing_flag"):
            # A picture is at most 8192 samples wide so guard against runaway
            # loops on corrupt data
            check_range("num_tile_columns_minus1", num_tile_columns_minus1, 1023)
            check_range("num_tile_rows_minus1", num_tile_rows_minus1, 1023)
            serdes.declare_list("column_width_minus1")
            for i in range(num_tile_columns_minus1):
                serdes.uint("column_width_minus1")
            serdes.declare_list("row_height_minus1")
            for i in range(num_tile_rows_minus1):
                serdes.uint("row_height_minus1")
        serdes.bool("loop_filter_across_tiles_enabled_flag")

    serdes.bool("pps_loop_filter_across_slices_enabled_flag")

    if serdes.bool("deblocking_filter_control_present_flag"):
        serdes.bool("deblocking_filter_override_enabled_flag")
        if not serdes.bool("pps_deblocking_filter_disabled_flag"):
            serdes.sint("pps_beta_offset_div2")
            serdes.sint("pps_tc_offset_div2")

    if serdes.bool("pps_scaling_list_data_present_flag"):
        with serdes.subcontext("scaling_list_data"):
            scaling_list_data(serdes)

    serdes.bool("lists_modification_present_flag")
    serdes.uint("log2_parallel_merge_level_minus2")
    serdes.bool("slice_segment_header_extension_present_flag")

    if serdes.bool("pps_extension_present_flag"):
        range_flag = serdes.bool("pps_range_extension_flag")
        multilayer_flag = serdes.bool("pps_multilayer_extension_flag")
        flag_3d = serdes.bool("pps_3d_extension_flag")
        scc_flag = serdes.bool("pps_scc_extension_flag")
        extension_4bits = serdes.nbits("pps_extension_4bits", 4)

        if range_flag:
            with serdes.subcontext("pps_range_extension"):
                pps_range_extension(serdes, transform_skip_enabled_flag)

        if multilayer_flag or flag_3d or scc_flag or extension_4bits:
            serdes.extension_data("pps_extension_data")

    return SUCCESS


################################################################################
# Other non-VCL units
################################################################################


@unit_handler(Codecs.hevc, [NalUnitTypes.AUD_NUT])
@context_type(AccessUnitDelimiter)
def access_unit_delimiter_rbsp(serdes, reparse, registry, associated):
    """(7.3.2.5)"""
    serdes.nbits("pic_type", 3)
    return SUCCESS


@unit_handler(Codecs.hevc, [NalUnitTypes.EOS_NUT], check_trailing_bits=False)
@context_type(EndOfSequence)
def end_of_seq_rbsp(serdes, reparse, registry, associated):
    """(7.3.2.6) Empty."""
    return SUCCESS


@unit_handler(Codecs.hevc, [NalUnitTypes.EOB_NUT], check_trailing_bits=False)
@context_type(EndOfBitstream)
def end_of_bitstream_rbsp(serdes, reparse, registry, associated):
    """(7.3.2.7) Empty."""
    return SUCCESS


@unit_handler(Codecs.hevc, [NalUnitTypes.FD_NUT])
@context_type(FillerData)
def filler_data_rbsp(serdes, reparse, registry, associated):
    """(7.3.2.8)"""
    num_bytes = 0
    offset = serdes.io.tell()
    while serdes.next_bits(8) == 0xFF:
        serdes.io.read_nbits(8)
        num_bytes += 1
    serdes.io.seek(offset)
    serdes.bytes("ff_byte", num_bytes)
    return SUCCESS


################################################################################
# Slice segment header
################################################################################


def pic_size_in_ctbs_y(sps):
    """PicSizeInCtbsY (7-10 to 7-19) for a parsed SPS."""
    min_cb_log2_size_y = sps["log2_min_luma_coding_block_size_minus3"] + 3
    ctb_log2_size_y = min_cb_log2_size_y + sps["log2_diff_max_min_luma_coding_block_size"]
    ctb_size_y = 1 << ctb_log2_size_y
    pic_width_in_ctbs_y = -(-sps["pic_width_in_luma_samples"] // ctb_size_y)
    pic_height_in_ctbs_y = -(-sps["pic_height_in_luma_samples"] // ctb_size_y)
    return pic_width_in_ctbs_y * pic_height_in_ctbs_y


VCL_NAL_UNIT_TYPES = [
    NalUnitTypes.TRAIL_N,
    NalUnitTypes.TRAIL_R,
    NalUnitTypes.TSA_N,
    NalUnitTypes.TSA_R,
    NalUnitTypes.STSA_N,
    NalUnitTypes.STSA_R,
    NalUnitTypes.RADL_N,
    NalUnitTypes.RADL_R,
    NalUnitTypes.RASL_N,
    NalUnitTypes.RASL_R,
    NalUnitTypes.BLA_W_LP,
    NalUnitTypes.BLA_W_RADL,
    NalUnitTypes.BLA_N_LP,
    NalUnitTypes.IDR_W_RADL,
    NalUnitTypes.IDR_N_LP,
    NalUnitTypes.CRA_NUT,
    NalUnitTypes.RSV_IRAP_VCL22,
    NalUnitTypes.RSV_IRAP_VCL23,
]


@unit_handler(Codecs.hevc, VCL_NAL_UNIT_TYPES, check_trailing_bits=False)
@context_type(SliceSegmentHeader)
def slice_segment_header(serdes, reparse, registry, associated):
    """
    (7.3.6.1) The leading fields of a slice segment header. Requires the
    referenced PPS and its SPS. The number of bits which follow (the rest of
    the header and the slice data) is recorded in ``_unparsed_bits``.
    """
    nal_unit_type = serdes.context["nal_unit_header"]["nal_unit_type"]

    first_slice_segment_in_pic_flag = serdes.bool("first_slice_segment_in_pic_flag")
    if NalUnitTypes.BLA_W_LP <= nal_unit_type <= NalUnitTypes.RSV_IRAP_VCL23:
        serdes.bool("no_output_of_prior_pics_flag")
    pps_id = check_range(
        "slice_pic_parameter_set_id",
        serdes.uint("slice_pic_parameter_set_id"),
        HEVC_MAX_PPS_ID,
    )

    pps, missing = require_parameter_set(
        registry, reparse, ParameterSetKinds.picture_parameter_set, pps_id
    )
    if missing is not None:
        return needs_reparse(missing)
    sps_id = pps["pps_seq_parameter_set_id"]
    sps, missing = require_parameter_set(
        registry, reparse, ParameterSetKinds.sequence_parameter_set, sps_id
    )
    if missing is not None:
        return needs_reparse(missing)
    serdes.computed_value("_activated_sps_id", sps_id)

    dependent_slice_segment_flag = False
    if not first_slice_segment_in_pic_flag:
        if pps["dependent_slice_segments_enabled_flag"]:
            dependent_slice_segment_flag = serdes.bool("dependent_slice_segment_flag")
        serdes.nbits("slice_segment_address", ceil_log2(pic_size_in_ctbs_y(sps)))

    if not dependent_slice_segment_flag:
        serdes.declare_list("slice_reserved_flag")
        for i in range(pps["num_extra_slice_header_bits"]):
            serdes.bool("slice_reserved_flag")
        check_range("slice_type", serdes.uint("slice_type"), 2)
        if pps["output_flag_present_flag"]:
            serdes.bool("pic_output_flag")
        if sps.get("separate_colour_plane_flag", False):
            serdes.nbits("colour_plane_id", 2)

        if nal_unit_type not in (NalUnitTypes.IDR_W_RADL, NalUnitTypes.IDR_N_LP):
            serdes.nbits(
                "slice_pic_order_cnt_lsb",
                sps["log2_max_pic_order_cnt_lsb_minus4"] + 4,
            )
            num_short_term_ref_pic_sets = sps["num_short_term_ref_pic_sets"]
            if not serdes.bool("short_term_ref_pic_set_sps_flag"):
                with serdes.subcontext("st_ref_pic_set"):
                    st_ref_pic_set(
                        serdes,
                        num_short_term_ref_pic_sets,
                        num_short_term_ref_pic_sets,
                        sps["st_ref_pic_set"],
                    )
            elif num_short_term_ref_pic_sets > 1:
                serdes.nbits(
                    "short_term_ref_pic_set_idx",
                    ceil_log2(num_short_term_ref_pic_sets),
                )

    serdes.computed_value("_unparsed_bits", serdes.bits_remaining())

    return SUCCESS
