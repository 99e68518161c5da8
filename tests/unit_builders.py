"""
Builders for small but well formed HEVC and MPEG-2 units, used throughout the
test suite.

The ``write_*`` functions write a syntax structure into a
:py:class:`~nal_syntax.bitstream.io.BitstreamWriter` with plausible default
values. The remaining functions produce complete units (as ``bytes``) in the
form accepted by :py:meth:`nal_syntax.parser.ParserSession.parse_unit`.
"""

from nal_syntax.bitstream import BitstreamWriter, rbsp_to_nal

from nal_syntax.annexb import START_CODE_PREFIX

from nal_syntax.tables import NalUnitTypes, SEIPayloadTypes, StartCodes


################################################################################
# HEVC
################################################################################


def hevc_nal_unit(
    nal_unit_type, write_payload=None, trailing_bits=True, nuh_temporal_id_plus1=1
):
    """
    Build a NAL unit (with emulation prevention applied). 'write_payload' is
    called with a BitstreamWriter to produce the RBSP.
    """
    w = BitstreamWriter()
    if write_payload is not None:
        write_payload(w)
    if trailing_bits:
        w.write_rbsp_trailing_bits()

    header = BitstreamWriter()
    header.write_nbits(1, 0)
    header.write_nbits(6, nal_unit_type)
    header.write_nbits(6, 0)
    header.write_nbits(3, nuh_temporal_id_plus1)

    return header.flush() + rbsp_to_nal(w.flush())


def write_profile_tier_level(w, max_sub_layers_minus1=0, level_idc=93):
    """Main profile, main tier."""
    w.write_nbits(2, 0)  # general_profile_space
    w.write_bit(0)  # general_tier_flag
    w.write_nbits(5, 1)  # general_profile_idc
    w.write_nbits(32, 1 << 30)  # general_profile_compatibility_flag[1]
    w.write_bit(1)  # general_progressive_source_flag
    w.write_bit(0)  # general_interlaced_source_flag
    w.write_bit(0)  # general_non_packed_constraint_flag
    w.write_bit(1)  # general_frame_only_constraint_flag
    w.write_nbits(43, 0)
    w.write_bit(0)  # general_inbld_flag
    w.write_nbits(8, level_idc)

    for i in range(max_sub_layers_minus1):
        w.write_bit(0)  # sub_layer_profile_present_flag
        w.write_bit(0)  # sub_layer_level_present_flag
    if max_sub_layers_minus1 > 0:
        for i in range(max_sub_layers_minus1, 8):
            w.write_nbits(2, 0)


def write_vps(w, vps_id=0, max_layers_minus1=0, extension_data=None):
    w.write_nbits(4, vps_id)
    w.write_bit(1)  # vps_base_layer_internal_flag
    w.write_bit(1)  # vps_base_layer_available_flag
    w.write_nbits(6, max_layers_minus1)
    w.write_nbits(3, 0)  # vps_max_sub_layers_minus1
    w.write_bit(1)  # vps_temporal_id_nesting_flag
    w.write_nbits(16, 0xFFFF)
    write_profile_tier_level(w)
    w.write_bit(1)  # vps_sub_layer_ordering_info_present_flag
    w.write_uint(4)  # vps_max_dec_pic_buffering_minus1
    w.write_uint(0)  # vps_max_num_reorder_pics
    w.write_uint(0)  # vps_max_latency_increase_plus1
    w.write_nbits(6, 0)  # vps_max_layer_id
    w.write_uint(0)  # vps_num_layer_sets_minus1
    w.write_bit(0)  # vps_timing_info_present_flag
    if extension_data is None:
        w.write_bit(0)
    else:
        w.write_bit(1)
        w.write_bitarray(extension_data)


def write_hrd_parameters(w, bit_rate_value_minus1=1000, cpb_size_value_minus1=2000):
    """NAL HRD parameters for a single sub-layer with one CPB."""
    w.write_bit(1)  # nal_hrd_parameters_present_flag
    w.write_bit(0)  # vcl_hrd_parameters_present_flag
    w.write_bit(0)  # sub_pic_hrd_params_present_flag
    w.write_nbits(4, 0)  # bit_rate_scale
    w.write_nbits(4, 0)  # cpb_size_scale
    w.write_nbits(5, 23)  # initial_cpb_removal_delay_length_minus1
    w.write_nbits(5, 23)  # au_cpb_removal_delay_length_minus1
    w.write_nbits(5, 23)  # dpb_output_delay_length_minus1

    w.write_bit(1)  # fixed_pic_rate_general_flag
    w.write_uint(0)  # elemental_duration_in_tc_minus1
    w.write_uint(0)  # cpb_cnt_minus1
    w.write_uint(bit_rate_value_minus1)
    w.write_uint(cpb_size_value_minus1)
    w.write_bit(0)  # cbr_flag


def write_vui_parameters(w, frame_field_info=True, hrd=False):
    w.write_bit(0)  # aspect_ratio_info_present_flag
    w.write_bit(0)  # overscan_info_present_flag
    w.write_bit(0)  # video_signal_type_present_flag
    w.write_bit(0)  # chroma_loc_info_present_flag
    w.write_bit(0)  # neutral_chroma_indication_flag
    w.write_bit(0)  # field_seq_flag
    w.write_bit(frame_field_info)
    w.write_bit(0)  # default_display_window_flag
    w.write_bit(hrd)  # vui_timing_info_present_flag
    if hrd:
        w.write_nbits(32, 1001)
        w.write_nbits(32, 60000)
        w.write_bit(0)  # vui_poc_proportional_to_timing_flag
        w.write_bit(1)  # vui_hrd_parameters_present_flag
        write_hrd_parameters(w)
    w.write_bit(0)  # bitstream_restriction_flag


def write_st_ref_pic_set(w, st_rps_idx, delta_pocs=(-1,)):
    """An explicitly coded set of negative deltas, all used by the picture."""
    if st_rps_idx != 0:
        w.write_bit(0)  # inter_ref_pic_set_prediction_flag
    w.write_uint(len(delta_pocs))
    w.write_uint(0)
    poc = 0
    for delta_poc in delta_pocs:
        w.write_uint(poc - delta_poc - 1)
        w.write_bit(1)
        poc = delta_poc


def write_sps(
    w,
    sps_id=0,
    vps_id=0,
    chroma_format_idc=1,
    width=64,
    height=64,
    num_short_term_ref_pic_sets=1,
    vui=False,
    frame_field_info=True,
    hrd=False,
    log2_min_luma_coding_block_size_minus3=0,
    log2_diff_max_min_luma_coding_block_size=1,
):
    """
    An 8-bit SPS with 16x16 CTBs and 8-bit picture order count LSBs.
    """
    w.write_nbits(4, vps_id)
    w.write_nbits(3, 0)  # sps_max_sub_layers_minus1
    w.write_bit(1)  # sps_temporal_id_nesting_flag
    write_profile_tier_level(w)
    w.write_uint(sps_id)
    w.write_uint(chroma_format_idc)
    if chroma_format_idc == 3:
        w.write_bit(0)  # separate_colour_plane_flag
    w.write_uint(width)
    w.write_uint(height)
    w.write_bit(0)  # conformance_window_flag
    w.write_uint(0)  # bit_depth_luma_minus8
    w.write_uint(0)  # bit_depth_chroma_minus8
    w.write_uint(4)  # log2_max_pic_order_cnt_lsb_minus4
    w.write_bit(1)  # sps_sub_layer_ordering_info_present_flag
    w.write_uint(4)
    w.write_uint(0)
    w.write_uint(0)
    w.write_uint(log2_min_luma_coding_block_size_minus3)
    w.write_uint(log2_diff_max_min_luma_coding_block_size)
    w.write_uint(0)  # log2_min_luma_transform_block_size_minus2
    w.write_uint(2)  # log2_diff_max_min_luma_transform_block_size
    w.write_uint(0)  # max_transform_hierarchy_depth_inter
    w.write_uint(0)  # max_transform_hierarchy_depth_intra
    w.write_bit(0)  # scaling_list_enabled_flag
    w.write_bit(0)  # amp_enabled_flag
    w.write_bit(1)  # sample_adaptive_offset_enabled_flag
    w.write_bit(0)  # pcm_enabled_flag
    w.write_uint(num_short_term_ref_pic_sets)
    for i in range(num_short_term_ref_pic_sets):
        write_st_ref_pic_set(w, i, delta_pocs=tuple(range(-1, -2 - i, -1)))
    w.write_bit(0)  # long_term_ref_pics_present_flag
    w.write_bit(1)  # sps_temporal_mvp_enabled_flag
    w.write_bit(0)  # strong_intra_smoothing_enabled_flag
    w.write_bit(vui)
    if vui:
        write_vui_parameters(w, frame_field_info=frame_field_info, hrd=hrd)
    w.write_bit(0)  # sps_extension_present_flag


def write_pps(w, pps_id=0, sps_id=0, num_extra_slice_header_bits=0):
    w.write_uint(pps_id)
    w.write_uint(sps_id)
    w.write_bit(0)  # dependent_slice_segments_enabled_flag
    w.write_bit(0)  # output_flag_present_flag
    w.write_nbits(3, num_extra_slice_header_bits)
    w.write_bit(0)  # sign_data_hiding_enabled_flag
    w.write_bit(0)  # cabac_init_present_flag
    w.write_uint(0)  # num_ref_idx_l0_default_active_minus1
    w.write_uint(0)  # num_ref_idx_l1_default_active_minus1
    w.write_sint(0)  # init_qp_minus26
    w.write_bit(0)  # constrained_intra_pred_flag
    w.write_bit(0)  # transform_skip_enabled_flag
    w.write_bit(0)  # cu_qp_delta_enabled_flag
    w.write_sint(0)  # pps_cb_qp_offset
    w.write_sint(0)  # pps_cr_qp_offset
    w.write_bit(0)  # pps_slice_chroma_qp_offsets_present_flag
    w.write_bit(0)  # weighted_pred_flag
    w.write_bit(0)  # weighted_bipred_flag
    w.write_bit(0)  # transquant_bypass_enabled_flag
    w.write_bit(0)  # tiles_enabled_flag
    w.write_bit(0)  # entropy_coding_sync_enabled_flag
    w.write_bit(1)  # pps_loop_filter_across_slices_enabled_flag
    w.write_bit(0)  # deblocking_filter_control_present_flag
    w.write_bit(0)  # pps_scaling_list_data_present_flag
    w.write_bit(0)  # lists_modification_present_flag
    w.write_uint(0)  # log2_parallel_merge_level_minus2
    w.write_bit(0)  # slice_segment_header_extension_present_flag
    w.write_bit(0)  # pps_extension_present_flag


def vps_unit(**kwargs):
    return hevc_nal_unit(NalUnitTypes.VPS_NUT, lambda w: write_vps(w, **kwargs))


def sps_unit(**kwargs):
    return hevc_nal_unit(NalUnitTypes.SPS_NUT, lambda w: write_sps(w, **kwargs))


def pps_unit(**kwargs):
    return hevc_nal_unit(NalUnitTypes.PPS_NUT, lambda w: write_pps(w, **kwargs))


def slice_unit(nal_unit_type=NalUnitTypes.IDR_W_RADL, pps_id=0, poc_lsb=0):
    """
    A first slice segment (slice_type I for IDR pictures, P otherwise) using
    the SPS's first short-term RPS, followed by one byte of slice data.
    """

    def write(w):
        w.write_bit(1)  # first_slice_segment_in_pic_flag
        if NalUnitTypes.BLA_W_LP <= nal_unit_type <= NalUnitTypes.RSV_IRAP_VCL23:
            w.write_bit(0)  # no_output_of_prior_pics_flag
        w.write_uint(pps_id)
        if nal_unit_type in (NalUnitTypes.IDR_W_RADL, NalUnitTypes.IDR_N_LP):
            w.write_uint(2)
        else:
            w.write_uint(1)
            w.write_nbits(8, poc_lsb)
            w.write_bit(1)  # short_term_ref_pic_set_sps_flag
        w.byte_align(1)
        w.write_nbits(8, 0xA5)

    return hevc_nal_unit(nal_unit_type, write, trailing_bits=False)


def sei_payload_bytes(write_payload):
    """Serialise an SEI payload, padding to a whole number of bytes."""
    w = BitstreamWriter()
    write_payload(w)
    w.byte_align()
    return w.flush()


def write_sei_message(w, payload_type, payload):
    for value in (payload_type, len(payload)):
        while value >= 0xFF:
            w.write_nbits(8, 0xFF)
            value -= 0xFF
        w.write_nbits(8, value)
    w.write_bytes(payload)


def sei_unit(*messages, **kwargs):
    """
    An SEI NAL unit containing the given (payload_type, payload_bytes)
    messages.
    """
    nal_unit_type = kwargs.pop("nal_unit_type", NalUnitTypes.PREFIX_SEI_NUT)

    def write(w):
        for payload_type, payload in messages:
            write_sei_message(w, payload_type, payload)

    return hevc_nal_unit(nal_unit_type, write)


def active_parameter_sets_message(vps_id=0, sps_ids=(0,)):
    def write(w):
        w.write_nbits(4, vps_id)
        w.write_bit(0)  # self_contained_cvs_flag
        w.write_bit(0)  # no_parameter_set_update_flag
        w.write_uint(len(sps_ids) - 1)
        for sps_id in sps_ids:
            w.write_uint(sps_id)

    return (SEIPayloadTypes.active_parameter_sets, sei_payload_bytes(write))


def pic_timing_message(pic_struct=1, cpb_delay=None, dpb_delay=None):
    """
    A pic_timing payload for an SPS with frame field info and, if 'cpb_delay'
    is given, NAL HRD parameters (24 bit delays).
    """

    def write(w):
        w.write_nbits(4, pic_struct)
        w.write_nbits(2, 0)  # source_scan_type
        w.write_bit(0)  # duplicate_flag
        if cpb_delay is not None:
            w.write_nbits(24, cpb_delay)
            w.write_nbits(24, dpb_delay)

    return (SEIPayloadTypes.pic_timing, sei_payload_bytes(write))


def buffering_period_message(sps_id=0, initial_cpb_removal_delay=9000):
    """A buffering_period payload for an SPS with NAL HRD parameters."""

    def write(w):
        w.write_uint(sps_id)
        w.write_bit(0)  # irap_cpb_params_present_flag
        w.write_bit(0)  # concatenation_flag
        w.write_nbits(24, 0)  # au_cpb_removal_delay_delta_minus1
        w.write_nbits(24, initial_cpb_removal_delay)
        w.write_nbits(24, 0)  # nal_initial_cpb_removal_offset

    return (SEIPayloadTypes.buffering_period, sei_payload_bytes(write))


def user_data_unregistered_message(uuid=b"\x11" * 16, data=b"hello"):
    return (SEIPayloadTypes.user_data_unregistered, uuid + data)


def decoded_picture_hash_message(crcs=(0x1234, 0x5678, 0x9ABC)):
    def write(w):
        w.write_nbits(8, 1)  # hash_type (CRC)
        for crc in crcs:
            w.write_nbits(16, crc)

    return (SEIPayloadTypes.decoded_picture_hash, sei_payload_bytes(write))


################################################################################
# MPEG-2
################################################################################


def start_code_unit(start_code, write_payload=None):
    """
    Build an MPEG-2 unit: the start code value followed by the byte-aligned
    payload.
    """
    w = BitstreamWriter()
    if write_payload is not None:
        write_payload(w)
    w.byte_align()
    return bytes(bytearray([start_code])) + w.flush()


def annexb_stream(units, zero_byte=False):
    """Join units into a byte stream with start code prefixes."""
    prefix = (b"\x00" if zero_byte else b"") + START_CODE_PREFIX
    return b"".join(prefix + unit for unit in units)


def write_sequence_header(
    w, horizontal_size=720, vertical_size=576, intra_quantiser_matrix=None
):
    """
    'intra_quantiser_matrix', if given, is 64 values in transmission (zigzag)
    order.
    """
    w.write_nbits(12, horizontal_size)
    w.write_nbits(12, vertical_size & 0xFFF)
    w.write_nbits(4, 2)  # aspect_ratio_information
    w.write_nbits(4, 3)  # frame_rate_code
    w.write_nbits(18, 20000)  # bit_rate_value
    w.write_nbits(1, 1)  # marker_bit
    w.write_nbits(10, 112)  # vbv_buffer_size_value
    w.write_bit(0)  # constrained_parameters_flag
    if intra_quantiser_matrix is None:
        w.write_bit(0)
    else:
        w.write_bit(1)
        for value in intra_quantiser_matrix:
            w.write_nbits(8, value)
    w.write_bit(0)  # load_non_intra_quantiser_matrix


def write_sequence_extension(w, profile_and_level_indication=0x48, vertical_size_extension=0):
    w.write_nbits(4, 1)  # extension_start_code_identifier
    w.write_nbits(8, profile_and_level_indication)
    w.write_bit(0)  # progressive_sequence
    w.write_nbits(2, 1)  # chroma_format (4:2:0)
    w.write_nbits(2, 0)  # horizontal_size_extension
    w.write_nbits(2, vertical_size_extension)
    w.write_nbits(12, 0)  # bit_rate_extension
    w.write_nbits(1, 1)  # marker_bit
    w.write_nbits(8, 0)  # vbv_buffer_size_extension
    w.write_bit(0)  # low_delay
    w.write_nbits(2, 0)  # frame_rate_extension_n
    w.write_nbits(5, 0)  # frame_rate_extension_d


def write_group_of_pictures_header(w, hours=1, minutes=2, seconds=3, pictures=4):
    w.write_bit(0)  # drop_frame_flag
    w.write_nbits(5, hours)
    w.write_nbits(6, minutes)
    w.write_nbits(1, 1)  # marker_bit
    w.write_nbits(6, seconds)
    w.write_nbits(6, pictures)
    w.write_bit(1)  # closed_gop
    w.write_bit(0)  # broken_link


def write_picture_header(w, picture_coding_type=1, temporal_reference=0, extra_information=()):
    w.write_nbits(10, temporal_reference)
    w.write_nbits(3, picture_coding_type)
    w.write_nbits(16, 0xFFFF)  # vbv_delay
    if picture_coding_type in (2, 3):
        w.write_bit(0)  # full_pel_forward_vector
        w.write_nbits(3, 7)  # forward_f_code
    if picture_coding_type == 3:
        w.write_bit(0)  # full_pel_backward_vector
        w.write_nbits(3, 7)  # backward_f_code
    for byte in extra_information:
        w.write_bit(1)
        w.write_nbits(8, byte)
    w.write_bit(0)  # extra_bit_picture


def write_slice(w, quantiser_scale_code=8, slice_vertical_position_extension=None, intra_slice=None):
    if slice_vertical_position_extension is not None:
        w.write_nbits(3, slice_vertical_position_extension)
    w.write_nbits(5, quantiser_scale_code)
    if intra_slice is not None:
        w.write_bit(1)  # intra_slice_flag
        w.write_bit(intra_slice)
        w.write_nbits(7, 0)  # reserved_bits
    w.write_bit(0)  # extra_bit_slice
    # Some macroblock data
    w.write_nbits(16, 0xBEEF)


def sequence_header_unit(**kwargs):
    return start_code_unit(
        StartCodes.sequence_header_code, lambda w: write_sequence_header(w, **kwargs)
    )


def sequence_extension_unit(**kwargs):
    return start_code_unit(
        StartCodes.extension_start_code, lambda w: write_sequence_extension(w, **kwargs)
    )


def picture_header_unit(**kwargs):
    return start_code_unit(
        StartCodes.picture_start_code, lambda w: write_picture_header(w, **kwargs)
    )


def slice_start_code_unit(slice_start_code=1, **kwargs):
    return start_code_unit(slice_start_code, lambda w: write_slice(w, **kwargs))
