"""
HEVC supplemental enhancement information (SEI) syntax (7.3.2.4, 7.3.5 and
Annex D).

An SEI NAL unit contains one or more SEI messages, each of which declares its
payload type and size. Each payload is parsed within a bounded block of its
declared size by the routine registered for its type with
:py:func:`sei_payload` (or read as raw data if no routine is registered).

SEI payload routines take the same arguments as unit payload routines (see
:py:mod:`nal_syntax.dispatch`) plus the declared payload size in bytes. A
payload which needs a parameter set which is not yet available returns
:py:func:`~nal_syntax.dispatch.needs_reparse`; the remainder of its bytes is
skipped and the following messages are still parsed so that all of the
unit's missing references are collected before it is deferred.
"""

import logging

from nal_syntax.exceptions import UnresolvedReference

from nal_syntax.registry import ANY_ID, ParameterSetKey

from nal_syntax.dispatch import (
    SUCCESS,
    ParseStatus,
    needs_reparse,
    require_parameter_set,
    unit_handler,
    unparsed_payload,
)

from nal_syntax.bitstream.serdes import context_type

from nal_syntax.tables import (
    Codecs,
    NalUnitTypes,
    ParameterSetKinds,
    SEIPayloadTypes,
    HEVC_MAX_SPS_ID,
)

from nal_syntax.hevc.syntax import (
    HRD_COMMON_INFO_DEFAULTS,
    check_range,
    hrd_cpb_cnt,
    pic_size_in_ctbs_y,
)

from nal_syntax.hevc.fixeddicts import (
    SeiRbsp,
    SeiMessage,
    BufferingPeriod,
    PicTiming,
    UserDataRegisteredItuTT35,
    UserDataUnregistered,
    RecoveryPoint,
    ActiveParameterSets,
    DecodedPictureHash,
    MasteringDisplayColourVolume,
    ContentLightLevelInfo,
    AlternativeTransferCharacteristics,
)

__all__ = [
    "SEI_PAYLOAD_HANDLERS",
    "sei_payload",
    "sei_rbsp",
    "sei_message",
    "buffering_period",
    "pic_timing",
    "user_data_registered_itu_t_t35",
    "user_data_unregistered",
    "recovery_point",
    "active_parameter_sets",
    "decoded_picture_hash",
    "mastering_display_colour_volume",
    "content_light_level_info",
    "alternative_transfer_characteristics",
]


SEI_PAYLOAD_HANDLERS = {}
"""
The registered SEI payload routines ``{payload_type: function, ...}``.
"""


def sei_payload(payload_type):
    """
    Decorator which registers an SEI payload routine for the given payload
    type. Returns the original function.
    """

    def decorator(f):
        SEI_PAYLOAD_HANDLERS[int(payload_type)] = f
        return f

    return decorator


def _hrd_of(sps):
    """The HRD parameters of an SPS's VUI, or None."""
    return sps.get("vui_parameters", {}).get("hrd_parameters")


def _active_sps(registry, reparse, associated):
    """
    Look up the active SPS (see
    :py:func:`~nal_syntax.dispatch.require_parameter_set`). If no SPS has
    been activated yet the missing key has the id
    :py:data:`~nal_syntax.registry.ANY_ID`.
    """
    sps_id = associated.get(ParameterSetKinds.sequence_parameter_set)
    if sps_id is None:
        key = ParameterSetKey(ParameterSetKinds.sequence_parameter_set, ANY_ID)
        if reparse:
            raise UnresolvedReference([key])
        return (None, key)
    return require_parameter_set(
        registry, reparse, ParameterSetKinds.sequence_parameter_set, sps_id
    )


################################################################################
# SEI RBSP and message framing
################################################################################


def _ff_coded_value(serdes, ff_target, last_target):
    """
    Read a value coded as a run of 0xFF bytes followed by a final byte (as
    used for payloadType and payloadSize).
    """
    value = 0
    serdes.declare_list(ff_target)
    while serdes.next_bits(8) == 0xFF:
        value += serdes.nbits(ff_target, 8)
    value += serdes.nbits(last_target, 8)
    return value


@context_type(SeiMessage)
def sei_message(serdes, reparse, registry, associated):
    """
    (7.3.5) Returns the :py:class:`~nal_syntax.dispatch.ParseResult` of the
    payload.
    """
    payload_type = _ff_coded_value(
        serdes, "ff_payload_type_byte", "last_payload_type_byte"
    )
    payload_size = _ff_coded_value(
        serdes, "ff_payload_size_byte", "last_payload_size_byte"
    )
    serdes.computed_value("_payload_type", payload_type)
    serdes.computed_value("_payload_size", payload_size)

    parse = SEI_PAYLOAD_HANDLERS.get(payload_type)

    serdes.bounded_block_begin(payload_size * 8)
    with serdes.subcontext("payload"):
        if parse is None:
            result = unparsed_payload(serdes, reparse, registry, associated)
        else:
            result = parse(serdes, reparse, registry, associated, payload_size)

    if result.status == ParseStatus.needs_reparse:
        logging.debug(
            "Deferring SEI payload type %d (missing %s)",
            payload_type,
            ", ".join(str(key) for key in result.missing_references),
        )
        serdes.bounded_block_end("deferred_payload_data")
    else:
        serdes.bounded_block_end("remaining_payload_data")

    return result


@unit_handler(Codecs.hevc, [NalUnitTypes.PREFIX_SEI_NUT, NalUnitTypes.SUFFIX_SEI_NUT])
@context_type(SeiRbsp)
def sei_rbsp(serdes, reparse, registry, associated):
    """
    (7.3.2.4) Parses every message. The missing references of all deferred
    messages are collected and returned together.
    """
    # An active_parameter_sets message affects the messages after it
    associated = dict(associated)

    missing = []
    serdes.declare_list("sei_message")
    while True:
        with serdes.subcontext("sei_message"):
            result = sei_message(serdes, reparse, registry, associated)
            message = serdes.cur_context

        if result.status == ParseStatus.needs_reparse:
            for key in result.missing_references:
                if key not in missing:
                    missing.append(key)
        elif message["_payload_type"] == SEIPayloadTypes.active_parameter_sets:
            sps_id = message["payload"]["active_seq_parameter_set_id"][0]
            associated[ParameterSetKinds.sequence_parameter_set] = sps_id
            serdes.computed_value("_activated_sps_id", sps_id)

        if not serdes.more_rbsp_data():
            break

    if missing:
        return needs_reparse(*missing)
    return SUCCESS


################################################################################
# SEI payloads
################################################################################


@sei_payload(SEIPayloadTypes.buffering_period)
@context_type(BufferingPeriod)
def buffering_period(serdes, reparse, registry, associated, payload_size):
    """(D.2.2) Requires the SPS named by ``bp_seq_parameter_set_id``."""
    sps_id = check_range(
        "bp_seq_parameter_set_id",
        serdes.uint("bp_seq_parameter_set_id"),
        HEVC_MAX_SPS_ID,
    )
    sps, missing = require_parameter_set(
        registry, reparse, ParameterSetKinds.sequence_parameter_set, sps_id
    )
    if missing is not None:
        return needs_reparse(missing)

    hrd = _hrd_of(sps)
    if hrd is None:
        common = HRD_COMMON_INFO_DEFAULTS
        cpb_cnt = 1
    else:
        common = hrd["_common_info"]
        cpb_cnt = hrd_cpb_cnt(hrd, sps["sps_max_sub_layers_minus1"])

    sub_pic = common["sub_pic_hrd_params_present_flag"]
    irap_cpb_params_present_flag = False
    if not sub_pic:
        irap_cpb_params_present_flag = serdes.bool("irap_cpb_params_present_flag")
    if irap_cpb_params_present_flag:
        serdes.nbits("cpb_delay_offset", common["au_cpb_removal_delay_length_minus1"] + 1)
        serdes.nbits("dpb_delay_offset", common["dpb_output_delay_length_minus1"] + 1)
    serdes.bool("concatenation_flag")
    serdes.nbits(
        "au_cpb_removal_delay_delta_minus1",
        common["au_cpb_removal_delay_length_minus1"] + 1,
    )

    length = common["initial_cpb_removal_delay_length_minus1"] + 1
    for prefix, present in [
        ("nal_", common["nal_hrd_parameters_present_flag"]),
        ("vcl_", common["vcl_hrd_parameters_present_flag"]),
    ]:
        if not present:
            continue
        serdes.declare_list(prefix + "initial_cpb_removal_delay")
        serdes.declare_list(prefix + "initial_cpb_removal_offset")
        serdes.declare_list(prefix + "initial_alt_cpb_removal_delay")
        serdes.declare_list(prefix + "initial_alt_cpb_removal_offset")
        for i in range(cpb_cnt):
            serdes.nbits(prefix + "initial_cpb_removal_delay", length)
            serdes.nbits(prefix + "initial_cpb_removal_offset", length)
            if sub_pic or irap_cpb_params_present_flag:
                serdes.nbits(prefix + "initial_alt_cpb_removal_delay", length)
                serdes.nbits(prefix + "initial_alt_cpb_removal_offset", length)

    return SUCCESS


@sei_payload(SEIPayloadTypes.pic_timing)
@context_type(PicTiming)
def pic_timing(serdes, reparse, registry, associated, payload_size):
    """(D.2.3) Requires the active SPS."""
    sps, missing = _active_sps(registry, reparse, associated)
    if missing is not None:
        return needs_reparse(missing)

    vui = sps.get("vui_parameters", {})
    if vui.get("frame_field_info_present_flag", False):
        serdes.nbits("pic_struct", 4)
        serdes.nbits("source_scan_type", 2)
        serdes.bool("duplicate_flag")

    hrd = _hrd_of(sps)
    if hrd is None:
        return SUCCESS
    common = hrd["_common_info"]

    if (
        common["nal_hrd_parameters_present_flag"]
        or common["vcl_hrd_parameters_present_flag"]
    ):
        serdes.nbits(
            "au_cpb_removal_delay_minus1",
            common["au_cpb_removal_delay_length_minus1"] + 1,
        )
        serdes.nbits(
            "pic_dpb_output_delay", common["dpb_output_delay_length_minus1"] + 1
        )
        if common["sub_pic_hrd_params_present_flag"]:
            serdes.nbits(
                "pic_dpb_output_du_delay",
                common["dpb_output_delay_du_length_minus1"] + 1,
            )
        if (
            common["sub_pic_hrd_params_present_flag"]
            and common["sub_pic_cpb_params_in_pic_timing_sei_flag"]
        ):
            num_decoding_units_minus1 = check_range(
                "num_decoding_units_minus1",
                serdes.uint("num_decoding_units_minus1"),
                pic_size_in_ctbs_y(sps) - 1,
            )
            increment_length = common["du_cpb_removal_delay_increment_length_minus1"] + 1
            du_common_cpb_removal_delay_flag = serdes.bool(
                "du_common_cpb_removal_delay_flag"
            )
            if du_common_cpb_removal_delay_flag:
                serdes.nbits(
                    "du_common_cpb_removal_delay_increment_minus1", increment_length
                )
            serdes.declare_list("num_nalus_in_du_minus1")
            serdes.declare_list("du_cpb_removal_delay_increment_minus1")
            for i in range(num_decoding_units_minus1 + 1):
                serdes.uint("num_nalus_in_du_minus1")
                if not du_common_cpb_removal_delay_flag and i < num_decoding_units_minus1:
                    serdes.nbits("du_cpb_removal_delay_increment_minus1", increment_length)

    return SUCCESS


@sei_payload(SEIPayloadTypes.user_data_registered_itu_t_t35)
@context_type(UserDataRegisteredItuTT35)
def user_data_registered_itu_t_t35(serdes, reparse, registry, associated, payload_size):
    """(D.2.5)"""
    i = 1
    if serdes.nbits("itu_t_t35_country_code", 8) == 0xFF:
        serdes.nbits("itu_t_t35_country_code_extension_byte", 8)
        i = 2
    serdes.bytes("itu_t_t35_payload_byte", max(0, payload_size - i))
    return SUCCESS


@sei_payload(SEIPayloadTypes.user_data_unregistered)
@context_type(UserDataUnregistered)
def user_data_unregistered(serdes, reparse, registry, associated, payload_size):
    """(D.2.6)"""
    serdes.bytes("uuid_iso_iec_11578", 16)
    serdes.bytes("user_data_payload_byte", max(0, payload_size - 16))
    return SUCCESS


@sei_payload(SEIPayloadTypes.recovery_point)
@context_type(RecoveryPoint)
def recovery_point(serdes, reparse, registry, associated, payload_size):
    """(D.2.8)"""
    serdes.sint("recovery_poc_cnt")
    serdes.bool("exact_match_flag")
    serdes.bool("broken_link_flag")
    return SUCCESS


@sei_payload(SEIPayloadTypes.active_parameter_sets)
@context_type(ActiveParameterSets)
def active_parameter_sets(serdes, reparse, registry, associated, payload_size):
    """
    (D.2.21) Requires the VPS named by ``active_video_parameter_set_id``
    (to determine the number of layers) and every listed SPS.
    """
    vps_id = serdes.nbits("active_video_parameter_set_id", 4)
    serdes.bool("self_contained_cvs_flag")
    serdes.bool("no_parameter_set_update_flag")
    num_sps_ids_minus1 = check_range(
        "num_sps_ids_minus1", serdes.uint("num_sps_ids_minus1"), HEVC_MAX_SPS_ID
    )
    serdes.declare_list("active_seq_parameter_set_id")
    sps_ids = []
    for i in range(num_sps_ids_minus1 + 1):
        sps_ids.append(
            check_range(
                "active_seq_parameter_set_id",
                serdes.uint("active_seq_parameter_set_id"),
                HEVC_MAX_SPS_ID,
            )
        )

    missing = []
    vps_key = ParameterSetKey(ParameterSetKinds.video_parameter_set, vps_id)
    vps = registry.lookup(*vps_key)
    if vps is None:
        missing.append(vps_key)
    for sps_id in sps_ids:
        sps_key = ParameterSetKey(ParameterSetKinds.sequence_parameter_set, sps_id)
        if not registry.contains(sps_key) and sps_key not in missing:
            missing.append(sps_key)
    if missing:
        if reparse:
            raise UnresolvedReference(missing)
        return needs_reparse(*missing)

    serdes.declare_list("layer_sps_idx")
    max_layers_minus1 = min(62, vps["vps_max_layers_minus1"])
    first = 1 if vps["vps_base_layer_internal_flag"] else 0
    for i in range(first, max_layers_minus1 + 1):
        serdes.uint("layer_sps_idx")

    return SUCCESS


@sei_payload(SEIPayloadTypes.decoded_picture_hash)
@context_type(DecodedPictureHash)
def decoded_picture_hash(serdes, reparse, registry, associated, payload_size):
    """
    (D.2.20) Requires the active SPS (for its ``chroma_format_idc``). Hash
    types other than MD5 (0), CRC (1) and checksum (2) are left unparsed.
    """
    hash_type = serdes.nbits("hash_type", 8)
    if hash_type > 2:
        return SUCCESS

    sps, missing = _active_sps(registry, reparse, associated)
    if missing is not None:
        return needs_reparse(missing)

    serdes.declare_list("picture_md5")
    serdes.declare_list("picture_crc")
    serdes.declare_list("picture_checksum")
    for c_idx in range(1 if sps["chroma_format_idc"] == 0 else 3):
        if hash_type == 0:
            serdes.bytes("picture_md5", 16)
        elif hash_type == 1:
            serdes.nbits("picture_crc", 16)
        else:
            serdes.nbits("picture_checksum", 32)

    return SUCCESS


@sei_payload(SEIPayloadTypes.mastering_display_colour_volume)
@context_type(MasteringDisplayColourVolume)
def mastering_display_colour_volume(
    serdes, reparse, registry, associated, payload_size
):
    """(D.2.28)"""
    serdes.declare_list("display_primaries_x")
    serdes.declare_list("display_primaries_y")
    for c in range(3):
        serdes.nbits("display_primaries_x", 16)
        serdes.nbits("display_primaries_y", 16)
    serdes.nbits("white_point_x", 16)
    serdes.nbits("white_point_y", 16)
    serdes.nbits("max_display_mastering_luminance", 32)
    serdes.nbits("min_display_mastering_luminance", 32)
    return SUCCESS


@sei_payload(SEIPayloadTypes.content_light_level_info)
@context_type(ContentLightLevelInfo)
def content_light_level_info(serdes, reparse, registry, associated, payload_size):
    """(D.2.35)"""
    serdes.nbits("max_content_light_level", 16)
    serdes.nbits("max_pic_average_light_level", 16)
    return SUCCESS


@sei_payload(SEIPayloadTypes.alternative_transfer_characteristics)
@context_type(AlternativeTransferCharacteristics)
def alternative_transfer_characteristics(
    serdes, reparse, registry, associated, payload_size
):
    """(D.2.38)"""
    serdes.nbits("preferred_transfer_characteristics", 8)
    return SUCCESS
