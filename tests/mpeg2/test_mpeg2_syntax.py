import pytest

from nal_syntax.tables import (
    Codecs,
    ErrorKinds,
    ParameterSetKinds,
    StartCodes,
    DEFAULT_INTRA_QUANTISER_MATRIX,
    DEFAULT_NON_INTRA_QUANTISER_MATRIX,
    ZIGZAG_SCAN,
)

from nal_syntax.registry import ParameterSetKey

from nal_syntax.dispatch import UnparsedPayload

from nal_syntax.annexb import split_annexb

from nal_syntax.parser import Complete, Failed, parse_units

from nal_syntax.mpeg2.fixeddicts import (
    StartCodeUnit,
    SequenceHeader,
    SequenceExtension,
    SequenceDisplayExtension,
    QuantMatrixExtension,
    PictureCodingExtension,
    GroupOfPicturesHeader,
    PictureHeader,
    Slice,
)

from nal_syntax.mpeg2.syntax import zigzag_to_raster

from unit_builders import (
    annexb_stream,
    start_code_unit,
    write_group_of_pictures_header,
    sequence_header_unit,
    sequence_extension_unit,
    picture_header_unit,
    slice_start_code_unit,
)


def parse_payload(session, data):
    result = session.parse_unit(data)
    assert isinstance(result, Complete), result
    assert result.warnings == []
    assert isinstance(result.structure, StartCodeUnit)
    return result.structure["payload"]


def test_zigzag_to_raster():
    raster = zigzag_to_raster(list(range(64)))
    assert raster[0] == 0
    assert raster[1] == 1
    assert raster[8] == 2
    assert raster[16] == 3
    assert raster[2] == 5
    assert raster[63] == 63
    assert sorted(raster) == list(range(64))


class TestSequenceHeader(object):
    def test_fields(self, mpeg2_session):
        header = parse_payload(mpeg2_session, sequence_header_unit())
        assert isinstance(header, SequenceHeader)
        assert header["horizontal_size_value"] == 720
        assert header["vertical_size_value"] == 576
        assert header["aspect_ratio_information"] == 2
        assert header["frame_rate_code"] == 3
        assert header["bit_rate_value"] == 20000
        assert header["marker_bit"] == 1
        assert header["vbv_buffer_size_value"] == 112
        assert header["constrained_parameters_flag"] is False

        # Default matrices are used when none are loaded
        assert header["load_intra_quantiser_matrix"] is False
        assert "intra_quantiser_matrix" not in header
        assert header["_intra_quantiser_matrix"] == list(DEFAULT_INTRA_QUANTISER_MATRIX)
        assert header["_non_intra_quantiser_matrix"] == list(
            DEFAULT_NON_INTRA_QUANTISER_MATRIX
        )

        assert mpeg2_session.registry.lookup(
            ParameterSetKinds.mpeg2_sequence_header, 0
        ) is header

    def test_loaded_intra_quantiser_matrix(self, mpeg2_session):
        values = list(range(1, 65))
        header = parse_payload(
            mpeg2_session, sequence_header_unit(intra_quantiser_matrix=values)
        )
        assert header["load_intra_quantiser_matrix"] is True
        # As transmitted
        assert header["intra_quantiser_matrix"] == values
        # Raster order
        matrix = header["_intra_quantiser_matrix"]
        assert all(matrix[ZIGZAG_SCAN[i]] == values[i] for i in range(64))
        assert header["load_non_intra_quantiser_matrix"] is False

    def test_truncated(self, mpeg2_session):
        result = mpeg2_session.parse_unit(sequence_header_unit()[:4])
        assert isinstance(result, Failed)
        assert result.error_kind == ErrorKinds.insufficient_data
        assert result.structure["payload"]["horizontal_size_value"] == 720
        assert len(mpeg2_session.registry) == 0


class TestExtensions(object):
    def test_sequence_extension(self, mpeg2_session):
        extension = parse_payload(
            mpeg2_session, sequence_extension_unit(profile_and_level_indication=0x48)
        )
        assert isinstance(extension, SequenceExtension)
        assert extension["extension_start_code_identifier"] == 1
        assert extension["profile_and_level_indication"] == 0x48
        assert extension["chroma_format"] == 1
        assert extension["progressive_sequence"] is False
        # Main profile at Main level
        assert extension["_profile_identification"] == 4
        assert extension["_level_identification"] == 8

        assert mpeg2_session.registry.contains(
            ParameterSetKey(ParameterSetKinds.mpeg2_sequence_extension, 0)
        )

    def test_escape_bit_excluded(self, mpeg2_session):
        extension = parse_payload(
            mpeg2_session, sequence_extension_unit(profile_and_level_indication=0x85)
        )
        assert extension["_profile_identification"] == 0
        assert extension["_level_identification"] == 5

    def test_sequence_display_extension(self, mpeg2_session):
        def write(w):
            w.write_nbits(4, 2)  # extension_start_code_identifier
            w.write_nbits(3, 5)  # video_format
            w.write_bit(1)  # colour_description
            w.write_nbits(8, 1)
            w.write_nbits(8, 1)
            w.write_nbits(8, 1)
            w.write_nbits(14, 720)
            w.write_nbits(1, 1)
            w.write_nbits(14, 576)

        extension = parse_payload(
            mpeg2_session, start_code_unit(StartCodes.extension_start_code, write)
        )
        assert isinstance(extension, SequenceDisplayExtension)
        assert extension["video_format"] == 5
        assert extension["colour_primaries"] == 1
        assert extension["matrix_coefficients"] == 1
        assert extension["display_horizontal_size"] == 720
        assert extension["display_vertical_size"] == 576

        # Not a parameter set
        assert len(mpeg2_session.registry) == 0

    def test_quant_matrix_extension(self, mpeg2_session):
        def write(w):
            w.write_nbits(4, 3)  # extension_start_code_identifier
            w.write_bit(1)  # load_intra_quantiser_matrix
            for i in range(64):
                w.write_nbits(8, 16)
            w.write_bit(0)
            w.write_bit(0)
            w.write_bit(0)

        extension = parse_payload(
            mpeg2_session, start_code_unit(StartCodes.extension_start_code, write)
        )
        assert isinstance(extension, QuantMatrixExtension)
        assert extension["intra_quantiser_matrix"] == [16] * 64
        assert extension["load_non_intra_quantiser_matrix"] is False
        assert "non_intra_quantiser_matrix" not in extension
        assert extension["load_chroma_non_intra_quantiser_matrix"] is False

    def test_picture_coding_extension(self, mpeg2_session):
        def write(w):
            w.write_nbits(4, 8)  # extension_start_code_identifier
            for f_code in [1, 2, 15, 15]:
                w.write_nbits(4, f_code)
            w.write_nbits(2, 2)  # intra_dc_precision
            w.write_nbits(2, 3)  # picture_structure (frame)
            w.write_bitarray("100100001")
            w.write_bit(0)  # composite_display_flag

        extension = parse_payload(
            mpeg2_session, start_code_unit(StartCodes.extension_start_code, write)
        )
        assert isinstance(extension, PictureCodingExtension)
        assert extension["f_code_forward_horizontal"] == 1
        assert extension["f_code_forward_vertical"] == 2
        assert extension["f_code_backward_horizontal"] == 15
        assert extension["intra_dc_precision"] == 2
        assert extension["picture_structure"] == 3
        assert extension["top_field_first"] is True
        assert extension["q_scale_type"] is True
        assert extension["progressive_frame"] is True
        assert extension["composite_display_flag"] is False
        assert "v_axis" not in extension

    def test_unparsed_extension(self, mpeg2_session):
        # Copyright extension
        extension = parse_payload(mpeg2_session, b"\xB5\x41\x23")
        assert isinstance(extension, UnparsedPayload)
        assert extension["payload_bytes"] == b"\x41\x23"


class TestPictureLayer(object):
    def test_group_of_pictures_header(self, mpeg2_session):
        header = parse_payload(
            mpeg2_session,
            start_code_unit(StartCodes.group_start_code, write_group_of_pictures_header),
        )
        assert isinstance(header, GroupOfPicturesHeader)
        assert header["drop_frame_flag"] is False
        assert header["time_code_hours"] == 1
        assert header["time_code_minutes"] == 2
        assert header["time_code_seconds"] == 3
        assert header["time_code_pictures"] == 4
        assert header["closed_gop"] is True
        assert header["broken_link"] is False

    def test_intra_picture(self, mpeg2_session):
        header = parse_payload(mpeg2_session, picture_header_unit(temporal_reference=9))
        assert isinstance(header, PictureHeader)
        assert header["temporal_reference"] == 9
        assert header["picture_coding_type"] == 1
        assert header["vbv_delay"] == 0xFFFF
        assert "forward_f_code" not in header
        assert header["extra_bit_picture"] == [0]
        assert header["extra_information_picture"] == []

    @pytest.mark.parametrize(
        "picture_coding_type,forward,backward", [(2, True, False), (3, True, True)]
    )
    def test_predicted_pictures(
        self, mpeg2_session, picture_coding_type, forward, backward
    ):
        header = parse_payload(
            mpeg2_session, picture_header_unit(picture_coding_type=picture_coding_type)
        )
        assert ("forward_f_code" in header) is forward
        assert ("backward_f_code" in header) is backward
        if forward:
            assert header["forward_f_code"] == 7
            assert header["full_pel_forward_vector"] is False

    def test_extra_information(self, mpeg2_session):
        header = parse_payload(
            mpeg2_session, picture_header_unit(extra_information=(0x12, 0x34))
        )
        assert header["extra_bit_picture"] == [1, 1, 0]
        assert header["extra_information_picture"] == [0x12, 0x34]


class TestSlice(object):
    def test_slice(self, mpeg2_session):
        mpeg2_session.parse_unit(sequence_header_unit())
        header = parse_payload(mpeg2_session, slice_start_code_unit(0x20))
        assert isinstance(header, Slice)
        assert header["_slice_vertical_position"] == 0x20
        assert "slice_vertical_position_extension" not in header
        assert header["quantiser_scale_code"] == 8
        assert "intra_slice_flag" not in header
        assert header["extra_bit_slice"] == [0]
        # Macroblock data and stuffing
        assert header["_unparsed_bits"] == 18

    def test_intra_slice(self, mpeg2_session):
        mpeg2_session.parse_unit(sequence_header_unit())
        header = parse_payload(mpeg2_session, slice_start_code_unit(intra_slice=True))
        assert header["intra_slice_flag"] is True
        assert header["intra_slice"] is True
        assert header["reserved_bits"] == 0
        assert header["extra_bit_slice"] == [0]
        assert header["_unparsed_bits"] == 17

    def test_large_picture_vertical_position(self, mpeg2_session):
        mpeg2_session.parse_unit(sequence_header_unit(vertical_size=3000))
        header = parse_payload(
            mpeg2_session,
            slice_start_code_unit(0x10, slice_vertical_position_extension=2),
        )
        assert header["slice_vertical_position_extension"] == 2
        assert header["_slice_vertical_position"] == 0x10 + (2 << 7)
        assert header["quantiser_scale_code"] == 8

    def test_vertical_size_extension(self, mpeg2_session):
        mpeg2_session.parse_unit(sequence_header_unit(vertical_size=576))
        mpeg2_session.parse_unit(sequence_extension_unit(vertical_size_extension=1))
        header = parse_payload(
            mpeg2_session,
            slice_start_code_unit(0x01, slice_vertical_position_extension=1),
        )
        assert header["_slice_vertical_position"] == 0x81


class TestOtherUnits(object):
    def test_user_data(self, mpeg2_session):
        payload = parse_payload(mpeg2_session, b"\xB2hello")
        assert payload["user_data"] == b"hello"

    def test_sequence_end(self, mpeg2_session):
        assert parse_payload(mpeg2_session, b"\xB7") == {}


def test_byte_stream():
    units = [
        sequence_header_unit(),
        start_code_unit(StartCodes.group_start_code, write_group_of_pictures_header),
        picture_header_unit(),
        slice_start_code_unit(1),
        slice_start_code_unit(2),
    ]
    assert split_annexb(annexb_stream(units), Codecs.mpeg2) == units

    # Zero bytes before each start code stay with the preceding unit as stuffing
    data = annexb_stream(units, zero_byte=True)
    assert split_annexb(data, Codecs.mpeg2)[:-1] == [unit + b"\x00" for unit in units[:-1]]

    results = list(parse_units(split_annexb(data, Codecs.mpeg2), Codecs.mpeg2))
    assert all(isinstance(result, Complete) for result in results)
    assert all(result.warnings == [] for result in results)
    assert [result.structure["start_code"] for result in results] == [
        StartCodes.sequence_header_code,
        StartCodes.group_start_code,
        StartCodes.picture_start_code,
        1,
        2,
    ]
    assert [
        result.structure["payload"].get("_slice_vertical_position")
        for result in results[3:]
    ] == [1, 2]
