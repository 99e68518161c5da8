import pytest

from bitarray import bitarray

from nal_syntax.exceptions import InsufficientData

from nal_syntax.fixeddict import fixeddict, Entry

from nal_syntax.bitstream import BitstreamReader, DiagnosticLog, LogEntry

from nal_syntax.bitstream import exceptions

from nal_syntax.bitstream.serdes import Deserialiser, context_type


def make_serdes(data=b"", context=None, log=None):
    return Deserialiser(BitstreamReader(data), context, log)


class TestDeserialiser(object):
    def test_constructor(self):
        r = BitstreamReader(b"")

        # Auto-create context
        serdes = Deserialiser(r)
        assert serdes.io is r
        assert serdes.cur_context == {}
        assert serdes.log is None

        # Use context if provided
        context = {}
        serdes = Deserialiser(r, context)
        assert serdes.cur_context is context

    def test_primitive_reads(self):
        # 1 | 0101 | 011 | 00100
        serdes = make_serdes(b"\xAB\x20")
        assert serdes.bool("flag") is True
        assert serdes.nbits("four", 4) == 0x5
        assert serdes.uint("ue") == 2
        assert serdes.sint("se") == 2
        assert serdes.context == {"flag": True, "four": 0x5, "ue": 2, "se": 2}

    def test_bytes_and_bitarray(self):
        serdes = make_serdes(b"\xAB\xCD\xEF")
        assert serdes.bytes("b", 2) == b"\xAB\xCD"
        assert serdes.bitarray("bits", 4) == bitarray("1110")
        assert serdes.byte_align("align") == bitarray("1111")
        assert serdes.bits_remaining() == 0

    def test_failed_read_stores_nothing(self):
        serdes = make_serdes(b"\xFF")
        with pytest.raises(InsufficientData):
            serdes.nbits("too_long", 9)
        assert "too_long" not in serdes.context

    def test_reused_target(self):
        serdes = make_serdes(b"\xFF")
        serdes.bool("flag")
        with pytest.raises(exceptions.ReusedTargetError, match=r"dict\['flag'\]"):
            serdes.bool("flag")

    def test_declare_list(self):
        serdes = make_serdes(b"\xA0")
        serdes.declare_list("values")
        serdes.bool("values")
        serdes.bool("values")
        serdes.bool("values")
        assert serdes.context == {"values": [True, False, True]}

        # Declaring something already declared or used should fail
        with pytest.raises(exceptions.ReusedTargetError, match=r"dict\['values'\]"):
            serdes.declare_list("values")
        serdes.bool("flag")
        with pytest.raises(exceptions.ReusedTargetError, match=r"dict\['flag'\]"):
            serdes.declare_list("flag")

    def test_computed_value(self):
        serdes = make_serdes()
        serdes.computed_value("_derived", 123)
        serdes.computed_value("_derived", 321)
        assert serdes.context == {"_derived": 321}

    def test_next_bits_and_more_rbsp_data(self):
        serdes = make_serdes(b"\xA5\x80")
        assert serdes.next_bits(4) == 0xA
        assert serdes.next_bits(17) is None
        assert serdes.io.tell() == 0
        assert serdes.more_rbsp_data()
        serdes.nbits("byte", 8)
        assert not serdes.more_rbsp_data()

    def test_extension_data(self):
        serdes = make_serdes(b"\xC0")
        serdes.bool("extension_flag")
        assert serdes.extension_data("extension_data") == bitarray("")
        assert serdes.io.tell() == 1

        serdes = make_serdes(b"\x5A\x80")
        assert serdes.extension_data("extension_data") == bitarray("01011010")

    def test_bounded_block_unused_bits(self):
        serdes = make_serdes(b"\xFF\x00")
        serdes.bounded_block_begin(12)
        assert serdes.bits_remaining() == 12
        serdes.nbits("used", 3)
        assert serdes.bounded_block_end("unused") == bitarray("111110000")
        assert serdes.bits_remaining() == 4

    def test_bounded_block_all_bits_used(self):
        serdes = make_serdes(b"\xFF\x00")
        serdes.bounded_block_begin(8)
        serdes.nbits("used", 8)
        serdes.bounded_block_end("unused")
        assert serdes.context == {"used": 0xFF, "unused": bitarray()}

    def test_subcontext_non_list(self):
        serdes = make_serdes()

        serdes.computed_value("first", 123)

        serdes.subcontext_enter("child_1")
        serdes.computed_value("value", 1234)

        serdes.subcontext_enter("child_2")
        serdes.computed_value("value", 12345)
        serdes.subcontext_leave()

        serdes.subcontext_leave()

        assert serdes.context == {
            "first": 123,
            "child_1": {"value": 1234, "child_2": {"value": 12345}},
        }

    def test_subcontext_list(self):
        serdes = make_serdes(b"\xA0")

        serdes.declare_list("children")
        for i in range(3):
            with serdes.subcontext("children"):
                serdes.bool("flag")

        assert serdes.context == {
            "children": [{"flag": True}, {"flag": False}, {"flag": True}],
        }

    def test_subcontext_left_open_on_exception(self):
        serdes = make_serdes(b"")
        with pytest.raises(InsufficientData):
            with serdes.subcontext("child"):
                serdes.bool("flag")

        assert serdes.path() == ["child"]
        with pytest.raises(exceptions.UnclosedNestedContextError):
            serdes.verify_complete()

        # The top level context is still accessible
        assert serdes.context == {"child": {}}

    def test_verify_complete(self):
        serdes = make_serdes()
        serdes.subcontext_enter("child")
        with pytest.raises(
            exceptions.UnclosedNestedContextError, match=r"dict\['child'\]"
        ):
            serdes.verify_complete()
        serdes.subcontext_leave()
        serdes.verify_complete()

    def test_path(self):
        serdes = make_serdes()
        serdes.declare_list("sub_layers")
        serdes.subcontext_enter("sub_layers")
        serdes.subcontext_leave()
        serdes.subcontext_enter("sub_layers")
        serdes.subcontext_enter("hrd")
        serdes.computed_value("value", 1)

        assert serdes.path() == ["sub_layers", 1, "hrd"]
        assert serdes.path("value") == ["sub_layers", 1, "hrd", "value"]
        assert serdes.describe_path("value") == (
            "dict['sub_layers'][1]['hrd']['value']"
        )


Point = fixeddict("Point", Entry("x"), Entry("y"))


@context_type(Point)
def point(serdes):
    serdes.nbits("x", 4)
    serdes.nbits("y", 4)


class TestContextType(object):
    def test_top_level(self):
        serdes = make_serdes(b"\x12")
        point(serdes)
        assert isinstance(serdes.context, Point)
        assert serdes.context == Point(x=1, y=2)
        assert point.context_type is Point

    def test_nested(self):
        serdes = make_serdes(b"\x12\x34\x56")
        with serdes.subcontext("point"):
            point(serdes)
        serdes.declare_list("points")
        for i in range(2):
            with serdes.subcontext("points"):
                point(serdes)

        assert isinstance(serdes.context["point"], Point)
        assert all(isinstance(p, Point) for p in serdes.context["points"])
        assert serdes.context == {
            "point": Point(x=1, y=2),
            "points": [Point(x=3, y=4), Point(x=5, y=6)],
        }

    def test_describe_path_uses_type_name(self):
        serdes = make_serdes(b"\x12", Point())
        assert serdes.describe_path("x") == "Point['x']"


class TestLogging(object):
    def test_reads_are_logged(self):
        log = DiagnosticLog()
        serdes = make_serdes(b"\xA5\x80", log=log)

        serdes.bool("flag")
        serdes.declare_list("values")
        with serdes.subcontext("child"):
            serdes.nbits("field", 3)
        serdes.nbits("values", 2)
        serdes.nbits("values", 2)

        assert log.snapshot() == (
            LogEntry("flag", True, 0, 1, 0, ()),
            LogEntry("child", None, 1, 4, 0, (LogEntry("field", 2, 1, 4, 1, ()),)),
            LogEntry("values[0]", 1, 4, 6, 0, ()),
            LogEntry("values[1]", 1, 6, 8, 0, ()),
        )

    def test_failed_read_not_logged(self):
        log = DiagnosticLog()
        serdes = make_serdes(b"\xFF", log=log)
        with pytest.raises(InsufficientData):
            serdes.nbits("field", 9)
        assert log.snapshot() == ()
