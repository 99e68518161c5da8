import pytest

from nal_syntax.bitstream import LogEntry, DiagnosticLog, format_log


class TestDiagnosticLog(object):
    @pytest.fixture
    def log(self):
        log = DiagnosticLog()
        log.add_value("forbidden_zero_bit", 0, 0, 1)
        log.enter("payload", 16)
        log.add_value("sps_video_parameter_set_id", 0, 16, 20)
        log.enter("profile_tier_level", 24)
        log.add_value("general_profile_space", 0, 24, 26)
        return log

    def test_depth(self, log):
        assert log.depth == 2
        log.leave(26)
        assert log.depth == 1

    def test_leave_builds_tree(self, log):
        log.leave(120)
        log.leave(121)
        assert log.depth == 0
        assert log.snapshot() == (
            LogEntry("forbidden_zero_bit", 0, 0, 1, 0, ()),
            LogEntry(
                "payload",
                None,
                16,
                121,
                0,
                (
                    LogEntry("sps_video_parameter_set_id", 0, 16, 20, 1, ()),
                    LogEntry(
                        "profile_tier_level",
                        None,
                        24,
                        120,
                        1,
                        (LogEntry("general_profile_space", 0, 24, 26, 2, ()),),
                    ),
                ),
            ),
        )

    def test_snapshot_closes_open_nodes(self, log):
        entries = log.snapshot(26)
        assert len(entries) == 2
        payload = entries[1]
        assert payload.name == "payload"
        assert payload.end == 26
        assert payload.children[-1].name == "profile_tier_level"
        assert payload.children[-1].end == 26
        assert payload.children[-1].children[0].name == "general_profile_space"

        # The log itself is unchanged
        assert log.depth == 2

    def test_leave_without_enter(self):
        with pytest.raises(Exception):
            DiagnosticLog().leave(0)


def test_format_log():
    entries = (
        LogEntry("forbidden_zero_bit", 0, 0, 1, 0, ()),
        LogEntry(
            "payload",
            None,
            16,
            24,
            0,
            (LogEntry("pic_type", 2, 16, 19, 1, ()),),
        ),
    )
    assert format_log(entries) == (
        "     0.0  forbidden_zero_bit: 0 (1 bit)\n"
        "     2.0  payload:\n"
        "       2.0  pic_type: 2 (3 bits)"
    )
