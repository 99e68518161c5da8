import pytest

from nal_syntax.fixeddict import FixedDictKeyError

from nal_syntax.tables import Codecs, MAX_EXP_GOLOMB_PREFIX_BITS

from nal_syntax.settings import ParserSettings, DEFAULT_SETTINGS, make_settings


class TestMakeSettings(object):
    def test_defaults(self):
        settings = make_settings()
        assert isinstance(settings, ParserSettings)
        assert settings == DEFAULT_SETTINGS
        assert settings is not DEFAULT_SETTINGS
        assert settings["codec"] == Codecs.hevc
        assert settings["max_exp_golomb_prefix_bits"] == MAX_EXP_GOLOMB_PREFIX_BITS
        assert settings["length_prefix_bytes"] == 0

    def test_overrides(self):
        settings = make_settings(codec=2, length_prefix_bytes=4, check_trailing_bits=0)
        assert settings["codec"] is Codecs.mpeg2
        assert settings["length_prefix_bytes"] == 4
        assert settings["check_trailing_bits"] is False

        # Defaults unchanged
        assert DEFAULT_SETTINGS["codec"] == Codecs.hevc

    def test_unknown_setting(self):
        with pytest.raises(FixedDictKeyError):
            make_settings(codex=Codecs.hevc)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"codec": 99},
            {"length_prefix_bytes": 3},
            {"max_exp_golomb_prefix_bits": 0},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            make_settings(**overrides)

    def test_str(self):
        assert "codec: hevc (" in str(make_settings())
