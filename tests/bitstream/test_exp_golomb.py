import pytest

from nal_syntax.bitstream.exceptions import OutOfRangeError

from nal_syntax.bitstream import exp_golomb


@pytest.mark.parametrize(
    "value,length",
    [
        # Low numbers
        (0, 1),
        (1, 3),
        (2, 3),
        (3, 5),
        (6, 5),
        (7, 7),
        # Very large numbers
        ((1 << 100) - 2, (99 * 2) + 1),
        ((1 << 100) - 1, (100 * 2) + 1),
    ],
)
def test_exp_golomb_length(value, length):
    assert exp_golomb.exp_golomb_length(value) == length


def test_exp_golomb_length_range_check():
    with pytest.raises(OutOfRangeError):
        exp_golomb.exp_golomb_length(-1)


@pytest.mark.parametrize(
    "value,code_num",
    [(0, 0), (1, 1), (-1, 2), (2, 3), (-2, 4), (3, 5), (-3, 6)],
)
def test_signed_mapping(value, code_num):
    assert exp_golomb.signed_to_unsigned(value) == code_num
    assert exp_golomb.unsigned_to_signed(code_num) == value

