import pytest

from opuskit.native.lengths import INT32_MAX, buffer_len, check_len


def test_check_len_accepts_native_range():
    assert check_len(0) == 0
    assert check_len(960) == 960
    assert check_len(INT32_MAX) == INT32_MAX


@pytest.mark.parametrize("value", [-1, INT32_MAX + 1, 2**40])
def test_check_len_rejects_unrepresentable_lengths(value):
    with pytest.raises(OverflowError, match="length out of range"):
        check_len(value)


def test_buffer_len_uses_len():
    assert buffer_len(b"") == 0
    assert buffer_len(bytearray(1277)) == 1277


def test_buffer_len_rejects_oversized_sequences():
    class Huge:
        def __len__(self) -> int:
            return INT32_MAX + 1

    with pytest.raises(OverflowError):
        buffer_len(Huge())
