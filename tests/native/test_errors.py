import pytest

from opuskit.native import constants as c
from opuskit.native.errors import ErrorKind, OpusError, bad_arg, check


@pytest.mark.parametrize(
    "code, kind",
    [
        (c.OPUS_BAD_ARG, ErrorKind.BAD_ARG),
        (c.OPUS_BUFFER_TOO_SMALL, ErrorKind.BUFFER_TOO_SMALL),
        (c.OPUS_INTERNAL_ERROR, ErrorKind.INTERNAL_ERROR),
        (c.OPUS_INVALID_PACKET, ErrorKind.INVALID_PACKET),
        (c.OPUS_UNIMPLEMENTED, ErrorKind.UNIMPLEMENTED),
        (c.OPUS_INVALID_STATE, ErrorKind.INVALID_STATE),
        (c.OPUS_ALLOC_FAIL, ErrorKind.ALLOC_FAIL),
        (-8, ErrorKind.UNKNOWN),
        (-1000, ErrorKind.UNKNOWN),
    ],
)
def test_error_kind_from_code(code, kind):
    assert ErrorKind.from_code(code) is kind


def test_opus_error_carries_function_and_description(fake_lib):
    error = OpusError("opus_encode", c.OPUS_BUFFER_TOO_SMALL)
    assert error.function == "opus_encode"
    assert error.kind is ErrorKind.BUFFER_TOO_SMALL
    assert error.code == c.OPUS_BUFFER_TOO_SMALL
    assert error.description == "buffer too small"
    assert str(error) == "opus_encode: buffer too small"


def test_unknown_code_keeps_raw_value(fake_lib):
    error = OpusError("opus_decode", -42)
    assert error.kind is ErrorKind.UNKNOWN
    assert error.code == -42
    assert error.description == "unknown error"


def test_check_passes_through_non_negative_codes(fake_lib):
    assert check("opus_encode", 0) == 0
    assert check("opus_encode", 3) == 3
    with pytest.raises(OpusError) as excinfo:
        check("opus_encode", c.OPUS_INVALID_PACKET)
    assert excinfo.value.kind is ErrorKind.INVALID_PACKET


def test_bad_arg_builds_an_error(fake_lib):
    error = bad_arg("opus_packet_parse")
    assert error.kind is ErrorKind.BAD_ARG
    assert str(error) == "opus_packet_parse: invalid argument"
