import io
import struct

import pytest

from mpdump import (KEY, VALUE, BadTag, NestingTooDeep, Printer, Reader,
                    StructuralError, UnexpectedEOF, dump_stream, dump_value,
                    render)


def dump_partial(data: bytes, **kw):
    """Run dump_stream, returning (output so far, raised error or None)."""
    out = io.BytesIO()
    try:
        dump_stream(io.BytesIO(data), out, **kw)
    except Exception as e:
        return out.getvalue(), e
    return out.getvalue(), None


def test_empty_stream_prints_nothing():
    out = io.BytesIO()
    assert dump_stream(io.BytesIO(b""), out) == 0
    assert out.getvalue() == b""


def test_concatenated_top_level_values():
    out = io.BytesIO()
    assert dump_stream(io.BytesIO(b"\x01\x02"), out) == 2
    assert out.getvalue() == b"1\n2\n"


@pytest.mark.parametrize("data,text", [
    (b"\xc0", b"()"),
    (b"\xc2", b"false"),
    (b"\xc3", b"true"),
    (b"\x00", b"0"),
    (b"\x7f", b"127"),
    (b"\xe0", b"-32"),
    (b"\xff", b"-1"),
])
def test_values_encoded_in_the_tag(data, text):
    assert render(data) == text + b"\n"


@pytest.mark.parametrize("data,text", [
    (b"\xcc\xff", b"255"),
    (b"\xcd\x01\x00", b"256"),
    (b"\xce\xff\xff\xff\xff", b"4294967295"),
    (b"\xcf" + b"\xff" * 8, b"18446744073709551615"),
    (b"\xd0\xff", b"-1"),
    (b"\xd0\x7f", b"127"),
    (b"\xd1\x80\x00", b"-32768"),
    (b"\xd2\x80\x00\x00\x00", b"-2147483648"),
    (b"\xd3\x80" + b"\x00" * 7, b"-9223372036854775808"),
    (b"\xd3" + b"\xff" * 8, b"-1"),
])
def test_fixed_width_integers(data, text):
    assert render(data) == text + b"\n"


@pytest.mark.parametrize("data,text", [
    (b"\xca" + struct.pack(">f", 1.5), b"1.5"),
    (b"\xca" + struct.pack(">f", -0.25), b"-0.25"),
    (b"\xcb" + struct.pack(">d", 1234567.0), b"1.23457e+06"),
    (b"\xcb" + struct.pack(">d", 1e-5), b"1e-05"),
    (b"\xcb" + struct.pack(">d", float("-inf")), b"-inf"),
    (b"\xcb" + struct.pack(">d", float("nan")), b"nan"),
])
def test_floats_are_read_big_endian(data, text):
    assert render(data) == text + b"\n"


def test_string_payload_is_printed_verbatim():
    assert render(b"\xa4a\nb\x00") == b'"a\nb\x00"\n'
    assert render(b"\xa2\xff\xfe") == b'"\xff\xfe"\n'
    assert render(b"\xa0") == b'""\n'


def test_variable_length_strings():
    s = b"x" * 300
    assert render(b"\xd9\x20" + b"y" * 32) == b'"' + b"y" * 32 + b'"\n'
    assert render(b"\xda\x01\x2c" + s) == b'"' + s + b'"\n'
    assert render(b"\xdb\x00\x00\x01\x2c" + s) == b'"' + s + b'"\n'


def test_binary_is_printed_as_hex_pairs():
    assert render(b"\xc4\x03\x00\x0a\xff") == b"00 0a ff\n"
    assert render(b"\xc5\x00\x02\xab\xcd") == b"ab cd\n"
    assert render(b"\xc6\x00\x00\x00\x01\x7f") == b"7f\n"
    assert render(b"\xc4\x00") == b"\n"


def test_extensions():
    assert render(b"\xd4\x01\xaa") == b"Type1:aa\n"
    assert render(b"\xd5\x02\x01\x02") == b"Type2:01 02\n"
    assert render(b"\xd7\x03" + bytes(range(8))) == b"Type3:00 01 02 03 04 05 06 07\n"
    assert render(b"\xd8\x04" + b"\x11" * 16) == b"Type4:" + b" ".join([b"11"] * 16) + b"\n"
    # ext8/16/32: length comes before the type byte
    assert render(b"\xc7\x03\x05\x01\x02\x03") == b"Type5:01 02 03\n"
    assert render(b"\xc8\x00\x00\x06") == b"Type6:\n"
    assert render(b"\xc9\x00\x00\x00\x01\x07\xee") == b"Type7:ee\n"
    # type byte is shown unsigned
    assert render(b"\xd6\xff\x00\x00\x00\x01") == b"Type255:00 00 00 01\n"


def test_nested_array_and_map():
    # [{"a": 1}, true]
    assert render(b"\x92\x81\xa1a\x01\xc3") == (
        b"[\n"
        b"   [0]: {\n"
        b'      "a": 1\n'
        b"   }\n"
        b"   [1]: true\n"
        b"]\n"
    )


def test_empty_containers():
    assert render(b"\x90") == b"[\n]\n"
    assert render(b"\x80") == b"{\n}\n"
    assert render(b"\x91\x80") == b"[\n   [0]: {\n   }\n]\n"


def test_container_as_map_key():
    # {[1]: nil}
    assert render(b"\x81\x91\x01\xc0") == (
        b"{\n"
        b"   [\n"
        b"      [0]: 1\n"
        b"   ]: ()\n"
        b"}\n"
    )


def test_variable_count_containers():
    assert render(b"\xdc\x00\x02\x01\x02") == b"[\n   [0]: 1\n   [1]: 2\n]\n"
    assert render(b"\xdd\x00\x00\x00\x01\xc3") == b"[\n   [0]: true\n]\n"
    assert render(b"\xde\x00\x01\xa1k\x02") == b'{\n   "k": 2\n}\n'
    assert render(b"\xdf\x00\x00\x00\x01\x01\x02") == b"{\n   1: 2\n}\n"


def test_sixteen_element_array_labels():
    data = b"\xdc\x00\x10" + bytes(range(16))
    lines = render(data).splitlines()
    assert lines[0] == b"["
    assert lines[1] == b"   [0]: 0"
    assert lines[16] == b"   [15]: 15"
    assert lines[17] == b"]"


def test_indent_width():
    assert render(b"\x91\x91\x01", indent_width=1) == b"[\n [0]: [\n  [0]: 1\n ]\n]\n"
    assert render(b"\x91\x01", indent_width=0) == b"[\n[0]: 1\n]\n"


def test_truncated_string_payload_fails():
    out, err = dump_partial(b"\xa4ab")
    assert isinstance(err, UnexpectedEOF)
    assert err.size == 4
    assert str(err).startswith("Cannot read 4 bytes: ")
    assert out == b""


def test_eof_inside_array_fails_and_keeps_output():
    out, err = dump_partial(b"\x93\x01\x02")
    assert isinstance(err, UnexpectedEOF)
    assert out == b"[\n   [0]: 1\n   [1]: 2\n"


def test_eof_after_map_key_fails():
    out, err = dump_partial(b"\x81\xa1k")
    assert isinstance(err, UnexpectedEOF)
    assert out == b'{\n   "k": '


def test_truncated_length_field_fails():
    _, err = dump_partial(b"\xda\x00")
    assert isinstance(err, UnexpectedEOF)
    assert err.size == 2


def test_bad_tag_aborts_after_earlier_values():
    out, err = dump_partial(b"\x01\xc1\x02")
    assert isinstance(err, BadTag)
    assert isinstance(err, StructuralError)
    assert err.tag == 0xc1
    assert str(err) == "Bad tag c1"
    assert out == b"1\n"


def test_bad_tag_inside_container():
    out, err = dump_partial(b"\x92\x01\xc1")
    assert isinstance(err, BadTag)
    assert out == b"[\n   [0]: 1\n   [1]: "


def test_nesting_limit():
    assert render(b"\x91\x91\x91\xc0", max_depth=3).count(b"]\n") == 3
    _, err = dump_partial(b"\x91\x91\x91\x91\xc0", max_depth=3)
    assert isinstance(err, NestingTooDeep)
    assert isinstance(err, StructuralError)
    assert str(err) == "Nesting deeper than 3 levels"


def test_default_nesting_limit_stops_adversarial_input():
    _, err = dump_partial(b"\x91" * 10000 + b"\xc0")
    assert isinstance(err, NestingTooDeep)
    _, err = dump_partial(b"\x81\xc0" * 10000 + b"\xc0")
    assert isinstance(err, NestingTooDeep)


def test_default_nesting_limit_allows_deep_valid_input():
    text = render(b"\x91" * 200 + b"\xc0")
    assert text.count(b"]\n") == 200


def test_dump_value_treats_missing_value_as_error():
    reader = Reader(io.BytesIO(b""))
    with pytest.raises(UnexpectedEOF):
        dump_value(reader, Printer(io.BytesIO()))


def test_dump_value_with_explicit_role():
    out = io.BytesIO()
    reader = Reader(io.BytesIO(b"\xa1k\x05"))
    printer = Printer(out)
    dump_value(reader, printer, KEY, depth=2)
    dump_value(reader, printer, VALUE, depth=2)
    assert out.getvalue() == b'      "k": 5\n'
    assert reader.offset == 3


def test_nesting_past_interpreter_recursion_limit_within_max_depth():
    text = render(b"\x91" * 800 + b"\xc0", max_depth=1000)
    assert text.count(b"]\n") == 800
    _, err = dump_partial(b"\x91" * 1200 + b"\xc0", max_depth=1000)
    assert isinstance(err, NestingTooDeep)


class FlushLog(io.BytesIO):
    """Sink remembering what had been written at every flush()."""
    def __init__(self):
        super().__init__()
        self.seen = []

    def flush(self):
        self.seen.append(self.getvalue())
        super().flush()


def test_output_flushed_after_each_top_level_value():
    out = FlushLog()
    dump_stream(io.BytesIO(b"\x01\x91\x02"), out)
    assert out.seen[:2] == [b"1\n", b"1\n[\n   [0]: 2\n]\n"]


def test_output_flushed_before_error():
    out = FlushLog()
    with pytest.raises(BadTag):
        dump_stream(io.BytesIO(b"\x01\x92\x02\xc1"), out)
    assert out.seen == [b"1\n", b"1\n[\n   [0]: 2\n   [1]: "]
