import io
import struct
import sys
from typing import BinaryIO

from .errors import BadTag, NestingTooDeep
from .printer import DEFAULT_INDENT, Printer
from .reader import Reader
from .role import KEY, TOP, VALUE, ArrayIndex, Role

DEFAULT_MAX_DEPTH = 256

TAG_NIL   = 0xc0
TAG_FALSE = 0xc2
TAG_TRUE  = 0xc3

# tag -> width of the big-endian field that follows it
UINT      = {0xcc: 1, 0xcd: 2, 0xce: 4, 0xcf: 8}
INT       = {0xd0: 1, 0xd1: 2, 0xd2: 4, 0xd3: 8}
FLOAT     = {0xca: ('>f', 4), 0xcb: ('>d', 8)}
STR_VAR   = {0xd9: 1, 0xda: 2, 0xdb: 4}
BIN_VAR   = {0xc4: 1, 0xc5: 2, 0xc6: 4}
ARRAY_VAR = {0xdc: 2, 0xdd: 4}
MAP_VAR   = {0xde: 2, 0xdf: 4}
EXT_VAR   = {0xc7: 1, 0xc8: 2, 0xc9: 4}
# fixext tags carry the payload size, not a width
FIXEXT    = {0xd4: 1, 0xd5: 2, 0xd6: 4, 0xd7: 8, 0xd8: 16}


def _dump_data(reader: Reader, printer: Printer, length: int, is_str: bool):
    data = reader.read_exact(length)
    if is_str:
        printer.string(data)
    else:
        printer.hex(data)


def _dump_ext(reader: Reader, printer: Printer, length: int):
    ext_type = reader.read_exact(1)[0]
    printer.write(f"Type{ext_type}:")
    _dump_data(reader, printer, length, False)


def _dump_array(reader, printer, count, depth, max_depth):
    if depth >= max_depth:
        raise NestingTooDeep(max_depth)
    printer.open("[")
    for i in range(count):
        _dump_tagged(reader.read_exact(1)[0], reader, printer, ArrayIndex(i),
                     depth + 1, max_depth)
    printer.close("]", depth)


def _dump_map(reader, printer, count, depth, max_depth):
    if depth >= max_depth:
        raise NestingTooDeep(max_depth)
    printer.open("{")
    for _ in range(count):
        _dump_tagged(reader.read_exact(1)[0], reader, printer, KEY,
                     depth + 1, max_depth)
        _dump_tagged(reader.read_exact(1)[0], reader, printer, VALUE,
                     depth + 1, max_depth)
    printer.close("}", depth)


def _dump_tagged(tag: int, reader: Reader, printer: Printer, role: Role,
                 depth: int, max_depth: int):
    printer.start(role, depth)

    if tag <= 0x7f:
        printer.write(str(tag))
    elif tag >= 0xe0:
        printer.write(str(tag - 0x100))
    elif tag == TAG_NIL:
        printer.write("()")
    elif tag == TAG_FALSE:
        printer.write("false")
    elif tag == TAG_TRUE:
        printer.write("true")
    elif tag in UINT:
        printer.write(str(reader.read_uint(UINT[tag])))
    elif tag in INT:
        printer.write(str(reader.read_int(INT[tag])))
    elif tag in FLOAT:
        fmt, width = FLOAT[tag]
        printer.write("%g" % struct.unpack(fmt, reader.read_exact(width))[0])
    elif (tag & 0xe0) == 0xa0:
        _dump_data(reader, printer, tag & 0x1f, True)
    elif tag in STR_VAR:
        _dump_data(reader, printer, reader.read_uint(STR_VAR[tag]), True)
    elif tag in BIN_VAR:
        _dump_data(reader, printer, reader.read_uint(BIN_VAR[tag]), False)
    elif (tag & 0xf0) == 0x90:
        _dump_array(reader, printer, tag & 0x0f, depth, max_depth)
    elif tag in ARRAY_VAR:
        _dump_array(reader, printer, reader.read_uint(ARRAY_VAR[tag]), depth, max_depth)
    elif (tag & 0xf0) == 0x80:
        _dump_map(reader, printer, tag & 0x0f, depth, max_depth)
    elif tag in MAP_VAR:
        _dump_map(reader, printer, reader.read_uint(MAP_VAR[tag]), depth, max_depth)
    elif tag in FIXEXT:
        _dump_ext(reader, printer, FIXEXT[tag])
    elif tag in EXT_VAR:
        _dump_ext(reader, printer, reader.read_uint(EXT_VAR[tag]))
    else:
        # only 0xc1 is left unassigned
        raise BadTag(tag)

    printer.stop(role)


def dump_value(reader: Reader, printer: Printer, role: Role = TOP,
               depth: int = 0, max_depth: int = DEFAULT_MAX_DEPTH):
    """Dump one complete value. End of stream anywhere in it is an error."""
    tag = reader.read_exact(1)[0]
    _dump_tagged(tag, reader, printer, role, depth, max_depth)


def dump_stream(source: BinaryIO, out: BinaryIO,
                indent_width: int = DEFAULT_INDENT,
                max_depth: int = DEFAULT_MAX_DEPTH) -> int:
    """Dump every top-level value in `source` to `out`.

    Returns the number of values dumped once the stream ends cleanly at a
    value boundary. Raises mpdump.errors.Error on the first problem; output
    written before the failure is kept.
    """
    # two frames per nesting level
    needed = 2 * max_depth + 200
    if sys.getrecursionlimit() < needed:
        sys.setrecursionlimit(needed)

    reader = Reader(source)
    printer = Printer(out, indent_width)
    count = 0
    try:
        while True:
            tag = reader.read_tag()
            if tag is None:
                break
            _dump_tagged(tag, reader, printer, TOP, 0, max_depth)
            count += 1
    finally:
        printer.flush()
    return count


def render(data: bytes, indent_width: int = DEFAULT_INDENT,
           max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    out = io.BytesIO()
    dump_stream(io.BytesIO(data), out, indent_width, max_depth)
    return out.getvalue()
