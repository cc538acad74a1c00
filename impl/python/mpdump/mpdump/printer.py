from typing import BinaryIO

from .role import ArrayIndex, MapKey, MapValue, Role, TopLevel

DEFAULT_INDENT = 3


class Printer:
    """Writes the text tree to a binary sink.

    Strings are passed through as raw bytes, so the sink is binary
    (sys.stdout.buffer, a file opened "wb", io.BytesIO).
    """

    def __init__(self, out: BinaryIO, indent_width: int = DEFAULT_INDENT):
        if indent_width < 0:
            raise ValueError("indent width must be >= 0")
        self.out = out
        self.indent_width = indent_width

    def write(self, text: str):
        self.out.write(text.encode('ascii'))

    def write_raw(self, data: bytes):
        self.out.write(data)

    def indent(self, depth: int):
        self.write(' ' * (depth * self.indent_width))

    def start(self, role: Role, depth: int):
        if not isinstance(role, MapValue):
            self.indent(depth)
        if isinstance(role, ArrayIndex):
            self.write(f"[{role.index}]: ")

    def stop(self, role: Role):
        if isinstance(role, MapKey):
            self.write(": ")
        else:
            self.write("\n")
        if isinstance(role, TopLevel):
            self.flush()

    def open(self, bracket: str):
        self.write(bracket + "\n")

    def close(self, bracket: str, depth: int):
        self.indent(depth)
        self.write(bracket)

    def string(self, data: bytes):
        self.write_raw(b'"' + data + b'"')

    def hex(self, data: bytes):
        self.write(data.hex(' '))

    def flush(self):
        flush = getattr(self.out, 'flush', None)
        if flush is not None:
            flush()
