from typing import BinaryIO, Optional

from .errors import AllocError, ReadError, UnexpectedEOF

# Upper bound for a single read() on the source, so a bogus 4 GiB length on a
# short stream fails with UnexpectedEOF instead of a giant allocation.
CHUNK = 64 * 1024


class Reader:
    """Byte cursor over a binary source.

    Tracks how many bytes were consumed and whether the source is exhausted.
    Every decode call gets the same Reader passed in explicitly.
    """

    def __init__(self, source: BinaryIO):
        self.source = source
        self.offset = 0
        self.eof = False

    def _read_some(self, want: int, size: int) -> bytes:
        try:
            chunk = self.source.read(min(want, CHUNK))
        except OSError as e:
            raise ReadError(size, e.strerror or str(e)) from e
        if not chunk:
            self.eof = True
            raise UnexpectedEOF(size, self.offset)
        self.offset += len(chunk)
        return chunk

    def read_exact(self, n: int) -> bytes:
        if self.eof:
            raise UnexpectedEOF(n, self.offset)
        if n == 0:
            return b""
        try:
            first = self._read_some(n, n)
            if len(first) == n:
                return first
            buf = bytearray(first)
            while len(buf) < n:
                buf += self._read_some(n - len(buf), n)
        except MemoryError:
            raise AllocError(n) from None
        return bytes(buf)

    def read_tag(self) -> Optional[int]:
        """Leading byte of the next top-level value, or None at clean EOF."""
        if self.eof:
            return None
        try:
            return self.read_exact(1)[0]
        except UnexpectedEOF:
            return None

    def read_uint(self, width: int) -> int:
        return int.from_bytes(self.read_exact(width), 'big')

    def read_int(self, width: int) -> int:
        return int.from_bytes(self.read_exact(width), 'big', signed=True)
