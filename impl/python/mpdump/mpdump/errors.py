class Error(Exception): pass


class StructuralError(Error): pass


class BadTag(StructuralError):
    def __init__(self, tag: int):
        super().__init__(f"Bad tag {tag:02x}")
        self.tag = tag


class NestingTooDeep(StructuralError):
    def __init__(self, limit: int):
        super().__init__(f"Nesting deeper than {limit} levels")
        self.limit = limit


class ReadError(Error):
    def __init__(self, size: int, reason: str):
        super().__init__(f"Cannot read {size} bytes: {reason}")
        self.size = size
        self.reason = reason


class UnexpectedEOF(ReadError):
    def __init__(self, size: int, offset: int):
        super().__init__(size, f"unexpected end of stream at offset {offset}")
        self.offset = offset


class AllocError(Error):
    def __init__(self, size: int):
        super().__init__(f"Cannot alloc {size} bytes")
        self.size = size
