from .dump import DEFAULT_MAX_DEPTH, dump_stream, dump_value, render
from .errors import (AllocError, BadTag, Error, NestingTooDeep, ReadError,
                     StructuralError, UnexpectedEOF)
from .printer import DEFAULT_INDENT, Printer
from .reader import Reader
from .role import KEY, TOP, VALUE, ArrayIndex, MapKey, MapValue, Role, TopLevel

__version__ = "0.1.0"
