"""Syntactic position of the value being dumped.

Only the printer looks at the role; it never changes how bytes are read.
"""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TopLevel: pass
@dataclass(frozen=True)
class ArrayIndex: index: int
@dataclass(frozen=True)
class MapKey: pass
@dataclass(frozen=True)
class MapValue: pass

Role = Union[TopLevel, ArrayIndex, MapKey, MapValue]

TOP = TopLevel()
KEY = MapKey()
VALUE = MapValue()
