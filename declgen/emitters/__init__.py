"""Text emitters for interface and enum declaration blocks."""

from __future__ import annotations

from .enums import EnumEmitter, format_enum_value
from .interface import READONLY_DICT_DECLARATION, InterfaceEmitter

__all__ = [
    "EnumEmitter",
    "InterfaceEmitter",
    "READONLY_DICT_DECLARATION",
    "format_enum_value",
]
