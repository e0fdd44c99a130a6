"""Renders ``declare enum`` blocks with flag-aware value formatting."""

from __future__ import annotations

from typing import List

from ..models import EnumMember, TypeDescriptor


def format_enum_value(value: int, *, flags: bool, bits: int = 64) -> str:
    """Format ``value`` as an unsigned literal.

    Negative values wrap to ``bits`` wide two's complement. Flag enums use
    lowercase hex with a ``0x`` prefix, everything else plain decimal.
    """
    unsigned = value if value >= 0 else value & ((1 << bits) - 1)
    if flags:
        return f"0x{unsigned:x}"
    return str(unsigned)


class EnumEmitter:
    """Builds ``declare enum`` blocks, members kept in declared order."""

    def emit(self, descriptor: TypeDescriptor) -> str:
        lines: List[str] = [f"declare enum {descriptor.name} {{"]
        for member in descriptor.members:
            lines.append(self._member_line(descriptor, member))
        lines.append("}")
        return "\n".join(lines)

    @staticmethod
    def _member_line(descriptor: TypeDescriptor, member: EnumMember) -> str:
        value = format_enum_value(
            member.value, flags=descriptor.is_flags, bits=descriptor.underlying_bits
        )
        return f"  {member.name} = {value},"
