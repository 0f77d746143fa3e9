"""Pickle encoding of a single-interval set for graphite-web."""

from __future__ import annotations

import struct
from dataclasses import dataclass

_INTERVALS_MODULE = b"graphite.intervals"


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _global(name: bytes) -> bytes:
    return b"c" + _INTERVALS_MODULE + b"\n" + name + b"\n"


def _short_binstring(text: bytes) -> bytes:
    return b"U" + bytes([len(text)]) + text


def _binfloat(value: float) -> bytes:
    return b"G" + struct.pack(">d", value)


@dataclass
class IntervalSet:
    """An interval set holding the single interval start..end."""

    start: int
    end: int

    def marshal_pickle(self) -> bytes:
        """Encode as pickle opcodes building graphite.intervals.IntervalSet.

        The result has no STOP opcode; it is meant to be embedded in a larger
        pickle stream.
        """
        start = float(_int32(self.start))
        end = float(_int32(self.end))
        size = float(_int32(_int32(self.end) - _int32(self.start)))

        interval = (
            b"("
            + _global(b"Interval")
            + b"o}("
            + _short_binstring(b"start")
            + _binfloat(start)
            + _short_binstring(b"size")
            + _binfloat(size)
            + _short_binstring(b"end")
            + _binfloat(end)
            + _short_binstring(b"tuple")
            + _binfloat(start)
            + _binfloat(end)
            + b"\x86ub"
        )
        return (
            b"("
            + _global(b"IntervalSet")
            + b"o}("
            + _short_binstring(b"intervals")
            + b"]"
            + interval
            + b"a"
            + _short_binstring(b"size")
            + _binfloat(size)
            + b"ub"
        )