"""Metric points and their text and binary wire forms."""

from __future__ import annotations

import math
import re
import struct
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import BinaryIO

_UINT64_MASK = (1 << 64) - 1
_INT64_SIGN = 1 << 63

_DECIMAL_FLOAT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_HEX_FLOAT = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?\d+"
)


def _to_int64(value: int) -> int:
    """Wrap an integer to the signed 64-bit range."""
    value &= _UINT64_MASK
    return value - (1 << 64) if value & _INT64_SIGN else value


def _float_bits(value: float) -> int:
    """IEEE-754 bits of a float as a signed 64-bit integer."""
    return struct.unpack("<q", struct.pack("<d", value))[0]


def _bits_float(bits: int) -> float:
    """Float whose IEEE-754 bits are the given 64-bit integer."""
    return struct.unpack("<d", struct.pack("<q", _to_int64(bits)))[0]


def _encode_varint(value: int) -> bytes:
    """Zig-zag varint encoding of a signed 64-bit integer."""
    value = _to_int64(value)
    ux = ((value << 1) ^ (value >> 63)) & _UINT64_MASK
    out = bytearray()
    while ux >= 0x80:
        out.append((ux & 0x7F) | 0x80)
        ux >>= 7
    out.append(ux)
    return bytes(out)


def _format_float(value: float) -> str:
    """Shortest decimal form, switching to exponent form outside 1e-4..1e21."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = list(digit_tuple)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    text = "".join(str(d) for d in digits)
    prefix = "-" if sign else ""
    point = len(text) + exponent
    exp10 = point - 1

    if exp10 < -4 or exp10 >= 21:
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        exp_sign = "+" if exp10 >= 0 else "-"
        return f"{prefix}{mantissa}e{exp_sign}{abs(exp10):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{text}"
    if point >= len(text):
        return prefix + text + "0" * (point - len(text))
    return f"{prefix}{text[:point]}.{text[point:]}"


def _parse_float(text: str) -> float:
    """Parse a float literal strictly, rejecting out-of-range values."""
    if _HEX_FLOAT.fullmatch(text):
        result = float.fromhex(text)
    elif _DECIMAL_FLOAT.fullmatch(text):
        result = float(text)
    else:
        raise ValueError(f"invalid float: {text!r}")
    if math.isinf(result) and not text.lstrip("+-").lower().startswith("inf"):
        raise ValueError(f"float out of range: {text!r}")
    return result


def _format_line(metric: str, point: "Point") -> str:
    return f"{metric} {_format_float(point.value)} {point.timestamp}\n"


def _write(stream: BinaryIO, chunk: bytes) -> int:
    written = stream.write(chunk)
    return len(chunk) if written is None else written


@dataclass
class Point:
    """A value/timestamp pair."""

    value: float
    timestamp: int


@dataclass
class Points:
    """A metric name with its points."""

    metric: str = ""
    data: list[Point] = field(default_factory=list)

    def copy(self) -> Points:
        """Return a copy whose point list can be extended independently."""
        return Points(self.metric, list(self.data))

    def write_to(self, stream: BinaryIO) -> int:
        """Write the points in plain text form; return the bytes written."""
        return sum(
            _write(stream, _format_line(self.metric, point).encode("utf-8"))
            for point in self.data
        )

    def write_binary_to(self, stream: BinaryIO) -> int:
        """Write the points in delta-encoded binary form; return the bytes written."""
        name = self.metric.encode("utf-8")
        written = _write(stream, _encode_varint(len(name)))
        written += _write(stream, name)
        written += _write(stream, _encode_varint(len(self.data)))
        prev_bits = 0
        prev_ts = 0
        for point in self.data:
            bits = _float_bits(point.value)
            written += _write(stream, _encode_varint(_to_int64(bits - prev_bits)))
            written += _write(stream, _encode_varint(_to_int64(point.timestamp - prev_ts)))
            prev_bits = bits
            prev_ts = point.timestamp
        return written

    def append(self, point: Point) -> Points:
        """Append a point and return self."""
        self.data.append(point)
        return self

    def add(self, value: float, timestamp: int) -> Points:
        """Append a value/timestamp pair and return self."""
        self.data.append(Point(value, timestamp))
        return self

    def eq(self, other: Points | None) -> bool:
        """True if other holds the same metric and the same points."""
        if other is None or self.metric != other.metric:
            return False
        if len(self.data) != len(other.data):
            return False
        return all(
            a.value == b.value and a.timestamp == b.timestamp
            for a, b in zip(self.data, other.data)
        )


def one_point(metric: str, value: float, timestamp: int) -> Points:
    """Points holding a single point."""
    return Points(metric, [Point(value, timestamp)])


def now_point(metric: str, value: float) -> Points:
    """Points holding a single point stamped with the current time."""
    return one_point(metric, value, int(time.time()))


def parse_text(line: str) -> Points:
    """Parse a plain text line such as 'host.value 42 1422641531'."""
    row = line.strip("\n \t\r").split(" ")
    if len(row) != 3:
        raise ValueError(f"bad message: {line!r}")
    try:
        value = _parse_float(row[1])
        ts_float = _parse_float(row[2])
    except ValueError:
        raise ValueError(f"bad message: {line!r}") from None
    if math.isnan(value) or math.isnan(ts_float) or math.isinf(ts_float):
        raise ValueError(f"bad message: {line!r}")
    timestamp = int(ts_float)
    if not -_INT64_SIGN <= timestamp < _INT64_SIGN:
        raise ValueError(f"bad message: {line!r}")
    return one_point(row[0], value, timestamp)