"""Storage schema configuration: retention definitions and pattern matching."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from typing import Optional

from carbonstore.ini import parse_ini_file
from carbonstore.points import _to_int64

_UNIT_SECONDS = {
    "s": 1,
    "m": 60,
    "h": 3600,
    "d": 86400,
    "w": 604800,
    "y": 31536000,
}
_UNIT_PART = re.compile(r"([0-9]+)([smhdwy])")
_INTEGER = re.compile(r"[+-]?[0-9]+")

_INT32_MIN, _INT32_MAX = -(1 << 31), (1 << 31) - 1
_INT64_MIN, _INT64_MAX = -(1 << 63), (1 << 63) - 1


class SchemaError(ValueError):
    """A schema or retention definition is invalid."""


@dataclass(frozen=True)
class Retention:
    """One archive: its resolution and how many points it keeps."""

    seconds_per_point: int
    number_of_points: int

    @property
    def max_retention(self) -> int:
        """Seconds of history the archive covers."""
        return self.seconds_per_point * self.number_of_points


@dataclass
class Schema:
    """One storage schema section."""

    name: str
    pattern: re.Pattern[str]
    retention_str: str
    retentions: list[Retention]
    priority: int
    compressed: Optional[bool] = None


class WhisperSchemas(list):
    """Schemas ordered from highest to lowest priority."""

    def match(self, metric: str) -> Optional[Schema]:
        """Return the first schema whose pattern matches metric, or None."""
        for schema in self:
            if schema.pattern.search(metric):
                return schema
        return None


def _parse_int(text: str, low: int, high: int) -> Optional[int]:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    return value if low <= value <= high else None


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _parse_part(part: str) -> int:
    value = _parse_int(part, _INT32_MIN, _INT32_MAX)
    if value is not None:
        return value
    match = _UNIT_PART.fullmatch(part)
    if match is None:
        raise SchemaError(part)
    return int(match[1]) * _UNIT_SECONDS[match[2]]


def parse_retention_def(definition: str) -> Retention:
    """Parse a 'precision:duration' definition such as '10s:24h'."""
    parts = definition.split(":")
    if len(parts) != 2:
        raise SchemaError(f"Not enough parts in retentionDef [{definition}]")
    try:
        precision = _parse_part(parts[0])
    except SchemaError as exc:
        raise SchemaError(f"Failed to parse precision: {exc}") from None
    try:
        duration = _parse_part(parts[1])
    except SchemaError as exc:
        raise SchemaError(f"Failed to parse points: {exc}") from None
    if precision == 0:
        raise SchemaError(f"zero precision in retentionDef [{definition}]")
    return Retention(precision, _trunc_div(duration, precision))


def parse_retention_defs(definitions: str) -> list[Retention]:
    """Parse a comma separated list of retentions in old or new format."""
    retentions = []
    for definition in definitions.split(","):
        definition = definition.strip()
        parts = definition.split(":")
        if len(parts) != 2:
            raise SchemaError(f'bad retentions spec "{definition}"')

        seconds = _parse_int(parts[0], _INT64_MIN, _INT64_MAX)
        count = _parse_int(parts[1], _INT64_MIN, _INT64_MAX)
        if seconds is not None and count is not None:
            retentions.append(Retention(seconds, count))
            continue

        retentions.append(parse_retention_def(definition))
    return retentions


def _parse_compressed(section: dict[str, str], name: str) -> Optional[bool]:
    if "compressed" not in section:
        return None
    value = section["compressed"]
    if value == "true":
        return True
    if value == "false":
        return False
    raise SchemaError(
        f'[persister] Failed to parse compressed "{value}" for [{name}]: '
        "unknown value, please use true/false"
    )


def read_whisper_schemas(filename: str | os.PathLike[str]) -> WhisperSchemas:
    """Read a storage schemas file; the result is sorted by priority.

    Sections of equal priority keep their order in the file.
    """
    schemas = []
    for index, section in enumerate(parse_ini_file(filename)):
        name = section.get("name", "")
        pattern_text = section.get("pattern", "")
        if not pattern_text:
            raise SchemaError(f"[persister] Empty pattern for [{name}]")
        try:
            pattern = re.compile(pattern_text)
        except re.error as exc:
            raise SchemaError(
                f'[persister] Failed to parse pattern "{pattern_text}" for [{name}]: {exc}'
            ) from None

        retention_str = section.get("retentions", "")
        try:
            retentions = parse_retention_defs(retention_str)
        except SchemaError as exc:
            raise SchemaError(
                f'[persister] Failed to parse retentions "{retention_str}" for [{name}]: {exc}'
            ) from None

        priority = 0
        priority_text = section.get("priority", "")
        if priority_text:
            parsed = _parse_int(priority_text, _INT64_MIN, _INT64_MAX)
            if parsed is None:
                raise SchemaError(
                    f'[persister] Failed to parse priority "{priority_text}" for [{name}]'
                )
            priority = parsed

        schemas.append(
            Schema(
                name=name,
                pattern=pattern,
                retention_str=retention_str,
                retentions=retentions,
                priority=_to_int64(_to_int64(priority << 32) - index),
                compressed=_parse_compressed(section, name),
            )
        )

    schemas.sort(key=lambda schema: schema.priority, reverse=True)
    return WhisperSchemas(schemas)