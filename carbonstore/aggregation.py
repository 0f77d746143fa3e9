"""Storage aggregation configuration."""

from __future__ import annotations

import enum
import os
import re
from dataclasses import dataclass, field
from typing import Optional

from carbonstore.ini import parse_ini_file
from carbonstore.points import _parse_float


class AggregationError(ValueError):
    """An aggregation section is invalid."""


class AggregationMethod(enum.IntEnum):
    """How points are combined when moving to a coarser archive."""

    AVERAGE = 1
    SUM = 2
    LAST = 3
    MAX = 4
    MIN = 5


_METHODS = {
    "average": AggregationMethod.AVERAGE,
    "avg": AggregationMethod.AVERAGE,
    "sum": AggregationMethod.SUM,
    "last": AggregationMethod.LAST,
    "max": AggregationMethod.MAX,
    "min": AggregationMethod.MIN,
}


@dataclass
class AggregationItem:
    """One aggregation rule."""

    name: str
    pattern: Optional[re.Pattern[str]]
    x_files_factor: float
    aggregation_method_str: str
    aggregation_method: AggregationMethod


def _default_item() -> AggregationItem:
    return AggregationItem(
        name="default",
        pattern=None,
        x_files_factor=0.5,
        aggregation_method_str="average",
        aggregation_method=AggregationMethod.AVERAGE,
    )


@dataclass
class WhisperAggregation:
    """Aggregation rules in file order, with a fallback rule."""

    data: list[AggregationItem] = field(default_factory=list)
    default: AggregationItem = field(default_factory=_default_item)

    def match(self, metric: str) -> AggregationItem:
        """Return the first rule whose pattern matches metric, else the default."""
        for item in self.data:
            if item.pattern is not None and item.pattern.search(metric):
                return item
        return self.default


def read_whisper_aggregation(filename: str | os.PathLike[str]) -> WhisperAggregation:
    """Read a storage aggregation file."""
    result = WhisperAggregation()
    for section in parse_ini_file(filename):
        name = section.get("name", "")

        pattern_text = section.get("pattern", "")
        try:
            pattern = re.compile(pattern_text)
        except re.error as exc:
            raise AggregationError(
                f'failed to parse pattern "{pattern_text}" for [{name}]: {exc}'
            ) from None

        factor_text = section.get("xfilesfactor", "")
        try:
            x_files_factor = _parse_float(factor_text)
        except ValueError as exc:
            raise AggregationError(
                f'failed to parse xFilesFactor "{factor_text}" in {name}: {exc}'
            ) from None

        method_str = section.get("aggregationmethod", "")
        method = _METHODS.get(method_str)
        if method is None:
            raise AggregationError(f"unknown aggregation method '{method_str}'")

        result.data.append(
            AggregationItem(
                name=name,
                pattern=pattern,
                x_files_factor=x_files_factor,
                aggregation_method_str=method_str,
                aggregation_method=method,
            )
        )
    return result