"""Parsers for Kubernetes resource quantity strings.

CPU quantities are normalized to cores and memory quantities to gibibytes.
Integer sub-units (millicores, mebibytes) are derived from those by
truncation toward zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

_BYTES_IN_GIB = 1024**3

# Binary suffixes must be checked before their one-letter decimal siblings.
_MEMORY_MULTIPLIERS: tuple[tuple[str, int], ...] = (
    ("Ki", 1024),
    ("Mi", 1024**2),
    ("Gi", 1024**3),
    ("Ti", 1024**4),
    ("K", 1000),
    ("M", 1000**2),
    ("G", 1000**3),
    ("T", 1000**4),
)


class QuantityParseError(ValueError):
    """Raised by a strict parser when a quantity cannot be parsed."""


@dataclass(frozen=True)
class QuantityParser:
    """Quantity parser with a configurable failure policy.

    The lenient parser (default) turns anything unparseable into 0 so a single
    malformed field never aborts aggregation. A strict parser raises
    `QuantityParseError` instead.
    """

    strict: bool = False

    def _number(self, text: str, raw: str) -> float | None:
        # Digit-group underscores are not valid in resource quantities.
        try:
            value = math.nan if "_" in text else float(text)
        except ValueError:
            value = math.nan
        if math.isfinite(value):
            return value
        if self.strict:
            raise QuantityParseError(f"Invalid resource quantity: {raw!r}")
        return None

    def cpu_cores(self, raw: str | None) -> float:
        """Parse CPU quantity and return cores."""
        if not raw:
            return 0.0
        value = str(raw).strip()
        if value.endswith("m"):
            millicores = self._number(value[:-1], raw)
            return millicores / 1000 if millicores is not None else 0.0
        cores = self._number(value, raw)
        return cores if cores is not None else 0.0

    def memory_gib(self, raw: str | None) -> float:
        """Parse memory quantity and return gibibytes."""
        if not raw:
            return 0.0
        value = str(raw).strip()
        multiplier = 1
        for suffix, suffix_multiplier in _MEMORY_MULTIPLIERS:
            if value.endswith(suffix):
                value = value[: -len(suffix)]
                multiplier = suffix_multiplier
                break
        number = self._number(value, raw)
        if number is None:
            return 0.0
        return number * multiplier / _BYTES_IN_GIB


LENIENT_PARSER = QuantityParser()


def parse_cpu_cores(raw: str | None) -> float:
    """Parse CPU quantity and return cores, 0 when unparseable."""
    return LENIENT_PARSER.cpu_cores(raw)


def parse_memory_gib(raw: str | None) -> float:
    """Parse memory quantity and return gibibytes, 0 when unparseable."""
    return LENIENT_PARSER.memory_gib(raw)


def to_millicores(cores: float) -> int:
    """Convert cores to millicores, truncating toward zero."""
    return int(cores * 1000)


def to_mebibytes(gib: float) -> int:
    """Convert gibibytes to mebibytes, truncating toward zero."""
    return int(gib * 1024)
