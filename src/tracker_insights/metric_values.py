"""Shape-agnostic metric resolution, display formatting, and value parsing.

History mixes two metric shapes: the legacy single ``scalar`` metric and the
``load`` + ``volume`` pair. Everything downstream asks this module for one
comparable number and one display string instead of branching on shape.
"""

from __future__ import annotations

import math

from .entry_contract import Entry, MetricKind

TIME_SUFFIXES: tuple[str, ...] = ("mins", "min")


class ParseError(ValueError):
    """A raw value string cannot be interpreted under its declared kind."""

    def __init__(self, raw: str, kind: str, reason: str) -> None:
        self.raw = raw
        self.kind = kind
        self.reason = reason
        super().__init__(f"cannot parse {raw!r} as {kind}: {reason}")


def comparable_value(entry: Entry) -> float | None:
    if entry.scalar is not None:
        return entry.scalar.value
    if entry.load is not None:
        return entry.load.magnitude
    return None


def metric_kind(entry: Entry) -> MetricKind | None:
    if entry.scalar is not None:
        return entry.scalar.kind
    if entry.load is not None:
        return "weight"
    if entry.volume is not None:
        return entry.volume.kind
    return None


def metric_unit(entry: Entry) -> str | None:
    if entry.scalar is not None:
        if entry.scalar.unit:
            return entry.scalar.unit
        return "kg" if entry.scalar.kind == "weight" else None
    if entry.load is not None:
        return entry.load.unit
    return None


def format_number(value: float) -> str:
    """Render 16.0 as "16" and 16.5 as "16.5"."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_time(seconds: float) -> str:
    whole = int(math.floor(seconds))
    minutes = whole // 60
    remainder = whole % 60
    if remainder == 0:
        return f"{minutes} mins"
    return f"{minutes}:{remainder:02d} mins"


def format_value(value: float, kind: MetricKind, unit: str | None = None) -> str:
    if kind == "weight":
        return f"{format_number(value)}{unit or 'kg'}"
    if kind == "time":
        return format_time(value)
    if kind == "rounds":
        return f"{format_number(value)} rounds"
    return f"{format_number(value)} reps"


def _format_load(entry: Entry) -> str | None:
    if entry.load is None:
        return None
    text = f"{format_number(entry.load.magnitude)}{entry.load.unit}"
    if entry.load.multiplier == "double":
        return f"2×{text}"
    return text


def _format_volume(entry: Entry) -> str | None:
    if entry.volume is None:
        return None
    return format_value(entry.volume.count, entry.volume.kind)


def format_entry(entry: Entry) -> str | None:
    """Display text for whatever metrics the entry carries, or None."""
    if entry.scalar is not None:
        return format_value(entry.scalar.value, entry.scalar.kind, metric_unit(entry))

    parts = [text for text in (_format_load(entry), _format_volume(entry)) if text]
    if not parts:
        return None
    return " · ".join(parts)


def _parse_number(text: str, *, raw: str, kind: str) -> float:
    try:
        parsed = float(text)
    except ValueError:
        raise ParseError(raw, kind, f"{text!r} is not a number") from None
    if not math.isfinite(parsed):
        raise ParseError(raw, kind, f"{text!r} is not a finite number")
    if parsed < 0:
        raise ParseError(raw, kind, "value must not be negative")
    return parsed


def _strip_time_suffix(text: str) -> tuple[str, bool]:
    lowered = text.lower()
    for suffix in TIME_SUFFIXES:
        if lowered.endswith(suffix):
            return text[: -len(suffix)].strip(), True
    return text, False


def parse_time(raw: str) -> float:
    """Parse "150", "2:30", "2:30 mins" or "2 mins" into seconds.

    A bare number is seconds. A bare number with a minutes suffix is whole
    minutes, which keeps ``parse_time(format_time(x)) == x``.
    """
    text, has_minutes_suffix = _strip_time_suffix(raw.strip())
    if not text:
        raise ParseError(raw, "time", "empty value")

    if ":" not in text:
        value = _parse_number(text, raw=raw, kind="time")
        return value * 60 if has_minutes_suffix else value

    parts = text.split(":")
    if len(parts) != 2:
        raise ParseError(raw, "time", "expected minutes:seconds")
    minutes = _parse_number(parts[0].strip(), raw=raw, kind="time")
    seconds = _parse_number(parts[1].strip(), raw=raw, kind="time")
    return minutes * 60 + seconds


def parse_value(raw: str, kind: MetricKind) -> float:
    """Parse a user-entered value string under its declared kind."""
    if kind == "time":
        return parse_time(raw)
    text = raw.strip()
    if not text:
        raise ParseError(raw, kind, "empty value")
    return _parse_number(text, raw=raw, kind=kind)
