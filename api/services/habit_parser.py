"""Directive parser for habitt blocks.

A block is plain text carrying three kinds of directives, each found by an
independent scan over the whole input:

* ``[month: 2021-01]``  the month to draw (required, first occurrence wins)
* ``[width: 50%]``      optional fixed table width, passed through untouched
* ``(15)`` / ``(15,text)``  zero or more marked days, later ones overwrite earlier

Failures to resolve the month are reported on the returned context rather than
raised, so callers can always hand the result to the renderer.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional

import pendulum

from ..schemas.habitt import HabitSettings

logger = logging.getLogger(__name__)

MONTH_RE = re.compile(r"\[month:(.*?)\]")
WIDTH_RE = re.compile(r"\[width:(.*?)\]")
MARK_RE = re.compile(r"\((.*?)\)")
_DAY_RE = re.compile(r"\s*([+-]?[0-9]+)\s*")

MONTH_NOT_FOUND = "Fail: Month not found. e.g. [month: 2021-01]"


class HabitParseError(ValueError):
    """A block that cannot be drawn; the message is shown to the user as is."""

    kind = "parse_error"


class MissingMonthDirective(HabitParseError):
    kind = "missing_month"

    def __init__(self) -> None:
        super().__init__(MONTH_NOT_FOUND)


class InvalidMonthValue(HabitParseError):
    kind = "invalid_month"

    def __init__(self, token: str) -> None:
        super().__init__(f"Fail: Invalid Date {token}")
        self.token = token


@dataclass(frozen=True)
class MonthInfo:
    label: str
    first_weekday: int  # Sunday=0
    days: int


@dataclass(frozen=True)
class RenderContext:
    week_start: int = 0
    first_weekday: int = 0
    month_days: int = 0
    month_label: str = ""
    width: Optional[str] = None
    marks: Mapping[int, str] = field(default_factory=lambda: MappingProxyType({}))
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_month(value: str, month_format: str) -> MonthInfo:
    """Resolve a month specifier to its label, first weekday and length.

    ISO 8601 dates and months are tried first, then ``month_format`` so a block
    may name its month the same way the header prints it.

    Raises:
        ValueError: if ``value`` names no calendar date.
    """
    if value.strip().lower() == "now":
        # pendulum resolves "now" to the current instant
        raise ValueError(f"not a fixed month: {value!r}")
    try:
        parsed = pendulum.parse(value)
    except (ValueError, OverflowError):
        parsed = pendulum.from_format(value, month_format)
    if not isinstance(parsed, date):
        # durations, intervals and bare times are valid ISO 8601 too
        raise ValueError(f"not a calendar date: {value!r}")

    first = pendulum.datetime(parsed.year, parsed.month, 1)
    return MonthInfo(
        label=first.format(month_format),
        first_weekday=first.isoweekday() % 7,
        days=first.days_in_month,
    )


def _month(source: str, config: HabitSettings) -> MonthInfo:
    m = MONTH_RE.search(source)
    value = m.group(1).strip() if m else ""
    if not value:
        raise MissingMonthDirective()
    try:
        return resolve_month(value, config.month_format)
    except (ValueError, OverflowError) as exc:
        raise InvalidMonthValue(m.group(0)) from exc


def parse_width(source: str) -> Optional[str]:
    m = WIDTH_RE.search(source)
    if m:
        width = m.group(1).strip()
        if width:
            return width
    return None


def parse_marks(source: str) -> Mapping[int, str]:
    """Collect ``(day[,text])`` groups into a read-only day -> text mapping.

    Groups whose day is not an integer are skipped. Text after the first comma
    is kept verbatim; a bare day maps to the empty string.
    """
    marks: dict[int, str] = {}
    for inner in MARK_RE.findall(source):
        day_part, _, text = inner.partition(",")
        m = _DAY_RE.fullmatch(day_part)
        if not m:
            continue
        try:
            day = int(m.group(1))
        except ValueError:
            # beyond the interpreter's int-string digit limit
            continue
        marks[day] = text
    return MappingProxyType(marks)


def parse(source: str, config: HabitSettings) -> RenderContext:
    week_start = config.start_of_week
    try:
        month = _month(source, config)
    except HabitParseError as exc:
        logger.debug("habitt_parse_failed", extra={"kind": exc.kind})
        return RenderContext(week_start=week_start, error=str(exc), error_kind=exc.kind)

    return RenderContext(
        week_start=week_start,
        first_weekday=month.first_weekday,
        month_days=month.days,
        month_label=month.label,
        width=parse_width(source),
        marks=parse_marks(source),
    )
