"""Turn a parsed habitt context into a month table (or an error panel)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple, Union

from jinja2 import Environment, FileSystemLoader

from ..schemas.habitt import HabitSettings
from .habit_grid import build_weeks
from .habit_parser import RenderContext, parse

logger = logging.getLogger(__name__)

DEFAULT_MARK = "✔️"
TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "habitt"


@dataclass(frozen=True)
class DayCell:
    day: Optional[int]
    checked: bool = False
    mark: Optional[str] = None
    raw: bool = False  # mark is trusted markup

    @property
    def disabled(self) -> bool:
        return self.day is None


@dataclass(frozen=True)
class RenderedTable:
    title: Optional[str]
    weekday_labels: Tuple[str, ...]
    weeks: Tuple[Tuple[DayCell, ...], ...]
    width: Optional[str] = None

    @property
    def style(self) -> str:
        return f"width: {self.width};" if self.width else ""


@dataclass(frozen=True)
class ErrorPanel:
    message: str
    kind: Optional[str] = None


RenderResult = Union[RenderedTable, ErrorPanel]


def weekday_labels(config: HabitSettings, week_start: int) -> Tuple[str, ...]:
    labels = config.day_labels
    return tuple(labels[(i + week_start) % 7] for i in range(7))


def _cell(day: Optional[int], ctx: RenderContext, raw: bool) -> DayCell:
    if day is None or day not in ctx.marks:
        return DayCell(day=day)
    text = ctx.marks[day]
    if text:
        return DayCell(day=day, checked=True, mark=text, raw=raw)
    return DayCell(day=day, checked=True, mark=DEFAULT_MARK)


def render(ctx: RenderContext, config: HabitSettings) -> RenderResult:
    if not ctx.ok:
        return ErrorPanel(message=ctx.error or "", kind=ctx.error_kind)

    raw = config.enable_raw_markup_in_marks
    weeks = build_weeks(ctx.first_weekday, ctx.week_start, ctx.month_days)
    return RenderedTable(
        title=ctx.month_label if config.display_head else None,
        weekday_labels=weekday_labels(config, ctx.week_start),
        weeks=tuple(tuple(_cell(d, ctx, raw) for d in week) for week in weeks),
        width=ctx.width,
    )


@lru_cache(maxsize=1)
def _env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_html(result: RenderResult) -> str:
    if isinstance(result, ErrorPanel):
        return _env().get_template("error.html.j2").render(panel=result)
    return _env().get_template("month.html.j2").render(table=result)


def render_block(source: str, config: HabitSettings) -> Tuple[RenderResult, str]:
    """Parse and render one habitt block, returning the structure and its HTML."""
    result = render(parse(source, config), config)
    try:
        html = render_html(result)
    except Exception:
        logger.exception("habitt_template_render_failed")
        raise
    return result, html
