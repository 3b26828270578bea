from fastapi import APIRouter
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from typing import Optional, Dict, Any

from ..schemas.habitt import (
    DayCellVM,
    HabitDocumentRequest,
    HabitDocumentResponse,
    HabitRenderRequest,
    HabitRenderResponse,
    HabitSettings,
    HabitTableVM,
)
from ..services import settings_store
from ..services.habit_document import render_document
from ..services.habit_renderer import ErrorPanel, RenderResult, render_block

router = APIRouter(prefix="/v1/habitt", tags=["habitt"])


def effective_settings(overrides: Optional[Dict[str, Any]]) -> HabitSettings:
    base = settings_store.get_store().get()
    if not overrides:
        return base
    try:
        return base.apply(overrides)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


def _table_vm(result: RenderResult) -> Optional[HabitTableVM]:
    if isinstance(result, ErrorPanel):
        return None
    return HabitTableVM(
        title=result.title,
        weekday_labels=list(result.weekday_labels),
        weeks=[
            [DayCellVM(day=c.day, disabled=c.disabled, checked=c.checked, mark=c.mark) for c in week]
            for week in result.weeks
        ],
        width=result.width,
    )


@router.post("/render", response_model=HabitRenderResponse)
def habitt_render(req: HabitRenderRequest):
    result, html = render_block(req.source, effective_settings(req.settings))
    if isinstance(result, ErrorPanel):
        return HabitRenderResponse(ok=False, html=html, error=result.message, error_kind=result.kind)
    return HabitRenderResponse(ok=True, html=html, table=_table_vm(result))


@router.post("/render.html", response_class=HTMLResponse)
def habitt_render_html(req: HabitRenderRequest):
    _, html = render_block(req.source, effective_settings(req.settings))
    return HTMLResponse(html)


@router.post("/document", response_model=HabitDocumentResponse)
def habitt_document(req: HabitDocumentRequest):
    markdown, blocks = render_document(req.markdown, effective_settings(req.settings))
    return HabitDocumentResponse(markdown=markdown, blocks=blocks)
