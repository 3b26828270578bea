import logging

from fastapi import APIRouter, Body
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from typing import Dict, Any

from ..services import settings_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/settings", tags=["settings"])


@router.get("")
def settings_get() -> Dict[str, Any]:
    return settings_store.get_store().as_dict()


@router.patch("")
def settings_patch(
    patch: Dict[str, Any] = Body(..., examples=[{"startOfWeek": 1, "Monday": "Mo"}]),
) -> Dict[str, Any]:
    store = settings_store.get_store()
    try:
        updated = store.update(patch)
    except ValidationError as exc:
        logger.info("habitt_settings_rejected")
        raise RequestValidationError(exc.errors()) from exc
    return updated.model_dump(by_alias=True)


@router.delete("")
def settings_reset() -> Dict[str, Any]:
    return settings_store.get_store().reset().model_dump(by_alias=True)
