from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any, Mapping

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
DEFAULT_DAY_LABELS = ("SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT")
DEFAULT_MONTH_FORMAT = "YYYY-MM"

_LABEL_FIELDS = tuple(name.lower() for name in WEEKDAY_NAMES)
_LABEL_DEFAULTS = dict(zip(_LABEL_FIELDS, DEFAULT_DAY_LABELS))


class HabitSettings(BaseModel):
    """User preferences for habitt tables, keyed the way the host stores them."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    start_of_week: int = Field(default=0, ge=0, le=6, alias="startOfWeek")  # Sunday=0
    month_format: str = Field(default=DEFAULT_MONTH_FORMAT, alias="monthFormat")
    display_head: bool = Field(default=True, alias="displayHead")
    enable_raw_markup_in_marks: bool = Field(default=False, alias="enableRawMarkupInMarks")
    sunday: str = Field(default="SUN", alias="Sunday")
    monday: str = Field(default="MON", alias="Monday")
    tuesday: str = Field(default="TUE", alias="Tuesday")
    wednesday: str = Field(default="WED", alias="Wednesday")
    thursday: str = Field(default="THU", alias="Thursday")
    friday: str = Field(default="FRI", alias="Friday")
    saturday: str = Field(default="SAT", alias="Saturday")

    @field_validator(*_LABEL_FIELDS, mode="before")
    @classmethod
    def _empty_label_resets(cls, value: Any, info) -> Any:
        if value is None or value == "":
            return _LABEL_DEFAULTS[info.field_name]
        return value

    @field_validator("month_format", mode="before")
    @classmethod
    def _empty_format_resets(cls, value: Any) -> Any:
        if value is None or value == "":
            return DEFAULT_MONTH_FORMAT
        return value

    @property
    def day_labels(self) -> tuple:
        """Labels indexed Sunday=0 .. Saturday=6."""
        return tuple(getattr(self, name) for name in _LABEL_FIELDS)

    def apply(self, patch: Mapping[str, Any]) -> "HabitSettings":
        """Return a validated copy with ``patch`` applied on top of this snapshot."""
        merged = self.model_dump(by_alias=True)
        merged.update(to_host_keys(patch))
        return type(self).model_validate(merged)


def to_host_keys(patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept both python field names and host keys; unknown keys are dropped."""
    fields = HabitSettings.model_fields
    aliases = {info.alias: info.alias for info in fields.values()}
    aliases.update({name: info.alias for name, info in fields.items()})
    return {aliases[key]: value for key, value in patch.items() if key in aliases}


class DayCellVM(BaseModel):
    day: Optional[int] = None  # None for padding cells
    disabled: bool = False
    checked: bool = False
    mark: Optional[str] = None  # annotation text or the default glyph


class HabitTableVM(BaseModel):
    title: Optional[str] = None  # month label, omitted when displayHead is off
    weekday_labels: List[str]
    weeks: List[List[DayCellVM]]
    width: Optional[str] = None


class HabitRenderRequest(BaseModel):
    source: str
    settings: Optional[Dict[str, Any]] = None  # per-call overrides, never persisted

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "source": "[month: 2021-01]\n[width: 50%]\n(1)(2,ran 5k)(15,✅)",
                "settings": {"startOfWeek": 1},
            }
        }
    )


class HabitRenderResponse(BaseModel):
    ok: bool
    html: str
    table: Optional[HabitTableVM] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None  # missing_month | invalid_month


class HabitDocumentRequest(BaseModel):
    markdown: str
    settings: Optional[Dict[str, Any]] = None


class HabitDocumentResponse(BaseModel):
    markdown: str
    blocks: int
