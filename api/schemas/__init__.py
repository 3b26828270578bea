from .habitt import (
    HabitSettings,
    DayCellVM,
    HabitTableVM,
    HabitRenderRequest,
    HabitRenderResponse,
    HabitDocumentRequest,
    HabitDocumentResponse,
    DEFAULT_DAY_LABELS,
    WEEKDAY_NAMES,
)
