"""Render every ```habitt fenced block of a markdown document in place."""

from __future__ import annotations

import logging
import re
from typing import Tuple

from ..schemas.habitt import HabitSettings
from .habit_renderer import render_block

logger = logging.getLogger(__name__)

# Closing fence must repeat the opening one exactly.
FENCE_RE = re.compile(
    r"^(?P<fence>`{3,}|~{3,})[ \t]*habitt[ \t]*\r?\n(?P<body>.*?)^(?P=fence)[ \t]*(?=\r?$)",
    re.MULTILINE | re.DOTALL,
)


def render_document(markdown: str, config: HabitSettings) -> Tuple[str, int]:
    """Return the document with each habitt block replaced by its HTML, and the block count."""
    count = 0

    def _replace(m: re.Match) -> str:
        nonlocal count
        count += 1
        _, html = render_block(m.group("body"), config)
        return html

    out = FENCE_RE.sub(_replace, markdown)
    logger.debug("habitt_document_rendered", extra={"blocks": count})
    return out, count
