"""Accent colors for pages and activities."""

import re
from typing import Optional

from learnquest.schemas import PageDescriptor, PageType


ACTIVITY_ACCENTS = {
    1: "#2563EB",
    2: "#047857",
    3: "#B45309",
    4: "#4338CA",
    5: "#BE123C",
    6: "#0891B2",
    7: "#0D9488",
    8: "#E11D48",
    9: "#934D6C",
    10: "#DB5A42",
}

DEFAULT_ACCENT = "#67AAF9"

PAGE_ACCENTS = {
    PageType.INTRO: "#4380D6",
    PageType.PREPARATION: "#7443D6",
    PageType.CONCLUSION: "#D66843",
    PageType.RESOURCES: "#10B981",
}

_HEX_RE = re.compile(r"^#[0-9a-f]{6}$", re.IGNORECASE)


def normalize_hex(value: Optional[str]) -> Optional[str]:
    """Normalize to "#RRGGBB" uppercase; None if not a 6-digit hex color."""
    if not value:
        return None
    s = str(value).strip()
    if not s.startswith("#"):
        s = f"#{s}"
    return s.upper() if _HEX_RE.match(s) else None


def accent_for_activity_index(idx: int) -> str:
    """Accent for a 0-based activity index."""
    return normalize_hex(ACTIVITY_ACCENTS.get(idx + 1)) or DEFAULT_ACCENT


def accent_for_page(page: Optional[PageDescriptor]) -> str:
    if page is None:
        return DEFAULT_ACCENT
    if page.type == PageType.ACTIVITY:
        return accent_for_activity_index(page.activity_index or 0)
    return PAGE_ACCENTS.get(page.type, DEFAULT_ACCENT)
