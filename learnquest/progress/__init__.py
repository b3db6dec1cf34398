"""
LearnQuest Progress - Derived, read-only progress views.

This module provides:
- Activity and overall (section-gated) progress fractions
- Activity metadata and section milestones
- Accent colors for pages and activities
"""

from .accents import (
    ACTIVITY_ACCENTS,
    DEFAULT_ACCENT,
    normalize_hex,
    accent_for_activity_index,
    accent_for_page,
)

from .selectors import (
    ActivityProgress,
    ActivityMeta,
    Milestone,
    idx_by_type,
    activity_page_indices,
    build_activity_meta,
    compute_activity_progress,
    milestone_slots,
    compute_curved_progress,
    all_activities_completed,
    can_toggle_completion,
    build_progress_summary,
)

__all__ = [
    # Accents
    "ACTIVITY_ACCENTS",
    "DEFAULT_ACCENT",
    "normalize_hex",
    "accent_for_activity_index",
    "accent_for_page",
    # Selectors
    "ActivityProgress",
    "ActivityMeta",
    "Milestone",
    "idx_by_type",
    "activity_page_indices",
    "build_activity_meta",
    "compute_activity_progress",
    "milestone_slots",
    "compute_curved_progress",
    "all_activities_completed",
    "can_toggle_completion",
    "build_progress_summary",
]
