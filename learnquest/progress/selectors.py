"""
Progress selectors - Read-only views derived from the quest snapshot.

All functions are pure: they take the page manifest and snapshot parts and
return derived values for display.
"""

from dataclasses import dataclass
from typing import AbstractSet, Mapping, Optional

from learnquest.schemas import PageDescriptor, PageType, QuestSnapshot, has_activity_started

from .accents import accent_for_activity_index


@dataclass(frozen=True)
class ActivityProgress:
    """Visited activity pages out of all activity pages."""
    count: int
    total: int
    frac: float


@dataclass(frozen=True)
class ActivityMeta:
    id: str
    title: str
    number: int      # 1-based
    index: int       # page index
    accent: str


@dataclass(frozen=True)
class Milestone:
    """Progress slot for one course section."""
    label: str
    index: int       # first page of the section
    hue: int


def idx_by_type(pages: list[PageDescriptor], page_type: PageType) -> int:
    """Index of the first page of a type, or -1."""
    for idx, page in enumerate(pages):
        if page.type == page_type:
            return idx
    return -1


def activity_page_indices(pages: list[PageDescriptor]) -> list[int]:
    return [idx for idx, page in enumerate(pages) if page.type == PageType.ACTIVITY]


def build_activity_meta(pages: list[PageDescriptor]) -> list[ActivityMeta]:
    meta = []
    for number, idx in enumerate(activity_page_indices(pages), start=1):
        page = pages[idx]
        meta.append(ActivityMeta(
            id=page.content.get("id") or f"activity-{number}",
            title=page.content.get("title") or f"Activity {number}",
            number=number,
            index=idx,
            accent=accent_for_activity_index(number - 1),
        ))
    return meta


def compute_activity_progress(indices: list[int], visited: AbstractSet[int]) -> ActivityProgress:
    count = sum(1 for idx in indices if idx in visited)
    frac = count / len(indices) if indices else 0.0
    return ActivityProgress(count=count, total=len(indices), frac=frac)


def milestone_slots(pages: list[PageDescriptor]) -> list[Milestone]:
    """
    Ordered course sections used for overall progress.

    Reflection is included only when the course has a reflection page.
    """
    activities = activity_page_indices(pages)
    slots = [
        Milestone("Introduction", idx_by_type(pages, PageType.INTRO), 215),
        Milestone("Preparation", idx_by_type(pages, PageType.PREPARATION), 260),
        Milestone("Activities", activities[0] if activities else -1, 0),
        Milestone("Team Reflection", idx_by_type(pages, PageType.TEAM), 212),
    ]
    reflection = idx_by_type(pages, PageType.REFLECTION)
    if reflection >= 0:
        slots.append(Milestone("Reflection", reflection, 330))
    slots.append(Milestone("Conclusion", idx_by_type(pages, PageType.CONCLUSION), 15))
    slots.append(Milestone("Resources", idx_by_type(pages, PageType.RESOURCES), 145))
    return slots


def compute_curved_progress(
    pages: list[PageDescriptor],
    visited: AbstractSet[int],
    activity_frac: Optional[float] = None,
) -> float:
    """
    Overall progress in [0, 1] across the course sections.

    Each section is worth the same. The activities section counts its own
    visited fraction, and only once preparation has been visited. Credit
    stops at the first section that isn't complete, so sections visited out
    of order add nothing until the ones before them are done.

    Args:
        pages: Ordered course pages
        visited: Visited page indices
        activity_frac: Activity fraction (default: computed from visited)
    """
    if activity_frac is None:
        activity_frac = compute_activity_progress(activity_page_indices(pages), visited).frac

    def visited_has(idx: int) -> bool:
        return idx >= 0 and idx in visited

    fractions = []
    for slot in milestone_slots(pages):
        if slot.label == "Activities":
            prep = idx_by_type(pages, PageType.PREPARATION)
            fractions.append(activity_frac if visited_has(prep) else 0.0)
        else:
            fractions.append(1.0 if visited_has(slot.index) else 0.0)

    acc = 0.0
    for f in fractions:
        f = max(0.0, min(1.0, f))
        if f >= 1:
            acc += 1
        else:
            acc += f
            break
    return acc / len(fractions)


def all_activities_completed(pages: list[PageDescriptor], completed: Mapping[str, bool]) -> bool:
    return all(completed.get(meta.id, False) for meta in build_activity_meta(pages))


def can_toggle_completion(snapshot: QuestSnapshot, item_id: str, kind: Optional[str] = None) -> bool:
    """
    Whether the completion control is offered for an activity.

    Completion can only be claimed once the activity has been started; a
    completed activity can always be reopened.
    """
    if snapshot.is_completed(item_id):
        return True
    return has_activity_started(snapshot.notes.get(item_id), kind)


def build_progress_summary(pages: list[PageDescriptor], snapshot: QuestSnapshot) -> dict:
    """Get progress summary for display."""
    activities = compute_activity_progress(activity_page_indices(pages), snapshot.visited)
    meta = build_activity_meta(pages)
    completed_count = sum(1 for m in meta if snapshot.completed.get(m.id, False))

    return {
        "total_pages": len(pages),
        "page_index": snapshot.page_index,
        "visited_pages": len(snapshot.visited),
        "activities_visited": activities.count,
        "activities_total": activities.total,
        "activities_completed": completed_count,
        "all_activities_completed": all_activities_completed(pages, snapshot.completed),
        "overall_progress": compute_curved_progress(pages, snapshot.visited, activities.frac),
        "completion_percent": round(completed_count / len(meta) * 100, 1) if meta else 0,
        "finished": snapshot.finished,
    }
