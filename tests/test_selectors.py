"""Tests for the progress selectors and accent helpers."""

import pytest

from learnquest.progress import (
    DEFAULT_ACCENT,
    accent_for_activity_index,
    accent_for_page,
    activity_page_indices,
    all_activities_completed,
    build_activity_meta,
    build_progress_summary,
    can_toggle_completion,
    compute_activity_progress,
    compute_curved_progress,
    idx_by_type,
    milestone_slots,
    normalize_hex,
)
from learnquest.schemas import PageDescriptor, PageType, QuestSnapshot, build_pages

# Page layout of the `pages` fixture:
# 0 cover, 1 contents, 2 intro, 3 preparation, 4-6 activities,
# 7 team, 8 conclusion, 9 resources
ALL_PAGES = set(range(10))


class TestLookups:
    """Test manifest lookups."""

    def test_idx_by_type(self, pages):
        assert idx_by_type(pages, PageType.INTRO) == 2
        assert idx_by_type(pages, PageType.RESOURCES) == 9
        assert idx_by_type(pages, PageType.REFLECTION) == -1

    def test_activity_page_indices(self, pages):
        assert activity_page_indices(pages) == [4, 5, 6]

    def test_activity_meta(self, pages):
        meta = build_activity_meta(pages)
        assert [m.id for m in meta] == ["a1", "a2", "a3"]
        assert meta[1].number == 2
        assert meta[1].index == 5
        assert meta[1].title == "Medicinal Plants"
        assert meta[0].accent == "#2563EB"

    def test_activity_meta_default_ids(self):
        pages = build_pages([{}, {}])
        meta = build_activity_meta(pages)
        assert [m.id for m in meta] == ["activity-1", "activity-2"]
        assert meta[0].title == "Activity 1"


class TestActivityProgress:
    """Test visited-activity counts."""

    def test_none_visited(self):
        progress = compute_activity_progress([4, 5, 6], {0})
        assert progress.count == 0
        assert progress.frac == 0.0

    def test_some_visited(self):
        progress = compute_activity_progress([4, 5, 6], {0, 4, 6})
        assert progress.count == 2
        assert progress.total == 3
        assert progress.frac == pytest.approx(2 / 3)

    def test_no_activities(self):
        assert compute_activity_progress([], {0, 1}).frac == 0.0


class TestCurvedProgress:
    """Test section-gated overall progress."""

    def test_slots_without_reflection(self, pages):
        labels = [slot.label for slot in milestone_slots(pages)]
        assert labels == [
            "Introduction", "Preparation", "Activities", "Team Reflection", "Conclusion", "Resources",
        ]

    def test_slots_with_reflection(self):
        pages = build_pages([{"id": "a1"}], reflection={"title": "Reflection"})
        labels = [slot.label for slot in milestone_slots(pages)]
        assert "Reflection" in labels
        assert len(labels) == 7

    def test_nothing_visited(self, pages):
        assert compute_curved_progress(pages, {0}) == 0.0

    def test_introduction_only(self, pages):
        assert compute_curved_progress(pages, {0, 1, 2}) == pytest.approx(1 / 6)

    def test_partial_activities(self, pages):
        assert compute_curved_progress(pages, {0, 1, 2, 3, 4}) == pytest.approx((2 + 1 / 3) / 6)

    def test_everything_visited(self, pages):
        assert compute_curved_progress(pages, ALL_PAGES) == pytest.approx(1.0)

    def test_out_of_order_visits_not_credited(self, pages):
        # Preparation skipped: later sections count for nothing
        assert compute_curved_progress(pages, {2, 4, 5, 6, 7, 8, 9}) == pytest.approx(1 / 6)

    def test_unvisited_team_blocks_later_sections(self, pages):
        visited = ALL_PAGES - {7}
        assert compute_curved_progress(pages, visited) == pytest.approx(3 / 6)

    def test_explicit_activity_fraction(self, pages):
        assert compute_curved_progress(pages, {2, 3}, activity_frac=0.5) == pytest.approx(2.5 / 6)

    def test_reflection_slot_counts(self):
        pages = build_pages([{"id": "a1"}], reflection={})
        # cover, contents, intro, prep, a1, reflection, team, conclusion, resources
        visited = set(range(len(pages))) - {5}
        assert compute_curved_progress(pages, visited) == pytest.approx(4 / 7)


class TestCompletion:
    """Test activity completion views."""

    def test_all_activities_completed(self, pages):
        assert all_activities_completed(pages, {"a1": True, "a2": True, "a3": True})
        assert not all_activities_completed(pages, {"a1": True, "a2": False, "a3": True})
        assert not all_activities_completed(pages, {})

    def test_completion_requires_started_activity(self):
        fresh = QuestSnapshot.default(3, "b")
        assert not can_toggle_completion(fresh, "a1")
        assert not can_toggle_completion(fresh.with_note("a1", {"text": "<p><br></p>"}), "a1")
        assert can_toggle_completion(fresh.with_note("a1", {"text": "my answer"}), "a1")

    def test_completion_by_activity_kind(self):
        snapshot = QuestSnapshot.default(3, "b").with_note("a2", {"cards": [{"front": "", "back": ""}]})
        assert not can_toggle_completion(snapshot, "a2", "cards")
        snapshot = snapshot.with_note("a2", {"cards": [{"front": "word", "back": ""}]})
        assert can_toggle_completion(snapshot, "a2", "cards")

    def test_completed_activity_can_be_reopened(self):
        snapshot = QuestSnapshot.default(3, "b").with_completion_toggled("a1")
        assert can_toggle_completion(snapshot, "a1")

    def test_progress_summary(self, pages):
        snapshot = QuestSnapshot(
            page_index=4,
            visited=frozenset({0, 1, 2, 3, 4}),
            completed={"a1": True},
            version=3,
            build_id="b",
        )
        summary = build_progress_summary(pages, snapshot)
        assert summary["activities_visited"] == 1
        assert summary["activities_total"] == 3
        assert summary["activities_completed"] == 1
        assert summary["completion_percent"] == 33.3
        assert summary["overall_progress"] == pytest.approx((2 + 1 / 3) / 6)
        assert summary["finished"] is False


class TestAccents:
    """Test accent colors."""

    def test_normalize_hex(self):
        assert normalize_hex("2563eb") == "#2563EB"
        assert normalize_hex(" #abcdef ") == "#ABCDEF"
        assert normalize_hex("#abc") is None
        assert normalize_hex(None) is None
        assert normalize_hex("blue") is None

    def test_activity_accents(self):
        assert accent_for_activity_index(0) == "#2563EB"
        assert accent_for_activity_index(9) == "#DB5A42"
        assert accent_for_activity_index(10) == DEFAULT_ACCENT

    def test_page_accents(self):
        assert accent_for_page(PageDescriptor(type=PageType.INTRO)) == "#4380D6"
        assert accent_for_page(PageDescriptor(type=PageType.RESOURCES)) == "#10B981"
        assert accent_for_page(PageDescriptor(type=PageType.ACTIVITY, activity_index=2)) == "#B45309"
        assert accent_for_page(PageDescriptor(type=PageType.TEAM)) == DEFAULT_ACCENT
        assert accent_for_page(None) == DEFAULT_ACCENT
