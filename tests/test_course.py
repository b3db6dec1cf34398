"""
Integration tests for open_course: LMS discovery, hydration and
navigation wired together the way the shell uses them.
"""

import json

import pytest

from learnquest.config import Settings
from learnquest.runtime import (
    HydrationSource,
    MemoryStorage,
    SUSPEND_DATA_KEY,
    SessionState,
    open_course,
)
from learnquest.schemas import CourseManifest

from tests.fakes import CurrentLmsApi, lms_window


@pytest.fixture
def manifest(pages):
    return CourseManifest(title="Test Quest", pages=pages)


@pytest.fixture
def settings(tmp_path):
    return Settings(storage_path=tmp_path / "storage.db")


class TestOpenCourse:
    """Test runtime wiring."""

    def test_offline_course(self, manifest, settings, storage):
        course = open_course(manifest, settings, storage=storage)
        assert course.lms_connected is False
        assert course.store.hydration_source == HydrationSource.DEFAULT

        course.navigator.next_page()
        assert json.loads(storage.get_item("quest_state_v1"))["pageIndex"] == 1

    def test_default_storage_is_sqlite(self, manifest, settings):
        course = open_course(manifest, settings)
        course.store.set_note("a1", "x")
        assert settings.storage_path.exists()
        assert course.local_store.load()["notes"] == {"a1": "x"}

    def test_resume_in_lms(self, manifest, settings, storage):
        api = CurrentLmsApi()
        window = lms_window(api, slot="API_1484_11", depth=3)

        first = open_course(manifest, settings, window=window, storage=MemoryStorage())
        first.navigator.goto_page(5)
        first.store.set_note("a2", {"text": "medicine wheel"})
        assert first.close() is True
        assert first.session.state == SessionState.TERMINATED

        # Next launch: new page load, same LMS record, no local copy
        api.calls.clear()
        second = open_course(manifest, settings, window=lms_window(api, "API_1484_11", 3), storage=storage)
        assert second.lms_connected
        assert second.store.hydration_source == HydrationSource.HOST
        assert second.store.snapshot.page_index == 5
        assert second.store.snapshot.notes["a2"] == {"text": "medicine wheel"}

    def test_fresh_url_skips_saved_progress(self, manifest, settings, storage):
        first = open_course(manifest, settings, storage=storage)
        first.navigator.goto_page(4)

        second = open_course(manifest, settings, storage=storage, url="https://lms.example/?fresh")
        assert second.store.snapshot.page_index == 0
        assert second.store.hydration_source == HydrationSource.DEFAULT

    def test_new_build_discards_progress(self, manifest, settings, storage):
        first = open_course(manifest, settings, storage=storage)
        first.navigator.goto_page(4)

        rebuilt = settings.model_copy(update={"build_id": "next-build"})
        second = open_course(manifest, rebuilt, storage=storage)
        assert second.store.snapshot.page_index == 0

    def test_suspend_data_written_to_lms(self, manifest, settings, storage):
        api = CurrentLmsApi()
        course = open_course(manifest, settings, window=lms_window(api, "API_1484_11"), storage=storage)
        course.store.toggle_complete("a1")
        assert json.loads(api.data[SUSPEND_DATA_KEY])["completed"] == {"a1": True}
        assert api.data["cmi.completion_status"] == "incomplete"

    def test_on_route(self, manifest, settings, storage):
        routes = []
        course = open_course(manifest, settings, storage=storage, on_route=routes.append)
        course.navigator.goto_page(2)
        assert routes == [2]
