"""Shared fixtures: fake LMS runtimes, storage and a course manifest."""

import pytest

from learnquest.runtime import LocalFallbackStore, MemoryStorage
from learnquest.schemas import build_pages

from tests.fakes import CurrentLmsApi, LegacyLmsApi


@pytest.fixture
def legacy_api():
    return LegacyLmsApi()


@pytest.fixture
def current_api():
    return CurrentLmsApi()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def local_store(storage):
    return LocalFallbackStore(storage)


@pytest.fixture
def pages():
    """10 pages: cover, contents, intro, preparation, a1-a3, team, conclusion, resources."""
    return build_pages(
        [
            {"id": "a1", "title": "Explore an Artist"},
            {"id": "a2", "title": "Medicinal Plants"},
            {"id": "a3", "title": "Make a Recipe"},
        ],
        intro={"title": "Introduction"},
        preparation={"title": "Preparation"},
        team={"title": "Team Reflection"},
    )
