"""
Course manifest schemas for LearnQuest.

The manifest is the static, ordered list of pages that make up the course.
It is read-only at runtime: the state store only needs its length, and the
progress selectors need each page's type and activity id.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


class PageType(str, Enum):
    COVER = "cover"
    CONTENTS = "contents"
    INTRO = "intro"
    PREPARATION = "preparation"
    ACTIVITY = "activity"
    TEAM = "team"
    REFLECTION = "reflection"
    CONCLUSION = "conclusion"
    RESOURCES = "resources"


class PageDescriptor(BaseModel):
    type: PageType
    content: dict[str, Any] = {}
    activity_index: Optional[int] = Field(default=None, ge=0)  # 0-based, activity pages only

    @property
    def item_id(self) -> Optional[str]:
        """Stable id used as the notes/completed key for activity pages."""
        if self.type != PageType.ACTIVITY:
            return None
        return self.content.get("id") or f"activity-{(self.activity_index or 0) + 1}"

    @property
    def title(self) -> str:
        if self.content.get("title"):
            return self.content["title"]
        if self.type == PageType.ACTIVITY:
            return f"Activity {(self.activity_index or 0) + 1}"
        return self.type.value.capitalize()


class CourseManifest(BaseModel):
    title: str = "Learning Quest"
    pages: list[PageDescriptor] = Field(min_length=1)

    @property
    def total_pages(self) -> int:
        return len(self.pages)


def build_pages(
    activities: list[dict[str, Any]],
    cover: Optional[dict[str, Any]] = None,
    intro: Optional[dict[str, Any]] = None,
    preparation: Optional[dict[str, Any]] = None,
    reflection: Optional[dict[str, Any]] = None,
    team: Optional[dict[str, Any]] = None,
    conclusion: Optional[dict[str, Any]] = None,
    resources: Optional[dict[str, Any]] = None,
) -> list[PageDescriptor]:
    """
    Assemble pages in the standard course order.

    Order: cover, contents, intro, preparation, activities..., reflection
    (only when given), team, conclusion, resources.
    """
    pages = [
        PageDescriptor(type=PageType.COVER, content=cover or {}),
        PageDescriptor(type=PageType.CONTENTS),
        PageDescriptor(type=PageType.INTRO, content=intro or {}),
        PageDescriptor(type=PageType.PREPARATION, content=preparation or {}),
    ]
    for idx, activity in enumerate(activities):
        pages.append(PageDescriptor(type=PageType.ACTIVITY, content=activity, activity_index=idx))
    if reflection is not None:
        pages.append(PageDescriptor(type=PageType.REFLECTION, content=reflection))
    pages.append(PageDescriptor(type=PageType.TEAM, content=team or {}))
    pages.append(PageDescriptor(type=PageType.CONCLUSION, content=conclusion or {}))
    pages.append(PageDescriptor(type=PageType.RESOURCES, content=resources or {}))
    return pages


def load_manifest(path: str | Path) -> CourseManifest:
    """
    Load a course manifest from YAML.

    The file either lists `pages` explicitly or gives `activities` plus the
    optional section contents, in which case pages are built in the standard
    order.

    Args:
        path: Path to the course YAML file

    Returns:
        Validated CourseManifest

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If the content doesn't match the schema
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Course manifest not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if "pages" in data:
        return CourseManifest.model_validate(data)

    sections = data.get("sections", {})
    pages = build_pages(
        data.get("activities", []),
        cover=sections.get("cover"),
        intro=sections.get("intro"),
        preparation=sections.get("preparation"),
        reflection=sections.get("reflection"),
        team=sections.get("team"),
        conclusion=sections.get("conclusion"),
        resources=sections.get("resources"),
    )
    return CourseManifest(title=data.get("title", "Learning Quest"), pages=pages)
