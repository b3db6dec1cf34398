"""
LearnQuest Schemas - Pydantic models for course progress.

This module exports all schema classes for:
- Snapshot: the persisted progress state
- Notes: structured reflection shapes and content checks
- Manifest: the static page list of the course
"""

# Snapshot schemas
from .snapshot import QuestSnapshot

# Note schemas
from .notes import (
    RichTextNote,
    BulletNote,
    Flashcard,
    CardsNote,
    RecipesNote,
    has_note_content,
    has_activity_started,
    editable_note_text,
)

# Manifest schemas
from .manifest import (
    PageType,
    PageDescriptor,
    CourseManifest,
    build_pages,
    load_manifest,
)

__all__ = [
    # Snapshot
    'QuestSnapshot',
    # Notes
    'RichTextNote',
    'BulletNote',
    'Flashcard',
    'CardsNote',
    'RecipesNote',
    'has_note_content',
    'has_activity_started',
    'editable_note_text',
    # Manifest
    'PageType',
    'PageDescriptor',
    'CourseManifest',
    'build_pages',
    'load_manifest',
]
