"""
Note schemas for LearnQuest.

Activities store the learner's reflections as one of several shapes:
- Free text (a plain string)
- Rich text body
- Bullet list
- Flashcard list
- Grouped recipe list

The state store treats notes as opaque values. This module provides the
shapes for callers that build notes, and content checks used to decide
whether an activity has been started.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel


class RichTextNote(BaseModel):
    text: str = ""  # may contain HTML from the rich editor


class BulletNote(BaseModel):
    bullets: list[str] = []


class Flashcard(BaseModel):
    front: str = ""
    back: str = ""


class CardsNote(BaseModel):
    cards: list[Flashcard] = []


class RecipesNote(BaseModel):
    """Recipes are free-form groups built by the learner."""
    recipes: list[dict[str, Any]] = []


# -----------------------------------------------------------------------------
# Content checks
# -----------------------------------------------------------------------------

_EMPTY_HTML_RE = re.compile(r"^(?:\s|<br\s*/?>|&nbsp;|<p>\s*</p>)*$", re.IGNORECASE)
_PARAGRAPH_TAGS_RE = re.compile(r"</?p>|<br\s*/?>", re.IGNORECASE)
_MAX_DEPTH = 4


def _as_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def is_non_empty_text(value: Any) -> bool:
    """Check a string for visible text (empty editor markup counts as blank)."""
    if not isinstance(value, str):
        return False
    s = value.strip()
    if not s:
        return False
    if s.startswith("<") and _EMPTY_HTML_RE.match(_PARAGRAPH_TAGS_RE.sub("", s).strip()):
        return False
    return len(re.sub(r"&nbsp;", "", s, flags=re.IGNORECASE).strip()) > 0


def _has_meaningful_value(value: Any, depth: int = 0) -> bool:
    if is_non_empty_text(value):
        return True
    if depth > _MAX_DEPTH:
        return False
    if isinstance(value, (list, tuple)):
        return any(_has_meaningful_value(v, depth + 1) for v in value)
    if isinstance(value, dict):
        # values only, keys are structure
        return any(_has_meaningful_value(v, depth + 1) for v in value.values())
    return False


def _card_started(card: Any) -> bool:
    if not isinstance(card, dict):
        return False
    return is_non_empty_text(str(card.get("front") or "")) or \
        is_non_empty_text(str(card.get("back") or ""))


def has_note_content(value: Any) -> bool:
    """
    Check whether a saved note holds anything the learner actually wrote.

    Args:
        value: A note in any supported shape (string, dict or note model)

    Returns:
        True if the note has visible content
    """
    value = _as_plain(value)
    if not value:
        return False
    if is_non_empty_text(value):
        return True
    if not isinstance(value, dict):
        return False

    if is_non_empty_text(value.get("text")):
        return True

    bullets = value.get("bullets")
    if isinstance(bullets, list) and any(is_non_empty_text(str(b)) for b in bullets):
        return True

    cards = value.get("cards")
    if isinstance(cards, list) and any(_card_started(c) for c in cards):
        return True

    recipes = value.get("recipes")
    if isinstance(recipes, list) and recipes:
        return True

    return _has_meaningful_value(value)


def has_cards_started(value: Any) -> bool:
    value = _as_plain(value)
    cards = value.get("cards") if isinstance(value, dict) else None
    return isinstance(cards, list) and any(_card_started(c) for c in cards)


def has_recipes_started(value: Any) -> bool:
    value = _as_plain(value)
    recipes = value.get("recipes") if isinstance(value, dict) else None
    return isinstance(recipes, list) and len(recipes) > 0


def has_activity_started(value: Any, kind: Optional[str] = None) -> bool:
    """
    Check whether an activity has been started, by activity kind.

    Args:
        value: The saved note for the activity
        kind: "notes", "cards", "recipes", or None to infer from the shape
    """
    if kind == "notes":
        return has_note_content(value)
    if kind == "cards":
        return has_cards_started(value)
    if kind == "recipes":
        return has_recipes_started(value)

    plain = _as_plain(value)
    if isinstance(plain, dict) and isinstance(plain.get("cards"), list):
        return has_cards_started(plain)
    if isinstance(plain, dict) and isinstance(plain.get("recipes"), list):
        return has_recipes_started(plain)
    return has_note_content(plain)


def editable_note_text(value: Any) -> Optional[str]:
    """
    Text of a note the plain text editor can safely rewrite.

    Returns:
        The note text ("" for no note), or None for structured notes
        (bullets, cards, recipes, ...) that a text edit would overwrite
    """
    value = _as_plain(value)
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and set(value) <= {"text"}:
        text = value.get("text")
        return text if isinstance(text, str) else ("" if text is None else None)
    return None
