"""
Snapshot schema for LearnQuest.

Defines the QuestSnapshot model: the complete serializable progress state
(page position, notes, completion flags, visited pages, finished flag).

Snapshots are immutable. Every change produces a new snapshot so that
observers can detect updates by identity.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class QuestSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page_index: int = Field(default=0, alias="pageIndex")
    notes: dict[str, Any] = {}
    completed: dict[str, bool] = {}
    visited: frozenset[int] = frozenset()
    finished: bool = False
    version: int
    build_id: str = Field(alias="buildId")

    @field_serializer("visited")
    def _serialize_visited(self, visited: frozenset[int]) -> list[int]:
        return sorted(visited)

    @classmethod
    def default(cls, version: int, build_id: str) -> "QuestSnapshot":
        """Fresh snapshot for a learner with no saved progress."""
        return cls(version=version, build_id=build_id, visited=frozenset({0}))

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    def to_payload(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "QuestSnapshot":
        """
        Build a snapshot from a saved payload.

        Raises:
            pydantic.ValidationError: If the payload does not match the schema
        """
        return cls.model_validate(payload)

    # -------------------------------------------------------------------------
    # Replacements
    # -------------------------------------------------------------------------

    def with_note(self, item_id: str, value: Any) -> "QuestSnapshot":
        return self.model_copy(update={"notes": {**self.notes, item_id: value}})

    def with_completion_toggled(self, item_id: str) -> "QuestSnapshot":
        flipped = not self.completed.get(item_id, False)
        return self.model_copy(update={"completed": {**self.completed, item_id: flipped}})

    def with_page(self, page_index: int) -> "QuestSnapshot":
        """Move to a page, adding it to the visited set."""
        return self.model_copy(update={
            "page_index": page_index,
            "visited": self.visited | {page_index},
        })

    def with_finished(self) -> "QuestSnapshot":
        return self.model_copy(update={"finished": True})

    def is_completed(self, item_id: str) -> bool:
        return self.completed.get(item_id, False)
