"""
QuestStateStore - Owner of the in-memory quest snapshot.

Responsibilities:
- Hydration on start: LMS suspend data, then local fallback, then defaults
- Rejecting saved state from another schema version or course build
- Snapshot replacement for note edits and completion toggles
- Writing every replacement to both persistence channels
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from learnquest.config import BUILD_ID, STATE_VERSION
from learnquest.schemas import QuestSnapshot

from .bridge import ScormBridge
from .local_store import LocalFallbackStore


logger = logging.getLogger(__name__)


Listener = Callable[[QuestSnapshot], None]


class HydrationSource(str, Enum):
    HOST = "host"
    LOCAL = "local"
    DEFAULT = "default"


class QuestStateStore:
    """
    Canonical quest snapshot with dual-channel persistence.

    The snapshot is never mutated in place: every change replaces it, so
    `store.snapshot is old` tells a reader whether anything changed.
    """

    def __init__(
        self,
        total_pages: int,
        bridge: Optional[ScormBridge] = None,
        local_store: Optional[LocalFallbackStore] = None,
        version: int = STATE_VERSION,
        build_id: str = BUILD_ID,
        force_fresh: bool = False,
    ):
        """
        Initialize the store and hydrate the snapshot.

        Args:
            total_pages: Number of pages in the course manifest
            bridge: LMS channel (connected beforehand by the caller)
            local_store: Local fallback channel
            version: Current snapshot schema version
            build_id: Current course build id
            force_fresh: Ignore any saved state and start from defaults
        """
        if total_pages < 1:
            raise ValueError(f"total_pages must be >= 1, got {total_pages}")
        self.total_pages = total_pages
        self.bridge = bridge
        self.local_store = local_store
        self.version = version
        self.build_id = build_id
        self._listeners: list[Listener] = []

        # Persistence is gated until the hydrated snapshot is in place
        self.hydrated = False
        self.hydration_source = HydrationSource.DEFAULT
        self._snapshot = self._hydrate(force_fresh)
        self.hydrated = True

    @property
    def snapshot(self) -> QuestSnapshot:
        return self._snapshot

    # -------------------------------------------------------------------------
    # Hydration
    # -------------------------------------------------------------------------

    def clamp_page(self, page_index: int) -> int:
        return min(max(page_index, 0), self.total_pages - 1)

    def _hydrate(self, force_fresh: bool) -> QuestSnapshot:
        source, payload = self._find_candidate()
        candidate = None

        if payload is None:
            logger.info("No saved progress; starting fresh")
        elif force_fresh:
            logger.info("Fresh start requested; ignoring saved progress")
        else:
            candidate = self._accept(payload, source)

        if candidate is None:
            self.hydration_source = HydrationSource.DEFAULT
            return QuestSnapshot.default(self.version, self.build_id)

        self.hydration_source = source
        page_index = self.clamp_page(candidate.page_index)
        return candidate.model_copy(update={
            "page_index": page_index,
            "visited": candidate.visited | {page_index},
        })

    def _find_candidate(self) -> tuple[HydrationSource, Optional[dict[str, Any]]]:
        if self.bridge is not None:
            payload = self.bridge.load_snapshot_payload()
            if payload is not None:
                return HydrationSource.HOST, payload
        if self.local_store is not None:
            payload = self.local_store.load()
            if payload is not None:
                return HydrationSource.LOCAL, payload
        return HydrationSource.DEFAULT, None

    def _accept(self, payload: dict[str, Any], source: HydrationSource) -> Optional[QuestSnapshot]:
        """Validate a saved payload; any mismatch discards it wholesale."""
        if payload.get("version") != self.version:
            logger.info(
                f"Discarding {source.value} progress from schema version "
                f"{payload.get('version')!r} (current {self.version})"
            )
            return None
        if payload.get("buildId") != self.build_id:
            logger.info(
                f"Discarding {source.value} progress from build "
                f"{payload.get('buildId')!r} (current {self.build_id!r})"
            )
            return None
        try:
            return QuestSnapshot.from_payload(payload)
        except ValidationError as e:
            logger.warning(f"Discarding invalid {source.value} progress: {e.error_count()} errors")
            return None

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def update(self, fn: Callable[[QuestSnapshot], QuestSnapshot]) -> bool:
        """
        Replace the snapshot with fn(snapshot).

        Returning the same object is a no-op (no listeners, no writes).
        A snapshot that cannot be serialized is rejected and the current
        one is kept, so memory never runs ahead of storage.

        Returns:
            True if the snapshot was replaced
        """
        current = self._snapshot
        nxt = fn(current)
        if nxt is current:
            return False
        try:
            payload = self._stamped_payload(nxt)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            logger.warning(f"Rejecting progress change that cannot be saved: {e}")
            return False
        self._snapshot = nxt
        self._persist(payload)
        self._notify()
        return True

    def set_note(self, item_id: str, value: Any) -> bool:
        return self.update(lambda s: s.with_note(item_id, value))

    def toggle_complete(self, item_id: str) -> bool:
        return self.update(lambda s: s.with_completion_toggled(item_id))

    def mark_finished(self) -> bool:
        return self.update(lambda s: s if s.finished else s.with_finished())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with each new snapshot.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        for listener in list(self._listeners):
            listener(self._snapshot)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def payload(self) -> dict[str, Any]:
        """Current snapshot stamped with this build's version and build id."""
        return self._stamped_payload(self._snapshot)

    def _stamped_payload(self, snapshot: QuestSnapshot) -> dict[str, Any]:
        stamped = snapshot.model_copy(update={
            "version": self.version,
            "build_id": self.build_id,
        })
        return stamped.to_payload()

    def _persist(self, payload: dict[str, Any]):
        if not self.hydrated:
            return

        if self.bridge is not None and self.bridge.lms_connected:
            try:
                if not self.bridge.save_snapshot(payload):
                    logger.warning("LMS did not accept progress; local copy remains")
            except Exception as e:
                logger.warning(f"LMS progress write failed: {e}")

        if self.local_store is not None:
            try:
                self.local_store.save(payload)
            except Exception as e:
                logger.warning(f"Local progress write failed: {e}")
