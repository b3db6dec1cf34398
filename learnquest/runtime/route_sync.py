"""
RouteSynchronizer - Keep the navigation route and the snapshot in step.

Navigation owns the requested page index (e.g. from the URL hash). The
synchronizer folds each requested index into the snapshot, expanding the
visited set, and skips repeats so identical navigation events cause no
writes.
"""

import re

from .quest_state import QuestStateStore


_HASH_ROUTE_RE = re.compile(r"^page/(-?\d+)")


def parse_hash_route(hash_value: str) -> int:
    """
    Parse a "#/page/N" route into a page index.

    Anything that isn't a page route parses as page 0.
    """
    path = "/".join(p for p in (hash_value or "").lstrip("#").split("/") if p)
    match = _HASH_ROUTE_RE.match(path)
    return int(match.group(1)) if match else 0


def format_hash_route(page_index: int) -> str:
    return f"#/page/{page_index}"


class RouteSynchronizer:
    """Fold externally requested page indices into a QuestStateStore."""

    def __init__(self, store: QuestStateStore):
        self.store = store

    def sync(self, requested_index: int) -> bool:
        """
        Apply a requested page index.

        The index is clamped to the course. A new snapshot is produced only
        if the page changes or has not been visited yet.

        Returns:
            True if the snapshot was replaced
        """
        idx = self.store.clamp_page(requested_index)

        def apply(snapshot):
            if idx == snapshot.page_index and idx in snapshot.visited:
                return snapshot
            return snapshot.with_page(idx)

        return self.store.update(apply)

    def sync_hash(self, hash_value: str) -> bool:
        return self.sync(parse_hash_route(hash_value))
