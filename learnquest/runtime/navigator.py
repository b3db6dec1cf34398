"""
CourseNavigator - Page-to-page movement through the course.

Provides:
- Direct jumps, next and previous
- Finishing the course from the last page (LMS completion + finished flag)

All page changes go through the RouteSynchronizer, which stays the only
writer of the page index and visited set.
"""

import logging
from typing import Callable, Optional

from learnquest.schemas import PageDescriptor, PageType

from .bridge import ScormBridge
from .route_sync import RouteSynchronizer, format_hash_route


logger = logging.getLogger(__name__)


class CourseNavigator:
    """
    Navigate the course page list.

    Combines the RouteSynchronizer (state) with the page manifest and the
    LMS bridge (completion reporting).
    """

    def __init__(
        self,
        pages: list[PageDescriptor],
        synchronizer: RouteSynchronizer,
        bridge: Optional[ScormBridge] = None,
        on_route: Optional[Callable[[int], None]] = None,
    ):
        """
        Initialize navigator.

        Args:
            pages: Ordered course pages
            synchronizer: RouteSynchronizer over the quest state store
            bridge: LMS channel for completion reporting
            on_route: Called with each pushed page index (e.g. to update a URL)
        """
        self.pages = pages
        self.synchronizer = synchronizer
        self.bridge = bridge
        self.on_route = on_route
        self.requested_index = synchronizer.store.snapshot.page_index

    @property
    def store(self):
        return self.synchronizer.store

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def current_page(self) -> PageDescriptor:
        idx = self.store.snapshot.page_index
        return self.pages[idx] if idx < len(self.pages) else self.pages[0]

    @property
    def is_last_page(self) -> bool:
        return self.store.snapshot.page_index >= self.total_pages - 1

    @property
    def hash_route(self) -> str:
        return format_hash_route(self.requested_index)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def goto_page(self, page_index: int) -> int:
        """
        Jump to a page (clamped to the course).

        Returns:
            The page index now current
        """
        self.requested_index = self.store.clamp_page(page_index)
        if self.on_route:
            self.on_route(self.requested_index)
        self.synchronizer.sync(self.requested_index)
        return self.store.snapshot.page_index

    def next_page(self) -> int:
        """
        Advance one page. On the last page, finish the course and return
        to the first page.
        """
        if self.is_last_page:
            self.finish()
            return self.goto_page(0)
        return self.goto_page(self.store.snapshot.page_index + 1)

    def previous_page(self) -> int:
        return self.goto_page(max(0, self.store.snapshot.page_index - 1))

    def finish(self):
        """Report completion to the LMS and set the finished flag."""
        if self.bridge is not None and self.bridge.lms_connected:
            if not self.bridge.mark_completed():
                logger.warning("LMS did not accept course completion")
        self.store.mark_finished()
        logger.info("Course finished")

    def next_label(self) -> str:
        """Label for the forward button."""
        if self.is_last_page:
            return "Finish"
        current = self.current_page
        nxt = self.pages[self.store.snapshot.page_index + 1]
        if current.type == PageType.PREPARATION:
            return "Start Activities"
        if nxt.type == PageType.ACTIVITY:
            return f"Activity {(nxt.activity_index or 0) + 1}"
        return nxt.content.get("title") or "Next"
