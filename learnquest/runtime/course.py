"""
CourseRuntime - The runtime services for one page load, wired together.

Constructed once at startup and handed to the UI, so nothing depends on
shared globals and tests can supply a fake LMS frame or storage.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from learnquest.config import Settings, is_fresh_start_requested
from learnquest.schemas import CourseManifest

from .bridge import ScormBridge
from .local_store import KeyValueStorage, LocalFallbackStore, SqliteStorage
from .locator import Frame, FrameAccessor, HostRuntimeLocator
from .navigator import CourseNavigator
from .quest_state import QuestStateStore
from .route_sync import RouteSynchronizer
from .session import SessionFacade


logger = logging.getLogger(__name__)


@dataclass
class CourseRuntime:
    manifest: CourseManifest
    locator: HostRuntimeLocator
    session: SessionFacade
    bridge: ScormBridge
    local_store: LocalFallbackStore
    store: QuestStateStore
    synchronizer: RouteSynchronizer
    navigator: CourseNavigator

    @property
    def lms_connected(self) -> bool:
        return self.bridge.lms_connected

    def close(self) -> bool:
        """Page unload: commit and end the LMS session."""
        return self.bridge.disconnect()


def open_course(
    manifest: CourseManifest,
    settings: Settings,
    window: Any = None,
    accessor: Optional[FrameAccessor] = None,
    storage: Optional[KeyValueStorage] = None,
    url: Optional[str] = None,
    on_route: Optional[Callable[[int], None]] = None,
) -> CourseRuntime:
    """
    Connect to the LMS (if any), hydrate progress and build navigation.

    Args:
        manifest: Course page manifest
        settings: Runtime settings
        window: Frame the course runs in (default: an empty top-level frame)
        accessor: FrameAccessor for `window`
        storage: Local key-value storage (default: SQLite at settings.storage_path)
        url: Page URL, checked for the fresh-start flag
        on_route: Called with each page index the navigator pushes

    Returns:
        CourseRuntime with the hydrated store
    """
    locator = HostRuntimeLocator(
        window if window is not None else Frame(name="top"),
        accessor=accessor,
        depth_limit=settings.frame_depth_limit,
    )
    session = SessionFacade(locator)
    bridge = ScormBridge(session)
    bridge.connect()

    local_store = LocalFallbackStore(
        storage if storage is not None else SqliteStorage(settings.storage_path),
        key=settings.storage_key,
    )
    store = QuestStateStore(
        total_pages=manifest.total_pages,
        bridge=bridge,
        local_store=local_store,
        version=settings.state_version,
        build_id=settings.build_id,
        force_fresh=is_fresh_start_requested(url, settings.fresh_flag),
    )
    logger.info(
        f"Progress hydrated from {store.hydration_source.value} "
        f"(page {store.snapshot.page_index + 1}/{manifest.total_pages})"
    )

    synchronizer = RouteSynchronizer(store)
    navigator = CourseNavigator(manifest.pages, synchronizer, bridge=bridge, on_route=on_route)

    return CourseRuntime(
        manifest=manifest,
        locator=locator,
        session=session,
        bridge=bridge,
        local_store=local_store,
        store=store,
        synchronizer=synchronizer,
        navigator=navigator,
    )
