"""
LearnQuest Runtime - Progress state machine and persistence.

This module provides:
- HostRuntimeLocator: Find the LMS runtime API across frames
- SessionFacade / ScormBridge: Talk to the LMS
- LocalFallbackStore: Local copy of the snapshot
- QuestStateStore: Canonical snapshot, hydration and persistence
- RouteSynchronizer / CourseNavigator: Page navigation
- open_course: All of the above wired for one page load
"""

from .locator import (
    Dialect,
    VerbTable,
    HostApiHandle,
    FrameAccessor,
    Frame,
    FrameTree,
    HostRuntimeLocator,
    detect_dialect,
)

from .session import (
    SessionState,
    SessionFacade,
)

from .bridge import (
    ScormBridge,
    SUSPEND_DATA_KEY,
)

from .local_store import (
    KeyValueStorage,
    MemoryStorage,
    SqliteStorage,
    LocalFallbackStore,
)

from .quest_state import (
    HydrationSource,
    QuestStateStore,
)

from .route_sync import (
    RouteSynchronizer,
    parse_hash_route,
    format_hash_route,
)

from .navigator import CourseNavigator

from .course import (
    CourseRuntime,
    open_course,
)

__all__ = [
    # Locator
    "Dialect",
    "VerbTable",
    "HostApiHandle",
    "FrameAccessor",
    "Frame",
    "FrameTree",
    "HostRuntimeLocator",
    "detect_dialect",
    # Session
    "SessionState",
    "SessionFacade",
    "ScormBridge",
    "SUSPEND_DATA_KEY",
    # Local storage
    "KeyValueStorage",
    "MemoryStorage",
    "SqliteStorage",
    "LocalFallbackStore",
    # State
    "HydrationSource",
    "QuestStateStore",
    # Navigation
    "RouteSynchronizer",
    "parse_hash_route",
    "format_hash_route",
    "CourseNavigator",
    # Wiring
    "CourseRuntime",
    "open_course",
]
