"""
HostRuntimeLocator - Find the LMS-provided runtime API.

The API object may live in the current window or in any ancestor frame.
Frames are reached through a FrameAccessor so the search can run against
real embeddings or test doubles, and every access is allowed to fail.

Provides:
- Dialect detection (legacy vs current runtime API)
- A bounded, failure-tolerant search up the frame chain
- Memoization of the located handle for the session
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol

from learnquest.config import FRAME_DEPTH_LIMIT


logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Dialects
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class VerbTable:
    """Host method names for the five runtime verbs."""
    initialize: str
    get_value: str
    set_value: str
    commit: str
    terminate: str


class Dialect(str, Enum):
    """Runtime API dialect spoken by the host."""
    LEGACY = "legacy"     # SCORM 1.2, global slot "API"
    CURRENT = "current"   # SCORM 2004, global slot "API_1484_11"

    @property
    def verbs(self) -> VerbTable:
        return _VERBS[self]

    @property
    def slot_name(self) -> str:
        return "API" if self is Dialect.LEGACY else "API_1484_11"

    @property
    def version_label(self) -> str:
        return "1.2" if self is Dialect.LEGACY else "2004"

    @property
    def learner_name_key(self) -> str:
        return "cmi.core.student_name" if self is Dialect.LEGACY else "cmi.learner_name"

    @property
    def completion_status_key(self) -> str:
        return "cmi.core.lesson_status" if self is Dialect.LEGACY else "cmi.completion_status"

    @property
    def finished_statuses(self) -> frozenset[str]:
        """Completion statuses that must not be downgraded to incomplete."""
        if self is Dialect.LEGACY:
            return frozenset({"completed", "passed"})
        return frozenset({"completed"})

    def is_success(self, result: Any) -> bool:
        """Compare a host return value against this dialect's success sentinel."""
        return result in _SUCCESS_SENTINELS[self]


_VERBS = {
    Dialect.LEGACY: VerbTable(
        initialize="LMSInitialize",
        get_value="LMSGetValue",
        set_value="LMSSetValue",
        commit="LMSCommit",
        terminate="LMSFinish",
    ),
    Dialect.CURRENT: VerbTable(
        initialize="Initialize",
        get_value="GetValue",
        set_value="SetValue",
        commit="Commit",
        terminate="Terminate",
    ),
}

_SUCCESS_SENTINELS = {
    Dialect.LEGACY: ("true",),
    Dialect.CURRENT: ("true",),
}

# Search order within a single frame
SLOT_NAMES = (Dialect.LEGACY.slot_name, Dialect.CURRENT.slot_name)


def detect_dialect(api: Any) -> Dialect:
    """Legacy hosts expose the legacy get verb; anything else is current."""
    if getattr(api, Dialect.LEGACY.verbs.get_value, None) is not None:
        return Dialect.LEGACY
    return Dialect.CURRENT


@dataclass(frozen=True)
class HostApiHandle:
    """Located runtime API plus its dialect. Never serialized."""
    api: Any
    dialect: Dialect


# -----------------------------------------------------------------------------
# Frame access
# -----------------------------------------------------------------------------

class FrameAccessor(Protocol):
    """
    Capability for walking frames. Any method may raise (e.g. a browser
    security error for a cross-origin frame).
    """

    def read_slot(self, frame: Any, name: str) -> Any: ...

    def get_parent(self, frame: Any) -> Any: ...

    def get_top(self, frame: Any) -> Any: ...


@dataclass(eq=False)
class Frame:
    """
    In-process frame: named global slots and an optional parent.

    A frame without a parent is a top-level window and is its own parent.
    """
    slots: dict[str, Any] = field(default_factory=dict)
    parent: Optional["Frame"] = None
    name: str = "frame"


class FrameTree:
    """FrameAccessor over Frame objects."""

    def read_slot(self, frame: Frame, name: str) -> Any:
        return frame.slots.get(name)

    def get_parent(self, frame: Frame) -> Frame:
        return frame.parent if frame.parent is not None else frame

    def get_top(self, frame: Frame) -> Frame:
        seen = set()
        current = frame
        while current.parent is not None and id(current) not in seen:
            seen.add(id(current))
            current = current.parent
        return current


# -----------------------------------------------------------------------------
# Locator
# -----------------------------------------------------------------------------

class HostRuntimeLocator:
    """
    Locate the host runtime API across frame boundaries.

    Search order:
    1. Current window
    2. Immediate parent
    3. Top window
    4. Walk up from the parent, at most `depth_limit` steps

    Each frame is checked for the legacy slot first, then the current slot.
    """

    def __init__(
        self,
        window: Any,
        accessor: Optional[FrameAccessor] = None,
        depth_limit: int = FRAME_DEPTH_LIMIT,
    ):
        """
        Initialize locator.

        Args:
            window: The frame the course runs in
            accessor: FrameAccessor for the frame type (default: FrameTree)
            depth_limit: Maximum number of steps in the parent walk
        """
        if depth_limit < 0:
            raise ValueError(f"depth_limit must be >= 0, got {depth_limit}")
        self.window = window
        self.accessor = accessor or FrameTree()
        self.depth_limit = depth_limit
        self._handle: Optional[HostApiHandle] = None

    @property
    def handle(self) -> Optional[HostApiHandle]:
        """Cached handle, without searching."""
        return self._handle

    def locate(self) -> Optional[HostApiHandle]:
        """
        Find the host API.

        Returns:
            HostApiHandle, or None when no host is present (not an error)
        """
        if self._handle is not None:
            return self._handle

        api = self._search()
        if api is None:
            logger.info("No LMS runtime API found; running without host")
            return None

        self._handle = HostApiHandle(api=api, dialect=detect_dialect(api))
        logger.info(
            f"Found LMS runtime API (dialect={self._handle.dialect.value}, "
            f"version {self._handle.dialect.version_label})"
        )
        return self._handle

    def reset(self):
        """Forget the cached handle."""
        self._handle = None

    def _search(self) -> Any:
        win = self.window

        api = self._find_in(win)
        if api is not None:
            return api

        parent = self._step(self.accessor.get_parent, win)
        if parent is not None:
            api = self._find_in(parent)
            if api is not None:
                return api

        top = self._step(self.accessor.get_top, win)
        if top is not None:
            api = self._find_in(top)
            if api is not None:
                return api

        return self._walk_up(parent)

    def _walk_up(self, start: Any) -> Any:
        frame = start
        for _ in range(self.depth_limit):
            if frame is None:
                return None
            api = self._find_in(frame)
            if api is not None:
                return api
            above = self._step(self.accessor.get_parent, frame)
            if above is None or above is frame:
                return None
            frame = above
        logger.debug(f"Frame walk stopped at depth limit {self.depth_limit}")
        return None

    def _find_in(self, frame: Any) -> Any:
        for name in SLOT_NAMES:
            api = self._step(self.accessor.read_slot, frame, name)
            if api is not None:
                return api
        return None

    def _step(self, fn, *args) -> Any:
        try:
            return fn(*args)
        except Exception as e:
            # Cross-origin frames refuse access; treat as "nothing here"
            logger.debug(f"Frame access failed: {e}")
            return None
