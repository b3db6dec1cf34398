"""
SessionFacade - Lifecycle state machine over the host runtime API.

States: UNINITIALIZED -> ACTIVE -> TERMINATED

Wraps the runtime verbs (initialize, get value, set value, commit,
terminate) and maps them onto whichever dialect the locator detected.
Callers never see dialect differences or host exceptions: every call
reports failure as False (or None for reads).
"""

import logging
from enum import Enum
from typing import Any, Optional

from .locator import Dialect, HostApiHandle, HostRuntimeLocator


logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    TERMINATED = "terminated"


class SessionFacade:
    """Session with the LMS, through the handle found by a HostRuntimeLocator."""

    def __init__(self, locator: HostRuntimeLocator):
        self.locator = locator
        self._state = SessionState.UNINITIALIZED

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == SessionState.ACTIVE

    @property
    def dialect(self) -> Optional[Dialect]:
        handle = self.locator.locate()
        return handle.dialect if handle else None

    # -------------------------------------------------------------------------
    # Verbs
    # -------------------------------------------------------------------------

    def initialize(self) -> bool:
        """
        Begin the session.

        Returns True and moves to ACTIVE on host success. Without a host,
        or once the session has started or ended, this is a no-op returning
        False.
        """
        if self._state != SessionState.UNINITIALIZED:
            return False
        handle = self.locator.locate()
        if handle is None:
            return False

        ok = self._call_ok(handle, handle.dialect.verbs.initialize, "")
        if ok:
            self._state = SessionState.ACTIVE
        else:
            logger.warning("LMS initialize failed; continuing offline")
        return ok

    def get_value(self, key: str) -> Optional[Any]:
        """Read a data-model field. None unless ACTIVE."""
        handle = self._active_handle()
        if handle is None:
            return None
        return self._call(handle, handle.dialect.verbs.get_value, key)

    def set_value(self, key: str, value: Any) -> bool:
        """Write a data-model field. False unless ACTIVE."""
        handle = self._active_handle()
        if handle is None:
            return False
        return self._call_ok(handle, handle.dialect.verbs.set_value, key, value)

    def save(self) -> bool:
        """Commit written fields to the LMS backing store."""
        handle = self._active_handle()
        if handle is None:
            return False
        return self._call_ok(handle, handle.dialect.verbs.commit, "")

    def terminate(self) -> bool:
        """
        End the session.

        Always commits first so nothing written is lost on teardown. On
        success the session moves to TERMINATED and every later call is a
        no-op.
        """
        handle = self._active_handle()
        if handle is None:
            return False

        self.save()
        ok = self._call_ok(handle, handle.dialect.verbs.terminate, "")
        if ok:
            self._state = SessionState.TERMINATED
        else:
            logger.warning("LMS terminate failed; session left active")
        return ok

    # -------------------------------------------------------------------------
    # Host calls
    # -------------------------------------------------------------------------

    def _active_handle(self) -> Optional[HostApiHandle]:
        if self._state != SessionState.ACTIVE:
            return None
        return self.locator.locate()

    def _call(self, handle: HostApiHandle, verb: str, *args) -> Optional[Any]:
        try:
            return getattr(handle.api, verb)(*args)
        except Exception as e:
            logger.warning(f"LMS call {verb} failed: {e}")
            return None

    def _call_ok(self, handle: HostApiHandle, verb: str, *args) -> bool:
        return handle.dialect.is_success(self._call(handle, verb, *args))
