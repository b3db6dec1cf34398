"""
ScormBridge - Suspend-data channel to the LMS.

Sits on top of the SessionFacade and speaks in snapshot payloads rather
than data-model fields:
- Session start (learner name, marking the attempt incomplete)
- Reading and writing the suspended snapshot
- Reporting course completion
"""

import json
import logging
from typing import Any, Optional

from .session import SessionFacade


logger = logging.getLogger(__name__)


SUSPEND_DATA_KEY = "cmi.suspend_data"
DEFAULT_LEARNER_NAME = "Learner"


class ScormBridge:
    """
    Host persistence channel for the quest state.

    Without a host (or before connect() succeeds) every read returns None
    and every write returns False.
    """

    def __init__(self, session: SessionFacade):
        self.session = session
        self.learner_name = DEFAULT_LEARNER_NAME

    @property
    def lms_connected(self) -> bool:
        return self.session.is_active

    def connect(self) -> bool:
        """
        Start the LMS session.

        On success, reads the learner name and marks the attempt incomplete
        unless the LMS already records it as finished.

        Returns:
            True if connected to an LMS
        """
        if self.session.is_active:
            return True
        if not self.session.initialize():
            logger.warning("LMS not connected; progress is saved locally only")
            return False

        dialect = self.session.dialect
        name = self.session.get_value(dialect.learner_name_key)
        if name:
            self.learner_name = str(name)

        status = self.session.get_value(dialect.completion_status_key)
        if status not in dialect.finished_statuses:
            self.session.set_value(dialect.completion_status_key, "incomplete")
            self.session.save()

        logger.info(f"LMS connected (version {dialect.version_label})")
        return True

    def disconnect(self) -> bool:
        """End the LMS session (commit, then terminate)."""
        return self.session.terminate()

    def load_snapshot_payload(self) -> Optional[dict[str, Any]]:
        """
        Read the suspended snapshot payload.

        Returns:
            The decoded payload, or None if not connected or the stored data
            is blank, malformed, or not a JSON object
        """
        if not self.lms_connected:
            return None
        raw = self.session.get_value(SUSPEND_DATA_KEY)
        if not raw:
            return None
        try:
            payload = json.loads(str(raw))
        except ValueError:
            logger.warning("Ignoring malformed LMS suspend data")
            return None
        if not isinstance(payload, dict) or not payload:
            return None
        return payload

    def save_snapshot(self, payload: dict[str, Any]) -> bool:
        """Write the full snapshot payload and commit it."""
        if not self.lms_connected:
            return False
        try:
            text = json.dumps(payload, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            logger.warning(f"Snapshot is not JSON-serializable: {e}")
            return False
        written = self.session.set_value(SUSPEND_DATA_KEY, text)
        committed = self.session.save()
        return written and committed

    def mark_completed(self) -> bool:
        """Report the course as completed to the LMS."""
        if not self.lms_connected:
            return False
        dialect = self.session.dialect
        written = self.session.set_value(dialect.completion_status_key, "completed")
        committed = self.session.save()
        return written and committed
