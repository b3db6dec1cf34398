"""Test doubles for the LMS runtime API, frames and storage."""

from learnquest.runtime import Frame, HostRuntimeLocator, ScormBridge, SessionFacade


class FakeLmsApi:
    """Records every call; values live in `data`, results are configurable."""

    def __init__(self, data=None, **results):
        self.data = dict(data or {})
        self.calls = []
        self.results = {
            "initialize": "true",
            "set": "true",
            "commit": "true",
            "terminate": "true",
            **results,
        }

    def _initialize(self, verb, arg):
        self.calls.append((verb, arg))
        return self.results["initialize"]

    def _get(self, verb, key):
        self.calls.append((verb, key))
        return self.data.get(key, "")

    def _set(self, verb, key, value):
        self.calls.append((verb, key, value))
        if self.results["set"] == "true":
            self.data[key] = value
        return self.results["set"]

    def _commit(self, verb, arg):
        self.calls.append((verb, arg))
        return self.results["commit"]

    def _terminate(self, verb, arg):
        self.calls.append((verb, arg))
        return self.results["terminate"]

    def verbs_called(self):
        return [call[0] for call in self.calls]


class LegacyLmsApi(FakeLmsApi):
    def LMSInitialize(self, arg):
        return self._initialize("LMSInitialize", arg)

    def LMSGetValue(self, key):
        return self._get("LMSGetValue", key)

    def LMSSetValue(self, key, value):
        return self._set("LMSSetValue", key, value)

    def LMSCommit(self, arg):
        return self._commit("LMSCommit", arg)

    def LMSFinish(self, arg):
        return self._terminate("LMSFinish", arg)


class CurrentLmsApi(FakeLmsApi):
    def Initialize(self, arg):
        return self._initialize("Initialize", arg)

    def GetValue(self, key):
        return self._get("GetValue", key)

    def SetValue(self, key, value):
        return self._set("SetValue", key, value)

    def Commit(self, arg):
        return self._commit("Commit", arg)

    def Terminate(self, arg):
        return self._terminate("Terminate", arg)


class FailingStorage:
    """Storage whose every operation raises (quota exceeded, private mode)."""

    def get_item(self, key):
        raise OSError("storage unavailable")

    def set_item(self, key, value):
        raise OSError("quota exceeded")

    def remove_item(self, key):
        raise OSError("storage unavailable")


def lms_window(api, slot="API", depth=0):
    """Course window nested `depth` frames below the frame holding the API."""
    holder = Frame(slots={slot: api}, name="lms")
    frame = holder
    for i in range(depth):
        frame = Frame(parent=frame, name=f"frame{i}")
    return frame


def connected_bridge(api, slot="API"):
    bridge = ScormBridge(SessionFacade(HostRuntimeLocator(lms_window(api, slot))))
    assert bridge.connect()
    return bridge


