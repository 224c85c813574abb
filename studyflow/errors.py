class StudyFlowError(Exception):
    """Base class for errors the API maps to a specific status code."""


class SessionUnavailableError(StudyFlowError):
    """The class session exists but cannot take another booking (full or not scheduled)."""

    def __init__(self, session_id: int):
        super().__init__(f"session {session_id} has no available spots")
        self.session_id = session_id


class GenerationError(StudyFlowError):
    """AI task generation failed.

    ``kind`` is a short machine-readable reason; ``detail`` holds the raw
    cause for server logs and must never be sent to clients.
    """

    NOT_CONFIGURED = "not_configured"
    PROVIDER = "provider"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_JSON = "malformed_json"
    WRONG_COUNT = "wrong_count"
    INVALID_TASK = "invalid_task"

    def __init__(self, kind: str, detail: str = ""):
        super().__init__(kind)
        self.kind = kind
        self.detail = detail

    def __str__(self):
        return f"{self.kind}: {self.detail}" if self.detail else self.kind
