"""
EduPlan Errors

Exceptions raised at the storage and AI boundaries. Structural edits never
raise for valid input; these only cover the external collaborators.
"""


class StorageLoadError(RuntimeError):
    """
    Raised when the persisted dataset cannot be read or parsed.
    The store recovers by seeding the bundled default.
    """
    def __init__(self, key: str, reason: str):
        super().__init__(f"Could not load dataset '{key}': {reason}")
        self.key = key
        self.reason = reason


class AIQuotaExceededError(RuntimeError):
    """Raised when rate-limit / quota retries are exhausted."""
    def __init__(self, attempts: int, last_error: Exception | None = None):
        super().__init__(f"AI quota exceeded after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class AISuggestionError(RuntimeError):
    """Raised for any non-retryable AI failure (network, auth, malformed output)."""
    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class SuggestionInProgressError(RuntimeError):
    """Raised when an AI call is started while another one is in flight."""
    def __init__(self):
        super().__init__("An AI suggestion is already in progress")
