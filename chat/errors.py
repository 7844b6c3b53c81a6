"""
Error taxonomy surfaced to callers.

Provider failures arrive as ``ProviderError`` from the completion client and
are translated into one of the ``ChatError`` kinds before leaving the turn
processor. The HTTP layer renders any ``ChatError`` with its ``status_code``.
"""


class ProviderError(Exception):
    """Failure reported by the remote completion provider."""

    def __init__(self, status: int | None, message: str, transient: bool = False):
        super().__init__(message)
        self.status = status
        self.message = message
        # Set when the request never got a response (DNS, refused, timeout)
        self.transient = transient


class ChatError(Exception):
    status_code = 500
    error = "Request failed"
    retryable = False

    def __init__(self, details: str | None = None, error: str | None = None):
        super().__init__(error or self.error)
        if error:
            self.error = error
        self.details = details

    def to_dict(self) -> dict:
        return {
            "success": False,
            "error": self.error,
            "details": self.details or None,
            "retryable": self.retryable,
        }


class InvalidRequest(ChatError):
    status_code = 400
    error = "Invalid request"


class NotFound(ChatError):
    status_code = 404
    error = "Session not found"


class ProviderAuthError(ChatError):
    status_code = 401
    error = "Invalid API key. Please check your OpenAI API key."


class ProviderRateLimited(ChatError):
    status_code = 429
    error = "Rate limit exceeded. Please try again later."
    retryable = True


class ProviderUnavailable(ChatError):
    status_code = 503
    error = "OpenAI server error. Please try again."
    retryable = True


class ProviderUnknownError(ChatError):
    status_code = 500
    error = "Failed to get response from AI"


def translate_provider_error(exc: ProviderError) -> ChatError:
    """Map a provider failure onto the closed set of caller-facing kinds."""
    status = exc.status
    if status == 401:
        return ProviderAuthError(exc.message)
    if status == 429:
        return ProviderRateLimited(exc.message)
    if exc.transient or (status is not None and status >= 500):
        return ProviderUnavailable(exc.message)
    if status is None:
        return ProviderUnknownError(exc.message)
    return ProviderUnknownError(f"status={status}: {exc.message}")
