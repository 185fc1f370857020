from __future__ import annotations


class ReviewError(Exception):
    """Base class for everything a review can fail with.

    ``str(error)`` is meant for logs. ``user_message`` is what the UI shows and
    never contains raw provider output.
    """

    user_message = "An unknown error occurred."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class InvalidInput(ReviewError):
    user_message = "Please enter some code to review."


class MalformedResponse(ReviewError):
    user_message = "The AI returned a malformed response. Please try again."


class ProviderCommunicationError(ReviewError):
    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.user_message = f"Error communicating with the AI service: {detail}"


class ConfigurationError(ReviewError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.user_message = message
