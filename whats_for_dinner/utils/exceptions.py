"""Custom exception classes."""


class DinnerIdeasException(Exception):
    """Base exception for the dinner ideas application."""

    pass


class ValidationError(DinnerIdeasException):
    """Raised when input validation fails."""

    pass


class ImageEncodingError(DinnerIdeasException):
    """Raised when an attached image cannot be read or encoded."""

    pass


class InferenceError(DinnerIdeasException):
    """Raised when the Gemini API call fails."""

    pass


class InferenceTimeoutError(InferenceError):
    """Raised when the Gemini API call does not finish in time."""

    pass
