"""Domain errors."""

from enum import StrEnum


class ResolutionKind(StrEnum):
    """Failure classes for food estimate lookups."""

    UNAUTHORIZED = "unauthorized"
    TIMEOUT = "timeout"
    MALFORMED = "malformed"
    UNAVAILABLE = "unavailable"


_USER_MESSAGES = {
    ResolutionKind.UNAUTHORIZED: (
        "The food estimate service rejected the API key. Check the configuration."
    ),
    ResolutionKind.TIMEOUT: "The food estimate timed out. Please try again.",
    ResolutionKind.MALFORMED: (
        "The food estimate could not be understood. Try a more specific name."
    ),
    ResolutionKind.UNAVAILABLE: (
        "The food estimate service is unavailable. Please try again later."
    ),
}


class ResolutionError(Exception):
    """Raised when a food cannot be resolved to a library item."""

    def __init__(self, kind: ResolutionKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def user_message(self) -> str:
        """Message suitable for showing to the user."""
        return _USER_MESSAGES[self.kind]


class EmptyIntakeError(Exception):
    """Raised when saving a day with zero intake without confirmation."""
