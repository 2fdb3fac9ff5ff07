"""
quickchat error types.

Every failure the core can observe on a network call is classified into one
of these before it reaches a caller.
"""

from typing import Any, Optional


class QuickChatError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def user_message(self, fallback: str) -> str:
        return self.message or fallback


class UnauthorizedError(QuickChatError):
    """Request rejected for missing, bad or expired credentials (HTTP 401)."""

    def __init__(self, message: str = "Not authorized"):
        super().__init__("unauthorized", message)


class ApplicationError(QuickChatError):
    """Structurally valid response carrying ``success: false``."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("application_error", message, details)


class TransportError(QuickChatError):
    """Network failure, unexpected status or malformed body.

    ``server_message`` is set only when the server sent a usable message;
    otherwise callers fall back to their own generic text.
    """

    def __init__(self, message: str, server_message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__("transport_error", message, {"status_code": status_code} if status_code else None)
        self.server_message = server_message
        self.status_code = status_code

    def user_message(self, fallback: str) -> str:
        return self.server_message or fallback


class GuardViolation(QuickChatError):
    """Operation attempted outside its precondition. Never sent over the wire."""

    def __init__(self, message: str):
        super().__init__("guard_violation", message)
