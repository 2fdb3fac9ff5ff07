"""Basic unit tests for the quickchat package."""

from quickchat import (
    AsyncChatApp,
    ChatApp,
    QuickChatError,
    UnauthorizedError,
    ApplicationError,
    TransportError,
    GuardViolation,
    StateEvent,
    __version__,
)
from quickchat.events import HOME_ROUTE, LOGIN_ROUTE


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert ChatApp is not None
    assert AsyncChatApp is not None


def test_error_hierarchy():
    assert issubclass(UnauthorizedError, QuickChatError)
    assert issubclass(ApplicationError, QuickChatError)
    assert issubclass(TransportError, QuickChatError)
    assert issubclass(GuardViolation, QuickChatError)


def test_error_attributes():
    err = QuickChatError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert str(err) == "something broke"
    assert err.details is None

    app_err = ApplicationError("", details={"success": False})
    assert app_err.code == "application_error"
    assert app_err.user_message("fallback") == "fallback"

    transport_err = TransportError("HTTP 502: <html>", status_code=502)
    assert transport_err.details == {"status_code": 502}
    assert transport_err.user_message("Failed to fetch chats") == "Failed to fetch chats"
    assert TransportError("HTTP 500", server_message="db down").user_message("x") == "db down"


def test_event_constants():
    assert StateEvent.IDENTITY_CHANGED == "session:identity"
    assert StateEvent.NAVIGATE == "ui:navigate"
    assert LOGIN_ROUTE == "/login"
    assert HOME_ROUTE == "/"
