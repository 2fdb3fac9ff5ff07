"""
Response envelopes: every endpoint answers ``{success, message, ...}``.
"""

from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from quickchat.errors import TransportError
from quickchat.models.chat import ChatSummary
from quickchat.models.user import User


class ActionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool
    message: Optional[str] = None


class UserDataResponse(ActionResponse):
    user: User


class ChatListResponse(ActionResponse):
    chats: list[ChatSummary]


ResponseT = TypeVar("ResponseT", bound=ActionResponse)


def parse_response(model: type[ResponseT], payload: dict[str, Any]) -> ResponseT:
    """Validate an already-unwrapped payload; schema mismatches are transport failures."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise TransportError(f"Malformed {model.__name__}: {e.error_count()} validation error(s)") from e
