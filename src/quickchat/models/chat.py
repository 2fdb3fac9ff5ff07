"""
Chat summaries and the ordering rule applied to every loaded list.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ChatSummary(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    updated_at: datetime = Field(validation_alias=AliasChoices("updatedAt", "updated_at"))
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    name: str = ""
    user_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("userId", "user_id"))
    user_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("userName", "user_name"))
    messages: list[Any] = Field(default_factory=list)

    @field_validator("updated_at", "created_at", mode="before")
    @classmethod
    def numbers_are_millis(cls, v: Any) -> Any:
        # Numeric timestamps are always epoch milliseconds, whatever their size.
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return EPOCH + timedelta(milliseconds=v)
        return v

    @field_validator("updated_at", "created_at", mode="after")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # Mixed naive/aware values would make the sort raise.
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


def sort_by_recency(chats: Iterable[ChatSummary]) -> list[ChatSummary]:
    """Most recently updated first. ``sorted`` keeps ties in input order."""
    return sorted(chats, key=lambda c: c.updated_at, reverse=True)