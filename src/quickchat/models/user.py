"""
User record returned by ``GET /api/user/data``.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class User(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    name: str = ""
    email: str = ""
    credits: Optional[int] = None
