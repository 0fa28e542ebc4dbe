from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, Field
from pydantic.alias_generators import to_camel


def as_utc(value: Any) -> Optional[datetime]:
    """Parse an ISO timestamp from the platform and make it timezone-aware (UTC)"""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class PlatformModel(BaseModel):
    """
    Base for resources owned by the platform API.

    The platform speaks camelCase and identifies documents by either `id` or
    the raw Mongo `_id`; both land in `id`.
    """

    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"))

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"

    def to_payload(self) -> dict:
        """Serialize for the platform API (camelCase, JSON types)"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
