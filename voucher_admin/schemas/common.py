from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class PayloadSchema(BaseModel):
    """Admin request body forwarded to the platform (accepts snake_case or camelCase)"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class MessageResponse(BaseModel):
    message: str


class ViewSchema(BaseModel):
    """Admin response body, camelCase like the platform resources it wraps"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
