"""Pydantic schemas for user views."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserPublic(CamelModel):
    id: str
    email: str
    city: str
    country: str
    profile_pic: str | None = None


class UserResponse(CamelModel):
    user: UserPublic


class ProfilePicResponse(CamelModel):
    profile_pic: str
