"""API Schemas - request bodies and response shapes for the truapi REST routes.

Invariants:
    - Shape errors (missing field, wrong type, invalid JSON) surface as 400 via the
      RequestValidationError handler
    - Business validation (email / username format, duplicates) happens in the routes
      and surfaces as 422, so these models only check shape

Design Decisions:
    - Field names match the JSON the web/mobile clients already send (snake_case)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from octopus.core.domain_types import DevicePlatform, ReactionableType, ReactionType


class RegisterRequest(BaseModel):
    address: str = Field(min_length=1, max_length=64)
    username: str
    full_name: str = Field("", max_length=128)
    email: str
    referrer: str | None = None

    @field_validator("username", "email", "full_name")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()


class InviteRequest(BaseModel):
    email: str


class FlagStoryRequest(BaseModel):
    story_id: int


class AddCommentRequest(BaseModel):
    parent_id: int | None = None
    claim_id: int
    argument_id: int | None = None
    body: str = Field(min_length=1, max_length=10_000)


class Reactionable(BaseModel):
    type: ReactionableType
    id: int


class ReactionRequest(BaseModel):
    reactionable: Reactionable
    reaction_type: ReactionType = ReactionType.LIKE


class NotificationUpdateRequest(BaseModel):
    notification_id: int | None = None
    read: bool | None = None
    seen: bool | None = None


class DeviceTokenRequest(BaseModel):
    address: str = Field(min_length=1, max_length=64)
    token: str = Field(min_length=1, max_length=512)
    platform: DevicePlatform


class UnregisterDeviceTokenRequest(BaseModel):
    token: str = Field(min_length=1, max_length=512)


class TranslateMentionsRequest(BaseModel):
    body: str


class ClaimOfTheDayRequest(BaseModel):
    community_id: str = Field(min_length=1, max_length=64)
    claim_id: int


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    address: str
    username: str
    full_name: str
    email: str
    avatar_url: str
    bio: str | None = None
    invites_left: int
    created_at: datetime


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    parent_id: int | None
    claim_id: int
    argument_id: int | None
    body: str
    creator: str
    created_at: datetime
