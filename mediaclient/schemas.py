"""Pydantic schemas for backend request and response payloads."""

from datetime import datetime
from typing import Any, List, Optional, Type, TypeVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from mediaclient.exceptions import PayloadError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _split_tags(value: Any) -> Any:
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(',') if tag.strip()]
    return value


class TokenResponse(BaseModel):
    """Response model for login."""
    model_config = ConfigDict(extra="ignore")

    access_token: Optional[str] = None
    token_type: Optional[str] = None


class UserPayload(BaseModel):
    """Response model for the current user."""
    model_config = ConfigDict(extra="ignore")

    id: Union[int, str]
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None


class MediaSummary(BaseModel):
    """One entry of the media listing."""
    model_config = ConfigDict(extra="ignore")

    id: int
    filename: str
    size: int = 0
    mimetype: str = Field("", validation_alias=AliasChoices("mimetype", "mime_type"))
    thumbnail: Optional[str] = None
    created_at: Optional[datetime] = None
    description: Optional[str] = None
    genre: Optional[str] = Field(None, validation_alias=AliasChoices("genero", "genre"))
    tags: List[str] = Field(default_factory=list)
    duration: Optional[float] = None

    @field_validator("mimetype", mode="before")
    @classmethod
    def _none_mimetype(cls, value: Any) -> Any:
        return value or ""

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_from_string(cls, value: Any) -> Any:
        if value is None:
            return []
        return _split_tags(value)


class MediaDetail(BaseModel):
    """Type-specific detail payload; unknown fields are kept."""
    model_config = ConfigDict(extra="allow")

    id: int
    filename: Optional[str] = None
    mimetype: Optional[str] = Field(None, validation_alias=AliasChoices("mimetype", "mime_type"))
    description: Optional[str] = None
    genre: Optional[str] = Field(None, validation_alias=AliasChoices("genero", "genre"))
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_from_string(cls, value: Any) -> Any:
        if value is None:
            return []
        return _split_tags(value)


class PresignedUrl(BaseModel):
    """Response model for a presigned media URL."""
    url: str


class RegisterRequest(BaseModel):
    """Request model for user registration."""
    email: str
    password: str
    full_name: str


class ProfileUpdateRequest(BaseModel):
    """Request model for profile updates."""
    full_name: str
    username: Optional[str] = None
    bio: Optional[str] = None


class PasswordChangeRequest(BaseModel):
    """Request model for password change."""
    old_password: str
    new_password: str


class MediaUpdateRequest(BaseModel):
    """Partial update of a media item's metadata."""
    description: Optional[str] = None
    genre: Optional[str] = Field(None, serialization_alias="genero")
    tags: Optional[List[str]] = None


def parse_payload(model: Type[ModelT], data: Any) -> ModelT:
    """
    Validate a decoded response body against a schema.

    Raises:
        PayloadError: If the body does not match the schema
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise PayloadError(f"Unexpected {model.__name__} payload: {e.error_count()} error(s)") from e


def parse_payload_list(model: Type[ModelT], data: Any) -> List[ModelT]:
    """
    Validate a decoded JSON array against a schema.

    Raises:
        PayloadError: If the body is not a list of matching objects
    """
    try:
        return TypeAdapter(List[model]).validate_python(data)
    except PydanticValidationError as e:
        raise PayloadError(f"Unexpected {model.__name__} list payload: {e.error_count()} error(s)") from e
