"""Pydantic schemas for request and response validation."""

from datetime import datetime
from typing import List, Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator


def normalize_tags(tags: List[str]) -> List[str]:
    """
    Trim tags, drop empty ones and remove duplicates, keeping first-seen order.

    Args:
        tags: Raw tag values from the request body

    Returns:
        List[str]: Cleaned tag list
    """
    seen = set()
    result = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


# Auth Schemas
class UserSignup(BaseModel):
    """Schema for user signup request."""

    username: str
    email: str
    password: str

    @field_validator('username', 'email', 'password')
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        """Validate that required fields are not empty."""
        if not v or not v.strip():
            raise ValueError(f'{info.field_name.capitalize()} cannot be empty')
        return v


class UserLogin(BaseModel):
    """Schema for user login request."""

    email: str
    password: str

    @field_validator('email')
    @classmethod
    def email_not_empty(cls, v: str) -> str:
        """Validate that email is not empty."""
        if not v or not v.strip():
            raise ValueError('Email cannot be empty')
        return v

    @field_validator('password')
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        """Validate that password is not empty."""
        if not v:
            raise ValueError('Password cannot be empty')
        return v


class UserPublic(BaseModel):
    """Public identity of a user."""

    id: int
    username: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Schema for login response."""

    token: str
    user: UserPublic


class MessageResponse(BaseModel):
    message: str


# Post Schemas
class PostCreate(BaseModel):
    """Schema for post creation request."""

    title: str
    content: str
    cover_image: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('coverImage', 'cover_image')
    )
    tags: List[str] = []
    published: bool = False

    @field_validator('title', 'content')
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        """Validate that title and content are not empty."""
        if not v or not v.strip():
            raise ValueError(f'{info.field_name.capitalize()} cannot be empty')
        return v

    @field_validator('tags')
    @classmethod
    def clean_tags(cls, v: List[str]) -> List[str]:
        return normalize_tags(v)


class PostUpdate(BaseModel):
    """
    Schema for partial post update.

    Empty strings leave title, content and cover image unchanged. An explicit
    tag list (even an empty one) replaces the tags; explicit ``published``
    values, including ``False``, are always applied.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    cover_image: Optional[str] = Field(
        None,
        validation_alias=AliasChoices('coverImage', 'cover_image')
    )
    tags: Optional[List[str]] = None
    published: Optional[bool] = None

    @field_validator('tags')
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return normalize_tags(v)


class PostDetail(BaseModel):
    """Schema for post response with the author resolved."""

    id: int
    title: str
    content: str
    cover_image: Optional[str] = Field(None, alias='coverImage')
    tags: List[str]
    author: UserPublic
    published: bool
    created_at: datetime = Field(alias='createdAt')
    updated_at: datetime = Field(alias='updatedAt')

    class Config:
        from_attributes = True
        populate_by_name = True


# Image Schemas
class ImageUploadResponse(BaseModel):
    url: str
    message: str
