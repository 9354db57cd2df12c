"""
Request and response contracts for the REST API.

Requests are validated here before they reach the data-access layer;
responses are filtered through these models so internal columns such as
password hashes never leave the service.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.config import COMMENT_MAX_LENGTH, MAX_SQL_INTEGER, PASSWORD_MIN_LENGTH, POST_MAX_LENGTH


def _non_blank(value: str, message: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError(message)
    return value


# Requests
class RegisterRequest(BaseModel):
    """Payload for account registration."""
    username: str = Field(..., min_length=1, max_length=50, description="Unique handle")
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(..., description=f"At least {PASSWORD_MIN_LENGTH} characters")
    full_name: Optional[str] = Field(None, max_length=100, description="Display name")

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _non_blank(v, "Username is required")

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        return v


class LoginRequest(BaseModel):
    """Payload for login. Any email string is accepted; a failed lookup is a 401."""
    email: str
    password: str


class PostCreate(BaseModel):
    content: str = Field(..., description=f"Post body, at most {POST_MAX_LENGTH} characters")
    image: Optional[str] = Field(None, description="Image URL or data URI")

    @field_validator("content")
    @classmethod
    def content_valid(cls, v: str) -> str:
        v = _non_blank(v, "Post content is required")
        if len(v) > POST_MAX_LENGTH:
            raise ValueError(f"Post content must be {POST_MAX_LENGTH} characters or less")
        return v


class PostUpdate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_valid(cls, v: str) -> str:
        v = _non_blank(v, "Post content is required")
        if len(v) > POST_MAX_LENGTH:
            raise ValueError(f"Post content must be {POST_MAX_LENGTH} characters or less")
        return v


class CommentCreate(BaseModel):
    post_id: int = Field(..., ge=1, le=MAX_SQL_INTEGER, description="ID of the post to comment on")
    content: str = Field(..., description=f"Comment body, at most {COMMENT_MAX_LENGTH} characters")

    @field_validator("content")
    @classmethod
    def content_valid(cls, v: str) -> str:
        v = _non_blank(v, "Comment content cannot be empty")
        if len(v) > COMMENT_MAX_LENGTH:
            raise ValueError(f"Comment must be {COMMENT_MAX_LENGTH} characters or less")
        return v


class ProfileUpdate(BaseModel):
    """Only fields that are sent are changed."""
    full_name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = None
    cover_photo: Optional[str] = None
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)


# Responses
class UserSummary(BaseModel):
    id: int
    username: str
    full_name: Optional[str] = None
    avatar: Optional[str] = None


class UserSearchResult(UserSummary):
    bio: Optional[str] = None


class UserOut(UserSummary):
    bio: Optional[str] = None
    cover_photo: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class PrivateUserOut(UserOut):
    email: str


class ProfileOut(UserOut):
    followers_count: int = Field(..., description="Accounts following this user")
    following_count: int = Field(..., description="Accounts this user follows")
    posts_count: int


class UserStats(BaseModel):
    posts: int
    likes_received: int
    followers: int
    following: int


class CommentOut(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    created_at: datetime
    user: UserSummary


class PostOut(BaseModel):
    id: int
    user_id: int
    content: str
    image: Optional[str] = None
    likes_count: int
    comments_count: int
    created_at: datetime
    updated_at: datetime
    is_liked: bool = Field(..., description="Whether the viewer has liked this post")
    user: UserSummary
    likes: List[int] = Field(..., description="IDs of users who liked the post")
    comments: List[CommentOut]


class AuthResponse(BaseModel):
    message: str
    user: PrivateUserOut
    token: str


class MessageResponse(BaseModel):
    message: str


class PostResponse(MessageResponse):
    post: PostOut


class CommentResponse(MessageResponse):
    comment: CommentOut


class ProfileResponse(MessageResponse):
    user: PrivateUserOut


class LikeResponse(MessageResponse):
    is_liked: bool
    likes_count: int


class FollowResponse(MessageResponse):
    is_following: bool


class FollowStatus(BaseModel):
    is_following: bool
