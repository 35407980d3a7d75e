"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse
from .engagement import EndorsementCreate, EndorsementResult, ReactionCreate, ReactionResult
from .hashtag import HashtagAnalyticsResponse, HashtagCountResponse
from .invite import InviteCodeRequest, InviteValidationResponse
from .post import PostCreate, PostResponse, PostUpdate, ReactionStats
from .profile import (
    DailyViewCount,
    ProfileAnalyticsResponse,
    ProfileResponse,
    ProfileViewerResponse,
)
from .user import LoginRequest, RegisterRequest, UserPublic, UserResponse

__all__ = [
    "CommentCreate", "CommentResponse",
    "EndorsementCreate", "EndorsementResult", "ReactionCreate", "ReactionResult",
    "HashtagAnalyticsResponse", "HashtagCountResponse",
    "InviteCodeRequest", "InviteValidationResponse",
    "PostCreate", "PostResponse", "PostUpdate", "ReactionStats",
    "DailyViewCount", "ProfileAnalyticsResponse", "ProfileResponse", "ProfileViewerResponse",
    "LoginRequest", "RegisterRequest", "UserPublic", "UserResponse",
]
