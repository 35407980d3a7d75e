"""SQLAlchemy models for the Energy Pros application."""

from .comment import Comment
from .engagement import Endorsement, Reaction
from .invite import Invite
from .post import Post
from .profile_view import ProfileView
from .user import User

__all__ = [
    "Comment",
    "Endorsement", "Reaction",
    "Invite",
    "Post",
    "ProfileView",
    "User",
]
