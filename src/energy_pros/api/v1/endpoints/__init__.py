# src/energy_pros/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .engagement import router as engagement_router
from .hashtags import router as hashtags_router
from .invites import router as invites_router
from .posts import router as posts_router
from .system import router as system_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "posts_router",
    "engagement_router",
    "users_router",
    "hashtags_router",
    "invites_router",
    "system_router",
]
