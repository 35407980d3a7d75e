# src/energy_pros/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    engagement_router,
    hashtags_router,
    invites_router,
    posts_router,
    system_router,
    users_router,
)

__all__ = [
    "auth_router",
    "posts_router",
    "engagement_router",
    "users_router",
    "hashtags_router",
    "invites_router",
    "system_router",
]
