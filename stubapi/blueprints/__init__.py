"""Blueprints package."""

from .posts import posts_bp
from .users import users_bp

__all__ = [
    "posts_bp",
    "users_bp",
]
