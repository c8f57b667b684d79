"""Root router exports."""

from . import auth, health, pages

__all__ = ["auth", "health", "pages"]
