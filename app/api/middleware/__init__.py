"""HTTP middleware."""

from .navigation import NavigationGateMiddleware

__all__ = ["NavigationGateMiddleware"]
