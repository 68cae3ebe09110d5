"""API routers for the component preview FastAPI application."""

from . import previews

__all__ = ["previews"]
