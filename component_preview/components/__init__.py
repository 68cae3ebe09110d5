from .base import Component, ComponentError

__all__ = ["Component", "ComponentError"]
