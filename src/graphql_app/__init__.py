"""
GraphQL App backend
Users and countries over GraphQL, with eager loading and cursor pagination
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
