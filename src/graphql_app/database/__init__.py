"""
Database module for the GraphQL App backend
"""

from .connection import get_async_session, get_request_session, init_database

__all__ = ["get_async_session", "get_request_session", "init_database"]
