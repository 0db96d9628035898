"""
Database module for the Bookshelf backend
"""

from .connection import create_tables, get_async_engine, get_async_session, init_database

__all__ = ["create_tables", "get_async_engine", "get_async_session", "init_database"]
