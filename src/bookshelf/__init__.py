"""
Bookshelf backend
GraphQL API for a book and author catalog
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
