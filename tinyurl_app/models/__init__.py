"""
Domain records held by the in-memory stores.

These are plain Pydantic models, not ORM rows: all state lives in the store
objects and is lost on restart.
"""

from .account import Account
from .mapping import Mapping

__all__ = ["Account", "Mapping"]
