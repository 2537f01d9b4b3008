"""Key substring search within a listing page."""

from .key_filter import SearchFilter, matches

__all__ = ["SearchFilter", "matches"]
