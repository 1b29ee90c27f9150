"""Read-side services built on the store contracts."""

from .activity_feed import ActivityPage, ActivityQuery, decode_cursor, encode_cursor

__all__ = ["ActivityPage", "ActivityQuery", "decode_cursor", "encode_cursor"]
