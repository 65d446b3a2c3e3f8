"""Public façade for the opus_api.data package.

This module exposes the StyleStore gateway interface and its two
implementations: the PostgREST (Supabase) store used in production and the
in-memory store used by tests and local development.
"""

from .gateway import Row, StyleStore
from .memory import InMemoryStyleStore
from .postgrest import PostgrestStyleStore

__all__ = [
    "Row",
    "StyleStore",
    "InMemoryStyleStore",
    "PostgrestStyleStore",
]
