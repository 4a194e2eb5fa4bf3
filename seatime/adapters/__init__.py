"""
Adapters layer - Entry sources outside the engine.
"""

from .json_entry_store import JsonEntryStore

__all__ = ["JsonEntryStore"]
