"""
Storage implementations.

Provides implementations of the Storage interface for persisting
tournament sessions.

Available implementations:
- JSONSessionStorage: Whole-state JSON session files
- LastSessionPointer: Remembers which session file was used last
"""

from .json_storage import JSONSessionStorage, LastSessionPointer, state_from_record, state_to_record

__all__ = ["JSONSessionStorage", "LastSessionPointer", "state_from_record", "state_to_record"]
