"""
Services module for record-level operations.
"""

from .record_service import RecordService

__all__ = [
    "RecordService",
]
