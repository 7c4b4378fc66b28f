"""
API module for the REST implementation.
"""

from .rest_api import RosterRestAPI

__all__ = [
    "RosterRestAPI",
]
