"""
Custom exceptions for the Roster service.
"""

from typing import Optional, Any, Dict


class RosterException(Exception):
    """Base exception for all Roster-related errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(RosterException):
    """Raised when a required input field is missing or malformed."""
    pass


class PersistenceError(RosterException):
    """Raised when persistence operations fail."""
    pass


class RetrievalError(PersistenceError):
    """Raised when the store could not complete a read."""
    pass


class WriteError(PersistenceError):
    """Raised when the store could not complete a create."""
    pass


class DuplicateEntityError(PersistenceError):
    """Raised when attempting to store an id that already exists."""
    pass


class ConfigurationError(RosterException):
    """Raised when configuration is invalid."""
    pass
