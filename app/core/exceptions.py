"""
Custom exception classes for better error handling
"""
from typing import Optional, Dict, Any


class ReadingAnalyticsException(Exception):
    """Base exception for all custom exceptions"""
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class PersistenceException(ReadingAnalyticsException):
    """Raised when the document store is unreachable or a write fails"""
    status_code = 500


class ValidationException(ReadingAnalyticsException):
    """Raised when input validation fails"""
    status_code = 400


class InvalidReferenceException(ValidationException):
    """Raised when an identifier is malformed"""
    status_code = 400


class AuthenticationException(ReadingAnalyticsException):
    """Raised when the caller identity is missing or invalid"""
    status_code = 401


class ResourceNotFoundException(ReadingAnalyticsException):
    """Raised when a requested resource is not found"""
    status_code = 404
