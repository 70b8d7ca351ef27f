"""
Custom exceptions for the GeoReverse package.

This module defines a hierarchical exception system that provides:
1. Specific, technical error information for debugging and logging
2. User-friendly error messages for end-users
3. Error codes for consistent error identification
4. Optional context information for additional debugging
"""

from typing import Optional, Dict, Any
import traceback
import sys

class GeoReverseError(Exception):
    """Base exception for all GeoReverse errors."""

    # Default values
    status_code = 500
    error_code = "GR-GENERIC-ERROR"
    user_message = "An unexpected error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        user_message: Optional[str] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        include_traceback: bool = True
    ):
        # Technical message for logs
        self.message = message or self.__class__.__doc__ or "An error occurred."
        super().__init__(self.message)

        # User-friendly message
        self.user_message = user_message or self.__class__.user_message

        # Error codes
        self.error_code = error_code or self.__class__.error_code
        self.status_code = status_code or self.__class__.status_code

        # Additional context
        self.context = context or {}
        self.cause = cause

        # Capture traceback if we are inside an except block
        self.traceback = None
        if include_traceback:
            self.traceback = traceback.format_exc() if sys.exc_info()[0] else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the exception to a dictionary for API responses."""
        error_dict = {
            "error_code": self.error_code,
            "message": self.user_message,
            "status_code": self.status_code,
        }

        # Include technical details only in debug mode
        if self.context.get('debug'):
            error_dict["technical_details"] = {
                "message": self.message,
                "context": self.context,
            }
            if self.traceback:
                error_dict["technical_details"]["traceback"] = self.traceback
            if self.cause:
                error_dict["technical_details"]["cause"] = str(self.cause)

        return error_dict


# Data Errors - 2000 range
class DataError(GeoReverseError):
    """Base exception for all data-related errors."""
    status_code = 400
    error_code = "GR-DATA-2000"
    user_message = "An error occurred with the requested data."


class DataImportError(DataError):
    """Exception raised when the raw reference data cannot be fetched or unpacked."""
    status_code = 502
    error_code = "GR-DATA-2001"
    user_message = "Unable to download the reference city data. Please try again later."


class SnapshotError(DataError):
    """Exception raised when the record snapshot cannot be written."""
    status_code = 500
    error_code = "GR-DATA-2004"
    user_message = "The city data cache could not be written."


# API Errors - 3000 range
class APIError(GeoReverseError):
    """Base exception for all API-related errors."""
    status_code = 400
    error_code = "GR-API-3000"
    user_message = "An API error occurred while processing your request."


class InvalidParameterError(APIError):
    """Exception raised when API parameters are invalid."""
    status_code = 400
    error_code = "GR-API-3004"
    user_message = "Invalid parameters provided. Please check your request."


# System Errors - 4000 range
class SystemError(GeoReverseError):
    """Base exception for all system-related errors."""
    status_code = 500
    error_code = "GR-SYS-4000"
    user_message = "A system error occurred. Please try again later."


class ConfigurationError(SystemError):
    """Exception raised when a required file or setting is missing or invalid."""
    error_code = "GR-SYS-4001"
    user_message = "The system is incorrectly configured. Please contact support."
