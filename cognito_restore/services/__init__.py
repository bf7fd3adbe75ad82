"""
Service classes for Cognito restore operations.
"""

from .base import BaseRestoreService
from .backup_fetcher import BackupFetcherService
from .user_restore import UserRestoreService
from .logging import LoggingService, StructuredFormatter
from .error_handler import ErrorHandler

__all__ = [
    "BaseRestoreService",
    "BackupFetcherService",
    "UserRestoreService",
    "LoggingService",
    "StructuredFormatter",
    "ErrorHandler"
]
