"""
Cognito Restore Tool

Restores Amazon Cognito user pool users from a JSON backup stored in S3.
"""

__version__ = "1.0.0"
__author__ = "Cognito Restore Tool"

from .config import ConfigurationManager
from .orchestrator import CognitoRestoreOrchestrator
from .models import (
    RestoreConfig,
    TriState,
    RestoreResult,
    RestoreReport,
    RestoreStatus,
    InvocationResponse,
    BackupUser,
    UserAttribute,
    CognitoRestoreError,
    ConfigurationError,
    AWSCredentialsError,
    CognitoAPIError,
    S3Error,
    KMSError,
    BackupDataError,
    RestoreJobError
)

__all__ = [
    "ConfigurationManager",
    "CognitoRestoreOrchestrator",
    "RestoreConfig",
    "TriState",
    "RestoreResult",
    "RestoreReport",
    "RestoreStatus",
    "InvocationResponse",
    "BackupUser",
    "UserAttribute",
    "CognitoRestoreError",
    "ConfigurationError",
    "AWSCredentialsError",
    "CognitoAPIError",
    "S3Error",
    "KMSError",
    "BackupDataError",
    "RestoreJobError"
]
