"""
Data models for Cognito restore operations.
"""

from .config import RestoreConfig, TriState
from .restore_result import RestoreResult, RestoreReport, RestoreStatus, InvocationResponse
from .user import (
    UserAttribute,
    BackupUser,
    transform_users_from_api_response,
    parse_backup_payload
)
from .exceptions import (
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
    "RestoreConfig",
    "TriState",
    "RestoreResult",
    "RestoreReport",
    "RestoreStatus",
    "InvocationResponse",
    "UserAttribute",
    "BackupUser",
    "transform_users_from_api_response",
    "parse_backup_payload",
    "CognitoRestoreError",
    "ConfigurationError",
    "AWSCredentialsError",
    "CognitoAPIError",
    "S3Error",
    "KMSError",
    "BackupDataError",
    "RestoreJobError"
]
