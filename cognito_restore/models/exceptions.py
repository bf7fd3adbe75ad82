"""
Custom exception classes for Cognito restore operations.
"""

from typing import Optional, Dict, Any


class CognitoRestoreError(Exception):
    """Base exception for Cognito restore operations."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, 
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}


class ConfigurationError(CognitoRestoreError):
    """Exception raised for configuration-related errors."""
    pass


class AWSCredentialsError(CognitoRestoreError):
    """Exception raised for AWS credentials-related errors."""
    pass


class CognitoAPIError(CognitoRestoreError):
    """Exception raised for Cognito user pool API errors."""
    pass


class S3Error(CognitoRestoreError):
    """Exception raised for S3-related errors."""
    pass


class KMSError(CognitoRestoreError):
    """Exception raised when the backup cannot be decrypted."""
    pass


class BackupDataError(CognitoRestoreError):
    """Exception raised for malformed or incomplete backup data."""
    pass


class RestoreJobError(CognitoRestoreError):
    """Exception raised when the restore workflow fails."""
    pass
