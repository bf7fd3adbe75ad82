"""
Error translation for Cognito restore operations.
"""

import logging
from typing import Optional, Dict, Any, List
from botocore.exceptions import ClientError, BotoCoreError, NoCredentialsError
from botocore.exceptions import EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError

from ..models.exceptions import (
    CognitoRestoreError, ConfigurationError, AWSCredentialsError,
    CognitoAPIError, S3Error, KMSError, BackupDataError, RestoreJobError
)


class ErrorHandler:
    """Maps botocore failures onto the restore exception taxonomy."""

    ACCESS_DENIED_ERROR_CODES = {
        'AccessDenied',
        'AccessDeniedException',
        'UnauthorizedOperation',
        'NotAuthorizedException'
    }

    NOT_FOUND_ERROR_CODES = {
        'NoSuchBucket',
        'NoSuchKey',
        'NotFound',
        '404',
        'ResourceNotFoundException',
        'UserNotFoundException',
        'NotFoundException'
    }

    SERVICE_ERRORS = {
        'cognito-idp': CognitoAPIError,
        's3': S3Error,
        'kms': KMSError
    }

    SERVICE_LABELS = {
        'cognito-idp': 'Cognito',
        's3': 'S3',
        'kms': 'KMS'
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def translate(self, error: Exception, service: str, operation: str,
                  context: Optional[Dict[str, Any]] = None) -> CognitoRestoreError:
        """
        Convert an AWS SDK exception into a restore exception.

        Args:
            error: The exception that occurred
            service: AWS service name ('cognito-idp', 's3' or 'kms')
            operation: Name of the operation that failed
            context: Additional context to attach to the exception

        Returns:
            CognitoRestoreError: Exception to raise in place of ``error``
        """
        if isinstance(error, CognitoRestoreError):
            return error

        error_context = {'service': service, 'operation': operation}
        if context:
            error_context.update(context)

        label = self.SERVICE_LABELS.get(service, service)
        error_class = self.SERVICE_ERRORS.get(service, CognitoRestoreError)

        if isinstance(error, ClientError):
            error_code = error.response.get('Error', {}).get('Code', 'Unknown')
            error_message = error.response.get('Error', {}).get('Message', str(error))
            error_context['request_id'] = error.response.get('ResponseMetadata', {}).get('RequestId')

            self.logger.debug(
                f"AWS API error in {service}.{operation}: {error_code} - {error_message}",
                extra={'context': error_context}
            )

            if error_code in self.ACCESS_DENIED_ERROR_CODES:
                return AWSCredentialsError(
                    f"Access denied for {label} {operation}: {error_message}",
                    error_code=error_code,
                    context=error_context
                )

            return error_class(
                f"{label} {operation} failed: {error_code} - {error_message}",
                error_code=error_code,
                context=error_context
            )

        if isinstance(error, NoCredentialsError):
            return AWSCredentialsError(
                "AWS credentials not found or invalid",
                error_code='NoCredentials',
                context=error_context
            )

        if isinstance(error, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
            return error_class(
                f"Network error in {label} {operation}: {str(error)}",
                error_code='NetworkError',
                context=error_context
            )

        if isinstance(error, BotoCoreError):
            return error_class(
                f"AWS connection error in {label} {operation}: {str(error)}",
                context=error_context
            )

        return error_class(
            f"Unexpected error in {label} {operation}: {str(error)}",
            context=error_context
        )

    def is_not_found(self, error: Exception) -> bool:
        """Return True if the error reports a missing resource."""
        if isinstance(error, CognitoRestoreError):
            return error.error_code in self.NOT_FOUND_ERROR_CODES
        if isinstance(error, ClientError):
            return error.response.get('Error', {}).get('Code') in self.NOT_FOUND_ERROR_CODES
        return False

    def get_error_remediation_steps(self, error: Exception) -> List[str]:
        """
        Get suggested remediation steps for common errors.

        Args:
            error: The exception that occurred

        Returns:
            List[str]: List of suggested remediation steps
        """
        if isinstance(error, RestoreJobError) and isinstance(error.__cause__, Exception):
            return self.get_error_remediation_steps(error.__cause__)

        if isinstance(error, AWSCredentialsError):
            return [
                "Check that AWS credentials are properly configured",
                "Verify the execution role allows cognito-idp:ListUsers, "
                "cognito-idp:AdminDeleteUser and cognito-idp:AdminCreateUser",
                "Verify the execution role allows s3:GetObject on the backup bucket",
                "Verify the execution role allows kms:Decrypt on the backup key"
            ]

        elif isinstance(error, ConfigurationError):
            return [
                "Set the missing value as an environment variable or pass it in the event payload",
                "Boolean environment variables accept true/false, t/f or 1/0",
                "Verify region names follow AWS naming conventions"
            ]

        elif isinstance(error, S3Error):
            if self.is_not_found(error):
                return [
                    "Verify the bucket name and backup directory path",
                    "Check that '<backupDirPath>/users.json' exists in the bucket",
                    "Check that the bucket region is configured correctly"
                ]

        elif isinstance(error, KMSError):
            return [
                "Verify the KMS key ID and key region",
                "Check that the backup object was encrypted with this key",
                "Unset the KMS key ID if the backup is stored unencrypted"
            ]

        elif isinstance(error, BackupDataError):
            return [
                "Check that users.json is a Cognito ListUsers JSON export",
                "Check that every user carries an 'email' attribute"
            ]

        elif isinstance(error, CognitoAPIError):
            if error.error_code == 'UsernameExistsException':
                return [
                    "A user with the same email already exists in the pool",
                    "Enable cleanUpBeforeRestore to empty the pool before restoring"
                ]
            if self.is_not_found(error):
                return [
                    "Verify the Cognito user pool ID",
                    "Check that the Cognito region is configured correctly"
                ]

        # Default remediation steps
        return [
            "Check the error logs for more detailed information",
            "Verify AWS credentials and permissions",
            "Check network connectivity to AWS services"
        ]
