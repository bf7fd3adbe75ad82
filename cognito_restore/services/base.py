"""
Base class for restore services.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import boto3

from cognito_restore.models.config import RestoreConfig
from cognito_restore.models.exceptions import AWSCredentialsError


class BaseRestoreService(ABC):
    """Abstract base class for all restore services."""

    def __init__(self, config: RestoreConfig, clients: Optional[Dict[str, Any]] = None):
        self.config = config
        self._clients: Dict[str, Any] = clients if clients is not None else {}

    @abstractmethod
    def validate_prerequisites(self) -> bool:
        """Validate that all prerequisites for the restore are met."""
        pass

    def get_client(self, service_name: str) -> Any:
        """Get or create an AWS service client."""
        if service_name not in self._clients:
            self._clients[service_name] = self._create_client(service_name)
        return self._clients[service_name]

    def get_service_region(self, service_name: str) -> str:
        """
        Get the region that serves an AWS service for this restore.

        Args:
            service_name: 'cognito-idp', 's3' or 'kms'

        Returns:
            str: Region name
        """
        if service_name == 'cognito-idp':
            return self.config.cognito_region
        if service_name == 's3':
            return self.config.s3_bucket_region
        if service_name == 'kms':
            return self.config.effective_kms_region
        return self.config.aws_region

    def _create_client(self, service_name: str) -> Any:
        """
        Create an AWS service client in the region that serves it.

        Args:
            service_name: Name of the AWS service

        Returns:
            AWS service client
        """
        try:
            session = boto3.Session(region_name=self.get_service_region(service_name))
            return session.client(service_name)
        except Exception as e:
            raise AWSCredentialsError(f"Failed to create {service_name} client: {str(e)}")
