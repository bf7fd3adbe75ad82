"""
Service for reading the users backup from S3.
"""

import logging
import time
from typing import List, Dict, Any, Optional
from botocore.exceptions import ClientError, BotoCoreError

from cognito_restore.models.config import RestoreConfig
from cognito_restore.models.user import BackupUser, parse_backup_payload
from cognito_restore.services.base import BaseRestoreService
from cognito_restore.services.error_handler import ErrorHandler


class BackupFetcherService(BaseRestoreService):
    """Fetches, optionally decrypts and parses the users backup object."""

    def __init__(self, config: RestoreConfig, clients: Optional[Dict[str, Any]] = None):
        super().__init__(config, clients)
        self.logger = logging.getLogger(__name__)
        self.error_handler = ErrorHandler(self.logger)

    def load_users(self) -> List[BackupUser]:
        """
        Read the users backup for the configured backup path.

        Returns:
            List[BackupUser]: Users in backup order

        Raises:
            S3Error: If the object cannot be fetched
            KMSError: If the object cannot be decrypted
            BackupDataError: If the data is not a users export
        """
        start_time = time.time()
        key = self.config.backup_object_key

        data = self.fetch_backup(self.config.s3_bucket_name, key)
        self.logger.debug(f"{key} data has been received successfully from S3")

        if self.config.decryption_enabled:
            data = self.decrypt_backup(data)
            self.logger.debug(f"{key} data has been decrypted with KMS key {self.config.kms_key_id}")

        users = parse_backup_payload(data)
        self.logger.info(
            f"Loaded {len(users)} users from s3://{self.config.s3_bucket_name}/{key}",
            extra={'context': {
                'bucket': self.config.s3_bucket_name,
                'key': key,
                'encrypted': self.config.decryption_enabled,
                'users': len(users),
                'duration_seconds': time.time() - start_time
            }}
        )
        return users

    def fetch_backup(self, bucket_name: str, key: str) -> bytes:
        """
        Fetch the full content of a backup object.

        Args:
            bucket_name: S3 bucket name
            key: Object key

        Returns:
            bytes: Object content

        Raises:
            S3Error: If the object cannot be fetched or read
        """
        context = {'bucket': bucket_name, 'key': key}
        try:
            s3 = self.get_client('s3')
            response = s3.get_object(Bucket=bucket_name, Key=key)
            body = response['Body']
            try:
                return body.read()
            finally:
                body.close()

        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Failed to get {key} object data from {bucket_name} bucket")
            raise self.error_handler.translate(e, 's3', 'GetObject', context) from e

    def decrypt_backup(self, data: bytes) -> bytes:
        """
        Decrypt backup bytes with the configured KMS key.

        Args:
            data: Ciphertext as stored in S3

        Returns:
            bytes: Plaintext backup

        Raises:
            KMSError: If decryption fails
        """
        context = {'key_id': self.config.kms_key_id}
        try:
            kms = self.get_client('kms')
            response = kms.decrypt(KeyId=self.config.kms_key_id, CiphertextBlob=data)
            return response['Plaintext']

        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Failed to decrypt users backup data with KMS key {self.config.kms_key_id}")
            raise self.error_handler.translate(e, 'kms', 'Decrypt', context) from e

    def validate_prerequisites(self) -> bool:
        """
        Validate that the backup object exists and is reachable.

        Returns:
            bool: True if the object can be read
        """
        try:
            s3 = self.get_client('s3')
            s3.head_object(Bucket=self.config.s3_bucket_name, Key=self.config.backup_object_key)
            return True

        except Exception as e:
            self.logger.error(
                f"Backup object s3://{self.config.s3_bucket_name}/{self.config.backup_object_key} "
                f"is not reachable: {str(e)}"
            )
            return False
