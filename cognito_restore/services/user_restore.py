"""
Service for restoring Cognito users into a user pool.
"""

import logging
import time
from typing import List, Dict, Any, Optional
from botocore.exceptions import ClientError, BotoCoreError

from cognito_restore.models.config import RestoreConfig
from cognito_restore.models.restore_result import RestoreResult, RestoreStatus
from cognito_restore.models.user import BackupUser
from cognito_restore.models.exceptions import CognitoRestoreError, BackupDataError
from cognito_restore.services.base import BaseRestoreService
from cognito_restore.services.error_handler import ErrorHandler
from cognito_restore.services.logging import LoggingService


class UserRestoreService(BaseRestoreService):
    """Empties and repopulates a Cognito user pool."""

    # Pause after bulk delete so Cognito settles before users are recreated
    CLEANUP_SETTLE_SECONDS = 3

    # Maximum page size accepted by ListUsers
    LIST_USERS_PAGE_SIZE = 60

    def __init__(self, config: RestoreConfig, clients: Optional[Dict[str, Any]] = None,
                 logging_service: Optional[LoggingService] = None):
        super().__init__(config, clients)
        self.logger = logging.getLogger(__name__)
        self.logging_service = logging_service
        self.error_handler = ErrorHandler(self.logger)

    def list_users(self) -> List[Dict[str, Any]]:
        """
        Retrieve all users of the target pool with pagination handling.

        Returns:
            List[Dict[str, Any]]: User dictionaries from ListUsers

        Raises:
            CognitoAPIError: If the API call fails
        """
        try:
            cognito = self.get_client('cognito-idp')
            users = []
            pagination_token = None

            while True:
                params = {
                    'UserPoolId': self.config.cognito_user_pool_id,
                    'Limit': self.LIST_USERS_PAGE_SIZE
                }

                if pagination_token:
                    params['PaginationToken'] = pagination_token

                response = cognito.list_users(**params)
                users.extend(response.get('Users', []))

                pagination_token = response.get('PaginationToken')
                if not pagination_token:
                    break

                self.logger.debug(f"Retrieved {len(users)} users so far, continuing pagination")

            return users

        except (ClientError, BotoCoreError) as e:
            raise self.error_handler.translate(
                e, 'cognito-idp', 'ListUsers', {'user_pool_id': self.config.cognito_user_pool_id}
            ) from e

    def cleanup_user_pool(self) -> RestoreResult:
        """
        Delete every user currently in the target pool.

        Per-user delete failures are logged and skipped. A failure to list
        the pool is raised.

        Returns:
            RestoreResult: Result of the cleanup phase

        Raises:
            CognitoAPIError: If the pool users cannot be listed
        """
        start_time = time.time()
        result = RestoreResult(
            phase="cleanup",
            success=True,
            items_processed=0,
            items_failed=0
        )
        pool_id = self.config.cognito_user_pool_id

        users = self.list_users()
        self._start_operation("cleanup", len(users))
        cognito = self.get_client('cognito-idp')

        for user in users:
            username = user.get('Username')
            try:
                cognito.admin_delete_user(UserPoolId=pool_id, Username=username)
                result.items_processed += 1
                self._update_progress(processed=1)
                self.logger.debug(f"User {username} has been successfully deleted from {pool_id} userpool")

            except (ClientError, BotoCoreError) as e:
                error = self.error_handler.translate(
                    e, 'cognito-idp', 'AdminDeleteUser', {'username': username}
                )
                self.logger.error(f"[CLEANUP] Failed to delete user {username}: {error}")
                result.add_error(f"Failed to delete user {username}: {error}")
                self._update_progress(processed=0, failed=1)

        if result.items_failed:
            if result.items_processed:
                result.status = RestoreStatus.PARTIAL
                result.success = True
            else:
                result.status = RestoreStatus.FAILED
                result.success = False

        time.sleep(self.CLEANUP_SETTLE_SECONDS)

        self._complete_operation()
        result.metadata['users_found'] = len(users)
        result.execution_time = time.time() - start_time

        if result.items_failed:
            self.logger.warning(
                f"User pool {pool_id} cleanup finished with {result.items_failed} failed deletes"
            )
        else:
            self.logger.info(f"User pool {pool_id} has been successfully cleaned up")
        return result

    def restore_users(self, users: List[BackupUser]) -> RestoreResult:
        """
        Recreate users in the target pool, in backup order.

        The first failure stops the restore; users created before it are
        kept.

        Args:
            users: Users parsed from the backup

        Returns:
            RestoreResult: Result of the restore phase

        Raises:
            CognitoAPIError: If a create call fails
            BackupDataError: If a user has no email attribute
        """
        start_time = time.time()
        result = RestoreResult(
            phase="restore_users",
            success=True,
            items_processed=0,
            items_failed=0
        )
        pool_id = self.config.cognito_user_pool_id

        self._start_operation("restore_users", len(users))
        cognito = self.get_client('cognito-idp')

        for user in users:
            try:
                request = user.to_create_user_request(pool_id)
                cognito.admin_create_user(**request)

            except BackupDataError as e:
                self._fail_restore(e, user, result, len(users))
                raise

            except (ClientError, BotoCoreError) as e:
                error = self.error_handler.translate(
                    e, 'cognito-idp', 'AdminCreateUser', {'username': user.username}
                )
                self._fail_restore(error, user, result, len(users))
                raise error from e

            result.items_processed += 1
            self._update_progress(processed=1)
            self.logger.debug(f"User {user.username} has been restored as {request['Username']}")

        self._complete_operation()
        result.execution_time = time.time() - start_time
        self.logger.info(f"Restored {result.items_processed} users into {pool_id} userpool")
        return result

    def restore_groups(self) -> RestoreResult:
        """Group restoration is not supported; report the phase as skipped."""
        self.logger.warning(
            "restoreGroups is enabled but group restoration is not supported; no groups were restored"
        )
        return RestoreResult(
            phase="restore_groups",
            success=True,
            items_processed=0,
            items_failed=0,
            status=RestoreStatus.SKIPPED,
            metadata={'reason': 'group restoration is not supported'}
        )

    def validate_prerequisites(self) -> bool:
        """
        Validate that the target user pool exists and is reachable.

        Returns:
            bool: True if the pool can be described
        """
        try:
            cognito = self.get_client('cognito-idp')
            cognito.describe_user_pool(UserPoolId=self.config.cognito_user_pool_id)
            return True

        except Exception as e:
            self.logger.error(f"Prerequisites validation failed: {str(e)}")
            return False

    def _start_operation(self, name: str, total: int) -> None:
        if self.logging_service:
            self.logging_service.start_operation(name, total)

    def _update_progress(self, processed: int = 1, failed: int = 0) -> None:
        if self.logging_service:
            self.logging_service.update_progress(processed, failed)

    def _complete_operation(self) -> None:
        if self.logging_service:
            self.logging_service.complete_operation()

    def _fail_restore(self, error: CognitoRestoreError, user: BackupUser,
                      result: RestoreResult, total: int) -> None:
        """Record the user that stopped the restore on the error and the log."""
        error.context.update({
            'username': user.username,
            'users_created': result.items_processed,
            'users_total': total
        })
        self._update_progress(processed=0, failed=1)
        self.logger.error(
            f"Failed to restore user {user.username}: {error}",
            extra={'context': error.context}
        )
