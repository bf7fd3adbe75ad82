"""
Main restore orchestrator for Cognito restore operations.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional
from pathlib import Path

from cognito_restore.config.manager import ConfigurationManager
from cognito_restore.models.config import RestoreConfig
from cognito_restore.models.restore_result import RestoreResult, RestoreReport, RestoreStatus
from cognito_restore.models.user import BackupUser
from cognito_restore.services.backup_fetcher import BackupFetcherService
from cognito_restore.services.user_restore import UserRestoreService
from cognito_restore.services.logging import LoggingService
from cognito_restore.models.exceptions import (
    AWSCredentialsError,
    CognitoRestoreError,
    RestoreJobError
)


class CognitoRestoreOrchestrator:
    """Main orchestrator class that coordinates the restore services."""

    def __init__(self, event: Optional[Mapping[str, Any]] = None,
                 logging_service: Optional[LoggingService] = None,
                 environ: Optional[Mapping[str, str]] = None,
                 clients: Optional[Dict[str, Any]] = None):
        """
        Initialize the restore orchestrator.

        Args:
            event: Optional invocation payload
            logging_service: Logging service configured at process entry
            environ: Environment snapshot (defaults to os.environ)
            clients: Optional pre-built AWS clients keyed by service name
        """
        self.event = event
        self.environ = environ
        self.clients = clients
        self.config: Optional[RestoreConfig] = None
        self.config_manager: Optional[ConfigurationManager] = None
        self.logging_service = logging_service or LoggingService.from_environment(environ)
        self.logger = logging.getLogger(__name__)

        # Services
        self.backup_fetcher: Optional[BackupFetcherService] = None
        self.user_restore_service: Optional[UserRestoreService] = None

        # Results
        self.backup_users: List[BackupUser] = []
        self.restore_results: List[RestoreResult] = []
        self.restore_report: Optional[RestoreReport] = None

    def initialize(self) -> bool:
        """
        Resolve configuration and build the restore services.

        Returns:
            bool: True if initialization successful

        Raises:
            ConfigurationError: If configuration resolution fails
        """
        self.logger.info("Initializing Cognito Restore Orchestrator")

        self.config_manager = ConfigurationManager(self.environ)
        self.config = self.config_manager.resolve(self.event)

        # Fresh clients per invocation, shared between services
        clients: Dict[str, Any] = dict(self.clients or {})
        self.backup_fetcher = BackupFetcherService(self.config, clients)
        self.user_restore_service = UserRestoreService(
            self.config, clients, logging_service=self.logging_service
        )
        self.logger.info("Orchestrator initialization completed successfully")
        return True

    def validate(self) -> bool:
        """
        Check that the target pool and the backup object are reachable.

        Returns:
            bool: True if all prerequisites are met

        Raises:
            RestoreJobError: If the orchestrator is not initialized
            AWSCredentialsError: If a prerequisite check fails
        """
        if not self.is_initialized:
            raise RestoreJobError("Orchestrator not initialized. Call initialize() first.")

        errors = []
        if not self.user_restore_service.validate_prerequisites():
            errors.append(f"Cognito user pool '{self.config.cognito_user_pool_id}' is not reachable")
        if self.config.restore_users.resolve() and not self.backup_fetcher.validate_prerequisites():
            errors.append(
                f"Backup object 's3://{self.config.s3_bucket_name}/{self.config.backup_object_key}' "
                "is not reachable"
            )

        if errors:
            raise AWSCredentialsError(
                "AWS connectivity validation failed:\n" +
                "\n".join(f"- {error}" for error in errors)
            )
        return True

    def execute_restore(self) -> RestoreReport:
        """
        Execute the complete restore workflow.

        The backup is read before the pool is cleaned up so that an
        unreadable backup never leaves an emptied pool.

        Returns:
            RestoreReport: Report of all executed phases

        Raises:
            RestoreJobError: If a fatal phase fails
        """
        if not self.is_initialized:
            raise RestoreJobError("Orchestrator not initialized. Call initialize() first.")

        start_time = datetime.now()
        self.restore_results = []
        config = self.config

        try:
            self.logging_service.log_info("Restore workflow started", {
                'user_pool_id': config.cognito_user_pool_id,
                'cognito_region': config.cognito_region,
                'backup': f"s3://{config.s3_bucket_name}/{config.backup_object_key}",
                'restore_users': config.restore_users.resolve(),
                'restore_groups': config.restore_groups.resolve(),
                'cleanup_before_restore': config.cleanup_before_restore.resolve()
            })

            self.backup_users = []
            if config.restore_users.resolve():
                self.logger.info("Step 1: Loading users backup")
                self._execute_phase("load_backup", self._load_backup)

            if config.cleanup_before_restore.resolve():
                self.logger.info("Step 2: Cleaning up user pool before restore")
                self._execute_phase("cleanup", self.user_restore_service.cleanup_user_pool)

            if config.restore_users.resolve():
                self.logger.info("Step 3: Restoring users")
                self._execute_phase(
                    "restore_users",
                    lambda: self.user_restore_service.restore_users(self.backup_users)
                )

            if config.restore_groups.resolve():
                self.logger.info("Step 4: Restoring groups")
                self._execute_phase("restore_groups", self.user_restore_service.restore_groups)

            self.restore_report = self._generate_restore_report(start_time, datetime.now())
            self.logging_service.log_restore_report(self.restore_report)

            self.logger.info("Restore workflow completed")
            return self.restore_report

        except CognitoRestoreError as e:
            self.restore_report = self._generate_restore_report(start_time, datetime.now())
            self.logging_service.log_error("Restore workflow failed", e, {
                'user_pool_id': config.cognito_user_pool_id,
                'error_code': e.error_code
            })
            raise RestoreJobError(
                f"Restore workflow failed: {e.message}",
                error_code=e.error_code,
                context=e.context
            ) from e

    def _load_backup(self) -> RestoreResult:
        self.backup_users = self.backup_fetcher.load_users()
        return RestoreResult(
            phase="load_backup",
            success=True,
            items_processed=len(self.backup_users),
            items_failed=0,
            metadata={
                'bucket': self.config.s3_bucket_name,
                'key': self.config.backup_object_key,
                'decrypted': self.config.decryption_enabled
            }
        )

    def _execute_phase(self, phase: str, action: Callable[[], RestoreResult]) -> RestoreResult:
        """Run one phase and record its result, including a failed one."""
        started = datetime.now()
        try:
            result = action()
        except CognitoRestoreError as e:
            failed = RestoreResult(
                phase=phase,
                success=False,
                items_processed=e.context.get('users_created', 0),
                items_failed=1,
                execution_time=(datetime.now() - started).total_seconds(),
                status=RestoreStatus.FAILED
            )
            failed.mark_failed(str(e))
            self.restore_results.append(failed)
            raise

        self.restore_results.append(result)
        return result

    def _generate_restore_report(self, start_time: datetime, end_time: datetime) -> RestoreReport:
        """
        Generate restore report from the recorded phase results.

        Args:
            start_time: Restore start time
            end_time: Restore end time

        Returns:
            RestoreReport: Restore report
        """
        return RestoreReport(
            start_time=start_time,
            end_time=end_time,
            results=self.restore_results.copy()
        )

    def generate_restore_report_summary(self) -> str:
        """
        Generate a human-readable restore report summary.

        Returns:
            str: Formatted restore report summary
        """
        if not self.restore_report:
            raise RestoreJobError("No restore report available. Execute restore first.")

        report_lines = [
            "=" * 60,
            "Cognito Restore Report Summary",
            "=" * 60,
            f"Restore Date: {self.restore_report.start_time.strftime('%Y-%m-%d %H:%M:%S')}",
            f"User Pool: {self.config.cognito_user_pool_id} ({self.config.cognito_region})",
            f"Backup: s3://{self.config.s3_bucket_name}/{self.config.backup_object_key}",
            f"Total Execution Time: {self.restore_report.total_execution_time:.2f} seconds",
            "",
            "Phase Details:",
            "-" * 40
        ]

        for result in self.restore_report.results:
            if result.status == RestoreStatus.SUCCESS:
                status_symbol = "✓"
            elif result.status == RestoreStatus.FAILED:
                status_symbol = "✗"
            elif result.status == RestoreStatus.SKIPPED:
                status_symbol = "-"
            else:
                status_symbol = "⚠"

            report_lines.extend([
                f"{status_symbol} {result.phase.replace('_', ' ').title()}:",
                f"    Status: {result.status.value}",
                f"    Items Processed: {result.items_processed}",
                f"    Items Failed: {result.items_failed}",
                f"    Execution Time: {result.execution_time:.2f}s"
            ])

            if result.error_messages:
                report_lines.append("    Errors:")
                for error in result.error_messages:
                    report_lines.append(f"      - {error}")

            report_lines.append("")

        report_lines.append("=" * 60)
        return "\n".join(report_lines)

    def save_restore_report(self, output_path: str) -> None:
        """
        Save restore report summary to a text file.

        Args:
            output_path: Path to save the report file
        """
        try:
            report_summary = self.generate_restore_report_summary()

            output_file = Path(output_path)
            output_file.parent.mkdir(parents=True, exist_ok=True)

            with open(output_file, 'w', encoding='utf-8') as f:
                f.write(report_summary)

            self.logger.info(f"Restore report saved to: {output_path}")

        except OSError as e:
            self.logger.error(f"Failed to save restore report: {str(e)}")
            raise RestoreJobError(f"Failed to save restore report: {str(e)}")

    @property
    def is_initialized(self) -> bool:
        """Check if orchestrator is properly initialized."""
        return (
            self.config is not None and
            self.config_manager is not None and
            self.backup_fetcher is not None and
            self.user_restore_service is not None
        )
