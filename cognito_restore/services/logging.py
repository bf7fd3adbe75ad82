"""
Logging service for Cognito restore operations.
"""

import logging
import logging.handlers
import json
import os
from datetime import datetime
from typing import Dict, Any, List, Mapping, Optional
from pathlib import Path

from ..models.restore_result import RestoreReport, RestoreStatus


LOGGER_NAME = 'cognito_restore'

# Environment variables selecting diagnostic output
FORMATTER_TYPE_ENV = 'FORMATTER_TYPE'
LOG_LEVEL_ENV = 'LOG_LEVEL'

VALID_FORMATS = ('TEXT', 'JSON')
VALID_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

DEFAULT_FORMAT = 'TEXT'
DEFAULT_LEVEL = 'DEBUG'

TEXT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured logging with JSON output."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # Add context data if available
        if hasattr(record, 'context') and record.context:
            log_data['context'] = record.context

        # Add exception info if available
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ProgressTracker:
    """Tracks progress of a restore phase."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.current_operation: Optional[str] = None
        self.total_items: int = 0
        self.processed_items: int = 0
        self.failed_items: int = 0
        self.start_time: Optional[datetime] = None

    def start_operation(self, operation_name: str, total_items: int = 0) -> None:
        """Start tracking a new operation."""
        self.current_operation = operation_name
        self.total_items = total_items
        self.processed_items = 0
        self.failed_items = 0
        self.start_time = datetime.now()

        self.logger.info(
            f"Starting operation: {operation_name}",
            extra={'context': {
                'operation': operation_name,
                'total_items': total_items,
                'start_time': self.start_time.isoformat()
            }}
        )

    def update_progress(self, processed: int = 1, failed: int = 0) -> None:
        """Update progress counters."""
        self.processed_items += processed
        self.failed_items += failed

        if self.total_items > 0:
            progress_percent = (self.processed_items / self.total_items) * 100
            self.logger.debug(
                f"Progress: {self.processed_items}/{self.total_items} ({progress_percent:.1f}%)",
                extra={'context': {
                    'operation': self.current_operation,
                    'processed': self.processed_items,
                    'failed': self.failed_items,
                    'total': self.total_items,
                    'progress_percent': progress_percent
                }}
            )
        else:
            self.logger.debug(
                f"Processed: {self.processed_items}, Failed: {self.failed_items}",
                extra={'context': {
                    'operation': self.current_operation,
                    'processed': self.processed_items,
                    'failed': self.failed_items
                }}
            )

    def complete_operation(self) -> Dict[str, Any]:
        """Complete the current operation and return summary."""
        end_time = datetime.now()
        duration = (end_time - self.start_time).total_seconds() if self.start_time else 0

        summary = {
            'operation': self.current_operation,
            'total_items': self.total_items,
            'processed_items': self.processed_items,
            'failed_items': self.failed_items,
            'duration_seconds': duration,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': end_time.isoformat()
        }

        self.logger.info(
            f"Completed operation: {self.current_operation}",
            extra={'context': summary}
        )

        return summary


class LoggingService:
    """Process-wide logging setup for Cognito restore operations."""

    def __init__(self, log_format: str = DEFAULT_FORMAT, log_level: str = DEFAULT_LEVEL,
                 log_file_path: Optional[str] = None):
        """
        Initialize the logging service.

        Args:
            log_format: TEXT or JSON; anything else falls back to TEXT
            log_level: Logging level name; unknown names fall back to DEBUG
            log_file_path: Optional path for a rotating JSON log file
        """
        self.log_format = (log_format or DEFAULT_FORMAT).upper()
        self.log_level = (log_level or DEFAULT_LEVEL).upper()
        self.log_file_path = log_file_path
        self._fallbacks: List[str] = []

        if self.log_format not in VALID_FORMATS:
            self._fallbacks.append(f"Unknown log format '{log_format}', using {DEFAULT_FORMAT}")
            self.log_format = DEFAULT_FORMAT
        if self.log_level not in VALID_LEVELS:
            self._fallbacks.append(f"Unknown log level '{log_level}', using {DEFAULT_LEVEL}")
            self.log_level = DEFAULT_LEVEL

        self.logger = self._setup_logger()
        self.progress_tracker = ProgressTracker(self.logger)
        self.operation_history: List[Dict[str, Any]] = []

        for message in self._fallbacks:
            self.logger.warning(message)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None,
                         log_file_path: Optional[str] = None) -> 'LoggingService':
        """
        Create the logging service from FORMATTER_TYPE and LOG_LEVEL.

        Args:
            environ: Environment mapping (defaults to os.environ)
            log_file_path: Optional path for a rotating JSON log file

        Returns:
            LoggingService: Configured logging service
        """
        environ = os.environ if environ is None else environ
        return cls(
            log_format=environ.get(FORMATTER_TYPE_ENV) or DEFAULT_FORMAT,
            log_level=environ.get(LOG_LEVEL_ENV) or DEFAULT_LEVEL,
            log_file_path=log_file_path
        )

    def _setup_logger(self) -> logging.Logger:
        """Set up the package logger with appropriate handlers and formatters."""
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(getattr(logging, self.log_level))
        logger.propagate = False

        # Clear any existing handlers
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

        # Console handler
        console_handler = logging.StreamHandler()
        if self.log_format == 'JSON':
            console_handler.setFormatter(StructuredFormatter())
        else:
            console_handler.setFormatter(logging.Formatter(TEXT_LOG_FORMAT))
        logger.addHandler(console_handler)

        # File handler with structured logging
        if self.log_file_path:
            log_path = Path(self.log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file_path,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5
            )
            file_handler.setFormatter(StructuredFormatter())
            logger.addHandler(file_handler)

        return logger

    def log_info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log an info message with optional context."""
        self.logger.info(message, extra={'context': context or {}})

    def log_warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log a warning message with optional context."""
        self.logger.warning(message, extra={'context': context or {}})

    def log_error(self, message: str, error: Optional[Exception] = None,
                  context: Optional[Dict[str, Any]] = None) -> None:
        """Log an error message with optional exception and context."""
        extra_context = dict(context or {})
        if error:
            extra_context.update({
                'error_type': type(error).__name__,
                'error_message': str(error)
            })

        self.logger.error(message, exc_info=error, extra={'context': extra_context})

    def start_operation(self, operation_name: str, total_items: int = 0) -> None:
        """Start tracking a restore phase."""
        self.progress_tracker.start_operation(operation_name, total_items)

    def update_progress(self, processed: int = 1, failed: int = 0) -> None:
        """Update restore phase progress."""
        self.progress_tracker.update_progress(processed, failed)

    def complete_operation(self) -> Dict[str, Any]:
        """Complete the current restore phase."""
        summary = self.progress_tracker.complete_operation()
        self.operation_history.append(summary)
        return summary

    def log_restore_report(self, report: RestoreReport) -> None:
        """Log the summary of a restore report."""
        self.log_info(
            "Restore report generated",
            context={
                'total_phases': report.total_phases,
                'successful_phases': report.successful_phases,
                'failed_phases': report.failed_phases,
                'partial_phases': report.partial_phases,
                'skipped_phases': sum(1 for r in report.results if r.status == RestoreStatus.SKIPPED),
                'success_rate': report.success_rate,
                'total_execution_time': report.total_execution_time
            }
        )

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Get the package logger, or a named child of it."""
        if name:
            return self.logger.getChild(name)
        return self.logger

    def close(self) -> None:
        """Close all logging handlers and clean up resources."""
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()
