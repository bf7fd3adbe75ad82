"""
Command-line interface for Cognito Restore Tool.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config.manager import ConfigurationManager
from .orchestrator import CognitoRestoreOrchestrator
from .models.restore_result import RestoreStatus
from .services.error_handler import ErrorHandler
from .services.logging import LoggingService, FORMATTER_TYPE_ENV, LOG_LEVEL_ENV
from .models.exceptions import (
    ConfigurationError,
    AWSCredentialsError,
    CognitoRestoreError
)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None,
                  log_format: Optional[str] = None) -> LoggingService:
    """
    Setup logging based on the environment and command line options.

    Args:
        verbose: Force DEBUG logging
        log_file: Optional log file path
        log_format: Optional TEXT/JSON override of FORMATTER_TYPE

    Returns:
        LoggingService: Configured logging service
    """
    environ = dict(os.environ)
    if verbose:
        environ[LOG_LEVEL_ENV] = 'DEBUG'
    if log_format:
        environ[FORMATTER_TYPE_ENV] = log_format

    return LoggingService.from_environment(environ, log_file_path=log_file)


def validate_event_file(event_path: str) -> str:
    """
    Validate that the event file exists and is readable.

    Args:
        event_path: Path to event payload file

    Returns:
        str: Absolute path to event file

    Raises:
        argparse.ArgumentTypeError: If file doesn't exist or isn't readable
    """
    path = Path(event_path)

    if not path.exists():
        raise argparse.ArgumentTypeError(f"Event file does not exist: {event_path}")

    if not path.is_file():
        raise argparse.ArgumentTypeError(f"Event path is not a file: {event_path}")

    if path.suffix.lower() not in ['.yaml', '.yml', '.json']:
        raise argparse.ArgumentTypeError(f"Event file must be YAML or JSON: {event_path}")

    if not os.access(path, os.R_OK):
        raise argparse.ArgumentTypeError(f"Event file is not readable: {event_path}")

    return str(path.absolute())


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog='cognito-restore',
        description='Cognito Restore Tool - Restore Cognito user pool users from an S3 backup',
        epilog='''
Settings not present in the event file are read from environment variables
(AWS_REGION, COGNITO_USER_POOL_ID, COGNITO_REGION, S3_BUCKET_NAME,
S3_BUCKET_REGION, BACKUP_DIR_PATH, KMS_KEY_ID, KMS_REGION, RESTORE_USERS,
RESTORE_GROUPS, CLEANUP_BEFORE_RESTORE).

Examples:
  %(prog)s --event event.yaml
  %(prog)s --event event.json --verbose
  %(prog)s --event event.yaml --dry-run
  %(prog)s --event event.yaml --generate-report --output-dir ./reports
        ''',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--event', '-e',
        type=validate_event_file,
        help='Path to invocation payload file (YAML or JSON format)'
    )

    # Output options
    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        help='Output directory for restore reports (default: current directory)'
    )

    parser.add_argument(
        '--generate-report',
        action='store_true',
        help='Generate human-readable restore report'
    )

    # Logging options
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose (DEBUG) logging'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Path to log file (logs to console only if not specified)'
    )

    parser.add_argument(
        '--log-format',
        choices=['TEXT', 'JSON'],
        help='Console log format (default: FORMATTER_TYPE or TEXT)'
    )

    # Execution options
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Resolve configuration and check connectivity without changing the user pool'
    )

    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable the console summary for batch/automated execution'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def print_remediation(error: Exception) -> None:
    """Print suggested fixes for an error to stderr."""
    steps: List[str] = ErrorHandler().get_error_remediation_steps(error)
    print("Suggested steps:", file=sys.stderr)
    for step in steps:
        print(f"  - {step}", file=sys.stderr)


def execute_restore(args: argparse.Namespace, logging_service: LoggingService) -> int:
    """
    Execute the restore operation based on CLI arguments.

    Args:
        args: Parsed command line arguments
        logging_service: Configured logging service

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    logger = logging_service.get_logger('cli')

    try:
        event = ConfigurationManager().load_event(args.event) if args.event else None

        orchestrator = CognitoRestoreOrchestrator(event=event, logging_service=logging_service)

        logger.info("Initializing restore services...")
        orchestrator.initialize()

        # Handle dry run mode
        if args.dry_run:
            orchestrator.validate()
            logger.info("Dry run mode - configuration and connectivity validated successfully")
            print("✓ Configuration is valid")
            print("✓ AWS connectivity validated")
            print("Dry run completed successfully. Run without --dry-run to restore.")
            return 0

        report = orchestrator.execute_restore()

        if args.generate_report:
            output_dir = Path(args.output_dir) if args.output_dir else Path.cwd()
            output_dir.mkdir(parents=True, exist_ok=True)
            report_path = output_dir / f"restore_report_{report.start_time.strftime('%Y%m%d_%H%M%S')}.txt"
            orchestrator.save_restore_report(str(report_path))

        partial = any(r.status in (RestoreStatus.PARTIAL, RestoreStatus.FAILED) for r in report.results)

        if not args.no_progress:
            print("\n" + "=" * 60)
            print("RESTORE COMPLETED")
            print("=" * 60)
            print(orchestrator.generate_restore_report_summary())

            if partial:
                print("⚠ Restore completed but some users could not be deleted during cleanup")
            else:
                print("✓ Restore completed successfully")

        return 2 if partial else 0

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(f"Configuration Error: {e}", file=sys.stderr)
        print_remediation(e)
        return 1

    except AWSCredentialsError as e:
        logger.error(f"AWS credentials error: {e}")
        print(f"AWS Credentials Error: {e}", file=sys.stderr)
        print_remediation(e)
        return 1

    except CognitoRestoreError as e:
        logger.error(f"Restore error: {e}")
        print(f"Restore Error: {e}", file=sys.stderr)
        print_remediation(e)
        return 1

    except KeyboardInterrupt:
        logger.warning("Restore interrupted by user")
        print("\nRestore interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI application.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        int: Exit code
    """
    parser = create_argument_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code

    logging_service = setup_logging(
        verbose=args.verbose,
        log_file=args.log_file,
        log_format=args.log_format
    )

    return execute_restore(args, logging_service)


if __name__ == '__main__':
    sys.exit(main())
