"""
Tests for the command-line interface.
"""

import pytest
import yaml

from cognito_restore import __version__
from cognito_restore.cli import main, setup_logging
from cognito_restore.models.restore_result import RestoreResult, RestoreStatus
from cognito_restore.services.user_restore import UserRestoreService

from .conftest import BUCKET, BACKUP_DIR


SETTING_ENV_VARS = (
    "AWS_REGION", "COGNITO_USER_POOL_ID", "COGNITO_REGION", "S3_BUCKET_NAME", "S3_BUCKET_REGION",
    "BACKUP_DIR_PATH", "KMS_KEY_ID", "KMS_REGION", "RESTORE_USERS", "RESTORE_GROUPS",
    "CLEANUP_BEFORE_RESTORE", "LOG_LEVEL", "FORMATTER_TYPE",
)


@pytest.fixture
def environ(monkeypatch, base_environ):
    for name in SETTING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for name, value in base_environ.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


@pytest.fixture
def event_file(tmp_path):
    def write(payload):
        path = tmp_path / "event.yaml"
        path.write_text(yaml.safe_dump(payload))
        return str(path)
    return write


def test_version(capsys):
    assert main(["--version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_missing_event_file(tmp_path):
    assert main(["--event", str(tmp_path / "missing.yaml")]) == 2


def test_missing_configuration(monkeypatch, capsys):
    for name in SETTING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    assert main([]) == 1
    assert "Configuration Error" in capsys.readouterr().err


def test_dry_run(aws, environ, event_file, capsys):
    aws["s3"].put_object(Bucket=BUCKET, Key=f"{BACKUP_DIR}/users.json", Body=b"[]")
    environ.setenv("COGNITO_USER_POOL_ID", aws["pool_id"])

    exit_code = main(["--event", event_file({"restoreUsers": True, "cleanUpBeforeRestore": True}), "--dry-run"])

    assert exit_code == 0
    assert "Dry run completed successfully" in capsys.readouterr().out
    assert aws["cognito"].list_users(UserPoolId=aws["pool_id"])["Users"] == []


def test_dry_run_unreachable_pool(aws, environ, capsys):
    environ.setenv("RESTORE_USERS", "false")

    assert main(["--dry-run"]) == 1
    assert "AWS Credentials Error" in capsys.readouterr().err


def test_restore_with_report(aws, environ, event_file, users_export, tmp_path):
    aws["s3"].put_object(
        Bucket=BUCKET, Key=f"{BACKUP_DIR}/users.json", Body=users_export(("u1", {"email": "a@b.com"}))
    )
    event = event_file({"cognitoUserPoolId": aws["pool_id"], "restoreUsers": True})
    output_dir = tmp_path / "reports"

    exit_code = main(["--event", event, "--generate-report", "--output-dir", str(output_dir), "--no-progress"])

    assert exit_code == 0
    reports = list(output_dir.glob("restore_report_*.txt"))
    assert len(reports) == 1
    assert "Restore Users" in reports[0].read_text(encoding="utf-8")
    assert aws["cognito"].list_users(UserPoolId=aws["pool_id"])["Users"][0]["Username"] == "a@b.com"


def test_partial_cleanup_exit_code(aws, environ, event_file, monkeypatch):
    partial = RestoreResult(phase="cleanup", success=True, items_processed=1, items_failed=1,
                            status=RestoreStatus.PARTIAL)
    monkeypatch.setattr(UserRestoreService, "cleanup_user_pool", lambda self: partial)
    event = event_file({"cognitoUserPoolId": aws["pool_id"], "cleanUpBeforeRestore": True})

    assert main(["--event", event]) == 2


def test_restore_failure_exit_code(aws, environ, event_file, capsys):
    event = event_file({"cognitoUserPoolId": aws["pool_id"], "restoreUsers": True})

    assert main(["--event", event]) == 1
    err = capsys.readouterr().err
    assert "Restore Error" in err
    assert "Suggested steps" in err


def test_log_level_defaults_to_debug(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    service = setup_logging()
    try:
        assert service.log_level == "DEBUG"
    finally:
        service.close()


def test_log_level_from_environment_and_verbose(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")

    service = setup_logging()
    assert service.log_level == "ERROR"
    service.close()

    service = setup_logging(verbose=True, log_format="JSON")
    assert service.log_level == "DEBUG"
    assert service.log_format == "JSON"
    service.close()
