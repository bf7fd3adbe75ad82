"""
Shared fixtures for Cognito restore tests.
"""

import json

import boto3
import pytest
from moto import mock_aws

from cognito_restore.models.config import RestoreConfig, TriState
from cognito_restore.services.user_restore import UserRestoreService


REGION = "us-east-1"
BUCKET = "cognito-backup-test"
BACKUP_DIR = "2023-01-19T09:00:00Z"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so no test can reach a real AWS account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture(autouse=True)
def no_settle_delay(monkeypatch):
    monkeypatch.setattr(UserRestoreService, "CLEANUP_SETTLE_SECONDS", 0)


@pytest.fixture
def base_environ():
    """Environment carrying every required setting."""
    return {
        "AWS_REGION": REGION,
        "COGNITO_USER_POOL_ID": "us-east-1_envpool",
        "COGNITO_REGION": REGION,
        "S3_BUCKET_NAME": BUCKET,
        "S3_BUCKET_REGION": REGION,
        "BACKUP_DIR_PATH": BACKUP_DIR,
    }


@pytest.fixture
def restore_config():
    return RestoreConfig(
        aws_region=REGION,
        cognito_user_pool_id="P",
        cognito_region=REGION,
        s3_bucket_name=BUCKET,
        s3_bucket_region=REGION,
        backup_dir_path=BACKUP_DIR,
        restore_users=TriState.TRUE,
        restore_groups=TriState.FALSE,
        cleanup_before_restore=TriState.FALSE,
    )


def build_users_export(*users):
    """Build a ListUsers-shaped export for (username, {attribute: value}) pairs."""
    return json.dumps({
        "Users": [
            {
                "Username": username,
                "Attributes": [{"Name": name, "Value": value} for name, value in attributes.items()],
                "UserCreateDate": "2023-01-19T09:00:00Z",
                "UserLastModifiedDate": "2023-01-19T09:00:00Z",
                "Enabled": True,
                "UserStatus": "CONFIRMED",
            }
            for username, attributes in users
        ]
    }).encode("utf-8")


@pytest.fixture
def users_export():
    return build_users_export


@pytest.fixture
def aws():
    """Mocked AWS account with the backup bucket and an empty user pool."""
    with mock_aws():
        s3 = boto3.client("s3", region_name=REGION)
        s3.create_bucket(Bucket=BUCKET)
        cognito = boto3.client("cognito-idp", region_name=REGION)
        pool_id = cognito.create_user_pool(PoolName="restore-target")["UserPool"]["Id"]
        kms = boto3.client("kms", region_name=REGION)
        yield {"s3": s3, "cognito": cognito, "kms": kms, "pool_id": pool_id}
