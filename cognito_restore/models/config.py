"""
Configuration data models for Cognito restore operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, List
import re


# Spellings accepted for boolean environment variables
_TRUE_VALUES = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_VALUES = ("0", "f", "F", "FALSE", "false", "False")


class TriState(Enum):
    """Optional boolean: a flag that is either unset, false or true."""
    UNSET = None
    FALSE = False
    TRUE = True

    @property
    def is_set(self) -> bool:
        """True when the flag carries an explicit value."""
        return self is not TriState.UNSET

    def resolve(self, default: bool = False) -> bool:
        """Return the flag value, or ``default`` when unset."""
        if self is TriState.UNSET:
            return default
        return self.value

    def __bool__(self) -> bool:
        return self.resolve(False)

    @classmethod
    def from_bool(cls, value: Optional[bool]) -> 'TriState':
        if value is None:
            return cls.UNSET
        return cls.TRUE if value else cls.FALSE

    @classmethod
    def parse(cls, text: str) -> 'TriState':
        """
        Parse a boolean string.

        Args:
            text: Value such as "true", "False", "1" or "f"

        Returns:
            TriState: TRUE or FALSE

        Raises:
            ValueError: If the text is not a recognised boolean
        """
        if text in _TRUE_VALUES:
            return cls.TRUE
        if text in _FALSE_VALUES:
            return cls.FALSE
        raise ValueError(f"invalid boolean value: {text!r}")


BACKUP_USERS_FILE_NAME = "users.json"


@dataclass
class RestoreConfig:
    """Configuration settings for a single Cognito restore invocation."""

    # AWS Configuration
    aws_region: str

    # Cognito Configuration
    cognito_user_pool_id: str
    cognito_region: str

    # S3 Configuration
    s3_bucket_name: str
    s3_bucket_region: str
    backup_dir_path: str

    # KMS Configuration (decryption is skipped when no key is configured)
    kms_key_id: Optional[str] = None
    kms_region: Optional[str] = None

    # Restore Options
    restore_users: TriState = TriState.UNSET
    restore_groups: TriState = TriState.UNSET
    cleanup_before_restore: TriState = TriState.UNSET

    @property
    def backup_object_key(self) -> str:
        """S3 key of the users backup object."""
        return f"{self.backup_dir_path.rstrip('/')}/{BACKUP_USERS_FILE_NAME}"

    @property
    def effective_kms_region(self) -> str:
        """KMS region if configured, otherwise the overall AWS region."""
        return self.kms_region or self.aws_region

    @property
    def decryption_enabled(self) -> bool:
        return bool(self.kms_key_id)

    def validate(self) -> List[str]:
        """
        Validate configuration settings and return list of validation errors.

        Returns:
            List[str]: List of validation error messages. Empty if valid.
        """
        errors = []

        errors.extend(self._validate_aws_settings())
        errors.extend(self._validate_s3_settings())
        errors.extend(self._validate_restore_options())

        return errors

    def _validate_aws_settings(self) -> List[str]:
        """Validate region and user pool settings."""
        errors = []

        regions = [
            ("AWS region", self.aws_region),
            ("Cognito region", self.cognito_region),
            ("S3 bucket region", self.s3_bucket_region),
        ]
        for label, region in regions:
            if not region:
                errors.append(f"{label} is required")
            elif not re.match(r'^[a-z0-9-]+$', region):
                errors.append(f"{label} format is invalid")

        if self.kms_region and not re.match(r'^[a-z0-9-]+$', self.kms_region):
            errors.append("KMS region format is invalid")

        if not self.cognito_user_pool_id:
            errors.append("Cognito user pool ID is required")

        return errors

    def _validate_s3_settings(self) -> List[str]:
        """Validate S3 bucket and backup path settings."""
        errors = []

        if not self.s3_bucket_name:
            errors.append("S3 bucket name is required")

        if not self.backup_dir_path:
            errors.append("Backup directory path is required")

        return errors

    def _validate_restore_options(self) -> List[str]:
        """Validate restore flags."""
        errors = []

        for name in ("restore_users", "restore_groups", "cleanup_before_restore"):
            if not isinstance(getattr(self, name), TriState):
                errors.append(f"{name} must be a TriState value")

        return errors
