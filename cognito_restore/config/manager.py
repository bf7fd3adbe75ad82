"""
Configuration management for Cognito restore operations.

Each configuration field is resolved by one rule: the environment
variable is read first and a value supplied in the invocation payload
overrides it.

Example payload::

    {
      "awsRegion": "us-west-2",
      "cognitoUserPoolId": "us-west-2_EP1dk34",
      "cognitoRegion": "us-west-2",
      "s3BucketName": "mycognitotest",
      "s3BucketRegion": "us-west-2",
      "backupDirPath": "2023-01-19T9:00:00Z",
      "restoreUsers": true,
      "restoreGroups": false,
      "cleanUpBeforeRestore": true
    }
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Mapping, Optional, Tuple

import yaml

from ..models.config import RestoreConfig, TriState
from ..models.exceptions import ConfigurationError


@dataclass(frozen=True)
class StringRule:
    """Resolution rule for a string field."""

    field_name: str
    env_var: str
    payload_keys: Tuple[str, ...]
    required: bool = True

    @property
    def payload_key(self) -> str:
        return self.payload_keys[0]

    def resolve(self, environ: Mapping[str, str], payload: Optional[Mapping[str, Any]],
                logger: logging.Logger) -> Optional[str]:
        value = environ.get(self.env_var, '')
        if not value and self.required:
            logger.warning(f"Environment variable for {self.env_var} is empty")

        if payload is not None:
            payload_value = _first_present(payload, self.payload_keys)
            if payload_value not in (None, ''):
                value = str(payload_value)
            elif self.required:
                logger.warning(f"Event contains empty {self.payload_key} variable")

        if not value:
            if self.required:
                raise ConfigurationError(
                    f"{self.payload_key} is empty; configure it via '{self.env_var}' "
                    f"env variable OR pass in event body",
                    error_code='MissingConfiguration',
                    context={'field': self.field_name, 'env_var': self.env_var,
                             'payload_key': self.payload_key}
                )
            return None
        return value


@dataclass(frozen=True)
class FlagRule:
    """Resolution rule for a tri-state boolean field."""

    field_name: str
    env_var: str
    payload_keys: Tuple[str, ...]

    @property
    def payload_key(self) -> str:
        return self.payload_keys[0]

    def resolve(self, environ: Mapping[str, str], payload: Optional[Mapping[str, Any]],
                logger: logging.Logger) -> TriState:
        flag = TriState.UNSET

        raw = environ.get(self.env_var, '')
        if raw:
            try:
                flag = TriState.parse(raw.strip())
            except ValueError as e:
                raise ConfigurationError(
                    f"Could not parse '{self.env_var}' variable. Error: {str(e)}",
                    error_code='InvalidBoolean',
                    context={'field': self.field_name, 'env_var': self.env_var, 'value': raw}
                )
        else:
            logger.debug(f"Environment variable '{self.env_var}' is empty")

        if payload is not None:
            payload_value = _first_present(payload, self.payload_keys)
            if isinstance(payload_value, bool):
                flag = TriState.from_bool(payload_value)
            elif payload_value is not None:
                logger.warning(
                    f"Event value for {self.payload_key} is not a boolean and is ignored: {payload_value!r}"
                )

        if not flag.is_set:
            logger.warning(f"{self.payload_key} is not specified, Default value 'false' will be used")
            flag = TriState.FALSE
        return flag


def _first_present(payload: Mapping[str, Any], keys: Tuple[str, ...]) -> Any:
    """Return the value of the first key present in the payload."""
    for key in keys:
        if key in payload:
            return payload[key]
    return None


STRING_RULES = (
    StringRule('aws_region', 'AWS_REGION', ('awsRegion',)),
    StringRule('cognito_user_pool_id', 'COGNITO_USER_POOL_ID', ('cognitoUserPoolId', 'cognitoUserPoolID')),
    StringRule('cognito_region', 'COGNITO_REGION', ('cognitoRegion',)),
    StringRule('s3_bucket_name', 'S3_BUCKET_NAME', ('s3BucketName',)),
    StringRule('s3_bucket_region', 'S3_BUCKET_REGION', ('s3BucketRegion',)),
    StringRule('backup_dir_path', 'BACKUP_DIR_PATH', ('backupDirPath',)),
    StringRule('kms_key_id', 'KMS_KEY_ID', ('kmsKeyId',), required=False),
    StringRule('kms_region', 'KMS_REGION', ('kmsRegion',), required=False),
)

FLAG_RULES = (
    FlagRule('restore_users', 'RESTORE_USERS', ('restoreUsers',)),
    FlagRule('restore_groups', 'RESTORE_GROUPS', ('restoreGroups',)),
    FlagRule('cleanup_before_restore', 'CLEANUP_BEFORE_RESTORE', ('cleanUpBeforeRestore',)),
)


class ConfigurationManager:
    """Resolves restore configuration from the environment and an invocation payload."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            environ: Environment snapshot (defaults to a copy of os.environ)
            logger: Optional logger instance
        """
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self.logger = logger or logging.getLogger(__name__)
        self._config: Optional[RestoreConfig] = None

    def resolve(self, payload: Optional[Mapping[str, Any]] = None) -> RestoreConfig:
        """
        Resolve and validate the restore configuration.

        Args:
            payload: Optional invocation payload; its non-empty values
                override environment variables

        Returns:
            RestoreConfig: Validated configuration

        Raises:
            ConfigurationError: If a required field is missing or a value is malformed
        """
        if payload is not None and not isinstance(payload, Mapping):
            raise ConfigurationError(
                f"Event payload must be an object, got {type(payload).__name__}"
            )

        values: Dict[str, Any] = {}
        for rule in STRING_RULES:
            values[rule.field_name] = rule.resolve(self.environ, payload, self.logger)
        for rule in FLAG_RULES:
            values[rule.field_name] = rule.resolve(self.environ, payload, self.logger)

        config = RestoreConfig(**values)
        self.validate_config(config)

        if config.cleanup_before_restore.resolve():
            self.logger.warning(
                f"Pay attention that cleanUpBeforeRestore is 'true'. It means all data from "
                f"{config.cognito_user_pool_id} userpool will be deleted before restore"
            )

        self._config = config
        return config

    def validate_config(self, config: RestoreConfig) -> bool:
        """
        Validate configuration settings.

        Args:
            config: Configuration to validate

        Returns:
            bool: True if valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        validation_errors = config.validate()
        if validation_errors:
            raise ConfigurationError(
                f"Configuration validation failed:\n" +
                "\n".join(f"- {error}" for error in validation_errors)
            )
        return True

    def load_event(self, event_path: str) -> Dict[str, Any]:
        """
        Load an invocation payload from YAML or JSON file.

        Args:
            event_path: Path to payload file

        Returns:
            Dict[str, Any]: Payload mapping

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        event_file = Path(event_path)

        if not event_file.exists():
            raise ConfigurationError(f"Event file not found: {event_path}")

        try:
            with open(event_file, 'r', encoding='utf-8') as f:
                if event_file.suffix.lower() in ['.yaml', '.yml']:
                    event = yaml.safe_load(f)
                elif event_file.suffix.lower() == '.json':
                    event = json.load(f)
                else:
                    raise ConfigurationError(
                        f"Unsupported event file format: {event_file.suffix}. "
                        "Supported formats: .yaml, .yml, .json"
                    )
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML parsing error: {str(e)}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"JSON parsing error: {str(e)}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read event file: {str(e)}")

        if event is None:
            return {}
        if not isinstance(event, dict):
            raise ConfigurationError(
                f"Event file must contain a mapping, got {type(event).__name__}"
            )
        return event

    @property
    def config(self) -> Optional[RestoreConfig]:
        """Get the most recently resolved configuration."""
        return self._config
