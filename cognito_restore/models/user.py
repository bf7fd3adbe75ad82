"""
Data models for Cognito users read from a backup.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any

from dateutil import parser as date_parser

from .exceptions import BackupDataError


# Attribute generated by Cognito; resubmitting it on create conflicts
SUB_ATTRIBUTE = "sub"
# Attribute whose value becomes the username of the recreated user
EMAIL_ATTRIBUTE = "email"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a backup timestamp, returning None when absent or unreadable."""
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value)
        return date_parser.parse(str(value))
    except (ValueError, OverflowError, OSError):
        return None


@dataclass
class UserAttribute:
    """Name/value pair describing a Cognito user."""

    name: str
    value: Optional[str] = None

    @classmethod
    def from_api(cls, api_attribute: Dict[str, Any]) -> 'UserAttribute':
        return cls(name=api_attribute.get('Name', ''), value=api_attribute.get('Value'))

    def to_api(self) -> Dict[str, Any]:
        item = {'Name': self.name}
        if self.value is not None:
            item['Value'] = self.value
        return item


@dataclass
class BackupUser:
    """Cognito user record as exported by ListUsers."""

    username: str
    attributes: List[UserAttribute] = field(default_factory=list)
    user_status: Optional[str] = None
    enabled: Optional[bool] = None
    user_create_date: Optional[datetime] = None
    user_last_modified_date: Optional[datetime] = None

    @classmethod
    def from_cognito_api(cls, api_user: Dict[str, Any]) -> 'BackupUser':
        """
        Create BackupUser instance from a ListUsers user entry.

        Args:
            api_user: Dictionary from the Cognito ListUsers ``Users`` list

        Returns:
            BackupUser: User instance with populated fields

        Raises:
            BackupDataError: If the entry is not an object or has malformed attributes
        """
        if not isinstance(api_user, dict):
            raise BackupDataError(
                f"Backup user entry must be an object, got {type(api_user).__name__}"
            )

        raw_attributes = api_user.get('Attributes') or []
        if not isinstance(raw_attributes, list):
            raise BackupDataError(
                f"Attributes of user '{api_user.get('Username', '')}' must be a list"
            )

        attributes = []
        for raw_attribute in raw_attributes:
            if not isinstance(raw_attribute, dict):
                raise BackupDataError(
                    f"Attribute of user '{api_user.get('Username', '')}' must be an object"
                )
            attributes.append(UserAttribute.from_api(raw_attribute))

        return cls(
            username=api_user.get('Username', ''),
            attributes=attributes,
            user_status=api_user.get('UserStatus'),
            enabled=api_user.get('Enabled'),
            user_create_date=_parse_timestamp(api_user.get('UserCreateDate')),
            user_last_modified_date=_parse_timestamp(api_user.get('UserLastModifiedDate'))
        )

    def get_attribute(self, name: str) -> Optional[str]:
        """Return the value of the named attribute, or None if absent."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return None

    @property
    def email(self) -> Optional[str]:
        return self.get_attribute(EMAIL_ATTRIBUTE)

    def restorable_attributes(self) -> List[UserAttribute]:
        """Attributes that can be resubmitted on create, in backup order."""
        return [attribute for attribute in self.attributes if attribute.name != SUB_ATTRIBUTE]

    def to_create_user_request(self, user_pool_id: str) -> Dict[str, Any]:
        """
        Build AdminCreateUser parameters for this user.

        The ``sub`` attribute is dropped and the ``email`` attribute value
        becomes the new username.

        Args:
            user_pool_id: Target user pool ID

        Returns:
            Dict[str, Any]: Keyword arguments for ``admin_create_user``

        Raises:
            BackupDataError: If the user has no email attribute
        """
        username = self.email
        if not username:
            raise BackupDataError(
                f"User '{self.username}' has no '{EMAIL_ATTRIBUTE}' attribute to use as username",
                context={'username': self.username}
            )

        return {
            'UserPoolId': user_pool_id,
            'Username': username,
            'UserAttributes': [attribute.to_api() for attribute in self.restorable_attributes()]
        }


def transform_users_from_api_response(api_users: List[Dict[str, Any]]) -> List[BackupUser]:
    """
    Transform list of Cognito API user entries to BackupUser objects.

    Args:
        api_users: List of user dictionaries from ListUsers

    Returns:
        List[BackupUser]: List of BackupUser objects
    """
    return [BackupUser.from_cognito_api(user_data) for user_data in api_users]


def parse_backup_payload(data: bytes) -> List[BackupUser]:
    """
    Parse backup bytes shaped like a ListUsers response into users.

    A bare JSON list of user entries is accepted as well as the
    ``{"Users": [...]}`` response shape.

    Args:
        data: Raw (already decrypted) backup bytes

    Returns:
        List[BackupUser]: Users in backup order

    Raises:
        BackupDataError: If the data is not valid JSON or has the wrong shape
    """
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BackupDataError(f"Failed to parse users backup data: {str(e)}")

    if isinstance(payload, dict):
        users_data = payload.get('Users')
        if users_data is None:
            users_data = []
    else:
        users_data = payload

    if not isinstance(users_data, list):
        raise BackupDataError(
            f"Users backup data must contain a list of users, got {type(users_data).__name__}"
        )

    return transform_users_from_api_response(users_data)
