"""
Configuration resolution for Cognito restore operations.
"""

from .manager import ConfigurationManager, StringRule, FlagRule, STRING_RULES, FLAG_RULES

__all__ = [
    "ConfigurationManager",
    "StringRule",
    "FlagRule",
    "STRING_RULES",
    "FLAG_RULES"
]
