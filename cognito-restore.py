"""
Command-line interface for Cognito Restore Tool.

This script provides a direct entry point for the Cognito Restore Tool.
It delegates to the main CLI module in the package.
"""

import sys
from cognito_restore.cli import main

if __name__ == '__main__':
    sys.exit(main())
