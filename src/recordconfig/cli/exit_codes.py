"""
Standardized exit codes for recordconfig CLI commands.

Library errors are mapped onto these codes so scripts can tell a broken
config document apart from a storage failure.
"""

from typing import Optional

import typer

from recordconfig.core.errors import RecordConfigError, StorageUnavailableError

# Exit code constants
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2


class CliExit(typer.Exit):
    """
    Standardized CLI exit exception that extends typer.Exit with consistent codes.

    Usage:
        raise CliExit.success()  # Success
        raise CliExit.error("Operation failed")  # Error with message
        raise CliExit.config_error()  # Bad record type or stored values
    """

    def __init__(self, code: int, message: Optional[str] = None):
        self.message = message
        super().__init__(code)
        if message:
            print(message)

    @classmethod
    def success(cls, message: Optional[str] = None) -> "CliExit":
        """Create a success exit."""
        return cls(EXIT_SUCCESS, message)

    @classmethod
    def error(cls, message: Optional[str] = None) -> "CliExit":
        """Create an error exit."""
        return cls(EXIT_ERROR, message)

    @classmethod
    def config_error(cls, message: Optional[str] = None) -> "CliExit":
        """Create a configuration error exit."""
        return cls(EXIT_CONFIG_ERROR, message)


def exit_for(error: RecordConfigError) -> CliExit:
    """Storage failures are runtime errors; everything else is a config error."""
    if isinstance(error, StorageUnavailableError):
        return CliExit.error()
    return CliExit.config_error()
