import re
import argparse

"""
utils.py

This module contains utility functions for validating command line and prompt input.
These functions are used by the diagnostic scripts before the values are assembled
into a connection string.

Functions:
    validate_string(value): Validate that the given string is a non-empty string.
    validate_secret(value): Validate that the given secret is non-empty.
    validate_hostname(value): Validate that the given string looks like a cluster host.
    validate_database_name(value): Validate that the given string is a legal database name.
"""

# Characters MongoDB refuses in database names
INVALID_DATABASE_CHARACTERS = '/\\. "$*<>:|?'
MAX_DATABASE_NAME_BYTES = 63


def validate_string(value):
    """
    validate_string function checks if the input is a valid string.
    """
    if not isinstance(value, str) or not value.strip():
        raise argparse.ArgumentTypeError(f"{value!r} is not a valid string")

    return value.strip()


def validate_secret(value):
    """
    validate_secret function checks that a secret is present. Secrets are not
    stripped and never echoed back in the error message.
    """
    if not isinstance(value, str) or value == '':
        raise argparse.ArgumentTypeError("A non-empty secret is required")

    return value


def validate_hostname(value):
    """
    Validate that the given string is a host name, optionally with a port.

    Args:
        value (str): Host such as cluster0.xxxxx.mongodb.net or localhost:27017.

    Returns:
        str: The validated host.

    Raises:
        argparse.ArgumentTypeError: If the host is empty or contains characters not allowed in a host.
    """
    value = validate_string(value)
    if not re.fullmatch(r"[A-Za-z0-9]([A-Za-z0-9\-.]*[A-Za-z0-9])?(:\d{1,5})?", value):
        raise argparse.ArgumentTypeError(f"{value} is not a valid hostname")

    return value


def validate_database_name(value):
    """
    Validate that the given string is a legal MongoDB database name.

    Args:
        value (str): The database name to validate.

    Returns:
        str: The validated database name.

    Raises:
        argparse.ArgumentTypeError: If the name is empty, too long, or uses a forbidden character.
    """
    value = validate_string(value)
    bad = sorted({ch for ch in value if ch in INVALID_DATABASE_CHARACTERS})
    if bad:
        raise argparse.ArgumentTypeError(
            f"{value} is not a valid database name. Remove: {' '.join(bad)}"
        )
    if len(value.encode('utf-8')) > MAX_DATABASE_NAME_BYTES:
        raise argparse.ArgumentTypeError(
            f"{value} is too long. Database names are limited to {MAX_DATABASE_NAME_BYTES} bytes"
        )

    return value
