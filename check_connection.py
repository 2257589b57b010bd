"""
MongoDB connection test.

Checks that MONGODB_URI is set, validates its format and then connects,
printing step-by-step diagnostics.

Usage: wl-check-connection [--verbose]
"""
import sys
import argparse
from pymongo.errors import PyMongoError
from app_config import setup_logging, validate_config, get_app_info, get_connection_string, URI_TEMPLATE
from connection_manager import MongoConnectionManager
from connection_validator import (
    ConnectionValidationError, classify_error, diagnose_auth_failure, validate, encode_secret,
    unencoded_characters, PASSWORD_MASK, AUTHENTICATION, NETWORK, TIMEOUT, UNKNOWN
)

ERROR_TITLES = {
    AUTHENTICATION: 'Authentication Error',
    NETWORK: 'Network Error',
    TIMEOUT: 'Connection Timeout',
    UNKNOWN: 'Unknown Error',
}


def print_components(report):
    connection = report.connection
    print(f"   URI:      {report.sanitized_uri}")
    print(f"   Username: {connection.username or 'MISSING'}")
    print(f"   Password: {PASSWORD_MASK + ' (hidden)' if connection.password else 'MISSING'}")
    print(f"   Hostname: {connection.hostname or 'MISSING'}")
    print(f"   Database: {connection.database_name}"
          f"{'' if connection.database_specified else ' (default)'}")


def run_connection_test(manager):
    """
    Connect with the given manager and report the outcome.

    Args:
        manager (MongoConnectionManager): Manager for the URI under test.

    Returns:
        bool: True if the connection succeeded.
    """
    try:
        database = manager.get_database()
        collections = database.list_collection_names()
    except ConnectionValidationError as e:
        print(f"\nConnection not attempted: {e}")
        return False
    except PyMongoError as e:
        kind = classify_error(e)
        print("\nConnection failed!")
        print(f"   Error Type: {ERROR_TITLES[kind]}")
        print(f"   Message: {e}")
        print("\nPossible solutions:")
        for i, suggestion in enumerate(diagnose_auth_failure(manager.report, kind), 1):
            print(f"   {i}. {suggestion}")
        return False
    finally:
        manager.close()

    print("Successfully connected to MongoDB!")
    print(f"   Database: {database.name}")
    print(f"   Collections: {len(collections)} found")
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(description="Test the MONGODB_URI connection with diagnostics.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args(argv)
    logger = setup_logging(args.verbose)

    try:
        validate_config()
    except ValueError as e:
        print(f"Configuration error: {e}")
        return 1
    app_info = get_app_info()
    logger.debug(f"Starting {app_info['name']} v{app_info['version']} (timeout {app_info['timeout_ms']}ms)")

    print("MongoDB Connection Test\n")
    print("=" * 50)

    print("\n1. Checking environment variable...")
    uri = get_connection_string()
    if not uri:
        print("MONGODB_URI is not set in the environment or .env file")
        print(f"\nCreate a .env file in the root directory with:\n   MONGODB_URI={URI_TEMPLATE}")
        return 1
    print("MONGODB_URI is set")

    print("\n2. Validating URI format...")
    report = validate(uri)
    if report.connection is not None:
        print_components(report)
    if not report.is_valid:
        for issue in report.issues:
            print(f"\n{issue}")
        print(f"\nExpected format:\n   {URI_TEMPLATE}")
        return 1
    for warning in report.warnings:
        print(f"\nWarning: {warning}")
    leftover = unencoded_characters(report.connection.raw_password)
    if leftover:
        print("   Special characters should be encoded: "
              + ", ".join(f"{ch} -> {encode_secret(ch)}" for ch in leftover))
    print("URI format is valid")

    print("\n3. Testing MongoDB connection...")
    if not run_connection_test(MongoConnectionManager(uri)):
        return 1
    print("\nConnection test completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
