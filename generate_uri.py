"""
MongoDB URI generator.

Prompts for username, password, cluster host and database name and assembles
a correctly encoded connection string, optionally testing it right away.

Usage: wl-generate-uri [--test]
"""
import sys
import getpass
import argparse
from app_config import DEFAULT_DATABASE_NAME, get_connection_string
from check_connection import run_connection_test
from connection_manager import MongoConnectionManager
from connection_validator import build_uri, encode_secret, special_characters, validate
from utils import validate_string, validate_secret, validate_hostname, validate_database_name


def prompt_with_default(label, current=''):
    prompt = f"{label} [{current}]: " if current else f"{label}: "
    return input(prompt).strip() or current


def collect_values():
    """
    Ask the operator for the URI components, offering the current values as defaults.

    Returns:
        dict: username, password, hostname and database.

    Raises:
        argparse.ArgumentTypeError: If a value fails validation.
    """
    current_username = current_hostname = ''
    configured = get_connection_string()
    current = validate(configured).connection if configured else None
    if current is not None:
        current_username = current.username or ''
        current_hostname = current.hostname or ''
        print("\nCurrent URI detected:")
        print(f"   Username: {current_username}")
        print(f"   Hostname: {current_hostname}")
        print("\nPress Enter to keep current values or type new ones.\n")

    username = validate_string(prompt_with_default("Username", current_username))
    password = validate_secret(getpass.getpass(prompt="Password (HIDDEN): "))
    encoded = encode_secret(password)
    if special_characters(password) and encoded != password:
        print("\nPassword contains special characters. They will be percent-encoded.")

    hostname = validate_hostname(prompt_with_default(
        "Hostname/Cluster URL (e.g., cluster0.xxxxx.mongodb.net)", current_hostname))

    database = input(f"Database Name (e.g., {DEFAULT_DATABASE_NAME}, myapp): ").strip()
    if not database:
        print(f"No database name provided. Using '{DEFAULT_DATABASE_NAME}' as default.")
        database = DEFAULT_DATABASE_NAME
    database = validate_database_name(database)

    return {'username': username, 'password': password, 'hostname': hostname, 'database': database}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate a correctly formatted MongoDB URI.")
    parser.add_argument("--test", action="store_true", help="Test the generated URI without asking")
    args = parser.parse_args(argv)

    print("MongoDB URI Generator\n")
    print("=" * 60)
    try:
        values = collect_values()
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}")
        return 1

    uri = build_uri(values['username'], values['password'], values['hostname'], values['database'])
    report = validate(uri)

    print("\n" + "=" * 60)
    print(f"\nGenerated MongoDB URI:\n\n{uri}\n")
    print("=" * 60)
    print(f"\nAdd this to your .env file:\nMONGODB_URI={uri}\n")

    test = args.test or input("Would you like to test this connection now? (y/n): ").strip().lower() in ('y', 'yes')
    if not test:
        print("\nRemember to:")
        print("   1. Update your .env file with the URI above")
        print("   2. Test the connection: wl-check-connection")
        print("   3. Ensure your IP is allow-listed in Network Access")
        return 0

    print(f"\nTesting connection to {report.sanitized_uri}...\n")
    return 0 if run_connection_test(MongoConnectionManager(uri)) else 1


if __name__ == "__main__":
    sys.exit(main())
