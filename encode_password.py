"""
Percent-encode a MongoDB password so it can be placed in a connection string.

Usage: wl-encode-password "your-password-here"
"""
import sys
import argparse
from connection_validator import RESERVED_CHARACTERS, encode_secret, special_characters, build_uri
from utils import validate_secret


def show_encoding_examples():
    print("\nCommon special characters encoding:")
    for ch in RESERVED_CHARACTERS:
        label = 'space' if ch == ' ' else ch
        print(f"   {label} -> {encode_secret(ch)}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Percent-encode special characters in a MongoDB password."
    )
    parser.add_argument("password", nargs="?", type=validate_secret, help="Password to encode")
    args = parser.parse_args(argv)

    if args.password is None:
        parser.print_usage()
        print('\nExample:\n  wl-encode-password "my@pass#word"')
        show_encoding_examples()
        print("\nNote: this script displays your encoded password. Make sure no one is watching your screen!")
        return 0

    password = args.password
    found = special_characters(password)
    print("=" * 50)
    print(f"Length: {len(password)} characters")
    print(f"Contains special characters: {'Yes' if found else 'No'}")

    if found:
        print("\nCharacters that will be encoded:")
        for ch in found:
            print(f"   {ch!r} -> {encode_secret(ch)!r}")
    else:
        print("\nNo special characters found. Encoding may not be necessary,")
        print("but it is safe to use the encoded version anyway.")

    encoded = encode_secret(password)
    print("=" * 50)
    print(f"\nEncoded password:\n   {encoded}\n")
    if encoded != password:
        print(f"Changed: Yes ({len(encoded) - len(password)} characters added)")
    else:
        print("Changed: No (password didn't need encoding)")

    example = build_uri('USERNAME', password, 'cluster.mongodb.net', 'DATABASE')
    print(f"\nUse this in your MONGODB_URI:\n   MONGODB_URI={example}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
