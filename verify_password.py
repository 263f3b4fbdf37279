#!/usr/bin/env python3
"""
Password Hash Utility
Generates the ADMIN_PASSWORD_HASH value, or tests a password against a hash.
"""
import getpass
import sys

from showroom.utils.auth import hash_password, verify_password


def generate() -> None:
    password = getpass.getpass("Enter new admin password: ")
    if not password:
        print("Error: Password cannot be empty")
        return

    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Error: Passwords do not match")
        return

    print("\nCopy this line to your .env file:\n")
    print(f"ADMIN_PASSWORD_HASH={hash_password(password)}")
    print("\nKeep this hash secret and never commit it to version control!")


def check(hash_value: str) -> None:
    print(f"Testing against hash: {hash_value[:30]}...")
    password = getpass.getpass("Enter password to test: ")

    if verify_password(password, hash_value):
        print("\nPassword matches!")
    else:
        print("\nPassword does not match.")
        print("If you've forgotten the password, generate a new hash with --generate")
        print("and update ADMIN_PASSWORD_HASH in your .env file.")


def main(argv=None):
    """Main function."""
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        print("Usage:")
        print("  python verify_password.py --generate       - Generate new hash")
        print("  python verify_password.py <hash>           - Test password against hash")
        print()
        print("Examples:")
        print("  python verify_password.py --generate")
        print("  python verify_password.py '$2b$12$...'")
        return 1

    if argv[0] == "--generate":
        generate()
    else:
        check(argv[0])
    return 0


if __name__ == "__main__":
    sys.exit(main())
