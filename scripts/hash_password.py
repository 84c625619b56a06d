#!/usr/bin/env python3
"""
Provision a dashboard credential.

Prompts for a password, hashes it and prints the SQL that inserts the
credential row. The API never writes admin_password itself.

Usage:
  python3 scripts/hash_password.py --name "Owner"
  python3 scripts/hash_password.py --scheme pbkdf2
"""

from __future__ import annotations

import argparse
import getpass
import sys

from elkpeak.db.base import new_id
from elkpeak.services.credentials import hash_password_bcrypt, hash_password_pbkdf2

MIN_LENGTH = 12


def _sql_literal(value: str | None) -> str:
    if value is None:
        return "NULL"
    return "'" + value.replace("'", "''") + "'"


def main() -> int:
    parser = argparse.ArgumentParser(description="Hash a dashboard password and print the INSERT statement.")
    parser.add_argument("--name", default=None, help="display name stored with the credential")
    parser.add_argument("--scheme", choices=("bcrypt", "pbkdf2"), default="bcrypt")
    parser.add_argument("--not-admin", action="store_true", help="store with is_admin = false")
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if len(password) < MIN_LENGTH:
        print(f"Password must be at least {MIN_LENGTH} characters.", file=sys.stderr)
        return 1
    if getpass.getpass("Repeat: ") != password:
        print("Passwords do not match.", file=sys.stderr)
        return 1

    hashed = hash_password_bcrypt(password) if args.scheme == "bcrypt" else hash_password_pbkdf2(password)
    is_admin = "false" if args.not_admin else "true"

    print(f"-- {args.scheme} hash")
    print(hashed)
    print()
    print(
        "INSERT INTO admin_password (id, password_hash, is_admin, name) VALUES "
        f"({_sql_literal(new_id())}, {_sql_literal(hashed)}, {is_admin}, {_sql_literal(args.name)});"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
