#!/usr/bin/env python3
"""
Reset a user's password in the Library Catalog SQLite database.

This script DOES NOT read or reveal any existing passwords. It simply
sets a new password hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex")
for the specified user email.

Usage:
    python reset_password.py --db ./library_catalog_api/library_catalog.db --email ada@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sys

from library_catalog_api.app.core.db import DocumentStore
from library_catalog_api.app.core.errors import StoreError
from library_catalog_api.app.core.security import hash_password


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset a Library Catalog user password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./library_catalog_api/library_catalog.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    store = DocumentStore(os.path.abspath(args.db)).open()
    try:
        users = store.find("users", {"email": email}, limit=1)
        if not users:
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            sys.exit(2)
        store.save("users", {"id": users[0]["id"], "password": hash_password(new_password)})
        print(f"[+] Password updated for user: {email}")
    except StoreError as e:
        print(f"[!] Database error: {e}", file=sys.stderr)
        sys.exit(3)
    finally:
        store.close()


if __name__ == "__main__":
    main()
