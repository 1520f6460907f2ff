#!/usr/bin/env python3
"""
Reset a user's password in the Help Request API SQLite database.

This script does not read or reveal existing passwords.  It stores a
new PBKDF2 hash for the given email.  Optionally it also changes the
user's role (1 super_admin, 2 admin, 3 user).

Usage:
    python reset_password.py --db ./helprequests.db --email admin@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys

from helprequest_api.app.core.security import hash_password


def main():
    ap = argparse.ArgumentParser(description="Reset a Help Request API user's password (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./helprequests.db)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--role", type=int, choices=(1, 2, 3), help="Optionally assign a new role id")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    conn = sqlite3.connect(args.db)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            sys.exit(2)

        cur.execute(
            "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
            (hash_password(new_password), email),
        )
        if args.role is not None:
            cur.execute("UPDATE users SET role_id = ? WHERE email = ?", (args.role, email))
        conn.commit()
        print(f"[+] Password updated for user: {email}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
