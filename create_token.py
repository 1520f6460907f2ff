#!/usr/bin/env python3
"""
Print a long‑lived bearer token for an existing user.

Usage:
    python create_token.py --email admin@example.com --days 365
"""

import argparse

from helprequest_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Mint an access token for a Help Request API user.")
    ap.add_argument("--email", required=True, help="Email of the user the token is issued for")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days (default: 365)")
    args = ap.parse_args()
    print(create_access_token({"sub": args.email.strip().lower()}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
