#!/usr/bin/env python3
"""
Print the environment variables for a Firebase service account file.

Usage:
    python scripts/convert_credentials.py
    python scripts/convert_credentials.py path/to/firebase-credentials.json --escape

Hosting platforms that cannot mount the JSON file take the account as
FIREBASE_PROJECT_ID / FIREBASE_CLIENT_EMAIL / FIREBASE_PRIVATE_KEY instead.
"""

import argparse
import json
import sys
from pathlib import Path

DEFAULT_PATH = Path(__file__).resolve().parent.parent / "firebase-credentials.json"


def credentials_to_env(credentials: dict, escape_newlines: bool = False) -> dict[str, str]:
    """Map a service account dict to the settings environment variables."""
    private_key = credentials["private_key"]
    if escape_newlines:
        private_key = private_key.replace("\n", "\\n")

    return {
        "FIREBASE_PROJECT_ID": credentials["project_id"],
        "FIREBASE_CLIENT_EMAIL": credentials["client_email"],
        "FIREBASE_PRIVATE_KEY": private_key,
        "FIREBASE_STORAGE_BUCKET": f"{credentials['project_id']}.appspot.com",
    }


def main() -> int:
    """Read the credentials file and print the variables."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("path", nargs="?", type=Path, default=DEFAULT_PATH)
    parser.add_argument(
        "--escape",
        action="store_true",
        help="Escape newlines in the private key (for single-line .env files)",
    )
    args = parser.parse_args()

    try:
        credentials = json.loads(args.path.read_text(encoding="utf-8"))
        env = credentials_to_env(credentials, escape_newlines=args.escape)
    except (OSError, json.JSONDecodeError, KeyError) as e:
        print(f"Error reading {args.path}: {e}", file=sys.stderr)
        print("Make sure the service account JSON exists and is complete.", file=sys.stderr)
        return 1

    print("\n=== Copy these values to your environment ===\n")
    for name, value in env.items():
        print(name)
        print(value)
        print()
    print("=== End ===\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
