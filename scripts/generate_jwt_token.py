#!/usr/bin/env python3
"""Print a bearer token for calling the conversion store API during development."""

import argparse
import sys

from converter_app.auth.jwt_auth import generate_jwt_token


def generate_tokens(user_ids: list[str], expires_in: int | None = None) -> int:
    """Print one token per user id.

    Args:
        user_ids: Users to issue tokens for
        expires_in: Token expiration in seconds (None for no expiration)

    Returns:
        Process exit code
    """
    for user_id in user_ids:
        try:
            token = generate_jwt_token(user_id=user_id, expires_in_seconds=expires_in)
        except ValueError as e:
            print(f"Error generating token for '{user_id}': {e}", file=sys.stderr)
            return 1

        print(f"User ID: {user_id}")
        print(f"  Token: {token}")
        print(f"  Authorization Header: Bearer {token}")
        if expires_in is None:
            print("  Expiration: Never (development mode)")
        else:
            print(f"  Expires in: {expires_in} seconds")
        print()

    return 0


def main(argv: list[str] | None = None) -> int:
    """Command line entry point."""
    parser = argparse.ArgumentParser(
        description="Generate JWT tokens for conversion store API testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/generate_jwt_token.py user-456
  python scripts/generate_jwt_token.py user-1 user-2 --expires-in 3600
        """,
    )
    parser.add_argument("user_ids", nargs="+", help="User IDs to issue tokens for")
    parser.add_argument(
        "--expires-in", type=int, help="Token expiration in seconds (default: no expiration)"
    )
    args = parser.parse_args(argv)

    if args.expires_in is not None and args.expires_in <= 0:
        parser.error("--expires-in must be a positive number of seconds")

    return generate_tokens(args.user_ids, args.expires_in)


if __name__ == "__main__":
    sys.exit(main())
