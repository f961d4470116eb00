#!/usr/bin/env python3
"""
EVC Track Authentication Management CLI

Utility script for managing:
- The shared proxy token the auth proxy sends with every signed-in request
- Secret keys (SECRET_KEY)
- Checking the current authentication configuration

Usage:
    python scripts/manage_auth.py generate-proxy-token
    python scripts/manage_auth.py hash-token <token>
    python scripts/manage_auth.py generate-secret-key
    python scripts/manage_auth.py list-config
"""

import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "tracker"))

from utils.auth_utils import generate_api_token, generate_secret_key, hash_proxy_token  # noqa: E402


def generate_proxy_token_command(args):
    """Generate a proxy token and the hash the server stores."""
    token = generate_api_token(prefix="evcproxy", length=args.length)
    print("Generated proxy token (configure this on the auth proxy):")
    print(f"  {token}")
    print("\nAdd the hash to the EVC Track .env file:")
    print(f"  AUTH_PROXY_TOKEN_HASH={hash_proxy_token(token, method=args.method)}")


def hash_token_command(args):
    """Hash an existing proxy token."""
    print(f"Hashed token ({args.method}):")
    print(f"  {hash_proxy_token(args.token, method=args.method)}")
    print("\nAdd to your .env file:")
    print("  AUTH_PROXY_TOKEN_HASH=<hash above>")


def generate_secret_key_command(args):
    """Generate a new Flask SECRET_KEY."""
    key = generate_secret_key(length=32)
    print("Generated Flask SECRET_KEY:")
    print(f"  {key}")
    print("\nAdd to your .env file:")
    print(f"  SECRET_KEY={key}")


def list_env_vars_command(args):
    """Show current authentication configuration from environment."""
    print("Current Authentication Configuration")
    print("=" * 60)

    vars_to_check = {
        "AUTH_USER_HEADER": "Header carrying the signed-in user id",
        "AUTH_PROXY_TOKEN_HEADER": "Header carrying the proxy token",
        "AUTH_PROXY_TOKEN_HASH": "Hash of the proxy token",
        "SECRET_KEY": "Flask secret key",
        "RATE_LIMIT_STORAGE_URI": "Rate limit storage",
    }
    masked = {"AUTH_PROXY_TOKEN_HASH", "SECRET_KEY"}

    for var, description in vars_to_check.items():
        value = os.environ.get(var)
        if value:
            display_value = (f"{value[:10]}..." if len(value) > 10 else "***") if var in masked else value
            print(f"✓ {var:25s} = {display_value:20s} # {description}")
        else:
            print(f"✗ {var:25s} = NOT SET                  # {description}")

    if not os.environ.get("AUTH_PROXY_TOKEN_HASH"):
        print("\nWithout AUTH_PROXY_TOKEN_HASH any client can claim an identity.")
        print("Only run like this behind a proxy that strips the identity header.")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="EVC Track Authentication Management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    token_parser = subparsers.add_parser("generate-proxy-token", help="Generate a proxy token and its hash")
    token_parser.add_argument("--length", type=int, default=32, help="Random bytes in the token")
    token_parser.add_argument(
        "--method",
        default="pbkdf2:sha256",
        choices=["pbkdf2:sha256", "scrypt:32768:8:1"],
        help="Hashing method",
    )
    token_parser.set_defaults(func=generate_proxy_token_command)

    hash_parser = subparsers.add_parser("hash-token", help="Hash an existing proxy token")
    hash_parser.add_argument("token", help="Proxy token to hash")
    hash_parser.add_argument(
        "--method",
        default="pbkdf2:sha256",
        choices=["pbkdf2:sha256", "scrypt:32768:8:1"],
        help="Hashing method",
    )
    hash_parser.set_defaults(func=hash_token_command)

    secret_parser = subparsers.add_parser("generate-secret-key", help="Generate a Flask SECRET_KEY")
    secret_parser.set_defaults(func=generate_secret_key_command)

    list_parser = subparsers.add_parser("list-config", help="Show current authentication configuration")
    list_parser.set_defaults(func=list_env_vars_command)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == "__main__":
    main()
