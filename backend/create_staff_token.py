#!/usr/bin/env python3
"""
Script to mint a staff token for a floor tablet.
The token authorizes resolving waiter calls and the staff feed.
"""
from datetime import timedelta

from core.security import create_staff_token


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Create a staff bearer token")
    parser.add_argument("name", type=str, help="Staff member or device name")
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Validity in days (default: STAFF_TOKEN_DAYS setting)"
    )
    args = parser.parse_args()

    expires = timedelta(days=args.days) if args.days else None
    token = create_staff_token(args.name, expires)

    print(f"✓ Staff token for {args.name}:")
    print(token)


if __name__ == "__main__":
    main()
