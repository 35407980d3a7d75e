# src/energy_pros/scripts/invites.py
"""Issue invite codes on behalf of an existing member.

Usage:
  python -m energy_pros.scripts.invites --user testuser --count 3
"""
from __future__ import annotations

import argparse
import logging
import sys

from energy_pros.core.settings import settings
from energy_pros.repositories import open_storage
from energy_pros.services.invites import InviteGate

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Issue Energy Pros invite codes.")
    parser.add_argument("--user", required=True, help="Username of the inviting member")
    parser.add_argument("--count", type=int, default=1, help="Number of codes to issue")
    parser.add_argument(
        "--code",
        action="append",
        default=[],
        help="Explicit code to issue (repeatable); overrides --count",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level.upper())

    storage = open_storage()
    try:
        user = storage.get_user_by_username(args.user)
        if user is None:
            print(f"[invites][FAIL] No user named {args.user!r}", file=sys.stderr)
            return 1

        gate = InviteGate(storage)
        requested = args.code or [None] * max(args.count, 0)
        with storage.transaction():
            invites = [gate.issue(user.id, code=code) for code in requested]
        codes = [invite.code for invite in invites]
    finally:
        storage.close()

    for code in codes:
        print(code)
    logger.info("Issued %d invite codes for %s", len(codes), args.user)
    return 0


if __name__ == "__main__":
    sys.exit(main())
