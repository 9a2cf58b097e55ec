"""Remove old read notifications and expired ones.

Meant to be run periodically (cron, systemd timer)::

    python -m scripts.notification_maintenance --days 90
"""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from legal_crm.application.use_cases.notifications import (
    cleanup_read_notifications,
    purge_expired_notifications,
)
from legal_crm.config import get_settings
from legal_crm.infrastructure.database import SessionLocal, initialize_database

logger = logging.getLogger("notification_maintenance")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Clean up read and expired notifications of the legal CRM.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Keep read notifications for this many days (default: NOTIFICATION_RETENTION_DAYS)",
    )
    parser.add_argument(
        "--skip-expired",
        action="store_true",
        help="Do not sweep notifications whose expiry date has passed.",
    )
    parser.add_argument(
        "--skip-read",
        action="store_true",
        help="Do not remove old read notifications.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> dict[str, int]:
    """Execute the requested sweeps and return the number of rows removed by each."""

    days = args.days if args.days is not None else get_settings().notification_retention_days
    if days <= 0:
        raise SystemExit("--days must be a positive number")

    initialize_database()
    removed = {"read": 0, "expired": 0}
    session = SessionLocal()
    try:
        if not args.skip_read:
            removed["read"] = cleanup_read_notifications(session, days)
        if not args.skip_expired:
            removed["expired"] = purge_expired_notifications(session)
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Notification maintenance failed: {exc}") from exc
    finally:
        session.close()
    return removed


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    removed = run(args)
    logger.info(
        "Maintenance finished: %d read, %d expired notifications removed",
        removed["read"],
        removed["expired"],
    )


if __name__ == "__main__":
    main()
