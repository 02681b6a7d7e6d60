"""One-off job backfilling phone keys and merging duplicate conversations.

Run with: python -m support_desk.workers.normalize_phone_numbers [--dry-run]
"""

import argparse
import asyncio
import logging

from support_desk.core.logging import setup_logging
from support_desk.db.session import async_session_maker, engine
from support_desk.services.maintenance import ConversationMaintenance

logger = logging.getLogger(__name__)


async def run(dry_run: bool = False) -> dict[str, int]:
    """Repair every conversation in one transaction."""
    async with async_session_maker() as db:
        return await ConversationMaintenance(db).normalize_and_merge(dry_run=dry_run)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing anything",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    setup_logging()
    args = parse_args(argv)
    logger.info(f"Starting phone repair{' (dry run)' if args.dry_run else ''}...")

    try:
        report = await run(dry_run=args.dry_run)
    finally:
        await engine.dispose()

    logger.info(
        f"Total conversations: {report['total']}, keys updated: {report['updated']}, "
        f"groups merged: {report['merged']}, archived: {report['archived']}"
    )


if __name__ == "__main__":
    asyncio.run(main())
