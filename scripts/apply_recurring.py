#!/usr/bin/env python3
"""Book due recurring expenses into a user's stored ledger.

Meant for cron or any other scheduler: running it twice for the same day
adds nothing the second time.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from compound_dashboard.config import DEFAULT_USER
from compound_dashboard.formatting import format_currency
from compound_dashboard.logging_config import setup_logging
from compound_dashboard.models import parse_date
from compound_dashboard.recurring import apply_all_templates
from compound_dashboard.user_storage import UserDataStore

logger = logging.getLogger(__name__)


def main(user_id: str, reference: str | None = None, users_dir: Path | None = None, dry_run: bool = False) -> int:
    store = UserDataStore(users_dir)
    if not store.exists(user_id):
        print(f"No stored data for {user_id}.")
        return 1

    reference_date = parse_date(reference) if reference else None
    if reference and reference_date is None:
        print(f"Could not read reference date {reference!r}.")
        return 2

    data = store.load_user_data(user_id)
    ledger = data.ledger
    created = apply_all_templates(ledger.recurring, ledger.expenses, reference_date)
    if not created:
        print("Nothing due. All recurring expenses are already booked.")
        return 0

    for expense in created:
        print(f"{expense.date}  {expense.name:<30} {format_currency(expense.amount):>14}")
    if dry_run:
        print(f"\nDry run: {len(created)} expense(s) not saved.")
        return 0

    updated = dataclasses.replace(ledger, expenses=[*created, *ledger.expenses])
    store.save_user_data(user_id, dataclasses.replace(data, ledger=updated))
    logger.info("Booked %d recurring expense(s) for %s", len(created), user_id)
    print(f"\nBooked {len(created)} expense(s).")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Book due recurring expenses for a user.')
    parser.add_argument('--user', default=DEFAULT_USER, help='User id (e-mail) whose ledger to update')
    parser.add_argument('--date', default=None, help='Reference date (YYYY-MM-DD); defaults to today')
    parser.add_argument('--users-dir', type=Path, default=None, help='Directory holding user documents')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be booked without saving')
    args = parser.parse_args()
    setup_logging()
    sys.exit(main(args.user, args.date, args.users_dir, args.dry_run))
