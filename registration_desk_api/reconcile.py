#!/usr/bin/env python3
"""
Print how a payment channel's revenue is made up.

Loads registrations for one payment mode and status from the SQLite
database, lists every registration with its team role and whether it
is billed, then prints the breakdown and the total.  Useful when a
dashboard total looks wrong and you need to see which rows make it up.

Usage:
    reconcile-revenue --db ./registrations.db --payment-mode cash
    reconcile-revenue --db ./registrations.db --payment-mode online --status pending
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from registration_desk_api.app.core.logging_config import setup_logging
from registration_desk_api.app.schemas.facets import RegistrationFacets
from registration_desk_api.app.schemas.registration import PaymentMode, RegistrationStatus
from registration_desk_api.app.schemas.revenue import RegistrationRole
from registration_desk_api.app.services.filter_service import filter_registrations
from registration_desk_api.app.services.record_service import normalize_rows
from registration_desk_api.app.services.revenue_service import classify, revenue_summary
from registration_desk_api.app.services.store import SQLiteRegistrationStore

_ROLE_LABELS = {
    RegistrationRole.LEADER: "Team Leader",
    RegistrationRole.MEMBER: "Team Member",
    RegistrationRole.INDIVIDUAL: "Individual",
}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Show how revenue for a payment mode is reconciled.")
    ap.add_argument("--db", required=True, help="Path to the SQLite database file")
    ap.add_argument(
        "--payment-mode",
        default=PaymentMode.CASH.value,
        choices=[mode.value for mode in PaymentMode],
        help="Payment mode to reconcile (default: cash)",
    )
    ap.add_argument(
        "--status",
        default=RegistrationStatus.CONFIRMED.value,
        choices=[status.value for status in RegistrationStatus],
        help="Registration status to include (default: confirmed)",
    )
    ap.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return ap


def render_report(records, payment_mode: str) -> List[str]:
    lines: List[str] = [f"Found {len(records)} {payment_mode} registrations", "=" * 80]
    for index, item in enumerate(classify(records), start=1):
        record = item.registration
        registered = record.registered_at.strftime("%Y-%m-%d %H:%M") if record.registered_at else "N/A"
        lines.extend(
            [
                f"{index}. {record.profile.full_name} ({record.profile.roll_number or 'N/A'})",
                f"   Event: {record.event.name}",
                f"   Type: {record.event.subcategory} ({_ROLE_LABELS[item.role]})",
                f"   Event Fee: {record.event.fee}",
                f"   Team Size: {item.team_size}",
                f"   Count in Revenue: {'YES' if item.should_count else 'NO (team member)'}",
                f"   Registered: {registered}",
                "   " + "-" * 70,
            ]
        )

    summary = revenue_summary(records)
    lines.extend(
        [
            "=" * 80,
            f"TOTAL {payment_mode.upper()} REVENUE: {summary.total_revenue}",
            "BREAKDOWN:",
            f"   - Total registrations: {summary.registrations}",
            f"   - Team leaders: {summary.leaders}",
            f"   - Team members: {summary.members}",
            f"   - Individual participants: {summary.individuals}",
            f"   - Counted in revenue: {summary.counted}",
        ]
    )
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        return 1

    # "other" also covers unrecognised stored modes, so it can only be
    # selected after normalization.
    store_mode = None if args.payment_mode == PaymentMode.OTHER.value else args.payment_mode
    store = SQLiteRegistrationStore(os.path.abspath(args.db))
    rows = asyncio.run(store.fetch_registrations(payment_mode=store_mode, status=args.status))
    records = filter_registrations(
        normalize_rows(rows), facets=RegistrationFacets(payment_mode=args.payment_mode)
    )
    print("\n".join(render_report(records, args.payment_mode)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
