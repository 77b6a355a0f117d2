"""
CSV exports of registration data.

The registration export is a compatibility surface: spreadsheets and
scripts downstream rely on the column order and header names in
``REGISTRATION_COLUMNS``.  Rows are joined with ``\\n`` and there is no
trailing newline.  A field is quoted only when it contains a comma, a
double quote or a newline, in which case inner quotes are doubled;
every other value is written as is.  Missing values are written as
empty fields.

The payment report lists only billable registrations (team member rows
are left out, see ``revenue_service``) followed by summary blocks.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from registration_desk_api.app.core.config import settings
from registration_desk_api.app.schemas.registration import Registration
from registration_desk_api.app.services.revenue_service import (
    billable,
    revenue_summary,
)

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def _value(value: Any) -> Any:
    return getattr(value, "value", value)


def _timestamp(value: Optional[datetime]) -> str:
    return value.isoformat() if value else ""


REGISTRATION_COLUMNS: Tuple[Tuple[str, Callable[[Registration], Any]], ...] = (
    ("Registration ID", lambda r: r.id),
    ("Status", lambda r: _value(r.status)),
    ("Payment Mode", lambda r: _value(r.payment_mode)),
    ("Transaction ID", lambda r: r.transaction_id),
    ("Registered At", lambda r: _timestamp(r.registered_at)),
    ("Event Name", lambda r: r.event.name),
    ("Event Category", lambda r: r.event.category),
    ("Event Subcategory", lambda r: r.event.subcategory),
    ("Event Fee", lambda r: r.event.fee),
    ("Student Name", lambda r: r.profile.full_name),
    ("Roll Number", lambda r: r.profile.roll_number),
    ("Email", lambda r: r.profile.college_email),
    ("Phone", lambda r: r.profile.phone),
    ("Gender", lambda r: r.profile.gender),
    ("School", lambda r: r.profile.school),
    ("Department", lambda r: r.profile.department),
    ("Program", lambda r: r.profile.program),
    ("Year of Study", lambda r: r.profile.year_of_study),
)

PAYMENT_REPORT_COLUMNS = (
    "Event No",
    "Event Name",
    "Registration Type",
    "Participant Name",
    "Transaction ID",
    "Payment Mode",
    "Amount",
    "Status",
    "Payment Date",
)


def escape_field(value: Any) -> str:
    """Render one CSV field."""
    if value is None:
        return ""
    text = str(value)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def render_rows(rows: Iterable[Sequence[Any]]) -> str:
    return "\n".join(",".join(escape_field(value) for value in row) for row in rows)


def export_filename(prefix: str, today: Optional[date] = None) -> str:
    """``<prefix>_YYYY-MM-DD.csv`` for the export date."""
    return f"{prefix}_{(today or date.today()).isoformat()}.csv"


def registration_rows(records: Iterable[Registration]) -> List[List[Any]]:
    header = [name for name, _ in REGISTRATION_COLUMNS]
    return [header] + [[extract(record) for _, extract in REGISTRATION_COLUMNS] for record in records]


def export_csv(records: Sequence[Registration], today: Optional[date] = None) -> Tuple[bytes, str]:
    """Serialize registrations to CSV.

    Returns the UTF‑8 document and the suggested file name, which embeds
    the export date.
    """
    document = render_rows(registration_rows(records))
    return document.encode("utf-8"), export_filename(settings.export_prefix, today)


def payment_report_rows(records: Sequence[Registration]) -> List[List[Any]]:
    """Billable registrations grouped by event, then the summary blocks."""
    blank = [""] * len(PAYMENT_REPORT_COLUMNS)
    rows: List[List[Any]] = [list(PAYMENT_REPORT_COLUMNS)]

    groups: dict[str, List[Registration]] = {}
    for record in billable(records):
        groups.setdefault(record.event_id, []).append(record)

    for event_no, event_records in enumerate(groups.values(), start=1):
        for index, record in enumerate(event_records):
            rows.append(
                [
                    event_no if index == 0 else "",
                    record.event.name if index == 0 else "",
                    "Team" if record.team_members else "Individual",
                    record.profile.full_name,
                    record.transaction_id or "N/A",
                    _value(record.payment_mode) or "N/A",
                    record.event.fee,
                    _value(record.status),
                    record.registered_at.date().isoformat() if record.registered_at else "N/A",
                ]
            )

    summary = revenue_summary(records)
    rows.extend([list(blank), list(blank)])
    rows.append(["PAYMENT MODE SUMMARY"] + blank[1:])
    for mode, amount in summary.by_payment_mode.items():
        rows.append(["", mode.upper(), "", "", "", "", amount, "", ""])
    rows.append(list(blank))
    rows.append(["EVENT REVENUE SUMMARY"] + blank[1:])
    for entry in summary.by_event:
        rows.append(["", entry.event_name, "", "", "", "", entry.amount, "", ""])
    rows.append(list(blank))
    rows.append(["TOTAL REVENUE", "", "", "", "", "", summary.total_revenue, "", ""])
    return rows


def export_payment_report(records: Sequence[Registration], today: Optional[date] = None) -> Tuple[bytes, str]:
    """Serialize the payment report; same escaping and naming as ``export_csv``."""
    document = render_rows(payment_report_rows(records))
    return document.encode("utf-8"), export_filename(settings.payment_report_prefix, today)

