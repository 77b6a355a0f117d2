"""
Tests for the CSV exports.
"""

import csv
import io
from datetime import date, datetime, timezone

import pytest

from registration_desk_api.app.schemas.participant import Participant
from registration_desk_api.app.services.export_service import (
    PAYMENT_REPORT_COLUMNS,
    REGISTRATION_COLUMNS,
    escape_field,
    export_csv,
    export_filename,
    export_payment_report,
    payment_report_rows,
    render_rows,
)
from registration_desk_api.app.services.filter_service import filter_registrations
from registration_desk_api.app.services.revenue_service import compute_revenue
from registration_desk_api.app.schemas.facets import StatusTab
from tests.factories import make_event, make_registration

HEADER = (
    "Registration ID,Status,Payment Mode,Transaction ID,Registered At,Event Name,Event Category,"
    "Event Subcategory,Event Fee,Student Name,Roll Number,Email,Phone,Gender,School,Department,"
    "Program,Year of Study"
)


def parse(content: bytes):
    return list(csv.reader(io.StringIO(content.decode("utf-8"), newline="")))


class TestEscapeField:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("plain", "plain"),
            ("a,b", '"a,b"'),
            ('say "hi"', '"say ""hi"""'),
            ("two\nlines", '"two\nlines"'),
            ('a,"b"\nc', '"a,""b""\nc"'),
            ("", ""),
            (None, ""),
            (100, "100"),
            ("  padded ", "  padded "),
        ],
    )
    def test_escape(self, value, expected):
        assert escape_field(value) == expected

    def test_render_rows_has_no_trailing_newline(self):
        assert render_rows([["a", "b"], ["c", None]]) == "a,b\nc,"


class TestExportCsv:
    def test_header_and_row_order(self, records):
        content, _ = export_csv(records, today=date(2025, 1, 14))
        text = content.decode("utf-8")
        assert text.split("\n")[0] == HEADER
        assert len(REGISTRATION_COLUMNS) == 18
        rows = parse(content)
        assert [row[0] for row in rows[1:]] == [r.id for r in records]
        assert all(len(row) == 18 for row in rows)
        assert not text.endswith("\n")

    def test_row_values(self, records):
        rows = parse(export_csv(records[:1])[0])
        assert rows[1] == [
            "R1",
            "confirmed",
            "cash",
            "",
            "2025-01-14T09:00:00+00:00",
            "Hackathon",
            "Technical",
            "Group",
            "100",
            "Asha Patil",
            "22CO041",
            "asha@college.edu",
            "9876500001",
            "Female",
            "SOET",
            "CO",
            "Diploma Engineering",
            "Year 2",
        ]

    def test_special_characters_survive_a_csv_parser(self):
        tricky = 'a,"b"\nc'
        record = make_registration(
            "R1",
            "P1",
            make_event("E1", name=tricky),
            transaction_id="T-1",
            registered_at=datetime(2025, 1, 14, 9, 0, tzinfo=timezone.utc),
        )
        content, _ = export_csv([record])
        assert '"a,""b""\nc"' in content.decode("utf-8")
        assert parse(content)[1][5] == tricky

    def test_missing_values_are_empty(self):
        record = make_registration("R1", "P1", payment_mode=None)
        record = record.model_copy(update={"profile": Participant(id="P1")})
        text = export_csv([record])[0].decode("utf-8")
        assert "None" not in text
        row = parse(text.encode("utf-8"))[1]
        assert row[2] == "" and row[3] == "" and row[4] == ""
        assert row[9] == "Unknown"
        assert row[10:] == [""] * 8

    def test_empty_export_is_header_only(self):
        content, _ = export_csv([])
        assert content.decode("utf-8") == HEADER

    def test_filename_embeds_date(self, records):
        _, filename = export_csv(records, today=date(2025, 1, 14))
        assert filename == "registrations_export_2025-01-14.csv"

    def test_default_date_is_today(self):
        assert export_filename("x") == f"x_{date.today().isoformat()}.csv"


class TestPaymentReport:
    def test_member_rows_are_left_out(self, records):
        confirmed = filter_registrations(records, tab=StatusTab.CONFIRMED)
        rows = payment_report_rows(confirmed)
        assert rows[0] == list(PAYMENT_REPORT_COLUMNS)
        participants = [row[3] for row in rows[1:4]]
        assert participants == ["Asha Patil", "Asha Patil", "Meera Joshi"]
        assert rows[1][:3] == [1, "Hackathon", "Team"]
        assert rows[2][:3] == [2, "Solo Singing", "Individual"]
        assert rows[3][:2] == ["", ""]
        assert rows[1][4] == "N/A"

    def test_summary_blocks(self, records):
        confirmed = filter_registrations(records, tab=StatusTab.CONFIRMED)
        rows = payment_report_rows(confirmed)
        labels = [row[0] for row in rows]
        assert "PAYMENT MODE SUMMARY" in labels
        assert "EVENT REVENUE SUMMARY" in labels
        mode_row = rows[labels.index("PAYMENT MODE SUMMARY") + 1]
        assert mode_row[1:7] == ["CASH", "", "", "", "", 160]
        assert rows[-1][0] == "TOTAL REVENUE"
        assert rows[-1][6] == compute_revenue(confirmed) == 160

    def test_missing_payment_mode_reported_as_hybrid(self):
        record = make_registration("R1", "P1", payment_mode=None)
        labels = [row[1] for row in payment_report_rows([record])]
        assert "HYBRID" in labels

    def test_filename(self, records):
        _, filename = export_payment_report(records, today=date(2025, 3, 1))
        assert filename == "payment_report_2025-03-01.csv"
