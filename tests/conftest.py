"""
Pytest fixtures for the registration desk test suite.

Provides sample records, an in‑memory fake store and a temporary SQLite
database laid out like the production registrations schema.
"""

import json
import sqlite3

import pytest

from registration_desk_api.app.services.record_service import RegistrationCatalog
from tests.factories import FakeStore, sample_records, sample_rows

SCHEMA = """
CREATE TABLE events (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    category TEXT,
    subcategory TEXT,
    fee INTEGER DEFAULT 0
);

CREATE TABLE profiles (
    id TEXT PRIMARY KEY,
    full_name TEXT,
    roll_number TEXT,
    college_email TEXT,
    phone TEXT,
    school TEXT,
    department TEXT,
    program TEXT,
    year_of_study TEXT,
    gender TEXT
);

CREATE TABLE registrations (
    id TEXT PRIMARY KEY,
    event_id TEXT,
    profile_id TEXT,
    payment_mode TEXT,
    transaction_id TEXT,
    status TEXT DEFAULT 'pending',
    team_members TEXT,
    registered_at TEXT
);
"""


@pytest.fixture
def records():
    return sample_records()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def catalog():
    catalog = RegistrationCatalog()
    catalog.load(sample_rows())
    return catalog


@pytest.fixture
def sqlite_db(tmp_path):
    """SQLite file holding the sample data, plus one orphaned registration.

    ``R9`` points at an event and a profile that do not exist.
    """
    path = tmp_path / "registrations.db"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        seen_events, seen_profiles = set(), set()
        for row in sample_rows():
            event, profile = row["event"], row["profile"]
            if event and event["id"] not in seen_events:
                seen_events.add(event["id"])
                conn.execute(
                    "INSERT INTO events (id, name, category, subcategory, fee) VALUES (?, ?, ?, ?, ?)",
                    (event["id"], event["name"], event["category"], event["subcategory"], event["fee"]),
                )
            if profile and profile["id"] not in seen_profiles:
                seen_profiles.add(profile["id"])
                columns = ", ".join(profile)
                placeholders = ", ".join("?" for _ in profile)
                conn.execute(f"INSERT INTO profiles ({columns}) VALUES ({placeholders})", tuple(profile.values()))
            conn.execute(
                """
                INSERT INTO registrations
                    (id, event_id, profile_id, payment_mode, transaction_id, status, team_members, registered_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    row["id"],
                    row["event_id"],
                    row["profile_id"],
                    row["payment_mode"],
                    row["transaction_id"],
                    row["status"],
                    json.dumps(row["team_members"]) if row["team_members"] else None,
                    row["registered_at"],
                ),
            )
        conn.execute(
            """
            INSERT INTO registrations (id, event_id, profile_id, payment_mode, status, registered_at)
            VALUES ('R9', 'E404', 'P404', 'cash', 'pending', '2025-01-13T08:00:00Z')
            """
        )
        conn.commit()
    finally:
        conn.close()
    return str(path)
