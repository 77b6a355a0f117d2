"""
SQLite connection helpers for the registration store.

The registrations, events and profiles tables are owned by the
registration workflow; this module only opens connections to the
database file.  It never creates or migrates tables.  To switch to
another DBMS you would replace the connection logic here and adapt
the SQL in ``services/store.py``.
"""

import os
import sqlite3
from pathlib import Path
from typing import Optional

from .config import settings


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If the configured path is absolute, use it directly.  Otherwise
    resolve it relative to the project root.
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # registration_desk_api/
    return str((base_dir / db_url).resolve())


def get_connection(database_url: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  No type detection is enabled; timestamps come back as the
    strings they were stored as and are parsed by the record model.
    """
    conn = sqlite3.connect(get_database_path(database_url))
    conn.row_factory = sqlite3.Row
    return conn
