"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration; override them via
environment variables in a real deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Registration Desk API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database holding the events, profiles and
    # registrations tables.  Relative paths are resolved against the
    # project root by the ``db`` module.  The schema is owned by the
    # registration workflow; this service never creates it.
    database_url: str = os.getenv("DATABASE_URL", "registrations.db")

    # File name prefixes for exports.  The export date (YYYY‑MM‑DD) and
    # the ``.csv`` suffix are appended.
    export_prefix: str = os.getenv("EXPORT_PREFIX", "registrations_export")
    payment_report_prefix: str = os.getenv("PAYMENT_REPORT_PREFIX", "payment_report")

    # Load the registration catalog from the store when the application
    # starts.  Disable for tests or when the database is not reachable
    # at boot; ``POST /registrations/refresh`` loads it later.
    load_on_startup: bool = os.getenv("LOAD_ON_STARTUP", "true").lower() in {"1", "true", "yes"}


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
