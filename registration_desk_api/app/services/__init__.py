"""
Service layer.

The reconciliation, filtering and export modules are pure functions
over a snapshot of records; ``record_service`` owns the snapshot,
``status_service`` the only mutation and ``store`` the link to the
external database.  API handlers call into these modules and never
touch the store directly.
"""
