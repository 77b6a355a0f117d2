"""
Top‑level package for the Registration Desk API.

This file makes ``registration_desk_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``registration_desk_api.app.main``.  The command line revenue
report lives in ``reconcile``; everything else is under ``app``.
"""

__all__ = []
