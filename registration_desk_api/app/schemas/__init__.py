"""
Pydantic models for registration data.

The record shapes (events, participants, registrations) are what the
services compute on; the remaining models describe filter input,
reconciliation output and API payloads.  All record models are frozen
so a loaded snapshot can be shared between requests without copying.
"""
