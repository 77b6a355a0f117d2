"""
Application package initializer.

The package is split into the reconciliation and query core
(``services``), the pydantic record shapes it works on (``schemas``),
shared infrastructure (``core``) and the versioned HTTP surface
(``api``).  Services never import from ``api``; endpoints are thin
wrappers that translate service errors into HTTP responses.
"""
