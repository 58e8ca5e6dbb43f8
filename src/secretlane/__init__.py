"""Secretlane — multi-tenant workspace backend.

Cookie-based JWT sessions in front of per-user workspace CRUD, running
unmodified against an embedded SQLite file or a PostgreSQL server.
"""

__version__ = "0.1.0"
