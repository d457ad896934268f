"""Database module for SQLite persistence.

Provides:
- Connection management and transactions
- Schema creation and sample data
- Repository functions for course, student and take tables
"""

from registrar.db.database import ConnectionManager, DatabaseUnavailableError, transaction
from registrar.db.schema import BootstrapReport, bootstrap

__all__ = [
    "BootstrapReport",
    "ConnectionManager",
    "DatabaseUnavailableError",
    "bootstrap",
    "transaction",
]
