"""SQLite database module for claim and owner persistence."""

from claim_lifecycle.db.database import get_connection, get_db_path, init_db
from claim_lifecycle.db.repository import ClaimRepository, OwnerRepository

__all__ = [
    "ClaimRepository",
    "OwnerRepository",
    "get_connection",
    "get_db_path",
    "init_db",
]
