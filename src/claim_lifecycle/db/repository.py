"""Claim and owner repositories backed by SQLite."""

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any

from claim_lifecycle.db.database import get_connection
from claim_lifecycle.exceptions import ClaimNotFoundError
from claim_lifecycle.models.claim import (
    Claim,
    ClaimInput,
    ClaimStatus,
    FraudDetectionData,
    Owner,
    VerdictData,
)

# Fields count_where may filter on, mapped to their column names
COUNTABLE_FIELDS = {
    "status": "status",
    "owner_id": "owner_id",
    "is_fraudulent": "is_fraudulent",
    "fraud_check_completed": "fraud_check_completed",
}


def _generate_claim_id(prefix: str = "CLM") -> str:
    """Generate a unique claim ID."""
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _to_column(value: Any) -> Any:
    if isinstance(value, ClaimStatus):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _claim_from_row(row: sqlite3.Row) -> Claim:
    """Build a Claim from a claims table row."""
    data = dict(row)
    fraud_data = data.get("fraud_detection_data")
    verdict_data = data.get("verdict_data")
    return Claim(
        id=data["id"],
        owner_id=data["owner_id"],
        description=data["description"],
        status=ClaimStatus(data["status"]),
        fraud_check_completed=bool(data["fraud_check_completed"]),
        is_fraudulent=bool(data["is_fraudulent"]),
        fraud_confidence_score=data["fraud_confidence_score"],
        fraud_detection_data=(
            FraudDetectionData.model_validate_json(fraud_data) if fraud_data else None
        ),
        verdict_data=VerdictData.model_validate_json(verdict_data) if verdict_data else None,
        created_at=data["created_at"],
        updated_at=data["updated_at"],
    )


class ClaimRepository:
    """Claim store: CRUD, listing, and counting of claim records."""

    def __init__(self, db_path: str | None = None):
        self._db_path = db_path

    def create(self, claim_input: ClaimInput, owner_id: str) -> Claim:
        """Insert a new pending claim and return it with its generated ID."""
        claim_id = _generate_claim_id()
        now = _now()
        with get_connection(self._db_path) as conn:
            conn.execute(
                """
                INSERT INTO claims (
                    id, owner_id, description, status,
                    fraud_check_completed, is_fraudulent, created_at, updated_at
                ) VALUES (?, ?, ?, ?, 0, 0, ?, ?)
                """,
                (
                    claim_id,
                    owner_id,
                    claim_input.description,
                    ClaimStatus.PENDING.value,
                    now,
                    now,
                ),
            )
        created = self.get(claim_id)
        if created is None:
            raise ClaimNotFoundError(claim_id)
        return created

    def get(self, claim_id: str) -> Claim | None:
        """Fetch claim by ID."""
        with get_connection(self._db_path) as conn:
            row = conn.execute(
                "SELECT * FROM claims WHERE id = ?", (claim_id,)
            ).fetchone()
        if row is None:
            return None
        return _claim_from_row(row)

    def list_by_owner(self, owner_id: str) -> list[Claim]:
        """All claims submitted by an owner, newest first."""
        with get_connection(self._db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM claims WHERE owner_id = ? ORDER BY created_at DESC, rowid DESC",
                (owner_id,),
            ).fetchall()
        return [_claim_from_row(r) for r in rows]

    def list_all(self) -> list[Claim]:
        """All claims, newest first."""
        with get_connection(self._db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM claims ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [_claim_from_row(r) for r in rows]

    def update(self, claim: Claim) -> Claim:
        """Write every mutable field of the claim (last write wins)."""
        fraud_data = (
            claim.fraud_detection_data.model_dump_json()
            if claim.fraud_detection_data
            else None
        )
        verdict_data = claim.verdict_data.model_dump_json() if claim.verdict_data else None
        with get_connection(self._db_path) as conn:
            cur = conn.execute(
                """
                UPDATE claims SET
                    description = ?,
                    status = ?,
                    fraud_check_completed = ?,
                    is_fraudulent = ?,
                    fraud_confidence_score = ?,
                    fraud_detection_data = ?,
                    verdict_data = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    claim.description,
                    claim.status.value,
                    int(claim.fraud_check_completed),
                    int(claim.is_fraudulent),
                    claim.fraud_confidence_score,
                    fraud_data,
                    verdict_data,
                    _now(),
                    claim.id,
                ),
            )
            if cur.rowcount == 0:
                raise ClaimNotFoundError(claim.id)
        updated = self.get(claim.id)
        if updated is None:
            raise ClaimNotFoundError(claim.id)
        return updated

    def delete(self, claim: Claim) -> None:
        """Remove a claim."""
        with get_connection(self._db_path) as conn:
            conn.execute("DELETE FROM claims WHERE id = ?", (claim.id,))

    def count_where(self, **criteria: Any) -> int:
        """Count claims matching all equality criteria; no criteria counts every claim."""
        clauses = []
        params: list[Any] = []
        for field, value in criteria.items():
            column = COUNTABLE_FIELDS.get(field)
            if column is None:
                raise ValueError(f"Cannot count claims by field: {field}")
            clauses.append(f"{column} = ?")
            params.append(_to_column(value))
        sql = "SELECT COUNT(*) FROM claims"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        with get_connection(self._db_path) as conn:
            row = conn.execute(sql, params).fetchone()
        return int(row[0])


class OwnerRepository:
    """Owner lookup backed by the owners table."""

    def __init__(self, db_path: str | None = None):
        self._db_path = db_path

    def add_owner(self, owner_id: str, name: str = "", email: str | None = None) -> Owner:
        """Register or replace an owner profile."""
        with get_connection(self._db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO owners (id, name, email) VALUES (?, ?, ?)",
                (owner_id, name, email),
            )
        return Owner(id=owner_id, name=name, email=email)

    def find_owner(self, owner_id: str) -> Owner | None:
        """Fetch owner by ID."""
        with get_connection(self._db_path) as conn:
            row = conn.execute(
                "SELECT id, name, email FROM owners WHERE id = ?", (owner_id,)
            ).fetchone()
        if row is None:
            return None
        return Owner(**dict(row))
