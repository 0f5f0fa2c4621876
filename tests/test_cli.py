"""Unit tests for CLI (main.py) commands and edge cases."""

import json
from io import StringIO
from unittest.mock import patch

import pytest

from claim_lifecycle.db.repository import ClaimRepository, OwnerRepository
from claim_lifecycle.main import _usage, main
from claim_lifecycle.models.claim import ClaimInput


def _run(argv):
    """Run main() with argv and return captured stdout."""
    with patch("sys.argv", ["claim-lifecycle", *argv]), patch(
        "sys.stdout", new_callable=StringIO
    ) as mock_stdout:
        main()
    return mock_stdout.getvalue()


@pytest.fixture(autouse=True)
def quiet_config(monkeypatch):
    """No retries and a single worker for CLI runs."""
    monkeypatch.setenv("CLAIM_LIFECYCLE_RETRY_ATTEMPTS", "1")
    monkeypatch.setenv("CLAIM_LIFECYCLE_BACKGROUND_WORKERS", "1")


class TestUsage:
    """Tests for _usage function."""

    def test_usage_lists_commands(self):
        """_usage names every command."""
        result = _usage()
        for command in (
            "add-owner",
            "submit",
            "status",
            "list",
            "screen",
            "process",
            "update",
            "remove",
            "stats",
            "fraud-status",
        ):
            assert command in result

    def test_no_arguments_exits(self):
        """main without a command prints usage and exits 1."""
        with patch("sys.argv", ["claim-lifecycle"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1

    def test_unknown_command_exits(self):
        """An unknown command exits 1."""
        with pytest.raises(SystemExit) as exc_info:
            _run(["frobnicate"])
        assert exc_info.value.code == 1


class TestCommands:
    """End-to-end CLI command tests against the temp DB."""

    def test_add_owner(self, temp_db):
        """add-owner registers a profile."""
        output = _run(["add-owner", "u1", "Uma", "uma@example.com"])
        assert json.loads(output)["email"] == "uma@example.com"
        assert OwnerRepository(db_path=temp_db).find_owner("u1").name == "Uma"

    def test_submit_screens_claim(self, temp_db, tmp_path):
        """submit creates a claim and waits for its background screening."""
        claim_file = tmp_path / "claim.json"
        claim_file.write_text(json.dumps({"description": "water damage"}))

        data = json.loads(_run(["submit", "u1", str(claim_file)]))

        assert data["owner_id"] == "u1"
        assert data["status"] == "pending"
        assert data["fraud_check_completed"] is True
        assert data["is_fraudulent"] is False

    def test_submit_invalid_claim_exits(self, tmp_path):
        """Invalid claim data exits 1."""
        claim_file = tmp_path / "claim.json"
        claim_file.write_text(json.dumps({"description": ""}))
        with pytest.raises(SystemExit) as exc_info:
            _run(["submit", "u1", str(claim_file)])
        assert exc_info.value.code == 1

    def test_submit_missing_file_exits(self, tmp_path):
        """A missing claim file exits 1."""
        with pytest.raises(SystemExit) as exc_info:
            _run(["submit", "u1", str(tmp_path / "missing.json")])
        assert exc_info.value.code == 1

    def test_status_and_process(self, temp_db):
        """process screens and decides a claim; status shows it."""
        claim = ClaimRepository(db_path=temp_db).create(
            ClaimInput(description="burst pipe flooded the basement"), "u1"
        )

        processed = json.loads(_run(["process", claim.id]))
        assert processed["status"] == "approved"
        assert processed["verdict_data"]["verdict"] == "approved"

        shown = json.loads(_run(["status", claim.id]))
        assert shown["id"] == claim.id
        assert shown["status"] == "approved"

    def test_process_fraudulent_claim_flags(self, temp_db):
        """A claim full of fraud indicators ends up flagged."""
        claim = ClaimRepository(db_path=temp_db).create(
            ClaimInput(description="staged crash on a new policy, witnesses left"), "u1"
        )
        processed = json.loads(_run(["process", claim.id]))
        assert processed["status"] == "flagged"
        assert processed["verdict_data"] is None

    def test_process_twice_exits(self, temp_db):
        """Processing a decided claim exits 1."""
        claim = ClaimRepository(db_path=temp_db).create(
            ClaimInput(description="burst pipe flooded the basement"), "u1"
        )
        _run(["process", claim.id])
        with pytest.raises(SystemExit) as exc_info:
            _run(["process", claim.id])
        assert exc_info.value.code == 1

    def test_status_not_found_exits(self):
        """A missing claim exits 1."""
        with pytest.raises(SystemExit) as exc_info:
            _run(["status", "CLM-NONEXISTENT"])
        assert exc_info.value.code == 1

    def test_screen(self, temp_db):
        """screen runs fraud screening synchronously."""
        claim = ClaimRepository(db_path=temp_db).create(
            ClaimInput(description="hail dented the roof"), "u1"
        )
        data = json.loads(_run(["screen", claim.id]))
        assert data["fraud_check_completed"] is True
        assert data["fraud_detection_data"]["model_version"] == "keyword-v1"

    def test_update_and_remove(self, temp_db, tmp_path):
        """update applies an admin override; remove deletes the claim."""
        repo = ClaimRepository(db_path=temp_db)
        claim = repo.create(ClaimInput(description="hail dented the roof"), "u1")
        update_file = tmp_path / "update.json"
        update_file.write_text(json.dumps({"status": "rejected"}))

        data = json.loads(_run(["update", claim.id, str(update_file)]))
        assert data["status"] == "rejected"

        output = _run(["remove", claim.id])
        assert claim.id in output
        assert repo.get(claim.id) is None

    def test_list_and_stats(self, temp_db):
        """list and stats report stored claims."""
        repo = ClaimRepository(db_path=temp_db)
        repo.create(ClaimInput(description="one"), "u1")
        repo.create(ClaimInput(description="two"), "u2")

        assert len(json.loads(_run(["list"]))) == 2
        assert len(json.loads(_run(["list", "u1"]))) == 1
        stats = json.loads(_run(["stats"]))
        assert stats["total"] == 2
        assert stats["fraud_check_pending"] == 2

    def test_fraud_status(self):
        """fraud-status reports the keyword screener as healthy."""
        data = json.loads(_run(["fraud-status"]))
        assert data["healthy"] is True
