"""CLI entry point for the claim lifecycle orchestrator."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from claim_lifecycle.exceptions import ClaimLifecycleError, CollaboratorFailure


def _setup_logging() -> None:
    """Configure logging for CLI usage."""
    from claim_lifecycle.observability import get_logger

    get_logger("claim_lifecycle")
    logging.getLogger("claim_lifecycle").setLevel(
        logging.DEBUG if "--debug" in sys.argv else logging.INFO
    )


def _usage() -> str:
    return """Usage:
  claim-lifecycle add-owner <owner_id> [name] [email]   Register a claim owner
  claim-lifecycle submit <owner_id> <claim.json>        Submit a claim and screen it
  claim-lifecycle status <claim_id>                     Show a claim
  claim-lifecycle list [owner_id]                       List claims (optionally for one owner)
  claim-lifecycle screen <claim_id>                     Run fraud screening now
  claim-lifecycle process <claim_id>                    Screen if needed, then get a verdict
  claim-lifecycle update <claim_id> <update.json>       Administrative status/description update
  claim-lifecycle remove <claim_id>                     Delete a claim
  claim-lifecycle stats                                 Claim counts by status
  claim-lifecycle fraud-status                          Fraud screener health

Options:
  --debug                            Enable debug logging
  --json                             Use JSON log format
"""


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _print(data: Any) -> None:
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    elif isinstance(data, list):
        data = [item.model_dump(mode="json") for item in data]
    print(json.dumps(data, indent=2, default=str))


def _load_json(path: Path) -> dict:
    if not path.exists():
        _fail(f"File not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {path}: {e}")


def _orchestrator():
    from claim_lifecycle.services import build_orchestrator

    return build_orchestrator()


def cmd_add_owner(owner_id: str, name: str = "", email: str | None = None) -> None:
    """Register or replace an owner profile."""
    from claim_lifecycle.db.repository import OwnerRepository

    _print(OwnerRepository().add_owner(owner_id, name=name, email=email))


def cmd_submit(owner_id: str, claim_path: Path) -> None:
    """Submit a claim from a JSON file; waits for its background screening."""
    from claim_lifecycle.models.claim import ClaimInput

    claim_data = _load_json(claim_path)
    try:
        claim_input = ClaimInput.model_validate(claim_data)
    except ValidationError as e:
        print("Error: Invalid claim data:", file=sys.stderr)
        print(e.json(), file=sys.stderr)
        sys.exit(1)
    orchestrator = _orchestrator()
    with orchestrator:
        claim = orchestrator.submit_claim(claim_input, owner_id)
    _print(orchestrator.get_claim(claim.id, is_admin=True))


def cmd_status(claim_id: str) -> None:
    """Print a claim."""
    with _orchestrator() as orchestrator:
        _print(orchestrator.get_claim(claim_id, is_admin=True))


def cmd_list(owner_id: str | None = None) -> None:
    """Print all claims, or the claims of one owner."""
    with _orchestrator() as orchestrator:
        if owner_id:
            _print(orchestrator.list_claims_for_owner(owner_id))
        else:
            _print(orchestrator.list_claims())


def cmd_screen(claim_id: str) -> None:
    """Run fraud screening synchronously."""
    with _orchestrator() as orchestrator:
        _print(orchestrator.run_fraud_screening(claim_id))


def cmd_process(claim_id: str) -> None:
    """Advance a pending claim through screening and verdict."""
    with _orchestrator() as orchestrator:
        _print(orchestrator.advance_claim(claim_id))


def cmd_update(claim_id: str, update_path: Path) -> None:
    """Apply an administrative update from a JSON file."""
    from claim_lifecycle.models.claim import AdminClaimUpdate

    update_data = _load_json(update_path)
    try:
        update = AdminClaimUpdate.model_validate(update_data)
    except ValidationError as e:
        print("Error: Invalid update data:", file=sys.stderr)
        print(e.json(), file=sys.stderr)
        sys.exit(1)
    with _orchestrator() as orchestrator:
        _print(orchestrator.update_claim(claim_id, update, is_admin=True))


def cmd_remove(claim_id: str) -> None:
    """Delete a claim."""
    with _orchestrator() as orchestrator:
        orchestrator.remove_claim(claim_id, is_admin=True)
    print(f"Removed claim {claim_id}")


def cmd_stats() -> None:
    """Print claim statistics."""
    with _orchestrator() as orchestrator:
        _print(orchestrator.get_statistics())


def cmd_fraud_status() -> None:
    """Print fraud screener health."""
    with _orchestrator() as orchestrator:
        _print(orchestrator.get_fraud_screening_status())


def _dispatch(argv: list[str]) -> None:
    first = argv[0].lower()
    args = argv[1:]

    if first == "add-owner":
        if not args:
            _fail("add-owner requires <owner_id>")
        cmd_add_owner(args[0], *args[1:3])
    elif first == "submit":
        if len(args) < 2:
            _fail("submit requires <owner_id> <claim.json>")
        cmd_submit(args[0], Path(args[1]))
    elif first in ("status", "screen", "process", "remove"):
        if not args:
            _fail(f"{first} requires <claim_id>")
        {
            "status": cmd_status,
            "screen": cmd_screen,
            "process": cmd_process,
            "remove": cmd_remove,
        }[first](args[0])
    elif first == "update":
        if len(args) < 2:
            _fail("update requires <claim_id> <update.json>")
        cmd_update(args[0], Path(args[1]))
    elif first == "list":
        cmd_list(args[0] if args else None)
    elif first == "stats":
        cmd_stats()
    elif first == "fraud-status":
        cmd_fraud_status()
    else:
        print(f"Error: Unknown command: {first}", file=sys.stderr)
        print(_usage(), file=sys.stderr)
        sys.exit(1)


def main() -> None:
    """Run the claim lifecycle CLI."""
    argv = [arg for arg in sys.argv[1:] if not arg.startswith("--")]
    options = [arg for arg in sys.argv[1:] if arg.startswith("--")]

    if "--json" in options:
        os.environ["CLAIM_LIFECYCLE_LOG_FORMAT"] = "json"
    if "--debug" in options:
        os.environ["CLAIM_LIFECYCLE_LOG_LEVEL"] = "DEBUG"

    _setup_logging()

    if not argv:
        print(_usage(), file=sys.stderr)
        sys.exit(1)

    try:
        _dispatch(argv)
    except CollaboratorFailure as e:
        _fail(f"Claim processing failed: {e}")
    except ClaimLifecycleError as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
