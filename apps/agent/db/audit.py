from __future__ import annotations

from typing import Any, Dict

from sqlalchemy.orm import sessionmaker

from . import repo as dbrepo
from .engine import db_session


class SqlAuditLog:
    """Records each gateway run, plus ability_called/ability_failed/ability_succeeded events."""

    def __init__(self, factory: sessionmaker):
        self.factory = factory

    def start(self, ability_name: str, request_id: str, caller_id: str, input_json: Dict[str, Any]) -> str:
        with db_session(self.factory) as db:
            run_id = dbrepo.create_run(db, caller_id, request_id, ability_name, input_json=input_json)
            dbrepo.log_event(db, caller_id, "ability_called", {"ability_name": ability_name, "request_id": request_id})
        return run_id

    def finish(
        self,
        run_id: str,
        status: str,
        output_json: Dict[str, Any],
        error_json: Dict[str, Any],
        latency_ms: int,
    ) -> None:
        with db_session(self.factory) as db:
            dbrepo.finalize_run(db, run_id, status, output_json, error_json, latency_ms)
            run = dbrepo.get_run(db, run_id)

            payload: Dict[str, Any] = {"ability_name": run.ability_name, "request_id": run.request_id}
            if error_json:
                payload["error"] = error_json
            event_type = "ability_succeeded" if status == "ok" else "ability_failed"
            dbrepo.log_event(db, run.caller_id, event_type, payload)
