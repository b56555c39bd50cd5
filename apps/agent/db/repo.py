from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session as DBSession

from .models import AbilityRun, Event


def log_event(
    db: DBSession,
    caller_id: str,
    event_type: str,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    db.add(Event(
        caller_id=caller_id,
        event_type=event_type,
        payload_json=payload or {},
    ))


def create_run(
    db: DBSession,
    caller_id: str,
    request_id: str,
    ability_name: str,
    input_json: Dict[str, Any],
    status: str = "started",
) -> str:
    run = AbilityRun(
        caller_id=caller_id,
        request_id=request_id,
        ability_name=ability_name,
        status=status,
        input_json=input_json,
        output_json={},
        error_json={},
        latency_ms=0,
    )
    db.add(run)
    db.flush()  # assigns run_id
    return run.run_id


def finalize_run(
    db: DBSession,
    run_id: str,
    status: str,
    output_json: Dict[str, Any],
    error_json: Dict[str, Any],
    latency_ms: int,
) -> None:
    run: AbilityRun = db.get(AbilityRun, run_id)
    run.status = status
    run.output_json = output_json or {}
    run.error_json = error_json or {}
    run.latency_ms = latency_ms


def get_run(db: DBSession, run_id: str) -> AbilityRun | None:
    return db.get(AbilityRun, run_id)


def list_runs(db: DBSession, status: Optional[str] = None, limit: int = 20) -> list[AbilityRun]:
    stmt = select(AbilityRun)
    if status:
        stmt = stmt.where(AbilityRun.status == status)
    stmt = stmt.order_by(AbilityRun.ts.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())


def list_events(db: DBSession, event_type: Optional[str] = None, limit: int = 50) -> list[Event]:
    stmt = select(Event)
    if event_type:
        stmt = stmt.where(Event.event_type == event_type)
    stmt = stmt.order_by(Event.ts.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())
