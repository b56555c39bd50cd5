from __future__ import annotations

import pytest

from apps.agent.db import repo as dbrepo
from apps.agent.db.audit import SqlAuditLog
from apps.agent.db.engine import db_session, make_engine, make_session_factory
from apps.agent.db.models import Base


@pytest.fixture
def factory(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'audit.db'}")
    Base.metadata.create_all(bind=engine)
    return make_session_factory(engine)


@pytest.fixture
def audited(make_gateway, factory):
    return make_gateway(audit=SqlAuditLog(factory))


def test_successful_run_is_recorded(audited, upstream, admin, factory):
    upstream.reply("GET", "account", json_body={"companyName": "Example"})
    res = audited.run("brevo/get-account", {}, admin)
    assert res.success

    with db_session(factory) as db:
        runs = dbrepo.list_runs(db)
        events = dbrepo.list_events(db)

    assert len(runs) == 1
    run = runs[0]
    assert run.ability_name == "brevo/get-account"
    assert run.request_id == res.request_id
    assert run.caller_id == "admin"
    assert run.status == "ok"
    assert run.output_json["account"] == {"companyName": "Example"}
    assert run.error_json == {}

    assert sorted(e.event_type for e in events) == ["ability_called", "ability_succeeded"]


def test_failed_run_keeps_error(audited, upstream, subscriber, factory):
    res = audited.run("brevo/delete-list", {"listId": 3}, subscriber)
    assert not res.success
    assert upstream.requests == []

    with db_session(factory) as db:
        [run] = dbrepo.list_runs(db, status="error")
        [failed] = dbrepo.list_events(db, event_type="ability_failed")

    assert run.caller_id == "reader"
    assert run.input_json == {"listId": 3}
    assert run.error_json["code"] == "PERMISSION_DENIED"
    assert run.output_json == {
        "success": False,
        "message": "Permission denied: 'manage_options' capability required.",
    }
    assert failed.payload_json["error"]["code"] == "PERMISSION_DENIED"


def test_list_runs_filters_by_status(audited, upstream, admin, factory):
    upstream.reply("GET", "senders", json_body={"senders": []})
    audited.run("brevo/list-senders", {}, admin)
    audited.run("brevo/no-such-thing", {}, admin)

    with db_session(factory) as db:
        assert [r.ability_name for r in dbrepo.list_runs(db, status="ok")] == ["brevo/list-senders"]
        assert [r.ability_name for r in dbrepo.list_runs(db, status="error")] == ["brevo/no-such-thing"]
        assert len(dbrepo.list_runs(db, limit=1)) == 1


class _BrokenAudit:
    def start(self, *args, **kwargs):
        raise RuntimeError("database is locked")

    def finish(self, *args, **kwargs):
        raise AssertionError("finish must not run without a run id")


def test_audit_failure_does_not_fail_the_call(make_gateway, upstream, admin):
    upstream.reply("GET", "account", json_body={})
    gw = make_gateway(audit=_BrokenAudit())
    assert gw.invoke("brevo/get-account", {}, admin)["success"] is True
