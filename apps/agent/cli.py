from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Optional

from brevo_platform.abilities import register_abilities
from brevo_platform.config import API_KEY_ENV, API_KEY_OPTION, ConfigStore, DictConfigStore, YamlConfigStore
from brevo_platform.errors import ConfigError, RegistryError
from brevo_platform.gateway import AbilityGateway
from brevo_platform.logging import configure_logging
from brevo_platform.registry import AbilityRegistry

from apps.agent.db import repo as dbrepo
from apps.agent.db.audit import SqlAuditLog
from apps.agent.db.engine import db_session, make_engine, make_session_factory
from apps.agent.db.init_db import init_db
from apps.agent.db.models import Base

DEFAULT_CONFIG = Path("config") / "brevo.yaml"


def make_registry() -> AbilityRegistry:
    return register_abilities(AbilityRegistry())


def load_config(path: Optional[str]) -> ConfigStore:
    if path:
        return YamlConfigStore.from_path(Path(path))
    if DEFAULT_CONFIG.exists():
        return YamlConfigStore.from_path(DEFAULT_CONFIG)
    # no file: the API key may still come from the environment
    return DictConfigStore({API_KEY_OPTION: os.getenv(API_KEY_ENV, "")})


def audit_factory():
    engine = make_engine()
    Base.metadata.create_all(bind=engine)
    return make_session_factory(engine)


def make_gateway(args) -> AbilityGateway:
    audit = SqlAuditLog(audit_factory()) if args.audit else None
    return AbilityGateway(make_registry(), load_config(args.config), audit=audit)


def default_context(args) -> dict:
    # local operator; capabilities come from the command line
    return {"user_id": os.getenv("USER", "cli"), "capabilities": args.capability or ["manage_options"]}


def cmd_list(args):
    registry = make_registry()
    for name in registry:
        d = registry.get(name)
        a = d.annotations
        flags = ",".join(k for k, v in a.to_json().items() if v) or "-"
        print(f"- {name:<28} {d.label} [{flags}]")


def cmd_describe(args):
    try:
        d = make_registry().get(args.ability)
    except RegistryError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(d.to_json(), indent=2))
    return 0


def cmd_run(args):
    try:
        payload = json.loads(args.json)
    except json.JSONDecodeError as e:
        print(f"error: invalid JSON payload: {e}", file=sys.stderr)
        return 2

    try:
        gw = make_gateway(args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    with gw:
        res = gw.run(args.ability, payload, default_context(args))
    print(json.dumps(res.payload, indent=2))
    if res.error:
        print(f"error code: {res.error['code']}", file=sys.stderr)
    return 0 if res.success else 1


def cmd_init_db(args):
    init_db()
    print("DB initialized (tables created).")
    return 0


def cmd_runs(args):
    factory = audit_factory()
    with db_session(factory) as db:
        runs = dbrepo.list_runs(db, status=args.status, limit=args.limit)

    if not runs:
        print("No ability runs recorded.")
        return 0

    for r in runs:
        print(
            f"- run_id={r.run_id} ts={r.ts} ability={r.ability_name} status={r.status} "
            f"caller={r.caller_id} latency_ms={r.latency_ms}"
        )
    return 0


def main(argv=None):
    p = argparse.ArgumentParser(prog="brevo-abilities")
    p.add_argument("--log-level", default="WARNING")
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List registered abilities.")
    ls.set_defaults(func=cmd_list)

    ds = sub.add_parser("describe", help="Show an ability's input/output schemas.")
    ds.add_argument("ability", help="Ability name, e.g. brevo/list-contacts")
    ds.set_defaults(func=cmd_describe)

    runp = sub.add_parser("run", help="Run an ability with a JSON payload.")
    runp.add_argument("ability", help="Ability name, e.g. brevo/list-contacts")
    runp.add_argument("json", nargs="?", default="{}", help='JSON payload, e.g. \'{"limit": 10}\'')
    runp.add_argument("--config", help=f"YAML config file (default {DEFAULT_CONFIG})")
    runp.add_argument(
        "--capability",
        action="append",
        default=None,
        help="Capability held by the caller (repeatable, default manage_options).",
    )
    runp.add_argument("--audit", action="store_true", help="Record the run in the audit database.")
    runp.set_defaults(func=cmd_run)

    ini = sub.add_parser("init-db", help="Create audit tables.")
    ini.set_defaults(func=cmd_init_db)

    rs = sub.add_parser("runs", help="List recorded ability runs.")
    rs.add_argument("--status", choices=["ok", "error", "started"])
    rs.add_argument("--limit", type=int, default=20)
    rs.set_defaults(func=cmd_runs)

    args = p.parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args) or 0


if __name__ == "__main__":
    sys.exit(main())
