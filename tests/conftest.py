"""Shared fixtures: a recording stub of the Brevo API and gateway factories.

The stub is an ``httpx.MockTransport`` so the real client code path runs
end to end; every request it receives is kept for assertions.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from brevo_platform.abilities import register_abilities
from brevo_platform.client import BrevoClient
from brevo_platform.config import API_KEY_OPTION, DictConfigStore
from brevo_platform.gateway import AbilityGateway
from brevo_platform.registry import AbilityRegistry

API_PREFIX = "/v3/"

ADMIN = {"user_id": "admin", "capabilities": ["manage_options"]}
SUBSCRIBER = {"user_id": "reader", "capabilities": ["read"]}


class StubUpstream:
    """Routes (method, path-under-/v3/) to queued responses and records requests."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[httpx.Response]] = {}
        self.error: Optional[Exception] = None

    def reply(self, method: str, path: str, status: int = 200, json_body: Any = None, text: Optional[str] = None):
        if text is not None:
            resp = httpx.Response(status, text=text)
        elif json_body is not None:
            resp = httpx.Response(status, json=json_body)
        else:
            resp = httpx.Response(status)
        self._routes.setdefault((method, path), []).append(resp)
        return self

    def fail_with(self, error: Exception):
        self.error = error
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        queue = self._routes.get((request.method, path))
        if not queue:
            return httpx.Response(404, json={"code": "not_found", "message": "No stub for route"})
        # last queued response repeats
        return queue.pop(0) if len(queue) > 1 else queue[0]

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def upstream() -> StubUpstream:
    return StubUpstream()


@pytest.fixture
def config() -> DictConfigStore:
    return DictConfigStore({API_KEY_OPTION: "xkeysib-test"})


@pytest.fixture
def registry() -> AbilityRegistry:
    return register_abilities(AbilityRegistry())


@pytest.fixture
def make_gateway(upstream, registry):
    def _make(config=None, audit=None) -> AbilityGateway:
        cfg = config if config is not None else DictConfigStore({API_KEY_OPTION: "xkeysib-test"})
        http = httpx.Client(transport=httpx.MockTransport(upstream))
        return AbilityGateway(registry, cfg, client=BrevoClient(cfg, http_client=http), audit=audit)

    return _make


@pytest.fixture
def gateway(make_gateway) -> AbilityGateway:
    return make_gateway()


@pytest.fixture
def admin() -> Dict[str, Any]:
    return dict(ADMIN)


@pytest.fixture
def subscriber() -> Dict[str, Any]:
    return dict(SUBSCRIBER)
