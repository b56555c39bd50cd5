from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol

import structlog
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from brevo_platform.client import BrevoClient, Err, UpstreamRequest, normalize
from brevo_platform.config import ConfigStore
from brevo_platform.errors import AbilityError, ErrorCode, RegistryError
from brevo_platform.policy import Caller, PermissionGate
from brevo_platform.registry import AbilityDescriptor, AbilityRegistry
from brevo_platform.schema import validate
from brevo_platform.schema.validator import StrictValidator

logger = structlog.get_logger()


class AuditSink(Protocol):
    def start(self, ability_name: str, request_id: str, caller_id: str, input_json: Dict[str, Any]) -> str:
        ...

    def finish(
        self,
        run_id: str,
        status: str,
        output_json: Dict[str, Any],
        error_json: Dict[str, Any],
        latency_ms: int,
    ) -> None:
        ...


@dataclass
class AbilityResult:
    status: str  # ok|error
    ability_name: str
    request_id: str
    payload: Dict[str, Any]           # always carries success + message
    error: Optional[Dict[str, Any]]
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.payload.get("success"))


class AbilityGateway:
    """
    Single choke point for running abilities.

    Per invocation:
    - Look up the descriptor
    - Validate parameters against its input schema
    - Check the caller against its permission rule
    - Build the upstream request and send it (one attempt)
    - Normalize the response and shape the ability result
    - Optionally validate the result against the output schema

    Every failure comes back as {"success": False, "message": ...}; nothing
    raises out of run().
    """

    def __init__(
        self,
        registry: AbilityRegistry,
        config: ConfigStore,
        client: Optional[BrevoClient] = None,
        gate: Optional[PermissionGate] = None,
        audit: Optional[AuditSink] = None,
    ):
        self.registry = registry
        self.config = config
        self._owns_client = client is None
        self.client = client or BrevoClient(config)
        self.gate = gate or PermissionGate()
        self.audit = audit

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "AbilityGateway":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def invoke(
        self,
        ability_name: str,
        params: Optional[Mapping[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        return self.run(ability_name, params, context).payload

    def run(
        self,
        ability_name: str,
        params: Optional[Mapping[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
        validate_output: bool = True,
    ) -> AbilityResult:
        request_id = str(uuid.uuid4())
        t0 = time.time()
        caller = Caller.from_context(context)
        log = logger.bind(ability=ability_name, request_id=request_id, user_id=caller.user_id)
        log.info("ability_called")

        run_id = self._audit_start(ability_name, request_id, caller, params)

        try:
            res = self._execute(ability_name, params, caller, request_id, validate_output)
        except AbilityError as ae:
            res = self._err(ability_name, request_id, ae.code, ae.message, ae.details)
        except Exception as e:
            log.exception("ability_crashed")
            res = self._err(
                ability_name,
                request_id,
                ErrorCode.INTERNAL_ERROR,
                f"Ability execution failed: {e}",
                {"error": str(e)},
            )

        res.meta["latency_ms"] = self._ms_since(t0)
        if res.status == "ok":
            log.info("ability_succeeded", latency_ms=res.meta["latency_ms"])
        else:
            log.info("ability_failed", code=(res.error or {}).get("code"), latency_ms=res.meta["latency_ms"])

        self._audit_finish(run_id, res)
        return res

    def _execute(
        self,
        ability_name: str,
        params: Optional[Mapping[str, Any]],
        caller: Caller,
        request_id: str,
        validate_output: bool,
    ) -> AbilityResult:
        # ---- Lookup ----
        try:
            ability = self.registry.get(ability_name)
        except RegistryError:
            raise AbilityError(ErrorCode.NOT_FOUND, f"Unknown ability '{ability_name}'")

        # ---- Input validation (ValidationError is an AbilityError) ----
        validated = validate(ability.input_schema, params)

        # ---- Permission ----
        if not self.gate.authorize(ability.permission, caller):
            raise AbilityError(
                ErrorCode.PERMISSION_DENIED,
                f"Permission denied: '{ability.permission.capability}' capability required.",
                {"user_id": caller.user_id},
            )

        # ---- Build request ----
        built = ability.build_request(validated, self.config)
        if not isinstance(built, UpstreamRequest):
            # handler finished without a network call
            if built.get("success"):
                return self._ok(ability_name, request_id, built)
            raise AbilityError(ErrorCode.HANDLER_REJECTED, built.get("message", "Request rejected."))

        # ---- Send + normalize (ConfigurationError / TransportError propagate) ----
        outcome = normalize(self.client.send(built))
        if isinstance(outcome, Err):
            raise AbilityError(
                ErrorCode.UPSTREAM_ERROR,
                outcome.message,
                {"status_code": outcome.status_code, "upstream_code": outcome.code},
            )

        out = ability.shape_result(outcome.data, validated)

        # ---- Output validation ----
        if validate_output:
            self._check_output(ability, out)

        return self._ok(ability_name, request_id, out)

    @staticmethod
    def _check_output(ability: AbilityDescriptor, out: Dict[str, Any]) -> None:
        try:
            StrictValidator(ability.output_schema.to_json_schema()).validate(out)
        except JsonSchemaValidationError as ve:
            raise AbilityError(
                ErrorCode.INTERNAL_ERROR,
                f"Output validation failed: {ve.message}",
                {"path": [str(p) for p in ve.path]},
            )

    def _audit_start(
        self,
        ability_name: str,
        request_id: str,
        caller: Caller,
        params: Optional[Mapping[str, Any]],
    ) -> Optional[str]:
        if self.audit is None:
            return None
        input_json = dict(params) if isinstance(params, Mapping) else {"raw": repr(params)}
        try:
            return self.audit.start(ability_name, request_id, caller.user_id, input_json)
        except Exception:
            logger.exception("audit_start_failed", ability=ability_name, request_id=request_id)
            return None

    def _audit_finish(self, run_id: Optional[str], res: AbilityResult) -> None:
        if self.audit is None or run_id is None:
            return
        try:
            self.audit.finish(run_id, res.status, res.payload, res.error or {}, res.meta["latency_ms"])
        except Exception:
            logger.exception("audit_finish_failed", request_id=res.request_id)

    @staticmethod
    def _ms_since(t0: float) -> int:
        return int((time.time() - t0) * 1000)

    @staticmethod
    def _ok(ability_name: str, request_id: str, out: Dict[str, Any]) -> AbilityResult:
        return AbilityResult(
            status="ok",
            ability_name=ability_name,
            request_id=request_id,
            payload=out,
            error=None,
            meta={"source": "gateway"},
        )

    @staticmethod
    def _err(
        ability_name: str,
        request_id: str,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]],
    ) -> AbilityResult:
        return AbilityResult(
            status="error",
            ability_name=ability_name,
            request_id=request_id,
            payload={"success": False, "message": message},
            error={"code": code, "message": message, "details": details or {}},
            meta={"source": "gateway"},
        )
