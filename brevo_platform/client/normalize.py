from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple, Union

from .api import RawResponse


@dataclass(frozen=True)
class Ok:
    data: Any
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Err:
    message: str
    status_code: Optional[int] = None
    code: Optional[str] = None
    ok: ClassVar[bool] = False


Outcome = Union[Ok, Err]


def _parse(text: str) -> Tuple[bool, Any]:
    if not text.strip():
        return False, None
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        return False, None


def normalize(raw: RawResponse) -> Outcome:
    """Classify one HTTP response. Never raises."""
    text = raw.text or ""
    is_json, parsed = _parse(text)

    if 200 <= raw.status_code < 300:
        if is_json:
            return Ok(parsed)
        return Ok({"raw": text} if text.strip() else None)

    body = parsed if isinstance(parsed, dict) else {}
    message = body.get("message")
    if message in (None, ""):
        message = "Unknown error"
    code = body.get("code")
    detail = f"{code}: {message}" if code not in (None, "") else str(message)

    status = f"{raw.status_code} {raw.reason_phrase or ''}".strip()
    return Err(
        message=f"API error ({status}): {detail}",
        status_code=raw.status_code,
        code=str(code) if code not in (None, "") else None,
    )
