import json
import math
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from fastapi.responses import Response

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner.config.constants import CORS_ALLOW_HEADERS, CORS_MAX_AGE  # noqa: E402
from planner.config.settings import Settings, get_settings  # noqa: E402
from planner.logging_config import configure_logging  # noqa: E402

configure_logging(get_settings().log_level)


@dataclass
class HandlerRequest:
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    query: dict[str, Any] = field(default_factory=dict)


def json_response(payload: Any, status: int = 200, headers: Optional[dict[str, str]] = None) -> Response:
    merged = {**(headers or {}), "Content-Type": "application/json; charset=utf-8"}
    return Response(json.dumps(payload, ensure_ascii=False), status_code=status, headers=merged)


def raw_json_response(body: str, status: int = 200, headers: Optional[dict[str, str]] = None) -> Response:
    merged = {**(headers or {}), "Content-Type": "application/json; charset=utf-8"}
    return Response(body, status_code=status, headers=merged)


def empty_response(status: int = 204, headers: Optional[dict[str, str]] = None) -> Response:
    return Response(status_code=status, headers=headers or {})


def _get_body(request) -> bytes:
    body = getattr(request, "body", b"") or b""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return body


def has_body(request) -> bool:
    return bool(_get_body(request).strip())


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-finite number {name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number {text} is out of range")
    return value


def read_json(request) -> Optional[Any]:
    body = _get_body(request)
    if not body:
        return None
    try:
        return json.loads(body.decode("utf-8"), parse_float=_finite_float, parse_constant=_reject_constant)
    except ValueError:
        return None


def query_params(request) -> dict[str, Any]:
    params = getattr(request, "query", None)
    if isinstance(params, dict):
        return params
    params = getattr(request, "args", None)
    if isinstance(params, dict):
        return params
    return {}


def request_header(request, name: str) -> str:
    headers = getattr(request, "headers", None) or {}
    wanted = name.lower()
    for key, value in dict(headers).items():
        if str(key).lower() == wanted:
            return str(value or "")
    return ""


def request_origin(request) -> str:
    return request_header(request, "origin").strip()


def cors_headers(origin: str, methods: Iterable[str], settings: Optional[Settings] = None) -> dict[str, str]:
    settings = settings or get_settings()
    allow = origin if origin and origin in settings.allowed_origins else "*"
    return {
        "Access-Control-Allow-Origin": allow,
        "Access-Control-Allow-Methods": ", ".join(methods),
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        "Access-Control-Max-Age": CORS_MAX_AGE,
        "Vary": "Origin",
    }


def preflight_or_reject(request, methods: Iterable[str], headers: dict[str, str]) -> Optional[Response]:
    """Answer OPTIONS and disallowed methods; ``None`` means the handler should continue."""
    method = (getattr(request, "method", "") or "").upper()
    if method == "OPTIONS":
        return empty_response(204, headers)
    if method not in {m.upper() for m in methods if m.upper() != "OPTIONS"}:
        return json_response({"error": "Method not allowed"}, status=405, headers=headers)
    return None
