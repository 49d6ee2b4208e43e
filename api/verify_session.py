import stripe
from loguru import logger

from api._shared import (
    cors_headers,
    has_body,
    json_response,
    preflight_or_reject,
    query_params,
    read_json,
    request_origin,
)
from planner.billing.checkout import require_stripe_key, retrieve_session_status, stripe_error_message
from planner.config.settings import get_settings
from planner.errors import ConfigError

METHODS = ("GET", "POST", "OPTIONS")


def _session_id(request):
    """Returns (session_id, bad_json)."""
    if (getattr(request, "method", "") or "").upper() == "POST" and has_body(request):
        payload = read_json(request)
        if not isinstance(payload, dict):
            return None, True
        for key in ("session_id", "id", "sessionId"):
            if payload.get(key):
                return str(payload[key]).strip(), False
    params = query_params(request)
    for key in ("id", "session_id"):
        value = params.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if value:
            return str(value).strip(), False
    return None, False


def handler(request):
    settings = get_settings()
    headers = {**cors_headers(request_origin(request), METHODS, settings), "Cache-Control": "no-store"}
    early = preflight_or_reject(request, METHODS, headers)
    if early is not None:
        return early

    try:
        require_stripe_key(settings)
    except ConfigError as exc:
        return json_response({"ok": False, "error": str(exc)}, status=500, headers=headers)

    session_id, bad_json = _session_id(request)
    if bad_json:
        return json_response({"ok": False, "error": "Bad JSON"}, status=400, headers=headers)
    if not session_id:
        return json_response({"ok": False, "error": "Missing session id"}, status=400, headers=headers)

    try:
        status = retrieve_session_status(session_id, settings)
    except stripe.StripeError as exc:
        logger.warning(f"Stripe lookup for {session_id} failed: {exc}")
        return json_response(
            {"ok": False, "error": "verify-session failed", "details": stripe_error_message(exc)},
            status=500,
            headers=headers,
        )
    except Exception as exc:
        logger.exception("verify-session failed")
        return json_response(
            {"ok": False, "error": "verify-session failed", "details": str(exc)},
            status=500,
            headers=headers,
        )
    return json_response({"ok": True, **status}, headers=headers)
