from loguru import logger

from api._shared import (
    cors_headers,
    has_body,
    json_response,
    preflight_or_reject,
    raw_json_response,
    read_json,
    request_origin,
)
from planner.config.settings import get_settings
from planner.errors import ResendError
from planner.mail.resend import send_email

METHODS = ("POST", "OPTIONS")

DEFAULT_SUBJECT = {"pl": "Twój plan treningowy", "en": "Your training plan"}
DEFAULT_HTML = {"pl": "<p>W załączniku Twój plan.</p>", "en": "<p>Your plan is attached.</p>"}


def handler(request):
    settings = get_settings()
    headers = cors_headers(request_origin(request), METHODS, settings)
    early = preflight_or_reject(request, METHODS, headers)
    if early is not None:
        return early

    if not settings.resend_api_key:
        return json_response({"error": "RESEND_API_KEY not set"}, status=500, headers=headers)

    payload = read_json(request) if has_body(request) else {}
    if not isinstance(payload, dict):
        return json_response({"error": "Bad JSON"}, status=400, headers=headers)

    to = payload.get("to")
    if not to:
        return json_response({"error": 'Missing "to"'}, status=400, headers=headers)

    lang = "en" if str(payload.get("lang") or "pl").lower().startswith("en") else "pl"
    attachments = None
    if payload.get("attachmentBase64") and payload.get("filename"):
        attachments = [{"content": payload["attachmentBase64"], "filename": payload["filename"]}]
    html_body = payload.get("html")
    text_body = payload.get("text")
    if not html_body and not text_body:
        html_body = DEFAULT_HTML[lang]

    try:
        raw = send_email(
            settings.resend_api_key,
            settings.resend_from,
            to,
            payload.get("subject") or DEFAULT_SUBJECT[lang],
            html_body=html_body,
            text_body=text_body,
            attachments=attachments,
        )
    except ResendError as exc:
        logger.warning(f"Resend returned {exc.status}")
        return json_response({"error": "Resend error", "details": exc.body}, status=exc.status or 502, headers=headers)
    except Exception as exc:
        logger.exception("send-email failed")
        return json_response({"error": "Unhandled exception", "message": str(exc)}, status=500, headers=headers)
    return raw_json_response(raw or "{}", headers=headers)
