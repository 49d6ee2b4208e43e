from __future__ import annotations

import html
import json
import re
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from loguru import logger

from planner.config.constants import HTTP_TIMEOUT_SECONDS, RESEND_URL
from planner.errors import ResendError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$", re.IGNORECASE)


def is_email(value: Any) -> bool:
    return isinstance(value, str) and bool(_EMAIL_RE.match(value.strip()))


def _resend_headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "User-Agent": "hybridplanner-functions",
    }


def send_email(
    api_key: str,
    sender: str,
    to: Any,
    subject: str,
    html_body: Optional[str] = None,
    text_body: Optional[str] = None,
    attachments: Optional[List[Dict[str, str]]] = None,
) -> str:
    """Send one message through Resend and return the raw response body."""
    payload: Dict[str, Any] = {
        "from": sender,
        "to": to if isinstance(to, list) else [to],
        "subject": subject,
    }
    if html_body:
        payload["html"] = html_body
    if text_body:
        payload["text"] = text_body
    if attachments:
        payload["attachments"] = attachments
    body = json.dumps(payload).encode("utf-8")
    request = Request(RESEND_URL, data=body, headers=_resend_headers(api_key), method="POST")
    try:
        with urlopen(request, timeout=HTTP_TIMEOUT_SECONDS) as response:
            raw = response.read().decode("utf-8")
    except HTTPError as exc:
        detail = exc.read().decode("utf-8") if exc.fp else ""
        raise ResendError(exc.code, detail) from exc
    logger.info(f"Email sent to {payload['to']}")
    return raw


def plan_email_html(title: str, body: str, lang: str = "pl") -> str:
    intro = (
        "Your plan is attached below. Keep this message."
        if lang == "en"
        else "Poniżej znajdziesz swój plan. Zachowaj tę wiadomość."
    )
    return (
        '<div style="font-family:Inter,Arial,sans-serif;background:#0f0f0f;color:#ededea;padding:16px">'
        '<div style="max-width:720px;margin:0 auto;background:#151515;border:1px solid #2a2a2a;'
        'border-radius:12px;padding:16px">'
        f'<h2 style="margin:0 0 10px;color:#fff;font-weight:700">{html.escape(title)}</h2>'
        f'<p style="margin:0 0 14px;color:#c9c7c2">{intro}</p>'
        '<pre style="white-space:pre-wrap;word-wrap:break-word;'
        'font:14px/1.5 ui-monospace,Menlo,Consolas,monospace;color:#eee">'
        f"{html.escape(body)}</pre>"
        "</div></div>"
    )


def send_plan_email(
    api_key: str,
    sender: str,
    to: str,
    title: str,
    body: str,
    lang: str = "pl",
    attachment_base64: Optional[str] = None,
    filename: Optional[str] = None,
) -> str:
    subject = f"{title} — Your generated plan" if lang == "en" else f"{title} — Twój wygenerowany plan"
    attachments = None
    if attachment_base64 and filename:
        attachments = [{"content": attachment_base64, "filename": filename}]
    return send_email(
        api_key,
        sender,
        to,
        subject,
        html_body=plan_email_html(title, body, lang),
        text_body=body,
        attachments=attachments,
    )
