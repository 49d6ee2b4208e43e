from __future__ import annotations

import json
from typing import Any, Dict, Optional

import stripe
from loguru import logger

from planner.config.constants import AI_PLAN_PAGE, CUSTOM_PLAN_PAGE, STRIPE_METADATA_MAX_LEN
from planner.config.settings import Settings
from planner.errors import ConfigError

CHECKOUT_SESSION_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def is_free_voucher(code: Any, settings: Settings) -> bool:
    normalized = str(code or "").strip().upper()
    return bool(normalized) and normalized in settings.free_vouchers


def price_for_product(product: Optional[str], settings: Settings) -> Optional[str]:
    if product == "custom":
        return settings.stripe_price_custom_id
    return settings.stripe_price_ai_id


def base_url(settings: Settings, origin: str = "", host: str = "", proto: str = "") -> Optional[str]:
    if settings.base_url:
        return settings.base_url.rstrip("/")
    if origin:
        return origin.rstrip("/")
    if host:
        return f"{proto or 'https'}://{host}".rstrip("/")
    return None


def return_urls(
    settings: Settings,
    product: Optional[str] = None,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
    origin: str = "",
    host: str = "",
    proto: str = "",
) -> Dict[str, Optional[str]]:
    page = CUSTOM_PLAN_PAGE if product == "custom" else AI_PLAN_PAGE
    base = base_url(settings, origin=origin, host=host, proto=proto)
    default_success = f"{base}{page}?session_id={CHECKOUT_SESSION_PLACEHOLDER}" if base else None
    default_cancel = f"{base}{page}?cancelled=1" if base else None
    return {
        "success_url": success_url or default_success,
        "cancel_url": cancel_url or default_cancel,
    }


def _metadata_inputs(inputs: Any) -> str:
    encoded = json.dumps(inputs or {}, ensure_ascii=False)
    if len(encoded) > STRIPE_METADATA_MAX_LEN:
        logger.warning(f"Checkout inputs truncated from {len(encoded)} to {STRIPE_METADATA_MAX_LEN} characters")
        encoded = encoded[:STRIPE_METADATA_MAX_LEN]
    return encoded


def require_stripe_key(settings: Settings) -> str:
    if not settings.stripe_secret_key:
        raise ConfigError("Missing STRIPE_SECRET_KEY")
    return settings.stripe_secret_key


def create_checkout_session(
    settings: Settings,
    price_id: str,
    email: Optional[str] = None,
    inputs: Any = None,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> Any:
    api_key = require_stripe_key(settings)
    params: Dict[str, Any] = {
        "mode": "payment",
        "line_items": [{"price": price_id, "quantity": 1}],
        "success_url": success_url,
        "cancel_url": cancel_url,
        "allow_promotion_codes": True,
        "billing_address_collection": "auto",
        "metadata": {"inputs": _metadata_inputs(inputs)},
    }
    if email:
        params["customer_email"] = email
    session = stripe.checkout.Session.create(api_key=api_key, **params)
    logger.info(f"Created checkout session {getattr(session, 'id', None)}")
    return session


def _as_dict(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {}


def retrieve_session_status(session_id: str, settings: Settings) -> Dict[str, Any]:
    session = stripe.checkout.Session.retrieve(session_id, api_key=require_stripe_key(settings))
    details = getattr(session, "customer_details", None)
    email = getattr(details, "email", None) if details is not None else None
    amount = getattr(session, "amount_total", None)
    return {
        "paid": getattr(session, "payment_status", None) == "paid",
        "email": email or getattr(session, "customer_email", None) or "",
        "amount_total": amount if isinstance(amount, int) else None,
        "currency": getattr(session, "currency", None),
        "metadata": _as_dict(getattr(session, "metadata", None)),
        "id": getattr(session, "id", None),
    }


def stripe_error_message(exc: Exception) -> str:
    message = getattr(exc, "user_message", None)
    return message or str(exc)
