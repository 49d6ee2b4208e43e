import stripe
from loguru import logger

from api._shared import (
    cors_headers,
    has_body,
    json_response,
    preflight_or_reject,
    read_json,
    request_header,
    request_origin,
)
from planner.billing.checkout import (
    create_checkout_session,
    is_free_voucher,
    price_for_product,
    require_stripe_key,
    return_urls,
    stripe_error_message,
)
from planner.config.settings import get_settings
from planner.errors import ConfigError
from planner.mail.resend import is_email

METHODS = ("POST", "OPTIONS")


def handler(request):
    settings = get_settings()
    origin = request_origin(request)
    headers = cors_headers(origin, METHODS, settings)
    early = preflight_or_reject(request, METHODS, headers)
    if early is not None:
        return early

    payload = read_json(request) if has_body(request) else {}
    if not isinstance(payload, dict):
        return json_response({"ok": False, "error": "Bad JSON"}, status=400, headers=headers)

    # vouchers never reach Stripe, so they work without a key
    if is_free_voucher(payload.get("voucher"), settings):
        logger.info("Free voucher accepted")
        return json_response({"ok": True, "free": True}, headers=headers)

    try:
        require_stripe_key(settings)
    except ConfigError as exc:
        return json_response({"ok": False, "error": str(exc)}, status=500, headers=headers)

    product = str(payload.get("product") or "ai").lower()
    price_id = price_for_product(product, settings)
    if not price_id:
        return json_response(
            {"ok": False, "error": "Missing Stripe price id", "details": {"product": product}},
            status=400,
            headers=headers,
        )

    urls = return_urls(
        settings,
        product,
        success_url=payload.get("successUrl"),
        cancel_url=payload.get("cancelUrl"),
        origin=origin if origin in settings.allowed_origins else "",
        host=request_header(request, "x-forwarded-host") or request_header(request, "host"),
        proto=request_header(request, "x-forwarded-proto"),
    )
    email = payload.get("email")
    try:
        session = create_checkout_session(
            settings,
            price_id,
            email=email.strip() if is_email(email) else None,
            inputs=payload.get("inputs"),
            **urls,
        )
    except stripe.StripeError as exc:
        logger.warning(f"Stripe rejected checkout: {exc}")
        return json_response(
            {"ok": False, "error": "create-checkout failed", "details": stripe_error_message(exc)},
            status=500,
            headers=headers,
        )
    except Exception as exc:
        logger.exception("create-checkout failed")
        return json_response(
            {"ok": False, "error": "create-checkout failed", "details": str(exc)},
            status=500,
            headers=headers,
        )
    return json_response({"ok": True, "url": session.url, "id": session.id}, headers=headers)
