from urllib.error import URLError

from loguru import logger

from api._shared import cors_headers, has_body, json_response, preflight_or_reject, read_json, request_origin
from planner.config.settings import get_settings
from planner.config.constants import LLM_MAX_TOKENS, LLM_TEMPERATURE, PLAN_FILENAME, XLSX_MIME
from planner.errors import PlanParseError, ResendError
from planner.export.workbook import LAYOUT_SHEETS, LAYOUT_SINGLE, workbook_base64
from planner.llm.providers import configured_providers, run_cascade
from planner.mail.resend import is_email, send_plan_email
from planner.plan.exercise_bank import allowed_vocabulary
from planner.plan.parsing import format_plan_text, parse_plan_text, plan_from_llm_json
from planner.plan.plan_generation import generate_rule_plan, normalize_inputs
from planner.plan.validation import validate_plan
from planner.prompts.system_prompt import (
    JSON_PLAN_SYSTEM_PROMPT,
    build_default_prompt,
    build_json_plan_prompt,
    plan_title,
    text_plan_system_prompt,
)

METHODS = ("POST", "OPTIONS")
OUTPUTS = {"xlsx", "text"}
ENGINES = {"llm", "rules"}
LAYOUTS = {LAYOUT_SHEETS, LAYOUT_SINGLE}
JSON_PLAN_TEMPERATURE = 0.4


def _lang(payload: dict, inputs: dict) -> str:
    raw = str(payload.get("lang") or inputs.get("lang") or "pl").lower()
    return "en" if raw.startswith("en") else "pl"


def _seed(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _recipient(payload: dict, inputs: dict):
    email = inputs.get("email") or payload.get("email")
    return email.strip() if is_email(email) else None


def _deliver(response: dict, settings, to, title: str, body: str, lang: str, file_b64=None, filename=None) -> None:
    response["emailed"] = False
    response["emailError"] = ""
    if not to or not settings.resend_api_key:
        return
    try:
        send_plan_email(
            settings.resend_api_key,
            settings.resend_from,
            to,
            title,
            body,
            lang=lang,
            attachment_base64=file_b64,
            filename=filename,
        )
        response["emailed"] = True
    except ResendError as exc:
        logger.warning(f"Plan email rejected by Resend ({exc.status})")
        response["emailError"] = exc.body or str(exc)
    except (URLError, OSError) as exc:
        logger.warning(f"Plan email failed: {exc}")
        response["emailError"] = str(exc)


def _text_output(payload, inputs_raw, settings, providers, engine, mode, lang, layout, headers):
    name = plan_title(mode, lang, payload.get("title"))
    if engine == "rules":
        plan = generate_rule_plan(normalize_inputs(inputs_raw, lang=lang), seed=_seed(payload.get("seed")))
        plan.name = name
        text = format_plan_text(plan, lang)
        response = {"planText": text, "planName": name, "source": plan.source}
    else:
        prompt = payload.get("prompt")
        if prompt is not None and not isinstance(prompt, str):
            return json_response({"error": 'Invalid "prompt"'}, status=400, headers=headers)
        prompt = (prompt or "").strip() or build_default_prompt(mode, inputs_raw, lang)
        messages = [
            {"role": "system", "content": text_plan_system_prompt(lang)},
            {"role": "user", "content": prompt},
        ]
        cascade = run_cascade(providers, messages, temperature=LLM_TEMPERATURE, max_tokens=LLM_MAX_TOKENS)
        if not cascade.ok:
            failure = cascade.last_failure
            if failure is None or failure.status is None:
                message = failure.error if failure else "No provider answered."
                return json_response({"error": message or "Empty content"}, status=500, headers=headers)
            return json_response(
                {"error": f"{failure.provider} error", "details": failure.error},
                status=failure.status,
                headers=headers,
            )
        text = cascade.result.text
        plan = parse_plan_text(text, lang=lang, name=name)
        response = {"planText": text, "planName": name, "source": "llm", "provider": cascade.result.provider}

    file_b64 = None
    if plan.training_days:
        file_b64 = workbook_base64(plan, lang, layout)
        response.update({"fileBase64": file_b64, "filename": PLAN_FILENAME[lang], "mime": XLSX_MIME})
    _deliver(
        response,
        settings,
        _recipient(payload, inputs_raw),
        name,
        response["planText"],
        lang,
        file_b64=file_b64,
        filename=PLAN_FILENAME[lang] if file_b64 else None,
    )
    return json_response(response, headers=headers)


def _llm_plan(inputs, inputs_raw, providers, lang):
    """Ask the cascade for a JSON plan; returns (plan, fallback_reason, provider)."""
    vocabulary = allowed_vocabulary()
    messages = [
        {"role": "system", "content": JSON_PLAN_SYSTEM_PROMPT},
        {"role": "user", "content": build_json_plan_prompt(inputs, vocabulary, extra=inputs_raw)},
    ]
    cascade = run_cascade(
        providers,
        messages,
        temperature=JSON_PLAN_TEMPERATURE,
        max_tokens=LLM_MAX_TOKENS,
        json_mode=True,
    )
    if not cascade.ok:
        failure = cascade.last_failure
        reason = f"{failure.provider} error ({failure.status})" if failure else "No provider answered."
        return None, reason, None
    provider = cascade.result.provider
    try:
        plan = plan_from_llm_json(cascade.result.text, lang=lang)
    except PlanParseError as exc:
        logger.warning(f"Unusable JSON plan from {provider}: {exc}")
        return None, str(exc), provider
    errors = validate_plan(plan, expected_days=inputs.sessions_per_week, vocabulary=vocabulary)
    if errors:
        logger.warning(f"JSON plan from {provider} failed validation: {errors}")
        return None, "; ".join(errors[:3]), provider
    return plan, None, provider


def _xlsx_output(payload, inputs_raw, settings, providers, engine, mode, lang, layout, headers):
    inputs = normalize_inputs(inputs_raw, lang=lang)
    plan, reason, provider = None, None, None
    if engine == "llm":
        plan, reason, provider = _llm_plan(inputs, inputs_raw, providers, lang)
    if plan is None:
        plan = generate_rule_plan(inputs, seed=_seed(payload.get("seed")))
    if payload.get("title"):
        plan.name = payload["title"]
    elif not plan.name:
        plan.name = plan_title(mode, lang)

    file_b64 = workbook_base64(plan, lang, layout)
    response = {
        "ok": True,
        "planName": plan.name,
        "source": plan.source,
        "fileBase64": file_b64,
        "filename": PLAN_FILENAME[lang],
        "mime": XLSX_MIME,
        "plan": plan.to_dict(),
    }
    if provider:
        response["provider"] = provider
    if reason:
        response["fallbackReason"] = reason
    _deliver(
        response,
        settings,
        _recipient(payload, inputs_raw),
        plan.name,
        format_plan_text(plan, lang),
        lang,
        file_b64=file_b64,
        filename=PLAN_FILENAME[lang],
    )
    return json_response(response, headers=headers)


def handler(request):
    settings = get_settings()
    headers = cors_headers(request_origin(request), METHODS, settings)
    early = preflight_or_reject(request, METHODS, headers)
    if early is not None:
        return early

    payload = read_json(request) if has_body(request) else {}
    if not isinstance(payload, dict):
        return json_response({"error": "Bad JSON"}, status=400, headers=headers)

    try:
        inputs_raw = payload.get("inputs") if isinstance(payload.get("inputs"), dict) else {}
        lang = _lang(payload, inputs_raw)
        mode = "B" if str(payload.get("mode") or "A").upper() == "B" else "A"
        output = str(payload.get("output") or "xlsx").lower()
        engine = str(payload.get("engine") or ("rules" if settings.disable_llm else "llm")).lower()
        layout = str(payload.get("layout") or LAYOUT_SHEETS).lower()
        if output not in OUTPUTS:
            return json_response({"error": f"Unknown output: {output}"}, status=400, headers=headers)
        if engine not in ENGINES:
            return json_response({"error": f"Unknown engine: {engine}"}, status=400, headers=headers)
        if layout not in LAYOUTS:
            return json_response({"error": f"Unknown layout: {layout}"}, status=400, headers=headers)

        if engine == "llm" and not settings.has_llm_provider:
            return json_response(
                {"error": "OPENAI_API_KEY / GROQ_API_KEY / OPENROUTER_API_KEY not set"},
                status=500,
                headers=headers,
            )

        providers = configured_providers(settings) if engine == "llm" else []
        build = _text_output if output == "text" else _xlsx_output
        return build(payload, inputs_raw, settings, providers, engine, mode, lang, layout, headers)
    except Exception as exc:
        logger.exception("generate-plan failed")
        return json_response({"error": "Unhandled exception", "message": str(exc)}, status=500, headers=headers)
