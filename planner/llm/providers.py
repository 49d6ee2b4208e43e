from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from loguru import logger
from openai import APIConnectionError, APIStatusError, OpenAI, OpenAIError

from planner.config.constants import (
    GROQ_BASE_URL,
    LLM_MAX_TOKENS,
    LLM_TEMPERATURE,
    LLM_TIMEOUT_SECONDS,
    OPENAI_BASE_URL,
    OPENROUTER_BASE_URL,
)
from planner.config.settings import Settings

_MODEL_ERROR_CODES = {"model_not_found", "model_decommissioned"}


@dataclass(frozen=True)
class Provider:
    name: str
    api_key: str
    base_url: str
    model: str
    fallback_model: Optional[str] = None


@dataclass
class ProviderResult:
    provider: str
    ok: bool
    text: str = ""
    status: Optional[int] = None
    error: Optional[str] = None
    model: Optional[str] = None


@dataclass
class CascadeResult:
    result: Optional[ProviderResult] = None
    failures: List[ProviderResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.result is not None and self.result.ok

    @property
    def last_failure(self) -> Optional[ProviderResult]:
        return self.failures[-1] if self.failures else None


def configured_providers(settings: Settings) -> List[Provider]:
    """OpenAI, then Groq, then OpenRouter; providers without a key are skipped."""
    providers: List[Provider] = []
    if settings.openai_api_key:
        providers.append(Provider("OpenAI", settings.openai_api_key, OPENAI_BASE_URL, settings.openai_model))
    if settings.groq_api_key:
        providers.append(
            Provider(
                "Groq",
                settings.groq_api_key,
                GROQ_BASE_URL,
                settings.groq_model,
                fallback_model=settings.groq_fallback_model,
            )
        )
    if settings.openrouter_api_key:
        providers.append(
            Provider("OpenRouter", settings.openrouter_api_key, OPENROUTER_BASE_URL, settings.openrouter_model)
        )
    return providers


def _error_code(exc: OpenAIError) -> Optional[str]:
    code = getattr(exc, "code", None)
    if code:
        return str(code)
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        nested = body.get("error") if isinstance(body.get("error"), dict) else body
        if nested.get("code"):
            return str(nested.get("code"))
    return None


def _error_details(exc: APIStatusError) -> str:
    response = getattr(exc, "response", None)
    text = getattr(response, "text", None) if response is not None else None
    return text or str(exc)


def _should_try_fallback_model(exc: APIStatusError) -> bool:
    return exc.status_code == 404 or _error_code(exc) in _MODEL_ERROR_CODES


def _chat_once(
    client: Any,
    model: str,
    messages: List[Dict[str, str]],
    temperature: float,
    max_tokens: int,
    json_mode: bool,
) -> str:
    args: Dict[str, Any] = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        args["response_format"] = {"type": "json_object"}
    completion = client.chat.completions.create(**args)
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    content = choices[0].message.content
    return (content or "").strip()


def complete_chat(
    provider: Provider,
    messages: List[Dict[str, str]],
    temperature: float = LLM_TEMPERATURE,
    max_tokens: int = LLM_MAX_TOKENS,
    json_mode: bool = False,
    client_factory: Optional[Callable[..., Any]] = None,
) -> ProviderResult:
    factory = client_factory or OpenAI
    client = factory(
        api_key=provider.api_key,
        base_url=provider.base_url,
        max_retries=0,
        timeout=LLM_TIMEOUT_SECONDS,
    )
    models = [provider.model]
    if provider.fallback_model and provider.fallback_model != provider.model:
        models.append(provider.fallback_model)
    for index, model in enumerate(models):
        try:
            text = _chat_once(client, model, messages, temperature, max_tokens, json_mode)
        except APIStatusError as exc:
            if index + 1 < len(models) and _should_try_fallback_model(exc):
                logger.warning(f"{provider.name} model {model} unavailable ({exc.status_code}), trying {models[index + 1]}")
                continue
            return ProviderResult(provider.name, False, status=exc.status_code, error=_error_details(exc), model=model)
        except APIConnectionError as exc:
            return ProviderResult(provider.name, False, status=502, error=str(exc), model=model)
        except OpenAIError as exc:
            return ProviderResult(provider.name, False, error=str(exc), model=model)
        if not text:
            return ProviderResult(provider.name, False, error=f"{provider.name} returned empty content.", model=model)
        return ProviderResult(provider.name, True, text=text, status=200, model=model)
    return ProviderResult(provider.name, False, error="No model available.")


def run_cascade(
    providers: List[Provider],
    messages: List[Dict[str, str]],
    **kwargs: Any,
) -> CascadeResult:
    outcome = CascadeResult()
    for provider in providers:
        result = complete_chat(provider, messages, **kwargs)
        if result.ok:
            logger.info(f"LLM response from {provider.name} ({result.model})")
            outcome.result = result
            return outcome
        logger.warning(f"{provider.name} failed with status {result.status}: {(result.error or '')[:200]}")
        outcome.failures.append(result)
    return outcome
