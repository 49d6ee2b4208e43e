import json
from types import SimpleNamespace

import pytest

from api._shared import HandlerRequest
from planner.llm import providers

ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "GROQ_FALLBACK_MODEL",
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODEL",
    "PLANNER_DISABLE_LLM",
    "STRIPE_SECRET_KEY",
    "STRIPE_PRICE_AI_ID",
    "STRIPE_PRICE_ID",
    "STRIPE_PRICE_CUSTOM_ID",
    "FREE_VOUCHER_CODES",
    "RESEND_API_KEY",
    "RESEND_FROM",
    "ALLOWED_ORIGINS",
    "BASE_URL",
    "LOG_LEVEL",
)

ALLOWED_ORIGIN = "https://tgmproject.net"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_request(method="POST", body=None, headers=None, query=None):
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    return HandlerRequest(
        method=method,
        headers={"origin": ALLOWED_ORIGIN, **(headers or {})},
        body=body or b"",
        query=query or {},
    )


def response_json(response):
    return json.loads(response.body.decode("utf-8"))


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeLLM:
    """Stands in for the OpenAI client class; replies are consumed in order."""

    def __init__(self):
        self.replies = []
        self.clients = []
        self.calls = []

    def __call__(self, **kwargs):
        client = SimpleNamespace(options=kwargs)
        client.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self.clients.append(client)
        return client

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return completion(reply)


@pytest.fixture
def fake_llm(monkeypatch):
    fake = FakeLLM()
    monkeypatch.setattr(providers, "OpenAI", fake)
    return fake


class FakeResponse:
    def __init__(self, body):
        self._body = body

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_resend(monkeypatch):
    sent = []

    def fake_urlopen(request, timeout=None):
        sent.append({"url": request.full_url, "payload": json.loads(request.data.decode("utf-8"))})
        return FakeResponse(b'{"id":"email_123"}')

    monkeypatch.setattr("planner.mail.resend.urlopen", fake_urlopen)
    return sent
