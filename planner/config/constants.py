from __future__ import annotations

from pathlib import Path

# BASE_DIR points to the project root
BASE_DIR = Path(__file__).resolve().parents[2]

DEFAULT_ALLOWED_ORIGINS = (
    "https://tgmproject.net",
    "https://www.tgmproject.net",
    "https://hybridplannerai.netlify.app",
    "http://localhost:8888",
    "http://localhost:5173",
    "http://localhost:3000",
)
CORS_ALLOW_HEADERS = "Content-Type, Authorization"
CORS_MAX_AGE = "86400"

DEFAULT_FREE_VOUCHERS = ("TGMPRJCT",)
STRIPE_METADATA_MAX_LEN = 500
AI_PLAN_PAGE = "/generator.html"
CUSTOM_PLAN_PAGE = "/ankieta.html"

RESEND_URL = "https://api.resend.com/emails"
DEFAULT_RESEND_FROM = "HybridPlanner <no-reply@tgmproject.net>"
HTTP_TIMEOUT_SECONDS = 20

OPENAI_BASE_URL = "https://api.openai.com/v1"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_GROQ_FALLBACK_MODEL = "llama-3.1-8b-instant"
DEFAULT_OPENROUTER_MODEL = "meta-llama/llama-3.3-70b-instruct"
LLM_TIMEOUT_SECONDS = 60
LLM_TEMPERATURE = 0.6
LLM_MAX_TOKENS = 4000

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

WEEKDAYS = {
    "pl": ["Poniedziałek", "Wtorek", "Środa", "Czwartek", "Piątek", "Sobota", "Niedziela"],
    "en": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"],
}

COLUMN_LABELS = {
    "pl": ["ĆWICZENIE", "SERIE", "POWTÓRZENIA", "PRZERWA", "RIR", "RPE", "TEMPO", "KOMENTARZ / WYKONANIE"],
    "en": ["EXERCISE", "SETS", "REPS", "REST", "RIR", "RPE", "TEMPO", "COMMENT"],
}
COLUMN_WIDTHS = [32, 8, 14, 12, 6, 6, 10, 30]

PLAN_FILENAME = {
    "pl": "Plan Treningowy.xlsx",
    "en": "Training Plan.xlsx",
}
