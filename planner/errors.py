from __future__ import annotations


class PlannerError(Exception):
    """Base class for errors raised by the planner library."""


class ConfigError(PlannerError):
    """A required setting (usually an API key) is missing."""


class PlanParseError(PlannerError):
    """Model output or uploaded content could not be turned into a plan."""


class ResendError(PlannerError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"Resend request failed (HTTP {status}). {body}".strip())
        self.status = status
        self.body = body
