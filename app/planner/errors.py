"""Failure kinds of the plan pipeline.

Each class carries the HTTP status and user-facing message it is rendered
with; ``to_payload`` produces the ``{error, details?, rawResponse?}`` body.
"""

from __future__ import annotations


class PlanError(Exception):
    status_code: int = 500
    error: str = "An unexpected error occurred."

    def __init__(
        self,
        details: str | None = None,
        *,
        error: str | None = None,
        raw_response: str | None = None,
    ) -> None:
        if error is not None:
            self.error = error
        self.details = details
        self.raw_response = raw_response
        super().__init__(details or self.error)

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.error}
        if self.details:
            payload["details"] = self.details
        if self.raw_response is not None:
            payload["rawResponse"] = self.raw_response
        return payload


class InvalidProfile(PlanError):
    """Client input incomplete; raised before any generation call."""

    status_code = 400
    error = "Missing required fields: height, weight, or goal."

    def __init__(self, missing: list[str] | None = None, details: str | None = None) -> None:
        self.missing = list(missing or [])
        if details is None and self.missing:
            details = f"Missing or empty: {', '.join(self.missing)}"
        super().__init__(details)


class ServiceUnavailable(PlanError):
    """Generation capability not configured or not reachable. Not retried."""

    status_code = 503
    error = "Plan generation service is not configured."


class UpstreamError(PlanError):
    """Generation call failed; safe to retry on user action."""

    status_code = 502
    error = "Failed to generate plan."


class GenerationTimeout(UpstreamError):
    status_code = 504
    error = "Plan generation timed out."


class EmptyResponse(PlanError):
    status_code = 502
    error = "Could not generate a valid plan."

    def __init__(self, details: str = "The generation service returned no content.") -> None:
        super().__init__(details)


class MalformedOutput(PlanError):
    """Generated text is not a usable plan. Keeps the raw text for diagnostics."""

    status_code = 502
    error = "Could not generate a valid plan."

    def __init__(self, details: str, raw_text: str) -> None:
        super().__init__(details, raw_response=raw_text)

    @property
    def raw_text(self) -> str:
        return self.raw_response or ""
