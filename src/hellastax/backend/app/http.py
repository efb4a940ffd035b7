"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify

PROBLEM_CONTENT_TYPE = "application/problem+json"


@dataclass(frozen=True)
class ProblemResponse:
    """RFC 7807-style error payload keyed by a machine-readable ``error`` code."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    @property
    def title(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Error"

    def as_dict(self) -> dict[str, Any]:
        """Return the serialisable payload for this problem response."""

        payload: dict[str, Any] = {
            "error": self.error,
            "title": self.title,
            "status": self.status,
        }
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        """Convert the problem payload into a Flask response tuple."""

        response = jsonify(self.as_dict())
        response.mimetype = PROBLEM_CONTENT_TYPE
        return response, self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse`; extra keywords become payload members."""

    return ProblemResponse(error=error, status=status, message=message, extra=extra or None)


__all__ = ["PROBLEM_CONTENT_TYPE", "ProblemResponse", "problem_response"]
