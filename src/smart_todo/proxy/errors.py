# src/smart_todo/proxy/errors.py

from __future__ import annotations

from typing import Any


class ProxyError(Exception):
    """
    Base for every failure the proxy reports to its caller.

    status:  HTTP status sent back
    error:   short human label (kept compatible with existing clients)
    kind:    machine-readable error kind
    message: human-readable explanation
    """

    status: int = 500
    error: str = "Server error"
    kind: str = "UpstreamUnavailable"
    default_message: str = "Failed to process request. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message, "kind": self.kind}


class MissingCredential(ProxyError):
    status = 401
    error = "API key required"
    kind = "MissingCredential"
    default_message = "Please provide your Claude API key in the x-api-key header"


class InvalidCredential(ProxyError):
    status = 401
    error = "Invalid API key"
    kind = "InvalidCredential"
    default_message = "Please check your Claude API key is correct"


class RateLimited(ProxyError):
    status = 429
    error = "Rate limit exceeded"
    kind = "RateLimited"
    default_message = "Too many requests. Please try again later."


class MalformedRequest(ProxyError):
    status = 400
    error = "Bad request"
    kind = "MalformedRequest"
    default_message = "Invalid request format"


class UpstreamUnavailable(ProxyError):
    pass


class MethodNotAllowed(ProxyError):
    status = 405
    error = "Method not allowed"
    kind = "MethodNotAllowed"
    default_message = "Only POST requests are supported"
