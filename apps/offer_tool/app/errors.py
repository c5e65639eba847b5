from __future__ import annotations

from typing import List, Optional


class ValidationError(Exception):
    """Search input was malformed. Carries one message per violated rule."""

    def __init__(self, details: List[str]):
        super().__init__("Invalid input")
        self.details = list(details)


class ProviderError(RuntimeError):
    """An upstream call failed (HTTP status, transport, timeout or unreadable body)."""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status = status
