"""Domain errors."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TransportError(RuntimeError):
    """Raised when Nextcloud answers with a non-success status or cannot be reached."""

    status_code: int | None
    method: str
    url: str
    reason: str

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Nextcloud request failed for {self.method} {self.url}: {self.reason}"
        return (
            f"Nextcloud error {self.status_code} for {self.method} {self.url}: "
            f"{self.reason}"
        )


@dataclass(frozen=True, slots=True)
class NotFoundError(TransportError):
    """Raised when the addressed remote resource does not exist."""
