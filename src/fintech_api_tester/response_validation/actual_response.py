"""Transport-independent view of one HTTP response."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ActualResponse:
    """Response as consumed by validation: status, lower-cased headers, decoded body, timing."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    data: object = None
    duration_ms: float | None = None

    def __post_init__(self) -> None:
        normalized = {str(name).lower(): str(value) for name, value in self.headers.items()}
        object.__setattr__(self, "headers", normalized)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> ActualResponse:
        """Build a response from a recorded `{status, headers, data, duration}` document."""
        status = raw.get("status")
        if isinstance(status, bool) or not isinstance(status, int):
            raise ValueError("Recorded response requires an integer 'status'.")
        headers = raw.get("headers") or {}
        if not isinstance(headers, Mapping):
            raise ValueError("Recorded response 'headers' must be a mapping.")
        duration = raw.get("duration")
        if duration is not None and (
            isinstance(duration, bool) or not isinstance(duration, int | float)
        ):
            raise ValueError("Recorded response 'duration' must be a number of milliseconds.")
        return cls(
            status=status,
            headers={str(name): str(value) for name, value in headers.items()},
            data=raw.get("data"),
            duration_ms=float(duration) if duration is not None else None,
        )
