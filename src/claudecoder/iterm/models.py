"""iTerm2 spawn and listing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SpawnRequest:
    prompt: str
    working_directory: str
    window_title: str
    dangerously_skip_permissions: bool = False


@dataclass
class SpawnResult:
    success: bool
    window_title: str
    working_directory: str
    prompt: str
    dangerously_skip_permissions: bool
    error: str = ""

    @classmethod
    def for_request(cls, request: SpawnRequest, *, success: bool, error: str = "") -> SpawnResult:
        return cls(
            success=success,
            window_title=request.window_title,
            working_directory=request.working_directory,
            prompt=request.prompt,
            dangerously_skip_permissions=request.dangerously_skip_permissions,
            error=error,
        )


@dataclass(frozen=True)
class ItermSession:
    name: str
    tty: str = ""


@dataclass(frozen=True)
class ItermWindow:
    id: str
    sessions: tuple[ItermSession, ...] = field(default_factory=tuple)
