from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Status = Literal["blocked", "review", "good", "unknown"]


class VerdictFragment(BaseModel):
    category: str | None = None
    # Parsed upstream body, kept for diagnostics.
    raw: Any = None


class TalosFragment(VerdictFragment):
    score: float | None = None


class FortiGuardFragment(VerdictFragment):
    threat: str | None = None


class Classification(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Status
    label: str
    reason: str


class EngineFragments(BaseModel):
    talos: TalosFragment | None = None
    fortiguard: FortiGuardFragment | None = None


class ScanResult(BaseModel):
    url: str
    status: Status
    label: str
    reason: str
    fragments: EngineFragments = Field(default_factory=EngineFragments)


class ScanResponse(BaseModel):
    results: list[ScanResult]


class ErrorResponse(BaseModel):
    error: str
    results: list[ScanResult] = []
