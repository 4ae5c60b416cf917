"""
Upstream reputation engines (Cisco Talos, FortiGuard Web Filter).

Each engine sends one lookup per URL and maps whatever JSON comes back into a
fixed fragment shape. Upstream schema knowledge is confined to the candidate
key tables below; failures are logged and reported as None, never raised.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from .config import EngineSettings
from .logger import get_logger
from .models import FortiGuardFragment, TalosFragment, VerdictFragment

logger = get_logger(__name__)


def _first_present(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_number(value: Any) -> float | None:
    # bool is an int subclass; a True/False "score" is not a score.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


class ReputationEngine(ABC):
    """Base class: request plumbing plus category extraction."""

    name: ClassVar[str] = "engine"
    display_name: ClassVar[str] = "Engine"
    category_keys: ClassVar[tuple[str, ...]] = ("category",)

    def __init__(self, settings: EngineSettings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.settings.configured

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        return headers

    @abstractmethod
    def to_fragment(self, data: Any) -> VerdictFragment:
        """Map a parsed response body to this engine's fragment type."""

    async def query(self, url: str) -> VerdictFragment | None:
        if not self.enabled:
            logger.debug("engine_unconfigured", engine=self.name, url=url)
            return None

        try:
            res = await self.client.post(
                self.settings.api_url.strip(),
                json={"url": url},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.error("engine_request_failed", engine=self.name, url=url, error=repr(e))
            return None

        if not res.is_success:
            logger.error("engine_http_error", engine=self.name, url=url, status_code=res.status_code)
            return None

        try:
            data = res.json()
        except ValueError as e:
            logger.error("engine_request_failed", engine=self.name, url=url, error=f"invalid JSON body: {e}")
            return None

        return self.to_fragment(data)


class TalosEngine(ReputationEngine):
    name = "talos"
    display_name = "Talos"
    category_keys = ("category", "threat_category")
    score_keys: ClassVar[tuple[str, ...]] = ("score", "reputation_score")

    def to_fragment(self, data: Any) -> TalosFragment:
        if not isinstance(data, dict):
            return TalosFragment(raw=data)
        return TalosFragment(
            category=_as_text(_first_present(data, self.category_keys)),
            score=_as_number(_first_present(data, self.score_keys)),
            raw=data,
        )


class FortiGuardEngine(ReputationEngine):
    name = "fortiguard"
    display_name = "FortiGuard"
    category_keys = ("category", "webfilter_category")
    threat_keys: ClassVar[tuple[str, ...]] = ("threat", "threat_level")

    def to_fragment(self, data: Any) -> FortiGuardFragment:
        if not isinstance(data, dict):
            return FortiGuardFragment(raw=data)
        return FortiGuardFragment(
            category=_as_text(_first_present(data, self.category_keys)),
            threat=_as_text(_first_present(data, self.threat_keys)),
            raw=data,
        )
