from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from ..config import REALITY_DEFENDER_URL
from ..errors import ConfigurationError, ProviderFailure


@dataclass(frozen=True)
class ProviderResult:
    prediction: str
    confidence: float
    detailed_analysis: Any = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_deepfake(self) -> bool:
        return "deepfake" in self.prediction.lower()


class DetectionProvider(ABC):
    name: str

    @abstractmethod
    async def analyze(self, *, url: str, file_type: str) -> ProviderResult:
        """Make a single detection call.

        Raises ConfigurationError if the provider cannot be used at all, and
        ProviderFailure for any transport or non-2xx failure.
        """


class RealityDefenderProvider(DetectionProvider):
    name = "reality_defender"

    def __init__(
        self,
        api_key: str,
        endpoint: str = REALITY_DEFENDER_URL,
        timeout_seconds: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout_seconds
        self._transport = transport

    async def analyze(self, *, url: str, file_type: str) -> ProviderResult:
        if not self.api_key:
            raise ConfigurationError("Reality Defender API key not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "url": url,
                        "file_type": file_type,
                        "analysis_type": "deepfake_detection",
                    },
                )
        except httpx.HTTPError as exc:
            raise ProviderFailure(f"Reality Defender request failed: {exc}") from exc

        if not response.is_success:
            raise ProviderFailure(
                f"Reality Defender returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            return ProviderResult(
                prediction=str(payload["prediction"]),
                confidence=float(payload["confidence"]),
                detailed_analysis=payload.get("detailed_analysis"),
                raw=payload,
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise ProviderFailure(
                "Reality Defender returned an unreadable response",
                status_code=response.status_code,
            ) from exc
