from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Union

from .provider import ProviderResult

DetectionMethod = Literal["reality_defender", "fallback_heuristic", "fallback_api_error"]


@dataclass(frozen=True)
class ProviderOutcome:
    """Detection produced by the external provider."""

    result: ProviderResult

    @property
    def detection_method(self) -> DetectionMethod:
        return "reality_defender"

    @property
    def response_method(self) -> str:
        return "reality_defender"

    @property
    def confidence(self) -> float:
        return self.result.confidence

    @property
    def is_deepfake(self) -> bool:
        return self.result.is_deepfake

    @property
    def raw_result(self) -> Dict[str, Any]:
        return self.result.raw

    def to_result(self) -> Dict[str, Any]:
        return {
            "confidence": self.result.confidence,
            "is_deepfake": self.result.is_deepfake,
            "prediction": self.result.prediction,
            "detailed_analysis": self.result.detailed_analysis,
        }


@dataclass(frozen=True)
class HeuristicOutcome:
    """Detection produced by the local fallback generator."""

    payload: Dict[str, Any]
    provider_error: bool = False

    @property
    def detection_method(self) -> DetectionMethod:
        return "fallback_api_error" if self.provider_error else "fallback_heuristic"

    @property
    def response_method(self) -> str:
        return "fallback"

    @property
    def confidence(self) -> float:
        return self.payload["confidence"]

    @property
    def is_deepfake(self) -> bool:
        return self.payload["is_deepfake"]

    @property
    def raw_result(self) -> Dict[str, Any]:
        return self.payload

    def to_result(self) -> Dict[str, Any]:
        return dict(self.payload)


DetectionOutcome = Union[ProviderOutcome, HeuristicOutcome]
