from __future__ import annotations

import json

import httpx
import pytest

from deepguard.detection.provider import RealityDefenderProvider
from deepguard.errors import ConfigurationError, ProviderFailure

ENDPOINT = "https://rd.test/v1/analyze"


def _provider(handler, api_key: str = "rd-key") -> RealityDefenderProvider:
    return RealityDefenderProvider(
        api_key=api_key,
        endpoint=ENDPOINT,
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.anyio
async def test_successful_call_parses_prediction() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "prediction": "Deepfake Detected",
                "confidence": 0.91,
                "processing_time": 1.4,
                "detailed_analysis": {"faces": 2},
            },
        )

    result = await _provider(handler).analyze(url="https://cdn/x.mp4", file_type="video/mp4")

    assert result.prediction == "Deepfake Detected"
    assert result.confidence == 0.91
    assert result.detailed_analysis == {"faces": 2}
    assert result.is_deepfake is True
    assert result.raw["processing_time"] == 1.4

    (request,) = seen
    assert str(request.url) == ENDPOINT
    assert request.method == "POST"
    assert request.headers["Authorization"] == "Bearer rd-key"
    assert json.loads(request.content) == {
        "url": "https://cdn/x.mp4",
        "file_type": "video/mp4",
        "analysis_type": "deepfake_detection",
    }


@pytest.mark.anyio
async def test_non_2xx_raises_provider_failure() -> None:
    provider = _provider(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(ProviderFailure) as exc_info:
        await provider.analyze(url="https://cdn/x.mp4", file_type="video/mp4")

    assert exc_info.value.status_code == 503


@pytest.mark.anyio
async def test_transport_error_raises_provider_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderFailure) as exc_info:
        await _provider(handler).analyze(url="https://cdn/x.mp4", file_type="video/mp4")

    assert exc_info.value.status_code is None


@pytest.mark.anyio
async def test_unreadable_body_raises_provider_failure() -> None:
    provider = _provider(lambda request: httpx.Response(200, json={"unexpected": True}))

    with pytest.raises(ProviderFailure):
        await provider.analyze(url="https://cdn/x.mp4", file_type="video/mp4")


@pytest.mark.anyio
async def test_missing_key_fails_before_network() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(ConfigurationError):
        await _provider(handler, api_key="").analyze(url="https://cdn/x.mp4", file_type="video/mp4")

    assert seen == []
