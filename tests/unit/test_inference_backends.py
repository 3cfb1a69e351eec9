"""Tests for the pluggable inference backend layer."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from medintake.core.config import AppSettings, LLMConfig
from medintake.inference.factory import create_inference_backend
from medintake.inference.protocols import IInferenceBackend, InferenceResult
from medintake.inference.realtime import RealTimeBackend
from tests.fakes.fake_inference import FakeInferenceBackend


def _completion(content: str | None, finish_reason: str = "stop", usage: Any = None) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.choices[0].finish_reason = finish_reason
    response.usage = usage
    return response


class TestProtocolCompliance:
    def test_fake_backend_satisfies_protocol(self) -> None:
        assert isinstance(FakeInferenceBackend(), IInferenceBackend)

    def test_realtime_backend_satisfies_protocol(self) -> None:
        assert isinstance(RealTimeBackend(), IInferenceBackend)


class TestInferenceResult:
    def test_defaults(self) -> None:
        result = InferenceResult(content="{}")
        assert result.finish_reason == "finished"
        assert result.truncated is False

    def test_truncated(self) -> None:
        assert InferenceResult(content="{", finish_reason="max_output_reached").truncated


class TestRealTimeBackend:
    @pytest.mark.asyncio
    async def test_infer_delegates_to_litellm(self) -> None:
        usage = MagicMock(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _completion('{"fever": true}', usage=usage)
            result = await RealTimeBackend().infer(
                [{"role": "user", "content": "hi"}], "gpt-4o", temperature=0.1
            )

        assert result.content == '{"fever": true}'
        assert result.finish_reason == "finished"
        assert result.usage["total_tokens"] == 15
        assert result.model == "gpt-4o"
        kwargs = mock_acomp.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.1

    @pytest.mark.asyncio
    async def test_blank_params_are_not_forwarded(self) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _completion("{}")
            await RealTimeBackend().infer([], "gpt-4o", api_base="", api_key=None, timeout=30.0)

        kwargs = mock_acomp.call_args.kwargs
        assert "api_base" not in kwargs
        assert "api_key" not in kwargs
        assert kwargs["timeout"] == 30.0

    @pytest.mark.asyncio
    async def test_length_finish_reason_marks_truncation(self) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.return_value = _completion(None, finish_reason="length")
            result = await RealTimeBackend().infer([], "gpt-4o")

        assert result.content == ""
        assert result.truncated
        assert result.usage == {}

    @pytest.mark.asyncio
    async def test_provider_errors_propagate(self) -> None:
        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acomp:
            mock_acomp.side_effect = ConnectionError("connection reset")
            with pytest.raises(ConnectionError):
                await RealTimeBackend().infer([], "gpt-4o")

class TestInferenceFactory:
    def test_default_returns_realtime_backend(self) -> None:
        assert isinstance(create_inference_backend(AppSettings()), RealTimeBackend)

    def test_dotted_path_receives_settings(self) -> None:
        settings = AppSettings(llm=LLMConfig(inference_backend="gateway.backends:GatewayBackend"))
        seen: list[AppSettings] = []

        def build(received: AppSettings) -> FakeInferenceBackend:
            seen.append(received)
            return FakeInferenceBackend()

        with patch("medintake.inference.factory._import_dotted_path", return_value=build):
            backend = create_inference_backend(settings)

        assert isinstance(backend, FakeInferenceBackend)
        assert seen == [settings]

    def test_dotted_path_not_found_raises(self) -> None:
        settings = AppSettings(llm=LLMConfig(inference_backend="nonexistent.module:Missing"))
        with pytest.raises(ImportError):
            create_inference_backend(settings)

    def test_dotted_path_not_callable_raises(self) -> None:
        settings = AppSettings(llm=LLMConfig(inference_backend="some.module:NotCallable"))
        with patch("medintake.inference.factory._import_dotted_path", return_value="not callable"):
            with pytest.raises(TypeError, match="not callable"):
                create_inference_backend(settings)
