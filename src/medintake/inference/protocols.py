"""Contract between the extraction provider and the model transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class InferenceResult:
    """Raw completion text plus what the transport reported about it.

    ``finish_reason`` is normalized to ``"finished"`` or
    ``"max_output_reached"``.
    """

    content: str
    finish_reason: str = "finished"
    usage: dict[str, int] = field(default_factory=dict)
    model: str = ""

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "max_output_reached"


@runtime_checkable
class IInferenceBackend(Protocol):
    """A chat-completion transport.  Errors from the provider SDK propagate unchanged."""

    async def infer(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> InferenceResult:
        """Run one completion.

        Args:
            messages: Chat messages in OpenAI format.
            model: Model identifier (LiteLLM provider prefixes allowed).
            **params: Sampling and transport parameters (temperature,
                max_tokens, timeout, api_key, api_base).
        """
        ...
