"""LiteLLM-backed inference: one ``acompletion`` call per extraction."""

from __future__ import annotations

import logging
from typing import Any

from medintake.inference.protocols import InferenceResult

log = logging.getLogger(__name__)


def _usage(response: Any) -> dict[str, int]:
    usage = getattr(response, "usage", None)
    if not usage:
        return {}
    return {
        name: getattr(usage, name, 0) or 0
        for name in ("prompt_tokens", "completion_tokens", "total_tokens")
    }


class RealTimeBackend:
    """Direct request/response completions through LiteLLM.

    Empty parameters (``None`` or ``""``) are dropped so that LiteLLM falls
    back to its own provider defaults, e.g. when no ``api_base`` is set.
    Provider exceptions are not caught here; the extraction provider maps
    them onto the medintake error hierarchy.
    """

    async def infer(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> InferenceResult:
        from litellm import acompletion

        call_params = {k: v for k, v in params.items() if v is not None and v != ""}
        response = await acompletion(model=model, messages=messages, **call_params)

        choice = response.choices[0]
        truncated = choice.finish_reason == "length"
        if truncated:
            log.warning("Completion from %s hit the output token limit", model)

        return InferenceResult(
            content=choice.message.content or "",
            finish_reason="max_output_reached" if truncated else "finished",
            usage=_usage(response),
            model=model,
        )
