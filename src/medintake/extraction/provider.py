"""AI extraction capability: turns questions plus document descriptions into raw model text."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from medintake.exceptions import NonRetryableProviderError, TransientProviderError
from medintake.inference.protocols import IInferenceBackend
from medintake.models import DocumentDescription, Question
from medintake.prompts.extraction import build_extraction_messages

if TYPE_CHECKING:
    from medintake.core.config import LLMConfig

log = logging.getLogger(__name__)


@runtime_checkable
class IExtractionProvider(Protocol):
    """Black-box answer extractor.

    Implementations return the model's raw text; parsing happens in
    :mod:`medintake.extraction.json_parser`.
    """

    async def extract(
        self,
        questions: list[Question],
        documents: list[DocumentDescription],
    ) -> str: ...


def question_specs(questions: list[Question]) -> list[dict[str, Any]]:
    return [{"id": q.id, "text": q.text, "answerType": q.answer_type} for q in questions]


def document_specs(documents: list[DocumentDescription]) -> list[dict[str, Any]]:
    return [{"documentId": d.document_id, "text": d.text} for d in documents]


def is_retryable(exc: Exception) -> bool:
    """Classify whether a provider failure might succeed on a later attempt.

    Non-retryable: AuthenticationError, BadRequestError, NotFoundError (4xx non-429).
    Retryable: everything else including rate limits, timeouts, 5xx.
    """
    from litellm.exceptions import AuthenticationError, BadRequestError, NotFoundError

    return not isinstance(exc, (AuthenticationError, BadRequestError, NotFoundError))


class LLMExtractionProvider:
    """Extraction through an :class:`IInferenceBackend` (LiteLLM by default).

    One call per invocation.  Failures are wrapped and raised; retrying is
    the caller's decision.
    """

    def __init__(self, backend: IInferenceBackend, config: LLMConfig) -> None:
        self._backend = backend
        self._config = config

    def _call_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "timeout": self._config.timeout,
        }
        if self._config.api_key and self._config.api_key != "no-key":
            params["api_key"] = self._config.api_key
        if self._config.base_url:
            params["api_base"] = self._config.base_url
        return params

    async def extract(
        self,
        questions: list[Question],
        documents: list[DocumentDescription],
    ) -> str:
        messages = build_extraction_messages(question_specs(questions), document_specs(documents))
        log.info(
            "Requesting answers for %d questions from %d documents via %s",
            len(questions),
            len(documents),
            self._config.model,
        )
        try:
            result = await self._backend.infer(messages, self._config.model, **self._call_params())
        except Exception as exc:
            if is_retryable(exc):
                raise TransientProviderError(
                    f"Extraction model call failed: {exc}", details=type(exc).__name__
                ) from exc
            raise NonRetryableProviderError(
                f"Extraction model rejected the request: {exc}", details=type(exc).__name__
            ) from exc

        if result.truncated:
            log.warning("Extraction output was truncated at %d tokens", self._config.max_tokens)
        log.debug("Extraction response: %d chars", len(result.content))
        return result.content
