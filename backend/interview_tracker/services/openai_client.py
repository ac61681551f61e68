from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import dataclass
from typing import Sequence

from openai import OpenAI, OpenAIError

from interview_tracker.core.config import settings

logger = logging.getLogger(__name__)

ChatMessage = dict[str, str]


@dataclass(frozen=True)
class OpenAIChatResponse:
    model: str
    message: str


class OpenAIClientError(RuntimeError):
    pass


class OpenAIClient:
    """
    Thin wrapper around the OpenAI SDK so services can be unit-tested with a fake.
    """

    def __init__(self, *, api_key: str | None = None, model: str | None = None) -> None:
        key = api_key or settings.OPENAI_API_KEY
        if not key:
            raise OpenAIClientError("OPENAI_API_KEY is not configured")
        self.model = model or settings.OPENAI_MODEL
        if not self.model:
            raise OpenAIClientError("OPENAI_MODEL is not configured")
        self._client = OpenAI(api_key=key)
        self.max_retries = settings.AI_OPENAI_MAX_RETRIES

    def chat_completion(
        self,
        *,
        messages: Sequence[ChatMessage],
        request_id: str | None = None,
        temperature: float = 0.2,
        max_tokens: int | None = None,
    ) -> OpenAIChatResponse:
        payload_messages = [
            {"role": message["role"], "content": message["content"]}
            for message in messages
            if message.get("role") and message.get("content")
        ]
        if not payload_messages:
            raise OpenAIClientError("At least one chat message is required")
        request_id = request_id or uuid.uuid4().hex

        for attempt in range(1, self.max_retries + 1):
            try:
                response = self._client.chat.completions.create(
                    model=self.model,
                    messages=payload_messages,  # type: ignore[arg-type]
                    temperature=temperature,
                    max_tokens=max_tokens,
                    extra_headers={"X-Request-ID": request_id},
                )
                break
            except OpenAIError as exc:
                if attempt == self.max_retries or not self._is_retryable(exc):
                    raise OpenAIClientError(str(exc)) from exc
                backoff = min(0.5 * (2 ** (attempt - 1)), 5.0)
                time.sleep(backoff + random.uniform(0, 0.25))

        if not response.choices:
            raise OpenAIClientError("OpenAI returned no choices")
        usage = response.usage or None
        logger.debug(
            "OpenAI request %s used %s tokens",
            request_id,
            int(getattr(usage, "total_tokens", 0) or 0),
        )
        return OpenAIChatResponse(
            model=response.model or self.model,
            message=(response.choices[0].message.content or "").strip(),
        )

    def _is_retryable(self, exc: OpenAIError) -> bool:
        status = getattr(exc, "status_code", None) or getattr(exc, "status", None)
        if isinstance(status, int):
            return status >= 500 or status in {408, 429}
        message = str(exc).lower()
        return "timeout" in message or "temporarily unavailable" in message
