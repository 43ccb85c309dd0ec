import logging

from fastapi import Request
from openai import OpenAI, OpenAIError

from hiredready.config import (
    AI_MAX_RETRIES,
    AI_MODEL,
    AI_TIMEOUT_SECONDS,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
)
from hiredready.errors import UpstreamFormatError, UpstreamServiceError

logger = logging.getLogger(__name__)


class GenerativeClient:
    """Chat-completions wrapper shared by every AI-backed route.

    Built once at startup and handed to handlers through ``get_ai_client``.
    Transient network failures are retried with backoff by the underlying
    client (``max_retries``); anything that still fails surfaces as
    ``UpstreamServiceError``.
    """

    def __init__(self, api_key, model=AI_MODEL, base_url=None,
                 timeout=AI_TIMEOUT_SECONDS, max_retries=AI_MAX_RETRIES):
        self.model = model
        self._client = None
        if api_key:
            self._client = OpenAI(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
            )
        else:
            logger.warning("OPENAI_API_KEY not set. AI-backed routes will fail.")

    @classmethod
    def from_env(cls) -> "GenerativeClient":
        return cls(OPENAI_API_KEY, AI_MODEL, OPENAI_BASE_URL, AI_TIMEOUT_SECONDS, AI_MAX_RETRIES)

    def complete(self, prompt: str) -> str:
        if self._client is None:
            raise UpstreamServiceError("AI service is not configured")
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            logger.error("AI request failed: %s", exc)
            raise UpstreamServiceError() from exc
        if not response.choices:
            raise UpstreamFormatError("AI service returned no choices")
        return response.choices[0].message.content or ""


def get_ai_client(request: Request) -> GenerativeClient:
    return request.app.state.ai_client
