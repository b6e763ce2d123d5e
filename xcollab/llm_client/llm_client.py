"""
LLM client wrapper

Supports:
- LLM_PROVIDER=openai -> OpenAI-compatible Chat Completions (base_url + /chat/completions)
- LLM_PROVIDER=mock   -> no network, deterministic output

Includes:
- httpx async
- tenacity retry (transport errors only, upstream statuses are never retried)
- aiobreaker circuit breaker
- Prometheus metrics (requests + latency)
"""

import json
import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

import httpx
from aiobreaker import CircuitBreaker, CircuitBreakerError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from xcollab.config import (
    LLM_MODEL,
    LLM_PROVIDER,
    LLM_TIMEOUT_SECONDS,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_CHAT_PATH,
    validate_llm_config,
)
from xcollab.errors import LLMConnectionError, LLMResponseError, LLMUpstreamError
from xcollab.metrics import LLM_LATENCY, LLM_REQUESTS

logger = logging.getLogger("xcollab.llm_client")

# Circuit breaker: 5 failures -> open for 30s
breaker = CircuitBreaker(
    fail_max=5,
    timeout_duration=timedelta(seconds=30),
    exclude=(httpx.HTTPStatusError,),
)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(
        exc,
        (
            httpx.ConnectError,
            httpx.ReadTimeout,
            httpx.WriteTimeout,
            httpx.RemoteProtocolError,
            httpx.ConnectTimeout,
        ),
    )


@retry(
    reraise=True,
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    retry=retry_if_exception(_is_retryable),
)
async def _post_with_retry(
    client: httpx.AsyncClient,
    url: str,
    json_payload: Dict[str, Any],
) -> httpx.Response:
    """
    POST wrapper with retry + Prometheus metrics.
    """
    with LLM_LATENCY.time():
        try:
            resp = await client.post(url, json=json_payload)
            logger.info(f"LLM response status: {resp.status_code}")
            resp.raise_for_status()
            LLM_REQUESTS.labels(outcome="success").inc()
            return resp
        except Exception:
            LLM_REQUESTS.labels(outcome="failure").inc()
            raise


def _error_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class LLMClient:
    """
    Unified LLM client for OpenAI-compatible endpoints / Mock.

    IMPORTANT:
    - base_url is always a BASE (e.g. https://api.openai.com/v1)
    - chat_path is always a PATH (e.g. /chat/completions)
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.provider = provider or LLM_PROVIDER
        api_key = OPENAI_API_KEY if api_key is None else api_key
        validate_llm_config(self.provider, api_key)

        self.model = LLM_MODEL
        self.timeout = httpx.Timeout(float(LLM_TIMEOUT_SECONDS))
        self.transport = transport

        self.base_url = ""
        self.chat_path = ""
        self.headers: Dict[str, str] = {}

        if self.provider == "openai":
            self.base_url = OPENAI_BASE_URL.rstrip("/")
            self.chat_path = OPENAI_CHAT_PATH or "/chat/completions"
            if not self.chat_path.startswith("/"):
                self.chat_path = f"/{self.chat_path}"

            self.headers = {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            }

    async def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Chat completion: returns the assistant content, stripped.
        """
        if self.provider == "mock":
            LLM_REQUESTS.labels(outcome="mock").inc()
            user = next((m.get("content", "") for m in reversed(messages) if m.get("role") == "user"), "")
            return (
                "## Mock answer\n"
                "- Provider: mock (no network call was made)\n\n"
                f"### Prompt extract (first 200 chars)\n{user.strip()[:200]}"
            )

        payload: Dict[str, Any] = {"model": self.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            logger.debug(
                f"LLM[{self.provider}] → POST {self.base_url}{self.chat_path} | payload={json.dumps(payload)[:500]}"
            )

            try:
                resp = await breaker.call_async(_post_with_retry, client, self.chat_path, payload)
            except CircuitBreakerError:
                logger.warning("LLM circuit breaker OPEN – request blocked")
                LLM_REQUESTS.labels(outcome="circuit_breaker").inc()
                raise LLMConnectionError("LLM service temporarily unavailable (circuit breaker open).")
            except httpx.HTTPStatusError as exc:
                logger.error(f"LLM HTTP error {exc.response.status_code}: {exc.response.text[:300]}")
                raise LLMUpstreamError(exc.response.status_code, _error_body(exc.response))
            except httpx.HTTPError as exc:
                logger.error(f"LLM request failed: {exc!r}")
                raise LLMConnectionError(f"LLM request failed: {exc!r}")

            logger.debug(f"LLM[{self.provider}] ← {resp.status_code} | response={resp.text[:300]}")

            try:
                data = resp.json()
                content = data["choices"][0]["message"]["content"]
            except (KeyError, IndexError, TypeError, ValueError) as exc:
                logger.error(f"Malformed LLM response: {exc!r} – raw={resp.text[:300]}")
                raise LLMResponseError("LLM returned malformed response.")

            content = (content or "").strip() if isinstance(content, str) else ""
            if not content:
                raise LLMResponseError("LLM returned no content.")
            return content
