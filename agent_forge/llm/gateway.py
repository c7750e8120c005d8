"""
LLM Gateway

Thin client for an OpenAI-compatible chat-completion endpoint (DeepSeek by
default). One blocking request per call, no retries and no streaming; the
configured timeout is the only bound.
"""

import json
import time
import logging
from typing import Optional, Dict, List, Any

import httpx

from ..config import DeepSeekConfig
from ..errors import UpstreamError

logger = logging.getLogger("agent-forge.llm")


def build_messages(
    system_prompt: str,
    user_question: str,
    background_context: str = "",
) -> List[Dict[str, str]]:
    """System prompt, optional background as a user turn, then the question."""
    messages = [{"role": "system", "content": system_prompt}]
    if background_context:
        messages.append({"role": "user", "content": background_context})
    messages.append({"role": "user", "content": user_question})
    return messages


def extract_text(content: str) -> str:
    """
    Strip the reply and unwrap a ``{"content": "..."}`` envelope if present.

    Some replies come back double-encoded as a JSON object; only the string
    ``content`` field is probed; anything else is returned verbatim.
    """
    text = content.strip()
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return text
    if isinstance(parsed, dict) and isinstance(parsed.get("content"), str):
        return parsed["content"]
    return text


class LLMGateway:
    """
    Chat-completion client.

    Usage:
        async with LLMGateway.from_config(config.deepseek) as gateway:
            text = await gateway.complete("You are terse.", "Say hi")
    """

    def __init__(
        self,
        base_url: str = "https://api.deepseek.com",
        api_key: str = "",
        model: str = "deepseek-chat",
        temperature: float = 0.7,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

        # Stats
        self.requests_total = 0
        self.requests_failed = 0

    @classmethod
    def from_config(
        cls,
        config: DeepSeekConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "LLMGateway":
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            model=config.model,
            temperature=config.temperature,
            timeout=float(config.timeout),
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    async def complete(
        self,
        system_prompt: str,
        user_question: str,
        background_context: str = "",
    ) -> str:
        """Send one chat completion and return the extracted reply text."""
        self.requests_total += 1
        payload = {
            "model": self.model,
            "messages": build_messages(system_prompt, user_question, background_context),
            "temperature": self.temperature,
        }

        start_time = time.time()
        try:
            response = await self._client.post(self.endpoint, json=payload)
        except httpx.TimeoutException:
            self.requests_failed += 1
            logger.error(f"Upstream timeout after {self.timeout}s ({self.endpoint})")
            raise UpstreamError(f"chat completion timed out after {self.timeout}s")
        except httpx.HTTPError as e:
            self.requests_failed += 1
            logger.error(f"Upstream request failed: {e}")
            raise UpstreamError(f"chat completion request failed: {e}")

        latency_ms = int((time.time() - start_time) * 1000)

        if response.status_code >= 400:
            self.requests_failed += 1
            detail = response.text[:200]
            logger.error(f"Upstream returned {response.status_code}: {detail}")
            raise UpstreamError(f"chat completion failed with status {response.status_code}: {detail}")

        try:
            body = response.json()
        except ValueError as e:
            self.requests_failed += 1
            raise UpstreamError(f"chat completion returned invalid JSON: {e}")

        choices = body.get("choices") if isinstance(body, dict) else None
        if not choices:
            self.requests_failed += 1
            logger.error("Upstream returned no choices")
            raise UpstreamError("chat completion returned no choices")

        try:
            content = choices[0]["message"].get("content") or ""
        except (KeyError, TypeError, AttributeError):
            self.requests_failed += 1
            raise UpstreamError("chat completion returned a malformed choice")

        if not isinstance(content, str):
            self.requests_failed += 1
            raise UpstreamError("chat completion returned a malformed choice")

        logger.debug(
            f"Chat completion ok ({latency_ms}ms)",
            extra={"model": body.get("model", self.model), "usage": body.get("usage")},
        )
        return extract_text(content)

    def stats(self) -> Dict[str, Any]:
        return {
            "endpoint": self.endpoint,
            "model": self.model,
            "requests_total": self.requests_total,
            "requests_failed": self.requests_failed,
        }

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False
