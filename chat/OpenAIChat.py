# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-22
# Updated: 2026-09-04
# Description: OpenAIChat
# -----------------------------------------------------------------------------
import logging
from typing import Any, AsyncIterator, Dict, Optional

import httpx
import openai
from openai import AsyncOpenAI

from chat.ChatGateway import build_messages
from config.Config import Config
from errors.HydeErrors import StreamError
from utility.logging_utils import get_class_logger


class OpenAIChat:
    """
    ChatGateway over any OpenAI-compatible chat completions endpoint.
    The default config points at a local Ollama server.

    Expected Config fields:
      cfg.chat_base_url, cfg.chat_api_key, cfg.chat_model,
      cfg.chat_temperature, cfg.chat_max_tokens
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client: Optional[Any] = None,
            logger: logging.Logger | None = None,
    ) -> None:
        self.cfg = cfg
        self.model = cfg.chat_model
        self.temperature = cfg.chat_temperature
        self.max_tokens = cfg.chat_max_tokens
        self.logger = logger or get_class_logger(self.__class__)

        self.client = client or AsyncOpenAI(
            api_key=cfg.chat_api_key,
            base_url=cfg.chat_base_url,
        )

        self.logger.info("OpenAIChat initialised (model=%s, base_url=%s)", self.model, cfg.chat_base_url)

    def _params(self, system: str, user: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": build_messages(system, user),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    # Standard chat call
    async def chat(self, system: str, user: str) -> str:
        self.logger.debug(
            "Chat request: model=%s temp=%s max_tokens=%s user_chars=%d",
            self.model, self.temperature, self.max_tokens, len(user),
        )

        resp = await self.client.chat.completions.create(**self._params(system, user))

        try:
            content = resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            self.logger.error("Unexpected chat response format: %s", e, exc_info=True)
            raise RuntimeError(f"Unexpected chat response format: {e}") from e

        self.logger.info("Chat answer generated (model=%s, chars=%d)", getattr(resp, "model", None), len(content))
        self.logger.debug("Token usage: %r", getattr(resp, "usage", None))
        return content

    # Streaming chat call
    async def chat_stream(self, system: str, user: str) -> AsyncIterator[str]:
        params = self._params(system, user)
        params["stream"] = True

        try:
            stream = await self.client.chat.completions.create(**params)
        except (openai.OpenAIError, httpx.HTTPError) as e:
            self.logger.error("Chat stream could not be opened: %s", e)
            raise StreamError(f"Chat stream could not be opened: {e}") from e

        finished = False
        deltas = 0
        try:
            async for event in stream:
                choices = getattr(event, "choices", None)
                if choices is None:
                    raise StreamError(f"Malformed stream event without choices: {event!r}")
                if not choices:
                    # usage-only trailer
                    continue

                choice = choices[0]
                delta = getattr(choice, "delta", None)
                content = getattr(delta, "content", None) if delta is not None else None
                if content:
                    deltas += 1
                    yield content

                if getattr(choice, "finish_reason", None):
                    finished = True
        except (openai.OpenAIError, httpx.HTTPError) as e:
            self.logger.error("Chat stream failed after %d deltas: %s", deltas, e)
            raise StreamError(f"Chat stream failed after {deltas} deltas: {e}") from e
        finally:
            # Runs on normal end, on error, and when the consumer closes us early
            await stream.close()

        if not finished:
            self.logger.error("Chat stream ended after %d deltas without a completion signal", deltas)
            raise StreamError(f"Chat stream ended after {deltas} deltas without a completion signal")

        self.logger.debug("Chat stream complete (deltas=%d)", deltas)

    async def close(self) -> None:
        await self.client.close()
