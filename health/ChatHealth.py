# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-06
# Updated: 2026-09-01
# Description: ChatHealth
# -----------------------------------------------------------------------------

import time
import logging
from typing import Optional

from chat.ChatGateway import ChatGateway
from utility.logging_utils import get_logger


class ChatHealth:
    """
    Smoke test for chat completion connectivity.
    """

    def __init__(self, chat: ChatGateway, logger: Optional[logging.Logger] = None):
        self.chat = chat
        self.logger = logger or get_logger(__name__)

    async def run(self) -> bool:
        self.logger.info("Starting chat healthcheck")
        start = time.time()

        try:
            answer = await self.chat.chat(
                "You are a health check. Reply briefly to confirm connectivity.",
                "Say OK if you can read this.",
            )
            elapsed_ms = (time.time() - start) * 1000.0
            self.logger.info("Chat call succeeded in %.1f ms.", elapsed_ms)

            if not answer.strip():
                self.logger.warning("Chat healthcheck returned an empty answer.")
                return False

            self.logger.info("Chat healthcheck PASSED.")
            return True

        except Exception as e:
            self.logger.exception("Chat healthcheck FAILED: %s", e)
            return False
