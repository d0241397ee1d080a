# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-08-18
# Description: ChatGateway
# -----------------------------------------------------------------------------
from typing import AsyncIterator, Dict, List, Protocol, runtime_checkable

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}


def build_messages(system: str, user: str) -> List[Message]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


@runtime_checkable
class ChatGateway(Protocol):
    """
    LLM chat capability.

    chat() returns the complete answer text. chat_stream() opens a fresh
    request per call and yields non-empty text deltas in generation order.
    It ends normally only after the server signals completion; any failure
    is raised from the iterator as StreamError. Closing the iterator early
    abandons the request.
    """

    async def chat(self, system: str, user: str) -> str:
        ...

    def chat_stream(self, system: str, user: str) -> AsyncIterator[str]:
        ...
