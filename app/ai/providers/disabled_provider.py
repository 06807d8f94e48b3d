from typing import Sequence

from app.ai.types import ChatMessage
from app.core.errors import UpstreamUnavailable


class DisabledProvider:
    """Stand-in used when no provider credentials are configured."""

    def __init__(self, reason: str):
        self._reason = reason

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        raise UpstreamUnavailable(self._reason)

    async def aclose(self) -> None:
        return None
