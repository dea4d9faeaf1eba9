from pydantic import BaseModel
from typing import Any, Literal


StopReason = Literal["stop", "max_tokens"]


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class NormalizedLLMResponse(BaseModel):
    """Provider-agnostic view of a completion. Both providers are normalized into this."""

    provider: str
    model: str
    content: list[Any] = []
    usage: TokenUsage = TokenUsage()
    stop_reason: StopReason = "stop"

    @property
    def truncated(self) -> bool:
        return self.stop_reason == "max_tokens"
