"""
Model Adapters — how the persona model is reached.

The kernel itself never calls a model. This module is the interface the
chat proxy and other outside callers build on: they pair an adapter with
the day packets this package produces.

Callers decide on streaming by reading `supports_streaming`, never by
checking the adapter's class. Remote HTTP adapters live outside this
package and only need to satisfy the ModelAdapter protocol.
"""

import logging
from typing import List, Optional, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ModelMessage(BaseModel):
    role: str                               # "system" | "user" | "assistant"
    content: str


class ModelCompletion(BaseModel):
    text: str
    cot: Optional[str] = None               # Chain-of-thought trace shown to the researcher
    tool_calls: List[dict] = []


class ModelAdapter(Protocol):
    name: str
    supports_streaming: bool

    def complete(self, messages: List[ModelMessage]) -> ModelCompletion: ...


class StubAdapter:
    """Offline adapter returning canned replies. Does not stream."""

    name = "Stub Adapter"
    supports_streaming = False

    def complete(self, messages: List[ModelMessage]) -> ModelCompletion:
        if not messages:
            raise ValueError("At least one message is required")

        last = messages[-1].content
        logger.info("Stub adapter answering %d messages", len(messages))
        return ModelCompletion(
            text=f'[STUB] I understand your request: "{last[:50]}". This is a stub response.',
            cot=(
                f"[STUB CoT] Analyzing request: {last}\n"
                f"Considering context from {len(messages)} previous messages.\n"
                f"Generating response..."
            ),
        )


def can_stream(adapter: ModelAdapter) -> bool:
    return bool(getattr(adapter, "supports_streaming", False))
