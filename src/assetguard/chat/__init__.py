"""Chat layer around the guard: throttling, generation, execution, narration."""

from assetguard.chat._types import (
    ChatError,
    ChatReply,
    GeneratedQuery,
    GenerationError,
    GeneratorNotConfigured,
    MessageRejected,
    RateLimitExceeded,
)
from assetguard.chat.generator import TextGenerator, parse_generation
from assetguard.chat.orchestrator import ChatOrchestrator
from assetguard.chat.prompts import SUGGESTIONS
from assetguard.chat.ratelimit import RateDecision, RateLimiter, SlidingWindowRateLimiter

__all__ = [
    "SUGGESTIONS",
    "ChatError",
    "ChatOrchestrator",
    "ChatReply",
    "GeneratedQuery",
    "GenerationError",
    "GeneratorNotConfigured",
    "MessageRejected",
    "RateDecision",
    "RateLimitExceeded",
    "RateLimiter",
    "SlidingWindowRateLimiter",
    "TextGenerator",
    "parse_generation",
]
