"""The model seam: protocol for the external text generator and output parsing."""

from __future__ import annotations

import json
import re
from typing import Protocol, runtime_checkable

from assetguard.chat._types import GeneratedQuery, GenerationError

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


@runtime_checkable
class TextGenerator(Protocol):
    """An external language model.

    Implementations raise GenerationError when the call fails.
    """

    def is_configured(self) -> bool: ...

    async def complete(self, prompt: str) -> str: ...


def strip_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    text = text.strip()
    m = _FENCE.match(text)
    if m:
        return m.group(1).strip()
    return text


def parse_generation(text: str) -> GeneratedQuery:
    """Parse the model's JSON answer into a GeneratedQuery.

    Expected shape: {"can_answer": bool, "sql_query": str, "explanation": str,
    "expected_result_type": str}. Raises GenerationError on anything else.
    """
    try:
        payload = json.loads(strip_fences(text))
    except json.JSONDecodeError as e:
        raise GenerationError(f"generator returned invalid JSON: {e}") from e

    if not isinstance(payload, dict) or "can_answer" not in payload:
        raise GenerationError("generator response has no 'can_answer' field")

    can_answer = payload["can_answer"]
    if not isinstance(can_answer, bool):
        raise GenerationError("generator 'can_answer' must be a JSON boolean")
    sql_query = payload.get("sql_query") or None
    if can_answer and not isinstance(sql_query, str):
        raise GenerationError("generator claimed an answer but sent no SQL")

    return GeneratedQuery(
        can_answer=can_answer,
        sql_query=sql_query if can_answer else None,
        explanation=str(payload.get("explanation") or ""),
        expected_result_type=str(payload.get("expected_result_type") or "table"),
    )
