"""Prompt text handed to the external generator."""

from __future__ import annotations

import json

from assetguard.chat._types import GeneratedQuery
from assetguard.policy import MAX_LIMIT
from assetguard.schema import SchemaDescriptor

SUGGESTIONS: tuple[str, ...] = (
    "How many assets are there in total?",
    "Which assets are currently under maintenance?",
    "What is the total value of assets in the Laptop category?",
    "List the available assets in Building A",
    "Which users currently hold an asset?",
    "Which assets have a warranty ending this month?",
    "How many assets are there per category?",
    "Which vendor supplied the most assets?",
    "List assets in 'poor' condition",
    "Show this week's asset transactions",
)


def build_sql_prompt(question: str, schema: SchemaDescriptor) -> str:
    hidden = ", ".join(sorted(schema.restricted_columns))
    return f"""You are an assistant that writes SQL for an IT asset management system.

{schema.describe()}
RULES:
1. Generate SELECT queries only. Never INSERT, UPDATE, DELETE, DROP or any other modification.
2. Never reference these columns: {hidden}
3. Use JOIN when data from several tables is needed.
4. Give result columns clear aliases.
5. Currency values are in Rupiah (IDR).
6. Limit results to at most {MAX_LIMIT} rows with LIMIT.
7. If the question cannot be answered from this data, say why.

QUESTION: "{question}"

Reply with JSON only, no Markdown:
{{
    "can_answer": true or false,
    "sql_query": "SELECT ... (when can_answer is true)",
    "explanation": "what the query does, or why it cannot be answered",
    "expected_result_type": "single_value|list|table|count"
}}"""


def build_answer_prompt(question: str, rows: list[dict[str, object]], plan: GeneratedQuery) -> str:
    results = json.dumps(rows, indent=2, default=str)
    return f"""You help answer questions about IT asset data in a friendly, informative way.

QUESTION: "{question}"

QUERY EXPLANATION: {plan.explanation}

QUERY RESULTS (JSON):
{results}

RESULT TYPE: {plan.expected_result_type}

INSTRUCTIONS:
1. Answer naturally and clearly.
2. Format currency as Rupiah (Rp X.XXX.XXX) and dates in a readable form.
3. Show lists as numbered lists, at most 10 items.
4. If there is no data, say so politely.
5. Keep it to 3-4 short paragraphs.

Reply directly, without a code block."""


def build_general_prompt(message: str) -> str:
    return f"""You are the assistant of an IT asset management system.
Answer the message below briefly and helpfully.
If it is about asset data, suggest asking specifically about:
- the number or list of assets
- asset status (available, in use, maintenance, disposed)
- asset category, location or vendor
- asset value or price
- asset transaction or usage history

MESSAGE: "{message}"
"""
