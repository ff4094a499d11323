"""Thin wrappers around LLM responses: Anthropic calls and JSON extraction."""

from __future__ import annotations

import json
import logging
import re

import anthropic

from poly_edge.common.types import JsonDict

logger = logging.getLogger(__name__)

# ```json ... ``` fences some models wrap around their answer
_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


async def ask_claude(
    client: anthropic.AsyncAnthropic,
    model: str,
    system: str,
    user: str,
    max_tokens: int = 1024,
    temperature: float = 0.3,
) -> str:
    """Send a prompt to Claude and return the text response."""
    message = await client.messages.create(
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        system=system,
        messages=[{"role": "user", "content": user}],
    )
    if not message.content or message.content[0].type != "text":
        raise ValueError("Claude returned no text content")
    return message.content[0].text


def extract_json_object(text: str) -> JsonDict | None:
    """Parse an LLM response body into a JSON object.

    Tolerates surrounding whitespace and a markdown code fence. Returns None
    when the body is not JSON or decodes to something other than an object.
    """
    body = text.strip()
    fenced = _CODE_FENCE.match(body)
    if fenced:
        body = fenced.group(1)

    try:
        result = json.loads(body)
    except json.JSONDecodeError as exc:
        logger.debug("Response is not JSON: %s", exc)
        return None

    if not isinstance(result, dict):
        return None
    return result
