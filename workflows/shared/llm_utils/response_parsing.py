"""LLM response parsing utilities."""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)


def strip_code_fences(content: str) -> str:
    """Remove a Markdown code fence wrapping the whole response."""
    content = content.strip()
    match = _FENCE_RE.match(content)
    if match:
        return match.group(1).strip()
    if "```json" in content:
        return content.split("```json")[1].split("```")[0].strip()
    return content


def extract_json_object(content: str) -> str | None:
    """Return the first balanced ``{...}`` block, ignoring braces inside strings."""
    start = content.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(content)):
        char = content[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return content[start : index + 1]
    return None


def extract_json_from_response(content: str, default: dict | None = None) -> dict:
    """Extract a JSON object from LLM output, tolerating fences and chatter.

    Raises:
        ValueError: No parseable JSON object and no default given
    """
    block = extract_json_object(strip_code_fences(content))
    if block is None:
        if default is not None:
            return default
        raise ValueError("No JSON object found in response")

    try:
        data = json.loads(block)
    except json.JSONDecodeError:
        if default is not None:
            return default
        raise

    if not isinstance(data, dict):
        if default is not None:
            return default
        raise ValueError("Response JSON is not an object")
    return data


def extract_response_content(response: Any) -> str:
    """Extract text content from various LLM response formats."""
    if isinstance(response.content, str):
        return response.content.strip()
    if isinstance(response.content, list) and response.content:
        first_block = response.content[0]
        if isinstance(first_block, dict):
            return first_block.get("text", "").strip()
        if hasattr(first_block, "text"):
            return first_block.text.strip()
        return str(first_block).strip()
    return str(response.content).strip()
