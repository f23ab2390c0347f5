"""Recovery of JSON objects from free-text model replies.

Providers without a native JSON mode tend to wrap the object in markdown
fences or a sentence of prose, and often leave raw newlines inside string
values. parse_json_response() tolerates all three.
"""

import json
import re
from typing import Iterator

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

# strict=False accepts raw control characters inside strings
_LENIENT_DECODER = json.JSONDecoder(strict=False)


def _candidates(text: str) -> Iterator[str]:
    """Substrings of text that may hold the JSON payload, most likely first."""
    yield text
    fence = _JSON_FENCE_RE.search(text)
    if fence:
        yield fence.group(1).strip()
    for open_char, close_char in (("{", "}"), ("[", "]")):
        start, end = text.find(open_char), text.rfind(close_char)
        if 0 <= start < end:
            yield text[start:end + 1]


def _as_object(value) -> dict:
    """Coerce a decoded payload to a dict.

    A list yields its first object; anything else is wrapped.
    """
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        return next((item for item in value if isinstance(item, dict)), {"items": value})
    return {"value": value}


def parse_json_response(text: str) -> dict:
    """Extract and parse the JSON object from a model reply.

    Raises:
        ValueError: If no candidate substring decodes.
    """
    text = (text or "").strip()
    for candidate in _candidates(text):
        try:
            return _as_object(_LENIENT_DECODER.decode(candidate))
        except json.JSONDecodeError:
            continue
    raise ValueError(f"Failed to parse JSON from LLM response: {text[:200]}...")
