"""
Helpers for pulling JSON out of free-form model replies.

Models wrap JSON in markdown fences, prepend chatter, and occasionally emit
trailing commas or raw newlines inside strings. The pipeline is:

  strip_code_fence -> slice first opener .. last closer -> json.loads
  -> on failure: repair_json -> json.loads -> InvalidModelJSON
"""

import json
import logging
import re
from typing import Any, List

logger = logging.getLogger(__name__)

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")

_DELIMITERS = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}


class InvalidModelJSON(ValueError):
    code = "PARSE_ERROR"

    def __init__(self, raw_text: str, error: str):
        super().__init__(f"Model output is not valid JSON: {error}")
        self.raw_text = raw_text
        self.error = error


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines.pop(0)
        if lines and lines[-1].strip() == "```":
            lines.pop()
        cleaned = "\n".join(lines)
    return cleaned.strip()


def extract_json(text: str, kind: str = "object") -> str:
    """
    Return the JSON-looking slice of ``text``.

    ``kind`` selects the delimiters: "object" slices between the first "{"
    and the last "}", "array" between the first "[" and the last "]". When
    either delimiter is missing the fence-stripped text is returned as-is.
    """
    opener, closer = _DELIMITERS[kind]
    cleaned = strip_code_fence(text)
    first = cleaned.find(opener)
    last = cleaned.rfind(closer)
    if first != -1 and last != -1:
        cleaned = cleaned[first : last + 1]
    return cleaned


def _escape_control_chars_in_strings(text: str) -> str:
    out: List[str] = []
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            elif char == "\n":
                out.append("\\n")
                continue
            elif char == "\r":
                out.append("\\r")
                continue
            elif char == "\t":
                out.append("\\t")
                continue
        elif char == '"':
            in_string = True
        out.append(char)
    return "".join(out)


def repair_json(text: str) -> str:
    """Drop trailing commas and escape raw newlines that sit inside string literals."""
    repaired = _TRAILING_COMMA.sub(r"\1", text)
    return _escape_control_chars_in_strings(repaired)


def parse_model_json(text: str, kind: str = "object", *, repair: bool = True) -> Any:
    candidate = extract_json(text, kind)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        if not repair:
            logger.error("JSON parse failed: %s", text[:500])
            raise InvalidModelJSON(text, str(exc)) from exc
        logger.info("Initial parse failed, attempting repair...")

    try:
        return json.loads(repair_json(candidate))
    except json.JSONDecodeError as exc:
        logger.error("JSON parse failed after repair: %s", text[:500])
        raise InvalidModelJSON(text, str(exc)) from exc
