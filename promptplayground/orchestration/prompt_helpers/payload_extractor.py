# -*- coding: utf-8 -*-
"""
payload_extractor
=================

Why this helper exists:
- LLMs wrap the OpenAPI document in prose and Markdown code fences.
- ExperimentRunner should not be cluttered with low-level cleanup details.

What it does:
- `extract_openapi(full_text)` cuts the text from the first "openapi" marker to
  the end and drops a trailing code-fence line.
- When the marker is absent it returns EXTRACTION_FAILURE instead of raising,
  so the run still writes a record of the attempt.
- `yaml_syntax_errors(payload)` lets callers report (not fail on) YAML problems.

The marker scan is a heuristic: "openapi" appearing in prose before the real
document moves the cut point there.
"""

from __future__ import annotations

import re
from typing import List

import yaml

from promptplayground.utils.logging import SimpleLogger

PAYLOAD_MARKER = "openapi"

EXTRACTION_FAILURE = "An OpenAPI v3 specification cannot be generated for this Apex class."

# A closing fence on its own line at the very end of the text.
_TRAILING_FENCE_RE = re.compile(r"(?:(?<=\n)|\A)```\s*\Z")


def strip_trailing_fence(text: str) -> str:
    """Remove one trailing code-fence line (``` alone on the last line); keep the newline before it."""
    match = _TRAILING_FENCE_RE.search(text)
    if match is None:
        return text
    return text[: match.start()]


def extract_openapi(full_text: str) -> str:
    """
    Best-effort extraction of the OpenAPI document from raw LLM output.

    Strategy:
    - Locate the first "openapi"; none → EXTRACTION_FAILURE.
    - Keep everything from there to the end.
    - Remove a single trailing code-fence line, if present.
    """
    text = full_text or ""
    index = text.find(PAYLOAD_MARKER)
    SimpleLogger.info(f"payload_extractor: index of {PAYLOAD_MARKER!r} in response = {index}")

    if index == -1:
        SimpleLogger.warning(f"payload_extractor: could not find {PAYLOAD_MARKER!r} in response")
        return EXTRACTION_FAILURE

    return strip_trailing_fence(text[index:])


def is_extraction_failure(result: str) -> bool:
    return result == EXTRACTION_FAILURE


def yaml_syntax_errors(payload: str) -> List[str]:
    """
    Return YAML syntax problems found in `payload` (empty list when it parses).
    Never raises.
    """
    try:
        for _ in yaml.safe_load_all(payload):
            pass
    except yaml.YAMLError as exc:
        return [str(exc)]
    return []
