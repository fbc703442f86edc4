# -*- coding: utf-8 -*-
"""
text_normalizer
===============

Why this helper exists:
- Prompt fragments come from YAML block scalars, editor buffers and Python
  constants, each with its own trailing spaces and blank lines.
- The assembled prompt must be deterministic, so every fragment passes through
  one canonical form before concatenation.

Rules:
- Trailing whitespace is removed from every line.
- Lines that are empty after trimming are dropped.
- Remaining lines are joined with a single '\\n'.

normalize_text(normalize_text(s)) == normalize_text(s) for every s.
"""

from __future__ import annotations

from typing import List


def normalize_text(text: str | None) -> str:
    if not text:
        return ""
    lines: List[str] = [line.rstrip() for line in text.split("\n")]
    return "\n".join(line for line in lines if line)
