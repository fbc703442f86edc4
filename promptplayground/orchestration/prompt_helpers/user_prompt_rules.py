# -*- coding: utf-8 -*-
"""
user_prompt_rules
=================

Why this helper exists:
- In single-source mode there is no hand-written user prompt; the user
  instructions are derived from the Apex class itself.
- Each instruction depends on one annotation being present, so the rules are
  a table, not code branches.

What it does:
- Provides `build_user_prompt(source_text)`.

Rules are plain substring checks, not Apex parsing: an annotation mentioned in
a comment also fires its rule. Each rule is independent of the others and is
evaluated in table order, so the result depends only on which markers occur.
"""

from __future__ import annotations

from typing import List, Tuple

# (markers, sentence): the sentence is appended when ANY marker occurs in the source.
USER_PROMPT_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (
        ("@AuraEnabled",),
        "Only include methods that have the @AuraEnabled annotation in the paths "
        "of the OpenAPI v3 specification.",
    ),
    (
        ("@RestResource",),
        "Only include methods that have @HttpGet, @HttpPost, @HttpPatch, @HttpPut, "
        "or @HttpDelete annotations in the paths of the OpenAPI v3 specification. "
        "Unannotated methods are utility methods.",
    ),
    (
        ("@HttpGet", "@HttpDelete"),
        "Methods annotated with @HttpGet or @HttpDelete must have no parameters. "
        "This is because GET and DELETE requests have no request body, so there's "
        "nothing to deserialize.",
    ),
)


def matching_rules(source_text: str) -> List[str]:
    """Return the sentences whose markers occur in `source_text`, in table order."""
    text = source_text or ""
    return [
        sentence
        for markers, sentence in USER_PROMPT_RULES
        if any(marker in text for marker in markers)
    ]


def build_user_prompt(source_text: str) -> str:
    """
    Build the user prompt for an Apex source: one line per matching rule,
    each terminated by a newline. Empty string when no rule fires.
    """
    return "".join(f"{sentence}\n" for sentence in matching_rules(source_text))
