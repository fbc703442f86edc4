# -*- coding: utf-8 -*-
"""
compose_texts
=============

Why this helper exists:
- The text-completion model expects a single string with sentinel tags
  marking the system, user and assistant sections.
- We want ExperimentRunner to read like a high-level story, and all prompt
  formatting to live here.

What it does:
- Defines the four sentinel tags.
- Provides `assemble(...)` / `assemble_spec(...)` for the final prompt string.
- Provides `context_blocks_from_entries(...)` to turn the `context` list of a
  structured experiment into ContextBlocks, failing fast on a missing key.

Prompt layout:

    <|system|>
    <system prompt>
    <|endofprompt|>
    <|user|>
    <user prompt>
    <label + body of context 0>

    Context 1:
    <label + body of context 1>
    ...
    <|endofprompt|>
    <|assistant|>

The end-of-prompt tag is also the stop sequence of every LLM call: the
model echoes it when it is done (see stream_consumer).
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Sequence

from promptplayground.orchestration.prompt_spec import ContextBlock, PromptSpec
from promptplayground.orchestration.prompt_helpers.text_normalizer import normalize_text

SYSTEM_TAG = "<|system|>"
END_OF_PROMPT_TAG = "<|endofprompt|>"
USER_TAG = "<|user|>"
ASSISTANT_TAG = "<|assistant|>"


class ContextMissingError(ValueError):
    """Raised when a structured experiment lacks an expected `context<N>` entry."""


def _verbatim(text: str) -> str:
    return (text or "").rstrip().lstrip("\n")


def _block_lines(block: ContextBlock) -> List[str]:
    body = _verbatim(block.body) if block.verbatim else normalize_text(block.body)
    lines: List[str] = []
    for part in (normalize_text(block.label), body):
        if part:
            lines.append(part)
    return lines


def assemble(
    system_prompt: str,
    user_prompt: str,
    context_blocks: Sequence[ContextBlock],
) -> str:
    """
    Build the final prompt string sent to the model.

    - System and user prompts, labels and bodies are normalized (see text_normalizer);
      a block marked `verbatim` keeps its body as written (inner blank lines included).
    - Context block 0 follows the user prompt directly, without a header.
    - Context blocks 1.. are separated by a blank line and headed "Context N:".
    - The result ends with a newline after the assistant tag (required by the model).
    """
    lines: List[str] = [SYSTEM_TAG]

    system_text = normalize_text(system_prompt)
    if system_text:
        lines.append(system_text)

    lines.append(END_OF_PROMPT_TAG)
    lines.append(USER_TAG)

    user_text = normalize_text(user_prompt)
    if user_text:
        lines.append(user_text)

    for index, block in enumerate(context_blocks):
        if index > 0:
            lines.append("")
            lines.append(f"Context {index}:")
        lines.extend(_block_lines(block))

    lines.append(END_OF_PROMPT_TAG)
    lines.append(ASSISTANT_TAG)

    return "\n".join(lines) + "\n"


def assemble_spec(spec: PromptSpec) -> str:
    return assemble(spec.system_prompt, spec.user_prompt, spec.context_blocks)


def context_blocks_from_entries(entries: Iterable[Any] | None) -> List[ContextBlock]:
    """
    Convert a structured experiment's `context` list into ContextBlocks.

    Entry i (0-based) must be a mapping with key `context<i+1>`, whose value is
    a mapping with `text` (the label) and `context` (the body):

        context:
          - context1:
              text: 'This is the Apex class ...'
              context: |
                ...

    Raises ContextMissingError naming the first missing key. Nothing is sent
    to the model in that case, so a truncated experiment never produces a
    malformed prompt.
    """
    blocks: List[ContextBlock] = []
    for index, entry in enumerate(entries or []):
        name = f"context{index + 1}"
        if not isinstance(entry, Mapping) or name not in entry:
            raise ContextMissingError(f"Context is missing: {name}")

        value = entry[name]
        if isinstance(value, Mapping):
            label = value.get("text") or ""
            body = value.get("context") or ""
        else:
            # `context1: |` with a bare body and no label
            label, body = "", value or ""

        blocks.append(ContextBlock(label=str(label), body=str(body), name=name))
    return blocks
