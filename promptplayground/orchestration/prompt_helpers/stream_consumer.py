# -*- coding: utf-8 -*-
"""
stream_consumer
===============

Why this helper exists:
- A streamed completion arrives as provider objects of loosely defined shape.
- The runner only needs "text so far" and "stop now", so provider shapes are
  mapped onto three explicit variants first, then folded.

Variants:
- TextChunk(text)          : a piece of generated text.
- DoneChunk(reason, text)  : the provider signalled a finish reason (text may be non-empty).
- MalformedChunk(detail)   : anything without the expected shape.

Termination:
- A TextChunk containing the end-of-prompt sentinel ends the stream.
- A DoneChunk ends the stream.
- A MalformedChunk ends the stream (truncate rather than hang).
The first chunk that ends the stream still contributes its text (minus the
sentinel); nothing after it is read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Tuple, Union

from promptplayground.orchestration.prompt_helpers.compose_texts import END_OF_PROMPT_TAG
from promptplayground.utils.logging import SimpleLogger


@dataclass(frozen=True, slots=True)
class TextChunk:
    text: str


@dataclass(frozen=True, slots=True)
class DoneChunk:
    reason: str
    text: str = ""


@dataclass(frozen=True, slots=True)
class MalformedChunk:
    detail: str = ""


StreamChunk = Union[TextChunk, DoneChunk, MalformedChunk]


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def classify_chunk(raw: Any) -> StreamChunk:
    """
    Map one provider chunk onto a StreamChunk variant.

    Accepted shapes (objects or dicts):
      - completion chunk: {"choices": [{"text": "...", "finish_reason": None | "stop" | ...}]}
      - chat chunk:       {"choices": [{"delta": {"content": "..."}, "finish_reason": ...}]}
    Already-classified variants pass through unchanged.
    """
    if isinstance(raw, (TextChunk, DoneChunk, MalformedChunk)):
        return raw

    choices = _field(raw, "choices")
    if not choices:
        return MalformedChunk(detail=f"chunk without choices: {type(raw).__name__}")

    choice = choices[0]
    text = _field(choice, "text")
    if text is None:
        delta = _field(choice, "delta")
        if delta is not None:
            text = _field(delta, "content")
    finish_reason = _field(choice, "finish_reason")

    if text is None and not finish_reason:
        return MalformedChunk(detail="choice without text or finish_reason")
    if text is not None and not isinstance(text, str):
        return MalformedChunk(detail=f"non-string text: {type(text).__name__}")

    if finish_reason:
        return DoneChunk(reason=str(finish_reason), text=text or "")
    return TextChunk(text=text or "")


def inspect_chunk(chunk: StreamChunk, sentinel: str = END_OF_PROMPT_TAG) -> Tuple[bool, str]:
    """
    Return (done, fragment) for one classified chunk.
    The fragment has the first occurrence of `sentinel` removed.
    """
    if isinstance(chunk, TextChunk):
        done = sentinel in chunk.text
        return done, chunk.text.replace(sentinel, "", 1)
    if isinstance(chunk, DoneChunk):
        return True, chunk.text.replace(sentinel, "", 1)
    if isinstance(chunk, MalformedChunk):
        return True, ""
    raise TypeError(f"Unknown stream chunk variant: {type(chunk).__name__}")


def consume(chunks: Iterable[Any], sentinel: str = END_OF_PROMPT_TAG) -> str:
    """
    Fold a chunk stream into the generated text.

    Chunks are inspected strictly in order; consumption stops at the first
    chunk that ends the stream, so the remainder is never pulled from the
    iterator. Errors raised while inspecting a chunk end the stream with an
    empty fragment. Errors raised by the iterator itself propagate.
    """
    parts = []
    count = 0
    for raw in chunks:
        count += 1
        try:
            chunk = classify_chunk(raw)
        except Exception as exc:
            SimpleLogger.warning(f"stream_consumer: chunk #{count} could not be inspected: {exc!r}")
            chunk = MalformedChunk(detail=repr(exc))

        done, fragment = inspect_chunk(chunk, sentinel)
        parts.append(fragment)

        if done:
            if isinstance(chunk, MalformedChunk):
                SimpleLogger.warning(
                    f"stream_consumer: stopping at malformed chunk #{count} ({chunk.detail})"
                )
            else:
                SimpleLogger.debug(f"stream_consumer: stream finished at chunk #{count}")
            break

    return "".join(parts)
