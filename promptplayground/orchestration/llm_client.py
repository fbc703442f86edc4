# promptplayground/orchestration/llm_client.py
# -*- coding: utf-8 -*-
"""
LLMClient: thin wrapper around a text-completion LLM endpoint.

Current implementation:
- Uses OpenAI Python client v1 (OpenAI() + client.completions.create) against an
  OpenAI-compatible completion endpoint serving the XGen model.
- Reads XGEN_API_KEY / XGEN_BASE_URL / XGEN_MODEL from Settings (or the
  arguments passed to __init__).
- Two call shapes:
    call_llm(prompt)                          -> full response text
    get_chat_stream(request, operation_tag)   -> iterator of provider chunks
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from openai import OpenAI, Stream
from openai.types import Completion

from promptplayground.config.settings import Settings
from promptplayground.utils.logging import SimpleLogger

JsonDict = Dict[str, Any]

DEFAULT_MODEL = "xgen"
DEFAULT_MAX_TOKENS = 2048


class LLMClient:
    """
    Neutral LLM gateway.

    You give it:
      - a fully assembled prompt string (single-shot), or
      - a request dict {prompt, stop_sequences, max_tokens, parameters} (streaming)

    It returns:
      - the generated text (single-shot), or
      - the provider's chunk stream, untouched (streaming; the caller closes it, see stream_consumer)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_name: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        key = api_key or Settings.get("XGEN_API_KEY") or ""
        url = base_url or Settings.get("XGEN_BASE_URL") or None
        self.model_name: str = model_name or Settings.get("XGEN_MODEL") or DEFAULT_MODEL
        self.max_tokens: int = int(max_tokens or Settings.get("XGEN_MAX_TOKENS") or DEFAULT_MAX_TOKENS)
        self._client: Optional[OpenAI] = None

        if not key:
            SimpleLogger.info(
                "LLMClient: XGEN_API_KEY not set. Any LLM call will fail until you set it."
            )
            return

        try:
            # v1 client: hold a single instance
            self._client = OpenAI(api_key=key, base_url=url)
            SimpleLogger.info(f"LLMClient: client initialised (model={self.model_name}, base_url={url or 'default'}).")
        except Exception as exc:
            SimpleLogger.error(f"LLMClient: failed to initialise client: {exc!r}")
            self._client = None

    def _require_client(self) -> OpenAI:
        if self._client is None:
            raise RuntimeError("LLMClient: client is not initialised (is XGEN_API_KEY set?)")
        return self._client

    def call_llm(self, prompt: str, stop_sequences: Optional[List[str]] = None) -> str:
        """
        Single-shot completion: send the assembled prompt, return the generated text.
        """
        client = self._require_client()

        kwargs: JsonDict = {
            "model": self.model_name,
            "prompt": prompt,
            "max_tokens": self.max_tokens,
        }
        if stop_sequences:
            kwargs["stop"] = stop_sequences

        resp = client.completions.create(**kwargs)
        text = resp.choices[0].text if resp.choices else ""
        return text if isinstance(text, str) else str(text or "")

    def get_chat_stream(self, request: JsonDict, operation_tag: str) -> Stream[Completion]:
        """
        Streaming completion.

        request:
            {
              "prompt": str,
              "stop_sequences": [str, ...],
              "max_tokens": int,
              "parameters": {...}   # optional; "temperature" / "top_p" are forwarded
            }
        operation_tag:
            Name of the operation this call belongs to (logged with the request).

        The returned Stream keeps the HTTP response open until close() is called.
        """
        client = self._require_client()

        parameters: JsonDict = dict(request.get("parameters") or {})
        kwargs: JsonDict = {
            "model": self.model_name,
            "prompt": request["prompt"],
            "max_tokens": int(request.get("max_tokens") or self.max_tokens),
            "stream": True,
        }
        stop = request.get("stop_sequences")
        if stop:
            kwargs["stop"] = list(stop)
        for key in ("temperature", "top_p"):
            if key in parameters:
                kwargs[key] = parameters[key]

        SimpleLogger.info(
            f"LLMClient: opening stream for operation={operation_tag!r} "
            f"(max_tokens={kwargs['max_tokens']}, parameters={parameters})"
        )
        return client.completions.create(**kwargs)
