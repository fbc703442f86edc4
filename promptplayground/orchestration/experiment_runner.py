# -*- coding: utf-8 -*-
"""
ExperimentRunner
================
Drives one prompt experiment from input text to result file.

Job:
- Turn the input into a prompt, depending on InputMode:
    SINGLE_SOURCE          Apex class → DEFAULT_INSTRUCTIONS + derived user rules + class as context 0
    STRUCTURED_EXPERIMENT  YAML experiment → its own system / user / context fields
    RAW_PROMPT             file text sent verbatim (no assembly)
- Call the LLM single-shot, or stream and fold the chunks (stream_consumer).
- Extract the OpenAPI document (payload_extractor).
- Write exactly one timestamped YAML file under <results_root>/results/.

This class stays thin:
- It does NOT know the prompt layout (compose_texts does that).
- It does NOT know provider shapes (LLMClient / stream_consumer do that).
- No state is kept between run() calls.
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from promptplayground.config.settings import Backend, BackendNotImplementedError
from promptplayground.orchestration.experiment_loader import dump_ideal_solution, parse_experiment
from promptplayground.orchestration.llm_client import DEFAULT_MAX_TOKENS
from promptplayground.orchestration.prompt_helpers.compose_texts import END_OF_PROMPT_TAG, assemble_spec
from promptplayground.orchestration.prompt_helpers.payload_extractor import (
    extract_openapi,
    is_extraction_failure,
    yaml_syntax_errors,
)
from promptplayground.orchestration.prompt_helpers.stream_consumer import consume
from promptplayground.orchestration.prompt_helpers.user_prompt_rules import build_user_prompt
from promptplayground.orchestration.prompt_spec import ContextBlock, PromptSpec
from promptplayground.prompts.constants import APEX_CONTEXT_LABEL, DEFAULT_INSTRUCTIONS, OPERATION_TAG
from promptplayground.utils.logging import SimpleLogger
from promptplayground.utils.paths import PREFIXES, result_file_path, results_dir

ProgressFn = Callable[[str], None]

# Same-second runs get _1, _2, ... before giving up.
MAX_NAME_ATTEMPTS = 100


class InputMode(Enum):
    SINGLE_SOURCE = "single_source"
    STRUCTURED_EXPERIMENT = "structured_experiment"
    RAW_PROMPT = "raw_prompt"


class EmptyResponseError(RuntimeError):
    """Raised when the model returns no text at all."""


@dataclass(frozen=True, slots=True)
class RunResult:
    output_path: Path
    payload: str
    prompt: str

    @property
    def extracted(self) -> bool:
        return not is_extraction_failure(self.payload)


def _indent(text: str) -> str:
    return textwrap.indent(text.rstrip("\n"), "  ")


def render_experiment_result(prompt: str, payload: str, ideal_solution: Any = None) -> str:
    """
    Result file body for structured experiments:

        prompt: |
          <assembled prompt>

        <payload>

        ideal_solution:
          <ideal solution as YAML>
    """
    body = payload.rstrip("\n")
    text = f"prompt: |\n{_indent(prompt)}\n\n{body}\n"
    if ideal_solution is not None:
        text += f"\n{dump_ideal_solution(ideal_solution)}"
    return text


def build_single_source_spec(source_text: str) -> PromptSpec:
    """PromptSpec for one Apex class: the class itself, as written, is the only (primary) context."""
    body = f"```\n{(source_text or '').rstrip()}\n```"
    return PromptSpec(
        system_prompt=DEFAULT_INSTRUCTIONS,
        user_prompt=build_user_prompt(source_text),
        context_blocks=[ContextBlock(label=APEX_CONTEXT_LABEL, body=body, verbatim=True)],
    )


class ExperimentRunner:
    """
    One runner per host; every run() is independent.

    llm_client:
        Anything with call_llm(prompt, stop_sequences) -> str and
        get_chat_stream(request, operation_tag) -> iterable of chunks (closed after use if it has close()).
    backend:
        Resolved once by the host (config.settings.resolve_backend).
    results_root:
        Workspace root; results go to <results_root>/results/.
    clock:
        Source of "now" for file names.
    """

    def __init__(
        self,
        llm_client: Any,
        backend: Backend,
        results_root: Path,
        *,
        clock: Callable[[], datetime] = datetime.now,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._llm_client = llm_client
        self.backend: Backend = backend
        self.results_root: Path = Path(results_root)
        self._clock = clock
        self.max_tokens: int = max_tokens

    # ------------------------------------------------------------------
    # Prompt building
    # ------------------------------------------------------------------

    def build_prompt(self, mode: InputMode, source_text: str) -> Tuple[str, Any]:
        """
        Return (prompt, ideal_solution) for the given input.
        ideal_solution is only ever non-None for structured experiments.
        """
        if mode is InputMode.SINGLE_SOURCE:
            return assemble_spec(build_single_source_spec(source_text)), None

        if mode is InputMode.STRUCTURED_EXPERIMENT:
            definition = parse_experiment(source_text)
            return assemble_spec(definition.to_prompt_spec()), definition.ideal_solution

        if mode is InputMode.RAW_PROMPT:
            return source_text or "", None

        raise ValueError(f"Unknown input mode: {mode!r}")

    # ------------------------------------------------------------------
    # LLM call
    # ------------------------------------------------------------------

    def _check_backend(self) -> None:
        if self.backend is Backend.XGEN:
            return
        raise BackendNotImplementedError(
            f"The {self.backend.value} backend is recognised but not implemented yet"
        )

    def _call_llm(self, prompt: str, stream: bool) -> str:
        if not stream:
            text = self._llm_client.call_llm(prompt, [END_OF_PROMPT_TAG]) or ""
            # the stop tag is echoed by endpoints that ignore `stop`; nothing after it is output
            return text.split(END_OF_PROMPT_TAG, 1)[0]

        request: Dict[str, Any] = {
            "prompt": prompt,
            "stop_sequences": [END_OF_PROMPT_TAG],
            "max_tokens": self.max_tokens,
            "parameters": {"command_source": "chat"},
        }
        chunks = self._llm_client.get_chat_stream(request, OPERATION_TAG)
        try:
            return consume(chunks, END_OF_PROMPT_TAG)
        finally:
            # consume() may stop early; release the HTTP response either way
            close = getattr(chunks, "close", None)
            if close is not None:
                close()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _write_result(self, prefix: str, label: str, content: str) -> Path:
        directory = results_dir(self.results_root)
        now = self._clock()
        for attempt in range(MAX_NAME_ATTEMPTS):
            path = result_file_path(directory, prefix, label, now, attempt)
            try:
                with path.open("x", encoding="utf-8") as fh:
                    fh.write(content)
            except FileExistsError:
                continue
            return path
        raise FileExistsError(f"No free result file name for {prefix}_{label} in {directory}")

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def run(
        self,
        mode: InputMode,
        source_text: str,
        label: str,
        *,
        stream: bool = False,
        progress: Optional[ProgressFn] = None,
    ) -> RunResult:
        """
        Run one experiment and write its result file.

        Any failure (bad experiment file, missing context entry, backend error,
        empty response, filesystem error) raises before a file is written.
        A response without an OpenAPI document is not a failure: the result
        file then holds the EXTRACTION_FAILURE message.
        """
        report = progress or (lambda _msg: None)
        report("Running...")
        self._check_backend()

        prompt, ideal_solution = self.build_prompt(mode, source_text)
        SimpleLogger.info(f"ExperimentRunner: mode={mode.value}, label={label!r}, stream={stream}")
        SimpleLogger.debug(f"ExperimentRunner → LLM prompt:\n{prompt}")

        raw_result = self._call_llm(prompt, stream)
        SimpleLogger.debug(f"ExperimentRunner ← LLM raw result:\n{raw_result}")
        if not (raw_result or "").strip():
            raise EmptyResponseError("The LLM returned an empty response")

        payload = extract_openapi(raw_result)
        if not is_extraction_failure(payload):
            errors = yaml_syntax_errors(payload)
            if errors:
                msg = f"Generated YAML document has syntax errors: {'; '.join(errors)}"
                SimpleLogger.warning(f"ExperimentRunner: {msg}")
                report(msg)

        if mode is InputMode.STRUCTURED_EXPERIMENT:
            content = render_experiment_result(prompt, payload, ideal_solution)
        else:
            content = payload

        prefix = PREFIXES["raw"] if mode is InputMode.RAW_PROMPT else PREFIXES["document"]
        output_path = self._write_result(prefix, label, content)
        SimpleLogger.info(f"ExperimentRunner: result written to {output_path}")

        return RunResult(output_path=output_path, payload=payload, prompt=prompt)
