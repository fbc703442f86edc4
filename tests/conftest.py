# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from promptplayground.config.settings import Backend, Settings
from promptplayground.orchestration.experiment_runner import ExperimentRunner
from promptplayground.utils.logging import SimpleLogger

FIXED_NOW = datetime(2024, 3, 5, 14, 7, 9)
FIXED_STAMP = "03052024_14:07:09"

OPENAPI_RESPONSE = (
    "Here is the specification:\n"
    "```yaml\n"
    "openapi: 3.0.0\n"
    "info:\n"
    "  title: Demo\n"
    "  version: '1.0'\n"
    "paths: {}\n"
    "```"
)


class FakeStream:
    """Chunk stream with close(), like openai.Stream; records how far it was read."""

    def __init__(self, chunks: Iterable[Any]) -> None:
        self._chunks = list(chunks)
        self.pulled = 0
        self.closed = False

    def __iter__(self):
        for chunk in self._chunks:
            if self.closed:
                return
            self.pulled += 1
            yield chunk

    def close(self) -> None:
        self.closed = True


class FakeLLMClient:
    """Stands in for LLMClient: returns canned text / chunks and records every call."""

    def __init__(self, response: str = OPENAPI_RESPONSE, chunks: Optional[Iterable[Any]] = None) -> None:
        self.response = response
        self.chunks = list(chunks or [])
        self.prompts: List[str] = []
        self.stop_sequences: List[Optional[List[str]]] = []
        self.stream_requests: List[Tuple[Dict[str, Any], str]] = []
        self.streams: List[FakeStream] = []

    def call_llm(self, prompt: str, stop_sequences: Optional[List[str]] = None) -> str:
        self.prompts.append(prompt)
        self.stop_sequences.append(stop_sequences)
        return self.response

    def get_chat_stream(self, request: Dict[str, Any], operation_tag: str):
        self.stream_requests.append((request, operation_tag))
        stream = FakeStream(self.chunks)
        self.streams.append(stream)
        return stream

    @property
    def calls(self) -> int:
        return len(self.prompts) + len(self.stream_requests)


def text_chunk(text: str, finish_reason: Optional[str] = None) -> Dict[str, Any]:
    return {"choices": [{"text": text, "finish_reason": finish_reason}]}


@pytest.fixture(autouse=True)
def _quiet_logger():
    SimpleLogger.set_enabled(False)
    yield
    SimpleLogger.set_enabled(True)
    SimpleLogger.set_debug(False)


@pytest.fixture(autouse=True)
def _fresh_settings():
    Settings.clear()
    yield
    Settings.clear()


@pytest.fixture
def fake_client() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def runner(fake_client: FakeLLMClient, workspace: Path) -> ExperimentRunner:
    return ExperimentRunner(fake_client, Backend.XGEN, workspace, clock=lambda: FIXED_NOW)
