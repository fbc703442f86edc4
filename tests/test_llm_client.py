# -*- coding: utf-8 -*-
from types import SimpleNamespace

import pytest

from conftest import FIXED_NOW, FakeStream, text_chunk
from promptplayground.config.settings import Backend
from promptplayground.orchestration.experiment_runner import ExperimentRunner, InputMode
from promptplayground.orchestration.llm_client import LLMClient
from promptplayground.orchestration.prompt_helpers.compose_texts import END_OF_PROMPT_TAG
from promptplayground.prompts.constants import OPERATION_TAG


class RecordingCompletions:
    """Replaces client.completions: keeps the kwargs of every create() call."""

    def __init__(self, text="", chunks=()):
        self.text = text
        self.chunks = list(chunks)
        self.calls = []
        self.streams = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if kwargs.get("stream"):
            stream = FakeStream(self.chunks)
            self.streams.append(stream)
            return stream
        return SimpleNamespace(choices=[SimpleNamespace(text=self.text)])


def _client(completions, max_tokens=512):
    client = LLMClient(api_key="sk-test", base_url="http://localhost:9/v1", model_name="xgen-test", max_tokens=max_tokens)
    client._client = SimpleNamespace(completions=completions)
    return client


def test_call_llm_forwards_stop_sequences():
    completions = RecordingCompletions(text="openapi: 3.0.0\n")
    client = _client(completions)

    assert client.call_llm("PROMPT", [END_OF_PROMPT_TAG]) == "openapi: 3.0.0\n"
    assert completions.calls == [
        {"model": "xgen-test", "prompt": "PROMPT", "max_tokens": 512, "stop": [END_OF_PROMPT_TAG]}
    ]


def test_call_llm_without_stop_sends_no_stop_key():
    completions = RecordingCompletions(text="x")
    _client(completions).call_llm("PROMPT")
    assert "stop" not in completions.calls[0]


def test_get_chat_stream_request_shape():
    completions = RecordingCompletions(chunks=[text_chunk("a")])
    client = _client(completions)

    stream = client.get_chat_stream(
        {
            "prompt": "PROMPT",
            "stop_sequences": [END_OF_PROMPT_TAG],
            "max_tokens": 2048,
            "parameters": {"command_source": "chat", "temperature": 0.2},
        },
        OPERATION_TAG,
    )

    assert stream is completions.streams[0]
    assert completions.calls == [
        {
            "model": "xgen-test",
            "prompt": "PROMPT",
            "max_tokens": 2048,
            "stream": True,
            "stop": [END_OF_PROMPT_TAG],
            "temperature": 0.2,
        }
    ]


def test_client_without_key_refuses_calls(monkeypatch):
    monkeypatch.delenv("XGEN_API_KEY", raising=False)
    client = LLMClient(api_key="", model_name="xgen-test")
    with pytest.raises(RuntimeError, match="not initialised"):
        client.call_llm("PROMPT")


# ----------------------------------------------------------------------
# Through the runner
# ----------------------------------------------------------------------

def test_runner_single_shot_sends_stop_and_drops_echoed_tag(workspace):
    completions = RecordingCompletions(text=f"openapi: 3.0.0\npaths: {{}}\n```\n{END_OF_PROMPT_TAG}")
    runner = ExperimentRunner(_client(completions), Backend.XGEN, workspace, clock=lambda: FIXED_NOW)

    result = runner.run(InputMode.SINGLE_SOURCE, "public class A {}", "A")

    assert completions.calls[0]["stop"] == [END_OF_PROMPT_TAG]
    assert "stream" not in completions.calls[0]
    assert result.output_path.read_text(encoding="utf-8") == "openapi: 3.0.0\npaths: {}\n"


def test_runner_closes_provider_stream_after_early_stop(workspace):
    completions = RecordingCompletions(chunks=[text_chunk(f"openapi: 3\n{END_OF_PROMPT_TAG}"), text_chunk("unread")])
    runner = ExperimentRunner(_client(completions), Backend.XGEN, workspace, clock=lambda: FIXED_NOW)

    result = runner.run(InputMode.SINGLE_SOURCE, "public class A {}", "A", stream=True)

    assert result.payload == "openapi: 3\n"
    assert completions.calls[0]["stream"] is True
    assert completions.streams[0].pulled == 1
    assert completions.streams[0].closed
