# -*- coding: utf-8 -*-
from pathlib import Path

import pytest

from conftest import FIXED_NOW, FakeLLMClient
from promptplayground.app.controller import AppController, EditorDocument
from promptplayground.config.settings import Backend
from promptplayground.orchestration.experiment_runner import ExperimentRunner
from promptplayground.prompts.constants import SAMPLE_YAML_PROMPT


@pytest.fixture
def built_runners():
    return []


@pytest.fixture
def controller(built_runners):
    client = FakeLLMClient()

    def factory(root: Path) -> ExperimentRunner:
        runner = ExperimentRunner(client, Backend.XGEN, root, clock=lambda: FIXED_NOW)
        built_runners.append(runner)
        return runner

    return AppController(runner_factory=factory)


# ----------------------------------------------------------------------
# Send commands
# ----------------------------------------------------------------------

def test_send_source_success(controller, workspace):
    doc = EditorDocument(path=Path("classes/Greeter.cls"), text="@AuraEnabled public class Greeter {}")
    outcome = controller.send_source_to_llm(doc, workspace)

    assert outcome.ok
    assert outcome.message == "Send Prompt in Current Apex File to LLM command completed successfully."
    assert outcome.output_path.parent == workspace / "results"
    assert outcome.output_path.name.startswith("documentContents_Greeter_")


def test_send_reads_document_from_path(controller, workspace, tmp_path):
    source = tmp_path / "raw_input.txt"
    source.write_text("verbatim prompt", encoding="utf-8")
    outcome = controller.send_raw_prompt_to_llm(source, workspace)
    assert outcome.ok
    assert outcome.output_path.name.startswith("rawPrompt_raw_input_")


def test_no_document_is_reported(controller, workspace, built_runners):
    outcome = controller.send_source_to_llm(None, workspace)
    assert not outcome.ok
    assert outcome.message == "Send Prompt in Current Apex File to LLM command failed: No active editor detected"
    assert built_runners == []


def test_no_workspace_is_reported(controller, built_runners):
    doc = EditorDocument(path=Path("exp.yaml"), text="userPrompt: x\n")
    outcome = controller.send_experiment_to_llm(doc, None)
    assert not outcome.ok
    assert outcome.message == "Send Prompt in Current YAML File to LLM command failed: No workspace folder is open"
    assert built_runners == []


def test_runner_errors_become_failed_outcomes(controller, workspace):
    doc = EditorDocument(path=Path("exp.yaml"), text="context:\n  - context2: {text: a, context: b}\n")
    outcome = controller.send_experiment_to_llm(doc, workspace)
    assert not outcome.ok
    assert outcome.message.endswith("command failed: Context is missing: context1")
    assert outcome.output_path is None
    assert not (workspace / "results").exists()


def test_missing_input_file_is_reported(controller, workspace, tmp_path):
    outcome = controller.send_raw_prompt_to_llm(tmp_path / "gone.txt", workspace)
    assert not outcome.ok
    assert outcome.message.startswith("Send Raw Prompt in Current File to LLM command failed:")


def test_document_label_is_file_stem():
    assert EditorDocument(path=Path("a/b/MyClass.cls"), text="").label == "MyClass"


# ----------------------------------------------------------------------
# Sample generation
# ----------------------------------------------------------------------

def test_generate_sample_adds_yaml_suffix(controller, tmp_path):
    outcome = controller.generate_sample_experiment("exp1", tmp_path)
    assert outcome.ok
    assert outcome.output_path == tmp_path / "exp1.yaml"
    assert outcome.output_path.read_text(encoding="utf-8") == SAMPLE_YAML_PROMPT


def test_generate_sample_keeps_given_suffix(controller, tmp_path):
    outcome = controller.generate_sample_experiment("exp1.yml", tmp_path)
    assert outcome.output_path == tmp_path / "exp1.yml"


def test_generate_sample_never_overwrites(controller, tmp_path):
    existing = tmp_path / "exp1.yaml"
    existing.write_text("mine", encoding="utf-8")

    outcome = controller.generate_sample_experiment("exp1", tmp_path)
    assert not outcome.ok
    assert "already exists" in outcome.message
    assert existing.read_text(encoding="utf-8") == "mine"


@pytest.mark.parametrize(
    "filename, use_dest, message",
    [
        (None, True, "No filename provided"),
        ("  ", True, "No filename provided"),
        ("exp", False, "No destination folder selected"),
    ],
)
def test_generate_sample_missing_inputs(controller, tmp_path, filename, use_dest, message):
    outcome = controller.generate_sample_experiment(filename, tmp_path if use_dest else None)
    assert not outcome.ok
    assert outcome.message == f"Generate Sample YAML Prompt File command failed: {message}"


def test_generate_sample_destination_must_exist(controller, tmp_path):
    outcome = controller.generate_sample_experiment("exp", tmp_path / "missing")
    assert not outcome.ok
    assert "Destination folder does not exist" in outcome.message
