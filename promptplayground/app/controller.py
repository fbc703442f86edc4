# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from promptplayground.config.settings import Backend, backend_from_settings
from promptplayground.orchestration.experiment_runner import ExperimentRunner, InputMode, ProgressFn
from promptplayground.orchestration.llm_client import LLMClient
from promptplayground.prompts.constants import SAMPLE_YAML_PROMPT
from promptplayground.utils.logging import SimpleLogger

RunnerFactory = Callable[[Path], ExperimentRunner]

COMMAND_TITLES: Dict[InputMode, str] = {
    InputMode.SINGLE_SOURCE: "Send Prompt in Current Apex File to LLM",
    InputMode.STRUCTURED_EXPERIMENT: "Send Prompt in Current YAML File to LLM",
    InputMode.RAW_PROMPT: "Send Raw Prompt in Current File to LLM",
}
GENERATE_SAMPLE_TITLE = "Generate Sample YAML Prompt File"


class UserInputError(ValueError):
    """Raised when a command is missing an input the user must supply."""


@dataclass(frozen=True, slots=True)
class EditorDocument:
    """The 'current file' of a command: its path (for the result label) and its text."""

    path: Path
    text: str

    @property
    def label(self) -> str:
        return Path(self.path).stem

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "EditorDocument":
        file_path = Path(path)
        return cls(path=file_path, text=file_path.read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    ok: bool
    message: str
    output_path: Optional[Path] = None


class AppController:
    def __init__(
        self,
        *,
        backend: Optional[Backend] = None,
        llm_client: Optional[LLMClient] = None,
        runner_factory: Optional[RunnerFactory] = None,
    ) -> None:
        """
        Central app controller behind every host (CLI, Streamlit).

        - Resolves the backend once (from Settings unless given).
        - Shares one LLMClient across commands, created on first use.
        - runner_factory lets tests supply a runner with a fake client / fixed clock.
        """
        self._backend = backend
        self._llm_client = llm_client
        self._runner_factory: RunnerFactory = runner_factory or self._default_runner

    def _default_runner(self, workspace_root: Path) -> ExperimentRunner:
        if self._backend is None:
            self._backend = backend_from_settings()
            SimpleLogger.info(f"AppController: LLM backend = {self._backend.value}")
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return ExperimentRunner(
            self._llm_client, self._backend, workspace_root, max_tokens=self._llm_client.max_tokens
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def send_source_to_llm(
        self,
        document: Union[EditorDocument, Path, str, None],
        workspace_root: Optional[Path],
        *,
        stream: bool = False,
        progress: Optional[ProgressFn] = None,
    ) -> CommandOutcome:
        """Apex class in the current file → OpenAPI v3 document."""
        return self._send(InputMode.SINGLE_SOURCE, document, workspace_root, stream, progress)

    def send_experiment_to_llm(
        self,
        document: Union[EditorDocument, Path, str, None],
        workspace_root: Optional[Path],
        *,
        stream: bool = False,
        progress: Optional[ProgressFn] = None,
    ) -> CommandOutcome:
        """Structured-experiment YAML in the current file → result with prompt and ideal solution."""
        return self._send(InputMode.STRUCTURED_EXPERIMENT, document, workspace_root, stream, progress)

    def send_raw_prompt_to_llm(
        self,
        document: Union[EditorDocument, Path, str, None],
        workspace_root: Optional[Path],
        *,
        stream: bool = False,
        progress: Optional[ProgressFn] = None,
    ) -> CommandOutcome:
        """Current file sent verbatim as the prompt."""
        return self._send(InputMode.RAW_PROMPT, document, workspace_root, stream, progress)

    def generate_sample_experiment(
        self,
        filename: Optional[str],
        destination: Optional[Path],
    ) -> CommandOutcome:
        """
        Write SAMPLE_YAML_PROMPT to <destination>/<filename>.
        A name without suffix gets '.yaml'. Existing files are never overwritten.
        """
        try:
            name = (filename or "").strip()
            if not name:
                raise UserInputError("No filename provided")
            if destination is None:
                raise UserInputError("No destination folder selected")

            dest = Path(destination)
            if not dest.is_dir():
                raise UserInputError(f"Destination folder does not exist: {dest}")

            target = dest / name
            if not target.suffix:
                target = target.with_suffix(".yaml")
            if target.exists():
                raise UserInputError(f"A file named {target.name} already exists in {dest}")

            with target.open("x", encoding="utf-8") as fh:
                fh.write(SAMPLE_YAML_PROMPT)
        except Exception as exc:
            return self._failed(GENERATE_SAMPLE_TITLE, exc)

        SimpleLogger.info(f"AppController: sample experiment written to {target}")
        return self._succeeded(GENERATE_SAMPLE_TITLE, target)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_document(document: Union[EditorDocument, Path, str, None]) -> EditorDocument:
        if document is None:
            raise UserInputError("No active editor detected")
        if isinstance(document, EditorDocument):
            return document
        return EditorDocument.from_file(document)

    def _send(
        self,
        mode: InputMode,
        document: Union[EditorDocument, Path, str, None],
        workspace_root: Optional[Path],
        stream: bool,
        progress: Optional[ProgressFn],
    ) -> CommandOutcome:
        title = COMMAND_TITLES[mode]
        try:
            doc = self._resolve_document(document)
            if workspace_root is None:
                raise UserInputError("No workspace folder is open")

            runner = self._runner_factory(Path(workspace_root))
            result = runner.run(mode, doc.text, doc.label, stream=stream, progress=progress)
        except Exception as exc:
            return self._failed(title, exc)

        return self._succeeded(title, result.output_path)

    @staticmethod
    def _failed(title: str, exc: Exception) -> CommandOutcome:
        msg = f"{title} command failed: {exc}"
        SimpleLogger.error(msg)
        return CommandOutcome(ok=False, message=msg)

    @staticmethod
    def _succeeded(title: str, output_path: Optional[Path]) -> CommandOutcome:
        msg = f"{title} command completed successfully."
        SimpleLogger.info(msg)
        return CommandOutcome(ok=True, message=msg, output_path=output_path)
