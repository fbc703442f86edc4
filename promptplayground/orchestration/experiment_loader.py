# -*- coding: utf-8 -*-
"""
experiment_loader
=================

Reads a structured-experiment YAML file into an ExperimentDefinition.

File format:

    experiment: 1
    systemPrompt: |
      ...                     # optional; DEFAULT_INSTRUCTIONS when absent
    userPrompt: |
      ...
    context:
      - context1:
          text: 'This is the Apex class ...'
          context: |
            ...
      - context2: {...}
    ideal_solution:           # optional; echoed into the result file, never interpreted
      openapi: 3.0.0
      ...

The `context` list is kept raw here; compose_texts.context_blocks_from_entries
validates it right before assembly.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

import yaml

from promptplayground.orchestration.prompt_helpers.compose_texts import context_blocks_from_entries
from promptplayground.orchestration.prompt_spec import PromptSpec
from promptplayground.prompts.constants import DEFAULT_INSTRUCTIONS
from promptplayground.utils.logging import SimpleLogger


class ExperimentFormatError(ValueError):
    """Raised when a structured-experiment document cannot be read."""


@dataclass(frozen=True, slots=True)
class ExperimentDefinition:
    experiment: Optional[Any]
    system_prompt: str
    user_prompt: str
    context_entries: List[Any]
    ideal_solution: Optional[Any] = None

    @property
    def has_ideal_solution(self) -> bool:
        return self.ideal_solution is not None

    def to_prompt_spec(self) -> PromptSpec:
        """Build the PromptSpec; raises ContextMissingError on a missing `context<N>` key."""
        return PromptSpec(
            system_prompt=self.system_prompt,
            user_prompt=self.user_prompt,
            context_blocks=context_blocks_from_entries(self.context_entries),
        )


def parse_experiment(text: str) -> ExperimentDefinition:
    """
    Parse the YAML text of a structured experiment.

    Raises ExperimentFormatError when the text is not YAML, is not a mapping,
    or `context` is not a list.
    """
    try:
        data = yaml.safe_load(text or "")
    except yaml.YAMLError as exc:
        raise ExperimentFormatError(f"Experiment file is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ExperimentFormatError("Experiment file must contain a YAML mapping at the top level")

    context = data.get("context")
    if context is None:
        context = []
    if not isinstance(context, list):
        raise ExperimentFormatError("'context' must be a list of contextN entries")

    system_prompt = data.get("systemPrompt")
    if system_prompt is None:
        system_prompt = DEFAULT_INSTRUCTIONS

    definition = ExperimentDefinition(
        experiment=data.get("experiment"),
        system_prompt=str(system_prompt),
        user_prompt=str(data.get("userPrompt") or ""),
        context_entries=context,
        ideal_solution=data.get("ideal_solution"),
    )

    SimpleLogger.debug(
        f"experiment_loader: experiment={definition.experiment!r}, "
        f"context entries={len(context)}, ideal_solution={'yes' if definition.has_ideal_solution else 'no'}"
    )
    return definition


def load_experiment(path: Path) -> ExperimentDefinition:
    """Read and parse an experiment file from disk."""
    path = Path(path)
    if not path.is_file():
        msg = f"experiment_loader: experiment file not found at {path}"
        SimpleLogger.error(msg)
        raise FileNotFoundError(msg)
    return parse_experiment(path.read_text(encoding="utf-8"))


def dump_ideal_solution(ideal_solution: Any) -> str:
    """
    The `ideal_solution:` section of a result file, key order preserved.
    Dumped as a one-key mapping so scalar values carry no document-end marker.
    """
    return yaml.safe_dump(
        {"ideal_solution": ideal_solution}, sort_keys=False, allow_unicode=True, default_flow_style=False
    )
