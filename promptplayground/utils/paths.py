"""
Paths
=====
Centralises on-disk locations for experiment results so that a single import
(`from promptplayground.utils.paths import results_dir, result_file_path`)
decides where a run writes and how the file is named.

Result files live in `<workspace root>/results/` and are named
`<prefix>_<label>_<MMDDYYYY_HH:MM:SS>.yaml`.
"""
from datetime import datetime
from pathlib import Path
from typing import TypedDict


class _ResultPrefixes(TypedDict):
    document: str
    raw:      str


RESULTS_DIRNAME = "results"

PREFIXES: _ResultPrefixes = {
    "document": "documentContents",
    "raw":      "rawPrompt",
}


def format_timestamp(now: datetime) -> str:
    return now.strftime("%m%d%Y_%H:%M:%S")


def results_dir(workspace_root: Path) -> Path:
    """Return <workspace_root>/results, creating it if absent."""
    path = Path(workspace_root) / RESULTS_DIRNAME
    path.mkdir(parents=True, exist_ok=True)
    return path


def result_file_path(directory: Path, prefix: str, label: str, now: datetime, attempt: int = 0) -> Path:
    """
    Build the timestamped result path. `attempt` > 0 adds a `_<n>` suffix,
    used when two runs land in the same second.
    """
    stem = f"{prefix}_{label}_{format_timestamp(now)}"
    if attempt:
        stem = f"{stem}_{attempt}"
    return Path(directory) / f"{stem}.yaml"
