#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
promptplayground: command-line host for the prompt experiments.

Each sub-command plays one editor command: the FILE argument is "the file
open in the editor" and --workspace is "the workspace folder" (results go to
<workspace>/results/).

Run:
  promptplayground send-source      classes/MyClass.cls   [--stream] [--workspace DIR]
  promptplayground send-experiment  prompts/exp1.yaml     [--stream] [--workspace DIR]
  promptplayground send-raw         prompts/raw.txt       [--stream] [--workspace DIR]
  promptplayground generate-sample  exp2 --dest prompts/

Environment (or .env):
  LLM=XGen | OpenAI, XGEN_API_KEY, XGEN_BASE_URL, XGEN_MODEL, XGEN_MAX_TOKENS
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from promptplayground.app.controller import AppController, CommandOutcome
from promptplayground.config.settings import resolve_backend
from promptplayground.utils.logging import SimpleLogger


def _progress(message: str) -> None:
    SimpleLogger.info(f"progress: {message}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="promptplayground",
        description="Send Apex classes or prompt experiments to the LLM and collect OpenAPI v3 results.",
    )
    ap.add_argument("--debug", action="store_true", help="Log full prompts and raw LLM responses.")
    ap.add_argument("--quiet", action="store_true", help="Only print the final outcome.")
    sub = ap.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("send-source", "Send the Apex class in FILE to the LLM."),
        ("send-experiment", "Send the structured-experiment YAML in FILE to the LLM."),
        ("send-raw", "Send FILE verbatim as the prompt."),
    ):
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("file", type=Path, nargs="?", help="Input file (the 'current editor file').")
        sp.add_argument("--workspace", type=Path, default=Path.cwd(), help="Workspace root (default: cwd).")
        sp.add_argument("--stream", action="store_true", help="Use the streaming call instead of single-shot.")
        sp.add_argument("--backend", type=resolve_backend, default=None,
                        help="Override the LLM backend (XGen | OpenAI); default from $LLM.")

    gp = sub.add_parser("generate-sample", help="Write a sample structured-experiment YAML file.")
    gp.add_argument("filename", nargs="?", help="Name of the file to create ('.yaml' added if missing).")
    gp.add_argument("--dest", type=Path, default=None, help="Destination folder.")

    return ap


def run_command(args: argparse.Namespace, controller: AppController) -> CommandOutcome:
    if args.command == "generate-sample":
        return controller.generate_sample_experiment(args.filename, args.dest)

    send = {
        "send-source": controller.send_source_to_llm,
        "send-experiment": controller.send_experiment_to_llm,
        "send-raw": controller.send_raw_prompt_to_llm,
    }[args.command]
    return send(args.file, args.workspace, stream=args.stream, progress=_progress)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    SimpleLogger.set_debug(args.debug)
    SimpleLogger.set_enabled(not args.quiet)

    controller = AppController(backend=getattr(args, "backend", None))
    outcome = run_command(args, controller)

    stream = sys.stdout if outcome.ok else sys.stderr
    print(outcome.message, file=stream)
    if outcome.output_path is not None:
        print(f"  -> {outcome.output_path}", file=stream)
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
