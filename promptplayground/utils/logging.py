# -*- coding: utf-8 -*-
"""
SimpleLogger: console logging facade for PromptPlayground.

Goal:
- Every stage of a run (prompt assembly, LLM call, extraction, file write)
  reports what it did on the console, the way an experimenter reads it.
- One class with classmethods; callers never hold a logger instance.
- Hosts (CLI, Streamlit) choose the threshold or silence it without
  touching callers.

Levels, lowest first: DEBUG < INFO < WARN < ERROR. The default threshold is
INFO; DEBUG lines carry full prompts and raw responses. WARN and ERROR go to
stderr so they survive a redirected stdout.
"""

from __future__ import annotations
import sys
import datetime
from typing import ClassVar, Dict, TextIO

LEVELS: Dict[str, int] = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


class SimpleLogger:
    """
    Usage:
        SimpleLogger.info("message")
        SimpleLogger.set_level("DEBUG")
    """

    _enabled: ClassVar[bool] = True
    _threshold: ClassVar[int] = LEVELS["INFO"]
    _prefix: ClassVar[str] = "PromptPlayground"

    @classmethod
    def _stream_for(cls, level: str) -> TextIO:
        return sys.stderr if LEVELS[level] >= LEVELS["WARN"] else sys.stdout

    @classmethod
    def _log(cls, level: str, msg: str) -> None:
        if not cls._enabled or LEVELS[level] < cls._threshold:
            return
        now = datetime.datetime.now().strftime("%H:%M:%S")
        print(f"{cls._prefix} | {level:5s} | {now} | {msg}", file=cls._stream_for(level), flush=True)

    @classmethod
    def debug(cls, msg: str) -> None:
        cls._log("DEBUG", msg)

    @classmethod
    def info(cls, msg: str) -> None:
        cls._log("INFO", msg)

    @classmethod
    def warning(cls, msg: str) -> None:
        cls._log("WARN", msg)

    @classmethod
    def error(cls, msg: str) -> None:
        cls._log("ERROR", msg)

    # ------------------------------------------------------------------
    # Host configuration
    # ------------------------------------------------------------------

    @classmethod
    def set_enabled(cls, enabled: bool) -> None:
        cls._enabled = enabled

    @classmethod
    def set_level(cls, level: str) -> None:
        name = level.upper()
        if name not in LEVELS:
            raise ValueError(f"Unknown log level {level!r} (expected one of: {', '.join(LEVELS)})")
        cls._threshold = LEVELS[name]

    @classmethod
    def set_debug(cls, enabled: bool) -> None:
        cls.set_level("DEBUG" if enabled else "INFO")
