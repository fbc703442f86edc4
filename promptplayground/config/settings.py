"""
Settings
========
Centralised, cached access to environment configuration, plus the
LLM backend selector.

The backend is resolved once by the host (CLI / Streamlit) and handed to the
ExperimentRunner explicitly, so tests pick a backend by parameter.
"""
import os
from enum import Enum
from typing import Any, Dict

from dotenv import load_dotenv


class Backend(Enum):
    XGEN = "XGen"
    OPENAI = "OpenAI"


class BackendNotImplementedError(NotImplementedError):
    """Raised when a recognised backend has no client implementation yet."""


DEFAULT_BACKEND = Backend.XGEN


class Settings:
    _CACHE: Dict[str, Any] = {}
    _DOTENV_LOADED: bool = False

    @classmethod
    def get(cls, key: str, default: Any | None = None) -> Any:
        if not cls._DOTENV_LOADED:
            load_dotenv()  # .env next to the working directory, if any
            cls._DOTENV_LOADED = True
        if key not in cls._CACHE:
            cls._CACHE[key] = os.getenv(key, default)
        return cls._CACHE[key]

    @classmethod
    def clear(cls) -> None:
        cls._CACHE.clear()


def resolve_backend(value: str | None) -> Backend:
    """
    Map the `LLM` selector value onto a Backend.

    - None / empty → DEFAULT_BACKEND
    - Case-insensitive match on the enum values ("XGen", "OpenAI").
    - Anything else → ValueError.
    """
    if value is None or not str(value).strip():
        return DEFAULT_BACKEND

    wanted = str(value).strip().lower()
    for backend in Backend:
        if backend.value.lower() == wanted:
            return backend

    allowed = ", ".join(b.value for b in Backend)
    raise ValueError(f"Unsupported LLM backend {value!r} (expected one of: {allowed})")


def backend_from_settings() -> Backend:
    return resolve_backend(Settings.get("LLM"))
