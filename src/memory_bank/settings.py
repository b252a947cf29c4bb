from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(slots=True)
class OpenAISettings:
    """Runtime model configuration for document generation calls."""

    chat_model: str = "gpt-4.1-mini"


@dataclass(slots=True)
class Paths:
    """File and folder names used inside a memory bank location."""

    memory_bank_dirname: str = "memory-bank"
    rules_filename: str = ".byterules"
    export_dirname: str = "memory-bank-export"


def load_settings() -> tuple[OpenAISettings, Paths]:
    """Load environment-backed settings and return typed config objects.

    Returns:
        Tuple containing OpenAI model settings and memory bank path settings.
    """
    load_dotenv()
    return (
        OpenAISettings(chat_model=os.getenv("OPENAI_CHAT_MODEL", "gpt-4.1-mini")),
        Paths(memory_bank_dirname=os.getenv("MEMORY_BANK_DIRNAME", "memory-bank")),
    )
