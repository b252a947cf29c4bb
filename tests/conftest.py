"""Shared pytest fixtures for memory_bank unit tests."""
from __future__ import annotations

from datetime import date

import pytest

from memory_bank.rules import DEFAULT_RULES

TODAY = date(2025, 3, 1)

RULES_TEXT = """# Rules

## Standard Document Types

### 1. Project Brief (projectbrief.md)
- **Purpose**: Defines project objectives and scope
- **When to Update**: When goals change
- **Structure**:
  - Overview
  - Goals
- **Commands**:
  - `update_document projectbrief` - Revise goals

### 4. Tech Context (techContext.md)
- **Purpose**: Technology stack and implementation details
- **When to Update**: When dependencies change
- **Structure**:
  - Stack
  - Tooling
- **Commands**:
  - `update_document techContext` - Refresh stack notes
  - plain line without a command
  - `query_memory_bank` - Look up decisions

## Workflows
Nothing else here.
"""


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def rules_text() -> str:
    return RULES_TEXT


@pytest.fixture()
def default_rules() -> str:
    return DEFAULT_RULES


@pytest.fixture()
def sample_corpus() -> dict[str, str]:
    return {
        "projectbrief": (
            "# Project Brief\n\n"
            "> Last Updated: 2025-02-20\n\n"
            "## Overview\n\n"
            "Dotsync keeps developer dotfiles in sync across machines.\n\n"
            "## Goals\n\n"
            "Ship a reliable sync engine with conflict detection."
        ),
        "techContext": (
            "# Tech Context\n\n"
            "> Last Updated: 2025-02-25\n\n"
            "## Stack\n\n"
            "We use PostgreSQL for storage and Redis for caching.\n\n"
            "## Tooling\n\n"
            "Deployment runs through a GitHub Actions pipeline."
        ),
        "notes": "## Scratch\n\nRandom deployment thoughts and pipeline ideas.",
    }
