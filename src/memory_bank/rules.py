"""Rules-document parsing for the memory bank.

A rules document (``.byterules``) describes every standard document type under
a numbered third-level heading::

    ### 4. Tech Context (techContext.md)
    - **Purpose**: Technology stack and implementation details
    - **When to Update**: When dependencies or tooling change
    - **Structure**:
      - Technologies
      - Development Setup
    - **Commands**:
      - `update_document techContext` - Refresh after a stack change

:func:`extract_schema` scans those lines into a :class:`DocumentSchema`. Types
the rules document does not describe get fixed defaults instead of an error,
so template building and consistency analysis always receive a schema.
"""
from __future__ import annotations

import re

from .schema import DocumentSchema

TYPE_HEADING = re.compile(r"^###\s*\d+\.\s*(?P<name>.+?)\s*\((?P<filename>[\w.]+)\)\s*$")
BLOCK_END = re.compile(r"^#{1,3}(\s|$)")
FIELD_LABEL = re.compile(r"\*\*(?P<label>[^*]+)\*\*:\s*(?P<rest>.*)$")
BULLET_PREFIX = re.compile(r"^\s*[-*+]\s*")
BACKTICK_TOKEN = re.compile(r"`([^`]+)`")

DEFAULT_UPDATE_TIMING = "As needed"
DEFAULT_SECTIONS = ["No specific structure defined"]

DEFAULT_RULES = """# Memory Bank Document Orchestration Standard

## Directory Validation

A valid memory bank contains this `.byterules` file at its root. If the file is
missing, stop and move to the correct project root before creating, updating or
reviewing documents.

## Standard Document Types

### 1. Project Brief (projectbrief.md)
- **Purpose**: Core document that defines project objectives, scope, and vision
- **When to Update**: When project goals or scope change
- **Structure**:
  - Project Overview
  - Objectives
  - Target Audience
  - Success Criteria
- **Commands**:
  - `update_document projectbrief` - Revise goals and scope

### 2. Product Context (productContext.md)
- **Purpose**: Documents product functionality from a user perspective
- **When to Update**: When features or requirements change
- **Structure**:
  - Market Analysis
  - User Stories
  - Requirements
  - Roadmap
- **Commands**:
  - `update_document productContext` - Record new requirements

### 3. System Patterns (systemPatterns.md)
- **Purpose**: Establishes system architecture and component relationships
- **When to Update**: When architecture or integration points change
- **Structure**:
  - Architecture
  - Data Models
  - Component Structure
  - Integration Points
- **Commands**:
  - `update_document systemPatterns` - Capture design decisions

### 4. Tech Context (techContext.md)
- **Purpose**: Specifies technology stack and implementation details
- **When to Update**: When dependencies, tooling or environments change
- **Structure**:
  - Technologies
  - Development Environment
  - Testing Strategy
  - Deployment
- **Commands**:
  - `update_document techContext` - Refresh after a stack change

### 5. Active Context (activeContext.md)
- **Purpose**: Tracks current tasks, open issues, and development focus
- **When to Update**: Daily, during planning sessions, and when switching tasks
- **Structure**:
  - Current Focus
  - Ongoing Tasks
  - Known Issues
  - Next Steps
- **Commands**:
  - `update_document activeContext` - Log today's focus
  - `query_memory_bank` - Look up related decisions

### 6. Progress (progress.md)
- **Purpose**: Documents completed work, milestones, and project history
- **When to Update**: After completing significant work or during reviews
- **Structure**:
  - Completed Work
  - Milestones
  - Changelog
- **Commands**:
  - `update_document progress` - Record a finished milestone

## Standard Workflows

### Documentation Sequence
1. **Project Brief**: foundation of all project decisions
2. **Product Context**: user-focused requirements and features
3. **System Patterns**: architecture and component design
4. **Tech Context**: technology choices and implementation guidelines
5. **Active Context**: current work and immediate focus
6. **Progress**: historical record and milestone tracking
"""


def default_schema(document_type: str) -> DocumentSchema:
    """Schema used when the rules document does not describe `document_type`."""
    return DocumentSchema(
        document_type=document_type,
        purpose=f"Information about {document_type} document",
        update_timing=DEFAULT_UPDATE_TIMING,
        required_sections=list(DEFAULT_SECTIONS),
        commands=[f"update_document {document_type.lower()}"],
    )


def _normalize(name: str) -> str:
    return re.sub(r"\s+", "", name).lower()


def _matches_type(match: re.Match, document_type: str) -> bool:
    # "Tech Context (techContext.md)" matches techContext by name or by file.
    wanted = _normalize(document_type)
    filename = match.group("filename").lower()
    stem = filename[:-3] if filename.endswith(".md") else filename
    return _normalize(match.group("name")) == wanted or stem == wanted


def find_type_block(rules_text: str, document_type: str) -> list[str] | None:
    """Return the lines under the numbered heading describing `document_type`.

    The block ends at the next heading of level three or higher (a sibling
    type or a parent section).

    Args:
        rules_text: Full rules document.
        document_type: Type to look up, e.g. ``techContext``.

    Returns:
        Lines of the block without the heading, or ``None`` when no heading
        matches.
    """
    block: list[str] | None = None
    for line in rules_text.splitlines():
        if block is None:
            match = TYPE_HEADING.match(line.strip())
            if match and _matches_type(match, document_type):
                block = []
            continue
        if BLOCK_END.match(line.strip()):
            break
        block.append(line)
    return block


def _parse_fields(block: list[str]) -> dict[str, list[str]]:
    fields: dict[str, list[str]] = {}
    current: str | None = None
    for line in block:
        label_match = FIELD_LABEL.search(line)
        if label_match:
            current = label_match.group("label").strip().lower()
            rest = label_match.group("rest").strip()
            fields.setdefault(current, [])
            if rest:
                fields[current].append(rest)
            continue
        if "**" in line:
            current = None
            continue
        if current is None:
            continue
        item = BULLET_PREFIX.sub("", line).strip()
        if item:
            fields[current].append(item)
    return fields


def extract_schema(rules_text: str, document_type: str) -> DocumentSchema:
    """Extract purpose, cadence, required sections and commands for a type.

    Missing headings or fields fall back to :func:`default_schema` values;
    this function never raises on malformed rules text.

    Args:
        rules_text: Full rules document (may be empty).
        document_type: Document type name, e.g. ``progress``.

    Returns:
        Schema for `document_type`.
    """
    schema = default_schema(document_type)
    block = find_type_block(rules_text or "", document_type)
    if block is None:
        return schema

    fields = _parse_fields(block)

    purpose = fields.get("purpose", [])
    if purpose:
        schema.purpose = purpose[0]

    update_timing = fields.get("when to update", [])
    if update_timing:
        schema.update_timing = update_timing[0]

    sections = fields.get("structure", [])
    if sections:
        schema.required_sections = sections

    commands = []
    for line in fields.get("commands", []):
        token = BACKTICK_TOKEN.search(line)
        if token:
            commands.append(token.group(1).strip())
    if commands:
        schema.commands = commands

    return schema
