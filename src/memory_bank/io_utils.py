from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import shutil

from .errors import DocumentNotFoundError, RulesNotFoundError, UnsupportedExportFormatError
from .rules import DEFAULT_RULES

logger = logging.getLogger(__name__)

RULES_FILENAME = ".byterules"
EXPORT_FORMATS = ("folder", "json")

README_TEXT = """# Memory Bank

This directory is a structured repository for project knowledge.

## Core Documents
- **projectbrief.md**: Project goals, scope, and vision
- **productContext.md**: Product features, user stories, and market context
- **systemPatterns.md**: System architecture, design patterns, and component structure
- **techContext.md**: Technology stack, frameworks, and technical specifications
- **activeContext.md**: Active tasks, current sprint, and in-progress work
- **progress.md**: Progress tracking, milestones, and project history

## Document Management
Each document is maintained according to the rules in the `.byterules` file.
"""


def create_memory_bank_structure(directory: str | Path) -> Path:
    root = Path(directory)
    if not root.exists():
        logger.warning("Memory bank directory %s does not exist, creating it", root)
    root.mkdir(parents=True, exist_ok=True)
    (root / "README.md").write_text(README_TEXT, encoding="utf-8")
    logger.info("Memory bank structure created in %s", root)
    return root


def write_default_rules(
    directory: str | Path, rules_text: str = DEFAULT_RULES, filename: str = RULES_FILENAME
) -> Path:
    destination = Path(directory) / filename
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(rules_text, encoding="utf-8")
    logger.info("Rules file written to %s", destination)
    return destination


def save_document(content: str, path: str | Path) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(content, encoding="utf-8")
    logger.info("Document saved: %s", destination)


def read_document(path: str | Path) -> str:
    source = Path(path)
    if not source.exists():
        raise DocumentNotFoundError(f"Document not found: {source}")
    return source.read_text(encoding="utf-8")


def read_all_documents(directory: str | Path) -> dict[str, str]:
    """Read every Markdown file in `directory`, keyed by file stem.

    Files are read in sorted name order so search tie-breaking is stable
    across platforms.
    """
    root = Path(directory)
    if not root.is_dir():
        raise DocumentNotFoundError(f"Directory not found: {root}")
    return {path.stem: path.read_text(encoding="utf-8") for path in sorted(root.glob("*.md"))}


def read_rules(directory: str | Path, filename: str = RULES_FILENAME) -> str:
    rules_path = Path(directory) / filename
    if not rules_path.exists():
        raise RulesNotFoundError("Rules file not found. Memory bank may not be properly initialized.")
    return rules_path.read_text(encoding="utf-8")


def export_memory_bank(source_dir: str | Path, export_format: str, output_path: str | Path) -> Path:
    """Export a memory bank as a copied folder or a single JSON dump.

    Args:
        source_dir: Memory bank directory to export.
        export_format: ``folder`` or ``json``.
        output_path: Target folder, or JSON file path (`.json` is appended when
            missing).

    Returns:
        Path of the exported folder or JSON file.
    """
    source = Path(source_dir)
    if not source.is_dir():
        raise DocumentNotFoundError(f"Source directory not found: {source}")
    if export_format not in EXPORT_FORMATS:
        raise UnsupportedExportFormatError(
            f"Unsupported format: {export_format}. Use 'folder' or 'json'."
        )

    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)

    if export_format == "folder":
        destination = target
        shutil.copytree(source, destination, dirs_exist_ok=True)
        logger.info("Memory bank folder exported to %s", destination)
        return destination

    destination = target if target.suffix == ".json" else target.with_name(target.name + ".json")
    payload = {
        "exportDate": datetime.now(timezone.utc).isoformat(),
        "memoryBank": read_all_documents(source),
    }
    destination.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Memory bank exported to %s in JSON format", destination)
    return destination
