from __future__ import annotations

import re
from datetime import date

from .schema import DocumentSchema

PLACEHOLDER = "_Add content here_"


def display_name(document_type: str) -> str:
    """Space out internal capitals: ``techContext`` -> ``tech Context``."""
    return re.sub(r"([A-Z])", r" \1", document_type).strip()


def build_template(schema: DocumentSchema, document_type: str, today: date | None = None) -> str:
    """Render a skeleton Markdown document from a rules-document schema.

    Args:
        schema: Schema produced by :func:`memory_bank.rules.extract_schema`.
        document_type: Type name used for the title line.
        today: Date stamped into the `Last Updated` line; defaults to today.

    Returns:
        Markdown body with one `##` block per required section.
    """
    stamp = (today or date.today()).isoformat()
    lines = [
        f"# {display_name(document_type)}",
        "",
        f"> {schema.purpose}",
        "",
        f"> Last Updated: {stamp}",
        "",
    ]
    for section in schema.required_sections:
        lines.extend([f"## {section}", "", PLACEHOLDER, ""])
    lines.extend(
        [
            "---",
            "",
            f"**Note:** This document should be updated {schema.update_timing.lower()}.",
        ]
    )
    return "\n".join(lines) + "\n"
