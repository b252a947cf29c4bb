from __future__ import annotations

import re
from datetime import date, timedelta

from .rules import extract_schema
from .schema import DOCUMENT_TYPES, STATUS_GOOD, STATUS_NEEDS_UPDATE, ConsistencyReport

STALE_AFTER = timedelta(days=30)
LAST_UPDATED_PATTERN = re.compile(r"Last Updated:\s*(\d{4}-\d{2}-\d{2})")


def missing_sections(body: str, required_sections: list[str]) -> list[str]:
    """Return required section names with no matching `##` heading in `body`."""
    missing: list[str] = []
    for section in required_sections:
        pattern = re.compile(rf"##\s*{re.escape(section)}", re.IGNORECASE)
        if not pattern.search(body):
            missing.append(section)
    return missing


def is_stale(body: str, today: date | None = None) -> bool:
    """Check the `Last Updated: YYYY-MM-DD` marker against the staleness window.

    A missing or unparsable marker counts as stale.
    """
    match = LAST_UPDATED_PATTERN.search(body)
    if not match:
        return True
    try:
        last_updated = date.fromisoformat(match.group(1))
    except ValueError:
        return True
    return (today or date.today()) - last_updated >= STALE_AFTER


def analyze(rules_text: str, corpus: dict[str, str], today: date | None = None) -> list[ConsistencyReport]:
    """Compare each standard document with its rules-document schema.

    Missing sections take priority over staleness when choosing the
    recommendation. Documents outside the standard types are skipped.

    Args:
        rules_text: Rules document content; may be empty.
        corpus: Mapping of document name to Markdown body.
        today: Reference date for the staleness check.

    Returns:
        One report per standard document present in `corpus`, in corpus order.
    """
    reports: list[ConsistencyReport] = []
    for document_type, body in corpus.items():
        if document_type not in DOCUMENT_TYPES:
            continue

        schema = extract_schema(rules_text, document_type)
        missing = missing_sections(body, schema.required_sections)

        if missing:
            status = STATUS_NEEDS_UPDATE
            recommendation = f"Missing sections: {', '.join(missing)}"
        elif is_stale(body, today):
            status = STATUS_NEEDS_UPDATE
            recommendation = "Document may need updating (last update over 30 days ago)"
        else:
            status = STATUS_GOOD
            recommendation = "Document follows the structure defined in the rules document"

        reports.append(
            ConsistencyReport(document_type=document_type, status=status, recommendation=recommendation)
        )
    return reports
