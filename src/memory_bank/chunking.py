from __future__ import annotations

import re

from .schema import Section

HEADING_PATTERN = re.compile(r"^#{2,3}\s+(.*)$")


def _split_paragraphs(lines: list[str]) -> list[str]:
    paragraphs: list[str] = []
    current: list[str] = []
    for line in lines:
        if line.strip():
            current.append(line)
            continue
        if current:
            paragraphs.append("\n".join(current).strip())
            current = []
    if current:
        paragraphs.append("\n".join(current).strip())
    return paragraphs


def split_sections(document: str) -> list[Section]:
    """Split a Markdown body into sections at `##` and `###` headings.

    Each heading line supplies the title of the section it opens. Text before
    the first heading forms one more section whose title is its first
    non-blank line, typically the `# Title` line. The remaining lines are
    grouped into paragraphs on runs of blank lines.

    Args:
        document: Raw Markdown document body.

    Returns:
        Sections in top-to-bottom document order, empty chunks dropped.
    """
    sections: list[Section] = []
    title = ""
    body: list[str] = []

    def _commit() -> None:
        paragraphs = _split_paragraphs(body)
        if not title and not paragraphs:
            return
        sections.append(Section(title=title, paragraphs=paragraphs))

    in_preamble = True
    for line in document.splitlines():
        match = HEADING_PATTERN.match(line)
        if match:
            _commit()
            in_preamble = False
            title = match.group(1).strip()
            body = []
            continue
        if in_preamble and not title and line.strip():
            title = line.strip()
            continue
        body.append(line)

    _commit()
    return sections
