from dataclasses import dataclass, field

DOCUMENT_TYPES = [
    "projectbrief",
    "productContext",
    "systemPatterns",
    "techContext",
    "activeContext",
    "progress",
]

STATUS_GOOD = "good"
STATUS_NEEDS_UPDATE = "needs-update"


@dataclass(slots=True)
class Section:
    """Titled span of a document body, split into paragraphs for scoring."""

    title: str
    paragraphs: list[str] = field(default_factory=list)


@dataclass(slots=True)
class SearchHit:
    """One paragraph that scored above the relevance threshold for a query."""

    document_name: str
    relevance_score: float
    snippet: str


@dataclass(slots=True)
class DocumentSchema:
    """Per-type guidance extracted from the rules document."""

    document_type: str
    purpose: str
    update_timing: str
    required_sections: list[str]
    commands: list[str]


@dataclass(slots=True)
class ConsistencyReport:
    """Structural and freshness verdict for one known document."""

    document_type: str
    status: str
    recommendation: str
