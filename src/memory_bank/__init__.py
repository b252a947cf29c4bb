"""Memory bank documents: scaffolding, search and consistency analysis."""

from .consistency import analyze
from .retrieval import search
from .rules import extract_schema
from .schema import ConsistencyReport, DocumentSchema, SearchHit, Section
from .templates import build_template

__all__ = [
    "Section",
    "SearchHit",
    "DocumentSchema",
    "ConsistencyReport",
    "search",
    "analyze",
    "extract_schema",
    "build_template",
]
