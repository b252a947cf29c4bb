from __future__ import annotations

from .chunking import split_sections
from .schema import SearchHit

RELEVANCE_THRESHOLD = 0.3
MAX_RESULTS = 5
SNIPPET_LENGTH = 150
SNIPPET_LEAD = 30
TERM_WINDOW = 100


def tokenize(query: str) -> list[str]:
    """Turn a free-text query into distinct lower-cased search terms.

    Tokens of two characters or fewer are dropped as stop-words.

    Args:
        query: Raw user query.

    Returns:
        Distinct terms in first-seen order.
    """
    terms: list[str] = []
    for token in query.lower().split():
        if len(token) > 2 and token not in terms:
            terms.append(token)
    return terms


def score(query: str, terms: list[str], text: str) -> float:
    """Score one paragraph against a query.

    A verbatim (case-insensitive) occurrence of the whole query scores 1.0.
    Otherwise the score is 0.8 times the fraction of terms found, plus a flat
    0.2 co-occurrence bonus once two or more terms are present. The bonus does
    not look at term distance.

    Args:
        query: Raw query string.
        terms: Output of :func:`tokenize` for `query`.
        text: Paragraph to score.

    Returns:
        Relevance score between 0.0 and 1.0.
    """
    if not query.strip() or not text:
        return 0.0

    lower_text = text.lower()
    if query.lower() in lower_text:
        return 1.0

    match_count = sum(1 for term in terms if term in lower_text)
    term_match_ratio = match_count / len(terms) if terms else 0.0
    proximity_factor = 0.2 if match_count >= 2 else 0.0
    return term_match_ratio * 0.8 + proximity_factor


def _best_offset(lower_text: str, terms: list[str]) -> int:
    # Every offset is scanned and the first one with the highest count wins,
    # so tie-breaking stays stable for identical paragraphs.
    best_position = 0
    best_term_count = 0
    for position in range(len(lower_text)):
        window = lower_text[position : position + TERM_WINDOW]
        term_count = sum(1 for term in terms if term in window)
        if term_count > best_term_count:
            best_term_count = term_count
            best_position = position
    return best_position


def extract_snippet(paragraph: str, terms: list[str], title: str = "") -> str:
    """Cut a word-safe excerpt around the densest cluster of query terms.

    Args:
        paragraph: Paragraph text the snippet is taken from.
        terms: Query terms used to locate the best window.
        title: Section title; rendered as a bold label when non-empty.

    Returns:
        Snippet of roughly 150 characters, with `...` marking truncated ends.
    """
    best_position = _best_offset(paragraph.lower(), terms)

    start = max(0, best_position - SNIPPET_LEAD)
    end = min(len(paragraph), best_position + SNIPPET_LENGTH - SNIPPET_LEAD)

    while start > 0 and paragraph[start] not in (" ", "\n"):
        start -= 1
    while end < len(paragraph) and paragraph[end] not in (" ", "\n"):
        end += 1

    snippet = paragraph[start:end].strip(" \n")
    if start > 0:
        snippet = "..." + snippet
    if end < len(paragraph):
        snippet = snippet + "..."

    if title:
        return f"**{title}**: {snippet}"
    return snippet


def search(query: str, corpus: dict[str, str]) -> list[SearchHit]:
    """Rank paragraphs across a document corpus for a free-text query.

    Args:
        query: User query; surrounding whitespace is ignored.
        corpus: Mapping of document name to Markdown body. Not modified.

    Returns:
        At most five hits scoring above the threshold, highest score first.
        Equal scores keep corpus, section and paragraph order.
    """
    query = query.strip()
    if not query:
        return []

    terms = tokenize(query)
    hits: list[SearchHit] = []
    for document_name, body in corpus.items():
        for section in split_sections(body):
            for paragraph in section.paragraphs:
                relevance = score(query, terms, paragraph)
                if relevance <= RELEVANCE_THRESHOLD:
                    continue
                hits.append(
                    SearchHit(
                        document_name=document_name,
                        relevance_score=relevance,
                        snippet=extract_snippet(paragraph, terms, section.title),
                    )
                )

    ranked = sorted(hits, key=lambda hit: hit.relevance_score, reverse=True)
    return ranked[:MAX_RESULTS]
