"""Tests for retrieval.py — tokenizer, scorer, snippet extraction and search."""
from __future__ import annotations

import pytest

from memory_bank.retrieval import MAX_RESULTS, extract_snippet, score, search, tokenize
from memory_bank.schema import SearchHit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _assert_word_safe(snippet: str, paragraph: str) -> None:
    core = snippet
    if core.startswith("..."):
        core = core[3:]
    if core.endswith("..."):
        core = core[:-3]
    start = paragraph.find(core)
    assert start >= 0
    end = start + len(core)
    assert start == 0 or paragraph[start - 1] in (" ", "\n")
    assert end == len(paragraph) or paragraph[end] in (" ", "\n")


# ---------------------------------------------------------------------------
# tokenize
# ---------------------------------------------------------------------------

class TestTokenize:
    def test_lowercases_and_splits(self):
        assert tokenize("PostgreSQL Storage") == ["postgresql", "storage"]

    def test_drops_short_tokens(self):
        assert tokenize("is it on the db") == ["the"]

    def test_splits_on_whitespace_runs(self):
        assert tokenize("redis \t\n  cache") == ["redis", "cache"]

    def test_duplicates_removed_in_first_seen_order(self):
        assert tokenize("setup redis Setup") == ["setup", "redis"]

    def test_empty_query(self):
        assert tokenize("") == []


# ---------------------------------------------------------------------------
# score
# ---------------------------------------------------------------------------

class TestScore:
    def test_verbatim_query_scores_one(self):
        query = "PostgreSQL for storage"
        assert score(query, tokenize(query), "We use postgresql FOR storage.") == 1.0

    def test_no_terms_present_scores_zero(self):
        query = "kubernetes operator reconciliation"
        assert score(query, tokenize(query), "Unrelated filler text.") == 0.0

    def test_single_term_match_has_no_bonus(self):
        query = "redis kubernetes"
        assert score(query, tokenize(query), "Redis caches sessions.") == pytest.approx(0.4)

    def test_two_term_match_adds_flat_bonus(self):
        query = "redis postgresql kubernetes"
        expected = (2 / 3) * 0.8 + 0.2
        assert score(query, tokenize(query), "PostgreSQL and Redis") == pytest.approx(expected)

    def test_bonus_ignores_term_distance(self):
        query = "alpha omega"
        near = score(query, tokenize(query), "omega alpha")
        far = score(query, tokenize(query), "omega " + "x " * 200 + "alpha")
        assert near == far

    def test_terms_match_as_substrings(self):
        query = "deploy kafka"
        assert score(query, tokenize(query), "deployment of brokers") == pytest.approx(0.4)

    def test_empty_terms_without_verbatim_match(self):
        assert score("on it", [], "something else") == 0.0

    def test_empty_text(self):
        assert score("redis cache", ["redis", "cache"], "") == 0.0

    def test_blank_query(self):
        assert score("   ", [], "any text") == 0.0


# ---------------------------------------------------------------------------
# extract_snippet
# ---------------------------------------------------------------------------

class TestExtractSnippet:
    def test_short_paragraph_returned_whole_with_title(self):
        snippet = extract_snippet("We use PostgreSQL for storage.", ["postgresql"], "Stack")
        assert snippet == "**Stack**: We use PostgreSQL for storage."

    def test_no_title_returns_plain_snippet(self):
        assert extract_snippet("Redis for caching.", ["redis"], "") == "Redis for caching."

    def test_long_paragraph_is_truncated_on_both_ends(self):
        paragraph = " ".join(["alpha"] * 60) + " target " + " ".join(["omega"] * 60)
        snippet = extract_snippet(paragraph, ["target"], "")
        assert snippet.startswith("...")
        assert snippet.endswith("...")
        assert "target" in snippet
        _assert_word_safe(snippet, paragraph)

    def test_snippet_length_near_target(self):
        paragraph = " ".join(["alpha"] * 60) + " target " + " ".join(["omega"] * 60)
        snippet = extract_snippet(paragraph, ["target"], "")
        assert 150 <= len(snippet) <= 170

    def test_first_offset_wins_ties(self):
        paragraph = "target " + " ".join(["filler"] * 50) + " target"
        snippet = extract_snippet(paragraph, ["target"], "")
        assert snippet.startswith("target filler")
        assert snippet.endswith("...")
        _assert_word_safe(snippet, paragraph)

    def test_window_moves_to_densest_term_cluster(self):
        paragraph = "alpha " + "x " * 100 + "alpha beta tail"
        snippet = extract_snippet(paragraph, ["alpha", "beta"], "")
        assert snippet.startswith("...x x")
        assert snippet.endswith("alpha beta tail")
        _assert_word_safe(snippet, paragraph)

    def test_newlines_are_word_boundaries(self):
        paragraph = "\n".join(["word"] * 80) + "\nneedle"
        snippet = extract_snippet(paragraph, ["needle"], "")
        assert snippet.startswith("...")
        assert snippet.endswith("needle")
        _assert_word_safe(snippet, paragraph)

    def test_no_terms_starts_at_beginning(self):
        paragraph = " ".join(["lorem"] * 50)
        snippet = extract_snippet(paragraph, [], "")
        assert snippet.startswith("lorem")
        assert snippet.endswith("...")


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------

class TestSearch:
    def test_exact_phrase_hit(self):
        corpus = {"techContext": "## Stack\n\nWe use PostgreSQL for storage."}
        hits = search("PostgreSQL for storage", corpus)
        assert len(hits) == 1
        assert hits[0] == SearchHit(
            document_name="techContext",
            relevance_score=1.0,
            snippet="**Stack**: We use PostgreSQL for storage.",
        )

    def test_no_match_returns_empty(self):
        corpus = {"projectbrief": "# Brief\n\nUnrelated filler text."}
        assert search("kubernetes operator reconciliation", corpus) == []

    def test_blank_query_returns_empty(self, sample_corpus):
        assert search("   ", sample_corpus) == []

    def test_results_capped(self):
        corpus = {f"doc{i}": "## S\n\nredis cache layer" for i in range(7)}
        hits = search("redis cache", corpus)
        assert len(hits) == MAX_RESULTS
        assert [h.document_name for h in hits] == [f"doc{i}" for i in range(5)]

    def test_sorted_by_descending_score(self):
        corpus = {
            "a": "## A\n\nredis only here",
            "b": "## B\n\nredis and kafka together",
        }
        hits = search("redis kafka", corpus)
        assert [h.document_name for h in hits] == ["b", "a"]
        assert [h.relevance_score for h in hits] == pytest.approx([1.0, 0.4])

    def test_ties_keep_corpus_order(self, sample_corpus):
        hits = search("deployment pipeline", sample_corpus)
        assert [h.document_name for h in hits] == ["techContext", "notes"]
        assert all(h.relevance_score == pytest.approx(1.0) for h in hits)

    def test_below_threshold_excluded(self):
        corpus = {"a": "## A\n\nredis only"}
        assert search("redis kafka broker", corpus) == []

    def test_scores_within_bounds(self, sample_corpus):
        hits = search("sync engine conflict", sample_corpus)
        assert hits
        assert all(0.3 < h.relevance_score <= 1.0 for h in hits)

    def test_preamble_hit_labelled_with_first_line(self):
        corpus = {"projectbrief": "# Project Brief\n\nDotsync keeps dotfiles in sync."}
        hits = search("keeps dotfiles in sync", corpus)
        assert [h.snippet for h in hits] == ["**# Project Brief**: Dotsync keeps dotfiles in sync."]

    def test_document_title_line_is_not_a_hit(self):
        corpus = {"projectbrief": "# Project Brief\n\nDotsync keeps dotfiles in sync."}
        assert search("project brief", corpus) == []

    def test_corpus_not_mutated(self, sample_corpus):
        before = dict(sample_corpus)
        search("deployment pipeline", sample_corpus)
        assert sample_corpus == before

    def test_query_whitespace_trimmed(self):
        corpus = {"techContext": "## Stack\n\nWe use PostgreSQL for storage."}
        hits = search("  PostgreSQL for storage  ", corpus)
        assert hits[0].relevance_score == 1.0
