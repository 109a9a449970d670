#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test TF-IDF scoring and ranking
"""

import math

import pytest

from MiniSearch.build_inverted_index import InvertedIndex
from MiniSearch.preprocessing.document import Document
from MiniSearch.tfidf_search import TFIDFRanker, term_frequency


def _build(*bodies):
    index = InvertedIndex()
    docs = []
    for i, body in enumerate(bodies):
        doc = index.create_document(f"doc{i}", f"Doc {i}", body)
        index.add_document(doc)
        docs.append(doc)
    return index, TFIDFRanker(index), docs


def test_term_frequency():
    doc = Document(1, "a", "t", "java is java and more")
    assert term_frequency("java", doc) == pytest.approx(2 / 5)
    assert term_frequency("python", doc) == 0


def test_term_frequency_of_empty_document_is_zero():
    assert term_frequency("java", Document(1, "a", "t", "")) == 0
    assert term_frequency("java", Document(2, "a", "t", "!!!")) == 0


def test_idf_for_term_in_one_document():
    """Test idf = ln(N) for a term found in exactly one of N documents"""
    _, ranker, _ = _build("apple pie", "banana split", "cherry tart", "date cake")
    assert ranker.inverse_document_frequency("apple") == pytest.approx(math.log(4))


def test_idf_for_term_in_all_documents_is_zero():
    _, ranker, _ = _build("common apple", "common banana", "common cherry")
    assert ranker.inverse_document_frequency("common") == 0
    results = ranker.rank("common")
    # Matching documents stay in the result even with a zero score
    assert [score for _, score in results] == [0, 0, 0]


def test_idf_for_unseen_term_is_zero():
    _, ranker, _ = _build("apple", "banana")
    assert ranker.inverse_document_frequency("zebra") == 0
    assert ranker.rank("zebra") == []


def test_java_scenario():
    """Test A (2 of 5 words) ranks above B (1 of 10 words) for 'java'"""
    _, ranker, docs = _build(
        "java is java and more",
        "java one two three four five six seven eight nine",
        "python is a versatile language",
    )
    doc_a, doc_b, doc_c = docs

    results = ranker.rank("java")
    assert [doc for doc, _ in results] == [doc_a, doc_b]

    idf = math.log(3 / 2)
    assert results[0][1] == pytest.approx(2 / 5 * idf)
    assert results[1][1] == pytest.approx(1 / 10 * idf)
    assert doc_c not in [doc for doc, _ in results]


def test_rank_is_strictly_descending_for_distinct_scores():
    _, ranker, docs = _build(
        "term filler filler filler",
        "term term filler filler",
        "term term term filler",
        "unrelated words only here",
    )
    results = ranker.rank("term")
    scores = [score for _, score in results]
    assert all(a > b for a, b in zip(scores, scores[1:]))
    assert [doc for doc, _ in results] == [docs[2], docs[1], docs[0]]


def test_ties_keep_insertion_order():
    _, ranker, docs = _build("alpha beta", "alpha beta", "gamma delta", "alpha beta")
    results = ranker.rank("alpha")
    assert [doc for doc, _ in results] == [docs[0], docs[1], docs[3]]


def test_repeated_query_terms_amplify_score():
    _, ranker, _ = _build("search engine", "other thing")
    single = ranker.rank("search")[0][1]
    double = ranker.rank("search search")[0][1]
    assert double == pytest.approx(2 * single)


def test_multi_term_query_sums_contributions():
    _, ranker, docs = _build("red green", "red blue", "yellow")
    results = dict((doc.id, score) for doc, score in ranker.rank("green red"))

    idf_red = math.log(3 / 2)
    idf_green = math.log(3)
    assert results[docs[0].id] == pytest.approx(0.5 * idf_green + 0.5 * idf_red)
    assert results[docs[1].id] == pytest.approx(0.5 * idf_red)
    assert docs[2].id not in results


def test_query_is_normalized_like_documents():
    _, ranker, docs = _build("Machine learning", "cooking")
    assert [doc for doc, _ in ranker.rank("MACHINE!!!")] == [docs[0]]


def test_empty_query_returns_nothing():
    _, ranker, _ = _build("anything")
    assert ranker.rank("") == []
    assert ranker.rank("   ?!  ") == []
