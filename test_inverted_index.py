#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Test the thread-safe inverted index
"""

import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor

from MiniSearch.build_inverted_index import InvertedIndex


def _add(index, source, body, title="Title"):
    document = index.create_document(source, title, body)
    index.add_document(document)
    return document


def test_add_document_counts_terms():
    index = InvertedIndex()
    doc = _add(index, "a", "java is java and more")

    assert index.total_documents() == 1
    assert index.get_document(doc.id) is doc
    assert index.get_doc_frequency("java") == {doc.id: 2}
    assert index.get_doc_frequency("more") == {doc.id: 1}


def test_lookups_are_case_insensitive():
    index = InvertedIndex()
    doc = _add(index, "a", "Python programming")
    assert index.get_doc_frequency("PYTHON") == {doc.id: 1}
    assert index.document_frequency("Python") == 1


def test_unseen_term():
    """Test that unknown terms give empty results instead of errors"""
    index = InvertedIndex()
    _add(index, "a", "something")
    assert index.get_doc_frequency("missing") == {}
    assert index.document_frequency("missing") == 0
    assert index.get_document(42) is None
    # Lookups of unseen terms must not create entries
    assert index.total_terms() == 1


def test_document_frequency_counts_distinct_documents():
    index = InvertedIndex()
    _add(index, "a", "data data data")
    _add(index, "b", "data science")
    _add(index, "c", "machine learning")
    assert index.document_frequency("data") == 2
    assert index.all_doc_ids() == [1, 2, 3]


def test_get_doc_frequency_returns_copy():
    index = InvertedIndex()
    doc = _add(index, "a", "term")
    postings = index.get_doc_frequency("term")
    postings[999] = 5
    assert index.get_doc_frequency("term") == {doc.id: 1}


def test_empty_document_is_registered():
    index = InvertedIndex()
    doc = _add(index, "a", "")
    assert index.total_documents() == 1
    assert index.get_document(doc.id).tokens == []
    assert index.total_terms() == 0


def test_concurrent_inserts_are_complete():
    """Test concurrent writers and readers against one index"""
    index = InvertedIndex()
    bodies = [f"shared word{i % 7} shared token{i} shared" for i in range(300)]

    def worker(i):
        # Interleave reads with writes
        index.get_doc_frequency("shared")
        return _add(index, f"src{i}", bodies[i])

    with ThreadPoolExecutor(max_workers=8) as pool:
        docs = list(pool.map(worker, range(300)))

    assert index.total_documents() == 300
    assert len({doc.id for doc in docs}) == 300

    shared = index.get_doc_frequency("shared")
    assert len(shared) == 300
    assert all(count == 3 for count in shared.values())

    for doc in docs:
        assert index.get_document(doc.id) is doc
        for term, count in Counter(doc.tokens).items():
            assert index.get_doc_frequency(term)[doc.id] == count


def test_readers_never_see_partial_documents():
    """Test a reader running alongside writers only sees fully indexed documents"""
    index = InvertedIndex()
    stop = threading.Event()
    partial = []

    def reader():
        while not stop.is_set():
            with index.lock:
                for doc_id in index.all_doc_ids():
                    doc = index.get_document(doc_id)
                    for term, count in Counter(doc.tokens).items():
                        if index.index.get(term, {}).get(doc_id) != count:
                            partial.append((doc_id, term))
            # Let writers take the lock between passes
            time.sleep(0.001)

    def writer(offset):
        for i in range(200):
            n = offset * 200 + i
            body = " ".join(f"term{(n + k) % 97}" for k in range(50))
            _add(index, f"src{n}", body)

    reader_thread = threading.Thread(target=reader)
    reader_thread.start()
    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(writer, range(4)))
    stop.set()
    reader_thread.join(10)

    assert partial == []
    assert index.total_documents() == 800
