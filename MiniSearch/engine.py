"""
Search engine facade combining the inverted index, the TF-IDF ranker and
the web crawler.
"""
import json
import logging
import math
from typing import Callable, Dict, List, Optional, Tuple

from MiniSearch.build_inverted_index import InvertedIndex
from MiniSearch.config import load_config
from MiniSearch.crawler.crawler import WebCrawler
from MiniSearch.preprocessing.document import Document
from MiniSearch.tfidf_search.tfidf_search import TFIDFRanker

logger = logging.getLogger(__name__)


class SearchPage:
    """One page of ranked search results."""

    def __init__(self, query: str, page: int, page_size: int,
                 results: List[Tuple[Document, float]], total_results: int):
        self.query = query
        self.page = page
        self.page_size = page_size
        self.results = results
        self.total_results = total_results
        self.total_pages = math.ceil(total_results / page_size)

    @property
    def start(self) -> int:
        """Zero-based position of the first result on this page."""
        return (self.page - 1) * self.page_size

    @property
    def no_more_results(self) -> bool:
        """True when the requested page lies past the last result."""
        return self.total_results > 0 and self.start >= self.total_results

    def __repr__(self):
        return (f"SearchPage(query={self.query!r}, page={self.page}/{self.total_pages}, "
                f"results={len(self.results)}, total={self.total_results})")


class SearchEngine:
    """In-process search engine with concurrent web acquisition."""

    def __init__(self, config: Optional[Dict] = None,
                 on_indexed: Optional[Callable[[Document], None]] = None,
                 on_failure: Optional[Callable[[str, str], None]] = None):
        """
        Initialize the search engine.

        Args:
            config: Configuration dictionary (loaded from config.json if not provided)
            on_indexed: Called with each document indexed by the crawler
            on_failure: Called with (locator, reason) for each failed crawl
        """
        self.config = config or load_config()
        self.page_size = self.config.get("search", {}).get("page_size", 3)
        self.shutdown_timeout = self.config.get("crawler", {}).get("shutdown_timeout", 10.0)

        self.inverted_index = InvertedIndex()
        self.ranker = TFIDFRanker(self.inverted_index)
        self.crawler = WebCrawler(
            self.inverted_index,
            config=self.config.get("crawler", {}),
            on_indexed=on_indexed,
            on_failure=on_failure,
        )

    def add_document(self, source: str, title: str, body: str) -> Document:
        """
        Manually add a document and index it immediately.

        Args:
            source: URL or label of the document
            title: Document title
            body: Document text

        Returns:
            The indexed Document
        """
        document = self.inverted_index.create_document(source, title, body)
        self.inverted_index.add_document(document)
        logger.debug("Added document %d: %s", document.id, title)
        return document

    def load_documents(self, documents_path: str) -> int:
        """
        Add every document from a JSON file.

        Args:
            documents_path: Path to a JSON list of {source, title, body} objects

        Returns:
            Number of documents added
        """
        with open(documents_path, "r", encoding="utf-8") as f:
            documents = json.load(f)

        if not isinstance(documents, list):
            raise ValueError(f"{documents_path} must contain a JSON array of documents")

        for doc_data in documents:
            self.add_document(
                doc_data.get("source", doc_data.get("url", "")),
                doc_data.get("title", ""),
                doc_data.get("body", doc_data.get("content", "")),
            )

        logger.info("Loaded %d documents from %s", len(documents), documents_path)
        return len(documents)

    def crawl(self, locator: str) -> bool:
        """Schedule a URL for background fetching. Returns False if it was skipped."""
        return self.crawler.submit(locator)

    def search(self, query: str, page: int = 1, page_size: Optional[int] = None) -> SearchPage:
        """
        Search the index and return one page of ranked results.

        Args:
            query: Free-text query
            page: 1-based page number
            page_size: Results per page (defaults to the configured page size)

        Returns:
            SearchPage for the requested page
        """
        if page_size is None:
            page_size = self.page_size
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")

        ranked = self.ranker.rank(query)
        start = (page - 1) * page_size
        end = min(start + page_size, len(ranked))

        logger.debug("Query %r: %d results, page %d", query, len(ranked), page)
        return SearchPage(query, page, page_size, ranked[start:end], len(ranked))

    def total_documents(self) -> int:
        return self.inverted_index.total_documents()

    def stats(self) -> Dict:
        """Index and crawler counters."""
        return {
            "total_documents": self.inverted_index.total_documents(),
            "total_terms": self.inverted_index.total_terms(),
            "crawler": self.crawler.stats(),
        }

    def shutdown(self, timeout: Optional[float] = None) -> int:
        """
        Stop the crawler, waiting up to timeout seconds for running fetches.

        Returns:
            Number of fetches abandoned
        """
        if timeout is None:
            timeout = self.shutdown_timeout
        return self.crawler.drain_and_stop(timeout)
