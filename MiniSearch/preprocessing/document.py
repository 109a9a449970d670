import threading
from typing import List

from .tokenizer import tokenize


class Document:
    """
    Represents a document in the search engine.
    The record is immutable once created; tokens are computed on first access.
    """

    __slots__ = ("_id", "_source", "_title", "_body", "_tokens")

    def __init__(self, doc_id: int, source: str, title: str, body: str):
        """
        Initialize a document.

        Args:
            doc_id: Unique positive identifier assigned by a DocumentStore
            source: URL or caller supplied label the document came from
            title: Display title
            body: Document text
        """
        self._id = doc_id
        self._source = source
        self._title = title
        self._body = body or ""
        self._tokens = None

    @property
    def id(self) -> int:
        return self._id

    @property
    def source(self) -> str:
        return self._source

    @property
    def title(self) -> str:
        return self._title

    @property
    def body(self) -> str:
        return self._body

    @property
    def tokens(self) -> List[str]:
        """Normalized terms of the body, tokenized lazily."""
        if self._tokens is None:
            self._tokens = tokenize(self._body)
        return self._tokens

    def preview(self, length: int = 80) -> str:
        """Return the start of the body for display, with a trailing ellipsis."""
        return self._body[:length] + "..."

    def __repr__(self):
        return f"Document(id={self._id}, title={self._title!r}, source={self._source!r})"


class DocumentStore:
    """Creates documents with unique, monotonically increasing identifiers."""

    def __init__(self, start: int = 1):
        self._next_id = start
        self._lock = threading.Lock()

    def create(self, source: str, title: str, body: str) -> Document:
        """
        Allocate a fresh identifier and build the document record.

        Args:
            source: URL or label of the document
            title: Display title
            body: Document text

        Returns:
            The new Document
        """
        with self._lock:
            doc_id = self._next_id
            self._next_id += 1
            return Document(doc_id, source, title, body)
