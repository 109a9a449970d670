import logging
import threading
from collections import defaultdict
from typing import Dict, List, Optional

from MiniSearch.preprocessing.document import Document, DocumentStore

logger = logging.getLogger(__name__)


class InvertedIndex:
    """
    Inverted index mapping terms to per-document occurrence counts.
    Owns the document store, so identifiers are allocated by the index itself.

    All reads and writes go through one re-entrant lock. A document's
    registration and every counter update for its terms happen in a single
    critical section, so readers never see a partially indexed document.
    """

    def __init__(self):
        self.index = defaultdict(dict)  # {term: {doc_id: count}}
        self.documents = {}  # {doc_id: Document}
        self.store = DocumentStore()
        self.lock = threading.RLock()

    def create_document(self, source: str, title: str, body: str) -> Document:
        """Allocate a new document from the embedded store (not yet indexed)."""
        return self.store.create(source, title, body)

    def add_document(self, document: Document):
        """
        Add a document to the inverted index.

        Args:
            document: Document object to add
        """
        # Tokenize outside the lock, the result depends only on the body
        tokens = document.tokens

        with self.lock:
            self.documents[document.id] = document
            for term in tokens:
                postings = self.index[term]
                postings[document.id] = postings.get(document.id, 0) + 1

        logger.debug("Indexed document %d (%d tokens)", document.id, len(tokens))

    def get_doc_frequency(self, term: str) -> Dict[int, int]:
        """
        Get the per-document counts for a term.

        Args:
            term: The term to look up (case-insensitive)

        Returns:
            Copy of the {doc_id: count} mapping, empty if the term is unseen
        """
        with self.lock:
            return dict(self.index.get(term.lower(), {}))

    def get_document(self, doc_id: int) -> Optional[Document]:
        with self.lock:
            return self.documents.get(doc_id)

    def total_documents(self) -> int:
        with self.lock:
            return len(self.documents)

    def total_terms(self) -> int:
        with self.lock:
            return len(self.index)

    def all_doc_ids(self) -> List[int]:
        with self.lock:
            return list(self.documents)

    def document_frequency(self, term: str) -> int:
        """
        Get the number of documents containing the given term.

        Args:
            term: The term to check (case-insensitive)

        Returns:
            Number of documents containing the term
        """
        with self.lock:
            return len(self.index.get(term.lower(), {}))
