import logging
import math
from typing import Dict, List, Tuple

from ..build_inverted_index import InvertedIndex
from ..preprocessing.document import Document
from ..preprocessing.tokenizer import tokenize

logger = logging.getLogger(__name__)


def term_frequency(term: str, document: Document) -> float:
    """
    Compute term frequency (TF) of a term in a document.
    TF(t,d) = count(t,d) / |d|, or 0 for a document without tokens

    Args:
        term: Normalized term
        document: Document to measure

    Returns:
        Fraction of the document's tokens equal to the term
    """
    tokens = document.tokens
    if not tokens:
        return 0.0
    return tokens.count(term) / len(tokens)


class TFIDFRanker:
    """Ranks indexed documents against a free-text query using TF-IDF."""

    def __init__(self, inverted_index: InvertedIndex):
        self.inverted_index = inverted_index

    def inverse_document_frequency(self, term: str) -> float:
        """
        Calculate the inverse document frequency for a term.
        IDF(t) = ln(N/DF(t)), and 0 for a term no document contains

        Args:
            term: The term to calculate IDF for

        Returns:
            IDF value for the term
        """
        with self.inverted_index.lock:
            df = self.inverted_index.document_frequency(term)
            if df == 0:
                return 0.0
            return math.log(self.inverted_index.total_documents() / df)

    def rank(self, query: str) -> List[Tuple[Document, float]]:
        """
        Rank documents by TF-IDF relevance to a query.

        Every query term contributes, repeated terms included. Documents
        containing at least one query term are returned, highest score
        first; equal scores keep the order in which documents were first
        scored.

        Args:
            query: Free-text query

        Returns:
            List of (document, score) tuples
        """
        terms = tokenize(query)
        if not terms:
            return []

        scores: Dict[int, float] = {}

        # Hold the lock for the whole pass so N, DF and postings agree
        with self.inverted_index.lock:
            for term in terms:
                postings = self.inverted_index.get_doc_frequency(term)
                idf = self.inverse_document_frequency(term)

                for doc_id in postings:
                    document = self.inverted_index.get_document(doc_id)
                    tf = term_frequency(term, document)
                    scores[doc_id] = scores.get(doc_id, 0.0) + tf * idf

            ranked = [(self.inverted_index.get_document(doc_id), score)
                      for doc_id, score in scores.items()]

        # sort() is stable, ties stay in accumulation order
        ranked.sort(key=lambda x: x[1], reverse=True)
        logger.debug("Ranked %d documents for query %r", len(ranked), query)
        return ranked
