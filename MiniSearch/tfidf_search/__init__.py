"""
TF-IDF search module for ranking documents with the TF-IDF weighting scheme.
Scores are the sum of tf * idf over the query terms.
"""
from .tfidf_search import term_frequency, TFIDFRanker
