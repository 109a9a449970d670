"""
MiniSearch - a small in-process search engine with an inverted index,
TF-IDF ranking and a multi-threaded web crawler.
"""
from MiniSearch.engine import SearchEngine, SearchPage
from MiniSearch.preprocessing.document import Document

__version__ = "1.0.0"
