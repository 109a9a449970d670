"""
Preprocessing module for turning raw text into index terms.
Includes normalization, tokenization and the document record.
"""
from .tokenizer import normalize, tokenize
from .document import Document, DocumentStore
