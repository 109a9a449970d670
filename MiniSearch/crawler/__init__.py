"""
Crawler module that fetches web pages concurrently and indexes their text.
"""
from .crawler import CrawlState, WebCrawler, extract_text, extract_title
