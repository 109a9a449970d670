import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum
from typing import Callable, Dict, Optional

import requests

from ..build_inverted_index import InvertedIndex
from ..preprocessing.document import Document

logger = logging.getLogger(__name__)

TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")

ABANDONED_REASON = "abandoned at shutdown"


class CrawlState(Enum):
    UNVISITED = "unvisited"
    IN_FLIGHT = "in_flight"
    INDEXED = "indexed"
    FAILED = "failed"


def extract_title(html: str, tag: str = "title") -> str:
    """
    Extract the text of the first <tag>...</tag> pair.

    Args:
        html: Raw page markup
        tag: Tag name to look for

    Returns:
        Inner text with nested tags removed, or an empty string
    """
    pattern = re.compile(rf"<{tag}[^>]*>(.*?)</{tag}>", re.IGNORECASE | re.DOTALL)
    match = pattern.search(html)
    if not match:
        return ""
    inner = TAG_PATTERN.sub("", match.group(1))
    return WHITESPACE_PATTERN.sub(" ", inner).strip()


def extract_text(html: str, max_length: int = 500) -> str:
    """
    Approximate the plain text of a page by dropping all markup tags.

    Args:
        html: Raw page markup
        max_length: Maximum number of characters to keep

    Returns:
        Whitespace collapsed text, truncated to max_length
    """
    text = TAG_PATTERN.sub(" ", html)
    text = WHITESPACE_PATTERN.sub(" ", text).strip()
    return text[:max_length]


class WebCrawler:
    """
    Fetches pages on a fixed-size worker pool and feeds them into the index.

    Each locator goes through UNVISITED -> IN_FLIGHT -> INDEXED or FAILED.
    A locator is fetched at most once for the lifetime of the crawler.
    """

    def __init__(self, inverted_index: InvertedIndex, config: Optional[Dict] = None,
                 on_indexed: Optional[Callable[[Document], None]] = None,
                 on_failure: Optional[Callable[[str, str], None]] = None):
        """
        Initialize the crawler.

        Args:
            inverted_index: Index that receives fetched documents
            config: The "crawler" section of the configuration
            on_indexed: Called with each successfully indexed document
            on_failure: Called with (locator, reason) for each failed target
        """
        config = config or {}
        self.inverted_index = inverted_index
        self.max_workers = config.get("max_workers", 5)
        self.connect_timeout = config.get("connect_timeout", 3.0)
        self.read_timeout = config.get("read_timeout", 3.0)
        self.max_content_length = config.get("max_content_length", 500)
        self.user_agent = config.get("user_agent", "MiniSearchEngine/1.0")
        self.on_indexed = on_indexed
        self.on_failure = on_failure

        self._states: Dict[str, CrawlState] = {}
        self._futures = {}
        self._lock = threading.Lock()
        self._accepting = True
        self._executor = ThreadPoolExecutor(max_workers=self.max_workers,
                                            thread_name_prefix="crawler")

    def submit(self, locator: str) -> bool:
        """
        Schedule a locator for fetching.

        Args:
            locator: URL to fetch

        Returns:
            True if a fetch was scheduled, False if the locator was already
            seen or the crawler no longer accepts work
        """
        with self._lock:
            if not self._accepting:
                logger.warning("Crawler is stopped, ignoring %s", locator)
                return False
            if locator in self._states:
                logger.debug("Already seen %s, skipping", locator)
                return False

            self._states[locator] = CrawlState.IN_FLIGHT
            self._futures[locator] = self._executor.submit(self._crawl, locator)

        return True

    def state(self, locator: str) -> CrawlState:
        with self._lock:
            return self._states.get(locator, CrawlState.UNVISITED)

    def stats(self) -> Dict[str, int]:
        """Count of seen locators per crawl state."""
        counts = {state.value: 0 for state in CrawlState if state != CrawlState.UNVISITED}
        with self._lock:
            for state in self._states.values():
                counts[state.value] += 1
        return counts

    def fetch_page(self, locator: str) -> str:
        """Download a page body. Raises on network errors and non-2xx responses."""
        response = requests.get(
            locator,
            headers={"User-Agent": self.user_agent},
            timeout=(self.connect_timeout, self.read_timeout),
        )
        response.raise_for_status()
        return response.text

    def _crawl(self, locator: str):
        """Worker task: fetch, extract and index one locator."""
        logger.info("[Crawler] Fetching: %s", locator)
        try:
            html = self.fetch_page(locator)
            title = extract_title(html) or locator
            body = extract_text(html, self.max_content_length)
        except Exception as e:
            self._fail(locator, str(e) or e.__class__.__name__)
            return

        with self._lock:
            # drain_and_stop already gave up on this target
            if self._states.get(locator) != CrawlState.IN_FLIGHT:
                return
            document = self.inverted_index.create_document(locator, title, body)
            self.inverted_index.add_document(document)
            self._states[locator] = CrawlState.INDEXED

        logger.info("[Crawler] Indexed: %s", title)
        if self.on_indexed:
            self.on_indexed(document)

    def _fail(self, locator: str, reason: str):
        with self._lock:
            if self._states.get(locator) != CrawlState.IN_FLIGHT:
                return
            self._states[locator] = CrawlState.FAILED

        logger.warning("[Crawler] Failed: %s (%s)", locator, reason)
        if self.on_failure:
            self.on_failure(locator, reason)

    def drain_and_stop(self, timeout: float = 10.0) -> int:
        """
        Stop accepting work and wait for outstanding fetches.

        Fetches still queued or running after the timeout are abandoned:
        queued ones are cancelled, running ones have their result discarded.

        Args:
            timeout: Seconds to wait for in-flight fetches

        Returns:
            Number of abandoned targets
        """
        with self._lock:
            self._accepting = False
            pending = dict(self._futures)

        _, not_done = wait(list(pending.values()), timeout=timeout)

        abandoned = []
        with self._lock:
            for locator, future in pending.items():
                if future in not_done and self._states.get(locator) == CrawlState.IN_FLIGHT:
                    future.cancel()
                    self._states[locator] = CrawlState.FAILED
                    abandoned.append(locator)

        self._executor.shutdown(wait=False, cancel_futures=True)

        for locator in abandoned:
            logger.warning("[Crawler] Failed: %s (%s)", locator, ABANDONED_REASON)
            if self.on_failure:
                self.on_failure(locator, ABANDONED_REASON)

        if abandoned:
            logger.info("Crawler stopped, %d fetch(es) abandoned", len(abandoned))
        else:
            logger.info("Crawler stopped")
        return len(abandoned)
