import pytest
import requests

from MiniSearch.config import load_config
from MiniSearch.engine import SearchEngine


class FakeResponse:
    """Stand-in for requests.Response with just what the crawler reads."""

    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def engine(config):
    search_engine = SearchEngine(config=config)
    yield search_engine
    search_engine.shutdown(timeout=0)
