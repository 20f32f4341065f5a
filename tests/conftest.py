"""Pytest configuration and fixtures for websearch tests."""

import pytest

from websearch.config import Settings

DUCKDUCKGO_PAGE = """
<html><body>
<div id="links" class="results">
  <div class="result result--ad">
    <h2 class="result__title">
      <a class="result__a" href="https://duckduckgo.com/y.js?ad_domain=ads.example.com">Sponsored Rust Course</a>
    </h2>
    <a class="result__snippet">Buy our course now.</a>
  </div>
  <div class="result results_links results_links_deep web-result">
    <div class="links_main links_deep result__body">
      <h2 class="result__title">
        <a class="result__a" href="//duckduckgo.com/l/?uddg=https%3A%2F%2Fdoc.rust-lang.org%2Fbook%2Fch04-01-what-is-ownership.html&amp;rut=abc">What is Ownership? - The Rust Programming Language</a>
      </h2>
      <a class="result__snippet">Ownership is a set of rules that govern how a Rust program manages memory.
        All programs have to manage the way they use memory while running.</a>
    </div>
  </div>
  <div class="result results_links results_links_deep web-result">
    <div class="links_main links_deep result__body">
      <h2 class="result__title">
        <a class="result__a" href="https://blog.example.com/rust-ownership-explained">Rust Ownership Explained</a>
      </h2>
      <a class="result__snippet">A friendly walkthrough of ownership, borrowing and lifetimes in Rust.</a>
    </div>
  </div>
  <div class="result results_links results_links_deep web-result">
    <div class="links_main links_deep result__body">
      <h2 class="result__title">
        <a class="result__a" href="https://stackoverflow.com/questions/1/rust-ownership">Understanding Rust ownership rules</a>
      </h2>
    </div>
  </div>
</div>
</body></html>
"""

BRAVE_PAGE = """
<html><body>
<div id="results">
  <div class="snippet" data-type="web">
    <a href="https://www.rust-lang.org/learn"><span class="snippet-title">Learn Rust</span></a>
    <div class="snippet-description">Get started with Rust. Read the book, work through examples and learn about ownership.</div>
  </div>
  <div class="snippet" data-type="web">
    <a href="https://en.wikipedia.org/wiki/Rust_(programming_language)"><span class="snippet-title">Rust (programming language) - Wikipedia</span></a>
    <p>Rust is a general-purpose programming language emphasizing performance, type safety and concurrency.</p>
  </div>
</div>
</body></html>
"""

EMPTY_RESULTS_PAGE = """
<html><body><div class="no-results">No results found for your query.</div></body></html>
"""


class FakeClock:
    """Controllable clock whose async sleep advances time instead of waiting."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock():
    """Provide a fake clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def test_settings():
    """Create test settings without pacing delays and without a .env file."""
    return Settings(
        _env_file=None,
        min_request_delay_ms=0,
        max_jitter_ms=0,
        log_level="DEBUG",
    )


@pytest.fixture
def duckduckgo_page():
    return DUCKDUCKGO_PAGE


@pytest.fixture
def brave_page():
    return BRAVE_PAGE


@pytest.fixture
def empty_results_page():
    return EMPTY_RESULTS_PAGE
