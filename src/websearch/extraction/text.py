"""Text helpers shared by result parsing and page extraction.

Keyword extraction and extractive summaries are pure functions of their
input, so identical input always yields identical output.
"""

import re
from collections import Counter
from urllib.parse import urlparse

STOP_WORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can",
    "had", "her", "was", "one", "our", "out", "day", "get", "has",
    "him", "his", "how", "man", "new", "now", "old", "see", "two",
    "way", "who", "boy", "did", "its", "let", "put", "say", "she",
    "too", "use",
})

PAGE_STOP_WORDS = STOP_WORDS | frozenset({
    "with", "have", "this", "will", "your", "from",
    "they", "know", "want", "been", "good", "much", "some", "time",
    "very", "when", "come", "here", "just", "like", "long", "make",
    "many", "over", "such", "take", "than", "them", "well", "were",
})

SUMMARY_SOFT_CAP = 180
SUMMARY_HARD_CAP = 200
SUMMARY_MIN_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")
_NON_ALPHA = re.compile(r"[^a-z]")
_SENTENCE = re.compile(r"[^.!?]+[.!?]*")
_TERMINAL = re.compile(r"[.!?]$")


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip."""
    return _WHITESPACE.sub(" ", text).strip()


def extract_domain(url: str) -> str:
    """Extract domain name from URL.

    Args:
        url: Full URL

    Returns:
        str: Host without a 'www.' prefix, or 'unknown source'
    """
    try:
        host = urlparse(url).hostname
    except ValueError:
        return "unknown source"
    if not host:
        return "unknown source"
    return host[4:] if host.startswith("www.") else host


def split_sentences(text: str) -> list[str]:
    """Split text into sentences, keeping terminal punctuation."""
    return [s.strip() for s in _SENTENCE.findall(text) if s.strip()]


def ensure_terminal_punctuation(text: str, cap: int = SUMMARY_SOFT_CAP) -> str:
    """Make sure text ends in '.', '!', '?' or '...'.

    Short text gets a period, text already near the cap gets an ellipsis.
    """
    text = text.rstrip()
    if _TERMINAL.search(text):
        return text
    return text + ("." if len(text) < cap else "...")


def extract_keywords(
    text: str,
    min_length: int = 3,
    limit: int = 5,
    stop_words: frozenset[str] = STOP_WORDS,
    min_frequency: int = 1,
) -> list[str]:
    """Extract the most frequent meaningful words from text.

    Tokens are lower-cased, split on whitespace and stripped of anything that
    is not a letter a-z. Ties keep first-seen order.

    Args:
        text: Text to analyze
        min_length: Shortest token kept
        limit: Maximum number of keywords
        stop_words: Tokens never returned
        min_frequency: Minimum count for a token to qualify

    Returns:
        list[str]: Keywords ordered by descending frequency
    """
    counts: Counter[str] = Counter()
    for token in text.lower().split():
        word = _NON_ALPHA.sub("", token)
        if len(word) >= min_length and word not in stop_words:
            counts[word] += 1

    # Counter keeps insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [word for word, count in ranked if count >= min_frequency][:limit]


def domain_summary(title: str, url: str) -> str:
    """Summary used when no text is available."""
    return ensure_terminal_punctuation(f"Content from {extract_domain(url)}: {title}")


def create_summary(title: str, snippet: str, url: str) -> str:
    """Create a short extractive summary of a search result.

    Args:
        title: Result title
        snippet: Result snippet (may be empty)
        url: Result URL, used when there is no snippet

    Returns:
        str: Summary of 1-3 sentences ending in terminal punctuation
    """
    if not snippet or not snippet.strip():
        return domain_summary(title, url)

    summary = normalize_whitespace(snippet)

    if len(summary) < SUMMARY_MIN_LENGTH:
        summary = f"{title}: {summary}"

    if len(summary) > SUMMARY_HARD_CAP:
        accumulated = ""
        for sentence in split_sentences(summary):
            candidate = f"{accumulated} {sentence}".strip()
            if len(candidate) > SUMMARY_SOFT_CAP:
                break
            accumulated = candidate

        if len(accumulated) >= SUMMARY_MIN_LENGTH:
            summary = accumulated
        else:
            summary = summary[:SUMMARY_SOFT_CAP].rstrip() + "..."

    return ensure_terminal_punctuation(summary)
