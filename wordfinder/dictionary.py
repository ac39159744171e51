from __future__ import annotations
import asyncio
import logging
import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Set

import httpx

from .config import (
    FORMAT_COMMENTED,
    FORMAT_FLAGGED,
    FORMAT_PLAIN,
    DictionarySource,
    WordFinderConfig,
)
from .normalize import is_alpha_word, normalize_word

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = 'fallback'

# Used only when every ranked source fails, so the finder still works offline.
DEFAULT_WORDS = frozenset({
    'a', 'i', 'am', 'an', 'as', 'at', 'be', 'by', 'do', 'go', 'he', 'if', 'in', 'is', 'it',
    'me', 'my', 'no', 'of', 'on', 'or', 'so', 'to', 'up', 'us', 'we',
    'act', 'and', 'ant', 'are', 'art', 'ate', 'bat', 'bed', 'but', 'can', 'car', 'cat',
    'day', 'dog', 'ear', 'eat', 'end', 'far', 'for', 'get', 'has', 'her', 'him', 'his',
    'hot', 'let', 'man', 'new', 'not', 'now', 'one', 'our', 'out', 'pot', 'ran', 'rat',
    'run', 'sat', 'see', 'set', 'she', 'sun', 'tan', 'tea', 'ten', 'the', 'top', 'two',
    'use', 'was', 'way', 'who', 'you',
    'also', 'best', 'came', 'care', 'cart', 'date', 'east', 'from', 'have', 'into',
    'last', 'late', 'made', 'make', 'most', 'name', 'near', 'once', 'opts', 'part',
    'past', 'post', 'pots', 'race', 'rate', 'read', 'rest', 'seat', 'some', 'spot',
    'star', 'stop', 'take', 'tear', 'that', 'them', 'time', 'tops', 'word', 'work',
    'about', 'after', 'heart', 'other', 'place', 'stare', 'tears', 'there', 'water',
    'words', 'world', 'write',
})

# Annotation markers used by flagged lists (12dicts / SCOWL style), e.g. "run%verb"
FLAG_MARKERS = re.compile(r'[%~+!^&]')
COMMENT_MARKERS = ('#',)

def _alpha_only(candidates: Iterable[str]) -> Set[str]:
    return {w for w in candidates if is_alpha_word(w)}

def parse_plain(lines: Iterable[str]) -> Set[str]:
    return _alpha_only(normalize_word(line) for line in lines)

def parse_flagged(lines: Iterable[str]) -> Set[str]:
    return _alpha_only(normalize_word(FLAG_MARKERS.split(line, 1)[0]) for line in lines)

def parse_commented(lines: Iterable[str]) -> Set[str]:
    # Headers are indented; comments start with a marker
    kept = (line for line in lines
            if line and not line[0].isspace() and not line.startswith(COMMENT_MARKERS))
    return _alpha_only(normalize_word(line) for line in kept)

PARSERS = {
    FORMAT_PLAIN: parse_plain,
    FORMAT_FLAGGED: parse_flagged,
    FORMAT_COMMENTED: parse_commented,
}

def parse_word_list(text: str, fmt: str = FORMAT_PLAIN) -> Set[str]:
    return PARSERS[fmt](text.splitlines())

@dataclass(frozen=True)
class Dictionary:
    words: FrozenSet[str]
    source: str = FALLBACK_SOURCE

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        return normalize_word(word) in self.words

    def __len__(self) -> int:
        return len(self.words)

    def is_valid(self, word: str) -> bool:
        if not word:
            return False
        return word in self

@dataclass(frozen=True)
class SourceFailure:
    source: str
    reason: str

class DictionaryLoader:
    """Loads the word list once per process from the first source that answers.

    Sources are tried in rank order. Any error, a non-2xx status or a
    body without a single usable word moves on to the next source; when all of
    them fail the built-in DEFAULT_WORDS are used. ``load`` never raises.
    """

    def __init__(self, config: Optional[WordFinderConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or WordFinderConfig.from_env()
        self._transport = transport
        self._dictionary: Optional[Dictionary] = None
        self._lock = asyncio.Lock()
        self.failures: List[SourceFailure] = []

    @property
    def dictionary(self) -> Optional[Dictionary]:
        return self._dictionary

    def size(self) -> int:
        return len(self._dictionary) if self._dictionary is not None else 0

    def is_loaded(self) -> bool:
        return self.size() > 0

    async def load(self) -> Dictionary:
        if self._dictionary is not None:
            return self._dictionary
        # Concurrent first callers wait here and reuse the winner's result
        async with self._lock:
            if self._dictionary is None:
                self._dictionary = await self._load_ranked()
        return self._dictionary

    async def _load_ranked(self) -> Dictionary:
        failures: List[SourceFailure] = []
        async with httpx.AsyncClient(
            timeout=self.config.http_timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            for source in self.config.sources:
                try:
                    words = await self._fetch(client, source)
                except Exception as e:
                    failures.append(SourceFailure(source.name, f"{type(e).__name__}: {e}"))
                    logger.warning("Dictionary source %s failed: %s", source.name, e)
                    continue
                if not words:
                    failures.append(SourceFailure(source.name, 'no valid words'))
                    logger.warning("Dictionary source %s returned no valid words", source.name)
                    continue
                self.failures = failures
                logger.info("Loaded %d words from %s", len(words), source.name)
                return Dictionary(words=frozenset(words), source=source.name)
        self.failures = failures
        logger.error("All %d dictionary sources failed; using %d built-in words",
                     len(self.config.sources), len(DEFAULT_WORDS))
        return Dictionary(words=DEFAULT_WORDS, source=FALLBACK_SOURCE)

    async def _fetch(self, client: httpx.AsyncClient, source: DictionarySource) -> Set[str]:
        logger.debug("Fetching %s (%s)", source.url, source.format)
        response = await client.get(source.url)
        response.raise_for_status()
        return parse_word_list(response.text, source.format)

def is_real_word(word: str, dictionary: Dictionary) -> bool:
    return dictionary.is_valid(word)

# Process-wide loader
service = DictionaryLoader(WordFinderConfig.from_env())

async def load_dictionary() -> Dictionary:
    return await service.load()
