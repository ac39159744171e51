from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Line formats understood by the dictionary loader
FORMAT_PLAIN = 'plain'
FORMAT_FLAGGED = 'flagged'
FORMAT_COMMENTED = 'commented'
FORMATS = (FORMAT_PLAIN, FORMAT_FLAGGED, FORMAT_COMMENTED)

@dataclass(frozen=True)
class DictionarySource:
    name: str
    url: str
    format: str = FORMAT_PLAIN

# Ranked, highest priority first
DEFAULT_SOURCES: Tuple[DictionarySource, ...] = (
    DictionarySource(
        name='dwyl-words-alpha',
        url='https://raw.githubusercontent.com/dwyl/english-words/master/words_alpha.txt',
        format=FORMAT_PLAIN,
    ),
    DictionarySource(
        name='12dicts-2of12inf',
        url='https://raw.githubusercontent.com/en-wl/wordlist/master/alt12dicts/2of12inf.txt',
        format=FORMAT_FLAGGED,
    ),
    DictionarySource(
        name='enable1',
        url='https://raw.githubusercontent.com/dolph/dictionary/master/enable1.txt',
        format=FORMAT_PLAIN,
    ),
)

def parse_sources(raw: str) -> List[DictionarySource]:
    """Parse ``format=url,format=url`` into ranked sources.

    An entry without ``format=`` is read as a plain list. Unknown formats raise
    ValueError so a typo in the environment is not silently ignored.
    """
    sources: List[DictionarySource] = []
    for idx, entry in enumerate(e.strip() for e in raw.split(',')):
        if not entry:
            continue
        fmt, sep, url = entry.partition('=')
        if not sep or fmt.startswith('http'):
            fmt, url = FORMAT_PLAIN, entry
        fmt = fmt.strip().lower()
        if fmt not in FORMATS:
            raise ValueError(f"Unknown dictionary format {fmt!r} in {entry!r}")
        sources.append(DictionarySource(name=f"env-{idx + 1}", url=url.strip(), format=fmt))
    return sources

@dataclass
class WordFinderConfig:
    sources: Tuple[DictionarySource, ...] = field(default_factory=lambda: DEFAULT_SOURCES)
    http_timeout: float = 10.0
    # Practical upper bound on bag size; enumeration is factorial
    max_letters: int = 10
    # Enumeration steps between cancellation checks
    cancel_check_interval: int = 2048

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "WordFinderConfig":
        env = os.environ if environ is None else environ
        raw_sources = env.get('WORDFINDER_SOURCES', '').strip()
        return cls(
            sources=tuple(parse_sources(raw_sources)) if raw_sources else DEFAULT_SOURCES,
            http_timeout=float(env.get('WORDFINDER_HTTP_TIMEOUT', '10')),
            max_letters=int(env.get('WORDFINDER_MAX_LETTERS', '10')),
            cancel_check_interval=max(1, int(env.get('WORDFINDER_CANCEL_CHECK_INTERVAL', '2048'))),
        )
