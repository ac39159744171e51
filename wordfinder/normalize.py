from __future__ import annotations
import re
from typing import Iterable, List, Optional, Sequence, Union

ALPHA_WORD = re.compile(r'^[a-z]+$')

# Pattern slots that mean "any letter"
WILDCARDS = frozenset('?_.*')

PatternInput = Union[str, Sequence[Optional[str]], None]

def is_alpha_word(word: str) -> bool:
    return bool(ALPHA_WORD.match(word))

def normalize_word(word: str) -> str:
    return word.strip().lower()

def normalize_letters(letters: Union[str, Iterable[str]]) -> List[str]:
    # Multiplicity is kept; anything outside a-z is dropped
    return [c for c in ''.join(letters).lower() if 'a' <= c <= 'z']

def normalize_pattern(pattern: PatternInput, length: int) -> List[Optional[str]]:
    """Return exactly ``length`` slots, each a lowercase letter or None (open).

    Only the first character of a slot counts. Extra slots are ignored and
    missing trailing slots are open.
    """
    slots: List[Optional[str]] = [None] * max(length, 0)
    if not pattern:
        return slots
    for i, raw in enumerate(list(pattern)[:len(slots)]):
        if not raw:
            continue
        c = raw.strip()[:1].lower()
        if c and c not in WILDCARDS:
            slots[i] = c
    return slots

def is_open_pattern(slots: Sequence[Optional[str]]) -> bool:
    return all(s is None for s in slots)
