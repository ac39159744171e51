from __future__ import annotations
import logging
from typing import Iterable, Iterator, List, Optional, Protocol, Set, Union

from .dictionary import Dictionary
from .errors import GenerationCancelled
from .normalize import PatternInput, is_open_pattern, normalize_letters, normalize_pattern

logger = logging.getLogger(__name__)

CANCEL_CHECK_INTERVAL = 2048

class CancelFlag(Protocol):
    def is_set(self) -> bool: ...

def iter_candidates(
    letters: Union[str, Iterable[str]],
    length: int,
    pattern: PatternInput = None,
    *,
    cancel: Optional[CancelFlag] = None,
    check_interval: int = CANCEL_CHECK_INTERVAL,
) -> Iterator[str]:
    """Yield every arrangement of ``length`` letters from the bag that fits the pattern.

    Each bag position is used at most once per arrangement, so repeated letters
    can appear as often as they occur in the bag. Identical strings reached
    through different positions are yielded more than once. Partial
    arrangements are dropped as soon as a fixed pattern slot disagrees.

    Raises GenerationCancelled once ``cancel`` is set.
    """
    bag = normalize_letters(letters)
    check_interval = max(1, check_interval)
    n = len(bag)
    if n == 0 or length < 1 or length > n:
        return
    slots = normalize_pattern(pattern, length)
    used = [False] * n
    # Bag indices of the arrangement being built, one per filled slot
    chosen: List[int] = []
    start = 0
    steps = 0
    while True:
        steps += 1
        if cancel is not None and steps % check_interval == 0 and cancel.is_set():
            raise GenerationCancelled()
        depth = len(chosen)
        if depth == length:
            yield ''.join(bag[i] for i in chosen)
            last = chosen.pop()
            used[last] = False
            start = last + 1
            continue
        want = slots[depth]
        i = start
        while i < n and (used[i] or (want is not None and bag[i] != want)):
            i += 1
        if i < n:
            used[i] = True
            chosen.append(i)
            start = 0
        elif chosen:
            last = chosen.pop()
            used[last] = False
            start = last + 1
        else:
            return

def generate(
    letters: Union[str, Iterable[str]],
    length: int,
    pattern: PatternInput,
    dictionary: Dictionary,
    *,
    cancel: Optional[CancelFlag] = None,
    check_interval: int = CANCEL_CHECK_INTERVAL,
) -> Set[str]:
    """Real words of ``length`` letters buildable from ``letters`` and matching ``pattern``."""
    words: Set[str] = set()
    for candidate in iter_candidates(letters, length, pattern,
                                     cancel=cancel, check_interval=check_interval):
        if candidate in dictionary.words:
            words.add(candidate)
    if cancel is not None and cancel.is_set():
        raise GenerationCancelled()
    logger.debug("generate(%r, %d, open=%s) -> %d words", letters, length,
                 pattern is None or is_open_pattern(normalize_pattern(pattern, length)), len(words))
    return words
