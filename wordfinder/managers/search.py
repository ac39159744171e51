from __future__ import annotations
import asyncio
import logging
import threading
import time
from typing import Dict, Optional

from ..config import WordFinderConfig
from ..dictionary import DictionaryLoader
from ..errors import GenerationCancelled, SearchRejected
from ..generator import generate
from ..normalize import normalize_letters
from ..schemas import DictionaryStatus, SearchRequest, SearchResult, SourceFailureInfo

logger = logging.getLogger(__name__)

class SearchManager:
    """Runs one search per session key in a worker thread.

    A new search for a key supersedes the one in flight: the old thread's
    cancel flag is set, its task is cancelled and its awaiter gets
    GenerationCancelled instead of a result.
    """

    def __init__(self, loader: DictionaryLoader, config: Optional[WordFinderConfig] = None):
        self.loader = loader
        self.config = config or loader.config
        self._tasks: Dict[str, asyncio.Task] = {}
        self._flags: Dict[str, threading.Event] = {}

    def dictionary_status(self) -> DictionaryStatus:
        d = self.loader.dictionary
        return DictionaryStatus(
            loaded=self.loader.is_loaded(),
            size=self.loader.size(),
            source=d.source if d is not None else None,
            failures=[SourceFailureInfo(source=f.source, reason=f.reason) for f in self.loader.failures],
        )

    def in_flight(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def cancel(self, key: str) -> bool:
        task = self._tasks.pop(key, None)
        flag = self._flags.pop(key, None)
        if flag is not None:
            flag.set()
        if task and not task.done():
            task.cancel()
            return True
        return False

    async def search(self, key: str, request: SearchRequest) -> SearchResult:
        n = len(normalize_letters(request.letters))
        if n > self.config.max_letters:
            raise SearchRejected(f"At most {self.config.max_letters} letters are allowed, got {n}")
        if self.cancel(key):
            logger.debug("Search for %s superseded", key)
        flag = threading.Event()
        task = asyncio.create_task(self._run(request, flag))
        self._tasks[key] = task
        self._flags[key] = flag
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if flag.is_set() and not (current is not None and current.cancelling()):
                raise GenerationCancelled(f"Search for {key} was superseded") from None
            # Our own awaiter was cancelled; stop the worker thread too
            flag.set()
            raise
        finally:
            if self._tasks.get(key) is task:
                del self._tasks[key]
                del self._flags[key]

    async def _run(self, request: SearchRequest, flag: threading.Event) -> SearchResult:
        started = time.perf_counter()
        # A superseded search must not abort the shared dictionary load
        dictionary = await asyncio.shield(self.loader.load())
        words = await asyncio.to_thread(
            generate,
            request.letters,
            request.length,
            request.pattern,
            dictionary,
            cancel=flag,
            check_interval=self.config.cancel_check_interval,
        )
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info("Search %r/%d found %d words in %dms",
                    request.letters, request.length, len(words), elapsed_ms)
        return SearchResult(
            words=sorted(words),
            count=len(words),
            elapsedMs=elapsed_ms,
            dictionary=self.dictionary_status(),
        )
