from __future__ import annotations
from typing import Callable, Dict, List, Union

import httpx
import pytest

from wordfinder import main
from wordfinder.config import DictionarySource, WordFinderConfig
from wordfinder.dictionary import DictionaryLoader
from wordfinder.managers.search import SearchManager

# url -> body text, HTTP status code, or an exception instance to raise
Route = Union[str, int, Exception]

def make_transport(routes: Dict[str, Route], calls: List[str]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        calls.append(url)
        route = routes.get(url, 404)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, int):
            return httpx.Response(route, text='error')
        return httpx.Response(200, text=route)
    return httpx.MockTransport(handler)

@pytest.fixture
def make_loader() -> Callable[..., DictionaryLoader]:
    def factory(sources, routes: Dict[str, Route], calls: List[str] = None, **config):
        calls = calls if calls is not None else []
        cfg = WordFinderConfig(sources=tuple(sources), **config)
        return DictionaryLoader(cfg, transport=make_transport(routes, calls))
    return factory

@pytest.fixture
def sources():
    return [
        DictionarySource(name='primary', url='https://words.test/primary.txt', format='plain'),
        DictionarySource(name='flagged', url='https://words.test/flagged.txt', format='flagged'),
        DictionarySource(name='commented', url='https://words.test/commented.txt', format='commented'),
    ]

SEARCH_WORDS = 'post\nstop\nspot\ncat\nact\ntea\neat\nate\n'

@pytest.fixture
def searches(make_loader, sources, monkeypatch):
    manager = SearchManager(make_loader(sources, {sources[0].url: SEARCH_WORDS}, cancel_check_interval=64))
    monkeypatch.setattr(main, 'searches', manager)
    monkeypatch.setattr(main.app.state, 'searches', manager)
    return manager
