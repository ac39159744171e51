from __future__ import annotations
import asyncio

import pytest

from wordfinder import main

SLOW = {'letters': 'abcdefghij', 'length': 10}

@pytest.fixture
def emitted(monkeypatch):
    calls = []

    async def record(event, data=None, to=None, room=None, **kwargs):
        calls.append((event, data, to))

    monkeypatch.setattr(main.sio, 'emit', record)
    return calls

def test_submit_emits_results_to_sender(searches, emitted):
    asyncio.run(main.search_submit('sid-1', {'letters': 'TEA', 'length': 3}))
    assert len(emitted) == 1
    event, data, to = emitted[0]
    assert (event, to) == ('search:results', 'sid-1')
    assert data['ok'] is True
    assert data['words'] == ['ate', 'eat', 'tea']
    assert data['dictionary']['source'] == 'primary'

def test_submit_with_bad_payload_emits_error(searches, emitted):
    asyncio.run(main.search_submit('sid-1', {'letters': 'tea'}))
    assert emitted == [('search:error', {'ok': False, 'error': 'length: Field required'}, 'sid-1')]

def test_submit_with_oversized_bag_emits_error(searches, emitted):
    asyncio.run(main.search_submit('sid-1', {'letters': 'abcdefghijklm', 'length': 2}))
    [(event, data, to)] = emitted
    assert event == 'search:error'
    assert data['ok'] is False
    assert not searches.loader.is_loaded()

def test_newer_submit_suppresses_older_reply(searches, emitted):
    async def scenario():
        await searches.loader.load()
        older = asyncio.create_task(main.search_submit('sid-1', SLOW))
        await asyncio.sleep(0)
        await main.search_submit('sid-1', {'letters': 'cat', 'length': 3})
        await older

    asyncio.run(scenario())
    assert [(e, d['words'], t) for e, d, t in emitted] == [('search:results', ['act', 'cat'], 'sid-1')]

def test_disconnect_cancels_search(searches, emitted):
    async def scenario():
        await searches.loader.load()
        pending = asyncio.create_task(main.search_submit('sid-2', SLOW))
        await asyncio.sleep(0)
        assert searches.in_flight('sid-2')
        await main.disconnect('sid-2')
        await pending

    asyncio.run(scenario())
    assert emitted == []
    assert not searches.in_flight('sid-2')

def test_search_cancel_event_is_silent(searches, emitted):
    async def scenario():
        await searches.loader.load()
        pending = asyncio.create_task(main.search_submit('sid-3', SLOW))
        await asyncio.sleep(0)
        await main.search_cancel('sid-3')
        await pending

    asyncio.run(scenario())
    assert emitted == []

def test_dict_status_event(searches, emitted):
    asyncio.run(main.dict_status('sid-4'))
    assert emitted == [('dict:status', {'loaded': False, 'size': 0, 'source': None, 'failures': []}, 'sid-4')]
