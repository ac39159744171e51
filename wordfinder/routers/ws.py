from __future__ import annotations
import asyncio
from typing import Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from ..errors import GenerationCancelled, SearchRejected
from ..managers.search import SearchManager
from ..schemas import SearchRequest

router = APIRouter()

async def _answer(websocket: WebSocket, searches: SearchManager, key: str, request: SearchRequest):
    try:
        result = await searches.search(key, request)
    except SearchRejected as e:
        await websocket.send_json({ "type": "error", "ok": False, "error": str(e) })
        return
    except GenerationCancelled:
        return
    await websocket.send_json({ "type": "results", **result.model_dump(by_alias=True) })

@router.websocket("/search/{client_id}")
async def search_endpoint(websocket: WebSocket, client_id: str):
    searches: SearchManager = websocket.app.state.searches
    await websocket.accept()
    key = f"ws:{client_id}"
    pending: Set[asyncio.Task] = set()

    # Send dictionary state so the client knows whether searching is useful yet
    await websocket.send_json({ "type": "status", **searches.dictionary_status().model_dump() })

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                await websocket.send_json({ "type": "error", "ok": False, "error": "Message is not valid JSON" })
                continue
            try:
                request = SearchRequest.model_validate(data)
            except ValidationError as e:
                await websocket.send_json({ "type": "error", "ok": False, "error": str(e.errors()[0].get('msg')) })
                continue
            # Keep receiving while the search runs so a newer message can supersede it
            task = asyncio.create_task(_answer(websocket, searches, key, request))
            pending.add(task)
            task.add_done_callback(pending.discard)
    except WebSocketDisconnect:
        pass
    finally:
        searches.cancel(key)
        for task in list(pending):
            task.cancel()
