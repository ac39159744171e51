from __future__ import annotations
import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from .dictionary import service as dict_service
from .errors import GenerationCancelled, SearchRejected
from .managers.search import SearchManager
from .routers import ws
from .schemas import DictionaryStatus, SearchError, SearchRequest, WordValidation

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

searches = SearchManager(dict_service)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Start fetching right away; clients poll /dict/status before searching
    app.state.dictionary_task = asyncio.create_task(searches.loader.load())
    yield
    task = app.state.dictionary_task
    if not task.done():
        task.cancel()

# Socket.IO server (ASGI)
sio = socketio.AsyncServer(async_mode='asgi', cors_allowed_origins='*')
app = FastAPI(title="Word Finder", version="0.1.0", lifespan=lifespan)
app.state.searches = searches

# Mount Socket.IO ASGI application
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)

# CORS for REST
app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(ws.router, prefix='/ws')

def _error(message: str) -> dict:
    return SearchError(error=message).model_dump()

def _validation_message(e: ValidationError) -> str:
    first = e.errors()[0]
    where = '.'.join(str(p) for p in first.get('loc', ()))
    return f"{where}: {first.get('msg')}" if where else str(first.get('msg'))

# REST Endpoints
@app.get('/dict/status')
async def dictionary_status() -> DictionaryStatus:
    return searches.dictionary_status()

@app.get('/dict/validate')
async def validate_word(word: str) -> WordValidation:
    dictionary = searches.loader.dictionary
    valid = dictionary.is_valid(word) if dictionary is not None else False
    return WordValidation(word=word.lower(), valid=valid)

@app.post('/words/generate')
async def generate_words(payload: dict, clientId: Optional[str] = None):
    try:
        request = SearchRequest.model_validate(payload)
    except ValidationError as e:
        return _error(_validation_message(e))
    key = f"rest:{clientId}" if clientId else f"rest:{uuid.uuid4().hex}"
    try:
        result = await searches.search(key, request)
    except SearchRejected as e:
        return _error(str(e))
    except GenerationCancelled:
        return _error('Superseded by a newer request')
    return result.model_dump(by_alias=True)

# Socket.IO Events
@sio.event
async def connect(sid, environ, auth):
    await sio.emit('dict:status', searches.dictionary_status().model_dump(), to=sid)

@sio.event
async def disconnect(sid):
    searches.cancel(sid)

@sio.on('ping')
async def on_ping(sid):
    await sio.emit('pong', to=sid)

@sio.on('dict:status')
async def dict_status(sid):
    await sio.emit('dict:status', searches.dictionary_status().model_dump(), to=sid)

@sio.on('search:submit')
async def search_submit(sid, payload):
    try:
        request = SearchRequest.model_validate(payload)
    except ValidationError as e:
        await sio.emit('search:error', _error(_validation_message(e)), to=sid)
        return
    try:
        result = await searches.search(sid, request)
    except SearchRejected as e:
        await sio.emit('search:error', _error(str(e)), to=sid)
        return
    except GenerationCancelled:
        # A newer submit from this sid owns the reply
        return
    await sio.emit('search:results', result.model_dump(by_alias=True), to=sid)

@sio.on('search:cancel')
async def search_cancel(sid):
    searches.cancel(sid)

# Export ASGI app for uvicorn
application = asgi_app

# For local running: uvicorn wordfinder.main:application --reload --host 0.0.0.0 --port 8000
