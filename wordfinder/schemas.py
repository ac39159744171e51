from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Optional, Union

class SearchRequest(BaseModel):
    letters: str
    length: int
    # Either one string (a char per slot) or a list of slots; '' / None mean open
    pattern: Optional[Union[str, List[Optional[str]]]] = None

class SourceFailureInfo(BaseModel):
    source: str
    reason: str

class DictionaryStatus(BaseModel):
    loaded: bool
    size: int
    source: Optional[str] = None
    failures: List[SourceFailureInfo] = []

class SearchResult(BaseModel):
    ok: bool = True
    words: List[str] = []
    count: int = 0
    elapsedMs: int = Field(0, alias='elapsedMs')
    dictionary: DictionaryStatus

class SearchError(BaseModel):
    ok: bool = False
    error: str

class WordValidation(BaseModel):
    word: str
    valid: bool
