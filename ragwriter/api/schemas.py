"""
Request and response models for the HTTP API.
"""

from pydantic import BaseModel, field_validator
from typing import Optional, List


class AskRequest(BaseModel):
    question: str

    @field_validator('question')
    @classmethod
    def question_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('question cannot be empty')
        return v

class AskResponse(BaseModel):
    answer: str
    context_count: int
    record_id: Optional[int] = None
    warning: Optional[str] = None

class BlogRequest(BaseModel):
    topic: str

    @field_validator('topic')
    @classmethod
    def topic_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('topic cannot be empty')
        return v

class BlogResponse(BaseModel):
    draft: str
    approved: bool
    iterations: int

class HistoryItem(BaseModel):
    id: int
    prompt: str
    response: str
    dimension: Optional[int] = None

class HistoryResponse(BaseModel):
    items: List[HistoryItem]
    total: int

class HealthResponse(BaseModel):
    status: str
    version: str
    store_health: bool
    record_count: int
    chat_provider: str
    chat_status: str
    embedding_provider: str

class ErrorResponse(BaseModel):
    kind: str
    stage: Optional[str] = None
    detail: str
