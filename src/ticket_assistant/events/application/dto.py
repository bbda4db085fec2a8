"""
Events Application DTOs
========================

Pydantic models for the event webhook.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class EventRequest(BaseModel):
    """An event posted to the webhook."""
    name: str = Field(..., min_length=1, description="Event name, e.g. ticket/created")
    data: Dict[str, Any] = Field(default_factory=dict)


class FunctionInfo(BaseModel):
    id: str
    event: str
    name: Optional[str] = None


class RunInfo(BaseModel):
    model_config = {"from_attributes": True}

    id: str
    function_id: str
    event_id: str
    event_name: str
    status: str
    queued_at: datetime
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None


class EventAcceptedResponse(BaseModel):
    event_id: str
    run_ids: List[str]


class IntrospectionResponse(BaseModel):
    functions: List[FunctionInfo]
    runs: List[RunInfo]
