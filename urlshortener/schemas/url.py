from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class UrlRecord(BaseModel):
    short_id: str = Field(..., min_length=1, max_length=50)
    original_url: str
    click_count: int = Field(0, ge=0)
    created_at: datetime
    last_accessed: Optional[datetime] = None

    model_config = {"from_attributes": True}


# Request DTOs
class CreateUrlRequest(BaseModel):
    url: str
    # Length is checked by the service so a bad id answers 400, not 422
    custom_id: Optional[str] = None


# Response DTOs
class CreateUrlResponse(BaseModel):
    short_url: str
    original_url: str
    id: str
    created_at: datetime


class UrlStats(BaseModel):
    id: str
    original_url: str
    short_url: str
    click_count: int
    created_at: datetime
    last_accessed: Optional[datetime] = None
