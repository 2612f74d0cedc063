from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional, Generic, TypeVar
from uuid import UUID


class VideoCreateSchema(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None


class VideoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None


############################################################

class VideoCreateRequest(BaseModel):
    title: str
    description: Optional[str] = None


class VideoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


############################################################

T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper"""
    success: bool
    message: str
    data: Optional[T] = None
    error: Optional[str] = None
