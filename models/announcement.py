from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from models.enums import AnnouncementStatus, Priority


class AnnouncementCreate(BaseModel):
    title: str
    content: str
    priority: Priority = Priority.medium
    expires_at: Optional[datetime] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[AnnouncementStatus] = None
    expires_at: Optional[datetime] = None
