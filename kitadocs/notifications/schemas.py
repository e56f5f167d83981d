from typing import Optional
from pydantic import BaseModel
from datetime import datetime
from .models import NotificationStatus


class NotificationJobResponse(BaseModel):
    id: int
    recipient: str
    subject: str
    template_name: str
    status: NotificationStatus
    attempts: int
    last_error: Optional[str] = None
    created_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True
