from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from model.enums import NotificationType


class NotificationOut(BaseModel):
    id: int
    user_id: int
    type: NotificationType
    message: str
    data: Optional[Dict[str, Any]] = None
    read: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationPage(BaseModel):
    notifications: List[NotificationOut]
    pages: int
    total: int


class AnnouncementIn(BaseModel):
    message: str = Field(min_length=1, max_length=500)
    user_ids: Optional[List[int]] = None


class WarningIn(BaseModel):
    reason: str = Field(min_length=1, max_length=400)


__all__ = [
    "NotificationOut",
    "NotificationPage",
    "AnnouncementIn",
    "WarningIn",
]
