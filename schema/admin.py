from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from model.enums import ContentStatus
from schema.connection import UserDetails


class GrowthStat(BaseModel):
    name: str  # Month label, e.g. "JAN"
    count: int


class RecentUserOut(BaseModel):
    id: int
    username: str
    full_name: str
    profile_image: str = ""
    email: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecentPostOut(BaseModel):
    id: int
    content: str
    created_at: datetime
    user: UserDetails

    model_config = ConfigDict(from_attributes=True)


class DashboardStatsOut(BaseModel):
    total_users: int
    total_posts: int
    total_connections: int
    total_likes: int
    total_comments: int
    total_reports: int
    recent_users: List[RecentUserOut]
    recent_posts: List[RecentPostOut]
    user_growth: List[GrowthStat]
    avg_growth_rate: float


class RoleUpdate(BaseModel):
    # Validated by the service so unknown values map to a 400
    role: str


class StatusUpdate(BaseModel):
    status: ContentStatus
    reason: Optional[str] = Field(default=None, max_length=500)
