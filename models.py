from typing import List
from pydantic import BaseModel


class CategoryShare(BaseModel):
    category: str
    percentage: int


class VideoSummary(BaseModel):
    id: str
    title: str
    views: int
    likes: int
    duration: str
    thumbnail: str = ""
    published_at: str = ""
    ctr: float
    revenue: float


class ChannelSummary(BaseModel):
    id: str
    name: str
    description: str = ""
    thumbnail: str = ""
    subscribers: int
    total_views: int
    total_videos: int
    total_likes: int
    avg_view_duration: float
    estimated_revenue: float
    views_history: List[int]
    revenue_history: List[float]
    audience_retention: List[int]
    category_breakdown: List[CategoryShare]
    top_videos: List[VideoSummary]
