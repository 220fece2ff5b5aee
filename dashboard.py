"""
Query orchestration for the Statify dashboard.

One submission runs: resolve channel -> channel details -> top videos ->
video details -> derived metrics. The dashboard holds exactly one state:
Idle, Loading, Ready or Failed.
"""

from typing import List, Union

from pydantic import BaseModel

from channel_metrics import build_video_summary, build_channel_summary
from errors import DashboardError
from models import ChannelSummary, VideoSummary
from settings import logger

CHANNEL_ID_PREFIX = "UC"
CHANNEL_ID_MIN_LENGTH = 20
TOP_VIDEO_COUNT = 10
SUGGESTION = 'Try using a channel name like "MKBHD" or "MrBeast".'


class Idle(BaseModel):
    pass


class Loading(BaseModel):
    query: str


class Ready(BaseModel):
    channel: ChannelSummary


class Failed(BaseModel):
    message: str


DashboardState = Union[Idle, Loading, Ready, Failed]


def is_channel_id(query: str) -> bool:
    """Channel IDs look like UCxxxxxxxxxxxxxxxxxxxxxx."""
    return query.startswith(CHANNEL_ID_PREFIX) and len(query) > CHANNEL_ID_MIN_LENGTH


def failure_message(error: Exception) -> str:
    return f"Error fetching data: {error}. {SUGGESTION}"


class ChannelDashboard:
    """
    Drives a YouTubeClient for one search at a time.

    Args:
        client: YouTubeClient (or anything with the same four async methods)
        rng: random source for the estimated metrics; module default if None
    """

    def __init__(self, client, rng=None):
        self.client = client
        self.rng = rng
        self.state: DashboardState = Idle()
        self._generation = 0

    async def submit(self, query: str) -> DashboardState:
        """Run one search and return the resulting state."""
        self._generation += 1
        generation = self._generation
        self.state = Loading(query=query)
        logger.info(f"Dashboard search started: '{query}'")

        try:
            channel = await self._load_channel(query)
        except DashboardError as e:
            logger.error(f"Dashboard search failed for '{query}': {e}")
            result: DashboardState = Failed(message=failure_message(e))
        except Exception as e:
            # Malformed API payloads (missing keys, bad numbers) end up here
            logger.exception(f"Unexpected error while loading '{query}'")
            result = Failed(message=failure_message(e))
        else:
            logger.info(f"Dashboard ready for channel {channel.id} ({len(channel.top_videos)} videos)")
            result = Ready(channel=channel)

        if generation != self._generation:
            # A newer search started while this one was in flight
            logger.debug(f"Discarding stale result for '{query}'")
            return result

        self.state = result
        return result

    async def _load_channel(self, query: str) -> ChannelSummary:
        query = query.strip()
        if is_channel_id(query):
            channel_id = query
        else:
            channel_id = await self.client.resolve_channel_id(query)

        channel_details = await self.client.fetch_channel_details(channel_id)
        video_refs = await self.client.fetch_channel_videos(channel_id)

        top_ids = [ref['id']['videoId'] for ref in video_refs[:TOP_VIDEO_COUNT]]
        video_details = await self.client.fetch_video_details(top_ids)

        top_videos = self._summarize_videos(video_details)
        return build_channel_summary(channel_details, video_refs, top_videos, rng=self.rng)

    def _summarize_videos(self, video_details) -> List[VideoSummary]:
        videos = [build_video_summary(video, rng=self.rng) for video in video_details]
        videos.sort(key=lambda v: v.views, reverse=True)
        return videos
