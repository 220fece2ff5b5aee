"""
YouTube Data API client for the Statify dashboard.
Four read-only calls, each awaited in turn by the dashboard.
"""

import asyncio
from typing import List, Dict, Optional

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest

from errors import NotFound, FetchError
from settings import logger, YOUTUBE_API_TIMEOUT

MAX_CHANNEL_VIDEOS = 50


def get_youtube_resource(api_key: str, timeout: Optional[float] = YOUTUBE_API_TIMEOUT):
    """
    Build the googleapiclient resource for YouTube Data API v3.

    httplib2.Http is not thread-safe, so every request gets its own
    connection object instead of sharing the resource's.
    """
    if not api_key:
        raise ValueError("YouTube API key is required")

    def build_request(http, *args, **kwargs):
        return HttpRequest(httplib2.Http(timeout=timeout), *args, **kwargs)

    return build(
        'youtube', 'v3',
        developerKey=api_key,
        requestBuilder=build_request,
        cache_discovery=False
    )


class YouTubeClient:
    """
    Async wrapper over the YouTube Data API.

    Args:
        api_key: YouTube Data API key
        youtube: prebuilt API resource (tests pass a mock); built from api_key if omitted
        timeout: socket timeout in seconds for every call
    """

    def __init__(self, api_key: str, youtube=None, timeout: Optional[float] = YOUTUBE_API_TIMEOUT):
        self.api_key = api_key
        self.youtube = youtube if youtube is not None else get_youtube_resource(api_key, timeout)

    async def _execute(self, request, context: str) -> Dict:
        """Run a blocking API request in a worker thread."""
        try:
            response = await asyncio.to_thread(request.execute)
        except HttpError as e:
            logger.error(f"{context}: HTTP {e.resp.status} - {e}")
            raise FetchError(context, e) from e
        except (httplib2.HttpLib2Error, OSError, ValueError) as e:
            logger.error(f"{context}: {e}")
            raise FetchError(context, e) from e
        except Exception as e:
            # e.g. http.client.IncompleteRead re-raised by httplib2
            logger.error(f"{context}: {type(e).__name__}: {e}")
            raise FetchError(context, e) from e

        if not isinstance(response, dict):
            logger.error(f"{context}: unexpected response body")
            raise FetchError(context, ValueError("Unexpected response body"))
        return response

    async def resolve_channel_id(self, name: str) -> str:
        """Look up a channel by free-text name and return the first match's ID."""
        logger.info(f"Searching for channel: {name}")
        request = self.youtube.search().list(
            part='snippet',
            q=name,
            type='channel'
        )
        response = await self._execute(request, "Error searching for channel")

        items = response.get('items') or []
        if not items:
            logger.warning(f"No channel matches '{name}'")
            raise NotFound("Error searching for channel: Channel not found")

        channel_id = items[0]['id']['channelId']
        logger.debug(f"Resolved '{name}' to {channel_id}")
        return channel_id

    async def fetch_channel_details(self, channel_id: str) -> Dict:
        """Snippet, statistics and content details of one channel."""
        logger.info(f"Fetching channel details for {channel_id}")
        request = self.youtube.channels().list(
            part='snippet,statistics,contentDetails',
            id=channel_id
        )
        response = await self._execute(request, "Error fetching channel details")

        items = response.get('items') or []
        if not items:
            raise NotFound("Error fetching channel details: Channel details not found")
        return items[0]

    async def fetch_channel_videos(self, channel_id: str) -> List[Dict]:
        """Up to 50 search results for the channel, most viewed first."""
        logger.info(f"Fetching top videos for {channel_id}")
        request = self.youtube.search().list(
            part='snippet',
            channelId=channel_id,
            maxResults=MAX_CHANNEL_VIDEOS,
            order='viewCount',
            type='video'
        )
        response = await self._execute(request, "Error fetching channel videos")

        items = response.get('items') or []
        logger.debug(f"Channel {channel_id} returned {len(items)} videos")
        return items

    async def fetch_video_details(self, video_ids: List[str]) -> List[Dict]:
        """Full records (snippet, statistics, content details) for a batch of IDs."""
        if not video_ids:
            return []

        logger.info(f"Fetching details for {len(video_ids)} videos")
        request = self.youtube.videos().list(
            part='snippet,statistics,contentDetails',
            id=','.join(video_ids)
        )
        response = await self._execute(request, "Error fetching video details")
        return response.get('items') or []
