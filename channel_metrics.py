"""
Channel Metrics Module for the Statify dashboard
Turns raw YouTube API records into the dashboard view-model.

Everything beyond the public statistics is an ESTIMATE: revenue uses a flat
CPM, CTR / watch time / monthly history are randomized, retention follows a
fixed decay pattern and categories come from title keywords.
"""

import random
from typing import List, Dict, Optional

from formatters import round_half_up, parse_duration, format_publish_date
from models import CategoryShare, VideoSummary, ChannelSummary

AVERAGE_CPM = 2  # $ per 1000 views
LIKES_PER_VIEW = 0.04
HISTORY_MONTHS = 7
HISTORY_DIVISOR = 36  # total views spread over ~3 years of months
RETENTION_POINTS = 10
RETENTION_THRESHOLD = 70

CATEGORY_KEYWORDS = {
    "Reviews": ["review", "vs", "comparison", "versus", "compared"],
    "Tutorials": ["how to", "tutorial", "guide", "learn", "tips"],
    "Vlogs": ["vlog", "day in", "my life", "behind the scenes"],
    "Gaming": ["gameplay", "game", "playing", "playthrough", "minecraft", "fortnite"],
    "Tech": ["unboxing", "tech", "smartphone", "iphone", "android", "gadget"],
}
OTHER_CATEGORY = "Other"

_default_rng = random.Random()


def estimate_revenue(views: float) -> float:
    """Very rough estimate at a flat $2 CPM."""
    return (views / 1000) * AVERAGE_CPM


def mock_time_series(base_value: float, count: int = HISTORY_MONTHS, rng=None) -> List[int]:
    """
    Simulate monthly fluctuations around base_value.

    Each point is base_value scaled by a random factor in [0.9, 1.2).
    """
    rng = rng or _default_rng
    return [round_half_up(base_value * (0.9 + rng.random() * 0.3)) for _ in range(count)]


def mock_retention_curve() -> List[int]:
    """Typical retention: steeper drop early on, flatter towards the end."""
    value = 100
    result = [value]
    for i in range(1, RETENTION_POINTS):
        drop_factor = 0.97 - (0.02 * (RETENTION_POINTS - i) / RETENTION_POINTS)
        value = round_half_up(value * drop_factor)
        result.append(value)
    return result


def classify_title(title: str) -> str:
    """First category (in CATEGORY_KEYWORDS order) with a keyword in the title."""
    title_lower = title.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(kw in title_lower for kw in keywords):
            return category
    return OTHER_CATEGORY


def classify_categories(titles: List[str]) -> List[CategoryShare]:
    """
    Keyword-based content mix of a channel.

    Returns:
        One CategoryShare per category with a non-zero rounded percentage,
        in fixed category order. Percentages are rounded independently.
    """
    counts = {category: 0 for category in list(CATEGORY_KEYWORDS) + [OTHER_CATEGORY]}
    for title in titles:
        counts[classify_title(title)] += 1

    total = len(titles)
    if not total:
        return []

    shares = [
        CategoryShare(category=category, percentage=round_half_up(count / total * 100))
        for category, count in counts.items()
    ]
    return [share for share in shares if share.percentage > 0]


def build_video_summary(video: Dict, rng=None) -> VideoSummary:
    """Map a videos.list item into a table row."""
    rng = rng or _default_rng
    snippet = video.get('snippet', {})
    stats = video.get('statistics', {})
    views = int(stats.get('viewCount', 0))

    return VideoSummary(
        id=video['id'],
        title=snippet.get('title', ''),
        views=views,
        likes=int(stats.get('likeCount', 0)),
        duration=parse_duration(video.get('contentDetails', {}).get('duration', '')),
        thumbnail=snippet.get('thumbnails', {}).get('medium', {}).get('url', ''),
        published_at=format_publish_date(snippet.get('publishedAt', '')),
        # Estimates as these require Analytics API access
        ctr=round(5 + rng.random() * 10, 1),
        revenue=estimate_revenue(views),
    )


def build_channel_summary(
    channel: Dict,
    video_refs: List[Dict],
    top_videos: List[VideoSummary],
    rng=None
) -> ChannelSummary:
    """
    Aggregate channel-level metrics.

    Args:
        channel: channels.list item (snippet + statistics)
        video_refs: search.list items of the channel (up to 50), used for categories
        top_videos: already mapped and sorted VideoSummary rows
        rng: random source with a random() method
    """
    rng = rng or _default_rng
    snippet = channel.get('snippet', {})
    stats = channel.get('statistics', {})
    view_count = int(stats.get('viewCount', 0))

    views_history = mock_time_series(view_count / HISTORY_DIVISOR, rng=rng)

    return ChannelSummary(
        id=channel.get('id', ''),
        name=snippet.get('title', ''),
        description=snippet.get('description', ''),
        thumbnail=snippet.get('thumbnails', {}).get('medium', {}).get('url', ''),
        subscribers=int(stats.get('subscriberCount', 0)),
        total_views=view_count,
        total_videos=int(stats.get('videoCount', 0)),
        total_likes=round_half_up(view_count * LIKES_PER_VIEW),
        avg_view_duration=7 + rng.random() * 8,  # minutes, between 7 and 15
        estimated_revenue=estimate_revenue(view_count),
        views_history=views_history,
        revenue_history=[estimate_revenue(v) for v in views_history],
        audience_retention=mock_retention_curve(),
        category_breakdown=classify_categories(
            [ref.get('snippet', {}).get('title', '') for ref in video_refs]
        ),
        top_videos=top_videos,
    )


def retention_drop_point(retention: List[int], threshold: int = RETENTION_THRESHOLD) -> int:
    """Percent of video duration at which retention first falls below threshold."""
    for i, value in enumerate(retention):
        if value < threshold:
            return (i + 1) * 10
    return 100


def top_like_ratio(videos: List[VideoSummary], top_n: int = 3) -> int:
    """Average likes/views percentage of the first top_n videos."""
    ratios = [v.likes / v.views * 100 for v in videos[:top_n] if v.views > 0]
    if not ratios:
        return 0
    return round_half_up(sum(ratios) / len(ratios))


def build_recommendations(channel: ChannelSummary) -> Dict[str, List[str]]:
    """
    Fixed-format insight texts for the dashboard.

    Returns:
        {"growth": [...], "attention": [...]}
    """
    breakdown = channel.category_breakdown
    best: Optional[CategoryShare] = max(breakdown, key=lambda s: s.percentage) if breakdown else None
    worst: Optional[CategoryShare] = min(breakdown, key=lambda s: s.percentage) if breakdown else None

    revenue_per_mille = (
        channel.estimated_revenue / channel.total_views * 1000 if channel.total_views else 0.0
    )

    growth = [
        f"Videos averaging {round_half_up(channel.avg_view_duration)} minutes have the highest engagement",
        f"{best.category if best else 'Other'} content performs well - consider making more",
        f"Top videos average {top_like_ratio(channel.top_videos)}% like ratio - aim for this benchmark",
    ]
    attention = [
        f"Est. audience retention drops after {retention_drop_point(channel.audience_retention)}% of video duration",
        f"{worst.category if worst else 'Other'} videos have lower performance - review strategy",
        f"Est. revenue per view is ${revenue_per_mille:.2f} per 1000 views - industry average is ${AVERAGE_CPM:.2f}",
    ]
    return {"growth": growth, "attention": attention}
