import asyncio

import streamlit as st
import pandas as pd
import plotly.express as px

from channel_metrics import build_recommendations, AVERAGE_CPM
from dashboard import ChannelDashboard, Idle, Loading, Ready, Failed
from formatters import format_compact_number
from youtube_client import YouTubeClient
from settings import YOUTUBE_API_KEY, YOUTUBE_API_TIMEOUT

# --- Constants ---
MONTH_LABELS = [
    "6 months ago", "5 months ago", "4 months ago", "3 months ago",
    "2 months ago", "1 month ago", "This month"
]
RETENTION_LABELS = [f"{pct}%" for pct in range(10, 101, 10)]
SEARCH_PLACEHOLDER = "Enter channel name or ID (e.g., 'MKBHD', 'MrBeast')"


def inject_custom_css():
    st.markdown("""
    <style>
        .block-container {
            padding-top: 2rem;
            padding-bottom: 2rem;
        }
        div[data-testid="stMetric"] {
            background-color: #f8f9fa;
            border: 1px solid #e9ecef;
            padding: 15px;
            border-radius: 10px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.05);
        }
        @media (prefers-color-scheme: dark) {
            div[data-testid="stMetric"] {
                background-color: #262730;
                border: 1px solid #363945;
            }
        }
        h1, h2, h3 {
            font-weight: 700 !important;
        }
    </style>
    """, unsafe_allow_html=True)


def get_api_key():
    """
    Get API key from (in priority order):
    1. Session state (user input in sidebar)
    2. Streamlit secrets (for cloud deployment)
    3. Environment variable / .env (settings.YOUTUBE_API_KEY)
    """
    if st.session_state.get('api_key'):
        return st.session_state.get('api_key')

    try:
        if 'YOUTUBE_API_KEY' in st.secrets:
            return st.secrets['YOUTUBE_API_KEY']
    except Exception:
        # No secrets.toml configured
        pass

    return YOUTUBE_API_KEY


@st.cache_resource
def get_youtube_client(api_key: str):
    """Create a cached YouTube API client per key."""
    return YouTubeClient(api_key, timeout=YOUTUBE_API_TIMEOUT)


def get_dashboard(api_key: str) -> ChannelDashboard:
    """One ChannelDashboard per browser session, rebuilt when the key changes."""
    dashboard = st.session_state.get('dashboard')
    if dashboard is None or st.session_state.get('dashboard_key') != api_key:
        dashboard = ChannelDashboard(get_youtube_client(api_key))
        st.session_state['dashboard'] = dashboard
        st.session_state['dashboard_key'] = api_key
    return dashboard


def current_state():
    dashboard = st.session_state.get('dashboard')
    return dashboard.state if dashboard else Idle()


# --- Chart data ---
def views_history_frame(channel) -> pd.DataFrame:
    return pd.DataFrame({"Month": MONTH_LABELS, "Monthly Views": channel.views_history})


def revenue_history_frame(channel) -> pd.DataFrame:
    return pd.DataFrame({"Month": MONTH_LABELS, "Estimated Revenue ($)": channel.revenue_history})


def retention_frame(channel) -> pd.DataFrame:
    return pd.DataFrame({"Video Duration": RETENTION_LABELS, "Audience Retention": channel.audience_retention})


def category_frame(channel) -> pd.DataFrame:
    return pd.DataFrame(
        [share.model_dump() for share in channel.category_breakdown],
        columns=["category", "percentage"]
    )


def videos_table(videos) -> pd.DataFrame:
    """Top videos formatted for display."""
    return pd.DataFrame([
        {
            "Title": v.title,
            "Views": format_compact_number(v.views),
            "Likes": format_compact_number(v.likes),
            "Duration": v.duration,
            "Published": v.published_at,
            "Est. CTR": f"{v.ctr:.1f}%",
            "Est. Revenue": f"${format_compact_number(v.revenue)}",
        }
        for v in videos
    ], columns=["Title", "Views", "Likes", "Duration", "Published", "Est. CTR", "Est. Revenue"])


# --- Rendering ---
def render_search(api_key: str):
    with st.form("channel_search_form"):
        query = st.text_input("Channel", placeholder=SEARCH_PLACEHOLDER, label_visibility="collapsed")
        submitted = st.form_submit_button("🔍 Search", type="primary")

    if not submitted:
        return
    if not api_key:
        st.error("⚠️ API Key is required. Add it in the sidebar.")
    elif not query.strip():
        st.warning("Please enter a channel name or ID")
    else:
        dashboard = get_dashboard(api_key)
        with st.spinner("Loading..."):
            asyncio.run(dashboard.submit(query))


def render_channel(channel):
    header_left, header_right = st.columns([3, 1])
    with header_left:
        if channel.thumbnail:
            st.image(channel.thumbnail, width=64)
        st.header(channel.name)
    with header_right:
        st.metric("Subscribers", format_compact_number(channel.subscribers))

    tiles = st.columns(4)
    tiles[0].metric("Total Views", format_compact_number(channel.total_views))
    tiles[1].metric("Total Videos", format_compact_number(channel.total_videos))
    tiles[2].metric("Est. Total Likes", format_compact_number(channel.total_likes))
    tiles[3].metric("Est. Annual Revenue", f"${format_compact_number(channel.estimated_revenue)}")

    row1 = st.columns(2)
    with row1[0]:
        st.subheader("Est. Monthly Views Trend")
        st.plotly_chart(px.bar(views_history_frame(channel), x="Month", y="Monthly Views"), use_container_width=True)
        st.caption("* Based on estimated distribution of total channel views")
    with row1[1]:
        st.subheader("Content Category Distribution")
        st.plotly_chart(px.pie(category_frame(channel), names="category", values="percentage"), use_container_width=True)
        st.caption("* Based on analysis of video titles")

    row2 = st.columns(2)
    with row2[0]:
        st.subheader("Est. Audience Retention")
        st.plotly_chart(
            px.line(retention_frame(channel), x="Video Duration", y="Audience Retention"),
            use_container_width=True
        )
        st.caption("* Based on typical retention patterns for similar channels")
    with row2[1]:
        st.subheader("Est. Revenue Trend")
        st.plotly_chart(px.bar(revenue_history_frame(channel), x="Month", y="Estimated Revenue ($)"), use_container_width=True)
        st.caption(f"* Based on industry average CPM of ${AVERAGE_CPM} per 1000 views")

    st.subheader("Top Performing Videos")
    st.dataframe(videos_table(channel.top_videos), use_container_width=True, hide_index=True)
    st.caption("* CTR and Revenue are estimates based on industry averages")

    st.subheader("Recommendations")
    recommendations = build_recommendations(channel)
    growth_col, attention_col = st.columns(2)
    with growth_col:
        st.markdown("**Growth Opportunities**")
        st.success("\n".join(f"- {line}" for line in recommendations["growth"]))
    with attention_col:
        st.markdown("**Attention Needed**")
        st.error("\n".join(f"- {line}" for line in recommendations["attention"]))


def render_state(state):
    if isinstance(state, Failed):
        st.error(state.message)
    elif isinstance(state, Loading):
        st.info("Loading...")
    elif isinstance(state, Ready):
        render_channel(state.channel)
    else:
        st.subheader("Enter a YouTube Channel Name")
        st.write('Try searching for "MKBHD", "MrBeast", or "pewdiepie"')
        st.caption("Analytics show detailed insights about the channel's performance.")


def main():
    st.set_page_config(page_title="Statify", page_icon="📊", layout="wide")
    inject_custom_css()

    with st.sidebar.expander("🔐 Your API Key", expanded=not get_api_key()):
        st.caption("Get a free key from [Google Cloud Console](https://console.cloud.google.com/apis/credentials)")
        new_key = st.text_input("Enter your YouTube Data API Key", value='', type="password")
        if new_key:
            st.session_state['api_key'] = new_key

    st.title("📊 Statify")
    st.caption("YouTube channel analytics")

    render_search(get_api_key())
    render_state(current_state())


if __name__ == "__main__":
    main()
