import unittest
from unittest.mock import MagicMock, AsyncMock, patch
import sys
import os

# Add parent directory to path to import app
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

# Import real dependencies before patching so they are not reloaded afterwards
import pandas as pd
import plotly.express  # noqa: F401
import dashboard
import channel_metrics
import youtube_client  # noqa: F401

mock_modules = {
    'streamlit': MagicMock(),
}


def columns_side_effect(spec, **kwargs):
    count = spec if isinstance(spec, int) else len(spec)
    return [MagicMock() for _ in range(count)]


mock_modules['streamlit'].columns.side_effect = columns_side_effect
mock_modules['streamlit'].form_submit_button.return_value = False
# Critical: Make decorators passthrough
mock_modules['streamlit'].cache_data = lambda func=None, **kwargs: (lambda f: f) if func is None else func
mock_modules['streamlit'].cache_resource = lambda func=None, **kwargs: (lambda f: f) if func is None else func

with patch.dict(sys.modules, mock_modules):
    import app


def make_channel():
    rng = MagicMock()
    rng.random.return_value = 0.5
    videos = [
        channel_metrics.build_video_summary({
            "id": "abc",
            "snippet": {"title": "Tech review", "publishedAt": "2024-01-15T12:00:00Z"},
            "statistics": {"viewCount": "2500000", "likeCount": "100000"},
            "contentDetails": {"duration": "PT12M30S"},
        }, rng=rng)
    ]
    return channel_metrics.build_channel_summary(
        {
            "id": "UC123",
            "snippet": {"title": "Test Channel"},
            "statistics": {"subscriberCount": "1200", "viewCount": "3600000", "videoCount": "40"},
        },
        [{"snippet": {"title": "Tech review"}}],
        videos,
        rng=rng
    )


class TestDashboardApp(unittest.TestCase):

    def setUp(self):
        app.st.reset_mock()
        self.channel = make_channel()

    def test_get_api_key_from_session(self):
        with patch.object(app.st, 'session_state', {'api_key': 'abc'}):
            self.assertEqual(app.get_api_key(), 'abc')

    def test_get_api_key_falls_back_to_settings(self):
        with patch.object(app.st, 'session_state', {}), \
                patch.object(app.st, 'secrets', {}), \
                patch.object(app, 'YOUTUBE_API_KEY', 'env-key'):
            self.assertEqual(app.get_api_key(), 'env-key')

    def test_get_api_key_from_secrets(self):
        with patch.object(app.st, 'session_state', {}), \
                patch.object(app.st, 'secrets', {'YOUTUBE_API_KEY': 'secret-key'}):
            self.assertEqual(app.get_api_key(), 'secret-key')

    def test_videos_table(self):
        table = app.videos_table(self.channel.top_videos)

        self.assertIsInstance(table, pd.DataFrame)
        row = table.iloc[0]
        self.assertEqual(row["Views"], "2.5M")
        self.assertEqual(row["Likes"], "100.0K")
        self.assertEqual(row["Duration"], "12:30")
        self.assertEqual(row["Est. CTR"], "10.0%")
        self.assertEqual(row["Est. Revenue"], "$5.0K")

    def test_empty_videos_table_keeps_columns(self):
        table = app.videos_table([])
        self.assertEqual(len(table), 0)
        self.assertIn("Est. Revenue", table.columns)

    def test_chart_frames(self):
        views = app.views_history_frame(self.channel)
        self.assertEqual(list(views["Month"]), app.MONTH_LABELS)
        self.assertEqual(list(views["Monthly Views"]), self.channel.views_history)

        retention = app.retention_frame(self.channel)
        self.assertEqual(list(retention["Video Duration"])[-1], "100%")

        categories = app.category_frame(self.channel)
        self.assertEqual(list(categories["category"]), ["Reviews"])
        self.assertEqual(list(categories["percentage"]), [100])

    def test_render_failed_state(self):
        app.render_state(dashboard.Failed(message="Error fetching data: boom"))
        app.st.error.assert_called_with("Error fetching data: boom")

    def test_render_ready_state(self):
        app.render_state(dashboard.Ready(channel=self.channel))
        app.st.dataframe.assert_called_once()
        self.assertEqual(app.st.plotly_chart.call_count, 4)

    def test_retention_drawn_as_line(self):
        with patch.object(app.px, 'line', wraps=app.px.line) as line, \
                patch.object(app.px, 'area', wraps=app.px.area) as area:
            app.render_channel(self.channel)

        line.assert_called_once()
        area.assert_not_called()
        frame = line.call_args[0][0]
        self.assertEqual(list(frame["Audience Retention"]), self.channel.audience_retention)

    def test_search_without_api_key(self):
        app.st.text_input.return_value = "MKBHD"
        app.st.form_submit_button.return_value = True
        try:
            app.render_search("")
            app.st.error.assert_called_once()
        finally:
            app.st.form_submit_button.return_value = False

    def test_search_submits_query(self):
        fake_dashboard = MagicMock()
        fake_dashboard.submit = AsyncMock()
        app.st.text_input.return_value = "MKBHD"
        app.st.form_submit_button.return_value = True
        try:
            with patch.object(app, 'get_dashboard', return_value=fake_dashboard):
                app.render_search("fake-key")
            fake_dashboard.submit.assert_awaited_once_with("MKBHD")
        finally:
            app.st.form_submit_button.return_value = False

    def test_search_rejects_blank_query(self):
        app.st.text_input.return_value = "   "
        app.st.form_submit_button.return_value = True
        try:
            with patch.object(app, 'get_dashboard') as get_dashboard:
                app.render_search("fake-key")
            get_dashboard.assert_not_called()
            app.st.warning.assert_called_once()
        finally:
            app.st.form_submit_button.return_value = False


if __name__ == '__main__':
    unittest.main()
