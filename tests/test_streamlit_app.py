"""
Tests for the Streamlit page, run headless with streamlit's AppTest.

Run with: pytest tests/test_streamlit_app.py -v
"""

from pathlib import Path

from streamlit.testing.v1 import AppTest

from create_map_poster import PosterPipeline

APP_PATH = str(Path(__file__).resolve().parent.parent / "streamlit_app.py")


def start_session():
    app = AppTest.from_file(APP_PATH, default_timeout=30)
    app.run()
    assert not app.exception
    return app


class TestSessionPipeline:
    """Each browser session owns its pipeline, so sessions cannot supersede each other."""

    def test_page_renders_without_input(self):
        app = start_session()
        assert app.warning[0].value == "Please enter city and country"

    def test_pipeline_kept_across_reruns(self):
        app = start_session()
        pipeline = app.session_state["pipeline"]
        assert isinstance(pipeline, PosterPipeline)
        app.run()
        assert app.session_state["pipeline"] is pipeline

    def test_sessions_do_not_share_pipeline(self):
        first = start_session()
        second = start_session()
        assert first.session_state["pipeline"] is not second.session_state["pipeline"]
