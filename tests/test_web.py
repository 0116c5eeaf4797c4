# tests/test_web.py

"""Tests for the browser viewer pages."""

from framedeck.core import editor
from framedeck.core.web import setup_templates, viewer_url
from framedeck.core.editor import EditorState, ViewMode
from framedeck.core.models import Base
from framedeck.exceptions import StorageUnavailableError, TemplateError

import pytest


class TestIndexPage:
    """GET /"""

    def test_lists_demos(self, client, intro_demo):
        response = client.get("/")

        assert response.status_code == 200
        assert "Intro" in response.text
        assert f"/view/{intro_demo.id}" in response.text

    def test_empty(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "No demos yet." in response.text

    def test_storage_failure_is_shown(self, client, store):
        Base.metadata.drop_all(store.engine)
        response = client.get("/")

        assert response.status_code == 200
        assert editor.LOAD_FAILURE_MESSAGE in response.text
        assert "Retry" in response.text
        assert "sqlite3" not in response.text
        assert "SELECT" not in response.text
        assert "no such table" not in response.text


class TestViewerPage:
    """GET /view/{demo_id}"""

    def test_invalid_query_parameter_is_400(self, client, intro_demo):
        response = client.get(f"/view/{intro_demo.id}", params={"frame": "second"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error.startswith("Invalid query parameter (frame:")
        assert "body" not in error
        assert "second" not in error

    def test_first_frame_by_default(self, client, intro_demo):
        response = client.get(f"/view/{intro_demo.id}")

        assert response.status_code == 200
        assert 'srcdoc="&lt;b&gt;1&lt;/b&gt;"' in response.text
        assert "Frame 1" in response.text
        assert "Frame 2" in response.text

    def test_select_frame(self, client, intro_demo):
        response = client.get(f"/view/{intro_demo.id}", params={"frame": 1})
        assert 'srcdoc="&lt;b&gt;2&lt;/b&gt;"' in response.text

    def test_out_of_range_frame_falls_back_to_first(self, client, intro_demo):
        response = client.get(f"/view/{intro_demo.id}", params={"frame": 9})
        assert 'srcdoc="&lt;b&gt;1&lt;/b&gt;"' in response.text

    def test_view_mode_and_dark_mode(self, client, intro_demo):
        response = client.get(f"/view/{intro_demo.id}", params={"mode": "side_by_side", "dark": 1})

        assert response.status_code == 200
        assert 'class="panes side-by-side"' in response.text
        assert '<body class="dark">' in response.text

    def test_unknown_demo(self, client):
        response = client.get("/view/nope")
        assert response.status_code == 404
        assert "Demo not found" in response.text

    def test_demo_without_frames(self, client, store):
        demo = store.create_demo("Empty", [])
        response = client.get(f"/view/{demo.id}")
        assert response.status_code == 200
        assert "This demo has no frames." in response.text


class TestViewerSave:
    """POST /view/{demo_id}"""

    def test_save_redirects_with_notice(self, client, store, intro_demo):
        response = client.post(
            f"/view/{intro_demo.id}",
            data={"frame": "0", "html": "<i>new</i>", "mode": "stacked", "dark": "false"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert "saved=1" in response.headers["location"]

        saved_frame = [frame for frame in intro_demo.frames if frame.order == 1][0]
        assert store.get_frame(saved_frame.id).html == "<i>new</i>"

        page = client.get(response.headers["location"])
        assert editor.SAVE_SUCCESS_MESSAGE in page.text
        assert 'srcdoc="&lt;i&gt;new&lt;/i&gt;"' in page.text

    def test_save_failure_keeps_submitted_buffer(self, client, store, intro_demo, monkeypatch):
        def broken(frame_id, html):
            raise StorageUnavailableError("down")

        monkeypatch.setattr(store, "update_frame_html", broken)
        response = client.post(
            f"/view/{intro_demo.id}",
            data={"frame": "1", "html": "<i>draft</i>"},
            follow_redirects=False,
        )

        assert response.status_code == 500
        assert editor.SAVE_FAILURE_MESSAGE in response.text
        assert "&lt;i&gt;draft&lt;/i&gt;" in response.text

    def test_save_unknown_demo(self, client):
        response = client.post("/view/nope", data={"frame": "0", "html": "x"}, follow_redirects=False)
        assert response.status_code == 404


class TestHelpers:
    """Template setup and URL building."""

    def test_viewer_url_keeps_flags(self, intro_record):
        state = editor.select_demo(EditorState(view_mode=ViewMode.SIDE_BY_SIDE, dark_mode=True), intro_record)
        state = editor.next_frame(state)

        assert viewer_url("d1", state) == "/view/d1?frame=1&mode=side_by_side&dark=1"
        assert viewer_url("d1", state, saved=1).endswith("&saved=1")

    def test_missing_template_dir(self, tmp_path):
        with pytest.raises(TemplateError):
            setup_templates(tmp_path / "nowhere")

    def test_missing_template_file(self, tmp_path):
        (tmp_path / "base.html").write_text("{% block content %}{% endblock %}")
        with pytest.raises(TemplateError):
            setup_templates(tmp_path)
