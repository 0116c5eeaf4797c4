# tests/test_editor.py

"""Tests for the frame navigation-and-edit state machine."""

import pytest

from framedeck.core import editor
from framedeck.core.editor import (
    EditorSession,
    EditorState,
    NoticeKind,
    ViewMode,
)
from framedeck.core.schemas import DemoRecord, FrameRecord
from framedeck.exceptions import NetworkFailureError, NotFoundError


class RecordingSaver:
    """Saver that records calls and optionally fails."""

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    def __call__(self, frame_id, html):
        self.calls.append((frame_id, html))
        if self.error is not None:
            raise self.error
        return None


def three_frame_demo():
    return DemoRecord(
        id="d2",
        name="Tour",
        frames=(
            FrameRecord(id="a", order=1, html="<p>a</p>"),
            FrameRecord(id="b", order=2, html="<p>b</p>"),
            FrameRecord(id="c", order=3, html="<p>c</p>"),
        ),
    )


class TestSelection:
    """Browsing -> Viewing and back."""

    def test_initial_state_is_browsing(self):
        state = EditorState()
        assert state.is_browsing
        assert state.editable_content == ""
        assert state.view_mode is ViewMode.STACKED
        assert state.dark_mode is False

    def test_select_demo_sorts_frames_and_seeds_buffer(self, intro_record):
        state = editor.select_demo(EditorState(), intro_record)

        assert state.is_viewing
        assert [frame.id for frame in state.frames] == ["f1", "f2"]
        assert state.selected_frame_index == 0
        assert state.editable_content == "<b>1</b>"

    def test_select_demo_does_not_mutate_input(self, intro_record):
        editor.select_demo(EditorState(), intro_record)
        assert [frame.id for frame in intro_record.frames] == ["f2", "f1"]

    def test_select_demo_without_frames(self):
        state = editor.select_demo(EditorState(), DemoRecord(id="e", name="Empty"))
        assert state.is_viewing
        assert state.selected_frame_index == 0
        assert state.editable_content == ""
        assert state.current_frame is None

    def test_equal_orders_keep_relative_position(self):
        demo = DemoRecord(
            id="d",
            name="Ties",
            frames=(
                FrameRecord(id="x", order=5, html="x"),
                FrameRecord(id="first-one", order=1, html="1a"),
                FrameRecord(id="first-two", order=1, html="1b"),
            ),
        )
        state = editor.select_demo(EditorState(), demo)
        assert [frame.id for frame in state.frames] == ["first-one", "first-two", "x"]

    def test_go_back_discards_buffer(self, intro_record):
        state = editor.select_demo(EditorState(), intro_record)
        state = editor.edit_content(state, "<i>draft</i>")
        state = editor.go_back(state)

        assert state.is_browsing
        assert state.editable_content == ""

        reopened = editor.select_demo(state, intro_record)
        assert reopened.editable_content == "<b>1</b>"


class TestNavigation:
    """Frame index changes."""

    def test_next_and_previous(self):
        state = editor.select_demo(EditorState(), three_frame_demo())
        state = editor.next_frame(state)
        assert state.selected_frame_index == 1
        assert state.editable_content == "<p>b</p>"

        state = editor.previous_frame(state)
        assert state.selected_frame_index == 0
        assert state.editable_content == "<p>a</p>"

    def test_next_at_last_index_is_noop(self):
        state = editor.select_demo(EditorState(), three_frame_demo())
        state = editor.select_frame(state, 2)
        state = editor.edit_content(state, "draft")

        assert editor.next_frame(state) == state

    def test_previous_at_first_index_is_noop(self):
        state = editor.select_demo(EditorState(), three_frame_demo())
        state = editor.edit_content(state, "draft")

        assert editor.previous_frame(state) == state

    @pytest.mark.parametrize("index", [-1, 3, 99])
    def test_select_frame_out_of_range_is_noop(self, index):
        state = editor.select_demo(EditorState(), three_frame_demo())
        assert editor.select_frame(state, index) == state

    def test_navigation_while_browsing_is_noop(self):
        state = EditorState()
        assert editor.next_frame(state) == state
        assert editor.previous_frame(state) == state
        assert editor.select_frame(state, 0) == state

    def test_switching_frames_drops_unsaved_edit(self, intro_record):
        saver = RecordingSaver()
        state = editor.select_demo(EditorState(), intro_record)
        state = editor.edit_content(state, "<i>new</i>")
        state = editor.select_frame(state, 1)

        assert state.editable_content == "<b>2</b>"
        assert saver.calls == []

        state = editor.select_frame(state, 0)
        assert state.editable_content == "<b>1</b>"
        assert state.frames[0].html == "<b>1</b>"

    def test_frame_options_use_order_labels(self, intro_record):
        state = editor.select_demo(EditorState(), intro_record)
        assert editor.frame_options(state) == [("Frame 1", 0), ("Frame 2", 1)]


class TestEditing:
    """Buffer edits and saving."""

    def test_edit_content_marks_dirty(self, intro_record):
        state = editor.select_demo(EditorState(), intro_record)
        assert not state.is_dirty

        state = editor.edit_content(state, "<i>new</i>")
        assert state.editable_content == "<i>new</i>"
        assert state.is_dirty
        assert state.frames[0].html == "<b>1</b>"

    def test_save_success_updates_in_memory_frame(self, intro_record):
        saver = RecordingSaver()
        state = editor.load_demos(EditorState(), lambda: [intro_record])
        state = editor.select_demo(state, intro_record)
        state = editor.edit_content(state, "<i>new</i>")
        state = editor.save(state, saver)

        assert saver.calls == [("f1", "<i>new</i>")]
        assert state.notice.kind is NoticeKind.SUCCESS
        assert state.notice.message == editor.SAVE_SUCCESS_MESSAGE
        assert not state.is_dirty

        # Navigating away and back shows the saved html
        state = editor.select_frame(state, 1)
        state = editor.select_frame(state, 0)
        assert state.editable_content == "<i>new</i>"

        # The cached list carries the save too
        cached = {frame.id: frame.html for frame in state.demos[0].frames}
        assert cached["f1"] == "<i>new</i>"

    def test_save_failure_keeps_buffer(self, intro_record):
        saver = RecordingSaver(error=NetworkFailureError("offline"))
        state = editor.select_demo(EditorState(), intro_record)
        state = editor.edit_content(state, "<i>new</i>")
        state = editor.save(state, saver)

        assert state.notice.is_error
        assert state.notice.message == editor.SAVE_FAILURE_MESSAGE
        assert "offline" in state.notice.detail
        assert state.editable_content == "<i>new</i>"
        assert state.frames[0].html == "<b>1</b>"

    def test_save_after_failure_can_retry(self, intro_record):
        state = editor.select_demo(EditorState(), intro_record)
        state = editor.edit_content(state, "<i>new</i>")
        state = editor.save(state, RecordingSaver(error=NotFoundError()))
        state = editor.save(state, RecordingSaver())

        assert state.notice.kind is NoticeKind.SUCCESS
        assert state.frames[0].html == "<i>new</i>"

    def test_save_twice_is_idempotent(self, intro_record):
        saver = RecordingSaver()
        state = editor.select_demo(EditorState(), intro_record)
        state = editor.edit_content(state, "<i>same</i>")
        first = editor.save(state, saver)
        second = editor.save(first, saver)

        assert saver.calls == [("f1", "<i>same</i>"), ("f1", "<i>same</i>")]
        assert first.notice == second.notice
        assert first.frames == second.frames

    def test_save_while_browsing_is_noop(self):
        saver = RecordingSaver()
        state = EditorState()
        assert editor.save(state, saver) == state
        assert saver.calls == []

    def test_navigation_clears_notice(self, intro_record):
        state = editor.select_demo(EditorState(), intro_record)
        state = editor.save(state, RecordingSaver())
        assert state.notice is not None
        assert editor.next_frame(state).notice is None


class TestDemoList:
    """Loading the cached demo list."""

    def test_load_demos(self, intro_record):
        state = editor.load_demos(EditorState(), lambda: [intro_record])
        assert state.demos == (intro_record,)
        assert state.load_error is None

    def test_load_failure_is_surfaced(self, intro_record):
        def failing():
            raise NetworkFailureError("connection refused")

        state = editor.load_demos(EditorState(), lambda: [intro_record])
        state = editor.load_demos(state, failing)

        assert state.demos == ()
        assert state.load_error == editor.LOAD_FAILURE_MESSAGE
        assert "connection refused" not in state.load_error

        state = editor.load_demos(state, lambda: [intro_record])
        assert state.load_error is None


class TestPresentationFlags:
    """View mode and dark mode never touch the data."""

    def test_toggles(self, intro_record):
        state = editor.select_demo(EditorState(), intro_record)
        toggled = editor.toggle_dark_mode(editor.toggle_view_mode(state))

        assert toggled.view_mode is ViewMode.SIDE_BY_SIDE
        assert toggled.dark_mode is True
        assert toggled.editable_content == state.editable_content
        assert toggled.selected_frame_index == state.selected_frame_index

        back = editor.toggle_view_mode(toggled)
        assert back.view_mode is ViewMode.STACKED


class FakeClient:
    def __init__(self, demos):
        self.demos = demos
        self.saved = []

    def fetch_demos(self):
        return self.demos

    def update_frame(self, frame_id, html):
        self.saved.append((frame_id, html))


class TestEditorSession:
    """The mutable session wrapper."""

    def test_session_flow(self, intro_record):
        client = FakeClient([intro_record])
        session = EditorSession(client=client)

        session.load()
        session.open_demo_at(0)
        assert session.state.editable_content == "<b>1</b>"

        session.next_frame()
        session.edit("<u>2</u>")
        session.save()
        assert client.saved == [("f2", "<u>2</u>")]

        session.previous_frame()
        session.next_frame()
        assert session.state.editable_content == "<u>2</u>"

        session.back()
        assert session.state.is_browsing

    def test_open_demo_at_out_of_range(self, intro_record):
        session = EditorSession(client=FakeClient([intro_record]))
        session.load()
        assert session.open_demo_at(5).is_browsing
