# framedeck/core/editor.py

"""
Frame navigation-and-edit state machine.

The editor state is an immutable value. Every user action is a plain
function that takes the current EditorState and returns the next one, so the
machine can be driven and tested without any rendering surface. Two actions
cross the network: `load_demos` (via a fetcher) and `save` (via a saver).
Both receive those collaborators as callables and turn their failures into
user-visible state instead of raising.

States:
    Browsing: selected_demo is None (initial)
    Viewing:  selected_demo is set; selected_frame_index points into its
              sorted frames and editable_content holds the edit buffer
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..exceptions import FramedeckError
from .schemas import DemoRecord, FrameRecord, sort_frames

logger = logging.getLogger("framedeck")

SAVE_SUCCESS_MESSAGE = "Changes saved successfully!"
SAVE_FAILURE_MESSAGE = "Error saving changes."
LOAD_FAILURE_MESSAGE = "Could not load demos."

DemoFetcher = Callable[[], Sequence[DemoRecord]]
FrameSaver = Callable[[str, str], object]


@runtime_checkable
class DemoService(Protocol):
    """What an EditorSession needs from its backend; FramedeckClient provides it."""

    def fetch_demos(self) -> Sequence[DemoRecord]: ...

    def update_frame(self, frame_id: str, html: str) -> object: ...


class ViewMode(str, Enum):
    STACKED = "stacked"
    SIDE_BY_SIDE = "side_by_side"


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    kind: NoticeKind
    message: str
    detail: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.kind is NoticeKind.ERROR


@dataclass(frozen=True)
class EditorState:
    """Everything the presentation shells read to render the editor."""
    demos: Tuple[DemoRecord, ...] = ()
    selected_demo: Optional[DemoRecord] = None
    selected_frame_index: int = 0
    editable_content: str = ""
    view_mode: ViewMode = ViewMode.STACKED
    dark_mode: bool = False
    notice: Optional[Notice] = None
    load_error: Optional[str] = None

    @property
    def is_browsing(self) -> bool:
        return self.selected_demo is None

    @property
    def is_viewing(self) -> bool:
        return self.selected_demo is not None

    @property
    def frames(self) -> Tuple[FrameRecord, ...]:
        if self.selected_demo is None:
            return ()
        return self.selected_demo.frames

    @property
    def current_frame(self) -> Optional[FrameRecord]:
        frames = self.frames
        if 0 <= self.selected_frame_index < len(frames):
            return frames[self.selected_frame_index]
        return None

    @property
    def is_dirty(self) -> bool:
        """True when the buffer diverges from the stored html of the current frame."""
        frame = self.current_frame
        return frame is not None and frame.html != self.editable_content

    @property
    def has_previous(self) -> bool:
        return self.is_viewing and self.selected_frame_index > 0

    @property
    def has_next(self) -> bool:
        return self.is_viewing and self.selected_frame_index < len(self.frames) - 1


# ----------------------------------------------------------------------
# Demo list
# ----------------------------------------------------------------------

def load_demos(state: EditorState, fetcher: DemoFetcher) -> EditorState:
    """
    Replace the cached demo list with a fresh fetch.

    A failed fetch leaves the list empty and records `load_error` so the
    shell can show it and offer a retry. The cause is only logged; the
    message shown to the user never carries storage or transport detail.
    """
    try:
        demos = tuple(fetcher())
    except FramedeckError as e:
        logger.warning(f"Failed to load demos: {e}")
        return replace(state, demos=(), load_error=LOAD_FAILURE_MESSAGE)
    logger.debug(f"Loaded {len(demos)} demos")
    return replace(state, demos=demos, load_error=None)


# ----------------------------------------------------------------------
# Navigation
# ----------------------------------------------------------------------

def select_demo(state: EditorState, demo: DemoRecord) -> EditorState:
    """Open a demo: sort its frames, select the first one and seed the buffer from it."""
    sorted_demo = demo.model_copy(update={"frames": sort_frames(demo.frames)})
    first = sorted_demo.frames[0] if sorted_demo.frames else None
    return replace(
        state,
        selected_demo=sorted_demo,
        selected_frame_index=0,
        editable_content=first.html if first is not None else "",
        notice=None,
    )


def go_back(state: EditorState) -> EditorState:
    """Return to the demo list, discarding any unsaved buffer."""
    return replace(
        state,
        selected_demo=None,
        selected_frame_index=0,
        editable_content="",
        notice=None,
    )


def select_frame(state: EditorState, index: int) -> EditorState:
    """
    Select a frame by index and re-seed the buffer from its stored html.

    Unsaved edits to the previous frame are dropped. Out-of-range indexes
    and selection while browsing leave the state unchanged.
    """
    if state.selected_demo is None:
        return state
    frames = state.selected_demo.frames
    if not 0 <= index < len(frames):
        return state
    return replace(
        state,
        selected_frame_index=index,
        editable_content=frames[index].html,
        notice=None,
    )


def next_frame(state: EditorState) -> EditorState:
    if not state.has_next:
        return state
    return select_frame(state, state.selected_frame_index + 1)


def previous_frame(state: EditorState) -> EditorState:
    if not state.has_previous:
        return state
    return select_frame(state, state.selected_frame_index - 1)


# ----------------------------------------------------------------------
# Editing
# ----------------------------------------------------------------------

def edit_content(state: EditorState, text: str) -> EditorState:
    return replace(state, editable_content=text)


def _with_frame_html(demo: DemoRecord, frame_id: str, html: str) -> DemoRecord:
    frames = tuple(
        frame.model_copy(update={"html": html}) if frame.id == frame_id else frame
        for frame in demo.frames
    )
    return demo.model_copy(update={"frames": frames})


def save(state: EditorState, saver: FrameSaver) -> EditorState:
    """
    Persist the buffer for the current frame.

    On success the in-memory copy of the frame (both in the selected demo and
    in the cached list) takes the saved html, so navigating back to it shows
    the save. On failure only the notice changes; the buffer is kept for a
    retry.
    """
    frame = state.current_frame
    if state.selected_demo is None or frame is None:
        return state

    content = state.editable_content
    try:
        saver(frame.id, content)
    except FramedeckError as e:
        logger.warning(f"Saving frame {frame.id} failed: {e}")
        return replace(state, notice=Notice(NoticeKind.ERROR, SAVE_FAILURE_MESSAGE, str(e)))

    selected = _with_frame_html(state.selected_demo, frame.id, content)
    demos = tuple(
        _with_frame_html(demo, frame.id, content) if demo.id == selected.id else demo
        for demo in state.demos
    )
    logger.info(f"Saved frame {frame.id} of demo '{selected.name}'")
    return replace(
        state,
        demos=demos,
        selected_demo=selected,
        notice=Notice(NoticeKind.SUCCESS, SAVE_SUCCESS_MESSAGE),
    )


# ----------------------------------------------------------------------
# Presentation flags
# ----------------------------------------------------------------------

def toggle_view_mode(state: EditorState) -> EditorState:
    mode = ViewMode.SIDE_BY_SIDE if state.view_mode is ViewMode.STACKED else ViewMode.STACKED
    return replace(state, view_mode=mode)


def toggle_dark_mode(state: EditorState) -> EditorState:
    return replace(state, dark_mode=not state.dark_mode)


def dismiss_notice(state: EditorState) -> EditorState:
    return replace(state, notice=None)


def frame_options(state: EditorState) -> List[Tuple[str, int]]:
    """Selector entries for the open demo: (label, index) per sorted frame."""
    return [(f"Frame {frame.order}", index) for index, frame in enumerate(state.frames)]


# ----------------------------------------------------------------------
# Session
# ----------------------------------------------------------------------

@dataclass
class EditorSession:
    """Holds the current EditorState for one user and binds it to an API client."""
    client: DemoService
    state: EditorState = field(default_factory=EditorState)

    def load(self) -> EditorState:
        self.state = load_demos(self.state, self.client.fetch_demos)
        return self.state

    def open_demo(self, demo: DemoRecord) -> EditorState:
        self.state = select_demo(self.state, demo)
        return self.state

    def open_demo_at(self, position: int) -> EditorState:
        if 0 <= position < len(self.state.demos):
            self.state = select_demo(self.state, self.state.demos[position])
        return self.state

    def back(self) -> EditorState:
        self.state = go_back(self.state)
        return self.state

    def select_frame(self, index: int) -> EditorState:
        self.state = select_frame(self.state, index)
        return self.state

    def next_frame(self) -> EditorState:
        self.state = next_frame(self.state)
        return self.state

    def previous_frame(self) -> EditorState:
        self.state = previous_frame(self.state)
        return self.state

    def edit(self, text: str) -> EditorState:
        self.state = edit_content(self.state, text)
        return self.state

    def save(self) -> EditorState:
        self.state = save(self.state, self.client.update_frame)
        return self.state

    def toggle_view_mode(self) -> EditorState:
        self.state = toggle_view_mode(self.state)
        return self.state

    def toggle_dark_mode(self) -> EditorState:
        self.state = toggle_dark_mode(self.state)
        return self.state
