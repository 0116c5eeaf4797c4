#!/usr/bin/env python3

# framedeck/tui.py

"""
Terminal editor for framedeck.

A curses front end over EditorSession. The browsing screen lists the demos
fetched from the API; the viewing screen shows the selected frame's buffer
and lets the user move between frames, edit the buffer in $EDITOR, preview
it in the web browser as an isolated document, and save it.

Keys (browsing): Up/Down select, Enter open, r reload, q quit
Keys (viewing):  Left/Right frame, 1-9 jump, e edit, s save, p preview,
                 v stacked/side-by-side, d dark mode, b back, q quit
"""

import curses
import html
import logging
import os
import re
import shlex
import signal
import subprocess
import sys
import tempfile
import textwrap
import webbrowser
from pathlib import Path
from typing import List, Optional, Tuple

from .core.client import FramedeckClient
from .core.editor import EditorSession, EditorState, ViewMode, frame_options

logger = logging.getLogger("framedeck")

SIDE_BY_SIDE_MIN_WIDTH = 100
HEADER_ROWS = 4

_exit_requested = False  # Set by the SIGINT handler when Ctrl+C is pressed.

def handle_exit(sig, frame):
    """Set exit flag on Ctrl+C instead of raising KeyboardInterrupt."""
    global _exit_requested
    _exit_requested = True


def html_to_text(markup: str) -> str:
    """Rough text rendering of markup for the side-by-side preview pane."""
    text = re.sub(r"(?is)<(script|style)\b.*?</\1>", "", markup)
    text = re.sub(r"(?i)<br\s*/?>|</(p|div|h[1-6]|li|section|tr)>", "\n", text)
    text = re.sub(r"<[^>]+>", "", text)
    lines = [" ".join(line.split()) for line in html.unescape(text).splitlines()]
    return "\n".join(line for line in lines if line)


def wrap_block(text: str, width: int) -> List[str]:
    """Wrap every line of text to width, keeping blank lines."""
    width = max(width, 1)
    wrapped = []
    for line in text.splitlines() or [""]:
        wrapped.extend(textwrap.wrap(line, width, replace_whitespace=False, drop_whitespace=False) or [""])
    return wrapped


def edit_in_external_editor(content: str) -> str:
    """Open content in $VISUAL/$EDITOR and return what the user saved."""
    editor_cmd = os.environ.get("VISUAL") or os.environ.get("EDITOR") or "vi"
    fd, path = tempfile.mkstemp(suffix=".html", prefix="framedeck-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        subprocess.call(shlex.split(editor_cmd) + [path])
        return Path(path).read_text(encoding="utf-8")
    finally:
        os.unlink(path)


def open_preview(content: str) -> Path:
    """Write content to a standalone HTML file and open it in the browser."""
    fd, path = tempfile.mkstemp(suffix=".html", prefix="framedeck-preview-")
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(content)
    webbrowser.open(Path(path).as_uri())
    return Path(path)


def handle_key(session: EditorSession, key: int, cursor: int, width: int) -> Tuple[int, Optional[str]]:
    """
    Apply one key press to the session.

    Returns the new browsing cursor and an optional action the caller must
    perform outside curses ("quit", "edit" or "preview").
    """
    state = session.state

    if key in (ord("q"), ord("Q")):
        return cursor, "quit"

    if state.is_browsing:
        if key == curses.KEY_UP:
            return max(cursor - 1, 0), None
        if key == curses.KEY_DOWN:
            return min(cursor + 1, max(len(state.demos) - 1, 0)), None
        if key in (curses.KEY_ENTER, ord("\n"), ord("\r")):
            session.open_demo_at(cursor)
        elif key == ord("r"):
            session.load()
            return 0, None
        elif key == ord("d"):
            session.toggle_dark_mode()
        return cursor, None

    if key == curses.KEY_LEFT:
        session.previous_frame()
    elif key == curses.KEY_RIGHT:
        session.next_frame()
    elif ord("1") <= key <= ord("9"):
        session.select_frame(key - ord("1"))
    elif key in (ord("b"), curses.KEY_BACKSPACE, 27):
        session.back()
    elif key == ord("s"):
        session.save()
    elif key == ord("v"):
        if state.view_mode is ViewMode.SIDE_BY_SIDE or width >= SIDE_BY_SIDE_MIN_WIDTH:
            session.toggle_view_mode()
    elif key == ord("d"):
        session.toggle_dark_mode()
    elif key == ord("e"):
        return cursor, "edit"
    elif key == ord("p"):
        return cursor, "preview"
    return cursor, None


def _addstr(stdscr, y: int, x: int, text: str, attr: int = 0) -> None:
    height, width = stdscr.getmaxyx()
    if 0 <= y < height and 0 <= x < width:
        try:
            stdscr.addstr(y, x, text[: max(width - x - 1, 0)], attr)
        except curses.error:
            pass


def _apply_theme(stdscr, state: EditorState) -> None:
    if curses.has_colors():
        stdscr.bkgd(" ", curses.color_pair(1 if state.dark_mode else 2))


def draw_browsing(stdscr, state: EditorState, cursor: int) -> None:
    height, width = stdscr.getmaxyx()
    _addstr(stdscr, 0, 2, "DEMOS", curses.A_BOLD)
    _addstr(stdscr, 1, 2, "Up/Down select  Enter open  r reload  d dark  q quit", curses.A_DIM)

    if state.load_error:
        _addstr(stdscr, 3, 2, f"{state.load_error} (press r to retry)", curses.A_BOLD)
        return
    if not state.demos:
        _addstr(stdscr, 3, 2, "No demos available.")
        return

    for row, demo in enumerate(state.demos[: height - HEADER_ROWS]):
        marker = ">" if row == cursor else " "
        attr = curses.A_REVERSE if row == cursor else 0
        _addstr(stdscr, 3 + row, 2, f"{marker} {demo.name}  ({len(demo.frames)} frames)", attr)


def draw_viewing(stdscr, state: EditorState) -> None:
    height, width = stdscr.getmaxyx()
    demo = state.selected_demo
    _addstr(stdscr, 0, 2, demo.name, curses.A_BOLD)

    labels = frame_options(state)
    if labels:
        selector = "  ".join(
            f"[{label}]" if index == state.selected_frame_index else label for label, index in labels
        )
    else:
        selector = "(no frames)"
    dirty = " *modified*" if state.is_dirty else ""
    _addstr(stdscr, 1, 2, f"< {selector} >{dirty}")
    _addstr(stdscr, 2, 2, "Left/Right frame  e edit  s save  p preview  v view  d dark  b back  q quit", curses.A_DIM)

    body_top = HEADER_ROWS
    body_height = height - body_top - 1
    if state.view_mode is ViewMode.SIDE_BY_SIDE:
        pane_width = (width - 6) // 2
        source = wrap_block(state.editable_content, pane_width)
        preview = wrap_block(html_to_text(state.editable_content), pane_width)
        for row in range(min(body_height, max(len(source), len(preview)))):
            if row < len(source):
                _addstr(stdscr, body_top + row, 2, source[row])
            _addstr(stdscr, body_top + row, pane_width + 3, "|")
            if row < len(preview):
                _addstr(stdscr, body_top + row, pane_width + 5, preview[row])
    else:
        preview = wrap_block(html_to_text(state.editable_content), width - 4)
        source = wrap_block(state.editable_content, width - 4)
        preview_rows = min(len(preview), max(body_height // 3, 1))
        for row in range(preview_rows):
            _addstr(stdscr, body_top + row, 2, preview[row], curses.A_BOLD)
        divider = body_top + preview_rows
        _addstr(stdscr, divider, 2, "-" * (width - 4), curses.A_DIM)
        for row, line in enumerate(source[: body_height - preview_rows - 1]):
            _addstr(stdscr, divider + 1 + row, 2, line)

    if state.notice:
        attr = curses.A_BOLD | (curses.A_STANDOUT if state.notice.is_error else 0)
        _addstr(stdscr, height - 1, 2, state.notice.message, attr)


def editor_loop(stdscr, session: EditorSession) -> None:
    """Main entry point for the curses screen."""
    signal.signal(signal.SIGINT, handle_exit)
    curses.curs_set(0)
    if curses.has_colors():
        curses.start_color()
        curses.init_pair(1, curses.COLOR_WHITE, curses.COLOR_BLACK)
        curses.init_pair(2, curses.COLOR_BLACK, curses.COLOR_WHITE)
    stdscr.keypad(True)
    stdscr.timeout(200)

    cursor = 0
    while not _exit_requested:
        state = session.state
        stdscr.erase()
        _apply_theme(stdscr, state)
        if state.is_browsing:
            draw_browsing(stdscr, state, cursor)
        else:
            draw_viewing(stdscr, state)
        stdscr.refresh()

        key = stdscr.getch()
        if key == -1:
            continue

        _, width = stdscr.getmaxyx()
        cursor, action = handle_key(session, key, cursor, width)
        if action == "quit":
            break
        if action == "edit":
            curses.def_prog_mode()
            curses.endwin()
            try:
                session.edit(edit_in_external_editor(session.state.editable_content))
            except OSError as e:
                logger.error(f"Could not run the external editor: {e}")
            finally:
                curses.reset_prog_mode()
                stdscr.refresh()
        elif action == "preview":
            open_preview(session.state.editable_content)


def run_editor(api_url: str) -> None:
    """Fetch the demo list from api_url and run the terminal editor."""
    with FramedeckClient(api_url) as client:
        session = EditorSession(client=client)
        session.load()
        try:
            curses.wrapper(editor_loop, session)
        except KeyboardInterrupt:
            pass
    sys.stdout.flush()
