# framedeck/core/web.py

"""
Browser viewer for demos.

Server-rendered pages that drive the editor state machine from request
parameters: the index lists demos, the viewer opens one demo at a given
frame, renders the buffer inside a sandboxed iframe next to a textarea, and
saves through the same `save` transition the terminal editor uses.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..exceptions import NotFoundError, TemplateError
from . import editor
from .editor import EditorState, Notice, NoticeKind, ViewMode
from .schemas import demo_to_record
from .storage import FrameStore

logger = logging.getLogger("framedeck")

INDEX_TEMPLATE = "index.html"
VIEWER_TEMPLATE = "viewer.html"


def setup_templates(template_override: Optional[Path] = None) -> Jinja2Templates:
    """Set up the Jinja2 templates for the browser viewer."""
    template_dir = template_override or Path(__file__).parent.parent / "templates"

    if not template_dir.exists():
        raise TemplateError(str(template_dir), "Template directory not found")

    for template_file in ("base.html", INDEX_TEMPLATE, VIEWER_TEMPLATE):
        if not (template_dir / template_file).exists():
            raise TemplateError(template_file, "Template file not found")

    return Jinja2Templates(directory=str(template_dir))


def viewer_url(demo_id: str, state: EditorState, frame: Optional[int] = None, **extra) -> str:
    """Build the viewer URL that reproduces the given state's selection and flags."""
    params = {
        "frame": state.selected_frame_index if frame is None else frame,
        "mode": state.view_mode.value,
        "dark": int(state.dark_mode),
    }
    params.update(extra)
    return f"/view/{demo_id}?{urlencode(params)}"


def _open_state(store: FrameStore, demo_id: str, frame: int, mode: ViewMode, dark: bool) -> EditorState:
    demo = demo_to_record(store.get_demo(demo_id))
    state = EditorState(view_mode=mode, dark_mode=dark)
    state = editor.select_demo(state, demo)
    return editor.select_frame(state, frame)


def configure_web_routes(app: FastAPI, store: FrameStore, templates: Jinja2Templates) -> None:
    """Define the browser routes: demo index and frame viewer."""

    def render_viewer(request: Request, state: EditorState, status_code: int = 200):
        demo_id = state.selected_demo.id
        toggled_mode = editor.toggle_view_mode(state)
        toggled_dark = editor.toggle_dark_mode(state)
        return templates.TemplateResponse(
            request,
            VIEWER_TEMPLATE,
            {
                "state": state,
                "demo": state.selected_demo,
                "frame": state.current_frame,
                "options": editor.frame_options(state),
                "previous_url": viewer_url(demo_id, editor.previous_frame(state)) if state.has_previous else None,
                "next_url": viewer_url(demo_id, editor.next_frame(state)) if state.has_next else None,
                "view_mode_url": viewer_url(demo_id, toggled_mode),
                "dark_mode_url": viewer_url(demo_id, toggled_dark),
                "save_url": f"/view/{demo_id}",
                "side_by_side": state.view_mode is ViewMode.SIDE_BY_SIDE,
            },
            status_code=status_code,
        )

    def render_index(request: Request, dark: bool, error: Optional[str] = None, status_code: int = 200):
        state = editor.load_demos(
            EditorState(dark_mode=dark),
            lambda: [demo_to_record(demo) for demo in store.list_demos_with_frames()],
        )
        return templates.TemplateResponse(
            request,
            INDEX_TEMPLATE,
            {"state": state, "error": error or state.load_error, "dark": int(dark)},
            status_code=status_code,
        )

    @app.get("/", response_class=HTMLResponse)
    def demo_index(request: Request, dark: bool = False):
        return render_index(request, dark)

    @app.get("/view/{demo_id}", response_class=HTMLResponse)
    def demo_viewer(
        request: Request,
        demo_id: str,
        frame: int = 0,
        mode: ViewMode = ViewMode.STACKED,
        dark: bool = False,
        saved: Optional[int] = None,
    ):
        try:
            state = _open_state(store, demo_id, frame, mode, dark)
        except NotFoundError as e:
            return render_index(request, dark, error=str(e), status_code=404)
        if saved:
            state = replace(state, notice=Notice(NoticeKind.SUCCESS, editor.SAVE_SUCCESS_MESSAGE))
        return render_viewer(request, state)

    @app.post("/view/{demo_id}", response_class=HTMLResponse)
    def demo_save(
        request: Request,
        demo_id: str,
        frame: int = Form(0),
        html: str = Form(""),
        mode: ViewMode = Form(ViewMode.STACKED),
        dark: bool = Form(False),
    ):
        try:
            state = _open_state(store, demo_id, frame, mode, dark)
        except NotFoundError as e:
            return render_index(request, dark, error=str(e), status_code=404)

        state = editor.edit_content(state, html)
        state = editor.save(state, store.update_frame_html)
        if state.notice is not None and state.notice.is_error:
            # Keep the submitted buffer on screen for a retry
            return render_viewer(request, state, status_code=500)
        return RedirectResponse(viewer_url(demo_id, state, saved=1), status_code=303)
