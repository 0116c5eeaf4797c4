# framedeck/core/seed.py

"""
Data seeding for demos and frames.

Seed documents are JSON arrays of demos:

    [
        {"name": "Intro", "frames": [{"order": 1, "html": "<b>1</b>"}, ...]},
        ...
    ]

A frame's `order` is optional and defaults to its 1-based position.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import BadRequestError, ConfigurationError
from .models import Demo
from .storage import FrameStore

logger = logging.getLogger("framedeck")

SAMPLE_DEMOS: List[Dict[str, Any]] = [
    {
        "name": "Getting Started",
        "frames": [
            {"order": 1, "html": "<h1>Welcome</h1><p>This is the first frame of the demo.</p>"},
            {"order": 2, "html": "<h2>Navigation</h2><p>Use the arrows to move between frames.</p>"},
            {"order": 3, "html": "<h2>Editing</h2><p>Change the HTML and save it.</p>"},
        ],
    },
    {
        "name": "Product Tour",
        "frames": [
            {"order": 1, "html": "<section><h1>Dashboard</h1><p>Your numbers at a glance.</p></section>"},
            {"order": 2, "html": "<section><h1>Reports</h1><ul><li>Daily</li><li>Weekly</li></ul></section>"},
        ],
    },
]


def load_seed_file(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read and shape-check a seed document."""
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Seed file does not exist: {path}", field="file")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise BadRequestError(f"Seed file is not valid JSON: {e}")

    if not isinstance(data, list):
        raise BadRequestError("Seed document must be a JSON array of demos")

    for entry in data:
        if not isinstance(entry, dict) or "name" not in entry:
            raise BadRequestError("Every demo needs a 'name'", field="name")
        if not isinstance(entry.get("frames", []), list):
            raise BadRequestError("Demo 'frames' must be a list", field="frames")
    return data


def seed_demos(
    store: FrameStore,
    demos: Optional[List[Dict[str, Any]]] = None,
    reset: bool = False,
) -> List[Demo]:
    """
    Create demos and their ordered frames.

    Args:
        store: Target storage
        demos: Seed entries (default: SAMPLE_DEMOS)
        reset: Delete every existing demo (and its frames) first

    Returns:
        The created demos
    """
    if reset:
        removed = store.delete_all_demos()
        logger.info(f"Removed {removed} existing demos")

    created = []
    for entry in SAMPLE_DEMOS if demos is None else demos:
        created.append(store.create_demo(entry["name"], entry.get("frames", [])))

    logger.info(f"Seeded {len(created)} demos")
    return created
