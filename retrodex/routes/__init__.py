"""
Route blueprints and helpers shared between them
"""

from flask import request

from retrodex.constants import (
    ENTITY_CATEGORY,
    ENTITY_CFW_APP,
    ENTITY_CONSOLE,
    ENTITY_CUSTOM_FIRMWARE,
    ENTITY_EMULATOR,
    ENTITY_GAME,
    ENTITY_HANDHELD,
    ENTITY_PORTMASTER_PORT,
    ENTITY_PRESET,
    ENTITY_SETUP,
    ENTITY_TOOL,
)
from retrodex.settings import load_settings

# URL segment -> entity type
ENTITY_SEGMENTS = {
    "consoles": ENTITY_CONSOLE,
    "games": ENTITY_GAME,
    "emulators": ENTITY_EMULATOR,
    "handhelds": ENTITY_HANDHELD,
    "tools": ENTITY_TOOL,
    "custom-firmware": ENTITY_CUSTOM_FIRMWARE,
    "cfw-apps": ENTITY_CFW_APP,
    "categories": ENTITY_CATEGORY,
    "portmaster": ENTITY_PORTMASTER_PORT,
    "setups": ENTITY_SETUP,
    "presets": ENTITY_PRESET,
}

# Werkzeug converter matching only known entity segments
SEGMENT_CONVERTER = "any({})".format(", ".join(f'"{segment}"' for segment in ENTITY_SEGMENTS))

_LIST_ARGS = {"page", "per_page", "q", "sort", "order"}


def list_args():
    """Parse page/per_page/q/sort/order and treat the remaining args as filters"""
    site = load_settings()["site"]
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    per_page = request.args.get("per_page", site["per_page"], type=int) or site["per_page"]
    per_page = min(max(per_page, 1), site["max_per_page"])
    order = "desc" if request.args.get("order", "asc").lower() == "desc" else "asc"
    filters = {key: value for key, value in request.args.items() if key not in _LIST_ARGS}
    return {
        "page": page,
        "per_page": per_page,
        "query_text": request.args.get("q"),
        "sort_by": request.args.get("sort", "name"),
        "order": order,
        "filters": filters,
    }
