"""
Form handling - turn submitted form or JSON payloads into column values
"""

import json

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
from retrodex.exceptions import ValidationException
from retrodex.utils import clean_text, parse_bool, parse_float, parse_int, parse_list_field, slugify

TEXT = "text"
INT = "int"
FLOAT = "float"
BOOL = "bool"
LIST = "list"
LABELED_LINKS = "labeled_links"


def _list_or_none(value):
    # Empty arrays are stored as NULL
    return parse_list_field(value) or None


def parse_rows(value, field):
    """
    Parse a list of objects submitted as a list or as JSON text.

    Form posts carry nested rows as a JSON string; anything that is not a
    list of objects is rejected.
    """
    if value is None or value == "":
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            raise ValidationException(f"{field} must be a JSON list of objects", field=field)
    if not isinstance(value, list) or not all(isinstance(row, dict) for row in value):
        raise ValidationException(f"{field} must be a list of objects", field=field)
    return value


def _labeled_links(value):
    links = []
    for row in parse_rows(value, "purchase_links"):
        url = clean_text(row.get("url"))
        if not url:
            raise ValidationException("Every purchase link needs a url", field="purchase_links")
        links.append({"label": clean_text(row.get("label")) or url, "url": url})
    return links or None


FIELD_PARSERS = {
    TEXT: clean_text,
    INT: parse_int,
    FLOAT: parse_float,
    BOOL: parse_bool,
    LIST: _list_or_none,
    LABELED_LINKS: _labeled_links,
}

# Editable columns per entity type. id, slug and timestamps are handled apart.
ENTITY_FIELDS = {
    ENTITY_CATEGORY: {
        "name": TEXT,
        "type": TEXT,
        "description": TEXT,
    },
    ENTITY_CONSOLE: {
        "name": TEXT,
        "manufacturer": TEXT,
        "release_date": TEXT,
        "release_year": INT,
        "description": TEXT,
        "image_url": TEXT,
    },
    ENTITY_GAME: {
        "name": TEXT,
        "console_id": TEXT,
        "developer": TEXT,
        "publisher": TEXT,
        "release_date": TEXT,
        "release_year": INT,
        "genre": TEXT,
        "description": TEXT,
        "image_url": TEXT,
    },
    ENTITY_EMULATOR: {
        "name": TEXT,
        "console_ids": LIST,
        "developer": TEXT,
        "description": TEXT,
        "image_url": TEXT,
        "version": TEXT,
        "license": TEXT,
        "download_url": TEXT,
        "supported_platforms": LIST,
        "features": LIST,
        "recommended": BOOL,
    },
    ENTITY_HANDHELD: {
        "name": TEXT,
        "manufacturer": TEXT,
        "release_date": TEXT,
        "price": FLOAT,
        "price_range": TEXT,
        "processor": TEXT,
        "ram": TEXT,
        "storage": TEXT,
        "screen_size": TEXT,
        "display": TEXT,
        "battery_life": TEXT,
        "weight": TEXT,
        "dimensions": TEXT,
        "connectivity": LIST,
        "operating_system": TEXT,
        "supported_formats": LIST,
        "official_website": TEXT,
        "description": TEXT,
        "image_url": TEXT,
    },
    ENTITY_TOOL: {
        "name": TEXT,
        "developer": TEXT,
        "description": TEXT,
        "version": TEXT,
        "license": TEXT,
        "category": LIST,
        "supported_platforms": LIST,
        "features": LIST,
        "requirements": TEXT,
        "price": TEXT,
        "official_website": TEXT,
        "image_url": TEXT,
        "category_id": TEXT,
    },
    ENTITY_CUSTOM_FIRMWARE: {
        "name": TEXT,
        "description": TEXT,
        "version": TEXT,
        "release_date": TEXT,
        "download_url": TEXT,
        "documentation_url": TEXT,
        "source_code_url": TEXT,
        "license": TEXT,
        "installation_difficulty": TEXT,
        "features": LIST,
        "requirements": LIST,
        "image_url": TEXT,
    },
    ENTITY_CFW_APP: {
        "name": TEXT,
        "description": TEXT,
        "developer": TEXT,
        "developers": LIST,
        "features": LIST,
        "requirements": LIST,
        "version": TEXT,
        "license": TEXT,
        "website": TEXT,
        "download_url": TEXT,
        "source_code_url": TEXT,
        "category_id": TEXT,
    },
    ENTITY_PORTMASTER_PORT: {
        "name": TEXT,
        "description": TEXT,
        "image_url": TEXT,
        "genre": LIST,
        "ready_to_run": BOOL,
        "necessary_files": LIST,
        "portmaster_link": TEXT,
        "purchase_links": LABELED_LINKS,
        "instructions": TEXT,
    },
    ENTITY_SETUP: {
        "title": TEXT,
        "description": TEXT,
        "difficulty": TEXT,
        "estimated_time": TEXT,
        "featured": BOOL,
        "guide_content": TEXT,
        "steps": LIST,
        "requirements": LIST,
        "tags": LIST,
        "image_url": TEXT,
    },
    ENTITY_PRESET: {
        "name": TEXT,
        "description": TEXT,
        "handheld_id": TEXT,
        "created_by": TEXT,
        "is_public": BOOL,
    },
}


def collect_fields(data, fields, partial=False):
    """
    Coerce the known fields of a submission.

    With partial=True only keys present in data are returned, so an update
    leaves every other column untouched.
    """
    values = {}
    for name, kind in fields.items():
        if partial and name not in data:
            continue
        values[name] = FIELD_PARSERS[kind](data.get(name))
    return values


def coerce_filter(kind, value):
    """Query-string filter value for a column of the given kind"""
    if kind == BOOL:
        return parse_bool(value)
    if kind == INT:
        return parse_int(value)
    if kind == FLOAT:
        return parse_float(value)
    return clean_text(value)


def require(values, field, message=None):
    if not values.get(field):
        raise ValidationException(message or f"{field.replace('_', ' ').capitalize()} is required", field=field)
    return values[field]


def resolve_slug(data, name, partial=False, name_field="name"):
    """
    Slug for a submission.

    A supplied slug is used verbatim after trimming. Otherwise it is derived
    from the name; on a partial update without a new name, None is returned
    and the stored slug is kept.
    """
    supplied = clean_text(data.get("slug"))
    if supplied:
        return supplied
    if partial and name_field not in data:
        return None
    slug = slugify(name)
    if not slug:
        raise ValidationException("Could not derive a slug from the name", field="slug")
    return slug


def unique_slug(repository, base, exclude_id=None):
    """First free slug among base, base-1, base-2, ..."""
    slug = base
    counter = 1
    while repository.slug_exists(slug, exclude_id=exclude_id):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
