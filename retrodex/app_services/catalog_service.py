"""
Catalog Service - create, update and delete catalog entities
"""

from collections import namedtuple
from typing import Any, Dict, Optional

import structlog

from retrodex.app_services.forms import (
    ENTITY_FIELDS,
    coerce_filter,
    collect_fields,
    parse_rows,
    require,
    resolve_slug,
    unique_slug,
)
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
    ENTITY_TYPES,
    INSTALLATION_DIFFICULTY_DEFAULT,
    LINK_TYPE_DOWNLOAD,
    PRESET_ITEM_TYPES,
    SETUP_DIFFICULTIES,
    SETUP_DIFFICULTY_DEFAULT,
)
from retrodex.db import atomic, log_app_event
from retrodex.exceptions import ConflictException, NotFoundException, ValidationException
from retrodex.models.link import Link
from retrodex.repositories.category_repository import CategoryRepository
from retrodex.repositories.cfwapp_repository import CfwAppRepository
from retrodex.repositories.compatibility_repository import CompatibilityRepository
from retrodex.repositories.console_repository import ConsoleRepository
from retrodex.repositories.customfirmware_repository import CustomFirmwareRepository
from retrodex.repositories.emulationperformance_repository import EmulationPerformanceRepository
from retrodex.repositories.emulator_repository import EmulatorRepository
from retrodex.repositories.game_repository import GameRepository
from retrodex.repositories.handheld_repository import HandheldRepository
from retrodex.repositories.link_repository import LinkRepository
from retrodex.repositories.portmaster_repository import PortMasterPortRepository
from retrodex.repositories.preset_repository import PresetItemRepository, PresetRepository
from retrodex.repositories.setup_repository import SetupComponentRepository, SetupRepository
from retrodex.repositories.tool_repository import ToolRepository
from retrodex.utils import clean_text, parse_bool, parse_int

logger = structlog.get_logger()

# name_field is the column holding the display name; public_filters narrow
# what the public catalog may see
EntitySpec = namedtuple(
    "EntitySpec",
    ["entity_type", "label", "plural", "repository", "name_field", "public_filters"],
    defaults=("name", None),
)

ENTITIES = {
    spec.entity_type: spec
    for spec in (
        EntitySpec(ENTITY_CONSOLE, "Console", "consoles", ConsoleRepository),
        EntitySpec(ENTITY_GAME, "Game", "games", GameRepository),
        EntitySpec(ENTITY_EMULATOR, "Emulator", "emulators", EmulatorRepository),
        EntitySpec(ENTITY_HANDHELD, "Handheld", "handhelds", HandheldRepository),
        EntitySpec(ENTITY_TOOL, "Tool", "tools", ToolRepository),
        EntitySpec(ENTITY_CUSTOM_FIRMWARE, "Custom firmware", "custom_firmware", CustomFirmwareRepository),
        EntitySpec(ENTITY_CFW_APP, "CFW app", "cfw_apps", CfwAppRepository),
        EntitySpec(ENTITY_CATEGORY, "Category", "categories", CategoryRepository),
        EntitySpec(ENTITY_PORTMASTER_PORT, "PortMaster port", "portmaster_ports", PortMasterPortRepository),
        EntitySpec(ENTITY_SETUP, "Setup", "setups", SetupRepository, name_field="title"),
        EntitySpec(ENTITY_PRESET, "Preset", "presets", PresetRepository, public_filters={"is_public": True}),
    )
}

# Child rows written together with their parent. ``flags`` are boolean
# columns with their default.
ChildSpec = namedtuple("ChildSpec", ["key", "type_field", "id_field", "parent_field", "types", "repository", "flags"])

CHILDREN = {
    ENTITY_PRESET: ChildSpec(
        "items", "item_type", "item_id", "preset_id", PRESET_ITEM_TYPES, PresetItemRepository, {}
    ),
    ENTITY_SETUP: ChildSpec(
        "components", "component_type", "component_id", "setup_id", ENTITY_TYPES, SetupComponentRepository,
        {"is_required": True},
    ),
}


def _prepare_game(values, data, existing):
    if existing is None or "console_id" in values:
        console_id = require(values, "console_id", "Console is required")
        if not ConsoleRepository.get_by_id(console_id):
            raise ValidationException(f"Console with ID '{console_id}' does not exist", field="console_id")


def _prepare_emulator(values, data, existing):
    if existing is not None and "console_ids" not in values:
        return
    console_ids = require(values, "console_ids", "At least one console is required")
    known = {console.id for console in ConsoleRepository.get_by_ids(console_ids)}
    missing = [console_id for console_id in console_ids if console_id not in known]
    if missing:
        raise ValidationException(f"Unknown console IDs: {', '.join(missing)}", field="console_ids")
    values["console_id"] = console_ids[0]


def _prepare_custom_firmware(values, data, existing):
    if existing is None and not values.get("installation_difficulty"):
        values["installation_difficulty"] = INSTALLATION_DIFFICULTY_DEFAULT


def _prepare_category_ref(values, data, existing):
    category_id = values.get("category_id")
    if category_id and not CategoryRepository.get_by_id(category_id):
        raise ValidationException(f"Category with ID '{category_id}' does not exist", field="category_id")


def _prepare_setup(values, data, existing):
    if existing is None or "difficulty" in values:
        difficulty = (values.get("difficulty") or SETUP_DIFFICULTY_DEFAULT).lower()
        if difficulty not in SETUP_DIFFICULTIES:
            raise ValidationException(
                f"difficulty must be one of: {', '.join(SETUP_DIFFICULTIES)}", field="difficulty"
            )
        values["difficulty"] = difficulty
    for field in ("description", "guide_content"):
        if existing is None or field in values:
            require(values, field)


def _prepare_preset(values, data, existing):
    if existing is None and "is_public" not in data:
        values["is_public"] = True
    handheld_id = values.get("handheld_id")
    if handheld_id and not HandheldRepository.get_by_id(handheld_id):
        raise ValidationException(f"Handheld with ID '{handheld_id}' does not exist", field="handheld_id")


_PREPARERS = {
    ENTITY_GAME: _prepare_game,
    ENTITY_EMULATOR: _prepare_emulator,
    ENTITY_CUSTOM_FIRMWARE: _prepare_custom_firmware,
    ENTITY_TOOL: _prepare_category_ref,
    ENTITY_CFW_APP: _prepare_category_ref,
    ENTITY_SETUP: _prepare_setup,
    ENTITY_PRESET: _prepare_preset,
}


def _parse_children(entity_type, data, partial=False):
    """
    Validated child rows of a submission.

    Returns None when the entity has no children or a partial update leaves
    them alone. Every referenced entity must exist; repeated references are
    kept once and sort_order defaults to the submitted position.
    """
    child = CHILDREN.get(entity_type)
    if child is None or (partial and child.key not in data):
        return None

    rows = []
    seen = set()
    for row in parse_rows(data.get(child.key), child.key):
        target_type = clean_text(row.get(child.type_field))
        target_id = clean_text(row.get(child.id_field))
        if target_type not in child.types:
            raise ValidationException(f"{child.type_field} must be one of: {', '.join(child.types)}", field=child.key)
        target = ENTITIES[target_type]
        if not target.repository.get_by_id(target_id):
            raise ValidationException(f"{target.label} with ID '{target_id}' does not exist", field=child.key)
        if (target_type, target_id) in seen:
            continue
        seen.add((target_type, target_id))

        values = {
            child.type_field: target_type,
            child.id_field: target_id,
            "notes": clean_text(row.get("notes")),
            "sort_order": parse_int(row.get("sort_order"), default=len(rows)),
        }
        for flag, default in child.flags.items():
            values[flag] = parse_bool(row.get(flag, default))
        rows.append(values)

    if entity_type == ENTITY_PRESET and not rows:
        raise ValidationException("A preset needs at least one item", field=child.key)
    return rows


def _save_children(entity_type, parent_id, rows):
    """Replace the children of a parent (flush only)"""
    child = CHILDREN[entity_type]
    child.repository.delete_for_parent(parent_id)
    for values in rows:
        child.repository.create(commit=False, **{child.parent_field: parent_id}, **values)


def _detach_console(console_id):
    """Drop a console from every emulator's console list (flush only)"""
    for emulator in EmulatorRepository.get_for_console(console_id):
        remaining = [other for other in (emulator.console_ids or []) if other != console_id]
        emulator.console_ids = remaining or None
        emulator.console_id = remaining[0] if remaining else None


def _save_download_link(tool, download_url):
    """Store a tool's download URL as its primary Download link (flush only)"""
    existing = Link.query.filter_by(
        entity_type=ENTITY_TOOL, entity_id=tool.id, link_type=LINK_TYPE_DOWNLOAD, is_primary=True
    ).first()
    if existing:
        existing.url = download_url
        return existing
    return LinkRepository.create(
        commit=False,
        entity_type=ENTITY_TOOL,
        entity_id=tool.id,
        name="Download",
        url=download_url,
        link_type=LINK_TYPE_DOWNLOAD,
        is_primary=True,
        display_order=0,
    )


class CatalogService:
    """Write operations and simple reads for every catalog entity"""

    @staticmethod
    def get_spec(entity_type: str) -> EntitySpec:
        spec = ENTITIES.get(entity_type)
        if spec is None:
            raise NotFoundException("Entity type", entity_type)
        return spec

    @staticmethod
    def get(entity_type: str, id: str):
        spec = CatalogService.get_spec(entity_type)
        item = spec.repository.get_by_id(id)
        if not item:
            raise NotFoundException(spec.label, id)
        return item

    @staticmethod
    def _public_filters(spec, public):
        return dict(spec.public_filters) if public and spec.public_filters else {}

    @staticmethod
    def get_by_slug(entity_type: str, slug: str, public: bool = False):
        """Row by slug; with public=True rows hidden from the public catalog are not found"""
        spec = CatalogService.get_spec(entity_type)
        item = spec.repository.get_by_slug(slug)
        hidden = CatalogService._public_filters(spec, public)
        if not item or any(getattr(item, key) != value for key, value in hidden.items()):
            raise NotFoundException(spec.label, slug)
        return item

    @staticmethod
    def list(
        entity_type: str,
        page: int = 1,
        per_page: int = 24,
        query_text: Optional[str] = None,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: str = "name",
        order: str = "asc",
        public: bool = False,
    ):
        """Paginated listing with text search and column filters"""
        spec = CatalogService.get_spec(entity_type)
        repository = spec.repository
        fields = ENTITY_FIELDS[entity_type]

        coerced = {}
        for key, value in (filters or {}).items():
            if key in repository.filter_columns or key in repository.array_filters:
                kind = fields.get(key, "text")
                # Array columns are filtered by a single element
                coerced[key] = coerce_filter("text" if key in repository.array_filters else kind, value)
        coerced.update(CatalogService._public_filters(spec, public))

        return repository.get_paged(
            page, per_page, sort_by=sort_by, order=order, query_text=query_text, filters=coerced
        )

    @staticmethod
    def create(entity_type: str, data: Dict[str, Any]):
        """Validate a submission and insert the row (plus dependent rows) in one transaction"""
        spec = CatalogService.get_spec(entity_type)
        values = collect_fields(data, ENTITY_FIELDS[entity_type])
        name = require(values, spec.name_field)

        slug = resolve_slug(data, name, name_field=spec.name_field)
        if entity_type == ENTITY_CUSTOM_FIRMWARE:
            slug = unique_slug(spec.repository, slug)
        values["slug"] = slug

        preparer = _PREPARERS.get(entity_type)
        if preparer:
            preparer(values, data, None)
        children = _parse_children(entity_type, data)

        download_url = clean_text(data.get("download_url")) if entity_type == ENTITY_TOOL else None

        with atomic(f"Create {spec.label.lower()}"):
            item = spec.repository.create(commit=False, **values)
            if download_url:
                _save_download_link(item, download_url)
            if children is not None:
                _save_children(entity_type, item.id, children)

        logger.info("catalog_entity_created", entity_type=entity_type, id=item.id, slug=item.slug)
        log_app_event("INFO", f"Created {spec.label.lower()} {name}", entity_type=entity_type, id=item.id)
        return item

    @staticmethod
    def update(entity_type: str, id: str, data: Dict[str, Any]):
        """
        Partial update; the slug follows a new name unless one is supplied.

        Submitting the child list (preset items, setup components) replaces
        the stored one.
        """
        spec = CatalogService.get_spec(entity_type)
        existing = CatalogService.get(entity_type, id)

        values = collect_fields(data, ENTITY_FIELDS[entity_type], partial=True)
        if spec.name_field in values:
            require(values, spec.name_field)

        slug = resolve_slug(data, values.get(spec.name_field), partial=True, name_field=spec.name_field)
        if slug and entity_type == ENTITY_CUSTOM_FIRMWARE:
            slug = unique_slug(spec.repository, slug, exclude_id=id)
        if slug:
            values["slug"] = slug

        preparer = _PREPARERS.get(entity_type)
        if preparer:
            preparer(values, data, existing)
        children = _parse_children(entity_type, data, partial=True)

        download_url = clean_text(data.get("download_url")) if entity_type == ENTITY_TOOL else None

        with atomic(f"Update {spec.label.lower()}"):
            item = spec.repository.update(id, commit=False, **values)
            if download_url:
                _save_download_link(item, download_url)
            if children is not None:
                _save_children(entity_type, id, children)

        logger.info("catalog_entity_updated", entity_type=entity_type, id=id, fields=sorted(values))
        log_app_event("INFO", f"Updated {spec.label.lower()} {item.name}", entity_type=entity_type, id=id)
        return item

    @staticmethod
    def delete(entity_type: str, id: str) -> bool:
        """
        Delete an entity together with every row pointing at it: links,
        compatibility and emulation performance rows, preset items and setup
        components. A deleted console is also dropped from emulator console
        lists. Everything happens in one transaction.
        """
        spec = CatalogService.get_spec(entity_type)
        item = CatalogService.get(entity_type, id)
        name = item.name

        if entity_type == ENTITY_CONSOLE:
            games = GameRepository.count_by_console(id)
            emulators = EmulatorRepository.count_by_primary_console(id)
            if games or emulators:
                raise ConflictException(
                    f"Console '{name}' is still referenced by {games} game(s) and {emulators} emulator(s)"
                )

        with atomic(f"Delete {spec.label.lower()}"):
            if entity_type in ENTITY_TYPES:
                LinkRepository.delete_for_entity(entity_type, id)
                CompatibilityRepository.delete_for_entity(entity_type, id)
                for child in CHILDREN.values():
                    child.repository.delete_for_target(entity_type, id)
            if entity_type in CHILDREN:
                CHILDREN[entity_type].repository.delete_for_parent(id)
            if entity_type in (ENTITY_HANDHELD, ENTITY_CONSOLE):
                EmulationPerformanceRepository.delete_for_entity(id)
            if entity_type == ENTITY_HANDHELD:
                PresetRepository.clear_handheld(id)
            if entity_type == ENTITY_CONSOLE:
                _detach_console(id)
            spec.repository.delete(id, commit=False)

        logger.info("catalog_entity_deleted", entity_type=entity_type, id=id)
        log_app_event("INFO", f"Deleted {spec.label.lower()} {name}", entity_type=entity_type, id=id)
        return True
