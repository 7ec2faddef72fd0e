"""
Admin Routes - back-office CRUD, links, compatibility and logs
"""

from flask import Blueprint, request

from retrodex.api_responses import (
    handle_api_errors,
    paginated_response,
    request_data,
    success_response,
    validation_error_response,
)
from retrodex.app_services.catalog_service import CHILDREN, ENTITIES, CatalogService
from retrodex.app_services.compatibility_service import CompatibilityService, serialize_join
from retrodex.app_services.link_service import LinkService
from retrodex.app_services.performance_service import PerformanceService, serialize_performance
from retrodex.app_services.read_service import serialize_children
from retrodex.db import to_dict
from retrodex.exceptions import ValidationException
from retrodex.middleware.auth import admin_enabled, admin_required
from retrodex.models.compatibility import COMPATIBILITY_RELATIONS
from retrodex.repositories.log_repository import AppLogRepository, ErrorLogRepository
from retrodex.routes import ENTITY_SEGMENTS, SEGMENT_CONVERTER, list_args
from retrodex.settings import load_settings, set_settings_section

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

_LOG_REPOSITORIES = {"error": ErrorLogRepository, "app": AppLogRepository}


@admin_bp.route("")
@admin_required
def admin_index():
    """What the back-office can manage"""
    return success_response(
        {
            "auth_enabled": admin_enabled(),
            "entities": {segment: ENTITIES[entity_type].label for segment, entity_type in ENTITY_SEGMENTS.items()},
            "relations": {
                name: {"left": relation.left.entity_type, "right": relation.right.entity_type}
                for name, relation in COMPATIBILITY_RELATIONS.items()
            },
        }
    )


# ===== Catalog entities =====


@admin_bp.route(f"/<{SEGMENT_CONVERTER}:segment>", methods=["GET"])
@admin_required
@handle_api_errors
def admin_list(segment):
    result = CatalogService.list(ENTITY_SEGMENTS[segment], **list_args())
    return paginated_response([to_dict(item) for item in result.items], result.total, result.page, result.per_page)


@admin_bp.route(f"/<{SEGMENT_CONVERTER}:segment>", methods=["POST"])
@admin_required
@handle_api_errors
def admin_create(segment):
    item = CatalogService.create(ENTITY_SEGMENTS[segment], request_data())
    return success_response(to_dict(item), message="Created", status_code=201)


@admin_bp.route(f"/<{SEGMENT_CONVERTER}:segment>/<id>", methods=["GET"])
@admin_required
@handle_api_errors
def admin_get(segment, id):
    entity_type = ENTITY_SEGMENTS[segment]
    data = to_dict(CatalogService.get(entity_type, id))
    if entity_type in CHILDREN:
        data[CHILDREN[entity_type].key] = serialize_children(entity_type, id)
    return success_response(data)


@admin_bp.route(f"/<{SEGMENT_CONVERTER}:segment>/<id>", methods=["PUT", "PATCH"])
@admin_required
@handle_api_errors
def admin_update(segment, id):
    item = CatalogService.update(ENTITY_SEGMENTS[segment], id, request_data())
    return success_response(to_dict(item), message="Updated")


@admin_bp.route(f"/<{SEGMENT_CONVERTER}:segment>/<id>", methods=["DELETE"])
@admin_required
@handle_api_errors
def admin_delete(segment, id):
    CatalogService.delete(ENTITY_SEGMENTS[segment], id)
    return success_response(message="Deleted")


# ===== Links =====


@admin_bp.route("/links", methods=["GET"])
@admin_required
@handle_api_errors
def admin_links():
    entity_type = request.args.get("entity_type")
    entity_id = request.args.get("entity_id")
    if not entity_type or not entity_id:
        return validation_error_response("entity_id", "entity_type and entity_id are required")
    return success_response([to_dict(link) for link in LinkService.for_entity(entity_type, entity_id)])


@admin_bp.route("/links", methods=["POST"])
@admin_required
@handle_api_errors
def admin_create_link():
    link = LinkService.create(request_data())
    return success_response(to_dict(link), message="Link created", status_code=201)


@admin_bp.route("/links/<id>", methods=["PUT", "PATCH"])
@admin_required
@handle_api_errors
def admin_update_link(id):
    return success_response(to_dict(LinkService.update(id, request_data())), message="Link updated")


@admin_bp.route("/links/<id>", methods=["DELETE"])
@admin_required
@handle_api_errors
def admin_delete_link(id):
    LinkService.delete(id)
    return success_response(message="Link deleted")


# ===== Compatibility =====


@admin_bp.route("/compatibility/<relation>", methods=["GET"])
@admin_required
@handle_api_errors
def admin_compatibility_list(relation):
    entity_id = request.args.get("id")
    if not entity_id:
        raise ValidationException("id is required", field="id")
    return success_response(CompatibilityService.list_for(relation, request.args.get("side", "left"), entity_id))


@admin_bp.route("/compatibility/<relation>", methods=["POST"])
@admin_required
@handle_api_errors
def admin_compatibility_add(relation):
    """201 with the new row, or 200 with the existing row for a duplicate pair"""
    row, created = CompatibilityService.add(relation, request_data())
    relation_def = CompatibilityService.get_relation(relation)
    data = serialize_join(relation_def, row)
    if created:
        return success_response(data, message="Compatibility added", status_code=201)
    return success_response(data, message="Compatibility already exists")


@admin_bp.route("/compatibility/<relation>/<join_id>", methods=["PUT", "PATCH"])
@admin_required
@handle_api_errors
def admin_compatibility_update(relation, join_id):
    row = CompatibilityService.update(relation, join_id, request_data())
    return success_response(serialize_join(CompatibilityService.get_relation(relation), row), message="Updated")


@admin_bp.route("/compatibility/<relation>/<join_id>", methods=["DELETE"])
@admin_required
@handle_api_errors
def admin_compatibility_remove(relation, join_id):
    CompatibilityService.remove(relation, join_id)
    return success_response(message="Compatibility removed")


# ===== Emulation performance =====


@admin_bp.route("/emulation-performance", methods=["GET"])
@admin_required
@handle_api_errors
def admin_performance_list():
    handheld_id = request.args.get("handheld_id")
    console_id = request.args.get("console_id")
    if handheld_id:
        rows = PerformanceService.for_handheld(handheld_id)
    elif console_id:
        rows = PerformanceService.for_console(console_id)
    else:
        return validation_error_response("handheld_id", "handheld_id or console_id is required")
    return success_response([serialize_performance(row) for row in rows])


@admin_bp.route("/emulation-performance", methods=["POST"])
@admin_required
@handle_api_errors
def admin_performance_create():
    row = PerformanceService.create(request_data())
    return success_response(serialize_performance(row), message="Performance added", status_code=201)


@admin_bp.route("/emulation-performance/<id>", methods=["PUT", "PATCH"])
@admin_required
@handle_api_errors
def admin_performance_update(id):
    return success_response(serialize_performance(PerformanceService.update(id, request_data())), message="Updated")


@admin_bp.route("/emulation-performance/<id>", methods=["DELETE"])
@admin_required
@handle_api_errors
def admin_performance_delete(id):
    PerformanceService.delete(id)
    return success_response(message="Performance deleted")


# ===== Logs & settings =====


def _log_repository():
    kind = request.args.get("kind", "error")
    if kind not in _LOG_REPOSITORIES:
        raise ValidationException("kind must be 'error' or 'app'", field="kind")
    return _LOG_REPOSITORIES[kind]


@admin_bp.route("/logs", methods=["GET"])
@admin_required
@handle_api_errors
def admin_logs():
    limit = min(max(request.args.get("limit", 50, type=int) or 50, 1), 500)
    return success_response([to_dict(row) for row in _log_repository().get_recent(limit=limit)])


@admin_bp.route("/logs", methods=["DELETE"])
@admin_required
@handle_api_errors
def admin_clear_logs():
    removed = _log_repository().clear()
    return success_response({"removed": removed}, message="Logs cleared")


@admin_bp.route("/settings", methods=["GET"])
@admin_required
def admin_settings():
    settings = dict(load_settings())
    # Never echo the token back
    settings["admin"] = {"api_token_set": admin_enabled()}
    return success_response(settings)


@admin_bp.route("/settings/<section>", methods=["POST", "PUT"])
@admin_required
def admin_set_settings(section):
    if section == "admin":
        return validation_error_response("admin", "The admin token is managed from the command line")
    success, errors = set_settings_section(section, request_data())
    if not success:
        return validation_error_response(section, errors)
    return success_response(load_settings()[section], message="Settings saved")
