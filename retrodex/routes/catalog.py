"""
Catalog Routes - public read endpoints
"""

from flask import Blueprint, request

from retrodex.api_responses import handle_api_errors, paginated_response, success_response
from retrodex.app_services.catalog_service import CatalogService
from retrodex.app_services.compatibility_service import CompatibilityService
from retrodex.app_services.link_service import LinkService
from retrodex.app_services.read_service import ReadService
from retrodex.db import to_dict
from retrodex.exceptions import ValidationException
from retrodex.middleware.ratelimit import limiter, search_limit
from retrodex.routes import ENTITY_SEGMENTS, SEGMENT_CONVERTER, list_args

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")


@catalog_bp.route(f"/<{SEGMENT_CONVERTER}:segment>")
@handle_api_errors
def list_entities(segment):
    """Paginated list with ?q= search, column filters and sorting"""
    args = list_args()
    result = CatalogService.list(ENTITY_SEGMENTS[segment], public=True, **args)
    return paginated_response([to_dict(item) for item in result.items], result.total, result.page, result.per_page)


@catalog_bp.route(f"/<{SEGMENT_CONVERTER}:segment>/<slug>")
@handle_api_errors
def entity_detail(segment, slug):
    """Entity by slug with its links and compatibility lists"""
    return success_response(ReadService.detail(ENTITY_SEGMENTS[segment], slug))


@catalog_bp.route("/search")
@limiter.limit(search_limit)
@handle_api_errors
def search():
    return success_response(ReadService.search(request.args.get("q", "")))


@catalog_bp.route("/links/<entity_type>/<entity_id>")
@handle_api_errors
def entity_links(entity_type, entity_id):
    return success_response([to_dict(link) for link in LinkService.for_entity(entity_type, entity_id)])


@catalog_bp.route("/compatibility/<relation>")
@handle_api_errors
def compatibility_list(relation):
    """Rows of one relation for ?side=left|right&id=<entity id>"""
    side = request.args.get("side", "left")
    entity_id = request.args.get("id")
    if not entity_id:
        raise ValidationException("id is required", field="id")
    return success_response(CompatibilityService.list_for(relation, side, entity_id))
