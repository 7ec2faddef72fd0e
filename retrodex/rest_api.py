from flask_restx import Api, Resource, fields
from flask import request
import logging

from retrodex.app_services.catalog_service import ENTITIES, CatalogService
from retrodex.app_services.forms import BOOL, ENTITY_FIELDS, FLOAT, INT, LABELED_LINKS, LIST
from retrodex.app_services.read_service import ReadService
from retrodex.constants import BUILD_VERSION, ENTITY_EMULATOR
from retrodex.db import to_dict
from retrodex.exceptions import RetroDexException
from retrodex.routes import ENTITY_SEGMENTS, list_args

logger = logging.getLogger('main')

_FIELD_TYPES = {
    INT: fields.Integer,
    FLOAT: fields.Float,
    BOOL: fields.Boolean,
}


def _model_name(entity_type):
    return ''.join(word.capitalize() for word in entity_type.split('_'))


def _entity_model(api, entity_type):
    model_fields = {
        'id': fields.String(required=True, description='Unique ID'),
        'slug': fields.String(required=True, description='URL slug'),
    }
    for name, kind in ENTITY_FIELDS[entity_type].items():
        if kind == LABELED_LINKS:
            model_fields[name] = fields.List(fields.Raw(description='{"label": ..., "url": ...}'))
        elif kind == LIST:
            model_fields[name] = fields.List(fields.String)
        else:
            model_fields[name] = _FIELD_TYPES.get(kind, fields.String)()
    if entity_type == ENTITY_EMULATOR:
        model_fields['console_id'] = fields.String(description='Primary console ID')
    model_fields[ENTITIES[entity_type].name_field] = fields.String(required=True, description='Display name')
    model_fields['created_at'] = fields.String(description='Creation timestamp')
    model_fields['updated_at'] = fields.String(description='Last update timestamp')
    return api.model(_model_name(entity_type), model_fields)


def _register_entity_namespace(api, segment, entity_type):
    spec = ENTITIES[entity_type]
    ns = api.namespace(f'v1/{segment}', description=f'{spec.label} catalog')

    model = _entity_model(api, entity_type)
    page_model = api.model(f'{_model_name(entity_type)}Page', {
        'items': fields.List(fields.Nested(model)),
        'total': fields.Integer(description='Total matching rows'),
        'page': fields.Integer(description='Current page'),
        'per_page': fields.Integer(description='Page size'),
    })

    @ns.route('/')
    class EntityList(Resource):
        @ns.doc(params={'q': 'Text search', 'page': 'Page number', 'per_page': 'Page size',
                        'sort': 'Sort column', 'order': 'asc or desc'})
        @ns.marshal_with(page_model)
        def get(self):
            """List rows, optionally filtered by ?q= and column values"""
            result = CatalogService.list(entity_type, public=True, **list_args())
            return {
                'items': [to_dict(item) for item in result.items],
                'total': result.total,
                'page': result.page,
                'per_page': result.per_page,
            }

    @ns.route('/<string:slug>')
    @ns.response(404, f'{spec.label} not found')
    @ns.param('slug', f'The {spec.label.lower()} slug')
    class EntityItem(Resource):
        @ns.marshal_with(model)
        def get(self, slug):
            """Fetch one row by slug"""
            return to_dict(CatalogService.get_by_slug(entity_type, slug, public=True))

    return ns


def init_rest_api(app):
    api = Api(app, version='1.0', title='RetroDex API',
        description='Retro-gaming hardware and software catalog API',
        doc='/docs'
    )

    @api.errorhandler(RetroDexException)
    def handle_retrodex_exception(e):
        return e.to_dict(), e.status_code

    for segment, entity_type in ENTITY_SEGMENTS.items():
        _register_entity_namespace(api, segment, entity_type)

    ns_search = api.namespace('v1/search', description='Catalog search')
    ns_system = api.namespace('v1/system', description='System operations')

    @ns_search.route('/')
    class Search(Resource):
        @ns_search.doc(params={'q': 'Search text'})
        def get(self):
            """Search consoles, emulators, games, handhelds, tools and custom firmware"""
            return ReadService.search(request.args.get('q', ''))

    @ns_system.route('/stats')
    class Stats(Resource):
        def get(self):
            """Row counts per entity type"""
            return ReadService.stats()

    @ns_system.route('/health')
    class Health(Resource):
        def get(self):
            """Database health check"""
            payload, healthy = ReadService.health()
            payload['api_version'] = '1.0'
            payload['version'] = BUILD_VERSION
            return payload, 200 if healthy else 503

    logger.info(f"REST API initialized with {len(ENTITY_SEGMENTS)} catalog namespaces")
    return api
