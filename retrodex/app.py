"""
RetroDex - retro-gaming hardware and software catalog
Application factory and startup
"""
import os
import sys
import logging
import warnings

# Suppress Flask-Limiter warnings
warnings.filterwarnings("ignore", category=UserWarning, module="flask_limiter")

import click
import flask.cli
flask.cli.show_server_banner = lambda *args: None

# Core Flask imports
from flask import Blueprint, Flask

import structlog

# Local imports
from retrodex.constants import BUILD_VERSION, RETRODEX_DB
from retrodex.db import db, init_db, migrate
from retrodex.exceptions import register_exception_handlers
from retrodex.metrics import init_metrics
from retrodex.middleware.ratelimit import limiter
from retrodex.rest_api import init_rest_api
from retrodex.settings import load_settings, reload_conf, set_admin_token
from retrodex.utils import ColoredFormatter, FilterRemoveDateFromWerkzeugLogs, get_or_create_secret_key

# Routes
from retrodex.routes.admin import admin_bp
from retrodex.routes.catalog import catalog_bp
from retrodex.routes.system import system_bp

# Logging configuration
formatter = ColoredFormatter(
    '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
handler = logging.StreamHandler(sys.stdout)
handler.setFormatter(formatter)

logging.basicConfig(
    level=logging.INFO,
    handlers=[handler]
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if os.environ.get('LOG_FORMAT') == 'json' else structlog.dev.ConsoleRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger('main')

# Apply filter to hide date from http access logs
logging.getLogger('werkzeug').addFilter(FilterRemoveDateFromWerkzeugLogs())
logging.getLogger('alembic.runtime.migration').setLevel(logging.WARNING)


def register_commands(app):
    @app.cli.command('set-admin-token')
    @click.argument('token', required=False, default='')
    def set_admin_token_command(token):
        """Set the admin API token; an empty token opens the admin API."""
        set_admin_token(token)
        click.echo('Admin token updated.' if token else 'Admin token cleared, admin API is open.')


def create_app(test_config=None):
    """Application factory"""
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = RETRODEX_DB
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['RATELIMIT_STORAGE_URI'] = 'memory://'
    app.config['RESTX_MASK_SWAGGER'] = False
    if test_config:
        app.config.update(test_config)
    if not app.config.get('SECRET_KEY'):
        app.config['SECRET_KEY'] = get_or_create_secret_key()

    # Initialize components
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    # Register exception handlers
    register_exception_handlers(app)

    # Register blueprints
    app.register_blueprint(system_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(catalog_bp)

    # Initialize REST API
    api_bp = Blueprint('api', __name__, url_prefix='/api')
    init_rest_api(api_bp)
    app.register_blueprint(api_bp)

    # Initialize metrics
    init_metrics(app)

    register_commands(app)

    # Global initialization
    with app.app_context():
        # Load settings
        reload_conf()

        # Initialize database
        init_db(app)

    logger.info('app_created', version=BUILD_VERSION, site=load_settings()['site']['name'])
    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f'Build Version: {BUILD_VERSION}')
    logger.info('Starting server on port 8465...')
    app.run(debug=False, use_reloader=False, host="0.0.0.0", port=8465)
    logger.info('Shutting down server...')
