from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from flask import Response, request
import logging
import time

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger("main")

# Catalog Metrics
catalog_entities_total = Gauge("retrodex_catalog_entities_total", "Number of catalog rows", ["entity_type"])
catalog_links_total = Gauge("retrodex_catalog_links_total", "Number of external links")
catalog_compatibility_total = Gauge(
    "retrodex_catalog_compatibility_total", "Number of compatibility rows", ["relation"]
)
error_logs_total = Gauge("retrodex_error_logs_total", "Persisted error log rows")

# API Metrics
api_request_duration_seconds = Histogram(
    "retrodex_api_request_duration_seconds", "API request duration", ["endpoint", "method"]
)

api_requests_total = Counter("retrodex_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"])


def init_metrics(app):
    @app.route("/api/metrics")
    def metrics():
        update_catalog_metrics()
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, "start_time", time.time())
        api_request_duration_seconds.labels(endpoint=request.endpoint or "unknown", method=request.method).observe(
            duration
        )
        api_requests_total.labels(
            endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
        ).inc()
        return response

    app.logger.info("Prometheus metrics initialized at /api/metrics")


def update_catalog_metrics():
    """Refresh row-count gauges from the database."""
    from retrodex.app_services.catalog_service import ENTITIES
    from retrodex.db import db
    from retrodex.models.compatibility import COMPATIBILITY_RELATIONS
    from retrodex.repositories.compatibility_repository import CompatibilityRepository
    from retrodex.repositories.link_repository import LinkRepository
    from retrodex.repositories.log_repository import ErrorLogRepository

    try:
        for entity_type, spec in ENTITIES.items():
            catalog_entities_total.labels(entity_type=entity_type).set(spec.repository.count())
        for name, relation in COMPATIBILITY_RELATIONS.items():
            catalog_compatibility_total.labels(relation=name).set(CompatibilityRepository.count(relation))
        catalog_links_total.set(LinkRepository.count())
        error_logs_total.set(ErrorLogRepository.count())
    except SQLAlchemyError as e:
        # Serve the last known values rather than failing the scrape
        db.session.rollback()
        logger.warning(f"Could not refresh catalog metrics: {e}")
