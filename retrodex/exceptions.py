"""
RetroDex - Custom Exceptions and Exception Handlers
"""
import structlog
from flask import jsonify, request
from werkzeug.exceptions import HTTPException

logger = structlog.get_logger('exceptions')


class RetroDexException(Exception):
    """Base exception for RetroDex"""
    status_code = 400

    def __init__(self, message: str, code: str = "RETRODEX_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {
            'success': False,
            'code': self.code,
            'message': self.message,
            'error': self.message,
        }


class DatabaseException(RetroDexException):
    """Database-related exceptions"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, code="DATABASE_ERROR")
        logger.error(f"Database error: {message}")


class ConflictException(RetroDexException):
    """Unique constraint or duplicate row"""
    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")
        logger.warning(f"Conflict: {message}")


class NotFoundException(RetroDexException):
    """Requested row does not exist"""
    status_code = 404

    def __init__(self, resource_type: str, resource_id=None):
        if resource_id is not None:
            message = f"{resource_type} with ID '{resource_id}' not found"
        else:
            message = f"{resource_type} not found"
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message, code="NOT_FOUND")


class ValidationException(RetroDexException):
    """Validation-related exceptions"""
    status_code = 400

    def __init__(self, message: str, field: str = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field
        logger.warning(f"Validation error: {message}")

    def to_dict(self):
        data = super().to_dict()
        if self.field:
            data['details'] = {'field': self.field}
        return data


class AuthenticationException(RetroDexException):
    """Authentication-related exceptions"""
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")
        logger.warning(f"Authentication error: {message}")


def register_exception_handlers(app):
    """Register exception handlers with Flask app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        """Handle HTTP exceptions"""
        return jsonify({
            'success': False,
            'code': e.name.upper().replace(' ', '_'),
            'message': e.description,
        }), e.code

    @app.errorhandler(RetroDexException)
    def handle_retrodex_exception(e):
        """Handle RetroDex exceptions; subclasses carry their own status code"""
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(Exception)
    def handle_generic_exception(e):
        """Handle all other exceptions"""
        from retrodex.db import db, log_error

        logger.error(f"Unhandled exception: {e}", exc_info=True)
        db.session.rollback()
        log_error(
            e,
            context={'endpoint': request.endpoint, 'method': request.method},
            user_agent=request.headers.get('User-Agent'),
            url=request.url,
        )
        return jsonify({
            'success': False,
            'code': 'INTERNAL_ERROR',
            'message': 'An unexpected error occurred',
        }), 500
