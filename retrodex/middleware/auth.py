"""
Authentication Middleware - admin gate for back-office endpoints
"""
import hmac
import logging
from functools import wraps

from flask import request

from retrodex.exceptions import AuthenticationException
from retrodex.settings import load_settings

logger = logging.getLogger('main')


def _bearer_token():
    header = request.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer':
        return None
    return token.strip() or None


def admin_enabled():
    """Admin auth is only enforced once an API token has been configured"""
    return bool(load_settings()['admin'].get('api_token'))


def admin_required(f):
    """Decorator requiring `Authorization: Bearer <admin.api_token>`"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = load_settings()['admin'].get('api_token')
        if not expected:
            return f(*args, **kwargs)

        token = _bearer_token()
        if not token:
            raise AuthenticationException()

        if not hmac.compare_digest(token.encode(), str(expected).encode()):
            logger.warning(f"Invalid admin token from {request.remote_addr} for {request.path}")
            raise AuthenticationException("Invalid API token")

        return f(*args, **kwargs)
    return decorated_function
